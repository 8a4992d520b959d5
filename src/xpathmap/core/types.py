"""
Core type definitions for xpathmap.

This module contains the value kind enumeration and the type aliases shared
by the builder, the evaluation engine and the reducer.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any, TypeAlias


class ValueKind(Enum):
    """Closed set of value kinds a node definition can produce."""

    OBJECT = "object"
    ARRAY = "array"
    ATOMIC = "atomic"
    COLLECTION = "collection"
    DYNAMIC_OBJECT = "dynamic"

    @property
    def is_collection(self) -> bool:
        """Whether nodes of this kind expand their children per matched element."""
        return self in (ValueKind.COLLECTION, ValueKind.DYNAMIC_OBJECT)

    @classmethod
    def coerce(cls, kind: "ValueKind | str") -> "ValueKind":
        """
        Accept either a member or its string value.

        Params:
            kind: A ValueKind member or one of its string values

        Returns:
            The matching ValueKind member

        Raises:
            ValueError: If the string does not name a value kind
        """
        if isinstance(kind, cls):
            return kind
        return cls(kind)


ResultValue: TypeAlias = str | list[Any] | dict[str, Any]

MappingResult: TypeAlias = dict[str, Any]

FilterFunc: TypeAlias = Callable[[Any], Any]
