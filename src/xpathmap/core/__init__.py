"""
Core xpathmap components.

This package provides the value kind enumeration, shared type aliases and the
merge helpers used while reducing evaluated trees.
"""

from xpathmap.core.merge import array_merge, merge_recursive
from xpathmap.core.types import FilterFunc, MappingResult, ResultValue, ValueKind

__all__ = [
    "ValueKind",
    "FilterFunc",
    "MappingResult",
    "ResultValue",
    "array_merge",
    "merge_recursive",
]
