"""
Reusable name and value filters.

Filters are plain single-argument callables. The registry gives them names
so that declarative mapping schemas can refer to them.
"""

import re
from typing import Any

from xpathmap.core.types import FilterFunc

INDEX_SUFFIX_PATTERN = re.compile(r"_\d+_?$")


def strip_index_suffix(name: str) -> str:
    """Drop a trailing ``_<digits>`` or ``_<digits>_`` (``COLOUR_1_`` -> ``COLOUR``)."""
    return INDEX_SUFFIX_PATTERN.sub("", name)


def regex_replace(pattern: str, replacement: str = "") -> FilterFunc:
    """Build a filter substituting every match of ``pattern`` in a string."""
    compiled = re.compile(pattern)

    def _replace(value: str) -> str:
        return compiled.sub(replacement, value)

    return _replace


def default(fallback: Any) -> FilterFunc:
    """Build a filter replacing a falsy value with ``fallback``."""

    def _default(value: Any) -> Any:
        return value if value else fallback

    return _default


class FilterRegistry:
    """Named filters available to declarative mapping schemas."""

    def __init__(self, filters: dict[str, FilterFunc] | None = None):
        self._filters = dict(filters or {})

    def register(self, name: str, func: FilterFunc) -> None:
        """
        Register a filter under a name, replacing any previous one.

        Raises:
            TypeError: If ``func`` is not callable
        """
        if not callable(func):
            raise TypeError(f"Filter '{name}' must be callable")
        self._filters[name] = func

    def get(self, name: str) -> FilterFunc:
        """
        Look up a filter by name.

        Raises:
            KeyError: If the name is not registered
        """
        if name not in self._filters:
            raise KeyError(
                f"Filter {name} is not registered. Available filters: {self.names()}"
            )
        return self._filters[name]

    def names(self) -> list[str]:
        return sorted(self._filters)

    def __contains__(self, name: str) -> bool:
        return name in self._filters


def default_registry() -> FilterRegistry:
    """A fresh registry holding the built-in filters."""
    return FilterRegistry(
        {
            "strip_index_suffix": strip_index_suffix,
            "upper": str.upper,
            "lower": str.lower,
            "strip": str.strip,
        }
    )
