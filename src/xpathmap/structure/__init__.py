"""
xpathmap structure components.

This package provides node definitions with their fluent builder API, the
declarative schema loader, and the reusable filter library.
"""

from xpathmap.structure.builder import FieldOptions, NodeDefinition
from xpathmap.structure.filters import (
    FilterRegistry,
    default,
    default_registry,
    regex_replace,
    strip_index_suffix,
)
from xpathmap.structure.schema import (
    FieldSpec,
    MappingSpec,
    build_definition,
    load_definition,
    load_mapping,
    parse_mapping,
)

__all__ = [
    "NodeDefinition",
    "FieldOptions",
    "FilterRegistry",
    "default",
    "default_registry",
    "regex_replace",
    "strip_index_suffix",
    "FieldSpec",
    "MappingSpec",
    "build_definition",
    "load_definition",
    "load_mapping",
    "parse_mapping",
]
