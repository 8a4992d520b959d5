"""
xpathmap exception classes.

This package provides all exception types used throughout xpathmap for
consistent error handling and reporting.
"""

from xpathmap.exceptions.core import (
    CollectionDispatchError,
    FilterConfigurationError,
    QueryEvaluationError,
    ResultShapeError,
    SchemaDefinitionError,
    XPathMapError,
)

__all__ = [
    "XPathMapError",
    "FilterConfigurationError",
    "CollectionDispatchError",
    "QueryEvaluationError",
    "ResultShapeError",
    "SchemaDefinitionError",
]
