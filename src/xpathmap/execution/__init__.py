"""
Evaluation and reduction of definition trees.

This package binds node definitions to document context (``engine``,
``naming``) and reduces the evaluated tree into nested structures
(``reduction``).
"""

from xpathmap.execution.engine import apply_definition, expand_collection, query_value
from xpathmap.execution.naming import query_context, resolve_name
from xpathmap.execution.reduction import reduce_definition, value_as_type

__all__ = [
    "apply_definition",
    "expand_collection",
    "query_value",
    "query_context",
    "resolve_name",
    "reduce_definition",
    "value_as_type",
]
