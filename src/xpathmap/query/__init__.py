"""
Document query adapters.

This package wraps the document/query engine behind the small interface the
evaluation engine consumes.
"""

from xpathmap.query.adapter import LxmlQueryAdapter, PathQueryAdapter, load_document

__all__ = [
    "PathQueryAdapter",
    "LxmlQueryAdapter",
    "load_document",
]
