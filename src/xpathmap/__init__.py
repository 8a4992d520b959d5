"""
xpathmap - declarative mapping of XML documents into nested structures

xpathmap evaluates a tree of field definitions, each carrying a name, a value
kind and an XPath query, against a document and reduces it to plain dicts,
lists and strings.
"""

from importlib.metadata import version

from xpathmap.config import MapperSettings
from xpathmap.core.types import ValueKind
from xpathmap.query import LxmlQueryAdapter, load_document
from xpathmap.structure import FieldOptions, NodeDefinition, build_definition

__version__ = version("xpathmap")

__all__ = [
    "__version__",
    "NodeDefinition",
    "FieldOptions",
    "ValueKind",
    "MapperSettings",
    "LxmlQueryAdapter",
    "load_document",
    "build_definition",
]
