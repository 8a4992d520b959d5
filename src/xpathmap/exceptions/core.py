"""
Exception classes for xpathmap definition trees.

This module defines specific exception types for the error conditions that
can occur while evaluating a node definition tree against a document and
while reducing it into a result structure.
"""


class XPathMapError(Exception):
    """Base exception for all xpathmap errors."""

    pass


class FilterConfigurationError(XPathMapError):
    """Raised when a name or value filter option is present but not callable."""

    def __init__(self, option: str, node_name: str | None):
        """
        Initialize the exception.

        Params:
            option: The option key holding the invalid filter
            node_name: Name template of the node the option belongs to
        """
        self.option = option
        self.node_name = node_name
        super().__init__(f"Option '{option}' must be callable (field '{node_name}')")


class CollectionDispatchError(XPathMapError):
    """Raised when a non-collection node is routed into collection expansion."""

    def __init__(self, kind: str):
        """
        Initialize the exception.

        Params:
            kind: Value kind of the node that was dispatched incorrectly
        """
        self.kind = kind
        super().__init__(f"Node of type {kind} can't be processed as collection type")


class QueryEvaluationError(XPathMapError):
    """Raised when the query adapter rejects a query."""

    def __init__(self, query: str, reason: str):
        """
        Initialize the exception.

        Params:
            query: The query that failed
            reason: Underlying reason reported by the adapter
        """
        self.query = query
        self.reason = reason
        super().__init__(f"Cannot evaluate query '{query}': {reason}")


class ResultShapeError(XPathMapError):
    """Raised when reduced results cannot be merged into one value."""

    def __init__(self, node_name: str | None, reason: str):
        """
        Initialize the exception.

        Params:
            node_name: Resolved name (or template) of the offending node
            reason: Why the result cannot be assembled
        """
        self.node_name = node_name
        self.reason = reason
        super().__init__(f"Cannot reduce field '{node_name}': {reason}")


class SchemaDefinitionError(XPathMapError):
    """Raised when a declarative mapping schema cannot be turned into a tree."""

    def __init__(self, path: str, reason: str):
        """
        Initialize the exception.

        Params:
            path: Dotted location of the problem inside the schema
            reason: Why the declaration is invalid
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid mapping schema at '{path}': {reason}")
