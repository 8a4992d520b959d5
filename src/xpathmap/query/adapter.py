"""
Path query adapters for xpathmap.

The evaluation engine never touches the document directly: every query goes
through a :class:`PathQueryAdapter`, which returns ordered match lists, the
local name of a context element, and the textual content of a match. The
default implementation evaluates XPath 1.0 with lxml.
"""

import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from lxml import etree

from xpathmap.config import MapperSettings
from xpathmap.exceptions import QueryEvaluationError

logger = logging.getLogger(__name__)


@runtime_checkable
class PathQueryAdapter(Protocol):
    """Interface the evaluation engine needs from a document/query engine."""

    settings: MapperSettings

    def evaluate(self, context: Any, query: str) -> list[Any]:
        """Return the ordered matches of ``query`` against ``context``."""
        ...

    def local_name(self, context: Any) -> str:
        """Return the local name of the ``context`` element."""
        ...

    def text(self, node: Any) -> str:
        """Return the textual content of a single match."""
        ...


class LxmlQueryAdapter:
    """XPath adapter over lxml elements.

    Matches are whatever lxml returns: elements, attribute/text "smart"
    strings, or a single number/boolean/string for scalar expressions, which
    is wrapped into a one-item list so callers always get a sequence.
    """

    def __init__(
        self,
        namespaces: dict[str, str] | None = None,
        settings: MapperSettings | None = None,
    ):
        self.settings = settings or MapperSettings()
        self.namespaces = {**self.settings.namespaces, **(namespaces or {})}

    def evaluate(self, context: Any, query: str) -> list[Any]:
        """
        Evaluate an XPath expression against one element.

        Params:
            context: lxml element or element tree to query from
            query: XPath 1.0 expression

        Returns:
            Ordered list of matches (possibly empty)

        Raises:
            QueryEvaluationError: If lxml rejects the expression or context
        """
        try:
            result = context.xpath(query, namespaces=self.namespaces or None)
        except (etree.XPathError, TypeError, AttributeError) as e:
            raise QueryEvaluationError(query, str(e)) from e

        if not isinstance(result, list):
            result = [result]
        logger.debug("query %r matched %d node(s)", query, len(result))
        return result

    def local_name(self, context: Any) -> str:
        """Local name of an element, without namespace; empty for comments/PIs."""
        if isinstance(context, etree._ElementTree):
            context = context.getroot()
        if not isinstance(getattr(context, "tag", None), str):
            return ""
        return etree.QName(context).localname

    def text(self, node: Any) -> str:
        """
        Textual content of a match.

        Elements contribute their own character data only (text before the
        first child plus the tails between children), not their descendants'.
        """
        if isinstance(node, bool):
            value = "true" if node else "false"
        elif isinstance(node, float):
            value = str(int(node)) if node.is_integer() else str(node)
        elif isinstance(node, str):
            value = str(node)
        elif isinstance(node, etree._Element):
            value = (node.text or "") + "".join(child.tail or "" for child in node)
        else:
            value = str(node)

        if self.settings.strip_whitespace:
            value = value.strip()
        return value


def load_document(source: str | bytes | Path) -> etree._Element:
    """
    Parse a document into its root element.

    Params:
        source: Markup as bytes or a string starting with ``<``, or a filesystem path

    Returns:
        Root element of the parsed document

    Raises:
        QueryEvaluationError: If the markup cannot be parsed
    """
    try:
        if isinstance(source, bytes):
            return etree.fromstring(source)
        if isinstance(source, str) and source.lstrip().startswith("<"):
            return etree.fromstring(source.encode("utf-8"))
        return etree.parse(str(source)).getroot()
    except (etree.XMLSyntaxError, OSError) as e:
        raise QueryEvaluationError("<document>", str(e)) from e
