"""
Field name resolution.

A name template may contain one placeholder region delimited by braces. The
inner expression is a query evaluated against the node's context:

* ``{count(<query>)}`` substitutes the number of matches;
* ``{<query>}`` substitutes the textual content of the first match.

When nothing can be substituted the template is kept as-is.
"""

import logging
import re
from typing import TYPE_CHECKING, Any

from xpathmap.exceptions import FilterConfigurationError

if TYPE_CHECKING:
    from xpathmap.query.adapter import PathQueryAdapter
    from xpathmap.structure.builder import NodeDefinition

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{(?P<query>.+)\}")
COUNT_PATTERN = re.compile(r"^count\((?P<query>.+)\)")


def query_context(adapter: "PathQueryAdapter", context: Any, query: str) -> list[Any]:
    """
    Evaluate a query against a context that may be a sequence of nodes.

    Each element of a sequence context is queried in turn and the matches are
    concatenated. A missing context matches nothing.
    """
    if context is None:
        return []
    if isinstance(context, list):
        matches: list[Any] = []
        for element in context:
            matches.extend(adapter.evaluate(element, query))
        return matches
    return adapter.evaluate(context, query)


def substitution_value(
    adapter: "PathQueryAdapter", context: Any, expression: str
) -> str | None:
    """
    Compute the value for a placeholder expression.

    Returns:
        The match count for ``count(...)``, the first match's text otherwise,
        or None when the expression matched nothing
    """
    count_match = COUNT_PATTERN.match(expression)
    if count_match:
        return str(len(query_context(adapter, context, count_match.group("query"))))

    matches = query_context(adapter, context, expression)
    if matches:
        return adapter.text(matches[0])
    return None


def resolve_name(node: "NodeDefinition", adapter: "PathQueryAdapter") -> str | None:
    """
    Resolve a node's name template against its bound context.

    Params:
        node: Node whose ``name`` template and ``context`` are used
        adapter: Query adapter evaluating placeholder expressions

    Returns:
        The resolved (and filtered) name

    Raises:
        FilterConfigurationError: If the node's name filter is not callable
    """
    name = node.name

    if name is not None:
        placeholder = PLACEHOLDER_PATTERN.search(name)
        if placeholder:
            value = substitution_value(adapter, node.context, placeholder.group("query"))
            if value is not None:
                name = PLACEHOLDER_PATTERN.sub(lambda _: value, name, count=1)
            else:
                logger.debug("name template %r left unresolved", name)

    name_filter = node.options.name_filter
    if name_filter is not None:
        if not callable(name_filter):
            raise FilterConfigurationError("name_filter", node.name)
        name = name_filter(name)

    return name
