"""
Evaluation engine binding node definitions to document context.

Evaluation is recursive and depth-first. Each node resolves its name,
queries its value, and hands the value (or, without a query, its own context)
down to its children. Collection nodes are the only place where multiplicity
is introduced: their children are cloned once per matched element and every
clone is evaluated against its own element.
"""

import logging
from typing import TYPE_CHECKING, Any

from xpathmap.exceptions import CollectionDispatchError
from xpathmap.execution.naming import query_context, resolve_name
from xpathmap.query.adapter import LxmlQueryAdapter

if TYPE_CHECKING:
    from xpathmap.query.adapter import PathQueryAdapter
    from xpathmap.structure.builder import NodeDefinition

logger = logging.getLogger(__name__)


def _has_context(context: Any) -> bool:
    # lxml elements without children are falsy, so test explicitly
    if context is None:
        return False
    if isinstance(context, list):
        return len(context) > 0
    return True


def query_value(node: "NodeDefinition", adapter: "PathQueryAdapter") -> Any:
    """
    Run the node's query against its bound context.

    Returns:
        None when there is no query or no context, the context's local name
        for the reserved self-name query, otherwise the list of matches
    """
    if node.query is None or not _has_context(node.context):
        return None

    if node.query == adapter.settings.self_name_query:
        context = node.context[0] if isinstance(node.context, list) else node.context
        return adapter.local_name(context)

    return query_context(adapter, node.context, node.query)


def expand_collection(
    node: "NodeDefinition", elements: list[Any], adapter: "PathQueryAdapter"
) -> None:
    """
    Instantiate the node's children once per element.

    Every child is deep-cloned for every element, bound to that element and
    evaluated. The node's value becomes the ordered list of per-element child
    groups and its static children are consumed.

    Raises:
        CollectionDispatchError: If the node is not a collection kind
    """
    if not node.is_collection:
        raise CollectionDispatchError(node.kind.value)

    groups: list[list[NodeDefinition]] = []
    for element in elements:
        group = []
        for child in node.children:
            instance = child.clone()
            instance.set_context(element)
            apply_definition(instance, adapter)
            group.append(instance)
        groups.append(group)

    logger.debug(
        "expanded %s field %r into %d instance(s)",
        node.kind.value,
        node.resolved_name,
        len(groups),
    )
    node.value = groups
    node.children = []


def apply_definition(
    node: "NodeDefinition", adapter: "PathQueryAdapter | None" = None
) -> "NodeDefinition":
    """
    Evaluate a node and its subtree against the node's bound context.

    Params:
        node: Node with its ``context`` already bound
        adapter: Query adapter; falls back to the node's adapter, then to a
            default LxmlQueryAdapter

    Returns:
        The node's root
    """
    adapter = adapter or node.adapter or LxmlQueryAdapter()
    node.adapter = adapter

    node.resolved_name = resolve_name(node, adapter)
    node.value = query_value(node, adapter)

    child_context = node.value if node.value is not None else node.context

    if node.is_collection and isinstance(child_context, list):
        expand_collection(node, child_context, adapter)

    for child in node.children:
        child.set_context(child_context)
        apply_definition(child, adapter)

    return node.root
