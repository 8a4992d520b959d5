"""
Reduction of evaluated definition trees into plain nested structures.

Reduction is bottom-up. A node's own value is coerced according to its
value kind, its children's results are merged into it, empty results are
pruned, and a named node wraps its result under its resolved name.
"""

from typing import TYPE_CHECKING, Any

from xpathmap.core.merge import array_merge, merge_recursive
from xpathmap.core.types import ValueKind
from xpathmap.exceptions import FilterConfigurationError, ResultShapeError

if TYPE_CHECKING:
    from xpathmap.structure.builder import NodeDefinition


def _texts(node: "NodeDefinition", value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    return [node.adapter.text(item) for item in value]


def array_value(node: "NodeDefinition", value: Any) -> list[str]:
    """Textual content of every match, in order; nothing matched gives []."""
    if not value:
        return []
    return _texts(node, value)


def atomic_value(node: "NodeDefinition", value: Any) -> str:
    """A single string: the raw value, or matched texts joined by the separator."""
    if not value:
        return ""
    if isinstance(value, str):
        return value
    return node.adapter.settings.atomic_separator.join(_texts(node, value))


def _contribution(child: "NodeDefinition") -> Any:
    """Reduce a child for merging into its parent; only containers can merge."""
    contribution = reduce_definition(child)
    if contribution and not isinstance(contribution, (list, dict)):
        raise ResultShapeError(
            child.resolved_name or child.name,
            "unnamed scalar value cannot merge into its parent",
        )
    return contribution


def collection_value(value: Any, assoc: bool = False) -> list | dict:
    """
    Reduce per-element child groups.

    Each group's children are merged into one result. Plain collections
    return one mapping per group; dynamic objects deep-merge all of them,
    appending positional entries and accumulating colliding keys.

    Raises:
        ResultShapeError: If an unnamed child reduces to a bare scalar
    """
    # a collection whose context never became a sequence holds no groups
    if not value or not isinstance(value, list):
        return []

    result: list | dict = []
    for group in value:
        item: list | dict = []
        for child in group:
            contribution = _contribution(child)
            if contribution:
                item = array_merge(item, contribution)

        if assoc:
            if item:
                result = merge_recursive(result, item)
        else:
            result.append(item if item else {})
    return result


def value_as_type(node: "NodeDefinition") -> Any:
    """
    Coerce the node's bound value according to its value kind.

    A non-empty result is passed through the node's value filter when one is
    set. Empty results are returned unfiltered.

    Raises:
        FilterConfigurationError: If the value filter is not callable
    """
    value = node.value

    if node.kind in (ValueKind.OBJECT, ValueKind.ARRAY):
        result = array_value(node, value)
    elif node.kind == ValueKind.ATOMIC:
        result = atomic_value(node, value)
    elif node.kind == ValueKind.COLLECTION:
        result = collection_value(value)
    else:
        result = collection_value(value, assoc=True)

    value_filter = node.options.value_filter
    if result and value_filter is not None:
        if not callable(value_filter):
            raise FilterConfigurationError("value_filter", node.name)
        result = value_filter(result)

    return result


def reduce_definition(node: "NodeDefinition") -> Any:
    """
    Reduce an evaluated node and its subtree.

    Params:
        node: Node that has gone through ``apply``

    Returns:
        ``{}`` when the node produced nothing, ``{resolved_name: result}`` for
        named nodes, the bare merged result otherwise

    Raises:
        FilterConfigurationError: If a value filter is not callable
        ResultShapeError: If a scalar result would have to absorb child results,
            or an unnamed child reduces to a bare scalar
    """
    result = value_as_type(node)

    for child in node.children:
        contribution = _contribution(child)
        if not contribution:
            continue
        if not isinstance(result, (list, dict)):
            if result:
                raise ResultShapeError(
                    node.resolved_name, "scalar value cannot hold child fields"
                )
            result = []
        result = array_merge(result, contribution)

    if not result:
        return {}

    if node.resolved_name:
        return {node.resolved_name: result}
    return result
