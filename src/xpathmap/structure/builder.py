"""
Node definitions and the fluent builder API.

A mapping shape is a tree of :class:`NodeDefinition` objects. Each node holds
a name template, a value kind, an optional XPath query and optional filters.
The tree is built fluently::

    root = NodeDefinition()
    (
        root.field("REF", ValueKind.OBJECT)
            .field("ID", ValueKind.ARRAY, "//*[starts-with(@id, 'REF_')]/@id").end()
        .end()
    )

and then evaluated with :meth:`NodeDefinition.apply` followed by
:meth:`NodeDefinition.get_result`.
"""

from collections.abc import Iterator
from typing import Any, Optional

from attrs import frozen

from xpathmap.core.types import FilterFunc, ValueKind


@frozen
class FieldOptions:
    """Post-processing hooks of a field.

    Filters are not checked at build time; a non-callable filter is reported
    when the node is evaluated.
    """

    name_filter: FilterFunc | None = None
    value_filter: FilterFunc | None = None

    @classmethod
    def coerce(cls, options: "FieldOptions | dict[str, Any] | None") -> "FieldOptions":
        """Accept a FieldOptions instance, a dict with filter keys, or None.

        Raises:
            TypeError: If the dict holds a key other than the filter names
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        unknown = sorted(set(options) - {"name_filter", "value_filter"})
        if unknown:
            raise TypeError(
                f"Unknown field option(s) {unknown}; expected 'name_filter' or 'value_filter'"
            )
        return cls(
            name_filter=options.get("name_filter"),
            value_filter=options.get("value_filter"),
        )


class NodeDefinition:
    """One field of a mapping tree.

    Static shape:
        name: Name template; may hold one ``{query}`` or ``{count(query)}`` placeholder.
        kind: ValueKind controlling coercion and per-element expansion.
        query: XPath evaluated against the bound context; None inherits the context.
        options: FieldOptions with optional name/value filters.
        children: Ordered child definitions.
        root, parent: Back-references; a fresh node is its own root and parent.

    Evaluation state (set by ``apply``):
        context: Document fragment the node is bound to.
        resolved_name: Name after placeholder substitution and filtering.
        value: Query matches, or per-element child groups after expansion.
        adapter: Query adapter used for this evaluation.

    Expanding a collection node consumes its ``children``; ``apply`` is
    therefore one-shot for any tree containing collection nodes. Build a new
    tree (or ``clone()`` an unapplied one) per document.
    """

    def __init__(
        self,
        name: str | None = None,
        kind: ValueKind | str = ValueKind.OBJECT,
        query: str | None = None,
        options: FieldOptions | dict[str, Any] | None = None,
    ):
        self.name = name
        self.kind = ValueKind.coerce(kind)
        self.query = query
        self.options = FieldOptions.coerce(options)
        self.children: list[NodeDefinition] = []
        self.root: NodeDefinition = self
        self.parent: NodeDefinition = self

        self.context: Any = None
        self.resolved_name: str | None = None
        self.value: Any = None
        self.adapter = None

    def __repr__(self) -> str:
        return (
            f"NodeDefinition(name={self.name!r}, kind={self.kind.value!r}, "
            f"query={self.query!r}, children={len(self.children)})"
        )

    @property
    def is_collection(self) -> bool:
        return self.kind.is_collection

    @property
    def is_expanded(self) -> bool:
        """True once a collection node holds per-element child groups."""
        return self.is_collection and isinstance(self.value, list)

    @property
    def is_root(self) -> bool:
        return self.parent is self

    def field(
        self,
        name: str | None,
        kind: ValueKind | str,
        query: str | None = None,
        options: FieldOptions | dict[str, Any] | None = None,
    ) -> "NodeDefinition":
        """
        Add a new child field to this node.

        Params:
            name: Field name template
            kind: Value kind of the field
            query: XPath selecting the field's value, relative to this node's value
            options: Optional name/value filters

        Returns:
            The new child, so that its own children can be chained onto it
        """
        child = NodeDefinition(name=name, kind=kind, query=query, options=options)
        child.root = self.root
        child.parent = self
        self.children.append(child)
        return child

    def end(self) -> "NodeDefinition":
        """Return the parent, closing the current field in a fluent chain."""
        return self.parent

    def add_child(self, child: "NodeDefinition") -> "NodeDefinition":
        """
        Attach an existing definition as the last child.

        The child and its whole subtree are re-rooted into this tree.

        Returns:
            self
        """
        child.parent = self
        for node in child.iter_tree():
            node.root = self.root
        self.children.append(child)
        return self

    def get_child(self, name: str) -> Optional["NodeDefinition"]:
        """
        Find a direct child by name.

        Evaluated children are matched on their resolved name, unevaluated
        ones on their name template.

        Returns:
            The first matching child, or None
        """
        for child in self.children:
            current = child.resolved_name if child.resolved_name is not None else child.name
            if current == name:
                return child
        return None

    def iter_tree(self) -> Iterator["NodeDefinition"]:
        """Depth-first, pre-order walk of this node and its static descendants."""
        yield self
        for child in self.children:
            yield from child.iter_tree()

    def _iter_instances(self) -> Iterator["NodeDefinition"]:
        # static descendants plus the per-element instances of expanded collections
        yield self
        for child in self.children:
            yield from child._iter_instances()
        if self.is_expanded:
            for group in self.value:
                for member in group:
                    yield from member._iter_instances()

    def clone(self) -> "NodeDefinition":
        """
        Deep copy of this node and all its descendants.

        Root and parent references of the copy point where the original's do;
        descendants are re-parented onto their copied parents. The child
        groups of an expanded collection are cloned as well, so an applied
        tree can be copied and changed independently. Cloning a root yields a
        new, self-rooted tree. Filters, the adapter and matched document nodes
        are shared.
        """
        copy = NodeDefinition(
            name=self.name, kind=self.kind, query=self.query, options=self.options
        )
        copy.root = self.root
        copy.parent = self.parent
        copy.context = self.context
        copy.resolved_name = self.resolved_name
        copy.adapter = self.adapter
        for child in self.children:
            child_copy = child.clone()
            child_copy.parent = copy
            copy.children.append(child_copy)

        if self.is_expanded:
            copy.value = []
            for group in self.value:
                group_copy = [member.clone() for member in group]
                for member in group_copy:
                    member.parent = copy
                copy.value.append(group_copy)
        elif isinstance(self.value, list):
            copy.value = list(self.value)
        else:
            copy.value = self.value

        if self.is_root:
            copy.parent = copy
            for node in copy._iter_instances():
                node.root = copy
        return copy

    def set_context(self, context: Any) -> "NodeDefinition":
        """Bind a document fragment to this node; returns self for chaining."""
        self.context = context
        return self

    def apply(self, context: Any = None, adapter=None) -> "NodeDefinition":
        """
        Evaluate this node and its subtree against a document context.

        Params:
            context: Document fragment; when omitted the previously bound context is used
            adapter: PathQueryAdapter; defaults to the adapter already bound to
                this node (see ``build_definition``), then to a plain LxmlQueryAdapter

        Returns:
            The root of the tree, ready for ``get_result()``

        Raises:
            FilterConfigurationError: If a name filter is not callable
            QueryEvaluationError: If the adapter rejects a query
        """
        from xpathmap.execution.engine import apply_definition

        if context is not None:
            self.context = context
        return apply_definition(self, adapter)

    def get_result(self) -> Any:
        """
        Reduce the evaluated tree into plain nested dicts, lists and strings.

        Raises:
            FilterConfigurationError: If a value filter is not callable
            ResultShapeError: If an atomic field has children producing output
        """
        from xpathmap.execution.reduction import reduce_definition

        return reduce_definition(self)
