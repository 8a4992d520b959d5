"""
Tests for value coercion and reduction of evaluated trees.
"""

import pytest

from xpathmap import LxmlQueryAdapter, MapperSettings, NodeDefinition, ValueKind, load_document
from xpathmap.exceptions import FilterConfigurationError, ResultShapeError
from xpathmap.execution.reduction import reduce_definition, value_as_type


def _evaluate(document, kind, query, options=None, adapter=None):
    root = NodeDefinition()
    node = root.field("FIELD", kind, query, options)
    root.apply(document, adapter)
    return node


class TestArrayAndObjectCoercion:
    """Object and array fields become lists of match texts."""

    @pytest.mark.parametrize("kind", [ValueKind.ARRAY, ValueKind.OBJECT])
    def test_one_entry_per_match_in_order(self, kind, items_document):
        node = _evaluate(items_document, kind, "//item/@id")
        assert value_as_type(node) == ["a", "b", "c"]

    @pytest.mark.parametrize("kind", [ValueKind.ARRAY, ValueKind.OBJECT])
    def test_no_match_is_empty_list(self, kind, empty_catalog):
        assert value_as_type(_evaluate(empty_catalog, kind, "//item/@id")) == []

    def test_absent_query_is_empty_list(self, items_document):
        assert value_as_type(_evaluate(items_document, ValueKind.ARRAY, None)) == []

    def test_element_text(self, items_document):
        node = _evaluate(items_document, ValueKind.ARRAY, "//item")
        assert value_as_type(node) == ["First", "Second", "Third"]

    def test_self_name_becomes_single_entry(self, items_document):
        node = _evaluate(items_document, ValueKind.ARRAY, "name()")
        assert value_as_type(node) == ["catalog"]


class TestAtomicCoercion:
    """Atomic fields become one string."""

    def test_single_match(self, items_document):
        node = _evaluate(items_document, ValueKind.ATOMIC, "//item[2]/@id")
        assert value_as_type(node) == "b"

    def test_multiple_matches_joined_with_space(self, items_document):
        node = _evaluate(items_document, ValueKind.ATOMIC, "//item/@id")
        assert value_as_type(node) == "a b c"

    def test_configured_separator(self, items_document):
        adapter = LxmlQueryAdapter(settings=MapperSettings(atomic_separator=","))
        node = _evaluate(items_document, ValueKind.ATOMIC, "//item/@id", adapter=adapter)
        assert value_as_type(node) == "a,b,c"

    def test_no_match_is_empty_string(self, empty_catalog):
        node = _evaluate(empty_catalog, ValueKind.ATOMIC, "//item/@id")
        assert value_as_type(node) == ""
        assert reduce_definition(node) == {}

    def test_self_name_is_raw_value(self, items_document):
        node = _evaluate(items_document, ValueKind.ATOMIC, "name()")
        assert value_as_type(node) == "catalog"

    def test_scalar_expression(self, items_document):
        node = _evaluate(items_document, ValueKind.ATOMIC, "count(//item)")
        assert value_as_type(node) == "3"


class TestCollectionCoercion:
    """Collections and dynamic objects reduce their per-element groups."""

    def test_collection_list_of_mappings(self, items_document):
        root = NodeDefinition()
        rows = root.field("ROWS", ValueKind.COLLECTION, "//item")
        rows.field("ID", ValueKind.ATOMIC, "@id").end()
        rows.field("TEXT", ValueKind.ATOMIC, ".")
        root.apply(items_document)

        assert value_as_type(rows) == [
            {"ID": "a", "TEXT": "First"},
            {"ID": "b", "TEXT": "Second"},
            {"ID": "c", "TEXT": "Third"},
        ]

    def test_collection_keeps_empty_instances(self):
        document = load_document('<t><r id="x"/><r/></t>')
        root = NodeDefinition()
        rows = root.field("ROWS", ValueKind.COLLECTION, "r")
        rows.field("ID", ValueKind.ATOMIC, "@id")
        root.apply(document)

        assert value_as_type(rows) == [{"ID": "x"}, {}]

    def test_dynamic_object_keys_from_elements(self, items_document):
        root = NodeDefinition()
        by_id = root.field("BY_ID", ValueKind.DYNAMIC_OBJECT, "//item")
        by_id.field("{@id}", ValueKind.ATOMIC, ".")
        root.apply(items_document)

        assert value_as_type(by_id) == {"a": "First", "b": "Second", "c": "Third"}

    def test_dynamic_object_accumulates_repeated_keys(self):
        document = load_document(
            '<t><e kind="x" v="1"/><e kind="y" v="2"/><e kind="x" v="3"/></t>'
        )
        root = NodeDefinition()
        by_kind = root.field("BY_KIND", ValueKind.DYNAMIC_OBJECT, "e")
        by_kind.field("{@kind}", ValueKind.ARRAY, "@v")
        root.apply(document)

        assert value_as_type(by_kind) == {"x": ["1", "3"], "y": ["2"]}

    def test_dynamic_object_of_unnamed_arrays_concatenates(self):
        """Positional entries from every group are appended, not collided."""
        document = load_document('<t><i id="a"/><i id="b"/></t>')
        root = NodeDefinition()
        by_item = root.field("D", ValueKind.DYNAMIC_OBJECT, "i")
        by_item.field(None, ValueKind.ARRAY, "@id")
        root.apply(document)

        assert root.get_result() == {"D": ["a", "b"]}

    def test_dynamic_object_mixes_positional_and_named_entries(self):
        document = load_document('<t><i id="a" k="x"/><i id="b" k="y"/></t>')
        root = NodeDefinition()
        by_item = root.field("D", ValueKind.DYNAMIC_OBJECT, "i")
        by_item.field(None, ValueKind.ARRAY, "@id").end()
        by_item.field("{@k}", ValueKind.ATOMIC, "@id")
        root.apply(document)

        assert root.get_result() == {"D": {0: "a", "x": "a", 1: "b", "y": "b"}}

    def test_no_elements(self, empty_catalog):
        root = NodeDefinition()
        rows = root.field("ROWS", ValueKind.COLLECTION, "//item")
        rows.field("ID", ValueKind.ATOMIC, "@id")
        root.apply(empty_catalog)

        assert value_as_type(rows) == []
        assert root.get_result() == {}


class TestValueFilter:
    """value_filter post-processing."""

    def test_applied_to_non_empty_result(self, items_document):
        node = _evaluate(
            items_document, ValueKind.ARRAY, "//item/@id", {"value_filter": lambda v: v[::-1]}
        )
        assert value_as_type(node) == ["c", "b", "a"]

    def test_skipped_for_empty_result(self, empty_catalog):
        node = _evaluate(
            empty_catalog, ValueKind.ATOMIC, "//item/@id", {"value_filter": lambda v: "default"}
        )
        assert value_as_type(node) == ""

    def test_non_callable_raises(self, items_document):
        node = _evaluate(items_document, ValueKind.ATOMIC, "//item/@id", {"value_filter": 42})
        with pytest.raises(FilterConfigurationError) as exc_info:
            node.get_result()
        assert exc_info.value.option == "value_filter"

    def test_non_callable_not_reached_when_empty(self, empty_catalog):
        node = _evaluate(empty_catalog, ValueKind.ATOMIC, "//item/@id", {"value_filter": 42})
        assert node.get_result() == {}


class TestReduce:
    """Merging, pruning and name wrapping."""

    def test_named_node_is_wrapped(self, items_document):
        node = _evaluate(items_document, ValueKind.ARRAY, "//item/@id")
        assert reduce_definition(node) == {"FIELD": ["a", "b", "c"]}

    def test_unnamed_root_is_unwrapped(self, items_document):
        root = NodeDefinition()
        root.field("IDS", ValueKind.ARRAY, "//item/@id").end()
        root.field("FIRST", ValueKind.ATOMIC, "//item[1]")
        root.apply(items_document)

        assert root.get_result() == {"IDS": ["a", "b", "c"], "FIRST": "First"}

    def test_child_order_preserved(self, items_document):
        root = NodeDefinition()
        for name in ("Z", "A", "M"):
            root.field(name, ValueKind.ATOMIC, "//item[1]/@id")
        root.apply(items_document)

        assert list(root.get_result()) == ["Z", "A", "M"]

    def test_empty_fields_omitted(self, items_document):
        root = NodeDefinition()
        root.field("IDS", ValueKind.ARRAY, "//item/@id").end()
        root.field("MISSING", ValueKind.ATOMIC, "//nothing").end()
        group = root.field("EMPTY_GROUP", ValueKind.OBJECT)
        group.field("ALSO_MISSING", ValueKind.ARRAY, "//nothing")
        root.apply(items_document)

        assert root.get_result() == {"IDS": ["a", "b", "c"]}

    def test_object_groups_children(self, items_document):
        root = NodeDefinition()
        group = root.field("GROUP", ValueKind.OBJECT)
        group.field("IDS", ValueKind.ARRAY, "//item/@id")
        root.apply(items_document)

        assert root.get_result() == {"GROUP": {"IDS": ["a", "b", "c"]}}

    def test_sibling_collision_last_wins(self, items_document):
        root = NodeDefinition()
        root.field("X", ValueKind.ATOMIC, "//item[1]/@id").end()
        root.field("X", ValueKind.ATOMIC, "//item[2]/@id")
        root.apply(items_document)

        assert root.get_result() == {"X": "b"}

    def test_object_matches_merged_with_children(self, items_document):
        """Own match texts keep positional keys next to child fields."""
        root = NodeDefinition()
        group = root.field("GROUP", ValueKind.OBJECT, "//item[1]")
        group.field("ID", ValueKind.ATOMIC, "@id")
        root.apply(items_document)

        assert root.get_result() == {"GROUP": {0: "First", "ID": "a"}}

    def test_empty_matches_propagate_empty_context(self):
        root = NodeDefinition()
        group = root.field("GROUP", ValueKind.OBJECT, "//item[1]")
        tag = group.field("TAG", ValueKind.ATOMIC, "name()")
        root.apply(load_document('<t id="root"/>'))

        assert group.value == []
        assert tag.context == []
        assert tag.value is None
        assert root.get_result() == {}

    def test_atomic_with_child_output_raises(self, items_document):
        root = NodeDefinition()
        atomic = root.field("TEXT", ValueKind.ATOMIC, "//item[1]")
        atomic.field("ID", ValueKind.ATOMIC, "@id")
        root.apply(items_document)

        with pytest.raises(ResultShapeError):
            root.get_result()

    def test_empty_atomic_absorbs_children(self, items_document):
        root = NodeDefinition()
        atomic = root.field("HOLDER", ValueKind.ATOMIC)
        atomic.field("ID", ValueKind.ATOMIC, "//item[1]/@id")
        root.apply(items_document)

        assert root.get_result() == {"HOLDER": {"ID": "a"}}

    def test_get_result_is_idempotent(self, items_document):
        root = NodeDefinition()
        root.field("IDS", ValueKind.ARRAY, "//item/@id").end()
        rows = root.field("ROWS", ValueKind.COLLECTION, "//item")
        rows.field("ID", ValueKind.ATOMIC, "@id")
        root.apply(items_document)

        assert root.get_result() == root.get_result()

    def test_unnamed_atomic_child_cannot_merge(self):
        """An empty resolved name leaves a bare string, which has no keys to merge."""
        document = load_document('<t><item label="">hello</item></t>')
        root = NodeDefinition()
        group = root.field("GROUP", ValueKind.OBJECT, "item")
        group.field("{@label}", ValueKind.ATOMIC, ".")
        root.apply(document)

        with pytest.raises(ResultShapeError) as exc_info:
            root.get_result()
        assert exc_info.value.node_name == "{@label}"

    def test_unnamed_atomic_in_collection_cannot_merge(self):
        document = load_document('<t><item label="">hello</item></t>')
        root = NodeDefinition()
        rows = root.field("ROWS", ValueKind.COLLECTION, "item")
        rows.field("{@label}", ValueKind.ATOMIC, ".")
        root.apply(document)

        with pytest.raises(ResultShapeError):
            root.get_result()
