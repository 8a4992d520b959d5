"""Declarative mapping schemas.

Instead of chaining ``field()``/``end()`` calls, a mapping tree can be written
as data and validated with Pydantic::

    fields:
      - name: ITEMS
        kind: array
        query: //item/@id
      - name: ROWS
        kind: collection
        query: //row
        fields:
          - {name: NAME, kind: atomic, query: "@id", value_filter: strip_index_suffix}

Filters are referenced by name and looked up in a FilterRegistry.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from xpathmap.config import MapperSettings
from xpathmap.core.types import ValueKind
from xpathmap.exceptions import SchemaDefinitionError
from xpathmap.query.adapter import LxmlQueryAdapter
from xpathmap.structure.builder import FieldOptions, NodeDefinition
from xpathmap.structure.filters import FilterRegistry, default_registry

logger = logging.getLogger(__name__)


class FieldSpec(BaseModel):
    """Declaration of one field and its nested fields."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(description="Name template, optionally with one placeholder")
    kind: ValueKind = Field(default=ValueKind.OBJECT, description="Value kind")
    query: str | None = Field(default=None, description="XPath selecting the value")
    name_filter: str | None = Field(default=None, description="Registered name filter")
    value_filter: str | None = Field(default=None, description="Registered value filter")
    fields: list["FieldSpec"] = Field(default_factory=list)


FieldSpec.model_rebuild()


class MappingSpec(BaseModel):
    """Top-level mapping declaration: root fields plus evaluation settings."""

    model_config = ConfigDict(extra="forbid")

    fields: list[FieldSpec] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)

    def mapper_settings(self) -> MapperSettings:
        return MapperSettings.from_dict(self.settings)


def _format_location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def parse_mapping(data: MappingSpec | dict[str, Any]) -> MappingSpec:
    """
    Validate raw mapping data.

    Raises:
        SchemaDefinitionError: For the first validation problem found
    """
    if isinstance(data, MappingSpec):
        return data
    try:
        return MappingSpec.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        raise SchemaDefinitionError(_format_location(first["loc"]), first["msg"]) from e


def _resolve_filter(
    registry: FilterRegistry, filter_name: str | None, path: str
) -> Any:
    if filter_name is None:
        return None
    if filter_name not in registry:
        raise SchemaDefinitionError(
            path, f"unknown filter '{filter_name}' (available: {registry.names()})"
        )
    return registry.get(filter_name)


def _add_fields(
    parent: NodeDefinition,
    specs: list[FieldSpec],
    registry: FilterRegistry,
    path: str,
) -> None:
    for index, spec in enumerate(specs):
        field_path = f"{path}.{index}"
        options = FieldOptions(
            name_filter=_resolve_filter(
                registry, spec.name_filter, f"{field_path}.name_filter"
            ),
            value_filter=_resolve_filter(
                registry, spec.value_filter, f"{field_path}.value_filter"
            ),
        )
        child = parent.field(spec.name, spec.kind, spec.query, options)
        _add_fields(child, spec.fields, registry, f"{field_path}.fields")


def build_definition(
    data: MappingSpec | dict[str, Any], filters: FilterRegistry | None = None
) -> NodeDefinition:
    """
    Build a fresh definition tree from a mapping declaration.

    Params:
        data: MappingSpec or the equivalent plain dict
        filters: Registry used to resolve filter names; defaults to the built-ins

    Returns:
        Unnamed root NodeDefinition holding the declared fields, bound to an
        LxmlQueryAdapter configured from the declared settings; an adapter
        passed to ``apply`` still takes precedence

    Raises:
        SchemaDefinitionError: If the declaration is invalid or names an unknown filter
    """
    spec = parse_mapping(data)
    registry = filters or default_registry()

    root = NodeDefinition()
    root.adapter = LxmlQueryAdapter(settings=spec.mapper_settings())
    _add_fields(root, spec.fields, registry, "fields")
    logger.debug("built definition tree with %d node(s)", sum(1 for _ in root.iter_tree()))
    return root


def load_mapping(yaml_path: str | Path) -> MappingSpec:
    """Read and validate a YAML mapping declaration."""
    import yaml

    path = Path(yaml_path)
    with path.open() as f:
        data = yaml.safe_load(f) or {}

    return parse_mapping(data)


def load_definition(
    yaml_path: str | Path, filters: FilterRegistry | None = None
) -> NodeDefinition:
    """Build a definition tree from a YAML mapping declaration.

    The file's ``settings`` travel with the tree as its bound adapter, so
    ``load_definition(path).apply(document)`` honours declared namespaces.
    """
    return build_definition(load_mapping(yaml_path), filters)
