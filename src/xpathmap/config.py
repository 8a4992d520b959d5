"""
Evaluation settings for xpathmap.

This module provides the configuration consumed by the query adapter and the
reducer: XPath namespace prefixes, the reserved "local name" query and how
multi-match atomic values are joined.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from dataclasses import fields as dataclass_fields
from pathlib import Path
from typing import Any


@dataclass
class MapperSettings:
    """Settings shared by one evaluation of a definition tree.

    Every field has a default suited to plain XML; namespaces must be declared
    for prefixed queries such as those over SVG documents.

    Examples:
        # All defaults
        settings = MapperSettings()

        # SVG documents
        settings = MapperSettings(namespaces={"svg": "http://www.w3.org/2000/svg"})

        # From YAML file
        settings = MapperSettings.from_yaml("mapper.yaml")
    """

    # XPath prefix -> namespace URI
    namespaces: dict[str, str] = field(default_factory=dict)

    # Query answered with the context element's local name instead of a node list
    self_name_query: str = "name()"

    # Joins the textual content of several matches of an atomic field
    atomic_separator: str = " "

    # Strip surrounding whitespace from textual content of matches
    strip_whitespace: bool = False

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> MapperSettings:
        """Build settings from a mapping such as the ``settings`` block of a mapping file.

        Keys that are not settings names are dropped, missing ones keep their
        defaults, and a null ``namespaces`` entry means no prefixes.

        Params:
            config: Setting names to values

        Returns:
            New MapperSettings
        """
        valid_fields = {f.name for f in dataclass_fields(cls)}
        filtered = {k: v for k, v in config.items() if k in valid_fields}
        if "namespaces" in filtered:
            filtered["namespaces"] = dict(filtered["namespaces"] or {})
        return cls(**filtered)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> MapperSettings:
        """Read settings from a YAML document whose top level holds setting names.

        An empty file yields the defaults::

            namespaces:
              svg: "http://www.w3.org/2000/svg"
            atomic_separator: ", "

        Params:
            yaml_path: Location of the YAML file

        Returns:
            New MapperSettings
        """
        import yaml

        path = Path(yaml_path)
        with path.open() as f:
            config = yaml.safe_load(f) or {}

        return cls.from_dict(config)
