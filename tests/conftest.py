"""
Shared test fixtures and documents for the xpathmap test suite.
"""

import pytest

from xpathmap import LxmlQueryAdapter, MapperSettings, load_document

SVG_NS = {"svg": "http://www.w3.org/2000/svg"}

ITEMS_XML = """
<catalog>
    <item id="a">First</item>
    <item id="b">Second</item>
    <item id="c">Third</item>
</catalog>
"""

EMPTY_CATALOG_XML = "<catalog><note>nothing here</note></catalog>"

LOGO_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg">
    <g id="REF_1"/>
    <g id="REF_2"/>
    <g id="VIEW_PANELS">
        <g id="FRONT_1_"/>
        <g id="BACK_2_"/>
    </g>
    <g id="CLASSIC_COLOUR_ZONE">
        <g id="COLOUR_1_"/>
        <g id="COLOUR_2_"/>
    </g>
    <g id="MONO_COLOUR_ZONE">
        <g id="COLOUR_1_"/>
    </g>
</svg>
"""


@pytest.fixture
def adapter():
    """Default lxml adapter without namespace prefixes."""
    return LxmlQueryAdapter()


@pytest.fixture
def svg_adapter():
    """lxml adapter with the ``svg`` prefix registered."""
    return LxmlQueryAdapter(settings=MapperSettings(namespaces=SVG_NS))


@pytest.fixture
def items_document():
    """Catalog with three items whose ids are a, b and c."""
    return load_document(ITEMS_XML)


@pytest.fixture
def empty_catalog():
    """Catalog without any item element."""
    return load_document(EMPTY_CATALOG_XML)


@pytest.fixture
def logo_document():
    """SVG logo with reference groups, view panels and colour zones."""
    return load_document(LOGO_SVG)
