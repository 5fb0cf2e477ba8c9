from __future__ import annotations

from uuid import UUID

import pytest

from dxf2elmt.convert import to_definition
from dxf2elmt.definition import Bounds, aggregate_bounds, build_definition
from dxf2elmt.elements import Line
from tests._dxf_helpers import counting_uuids, description_children, entity


def _drawing(k: float = 1.0) -> list:
    return [
        entity("LINE", start=(0.0, 0.0, 0.0), end=(40.0 * k, 0.0, 0.0)),
        entity("LINE", start=(0.0, 0.0, 0.0), end=(0.0, 25.0 * k, 0.0)),
        entity("CIRCLE", center=(20.0 * k, 10.0 * k, 0.0), radius=5.0 * k),
    ]


def test_aggregate_bounds_over_elements() -> None:
    definition = to_definition("box", _drawing())

    assert definition.bounds == Bounds(left=0.0, top=-25.0, right=40.0, bot=0.0)
    assert definition.width == 40
    assert definition.height == 30
    assert definition.hotspot == (0, 25)


@pytest.mark.parametrize("k", [0.5, 2.0, 3.0, 7.5, 75.0, 400.0])
def test_bounds_scale_with_drawing(k: float) -> None:
    base = to_definition("base", _drawing()).bounds
    scaled = to_definition("scaled", _drawing(k)).bounds

    assert scaled.width == pytest.approx(base.width * k)
    assert scaled.height == pytest.approx(base.height * k)


def test_large_drawing_keeps_its_size() -> None:
    definition = to_definition(
        "big",
        [
            entity("LINE", start=(0.0, 0.0, 0.0), end=(10000.0, 0.0, 0.0)),
            entity("LINE", start=(0.0, 0.0, 0.0), end=(0.0, 5000.0, 0.0)),
        ],
    )

    assert definition.scale == (1.0, 1.0)
    assert definition.bounds.width == pytest.approx(10000.0)
    assert definition.bounds.height == pytest.approx(5000.0)
    assert (definition.width, definition.height) == (10000, 5000)


def test_text_placeholders_do_not_stretch_bounds() -> None:
    definition = to_definition(
        "labels",
        [
            entity("LINE", start=(-50.0, -50.0, 0.0), end=(-20.0, -10.0, 0.0)),
            entity("TEXT", insert=(-30.0, -30.0, 0.0), height=2.5, text="K1"),
        ],
    )

    # The text's right/bottom placeholder (1.0) would otherwise pull the box to the origin.
    assert definition.bounds == Bounds(left=-50.0, top=10.0, right=-20.0, bot=50.0)


def test_elements_are_scaled_exactly_once() -> None:
    line = Line(0.0, 0.0, 4000.0, 0.0)

    definition = build_definition("once", 20, [line], scale=(0.5, 0.25))

    assert line.x2 == pytest.approx(2000.0)
    assert definition.scale == (0.5, 0.25)
    assert definition.bounds == Bounds(0.0, 0.0, 2000.0, 0.0)
    assert definition.elements == [line]


def test_empty_drawing_has_minimal_size() -> None:
    definition = to_definition("empty", [entity("INSERT", name="X", insert=(0.0, 0.0, 0.0))])

    assert definition.elements == []
    assert aggregate_bounds(definition.elements) == Bounds(0.0, 0.0, 0.0, 0.0)
    assert (definition.width, definition.height) == (10, 10)


def test_definition_xml_layout() -> None:
    definition = to_definition("relay", _drawing(), spline_step=12, uuid_factory=counting_uuids())

    root = definition.to_xml()

    assert root.tag == "definition"
    assert root.get("type") == "element"
    assert root.get("link_type") == "simple"
    assert root.get("width") == "40"
    assert root.get("height") == "30"
    assert root.get("hotspot_x") == "0"
    assert root.get("hotspot_y") == "25"
    assert root.find("uuid").get("uuid") == "{00000000-0000-0000-0000-000000000004}"
    assert root.find("names/name").text == "relay"
    assert root.find("names/name").get("lang") == "en"
    assert root.find("elementInformations") is not None
    assert "spline step 12" in root.find("informations").text
    assert [child.tag for child in description_children(root)] == ["line", "line", "ellipse"]


def test_element_uuids_are_unique() -> None:
    definition = to_definition("ids", _drawing() * 3)

    uuids = [element.uuid for element in definition.elements]
    assert len(uuids) == 9
    assert len(set(uuids)) == 9
    assert all(isinstance(value, UUID) for value in uuids)


def test_informations_report_the_spline_step_in_use() -> None:
    definition = to_definition("steps", _drawing(), spline_step=20.5)

    assert definition.spline_step == 20
    assert definition.to_xml().find("informations").text.endswith("(spline step 20)")
