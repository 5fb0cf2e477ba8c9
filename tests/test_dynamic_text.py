from __future__ import annotations

from uuid import UUID

import pytest

from dxf2elmt.text import (
    DEFAULT_FONT_FAMILY,
    DynamicText,
    HAlignment,
    VAlignment,
    build_dynamic_text,
)
from tests._dxf_helpers import counting_uuids, entity


def _text(**dxf) -> DynamicText | None:
    dxf.setdefault("insert", (10.0, 20.0, 0.0))
    dxf.setdefault("height", 2.5)
    dxf.setdefault("text", "R1")
    return build_dynamic_text(entity("TEXT", **dxf), uuid_factory=counting_uuids())


def test_text_reads_position_with_flipped_y() -> None:
    dtext = _text()

    assert dtext.x == 10.0
    assert dtext.y == -20.0
    assert dtext.font.point_size == 2.5
    assert dtext.font.family == DEFAULT_FONT_FAMILY
    assert dtext.uuid == UUID(int=1)


def test_left_aligned_anchor_formula() -> None:
    dtext = _text()

    x_pos, y_pos = dtext.anchor()

    assert x_pos == pytest.approx(10.0 + 0.5 - 2.5 / 8.0 - 4.05)
    assert y_pos == pytest.approx(-20.0 + 0.5 - (7.0 / 5.0 * 2.5 + 26.0 / 5.0) + 2.5)


def test_center_and_right_anchor_use_estimated_width() -> None:
    left = _text(halign=0)
    center = _text(halign=1)
    right = _text(halign=2)
    # Two graphemes, 2.5 point size.
    width = 2 * 2.5 * 0.75

    assert center.h_alignment is HAlignment.CENTER
    assert center.anchor()[0] == pytest.approx(left.anchor()[0] - width / 2.0)
    assert right.anchor()[0] == pytest.approx(left.anchor()[0] - width)


def test_mtext_uses_declared_reference_width() -> None:
    dtext = build_dynamic_text(
        entity(
            "MTEXT",
            insert=(0.0, 0.0, 0.0),
            char_height=3.0,
            text="ABC",
            attachment_point=3,
            width=40.0,
        )
    )

    assert dtext.h_alignment is HAlignment.RIGHT
    assert dtext.v_alignment is VAlignment.TOP
    assert dtext.effective_width() == 40.0
    assert dtext.anchor()[0] == pytest.approx(0.5 - 3.0 / 8.0 - 4.05 - 40.0)


def test_mtext_small_reference_width_falls_back_to_estimate() -> None:
    dtext = build_dynamic_text(
        entity("MTEXT", insert=(0.0, 0.0, 0.0), char_height=2.0, text="ABCD", width=1.5)
    )

    assert dtext.effective_width() == pytest.approx(4 * 2.0 * 0.75)


def test_mtext_is_normalized_and_font_is_inferred() -> None:
    dtext = build_dynamic_text(
        entity(
            "MTEXT",
            insert=(1.0, 2.0, 0.0),
            char_height=2.5,
            text="{\\fGaramond|b0|i1|c0|p18;Sofrel}",
        )
    )

    assert dtext.text == "Sofrel"
    assert dtext.font.family == "Garamond"
    assert str(dtext.font).startswith("Garamond,2.5,")


def test_plain_text_keeps_formatting_codes_and_default_font() -> None:
    dtext = _text(text="\\fArial;A")

    assert dtext.text == "\\fArial;A"
    assert dtext.font.family == DEFAULT_FONT_FAMILY


def test_rotation_is_normalized() -> None:
    assert _text(rotation=360.0).rotation == 0.0
    assert _text(rotation=-360.0).rotation == 0.0
    assert _text(rotation=45.0).rotation == -135.0


def test_empty_text_is_not_converted() -> None:
    assert _text(text="") is None


def test_attdef_is_converted_like_text() -> None:
    dtext = build_dynamic_text(
        entity("ATTDEF", insert=(5.0, 5.0, 0.0), height=3.0, text="LABEL", tag="NAME", halign=2)
    )

    assert dtext.text == "LABEL"
    assert dtext.h_alignment is HAlignment.RIGHT
    assert dtext.y == -5.0


def test_text_color_from_aci_and_true_color() -> None:
    assert _text().color == "#000000"
    assert _text(color_index=1).color == "#FF0000"
    assert _text(true_color=0x00FF80).color == "#00FF80"


def test_scale_moves_anchor_and_font_but_keeps_placeholder_bounds() -> None:
    dtext = _text()

    dtext.scale(2.0, 3.0)

    assert dtext.x == 20.0
    assert dtext.y == -60.0
    assert dtext.font.point_size == 5.0
    assert dtext.approximate_bounds is True
    assert dtext.left_bound() == 20.0
    assert dtext.top_bound() == -60.0
    assert dtext.right_bound() == 1.0
    assert dtext.bot_bound() == 1.0


def test_dynamic_text_xml() -> None:
    dtext = _text(text="K1", halign=0)

    node = dtext.to_xml()

    assert node.tag == "dynamic_text"
    assert node.get("uuid") == "{00000000-0000-0000-0000-000000000001}"
    assert node.get("Halignment") == "AlignLeft"
    assert node.get("Valignment") == "AlignBottom"
    assert node.get("text_from") == "UserText"
    assert node.get("frame") == "false"
    assert node.get("text_width") == "-1"
    assert node.get("color") == "#000000"
    assert node.get("font") == "Sans Serif,2.5,-1,5,50,0,0,0,0,0"
    assert float(node.get("y")) == pytest.approx(dtext.anchor()[1], abs=0.005)
    assert node.find("text").text == "K1"
    assert node.get("info_name") is None


def test_right_aligned_width_counts_user_visible_characters() -> None:
    dtext = _text(text="\u26a0\ufe0f", height=4.0, halign=2)

    assert dtext.effective_width() == pytest.approx(3.0)
