from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
from uuid import UUID, uuid4

import regex
from ezdxf.colors import aci2rgb, int2rgb

from .elements import Element, two_dec
from .entity import Entity

DEFAULT_FONT_FAMILY = "Sans Serif"

# A declared reference width at or below this is treated as "not set".
_MIN_REFERENCE_WIDTH = 2.0


class HAlignment(Enum):
    LEFT = "AlignLeft"
    CENTER = "AlignHCenter"
    RIGHT = "AlignRight"

    @classmethod
    def from_justification(cls, code: int) -> "HAlignment":
        """TEXT/ATTDEF group 72: 0 left, 1 center, 2 right, 3 aligned, 4 middle, 5 fit."""
        return _H_JUSTIFICATION.get(code, cls.LEFT)

    @classmethod
    def from_attachment_point(cls, code: int) -> "HAlignment":
        """MTEXT group 71: 1..9, row by row from top left to bottom right."""
        if code not in range(1, 10):
            return cls.LEFT
        return (cls.LEFT, cls.CENTER, cls.RIGHT)[(code - 1) % 3]


class VAlignment(Enum):
    TOP = "AlignTop"
    MIDDLE = "AlignVCenter"
    BOTTOM = "AlignBottom"

    @classmethod
    def from_justification(cls, code: int) -> "VAlignment":
        """TEXT/ATTDEF group 73: 0 baseline, 1 bottom, 2 middle, 3 top."""
        return _V_JUSTIFICATION.get(code, cls.TOP)

    @classmethod
    def from_attachment_point(cls, code: int) -> "VAlignment":
        if code not in range(1, 10):
            return cls.TOP
        return (cls.TOP, cls.MIDDLE, cls.BOTTOM)[(code - 1) // 3]


_H_JUSTIFICATION = {
    0: HAlignment.LEFT,
    1: HAlignment.CENTER,
    2: HAlignment.RIGHT,
    3: HAlignment.LEFT,
    4: HAlignment.CENTER,
    5: HAlignment.LEFT,
}
_V_JUSTIFICATION = {
    0: VAlignment.BOTTOM,
    1: VAlignment.BOTTOM,
    2: VAlignment.MIDDLE,
    3: VAlignment.TOP,
}


def normalize_mtext(value: str) -> str:
    """Strip MTEXT inline formatting codes and turn ``\\P`` into line breaks."""
    out: list[str] = []
    i = 0
    n = len(value)
    while i < n:
        ch = value[i]
        i += 1

        if ch in "{}":
            continue
        if ch != "\\":
            out.append(ch)
            continue

        code = value[i] if i < n else ""
        if code == "P":
            out.append("\n")
            i += 1
        elif code == "~":
            out.append(" ")
            i += 1
        elif code == "\\":
            out.append("\\")
            i += 1
        elif code in {"f", "H", "W"}:
            end = value.find(";", i + 1)
            i = n if end < 0 else end + 1
        elif code == "S":
            end = value.find(";", i + 1)
            block = value[i + 1 :] if end < 0 else value[i + 1 : end]
            i = n if end < 0 else end + 1
            out.append(_flatten_stacked(block))
        else:
            # Unknown code: keep the backslash, the code itself is scanned as text.
            out.append("\\")

    return "".join(out)


def _flatten_stacked(block: str) -> str:
    for pos, ch in enumerate(block):
        if ch in "^#":
            return f"{block[:pos]}/{block[pos + 1:]}"
    return block


def extract_mtext_font(value: str) -> str | None:
    """Family name of the first ``\\f`` block, e.g. ``{\\fGaramond|b0|i1;x}`` -> ``Garamond``."""
    start = value.find("\\f")
    if start < 0 or start + 2 >= len(value):
        return None
    block = value[start + 2 :].split(";", 1)[0]
    family = block.split("|", 1)[0].strip().strip("{}")
    return family or None


def grapheme_count(value: str) -> int:
    """Number of extended grapheme clusters, i.e. characters as the user sees them."""
    return len(regex.findall(r"\X", value))


def normalize_rotation(rotation: float) -> float:
    if math.floor(abs(rotation) + 0.5) % 360 == 0:
        return 0.0
    return rotation - 180.0


def text_color(dxf: dict[str, Any]) -> str:
    true_color = dxf.get("true_color")
    if true_color is not None:
        red, green, blue = int2rgb(int(true_color))
    else:
        aci = int(dxf.get("color_index", 7))
        if aci == 7 or not 1 <= aci <= 255:
            return "#000000"
        red, green, blue = aci2rgb(aci)
    return f"#{red:02X}{green:02X}{blue:02X}"


@dataclass
class FontInfo:
    point_size: float
    family: str = DEFAULT_FONT_FAMILY

    def __str__(self) -> str:
        # QFont::toString(): family, point size, pixel size, style hint, weight,
        # style, underline, strike out, fixed pitch, raw mode.
        return f"{self.family},{two_dec(self.point_size)},-1,5,50,0,0,0,0,0"


@dataclass
class DynamicText(Element):
    text: str
    x: float
    y: float
    z: float
    rotation: float
    h_alignment: HAlignment
    v_alignment: VAlignment
    font: FontInfo
    reference_rectangle_width: float = 0.0
    color: str = "#000000"
    text_from: str = "UserText"
    frame: bool = False
    text_width: int = -1
    keep_visual_rotation: bool = False
    info_name: str | None = None
    uuid: UUID = field(default_factory=uuid4)

    approximate_bounds = True

    def effective_width(self) -> float:
        if self.reference_rectangle_width > _MIN_REFERENCE_WIDTH:
            return self.reference_rectangle_width
        return grapheme_count(self.text) * self.font.point_size * 0.75

    def anchor(self) -> tuple[float, float]:
        """Top left corner as the element editor expects it.

        Reversed from QET_ElementScaler's ElmtDynText::AsSVGstring and adjusted
        against the element editor's rendering.
        """
        size = self.font.point_size
        x_pos = self.x + 0.5 - (size / 8.0) - 4.05
        if self.h_alignment is HAlignment.CENTER:
            x_pos -= self.effective_width() / 2.0
        elif self.h_alignment is HAlignment.RIGHT:
            x_pos -= self.effective_width()
        y_pos = self.y + 0.5 - (7.0 / 5.0 * size + 26.0 / 5.0) + size
        return x_pos, y_pos

    def scale(self, fact_x: float, fact_y: float) -> None:
        self.x *= fact_x
        self.y *= fact_y
        self.font.point_size *= fact_x

    def left_bound(self) -> float:
        return self.x

    def right_bound(self) -> float:
        return 1.0

    def top_bound(self) -> float:
        return self.y

    def bot_bound(self) -> float:
        return 1.0

    def to_xml(self) -> ET.Element:
        x_pos, y_pos = self.anchor()
        node = ET.Element(
            "dynamic_text",
            {
                "x": two_dec(x_pos),
                "y": two_dec(y_pos),
                "z": two_dec(self.z),
                "rotation": two_dec(self.rotation),
                "uuid": f"{{{self.uuid}}}",
                "font": str(self.font),
                "Halignment": self.h_alignment.value,
                "Valignment": self.v_alignment.value,
                "text_from": self.text_from,
                "frame": "true" if self.frame else "false",
                "text_width": str(self.text_width),
                "color": self.color,
            },
        )
        if self.info_name is not None:
            node.set("info_name", self.info_name)
        if self.keep_visual_rotation:
            node.set("keep_visual_rotation", "true")
        ET.SubElement(node, "text").text = self.text
        return node


def build_dynamic_text(
    entity: Entity,
    *,
    uuid_factory: Callable[[], UUID] = uuid4,
) -> DynamicText | None:
    dxf = entity.dxf
    x, y, z = dxf.get("insert", (0.0, 0.0, 0.0))
    family = None

    if entity.dxftype == "MTEXT":
        raw = str(dxf.get("text", ""))
        value = normalize_mtext(raw)
        family = extract_mtext_font(raw)
        point_size = float(dxf.get("char_height", 2.5))
        code = int(dxf.get("attachment_point", 1))
        h_alignment = HAlignment.from_attachment_point(code)
        v_alignment = VAlignment.from_attachment_point(code)
        reference_width = float(dxf.get("width", 0.0))
    else:
        value = str(dxf.get("text", ""))
        point_size = float(dxf.get("height", 2.5))
        h_alignment = HAlignment.from_justification(int(dxf.get("halign", 0)))
        v_alignment = VAlignment.from_justification(int(dxf.get("valign", 0)))
        reference_width = 0.0

    if value == "":
        return None

    return DynamicText(
        text=value,
        x=float(x),
        y=-float(y),
        z=float(z),
        rotation=normalize_rotation(float(dxf.get("rotation", 0.0))),
        h_alignment=h_alignment,
        v_alignment=v_alignment,
        font=FontInfo(point_size=point_size, family=family or DEFAULT_FONT_FAMILY),
        reference_rectangle_width=reference_width,
        color=text_color(dxf),
        uuid=uuid_factory(),
    )
