from __future__ import annotations

import abc
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import ClassVar
from uuid import UUID, uuid4

Point2D = tuple[float, float]

# QElectroTech only knows a handful of named colors; everything else is drawn black.
_ACI_COLOR_NAMES = {
    1: "red",
    2: "yellow",
    3: "green",
    4: "cyan",
    5: "blue",
    6: "magenta",
    7: "black",
    8: "gray",
    9: "lightgray",
    30: "orange",
}


def two_dec(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    if text in {"", "-0"}:
        return "0"
    return text


def color_name(aci: int | None) -> str:
    if aci is None:
        return "black"
    return _ACI_COLOR_NAMES.get(int(aci), "black")


@dataclass
class Style:
    color: str = "black"
    filling: str = "none"
    line_style: str = "normal"
    line_weight: str = "normal"

    @classmethod
    def from_aci(cls, aci: int | None, *, filled: bool = False) -> "Style":
        color = color_name(aci)
        return cls(color=color, filling=color if filled else "none")

    def __str__(self) -> str:
        return (
            f"line-style:{self.line_style};line-weight:{self.line_weight};"
            f"filling:{self.filling};color:{self.color}"
        )


class Element(abc.ABC):
    """A converted part of the element description.

    Bounds follow the target convention: Y grows downwards, so ``top_bound``
    is the smallest Y value and ``bot_bound`` the largest.
    """

    # True when right_bound/bot_bound return placeholders instead of real extents.
    approximate_bounds: ClassVar[bool] = False

    uuid: UUID

    @abc.abstractmethod
    def scale(self, fact_x: float, fact_y: float) -> None: ...

    @abc.abstractmethod
    def left_bound(self) -> float: ...

    @abc.abstractmethod
    def right_bound(self) -> float: ...

    @abc.abstractmethod
    def top_bound(self) -> float: ...

    @abc.abstractmethod
    def bot_bound(self) -> float: ...

    @abc.abstractmethod
    def to_xml(self) -> ET.Element: ...


@dataclass
class Line(Element):
    x1: float
    y1: float
    x2: float
    y2: float
    style: Style = field(default_factory=Style)
    length1: float = 1.5
    length2: float = 1.5
    end1: str = "none"
    end2: str = "none"
    uuid: UUID = field(default_factory=uuid4)

    def scale(self, fact_x: float, fact_y: float) -> None:
        self.x1 *= fact_x
        self.x2 *= fact_x
        self.y1 *= fact_y
        self.y2 *= fact_y

    def left_bound(self) -> float:
        return min(self.x1, self.x2)

    def right_bound(self) -> float:
        return max(self.x1, self.x2)

    def top_bound(self) -> float:
        return min(self.y1, self.y2)

    def bot_bound(self) -> float:
        return max(self.y1, self.y2)

    def to_xml(self) -> ET.Element:
        return ET.Element(
            "line",
            {
                "x1": two_dec(self.x1),
                "y1": two_dec(self.y1),
                "x2": two_dec(self.x2),
                "y2": two_dec(self.y2),
                "length1": two_dec(self.length1),
                "length2": two_dec(self.length2),
                "end1": self.end1,
                "end2": self.end2,
                "antialias": "false",
                "style": str(self.style),
            },
        )


@dataclass
class Ellipse(Element):
    """Axis-aligned ellipse given by its bounding rectangle; circles are ellipses too."""

    x: float
    y: float
    width: float
    height: float
    style: Style = field(default_factory=Style)
    uuid: UUID = field(default_factory=uuid4)

    tag: ClassVar[str] = "ellipse"

    def scale(self, fact_x: float, fact_y: float) -> None:
        self.x *= fact_x
        self.width *= fact_x
        self.y *= fact_y
        self.height *= fact_y

    def left_bound(self) -> float:
        return self.x

    def right_bound(self) -> float:
        return self.x + self.width

    def top_bound(self) -> float:
        return self.y

    def bot_bound(self) -> float:
        return self.y + self.height

    def _xml_attributes(self) -> dict[str, str]:
        return {
            "x": two_dec(self.x),
            "y": two_dec(self.y),
            "width": two_dec(self.width),
            "height": two_dec(self.height),
        }

    def to_xml(self) -> ET.Element:
        attributes = self._xml_attributes()
        attributes["antialias"] = "false"
        attributes["style"] = str(self.style)
        return ET.Element(self.tag, attributes)


@dataclass
class Arc(Ellipse):
    """Elliptic arc: ``start`` and the counter-clockwise span ``angle`` in degrees."""

    start: float = 0.0
    angle: float = 360.0

    tag: ClassVar[str] = "arc"

    def _xml_attributes(self) -> dict[str, str]:
        attributes = super()._xml_attributes()
        attributes["start"] = two_dec(self.start)
        attributes["angle"] = two_dec(self.angle)
        return attributes


@dataclass
class Polygon(Element):
    points: list[Point2D]
    closed: bool = False
    style: Style = field(default_factory=Style)
    uuid: UUID = field(default_factory=uuid4)

    def scale(self, fact_x: float, fact_y: float) -> None:
        self.points = [(x * fact_x, y * fact_y) for x, y in self.points]

    def left_bound(self) -> float:
        return min(x for x, _ in self.points)

    def right_bound(self) -> float:
        return max(x for x, _ in self.points)

    def top_bound(self) -> float:
        return min(y for _, y in self.points)

    def bot_bound(self) -> float:
        return max(y for _, y in self.points)

    def to_xml(self) -> ET.Element:
        attributes: dict[str, str] = {}
        for index, (x, y) in enumerate(self.points, start=1):
            attributes[f"x{index}"] = two_dec(x)
            attributes[f"y{index}"] = two_dec(y)
        attributes["closed"] = "true" if self.closed else "false"
        attributes["antialias"] = "false"
        attributes["style"] = str(self.style)
        return ET.Element("polygon", attributes)
