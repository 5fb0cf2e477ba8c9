from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence
from uuid import UUID, uuid4

from .elements import Element

ELMT_VERSION = "0.100.0"


@dataclass(frozen=True)
class Bounds:
    left: float
    top: float
    right: float
    bot: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bot - self.top


EMPTY_BOUNDS = Bounds(0.0, 0.0, 0.0, 0.0)


def aggregate_bounds(elements: Iterable[Element]) -> Bounds:
    """Bounding box of all elements.

    Elements with ``approximate_bounds`` only contribute their anchor point,
    their right/bottom placeholders are ignored.
    """
    lefts: list[float] = []
    tops: list[float] = []
    rights: list[float] = []
    bots: list[float] = []
    for element in elements:
        left = element.left_bound()
        top = element.top_bound()
        lefts.append(left)
        tops.append(top)
        if element.approximate_bounds:
            rights.append(left)
            bots.append(top)
        else:
            rights.append(element.right_bound())
            bots.append(element.bot_bound())
    if not lefts:
        return EMPTY_BOUNDS
    return Bounds(min(lefts), min(tops), max(rights), max(bots))


def _round_up_10(value: float) -> int:
    return max(10, int(math.ceil(value / 10.0 - 1.0e-9)) * 10)


@dataclass
class Definition:
    name: str
    spline_step: int
    elements: list[Element]
    bounds: Bounds = EMPTY_BOUNDS
    scale: tuple[float, float] = (1.0, 1.0)
    uuid: UUID = field(default_factory=uuid4)

    @property
    def width(self) -> int:
        return _round_up_10(self.bounds.width)

    @property
    def height(self) -> int:
        return _round_up_10(self.bounds.height)

    @property
    def hotspot(self) -> tuple[int, int]:
        return (int(round(-self.bounds.left)), int(round(-self.bounds.top)))

    def to_xml(self) -> ET.Element:
        hotspot_x, hotspot_y = self.hotspot
        root = ET.Element(
            "definition",
            {
                "type": "element",
                "width": str(self.width),
                "height": str(self.height),
                "hotspot_x": str(hotspot_x),
                "hotspot_y": str(hotspot_y),
                "version": ELMT_VERSION,
                "link_type": "simple",
            },
        )
        ET.SubElement(root, "uuid", {"uuid": f"{{{self.uuid}}}"})
        names = ET.SubElement(root, "names")
        ET.SubElement(names, "name", {"lang": "en"}).text = self.name
        ET.SubElement(root, "elementInformations")
        ET.SubElement(root, "informations").text = (
            f"Created using dxf2elmt! (spline step {self.spline_step})"
        )
        description = ET.SubElement(root, "description")
        for element in self.elements:
            description.append(element.to_xml())
        return root


def build_definition(
    name: str,
    spline_step: int,
    elements: Sequence[Element],
    *,
    scale: tuple[float, float] = (1.0, 1.0),
    uuid_factory: Callable[[], UUID] = uuid4,
) -> Definition:
    """Scale the converted elements and wrap them up.

    The same factor pair is applied to every element exactly once. It does not
    depend on the extent of the drawing, so output size stays proportional to
    the input.
    """
    fact_x, fact_y = scale
    for element in elements:
        element.scale(fact_x, fact_y)
    return Definition(
        name=name,
        spline_step=spline_step,
        elements=list(elements),
        bounds=aggregate_bounds(elements),
        scale=(fact_x, fact_y),
        uuid=uuid_factory(),
    )
