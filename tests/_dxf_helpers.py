from __future__ import annotations

import itertools
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Callable, Iterator
from uuid import UUID

from dxf2elmt.entity import Entity


def save_dxf(path: Path, build: Callable[[Any], None]) -> Path:
    import ezdxf

    doc = ezdxf.new("R2010")
    build(doc)
    doc.saveas(path)
    return path


def entity(dxftype: str, **dxf: Any) -> Entity:
    dxf.setdefault("color_index", 7)
    return Entity(dxftype=dxftype, handle="0", dxf=dxf)


def counting_uuids() -> Callable[[], UUID]:
    counter: Iterator[int] = itertools.count(1)
    return lambda: UUID(int=next(counter))


def parse_elmt(source: str | Path) -> ET.Element:
    if isinstance(source, Path):
        return ET.parse(source).getroot()
    return ET.fromstring(source)


def description_children(root: ET.Element, tag: str | None = None) -> list[ET.Element]:
    description = root.find("description")
    assert description is not None
    return [child for child in description if tag is None or child.tag == tag]


def float_attr(node: ET.Element, name: str) -> float:
    value = node.get(name)
    assert value is not None, f"missing attribute {name}"
    return float(value)
