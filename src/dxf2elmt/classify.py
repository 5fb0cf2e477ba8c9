from __future__ import annotations

from typing import Iterable

from .entity import Entity

UNSUPPORTED = "unsupported"

KIND_LABELS = {
    "CIRCLE": "circles",
    "LINE": "lines",
    "ARC": "arcs",
    "SPLINE": "splines",
    "TEXT": "texts",
    "MTEXT": "texts",
    "ATTDEF": "texts",
    "ELLIPSE": "ellipses",
    "POLYLINE": "polylines",
    "LWPOLYLINE": "lwpolylines",
    "SOLID": "solids",
    "INSERT": "blocks",
}

LABELS: tuple[str, ...] = tuple(dict.fromkeys([*KIND_LABELS.values(), UNSUPPORTED]))


def kind_label(dxftype: str) -> str:
    return KIND_LABELS.get(dxftype.upper(), UNSUPPORTED)


def count_entities(entities: Iterable[Entity]) -> dict[str, int]:
    counts = dict.fromkeys(LABELS, 0)
    for entity in entities:
        counts[kind_label(entity.dxftype)] += 1
    return counts
