from __future__ import annotations

from dataclasses import dataclass
from typing import Any

Point3D = tuple[float, float, float]

TEXT_TYPES = frozenset({"TEXT", "MTEXT", "ATTDEF"})


@dataclass(frozen=True)
class Entity:
    """A drawing entity as read from the DXF file, in source (Y-up) coordinates."""

    dxftype: str
    handle: str
    dxf: dict[str, Any]

    @property
    def is_text(self) -> bool:
        return self.dxftype in TEXT_TYPES
