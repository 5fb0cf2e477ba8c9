from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable
from uuid import UUID, uuid4

from ezdxf.math import ellipse_param_span

from .elements import Arc, Element, Ellipse, Line, Polygon, Style
from .entity import Entity
from .spline import DEFAULT_SPLINE_STEP, tessellate_bulge, tessellate_ellipse, tessellate_spline
from .text import build_dynamic_text

Point2D = tuple[float, float]

_AXIS_TOLERANCE = 1.0e-9


@dataclass
class ConversionContext:
    """State owned by a single conversion call."""

    spline_step: int = DEFAULT_SPLINE_STEP
    uuid_factory: Callable[[], UUID] = uuid4
    elements: list[Element] = field(default_factory=list)

    def add(self, entity: Entity) -> Element | None:
        element = convert_entity(entity, self)
        if element is not None:
            self.elements.append(element)
        return element


def convert_entity(entity: Entity, context: ConversionContext) -> Element | None:
    """Convert one entity, or return None when it has no element counterpart."""
    try:
        return _convert_entity_unsafe(entity, context)
    except Exception:
        # Geometry that cannot be converted only shows up in the statistics.
        return None


def _convert_entity_unsafe(entity: Entity, context: ConversionContext) -> Element | None:
    dxftype = entity.dxftype
    dxf = entity.dxf
    new_uuid = context.uuid_factory

    if dxftype == "LINE":
        x1, y1 = _flip(dxf.get("start"))
        x2, y2 = _flip(dxf.get("end"))
        return Line(x1, y1, x2, y2, style=_style(dxf), uuid=new_uuid())

    if dxftype == "CIRCLE":
        cx, cy = _flip(dxf.get("center"))
        radius = float(dxf.get("radius", 0.0))
        return Ellipse(
            cx - radius,
            cy - radius,
            2.0 * radius,
            2.0 * radius,
            style=_style(dxf),
            uuid=new_uuid(),
        )

    if dxftype == "ARC":
        cx, cy = _flip(dxf.get("center"))
        radius = float(dxf.get("radius", 0.0))
        start_angle = float(dxf.get("start_angle", 0.0))
        span = (float(dxf.get("end_angle", 360.0)) - start_angle) % 360.0
        return Arc(
            cx - radius,
            cy - radius,
            2.0 * radius,
            2.0 * radius,
            style=_style(dxf),
            start=start_angle,
            angle=span or 360.0,
            uuid=new_uuid(),
        )

    if dxftype == "ELLIPSE":
        return _convert_ellipse(dxf, context)

    if dxftype in {"LWPOLYLINE", "POLYLINE"}:
        return _convert_polyline(dxf, context)

    if dxftype == "SOLID":
        points = [_flip(point) for point in dxf.get("points", [])]
        if len(points) < 3:
            return None
        # SOLID corners are stored in 1-2-4-3 order.
        if len(points) == 4:
            points = [points[0], points[1], points[3], points[2]]
            if points[2] == points[3]:
                points = points[:3]
        return Polygon(points, closed=True, style=_style(dxf, filled=True), uuid=new_uuid())

    if dxftype == "SPLINE":
        points = [_flip(point) for point in tessellate_spline(dxf, context.spline_step)]
        if len(points) < 2:
            return None
        return Polygon(points, closed=False, style=_style(dxf), uuid=new_uuid())

    if entity.is_text:
        return build_dynamic_text(entity, uuid_factory=new_uuid)

    # INSERT and everything else: counted, never expanded.
    return None


def _convert_ellipse(dxf: dict[str, Any], context: ConversionContext) -> Element | None:
    major_x, major_y, _ = dxf.get("major_axis", (1.0, 0.0, 0.0))
    ratio = float(dxf.get("ratio", 1.0))
    span = ellipse_param_span(float(dxf.get("start_param", 0.0)), float(dxf.get("end_param", math.tau)))
    full = math.isclose(span, math.tau)

    if full and (abs(major_x) < _AXIS_TOLERANCE or abs(major_y) < _AXIS_TOLERANCE):
        cx, cy = _flip(dxf.get("center"))
        major = math.hypot(major_x, major_y)
        rx, ry = major, major * ratio
        if abs(major_x) < _AXIS_TOLERANCE:
            rx, ry = ry, rx
        return Ellipse(
            cx - rx,
            cy - ry,
            2.0 * rx,
            2.0 * ry,
            style=_style(dxf),
            uuid=context.uuid_factory(),
        )

    points = [_flip(point) for point in tessellate_ellipse(dxf, context.spline_step)]
    if full:
        points = points[:-1]
    if len(points) < 2:
        return None
    return Polygon(points, closed=full, style=_style(dxf), uuid=context.uuid_factory())


def _convert_polyline(dxf: dict[str, Any], context: ConversionContext) -> Element | None:
    vertices = list(dxf.get("points", []))
    if len(vertices) < 2:
        return None
    bulges = list(dxf.get("bulges", []) or [])
    closed = bool(dxf.get("closed", False))

    points: list[Point2D] = []
    for index, vertex in enumerate(vertices):
        points.append(_flip(vertex))
        bulge = bulges[index] if index < len(bulges) else 0.0
        if not bulge:
            continue
        if index + 1 < len(vertices):
            following = vertices[index + 1]
        elif closed:
            following = vertices[0]
        else:
            continue
        points.extend(_flip(point) for point in tessellate_bulge(vertex, following, bulge, context.spline_step))

    return Polygon(points, closed=closed, style=_style(dxf), uuid=context.uuid_factory())


def _style(dxf: dict[str, Any], *, filled: bool = False) -> Style:
    return Style.from_aci(dxf.get("color_index"), filled=filled)


def _flip(value: Any) -> Point2D:
    """Read a source point and move it into the target's Y-down space."""
    if value is None:
        return (0.0, 0.0)
    if isinstance(value, (list, tuple)) and len(value) >= 2:
        return (float(value[0]), -float(value[1]))
    raise ValueError(f"invalid point value: {value!r}")
