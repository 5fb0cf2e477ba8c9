from __future__ import annotations

import math
from typing import Any, Sequence

from ezdxf.math import BSpline, ConstructionEllipse, bulge_to_arc, global_bspline_interpolation

from .entity import Point3D

MIN_SPLINE_STEP = 1
MAX_SPLINE_STEP = 200
DEFAULT_SPLINE_STEP = 20

Point2D = tuple[float, float]


def check_spline_step(segments: int) -> int:
    if not MIN_SPLINE_STEP <= int(segments) <= MAX_SPLINE_STEP:
        raise ValueError(
            f"spline step must be between {MIN_SPLINE_STEP} and {MAX_SPLINE_STEP}, got {segments}"
        )
    return int(segments)


def tessellate_spline(dxf: dict[str, Any], segments: int) -> list[Point2D]:
    """Approximate a SPLINE by ``segments`` straight lines, in source coordinates.

    Control points win over fit points; a spline that has neither enough
    control points nor enough fit points falls back to whatever points it has.
    """
    segments = check_spline_step(segments)
    control_points = [tuple(point) for point in dxf.get("control_points") or []]
    fit_points = [tuple(point) for point in dxf.get("fit_points") or []]
    degree = max(1, int(dxf.get("degree", 3)))
    closed = bool(dxf.get("closed", False))

    if len(control_points) >= 2:
        spline = _control_point_spline(control_points, degree, dxf)
        points = [(vertex.x, vertex.y) for vertex in spline.approximate(segments)]
    elif len(fit_points) >= 2:
        degree = min(degree, len(fit_points) - 1)
        if degree < 2:
            points = [(point[0], point[1]) for point in fit_points]
        else:
            spline = global_bspline_interpolation(fit_points, degree=degree)
            points = [(vertex.x, vertex.y) for vertex in spline.approximate(segments)]
    else:
        points = [(point[0], point[1]) for point in control_points or fit_points]

    if closed and len(points) > 1 and points[0] != points[-1]:
        points.append(points[0])
    return points


def _control_point_spline(control_points: list[Point3D], degree: int, dxf: dict[str, Any]) -> BSpline:
    order = min(degree, len(control_points) - 1) + 1
    knots: list[float] | None = [float(value) for value in dxf.get("knots") or []]
    if len(knots) != len(control_points) + order:
        # Missing or inconsistent knot vector: use an open uniform one.
        knots = None
    weights: list[float] | None = [float(value) for value in dxf.get("weights") or []]
    if len(weights) != len(control_points):
        weights = None
    return BSpline(control_points, order=order, knots=knots, weights=weights)


def tessellate_ellipse(dxf: dict[str, Any], segments: int) -> list[Point2D]:
    segments = check_spline_step(segments)
    ellipse = ConstructionEllipse(
        center=dxf.get("center", (0.0, 0.0, 0.0)),
        major_axis=dxf.get("major_axis", (1.0, 0.0, 0.0)),
        ratio=float(dxf.get("ratio", 1.0)),
        start_param=float(dxf.get("start_param", 0.0)),
        end_param=float(dxf.get("end_param", math.tau)),
    )
    return [(vertex.x, vertex.y) for vertex in ellipse.vertices(ellipse.params(segments + 1))]


def tessellate_bulge(
    start: Sequence[float],
    end: Sequence[float],
    bulge: float,
    segments: int,
) -> list[Point2D]:
    """Intermediate points of a bulged polyline segment, excluding both ends."""
    segments = check_spline_step(segments)
    if bulge == 0.0 or (start[0], start[1]) == (end[0], end[1]):
        return []
    center, _, _, radius = bulge_to_arc((start[0], start[1]), (end[0], end[1]), bulge)
    # Positive bulge runs counter-clockwise from start to end, negative clockwise.
    sweep = 4.0 * math.atan(bulge)
    start_angle = math.atan2(start[1] - center.y, start[0] - center.x)
    points = []
    for step in range(1, segments):
        angle = start_angle + sweep * step / segments
        points.append((center.x + radius * math.cos(angle), center.y + radius * math.sin(angle)))
    return points
