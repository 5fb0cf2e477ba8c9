from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import ezdxf
from ezdxf.lldxf.const import DXFError

from .entity import Entity, Point3D
from .errors import LoadError

BYBLOCK = 0
BYLAYER = 256


def read(path: str | Path) -> "Document":
    file_path = Path(path)
    name = friendly_name(file_path)
    try:
        dxf_doc = ezdxf.readfile(str(file_path))
    except (OSError, DXFError, UnicodeDecodeError) as exc:
        raise LoadError(
            f"Failed to load {name}...\n\tMake sure the file is a valid .dxf file."
        ) from exc

    layer_colors = _layer_color_map(dxf_doc)
    entities = tuple(_to_entity(entity, layer_colors) for entity in dxf_doc.modelspace())
    return Document(path=str(file_path), name=name, entities=entities)


def friendly_name(path: Path) -> str:
    return path.stem or path.name or str(path)


@dataclass(frozen=True)
class Document:
    path: str
    name: str
    entities: tuple[Entity, ...]


def _layer_color_map(dxf_doc: Any) -> dict[str, int]:
    # Layer.color is always positive, dxf.color turns negative for layers switched off.
    return {layer.dxf.name.lower(): layer.color for layer in dxf_doc.layers}


def _to_entity(entity: Any, layer_colors: dict[str, int]) -> Entity:
    dxftype = entity.dxftype()
    dxf = _entity_geometry(entity, dxftype)
    dxf.update(_entity_color(entity, layer_colors))
    return Entity(dxftype=dxftype, handle=str(entity.dxf.get("handle", "0")), dxf=dxf)


def _entity_geometry(entity: Any, dxftype: str) -> dict[str, Any]:
    attribs = entity.dxf

    if dxftype == "LINE":
        return {"start": _point3(attribs.start), "end": _point3(attribs.end)}

    if dxftype == "CIRCLE":
        return {"center": _point3(attribs.center), "radius": float(attribs.radius)}

    if dxftype == "ARC":
        return {
            "center": _point3(attribs.center),
            "radius": float(attribs.radius),
            "start_angle": float(attribs.start_angle),
            "end_angle": float(attribs.end_angle),
        }

    if dxftype == "ELLIPSE":
        return {
            "center": _point3(attribs.center),
            "major_axis": _point3(attribs.major_axis),
            "ratio": float(attribs.ratio),
            "start_param": float(attribs.start_param),
            "end_param": float(attribs.end_param),
        }

    if dxftype == "SPLINE":
        return {
            "degree": int(attribs.degree),
            "control_points": [_point3(point) for point in entity.control_points],
            "knots": [float(value) for value in entity.knots],
            "weights": [float(value) for value in entity.weights],
            "fit_points": [_point3(point) for point in entity.fit_points],
            "closed": bool(entity.closed),
        }

    if dxftype in {"TEXT", "ATTDEF"}:
        dxf = {
            "insert": _point3(attribs.insert),
            "height": float(attribs.height),
            "rotation": float(attribs.rotation),
            "style": str(attribs.style),
            "text": str(attribs.text),
            "halign": int(attribs.halign),
            "valign": int(attribs.valign),
        }
        if dxftype == "ATTDEF":
            dxf["tag"] = str(attribs.get("tag", ""))
        return dxf

    if dxftype == "MTEXT":
        return {
            "insert": _point3(attribs.insert),
            "char_height": float(attribs.char_height),
            "rotation": float(attribs.get("rotation", 0.0)),
            "style": str(attribs.style),
            # MText.text joins the 250-character chunks in file order.
            "text": str(entity.text),
            "attachment_point": int(attribs.attachment_point),
            "width": float(attribs.get("width", 0.0)),
        }

    if dxftype == "LWPOLYLINE":
        vertices = list(entity.get_points("xyb"))
        return {
            "points": [(float(x), float(y), 0.0) for x, y, _ in vertices],
            "bulges": [float(bulge) for _, _, bulge in vertices],
            "closed": bool(entity.closed),
        }

    if dxftype == "POLYLINE":
        vertices = list(entity.vertices)
        return {
            "points": [_point3(vertex.dxf.location) for vertex in vertices],
            "bulges": [float(vertex.dxf.get("bulge", 0.0)) for vertex in vertices],
            "closed": bool(entity.is_closed),
        }

    if dxftype == "SOLID":
        vtx2 = attribs.vtx2
        return {
            "points": [
                _point3(attribs.vtx0),
                _point3(attribs.vtx1),
                _point3(vtx2),
                _point3(attribs.get("vtx3", vtx2)),
            ]
        }

    if dxftype == "INSERT":
        return {"name": str(attribs.name), "insert": _point3(attribs.insert)}

    return {}


def _entity_color(entity: Any, layer_colors: dict[str, int]) -> dict[str, Any]:
    attribs = entity.dxf
    aci = int(attribs.get("color", BYLAYER))
    if aci == BYLAYER:
        aci = layer_colors.get(str(attribs.get("layer", "0")).lower(), 7)
    elif aci == BYBLOCK:
        aci = 7
    color: dict[str, Any] = {"color_index": abs(aci)}
    true_color = attribs.get("true_color")
    if true_color is not None:
        color["true_color"] = int(true_color) & 0xFFFFFF
    return color


def _point3(value: Any) -> Point3D:
    if value is None:
        return (0.0, 0.0, 0.0)
    coords = tuple(value)
    if len(coords) >= 3:
        return (float(coords[0]), float(coords[1]), float(coords[2]))
    if len(coords) >= 2:
        return (float(coords[0]), float(coords[1]), 0.0)
    raise ValueError(f"invalid point value: {value!r}")
