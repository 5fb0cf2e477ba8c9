from __future__ import annotations

import time
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable, Iterable
from uuid import UUID, uuid4

from . import writer
from .classify import count_entities
from .definition import Definition, build_definition
from .document import friendly_name, read
from .entity import Entity
from .errors import Dxf2ElmtError
from .geometry import ConversionContext
from .spline import DEFAULT_SPLINE_STEP, check_spline_step


@dataclass(frozen=True)
class ConversionOptions:
    spline_step: int = DEFAULT_SPLINE_STEP
    verbose: bool = False
    info: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "spline_step", check_spline_step(self.spline_step))


@dataclass(frozen=True)
class ConversionStats:
    circles: int = 0
    lines: int = 0
    arcs: int = 0
    splines: int = 0
    texts: int = 0
    ellipses: int = 0
    polylines: int = 0
    lwpolylines: int = 0
    solids: int = 0
    blocks: int = 0
    unsupported: int = 0
    elapsed_ms: int = 0

    @classmethod
    def from_counts(cls, counts: dict[str, int], elapsed_ms: int) -> "ConversionStats":
        names = {f.name for f in fields(cls)} - {"elapsed_ms"}
        return cls(elapsed_ms=elapsed_ms, **{name: counts.get(name, 0) for name in names})

    def counts(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "elapsed_ms"}


@dataclass(frozen=True)
class ConversionResult:
    success: bool
    message: str
    stats: ConversionStats | None = None
    xml_content: str | None = None
    output_path: str | None = None
    error: str | None = None


def to_definition(
    name: str,
    entities: Iterable[Entity],
    *,
    spline_step: int = DEFAULT_SPLINE_STEP,
    uuid_factory: Callable[[], UUID] = uuid4,
) -> Definition:
    step = check_spline_step(spline_step)
    context = ConversionContext(spline_step=step, uuid_factory=uuid_factory)
    for entity in entities:
        context.add(entity)
    return build_definition(name, step, context.elements, uuid_factory=uuid_factory)


def convert(
    path: str | Path,
    options: ConversionOptions | None = None,
    *,
    uuid_factory: Callable[[], UUID] = uuid4,
) -> ConversionResult:
    """Convert one DXF file.

    Raises LoadError when the file cannot be read and WriteError when the
    .elmt file cannot be written.
    """
    options = options or ConversionOptions()
    started = time.perf_counter()
    file_path = Path(path)

    doc = read(file_path)
    definition = to_definition(
        doc.name,
        doc.entities,
        spline_step=options.spline_step,
        uuid_factory=uuid_factory,
    )
    tree = definition.to_xml()

    xml_content = None
    output_path = None
    if options.verbose:
        xml_content = writer.to_string(tree)
    else:
        output_path = str(writer.write_elmt(tree, writer.output_path_for(file_path)))

    stats = None
    if options.info:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        stats = ConversionStats.from_counts(count_entities(doc.entities), elapsed_ms)

    return ConversionResult(
        success=True,
        message=f"Successfully converted {doc.name}",
        stats=stats,
        xml_content=xml_content,
        output_path=output_path,
    )


def convert_dxf_file(
    path: str | Path,
    options: ConversionOptions | None = None,
    *,
    uuid_factory: Callable[[], UUID] = uuid4,
) -> ConversionResult:
    """Like convert(), but failures come back as an unsuccessful result."""
    try:
        return convert(path, options, uuid_factory=uuid_factory)
    except Dxf2ElmtError as exc:
        return ConversionResult(
            success=False,
            message=str(exc) or f"Failed to convert {friendly_name(Path(path))}",
            error=exc.kind,
        )
