from typing import Sequence

from .classify import count_entities
from .convert import (
    ConversionOptions,
    ConversionResult,
    ConversionStats,
    convert,
    convert_dxf_file,
    to_definition,
)
from .definition import Definition
from .document import Document, read
from .entity import Entity
from .errors import Dxf2ElmtError, LoadError, WriteError
from .text import extract_mtext_font, normalize_mtext

__all__ = [
    "read",
    "Document",
    "Entity",
    "Definition",
    "convert",
    "convert_dxf_file",
    "to_definition",
    "count_entities",
    "normalize_mtext",
    "extract_mtext_font",
    "ConversionOptions",
    "ConversionResult",
    "ConversionStats",
    "Dxf2ElmtError",
    "LoadError",
    "WriteError",
]


def main(argv: Sequence[str] | None = None) -> int:
    from dxf2elmt.cli import main as cli_main

    return cli_main(argv)
