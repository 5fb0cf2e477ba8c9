from __future__ import annotations


class Dxf2ElmtError(Exception):
    """Base class for conversion failures reported to the caller."""

    kind = "conversion"


class LoadError(Dxf2ElmtError):
    """The DXF file could not be opened or parsed."""

    kind = "load"


class WriteError(Dxf2ElmtError):
    """The .elmt file could not be created or written."""

    kind = "write"
