from __future__ import annotations

import copy
import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from .errors import WriteError

ELMT_SUFFIX = ".elmt"

logger = logging.getLogger(__name__)


def output_path_for(source: str | Path) -> Path:
    return Path(source).with_suffix(ELMT_SUFFIX)


def _indented(tree: ET.Element) -> ET.Element:
    tree = copy.deepcopy(tree)
    ET.indent(tree, space="    ")
    return tree


def to_string(tree: ET.Element) -> str:
    return ET.tostring(_indented(tree), encoding="unicode") + "\n"


def write_elmt(tree: ET.Element, output_path: str | Path) -> Path:
    out_path = Path(output_path)
    logger.debug("writing %s", out_path)
    try:
        ET.ElementTree(_indented(tree)).write(str(out_path), encoding="utf-8", xml_declaration=True)
    except OSError as exc:
        raise WriteError(f"Failed to write output file {out_path}: {exc}") from exc
    return out_path
