from __future__ import annotations

import argparse
import glob
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from .convert import ConversionOptions, ConversionResult, ConversionStats, convert_dxf_file
from .spline import DEFAULT_SPLINE_STEP, MAX_SPLINE_STEP, MIN_SPLINE_STEP

LOG_ENV_VAR = "DXF2E_LOG"

_STAT_LABELS = (
    ("circles", "Circles"),
    ("lines", "Lines"),
    ("arcs", "Arcs"),
    ("splines", "Splines"),
    ("texts", "Texts"),
    ("ellipses", "Ellipses"),
    ("polylines", "Polylines"),
    ("lwpolylines", "LwPolylines"),
    ("solids", "Solids"),
    ("blocks", "Blocks"),
    ("unsupported", "Currently Unsupported"),
)

logger = logging.getLogger(__name__)


def _package_version() -> str:
    try:
        return version("dxf2elmt")
    except PackageNotFoundError:
        return "0.0.0"


def _spline_step(value: str) -> int:
    try:
        step = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid spline step: {value!r}") from None
    if not MIN_SPLINE_STEP <= step <= MAX_SPLINE_STEP:
        raise argparse.ArgumentTypeError(
            f"spline step must be between {MIN_SPLINE_STEP} and {MAX_SPLINE_STEP}"
        )
    return step


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dxf2elmt",
        description="Convert .dxf files into QElectroTech .elmt files.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    parser.add_argument("file_names", nargs="*", help="The .dxf file(s) to convert.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print the generated XML instead of writing .elmt files.",
    )
    parser.add_argument(
        "-s",
        "--spline-step",
        type=_spline_step,
        default=DEFAULT_SPLINE_STEP,
        help=(
            "Number of lines used to approximate each spline or curve "
            f"({MIN_SPLINE_STEP}-{MAX_SPLINE_STEP}, more lines = greater resolution)."
        ),
    )
    parser.add_argument(
        "-i",
        "--info",
        action="store_true",
        help="Print per-entity statistics and timing for each file.",
    )
    return parser


def _configure_logging() -> None:
    level_name = os.environ.get(LOG_ENV_VAR, "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _expand_file_names(file_names: Sequence[str]) -> list[Path]:
    # Shells on Windows leave wildcards to the program.
    paths: list[Path] = []
    for name in file_names:
        matches = sorted(glob.glob(name)) if glob.has_magic(name) else []
        paths.extend(Path(match) for match in matches or [name])
    return paths


def _print_stats(stats: ConversionStats) -> None:
    print("Conversion complete!\n")
    print("STATS")
    print("~~~~~~~~~~~~~~~")
    for name, label in _STAT_LABELS:
        print(f"{label}: {getattr(stats, name)}")
    print(f"\nTime Elapsed: {stats.elapsed_ms} ms")


def _report(result: ConversionResult, *, verbose: bool, info: bool) -> None:
    if info and not verbose:
        print(f"{result.message} -> {result.output_path}")
    if info and result.stats is not None:
        _print_stats(result.stats)
    if verbose:
        sys.stdout.write(result.xml_content or "")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging()

    if not args.file_names:
        print("error: no input files specified.", file=sys.stderr)
        print("\nUsage: dxf2elmt <file.dxf> [options]", file=sys.stderr)
        print("\nFor more information, use: dxf2elmt --help", file=sys.stderr)
        return 1

    options = ConversionOptions(
        spline_step=args.spline_step,
        verbose=bool(args.verbose),
        info=bool(args.info),
    )

    failed = 0
    for path in _expand_file_names(args.file_names):
        logger.info("converting %s", path)
        result = convert_dxf_file(path, options)
        if not result.success:
            failed += 1
            logger.debug("%s failed with a %s error", path, result.error)
            print(f"error: {result.message}", file=sys.stderr)
            continue
        _report(result, verbose=options.verbose, info=options.info)

    return 2 if failed else 0
