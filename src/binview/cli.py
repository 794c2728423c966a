"""CLI entry point for binview."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

import binview.core.palette
import binview.io.logging_setup
import binview.settings
import binview.tui.rendering
from binview.core.layout import DisplayFormat
from binview.core.ranges import ByteRange
from binview.core.rows import build_rows
from binview.io.annotations import AnnotationLoadError, default_tree, load_annotations
from binview.tui.app import BinviewApp

logger = logging.getLogger(__name__)


def _parse_selection(raw: str) -> tuple[int, int]:
    """Parse START:LENGTH (either part decimal or 0x-prefixed hex)."""
    start, sep, length = raw.partition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected START:LENGTH, got {raw!r}")
    try:
        values = int(start, 0), int(length, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected START:LENGTH, got {raw!r}") from None
    if values[0] < 0 or values[1] < 0:
        raise argparse.ArgumentTypeError(f"START and LENGTH must be >= 0, got {raw!r}")
    return values


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {raw!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {raw!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Annotated hex/binary viewer")
    parser.add_argument("path", type=str, help="File to view")
    parser.add_argument(
        "--annotations",
        type=str,
        default=None,
        help="JSON annotation tree to color the bytes with",
    )
    parser.add_argument(
        "--no-auto-color",
        action="store_true",
        default=False,
        help="Leave annotation leaves without an explicit color uncolored",
    )
    parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in DisplayFormat],
        default=None,
        help="Display format (default: from settings, else hex)",
    )
    parser.add_argument(
        "--max-rows",
        type=_positive_int,
        default=None,
        help="Maximum rows to render (default: from settings, else 1000)",
    )
    parser.add_argument(
        "--select",
        type=_parse_selection,
        default=None,
        metavar="START:LENGTH",
        help="Initial byte selection, e.g. 0x40:16",
    )
    parser.add_argument(
        "--seed-hue",
        type=float,
        default=None,
        help="Seed hue (0-360) for annotation colors (default: 190, cyan). Env: BINVIEW_SEED_HUE",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        default=False,
        help="Print the rendered rows to stdout instead of starting the viewer",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    source = Path(args.path)

    # [LAW:single-enforcer] Runtime logger configuration is centralized in io.logging_setup.
    log_runtime = binview.io.logging_setup.configure(source_name=source.name)
    logger.info(
        "logging configured source=%s level=%s file=%s",
        log_runtime.source_name,
        log_runtime.level_name,
        log_runtime.file_path,
    )

    # Initialize palette before annotations pick colors from it
    binview.core.palette.init_palette(args.seed_hue)
    logger.debug("palette seed_hue=%.1f", binview.core.palette.PALETTE.seed_hue)

    try:
        data = source.read_bytes()
    except OSError as exc:
        logger.error("cannot read %s: %s", source, exc)
        return 1
    buffer = ByteRange.of(data)
    logger.info("read %s bytes=%d", source, buffer.byte_length)

    if args.annotations:
        try:
            tree = load_annotations(args.annotations, buffer, auto_color=not args.no_auto_color)
        except AnnotationLoadError as exc:
            logger.error("annotation load failed: %s", exc)
            return 1
    else:
        tree = default_tree(buffer)

    fmt = DisplayFormat(args.format) if args.format else binview.settings.load_default_format()
    max_rows = args.max_rows or binview.settings.load_max_rows()
    selection = ByteRange(data, *args.select) if args.select else None

    if args.dump:
        result = build_rows(buffer, tree, selection, fmt, max_rows)
        console = Console(soft_wrap=True)
        for line in binview.tui.rendering.render_lines(result):
            console.print(line)
        return 0

    app = BinviewApp(
        buffer,
        tree,
        source_name=source.name,
        max_rows=max_rows,
        fmt=fmt,
        selection=selection,
        on_format_change=binview.settings.save_default_format,
    )
    app.run()
    return 0
