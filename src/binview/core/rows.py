"""Build the renderable row model for the hex and binary formats.

Input is a buffer, an annotation tree, the current selection and a row
budget; output is either a ``RowModel`` (rows of cells carrying value,
selection flag, color and offsets) or ``TooLarge`` when the binary format
cannot show the whole buffer within the budget. Nothing is cached between
calls and no input is retained.

Hex: 16 bytes per row, groups of 8, one cell per byte. Windowed around the
selection when the buffer exceeds the row budget.

Binary: 8 bytes per row, groups of 4, one cell per bit (MSB first). Never
windowed; oversized buffers yield ``TooLarge``. Bit cells take the color of
their enclosing byte since annotations are byte-addressed.

// [LAW:dataflow-not-control-flow] build_rows() is a pure function of its inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from binview.core.color_resolver import resolve_color
from binview.core.layout import (
    BINARY_LAYOUT,
    DEFAULT_MAX_ROWS,
    HEX_LAYOUT,
    DisplayFormat,
    FormatLayout,
)
from binview.core.palette import Color
from binview.core.ranges import (
    BITS_PER_BYTE,
    BitRange,
    ByteRange,
    Selection,
    selection_byte_range,
)
from binview.core.tree import AnnotationNode
from binview.core.windowing import ViewportRequest, Window, compute_window

logger = logging.getLogger(__name__)

TOO_LARGE_MESSAGE = "File is too large for binary view."


@dataclass(frozen=True)
class Cell:
    value: int  # byte 0-255 in hex rows, bit 0/1 in binary rows
    selected: bool
    color: Color
    byte_offset: int
    bit_offset: int | None = None


@dataclass(frozen=True)
class RenderedRow:
    byte_start: int
    cells: tuple[Cell, ...]
    cells_per_group: int

    def groups(self) -> tuple[tuple[Cell, ...], ...]:
        n = self.cells_per_group
        return tuple(self.cells[i : i + n] for i in range(0, len(self.cells), n))


@dataclass(frozen=True)
class RowModel:
    format: DisplayFormat
    rows: tuple[RenderedRow, ...]
    window: Window

    @property
    def rows_above(self) -> int:
        return self.window.rows_above

    @property
    def rows_below(self) -> int:
        return self.window.rows_below


@dataclass(frozen=True)
class TooLarge:
    """The buffer does not fit the row budget for this format."""

    format: DisplayFormat
    byte_length: int
    limit: int

    @property
    def message(self) -> str:
        return TOO_LARGE_MESSAGE


RowsResult = Union[RowModel, TooLarge]


def coerce_format(fmt: DisplayFormat | str) -> DisplayFormat:
    return fmt if isinstance(fmt, DisplayFormat) else DisplayFormat(fmt)


def build_rows(
    buffer: ByteRange,
    tree: AnnotationNode | None,
    selection: Selection,
    fmt: DisplayFormat | str = DisplayFormat.HEX,
    max_rows: int = DEFAULT_MAX_ROWS,
) -> RowsResult:
    if max_rows <= 0:
        raise ValueError(f"max_rows must be > 0, got {max_rows}")
    fmt = coerce_format(fmt)
    if fmt is DisplayFormat.BINARY:
        return _build_binary(buffer, tree, selection, max_rows)
    return _build_hex(buffer, tree, selection, max_rows)


def cell_background(cell: Cell) -> str | None:
    """Background hex for a cell, or None to leave the default background.

    Selected cells take the full color, annotated unselected cells the
    lighter variant, everything else no override.
    """
    if cell.selected:
        return cell.color.hex
    if not cell.color.is_default():
        return cell.color.hex_lighter()
    return None


def scroll_row_start(
    selection: Selection, layout: FormatLayout = HEX_LAYOUT, buffer_start: int = 0
) -> int | None:
    """Byte offset of the row a host should scroll to for this selection.

    Rows are laid out from ``buffer_start``, which need not be row-aligned.
    """
    highlight = selection_byte_range(selection)
    if highlight is None:
        return None
    relative = max(0, highlight.byte_start - buffer_start)
    return buffer_start + (relative // layout.bytes_per_row) * layout.bytes_per_row


def _focus_offset(buffer: ByteRange, highlight: ByteRange | None) -> int | None:
    if highlight is None:
        return None
    relative = max(0, highlight.byte_start - buffer.byte_start)
    # A selection past the end still keeps the tail of the buffer on screen.
    return min(relative, max(0, buffer.byte_length - 1))


def _build_hex(
    buffer: ByteRange,
    tree: AnnotationNode | None,
    selection: Selection,
    max_rows: int,
) -> RowModel:
    layout = HEX_LAYOUT
    highlight = selection_byte_range(selection)
    window = compute_window(
        ViewportRequest(
            total_length=buffer.byte_length,
            row_granularity=layout.bytes_per_row,
            max_rows=max_rows,
            focus_byte_offset=_focus_offset(buffer, highlight),
        )
    )
    start, length = window.byte_span(layout.bytes_per_row, buffer.byte_length)

    rows: list[RenderedRow] = []
    for row in buffer.bytes(start, length).chunks(layout.bytes_per_row):
        cells: list[Cell] = []
        for group in row.chunks(layout.bytes_per_group):
            for byte in group.chunks(1):
                cells.append(
                    Cell(
                        value=byte.read_byte(),
                        selected=highlight is not None and highlight.contains(byte),
                        color=resolve_color(tree, byte.byte_start),
                        byte_offset=byte.byte_start,
                    )
                )
        rows.append(RenderedRow(row.byte_start, tuple(cells), layout.bytes_per_group))
    return RowModel(DisplayFormat.HEX, tuple(rows), window)


def _bit_selected(selection: Selection, bit: BitRange) -> bool:
    if isinstance(selection, BitRange):
        return selection.contains(bit)
    if isinstance(selection, ByteRange):
        return selection.contains(bit.enclosing_byte_range())
    return False


def _build_binary(
    buffer: ByteRange,
    tree: AnnotationNode | None,
    selection: Selection,
    max_rows: int,
) -> RowsResult:
    layout = BINARY_LAYOUT
    limit = max_rows * layout.bytes_per_row
    if buffer.byte_length > limit:
        logger.debug("binary view too large bytes=%d limit=%d", buffer.byte_length, limit)
        return TooLarge(DisplayFormat.BINARY, buffer.byte_length, limit)

    window = compute_window(
        ViewportRequest(
            total_length=buffer.byte_length,
            row_granularity=layout.bytes_per_row,
            max_rows=max_rows,
        )
    )

    rows: list[RenderedRow] = []
    for row in buffer.chunks(layout.bytes_per_row):
        cells: list[Cell] = []
        for group in row.chunks(layout.bytes_per_group):
            for byte in group.chunks(1):
                for bit in byte.bits(0).chunks(1):
                    cells.append(
                        Cell(
                            value=int(bit.read_bool()),
                            selected=_bit_selected(selection, bit),
                            color=resolve_color(tree, bit.bit_start // BITS_PER_BYTE),
                            byte_offset=byte.byte_start,
                            bit_offset=bit.bit_start,
                        )
                    )
        rows.append(
            RenderedRow(row.byte_start, tuple(cells), layout.bytes_per_group * BITS_PER_BYTE)
        )
    return RowModel(DisplayFormat.BINARY, tuple(rows), window)
