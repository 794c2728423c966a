"""Turn a row model into Rich Text lines.

Pure rendering module, no widget state. BinaryView and the ``--dump``
CLI path both paint through here.

Each row is an 8-digit hex offset, a separator, then the cells in groups.
Hex cells print as two hex digits; binary cells print as 0/1 with a space
after every byte. Cell styling follows rows.cell_background(): bold plus a
full-color background when selected, the lighter background when only
annotated.
"""

from __future__ import annotations

from rich.style import Style
from rich.text import Text

from binview.core.layout import DisplayFormat
from binview.core.ranges import BITS_PER_BYTE
from binview.core.rows import Cell, RenderedRow, RowModel, RowsResult, TooLarge, cell_background

_GUTTER_STYLE = Style(dim=True)
_NOTICE_STYLE = Style(dim=True, italic=True)
_TOO_LARGE_STYLE = Style(italic=True)
_GUTTER_SEPARATOR = " \u2502 "


def _glyph(cell: Cell, fmt: DisplayFormat) -> str:
    if fmt is DisplayFormat.BINARY:
        return "1" if cell.value else "0"
    return f"{cell.value:02x}"


def _cell_style(cell: Cell) -> Style:
    return Style(bold=cell.selected, bgcolor=cell_background(cell))


def _units(group: tuple[Cell, ...], fmt: DisplayFormat) -> list[tuple[Cell, ...]]:
    """Cells that print without spaces between them: one byte's worth."""
    n = BITS_PER_BYTE if fmt is DisplayFormat.BINARY else 1
    return [group[i : i + n] for i in range(0, len(group), n)]


def render_row(row: RenderedRow, fmt: DisplayFormat) -> Text:
    text = Text(f"{row.byte_start:08x}", style=_GUTTER_STYLE)
    text.append(_GUTTER_SEPARATOR, style=_GUTTER_STYLE)
    for group in row.groups():
        for unit in _units(group, fmt):
            for cell in unit:
                text.append(_glyph(cell, fmt), style=_cell_style(cell))
            text.append(" ")
        text.append(" ")
    text.rstrip()
    return text


def rows_above_notice(count: int) -> Text:
    return Text(f"{count} rows above...", style=_NOTICE_STYLE)


def rows_below_notice(count: int) -> Text:
    return Text(f"{count} rows below...", style=_NOTICE_STYLE)


def render_lines(result: RowsResult) -> list[Text]:
    if isinstance(result, TooLarge):
        return [Text(result.message, style=_TOO_LARGE_STYLE)]

    lines: list[Text] = []
    if result.rows_above > 0:
        lines.append(rows_above_notice(result.rows_above))
    lines.extend(render_row(row, result.format) for row in result.rows)
    if result.rows_below > 0:
        lines.append(rows_below_notice(result.rows_below))
    return lines


def render_text(result: RowsResult) -> Text:
    return Text("\n").join(render_lines(result))


def line_index(result: RowsResult, byte_start: int | None) -> int | None:
    """Line of render_lines() output showing the row at byte_start, if rendered."""
    if byte_start is None or not isinstance(result, RowModel):
        return None
    offset = 1 if result.rows_above > 0 else 0
    for i, row in enumerate(result.rows):
        if row.byte_start == byte_start:
            return offset + i
    return None
