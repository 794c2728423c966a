"""Choose which rows of a large buffer to materialize.

When the buffer has more rows than the budget allows, the window is
centered on the focus row (the selection's first byte) without letting it
start before row 0. Without a focus the head of the buffer is shown.

The windower keeps no memory of earlier windows: the same request always
yields the same window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from binview.core.layout import DEFAULT_MAX_ROWS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewportRequest:
    total_length: int
    row_granularity: int
    max_rows: int = DEFAULT_MAX_ROWS
    focus_byte_offset: int | None = None

    def __post_init__(self):
        if self.total_length < 0:
            raise ValueError(f"total_length must be >= 0, got {self.total_length}")
        if self.row_granularity <= 0:
            raise ValueError(f"row_granularity must be > 0, got {self.row_granularity}")
        if self.max_rows <= 0:
            raise ValueError(f"max_rows must be > 0, got {self.max_rows}")
        if self.focus_byte_offset is not None and self.focus_byte_offset < 0:
            raise ValueError(f"focus_byte_offset must be >= 0, got {self.focus_byte_offset}")


@dataclass(frozen=True)
class Window:
    """Rows ``[row_start, row_end)``; ``row_end`` may run past ``total_rows``."""

    row_start: int
    row_end: int
    total_rows: int

    @property
    def rows_above(self) -> int:
        return self.row_start

    @property
    def rows_below(self) -> int:
        return max(0, self.total_rows - self.row_end)

    def byte_span(self, row_granularity: int, total_length: int) -> tuple[int, int]:
        """(offset, length) of the window's bytes, clamped to total_length."""
        start = min(self.row_start * row_granularity, total_length)
        length = min(total_length - start, (self.row_end - self.row_start) * row_granularity)
        return start, length


def total_rows(total_length: int, row_granularity: int) -> int:
    return -(-total_length // row_granularity)


def compute_window(request: ViewportRequest) -> Window:
    rows = total_rows(request.total_length, request.row_granularity)
    if rows <= request.max_rows:
        return Window(0, rows, rows)

    if request.focus_byte_offset is None:
        window = Window(0, request.max_rows, rows)
    else:
        focus_row = request.focus_byte_offset // request.row_granularity
        row_start = max(0, focus_row - (request.max_rows - 1) // 2)
        window = Window(row_start, row_start + request.max_rows, rows)

    logger.debug(
        "windowed rows=%d start=%d end=%d focus=%s",
        rows,
        window.row_start,
        window.row_end,
        request.focus_byte_offset,
    )
    return window
