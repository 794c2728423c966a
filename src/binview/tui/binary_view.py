"""Scrollable hex/binary view of a buffer with annotation colors.

The widget owns the host-side state (display format, selection, the
buffer and tree it was handed) and rebuilds a fresh row model whenever any
of it changes. Row building itself is stateless; see binview.core.rows.
"""

from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.reactive import reactive
from textual.widgets import Static

import binview.tui.rendering
from binview.core.layout import DEFAULT_MAX_ROWS, DisplayFormat, layout_for
from binview.core.ranges import ByteRange, Selection
from binview.core.rows import RowsResult, build_rows, scroll_row_start
from binview.core.tree import AnnotationNode

logger = logging.getLogger(__name__)


class BinaryView(VerticalScroll):
    """Hex or binary rendering of a buffer.

    // [LAW:single-enforcer] _render_rows() is the sole render entry.
    """

    DEFAULT_CSS = """
    BinaryView {
        height: 1fr;
        border: round $primary-muted;
        padding: 0 1;
    }

    BinaryView > #binary-rows {
        width: auto;
    }
    """

    format: reactive[DisplayFormat] = reactive(DisplayFormat.HEX)
    selection: reactive[Selection] = reactive(None)

    def __init__(
        self,
        buffer: ByteRange,
        tree: AnnotationNode | None = None,
        *,
        max_rows: int = DEFAULT_MAX_ROWS,
        fmt: DisplayFormat = DisplayFormat.HEX,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._buffer = buffer
        self._tree = tree
        self._max_rows = max_rows
        self._result: RowsResult | None = None
        self.set_reactive(BinaryView.format, fmt)

    @property
    def result(self) -> RowsResult | None:
        """Row model currently on screen."""
        return self._result

    @property
    def tree(self) -> AnnotationNode | None:
        return self._tree

    def compose(self) -> ComposeResult:
        yield Static("", id="binary-rows")

    def on_mount(self) -> None:
        # is_mounted only turns true after this handler returns.
        self._render_rows()
        self._scroll_to_selection()

    def load(self, buffer: ByteRange, tree: AnnotationNode | None) -> None:
        """Replace buffer and tree wholesale; the old selection no longer applies."""
        self._buffer = buffer
        self._tree = tree
        self.set_reactive(BinaryView.selection, None)
        self._refresh_rows()

    def watch_format(self, old: DisplayFormat, new: DisplayFormat) -> None:
        logger.debug("format %s -> %s", old.value, new.value)
        self._refresh_rows()
        self._scroll_to_selection()

    def watch_selection(self, old: Selection, new: Selection) -> None:
        self._refresh_rows()
        self._scroll_to_selection()

    def _refresh_rows(self) -> None:
        if not self.is_mounted:
            return
        self._render_rows()

    def _render_rows(self) -> None:
        self._result = build_rows(
            self._buffer, self._tree, self.selection, self.format, self._max_rows
        )
        self.query_one("#binary-rows", Static).update(
            binview.tui.rendering.render_text(self._result)
        )

    def _scroll_to_selection(self) -> None:
        if self._result is None:
            return
        row_start = scroll_row_start(
            self.selection, layout_for(self.format), self._buffer.byte_start
        )
        line = binview.tui.rendering.line_index(self._result, row_start)
        if line is None:
            return
        self.call_after_refresh(self.scroll_to, y=line, animate=False)
