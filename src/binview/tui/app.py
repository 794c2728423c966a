"""Textual application hosting a BinaryView.

Stands in for the host UI around the row builder: a format selector, field
navigation over the annotation leaves, and a one-line description of the
selected field.
"""

from __future__ import annotations

import logging
from typing import Callable

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Select, Static

from binview.core.layout import DEFAULT_MAX_ROWS, DisplayFormat
from binview.core.ranges import BitRange, ByteRange, Selection, selection_byte_range
from binview.core.tree import AnnotationNode
from binview.tui.binary_view import BinaryView

logger = logging.getLogger(__name__)

_FORMAT_OPTIONS = [("Hex", DisplayFormat.HEX.value), ("Binary", DisplayFormat.BINARY.value)]
_PREVIEW_BYTES = 8
_PREVIEW_BITS = 64


def _value_preview(selection: Selection) -> str:
    """Short value suffix for small selections that lie inside the buffer."""
    byte_range = selection_byte_range(selection)
    if byte_range.byte_length == 0 or byte_range.end > len(byte_range.data):
        return ""
    if isinstance(selection, BitRange):
        return f" = {selection.read_uint()}" if selection.bit_length <= _PREVIEW_BITS else ""
    return f" = {selection.to_hex()}" if selection.byte_length <= _PREVIEW_BYTES else ""


def describe_selection(selection: Selection, label: str = "") -> str:
    """One-line summary of a selection for the status line."""
    if selection is None:
        return "No selection"
    prefix = f"{label}: " if label else ""
    if isinstance(selection, BitRange):
        return (
            f"{prefix}bits {selection.bit_start}..{selection.end - 1} "
            f"({selection.bit_length} bits){_value_preview(selection)}"
        )
    byte_range = selection_byte_range(selection)
    return (
        f"{prefix}offset 0x{byte_range.byte_start:08x} "
        f"length {byte_range.byte_length}{_value_preview(selection)}"
    )


def field_path(tree: AnnotationNode, leaf: AnnotationNode) -> str:
    """Labels from the top-level field down to leaf, e.g. ``header > size``."""
    path = tree.path_to(leaf.range.byte_start)
    if not path or path[-1] is not leaf:
        return leaf.label
    return " > ".join(node.label for node in path if node.label)


class BinviewApp(App):
    """TUI application for binview."""

    CSS = """
    #format-select {
        width: 24;
        margin: 0 1;
    }

    #field-info {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        ("f", "toggle_format", "Format"),
        ("n", "next_field", "Next field"),
        ("p", "previous_field", "Prev field"),
        ("c", "clear_selection", "Clear"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        buffer: ByteRange,
        tree: AnnotationNode | None = None,
        *,
        source_name: str = "buffer",
        max_rows: int = DEFAULT_MAX_ROWS,
        fmt: DisplayFormat = DisplayFormat.HEX,
        selection: Selection = None,
        on_format_change: Callable[[DisplayFormat], None] | None = None,
    ):
        super().__init__()
        self._buffer = buffer
        self._tree = tree
        self._max_rows = max_rows
        self._initial_format = fmt
        self._initial_selection = selection
        self._on_format_change = on_format_change
        self._leaves: list[AnnotationNode] = list(tree.leaves()) if tree is not None else []
        self._field_index: int | None = None
        self.title = "binview"
        self.sub_title = f"{source_name} ({buffer.byte_length} bytes)"

    @property
    def view(self) -> BinaryView:
        return self.query_one("#binary-view", BinaryView)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Select(
            _FORMAT_OPTIONS,
            value=self._initial_format.value,
            allow_blank=False,
            id="format-select",
        )
        yield Static(describe_selection(self._initial_selection), id="field-info")
        yield BinaryView(
            self._buffer,
            self._tree,
            max_rows=self._max_rows,
            fmt=self._initial_format,
            id="binary-view",
        )
        yield Footer()

    def on_mount(self) -> None:
        # Keep letter bindings away from the Select so they reach the app.
        self.view.focus()
        if self._initial_selection is not None:
            self.view.selection = self._initial_selection
        logger.info(
            "viewer started bytes=%d fields=%d format=%s",
            self._buffer.byte_length,
            len(self._leaves),
            self._initial_format.value,
        )

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id != "format-select":
            return
        self._set_format(DisplayFormat(event.value))

    def _set_format(self, fmt: DisplayFormat) -> None:
        if self.view.format is fmt:
            return
        self.view.format = fmt
        if self._on_format_change is not None:
            self._on_format_change(fmt)

    def action_toggle_format(self) -> None:
        fmt = DisplayFormat.BINARY if self.view.format is DisplayFormat.HEX else DisplayFormat.HEX
        self.query_one("#format-select", Select).value = fmt.value
        self._set_format(fmt)

    def _select_field(self, index: int) -> None:
        leaf = self._leaves[index]
        self._field_index = index
        self.view.selection = leaf.range
        info = describe_selection(leaf.range, field_path(self._tree, leaf))
        self.query_one("#field-info", Static).update(info)

    def action_next_field(self) -> None:
        if not self._leaves:
            return
        index = 0 if self._field_index is None else (self._field_index + 1) % len(self._leaves)
        self._select_field(index)

    def action_previous_field(self) -> None:
        if not self._leaves:
            return
        index = len(self._leaves) - 1 if self._field_index is None else (self._field_index - 1) % len(self._leaves)
        self._select_field(index)

    def action_clear_selection(self) -> None:
        self._field_index = None
        self.view.selection = None
        self.query_one("#field-info", Static).update(describe_selection(None))
