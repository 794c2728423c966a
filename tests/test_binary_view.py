"""In-process Textual tests for BinviewApp and BinaryView.

Uses Textual's run_test() harness; no terminal or subprocess involved.
"""

from contextlib import asynccontextmanager

import pytest

from binview.core.layout import DisplayFormat
from binview.core.ranges import ByteRange
from binview.core.rows import RowModel, TooLarge
from binview.tui.app import BinviewApp, describe_selection, field_path
from binview.tui.binary_view import BinaryView

from builders import GREEN, RED, node, root

pytestmark = pytest.mark.textual


@asynccontextmanager
async def run_app(data, tree=None, *, size=(120, 40), **kwargs):
    app = BinviewApp(ByteRange.of(data), tree, **kwargs)
    async with app.run_test(size=size) as pilot:
        await pilot.pause()
        yield pilot, app


def small_tree(data):
    return root(
        data,
        node(data, 0, 4, RED, label="magic"),
        node(data, 4, 4, GREEN, label="size"),
        node(data, 8, 8, label="payload"),
    )


async def test_starts_in_hex_without_selection():
    data = bytes(range(64))
    async with run_app(data, small_tree(data)) as (pilot, app):
        view = app.query_one(BinaryView)
        assert view.format is DisplayFormat.HEX
        assert view.selection is None
        assert isinstance(view.result, RowModel)
        assert len(view.result.rows) == 4


async def test_toggle_format_notifies_once():
    data = bytes(range(64))
    changes = []
    async with run_app(data, small_tree(data), on_format_change=changes.append) as (pilot, app):
        await pilot.press("f")
        await pilot.pause()
        assert app.view.format is DisplayFormat.BINARY
        assert app.view.result.format is DisplayFormat.BINARY
        assert changes == [DisplayFormat.BINARY]

        await pilot.press("f")
        await pilot.pause()
        assert app.view.format is DisplayFormat.HEX
        assert changes == [DisplayFormat.BINARY, DisplayFormat.HEX]


async def test_binary_too_large_for_budget():
    data = bytes(64)
    async with run_app(data, max_rows=4) as (pilot, app):
        await pilot.press("f")
        await pilot.pause()
        assert isinstance(app.view.result, TooLarge)


async def test_field_navigation():
    data = bytes(range(64))
    async with run_app(data, small_tree(data)) as (pilot, app):
        await pilot.press("n")
        await pilot.pause()
        assert app.view.selection == ByteRange(data, 0, 4)

        await pilot.press("n")
        await pilot.pause()
        assert app.view.selection == ByteRange(data, 4, 4)
        selected = [c.byte_offset for r in app.view.result.rows for c in r.cells if c.selected]
        assert selected == [4, 5, 6, 7]

        await pilot.press("p")
        await pilot.pause()
        assert app.view.selection == ByteRange(data, 0, 4)

        await pilot.press("c")
        await pilot.pause()
        assert app.view.selection is None

        await pilot.press("p")
        await pilot.pause()
        assert app.view.selection == ByteRange(data, 8, 8)


async def test_navigation_without_fields_is_a_no_op():
    data = bytes(32)
    async with run_app(data) as (pilot, app):
        await pilot.press("n")
        await pilot.pause()
        assert app.view.selection is None


async def test_initial_selection_windows_and_scrolls():
    data = bytes(16 * 3000)
    selection = ByteRange(data, 16 * 2000, 2)
    async with run_app(data, max_rows=1000, selection=selection) as (pilot, app):
        await pilot.pause()
        await pilot.pause()
        result = app.view.result
        assert result.rows_above == 1501
        assert result.rows[0].byte_start == 16 * 1501
        assert app.view.scroll_y > 0


async def test_load_replaces_buffer_and_clears_selection():
    data = bytes(range(64))
    async with run_app(data, small_tree(data)) as (pilot, app):
        await pilot.press("n")
        await pilot.pause()
        replacement = bytes(20)
        app.view.load(ByteRange.of(replacement), None)
        await pilot.pause()
        assert app.view.selection is None
        assert app.view.tree is None
        assert [r.byte_start for r in app.view.result.rows] == [0, 16]


def test_describe_selection():
    data = bytes(range(64))
    assert describe_selection(None) == "No selection"
    assert describe_selection(ByteRange(data, 16, 4), "size") == (
        "size: offset 0x00000010 length 4 = 10111213"
    )
    # 0x10 is 00010000, so bits 2..4 of it read 0b010
    assert describe_selection(ByteRange(data, 16, 4).bits(2, 3)) == "bits 130..132 (3 bits) = 2"
    assert describe_selection(ByteRange(data, 0, 20)) == "offset 0x00000000 length 20"
    assert describe_selection(ByteRange(data, 60, 8)) == "offset 0x0000003c length 8"


def test_field_path_joins_nested_labels():
    data = bytes(32)
    size = node(data, 4, 4, GREEN, label="size")
    header = node(data, 0, 8, label="header", children=(node(data, 0, 4, RED, label="magic"), size))
    tree = root(data, header)
    assert field_path(tree, size) == "header > size"

    first = node(data, 0, 8, label="first")
    overlapped = root(data, first, node(data, 0, 8, label="second"))
    assert field_path(overlapped, first) == "first"


async def test_first_render_without_selection_shows_rows():
    data = bytes(range(64))
    async with run_app(data) as (pilot, app):
        result = app.view.result
        assert isinstance(result, RowModel)
        assert [row.byte_start for row in result.rows] == [0, 16, 32, 48]


async def test_scrolls_to_selection_in_unaligned_buffer():
    data = bytes(16 * 400)
    buffer = ByteRange(data, 5, len(data) - 5)
    app = BinviewApp(buffer, None, selection=ByteRange(data, 16 * 300 + 9, 1))
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause()
        await pilot.pause()
        assert app.view.scroll_y > 0
