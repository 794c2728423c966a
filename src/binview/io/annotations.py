"""Load an annotation tree from a JSON file.

Stands in for a real decoder when viewing a file from the command line.
Accepted documents are either one node or a list of nodes; a list becomes
the children of an implicit root spanning the whole buffer.

Node shape::

    {"label": "header", "start": 0, "length": 16, "color": "#3b82f6",
     "children": [...]}

``start`` is an absolute byte offset. ``label``, ``color`` and ``children``
are optional. With ``auto_color`` on, leaves without a color get palette
colors in document order.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import binview.core.palette
from binview.core.errors import BinviewError
from binview.core.palette import DEFAULT_COLOR, Color
from binview.core.ranges import ByteRange
from binview.core.tree import AnnotationNode, whole_buffer_tree

logger = logging.getLogger(__name__)


class AnnotationLoadError(BinviewError):
    """The annotation document is unreadable or has the wrong shape."""


def load_annotations(path: str | Path, buffer: ByteRange, *, auto_color: bool = True) -> AnnotationNode:
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise AnnotationLoadError(f"cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise AnnotationLoadError(f"{path} is not valid JSON: {exc}") from exc
    tree = parse_annotations(document, buffer, auto_color=auto_color)
    logger.info("loaded annotations path=%s nodes=%d", path, sum(1 for _ in tree.walk()))
    return tree


def parse_annotations(document, buffer: ByteRange, *, auto_color: bool = True) -> AnnotationNode:
    counter = [0]
    if isinstance(document, list):
        children = tuple(_parse_node(item, buffer, auto_color, counter, "$") for item in document)
        return AnnotationNode(range=buffer, color=DEFAULT_COLOR, children=children, label="root")
    if isinstance(document, dict):
        return _parse_node(document, buffer, auto_color, counter, "$")
    raise AnnotationLoadError(f"expected an object or a list at $, got {type(document).__name__}")


def _int_field(node: dict, key: str, where: str) -> int:
    value = node.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise AnnotationLoadError(f"{where}.{key} must be a non-negative integer, got {value!r}")
    return value


def _parse_node(node, buffer: ByteRange, auto_color: bool, counter: list[int], where: str) -> AnnotationNode:
    if not isinstance(node, dict):
        raise AnnotationLoadError(f"expected an object at {where}, got {type(node).__name__}")

    start = _int_field(node, "start", where)
    length = _int_field(node, "length", where)
    label = str(node.get("label", ""))

    raw_children = node.get("children", [])
    if not isinstance(raw_children, list):
        raise AnnotationLoadError(f"{where}.children must be a list")
    children = tuple(
        _parse_node(child, buffer, auto_color, counter, f"{where}.children[{i}]")
        for i, child in enumerate(raw_children)
    )

    raw_color = node.get("color")
    if raw_color is not None:
        try:
            color = Color.parse(str(raw_color))
        except ValueError as exc:
            raise AnnotationLoadError(f"{where}.color: {exc}") from exc
    elif auto_color and not children:
        color = binview.core.palette.PALETTE.color(counter[0])
        counter[0] += 1
    else:
        color = DEFAULT_COLOR

    return AnnotationNode(
        range=ByteRange(buffer.data, start, length),
        color=color,
        children=children,
        label=label,
    )


def default_tree(buffer: ByteRange) -> AnnotationNode:
    """Tree used when no annotation file is given."""
    return whole_buffer_tree(buffer)
