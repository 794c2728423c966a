"""Map a byte position to its display color by walking the annotation tree.

Innermost non-default color wins. A default-colored node never erases the
color of an enclosing node, and among overlapping siblings the last one in
child order wins. Positions no colored node claims fall back to the root's
own color.

// [LAW:dataflow-not-control-flow] resolve_color() is a pure function; callers cache if they must.
"""

from __future__ import annotations

from binview.core.palette import DEFAULT_COLOR, Color
from binview.core.tree import AnnotationNode


def resolve_color(tree: AnnotationNode | None, position: int) -> Color:
    if tree is None:
        return DEFAULT_COLOR
    color = _innermost_color(tree, position, None)
    return color if color is not None else tree.color


def _innermost_color(node: AnnotationNode, position: int, color: Color | None) -> Color | None:
    for child in node.children:
        if not child.contains_position(position):
            continue
        if not child.color.is_default():
            color = child.color
        color = _innermost_color(child, position, color)
    return color
