"""Read-only annotation tree built by an upstream decoder.

Nodes describe structural fields over the buffer. Children are expected to
sit inside their parent's range and not overlap each other, but nothing here
checks that; consumers compute whatever plain containment gives them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from binview.core.palette import DEFAULT_COLOR, Color
from binview.core.ranges import ByteRange


@dataclass(frozen=True)
class AnnotationNode:
    range: ByteRange
    color: Color = DEFAULT_COLOR
    children: tuple[AnnotationNode, ...] = field(default=())
    label: str = ""

    def __post_init__(self):
        # Accept any iterable of children; store a tuple so the node stays immutable.
        object.__setattr__(self, "children", tuple(self.children))

    def contains_position(self, position: int) -> bool:
        return self.range.contains_offset(position)

    def walk(self) -> Iterator[AnnotationNode]:
        """Depth-first, pre-order, children in declared order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def leaves(self) -> Iterator[AnnotationNode]:
        return (node for node in self.walk() if not node.children and node is not self)

    def path_to(self, position: int) -> tuple[AnnotationNode, ...]:
        """Chain of nested nodes below this one whose ranges contain position.

        Follows the last containing child at each level, matching the order
        in which the color resolver lets siblings override each other.
        """
        path: list[AnnotationNode] = []
        node = self
        while True:
            containing = [child for child in node.children if child.contains_position(position)]
            if not containing:
                return tuple(path)
            node = containing[-1]
            path.append(node)


def whole_buffer_tree(buffer: ByteRange, color: Color = DEFAULT_COLOR) -> AnnotationNode:
    """Root node with no children covering all of buffer."""
    return AnnotationNode(range=buffer, color=color, label="root")
