"""Row and group geometry per display format.

// [LAW:one-source-of-truth] The windower and row builder both read these;
//   hex is 16/8, binary is 8/4.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_MAX_ROWS = 1000


class DisplayFormat(Enum):
    HEX = "hex"
    BINARY = "binary"


@dataclass(frozen=True)
class FormatLayout:
    bytes_per_row: int
    bytes_per_group: int


HEX_LAYOUT = FormatLayout(bytes_per_row=16, bytes_per_group=8)
BINARY_LAYOUT = FormatLayout(bytes_per_row=8, bytes_per_group=4)

LAYOUTS: dict[DisplayFormat, FormatLayout] = {
    DisplayFormat.HEX: HEX_LAYOUT,
    DisplayFormat.BINARY: BINARY_LAYOUT,
}


def layout_for(fmt: DisplayFormat) -> FormatLayout:
    return LAYOUTS[fmt]
