"""Exception types shared across binview.

Malformed annotation trees are never an error here; the color resolver
tolerates them. An oversized binary view is a returned value (rows.TooLarge).
"""


class BinviewError(Exception):
    """Base class for binview errors."""


class OutOfBoundsError(BinviewError, IndexError):
    """A read addressed bytes or bits past the end of the backing buffer."""

    def __init__(self, what: str, offset: int, limit: int):
        super().__init__(f"{what} offset {offset} is past buffer end {limit}")
        self.offset = offset
        self.limit = limit
