"""Byte and bit range algebra over an immutable buffer.

Ranges are value objects in absolute buffer coordinates. Equality and
containment compare offsets and lengths only; the backing buffer is carried
along for reads but never compared.

Bit order: bit 0 is the most significant bit of byte 0. Bit ``i`` is bit
``7 - (i % 8)`` of byte ``i // 8``. Every bit read in binview goes through
``_bit_at`` so the convention lives in one place.

// [LAW:dataflow-not-control-flow] Sub-ranges clamp instead of failing; only
//   explicit reads past the buffer end raise OutOfBoundsError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from binview.core.errors import OutOfBoundsError

BITS_PER_BYTE = 8

Buffer = Union[bytes, bytearray, memoryview]


def _require_non_negative(**values: int) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")


def _chunk_starts(length: int, n: int) -> range:
    if n <= 0:
        raise ValueError(f"chunk size must be > 0, got {n}")
    return range(0, length, n)


def _bit_at(data: Buffer, bit_offset: int) -> bool:
    byte_index = bit_offset // BITS_PER_BYTE
    if byte_index >= len(data):
        raise OutOfBoundsError("bit", bit_offset, len(data) * BITS_PER_BYTE)
    shift = BITS_PER_BYTE - 1 - (bit_offset % BITS_PER_BYTE)
    return bool((data[byte_index] >> shift) & 1)


@dataclass(frozen=True)
class ByteRange:
    """Half-open span ``[byte_start, byte_start + byte_length)`` of a buffer."""

    data: Buffer = field(repr=False, compare=False)
    byte_start: int = 0
    byte_length: int = 0

    def __post_init__(self):
        _require_non_negative(byte_start=self.byte_start, byte_length=self.byte_length)

    @classmethod
    def of(cls, data: Buffer) -> ByteRange:
        """Range covering all of ``data``."""
        return cls(data, 0, len(data))

    @property
    def end(self) -> int:
        return self.byte_start + self.byte_length

    def offset(self) -> int:
        return self.byte_start

    def size(self) -> int:
        return self.byte_length

    def bytes(self, offset: int, length: int | None = None) -> ByteRange:
        """Sub-range ``offset`` bytes into this range, clamped to its end."""
        _require_non_negative(offset=offset)
        offset = min(offset, self.byte_length)
        available = self.byte_length - offset
        if length is None:
            length = available
        _require_non_negative(length=length)
        return ByteRange(self.data, self.byte_start + offset, min(length, available))

    def chunks(self, n: int) -> tuple[ByteRange, ...]:
        """Consecutive sub-ranges of ``n`` bytes; the last may be shorter."""
        return tuple(self.bytes(start, n) for start in _chunk_starts(self.byte_length, n))

    def contains(self, other: ByteRange) -> bool:
        return self.byte_start <= other.byte_start and other.end <= self.end

    def contains_offset(self, position: int) -> bool:
        return self.byte_start <= position < self.end

    def bits(self, start_bit: int = 0, length: int | None = None) -> BitRange:
        """Bit view of this range, starting ``start_bit`` bits in."""
        return BitRange(
            self.data, self.byte_start * BITS_PER_BYTE, self.byte_length * BITS_PER_BYTE
        ).bits(start_bit, length)

    def read_bytes(self) -> bytes:
        if self.end > len(self.data):
            raise OutOfBoundsError("byte", self.end - 1, len(self.data))
        return bytes(self.data[self.byte_start : self.end])

    def read_byte(self) -> int:
        """Value of a single-byte range."""
        if self.byte_length != 1:
            raise ValueError(f"read_byte needs a 1-byte range, got {self.byte_length} bytes")
        return self.read_bytes()[0]

    def to_hex(self) -> str:
        return self.read_bytes().hex()


@dataclass(frozen=True)
class BitRange:
    """Half-open span of bits; may start and end mid-byte."""

    data: Buffer = field(repr=False, compare=False)
    bit_start: int = 0
    bit_length: int = 0

    def __post_init__(self):
        _require_non_negative(bit_start=self.bit_start, bit_length=self.bit_length)

    @property
    def end(self) -> int:
        return self.bit_start + self.bit_length

    def offset(self) -> int:
        return self.bit_start

    def size(self) -> int:
        return self.bit_length

    def enclosing_byte_range(self) -> ByteRange:
        """Smallest byte range covering every addressed bit."""
        first = self.bit_start // BITS_PER_BYTE
        if self.bit_length == 0:
            return ByteRange(self.data, first, 0)
        last = -(-self.end // BITS_PER_BYTE)
        return ByteRange(self.data, first, last - first)

    def bits(self, start_bit: int, length: int | None = None) -> BitRange:
        """Sub-range ``start_bit`` bits into this range, clamped to its end."""
        _require_non_negative(start_bit=start_bit)
        start_bit = min(start_bit, self.bit_length)
        available = self.bit_length - start_bit
        if length is None:
            length = available
        _require_non_negative(length=length)
        return BitRange(self.data, self.bit_start + start_bit, min(length, available))

    def chunks(self, n: int) -> tuple[BitRange, ...]:
        return tuple(self.bits(start, n) for start in _chunk_starts(self.bit_length, n))

    def contains(self, other: BitRange) -> bool:
        return self.bit_start <= other.bit_start and other.end <= self.end

    def read_bool(self) -> bool:
        """Value of a single-bit range."""
        if self.bit_length != 1:
            raise ValueError(f"read_bool needs a 1-bit range, got {self.bit_length} bits")
        return _bit_at(self.data, self.bit_start)

    def read_uint(self) -> int:
        """Unsigned integer value of the range, most significant bit first."""
        value = 0
        for bit_offset in range(self.bit_start, self.end):
            value = (value << 1) | int(_bit_at(self.data, bit_offset))
        return value


Selection = Union[ByteRange, BitRange, None]


def selection_byte_range(selection: Selection) -> ByteRange | None:
    """Byte-granularity view of a selection (bit selections widen to bytes)."""
    if selection is None:
        return None
    if isinstance(selection, BitRange):
        return selection.enclosing_byte_range()
    return selection
