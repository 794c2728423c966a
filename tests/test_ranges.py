"""Tests for binview.core.ranges — byte/bit range algebra."""

import pytest

from binview.core.errors import BinviewError, OutOfBoundsError
from binview.core.ranges import BitRange, ByteRange, selection_byte_range


def spans(ranges):
    return [(r.offset(), r.size()) for r in ranges]


# ─── ByteRange.chunks ────────────────────────────────────────────────────────


class TestByteChunks:
    @pytest.mark.parametrize("length", [0, 1, 7, 8, 16, 17, 33])
    @pytest.mark.parametrize("n", [1, 3, 8, 16])
    def test_chunks_cover_range_exactly_once(self, length, n):
        data = bytes(64)
        r = ByteRange(data, 5, length)
        chunks = r.chunks(n)

        assert len(chunks) == -(-length // n)
        assert sum(c.byte_length for c in chunks) == length
        expected_start = r.byte_start
        for c in chunks:
            assert c.byte_start == expected_start
            expected_start = c.end
        assert all(c.byte_length == n for c in chunks[:-1])
        if chunks:
            assert chunks[-1].byte_length == (length % n or n)

    def test_chunks_are_absolute(self):
        r = ByteRange(bytes(40), 10, 20)
        assert spans(r.chunks(8)) == [(10, 8), (18, 8), (26, 4)]

    @pytest.mark.parametrize("n", [0, -1])
    def test_non_positive_chunk_size_rejected(self, n):
        with pytest.raises(ValueError):
            ByteRange(bytes(4), 0, 4).chunks(n)


# ─── ByteRange sub-ranges and containment ───────────────────────────────────


class TestByteRange:
    def test_bytes_is_relative_and_clamped(self):
        r = ByteRange(bytes(32), 4, 10)
        assert spans([r.bytes(2, 3)]) == [(6, 3)]
        assert spans([r.bytes(8, 5)]) == [(12, 2)]
        assert spans([r.bytes(20, 3)]) == [(14, 0)]
        assert spans([r.bytes(3)]) == [(7, 7)]

    def test_negative_inputs_raise(self):
        r = ByteRange(bytes(8), 0, 8)
        with pytest.raises(ValueError):
            r.bytes(-1, 2)
        with pytest.raises(ValueError):
            r.bytes(0, -2)
        with pytest.raises(ValueError):
            ByteRange(bytes(8), -1, 2)

    def test_contains(self):
        data = bytes(32)
        outer = ByteRange(data, 4, 10)
        assert outer.contains(ByteRange(data, 4, 10))
        assert outer.contains(ByteRange(data, 6, 2))
        assert not outer.contains(ByteRange(data, 3, 2))
        assert not outer.contains(ByteRange(data, 13, 2))

    def test_empty_range_contains_nothing_with_extent(self):
        data = bytes(8)
        empty = ByteRange(data, 3, 0)
        assert not empty.contains(ByteRange(data, 3, 1))
        assert empty.contains(ByteRange(data, 3, 0))

    def test_equality_ignores_backing_buffer(self):
        assert ByteRange(b"ab", 0, 1) == ByteRange(b"xy", 0, 1)
        assert ByteRange(b"ab", 0, 1) != ByteRange(b"ab", 1, 1)

    def test_of_covers_whole_buffer(self):
        r = ByteRange.of(b"hello")
        assert (r.offset(), r.size(), r.end) == (0, 5, 5)

    def test_reads(self):
        r = ByteRange(b"\x00\x01\xab\xcd", 2, 2)
        assert r.read_bytes() == b"\xab\xcd"
        assert r.to_hex() == "abcd"
        assert r.bytes(1, 1).read_byte() == 0xCD

    def test_read_byte_needs_single_byte(self):
        with pytest.raises(ValueError):
            ByteRange(b"\x00\x01", 0, 2).read_byte()

    def test_read_past_buffer_end_raises(self):
        r = ByteRange(b"\x01\x02", 1, 4)
        with pytest.raises(OutOfBoundsError) as exc_info:
            r.read_bytes()
        assert isinstance(exc_info.value, IndexError)
        assert isinstance(exc_info.value, BinviewError)

    def test_empty_result_does_not_raise(self):
        assert ByteRange(b"", 0, 0).read_bytes() == b""
        assert ByteRange(b"", 0, 0).chunks(16) == ()


# ─── BitRange ────────────────────────────────────────────────────────────────


class TestBitRange:
    def test_bit_zero_is_most_significant(self):
        r = ByteRange.of(bytes([0b10100000, 0b00000001]))
        bits = [int(b.read_bool()) for b in r.bits(0).chunks(1)]
        assert bits == [1, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1]

    def test_byte_bits_are_absolute(self):
        r = ByteRange(bytes(4), 1, 1)
        assert r.bits(2) == BitRange(r.data, 10, 6)
        assert r.bits(0, 3) == BitRange(r.data, 8, 3)

    def test_bits_clamped(self):
        r = BitRange(bytes(2), 4, 8)
        assert r.bits(6, 10) == BitRange(r.data, 10, 2)
        assert r.bits(20) == BitRange(r.data, 12, 0)

    def test_chunks(self):
        r = BitRange(bytes(4), 3, 10)
        assert [(c.offset(), c.size()) for c in r.chunks(4)] == [(3, 4), (7, 4), (11, 2)]

    @pytest.mark.parametrize(
        "start,length,expected",
        [
            (0, 8, (0, 1)),
            (5, 6, (0, 2)),
            (8, 8, (1, 1)),
            (15, 2, (1, 2)),
            (12, 0, (1, 0)),
            (16, 0, (2, 0)),
        ],
    )
    def test_enclosing_byte_range(self, start, length, expected):
        enclosing = BitRange(bytes(4), start, length).enclosing_byte_range()
        assert (enclosing.byte_start, enclosing.byte_length) == expected

    def test_enclosing_range_contains_byte_of_every_bit(self):
        data = bytes(8)
        for start in range(0, 40):
            for length in range(1, 20):
                bits = BitRange(data, start, length)
                byte_of_start = ByteRange(data, start // 8, 1)
                byte_of_last = ByteRange(data, (bits.end - 1) // 8, 1)
                assert bits.enclosing_byte_range().contains(byte_of_start)
                assert bits.enclosing_byte_range().contains(byte_of_last)

    def test_contains(self):
        data = bytes(4)
        outer = BitRange(data, 3, 10)
        assert outer.contains(BitRange(data, 3, 1))
        assert outer.contains(BitRange(data, 12, 1))
        assert not outer.contains(BitRange(data, 13, 1))
        assert not outer.contains(BitRange(data, 2, 2))

    def test_read_bool_requires_single_bit(self):
        with pytest.raises(ValueError):
            BitRange(b"\xff", 0, 2).read_bool()

    def test_read_bool_past_end_raises(self):
        with pytest.raises(OutOfBoundsError):
            BitRange(b"\x00", 8, 1).read_bool()

    def test_read_uint_across_byte_boundary(self):
        assert BitRange(b"\xab\xcd", 4, 8).read_uint() == 0xBC
        assert BitRange(b"\xab\xcd", 0, 16).read_uint() == 0xABCD
        assert BitRange(b"\xab", 0, 0).read_uint() == 0


# ─── Selection helpers ───────────────────────────────────────────────────────


def test_selection_byte_range():
    data = bytes(8)
    assert selection_byte_range(None) is None
    assert selection_byte_range(ByteRange(data, 2, 3)) == ByteRange(data, 2, 3)
    assert selection_byte_range(BitRange(data, 9, 9)) == ByteRange(data, 1, 2)
