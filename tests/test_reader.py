"""
Tests for the little-endian BinaryReader
"""

import io
import struct

import pytest

from ztgfx import TruncatedError
from ztgfx.formats.reader import BinaryReader


class NonSeekableStream(io.RawIOBase):
    """Stream which can only be read forward."""

    def __init__(self, data: bytes):
        self._data = io.BytesIO(data)

    def readable(self):
        return True

    def seekable(self):
        return False

    def read(self, size=-1):
        return self._data.read(size)


class TestBinaryReader:
    """Test fixed-size reads."""

    def test_reads_little_endian_integers(self):
        data = struct.pack("<ihB", -2, -300, 200)
        reader = BinaryReader(io.BytesIO(data))
        assert reader.read_int32() == -2
        assert reader.read_int16() == -300
        assert reader.read_uint8() == 200
        assert reader.tell() == 7

    def test_short_read_raises_truncated(self):
        reader = BinaryReader(io.BytesIO(b"\x01\x02"))
        with pytest.raises(TruncatedError) as exc_info:
            reader.read_int32()
        assert exc_info.value.offset == 0
        assert isinstance(exc_info.value.__cause__, EOFError)

    def test_zero_length_read_at_end(self):
        reader = BinaryReader(io.BytesIO(b""))
        assert reader.read(0) == b""

    def test_peek_does_not_move(self):
        reader = BinaryReader(io.BytesIO(b"ABCDEF"))
        reader.read(1)
        assert reader.peek(4) == b"BCDE"
        assert reader.tell() == 1

    def test_peek_near_end_returns_fewer_bytes(self):
        reader = BinaryReader(io.BytesIO(b"AB"))
        assert reader.peek(4) == b"AB"
        assert reader.tell() == 0

    def test_non_seekable_stream_is_buffered(self):
        reader = BinaryReader(NonSeekableStream(b"\x05\x00\x00\x00xyz"))
        assert reader.peek(1) == b"\x05"
        assert reader.read_int32() == 5
        reader.seek(6)
        assert reader.read(1) == b"z"


class FailingStream(io.BytesIO):
    """Seekable stream whose reads fail."""

    def read(self, size=-1):
        raise OSError("device error")


class RecordingStream(io.BytesIO):
    """Seekable stream remembering the sizes requested from it."""

    def __init__(self, data: bytes):
        super().__init__(data)
        self.requested = []

    def read(self, size=-1):
        self.requested.append(size)
        return super().read(size)


class TestReadBounds:
    """Test reads checked against the stream length."""

    def test_oversized_read_is_rejected_before_reading(self):
        stream = RecordingStream(bytes(16))
        reader = BinaryReader(stream)
        reader.read(4)
        with pytest.raises(TruncatedError) as exc_info:
            reader.read(0x7FFFFFFF * 4)
        assert exc_info.value.offset == 4
        assert isinstance(exc_info.value.__cause__, EOFError)
        assert stream.requested == [4]
        assert reader.tell() == 4

    def test_read_after_seek_past_end(self):
        reader = BinaryReader(io.BytesIO(b"ABCD"))
        reader.seek(10)
        assert reader.remaining == 0
        with pytest.raises(TruncatedError):
            reader.read(1)

    def test_length_keeps_start_position(self):
        stream = io.BytesIO(b"ABCDEF")
        stream.seek(2)
        reader = BinaryReader(stream)
        assert reader.length == 6
        assert reader.remaining == 4
        assert reader.read(1) == b"C"

    def test_failing_read(self):
        reader = BinaryReader(FailingStream(b"ABCD"))
        with pytest.raises(TruncatedError) as exc_info:
            reader.read(2)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_failing_peek(self):
        reader = BinaryReader(FailingStream(b"ABCD"))
        with pytest.raises(TruncatedError) as exc_info:
            reader.peek(4)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.offset == 0
