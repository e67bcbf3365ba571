"""
Little-endian binary reader over a seekable byte stream.

Every fixed-size read either returns the full field or raises
:class:`~ztgfx.exceptions.TruncatedError`.
"""

from __future__ import annotations

import io
from struct import Struct
from typing import BinaryIO

from ztgfx.exceptions import TruncatedError

INT32 = Struct("<i")
INT16 = Struct("<h")


class BinaryReader:
    """
    Reads little-endian integers and raw bytes from a stream.

    Non-seekable streams are buffered into memory on construction because the
    container format needs to rewind the header peek and to skip forward to
    frame boundaries.

    :param stream: The binary input stream
    """

    def __init__(self, stream: BinaryIO):
        if not stream.seekable():
            stream = io.BytesIO(stream.read())
        self.stream = stream
        position = stream.tell()
        self.length = stream.seek(0, io.SEEK_END)
        stream.seek(position)

    def tell(self) -> int:
        return self.stream.tell()

    def seek(self, position: int) -> None:
        self.stream.seek(position)

    @property
    def remaining(self) -> int:
        """Number of bytes between the cursor and the end of the stream."""
        return max(self.length - self.tell(), 0)

    def _read_raw(self, size: int, offset: int) -> bytes:
        try:
            return self.stream.read(size)
        except OSError as e:
            raise TruncatedError(f"Read of {size} bytes at offset {offset} failed", offset) from e

    def read(self, size: int) -> bytes:
        """
        Reads exactly ``size`` bytes.

        Sizes beyond the end of the stream are rejected before anything is
        read, so a corrupt length field never triggers a huge allocation.

        :param size: Number of bytes to read
        :return: The bytes read
        :raises TruncatedError: If the stream ends early or fails
        """
        offset = self.tell()
        if size > self.remaining:
            raise TruncatedError(
                f"Expected {size} bytes at offset {offset}, only {self.remaining} left", offset
            ) from EOFError(f"End of stream at offset {self.length}")
        data = self._read_raw(size, offset)
        if len(data) < size:
            raise TruncatedError(
                f"Expected {size} bytes at offset {offset}, got {len(data)}", offset
            ) from EOFError(f"End of stream at offset {offset + len(data)}")
        return data

    def peek(self, size: int) -> bytes:
        """Returns up to ``size`` bytes without moving the cursor."""
        offset = self.tell()
        data = self._read_raw(min(size, self.remaining), offset)
        self.seek(offset)
        return data

    def skip(self, size: int) -> None:
        """Consumes ``size`` bytes, failing if they are not all present."""
        self.read(size)

    def read_int32(self) -> int:
        return INT32.unpack(self.read(INT32.size))[0]

    def read_int16(self) -> int:
        return INT16.unpack(self.read(INT16.size))[0]

    def read_uint8(self) -> int:
        return self.read(1)[0]


__all__ = ["BinaryReader", "INT32", "INT16"]
