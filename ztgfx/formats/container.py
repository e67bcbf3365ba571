"""
ZTGFX container decoder.

Container layout (little-endian):
- optional "FATZ" magic followed by 5 reserved bytes
- int32 animation speed
- int32 name length + palette file name (NUL padded)
- int32 frame count
- per frame: int32 byte size, five int16 header fields, then one record per
  row: uint8 run count, per run uint8 transparent count, uint8 color count and
  the palette indices

The frame byte size is used to resynchronize the stream: a frame whose row data
ends before its declared size is skipped forward to that boundary. The cursor
never moves backwards.
"""

from __future__ import annotations

import logging
import threading
from typing import BinaryIO

from ztgfx.events import EventSink, Milestone, emit
from ztgfx.exceptions import DecodeCancelledError, InvalidLengthError
from .models import (
    CLASSIC_MAGIC,
    CLASSIC_RESERVED_SIZE,
    Container,
    Frame,
    HeaderVariant,
    Row,
    Run,
)
from .reader import BinaryReader

DEFAULT_NAME_ENCODING = "latin-1"


def read_header_variant(reader: BinaryReader) -> HeaderVariant:
    """
    Detects the header variant and positions the reader at the animation speed.

    :param reader: Reader positioned at the start of the container
    :return: The detected variant
    """
    start = reader.tell()
    if reader.peek(len(CLASSIC_MAGIC)) == CLASSIC_MAGIC:
        reader.skip(len(CLASSIC_MAGIC) + CLASSIC_RESERVED_SIZE)
        return HeaderVariant.CLASSIC
    reader.seek(start)
    return HeaderVariant.BARE


def read_length(reader: BinaryReader, field: str) -> int:
    """Reads an int32 length or count field, rejecting negative values."""
    value = reader.read_int32()
    if value < 0:
        raise InvalidLengthError(field, value)
    return value


def decode_run(reader: BinaryReader) -> Run:
    transparent_count = reader.read_uint8()
    color_count = reader.read_uint8()
    return Run(
        transparent_count=transparent_count,
        color_count=color_count,
        indices=reader.read(color_count),
    )


def decode_row(reader: BinaryReader) -> Row:
    run_count = reader.read_uint8()
    return Row(
        run_count=run_count,
        runs=tuple(decode_run(reader) for _ in range(run_count)),
    )


def decode_frame(
    reader: BinaryReader,
    index: int = 0,
    events: EventSink | None = None,
) -> Frame:
    """
    Decodes one frame record and resynchronizes to its declared end.

    :param reader: Reader positioned at the frame's size prefix
    :param index: Frame number, used for events only
    :param events: Optional event sink
    :return: The decoded frame
    """
    byte_size = reader.read_int32()
    start_offset = reader.tell()
    height = reader.read_int16()
    width = reader.read_int16()
    row_offset_v = reader.read_int16()
    row_offset_h = reader.read_int16()
    reader.read_int16()  # reserved
    if height < 0:
        raise InvalidLengthError("frame height", height)
    if width < 0:
        raise InvalidLengthError("frame width", width)

    rows = tuple(decode_row(reader) for _ in range(height))

    consumed_size = reader.tell() - start_offset
    end_offset = start_offset + byte_size
    if consumed_size < byte_size:
        emit(events, Milestone.FRAME_RESYNC, index=index,
             position=start_offset + consumed_size, target=end_offset,
             skipped=byte_size - consumed_size)
        reader.seek(end_offset)
    elif consumed_size > byte_size:
        emit(events, Milestone.FRAME_OVERRUN, logging.WARNING, index=index,
             declared=byte_size, consumed=consumed_size,
             overrun=consumed_size - byte_size)

    frame = Frame(
        byte_size=byte_size,
        start_offset=start_offset,
        height=height,
        width=width,
        row_offset_v=row_offset_v,
        row_offset_h=row_offset_h,
        rows=rows,
        consumed_size=consumed_size,
    )
    emit(events, Milestone.FRAME, index=index, byte_size=byte_size,
         width=width, height=height,
         row_offset_v=row_offset_v, row_offset_h=row_offset_h)
    return frame


def decode_container(
    stream: BinaryIO,
    events: EventSink | None = None,
    cancel_event: threading.Event | None = None,
    name_encoding: str = DEFAULT_NAME_ENCODING,
) -> Container:
    """
    Decodes a ZTGFX container.

    :param stream: Binary stream positioned at the start of the container
    :param events: Optional sink receiving decode milestones
    :param cancel_event: If set while decoding, the decode is aborted
    :param name_encoding: Text encoding of the palette file name
    :return: The fully decoded container
    :raises TruncatedError: If the stream ends early
    :raises InvalidLengthError: If a length field is negative
    :raises DecodeCancelledError: If ``cancel_event`` was set
    """
    reader = BinaryReader(stream)

    magic_variant = read_header_variant(reader)
    emit(events, Milestone.HEADER_VARIANT, variant=magic_variant.value)

    animation_speed = reader.read_int32()
    name_length = read_length(reader, "palette name length")
    palette_file_name = (
        reader.read(name_length).decode(name_encoding, errors="replace").rstrip("\0")
    )
    frame_count = read_length(reader, "frame count")
    emit(events, Milestone.HEADER, animation_speed=animation_speed,
         palette_file_name=palette_file_name, frame_count=frame_count)

    frames = []
    for index in range(frame_count):
        if cancel_event is not None and cancel_event.is_set():
            raise DecodeCancelledError(f"Decoding cancelled before frame {index}")
        frames.append(decode_frame(reader, index, events))

    return Container(
        magic_variant=magic_variant,
        animation_speed=animation_speed,
        palette_file_name=palette_file_name,
        frame_count=frame_count,
        frames=tuple(frames),
    )


__all__ = [
    "DEFAULT_NAME_ENCODING",
    "read_header_variant",
    "read_length",
    "decode_run",
    "decode_row",
    "decode_frame",
    "decode_container",
]
