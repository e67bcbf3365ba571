"""
Loads ZTGFX files: container decode, palette load, compositing.

The three stages run one after another. Any decode or palette failure aborts
the whole load and surfaces as :class:`~ztgfx.exceptions.UnrecognizedFileError`
with the specific error attached. The frame sink only receives frames once
all of them composited, so a failed or cancelled load never exposes partial
results.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Iterator, Union

from ztgfx.compositor import RunMode, composite_frames
from ztgfx.config import Settings, settings as default_settings
from ztgfx.events import EventSink, LoggingEventSink, Milestone, emit
from ztgfx.exceptions import DecodeCancelledError, UnrecognizedFileError, ZtGfxError
from ztgfx.formats.container import decode_container
from ztgfx.formats.document import ComposedFrame
from ztgfx.formats.models import Container, Palette
from ztgfx.formats.palette import load_palette
from ztgfx.sinks import DocumentSink, FrameSink

SourceTypes = Union[str, Path, BinaryIO]
"A container file name or an open binary stream"


@contextmanager
def open_source(source: SourceTypes) -> Iterator[BinaryIO]:
    """
    Yields a binary stream for a file name or passes a stream through.

    Streams passed in are not closed.
    """
    if isinstance(source, (str, Path)):
        with open(source, "rb") as stream:
            yield stream
    else:
        yield source


def read_container(
    source: SourceTypes,
    events: EventSink | None = None,
    settings: Settings | None = None,
) -> Container:
    """
    Decodes only the container of a ZTGFX file.

    :param source: File name or binary stream
    :param events: Optional event sink
    :param settings: Settings to use instead of the global ones
    :return: The container
    :raises UnrecognizedFileError: If the container is malformed
    """
    settings = settings or default_settings
    try:
        with open_source(source) as stream:
            return decode_container(stream, events, name_encoding=settings.NAME_ENCODING)
    except ZtGfxError as e:
        emit(events, Milestone.LOAD_FAILED, logging.ERROR,
             error_type=type(e).__name__, error=str(e))
        raise UnrecognizedFileError(e) from e


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise DecodeCancelledError("Loading cancelled")


def load(
    source: SourceTypes,
    *,
    palette: Palette | None = None,
    palette_dir: Union[str, Path, None] = None,
    sink: FrameSink | None = None,
    events: EventSink | None = None,
    run_mode: RunMode | str | None = None,
    workers: int | None = None,
    cancel_event: threading.Event | None = None,
    settings: Settings | None = None,
) -> Any:
    """
    Loads a ZTGFX file and hands the composited frames to a sink.

    :param source: Container file name or binary stream
    :param palette: Palette to use instead of the one the container names
    :param palette_dir: Base directory for the container's palette name
    :param sink: Receives the frames. A :class:`DocumentSink` by default.
    :param events: Receives decode milestones. Logged by default.
    :param run_mode: How runs within a row are combined
    :param workers: Threads used for compositing
    :param cancel_event: Set it from another thread to abort the load
    :param settings: Settings to use instead of the global ones
    :return: Whatever ``sink.finish()`` returns, a ZtGfxDocument by default
    :raises UnrecognizedFileError: If the container or palette is invalid
    :raises DecodeCancelledError: If the load was cancelled
    """
    settings = settings or default_settings
    sink = sink if sink is not None else DocumentSink()
    events = events if events is not None else LoggingEventSink()
    run_mode = RunMode(run_mode if run_mode is not None else settings.RUN_MODE)
    workers = workers if workers is not None else settings.COMPOSITE_WORKERS
    palette_dir = palette_dir if palette_dir is not None else settings.PALETTE_DIR

    try:
        with open_source(source) as stream:
            container = decode_container(
                stream, events, cancel_event, settings.NAME_ENCODING
            )
        _check_cancelled(cancel_event)
        if palette is None:
            palette = load_palette(container.palette_file_name, palette_dir, events)
        surfaces = composite_frames(
            container.frames, palette, run_mode, workers, cancel_event
        )
        _check_cancelled(cancel_event)
    except ZtGfxError as e:
        emit(events, Milestone.LOAD_FAILED, logging.ERROR,
             error_type=type(e).__name__, error=str(e))
        raise UnrecognizedFileError(e) from e

    frames = [
        ComposedFrame(
            index=index,
            surface=surface,
            row_offset_v=frame.row_offset_v,
            row_offset_h=frame.row_offset_h,
        )
        for index, (frame, surface) in enumerate(zip(container.frames, surfaces))
    ]
    emit(events, Milestone.COMPOSITED, frame_count=len(frames),
         color_count=palette.color_count, run_mode=run_mode.value)

    sink.begin(container)
    for frame in frames:
        sink.add_frame(frame)
    return sink.finish()


__all__ = ["SourceTypes", "open_source", "read_container", "load"]
