"""
Frame compositor.

Turns a decoded :class:`~ztgfx.formats.models.Frame` and a palette into a
:class:`~ztgfx.surface.Surface`. Every pixel starts fully transparent, runs
are painted left to right along their row and anything beyond the frame width
is clipped.

Two run interpretations are supported:

- RunMode.SEQUENTIAL: each run skips its transparent pixels, then paints its
  indices, continuing where the previous run ended (default)
- RunMode.LAST_RUN: the row uses only the transparent count of its last run,
  followed by the indices of all runs concatenated
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Sequence

import numpy as np

from ztgfx.exceptions import DecodeCancelledError
from ztgfx.formats.models import Frame, Palette, Row
from ztgfx.surface import Surface


class RunMode(str, Enum):
    """How the runs of a row are combined."""
    SEQUENTIAL = "sequential"
    LAST_RUN = "last_run"


def _paint(line: np.ndarray, x: int, colors: np.ndarray) -> int:
    """Writes colors into a row starting at x, clipped to the row. Returns the new x."""
    width = line.shape[0]
    if x < width:
        count = min(len(colors), width - x)
        line[x:x + count] = colors[:count]
    return x + len(colors)


def _composite_row_sequential(
    line: np.ndarray, row: Row, width: int, palette: Palette, table: np.ndarray
) -> None:
    x = 0
    for run in row.runs:
        x += run.transparent_count
        if run.transparent_count == width:
            break
        x = _paint(line, x, palette.resolve(run.indices, table))


def _composite_row_last_run(
    line: np.ndarray, row: Row, width: int, palette: Palette, table: np.ndarray
) -> None:
    transparent_count = row.runs[-1].transparent_count if row.runs else 0
    if transparent_count == width:
        return
    indices = b"".join(run.indices for run in row.runs)
    _paint(line, transparent_count, palette.resolve(indices, table))


_ROW_COMPOSITORS = {
    RunMode.SEQUENTIAL: _composite_row_sequential,
    RunMode.LAST_RUN: _composite_row_last_run,
}


def composite_frame(
    frame: Frame,
    palette: Palette,
    mode: RunMode | str = RunMode.SEQUENTIAL,
) -> Surface:
    """
    Composites a frame into a new surface.

    :param frame: The decoded frame
    :param palette: The palette its indices refer to
    :param mode: How runs within a row are combined
    :return: A new surface of the frame's size
    :raises PaletteIndexError: If a run references an index outside the palette
    """
    composite_row = _ROW_COMPOSITORS[RunMode(mode)]
    surface = Surface(frame.width, frame.height)
    table = palette.to_array()
    for y, row in enumerate(frame.rows):
        composite_row(surface.pixels[y], row, frame.width, palette, table)
    return surface


def _composite_unless_cancelled(
    frame: Frame,
    palette: Palette,
    mode: RunMode | str,
    cancel_event: threading.Event | None,
) -> Surface:
    if cancel_event is not None and cancel_event.is_set():
        raise DecodeCancelledError("Compositing cancelled")
    return composite_frame(frame, palette, mode)


def composite_frames(
    frames: Sequence[Frame],
    palette: Palette,
    mode: RunMode | str = RunMode.SEQUENTIAL,
    workers: int | None = 1,
    cancel_event: threading.Event | None = None,
) -> list[Surface]:
    """
    Composites several frames, optionally in parallel.

    Frames only share the read-only palette, so they can be composited in any
    order. The result keeps the order of ``frames``.

    :param frames: The frames to composite
    :param palette: The shared palette
    :param mode: How runs within a row are combined
    :param workers: Number of worker threads. None uses the CPU count, 1 or
        less composites on the calling thread.
    :param cancel_event: If set, frames not yet started are abandoned
    :return: One surface per frame
    :raises DecodeCancelledError: If ``cancel_event`` was set
    """
    num_workers = workers if workers is not None else (os.cpu_count() or 4)
    if num_workers <= 1 or len(frames) <= 1:
        return [
            _composite_unless_cancelled(frame, palette, mode, cancel_event)
            for frame in frames
        ]
    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        futures = [
            executor.submit(_composite_unless_cancelled, frame, palette, mode, cancel_event)
            for frame in frames
        ]
        return [future.result() for future in futures]


__all__ = ["RunMode", "composite_frame", "composite_frames"]
