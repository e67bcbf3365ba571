"""
Palette file decoder.

A palette file holds an int32 color count followed by one 4-byte entry per
color, stored in B, G, R, A order. Colors are returned in RGBA order.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Union

import numpy as np

from ztgfx.events import EventSink, Milestone, emit
from ztgfx.exceptions import PaletteNotFoundError
from .container import read_length
from .models import Palette, Rgba
from .reader import BinaryReader

PALETTE_ENTRY_SIZE = 4
"Bytes per palette entry"

BGRA_TO_RGBA = [2, 1, 0, 3]


def read_palette(stream: BinaryIO) -> Palette:
    """
    Decodes a palette from a binary stream.

    :param stream: The palette stream, positioned at its start
    :return: The palette with colors in RGBA order
    :raises TruncatedError: If the stream holds fewer entries than declared
    :raises InvalidLengthError: If the color count is negative
    """
    reader = BinaryReader(stream)
    color_count = read_length(reader, "palette color count")
    entries = np.frombuffer(reader.read(color_count * PALETTE_ENTRY_SIZE), dtype=np.uint8)
    rgba = entries.reshape(-1, PALETTE_ENTRY_SIZE)[:, BGRA_TO_RGBA]
    return Palette(
        color_count=color_count,
        colors=tuple(Rgba(*color) for color in rgba.tolist()),
    )


def resolve_palette_path(
    name: str, palette_dir: Union[str, Path, None] = None
) -> Path:
    """
    Resolves a palette file name as stored inside a container.

    Backslash separators are converted. Relative names are resolved against
    ``palette_dir`` or the working directory.

    :param name: The palette file name from the container header
    :param palette_dir: Base directory for relative names
    :return: The palette path
    """
    path = Path(name.replace("\\", "/"))
    if path.is_absolute():
        return path
    base = Path(palette_dir) if palette_dir is not None else Path(os.getcwd())
    return base / path


def load_palette(
    name: Union[str, Path],
    palette_dir: Union[str, Path, None] = None,
    events: EventSink | None = None,
) -> Palette:
    """
    Opens and decodes a palette file.

    :param name: Palette file name or path
    :param palette_dir: Base directory for relative names
    :param events: Optional event sink
    :return: The palette
    :raises PaletteNotFoundError: If the file can not be opened
    """
    path = resolve_palette_path(str(name), palette_dir)
    try:
        palette_file = open(path, "rb")
    except OSError as e:
        raise PaletteNotFoundError(path) from e
    with palette_file:
        palette = read_palette(palette_file)
    emit(events, Milestone.PALETTE, path=str(path), color_count=palette.color_count)
    return palette


__all__ = [
    "PALETTE_ENTRY_SIZE",
    "read_palette",
    "resolve_palette_path",
    "load_palette",
]
