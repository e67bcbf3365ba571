"""ZTGFX file formats.

This module contains the binary decoders for containers and palettes and the
records they produce.
"""

from .models import (
    HeaderVariant,
    Run,
    Row,
    Frame,
    Container,
    Rgba,
    Palette,
)
from .reader import BinaryReader
from .container import decode_container, decode_frame
from .palette import read_palette, load_palette, resolve_palette_path
from .document import ComposedFrame, ZtGfxDocument

__all__ = [
    # Records
    'HeaderVariant',
    'Run',
    'Row',
    'Frame',
    'Container',
    'Rgba',
    'Palette',
    # Decoders
    'BinaryReader',
    'decode_container',
    'decode_frame',
    'read_palette',
    'load_palette',
    'resolve_palette_path',
    # Document
    'ComposedFrame',
    'ZtGfxDocument',
]
