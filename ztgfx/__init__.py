"""
ztgfx - Decoder for ZTGFX sprite animations and their BGRA palettes
"""

from .exceptions import (
    ZtGfxError,
    FormatError,
    TruncatedError,
    InvalidLengthError,
    PaletteError,
    PaletteNotFoundError,
    PaletteIndexError,
    UnrecognizedFileError,
    DecodeCancelledError,
)
from .events import (
    Milestone,
    DecodeEvent,
    EventSink,
    NullEventSink,
    LoggingEventSink,
    RecordingEventSink,
)
from .surface import Surface
from .compositor import RunMode, composite_frame, composite_frames
from .formats import (
    HeaderVariant,
    Run,
    Row,
    Frame,
    Container,
    Rgba,
    Palette,
    decode_container,
    read_palette,
    load_palette,
    ComposedFrame,
    ZtGfxDocument,
)
from .sinks import FrameSink, DocumentSink, PngSequenceSink
from .loader import load, read_container
from .config import Settings, settings

__all__ = [
    # Errors
    "ZtGfxError",
    "FormatError",
    "TruncatedError",
    "InvalidLengthError",
    "PaletteError",
    "PaletteNotFoundError",
    "PaletteIndexError",
    "UnrecognizedFileError",
    "DecodeCancelledError",
    # Events
    "Milestone",
    "DecodeEvent",
    "EventSink",
    "NullEventSink",
    "LoggingEventSink",
    "RecordingEventSink",
    # Records
    "HeaderVariant",
    "Run",
    "Row",
    "Frame",
    "Container",
    "Rgba",
    "Palette",
    # Decoding and compositing
    "decode_container",
    "read_palette",
    "load_palette",
    "Surface",
    "RunMode",
    "composite_frame",
    "composite_frames",
    # Documents and sinks
    "ComposedFrame",
    "ZtGfxDocument",
    "FrameSink",
    "DocumentSink",
    "PngSequenceSink",
    "load",
    "read_container",
    # Configuration
    "Settings",
    "settings",
]

__version__ = "0.1.0"
