"""
ZtGfxDocument - Pydantic model for a fully loaded ZTGFX animation.

A document holds one composed frame per container frame together with the
container metadata a host needs to display the animation:
- width/height: size of the first frame (0x0 for an empty container)
- animation_speed: as stored in the container header
- frames: RGBA surfaces with their placement offsets

Example usage:
    # Load a container and its palette
    doc = ZtGfxDocument.load('animations/idle.ztgfx', palette_dir='animations')

    # Inspect a file without resolving the palette
    info = ZtGfxDocument.load_metadata('animations/idle.ztgfx')
"""

from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ztgfx.exceptions import ZtGfxError
from ztgfx.surface import Surface
from .models import HeaderVariant


class ComposedFrame(BaseModel):
    """A composited frame as handed to a frame sink."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    index: int = Field(ge=0)
    surface: Surface
    row_offset_v: int = 0
    row_offset_h: int = 0

    @property
    def width(self) -> int:
        return self.surface.width

    @property
    def height(self) -> int:
        return self.surface.height

    @property
    def pixels(self):
        return self.surface.pixels


class ZtGfxDocument(BaseModel):
    """
    A decoded and composited ZTGFX file.

    Documents are usually created through :meth:`load` or by a
    :class:`~ztgfx.sinks.DocumentSink`.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    animation_speed: int = Field(default=0, alias='animationSpeed')
    palette_file_name: str = Field(default='', alias='paletteFileName')
    magic_variant: HeaderVariant = Field(default=HeaderVariant.BARE, alias='magicVariant')
    frames: list[ComposedFrame] = Field(default_factory=list)

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    def get_frame(self, index: int) -> Optional[ComposedFrame]:
        """
        Get a frame by index.

        Args:
            index: Frame index

        Returns:
            The composed frame or None if index out of range
        """
        if 0 <= index < len(self.frames):
            return self.frames[index]
        return None

    @classmethod
    def load(cls, file: Union[str, Path, BinaryIO], **options: Any) -> 'ZtGfxDocument':
        """
        Load a document from a ZTGFX file.

        Args:
            file: Path to the container or a binary stream
            **options: Passed to :func:`ztgfx.loader.load` (palette,
                palette_dir, events, run_mode, workers, cancel_event)

        Returns:
            ZtGfxDocument with all frames composited

        Raises:
            UnrecognizedFileError: If the file or its palette is invalid
        """
        # Import here to avoid circular imports
        from ztgfx.loader import load
        from ztgfx.sinks import DocumentSink

        return load(file, sink=DocumentSink(), **options)

    @classmethod
    def load_metadata(cls, file: Union[str, Path, BinaryIO]) -> dict[str, Any]:
        """
        Load only the container header and frame geometry.

        The palette is not resolved and nothing is composited.

        Args:
            file: Path to the container or a binary stream

        Returns:
            Dict with container metadata
        """
        from ztgfx.loader import read_container

        container = read_container(file)
        frames_info = [
            {
                'index': index,
                'width': frame.width,
                'height': frame.height,
                'row_offset_v': frame.row_offset_v,
                'row_offset_h': frame.row_offset_h,
                'byte_size': frame.byte_size,
                'start_offset': frame.start_offset,
                'overrun': frame.overrun,
            }
            for index, frame in enumerate(container.frames)
        ]
        return {
            'magic_variant': container.magic_variant.value,
            'animation_speed': container.animation_speed,
            'palette_file_name': container.palette_file_name,
            'frame_count': container.frame_count,
            'frames': frames_info,
        }

    @classmethod
    def is_valid(cls, file: Union[str, Path, BinaryIO]) -> bool:
        """
        Check if a file decodes as a ZTGFX container.

        Args:
            file: Path to file or binary stream

        Returns:
            True if the container decodes without errors
        """
        try:
            cls.load_metadata(file)
        except (ZtGfxError, OSError):
            return False
        return True


__all__ = ['ComposedFrame', 'ZtGfxDocument']
