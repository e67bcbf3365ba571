"""
Immutable records produced by the ZTGFX decoders.

Record hierarchy:
    Container
    └── Frame (one per animation cell)
        └── Row (one per scanline)
            └── Run (transparent skip followed by palette indices)

    Palette
    └── Rgba

All models are frozen pydantic models: they are built once during decoding
and only read afterwards.
"""

from enum import Enum
from typing import NamedTuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ztgfx.exceptions import PaletteIndexError

CLASSIC_MAGIC = b"FATZ"
"Leading bytes of the classic header variant"

CLASSIC_RESERVED_SIZE = 5
"Unused bytes following the classic magic"


class HeaderVariant(str, Enum):
    """Container header layouts."""
    CLASSIC = "classic"
    BARE = "bare"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra='forbid')


class Run(_Record):
    """A transparent skip followed by a span of palette indices."""

    transparent_count: int = Field(ge=0, le=255)
    color_count: int = Field(ge=0, le=255)
    indices: bytes = b""

    @model_validator(mode='after')
    def _check_indices(self) -> 'Run':
        if len(self.indices) != self.color_count:
            raise ValueError(
                f"Run declares {self.color_count} colors but holds {len(self.indices)} indices"
            )
        return self


class Row(_Record):
    """One scanline of a frame."""

    run_count: int = Field(ge=0, le=255)
    runs: tuple[Run, ...] = ()

    @model_validator(mode='after')
    def _check_runs(self) -> 'Row':
        if len(self.runs) != self.run_count:
            raise ValueError(f"Row declares {self.run_count} runs but holds {len(self.runs)}")
        return self


class Frame(_Record):
    """
    One animation cell.

    ``byte_size`` is the declared size of the frame record after its own
    4-byte size prefix, ``start_offset`` the stream position right after that
    prefix and ``consumed_size`` the number of bytes the decoder actually read
    from there.
    """

    byte_size: int
    start_offset: int = Field(ge=0)
    height: int = Field(ge=0)
    width: int = Field(ge=0)
    row_offset_v: int = 0
    row_offset_h: int = 0
    rows: tuple[Row, ...] = ()
    consumed_size: int = Field(default=0, ge=0)

    @model_validator(mode='after')
    def _check_rows(self) -> 'Frame':
        if len(self.rows) != self.height:
            raise ValueError(f"Frame height is {self.height} but holds {len(self.rows)} rows")
        return self

    @property
    def end_offset(self) -> int:
        """The declared end of the frame record."""
        return self.start_offset + self.byte_size

    @property
    def overrun(self) -> int:
        """Bytes read beyond the declared end of the frame (0 if none)."""
        return max(0, self.consumed_size - self.byte_size)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


class Container(_Record):
    """A decoded ZTGFX file without its palette."""

    magic_variant: HeaderVariant
    animation_speed: int
    palette_file_name: str
    frame_count: int = Field(ge=0)
    frames: tuple[Frame, ...] = ()

    @model_validator(mode='after')
    def _check_frames(self) -> 'Container':
        if len(self.frames) != self.frame_count:
            raise ValueError(
                f"Container declares {self.frame_count} frames but holds {len(self.frames)}"
            )
        return self


class Rgba(NamedTuple):
    """An 8-bit RGBA color."""
    r: int
    g: int
    b: int
    a: int



class Palette(_Record):
    """Ordered table of colors addressed by the pixel runs of a container."""

    color_count: int = Field(ge=0)
    colors: tuple[Rgba, ...] = ()

    @model_validator(mode='after')
    def _check_colors(self) -> 'Palette':
        if len(self.colors) != self.color_count:
            raise ValueError(
                f"Palette declares {self.color_count} colors but holds {len(self.colors)}"
            )
        return self

    def __len__(self) -> int:
        return self.color_count

    def __getitem__(self, index: int) -> Rgba:
        if not 0 <= index < self.color_count:
            raise PaletteIndexError(index, self.color_count)
        return self.colors[index]

    def to_array(self) -> np.ndarray:
        """
        Returns the palette as lookup table.

        :return: A new (color_count, 4) uint8 array in RGBA order
        """
        if not self.colors:
            return np.zeros((0, 4), dtype=np.uint8)
        return np.array(self.colors, dtype=np.uint8)

    def resolve(self, indices: bytes, table: np.ndarray | None = None) -> np.ndarray:
        """
        Maps palette index bytes to colors.

        :param indices: The index bytes of a run
        :param table: A lookup table from :meth:`to_array` to reuse
        :return: A (len(indices), 4) uint8 array
        :raises PaletteIndexError: If an index is >= color_count
        """
        if table is None:
            table = self.to_array()
        lookup = np.frombuffer(indices, dtype=np.uint8)
        if lookup.size:
            invalid = np.flatnonzero(lookup >= self.color_count)
            if invalid.size:
                raise PaletteIndexError(int(lookup[invalid[0]]), self.color_count)
        return table[lookup]


__all__ = [
    "CLASSIC_MAGIC",
    "CLASSIC_RESERVED_SIZE",
    "HeaderVariant",
    "Run",
    "Row",
    "Frame",
    "Container",
    "Rgba",
    "Palette",
]
