"""
Implements :class:`Surface`, the RGBA raster a frame is composited into.
"""

from __future__ import annotations

import io
import os

import PIL.Image
import numpy as np


class Surface:
    """
    A width x height grid of RGBA pixels.

    The pixels are stored as a (height, width, 4) uint8 numpy array which is
    owned by the surface. A new surface is fully transparent.
    """

    def __init__(self, width: int, height: int, pixels: np.ndarray | None = None):
        """
        :param width: Width in pixels
        :param height: Height in pixels
        :param pixels: Optional pixel data of shape (height, width, 4). Copied.

        Raises a ValueError if the pixel data does not match the size
        """
        if width < 0 or height < 0:
            raise ValueError(f"Invalid surface size {width}x{height}")
        self.width = width
        self.height = height
        if pixels is None:
            self.pixels = np.zeros((height, width, 4), dtype=np.uint8)
        else:
            if pixels.shape != (height, width, 4):
                raise ValueError(
                    f"Pixel data of shape {pixels.shape} does not match {width}x{height} RGBA"
                )
            self.pixels = np.array(pixels, dtype=np.uint8, copy=True)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Returns the RGBA value at the given position."""
        return tuple(int(value) for value in self.pixels[y, x])

    def is_transparent(self) -> bool:
        """True if no pixel of the surface has a non-zero alpha value."""
        return not self.pixels[..., 3].any()

    def is_row_transparent(self, y: int) -> bool:
        return not self.pixels[y, :, 3].any()

    def to_pil(self) -> PIL.Image.Image:
        """
        Converts the surface to a PIL image

        :return: A new RGBA PIL image
        """
        if self.pixels.size == 0:
            return PIL.Image.new("RGBA", self.size)
        return PIL.Image.fromarray(self.pixels)

    def encode(self, filetype: str = "png") -> bytes:
        """
        Compresses the surface and returns the file data.

        :param filetype: Any format supported by PIL which can store alpha
        :return: The compressed data
        """
        output = io.BytesIO()
        self.to_pil().save(output, format=filetype.lstrip(".").upper())
        return output.getvalue()

    def to_png(self) -> bytes:
        return self.encode("png")

    def save(self, target: str | os.PathLike) -> None:
        """
        Saves the surface to disk, the format is derived from the extension.

        :param target: The target file name
        """
        self.to_pil().save(target)

    def copy(self) -> Surface:
        return Surface(self.width, self.height, self.pixels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Surface):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.pixels, other.pixels)

    def __repr__(self) -> str:
        return f"Surface({self.width}x{self.height})"


__all__ = ["Surface"]
