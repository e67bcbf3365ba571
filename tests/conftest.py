"""
Pytest fixtures for ztgfx tests
"""

import pytest

from ztgfx import Palette, Rgba

from ztgfx_helpers import TEST_COLORS, encode_container, encode_frame, encode_palette


@pytest.fixture
def palette() -> Palette:
    """
    Returns a five color palette: red, green, blue, white and a translucent color.
    """
    return Palette(color_count=len(TEST_COLORS), colors=tuple(Rgba(*c) for c in TEST_COLORS))


@pytest.fixture
def palette_dir(tmp_path):
    """
    Returns a directory holding the five color palette as ``test.pal``.
    """
    (tmp_path / "test.pal").write_bytes(encode_palette(TEST_COLORS))
    return tmp_path


@pytest.fixture
def two_frame_data() -> bytes:
    """
    Returns a bare-header container with a 3x2 and a 2x1 frame.
    """
    return encode_container(
        [
            encode_frame(3, [[(0, [0, 1, 2])], [(1, [3])]], offset_v=-5, offset_h=7),
            encode_frame(2, [[(1, [4])]], offset_v=2, offset_h=-3),
        ],
        speed=120,
    )


@pytest.fixture
def container_file(palette_dir, two_frame_data):
    """
    Writes the two frame container next to its palette and returns the path.
    """
    path = palette_dir / "anim.ztgfx"
    path.write_bytes(two_frame_data)
    return path
