"""Library configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

from ztgfx.compositor import RunMode


class Settings(BaseSettings):
    """ZTGFX settings, read from ``ZTGFX_*`` environment variables."""

    # Palette resolution (None = working directory)
    PALETTE_DIR: Optional[Path] = None

    # Decoding
    NAME_ENCODING: str = "latin-1"  # Encoding of the palette name in the header

    # Compositing
    RUN_MODE: RunMode = RunMode.SEQUENTIAL
    COMPOSITE_WORKERS: int = 1  # Threads used to composite frames

    # Logging level used by the command line tool
    LOG_LEVEL: str = "WARNING"

    model_config = {"env_prefix": "ZTGFX_"}


settings = Settings()
