"""
Frame sinks - consumers of composited frames.

A sink stands in for the host that turns frames into something visible:
- FrameSink: abstract base class
- DocumentSink: builds a ZtGfxDocument in memory
- PngSequenceSink: writes one PNG per frame plus a JSON manifest

The loader calls ``begin`` once, ``add_frame`` once per frame in order and
``finish`` last. It only does so after every frame composited successfully.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from ztgfx.formats.document import ComposedFrame, ZtGfxDocument
from ztgfx.formats.models import Container

logger = logging.getLogger(__name__)


class FrameSink(ABC):
    """Base class for all frame sinks."""

    def begin(self, container: Container) -> None:
        """Called before the first frame with the decoded container."""
        pass

    @abstractmethod
    def add_frame(self, frame: ComposedFrame) -> None:
        """Receives the next composited frame."""
        ...

    def finish(self) -> Any:
        """Called after the last frame. The return value is returned by the loader."""
        return None


class DocumentSink(FrameSink):
    """Collects all frames into a :class:`ZtGfxDocument`."""

    def __init__(self) -> None:
        self._container: Container | None = None
        self._frames: list[ComposedFrame] = []

    def begin(self, container: Container) -> None:
        self._container = container
        self._frames = []

    def add_frame(self, frame: ComposedFrame) -> None:
        self._frames.append(frame)

    def finish(self) -> ZtGfxDocument:
        if self._container is None:
            raise RuntimeError("DocumentSink.finish() called before begin()")
        first = self._frames[0] if self._frames else None
        return ZtGfxDocument(
            width=first.width if first else 0,
            height=first.height if first else 0,
            animation_speed=self._container.animation_speed,
            palette_file_name=self._container.palette_file_name,
            magic_variant=self._container.magic_variant,
            frames=list(self._frames),
        )


class ManifestFrame(BaseModel):
    """Manifest entry for one exported frame."""

    model_config = ConfigDict(populate_by_name=True)

    index: int
    file: str
    width: int
    height: int
    row_offset_v: int = Field(alias='rowOffsetV')
    row_offset_h: int = Field(alias='rowOffsetH')


class SequenceManifest(BaseModel):
    """Describes an exported PNG sequence."""

    model_config = ConfigDict(populate_by_name=True)

    animation_speed: int = Field(alias='animationSpeed')
    palette_file_name: str = Field(alias='paletteFileName')
    magic_variant: str = Field(alias='magicVariant')
    frames: list[ManifestFrame] = Field(default_factory=list)


class PngSequenceSink(FrameSink):
    """
    Writes every frame as PNG into a directory.

    Files are named ``{stem}_{index:03d}.png``. A ``frames.json`` manifest
    with the animation speed and per-frame offsets is written by ``finish``.

    :param directory: Output directory, created if missing
    :param stem: File name prefix
    """

    MANIFEST_NAME = "frames.json"

    def __init__(self, directory: Union[str, Path], stem: str = "frame"):
        self.directory = Path(directory)
        self.stem = stem
        self._manifest: SequenceManifest | None = None
        self.written: list[Path] = []

    def begin(self, container: Container) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._manifest = SequenceManifest(
            animation_speed=container.animation_speed,
            palette_file_name=container.palette_file_name,
            magic_variant=container.magic_variant.value,
        )
        self.written = []

    def add_frame(self, frame: ComposedFrame) -> None:
        if self._manifest is None:
            raise RuntimeError("PngSequenceSink.add_frame() called before begin()")
        file_name = f"{self.stem}_{frame.index:03d}.png"
        path = self.directory / file_name
        if frame.width == 0 or frame.height == 0:
            logger.warning(f"Frame {frame.index} is empty, writing manifest entry only")
        else:
            frame.surface.save(path)
            self.written.append(path)
        self._manifest.frames.append(
            ManifestFrame(
                index=frame.index,
                file=file_name,
                width=frame.width,
                height=frame.height,
                row_offset_v=frame.row_offset_v,
                row_offset_h=frame.row_offset_h,
            )
        )

    def finish(self) -> Path:
        if self._manifest is None:
            raise RuntimeError("PngSequenceSink.finish() called before begin()")
        manifest_path = self.directory / self.MANIFEST_NAME
        content = self._manifest.model_dump(by_alias=True, mode='json')
        manifest_path.write_text(json.dumps(content, indent=2), encoding="utf-8")
        return manifest_path


__all__ = [
    "FrameSink",
    "DocumentSink",
    "ManifestFrame",
    "SequenceManifest",
    "PngSequenceSink",
]
