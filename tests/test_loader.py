"""
Tests for the load pipeline: container, palette, compositing and sinks.
"""

import io
import logging
import struct
import threading

import pytest

from ztgfx import (
    DecodeCancelledError,
    FrameSink,
    HeaderVariant,
    InvalidLengthError,
    Milestone,
    PaletteIndexError,
    PaletteNotFoundError,
    RecordingEventSink,
    RunMode,
    Settings,
    TruncatedError,
    UnrecognizedFileError,
    ZtGfxDocument,
    load,
)

from ztgfx_helpers import (
    BLUE,
    CLEAR,
    GREEN,
    RED,
    SEMI,
    WHITE,
    encode_container,
    encode_frame,
)


class RecordingSink(FrameSink):
    """Sink remembering every call."""

    def __init__(self):
        self.calls = []

    def begin(self, container):
        self.calls.append(("begin", container.frame_count))

    def add_frame(self, frame):
        self.calls.append(("frame", frame.index))

    def finish(self):
        self.calls.append(("finish",))
        return "done"


class TestLoad:
    """Test successful loads."""

    def test_load_document(self, container_file, palette_dir):
        doc = load(container_file, palette_dir=palette_dir)
        assert isinstance(doc, ZtGfxDocument)
        assert doc.frame_count == 2
        assert (doc.width, doc.height) == (3, 2)
        assert doc.animation_speed == 120
        assert doc.palette_file_name == "test.pal"
        assert doc.magic_variant == HeaderVariant.BARE

        first, second = doc.frames
        assert (first.row_offset_v, first.row_offset_h) == (-5, 7)
        assert (second.row_offset_v, second.row_offset_h) == (2, -3)
        assert [first.surface.get_pixel(x, 0) for x in range(3)] == [RED, GREEN, BLUE]
        assert [first.surface.get_pixel(x, 1) for x in range(3)] == [CLEAR, WHITE, CLEAR]
        assert [second.surface.get_pixel(x, 0) for x in range(2)] == [CLEAR, SEMI]

    def test_load_from_stream(self, two_frame_data, palette_dir):
        doc = load(io.BytesIO(two_frame_data), palette_dir=palette_dir)
        assert doc.frame_count == 2

    def test_load_with_supplied_palette(self, two_frame_data, palette, tmp_path):
        events = RecordingEventSink()
        doc = load(io.BytesIO(two_frame_data), palette=palette,
                   palette_dir=tmp_path, events=events)
        assert doc.frame_count == 2
        assert events.of(Milestone.PALETTE) == []

    def test_document_load_classmethod(self, container_file, palette_dir):
        doc = ZtGfxDocument.load(container_file, palette_dir=palette_dir, workers=2)
        assert doc.get_frame(1).width == 2
        assert doc.get_frame(2) is None

    def test_empty_container(self, palette_dir):
        doc = load(io.BytesIO(encode_container([])), palette_dir=palette_dir)
        assert doc.frame_count == 0
        assert (doc.width, doc.height) == (0, 0)

    def test_sink_receives_frames_in_order(self, two_frame_data, palette_dir):
        sink = RecordingSink()
        result = load(io.BytesIO(two_frame_data), palette_dir=palette_dir, sink=sink)
        assert result == "done"
        assert sink.calls == [("begin", 2), ("frame", 0), ("frame", 1), ("finish",)]

    def test_milestones(self, two_frame_data, palette_dir):
        events = RecordingEventSink()
        load(io.BytesIO(two_frame_data), palette_dir=palette_dir, events=events)
        assert events.names == [
            Milestone.HEADER_VARIANT,
            Milestone.HEADER,
            Milestone.FRAME,
            Milestone.FRAME,
            Milestone.PALETTE,
            Milestone.COMPOSITED,
        ]

    def test_default_events_are_logged(self, two_frame_data, palette_dir, caplog):
        caplog.set_level(logging.DEBUG, logger="ztgfx.events")
        load(io.BytesIO(two_frame_data), palette_dir=palette_dir)
        assert any("palette_file_name='test.pal'" in r.getMessage() for r in caplog.records)

    def test_settings_select_run_mode(self, palette_dir):
        data = encode_container([encode_frame(4, [[(1, [0]), (1, [1])]])])
        sequential = load(io.BytesIO(data), palette_dir=palette_dir)
        last_run = load(io.BytesIO(data), palette_dir=palette_dir,
                        settings=Settings(RUN_MODE=RunMode.LAST_RUN))
        assert sequential.frames[0].surface.get_pixel(3, 0) == GREEN
        assert last_run.frames[0].surface.get_pixel(1, 0) == RED

    def test_settings_palette_dir(self, two_frame_data, palette_dir):
        doc = load(io.BytesIO(two_frame_data), settings=Settings(PALETTE_DIR=palette_dir))
        assert doc.frame_count == 2


class TestLoadFailures:
    """Test that every failure aborts the load with one wrapped error."""

    def test_truncated_container(self, two_frame_data, palette_dir):
        events = RecordingEventSink()
        with pytest.raises(UnrecognizedFileError) as exc_info:
            load(io.BytesIO(two_frame_data[:-1]), palette_dir=palette_dir, events=events)
        error = exc_info.value
        assert str(error) == "The file format is not recognized or is corrupt."
        assert isinstance(error.cause, TruncatedError)
        assert error.__cause__ is error.cause

        failed = events.of(Milestone.LOAD_FAILED)
        assert failed[0].data["error_type"] == "TruncatedError"
        assert failed[0].level == logging.ERROR

    def test_truncated_header(self, palette_dir):
        with pytest.raises(UnrecognizedFileError) as exc_info:
            load(io.BytesIO(b"\x01\x00"), palette_dir=palette_dir)
        assert isinstance(exc_info.value.cause, TruncatedError)

    def test_negative_length(self, palette_dir):
        data = b"\x00\x00\x00\x00\xff\xff\xff\xff"
        with pytest.raises(UnrecognizedFileError) as exc_info:
            load(io.BytesIO(data), palette_dir=palette_dir)
        assert isinstance(exc_info.value.cause, InvalidLengthError)

    def test_missing_palette(self, two_frame_data, tmp_path):
        with pytest.raises(UnrecognizedFileError) as exc_info:
            load(io.BytesIO(two_frame_data), palette_dir=tmp_path)
        assert isinstance(exc_info.value.cause, PaletteNotFoundError)

    def test_huge_name_length_on_disk(self, tmp_path, palette_dir):
        path = tmp_path / "huge_name.ztgfx"
        path.write_bytes(struct.pack("<ii", 100, 0x7FFFFFF0) + b"test.pal")
        with pytest.raises(UnrecognizedFileError) as exc_info:
            load(path, palette_dir=palette_dir)
        assert isinstance(exc_info.value.cause, TruncatedError)
        assert exc_info.value.cause.offset == 8

    def test_huge_palette_count_on_disk(self, two_frame_data, tmp_path):
        (tmp_path / "test.pal").write_bytes(struct.pack("<i", 0x7FFFFFFF) + bytes(8))
        with pytest.raises(UnrecognizedFileError) as exc_info:
            load(io.BytesIO(two_frame_data), palette_dir=tmp_path)
        assert isinstance(exc_info.value.cause, TruncatedError)

    def test_palette_index_out_of_range(self, palette_dir):
        sink = RecordingSink()
        data = encode_container([encode_frame(1, [[(0, [0])]]), encode_frame(1, [[(0, [200])]])])
        with pytest.raises(UnrecognizedFileError) as exc_info:
            load(io.BytesIO(data), palette_dir=palette_dir, sink=sink)
        assert isinstance(exc_info.value.cause, PaletteIndexError)
        assert sink.calls == []

    def test_missing_container_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load(tmp_path / "nothing.ztgfx", palette_dir=tmp_path)


class TestLoadCancellation:
    """Test aborting a load."""

    def test_cancel_before_start(self, two_frame_data, palette_dir):
        cancel = threading.Event()
        cancel.set()
        sink = RecordingSink()
        with pytest.raises(DecodeCancelledError):
            load(io.BytesIO(two_frame_data), palette_dir=palette_dir,
                 sink=sink, cancel_event=cancel)
        assert sink.calls == []

    def test_cancel_after_palette(self, two_frame_data, palette_dir):
        cancel = threading.Event()

        class CancelOnPalette(RecordingEventSink):
            def emit(self, event):
                super().emit(event)
                if event.name == Milestone.PALETTE:
                    cancel.set()

        sink = RecordingSink()
        events = CancelOnPalette()
        with pytest.raises(DecodeCancelledError):
            load(io.BytesIO(two_frame_data), palette_dir=palette_dir,
                 sink=sink, events=events, cancel_event=cancel)
        assert sink.calls == []
        assert events.of(Milestone.COMPOSITED) == []
