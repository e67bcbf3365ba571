"""Command line tool for inspecting and exporting ZTGFX files.

Usage:
    ztgfx info animations/idle.ztgfx

    # Export all frames as PNG files plus a frames.json manifest
    ztgfx export animations/idle.ztgfx out/idle --palette-dir animations
"""

import argparse
import logging
import sys
from pathlib import Path

from ztgfx.compositor import RunMode
from ztgfx.config import settings
from ztgfx.exceptions import DecodeCancelledError, UnrecognizedFileError
from ztgfx.formats.document import ZtGfxDocument
from ztgfx.loader import load
from ztgfx.sinks import PngSequenceSink


def _describe_failure(error: UnrecognizedFileError) -> str:
    return f"{error} ({type(error.cause).__name__}: {error.cause})"


def cmd_info(args: argparse.Namespace) -> int:
    """Prints header and frame geometry of a container."""
    try:
        info = ZtGfxDocument.load_metadata(args.file)
    except UnrecognizedFileError as e:
        print(f"Error: {_describe_failure(e)}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"File:            {args.file}")
    print(f"Header:          {info['magic_variant']}")
    print(f"Animation speed: {info['animation_speed']}")
    print(f"Palette:         {info['palette_file_name']}")
    print(f"Frames:          {info['frame_count']}")
    for frame in info["frames"]:
        line = (
            f"  #{frame['index']:<3d} {frame['width']}x{frame['height']}"
            f"  offset v={frame['row_offset_v']} h={frame['row_offset_h']}"
            f"  size={frame['byte_size']}"
        )
        if frame["overrun"]:
            line += f"  (overrun {frame['overrun']} bytes)"
        print(line)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Exports every frame of a container as PNG."""
    sink = PngSequenceSink(args.output, stem=args.stem)
    try:
        manifest_path = load(
            args.file,
            palette_dir=args.palette_dir,
            sink=sink,
            run_mode=args.run_mode,
            workers=args.workers,
        )
    except UnrecognizedFileError as e:
        print(f"Error: {_describe_failure(e)}", file=sys.stderr)
        return 1
    except (OSError, DecodeCancelledError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {len(sink.written)} frames to {args.output}")
    print(f"Manifest: {manifest_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ztgfx",
        description="Inspect and export ZTGFX sprite animations",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log decode milestones",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    info_parser = subparsers.add_parser("info", help="Show container header and frames")
    info_parser.add_argument("file", type=Path, help="ZTGFX file")
    info_parser.set_defaults(func=cmd_info)

    export_parser = subparsers.add_parser("export", help="Export frames as PNG files")
    export_parser.add_argument("file", type=Path, help="ZTGFX file")
    export_parser.add_argument("output", type=Path, help="Output directory")
    export_parser.add_argument(
        "--palette-dir",
        type=Path,
        default=None,
        help="Directory the palette name is resolved against (default: working directory)",
    )
    export_parser.add_argument(
        "--run-mode",
        choices=[mode.value for mode in RunMode],
        default=None,
        help=f"How runs within a row are combined (default: {settings.RUN_MODE.value})",
    )
    export_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads used for compositing",
    )
    export_parser.add_argument(
        "--stem",
        default="frame",
        help="File name prefix of the exported frames (default: frame)",
    )
    export_parser.set_defaults(func=cmd_export)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
