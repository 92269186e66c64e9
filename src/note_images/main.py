"""Main module for the note images CLI."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .core import ConfigurationError, ImageOptions, detect_format, get_logger
from .processors import multithread_process_batch, serial_process_batch
from .processors.common import ProcessBatchFunction, count_results, run_processing

VERSION = "0.1.0"

PROCESSORS: Dict[str, Tuple[str, ProcessBatchFunction]] = {
    "serial": ("Serial", serial_process_batch),
    "multithread": ("Multithreaded", multithread_process_batch),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="note-images",
        description="Note Images - shrink and inspect image attachments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shrink uploads the way the note store would
  note-images shrink photo.png scan.jpg --out-dir shrunk/

  # Use a thread pool and a smaller bounding box
  note-images shrink *.jpg --out-dir shrunk/ --processor multithread \\
                     --max-dimension 800

  # Show the detected format of files
  note-images detect upload.bin
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    shrink_parser = subparsers.add_parser(
        "shrink", help="Resize and optimize image files"
    )
    shrink_parser.add_argument("files", nargs="+", help="Image files to shrink")
    shrink_parser.add_argument(
        "--out-dir", required=True, help="Directory receiving the shrunk files"
    )
    shrink_parser.add_argument(
        "--max-dimension",
        type=int,
        default=None,
        help="Maximum width/height in pixels (default: option store or 1200)",
    )
    shrink_parser.add_argument(
        "--jpeg-quality",
        type=int,
        default=None,
        help="JPEG quality 0-100 (default: option store or 80)",
    )
    shrink_parser.add_argument(
        "--processor",
        type=str,
        default="serial",
        choices=sorted(PROCESSORS),
        help="Processing strategy to use (default: serial)",
    )
    shrink_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )

    detect_parser = subparsers.add_parser(
        "detect", help="Print the format detected from file contents"
    )
    detect_parser.add_argument("files", nargs="+", help="Files to inspect")

    subparsers.add_parser("version", help="Show version information")
    return parser


def load_options(args: argparse.Namespace) -> ImageOptions:
    """Environment options overridden by explicit command-line values."""
    options = ImageOptions.from_env()
    overrides: Dict[str, Any] = {}
    if args.max_dimension is not None:
        overrides["max_width_height"] = args.max_dimension
    if args.jpeg_quality is not None:
        overrides["jpeg_quality"] = args.jpeg_quality
    if not overrides:
        return options
    return ImageOptions.from_values(**{**options.model_dump(), **overrides})


def shrink_command(args: argparse.Namespace) -> int:
    logger = get_logger("processor")
    if args.debug:
        logger.setLevel(logging.DEBUG)
        logging.getLogger("note-images").setLevel(logging.DEBUG)

    try:
        options = load_options(args)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    processor_name, process_batch_fn = PROCESSORS[args.processor]
    results = run_processing(
        args.files, args.out_dir, options, processor_name, process_batch_fn
    )

    for result in results:
        if result.success:
            print(
                f"{result.source_path} -> {result.dest_path} "
                f"({result.original_size:,} -> {result.final_size:,} bytes, {result.format})"
            )
        else:
            print(f"{result.source_path}: FAILED {result.error}")

    _, failed = count_results(results)
    return 1 if failed else 0


def detect_command(files: List[str]) -> int:
    status = 0
    for name in files:
        try:
            data = Path(name).read_bytes()
        except OSError as e:
            print(f"{name}: error {e}")
            status = 1
            continue
        fmt = detect_format(data)
        if fmt.is_known:
            print(f"{name}: {fmt.extension} ({fmt.mime_type})")
        else:
            print(f"{name}: unknown")
            status = 1
    return status


def main() -> None:
    """Entry point for the ``note-images`` command."""
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args()

    if args.command == "shrink":
        sys.exit(shrink_command(args))

    elif args.command == "detect":
        sys.exit(detect_command(args.files))

    elif args.command == "version":
        print("Note Images CLI")
        print(f"Version {VERSION}")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
