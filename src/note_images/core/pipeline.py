"""Shrink pipeline: resize, optimize, and never store more bytes than uploaded."""

from typing import Optional

from .exceptions import OptimizeError
from .formats import detect_format, require_format
from .logging_config import get_logger
from .models import ImageBuffer, OptimizeConfig, PipelineResult, ResizeConfig
from .optimizer import optimize
from .resizer import can_decode, resize

logger = get_logger("pipeline")


def shrink_image(
    original: ImageBuffer,
    original_name: str,
    resize_config: ResizeConfig,
    optimize_config: OptimizeConfig,
) -> ImageBuffer:
    """
    Resize and optimize ``original``, falling back to safer buffers.

    A failing optimizer degrades to the resized buffer. If the result is not
    smaller than ``original``, ``original`` is returned as is (this happens
    e.g. when a small PNG becomes a JPEG). Decode errors from the resizer
    propagate.
    """
    resized = resize(original, resize_config)

    try:
        shrunk = optimize(resized, optimize_config)
    except OptimizeError:
        logger.error(f"Failed to optimize image '{original_name}'", exc_info=True)
        shrunk = resized

    if shrunk.size >= original.size:
        logger.debug(
            f"Shrinking '{original_name}' did not reduce size "
            f"({original.size:,} -> {shrunk.size:,} bytes), keeping original"
        )
        return original

    logger.info(
        f"Shrunk '{original_name}': {original.size:,} -> {shrunk.size:,} bytes "
        f"({shrunk.size / original.size * 100:.0f}%)"
    )
    return shrunk


def process_image(
    data: bytes,
    original_name: str,
    shrink: bool,
    resize_config: Optional[ResizeConfig] = None,
    optimize_config: Optional[OptimizeConfig] = None,
) -> PipelineResult:
    """
    Turn an upload into storage-ready bytes and their actual format.

    Shrinking is skipped for formats the resizer cannot decode, whatever the
    caller asked for.

    Raises:
        UnknownFormatError: If ``data`` is not a recognizable image.
        DecodeError: If a decodable-looking image fails to decode.
    """
    fmt = require_format(data)
    original = ImageBuffer(data=bytes(data), format=fmt)

    if shrink and not can_decode(fmt):
        logger.debug(f"Not shrinking '{original_name}': cannot decode {fmt}")
        shrink = False

    if shrink:
        final = shrink_image(
            original,
            original_name,
            resize_config or ResizeConfig(),
            optimize_config or OptimizeConfig(),
        ).data
    else:
        final = original.data

    return PipelineResult(buffer=final, format=detect_format(final))
