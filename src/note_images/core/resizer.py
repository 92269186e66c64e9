"""Downscale an image to the configured bounding box and re-encode it as JPEG."""

import io
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from .exceptions import DecodeError
from .formats import JPEG
from .models import FormatTag, ImageBuffer, ResizeConfig

# Formats the resizer is able to decode. Uploads in any other format are
# stored without shrinking.
DECODABLE_FORMATS = frozenset({"jpeg", "png", "gif", "bmp", "tiff"})

BACKGROUND_COLOR = (255, 255, 255)

# Compression happens in the optimizer; the resizer encodes losslessly as far
# as JPEG allows.
RESIZE_JPEG_QUALITY = 100


def can_decode(fmt: FormatTag) -> bool:
    return fmt.extension in DECODABLE_FORMATS


def target_size(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """
    Compute the output size for an image of ``width`` x ``height``.

    Landscape images wider than the bound are fitted by width, anything
    taller than the bound by height; the other side follows the aspect ratio.
    """
    if width > height and width > max_dimension:
        return max_dimension, max(1, round(height * max_dimension / width))
    if height > max_dimension:
        return max(1, round(width * max_dimension / height)), max_dimension
    return width, height


def _decode(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
        return ImageOps.exif_transpose(image)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as exc:
        raise DecodeError(f"Cannot decode image: {exc}") from exc


def flatten_onto_background(image: Image.Image) -> Image.Image:
    """Composite any transparency onto an opaque white RGB canvas."""
    if image.mode == "P" and "transparency" in image.info:
        image = image.convert("RGBA")
    if image.mode in ("RGBA", "LA", "PA"):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, BACKGROUND_COLOR)
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def resize(buffer: ImageBuffer, config: ResizeConfig) -> ImageBuffer:
    """
    Fit ``buffer`` inside ``config.max_dimension`` and encode it as JPEG.

    The output is always a JPEG, even when no scaling was needed.

    Raises:
        DecodeError: If the image cannot be decoded.
    """
    image = _decode(buffer.data)

    # Flatten first so palette images are resampled in RGB.
    try:
        image = flatten_onto_background(image)
    except (OSError, ValueError) as exc:
        raise DecodeError(f"Cannot convert image mode {image.mode}: {exc}") from exc

    size = target_size(image.width, image.height, config.max_dimension)
    if size != image.size:
        image = image.resize(size, Image.Resampling.LANCZOS)

    output = io.BytesIO()
    image.save(output, format="JPEG", quality=RESIZE_JPEG_QUALITY)
    return ImageBuffer(data=output.getvalue(), format=JPEG)
