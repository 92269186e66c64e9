"""Format-specific lossy/lossless compression of image buffers."""

import io
import math
import shutil
import subprocess
from typing import Callable, Dict, List

from PIL import Image, ImageChops, ImageStat, features

from .exceptions import OptimizeError, with_error_handling
from .logging_config import get_logger
from .models import ImageBuffer, OptimizeConfig

GIFSICLE = "gifsicle"
GIFSICLE_TIMEOUT = 60  # seconds

logger = get_logger("optimizer")


def _open(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


# ── JPEG ─────────────────────────────────────────────────────


def _optimize_jpeg(data: bytes, config: OptimizeConfig) -> bytes:
    image = _open(data)
    icc_profile = image.info.get("icc_profile")
    if image.mode not in ("RGB", "L", "CMYK"):
        image = image.convert("RGB")

    output = io.BytesIO()
    save_kwargs = {
        "quality": config.jpeg_quality,
        "optimize": True,
        "progressive": True,
    }
    if icc_profile:
        save_kwargs["icc_profile"] = icc_profile
    image.save(output, format="JPEG", **save_kwargs)
    return output.getvalue()


# ── PNG ──────────────────────────────────────────────────────


def palette_size(max_quality: float) -> int:
    """Number of palette entries used for a given upper quality bound."""
    return max(2, min(256, round(256 * max_quality)))


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )


def _quantize(image: Image.Image, colors: int) -> Image.Image:
    if features.check_feature("libimagequant"):
        method = Image.Quantize.LIBIMAGEQUANT
    elif image.mode == "RGBA":
        method = Image.Quantize.FASTOCTREE
    else:
        method = Image.Quantize.MEDIANCUT
    return image.quantize(colors=colors, method=method)


def quantization_quality(reference: Image.Image, candidate: Image.Image) -> float:
    """Similarity in [0, 1] derived from the RMS error between two images."""
    diff = ImageChops.difference(reference, candidate.convert(reference.mode))
    rms = ImageStat.Stat(diff).rms
    return 1.0 - math.sqrt(sum(value * value for value in rms) / len(rms)) / 255.0


def _optimize_png(data: bytes, config: OptimizeConfig) -> bytes:
    min_quality, max_quality = config.png_quality_range
    image = _open(data)
    reference = image.convert("RGBA" if _has_alpha(image) else "RGB")

    quantized = _quantize(reference, palette_size(max_quality))

    achieved = quantization_quality(reference, quantized)
    if achieved < min_quality:
        raise OptimizeError(
            f"PNG quantization quality {achieved:.3f} is below the minimum {min_quality}"
        )

    output = io.BytesIO()
    quantized.save(output, format="PNG", optimize=True)
    return output.getvalue()


# ── GIF ──────────────────────────────────────────────────────


def gifsicle_arguments(config: OptimizeConfig) -> List[str]:
    # gifsicle receives the optimization level as a textual flag value.
    return [
        "--no-warnings",
        "--optimize=" + str(config.gif_optimization_level),
        f"--lossy={config.gif_lossy}",
    ]


def _run_gifsicle(binary: str, data: bytes, config: OptimizeConfig) -> bytes:
    proc = subprocess.run(
        [binary, *gifsicle_arguments(config)],
        input=data,
        capture_output=True,
        timeout=GIFSICLE_TIMEOUT,
    )
    if proc.returncode != 0 or not proc.stdout:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise OptimizeError(f"gifsicle failed (rc={proc.returncode}): {stderr}")
    return proc.stdout


def _resave_gif(data: bytes) -> bytes:
    image = _open(data)
    output = io.BytesIO()
    image.save(output, format="GIF", save_all=True, optimize=True)
    return output.getvalue()


def _optimize_gif(data: bytes, config: OptimizeConfig) -> bytes:
    binary = shutil.which(GIFSICLE)
    if binary is None:
        logger.debug("gifsicle not available, re-saving GIF losslessly")
        return _resave_gif(data)
    return _run_gifsicle(binary, data, config)


# ── Dispatch ─────────────────────────────────────────────────

Compressor = Callable[[bytes, OptimizeConfig], bytes]

COMPRESSORS: Dict[str, Compressor] = {
    "jpeg": _optimize_jpeg,
    "png": _optimize_png,
    "gif": _optimize_gif,
}


@with_error_handling(OptimizeError)
def optimize(buffer: ImageBuffer, config: OptimizeConfig) -> ImageBuffer:
    """
    Compress ``buffer`` with the one compressor matching its format.

    Buffers in formats without a compressor are returned unchanged.

    Raises:
        OptimizeError: If the compressor fails for any reason.
    """
    compressor = COMPRESSORS.get(buffer.format.extension)
    if compressor is None:
        logger.debug(f"No optimizer for format '{buffer.format}', passing through")
        return buffer

    optimized = compressor(buffer.data, config)
    logger.debug(
        f"Optimized {buffer.format}: {buffer.size:,} -> {len(optimized):,} bytes"
    )
    return ImageBuffer(data=optimized, format=buffer.format)
