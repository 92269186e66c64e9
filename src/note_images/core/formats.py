"""Content-based image format detection."""

from typing import Callable, List, Tuple, Union

from .exceptions import UnknownFormatError
from .models import FormatTag, ImageBuffer, UNKNOWN_FORMAT

BytesLike = Union[bytes, bytearray, memoryview]

JPEG = FormatTag(extension="jpeg", mime_type="image/jpeg")
PNG = FormatTag(extension="png", mime_type="image/png")
GIF = FormatTag(extension="gif", mime_type="image/gif")
WEBP = FormatTag(extension="webp", mime_type="image/webp")
BMP = FormatTag(extension="bmp", mime_type="image/bmp")
TIFF = FormatTag(extension="tiff", mime_type="image/tiff")
ICO = FormatTag(extension="ico", mime_type="image/x-icon")
PSD = FormatTag(extension="psd", mime_type="image/vnd.adobe.photoshop")
AVIF = FormatTag(extension="avif", mime_type="image/avif")
HEIC = FormatTag(extension="heic", mime_type="image/heic")
JP2 = FormatTag(extension="jp2", mime_type="image/jp2")

_AVIF_BRANDS = {b"avif", b"avis"}
_HEIC_BRANDS = {b"heic", b"heix", b"hevc", b"hevx", b"mif1", b"msf1"}

# Number of leading bytes needed to decide on any signature below.
SNIFF_LENGTH = 16


def _is_webp(head: bytes) -> bool:
    return head[:4] == b"RIFF" and head[8:12] == b"WEBP"


def _ftyp_brand(head: bytes) -> bytes:
    if head[4:8] != b"ftyp":
        return b""
    return head[8:12]


_SIGNATURES: List[Tuple[Callable[[bytes], bool], FormatTag]] = [
    (lambda h: h[:3] == b"\xff\xd8\xff", JPEG),
    (lambda h: h[:8] == b"\x89PNG\r\n\x1a\n", PNG),
    (lambda h: h[:6] in (b"GIF87a", b"GIF89a"), GIF),
    (_is_webp, WEBP),
    (lambda h: h[:4] in (b"II*\x00", b"MM\x00*"), TIFF),
    (lambda h: h[:4] == b"8BPS", PSD),
    (lambda h: h[:12] == b"\x00\x00\x00\x0cjP  \r\n\x87\n", JP2),
    (lambda h: _ftyp_brand(h) in _AVIF_BRANDS, AVIF),
    (lambda h: _ftyp_brand(h) in _HEIC_BRANDS, HEIC),
    (lambda h: h[:4] == b"\x00\x00\x01\x00", ICO),
    (lambda h: h[:2] == b"BM", BMP),
]


def detect_format(data: BytesLike) -> FormatTag:
    """
    Identify the image format of ``data`` from its magic bytes.

    Never raises for binary input; unrecognized content (including empty
    buffers) yields ``UNKNOWN_FORMAT``.
    """
    head = bytes(data[:SNIFF_LENGTH])
    for matches, tag in _SIGNATURES:
        if matches(head):
            return tag
    return UNKNOWN_FORMAT


def require_format(data: BytesLike) -> FormatTag:
    """Like :func:`detect_format` but raise ``UnknownFormatError`` when unknown."""
    tag = detect_format(data)
    if not tag.is_known:
        raise UnknownFormatError(
            f"Unrecognized image format (leading bytes {bytes(data[:8]).hex() or 'empty'})"
        )
    return tag


def image_buffer(data: BytesLike) -> ImageBuffer:
    """Wrap raw bytes in an ``ImageBuffer`` whose format is sniffed from them."""
    return ImageBuffer(data=bytes(data), format=detect_format(data))
