"""Display-name sanitizing for uploaded files."""

import re

MAX_FILENAME_BYTES = 255

_ILLEGAL = re.compile(r'[/?<>\\:*|"]')
_CONTROL = re.compile(r"[\x00-\x1f\x80-\x9f]")
_RESERVED = re.compile(r"^\.+$")
_WINDOWS_RESERVED = re.compile(
    r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE
)
_WINDOWS_TRAILING = re.compile(r"[. ]+$")


def _truncate_utf8(value: str, limit: int) -> str:
    encoded = value.encode("utf-8")
    if len(encoded) <= limit:
        return value
    return encoded[:limit].decode("utf-8", errors="ignore")


def sanitize_filename(name: str, replacement: str = "") -> str:
    """
    Strip characters that are unsafe in file names.

    Removes path separators, reserved punctuation and control characters,
    rejects names made only of dots and Windows device names, and trims
    trailing dots and spaces. The result is at most 255 UTF-8 bytes and may
    be empty.
    """
    sanitized = _ILLEGAL.sub(replacement, name)
    sanitized = _CONTROL.sub(replacement, sanitized)
    sanitized = _RESERVED.sub(replacement, sanitized)
    sanitized = _WINDOWS_RESERVED.sub(replacement, sanitized)
    sanitized = _WINDOWS_TRAILING.sub(replacement, sanitized)
    return _truncate_utf8(sanitized, MAX_FILENAME_BYTES)
