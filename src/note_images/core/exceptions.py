"""Exceptions and error handling utilities for note image ingestion."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Type, TypeVar

from .logging_config import get_logger


class NoteImagesError(Exception):
    """Base exception for all note image errors."""


class UnknownFormatError(NoteImagesError):
    """Raised when the bytes of an upload do not match any known image signature."""


class DecodeError(NoteImagesError):
    """Raised when an image cannot be decoded for resizing."""


class OptimizeError(NoteImagesError):
    """Raised when a format-specific compressor fails."""


class ConfigurationError(NoteImagesError):
    """Raised for invalid image options."""


class NoteNotFoundError(NoteImagesError):
    """Raised when a target or parent note does not exist."""

    def __init__(self, note_id: str):
        super().__init__(f"Note '{note_id}' not found")
        self.note_id = note_id


F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(error_cls: Type[NoteImagesError]) -> Callable[[F], F]:
    """
    Wrap a function so unexpected exceptions surface as ``error_cls``.

    Errors that already belong to the package hierarchy pass through
    untouched; anything else is logged and chained into ``error_cls``.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except NoteImagesError:
                raise
            except Exception as exc:  # noqa: BLE001
                get_logger("errors").debug(
                    f"Unhandled error in {func.__name__}: {exc}", exc_info=True
                )
                raise error_cls(f"{func.__name__} failed: {exc}") from exc

        return wrapper  # type: ignore[return-value]

    return decorator
