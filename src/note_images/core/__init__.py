"""Core image ingestion pipeline and services."""

from .logging_config import get_logger, setup_logger
from .exceptions import (
    NoteImagesError,
    UnknownFormatError,
    DecodeError,
    OptimizeError,
    ConfigurationError,
    NoteNotFoundError,
    with_error_handling,
)
from .models import (
    FormatTag,
    ImageBuffer,
    OptimizeConfig,
    PipelineResult,
    ResizeConfig,
    RevisionSnapshot,
    SavedImage,
    ShrinkResult,
    UNKNOWN_FORMAT,
    UploadItem,
)
from .formats import detect_format, image_buffer, require_format
from .resizer import DECODABLE_FORMATS, can_decode, resize
from .optimizer import optimize
from .pipeline import process_image, shrink_image
from .options import DictOptionStore, ImageOptions, ImageSettings
from .filenames import sanitize_filename
from .services import ImageProcessorService, ImageService

__all__ = [
    "setup_logger",
    "get_logger",
    "NoteImagesError",
    "UnknownFormatError",
    "DecodeError",
    "OptimizeError",
    "ConfigurationError",
    "NoteNotFoundError",
    "with_error_handling",
    "FormatTag",
    "ImageBuffer",
    "OptimizeConfig",
    "PipelineResult",
    "ResizeConfig",
    "RevisionSnapshot",
    "SavedImage",
    "ShrinkResult",
    "UNKNOWN_FORMAT",
    "UploadItem",
    "detect_format",
    "require_format",
    "image_buffer",
    "DECODABLE_FORMATS",
    "can_decode",
    "resize",
    "optimize",
    "process_image",
    "shrink_image",
    "DictOptionStore",
    "ImageSettings",
    "ImageOptions",
    "sanitize_filename",
    "ImageProcessorService",
    "ImageService",
]
