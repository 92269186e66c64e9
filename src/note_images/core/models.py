"""Shared data models for note image ingestion."""

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FormatTag(BaseModel):
    """Format of a buffer as discovered from its leading bytes."""

    model_config = ConfigDict(frozen=True)

    extension: str
    mime_type: str

    @property
    def is_known(self) -> bool:
        return bool(self.extension)

    def __str__(self) -> str:
        return self.extension or "unknown"


UNKNOWN_FORMAT = FormatTag(extension="", mime_type="application/octet-stream")


class ImageBuffer(BaseModel):
    """Immutable image bytes together with their sniffed format."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    format: FormatTag

    @property
    def size(self) -> int:
        return len(self.data)


class ResizeConfig(BaseModel):
    """Bounding box applied by the resizer."""

    model_config = ConfigDict(frozen=True)

    max_dimension: int = Field(default=1200, gt=0)


class OptimizeConfig(BaseModel):
    """Compression parameters for the format-specific optimizers."""

    model_config = ConfigDict(frozen=True)

    jpeg_quality: int = Field(default=80, ge=0, le=100)
    png_quality_range: Tuple[float, float] = (0.0, 0.7)
    gif_lossy: int = Field(default=80, ge=0, le=200)
    gif_optimization_level: int = Field(default=3, ge=1, le=3)

    @field_validator("png_quality_range")
    @classmethod
    def _check_png_range(cls, value: Tuple[float, float]) -> Tuple[float, float]:
        low, high = value
        if not 0.0 <= low <= high <= 1.0:
            raise ValueError(
                f"png quality range must satisfy 0 <= min <= max <= 1, got {value}"
            )
        return value


class PipelineResult(BaseModel):
    """Final bytes of an upload and the format those bytes actually have."""

    model_config = ConfigDict(frozen=True)

    buffer: bytes
    format: FormatTag

    @property
    def size(self) -> int:
        return len(self.buffer)


class RevisionSnapshot(BaseModel):
    """Note state captured before its content is replaced."""

    note_id: str
    title: str
    type: str
    mime: str
    is_protected: bool = False
    utc_date_last_edited: Optional[str] = None
    date_last_edited: Optional[str] = None
    utc_date_created: str
    utc_date_modified: str
    date_created: str


class SavedImage(BaseModel):
    """Outcome of creating a new image attachment note."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    file_name: str
    note: Any
    note_id: str
    url: str


class UploadItem(BaseModel):
    """A local file to shrink and where to write the result."""

    source_path: str
    dest_path: str


class ShrinkResult(BaseModel):
    """Result of shrinking a single local file."""

    source_path: str
    dest_path: str = ""
    success: bool = False
    error: str = ""
    original_size: int = 0
    final_size: int = 0
    format: str = ""
    processing_time: float = 0.0
