"""Image options: loading, validation, and conversion to pipeline configs."""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import OptimizeConfig, ResizeConfig
from .protocols import OptionStore

ENV_PREFIX = "NOTE_IMAGES_"

# Field name -> option name in the host's option store.
OPTION_NAMES: Dict[str, str] = {
    "max_width_height": "imageMaxWidthHeight",
    "jpeg_quality": "imageJpegQuality",
    "png_quality_min": "imagePngQualityMin",
    "png_quality_max": "imagePngQualityMax",
    "gif_lossy": "imageGifLossy",
    "gif_optimization_level": "imageGifOptimizationLevel",
}


class ImageOptions(BaseModel):
    """Every tunable of the shrink pipeline, validated."""

    max_width_height: int = Field(default=1200, gt=0)
    jpeg_quality: int = Field(default=80, ge=0, le=100)
    png_quality_min: float = Field(default=0.0, ge=0.0, le=1.0)
    png_quality_max: float = Field(default=0.7, ge=0.0, le=1.0)
    gif_lossy: int = Field(default=80, ge=0, le=200)
    gif_optimization_level: int = Field(default=3, ge=1, le=3)

    @model_validator(mode="after")
    def _check_png_bounds(self) -> "ImageOptions":
        if self.png_quality_min > self.png_quality_max:
            raise ValueError("png_quality_min must not exceed png_quality_max")
        return self

    @classmethod
    def from_values(cls, **values: Any) -> "ImageOptions":
        """Build options, reporting invalid values as ``ConfigurationError``."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid image options: {exc}") from exc

    @classmethod
    def from_store(cls, store: OptionStore) -> "ImageOptions":
        """Read every known option from ``store``; unset options keep defaults."""
        values: Dict[str, Any] = {}
        for field_name, option_name in OPTION_NAMES.items():
            value = store.get_option(option_name)
            if value is not None and value != "":
                values[field_name] = value
        return cls.from_values(**values)

    @classmethod
    def from_env(cls) -> "ImageOptions":
        """Read options from ``NOTE_IMAGES_*`` environment variables."""
        try:
            settings = ImageSettings()
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid image options: {exc}") from exc
        return settings.to_options()

    def resize_config(self) -> ResizeConfig:
        return ResizeConfig(max_dimension=self.max_width_height)

    def optimize_config(self) -> OptimizeConfig:
        return OptimizeConfig(
            jpeg_quality=self.jpeg_quality,
            png_quality_range=(self.png_quality_min, self.png_quality_max),
            gif_lossy=self.gif_lossy,
            gif_optimization_level=self.gif_optimization_level,
        )


class DictOptionStore:
    """In-memory option store."""

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        self._options: Dict[str, Any] = dict(options or {})

    def get_option(self, name: str) -> Optional[str]:
        value = self._options.get(name)
        return None if value is None else str(value)

    def set_option(self, name: str, value: Any) -> None:
        self._options[name] = value


class ImageSettings(BaseSettings):
    """
    Image options taken from the environment.

    Each host option maps to one variable, e.g. ``imageMaxWidthHeight`` is
    read from ``NOTE_IMAGES_IMAGE_MAX_WIDTH_HEIGHT``. Unset or empty
    variables keep the ``ImageOptions`` defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX, env_ignore_empty=True, extra="ignore"
    )

    image_max_width_height: Optional[int] = None
    image_jpeg_quality: Optional[int] = None
    image_png_quality_min: Optional[float] = None
    image_png_quality_max: Optional[float] = None
    image_gif_lossy: Optional[int] = None
    image_gif_optimization_level: Optional[int] = None

    def to_options(self) -> ImageOptions:
        values = {
            name[len("image_"):]: value
            for name, value in self.model_dump(exclude_none=True).items()
        }
        return ImageOptions.from_values(**values)
