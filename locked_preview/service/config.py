# locked_preview/service/config.py

"""Application configuration using Pydantic Settings.

Manages environment variables, defaults, and validation rules.
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from locked_preview.core.domain import BlurParameters
from locked_preview.core.loader import DEFAULT_TABLE_PATH


class Settings(BaseSettings):
    """Global application settings.

    Loads values from environment variables (prefix 'LOCKED_PREVIEW_') or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOCKED_PREVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Image Settings
    blur_radius: float = Field(
        default=12.0, gt=0.0, description="Gaussian blur radius in pixels."
    )

    visible_ratio: float = Field(
        default=0.4,
        description="Fraction of the image height kept sharp; clamped to 0-1 at use.",
    )

    fade_ratio: float = Field(
        default=0.25,
        description="Fraction of the image height used for the fade band; clamped to 0-1 at use.",
    )

    highlight_opacity: float = Field(
        default=0.35,
        ge=0.0,
        le=1.0,
        description="Opacity of the white tint at the bottom of the image.",
    )

    max_image_pixels: int = Field(
        default=40_000_000,
        gt=0,
        description="Largest source image (width * height) the engine will process.",
    )

    # Record Settings
    placeholder_table: str = Field(
        default=str(DEFAULT_TABLE_PATH),
        description="Path to the YAML role -> replacement table.",
    )

    log_level: str = Field(default="INFO", description="Root logging level.")

    @field_validator("placeholder_table")
    @classmethod
    def validate_table_path(cls, v: str) -> str:
        """Ensure the table path is not empty."""
        if not v.strip():
            raise ValueError("Placeholder table path cannot be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the level is one the logging module knows."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def blur_parameters(self) -> BlurParameters:
        """Default blur parameters built from these settings."""
        return BlurParameters(
            blur_radius=self.blur_radius,
            visible_ratio=self.visible_ratio,
            fade_ratio=self.fade_ratio,
            highlight_opacity=self.highlight_opacity,
        )


# Singleton settings instance
settings = Settings()
