"""Configuration management for DocuCraft."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration via environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Typography shared by the DOCX and PDF exports
    default_font: str = Field(default="Georgia", alias="DOCUCRAFT_FONT")
    default_font_size: int = Field(default=12, alias="DOCUCRAFT_FONT_SIZE")
    monospace_font: str = Field(default="Consolas", alias="DOCUCRAFT_MONO_FONT")
    text_color: str = Field(default="0F172A", alias="DOCUCRAFT_TEXT_COLOR")

    # Page layout
    page_margin_inches: float = Field(default=1.0, alias="DOCUCRAFT_PAGE_MARGIN")
    pdf_margin_inches: float = Field(default=0.5, alias="DOCUCRAFT_PDF_MARGIN")

    # Footprint of an image with no size tier, in pixels
    image_width: int = Field(default=500, alias="DOCUCRAFT_IMAGE_WIDTH")
    image_height: int = Field(default=330, alias="DOCUCRAFT_IMAGE_HEIGHT")

    # CLI behaviour
    default_format: str = Field(default="docx", alias="DOCUCRAFT_FORMAT")
    log_level: str = Field(default="WARNING", alias="DOCUCRAFT_LOG_LEVEL")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if needed."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Load settings from an optional specific .env file."""
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings
