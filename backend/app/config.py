"""
Application configuration using Pydantic Settings.

All environment variables are accessed through this config object.
Never use os.getenv() directly in business logic.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_MODEL_DIR = Path(__file__).resolve().parent.parent / "language_engine" / "model"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Server Configuration
    HOST: str = Field(
        default="127.0.0.1",
        description="Network address to bind",
    )
    PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Network port to bind",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root logging level",
    )
    ALLOWED_ORIGINS: List[str] = Field(
        default=["*"],
        description="CORS allowed origins",
    )

    # Language Detection Configuration
    MODEL_DIR: str = Field(
        default=str(BUNDLED_MODEL_DIR),
        description="Directory holding the language classification model",
    )
    CONFIDENCE_FLOOR: float = Field(
        default=0.35,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a classifier guess to be used",
    )
    MAX_CLASSIFY_CHARS: int = Field(
        default=20000,
        ge=1,
        description="Inputs longer than this skip classification",
    )

    # Rendering Defaults
    DEFAULT_THEME: str = Field(
        default="Dracula",
        description="Theme used when the request does not name one",
    )
    DEFAULT_FONT: str = Field(
        default="Fira Code",
        description="Font used when the request does not name one",
    )
    DEFAULT_FONT_SIZE: int = Field(
        default=26,
        ge=1,
        description="Font size used when the font string carries no size",
    )
    BACKGROUND_IMAGE_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for downloading background images",
    )
    MAX_BACKGROUND_IMAGE_BYTES: int = Field(
        default=10485760,
        description="Maximum background image size in bytes (10MB)",
    )

    # Analytics Configuration
    UMAMI_WEBSITE_ID: Optional[str] = Field(
        default=None,
        description="Umami website ID; analytics disabled when unset",
    )
    UMAMI_URL: Optional[str] = Field(
        default=None,
        description="Umami base URL; analytics disabled when unset",
    )


# Global settings instance
settings = Settings()
