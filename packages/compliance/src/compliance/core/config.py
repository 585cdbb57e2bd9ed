# This project was developed with assistance from AI tools.
"""
Application configuration.

All settings read from environment variables with sensible local dev defaults.
Group related settings together; each group becomes a section future PRs extend.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve project root .env regardless of CWD
_PROJECT_ROOT = Path(__file__).resolve().parents[5]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings -- single source of truth for env-driven config."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- App --
    APP_NAME: str = "vendor-compliance"
    DEBUG: bool = False

    # -- Uploads --
    UPLOAD_MAX_SIZE_MB: int = Field(
        default=5,
        description="Per-file size limit for uploaded artifacts.",
    )
    ALLOWED_FILE_TYPES: list[str] = Field(
        default=[
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "application/vnd.ms-excel",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "image/png",
            "image/jpeg",
        ],
        description="Mime types accepted for document files.",
    )

    # -- Reporting periods --
    MIN_PERIOD_YEAR: int = 2023
    MAX_PERIOD_YEAR: int = 2035

    # -- Review policy --
    LOCK_APPROVED_DOCUMENTS: bool = Field(
        default=False,
        description="Reject new decisions on documents whose rollup is already approved.",
    )

    # -- Scoring --
    SCORING_EXCLUDED_DOCUMENT_TYPES: list[str] = Field(
        default=[],
        description="Extra document type ids left out of compliance scoring, on top of "
        "catalog entries flagged excluded_from_scoring.",
    )


settings = Settings()
