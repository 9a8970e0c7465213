"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from printstation.exceptions import SettingsError

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "printstation"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    max_file_size_bytes: int = Field(
        default=10 * MIB,
        validation_alias="MAX_FILE_SIZE_BYTES",
        description="Largest accepted upload, in bytes.",
    )
    max_pages: int = Field(
        default=50,
        validation_alias="MAX_PAGES",
        description="Largest accepted estimated page count.",
    )
    rate_per_page: float = Field(
        default=4.0,
        validation_alias="RATE_PER_PAGE",
        description="Price charged per printed page.",
    )
    currency: str = Field(
        default="INR",
        validation_alias="CURRENCY",
        description="ISO currency code used for quotes.",
    )
    average_word_page_bytes: int = Field(
        default=250 * 1024,
        validation_alias="AVERAGE_WORD_PAGE_BYTES",
        description="Average byte size of one Word page, used for size-based estimation.",
    )
    pdf_page_marker: str = Field(
        default="/Page",
        validation_alias="PDF_PAGE_MARKER",
        description="Byte pattern counted as a proxy for PDF page objects.",
    )

    settlement_delay_seconds: float = Field(
        default=2.0,
        validation_alias="SETTLEMENT_DELAY_SECONDS",
        description="Delay of the simulated payment settlement.",
    )
    confirmation_display_seconds: float = Field(
        default=5.0,
        validation_alias="CONFIRMATION_DISPLAY_SECONDS",
        description="How long the payment confirmation stays visible.",
    )

    print_command: str | None = Field(
        default=None,
        validation_alias="PRINT_COMMAND",
        description="Command used to send an opened document to a printer, e.g. 'lp'.",
    )
    resource_dir: str | None = Field(
        default=None,
        validation_alias="RESOURCE_DIR",
        description="Directory for temporary document copies handed to viewers.",
    )

    @field_validator(
        "max_file_size_bytes",
        "max_pages",
        "rate_per_page",
        "average_word_page_bytes",
    )
    @classmethod
    def _require_positive(cls, value: float) -> float:
        """Reject zero or negative policy limits.

        Args:
            value: Candidate value.

        Raises:
            ValueError: If the value is not strictly positive.

        Returns:
            float: The validated value.
        """
        if value <= 0:
            raise ValueError("must be strictly positive")
        return value

    @field_validator("settlement_delay_seconds", "confirmation_display_seconds")
    @classmethod
    def _require_non_negative(cls, value: float) -> float:
        """Reject negative delays.

        Args:
            value: Candidate delay in seconds.

        Raises:
            ValueError: If the value is negative.

        Returns:
            float: The validated value.
        """
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("pdf_page_marker")
    @classmethod
    def _require_marker(cls, value: str) -> str:
        """Reject an empty PDF marker, which would match everywhere.

        Args:
            value: Candidate marker.

        Raises:
            ValueError: If the marker is empty.

        Returns:
            str: The validated marker.
        """
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def pdf_page_marker_bytes(self) -> bytes:
        """Return the PDF marker as raw bytes."""
        return self.pdf_page_marker.encode("latin-1")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            ensure_env_file_exists()
            try:
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
