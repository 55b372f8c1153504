"""Mini README: Centralised configuration models and helpers for Money Check.

Structure:
    * MoneyCheckSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables (prefixed with
    ``MONEYCHECK_``), locate the JSON documents and CSV exports on disk, and
    choose the port the HTTP collaborator binds to. The configuration is
    cached so validation happens only once per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MoneyCheckSettings(BaseSettings):
    """Runtime configuration for the Money Check ledger."""

    model_config = SettingsConfigDict(
        env_prefix="MONEYCHECK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the entries, settlement and profit documents.",
    )
    export_directory: Optional[Path] = Field(
        None,
        description="Directory CSV exports are written to. Defaults to <data_directory>/exports.",
    )
    interface_host: str = Field(
        "127.0.0.1",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the HTTP service exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied by the CLI.",
    )

    @field_validator("data_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: Union[str, Path]) -> Path:
        """Ensure the data directory expands user paths and exists."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def resolved_export_directory(self) -> Path:
        """Return the export directory, falling back beneath the data directory."""

        directory = self.export_directory or self.data_directory / "exports"
        return Path(directory).expanduser()


@lru_cache()
def get_settings() -> MoneyCheckSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return MoneyCheckSettings()
