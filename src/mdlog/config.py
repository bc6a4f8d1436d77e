"""Application configuration and settings management."""
from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mdlog.parser import LINE_END_LINUX, LINE_END_WINDOWS

LineEnding = Literal["auto", "lf", "crlf"]

LINE_ENDINGS = {"lf": LINE_END_LINUX, "crlf": LINE_END_WINDOWS}


class Settings(BaseSettings):
    """Project-level settings loaded from environment variables/.env."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    line_ending: LineEnding = Field("auto", alias="MDLOG_LINE_ENDING")
    birthday_file: Path = Field(Path("birthdays.yml"), alias="MDLOG_BIRTHDAY_FILE")
    call_probability: float = Field(0.1, ge=0.0, le=1.0, alias="MDLOG_CALL_PROBABILITY")
    skip_invalid_dates: bool = Field(False, alias="MDLOG_SKIP_INVALID_DATES")
    timezone: str = Field("UTC", alias="MDLOG_TIMEZONE")
    log_level: str = Field("INFO", alias="MDLOG_LOG_LEVEL")

    @property
    def line_end(self) -> str | None:
        """Configured line ending, ``None`` when it should be detected."""

        return LINE_ENDINGS.get(self.line_ending)


_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:
    """Return cached settings instance."""

    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings()
    return _SETTINGS


def reset_settings() -> None:
    global _SETTINGS
    _SETTINGS = None


__all__ = ["LineEnding", "LINE_ENDINGS", "Settings", "get_settings", "reset_settings"]
