"""
Logging Configuration.
"""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .levels import Level


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class LoggingSettings(BaseSettings):
    """Dispatcher and sink configuration, read from ``LOGFAN_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="LOGFAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: str = Field(default="all", description="Comma-separated enabled levels (debug, info, warn, error)")
    sinks: str = Field(default="console", description="Comma-separated sink names (console, file)")
    format: LogFormat = Field(default=LogFormat.CONSOLE, description="Console sink output format")
    file_dir: str = Field(default="logs", description="Directory for daily log files")
    retention_days: int = Field(default=10, ge=0, description="Days of daily log files to keep")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        Level.parse(value)
        return value

    @property
    def level_mask(self) -> Level:
        return Level.parse(self.level)

    @property
    def sink_names(self) -> list[str]:
        return [name.strip().lower() for name in self.sinks.split(",") if name.strip()]
