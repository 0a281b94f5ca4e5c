"""Settings — every environment variable is read here and nowhere else.

Usage:
    from csvulture.config import get_settings

    settings = get_settings()
    settings.default_delimiter
    settings.http_timeout_seconds
"""

from __future__ import annotations

import enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, enum.Enum):
    DEVELOPMENT = "development"
    TEST        = "test"
    PRODUCTION  = "production"


class Settings(BaseSettings):
    """Runtime configuration, loaded from CSVULTURE_* env vars or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CSVULTURE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Environment.DEVELOPMENT

    # ── Logging ──
    log_level:  str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    # ── Delimited text ──
    default_delimiter: str  = ","
    trim_whitespace:   bool = True
    # utf-8-sig swallows the BOM spreadsheet exports like to prepend
    source_encoding:   str  = "utf-8-sig"

    # ── Host ──
    schedule_delay_ms:   int = Field(default=5, ge=0)
    max_solution_passes: int = Field(
        default=10,
        ge=1,
        description="Upper bound on chained solutions triggered by scheduled callbacks",
    )

    # ── HTTP ──
    http_timeout_seconds: float = Field(default=100.0, gt=0)
    http_user_agent:      str   = "CSVulture/1.0.1"

    # ── Persistence ──
    database_url: str = "sqlite:///./csvulture.db"

    # ── Telemetry ──
    tracing_enabled: bool = False
    otel_exporter_otlp_endpoint: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
