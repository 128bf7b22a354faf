"""Pydantic models for config validation.

``Config.validated()`` returns a ``PawtrackConfig``.  Env overrides arrive
as strings; pydantic's lax mode coerces them to the declared types.
"""

from __future__ import annotations

from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TimelineConfig(BaseModel):
    """Block building and projection settings."""

    day_start_hour: int = Field(default=6, ge=0, le=23)
    day_end_hour: int = Field(default=22, ge=0, le=23)
    default_walk_minutes: int = Field(default=30, gt=0)
    min_width_fraction: float = Field(default=0.005, ge=0.0, le=1.0)
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone {v!r}") from e
        return v

    @model_validator(mode="after")
    def _start_before_end(self) -> TimelineConfig:
        if self.day_start_hour >= self.day_end_hour:
            raise ValueError(
                f"day_start_hour ({self.day_start_hour}) must be earlier than day_end_hour ({self.day_end_hour})"
            )
        return self

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class PatternsConfig(BaseModel):
    """Trigger correlation settings."""

    period_days: int = Field(default=7, gt=0)
    proximity_minutes: int = Field(default=30, gt=0)


class LoggingConfig(BaseModel):
    """loguru sink settings."""

    level: str = "WARNING"
    file: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class PawtrackConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so the surrounding application can keep its own
    sections in the same file.
    """

    model_config = ConfigDict(extra="allow")

    timeline: TimelineConfig = TimelineConfig()
    patterns: PatternsConfig = PatternsConfig()
    logging: LoggingConfig = LoggingConfig()
