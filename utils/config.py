"""Configuration for the Ninja Keyboard typing engine."""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

log = logging.getLogger("ninjakeyboard.config")


class EngineSettings(BaseModel):
    """Engine tunables with validation."""

    # Statistics
    weak_key_min_attempts: int = Field(
        default=3,
        ge=1,
        description="Minimum attempts before a key can be judged weak",
    )
    realtime_window_ms: Optional[int] = Field(
        default=None,
        gt=0,
        description="Trailing window for realtime WPM (ms), None = whole buffer",
    )

    # Word rain
    tick_interval_ms: int = Field(
        default=50,
        gt=0,
        description="Interval between game ticks (ms)",
    )
    spawn_retries: int = Field(
        default=5,
        ge=0,
        description="Extra attempts to find a spawn position away from other words",
    )
    spawn_min_spacing: float = Field(
        default=15.0,
        ge=0,
        le=100,
        description="Minimum horizontal distance between newly spawned words",
    )
    spawn_top_zone: float = Field(
        default=20.0,
        gt=0,
        le=100,
        description="Words above this height are considered for spawn spacing",
    )

    model_config = ConfigDict(extra="ignore")

    @field_validator("spawn_min_spacing")
    @classmethod
    def validate_spacing(cls, v):
        """Spacing wider than the spawn band can never be satisfied."""
        if v > 80:
            raise ValueError(
                f"spawn_min_spacing ({v}) must not exceed the spawn band width (80)"
            )
        return v


DEFAULT_SETTINGS = EngineSettings()


def load_settings(overrides: Optional[dict[str, Any]] = None) -> EngineSettings:
    """Build settings from a plain dict of overrides.

    Invalid overrides are logged and the defaults are used instead.

    Args:
        overrides: Setting name to value, unknown keys are ignored

    Returns:
        Validated EngineSettings
    """
    if not overrides:
        return EngineSettings()

    try:
        return EngineSettings(**overrides)
    except ValidationError as e:
        log.warning(f"Invalid engine settings, using defaults: {e}")
        return EngineSettings()
