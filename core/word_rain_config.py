"""Word rain difficulty configuration with Pydantic validation."""

from pydantic import BaseModel, ConfigDict, Field

from core.models import Difficulty


class DifficultyConfig(BaseModel):
    """Tuning for one word rain difficulty."""

    label: str = Field(..., description="Hebrew display label")
    spawn_interval_ms: int = Field(
        ...,
        gt=0,
        description="Time between word spawns (ms)",
    )
    base_speed: float = Field(
        ...,
        gt=0,
        description="Fall speed at the start of the game (% per tick)",
    )
    max_words: int = Field(
        ...,
        ge=1,
        description="Maximum words on screen at once",
    )
    lives: int = Field(
        ...,
        ge=1,
        description="Lives at game start",
    )
    speed_ramp_per_second: float = Field(
        default=0.005,
        ge=0,
        description="Speed multiplier growth per elapsed second",
    )

    model_config = ConfigDict(frozen=True, extra="ignore")


DIFFICULTY_CONFIG = {
    Difficulty.EASY: DifficultyConfig(
        label="קל", spawn_interval_ms=2500, base_speed=0.3, max_words=4, lives=5
    ),
    Difficulty.MEDIUM: DifficultyConfig(
        label="בינוני", spawn_interval_ms=1800, base_speed=0.5, max_words=6, lives=4
    ),
    Difficulty.HARD: DifficultyConfig(
        label="קשה", spawn_interval_ms=1200, base_speed=0.7, max_words=8, lives=3
    ),
}


def get_difficulty_config(difficulty: Difficulty) -> DifficultyConfig:
    """Get configuration for a difficulty (accepts the enum or its value)."""
    return DIFFICULTY_CONFIG[Difficulty(difficulty)]


__all__ = ["DIFFICULTY_CONFIG", "DifficultyConfig", "get_difficulty_config"]
