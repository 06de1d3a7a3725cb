"""Pydantic models for Ninja Keyboard engine data structures."""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class SkillLevel(str, Enum):
    """Placement skill level, lowest to highest."""

    SHATIL = "shatil"
    NEVET = "nevet"
    GEZA = "geza"
    ANAF = "anaf"
    TZAMERET = "tzameret"


class FingerTechnique(str, Enum):
    """How consistently the learner used the layout-correct key."""

    NONE = "none"
    PARTIAL = "partial"
    FULL = "full"


class GamePhase(str, Enum):
    """Word rain game phase."""

    READY = "ready"
    PLAYING = "playing"
    GAMEOVER = "gameover"


class Difficulty(str, Enum):
    """Word rain difficulty."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Keystroke(BaseModel):
    """Single classified keystroke."""

    expected: str = Field(..., description="Character that was expected")
    actual: str = Field(..., description="Character that was typed")
    code: str = Field(..., description="Physical key code that was pressed")
    timestamp: float = Field(..., description="Monotonic timestamp in milliseconds")
    is_correct: bool = Field(..., description="Whether actual matched expected")

    model_config = ConfigDict(frozen=True, extra="ignore")


class KeyTally(BaseModel):
    """Per-key hit counts."""

    correct: int = Field(default=0, ge=0, description="Correct keystrokes")
    total: int = Field(default=0, ge=0, description="All keystrokes")

    model_config = ConfigDict(frozen=True, extra="ignore")


class SessionStats(BaseModel):
    """Statistics derived from a keystroke sequence."""

    total_keystrokes: int = Field(..., description="Total keystrokes in session")
    correct_keystrokes: int = Field(..., description="Correct keystrokes")
    error_keystrokes: int = Field(..., description="Incorrect keystrokes")
    accuracy: int = Field(..., ge=0, le=100, description="Accuracy percentage")
    wpm: int = Field(..., ge=0, description="Words per minute")
    duration_ms: float = Field(..., description="Session duration in milliseconds")
    key_accuracy: Mapping[str, KeyTally] = Field(
        default_factory=dict, description="Tallies keyed by expected character"
    )

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("key_accuracy")
    @classmethod
    def freeze_key_accuracy(cls, v):
        """Expose tallies as a read-only mapping."""
        return MappingProxyType(dict(v))

    @field_serializer("key_accuracy")
    def serialize_key_accuracy(self, v):
        return {char: tally.model_dump() for char, tally in v.items()}


class WeakKey(BaseModel):
    """Key with its accuracy, for weakest-first lists."""

    char: str = Field(..., description="Expected character")
    accuracy: int = Field(..., description="Accuracy percentage for this key")
    total: int = Field(..., description="Number of attempts")

    model_config = ConfigDict(frozen=True, extra="ignore")


class XpReward(BaseModel):
    """XP awarded for a completed lesson."""

    base: int = Field(..., description="Base XP for finishing the lesson")
    accuracy_bonus: int = Field(..., description="Bonus for accuracy above target")
    speed_bonus: int = Field(..., description="Bonus for WPM above target")
    streak_multiplier: float = Field(..., ge=1.0, description="Daily streak multiplier")
    total: int = Field(..., description="Total XP earned")

    model_config = ConfigDict(frozen=True, extra="ignore")


class PlacementResult(BaseModel):
    """Outcome of one placement test run."""

    level: SkillLevel = Field(..., description="Determined skill level")
    wpm: int = Field(..., ge=0, description="WPM from free typing")
    accuracy: int = Field(..., ge=0, le=100, description="Accuracy from free typing")
    known_keys: tuple[str, ...] = Field(
        default=(), description="Characters identified correctly"
    )
    known_shortcuts: tuple[str, ...] = Field(
        default=(), description="Shortcuts recognized"
    )
    finger_technique: FingerTechnique = Field(
        ..., description="Finger technique assessment"
    )
    recommended_lesson: int = Field(
        ..., ge=1, le=20, description="Recommended starting lesson"
    )

    model_config = ConfigDict(frozen=True, extra="ignore")


class FallingWord(BaseModel):
    """Word falling down the word rain board."""

    id: str = Field(..., description="Unique id within a game")
    word: str = Field(..., description="Word to type")
    x: float = Field(..., ge=0, le=100, description="Horizontal position (%)")
    y: float = Field(default=0.0, description="Vertical position, 0 top, 100 bottom")
    speed: float = Field(..., gt=0, description="Fall speed in % per tick")
    active: bool = Field(default=False, description="Matches the current input prefix")

    model_config = ConfigDict(frozen=True, extra="ignore")


class WordRainState(BaseModel):
    """Complete word rain game state."""

    score: int = Field(default=0, ge=0, description="Current score")
    combo: int = Field(default=0, ge=0, description="Current combo streak")
    best_combo: int = Field(default=0, ge=0, description="Best combo achieved")
    lives: int = Field(..., ge=0, description="Lives remaining")
    max_lives: int = Field(..., ge=1, description="Lives at game start")
    words: tuple[FallingWord, ...] = Field(default=(), description="Falling words")
    input: str = Field(default="", description="Current typing input")
    phase: GamePhase = Field(default=GamePhase.READY, description="Game phase")
    words_typed: int = Field(default=0, ge=0, description="Words typed correctly")
    difficulty: Difficulty = Field(..., description="Difficulty")
    elapsed_seconds: int = Field(default=0, ge=0, description="Elapsed play time")
    next_word_id: int = Field(default=0, ge=0, description="Id counter for spawned words")

    model_config = ConfigDict(frozen=True, extra="ignore")


class FinalScore(BaseModel):
    """Word rain final score breakdown."""

    base_score: int = Field(..., description="Score from typed words")
    combo_bonus: int = Field(..., description="Bonus for best combo")
    lives_bonus: int = Field(..., description="Bonus for remaining lives")
    total_score: int = Field(..., description="Sum of all parts")

    model_config = ConfigDict(frozen=True, extra="ignore")


class KeyHeatmapData(BaseModel):
    """Aggregated accuracy for one key across sessions."""

    char: str = Field(..., description="Expected character")
    accuracy: int = Field(..., description="Accuracy percentage")
    total: int = Field(..., description="Total attempts")
    correct: int = Field(..., description="Correct attempts")

    model_config = ConfigDict(frozen=True, extra="ignore")


class Trend(str, Enum):
    """Direction of a metric between the two halves of a session."""

    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


class EmotionalState(str, Enum):
    """Learner mood inferred from typing patterns."""

    FRUSTRATED = "frustrated"
    CONFUSED = "confused"
    PERFECTIONIST = "perfectionist"
    BORED = "bored"
    FLOW = "flow"
    IMPROVING = "improving"
    NEUTRAL = "neutral"


class EmotionalIndicators(BaseModel):
    """Typing pattern signals used to infer an EmotionalState."""

    wpm_trend: Trend = Field(default=Trend.STABLE, description="WPM, first vs second half")
    accuracy_trend: Trend = Field(
        default=Trend.STABLE, description="Accuracy, first vs second half"
    )
    backspace_ratio: float = Field(
        default=0.0, ge=0, le=1, description="Backspaces / all keystrokes"
    )
    pause_count: int = Field(default=0, ge=0, description="Gaps longer than the pause threshold")
    avg_pause_duration_ms: float = Field(default=0.0, ge=0, description="Mean long-pause length")
    streak_length: int = Field(default=0, ge=0, description="Trailing correct keystrokes")
    session_duration_ms: float = Field(default=0.0, description="Session duration in milliseconds")

    model_config = ConfigDict(frozen=True, extra="ignore")


class BattleStatus(str, Enum):
    """Typing battle phase."""

    IDLE = "idle"
    COUNTDOWN = "countdown"
    PLAYING = "playing"
    FINISHED = "finished"


class BattleWinner(str, Enum):
    """Who reached the end of the battle text first."""

    PLAYER = "player"
    AI = "ai"


class BattleState(BaseModel):
    """Race between the learner and a simulated typist over one text."""

    text: str = Field(..., description="Text both contestants type")
    difficulty: Difficulty = Field(..., description="Opponent difficulty")
    status: BattleStatus = Field(default=BattleStatus.IDLE, description="Battle phase")
    winner: Optional[BattleWinner] = Field(default=None, description="Set once finished")
    player_progress: int = Field(default=0, ge=0, description="Player cursor (chars)")
    ai_progress: int = Field(default=0, ge=0, description="Opponent cursor (chars)")
    ai_fractional_progress: float = Field(
        default=0.0, ge=0, description="Opponent progress including partial chars"
    )
    time_elapsed_ms: float = Field(default=0.0, ge=0, description="Play time in milliseconds")
    player_total_keystrokes: int = Field(default=0, ge=0, description="Player keystrokes")
    player_correct_keystrokes: int = Field(default=0, ge=0, description="Correct player keystrokes")
    ai_correct_chars: int = Field(default=0, ge=0, description="Chars the opponent completed")

    model_config = ConfigDict(frozen=True, extra="ignore")
