"""Typing battle: race a simulated typist over the same text.

The opponent types at a fixed WPM per difficulty, slowed by its error rate
(each simulated mistake costs a wrong char plus a backspace). Like word rain,
every function returns a new BattleState and the caller reports elapsed time.
"""

import logging
import math
import random
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.models import BattleState, BattleStatus, BattleWinner, Difficulty
from core.speed_test import SPEED_TEST_SENTENCES
from core.wpm_calculator import AVG_WORD_LENGTH, calculate_accuracy, calculate_wpm, round_half_up

log = logging.getLogger("ninjakeyboard.battle")

DEFAULT_TEXT_LENGTH = 150
# Trim at a word boundary only if that keeps at least this share of the text
MIN_WORD_TRIM_RATIO = 0.7
FALLBACK_TEXT = "שלום עולם"

XP_BASE = 15
XP_WIN_BONUS = 25
WPM_PER_SPEED_XP = 5


class OpponentProfile(BaseModel):
    """Simulated typist for one difficulty."""

    wpm: int = Field(..., gt=0, description="Raw typing speed")
    error_rate: float = Field(
        ..., ge=0, lt=0.5, description="Share of chars typed wrong and corrected"
    )
    xp_multiplier: float = Field(..., ge=1, description="XP multiplier for this difficulty")

    model_config = ConfigDict(frozen=True, extra="ignore")


OPPONENTS = {
    Difficulty.EASY: OpponentProfile(wpm=15, error_rate=0.1, xp_multiplier=1.0),
    Difficulty.MEDIUM: OpponentProfile(wpm=30, error_rate=0.05, xp_multiplier=1.5),
    Difficulty.HARD: OpponentProfile(wpm=50, error_rate=0.02, xp_multiplier=2.0),
}


def get_opponent(difficulty: Difficulty) -> OpponentProfile:
    return OPPONENTS[Difficulty(difficulty)]


def get_ai_wpm(difficulty: Difficulty) -> int:
    return get_opponent(difficulty).wpm


def get_ai_error_rate(difficulty: Difficulty) -> float:
    return get_opponent(difficulty).error_rate


def get_battle_text(text_length: int = DEFAULT_TEXT_LENGTH,
                    rng: Optional[random.Random] = None) -> str:
    """Build a text of roughly text_length chars from random sentences.

    The result is cut to text_length, at the last space when that space is
    past MIN_WORD_TRIM_RATIO of the length.

    Args:
        text_length: Target length in characters
        rng: Random source, pass a seeded one for reproducible texts

    Returns:
        Battle text
    """
    if not SPEED_TEST_SENTENCES or text_length <= 0:
        return FALLBACK_TEXT

    rng = rng or random.Random()
    parts = []
    length = 0
    while length < text_length:
        sentence = rng.choice(SPEED_TEST_SENTENCES)
        parts.append(sentence)
        length += len(sentence) + 1

    text = " ".join(parts)
    if len(text) <= text_length:
        return text

    trimmed = text[:text_length]
    last_space = trimmed.rfind(" ")
    if last_space > text_length * MIN_WORD_TRIM_RATIO:
        return trimmed[:last_space]
    return trimmed


def create_battle(difficulty: Difficulty, text_length: int = DEFAULT_TEXT_LENGTH,
                  rng: Optional[random.Random] = None) -> BattleState:
    """Create an idle battle with a fresh text."""
    return BattleState(
        text=get_battle_text(text_length, rng),
        difficulty=Difficulty(difficulty),
    )


def start_countdown(state: BattleState) -> BattleState:
    """idle -> countdown. Other phases are left untouched."""
    if state.status != BattleStatus.IDLE:
        return state
    return state.model_copy(update={"status": BattleStatus.COUNTDOWN})


def start_battle(state: BattleState) -> BattleState:
    """Begin the race from idle or countdown."""
    if state.status not in (BattleStatus.IDLE, BattleStatus.COUNTDOWN):
        return state
    log.info(f"Battle started ({state.difficulty.value}, {len(state.text)} chars)")
    return state.model_copy(update={"status": BattleStatus.PLAYING})


def update_player_progress(state: BattleState, char_index: int, is_correct: bool) -> BattleState:
    """Record one player keystroke at char_index.

    A correct keystroke moves the player's cursor past char_index; a wrong
    one only counts towards accuracy.
    """
    if state.status != BattleStatus.PLAYING:
        return state

    return state.model_copy(update={
        "player_progress": char_index + 1 if is_correct else state.player_progress,
        "player_total_keystrokes": state.player_total_keystrokes + 1,
        "player_correct_keystrokes": state.player_correct_keystrokes + (1 if is_correct else 0),
    })


def update_ai_progress(state: BattleState, delta_ms: float) -> BattleState:
    """Advance the opponent and the battle clock by delta_ms.

    Sub-character progress carries over between calls, so the result does
    not depend on how elapsed time is chunked.
    """
    if state.status != BattleStatus.PLAYING or delta_ms <= 0:
        return state

    opponent = get_opponent(state.difficulty)
    chars_per_ms = opponent.wpm * AVG_WORD_LENGTH / 60_000
    effective_rate = chars_per_ms * (1 - opponent.error_rate * 2)

    fractional = state.ai_fractional_progress + delta_ms * effective_rate
    progress = min(math.floor(fractional), len(state.text))

    return state.model_copy(update={
        "ai_progress": progress,
        "ai_fractional_progress": fractional,
        "ai_correct_chars": progress,
        "time_elapsed_ms": state.time_elapsed_ms + delta_ms,
    })


def check_winner(state: BattleState) -> Optional[BattleWinner]:
    """Who has reached the end of the text, the player winning ties."""
    text_length = len(state.text)
    player_done = state.player_progress >= text_length
    ai_done = state.ai_progress >= text_length

    if player_done and ai_done:
        return BattleWinner.PLAYER if state.player_progress >= state.ai_progress else BattleWinner.AI
    if player_done:
        return BattleWinner.PLAYER
    if ai_done:
        return BattleWinner.AI
    return None


def resolve_winner(state: BattleState) -> BattleState:
    """Finish a playing battle once someone reached the end."""
    if state.status != BattleStatus.PLAYING:
        return state
    winner = check_winner(state)
    if winner is None:
        return state
    log.info(f"Battle finished: {winner.value} wins after {state.time_elapsed_ms:.0f}ms")
    return state.model_copy(update={"status": BattleStatus.FINISHED, "winner": winner})


def calculate_battle_xp(won: bool, difficulty: Difficulty, wpm: int) -> int:
    """XP for a battle: base + win bonus + 1 per 5 WPM, scaled by difficulty."""
    speed_bonus = max(wpm, 0) // WPM_PER_SPEED_XP
    raw = XP_BASE + (XP_WIN_BONUS if won else 0) + speed_bonus
    return round_half_up(raw * get_opponent(difficulty).xp_multiplier)


def calculate_player_wpm(state: BattleState) -> int:
    return calculate_wpm(state.player_correct_keystrokes, state.time_elapsed_ms)


def calculate_player_accuracy(state: BattleState) -> int:
    return calculate_accuracy(state.player_correct_keystrokes, state.player_total_keystrokes)


def calculate_ai_effective_wpm(state: BattleState) -> int:
    return calculate_wpm(state.ai_correct_chars, state.time_elapsed_ms)
