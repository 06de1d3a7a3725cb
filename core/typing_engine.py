"""Keystroke classification and session statistics.

Pure functions: no side effects and no state. Everything takes plain data in
and returns plain data out, so the same keystrokes always yield the same stats.
"""

import logging
from typing import Dict, List, Sequence

from core.models import Keystroke, KeyTally, SessionStats, WeakKey, XpReward
from core.wpm_calculator import calculate_accuracy, calculate_wpm, round_half_up

log = logging.getLogger("ninjakeyboard.typing_engine")

XP_BASE = 10
XP_PER_ACCURACY_POINT = 1
XP_PER_WPM = 2
STREAK_STEP = 0.1
MAX_STREAK_MULTIPLIER = 2.0


def process_keystroke(expected: str, actual: str, code: str, timestamp: float) -> Keystroke:
    """Classify one input event against the expected character.

    The physical key code is recorded for technique analysis only and does
    not affect correctness.
    """
    return Keystroke(
        expected=expected,
        actual=actual,
        code=code,
        timestamp=timestamp,
        is_correct=expected == actual,
    )


def compute_session_stats(
    keystrokes: Sequence[Keystroke],
    started_at: float,
    now: float,
) -> SessionStats:
    """Compute session statistics from a list of keystrokes.

    Per-key tallies are keyed by the expected character, so a wrong keystroke
    counts against the key the learner was supposed to type.

    Args:
        keystrokes: Keystrokes in typing order
        started_at: Session start timestamp (ms)
        now: Timestamp to measure up to (ms)

    Returns:
        SessionStats (wpm=0, accuracy=100 for an empty list)
    """
    correct = 0
    tallies: Dict[str, List[int]] = {}

    for ks in keystrokes:
        tally = tallies.setdefault(ks.expected, [0, 0])
        tally[1] += 1
        if ks.is_correct:
            tally[0] += 1
            correct += 1

    total = len(keystrokes)
    duration_ms = now - started_at
    if duration_ms < 0:
        log.warning(f"Negative duration: {duration_ms}ms (start={started_at}, end={now})")
        duration_ms = 0.0

    return SessionStats(
        total_keystrokes=total,
        correct_keystrokes=correct,
        error_keystrokes=total - correct,
        accuracy=calculate_accuracy(correct, total),
        wpm=calculate_wpm(correct, duration_ms),
        duration_ms=duration_ms,
        key_accuracy={
            char: KeyTally(correct=c, total=t) for char, (c, t) in tallies.items()
        },
    )


def find_weak_keys(stats: SessionStats, min_attempts: int = 3) -> List[WeakKey]:
    """Find the weakest keys in a session.

    Keys with fewer than min_attempts are skipped, one or two misses say little.
    Sorted by accuracy ascending; among equal accuracy, keys with more attempts
    come first since they are stronger evidence of a real weakness.

    Args:
        stats: Session statistics
        min_attempts: Minimum attempts for a key to be judged

    Returns:
        WeakKey list, weakest first
    """
    candidates = [
        WeakKey(
            char=char,
            accuracy=calculate_accuracy(tally.correct, tally.total),
            total=tally.total,
        )
        for char, tally in stats.key_accuracy.items()
        if tally.total >= min_attempts
    ]
    return sorted(candidates, key=lambda k: (k.accuracy, -k.total, k.char))


def is_lesson_complete(stats: SessionStats, pass_wpm: int, pass_accuracy: int) -> bool:
    """Both thresholds must hold, speed cannot make up for accuracy."""
    return stats.wpm >= pass_wpm and stats.accuracy >= pass_accuracy


def calculate_xp_reward(
    stats: SessionStats,
    pass_wpm: int,
    pass_accuracy: int,
    streak: int,
) -> XpReward:
    """Calculate XP reward for a completed lesson.

    1 XP per accuracy point and 2 XP per WPM above the pass thresholds.
    The streak multiplier grows by 0.1 per streak day, capped at 2.0.

    Args:
        stats: Session statistics
        pass_wpm: Lesson WPM threshold
        pass_accuracy: Lesson accuracy threshold
        streak: Consecutive practice days

    Returns:
        XpReward breakdown
    """
    accuracy_bonus = max(0, stats.accuracy - pass_accuracy) * XP_PER_ACCURACY_POINT
    speed_bonus = max(0, stats.wpm - pass_wpm) * XP_PER_WPM
    streak_multiplier = min(MAX_STREAK_MULTIPLIER, 1 + max(streak, 0) * STREAK_STEP)

    total = round_half_up((XP_BASE + accuracy_bonus + speed_bonus) * streak_multiplier)

    return XpReward(
        base=XP_BASE,
        accuracy_bonus=accuracy_bonus,
        speed_bonus=speed_bonus,
        streak_multiplier=streak_multiplier,
        total=total,
    )
