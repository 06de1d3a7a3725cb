"""Infer the learner's mood from a session's keystroke stream.

Pure functions over the Keystroke records the practice session produces, so
feedback can be picked after (or during) a lesson without extra tracking.
"""

from typing import List, Sequence

from core.models import EmotionalIndicators, EmotionalState, Keystroke, Trend
from core.wpm_calculator import AVG_WORD_LENGTH

PAUSE_THRESHOLD_MS = 10_000
BACKSPACE_CODE = "Backspace"

# Relative change between halves below this counts as stable
TREND_THRESHOLD = 0.05
# Trends need at least this many keystrokes, fewer are always stable
MIN_TREND_KEYSTROKES = 4

FLOW_STREAK = 20
CONFUSED_PAUSES = 3
PERFECTIONIST_BACKSPACE_RATIO = 0.3
BORED_MIN_SESSION_MS = 5 * 60_000


def _slice_wpm(keystrokes: Sequence[Keystroke]) -> float:
    """Unrounded WPM over a slice, counting every keystroke."""
    if len(keystrokes) < 2:
        return 0.0
    minutes = (keystrokes[-1].timestamp - keystrokes[0].timestamp) / 60_000
    if minutes <= 0:
        return 0.0
    return len(keystrokes) / AVG_WORD_LENGTH / minutes


def _slice_accuracy(keystrokes: Sequence[Keystroke]) -> float:
    """Accuracy in 0..1 over a slice, ignoring backspaces."""
    typed = [k for k in keystrokes if k.code != BACKSPACE_CODE]
    if not typed:
        return 1.0
    return sum(1 for k in typed if k.is_correct) / len(typed)


def compute_trend(first: float, second: float) -> Trend:
    """Compare two values by relative change.

    Args:
        first: Value for the first half
        second: Value for the second half

    Returns:
        RISING or FALLING when the change exceeds TREND_THRESHOLD, else STABLE
    """
    relative = (second - first) / max(first, 0.001)
    if relative > TREND_THRESHOLD:
        return Trend.RISING
    if relative < -TREND_THRESHOLD:
        return Trend.FALLING
    return Trend.STABLE


def _trailing_streak(keystrokes: Sequence[Keystroke]) -> int:
    streak = 0
    for keystroke in reversed(keystrokes):
        if keystroke.code == BACKSPACE_CODE or not keystroke.is_correct:
            break
        streak += 1
    return streak


def compute_indicators(
    keystrokes: Sequence[Keystroke], session_duration_ms: float
) -> EmotionalIndicators:
    """Derive mood indicators from a keystroke list.

    The session is split at its midpoint (the first half gets the smaller
    share on odd lengths); trends compare the halves.

    Args:
        keystrokes: Keystrokes in the order they were typed
        session_duration_ms: Session duration, passed through unchanged

    Returns:
        EmotionalIndicators for the session
    """
    if not keystrokes:
        return EmotionalIndicators(session_duration_ms=session_duration_ms)

    backspaces = sum(1 for k in keystrokes if k.code == BACKSPACE_CODE)

    pauses: List[float] = []
    for previous, current in zip(keystrokes, keystrokes[1:]):
        gap = current.timestamp - previous.timestamp
        if gap > PAUSE_THRESHOLD_MS:
            pauses.append(gap)

    midpoint = len(keystrokes) // 2
    first_half, second_half = keystrokes[:midpoint], keystrokes[midpoint:]

    if len(keystrokes) < MIN_TREND_KEYSTROKES:
        wpm_trend = accuracy_trend = Trend.STABLE
    else:
        wpm_trend = compute_trend(_slice_wpm(first_half), _slice_wpm(second_half))
        accuracy_trend = compute_trend(
            _slice_accuracy(first_half), _slice_accuracy(second_half)
        )

    return EmotionalIndicators(
        wpm_trend=wpm_trend,
        accuracy_trend=accuracy_trend,
        backspace_ratio=backspaces / len(keystrokes),
        pause_count=len(pauses),
        avg_pause_duration_ms=sum(pauses) / len(pauses) if pauses else 0.0,
        streak_length=_trailing_streak(keystrokes),
        session_duration_ms=session_duration_ms,
    )


def detect_emotional_state(indicators: EmotionalIndicators) -> EmotionalState:
    """Pick the mood that best matches the indicators.

    Checked in priority order: flow, frustrated, confused, perfectionist,
    bored, improving, otherwise neutral.
    """
    if indicators.streak_length >= FLOW_STREAK:
        return EmotionalState.FLOW

    if indicators.wpm_trend == Trend.RISING and indicators.accuracy_trend == Trend.FALLING:
        return EmotionalState.FRUSTRATED

    if (
        indicators.pause_count >= CONFUSED_PAUSES
        and indicators.avg_pause_duration_ms > PAUSE_THRESHOLD_MS
    ):
        return EmotionalState.CONFUSED

    if indicators.backspace_ratio > PERFECTIONIST_BACKSPACE_RATIO:
        return EmotionalState.PERFECTIONIST

    if (
        indicators.wpm_trend == Trend.FALLING
        and indicators.accuracy_trend == Trend.STABLE
        and indicators.session_duration_ms > BORED_MIN_SESSION_MS
    ):
        return EmotionalState.BORED

    if indicators.wpm_trend == Trend.RISING:
        return EmotionalState.IMPROVING

    return EmotionalState.NEUTRAL


def detect_from_keystrokes(
    keystrokes: Sequence[Keystroke], session_duration_ms: float
) -> EmotionalState:
    """Shortcut for detect_emotional_state(compute_indicators(...))."""
    return detect_emotional_state(compute_indicators(keystrokes, session_duration_ms))
