"""WPM and accuracy calculation utilities."""

import math
from typing import Optional, Sequence

from core.models import Keystroke

# Average Hebrew word length in characters, including the trailing space
AVG_WORD_LENGTH = 5.5


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's round() uses banker's rounding, which would make 2.5 -> 2.
    """
    return int(math.floor(value + 0.5))


def calculate_wpm(correct_chars: int, elapsed_ms: float) -> int:
    """Calculate words per minute.

    Args:
        correct_chars: Number of correctly typed characters
        elapsed_ms: Duration in milliseconds

    Returns:
        WPM rounded to the nearest integer, or 0 if either input is not positive
    """
    if elapsed_ms <= 0 or correct_chars <= 0:
        return 0

    words = correct_chars / AVG_WORD_LENGTH
    minutes = elapsed_ms / 60000.0
    return round_half_up(words / minutes)


def calculate_accuracy(correct: int, total: int) -> int:
    """Calculate accuracy percentage.

    An empty sample is not a failure, so zero attempts yields 100.

    Args:
        correct: Correct keystrokes
        total: All keystrokes

    Returns:
        Accuracy in the range 0-100
    """
    if total <= 0:
        return 100
    return round_half_up(correct / total * 100)


def calculate_realtime_wpm(
    keystrokes: Sequence[Keystroke],
    window_ms: Optional[float] = None,
) -> int:
    """Calculate WPM from the keystroke buffer itself.

    Elapsed time runs from the first to the most recent keystroke, so no
    external session clock is needed.

    Args:
        keystrokes: Keystrokes in the order they were typed
        window_ms: Only consider keystrokes this recent relative to the last one.
            None uses the whole buffer.

    Returns:
        WPM over correct keystrokes in the considered buffer, 0 if fewer than two
    """
    if len(keystrokes) < 2:
        return 0

    last_timestamp = keystrokes[-1].timestamp
    if window_ms is not None:
        window_start = last_timestamp - window_ms
        recent = [k for k in keystrokes if k.timestamp >= window_start]
    else:
        recent = list(keystrokes)

    if len(recent) < 2:
        return 0

    correct = sum(1 for k in recent if k.is_correct)
    return calculate_wpm(correct, last_timestamp - recent[0].timestamp)
