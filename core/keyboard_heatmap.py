"""Per-key accuracy aggregation for keyboard heatmaps."""

from enum import Enum
from typing import Iterable, List

from core.models import KeyHeatmapData, SessionStats
from core.wpm_calculator import calculate_accuracy

MIN_HEATMAP_ATTEMPTS = 3


class HeatLevel(str, Enum):
    """Heat bucket for a key's accuracy."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    WEAK = "weak"
    CRITICAL = "critical"
    NONE = "none"


HEAT_LABELS = {
    HeatLevel.EXCELLENT: "מצוין",
    HeatLevel.GOOD: "טוב",
    HeatLevel.FAIR: "סביר",
    HeatLevel.WEAK: "חלש",
    HeatLevel.CRITICAL: "דורש תרגול",
    HeatLevel.NONE: "אין מידע",
}


def aggregate_key_accuracy(sessions: Iterable[SessionStats]) -> List[KeyHeatmapData]:
    """Sum per-key tallies across sessions.

    Args:
        sessions: Session statistics to combine

    Returns:
        KeyHeatmapData list, weakest first
    """
    totals: dict[str, List[int]] = {}
    for session in sessions:
        for char, tally in session.key_accuracy.items():
            entry = totals.setdefault(char, [0, 0])
            entry[0] += tally.correct
            entry[1] += tally.total

    data = [
        KeyHeatmapData(
            char=char,
            accuracy=calculate_accuracy(correct, total),
            total=total,
            correct=correct,
        )
        for char, (correct, total) in totals.items()
    ]
    return sorted(data, key=lambda k: (k.accuracy, k.char))


def get_heat_level(accuracy: int, total: int) -> HeatLevel:
    """Bucket a key's accuracy, keys with under 3 attempts have no level."""
    if total < MIN_HEATMAP_ATTEMPTS:
        return HeatLevel.NONE
    if accuracy >= 95:
        return HeatLevel.EXCELLENT
    if accuracy >= 85:
        return HeatLevel.GOOD
    if accuracy >= 75:
        return HeatLevel.FAIR
    if accuracy >= 60:
        return HeatLevel.WEAK
    return HeatLevel.CRITICAL


def get_heat_label(accuracy: int, total: int) -> str:
    """Hebrew display label for a key's heat level."""
    return HEAT_LABELS[get_heat_level(accuracy, total)]


def get_weakest_keys(data: Iterable[KeyHeatmapData], count: int) -> List[KeyHeatmapData]:
    """Top N lowest-accuracy keys with enough attempts."""
    eligible = [k for k in data if k.total >= MIN_HEATMAP_ATTEMPTS]
    return sorted(eligible, key=lambda k: k.accuracy)[:count]


def get_strongest_keys(data: Iterable[KeyHeatmapData], count: int) -> List[KeyHeatmapData]:
    """Top N highest-accuracy keys with enough attempts."""
    eligible = [k for k in data if k.total >= MIN_HEATMAP_ATTEMPTS]
    return sorted(eligible, key=lambda k: k.accuracy, reverse=True)[:count]
