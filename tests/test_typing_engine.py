"""Tests for keystroke processing and session statistics."""

import pytest
from pydantic import ValidationError

from conftest import make_keystroke
from core.models import KeyTally, SessionStats
from core.typing_engine import (
    calculate_xp_reward,
    compute_session_stats,
    find_weak_keys,
    is_lesson_complete,
    process_keystroke,
)


def make_stats(wpm: int, accuracy: int, key_accuracy=None) -> SessionStats:
    return SessionStats(
        total_keystrokes=0,
        correct_keystrokes=0,
        error_keystrokes=0,
        accuracy=accuracy,
        wpm=wpm,
        duration_ms=60000,
        key_accuracy=key_accuracy or {},
    )


class TestProcessKeystroke:
    """Test process_keystroke function."""

    def test_correct_keystroke(self):
        """Test matching characters are correct."""
        ks = process_keystroke("ש", "ש", "KeyA", 1234.5)

        assert ks.is_correct
        assert ks.expected == "ש"
        assert ks.actual == "ש"
        assert ks.code == "KeyA"
        assert ks.timestamp == 1234.5

    def test_incorrect_keystroke(self):
        """Test mismatching characters are incorrect."""
        assert not process_keystroke("ש", "ד", "KeyS", 0).is_correct

    def test_code_does_not_affect_correctness(self):
        """Test a wrong physical key with the right character is still correct."""
        assert process_keystroke("ש", "ש", "KeyQ", 0).is_correct

    def test_keystroke_is_immutable(self):
        """Test keystrokes cannot be changed after creation."""
        ks = process_keystroke("ש", "ד", "KeyS", 0)
        with pytest.raises(ValidationError):
            ks.is_correct = True


class TestComputeSessionStats:
    """Test compute_session_stats function."""

    def test_empty_session(self):
        """Test no keystrokes means no penalty and no credit."""
        stats = compute_session_stats([], 0, 60000)

        assert stats.total_keystrokes == 0
        assert stats.wpm == 0
        assert stats.accuracy == 100
        assert stats.key_accuracy == {}

    def test_counts_and_invariant(self):
        """Test total equals correct plus errors."""
        keystrokes = [
            make_keystroke("ש", timestamp=100),
            make_keystroke("ד", "ג", timestamp=200),
            make_keystroke("ד", timestamp=300),
        ]
        stats = compute_session_stats(keystrokes, 0, 1000)

        assert stats.total_keystrokes == 3
        assert stats.correct_keystrokes == 2
        assert stats.error_keystrokes == 1
        assert stats.total_keystrokes == stats.correct_keystrokes + stats.error_keystrokes
        assert stats.accuracy == 67
        assert stats.duration_ms == 1000

    def test_key_accuracy_uses_expected_char(self):
        """Test a wrong keystroke counts against the expected character."""
        keystrokes = [
            make_keystroke("ד", "ג"),
            make_keystroke("ד"),
        ]
        stats = compute_session_stats(keystrokes, 0, 1000)

        assert stats.key_accuracy == {"ד": KeyTally(correct=1, total=2)}
        assert "ג" not in stats.key_accuracy

    def test_key_accuracy_is_read_only(self):
        """Test per-key tallies cannot be changed after the stats are built."""
        source = {"ד": KeyTally(correct=1, total=2)}
        stats = compute_session_stats([make_keystroke("ד")], 0, 1000)
        built = SessionStats(
            total_keystrokes=2, correct_keystrokes=1, error_keystrokes=1,
            accuracy=50, wpm=0, duration_ms=1000, key_accuracy=source,
        )

        with pytest.raises(TypeError):
            stats.key_accuracy["x"] = KeyTally(correct=1, total=1)
        source["x"] = KeyTally(correct=0, total=1)

        assert "x" not in stats.key_accuracy
        assert "x" not in built.key_accuracy
        assert built.model_dump()["key_accuracy"] == {"ד": {"correct": 1, "total": 2}}

    def test_wpm_from_correct_keystrokes(self):
        """Test WPM uses correct keystrokes over session duration.

        55 correct + 10 wrong in 60 seconds = 10 WPM.
        """
        keystrokes = [make_keystroke("ש") for _ in range(55)]
        keystrokes += [make_keystroke("ש", "ד") for _ in range(10)]
        stats = compute_session_stats(keystrokes, 5000, 65000)

        assert stats.wpm == 10

    def test_idempotent(self):
        """Test computing twice gives identical stats."""
        keystrokes = [make_keystroke("ש", timestamp=i * 100) for i in range(5)]
        assert compute_session_stats(keystrokes, 0, 2000) == compute_session_stats(keystrokes, 0, 2000)

    def test_negative_duration_clamped(self):
        """Test an end before the start is treated as zero duration."""
        stats = compute_session_stats([make_keystroke("ש")], 5000, 1000)

        assert stats.duration_ms == 0
        assert stats.wpm == 0


class TestFindWeakKeys:
    """Test find_weak_keys function."""

    def test_skips_low_sample_keys(self):
        """Test keys with fewer than 3 attempts are not judged."""
        stats = make_stats(10, 90, {
            "ש": KeyTally(correct=0, total=2),
            "ד": KeyTally(correct=2, total=3),
        })
        weak = find_weak_keys(stats)

        assert [k.char for k in weak] == ["ד"]

    def test_sorted_weakest_first(self):
        """Test ascending accuracy order."""
        stats = make_stats(10, 90, {
            "ש": KeyTally(correct=9, total=10),
            "ד": KeyTally(correct=3, total=10),
            "ג": KeyTally(correct=6, total=10),
        })
        weak = find_weak_keys(stats)

        assert [k.char for k in weak] == ["ד", "ג", "ש"]
        assert [k.accuracy for k in weak] == [30, 60, 90]

    def test_ties_prefer_more_attempts(self):
        """Test equal accuracy ranks the better-evidenced key first."""
        stats = make_stats(10, 90, {
            "ש": KeyTally(correct=2, total=4),
            "ד": KeyTally(correct=10, total=20),
        })
        weak = find_weak_keys(stats)

        assert [k.char for k in weak] == ["ד", "ש"]

    def test_custom_min_attempts(self):
        """Test min_attempts can be lowered."""
        stats = make_stats(10, 90, {"ש": KeyTally(correct=0, total=1)})
        assert len(find_weak_keys(stats, min_attempts=1)) == 1


class TestIsLessonComplete:
    """Test is_lesson_complete function."""

    def test_both_thresholds_met(self):
        assert is_lesson_complete(make_stats(20, 95), 20, 95)

    def test_speed_cannot_compensate_accuracy(self):
        assert not is_lesson_complete(make_stats(60, 80), 20, 90)

    def test_accuracy_cannot_compensate_speed(self):
        assert not is_lesson_complete(make_stats(10, 100), 20, 90)


class TestCalculateXpReward:
    """Test calculate_xp_reward function."""

    def test_base_only(self):
        """Test meeting thresholds exactly with no streak gives base XP."""
        reward = calculate_xp_reward(make_stats(20, 90), 20, 90, 0)

        assert reward.base == 10
        assert reward.accuracy_bonus == 0
        assert reward.speed_bonus == 0
        assert reward.streak_multiplier == 1.0
        assert reward.total == 10

    def test_bonuses(self):
        """Test bonuses for exceeding thresholds.

        5 accuracy points above -> 5 XP, 3 WPM above -> 6 XP, total 21.
        """
        reward = calculate_xp_reward(make_stats(23, 95), 20, 90, 0)

        assert reward.accuracy_bonus == 5
        assert reward.speed_bonus == 6
        assert reward.total == 21

    def test_below_threshold_has_no_negative_bonus(self):
        """Test bonuses never go negative."""
        reward = calculate_xp_reward(make_stats(5, 50), 20, 90, 0)

        assert reward.accuracy_bonus == 0
        assert reward.speed_bonus == 0
        assert reward.total == 10

    def test_streak_multiplier_capped(self):
        """Test the multiplier stops at 2.0."""
        reward = calculate_xp_reward(make_stats(20, 90), 20, 90, 50)

        assert reward.streak_multiplier == 2.0
        assert reward.total == 20

    def test_monotonic_in_streak(self):
        """Test a longer streak never gives less XP."""
        stats = make_stats(27, 97)
        totals = [calculate_xp_reward(stats, 20, 90, s).total for s in range(30)]

        assert totals == sorted(totals)
        assert all(calculate_xp_reward(stats, 20, 90, s).streak_multiplier >= 1 for s in range(30))
