"""Tests for the placement classifier."""

import pytest

from conftest import make_keystroke
from core.models import FingerTechnique, PlacementResult, SkillLevel
from core.placement import (
    Stage1Data,
    Stage2Data,
    Stage3Data,
    calculate_finger_technique,
    compute_placement_result,
    determine_level,
    get_recommended_lesson,
)
from utils.keyboard_layout import CHAR_TO_KEY, HOME_ROW


def layout_keystroke(char: str, correct_code: bool = True, timestamp: float = 0.0):
    code = CHAR_TO_KEY[char].code if correct_code else "KeyZ"
    return make_keystroke(char, code=code, timestamp=timestamp)


def make_result(level: SkillLevel, wpm: int) -> PlacementResult:
    return PlacementResult(
        level=level,
        wpm=wpm,
        accuracy=100,
        finger_technique=FingerTechnique.NONE,
        recommended_lesson=1,
    )


class TestDetermineLevel:
    """Tests for WPM band classification."""

    @pytest.mark.parametrize("wpm,expected", [
        (0, "shatil"),
        (4, "shatil"),
        (5, "nevet"),
        (14, "nevet"),
        (15, "geza"),
        (29, "geza"),
        (30, "anaf"),
        (49, "anaf"),
        (50, "tzameret"),
        (60, "tzameret"),
    ])
    def test_band_boundaries(self, wpm, expected):
        """Test lower-inclusive band boundaries."""
        assert determine_level(wpm) == expected


class TestFingerTechnique:
    """Tests for calculate_finger_technique."""

    def test_no_keystrokes(self):
        assert calculate_finger_technique([]) == FingerTechnique.NONE

    def test_no_eligible_keystrokes(self):
        """Test characters off the layout are ignored."""
        keystrokes = [make_keystroke("7", code="Digit7") for _ in range(5)]
        assert calculate_finger_technique(keystrokes) == FingerTechnique.NONE

    def test_full_technique(self):
        """Test all home row keys on the right keys."""
        keystrokes = [layout_keystroke(k.char) for k in HOME_ROW]
        assert calculate_finger_technique(keystrokes) == FingerTechnique.FULL

    def test_wrong_codes(self):
        """Test every keystroke on the wrong key."""
        keystrokes = [layout_keystroke(k.char, correct_code=False) for k in HOME_ROW]
        assert calculate_finger_technique(keystrokes) == FingerTechnique.NONE

    def test_partial_technique(self):
        """Test half on the right keys."""
        keystrokes = [layout_keystroke(k.char) for k in HOME_ROW[:5]]
        keystrokes += [layout_keystroke(k.char, correct_code=False) for k in HOME_ROW[5:]]
        assert calculate_finger_technique(keystrokes) == FingerTechnique.PARTIAL

    def test_threshold_boundaries(self):
        """Test 80% is full and 40% is partial."""
        eight_of_ten = [layout_keystroke("ש")] * 8 + [layout_keystroke("ש", False)] * 2
        four_of_ten = [layout_keystroke("ש")] * 4 + [layout_keystroke("ש", False)] * 6
        three_of_ten = [layout_keystroke("ש")] * 3 + [layout_keystroke("ש", False)] * 7

        assert calculate_finger_technique(eight_of_ten) == FingerTechnique.FULL
        assert calculate_finger_technique(four_of_ten) == FingerTechnique.PARTIAL
        assert calculate_finger_technique(three_of_ten) == FingerTechnique.NONE


class TestRecommendedLesson:
    """Tests for get_recommended_lesson."""

    def test_shatil_starts_at_one(self):
        assert get_recommended_lesson(make_result(SkillLevel.SHATIL, 2)) == 1

    @pytest.mark.parametrize("level,wpm,minimum", [
        (SkillLevel.NEVET, 8, 3),
        (SkillLevel.GEZA, 20, 6),
        (SkillLevel.ANAF, 35, 11),
        (SkillLevel.TZAMERET, 55, 16),
    ])
    def test_base_lesson_per_level(self, level, wpm, minimum):
        assert get_recommended_lesson(make_result(level, wpm)) >= minimum

    def test_offset_within_band(self):
        """Test faster learners in a band start further ahead.

        geza band 15-30: 15 -> +0, 23 -> +1, 29 -> +1.
        """
        assert get_recommended_lesson(make_result(SkillLevel.GEZA, 15)) == 6
        assert get_recommended_lesson(make_result(SkillLevel.GEZA, 23)) == 7
        assert get_recommended_lesson(make_result(SkillLevel.GEZA, 29)) == 7

    def test_top_band_offset_capped(self):
        """Test the open top band uses width 20 and caps the offset at 2."""
        assert get_recommended_lesson(make_result(SkillLevel.TZAMERET, 50)) == 16
        assert get_recommended_lesson(make_result(SkillLevel.TZAMERET, 60)) == 17
        assert get_recommended_lesson(make_result(SkillLevel.TZAMERET, 200)) == 18

    def test_always_in_catalog_range(self):
        """Test every level and WPM combination stays within 1-20."""
        for level in SkillLevel:
            for wpm in range(0, 150):
                lesson = get_recommended_lesson(make_result(level, wpm))
                assert 1 <= lesson <= 20


class TestComputePlacementResult:
    """Tests for compute_placement_result."""

    def test_complete_result(self):
        """Test all fields are filled and stage 2/3 pass through."""
        stage1 = Stage1Data(
            keystrokes=[layout_keystroke(k.char, timestamp=i * 1000) for i, k in enumerate(HOME_ROW)],
            duration_ms=60000,
        )
        result = compute_placement_result(
            stage1,
            Stage2Data(known_keys=["ש", "ד"]),
            Stage3Data(known_shortcuts=["ctrl+c"]),
        )

        assert result.known_keys == ("ש", "ד")
        assert result.known_shortcuts == ("ctrl+c",)
        assert result.finger_technique == FingerTechnique.FULL
        assert result.accuracy == 100
        assert result.wpm == 2
        assert result.level == SkillLevel.SHATIL
        assert result.recommended_lesson == 1

    def test_empty_sample(self):
        """Test no typing at all places at the lowest level."""
        result = compute_placement_result(Stage1Data(duration_ms=120000), Stage2Data(), Stage3Data())

        assert result.level == SkillLevel.SHATIL
        assert result.wpm == 0
        assert result.accuracy == 100
        assert result.finger_technique == FingerTechnique.NONE
        assert result.recommended_lesson == 1

    def test_fast_typist(self):
        """Test 10 correct chars per second for 2 minutes is tzameret.

        1200 chars / 5.5 / 2 minutes = 109 WPM.
        """
        keystrokes = [layout_keystroke("ש", timestamp=i * 100) for i in range(1200)]
        result = compute_placement_result(
            Stage1Data(keystrokes=keystrokes, duration_ms=120000),
            Stage2Data(),
            Stage3Data(),
        )

        assert result.wpm == 109
        assert result.level == SkillLevel.TZAMERET
        assert result.recommended_lesson >= 16

    def test_deterministic(self):
        """Test identical inputs give identical results."""
        stage1 = Stage1Data(
            keystrokes=[layout_keystroke("ש", timestamp=i) for i in range(100)],
            duration_ms=30000,
        )
        first = compute_placement_result(stage1, Stage2Data(), Stage3Data())
        second = compute_placement_result(stage1, Stage2Data(), Stage3Data())

        assert first == second
