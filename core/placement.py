"""Placement test classifier.

Three stage inputs go in, one PlacementResult comes out:

1. Free typing: keystrokes and duration give WPM, accuracy and finger technique.
2. Key recognition: characters the learner identified, passed through.
3. Shortcut recognition: shortcuts the learner knew, passed through.
"""

import logging
import math
from typing import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from core.models import FingerTechnique, Keystroke, PlacementResult, SkillLevel
from core.wpm_calculator import calculate_accuracy, calculate_wpm
from utils.keyboard_layout import CHAR_TO_KEY, KeyDefinition

log = logging.getLogger("ninjakeyboard.placement")

MIN_LESSON = 1
MAX_LESSON = 20

# Lower-inclusive WPM bands, the top band has no upper bound
LEVEL_THRESHOLDS = {
    SkillLevel.SHATIL: (0, 5),
    SkillLevel.NEVET: (5, 15),
    SkillLevel.GEZA: (15, 30),
    SkillLevel.ANAF: (30, 50),
    SkillLevel.TZAMERET: (50, math.inf),
}

# Width used for offset calculation in the unbounded top band
OPEN_BAND_WIDTH = 20

LEVEL_BASE_LESSON = {
    SkillLevel.SHATIL: 1,
    SkillLevel.NEVET: 3,
    SkillLevel.GEZA: 6,
    SkillLevel.ANAF: 11,
    SkillLevel.TZAMERET: 16,
}

MAX_BAND_OFFSET = 2
FULL_TECHNIQUE_RATIO = 0.8
PARTIAL_TECHNIQUE_RATIO = 0.4


class Stage1Data(BaseModel):
    """Free typing sample."""

    keystrokes: tuple[Keystroke, ...] = Field(default=(), description="Keystrokes typed")
    duration_ms: float = Field(..., description="Stage duration in milliseconds")

    model_config = ConfigDict(frozen=True, extra="ignore")


class Stage2Data(BaseModel):
    """Key recognition answers."""

    known_keys: tuple[str, ...] = Field(default=(), description="Identified characters")

    model_config = ConfigDict(frozen=True, extra="ignore")


class Stage3Data(BaseModel):
    """Shortcut recognition answers."""

    known_shortcuts: tuple[str, ...] = Field(default=(), description="Known shortcuts")

    model_config = ConfigDict(frozen=True, extra="ignore")


def determine_level(wpm: float) -> SkillLevel:
    """Map WPM to a skill level: <5, 5-14, 15-29, 30-49, 50+."""
    for level, (_, upper) in LEVEL_THRESHOLDS.items():
        if wpm < upper:
            return level
    return SkillLevel.TZAMERET


def calculate_finger_technique(
    keystrokes: Sequence[Keystroke],
    layout: Mapping[str, KeyDefinition] = CHAR_TO_KEY,
) -> FingerTechnique:
    """Assess whether keystrokes used the layout-correct physical key.

    Only keystrokes whose expected character is on the layout are eligible.
    >= 80% matching codes is full, >= 40% partial, anything less none.

    Args:
        keystrokes: Free typing keystrokes
        layout: Character to key definition lookup

    Returns:
        FingerTechnique (none when nothing is eligible)
    """
    eligible = 0
    matched = 0
    for ks in keystrokes:
        key = layout.get(ks.expected)
        if key is None:
            continue
        eligible += 1
        if key.code == ks.code:
            matched += 1

    if eligible == 0:
        return FingerTechnique.NONE

    ratio = matched / eligible
    if ratio >= FULL_TECHNIQUE_RATIO:
        return FingerTechnique.FULL
    if ratio >= PARTIAL_TECHNIQUE_RATIO:
        return FingerTechnique.PARTIAL
    return FingerTechnique.NONE


def recommend_lesson(level: SkillLevel, wpm: float) -> int:
    """Starting lesson for a level, nudged up by position within the band."""
    lower, upper = LEVEL_THRESHOLDS[level]
    band_size = OPEN_BAND_WIDTH if math.isinf(upper) else upper - lower
    offset = math.floor((wpm - lower) / band_size * MAX_BAND_OFFSET)
    offset = max(0, min(offset, MAX_BAND_OFFSET))
    return max(MIN_LESSON, min(LEVEL_BASE_LESSON[level] + offset, MAX_LESSON))


def get_recommended_lesson(result: PlacementResult) -> int:
    """Map a placement result to a starting lesson in 1-20."""
    return recommend_lesson(result.level, result.wpm)


def compute_placement_result(
    stage1: Stage1Data,
    stage2: Stage2Data,
    stage3: Stage3Data,
) -> PlacementResult:
    """Combine the three stage inputs into a placement result.

    Pure: identical inputs give identical results.
    """
    correct = sum(1 for ks in stage1.keystrokes if ks.is_correct)
    total = len(stage1.keystrokes)

    wpm = calculate_wpm(correct, stage1.duration_ms)
    accuracy = calculate_accuracy(correct, total)
    level = determine_level(wpm)

    result = PlacementResult(
        level=level,
        wpm=wpm,
        accuracy=accuracy,
        known_keys=stage2.known_keys,
        known_shortcuts=stage3.known_shortcuts,
        finger_technique=calculate_finger_technique(stage1.keystrokes),
        recommended_lesson=recommend_lesson(level, wpm),
    )
    log.info(
        f"Placement: level={result.level.value} wpm={wpm} accuracy={accuracy} "
        f"lesson={result.recommended_lesson}"
    )
    return result
