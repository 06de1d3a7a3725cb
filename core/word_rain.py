"""Word rain game simulation.

Hebrew words fall from the top of the board; type one exactly to clear it.
Every function takes a WordRainState and returns a new one, the caller owns
the only live instance and drives it with tick() on a fixed interval (~50 ms).

Phases only move forward: ready -> playing -> gameover.
"""

import logging
import random
from typing import Optional, Sequence, Tuple

from core.models import Difficulty, FallingWord, FinalScore, GamePhase, WordRainState
from core.word_rain_config import get_difficulty_config
from utils.config import DEFAULT_SETTINGS, EngineSettings

log = logging.getLogger("ninjakeyboard.word_rain")

EASY_WORDS = (
    'שלום', 'בית', 'ילד', 'כלב', 'חתול', 'אבא', 'אמא', 'ספר', 'מים', 'שמש',
    'ירח', 'דג', 'פרח', 'עץ', 'גשם', 'רוח', 'אור', 'חלב', 'לחם', 'גבר',
)

MEDIUM_WORDS = (
    'מחשב', 'טלפון', 'מקלדת', 'חלון', 'דלת', 'שולחן', 'כיסא', 'מנורה',
    'תיק', 'עיפרון', 'מחברת', 'לימון', 'תפוח', 'בננה', 'שוקולד', 'ארנב',
    'פרפר', 'נמלה', 'ציפור', 'דולפין',
)

HARD_WORDS = (
    'תוכנית', 'מחשבון', 'אינטרנט', 'הקלדה', 'מהירות', 'אפליקציה',
    'תרגול', 'מקצועי', 'אלקטרוני', 'טכנולוגיה', 'תקשורת', 'פרוגרמה',
    'מערכת', 'הפעלה', "נינג'ה", 'התמודדות', 'אסטרטגיה', 'פלטפורמה',
)

# Harder pools include every easier word
WORD_POOLS = {
    Difficulty.EASY: EASY_WORDS,
    Difficulty.MEDIUM: tuple(dict.fromkeys(EASY_WORDS + MEDIUM_WORDS)),
    Difficulty.HARD: tuple(dict.fromkeys(EASY_WORDS + MEDIUM_WORDS + HARD_WORDS)),
}

SPAWN_X_MIN = 10.0
SPAWN_X_MAX = 90.0
BOTTOM_Y = 100.0

POINTS_PER_WORD = 10
MAX_COMBO_MULTIPLIER = 5
COMBO_BONUS_PER_STEP = 5
LIFE_BONUS = 20

# (minimum total score, XP), checked top down
XP_TIERS = ((500, 50), (300, 35), (150, 25), (50, 15))
MIN_XP = 10


def create_word_rain_state(difficulty: Difficulty) -> WordRainState:
    """Create a fresh game in the ready phase."""
    config = get_difficulty_config(difficulty)
    return WordRainState(
        lives=config.lives,
        max_lives=config.lives,
        difficulty=Difficulty(difficulty),
    )


def start_game(state: WordRainState) -> WordRainState:
    """Move a ready game to playing. Any other phase is left untouched."""
    if state.phase != GamePhase.READY:
        return state
    log.info(f"Word rain started ({state.difficulty.value})")
    return state.model_copy(update={"phase": GamePhase.PLAYING})


def advance_clock(state: WordRainState, seconds: int = 1) -> WordRainState:
    """Add elapsed play time, which drives the speed ramp."""
    if state.phase != GamePhase.PLAYING or seconds <= 0:
        return state
    return state.model_copy(update={"elapsed_seconds": state.elapsed_seconds + seconds})


def get_word_pool(difficulty: Difficulty) -> Tuple[str, ...]:
    """Words available at a difficulty."""
    return WORD_POOLS[Difficulty(difficulty)]


def get_random_word(difficulty: Difficulty, rng: Optional[random.Random] = None) -> str:
    """Pick a random word for the difficulty."""
    rng = rng or random.Random()
    return rng.choice(get_word_pool(difficulty))


def _pick_spawn_x(
    occupied: Sequence[float],
    rng: random.Random,
    settings: EngineSettings,
) -> float:
    """Pick an x away from words near the top.

    Tries a few random positions and keeps the one farthest from its nearest
    neighbour; spacing is not guaranteed.
    """
    best_x = rng.uniform(SPAWN_X_MIN, SPAWN_X_MAX)
    if not occupied:
        return best_x

    best_gap = min(abs(x - best_x) for x in occupied)
    for _ in range(settings.spawn_retries):
        if best_gap >= settings.spawn_min_spacing:
            break
        x = rng.uniform(SPAWN_X_MIN, SPAWN_X_MAX)
        gap = min(abs(ox - x) for ox in occupied)
        if gap > best_gap:
            best_x, best_gap = x, gap

    return best_x


def spawn_word(
    state: WordRainState,
    rng: Optional[random.Random] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> WordRainState:
    """Add a new falling word at the top of the board.

    No-op unless playing and below the difficulty's word cap. Fall speed grows
    with elapsed time.

    Args:
        state: Current game state
        rng: Random source, pass a seeded one for reproducible games
        settings: Spawn spacing tunables

    Returns:
        Updated state
    """
    if state.phase != GamePhase.PLAYING:
        return state

    config = get_difficulty_config(state.difficulty)
    if len(state.words) >= config.max_words:
        return state

    rng = rng or random.Random()
    speed_multiplier = 1 + state.elapsed_seconds * config.speed_ramp_per_second
    word = get_random_word(state.difficulty, rng)
    occupied = [w.x for w in state.words if w.y < settings.spawn_top_zone]

    new_word = FallingWord(
        id=f"w-{state.next_word_id}",
        word=word,
        x=_pick_spawn_x(occupied, rng, settings),
        y=0.0,
        speed=config.base_speed * speed_multiplier,
    )

    return state.model_copy(update={
        "words": state.words + (new_word,),
        "next_word_id": state.next_word_id + 1,
    })


def tick(state: WordRainState) -> WordRainState:
    """Advance the game by one tick.

    Every word falls by its speed. Words reaching the bottom are removed and
    each costs a life; any loss resets the combo. Reaching zero lives ends the
    game in the same tick.
    """
    if state.phase != GamePhase.PLAYING:
        return state

    surviving = []
    lost_lives = 0
    for w in state.words:
        new_y = w.y + w.speed
        if new_y >= BOTTOM_Y:
            lost_lives += 1
        else:
            surviving.append(w.model_copy(update={"y": new_y}))

    lives = max(0, state.lives - lost_lives)
    combo = 0 if lost_lives > 0 else state.combo

    if lives == 0:
        log.info(
            f"Word rain over: score={state.score} words={state.words_typed} "
            f"best_combo={state.best_combo}"
        )
        return state.model_copy(update={
            "words": tuple(surviving),
            "lives": 0,
            "combo": 0,
            "phase": GamePhase.GAMEOVER,
        })

    return state.model_copy(update={
        "words": tuple(surviving),
        "lives": lives,
        "combo": combo,
        "best_combo": max(state.best_combo, combo),
    })


def process_input(state: WordRainState, text: str) -> WordRainState:
    """Handle the current contents of the input box.

    An exact match clears that word, bumps the combo and scores
    10 x min(combo, 5). Otherwise words starting with the input are flagged
    active and the input is kept.
    """
    if state.phase != GamePhase.PLAYING:
        return state

    match_index = next(
        (i for i, w in enumerate(state.words) if w.word == text), None
    )

    if match_index is not None:
        combo = state.combo + 1
        points = POINTS_PER_WORD * min(combo, MAX_COMBO_MULTIPLIER)
        remaining = tuple(
            w.model_copy(update={"active": False})
            for i, w in enumerate(state.words) if i != match_index
        )
        return state.model_copy(update={
            "words": remaining,
            "input": "",
            "score": state.score + points,
            "combo": combo,
            "best_combo": max(state.best_combo, combo),
            "words_typed": state.words_typed + 1,
        })

    words = tuple(
        w.model_copy(update={"active": bool(text) and w.word.startswith(text)})
        for w in state.words
    )
    return state.model_copy(update={"words": words, "input": text})


def calculate_final_score(state: WordRainState) -> FinalScore:
    """Final score: base + best combo x 5 + remaining lives x 20."""
    combo_bonus = state.best_combo * COMBO_BONUS_PER_STEP
    lives_bonus = state.lives * LIFE_BONUS
    return FinalScore(
        base_score=state.score,
        combo_bonus=combo_bonus,
        lives_bonus=lives_bonus,
        total_score=state.score + combo_bonus + lives_bonus,
    )


def get_xp_reward(total_score: int) -> int:
    """Map a final score to XP, never below the participation reward."""
    for threshold, xp in XP_TIERS:
        if total_score >= threshold:
            return xp
    return MIN_XP
