"""Fixed-interval driver for the word rain simulation.

The loop never reads a clock or schedules anything itself. The caller reports
how much time has passed and the loop fires every tick, spawn and one-second
clock event that fell due in that span, in time order.
"""

import logging
import random
from typing import Callable, Optional

from core.models import Difficulty, FinalScore, GamePhase, WordRainState
from core.word_rain import (
    advance_clock,
    calculate_final_score,
    create_word_rain_state,
    process_input,
    spawn_word,
    start_game,
    tick,
)
from core.word_rain_config import get_difficulty_config
from utils.config import DEFAULT_SETTINGS, EngineSettings

log = logging.getLogger("ninjakeyboard.game_loop")

CLOCK_INTERVAL_MS = 1000


class WordRainLoop:
    """Owns one WordRainState and drives it from elapsed time."""

    def __init__(self, difficulty: Difficulty,
                 rng: Optional[random.Random] = None,
                 settings: EngineSettings = DEFAULT_SETTINGS,
                 on_game_over: Optional[Callable[[WordRainState], None]] = None):
        """Initialize game loop.

        Args:
            difficulty: Game difficulty
            rng: Random source for spawns, seed it for reproducible games
            settings: Engine settings (tick interval, spawn spacing)
            on_game_over: Callback called once when the game ends
        """
        self.settings = settings
        self.rng = rng or random.Random()
        self.on_game_over = on_game_over
        self.tick_interval_ms = settings.tick_interval_ms
        self.spawn_interval_ms = get_difficulty_config(difficulty).spawn_interval_ms
        self.state = create_word_rain_state(difficulty)
        self.elapsed_ms = 0
        self._next_tick_ms = self.tick_interval_ms
        self._next_spawn_ms = self.spawn_interval_ms
        self._next_clock_ms = CLOCK_INTERVAL_MS
        self._game_over_reported = False

    @property
    def is_running(self) -> bool:
        """Whether the game is in the playing phase."""
        return self.state.phase == GamePhase.PLAYING

    def start(self) -> None:
        """Start the game. Timers begin counting from now."""
        if self.state.phase != GamePhase.READY:
            return
        self.state = start_game(self.state)
        self.elapsed_ms = 0
        self._next_tick_ms = self.tick_interval_ms
        self._next_spawn_ms = self.spawn_interval_ms
        self._next_clock_ms = CLOCK_INTERVAL_MS

    def advance(self, delta_ms: int) -> WordRainState:
        """Let time pass and fire every event that fell due.

        Events at the same instant fire as clock, spawn, then tick. Splitting a
        span into smaller calls fires exactly the same events.

        Args:
            delta_ms: Milliseconds since the previous call

        Returns:
            State after all due events
        """
        if delta_ms <= 0 or not self.is_running:
            return self.state

        target_ms = self.elapsed_ms + delta_ms
        while self.is_running:
            due_ms = min(self._next_clock_ms, self._next_spawn_ms, self._next_tick_ms)
            if due_ms > target_ms:
                break
            self.elapsed_ms = due_ms

            if self._next_clock_ms == due_ms:
                self.state = advance_clock(self.state)
                self._next_clock_ms += CLOCK_INTERVAL_MS
            if self._next_spawn_ms == due_ms:
                self.state = spawn_word(self.state, self.rng, self.settings)
                self._next_spawn_ms += self.spawn_interval_ms
            if self._next_tick_ms == due_ms:
                self.state = tick(self.state)
                self._next_tick_ms += self.tick_interval_ms

        self.elapsed_ms = target_ms
        self._report_game_over()
        return self.state

    def type_text(self, text: str) -> WordRainState:
        """Forward the input box contents to the game."""
        self.state = process_input(self.state, text)
        return self.state

    def final_score(self) -> Optional[FinalScore]:
        """Final score once the game is over, None before that."""
        if self.state.phase != GamePhase.GAMEOVER:
            return None
        return calculate_final_score(self.state)

    def _report_game_over(self) -> None:
        if self.state.phase != GamePhase.GAMEOVER or self._game_over_reported:
            return
        self._game_over_reported = True
        log.info(f"Game over after {self.elapsed_ms}ms")
        if self.on_game_over:
            self.on_game_over(self.state)
