"""Practice session state machine owning the live typing buffer."""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from core.models import Keystroke, SessionStats, WeakKey
from core.typing_engine import compute_session_stats, find_weak_keys, process_keystroke
from core.wpm_calculator import calculate_realtime_wpm
from utils.config import DEFAULT_SETTINGS, EngineSettings

log = logging.getLogger("ninjakeyboard.practice_session")


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class SessionPhase(str, Enum):
    """Lifecycle of a practice session."""

    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"


@dataclass
class TypingSession:
    """State of one typing session.

    current_index only advances on a correct keystroke and never exceeds
    len(text). Keystrokes accumulate across lines of a multi-line lesson.
    """

    text: str = field(default="")
    current_index: int = field(default=0)
    keystrokes: List[Keystroke] = field(default_factory=list)
    started_at: Optional[float] = field(default=None)
    is_active: bool = field(default=False)
    is_paused: bool = field(default=False)
    lesson_id: Optional[str] = field(default=None)
    current_line: int = field(default=0)


class PracticeSession:
    """Drives a TypingSession: idle -> active <-> paused -> ended."""

    def __init__(self, clock: Callable[[], float] = monotonic_ms,
                 settings: EngineSettings = DEFAULT_SETTINGS):
        """Initialize practice session.

        Args:
            clock: Monotonic clock returning milliseconds
            settings: Engine settings (realtime window, weak key threshold)
        """
        self.clock = clock
        self.settings = settings
        self.state = TypingSession()
        self._ended = False

    @property
    def phase(self) -> SessionPhase:
        """Current lifecycle phase."""
        if self.state.is_active:
            return SessionPhase.PAUSED if self.state.is_paused else SessionPhase.ACTIVE
        return SessionPhase.ENDED if self._ended else SessionPhase.IDLE

    def start_session(self, text: str, lesson_id: Optional[str] = None) -> None:
        """Start a new session, discarding any previous buffer."""
        self.state = TypingSession(
            text=text,
            started_at=self.clock(),
            is_active=True,
            lesson_id=lesson_id,
        )
        self._ended = False
        log.info(f"Session started (lesson={lesson_id}, {len(text)} chars)")

    def type_key(self, actual: str, code: str) -> Optional[Keystroke]:
        """Record one keystroke against the character under the cursor.

        Incorrect keystrokes are recorded but leave the cursor in place, so the
        same character must be typed again.

        Args:
            actual: Character the learner typed
            code: Physical key code that was pressed

        Returns:
            The recorded Keystroke, or None if input is not accepted right now
        """
        state = self.state
        if not state.is_active or state.is_paused:
            log.debug("Ignoring keystroke: session not accepting input")
            return None
        if state.current_index >= len(state.text):
            log.debug("Ignoring keystroke: end of text reached")
            return None

        expected = state.text[state.current_index]
        keystroke = process_keystroke(expected, actual, code, self.clock())
        state.keystrokes.append(keystroke)
        if keystroke.is_correct:
            state.current_index += 1
        return keystroke

    def pause(self) -> None:
        """Pause input without clearing history."""
        if not self.state.is_active:
            log.debug("Ignoring pause: no active session")
            return
        self.state.is_paused = True

    def resume(self) -> None:
        """Resume a paused session."""
        if not self.state.is_active:
            log.debug("Ignoring resume: no active session")
            return
        self.state.is_paused = False

    def next_line(self, text: str) -> None:
        """Move to the next line of a lesson, keeping accumulated keystrokes."""
        if not self.state.is_active:
            log.debug("Ignoring next_line: no active session")
            return
        self.state.text = text
        self.state.current_index = 0
        self.state.current_line += 1

    def end_session(self) -> None:
        """End the session. A new session requires start_session again."""
        if not self.state.is_active:
            return
        self.state.is_active = False
        self.state.is_paused = False
        self._ended = True
        log.info(
            f"Session ended (lesson={self.state.lesson_id}, "
            f"{len(self.state.keystrokes)} keystrokes, line {self.state.current_line})"
        )

    def get_stats(self) -> Optional[SessionStats]:
        """Get statistics for the session so far.

        Returns:
            SessionStats, or None until a keystroke exists and the session started
        """
        if self.state.started_at is None or not self.state.keystrokes:
            return None
        return compute_session_stats(self.state.keystrokes, self.state.started_at, self.clock())

    def get_realtime_wpm(self) -> int:
        """Get WPM measured from the keystroke buffer alone."""
        return calculate_realtime_wpm(self.state.keystrokes, self.settings.realtime_window_ms)

    def get_weak_keys(self) -> List[WeakKey]:
        """Get the weakest keys so far, empty until stats are available."""
        stats = self.get_stats()
        if stats is None:
            return []
        return find_weak_keys(stats, self.settings.weak_key_min_attempts)
