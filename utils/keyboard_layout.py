"""Hebrew keyboard layout table: character to physical key, hand and finger.

Standard Israeli layout, physical positions left to right:

    Top row:    / ' ק ר א ט ו ן ם פ
    Home row:   ש ד ג כ ע י ח ל ך ף
    Bottom row: ז ס ב ה נ מ צ ת ץ .
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, List


@dataclass(frozen=True)
class KeyDefinition:
    """One key on the physical keyboard."""
    char: str
    code: str
    row: str
    finger: str
    hand: str
    en_label: str
    width: float = 1.0


def _key(char: str, code: str, row: str, finger: str, hand: str,
         en_label: str, width: float = 1.0) -> KeyDefinition:
    return KeyDefinition(char, code, row, finger, hand, en_label, width)


TOP_ROW = (
    _key('/', 'KeyQ', 'top', 'pinky', 'left', 'Q'),
    _key("'", 'KeyW', 'top', 'ring', 'left', 'W'),
    _key('ק', 'KeyE', 'top', 'middle', 'left', 'E'),
    _key('ר', 'KeyR', 'top', 'index', 'left', 'R'),
    _key('א', 'KeyT', 'top', 'index', 'left', 'T'),
    _key('ט', 'KeyY', 'top', 'index', 'right', 'Y'),
    _key('ו', 'KeyU', 'top', 'index', 'right', 'U'),
    _key('ן', 'KeyI', 'top', 'middle', 'right', 'I'),
    _key('ם', 'KeyO', 'top', 'ring', 'right', 'O'),
    _key('פ', 'KeyP', 'top', 'pinky', 'right', 'P'),
)

HOME_ROW = (
    _key('ש', 'KeyA', 'home', 'pinky', 'left', 'A'),
    _key('ד', 'KeyS', 'home', 'ring', 'left', 'S'),
    _key('ג', 'KeyD', 'home', 'middle', 'left', 'D'),
    _key('כ', 'KeyF', 'home', 'index', 'left', 'F'),
    _key('ע', 'KeyG', 'home', 'index', 'left', 'G'),
    _key('י', 'KeyH', 'home', 'index', 'right', 'H'),
    _key('ח', 'KeyJ', 'home', 'index', 'right', 'J'),
    _key('ל', 'KeyK', 'home', 'middle', 'right', 'K'),
    _key('ך', 'KeyL', 'home', 'ring', 'right', 'L'),
    _key('ף', 'Semicolon', 'home', 'pinky', 'right', ';'),
)

BOTTOM_ROW = (
    _key('ז', 'KeyZ', 'bottom', 'pinky', 'left', 'Z'),
    _key('ס', 'KeyX', 'bottom', 'ring', 'left', 'X'),
    _key('ב', 'KeyC', 'bottom', 'middle', 'left', 'C'),
    _key('ה', 'KeyV', 'bottom', 'index', 'left', 'V'),
    _key('נ', 'KeyB', 'bottom', 'index', 'left', 'B'),
    _key('מ', 'KeyN', 'bottom', 'index', 'right', 'N'),
    _key('צ', 'KeyM', 'bottom', 'index', 'right', 'M'),
    _key('ת', 'Comma', 'bottom', 'middle', 'right', ','),
    _key('ץ', 'Period', 'bottom', 'ring', 'right', '.'),
    _key('.', 'Slash', 'bottom', 'pinky', 'right', '/'),
)

SPACE_KEY = _key(' ', 'Space', 'space', 'index', 'right', 'Space', 6)

KEYBOARD_ROWS = (TOP_ROW, HOME_ROW, BOTTOM_ROW)

ALL_KEYS = TOP_ROW + HOME_ROW + BOTTOM_ROW + (SPACE_KEY,)

CHAR_TO_KEY: Mapping[str, KeyDefinition] = MappingProxyType(
    {k.char: k for k in ALL_KEYS}
)

CODE_TO_KEY: Mapping[str, KeyDefinition] = MappingProxyType(
    {k.code: k for k in ALL_KEYS}
)

# Where each finger rests
HOME_POSITION: Mapping[str, KeyDefinition] = MappingProxyType({
    'left_pinky': HOME_ROW[0],
    'left_ring': HOME_ROW[1],
    'left_middle': HOME_ROW[2],
    'left_index': HOME_ROW[3],
    'right_index': HOME_ROW[5],
    'right_middle': HOME_ROW[7],
    'right_ring': HOME_ROW[8],
    'right_pinky': HOME_ROW[9],
})


def get_finger_for_char(char: str) -> Optional[KeyDefinition]:
    """Get the key definition (and thus finger) for a character.

    Args:
        char: Character as it appears in the practice text

    Returns:
        KeyDefinition or None if the character is not on the layout
    """
    return CHAR_TO_KEY.get(char)


def get_char_for_code(code: str) -> Optional[str]:
    """Get the character produced by a physical key code.

    Args:
        code: Physical key code (e.g. 'KeyA')

    Returns:
        Character or None if the code is not part of the layout
    """
    key = CODE_TO_KEY.get(code)
    return key.char if key else None


def get_keys_for_finger(finger: str, hand: str) -> List[KeyDefinition]:
    """Get all keys that should be pressed by a specific finger and hand."""
    return [k for k in ALL_KEYS if k.finger == finger and k.hand == hand]


def is_layout_char(char: str) -> bool:
    """Check if a character has a known key on the layout."""
    return char in CHAR_TO_KEY
