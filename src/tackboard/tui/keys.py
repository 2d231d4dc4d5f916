"""Key events consumed by the board engine.

A key event is either a single printable character, one of the named
control keys below, or a character combined with Ctrl.
"""

from __future__ import annotations

from dataclasses import dataclass

UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
ENTER = "enter"
ESC = "esc"
BACKSPACE = "backspace"

NAMED_KEYS = frozenset({UP, DOWN, LEFT, RIGHT, ENTER, ESC, BACKSPACE})

_ESCAPE_SEQUENCES = {
    "\x1b[A": UP,
    "\x1b[B": DOWN,
    "\x1b[C": RIGHT,
    "\x1b[D": LEFT,
    "\x1bOA": UP,
    "\x1bOB": DOWN,
    "\x1bOC": RIGHT,
    "\x1bOD": LEFT,
}


@dataclass(frozen=True)
class KeyEvent:
    """A single discrete key press."""

    key: str
    ctrl: bool = False

    @property
    def char(self) -> str | None:
        """The typed character, or None for named keys and Ctrl combinations."""
        if self.ctrl or self.key in NAMED_KEYS:
            return None
        return self.key

    def __str__(self) -> str:
        return f"ctrl+{self.key}" if self.ctrl else self.key


def key(name: str, ctrl: bool = False) -> KeyEvent:
    """Shorthand constructor, e.g. ``key("j")`` or ``key("c", ctrl=True)``."""
    return KeyEvent(name, ctrl)


def split_sequences(data: str) -> list[str]:
    """Split raw terminal input into one chunk per key press.

    Escape sequences (``ESC [ ... final`` and ``ESC O x``) stay together;
    everything else is one character per key.

    Examples:
        >>> split_sequences("j\\x1b[Bk")
        ['j', '\\x1b[B', 'k']
    """
    chunks: list[str] = []
    index = 0
    while index < len(data):
        char = data[index]
        if char == "\x1b" and index + 1 < len(data) and data[index + 1] == "[":
            end = index + 2
            while end < len(data) and not ("@" <= data[end] <= "~"):
                end += 1
            chunks.append(data[index : end + 1])
            index = end + 1
        elif char == "\x1b" and index + 2 < len(data) and data[index + 1] == "O":
            chunks.append(data[index : index + 3])
            index += 3
        else:
            chunks.append(char)
            index += 1
    return chunks


def decode_key(sequence: str) -> KeyEvent | None:
    """Decode raw terminal input for one key press.

    Args:
        sequence: Characters read from the terminal for a single key press
            (one character, or an escape sequence such as ``"\\x1b[A"``)

    Returns:
        The decoded KeyEvent, or None if the sequence is not recognised

    Examples:
        >>> decode_key("\\x1b[A")
        KeyEvent(key='up', ctrl=False)
        >>> decode_key("\\x03")
        KeyEvent(key='c', ctrl=True)
    """
    if not sequence:
        return None
    if sequence in _ESCAPE_SEQUENCES:
        return KeyEvent(_ESCAPE_SEQUENCES[sequence])
    if sequence == "\x1b":
        return KeyEvent(ESC)
    if sequence.startswith("\x1b"):
        return None
    if sequence in ("\r", "\n"):
        return KeyEvent(ENTER)
    if sequence in ("\x7f", "\x08"):
        return KeyEvent(BACKSPACE)
    if len(sequence) == 1:
        code = ord(sequence)
        if 1 <= code <= 26:
            return KeyEvent(chr(ord("a") + code - 1), ctrl=True)
        if sequence.isprintable():
            return KeyEvent(sequence)
    return None
