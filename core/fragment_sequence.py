"""Fragment reference sequence shared by documented entities.

Fragment references anchor a method's location on its documentation page.
They are handed out in construction order so that two runs over identical
input produce identical anchors, provided the sequence is reseeded at the
start of each run.
"""

from __future__ import annotations

import threading

DEFAULT_FRAGMENT_SEED = "M000000"


def _succ_char(ch: str) -> tuple[str, bool]:
    """Return the successor of one alphanumeric character and a carry flag."""
    if ch == "9":
        return "0", True
    if ch == "z":
        return "a", True
    if ch == "Z":
        return "A", True
    return chr(ord(ch) + 1), False


def _carry_char(ch: str) -> str:
    """Character inserted when a carry overflows past ``ch``."""
    if ch.isdigit():
        return "1"
    if ch.islower():
        return "a"
    return "A"


def string_successor(value: str) -> str:
    """Return the string successor of ``value``.

    The rightmost ASCII alphanumeric character is incremented. Digits carry
    in base 10 and letters carry within their own case, moving left over
    alphanumeric characters only. When the leftmost alphanumeric overflows a
    new character is inserted in front of it.

    Examples:
        >>> string_successor("M000009")
        'M000010'
        >>> string_successor("M999999")
        'N000000'
        >>> string_successor("Zz9")
        'AAa0'
    """
    if not value:
        return ""

    chars = list(value)
    positions = [i for i, ch in enumerate(chars) if ch.isascii() and ch.isalnum()]
    if not positions:
        # No alphanumerics: bump the last character.
        chars[-1] = chr(ord(chars[-1]) + 1)
        return "".join(chars)

    for idx in reversed(positions):
        original = chars[idx]
        chars[idx], carry = _succ_char(original)
        if not carry:
            return "".join(chars)

    leftmost = positions[0]
    chars.insert(leftmost, _carry_char(value[leftmost]))
    return "".join(chars)


class FragmentSequence:
    """Thread-safe generator of fragment references."""

    def __init__(self, seed: str = DEFAULT_FRAGMENT_SEED):
        if not seed:
            raise ValueError("Fragment seed must be a non-empty string")
        self._seed = seed
        self._current = seed
        self._lock = threading.Lock()

    @property
    def seed(self) -> str:
        return self._seed

    def peek(self) -> str:
        """Return the next fragment reference without consuming it."""
        with self._lock:
            return self._current

    def next_id(self) -> str:
        """Consume and return the next fragment reference."""
        with self._lock:
            value = self._current
            self._current = string_successor(value)
            return value

    def reset(self) -> None:
        """Reseed the sequence; call once per documentation run."""
        with self._lock:
            self._current = self._seed

    def __repr__(self) -> str:
        return f"FragmentSequence(seed={self._seed!r}, next={self.peek()!r})"


_DEFAULT_SEQUENCE = FragmentSequence()


def get_default_sequence() -> FragmentSequence:
    """Process-wide sequence used when no build session supplies one."""
    return _DEFAULT_SEQUENCE


def reset_default_sequence() -> None:
    """Reseed the process-wide sequence to ``M000000``."""
    _DEFAULT_SEQUENCE.reset()
