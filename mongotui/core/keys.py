"""UI-agnostic key events and key display helpers."""

from __future__ import annotations

from dataclasses import dataclass

KEY_DISPLAY_OVERRIDES: dict[str, str] = {
    "question_mark": "?",
    "left_square_bracket": "[",
    "right_square_bracket": "]",
    "space": "<space>",
    "escape": "<esc>",
    "enter": "<enter>",
    "delete": "<del>",
    "backspace": "<backspace>",
    "tab": "<tab>",
    "shift+tab": "<s-tab>",
    "left": "<left>",
    "right": "<right>",
    "up": "<up>",
    "down": "<down>",
    "home": "<home>",
    "end": "<end>",
    "pageup": "<pgup>",
    "pagedown": "<pgdn>",
}

# Key names for printable characters that terminals report by name.
CHAR_KEY_NAMES: dict[str, str] = {
    "?": "question_mark",
    "[": "left_square_bracket",
    "]": "right_square_bracket",
    " ": "space",
}


def format_key(key: str) -> str:
    """Format a key name for display in UI hints."""
    if key in KEY_DISPLAY_OVERRIDES:
        return KEY_DISPLAY_OVERRIDES[key]
    if key.startswith("ctrl+"):
        return f"^{key.split('+', 1)[1]}"
    return key


@dataclass(frozen=True)
class KeyEvent:
    """A single key press, as delivered by the terminal layer.

    ``key`` is the terminal's key name (``"enter"``, ``"j"``, ``"question_mark"``)
    and ``character`` is the printable character, if any.
    """

    key: str
    character: str | None = None

    @classmethod
    def of(cls, key_or_char: str) -> KeyEvent:
        """Build an event from a key name or a single printable character."""
        if len(key_or_char) == 1:
            return cls(CHAR_KEY_NAMES.get(key_or_char, key_or_char), key_or_char)
        return cls(key_or_char, None)

    @property
    def is_printable(self) -> bool:
        return (
            self.character is not None
            and len(self.character) == 1
            and self.character.isprintable()
        )

    def matches(self, *names: str) -> bool:
        """True when the key name or its character is one of ``names``."""
        if self.key in names:
            return True
        return self.character is not None and self.character in names
