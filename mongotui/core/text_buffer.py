"""Editable single-line text buffer used by the query builder and popups."""

from __future__ import annotations

from dataclasses import dataclass

from mongotui.core.keys import KeyEvent


@dataclass
class TextBuffer:
    """Raw text plus a cursor; knows nothing about what the text means."""

    text: str = ""
    placeholder: str = ""
    cursor: int = 0

    def __post_init__(self) -> None:
        self.cursor = min(max(self.cursor, 0), len(self.text))

    def set_text(self, text: str) -> None:
        self.text = text
        self.cursor = len(text)

    def clear(self) -> None:
        self.set_text("")

    @property
    def display_text(self) -> str:
        return self.text or self.placeholder

    def input(self, key: KeyEvent) -> bool:
        """Apply an editing key. Returns True if the buffer consumed it."""
        if key.key == "backspace":
            if self.cursor > 0:
                self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
                self.cursor -= 1
            return True
        if key.key == "delete":
            if self.cursor < len(self.text):
                self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]
            return True
        if key.key == "left":
            self.cursor = max(0, self.cursor - 1)
            return True
        if key.key == "right":
            self.cursor = min(len(self.text), self.cursor + 1)
            return True
        if key.key in ("home", "ctrl+a"):
            self.cursor = 0
            return True
        if key.key in ("end", "ctrl+e"):
            self.cursor = len(self.text)
            return True
        if key.key == "ctrl+u":
            self.text = self.text[self.cursor :]
            self.cursor = 0
            return True
        if key.is_printable:
            assert key.character is not None
            self.text = self.text[: self.cursor] + key.character + self.text[self.cursor :]
            self.cursor += 1
            return True
        return False
