"""In-memory text display with a cursor."""

from __future__ import annotations

from .types import Scroll


class TextDisplay:
    """Text buffer standing in for the calculator's edit field.

    ``insert`` replaces the current selection (the cursor when nothing is
    selected) and leaves the cursor after the inserted text.
    """

    def __init__(self, text: str = ""):
        self._text = text
        self._selection_start = len(text)
        self._selection_end = len(text)
        self.last_scroll = Scroll.NONE

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str, scroll: Scroll = Scroll.NONE) -> None:
        self._text = text
        self._selection_start = self._selection_end = len(text)
        self.last_scroll = scroll

    def insert(self, text: str) -> None:
        self._text = (
            self._text[: self._selection_start] + text + self._text[self._selection_end :]
        )
        self._selection_start += len(text)
        self._selection_end = self._selection_start

    def get_selection_start(self) -> int:
        return self._selection_start

    def length(self) -> int:
        return len(self._text)

    def set_selection(self, start: int, end: int | None = None) -> None:
        """Move the cursor, or select [start, end)."""
        if end is None:
            end = start
        if not 0 <= start <= end <= len(self._text):
            raise ValueError(f"Selection {start}:{end} outside text of length {len(self._text)}")
        self._selection_start, self._selection_end = start, end

    def dispatch_delete_key(self) -> None:
        """Delete the selection, or the character before the cursor."""
        if self._selection_start != self._selection_end:
            self.insert("")
        elif self._selection_start > 0:
            pos = self._selection_start
            self._text = self._text[: pos - 1] + self._text[pos:]
            self._selection_start = self._selection_end = pos - 1
