"""In-memory input history with a cursor.

The last entry is always the line being edited. Earlier entries are the
expressions the user committed with ``enter``; browsing to one and editing it
keeps the edit separate from the committed text until the next ``enter``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import MAX_HISTORY_ENTRIES

# Stored instead of a computed result; the logic re-evaluates the previous
# entry on resume rather than showing this text
MARKER_EVALUATE_ON_RESUME = "?"


@dataclass
class HistoryEntry:
    base: str
    edited: str | None = None

    def text(self) -> str:
        return self.base if self.edited is None else self.edited


class InputHistory:
    def __init__(self, max_entries: int = MAX_HISTORY_ENTRIES):
        self.max_entries = max_entries
        self._entries = [HistoryEntry("")]
        self._pos = 0

    def _current(self) -> HistoryEntry:
        return self._entries[self._pos]

    def get_text(self) -> str:
        return self._current().text()

    def update(self, text: str) -> None:
        self._current().edited = text

    def enter(self, text: str) -> None:
        """Commit text as a new entry and move to a fresh editing line."""
        self._current().edited = None
        if len(self._entries) < 2 or text != self._entries[-2].base:
            # Only committed entries are evicted; the edit line always stays last
            if len(self._entries) > 1 and len(self._entries) >= self.max_entries:
                self._entries.pop(0)
            self._entries.insert(len(self._entries) - 1, HistoryEntry(text))
        self._pos = len(self._entries) - 1

    def move_to_previous(self) -> bool:
        if self._pos > 0:
            self._pos -= 1
            return True
        return False

    def move_to_next(self) -> bool:
        if self._pos < len(self._entries) - 1:
            self._pos += 1
            return True
        return False

    def entries(self) -> list[str]:
        """Committed entries, oldest first."""
        return [e.base for e in self._entries[:-1]]

    def __len__(self) -> int:
        return len(self._entries) - 1
