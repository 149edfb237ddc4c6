"""Collaborator interfaces the logic layer talks to.

The host application provides the text display, the input history and
optionally a graph. Reference implementations live in ``display``,
``history`` and ``plotting``.
"""

from __future__ import annotations

from typing import Protocol

from .types import CurveSeries, Scroll


class Display(Protocol):
    def get_text(self) -> str: ...

    def set_text(self, text: str, scroll: Scroll) -> None: ...

    def insert(self, text: str) -> None: ...

    def get_selection_start(self) -> int: ...

    def dispatch_delete_key(self) -> None: ...


class History(Protocol):
    def get_text(self) -> str: ...

    def update(self, text: str) -> None: ...

    def enter(self, text: str) -> None: ...

    def move_to_previous(self) -> bool: ...

    def move_to_next(self) -> bool: ...


class GraphSink(Protocol):
    def set_series(self, series: CurveSeries) -> None: ...

    def repaint(self) -> None: ...


class Listener(Protocol):
    def on_delete_mode_change(self) -> None: ...
