from __future__ import annotations

from typing import Any

from evoarena.utils.trackers.core import LoggerBackend


class MemoryBackend(LoggerBackend):
    """Keeps every record in lists; handy for inspection and tests."""

    def __init__(self) -> None:
        self.scalars: list[tuple[str, float, int]] = []
        self.hists: list[tuple[str, Any, int]] = []
        self.texts: list[tuple[str, str, int]] = []
        self.opened = False
        self.closed = False
        self.flushes = 0

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def write_scalar(self, tag: str, value: float, step: int, wall_time: float) -> None:
        self.scalars.append((tag, value, step))

    def write_hist(self, tag: str, values: Any, step: int, wall_time: float) -> None:
        self.hists.append((tag, values, step))

    def write_text(self, tag: str, text: str, step: int, wall_time: float) -> None:
        self.texts.append((tag, text, step))

    def flush(self) -> None:
        self.flushes += 1

    def scalar_series(self, tag: str) -> list[tuple[int, float]]:
        return [(step, value) for t, value, step in self.scalars if t == tag]
