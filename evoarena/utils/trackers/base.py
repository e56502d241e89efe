from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class LogWriter(ABC):
    """Sink for run metrics (scalars, histograms, text), keyed by tag."""

    @abstractmethod
    def bind(
        self, *, path: list[str] | None = None, labels: dict[str, str] | None = None
    ) -> LogWriter:
        pass

    @abstractmethod
    def scalar(self, metric: str, value: float, **kwargs) -> None:
        pass

    @abstractmethod
    def hist(self, metric: str, values: Any, **kwargs) -> None:
        pass

    @abstractmethod
    def text(self, tag: str, text: str, **kwargs) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class NullLogWriter(LogWriter):
    """Drops everything. Used when metric tracking is disabled."""

    def bind(
        self, *, path: list[str] | None = None, labels: dict[str, str] | None = None
    ) -> NullLogWriter:
        return self

    def scalar(self, metric: str, value: float, **kwargs) -> None:
        pass

    def hist(self, metric: str, values: Any, **kwargs) -> None:
        pass

    def text(self, tag: str, text: str, **kwargs) -> None:
        pass

    def close(self) -> None:
        pass
