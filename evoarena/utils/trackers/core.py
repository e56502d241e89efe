from __future__ import annotations

from queue import Empty, Full, Queue
import threading
import time
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from evoarena.utils.trackers.base import LogWriter


def _sanitize(s: str) -> str:
    return "".join(ch if ch.isalnum() or ch in "-_.=," else "_" for ch in str(s))


def render_tag(path: list[str], metric: str, labels: dict[str, str]) -> str:
    """``path/.../metric[/k=v,...]`` with unsafe characters replaced."""
    base = "/".join(_sanitize(x) for x in [*path, metric] if x)
    if not labels:
        return base
    suffix = ",".join(f"{_sanitize(k)}={_sanitize(v)}" for k, v in sorted(labels.items()))
    return f"{base}/{suffix}"


class _Event(BaseModel):
    kind: Literal["scalar", "hist", "text"]
    tag: str
    payload: Any
    step: int | None = None
    wall_time: float = Field(default_factory=time.time)

    model_config = ConfigDict(arbitrary_types_allowed=True)


class LoggerBackend:
    """
    Adapter every backend implements.
    write_* may buffer; flush() pushes buffered data out.
    """

    def open(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def write_scalar(self, tag: str, value: float, step: int, wall_time: float) -> None:
        raise NotImplementedError

    def write_hist(self, tag: str, values: Any, step: int, wall_time: float) -> None:
        raise NotImplementedError

    def write_text(self, tag: str, text: str, step: int, wall_time: float) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        raise NotImplementedError


class GenericLogger(LogWriter):
    """Queues events and hands them to a backend from a background thread.

    Writes never block the caller; when the queue is full the event is
    dropped. Steps auto-increment per tag unless given explicitly.
    """

    def __init__(
        self, backend: LoggerBackend, *, queue_size: int = 8192, flush_secs: float = 3.0
    ):
        self.backend = backend
        self._steps: dict[str, int] = {}
        self._q: Queue[_Event] = Queue(maxsize=queue_size)
        self._stop = threading.Event()
        self._closed = False
        self._flush_secs = float(flush_secs)
        self._last_flush = time.time()
        self._dropped = 0

        self.backend.open()
        self._t = threading.Thread(target=self._loop, name="metrics-writer", daemon=True)
        self._t.start()

    def bind(
        self, *, path: list[str] | None = None, labels: dict[str, str] | None = None
    ) -> BoundLogger:
        return BoundLogger(self, path or [], labels or {})

    def scalar(self, metric: str, value: float, **kw) -> None:
        self._offer("scalar", metric, float(value), **kw)

    def hist(self, metric: str, values: Any, **kw) -> None:
        self._offer("hist", metric, values, **kw)

    def text(self, tag: str, text: str, **kw) -> None:
        self._offer("text", tag, text, **kw)

    def close(self, drain_timeout_s: float = 1.5) -> None:
        if self._closed:
            return
        self._closed = True
        self._stop.set()
        if self._t.is_alive():
            self._t.join(timeout=2.0)

        deadline = time.time() + max(0.0, drain_timeout_s)
        while time.time() < deadline:
            try:
                self._handle(self._q.get_nowait())
            except Empty:
                break

        try:
            self._safe(self.backend.flush)
        finally:
            self.backend.close()
        if self._dropped:
            logger.warning("[GenericLogger] Dropped {} events (queue full)", self._dropped)

    # internals
    def _offer(self, kind: str, metric: str, payload: Any, **kw) -> None:
        if self._closed:
            return
        event = _Event(
            kind=kind,
            tag=render_tag(kw.get("path") or [], metric, kw.get("labels") or {}),
            payload=payload,
            step=kw.get("step"),
            wall_time=kw.get("wall_time") or time.time(),
        )
        try:
            self._q.put_nowait(event)
        except Full:
            self._dropped += 1

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self._handle(self._q.get(timeout=0.1))
            except Empty:
                pass
            now = time.time()
            if now - self._last_flush >= self._flush_secs:
                self._safe(self.backend.flush)
                self._last_flush = now

    def _handle(self, event: _Event) -> None:
        step = self._resolve_step(event.tag, event.step)
        if event.kind == "scalar":
            self._safe(self.backend.write_scalar, event.tag, event.payload, step, event.wall_time)
        elif event.kind == "hist":
            self._safe(self.backend.write_hist, event.tag, event.payload, step, event.wall_time)
        else:
            self._safe(self.backend.write_text, event.tag, event.payload, step, event.wall_time)

    def _resolve_step(self, tag: str, step: int | None) -> int:
        resolved = int(step) if step is not None else self._steps.get(tag, -1) + 1
        self._steps[tag] = resolved
        return resolved

    @staticmethod
    def _safe(fn, *args) -> None:
        # a failing backend must not kill the writer thread
        try:
            fn(*args)
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug("[GenericLogger] backend call {} failed: {}", fn.__name__, exc)


class BoundLogger(LogWriter):
    """GenericLogger view with a fixed tag prefix and labels."""

    def __init__(self, base: GenericLogger, path: list[str], labels: dict[str, str]):
        self._base = base
        self._path = list(path)
        self._labels = dict(labels)

    def bind(
        self, *, path: list[str] | None = None, labels: dict[str, str] | None = None
    ) -> BoundLogger:
        return BoundLogger(
            self._base, [*self._path, *(path or [])], {**self._labels, **(labels or {})}
        )

    def _scoped(self, kw: dict[str, Any]) -> dict[str, Any]:
        kw["path"] = [*self._path, *kw.pop("path", [])]
        kw["labels"] = {**self._labels, **kw.pop("labels", {})}
        return kw

    def scalar(self, metric: str, value: float, **kw) -> None:
        self._base.scalar(metric, value, **self._scoped(kw))

    def hist(self, metric: str, values: Any, **kw) -> None:
        self._base.hist(metric, values, **self._scoped(kw))

    def text(self, tag: str, text: str, **kw) -> None:
        self._base.text(tag, text, **self._scoped(kw))

    def close(self) -> None:
        self._base.close()
