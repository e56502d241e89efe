from __future__ import annotations

from pathlib import Path
from typing import Any

from tensorboardX import SummaryWriter

from evoarena.utils.trackers.configs import TBConfig
from evoarena.utils.trackers.core import LoggerBackend


class TBBackend(LoggerBackend):
    def __init__(self, cfg: TBConfig):
        self.cfg = cfg
        self._writer: SummaryWriter | None = None

    def open(self) -> None:
        logdir = Path(self.cfg.logdir).resolve()
        logdir.mkdir(parents=True, exist_ok=True)
        self._writer = SummaryWriter(str(logdir), **self.cfg.summary_writer_kwargs)

    def close(self) -> None:
        if self._writer is None:
            return
        writer, self._writer = self._writer, None
        try:
            writer.flush()
        finally:
            writer.close()

    def _require(self) -> SummaryWriter:
        if self._writer is None:
            raise RuntimeError("TBBackend used before open() or after close()")
        return self._writer

    def write_scalar(self, tag: str, value: float, step: int, wall_time: float) -> None:
        self._require().add_scalar(tag, value, global_step=step, walltime=wall_time)

    def write_hist(self, tag: str, values: Any, step: int, wall_time: float) -> None:
        self._require().add_histogram(tag, values, global_step=step, walltime=wall_time)

    def write_text(self, tag: str, text: str, step: int, wall_time: float) -> None:
        self._require().add_text(tag, text, global_step=step, walltime=wall_time)

    def flush(self) -> None:
        if self._writer is not None:
            self._writer.flush()
