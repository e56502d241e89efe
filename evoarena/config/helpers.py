"""Tiny helper functions for Hydra config computations."""

from pathlib import Path

from evoarena.engine.tracker import GenerationTracker
from evoarena.storage.checkpoint import CheckpointStorage
from evoarena.utils.trackers import TBConfig, WriterConfig, init_tb
from evoarena.utils.trackers.base import LogWriter, NullLogWriter


def build_writer(
    enabled: bool, logdir: str | Path, queue_size: int = 8192, flush_secs: float = 3.0
) -> LogWriter:
    """Tensorboard writer, or a writer that drops everything when disabled."""
    if not enabled:
        return NullLogWriter()
    return init_tb(
        TBConfig(logdir=Path(logdir)),
        WriterConfig(queue_size=queue_size, flush_secs=flush_secs),
    )


def build_tracker(writer: LogWriter) -> GenerationTracker:
    return GenerationTracker(writer)


def build_storage(directory: str | Path | None, keep_last: int | None = None) -> CheckpointStorage | None:
    """Checkpoint storage, or None when checkpoints are disabled."""
    if directory is None:
        return None
    return CheckpointStorage(directory, keep_last=keep_last)
