from evoarena.utils.trackers.backends import TBBackend
from evoarena.utils.trackers.base import LogWriter, NullLogWriter
from evoarena.utils.trackers.configs import TBConfig, WriterConfig
from evoarena.utils.trackers.core import GenericLogger

_tb_default: GenericLogger | None = None


def init_tb(cfg: TBConfig, writer: WriterConfig | None = None) -> GenericLogger:
    """Process-wide tensorboard writer; repeated calls return the first one."""
    global _tb_default
    if _tb_default is not None:
        return _tb_default
    writer = writer or WriterConfig()
    _tb_default = GenericLogger(
        TBBackend(cfg), queue_size=writer.queue_size, flush_secs=writer.flush_secs
    )
    return _tb_default


__all__ = [
    "GenericLogger",
    "LogWriter",
    "NullLogWriter",
    "TBConfig",
    "WriterConfig",
    "init_tb",
]
