from evoarena.utils.trackers.backends.memory import MemoryBackend
from evoarena.utils.trackers.backends.tensorboard import TBBackend

__all__ = ["MemoryBackend", "TBBackend"]
