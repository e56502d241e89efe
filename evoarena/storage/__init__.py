from evoarena.storage.checkpoint import Checkpoint, CheckpointStorage

__all__ = ["Checkpoint", "CheckpointStorage"]
