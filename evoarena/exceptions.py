class EvoArenaError(Exception):
    """Base for all EvoArena exceptions."""

    pass


# High-level families
class ConfigurationError(EvoArenaError):
    """Invalid configuration values."""

    pass


class SimulationError(EvoArenaError):
    """World or episode failures."""

    pass


class BrainError(EvoArenaError):
    """Neural network evaluation failures."""

    pass


class GenomeError(EvoArenaError):
    """Malformed chromosomes or weight vectors."""

    pass


class EvolutionError(EvoArenaError):
    """Evolution process failures."""

    pass


class StorageError(EvoArenaError):
    """Checkpoint storage failures."""

    pass


# Subtypes
class CheckpointNotFoundError(StorageError):
    """No checkpoint available where one was expected."""

    pass
