from evoarena.engine.config import EngineConfig
from evoarena.engine.core import EvolutionEngine
from evoarena.engine.metrics import EngineMetrics
from evoarena.engine.tracker import GenerationTracker

__all__ = [
    "EngineConfig",
    "EngineMetrics",
    "EvolutionEngine",
    "GenerationTracker",
]
