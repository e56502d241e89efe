from evoarena.simulation.agent import BRAIN_OUTPUTS, Agent, AgentConfig
from evoarena.simulation.simulation import EpisodeResult, Simulation, SimulationConfig

__all__ = [
    "BRAIN_OUTPUTS",
    "Agent",
    "AgentConfig",
    "EpisodeResult",
    "Simulation",
    "SimulationConfig",
]
