from __future__ import annotations

import numpy as np
import pytest

from evoarena.brain import Eye
from evoarena.simulation import Simulation, SimulationConfig
from evoarena.world import WorldConfig


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def small_world_config() -> WorldConfig:
    return WorldConfig(width=100.0, height=100.0, num_enemies=10)


@pytest.fixture
def small_simulation(small_world_config: WorldConfig) -> Simulation:
    """Tiny arena and brain so whole runs take milliseconds."""
    return Simulation(
        SimulationConfig(
            world=small_world_config,
            eye=Eye(fov_range=40.0, cells=5),
            hidden_layers=[4],
            episode_ticks=20,
        )
    )
