from evoarena.evolution.genetic_algorithm import GeneticAlgorithm
from evoarena.evolution.individual import Individual, random_population
from evoarena.evolution.operators import (
    CrossoverMethod,
    GaussianMutation,
    MutationMethod,
    SinglePointCrossover,
    UniformCrossover,
)
from evoarena.evolution.selectors import (
    RandomSelection,
    RouletteWheelSelection,
    SelectionMethod,
    TournamentSelection,
)
from evoarena.evolution.statistics import GenerationStatistics

__all__ = [
    "CrossoverMethod",
    "GaussianMutation",
    "GenerationStatistics",
    "GeneticAlgorithm",
    "Individual",
    "MutationMethod",
    "RandomSelection",
    "RouletteWheelSelection",
    "SelectionMethod",
    "SinglePointCrossover",
    "TournamentSelection",
    "UniformCrossover",
    "random_population",
]
