"""Genetic optimization of truss designs."""

from truss_engine.optimization.genetic import GeneticAlgorithm, Individual
from truss_engine.optimization.operators import (
    FitnessWeights,
    MutationConfig,
    clone_crossover,
    efficiency_penalty,
    mutate_truss,
    truss_cost,
    truss_fitness,
)
from truss_engine.optimization.optimizer import TrussOptimizer
from truss_engine.optimization.result import OptimizationResult
from truss_engine.optimization.trials import TrialResults, run_optimization_trials

__all__ = [
    "GeneticAlgorithm",
    "Individual",
    "FitnessWeights",
    "MutationConfig",
    "clone_crossover",
    "efficiency_penalty",
    "mutate_truss",
    "truss_cost",
    "truss_fitness",
    "TrussOptimizer",
    "OptimizationResult",
    "TrialResults",
    "run_optimization_trials",
]
