"""
Genetic optimizer for truss geometry and member reinforcement.

This module provides the TrussOptimizer class which wires the generic
GeneticAlgorithm with the default truss operators and records the fitness
history of every generation.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional

from truss_engine.analysis.constraints import TrussConstraints, check_constraints
from truss_engine.core.truss import Truss
from truss_engine.optimization.genetic import GeneticAlgorithm, Individual
from truss_engine.optimization.operators import (
    FitnessWeights,
    MutationConfig,
    clone_crossover,
    mutate_truss,
    truss_fitness,
)
from truss_engine.optimization.result import OptimizationResult


class TrussOptimizer:
    """
    Genetic optimizer for truss designs.

    The starting truss is cloned; it is never modified. Every candidate is an
    independent deep copy, so candidates can be mutated destructively.

    Args:
        truss: Starting design (supports and loads are kept fixed)
        constraints: Optional force and length bounds
        weights: Fitness weights
        mutation: Mutation bounds
        size: Target population size
        mutation_rate: Probability that a child is mutated
        pass_through_rate: Fraction of the population surviving each generation
        elitism: Number of best individuals protected from culling
        seed: Random seed for reproducibility

    Example:
        >>> from truss_engine import TrussOptimizer, pratt_truss
        >>>
        >>> bridge = pratt_truss(span=12, height=3, panels=4, load=-2e4)
        >>> optimizer = TrussOptimizer(bridge, seed=42)
        >>> result = optimizer.optimize(generations=100)
        >>> print(result.summary())
    """

    def __init__(
        self,
        truss: Truss,
        constraints: Optional[TrussConstraints] = None,
        weights: Optional[FitnessWeights] = None,
        mutation: Optional[MutationConfig] = None,
        size: int = 100,
        mutation_rate: float = 0.1,
        pass_through_rate: float = 0.2,
        elitism: int = 1,
        seed: Optional[int] = None,
    ):
        self.initial_truss = truss.clone()
        self.constraints = constraints
        self.weights = weights or FitnessWeights()
        self.mutation = mutation or MutationConfig()
        self.seed = seed
        self.rng = random.Random(seed)

        self.initial_fitness = self.fitness(self.initial_truss.clone())

        self.ga: GeneticAlgorithm[Truss] = GeneticAlgorithm(
            mutate=self.mutate,
            crossover=self.crossover,
            fitness=self.fitness,
            initial_population=[truss.clone()],
            size=size,
            mutation_rate=mutation_rate,
            pass_through_rate=pass_through_rate,
            elitism=elitism,
            rng=self.rng,
        )

        self.history: Dict[str, List[float]] = {'best': [], 'average': [], 'worst': []}
        self._record()

    def mutate(self, truss: Truss) -> Truss:
        return mutate_truss(truss, self.rng, self.mutation)

    def crossover(self, a: Truss, b: Truss) -> Truss:
        return clone_crossover(a, b, self.rng)

    def fitness(self, truss: Truss) -> float:
        return truss_fitness(truss, self.weights, self.constraints)

    @property
    def generation(self) -> int:
        return self.ga.generation

    @property
    def best(self) -> Individual[Truss]:
        return self.ga.best

    def _record(self) -> None:
        self.history['best'].append(self.ga.best.fitness)
        self.history['average'].append(self.ga.avg_fitness)
        self.history['worst'].append(self.ga.worst.fitness)

    def step(self) -> Individual[Truss]:
        """Run a single generation and return the best individual."""
        self.ga.evolve()
        self._record()
        return self.ga.best

    def optimize(
        self,
        generations: int = 100,
        verbose: bool = True,
        log_interval: int = 10,
        callback: Optional[Callable[[int, float, Truss], None]] = None,
    ) -> OptimizationResult:
        """
        Run the optimization.

        Args:
            generations: Number of generations to run
            verbose: Print progress updates
            log_interval: Generations between progress prints
            callback: Optional function called each generation with
                (generation, best fitness, best truss)

        Returns:
            OptimizationResult for the best truss found

        Example:
            >>> result = optimizer.optimize(generations=200, verbose=True)
            >>> print(result.summary())
        """
        if generations < 0:
            raise ValueError("generations must be non-negative")

        if verbose:
            print(f"Starting genetic optimization (population {self.ga.size}, seed {self.seed})")
            print(f"Initial fitness: {self.initial_fitness:.3f}")
            print("-" * 50)

        for _ in range(generations):
            best = self.step()

            if callback:
                callback(self.generation, best.fitness, best.item)

            if verbose and self.generation % log_interval == 0:
                print(
                    f"Generation {self.generation:5d}: best = {best.fitness:.3f}, "
                    f"avg = {self.ga.avg_fitness:.3f}, worst = {self.ga.worst.fitness:.3f}"
                )

        if verbose:
            print("-" * 50)
            print(f"Optimization complete. Best fitness: {self.ga.best.fitness:.3f}")

        return self._create_result()

    def _create_result(self) -> OptimizationResult:
        """Create OptimizationResult from the current best individual."""
        best = self.ga.best
        truss = best.item.clone()
        solved = truss.compute()

        violations = None
        if self.constraints is not None and solved:
            violations = check_constraints(truss, self.constraints)

        return OptimizationResult(
            truss=truss,
            initial_truss=self.initial_truss.clone(),
            fitness=best.fitness,
            initial_fitness=self.initial_fitness,
            solved=solved,
            cost=truss.cost,
            mass=truss.mass,
            violations=violations,
            history={name: list(values) for name, values in self.history.items()},
            generations=self.generation,
            seed=self.seed,
        )
