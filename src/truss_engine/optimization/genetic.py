"""
Generic genetic algorithm.

The algorithm is driven externally: every ``evolve()`` call runs exactly one
generation (cull, reproduce, re-sort) and the caller decides when to stop.
Higher fitness is better; the population is kept sorted in descending order
so ``best`` is always the first individual.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class Individual(Generic[T]):
    """A population member and its cached fitness."""

    item: T
    fitness: float


class GeneticAlgorithm(Generic[T]):
    """
    Population-based search over arbitrary candidates.

    Args:
        mutate: Takes a candidate and returns the mutated candidate
        crossover: Builds a new candidate from two parents; must not alias them
        fitness: Scores a candidate (higher is better)
        initial_population: Seed candidates, scored on construction
        size: Target population size after reproduction
        mutation_rate: Probability that a child is mutated
        pass_through_rate: Fraction of ``size`` that survives culling
        elitism: Number of top individuals that culling never removes
        seed: Seed for the internal random generator
        rng: Random generator to use instead of a seeded one

    Example:
        >>> ga = GeneticAlgorithm(
        ...     mutate=lambda x: x + random.uniform(-1, 1),
        ...     crossover=lambda a, b: (a + b) / 2,
        ...     fitness=lambda x: -abs(x - 3),
        ...     initial_population=[0.0],
        ...     seed=1,
        ... )
        >>> for _ in range(50):
        ...     ga.evolve()
        >>> round(ga.best.item)
        3
    """

    def __init__(
        self,
        mutate: Callable[[T], T],
        crossover: Callable[[T, T], T],
        fitness: Callable[[T], float],
        initial_population: Iterable[T],
        size: int = 100,
        mutation_rate: float = 0.1,
        pass_through_rate: float = 0.2,
        elitism: int = 1,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        if size < 1:
            raise ValueError("size must be at least 1")
        if not 0.0 <= mutation_rate <= 1.0:
            raise ValueError("mutation_rate must be in [0, 1]")
        if not 0.0 <= pass_through_rate <= 1.0:
            raise ValueError("pass_through_rate must be in [0, 1]")
        if elitism < 0:
            raise ValueError("elitism must be non-negative")

        self.size = size
        self.mutation_rate = mutation_rate
        self.pass_through_rate = pass_through_rate
        self.elitism = elitism
        self.rng = rng or random.Random(seed)

        self._mutate = mutate
        self._crossover = crossover
        self._fitness = fitness

        self.population: List[Individual[T]] = [
            Individual(item, fitness(item)) for item in initial_population
        ]
        if not self.population:
            raise ValueError("initial_population must not be empty")

        self._generation = 0
        self._sort()

    def __len__(self) -> int:
        return len(self.population)

    def _sort(self) -> None:
        self.population.sort(key=lambda individual: individual.fitness, reverse=True)

    @property
    def survivors(self) -> int:
        """Population size left after culling."""
        return max(1, int(self.size * self.pass_through_rate))

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def best(self) -> Individual[T]:
        return self.population[0]

    @property
    def worst(self) -> Individual[T]:
        return self.population[-1]

    @property
    def avg_fitness(self) -> float:
        """Mean fitness of the top ``size * pass_through_rate`` individuals."""
        top = self.population[:self.survivors]
        return sum(individual.fitness for individual in top) / len(top)

    def _skewed_index(self, low: int, high: int) -> int:
        """Random index in [low, high) biased toward ``high``."""
        r = self.rng.random()
        index = low + int((high - low) * (1.0 - r * r))
        return min(index, high - 1)

    def cull(self) -> None:
        """Remove weak individuals until only ``survivors`` remain."""
        keep = self.survivors
        protected = min(self.elitism, keep)
        while len(self.population) > keep:
            del self.population[self._skewed_index(protected, len(self.population))]

    def reproduce(self) -> None:
        """Fill the population back up to ``size`` with scored children."""
        parents = list(self.population)
        while len(self.population) < self.size:
            a = self.rng.choice(parents)
            b = self.rng.choice(parents)

            child = self._crossover(a.item, b.item)
            if self.rng.random() < self.mutation_rate:
                child = self._mutate(child)

            self.population.append(Individual(child, self._fitness(child)))

    def evolve(self) -> "GeneticAlgorithm[T]":
        """Run one generation."""
        self._sort()
        self.cull()
        self.reproduce()
        self._sort()
        self._generation += 1
        return self
