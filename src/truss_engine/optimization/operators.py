"""
Default genetic operators for trusses.

Mutation moves unsupported joints and reassigns member multipliers;
crossover clones one parent; fitness combines construction cost, a stress
utilization penalty and constraint violations. All operators take their
randomness from an explicit ``random.Random`` so seeded runs reproduce.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional

from truss_engine.analysis.constraints import TrussConstraints, check_constraints
from truss_engine.core.truss import Truss

# Penalty per unit of utilization above 1, relative to unused capacity.
OVERLOAD_WEIGHT = 10.0


@dataclass
class MutationConfig:
    """
    Mutation bounds.

    Attributes:
        max_offset: Largest per-axis joint displacement per mutation (m)
        max_multiplier: Largest multiplier a member can be assigned
        lock_loaded_joints: Never move joints carrying an applied load
    """

    max_offset: float = 0.5
    max_multiplier: int = 3
    lock_loaded_joints: bool = False

    def __post_init__(self):
        if self.max_offset < 0:
            raise ValueError("max_offset must be non-negative")
        if self.max_multiplier < 1:
            raise ValueError("max_multiplier must be at least 1")


@dataclass
class FitnessWeights:
    """
    Weights of the terms of the default truss fitness.

    Attributes:
        cost: Weight of the construction cost
        efficiency: Weight of the utilization penalty
        violation: Penalty per violated constraint
        failure_penalty: Penalty for a truss that cannot be solved
        simple: Ignore buckling when computing utilization
    """

    cost: float = 1.0
    efficiency: float = 10.0
    violation: float = 1000.0
    failure_penalty: float = 1e9
    simple: bool = False


def mutate_truss(
    truss: Truss,
    rng: random.Random,
    config: Optional[MutationConfig] = None,
) -> Truss:
    """
    Randomly perturb a truss in place and return it.

    A random number of movable joints (neither supported nor, optionally,
    loaded) is shifted by up to ``max_offset`` on each axis, then a random
    subset of members gets a new multiplier in ``[1, max_multiplier]``.

    Args:
        truss: Candidate to mutate (owned by the caller)
        rng: Random generator
        config: Mutation bounds

    Returns:
        The same truss
    """
    config = config or MutationConfig()

    movable = [
        joint for joint in truss.joints
        if not joint.fixed and not (config.lock_loaded_joints and joint.loaded)
    ]
    if movable and config.max_offset > 0:
        for _ in range(rng.randint(0, len(movable))):
            joint = rng.choice(movable)
            joint.move_by(
                rng.uniform(-config.max_offset, config.max_offset),
                rng.uniform(-config.max_offset, config.max_offset),
            )

    connections = truss.connections
    if connections and config.max_multiplier > 1:
        count = rng.randint(0, len(connections))
        for connection in rng.sample(connections, count):
            connection.multiplier = rng.randint(1, config.max_multiplier)

    return truss


def clone_crossover(a: Truss, b: Truss, rng: random.Random) -> Truss:
    """Clone one of the two parents, chosen uniformly."""
    return (a if rng.random() < 0.5 else b).clone()


def truss_cost(truss: Truss) -> float:
    """Construction cost: 5 per joint plus 15 per member meter times multiplier."""
    return truss.cost


def efficiency_penalty(truss: Truss, simple: bool = False) -> float:
    """
    Mean utilization penalty over the members of a solved truss.

    Each member's utilization is divided by its multiplier. Unused capacity
    costs ``1 - u``; overload costs ``OVERLOAD_WEIGHT * (u - 1)``.
    """
    connections = truss.connections
    if not connections:
        return 0.0

    total = 0.0
    for connection in connections:
        length = truss.get_length(connection.id)
        u = connection.get_utilization(length, simple) / connection.multiplier
        total += OVERLOAD_WEIGHT * (u - 1.0) if u > 1.0 else 1.0 - u
    return total / len(connections)


def truss_fitness(
    truss: Truss,
    weights: Optional[FitnessWeights] = None,
    constraints: Optional[TrussConstraints] = None,
) -> float:
    """
    Score a candidate truss; higher is better.

    Solves the truss in place. An unsolvable truss, or one whose score is not
    finite, receives ``-failure_penalty``.
    """
    weights = weights or FitnessWeights()

    if not truss.compute():
        return -weights.failure_penalty

    penalty = weights.cost * truss_cost(truss)
    penalty += weights.efficiency * efficiency_penalty(truss, weights.simple)
    if constraints is not None:
        penalty += weights.violation * check_constraints(truss, constraints).total

    if not math.isfinite(penalty):
        return -weights.failure_penalty
    return -penalty
