"""
Post-solve validation of a truss against force and length bounds.

Each of the four predicates is tallied separately so callers can weight
different kinds of violation differently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from truss_engine.core.truss import Truss


@dataclass
class TrussConstraints:
    """
    Bounds checked for every member of a solved truss.

    A bound that is ``None`` or zero disables its predicate. Force bounds are
    axial force magnitudes (N) and are widened by each member's multiplier.

    Attributes:
        max_compression: Largest allowed compressive force (N)
        max_tension: Largest allowed tensile force (N)
        min_length: Shortest allowed member (m)
        max_length: Longest allowed member (m)
    """

    max_compression: Optional[float] = None
    max_tension: Optional[float] = None
    min_length: Optional[float] = None
    max_length: Optional[float] = None

    def __post_init__(self):
        for name in ("max_compression", "max_tension", "min_length", "max_length"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass
class ConstraintViolations:
    """Number of members violating each constraint."""

    compression: int = 0
    tension: int = 0
    min_length: int = 0
    max_length: int = 0

    @property
    def total(self) -> int:
        return self.compression + self.tension + self.min_length + self.max_length

    def as_tuple(self) -> Tuple[int, int, int, int]:
        """(compression, tension, min_length, max_length)"""
        return (self.compression, self.tension, self.min_length, self.max_length)

    def weighted(
        self,
        compression: float = 1.0,
        tension: float = 1.0,
        min_length: float = 1.0,
        max_length: float = 1.0,
    ) -> float:
        """Weighted sum of the violation counts."""
        return (
            compression * self.compression
            + tension * self.tension
            + min_length * self.min_length
            + max_length * self.max_length
        )

    def __bool__(self) -> bool:
        return self.total > 0


def check_constraints(truss: Truss, constraints: TrussConstraints) -> ConstraintViolations:
    """
    Count constraint violations over every member of a solved truss.

    Lengths are taken from the current joint positions; forces from the last
    solve.

    Args:
        truss: Truss to check (normally after a successful ``compute()``)
        constraints: Bounds to test

    Returns:
        ConstraintViolations with one count per predicate

    Example:
        >>> truss.compute()
        >>> violations = check_constraints(truss, TrussConstraints(max_tension=5e4))
        >>> violations.tension
        0
    """
    violations = ConstraintViolations()

    for connection in truss.connections:
        length = truss.get_length(connection.id)
        force = connection.force

        if constraints.min_length and length < constraints.min_length:
            violations.min_length += 1
        if constraints.max_length and length > constraints.max_length:
            violations.max_length += 1
        if constraints.max_compression and -force > constraints.max_compression * connection.multiplier:
            violations.compression += 1
        if constraints.max_tension and force > constraints.max_tension * connection.multiplier:
            violations.tension += 1

    return violations
