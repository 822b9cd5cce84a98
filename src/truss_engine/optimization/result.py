"""
Optimization result container with summary and export capabilities.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from truss_engine.analysis.constraints import ConstraintViolations
from truss_engine.core.truss import Truss


@dataclass
class OptimizationResult:
    """
    Container for the outcome of a genetic optimization run.

    Attributes:
        truss: Best truss found (solved when ``solved`` is True)
        initial_truss: Starting truss
        fitness: Fitness of the best truss
        initial_fitness: Fitness of the starting truss
        solved: Whether the best truss has a valid static solution
        cost: Construction cost of the best truss
        mass: Member mass of the best truss (kg)
        violations: Constraint violations of the best truss (None if
            no constraints were given)
        history: Per-generation 'best', 'average' and 'worst' fitness
        generations: Number of generations run
        seed: Random seed of the run

    Example:
        >>> result = optimizer.optimize(generations=200)
        >>> print(f"Cost: {result.cost:.1f}")
        >>> result.export("bridge.json")
    """

    truss: Truss
    initial_truss: Truss
    fitness: float
    initial_fitness: float
    solved: bool
    cost: float
    mass: float
    violations: Optional[ConstraintViolations] = None
    history: Dict[str, List[float]] = field(default_factory=dict)
    generations: int = 0
    seed: Optional[int] = None

    @property
    def improvement(self) -> float:
        """Change in fitness from the starting truss (%); negative when it got worse."""
        if self.initial_fitness == 0:
            return 0.0
        return (self.fitness - self.initial_fitness) / abs(self.initial_fitness) * 100

    @property
    def feasible(self) -> bool:
        """Solved and free of constraint violations."""
        return self.solved and not self.violations

    def summary(self) -> str:
        """Generate a human-readable summary of the optimization result."""
        lines = [
            "=" * 60,
            "  OPTIMIZATION RESULT",
            "=" * 60,
            "",
            f"  Fitness:            {self.fitness:>14.3f}",
            f"  Initial Fitness:    {self.initial_fitness:>14.3f}",
            f"  Improvement:        {self.improvement:>13.1f}%",
            "",
            f"  Cost:               {self.cost:>14.2f}",
            f"  Mass:               {self.mass:>14.2f} kg",
            f"  Joints:             {self.truss.size:>14d}",
            f"  Members:            {len(self.truss.connection_ids):>14d}",
            f"  Solved:             {'yes' if self.solved else 'no':>14}",
            "",
            f"  Generations:        {self.generations}",
        ]
        if self.seed is not None:
            lines.append(f"  Seed:               {self.seed}")

        if self.violations is not None:
            lines.extend([
                "",
                "  Constraint Violations:",
                f"    {'compression':.<35} {self.violations.compression:>5d}",
                f"    {'tension':.<35} {self.violations.tension:>5d}",
                f"    {'min length':.<35} {self.violations.min_length:>5d}",
                f"    {'max length':.<35} {self.violations.max_length:>5d}",
            ])

        lines.append("")
        lines.append("=" * 60)

        return "\n".join(lines)

    def print_summary(self) -> None:
        """Print optimization summary to console."""
        print(self.summary())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "truss": self.truss.to_json(),
            "initial_truss": self.initial_truss.to_json(),
            "results": {
                "fitness": self.fitness,
                "initial_fitness": self.initial_fitness,
                "solved": self.solved,
                "cost": self.cost,
                "mass_kg": self.mass,
                "violations": None if self.violations is None else {
                    "compression": self.violations.compression,
                    "tension": self.violations.tension,
                    "min_length": self.violations.min_length,
                    "max_length": self.violations.max_length,
                },
            },
            "optimization": {
                "generations": self.generations,
                "seed": self.seed,
                "history": self.history,
            },
        }

    def export(self, path: Union[str, Path], format: str = "json") -> None:
        """
        Export optimization result to file.

        Args:
            path: Output file path
            format: Export format (only "json" is supported)
        """
        path = Path(path)

        if format != "json":
            raise ValueError(f"Unknown export format: {format}")

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
