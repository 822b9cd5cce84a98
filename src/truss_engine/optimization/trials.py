"""
Run multiple optimization trials with different random seeds.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np

from truss_engine.analysis.constraints import TrussConstraints
from truss_engine.core.truss import Truss
from truss_engine.optimization.optimizer import TrussOptimizer
from truss_engine.optimization.result import OptimizationResult

METRICS = ('fitness', 'cost', 'mass')


@dataclass
class TrialResults:
    """
    Container for results from multiple optimization trials.

    Attributes:
        results: OptimizationResult of each trial, in seed order
        seeds: Seed used by each trial
        n_trials: Number of trials run

    Example:
        >>> results = run_optimization_trials(bridge, n_trials=10, generations=50)
        >>> best = results.best()
        >>> print(f"Best cost: {best.cost:.1f}")
    """

    results: List[OptimizationResult] = field(default_factory=list)
    seeds: List[int] = field(default_factory=list)
    n_trials: int = 0

    @staticmethod
    def _sort_key(by: str):
        if by == 'fitness':
            return lambda r: -r.fitness
        elif by == 'cost':
            return lambda r: r.cost
        elif by == 'mass':
            return lambda r: r.mass
        raise ValueError(f"Unknown metric: {by}")

    def best(self, by: str = 'fitness') -> OptimizationResult:
        """
        Get the best result across all trials.

        Args:
            by: Metric to compare ('fitness' is maximized; 'cost' and
                'mass' are minimized)

        Returns:
            Best OptimizationResult
        """
        if not self.results:
            raise ValueError("No results available")
        return min(self.results, key=self._sort_key(by))

    def top_n(self, n: int = 10, by: str = 'fitness') -> List[OptimizationResult]:
        """Get the top N results, best first."""
        return sorted(self.results, key=self._sort_key(by))[:n]

    def statistics(self) -> Dict[str, Dict[str, float]]:
        """
        Compute statistics across all trials.

        Returns:
            Dict with mean, std, min, max for each metric
        """
        if not self.results:
            raise ValueError("No results available")

        stats = {}
        for metric in METRICS:
            values = np.array([getattr(r, metric) for r in self.results], dtype=np.float64)
            stats[metric] = {
                'mean': float(np.mean(values)),
                'std': float(np.std(values)),
                'min': float(np.min(values)),
                'max': float(np.max(values)),
            }
        return stats

    @property
    def solved_fraction(self) -> float:
        if not self.results:
            return 0.0
        return float(np.mean([r.solved for r in self.results]))

    def summary(self) -> str:
        """Generate summary of all trials."""
        stats = self.statistics()
        best = self.best()

        lines = [
            "=" * 60,
            f"  TRIAL RESULTS SUMMARY ({self.n_trials} trials)",
            "=" * 60,
            "",
            "  Fitness:",
            f"    Mean: {stats['fitness']['mean']:.3f}",
            f"    Std:  {stats['fitness']['std']:.3f}",
            f"    Best: {stats['fitness']['max']:.3f}",
            "",
            "  Cost:",
            f"    Mean: {stats['cost']['mean']:.2f}",
            f"    Std:  {stats['cost']['std']:.2f}",
            f"    Min:  {stats['cost']['min']:.2f}",
            "",
            "  Mass (kg):",
            f"    Mean: {stats['mass']['mean']:.2f}",
            f"    Std:  {stats['mass']['std']:.2f}",
            f"    Min:  {stats['mass']['min']:.2f}",
            "",
            f"  Solved: {self.solved_fraction * 100:.0f}%",
            "",
            "  Best Truss:",
            f"    Fitness: {best.fitness:.3f}",
            f"    Cost:    {best.cost:.2f}",
            f"    Mass:    {best.mass:.2f} kg",
            f"    Seed:    {best.seed}",
            "",
            "=" * 60,
        ]

        return "\n".join(lines)

    def save(self, path: Union[str, Path]) -> None:
        """
        Save all trial results to a directory.

        Args:
            path: Directory path to save results
        """
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)

        for seed, result in zip(self.seeds, self.results):
            result.export(path / f"trial_{seed:04d}.json")

        summary = {
            'n_trials': self.n_trials,
            'seeds': self.seeds,
            'statistics': self.statistics(),
            'best_index': self.results.index(self.best()),
        }

        with open(path / "summary.json", 'w', encoding='utf-8') as f:
            json.dump(summary, f, indent=2)


def run_optimization_trials(
    truss: Truss,
    n_trials: int,
    generations: int = 100,
    constraints: Optional[TrussConstraints] = None,
    save_dir: Optional[Union[str, Path]] = None,
    verbose: bool = True,
    first_seed: int = 0,
    **optimizer_kwargs,
) -> TrialResults:
    """
    Run the genetic optimizer several times with different seeds.

    A single run can converge on a poor local design; comparing several
    seeded runs shows how robust the result is.

    Args:
        truss: Starting design shared by all trials
        n_trials: Number of trials to run
        generations: Generations per trial
        constraints: Force and length bounds shared across trials
        save_dir: Optional directory to save individual results
        verbose: Print progress
        first_seed: Seed of the first trial; trial i uses ``first_seed + i``
        **optimizer_kwargs: Additional arguments passed to TrussOptimizer

    Returns:
        TrialResults containing all optimization results

    Example:
        >>> from truss_engine import pratt_truss, run_optimization_trials
        >>>
        >>> results = run_optimization_trials(
        ...     pratt_truss(span=12, height=3, panels=4, load=-2e4),
        ...     n_trials=10,
        ...     generations=50,
        ...     save_dir='./trials',
        ... )
        >>> print(results.summary())
    """
    if n_trials < 1:
        raise ValueError("n_trials must be at least 1")

    trial_results = TrialResults(n_trials=n_trials)

    if verbose:
        print(f"Running {n_trials} optimization trials...")
        print("-" * 50)

    for i in range(n_trials):
        seed = first_seed + i
        if verbose:
            print(f"Trial {i + 1}/{n_trials}...", end=" ", flush=True)

        optimizer = TrussOptimizer(
            truss,
            constraints=constraints,
            seed=seed,
            **optimizer_kwargs,
        )
        result = optimizer.optimize(generations=generations, verbose=False)

        trial_results.results.append(result)
        trial_results.seeds.append(seed)

        if verbose:
            print(f"Fitness = {result.fitness:.3f}, Cost = {result.cost:.2f}")

    if verbose:
        print("-" * 50)
        best = trial_results.best()
        print(f"Best result: Fitness = {best.fitness:.3f} (seed {best.seed})")
        print(f"  Cost: {best.cost:.2f}")
        print(f"  Mass: {best.mass:.2f} kg")

    if save_dir:
        trial_results.save(save_dir)

    return trial_results
