"""
Truss Engine - Structural analysis and genetic optimization of 2D trusses.

A planar truss is a graph of joints and pin-connected members. The engine
solves it with the direct stiffness method (PyTorch, float64), reports member
stresses, utilization and failure modes, and searches for cheaper, better
utilized designs with a genetic algorithm.

Example:
    >>> from truss_engine import Connection, Joint, Truss, PIN, ROLLER_Y
    >>> truss = Truss()
    >>> a = truss.add_joint(Joint((0, 0), fixtures=PIN))
    >>> b = truss.add_joint(Joint((4, 0), fixtures=ROLLER_Y))
    >>> c = truss.add_joint(Joint((2, 3), force=(0, -1000)))
    >>> for p, q in [(a, c), (b, c), (a, b)]:
    ...     truss.add_connection(p.id, q.id, Connection())
    >>> truss.compute()
    True
    >>> rx, ry = truss.reactions[a.id]  # ry is 500 N by symmetry

Optimizing a design:
    >>> from truss_engine import TrussOptimizer, pratt_truss
    >>> optimizer = TrussOptimizer(pratt_truss(span=12, height=3), seed=42)
    >>> result = optimizer.optimize(generations=100)
    >>> print(result.summary())
"""

__version__ = "1.0.0"

# Core graph and solver
from truss_engine.core.base import DTYPE, FailureMode, euler_critical_stress
from truss_engine.core.profiles import Profile, ProfileKind
from truss_engine.core.joint import FREE, PIN, ROLLER_X, ROLLER_Y, Fixtures, Joint
from truss_engine.core.connection import DEFAULT_AREA, Connection
from truss_engine.core.solver import DEFAULT_COND_LIMIT
from truss_engine.core.truss import Truss

# Errors
from truss_engine.errors import (
    JointNotFoundError,
    SingularSystemError,
    TrussError,
    TrussFormatError,
    TrussGraphError,
)

# Materials
from truss_engine import materials
from truss_engine.materials import Material

# Analysis
from truss_engine.analysis.constraints import (
    ConstraintViolations,
    TrussConstraints,
    check_constraints,
)
from truss_engine.analysis.reporter import TrussAnalyzer, analyze_truss

# Optimization
from truss_engine.optimization.genetic import GeneticAlgorithm, Individual
from truss_engine.optimization.operators import FitnessWeights, MutationConfig
from truss_engine.optimization.optimizer import TrussOptimizer
from truss_engine.optimization.result import OptimizationResult
from truss_engine.optimization.trials import TrialResults, run_optimization_trials

# Builders
from truss_engine.trusses.pratt import pratt_truss

__all__ = [
    # Version info
    "__version__",
    # Core
    "DTYPE",
    "FailureMode",
    "euler_critical_stress",
    "Profile",
    "ProfileKind",
    "Fixtures",
    "PIN",
    "ROLLER_X",
    "ROLLER_Y",
    "FREE",
    "Joint",
    "Connection",
    "DEFAULT_AREA",
    "DEFAULT_COND_LIMIT",
    "Truss",
    # Errors
    "TrussError",
    "TrussGraphError",
    "JointNotFoundError",
    "TrussFormatError",
    "SingularSystemError",
    # Materials
    "materials",
    "Material",
    # Analysis
    "TrussConstraints",
    "ConstraintViolations",
    "check_constraints",
    "TrussAnalyzer",
    "analyze_truss",
    # Optimization
    "GeneticAlgorithm",
    "Individual",
    "FitnessWeights",
    "MutationConfig",
    "TrussOptimizer",
    "OptimizationResult",
    "TrialResults",
    "run_optimization_trials",
    # Builders
    "pratt_truss",
]
