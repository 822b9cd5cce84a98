"""
Core structural components: the truss graph and its stiffness solver.

Joints and connections are owned by a ``Truss``; ``Truss.compute()`` runs the
direct stiffness method and writes stresses, displacements and reactions back
into the graph.
"""

from truss_engine.core.base import DTYPE, FailureMode, euler_critical_stress
from truss_engine.core.profiles import Profile, ProfileKind
from truss_engine.core.joint import FREE, PIN, ROLLER_X, ROLLER_Y, Fixtures, Joint
from truss_engine.core.connection import DEFAULT_AREA, Connection
from truss_engine.core.solver import (
    DEFAULT_COND_LIMIT,
    ElementData,
    StaticSolution,
    assemble_stiffness,
    solve_static,
)
from truss_engine.core.truss import Truss

__all__ = [
    "DTYPE",
    "FailureMode",
    "euler_critical_stress",
    # Cross sections
    "Profile",
    "ProfileKind",
    # Graph
    "Fixtures",
    "PIN",
    "ROLLER_X",
    "ROLLER_Y",
    "FREE",
    "Joint",
    "Connection",
    "DEFAULT_AREA",
    "Truss",
    # Solver
    "DEFAULT_COND_LIMIT",
    "ElementData",
    "StaticSolution",
    "assemble_stiffness",
    "solve_static",
]
