"""Post-solve analysis: constraint checking and failure reports."""

from truss_engine.analysis.constraints import (
    ConstraintViolations,
    TrussConstraints,
    check_constraints,
)
from truss_engine.analysis.reporter import MemberReport, TrussAnalyzer, analyze_truss

__all__ = [
    "TrussConstraints",
    "ConstraintViolations",
    "check_constraints",
    "TrussAnalyzer",
    "MemberReport",
    "analyze_truss",
]
