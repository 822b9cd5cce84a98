"""
Shared definitions for the structural analysis engine.

This module holds the numeric precision used by the solver, the enumeration
of member failure modes and the generic buckling helper used by members.
"""

import math
from enum import Enum

import torch

# Use float64 for numerical stability in structural calculations
DTYPE = torch.float64


class FailureMode(str, Enum):
    """
    Failure mode of a single member.

    Attributes:
        NONE: Member is within its allowable stress
        AXIAL_TENSION: Tensile stress exceeds the ultimate tensile strength
        AXIAL_COMPRESSION: Compressive stress exceeds the ultimate compressive strength
        BUCKLING: Compressive stress exceeds the Euler critical stress
        SHEAR: Shear failure (not produced by axial-only members)
    """
    NONE = "none"
    AXIAL_TENSION = "axial_tension"
    AXIAL_COMPRESSION = "axial_compression"
    BUCKLING = "buckling"
    SHEAR = "shear"


def euler_critical_stress(E: float, I: float, L: float, A: float) -> float:
    """
    Compute the Euler critical buckling stress of a pinned-pinned column.

    σ_cr = π²EI / (L²A)

    Args:
        E: Young's modulus (Pa)
        I: Second moment of area (m⁴)
        L: Member length (m)
        A: Cross-sectional area (m²)

    Returns:
        Critical buckling stress (Pa), infinite for zero length or area
    """
    if L <= 0 or A <= 0:
        return math.inf
    return (math.pi ** 2 * E * I) / (L ** 2 * A)
