"""
Direct stiffness method for planar pin-jointed trusses.

Each joint contributes two degrees of freedom (x, y) numbered by the joint's
position in the truss: joint ``i`` owns DOFs ``2i`` and ``2i + 1``. Member
stiffness blocks are superposed into a global matrix, supported DOFs are
removed, the reduced system is solved for the free displacements and the
full force vector ``F = K·D`` gives the reactions.

All quantities are SI and computed in ``DTYPE`` (float64). The functions here
raise ``SingularSystemError``; ``Truss.compute`` turns that into ``False``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import torch

from truss_engine.core.base import DTYPE
from truss_engine.errors import SingularSystemError

# Reduced systems with a larger 2-norm condition number are treated as mechanisms
DEFAULT_COND_LIMIT = 1e12


@dataclass
class ElementData:
    """
    Solver view of one member.

    Attributes:
        i: Index of the first joint
        j: Index of the second joint
        E: Young's modulus (Pa)
        area: Cross-sectional area (m²)
        length: Current length (m)
        angle: Orientation from joint i to joint j (radians)
    """
    i: int
    j: int
    E: float
    area: float
    length: float
    angle: float

    @property
    def dofs(self) -> List[int]:
        return [2 * self.i, 2 * self.i + 1, 2 * self.j, 2 * self.j + 1]


@dataclass
class StaticSolution:
    """
    Result of a linear static solve.

    Attributes:
        displacements: Full displacement vector (2N,), zero at fixed DOFs
        forces: Full force vector K·D (2N,); reactions at fixed DOFs
        stresses: Axial stress per element (M,), positive in tension
    """
    displacements: torch.Tensor
    forces: torch.Tensor
    stresses: torch.Tensor

    def joint_vector(self, values: torch.Tensor, index: int) -> Tuple[float, float]:
        return float(values[2 * index]), float(values[2 * index + 1])


def element_stiffness(element: ElementData) -> torch.Tensor:
    """
    Global-coordinate stiffness matrix of a bar element.

    k = EA/L · [[ M, -M],
                [-M,  M]],   M = [[C², CS], [CS, S²]]

    Returns:
        4×4 tensor ordered (xi, yi, xj, yj)
    """
    C = math.cos(element.angle)
    S = math.sin(element.angle)
    k = element.E * element.area / element.length

    M = k * torch.tensor([[C * C, C * S], [C * S, S * S]], dtype=DTYPE)
    return torch.cat([
        torch.cat([M, -M], dim=1),
        torch.cat([-M, M], dim=1),
    ], dim=0)


def assemble_stiffness(n_joints: int, elements: Sequence[ElementData]) -> torch.Tensor:
    """
    Assemble the global stiffness matrix by superposition.

    Args:
        n_joints: Number of joints N
        elements: Member data

    Returns:
        2N × 2N symmetric tensor
    """
    ndof = 2 * n_joints
    K = torch.zeros((ndof, ndof), dtype=DTYPE)
    for element in elements:
        idx = torch.tensor(element.dofs)
        K[idx.unsqueeze(1), idx] += element_stiffness(element)
    return K


def solve_reduced(
    K: torch.Tensor,
    F: torch.Tensor,
    fixed_dofs: Sequence[int],
    cond_limit: float = DEFAULT_COND_LIMIT,
) -> torch.Tensor:
    """
    Solve K·D = F with zero displacement at the fixed DOFs.

    Args:
        K: Global stiffness matrix (ndof × ndof)
        F: Global load vector (ndof,)
        fixed_dofs: Prescribed DOF indices
        cond_limit: Largest accepted condition number of the reduced matrix

    Returns:
        Full displacement vector (ndof,)

    Raises:
        SingularSystemError: If the reduced system is not square, singular
            or too ill-conditioned to trust
    """
    ndof = K.shape[0]
    fixed = set(fixed_dofs)
    free = [k for k in range(ndof) if k not in fixed]

    D = torch.zeros(ndof, dtype=DTYPE)
    if not free:
        return D

    free_idx = torch.tensor(free)
    Kff = K[free_idx.unsqueeze(1), free_idx]
    Ff = F[free_idx]

    if Kff.shape[0] != Kff.shape[1] or Kff.shape[0] != Ff.shape[0]:
        raise SingularSystemError(f"Reduced system is not square: {tuple(Kff.shape)}")
    if not torch.isfinite(Kff).all():
        raise SingularSystemError("Reduced stiffness matrix has non-finite entries")

    cond = torch.linalg.cond(Kff).item()
    if not math.isfinite(cond) or cond > cond_limit:
        raise SingularSystemError(
            f"Unstable system (cond={cond:.2e}). Check supports and members."
        )

    try:
        Df = torch.linalg.solve(Kff, Ff)
    except torch.linalg.LinAlgError as e:
        raise SingularSystemError(str(e)) from e

    if not torch.isfinite(Df).all():
        raise SingularSystemError("Solution has non-finite displacements")

    D[free_idx] = Df
    return D


def axial_stresses(D: torch.Tensor, elements: Sequence[ElementData]) -> torch.Tensor:
    """
    Recover member stresses from joint displacements.

    σ = E/L · [-1, 1] · [[C, S, 0, 0], [0, 0, C, S]] · d

    Elongation gives positive (tensile) stress.
    """
    stresses = torch.zeros(len(elements), dtype=DTYPE)
    for n, element in enumerate(elements):
        C = math.cos(element.angle)
        S = math.sin(element.angle)
        T = torch.tensor([[C, S, 0.0, 0.0], [0.0, 0.0, C, S]], dtype=DTYPE)
        d = D[torch.tensor(element.dofs)]
        stretch = torch.tensor([-1.0, 1.0], dtype=DTYPE) @ (T @ d)
        stresses[n] = stretch * element.E / element.length
    return stresses


def solve_static(
    n_joints: int,
    elements: Sequence[ElementData],
    loads: torch.Tensor,
    fixed_dofs: Sequence[int],
    cond_limit: float = DEFAULT_COND_LIMIT,
) -> StaticSolution:
    """
    Run the full direct stiffness analysis.

    Args:
        n_joints: Number of joints N
        elements: Member data in a fixed order
        loads: Applied load vector (2N,)
        fixed_dofs: Prescribed DOF indices
        cond_limit: Largest accepted condition number

    Returns:
        StaticSolution with displacements, K·D forces and member stresses

    Raises:
        SingularSystemError: If any member has zero length or the reduced
            system cannot be solved
    """
    for element in elements:
        if not element.length > 0 or not math.isfinite(element.length):
            raise SingularSystemError(f"Member between joints {element.i} and {element.j} has zero length")

    K = assemble_stiffness(n_joints, elements)
    D = solve_reduced(K, loads, fixed_dofs, cond_limit)
    F = K @ D
    return StaticSolution(
        displacements=D,
        forces=F,
        stresses=axial_stresses(D, elements),
    )
