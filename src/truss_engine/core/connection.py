"""
Truss members (graph edges).

A connection holds the cross section, material and profile of a member and
the axial stress written by the last successful solve. Length and
orientation are never stored: they depend on the current joint positions,
so every length-dependent quantity takes the live length as an argument
(see ``Truss.get_length``).

Sign convention: positive stress is tension, negative stress is compression.
"""

from __future__ import annotations

import math
import uuid
from typing import Any, Dict, Optional, Tuple

from truss_engine.core.base import FailureMode, euler_critical_stress
from truss_engine.core.profiles import Profile
from truss_engine.errors import TrussFormatError
from truss_engine.materials import Material, StructuralSteel

DEFAULT_AREA = 0.0004  # m²


class Connection:
    """
    A two-force member spanning two joints.

    Args:
        area: Cross-sectional area (m²)
        material: Material shared by reference (default: structural steel)
        profile: Cross-section shape (default: solid round bar)
        multiplier: Integer reinforcement factor widening allowable thresholds
        stress: Axial stress (Pa), normally written by ``Truss.compute``
        id: Identifier (generated when omitted)
        joint_ids: (from, to) joint ids, set by ``Truss.add_connection``

    Example:
        >>> member = Connection(area=4e-4, material=materials.Steel())
        >>> member.stress = -50e6
        >>> member.get_utilization(length=3.0, simple=False)
    """

    def __init__(
        self,
        area: float = DEFAULT_AREA,
        material: Optional[Material] = None,
        profile: Optional[Profile] = None,
        multiplier: int = 1,
        stress: float = 0.0,
        id: Optional[str] = None,
        joint_ids: Optional[Tuple[str, str]] = None,
    ):
        if area <= 0:
            raise ValueError("area must be positive")
        if multiplier < 1:
            raise ValueError("multiplier must be at least 1")

        self.id = id or str(uuid.uuid4())
        self.joint_ids = tuple(joint_ids) if joint_ids else None
        self.area = area
        self.material = material or StructuralSteel()
        self.profile = profile or Profile.circular()
        self.multiplier = int(multiplier)
        self.stress = stress

    def __repr__(self) -> str:
        return (
            f"Connection(id={self.id!r}, joints={self.joint_ids}, area={self.area:.3e}, "
            f"stress={self.stress:.3e}, material={self.material})"
        )

    # ------------------------------------------------------------------
    # Stress state
    # ------------------------------------------------------------------

    @property
    def force(self) -> float:
        """Axial force (N), positive in tension."""
        return self.stress * self.area

    @property
    def is_tension(self) -> bool:
        return self.stress >= 0

    @property
    def stress_type(self) -> str:
        return "tension" if self.is_tension else "compression"

    @property
    def axial_strain(self) -> float:
        return self.stress / self.material.E

    @property
    def transverse_strain(self) -> float:
        """Lateral strain from the Poisson effect."""
        return -self.axial_strain * self.material.nu

    def axial_elongation(self, length: float) -> float:
        """Change in member length (m)."""
        return self.axial_strain * length

    def transverse_elongation(self) -> float:
        """Change in cross-section width (m)."""
        return self.transverse_strain * self.profile.width(self.area)

    # ------------------------------------------------------------------
    # Geometry and mass
    # ------------------------------------------------------------------

    def volume(self, length: float) -> float:
        """Volume of the member (m³)."""
        return self.area * length

    def mass(self, length: float) -> float:
        """Mass of the member (kg)."""
        return self.material.density * self.volume(length)

    def moment_of_inertia(self) -> Tuple[float, float]:
        return self.profile.moment_of_inertia(self.area)

    # ------------------------------------------------------------------
    # Capacity
    # ------------------------------------------------------------------

    def critical_buckling_stress(self, length: float) -> float:
        """
        Euler critical stress for the weak axis.

        σ_cr = π²·E·min(Ix, Iy) / (L²·A)
        """
        I_min = self.profile.min_moment_of_inertia(self.area)
        return euler_critical_stress(self.material.E, I_min, length, self.area)

    def allowable_stress(self, length: float, simple: bool = True) -> float:
        """
        Allowable stress magnitude for the current stress sign.

        Args:
            length: Live member length (m)
            simple: If True, compression is limited by material strength only;
                otherwise the Euler critical stress is also considered

        Returns:
            Allowable stress (Pa)
        """
        if self.is_tension:
            return abs(self.material.sigma_tension)

        allowable = abs(self.material.sigma_compression)
        if not simple:
            allowable = min(allowable, abs(self.critical_buckling_stress(length)))
        return allowable

    def get_utilization(self, length: float, simple: bool = True) -> float:
        """
        Ratio of actual to allowable stress; values above 1 indicate failure.

        Args:
            length: Live member length (m)
            simple: Skip the buckling check when True

        Returns:
            |σ| / σ_allowable
        """
        allowable = self.allowable_stress(length, simple)
        if self.stress == 0:
            return 0.0
        if allowable == 0:
            return math.inf
        return abs(self.stress) / allowable

    def get_safety_factor(self, length: float, simple: bool = True) -> float:
        utilization = self.get_utilization(length, simple)
        return 1.0 / utilization if utilization > 0 else math.inf

    def get_failure_mode(self, length: float, simple: bool = True) -> FailureMode:
        """
        Classify how the member fails under its current stress.

        Returns FailureMode.NONE while utilization is at most 1.
        """
        if self.get_utilization(length, simple) <= 1.0:
            return FailureMode.NONE
        if self.is_tension:
            return FailureMode.AXIAL_TENSION
        if not simple and self.critical_buckling_stress(length) < abs(self.material.sigma_compression):
            return FailureMode.BUCKLING
        return FailureMode.AXIAL_COMPRESSION

    # ------------------------------------------------------------------
    # Copy / serialization
    # ------------------------------------------------------------------

    def clone(self) -> "Connection":
        """Return an independent copy with the same id (material is shared)."""
        return Connection(
            area=self.area,
            material=self.material,
            profile=self.profile,
            multiplier=self.multiplier,
            stress=self.stress,
            id=self.id,
            joint_ids=self.joint_ids,
        )

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id}
        if self.joint_ids is not None:
            data["jointIds"] = list(self.joint_ids)
        data["area"] = self.area
        data["material"] = self.material.to_json()
        if self.profile != Profile.circular():
            data["profile"] = self.profile.to_json()
        if self.multiplier != 1:
            data["multiplier"] = self.multiplier
        if self.stress != 0:
            data["stress"] = self.stress
        return data

    @classmethod
    def from_json(
        cls,
        data: Dict[str, Any],
        materials: Optional[Dict[str, Material]] = None,
    ) -> "Connection":
        """
        Build a connection from its JSON form.

        Args:
            data: Serialized connection
            materials: Optional id -> Material cache. Members whose material
                has the same id and properties share one instance; an edited
                copy under a reused id stays separate

        Raises:
            TrussFormatError: If required fields are missing or invalid
        """
        try:
            material = Material.from_json(data["material"])
            if materials is not None:
                cached = materials.setdefault(material.id, material)
                if cached.to_json() == material.to_json():
                    material = cached

            joint_ids = data.get("jointIds")
            if joint_ids is not None:
                if len(joint_ids) != 2:
                    raise ValueError("jointIds must hold exactly two ids")
                joint_ids = (str(joint_ids[0]), str(joint_ids[1]))

            profile = Profile.from_json(data["profile"]) if "profile" in data else None

            return cls(
                area=float(data["area"]),
                material=material,
                profile=profile,
                multiplier=int(data.get("multiplier", 1)),
                stress=float(data.get("stress", 0.0)),
                id=str(data["id"]),
                joint_ids=joint_ids,
            )
        except TrussFormatError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise TrussFormatError(f"Invalid connection: {data!r}") from e
