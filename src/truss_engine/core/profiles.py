"""
Cross-section profiles for truss members.

A profile maps a member's cross-sectional area to its outer dimensions and
its second moments of area. The set of shapes is closed, so a profile is a
single tagged value dispatched on its ``kind`` rather than a class
hierarchy.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from truss_engine.errors import TrussFormatError


class ProfileKind(str, Enum):
    """Supported cross-section shapes."""
    RECTANGULAR = "rectangular"
    CIRCULAR = "circular"
    HOLLOW_RECTANGULAR = "hollow_rectangular"
    HOLLOW_CIRCULAR = "hollow_circular"


@dataclass(frozen=True)
class Profile:
    """
    Cross-section shape of a member.

    All geometric properties are pure functions of the area passed in; the
    only state is the shape parameters fixed at construction.

    Attributes:
        kind: Shape of the cross section
        aspect_ratio: Width / height (rectangular shapes only)
        thickness: Wall thickness in m (hollow shapes only)

    Example:
        >>> tube = Profile.hollow_circular(thickness=0.002)
        >>> Ix, Iy = tube.moment_of_inertia(area=4e-4)
    """

    kind: ProfileKind = ProfileKind.CIRCULAR
    aspect_ratio: float = 1.0
    thickness: float = 0.0

    def __post_init__(self):
        if self.kind in (ProfileKind.RECTANGULAR, ProfileKind.HOLLOW_RECTANGULAR):
            if self.aspect_ratio <= 0:
                raise ValueError("aspect_ratio must be positive")
        if self.kind in (ProfileKind.HOLLOW_RECTANGULAR, ProfileKind.HOLLOW_CIRCULAR):
            if self.thickness <= 0:
                raise ValueError("thickness must be positive for hollow profiles")

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def rectangular(cls, width: float = 1.0, height: float = 1.0) -> "Profile":
        """Solid rectangle with the given width:height proportions."""
        return cls(ProfileKind.RECTANGULAR, aspect_ratio=width / height)

    @classmethod
    def circular(cls) -> "Profile":
        """Solid round bar."""
        return cls(ProfileKind.CIRCULAR)

    @classmethod
    def hollow_rectangular(cls, width: float, height: float, thickness: float) -> "Profile":
        """Rectangular tube with the given proportions and wall thickness."""
        return cls(ProfileKind.HOLLOW_RECTANGULAR, aspect_ratio=width / height, thickness=thickness)

    @classmethod
    def hollow_circular(cls, thickness: float) -> "Profile":
        """Round tube with the given wall thickness."""
        return cls(ProfileKind.HOLLOW_CIRCULAR, thickness=thickness)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def radius(self, area: float) -> float:
        """Outer radius (m) of a round profile."""
        if self.kind is ProfileKind.CIRCULAR:
            return math.sqrt(area / math.pi)
        if self.kind is ProfileKind.HOLLOW_CIRCULAR:
            # A = π(r² - (r - t)²)
            return area / (2 * math.pi * self.thickness) + self.thickness / 2
        raise ValueError(f"{self.kind.value} profile has no radius")

    def width(self, area: float) -> float:
        """Outer width (m) for the given area (m²)."""
        if self.kind is ProfileKind.RECTANGULAR:
            return math.sqrt(area * self.aspect_ratio)
        if self.kind is ProfileKind.HOLLOW_RECTANGULAR:
            return self.aspect_ratio * self.height(area)
        return 2 * self.radius(area)

    def height(self, area: float) -> float:
        """Outer height (m) for the given area (m²)."""
        if self.kind is ProfileKind.RECTANGULAR:
            return math.sqrt(area / self.aspect_ratio)
        if self.kind is ProfileKind.HOLLOW_RECTANGULAR:
            # A = 2t(w + h) - 4t², w = aspect_ratio · h
            t = self.thickness
            return (area / (2 * t) + 2 * t) / (1 + self.aspect_ratio)
        return 2 * self.radius(area)

    def moment_of_inertia(self, area: float) -> Tuple[float, float]:
        """
        Second moments of area about both principal axes.

        Args:
            area: Cross-sectional area (m²)

        Returns:
            (I_x, I_y) in m⁴
        """
        if self.kind is ProfileKind.RECTANGULAR:
            return _rectangle_inertia(self.width(area), self.height(area))

        if self.kind is ProfileKind.CIRCULAR:
            I = _disc_inertia(self.radius(area))
            return I, I

        if self.kind is ProfileKind.HOLLOW_RECTANGULAR:
            w, h = self.width(area), self.height(area)
            outer = _rectangle_inertia(w, h)
            inner = _rectangle_inertia(
                max(w - 2 * self.thickness, 0.0),
                max(h - 2 * self.thickness, 0.0),
            )
            return outer[0] - inner[0], outer[1] - inner[1]

        r = self.radius(area)
        I = _disc_inertia(r) - _disc_inertia(max(r - self.thickness, 0.0))
        return I, I

    def min_moment_of_inertia(self, area: float) -> float:
        """Weak-axis second moment of area (m⁴), governs buckling."""
        return min(self.moment_of_inertia(area))

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.kind in (ProfileKind.RECTANGULAR, ProfileKind.HOLLOW_RECTANGULAR):
            data["aspectRatio"] = self.aspect_ratio
        if self.kind in (ProfileKind.HOLLOW_RECTANGULAR, ProfileKind.HOLLOW_CIRCULAR):
            data["thickness"] = self.thickness
        return data

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Profile":
        try:
            return cls(
                kind=ProfileKind(data["kind"]),
                aspect_ratio=float(data.get("aspectRatio", 1.0)),
                thickness=float(data.get("thickness", 0.0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise TrussFormatError(f"Invalid profile: {data!r}") from e


def _rectangle_inertia(width: float, height: float) -> Tuple[float, float]:
    return width * height ** 3 / 12, height * width ** 3 / 12


def _disc_inertia(radius: float) -> float:
    return math.pi * radius ** 4 / 4
