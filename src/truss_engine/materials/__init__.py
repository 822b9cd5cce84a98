"""
Material property definitions for structural analysis.

This module provides a library of common structural materials with their
mechanical properties, as well as the ability to define custom materials.
Materials are shared by reference between members and are treated as
immutable values: edit a clone, not a material in use.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from truss_engine.errors import TrussFormatError


@dataclass
class Material:
    """
    Base class for material properties.

    Attributes:
        E: Young's modulus (Pa) - stiffness
        sigma_compression: Ultimate compressive strength (Pa)
        sigma_tension: Ultimate tensile strength (Pa)
        density: Material density (kg/m³)
        G: Shear modulus (Pa), derived from E and nu when omitted
        nu: Poisson's ratio
        name: Human-readable material name
        color: Display color (hex string), carried for the editor only
        id: Stable identifier, preserved by clone and serialization

    Example:
        >>> steel = Material(
        ...     E=200e9,
        ...     sigma_compression=250e6,
        ...     sigma_tension=400e6,
        ...     density=7850.0,
        ...     name="Structural Steel"
        ... )
    """

    E: float  # Young's modulus (Pa)
    sigma_compression: float  # Compressive strength (Pa)
    sigma_tension: float  # Tensile strength (Pa)
    density: float  # Density (kg/m³)
    G: Optional[float] = None  # Shear modulus (Pa)
    nu: float = 0.3  # Poisson's ratio
    name: Optional[str] = None
    color: str = "#000000"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if self.G is None:
            self.G = self.E / (2 * (1 + self.nu))

    def __repr__(self) -> str:
        if self.name:
            return f"{self.name}"
        return f"Material(E={self.E:.2e}, σ_c={self.sigma_compression:.2e}, σ_t={self.sigma_tension:.2e})"

    def clone(self) -> "Material":
        """Return an independent copy with the same id."""
        return Material(
            E=self.E,
            sigma_compression=self.sigma_compression,
            sigma_tension=self.sigma_tension,
            density=self.density,
            G=self.G,
            nu=self.nu,
            name=self.name,
            color=self.color,
            id=self.id,
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "density": self.density,
            "youngsModulus": self.E,
            "shearModulus": self.G,
            "poissonsRatio": self.nu,
            "ultimateStress": {
                "tension": self.sigma_tension,
                "compression": self.sigma_compression,
            },
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Material":
        try:
            ultimate = data["ultimateStress"]
            return cls(
                E=float(data["youngsModulus"]),
                sigma_compression=float(ultimate["compression"]),
                sigma_tension=float(ultimate["tension"]),
                density=float(data["density"]),
                G=float(data["shearModulus"]),
                nu=float(data["poissonsRatio"]),
                name=data.get("name"),
                color=data.get("color", "#000000"),
                id=str(data["id"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise TrussFormatError(f"Invalid material: {data!r}") from e


# ============================================================================
# Pre-defined Materials
# ============================================================================

class StructuralSteel(Material):
    """
    Mild structural steel, the default member material.

    Properties:
        - E: 200 GPa
        - G: 79.3 GPa
        - σ_compression: 152 MPa (allowable)
        - σ_tension: 250 MPa
        - density: 7,850 kg/m³
    """

    def __init__(self):
        super().__init__(
            E=200e9,
            sigma_compression=152e6,
            sigma_tension=250e6,
            density=7850.0,
            G=79.3e9,
            nu=0.3,
            name="Structural Steel",
            color="#8a8d91",
            id="structural-steel",
        )


class Steel(Material):
    """
    High strength steel (A572/S355).

    Properties:
        - E: 200 GPa
        - σ_compression: 250 MPa
        - σ_tension: 400 MPa
        - density: 7,850 kg/m³
    """

    def __init__(self):
        super().__init__(
            E=200e9,
            sigma_compression=250e6,
            sigma_tension=400e6,
            density=7850.0,
            G=79.3e9,
            nu=0.3,
            name="Steel",
            color="#6b6e72",
            id="steel",
        )


class Aluminum(Material):
    """
    Aluminum alloy (6061-T6).

    Properties:
        - E: 69 GPa
        - σ_compression: 150 MPa
        - σ_tension: 200 MPa
        - density: 2,700 kg/m³
    """

    def __init__(self):
        super().__init__(
            E=69e9,
            sigma_compression=150e6,
            sigma_tension=200e6,
            density=2700.0,
            G=26e9,
            nu=0.33,
            name="Aluminum",
            color="#c9ced6",
            id="aluminum",
        )


class Titanium(Material):
    """
    Titanium alloy (Ti-6Al-4V).

    Properties:
        - E: 114 GPa
        - σ_compression: 900 MPa
        - σ_tension: 950 MPa
        - density: 4,500 kg/m³
    """

    def __init__(self):
        super().__init__(
            E=114e9,
            sigma_compression=900e6,
            sigma_tension=950e6,
            density=4500.0,
            G=44e9,
            nu=0.34,
            name="Titanium",
            color="#878681",
            id="titanium",
        )


class Timber(Material):
    """
    Softwood structural timber (C24), loaded parallel to grain.

    Properties:
        - E: 11 GPa
        - σ_compression: 21 MPa
        - σ_tension: 14 MPa
        - density: 420 kg/m³
    """

    def __init__(self):
        super().__init__(
            E=11e9,
            sigma_compression=21e6,
            sigma_tension=14e6,
            density=420.0,
            G=0.69e9,
            nu=0.35,
            name="Timber",
            color="#b5835a",
            id="timber",
        )


class BalsaWood(Material):
    """
    Balsa wood (Ochroma pyramidale) - medium density.

    Excellent strength-to-weight ratio, commonly used in model bridges.

    Properties:
        - E: 3.7 GPa
        - σ_compression: 12 MPa
        - σ_tension: 20 MPa
        - density: 200 kg/m³
    """

    def __init__(self):
        super().__init__(
            E=3.71e9,
            sigma_compression=11.6e6,
            sigma_tension=19.6e6,
            density=200.0,
            G=0.14e9,
            nu=0.23,
            name="Balsa Wood",
            color="#e8d3a2",
            id="balsa",
        )


class Concrete(Material):
    """
    Standard concrete (C30/37).

    Note: Concrete is weak in tension; typically used with steel reinforcement.
    """

    def __init__(self):
        super().__init__(
            E=30e9,
            sigma_compression=40e6,
            sigma_tension=4e6,
            density=2400.0,
            G=12.5e9,
            nu=0.2,
            name="Concrete",
            color="#a9a9a9",
            id="concrete",
        )


class Custom(Material):
    """
    Create a custom material with specified properties.

    Args:
        E: Young's modulus (Pa)
        sigma_compression: Ultimate compressive strength (Pa)
        sigma_tension: Ultimate tensile strength (Pa)
        density: Material density (kg/m³)
        G: Optional shear modulus (Pa)
        nu: Poisson's ratio
        name: Optional name for the material

    Example:
        >>> carbon_fiber = Custom(
        ...     E=150e9,
        ...     sigma_compression=1000e6,
        ...     sigma_tension=2000e6,
        ...     density=1600.0,
        ...     name="Carbon Fiber Composite"
        ... )
    """

    def __init__(
        self,
        E: float,
        sigma_compression: float,
        sigma_tension: float,
        density: float,
        G: Optional[float] = None,
        nu: float = 0.3,
        name: Optional[str] = "Custom Material",
        color: str = "#000000",
    ):
        super().__init__(
            E=E,
            sigma_compression=sigma_compression,
            sigma_tension=sigma_tension,
            density=density,
            G=G,
            nu=nu,
            name=name,
            color=color,
        )


# Convenient aliases
OchromaWood = BalsaWood  # Scientific name for balsa

PRESETS = {
    cls().id: cls
    for cls in (StructuralSteel, Steel, Aluminum, Titanium, Timber, BalsaWood, Concrete)
}


def get_preset(id: str) -> Material:
    """
    Instantiate a preset material by its stable id.

    Raises:
        KeyError: If no preset has this id
    """
    try:
        return PRESETS[id]()
    except KeyError:
        raise KeyError(f"Unknown material preset '{id}'. Available: {sorted(PRESETS)}") from None
