"""Utility functions."""

from truss_engine.utils.units import (
    feet_to_meters,
    inches_to_meters,
    kilograms_to_pounds,
    lbf_to_newtons,
    meters_to_feet,
    meters_to_inches,
    newtons_to_lbf,
    pascals_to_ksi,
    pascals_to_psi,
    psi_to_pascals,
    radians_to_degrees,
    square_inches_to_square_meters,
    square_meters_to_square_inches,
)

__all__ = [
    "feet_to_meters",
    "inches_to_meters",
    "kilograms_to_pounds",
    "lbf_to_newtons",
    "meters_to_feet",
    "meters_to_inches",
    "newtons_to_lbf",
    "pascals_to_ksi",
    "pascals_to_psi",
    "psi_to_pascals",
    "radians_to_degrees",
    "square_inches_to_square_meters",
    "square_meters_to_square_inches",
]
