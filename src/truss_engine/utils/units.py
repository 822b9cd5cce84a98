"""
Unit conversion utilities.

The engine works in SI units throughout; these helpers exist for building
inputs from imperial drawings and for presenting results.
"""

import math


# Length conversions
def inches_to_meters(inches: float) -> float:
    """Convert inches to meters."""
    return inches * 0.0254


def meters_to_inches(meters: float) -> float:
    """Convert meters to inches."""
    return meters / 0.0254


def feet_to_meters(feet: float) -> float:
    """Convert feet to meters."""
    return feet * 0.3048


def meters_to_feet(meters: float) -> float:
    return meters / 0.3048


# Area conversions
def square_inches_to_square_meters(sq_in: float) -> float:
    return sq_in * 0.0254 ** 2


def square_meters_to_square_inches(sq_m: float) -> float:
    return sq_m / 0.0254 ** 2


# Force conversions
def lbf_to_newtons(lbf: float) -> float:
    """Convert pounds-force to Newtons."""
    return lbf * 4.44822


def newtons_to_lbf(newtons: float) -> float:
    """Convert Newtons to pounds-force."""
    return newtons / 4.44822


# Stress conversions
def psi_to_pascals(psi: float) -> float:
    """Convert pounds per square inch to pascals."""
    return psi * 6894.757


def pascals_to_psi(pascals: float) -> float:
    return pascals / 6894.757


def pascals_to_ksi(pascals: float) -> float:
    """Convert pascals to kilopounds per square inch."""
    return pascals / 6894757.0


# Mass conversions
def kilograms_to_pounds(kg: float) -> float:
    return kg / 0.45359237


def radians_to_degrees(radians: float) -> float:
    return math.degrees(radians)
