"""
Builders for common truss layouts.

Each builder returns an ordinary ``Truss`` that can be edited, solved and
optimized like any hand-built one.

Currently implemented:
- **pratt**: simply supported Pratt truss with an even number of panels
"""

from truss_engine.trusses.pratt import pratt_truss

__all__ = [
    "pratt_truss",
]
