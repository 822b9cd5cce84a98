"""
Parametric Pratt truss builder.

Geometry (panels=4):
```
            T1 ───── T2 ───── T3
           /│ \\      │      /│ \\
          / │   \\    │    /  │  \\
         /  │     \\  │  /    │   \\
       B0 ─ B1 ───── B2 ───── B3 ─ B4
       ▲                            ○
```
Verticals connect each interior bottom joint to the top joint above it. The
diagonals slope down toward midspan, so under gravity loads they carry
tension while the top chord and end posts carry compression. B0 is pinned
and the last bottom joint rests on a roller.
"""

from __future__ import annotations

from typing import List, Optional

from truss_engine.core.connection import DEFAULT_AREA, Connection
from truss_engine.core.joint import FREE, PIN, ROLLER_Y, Joint
from truss_engine.core.profiles import Profile
from truss_engine.core.truss import Truss
from truss_engine.materials import Material, StructuralSteel


def pratt_truss(
    span: float = 12.0,
    height: float = 3.0,
    panels: int = 4,
    load: float = -10e3,
    material: Optional[Material] = None,
    area: float = DEFAULT_AREA,
    profile: Optional[Profile] = None,
) -> Truss:
    """
    Build a simply supported Pratt truss.

    Args:
        span: Distance between supports (m)
        height: Depth of the truss (m)
        panels: Number of panels (even, at least 2)
        load: Vertical force applied at every interior bottom joint (N,
            negative is downward)
        material: Material of every member (default: structural steel)
        area: Cross-sectional area of every member (m²)
        profile: Cross-section shape of every member

    Returns:
        A statically determinate truss with ``2 * panels`` joints and
        ``4 * panels - 3`` members, ready to ``compute()``

    Example:
        >>> bridge = pratt_truss(span=12, height=3, panels=4, load=-2e4)
        >>> bridge.compute()
        True
    """
    if span <= 0 or height <= 0:
        raise ValueError("span and height must be positive")
    if panels < 2 or panels % 2:
        raise ValueError("panels must be an even number of at least 2")

    material = material or StructuralSteel()
    truss = Truss()
    panel_width = span / panels

    bottom: List[Joint] = []
    for i in range(panels + 1):
        if i == 0:
            fixtures, force = PIN, (0.0, 0.0)
        elif i == panels:
            fixtures, force = ROLLER_Y, (0.0, 0.0)
        else:
            fixtures, force = FREE, (0.0, load)
        bottom.append(truss.add_joint(Joint((i * panel_width, 0.0), fixtures=fixtures, force=force)))

    # top[i] sits above bottom[i]; the end positions are unused
    top: List[Optional[Joint]] = [None] * (panels + 1)
    for i in range(1, panels):
        top[i] = truss.add_joint(Joint((i * panel_width, height)))

    def member(a: Joint, b: Joint) -> None:
        truss.add_connection(a.id, b.id, Connection(area=area, material=material, profile=profile))

    for i in range(panels):
        member(bottom[i], bottom[i + 1])
    for i in range(1, panels - 1):
        member(top[i], top[i + 1])
    for i in range(1, panels):
        member(bottom[i], top[i])

    member(bottom[0], top[1])
    member(bottom[panels], top[panels - 1])

    middle = panels // 2
    for i in range(1, middle):
        member(top[i], bottom[i + 1])
    for i in range(middle + 1, panels):
        member(top[i], bottom[i - 1])

    return truss
