"""
Truss joints (graph nodes).

A joint carries its position, which displacement components are prescribed
by a support, the external force applied to it and, after a successful
solve, its displacement. Joints reference their members by id only; the
owning Truss resolves those ids.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from truss_engine.errors import TrussFormatError

Vector2 = Tuple[float, float]

ZERO: Vector2 = (0.0, 0.0)


@dataclass(frozen=True)
class Fixtures:
    """
    Per-axis support flags. A fixed axis has zero displacement.

    Attributes:
        x: Horizontal displacement is prescribed
        y: Vertical displacement is prescribed
    """
    x: bool = False
    y: bool = False

    @property
    def any(self) -> bool:
        return self.x or self.y

    def to_json(self) -> Dict[str, bool]:
        return {"x": self.x, "y": self.y}


PIN = Fixtures(x=True, y=True)
ROLLER_X = Fixtures(x=True, y=False)
ROLLER_Y = Fixtures(x=False, y=True)
FREE = Fixtures()


@dataclass
class Joint:
    """
    A node of the truss graph.

    Attributes:
        position: (x, y) in meters
        fixtures: Support flags
        force: Applied external force (N). Its supported components are
            overwritten with the reaction after each successful solve.
        displacement: (dx, dy) in meters, valid after a successful solve
        id: Unique identifier, preserved by clone and serialization
        connections: Neighbor joint id -> connection id

    Example:
        >>> support = Joint((0.0, 0.0), fixtures=PIN)
        >>> apex = Joint((2.0, 3.0), force=(0.0, -1000.0))
        >>> support.distance_to(apex)
        3.605551275463989
    """

    position: Vector2
    fixtures: Fixtures = FREE
    force: Vector2 = ZERO
    displacement: Vector2 = ZERO
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    connections: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.position = _vector(self.position)
        self.force = _vector(self.force)
        self.displacement = _vector(self.displacement)

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    @property
    def fixed(self) -> bool:
        """Whether any displacement component is prescribed."""
        return self.fixtures.any

    @property
    def loaded(self) -> bool:
        return self.force != ZERO

    @property
    def num_connections(self) -> int:
        return len(self.connections)

    def distance_to(self, joint: "Joint") -> float:
        return math.hypot(joint.x - self.x, joint.y - self.y)

    def angle_to(self, joint: "Joint") -> float:
        """Orientation (radians) of the line from this joint to ``joint``."""
        return math.atan2(joint.y - self.y, joint.x - self.x)

    def move_by(self, dx: float, dy: float) -> "Joint":
        self.position = (self.x + dx, self.y + dy)
        return self

    def clone(self) -> "Joint":
        """Return an independent copy with the same id."""
        return Joint(
            position=self.position,
            fixtures=self.fixtures,
            force=self.force,
            displacement=self.displacement,
            id=self.id,
            connections=dict(self.connections),
        )

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "position": list(self.position),
        }
        if self.fixed:
            data["fixtures"] = self.fixtures.to_json()
        if self.displacement != ZERO:
            data["displacement"] = list(self.displacement)
        if self.force != ZERO:
            data["force"] = list(self.force)
        data["connections"] = dict(self.connections)
        return data

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Joint":
        try:
            fixtures = data.get("fixtures") or {}
            connections = data.get("connections") or {}
            if not isinstance(connections, dict):
                raise TypeError("connections must be an object")
            return cls(
                position=data["position"],
                fixtures=Fixtures(x=bool(fixtures.get("x", False)), y=bool(fixtures.get("y", False))),
                force=data.get("force", ZERO),
                displacement=data.get("displacement", ZERO),
                id=str(data["id"]),
                connections={str(k): str(v) for k, v in connections.items()},
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise TrussFormatError(f"Invalid joint: {data!r}") from e


def _vector(value) -> Vector2:
    x, y = value
    return float(x), float(y)
