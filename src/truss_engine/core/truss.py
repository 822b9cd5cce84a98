"""
Truss graph with direct stiffness analysis.

The Truss exclusively owns its joints and connections, kept in two
id-indexed maps. Joints reference their members by id and connections
reference their joints by id; every cross reference is resolved through the
Truss, and all mutations go through it so both maps stay consistent.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional, Tuple

import torch

from truss_engine.core.base import DTYPE
from truss_engine.core.connection import Connection
from truss_engine.core.joint import Joint, Vector2
from truss_engine.core.solver import DEFAULT_COND_LIMIT, ElementData, solve_static
from truss_engine.errors import (
    JointNotFoundError,
    SingularSystemError,
    TrussFormatError,
    TrussGraphError,
)
from truss_engine.materials import Material


class Truss:
    """
    A planar pin-jointed truss.

    Args:
        joints: Initial joints with their connection maps
        connections: Initial connections; missing ``joint_ids`` are taken
            from the joint maps
        id: Identifier (generated when omitted)

    Raises:
        TrussGraphError: If ids repeat or the joint maps and connection
            endpoints disagree

    Example:
        >>> truss = Truss()
        >>> a = truss.add_joint(Joint((0, 0), fixtures=PIN))
        >>> b = truss.add_joint(Joint((4, 0), fixtures=ROLLER_Y))
        >>> c = truss.add_joint(Joint((2, 3), force=(0, -1000)))
        >>> for p, q in [(a, c), (b, c), (a, b)]:
        ...     truss.add_connection(p.id, q.id, Connection())
        >>> truss.compute()
        True
    """

    def __init__(
        self,
        joints: Optional[List[Joint]] = None,
        connections: Optional[List[Connection]] = None,
        id: Optional[str] = None,
    ):
        self.id = id or str(uuid.uuid4())

        self._joints: Dict[str, Joint] = {}
        self._connections: Dict[str, Connection] = {}

        for joint in joints or []:
            self._insert_joint(joint)
        for connection in connections or []:
            if connection.id in self._connections:
                raise TrussGraphError(f"Duplicate connection id '{connection.id}'")
            self._connections[connection.id] = connection
        self._resolve_endpoints()
        self._validate()

    def __repr__(self) -> str:
        return f"Truss(id={self.id!r}, joints={self.size}, connections={len(self._connections)})"

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def size(self) -> int:
        """Number of joints."""
        return len(self._joints)

    @property
    def joints(self) -> List[Joint]:
        """Joints in canonical (insertion) order; this order numbers the DOFs."""
        return list(self._joints.values())

    @property
    def connections(self) -> List[Connection]:
        return list(self._connections.values())

    @property
    def joint_ids(self) -> List[str]:
        return list(self._joints)

    @property
    def connection_ids(self) -> List[str]:
        return list(self._connections)

    def get_joint(self, id: str) -> Optional[Joint]:
        return self._joints.get(id)

    def get_connection(self, id: str) -> Optional[Connection]:
        return self._connections.get(id)

    def get_connection_by_ids(self, from_id: str, to_id: str) -> Optional[Connection]:
        joint = self._joints.get(from_id)
        if joint is None or to_id not in joint.connections:
            return None
        return self._connections.get(joint.connections[to_id])

    def get_connections(self, joint_id: str) -> List[Connection]:
        """All connections attached to a joint (empty if the joint is absent)."""
        joint = self._joints.get(joint_id)
        if joint is None:
            return []
        return [self._connections[cid] for cid in joint.connections.values()]

    def get_endpoints(self, connection_id: str) -> Tuple[Joint, Joint]:
        a, b = self._connections[connection_id].joint_ids
        return self._joints[a], self._joints[b]

    def get_length(self, connection_id: str) -> float:
        """Current member length (m), derived from joint positions."""
        a, b = self.get_endpoints(connection_id)
        return a.distance_to(b)

    def get_angle(self, connection_id: str) -> float:
        """Current member orientation (radians) from its first to its second joint."""
        a, b = self.get_endpoints(connection_id)
        return a.angle_to(b)

    def get_force(self, connection_id: str) -> float:
        """Axial force (N) from the last solve, positive in tension."""
        return self._connections[connection_id].force

    def get_utilization(self, connection_id: str, simple: bool = True) -> float:
        connection = self._connections[connection_id]
        return connection.get_utilization(self.get_length(connection_id), simple)

    def get_max_forces(self) -> Dict[str, float]:
        """
        Largest tensile and compressive axial forces (N) as magnitudes.

        Returns:
            Dict with 'tension' and 'compression' keys
        """
        forces = [c.force for c in self._connections.values()]
        return {
            "tension": max([f for f in forces if f > 0], default=0.0),
            "compression": max([-f for f in forces if f < 0], default=0.0),
        }

    @property
    def bounding_box(self) -> Tuple[Vector2, Vector2]:
        """((min_x, min_y), (max_x, max_y)) of all joint positions."""
        if not self._joints:
            return (0.0, 0.0), (0.0, 0.0)
        xs = [j.x for j in self._joints.values()]
        ys = [j.y for j in self._joints.values()]
        return (min(xs), min(ys)), (max(xs), max(ys))

    @property
    def center(self) -> Vector2:
        (x0, y0), (x1, y1) = self.bounding_box
        return (x0 + x1) / 2, (y0 + y1) / 2

    @property
    def cost(self) -> float:
        """
        Construction cost: 5 per joint plus 15 per meter of member,
        scaled by each member's multiplier.
        """
        total = self.size * 5.0
        for cid, connection in self._connections.items():
            total += self.get_length(cid) * 15.0 * connection.multiplier
        return total

    @property
    def mass(self) -> float:
        """Total member mass (kg)."""
        return sum(
            connection.mass(self.get_length(cid)) * connection.multiplier
            for cid, connection in self._connections.items()
        )

    @property
    def reactions(self) -> Dict[str, Vector2]:
        """Reaction force of every supported joint (valid after a successful solve)."""
        return {jid: joint.force for jid, joint in self._joints.items() if joint.fixed}

    # =========================================================================
    # Mutation
    # =========================================================================

    def _insert_joint(self, joint: Joint) -> None:
        if joint.id in self._joints:
            raise TrussGraphError(f"Duplicate joint id '{joint.id}'")
        self._joints[joint.id] = joint

    def add_joint(self, joint: Joint) -> Joint:
        """Insert a joint. Existing connections are unaffected."""
        self._insert_joint(joint)
        return joint

    def remove_joint(self, id: str) -> "Truss":
        """Remove a joint and every connection touching it. No-op if absent."""
        joint = self._joints.get(id)
        if joint is None:
            return self

        for neighbor_id, connection_id in list(joint.connections.items()):
            neighbor = self._joints.get(neighbor_id)
            if neighbor is not None:
                neighbor.connections.pop(id, None)
            self._connections.pop(connection_id, None)

        del self._joints[id]
        return self

    def add_connection(self, from_id: str, to_id: str, connection: Connection) -> Connection:
        """
        Register a connection between two existing joints.

        Sets ``connection.joint_ids`` to ``(from_id, to_id)``.

        Raises:
            JointNotFoundError: If either joint is absent
            TrussGraphError: For self loops, duplicate ids or an already
                connected joint pair
        """
        for joint_id in (from_id, to_id):
            if joint_id not in self._joints:
                raise JointNotFoundError(joint_id)
        if from_id == to_id:
            raise TrussGraphError("A connection cannot join a joint to itself")
        if to_id in self._joints[from_id].connections:
            raise TrussGraphError(f"Joints '{from_id}' and '{to_id}' are already connected")
        if connection.id in self._connections:
            raise TrussGraphError(f"Duplicate connection id '{connection.id}'")

        connection.joint_ids = (from_id, to_id)
        self._connections[connection.id] = connection
        self._joints[from_id].connections[to_id] = connection.id
        self._joints[to_id].connections[from_id] = connection.id
        return connection

    def connect(self, from_id: str, to_id: str, **kwargs) -> Connection:
        """Shortcut for ``add_connection(from_id, to_id, Connection(**kwargs))``."""
        return self.add_connection(from_id, to_id, Connection(**kwargs))

    def remove_connection(self, id: str) -> "Truss":
        """Remove a connection from both joints and the table. No-op if absent."""
        connection = self._connections.pop(id, None)
        if connection is None or connection.joint_ids is None:
            return self

        a, b = connection.joint_ids
        if a in self._joints:
            self._joints[a].connections.pop(b, None)
        if b in self._joints:
            self._joints[b].connections.pop(a, None)
        return self

    def remove_connection_by_ids(self, from_id: str, to_id: str) -> "Truss":
        joint = self._joints.get(from_id)
        if joint is None or to_id not in joint.connections:
            return self
        return self.remove_connection(joint.connections[to_id])

    # =========================================================================
    # Analysis
    # =========================================================================

    def _elements(self) -> List[ElementData]:
        index = {jid: i for i, jid in enumerate(self._joints)}
        elements = []
        for cid, connection in self._connections.items():
            a, b = self.get_endpoints(cid)
            elements.append(ElementData(
                i=index[a.id],
                j=index[b.id],
                E=connection.material.E,
                area=connection.area,
                length=a.distance_to(b),
                angle=a.angle_to(b),
            ))
        return elements

    def compute(self, cond_limit: float = DEFAULT_COND_LIMIT) -> bool:
        """
        Solve the truss with the direct stiffness method.

        On success, writes every joint's displacement, every member's axial
        stress, and replaces the supported components of each supported joint's
        force with the reaction. A roller keeps the applied load on its free axis.
        On failure nothing is modified.

        Args:
            cond_limit: Largest accepted condition number of the reduced
                stiffness matrix

        Returns:
            True if the system was solved, False if it is singular or
            ill-posed (mechanism, unsupported joint, zero-length member)
        """
        joints = self.joints
        if not joints:
            return True

        loads = torch.zeros(2 * len(joints), dtype=DTYPE)
        fixed_dofs: List[int] = []
        for i, joint in enumerate(joints):
            if joint.fixtures.x:
                fixed_dofs.append(2 * i)
            else:
                loads[2 * i] = joint.force[0]
            if joint.fixtures.y:
                fixed_dofs.append(2 * i + 1)
            else:
                loads[2 * i + 1] = joint.force[1]

        try:
            solution = solve_static(len(joints), self._elements(), loads, fixed_dofs, cond_limit)
        except SingularSystemError:
            return False

        for i, joint in enumerate(joints):
            joint.displacement = solution.joint_vector(solution.displacements, i)
            if joint.fixed:
                # only supported axes take the reaction; a free axis keeps its load
                rx, ry = solution.joint_vector(solution.forces, i)
                joint.force = (
                    rx if joint.fixtures.x else joint.force[0],
                    ry if joint.fixtures.y else joint.force[1],
                )

        for connection, stress in zip(self._connections.values(), solution.stresses.tolist()):
            connection.stress = stress

        return True

    # =========================================================================
    # Copy / serialization
    # =========================================================================

    def clone(self) -> "Truss":
        """Deep copy with identical ids; materials are shared immutable values."""
        return Truss(
            joints=[joint.clone() for joint in self._joints.values()],
            connections=[connection.clone() for connection in self._connections.values()],
            id=self.id,
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "joints": [joint.to_json() for joint in self._joints.values()],
            "connections": [connection.to_json() for connection in self._connections.values()],
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any], id: Optional[str] = None) -> "Truss":
        """
        Rebuild a truss from its JSON form.

        Connections without ``jointIds`` take their endpoints from the joints'
        connection maps.

        Raises:
            TrussFormatError: If the data is malformed or its references are
                inconsistent
        """
        try:
            joint_data = data["joints"]
            connection_data = data["connections"]
        except (KeyError, TypeError) as e:
            raise TrussFormatError("Truss data needs 'joints' and 'connections'") from e
        if not isinstance(joint_data, list) or not isinstance(connection_data, list):
            raise TrussFormatError("'joints' and 'connections' must be arrays")

        materials: Dict[str, Material] = {}
        joints = [Joint.from_json(j) for j in joint_data]
        connections = [Connection.from_json(c, materials) for c in connection_data]

        try:
            truss = cls(joints, connections, id=id)
        except TrussGraphError as e:
            raise TrussFormatError(str(e)) from e
        return truss

    def _resolve_endpoints(self) -> None:
        for joint in self._joints.values():
            for neighbor_id, connection_id in joint.connections.items():
                connection = self._connections.get(connection_id)
                if connection is not None and connection.joint_ids is None:
                    connection.joint_ids = (joint.id, neighbor_id)

    def _validate(self) -> None:
        """Check that joint maps and connection endpoints agree."""
        for cid, connection in self._connections.items():
            if connection.joint_ids is None:
                raise TrussGraphError(f"Connection '{cid}' is not attached to any joint")
            a, b = connection.joint_ids
            if a not in self._joints or b not in self._joints:
                raise TrussGraphError(f"Connection '{cid}' references a missing joint")
            if self._joints[a].connections.get(b) != cid or self._joints[b].connections.get(a) != cid:
                raise TrussGraphError(f"Joints of connection '{cid}' do not reference it")

        for joint in self._joints.values():
            for neighbor_id, connection_id in joint.connections.items():
                connection = self._connections.get(connection_id)
                if connection is None or set(connection.joint_ids) != {joint.id, neighbor_id}:
                    raise TrussGraphError(
                        f"Joint '{joint.id}' references an unknown connection '{connection_id}'"
                    )
