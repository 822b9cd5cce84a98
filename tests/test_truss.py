"""
Tests for the truss graph, the stiffness solver and serialization.

Run with: pytest tests/ -v
"""

import json
import math

import pytest
import torch

from truss_engine import (
    DTYPE,
    FREE,
    PIN,
    ROLLER_Y,
    Connection,
    JointNotFoundError,
    Joint,
    SingularSystemError,
    Truss,
    TrussFormatError,
    TrussGraphError,
    materials,
    pratt_truss,
)
from truss_engine.core.solver import ElementData, assemble_stiffness, solve_reduced, solve_static


class TestGraph:
    """Test graph mutation and referential integrity."""

    def test_add_joint(self):
        """Added joints should be retrievable and counted."""
        truss = Truss()
        joint = truss.add_joint(Joint((1, 1), id="j"))

        assert truss.size == 1
        assert truss.get_joint("j") is joint
        assert truss.get_joint("missing") is None

    def test_duplicate_joint_id(self):
        """Two joints cannot share an id."""
        truss = Truss()
        truss.add_joint(Joint((0, 0), id="j"))

        with pytest.raises(TrussGraphError):
            truss.add_joint(Joint((1, 0), id="j"))

    def test_add_connection_registers_both_sides(self, triangle):
        """A connection should appear in both joints and the global table."""
        member = triangle.get_connection("AC")

        assert member.joint_ids == ("A", "C")
        assert triangle.get_joint("A").connections["C"] == "AC"
        assert triangle.get_joint("C").connections["A"] == "AC"
        assert triangle.get_connection_by_ids("C", "A") is member
        assert {c.id for c in triangle.get_connections("C")} == {"AC", "BC"}

    def test_add_connection_missing_joint(self, triangle):
        """Connecting to an absent joint should raise JointNotFoundError."""
        with pytest.raises(JointNotFoundError) as info:
            triangle.add_connection("A", "Z", Connection())

        assert info.value.joint_id == "Z"
        assert isinstance(info.value, KeyError)
        assert "Z" not in triangle.get_joint("A").connections

    def test_add_connection_rejects_self_loop(self, triangle):
        """A joint cannot be connected to itself."""
        with pytest.raises(TrussGraphError):
            triangle.add_connection("A", "A", Connection())

    def test_add_connection_rejects_duplicate_pair(self, triangle):
        """Only one connection may join a pair of joints, in either order."""
        with pytest.raises(TrussGraphError):
            triangle.add_connection("C", "A", Connection())

        assert len(triangle.connections) == 3

    def test_remove_joint_cascades(self, triangle):
        """Removing a joint removes every connection touching it."""
        triangle.remove_joint("C")

        assert triangle.get_joint("C") is None
        assert triangle.connection_ids == ["AB"]
        for connection in triangle.connections:
            assert "C" not in connection.joint_ids
        for joint in triangle.joints:
            assert "C" not in joint.connections
            for connection_id in joint.connections.values():
                assert triangle.get_connection(connection_id) is not None

    def test_constructor_validates_references(self):
        """Connections passed to the constructor must match the joint maps."""
        joints = [Joint((0.0, 0.0), id="A"), Joint((1.0, 0.0), id="B")]

        with pytest.raises(TrussGraphError):
            Truss(joints, [Connection(id="AB", joint_ids=("A", "Z"))])
        with pytest.raises(TrussGraphError):
            Truss(joints, [Connection(id="AB", joint_ids=("A", "B"))])

    def test_constructor_infers_endpoints(self):
        """The constructor takes missing endpoints from the joint maps."""
        joints = [
            Joint((0.0, 0.0), id="A", connections={"B": "AB"}),
            Joint((1.0, 0.0), id="B", connections={"A": "AB"}),
        ]
        truss = Truss(joints, [Connection(id="AB")])

        assert set(truss.get_connection("AB").joint_ids) == {"A", "B"}
        assert truss.get_length("AB") == pytest.approx(1.0)

    def test_remove_absent_ids_is_noop(self, triangle):
        """Removing unknown ids should leave the graph untouched."""
        triangle.remove_joint("Z")
        triangle.remove_connection("ZZ")
        triangle.remove_connection_by_ids("A", "Z")

        assert triangle.size == 3
        assert len(triangle.connections) == 3

    def test_remove_connection(self, triangle):
        """Removing a connection updates both joints."""
        triangle.remove_connection_by_ids("B", "C")

        assert triangle.get_connection("BC") is None
        assert "C" not in triangle.get_joint("B").connections
        assert "B" not in triangle.get_joint("C").connections

    def test_derived_geometry(self, triangle):
        """Lengths and angles should derive from live joint positions."""
        assert triangle.get_length("AB") == pytest.approx(4.0)
        assert triangle.get_length("AC") == pytest.approx(math.sqrt(13))
        assert triangle.get_angle("AC") == pytest.approx(math.atan2(3, 2))

        triangle.get_joint("B").move_by(2, 0)
        assert triangle.get_length("AB") == pytest.approx(6.0)

    def test_bounding_box_and_center(self, triangle):
        """Bounding box should enclose every joint."""
        assert triangle.bounding_box == ((0.0, 0.0), (4.0, 3.0))
        assert triangle.center == (2.0, 1.5)

    def test_cost_and_mass(self, triangle):
        """Cost is 5 per joint plus 15 per member meter times multiplier."""
        total_length = 4.0 + 2 * math.sqrt(13)

        assert triangle.cost == pytest.approx(15 + 15 * total_length)

        triangle.get_connection("AB").multiplier = 2
        assert triangle.cost == pytest.approx(15 + 15 * (total_length + 4.0))
        assert triangle.mass == pytest.approx(7850 * 4e-4 * (total_length + 4.0))


class TestSolver:
    """Test the direct stiffness solver."""

    def test_symmetric_triangle(self, solved_triangle):
        """Symmetric loading should give symmetric reactions and forces."""
        ax, ay = solved_triangle.get_joint("A").force
        bx, by = solved_triangle.get_joint("B").force

        assert ax == pytest.approx(0.0, abs=1e-6)
        assert ay == pytest.approx(500.0)
        assert by == pytest.approx(500.0)
        assert solved_triangle.get_force("AC") == pytest.approx(solved_triangle.get_force("BC"))

    def test_member_force_signs(self, solved_triangle):
        """Rafters are in compression and the tie is in tension."""
        rafter = 1000 * math.sqrt(13) / 6

        assert solved_triangle.get_force("AC") == pytest.approx(-rafter)
        assert solved_triangle.get_force("AB") == pytest.approx(rafter * 2 / math.sqrt(13))
        assert solved_triangle.get_connection("AB").stress_type == "tension"
        assert solved_triangle.get_max_forces() == pytest.approx(
            {"tension": rafter * 2 / math.sqrt(13), "compression": rafter}
        )

    def test_sign_independent_of_member_direction(self, make_triangle):
        """Reversing a member's joint order should not change its stress."""
        truss = Truss()
        a = truss.add_joint(Joint((0.0, 0.0), fixtures=PIN, id="A"))
        b = truss.add_joint(Joint((4.0, 0.0), fixtures=ROLLER_Y, id="B"))
        c = truss.add_joint(Joint((2.0, 3.0), force=(0.0, -1000.0), id="C"))
        truss.add_connection(c.id, a.id, Connection(id="AC"))
        truss.add_connection(c.id, b.id, Connection(id="BC"))
        truss.add_connection(b.id, a.id, Connection(id="AB"))

        reference = make_triangle()
        assert truss.compute() and reference.compute()
        for cid in ("AC", "BC", "AB"):
            assert truss.get_force(cid) == pytest.approx(reference.get_force(cid))

    def test_displacements(self, solved_triangle):
        """Supports do not move; the apex deflects downward."""
        assert solved_triangle.get_joint("A").displacement == (0.0, 0.0)
        assert solved_triangle.get_joint("B").displacement[1] == 0.0
        assert solved_triangle.get_joint("C").displacement[1] < 0

    def test_elongation_matches_displacement(self, solved_triangle):
        """The tie's elongation should equal the roller's horizontal movement."""
        tie = solved_triangle.get_connection("AB")

        assert tie.axial_elongation(4.0) == pytest.approx(
            solved_triangle.get_joint("B").displacement[0]
        )

    def test_reactions(self, solved_triangle):
        """Reactions should balance the applied load."""
        reactions = solved_triangle.reactions

        assert set(reactions) == {"A", "B"}
        assert sum(r[1] for r in reactions.values()) == pytest.approx(1000.0)

    def test_deterministic(self, triangle):
        """Solving twice without changes should give identical results."""
        assert triangle.compute()
        first = [c.stress for c in triangle.connections]
        displacement = triangle.get_joint("C").displacement

        assert triangle.compute()
        assert [c.stress for c in triangle.connections] == first
        assert triangle.get_joint("C").displacement == displacement

    def test_repeated_solves_are_identical(self):
        """Repeated solves of an unchanged truss give bit-identical results."""
        truss = Truss()
        truss.add_joint(Joint((0.0, 0.0), fixtures=PIN, id="A"))
        truss.add_joint(Joint((5.0, 0.0), fixtures=ROLLER_Y, force=(250.0, 0.0), id="B"))
        truss.add_joint(Joint((1.5, 2.5), force=(300.0, -800.0), id="C"))
        truss.add_joint(Joint((3.5, 2.0), force=(0.0, -400.0), id="D"))
        for a, b in [("A", "C"), ("C", "D"), ("D", "B"), ("A", "D"), ("A", "B")]:
            truss.add_connection(a, b, Connection(id=a + b))

        runs = []
        for _ in range(3):
            assert truss.compute()
            runs.append((
                [c.stress for c in truss.connections],
                [j.displacement for j in truss.joints],
            ))

        assert runs[0] == runs[1] == runs[2]

    def test_pratt_solves_are_identical(self):
        """A larger truss should also solve identically every time."""
        bridge = pratt_truss(span=12.0, height=3.0, panels=6, load=-2e4)

        assert bridge.compute()
        first = [c.stress for c in bridge.connections]
        for _ in range(2):
            assert bridge.compute()
            assert [c.stress for c in bridge.connections] == first

    def test_roller_keeps_load_on_free_axis(self):
        """Only the supported component of a roller becomes a reaction."""
        truss = Truss()
        truss.add_joint(Joint((0.0, 0.0), fixtures=PIN, id="A"))
        truss.add_joint(Joint((4.0, 0.0), fixtures=ROLLER_Y, force=(120.0, 0.0), id="B"))
        truss.add_joint(Joint((1.0, 3.0), force=(0.0, -1000.0), id="C"))
        for a, b in [("A", "C"), ("B", "C"), ("A", "B")]:
            truss.add_connection(a, b, Connection(id=a + b))

        assert truss.compute()
        roller = truss.get_joint("B")
        pin = truss.get_joint("A")

        assert roller.force[0] == 120.0
        assert roller.force[1] == pytest.approx(250.0)
        assert pin.force[0] == pytest.approx(-120.0)
        assert pin.force[1] == pytest.approx(750.0)

    def test_singular_transverse_load(self, cantilever_bar):
        """A single bar cannot resist a transverse load."""
        assert cantilever_bar.compute() is False

    def test_failed_solve_leaves_graph_unchanged(self, cantilever_bar):
        """A failed solve must not write partial results."""
        cantilever_bar.get_joint("A").force = (3.0, 4.0)
        cantilever_bar.compute()

        assert cantilever_bar.get_joint("A").force == (3.0, 4.0)
        assert cantilever_bar.get_joint("B").displacement == (0.0, 0.0)
        assert cantilever_bar.get_connection("AB").stress == 0.0

    def test_axial_load_on_bar(self):
        """A bar loaded along its axis is stable once the free joint is guided."""
        truss = Truss()
        truss.add_joint(Joint((0.0, 0.0), fixtures=PIN, id="A"))
        truss.add_joint(Joint((2.0, 0.0), fixtures=ROLLER_Y, force=(1000.0, 0.0), id="B"))
        truss.add_connection("A", "B", Connection(id="AB"))

        assert truss.compute()
        assert truss.get_force("AB") == pytest.approx(1000.0)
        assert truss.get_joint("A").force[0] == pytest.approx(-1000.0)

    def test_zero_length_member(self):
        """Coincident joints make the system ill-posed."""
        truss = Truss()
        truss.add_joint(Joint((0.0, 0.0), fixtures=PIN, id="A"))
        truss.add_joint(Joint((0.0, 0.0), fixtures=PIN, id="B"))
        truss.add_connection("A", "B", Connection())

        assert truss.compute() is False

    def test_unsupported_truss(self, make_triangle):
        """A truss with no supports is a mechanism."""
        truss = make_triangle()
        for joint in truss.joints:
            joint.fixtures = FREE

        assert truss.compute() is False

    def test_stiffer_material_deflects_less(self, make_triangle):
        """Displacement should scale inversely with Young's modulus."""
        steel = make_triangle()
        aluminum = make_triangle()
        for connection in aluminum.connections:
            connection.material = materials.Aluminum()

        assert steel.compute() and aluminum.compute()
        ratio = aluminum.get_joint("C").displacement[1] / steel.get_joint("C").displacement[1]
        assert ratio == pytest.approx(200e9 / materials.Aluminum().E)

    def test_assembled_matrix_is_symmetric(self):
        """The global stiffness matrix should be symmetric."""
        elements = [
            ElementData(i=0, j=1, E=1.0, area=1.0, length=1.0, angle=0.3),
            ElementData(i=1, j=2, E=2.0, area=1.0, length=2.0, angle=1.1),
        ]
        K = assemble_stiffness(3, elements)

        assert K.dtype == DTYPE
        assert torch.allclose(K, K.T)

    def test_solve_reduced_rejects_singular(self):
        """A zero stiffness matrix should raise SingularSystemError."""
        K = torch.zeros((4, 4), dtype=DTYPE)
        F = torch.ones(4, dtype=DTYPE)

        with pytest.raises(SingularSystemError):
            solve_reduced(K, F, fixed_dofs=[0])

    def test_solve_static_all_fixed(self):
        """With every DOF fixed the displacement is zero."""
        elements = [ElementData(i=0, j=1, E=1.0, area=1.0, length=1.0, angle=0.0)]
        solution = solve_static(2, elements, torch.zeros(4, dtype=DTYPE), [0, 1, 2, 3])

        assert torch.count_nonzero(solution.displacements) == 0


class TestCloneAndSerialization:
    """Test deep copies and the JSON exchange format."""

    def test_clone_is_deep(self, triangle):
        """Mutating a clone must not affect the original."""
        copy = triangle.clone()
        copy.get_joint("C").move_by(1, 1)
        copy.get_connection("AB").multiplier = 3
        copy.remove_joint("B")

        assert copy.id == triangle.id
        assert triangle.get_joint("C").position == (2.0, 3.0)
        assert triangle.get_connection("AB").multiplier == 1
        assert triangle.size == 3
        assert triangle.get_joint("A").connections == {"C": "AC", "B": "AB"}

    def test_clone_preserves_ids(self, triangle):
        """Clones should keep every joint and connection id."""
        copy = triangle.clone()

        assert copy.joint_ids == triangle.joint_ids
        assert copy.connection_ids == triangle.connection_ids

    def test_json_schema(self, solved_triangle):
        """The JSON form should follow the exchange schema."""
        data = solved_triangle.to_json()

        assert set(data) == {"joints", "connections"}
        apex = next(j for j in data["joints"] if j["id"] == "C")
        assert "fixtures" not in apex
        assert apex["force"] == [0.0, -1000.0]
        assert apex["connections"] == {"A": "AC", "B": "BC"}
        support = next(j for j in data["joints"] if j["id"] == "A")
        assert support["fixtures"] == {"x": True, "y": True}
        assert "displacement" not in support

    def test_json_roundtrip(self, solved_triangle):
        """from_json(to_json()) should restore ids, geometry and results."""
        text = json.dumps(solved_triangle.to_json())
        restored = Truss.from_json(json.loads(text))

        assert restored.to_json() == solved_triangle.to_json()
        for joint in solved_triangle.joints:
            other = restored.get_joint(joint.id)
            assert other.position == joint.position
            assert other.fixtures == joint.fixtures
            assert other.displacement == joint.displacement

    def test_roundtrip_then_solve_matches(self, triangle):
        """A deserialized truss should solve to the same stresses."""
        restored = Truss.from_json(triangle.to_json())

        assert triangle.compute() and restored.compute()
        for cid in triangle.connection_ids:
            assert restored.get_force(cid) == pytest.approx(triangle.get_force(cid))

    def test_shared_material_after_roundtrip(self, triangle):
        """Members with the same material id should share one instance."""
        restored = Truss.from_json(triangle.to_json())
        first, *rest = restored.connections

        assert all(c.material is first.material for c in rest)

    def test_edited_material_clone_survives_roundtrip(self, triangle):
        """An edited copy under a reused material id keeps its own properties."""
        member = triangle.get_connection("AB")
        member.material = member.material.clone()
        member.material.E = 70e9
        restored = Truss.from_json(triangle.to_json())

        assert restored.get_connection("AB").material.E == 70e9
        assert restored.get_connection("AC").material.E == triangle.get_connection("AC").material.E
        assert restored.get_connection("AC").material is restored.get_connection("BC").material
        assert restored.get_connection("AB").material is not restored.get_connection("AC").material

    def test_missing_joint_ids_are_inferred(self, triangle):
        """Connections without jointIds take endpoints from the joint maps."""
        data = triangle.to_json()
        for connection in data["connections"]:
            del connection["jointIds"]
        restored = Truss.from_json(data)

        assert set(restored.get_connection("BC").joint_ids) == {"B", "C"}
        assert restored.compute()

    def test_missing_sections(self):
        """Data without joints or connections is malformed."""
        with pytest.raises(TrussFormatError):
            Truss.from_json({"joints": []})

    def test_dangling_reference(self, triangle):
        """A connection referencing a missing joint is malformed."""
        data = triangle.to_json()
        data["joints"] = [j for j in data["joints"] if j["id"] != "B"]

        with pytest.raises(TrussFormatError):
            Truss.from_json(data)

    def test_duplicate_ids(self, triangle):
        """Duplicate joint ids are malformed."""
        data = triangle.to_json()
        data["joints"].append(dict(data["joints"][0]))

        with pytest.raises(TrussFormatError):
            Truss.from_json(data)
