"""
Tests for constraint checking, failure reports and the Pratt builder.

Run with: pytest tests/ -v
"""

import math

import pytest

from truss_engine import (
    FailureMode,
    TrussAnalyzer,
    TrussConstraints,
    check_constraints,
    materials,
    pratt_truss,
)
from truss_engine.analysis import ConstraintViolations

RAFTER_FORCE = 1000 * math.sqrt(13) / 6  # compression in AC and BC
TIE_FORCE = RAFTER_FORCE * 2 / math.sqrt(13)  # tension in AB


class TestConstraints:
    """Test the per-predicate violation tally."""

    def test_no_constraints(self, solved_triangle):
        """Disabled bounds should never be violated."""
        violations = check_constraints(solved_triangle, TrussConstraints())

        assert violations.as_tuple() == (0, 0, 0, 0)
        assert not violations

    def test_zero_bound_disables_predicate(self, solved_triangle):
        """A zero bound is treated as disabled."""
        constraints = TrussConstraints(max_compression=0, max_tension=0, min_length=0, max_length=0)

        assert check_constraints(solved_triangle, constraints).total == 0

    def test_compression(self, solved_triangle):
        """Both rafters exceed a compression bound below their force."""
        violations = check_constraints(
            solved_triangle, TrussConstraints(max_compression=RAFTER_FORCE - 1)
        )

        assert violations.compression == 2
        assert violations.tension == 0

    def test_tension(self, solved_triangle):
        """Only the tie exceeds a tension bound below its force."""
        violations = check_constraints(solved_triangle, TrussConstraints(max_tension=TIE_FORCE - 1))

        assert violations.as_tuple() == (0, 1, 0, 0)

    def test_multiplier_widens_threshold(self, solved_triangle):
        """A reinforced member tolerates proportionally more force."""
        solved_triangle.get_connection("AC").multiplier = 2
        violations = check_constraints(
            solved_triangle, TrussConstraints(max_compression=RAFTER_FORCE - 1)
        )

        assert violations.compression == 1

    def test_lengths(self, solved_triangle):
        """Length bounds should be checked independently."""
        violations = check_constraints(
            solved_triangle, TrussConstraints(min_length=3.7, max_length=3.9)
        )

        assert violations.min_length == 2
        assert violations.max_length == 1
        assert violations.total == 3

    def test_weighted(self):
        """Weights should apply per violation type."""
        violations = ConstraintViolations(compression=1, tension=2, min_length=3, max_length=4)

        assert violations.weighted(10, 100, 0, 1) == 1 * 10 + 2 * 100 + 4

    def test_negative_bound(self):
        """Negative bounds are invalid."""
        with pytest.raises(ValueError):
            TrussConstraints(max_tension=-1)


class TestAnalyzer:
    """Test failure analysis reporting."""

    def test_members(self, triangle):
        """The analyzer should solve the truss and report every member."""
        analyzer = TrussAnalyzer(triangle)

        assert analyzer.solved
        assert [m.id for m in analyzer.members] == ["AC", "BC", "AB"]
        assert analyzer.members[0].stress_type == "compression"
        assert analyzer.members[2].force == pytest.approx(TIE_FORCE)

    def test_governing_member(self, triangle):
        """The governing member has the highest utilization."""
        analyzer = TrussAnalyzer(triangle)
        governing = analyzer.governing_member

        assert governing.utilization == max(m.utilization for m in analyzer.members)
        assert analyzer.max_utilization == governing.utilization

    def test_failed_members(self, make_triangle):
        """An overloaded truss should report failing members."""
        analyzer = TrussAnalyzer(make_triangle(load=(0.0, -1e6)))

        assert analyzer.failed_members
        assert all(m.failure_mode is not FailureMode.NONE for m in analyzer.failed_members)

    def test_report_contents(self, triangle):
        """The report should include members, reactions and the governing marker."""
        report = TrussAnalyzer(triangle).format_report()

        assert "STRUCTURAL FAILURE ANALYSIS REPORT" in report
        assert "SUPPORT REACTIONS" in report
        assert "GOVERNING" in report
        assert "kN" in report

    def test_imperial_report(self, triangle):
        """Imperial reports use inches and pounds-force."""
        report = TrussAnalyzer(triangle).format_report('imperial')

        assert "lbf" in report
        assert "ksi" in report

    def test_unknown_unit_system(self, triangle):
        """Unknown unit systems should be rejected."""
        with pytest.raises(ValueError):
            TrussAnalyzer(triangle).format_report('cubits')

    def test_unsolvable_truss(self, cantilever_bar):
        """A mechanism should produce a report without member results."""
        analyzer = TrussAnalyzer(cantilever_bar)

        assert not analyzer.solved
        assert analyzer.members == []
        assert analyzer.governing_member is None
        assert "singular" in analyzer.format_report()

    def test_save_report(self, triangle, tmp_path):
        """Reports should be written to disk."""
        path = tmp_path / "report.txt"
        TrussAnalyzer(triangle).save_report(path)

        assert "MEMBER ANALYSIS" in path.read_text(encoding="utf-8")


class TestPrattTruss:
    """Test the parametric Pratt truss builder."""

    @pytest.fixture
    def bridge(self):
        return pratt_truss(span=12.0, height=3.0, panels=4, load=-2e4)

    def test_topology(self, bridge):
        """A Pratt truss is statically determinate: m = 2j - 3."""
        assert bridge.size == 8
        assert len(bridge.connections) == 2 * bridge.size - 3

    def test_supports(self, bridge):
        """Exactly two supports: a pin and a roller."""
        supports = [j for j in bridge.joints if j.fixed]

        assert len(supports) == 2
        assert supports[0].fixtures.x and supports[0].fixtures.y
        assert not supports[1].fixtures.x and supports[1].fixtures.y

    def test_symmetric_reactions(self, bridge):
        """Each support carries half of the panel loads."""
        assert bridge.compute()
        reactions = list(bridge.reactions.values())

        assert reactions[0][1] == pytest.approx(3e4)
        assert reactions[1][1] == pytest.approx(3e4)

    def test_chord_forces(self, bridge):
        """Top chord is compressed, bottom chord is stretched, diagonals pull."""
        assert bridge.compute()

        for connection in bridge.connections:
            a, b = bridge.get_endpoints(connection.id)
            if a.y == b.y == 3.0:
                assert connection.force < 0
            elif a.y == b.y == 0.0:
                assert connection.force > 0
            elif a.x != b.x and {a.x, b.x} not in ({0.0, 3.0}, {12.0, 9.0}):
                assert connection.force > 0

    def test_material(self):
        """Every member should use the requested material."""
        bridge = pratt_truss(material=materials.Aluminum())

        assert {c.material.id for c in bridge.connections} == {"aluminum"}

    def test_invalid_panels(self):
        """Odd or too few panels are rejected."""
        with pytest.raises(ValueError):
            pratt_truss(panels=3)
        with pytest.raises(ValueError):
            pratt_truss(panels=0)
