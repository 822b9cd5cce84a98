"""
Failure analysis and reporting.

This module solves a truss and summarizes, per member, how close it is to
failure, along with the support reactions and the governing member.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from truss_engine.core.base import FailureMode
from truss_engine.core.truss import Truss
from truss_engine.utils.units import (
    meters_to_inches,
    newtons_to_lbf,
    pascals_to_ksi,
)


@dataclass
class MemberReport:
    """Analysis results for a single member."""

    id: str
    length: float
    force: float
    stress: float
    utilization: float
    safety_factor: float
    failure_mode: FailureMode
    multiplier: int = 1

    @property
    def stress_type(self) -> str:
        return "tension" if self.stress >= 0 else "compression"

    @property
    def failed(self) -> bool:
        return self.failure_mode != FailureMode.NONE


class TrussAnalyzer:
    """
    Analyzer for truss member failure with detailed reporting.

    The truss is solved on construction. If the solve fails the analyzer is
    still usable, but ``solved`` is False and member results are empty.

    Args:
        truss: Truss to analyze (solved in place)
        simple: Ignore Euler buckling when computing compressive allowables

    Example:
        >>> from truss_engine import pratt_truss
        >>> from truss_engine.analysis import TrussAnalyzer
        >>>
        >>> analyzer = TrussAnalyzer(pratt_truss(span=12, height=3, panels=4, load=-2e4))
        >>> analyzer.print_report()
    """

    def __init__(self, truss: Truss, simple: bool = False):
        self.truss = truss
        self.simple = simple
        self.solved = truss.compute()
        self._members: Optional[List[MemberReport]] = None

    @property
    def members(self) -> List[MemberReport]:
        """Per-member results in connection order."""
        if self._members is None:
            self._members = [] if not self.solved else [
                self._member_report(cid) for cid in self.truss.connection_ids
            ]
        return self._members

    def _member_report(self, connection_id: str) -> MemberReport:
        connection = self.truss.get_connection(connection_id)
        length = self.truss.get_length(connection_id)
        return MemberReport(
            id=connection_id,
            length=length,
            force=connection.force,
            stress=connection.stress,
            utilization=connection.get_utilization(length, self.simple),
            safety_factor=connection.get_safety_factor(length, self.simple),
            failure_mode=connection.get_failure_mode(length, self.simple),
            multiplier=connection.multiplier,
        )

    @property
    def governing_member(self) -> Optional[MemberReport]:
        """Member with the highest utilization."""
        if not self.members:
            return None
        return max(self.members, key=lambda m: m.utilization)

    @property
    def max_utilization(self) -> float:
        governing = self.governing_member
        return governing.utilization if governing else 0.0

    @property
    def failed_members(self) -> List[MemberReport]:
        return [m for m in self.members if m.failed]

    @property
    def reactions(self) -> Dict[str, Tuple[float, float]]:
        return self.truss.reactions if self.solved else {}

    def format_report(self, unit_system: str = 'metric') -> str:
        """
        Generate a formatted analysis report.

        Args:
            unit_system: 'metric' (m, kN, MPa) or 'imperial' (in, lbf, ksi)

        Returns:
            Formatted report string
        """
        if unit_system == 'imperial':
            length, length_unit = meters_to_inches, 'in'
            force, force_unit = newtons_to_lbf, 'lbf'
            stress, stress_unit = pascals_to_ksi, 'ksi'
        elif unit_system == 'metric':
            length, length_unit = (lambda v: v), 'm'
            force, force_unit = (lambda v: v / 1e3), 'kN'
            stress, stress_unit = (lambda v: v / 1e6), 'MPa'
        else:
            raise ValueError(f"Unknown unit system: {unit_system}")

        (x0, y0), (x1, y1) = self.truss.bounding_box
        lines = [
            "",
            "=" * 78,
            "  STRUCTURAL FAILURE ANALYSIS REPORT",
            "=" * 78,
            "",
            "  TRUSS GEOMETRY",
            "  " + "-" * 40,
            f"  Joints:      {self.truss.size:>10d}",
            f"  Members:     {len(self.truss.connection_ids):>10d}",
            f"  Width:       {length(x1 - x0):>10.2f} {length_unit}",
            f"  Height:      {length(y1 - y0):>10.2f} {length_unit}",
            f"  Mass:        {self.truss.mass:>10.1f} kg",
            f"  Cost:        {self.truss.cost:>10.1f}",
            "",
        ]

        if not self.solved:
            lines.extend([
                "  The stiffness system is singular: the truss is a mechanism",
                "  or is not sufficiently supported. No results available.",
                "",
                "=" * 78,
                "",
            ])
            return "\n".join(lines)

        lines.extend([
            "  MEMBER ANALYSIS",
            "  " + "-" * 40,
            f"  {'#':>3} {'Length':>9} {'Force':>11} {'Stress':>10} {'Util':>7} {'SF':>7}  Mode",
            "  " + "-" * 74,
        ])

        governing = self.governing_member
        for i, member in enumerate(self.members):
            sf = f"{member.safety_factor:.2f}" if member.safety_factor < 100 else ">99"
            marker = " ◀ GOVERNING" if member is governing else ""
            lines.append(
                f"  {i:>3} {length(member.length):>9.3f} {force(member.force):>11.3f} "
                f"{stress(member.stress):>10.2f} {member.utilization:>7.3f} {sf:>7}  "
                f"{member.failure_mode.value}{marker}"
            )

        lines.extend([
            "",
            "  SUPPORT REACTIONS",
            "  " + "-" * 40,
        ])
        for i, joint in enumerate(self.truss.joints):
            if joint.fixed:
                rx, ry = joint.force
                lines.append(
                    f"  Joint {i:>3} ({length(joint.x):.2f}, {length(joint.y):.2f}): "
                    f"Rx = {force(rx):>10.3f} {force_unit}, Ry = {force(ry):>10.3f} {force_unit}"
                )

        max_forces = self.truss.get_max_forces()
        lines.extend([
            "",
            "  SUMMARY",
            "  " + "-" * 40,
            f"  Max Tension:       {force(max_forces['tension']):.3f} {force_unit}",
            f"  Max Compression:   {force(max_forces['compression']):.3f} {force_unit}",
            f"  Max Utilization:   {self.max_utilization:.3f}",
            f"  Failed Members:    {len(self.failed_members)}",
            f"  Units:             {length_unit}, {force_unit}, {stress_unit}",
            "",
            "=" * 78,
            "",
        ])

        return "\n".join(lines)

    def print_report(self, unit_system: str = 'metric') -> None:
        """Print the analysis report to console."""
        print(self.format_report(unit_system))

    def save_report(
        self,
        path: Union[str, Path],
        unit_system: str = 'metric'
    ) -> None:
        """
        Save the analysis report to a file.

        Args:
            path: Output file path
            unit_system: 'metric' or 'imperial'
        """
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.format_report(unit_system))


def analyze_truss(
    truss: Truss,
    print_report: bool = True,
    unit_system: str = 'metric',
    simple: bool = False,
) -> TrussAnalyzer:
    """
    Convenience function to analyze a truss and optionally print a report.

    Args:
        truss: Truss to analyze
        print_report: Whether to print the report
        unit_system: 'metric' or 'imperial'
        simple: Ignore buckling in compressive allowables

    Returns:
        TrussAnalyzer instance
    """
    analyzer = TrussAnalyzer(truss, simple=simple)

    if print_report:
        analyzer.print_report(unit_system)

    return analyzer
