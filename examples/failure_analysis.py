"""
Example 4: Failure Analysis

Compare how different materials and cross sections behave on the same
Pratt truss, with and without Euler buckling checks.
"""

from truss_engine import Profile, TrussAnalyzer, materials, pratt_truss


def main():
    candidates = [
        ("Steel, round bar", materials.StructuralSteel(), Profile.circular()),
        ("Steel, round tube", materials.StructuralSteel(), Profile.hollow_circular(thickness=0.003)),
        ("Aluminum, box tube", materials.Aluminum(), Profile.hollow_rectangular(0.08, 0.08, 0.004)),
        ("Timber, rectangle", materials.Timber(), Profile.rectangular(width=1, height=2)),
    ]

    print(f"{'Design':<22} {'Simple':>8} {'Buckling':>9}  Governing mode")
    print("-" * 60)
    for label, material, profile in candidates:
        bridge = pratt_truss(span=12.0, height=3.0, panels=4, load=-20e3,
                             material=material, area=1e-3, profile=profile)

        simple = TrussAnalyzer(bridge, simple=True)
        detailed = TrussAnalyzer(bridge, simple=False)
        governing = detailed.governing_member

        print(
            f"{label:<22} {simple.max_utilization:>8.3f} {detailed.max_utilization:>9.3f}  "
            f"{governing.failure_mode.value}"
        )

    # Full report for the last design, in imperial units
    detailed.print_report(unit_system='imperial')
    detailed.save_report("failure_report.txt")


if __name__ == "__main__":
    main()
