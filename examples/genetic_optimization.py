"""
Example 2: Genetic Optimization

Start from a Pratt truss and let the genetic optimizer move the top chord
joints and reinforce members to reduce cost while keeping every member
within its strength.
"""

from truss_engine import (
    FitnessWeights,
    MutationConfig,
    TrussConstraints,
    TrussOptimizer,
    materials,
    pratt_truss,
)


def main():
    print("=" * 60)
    print("  Truss Engine - Genetic Optimization")
    print("=" * 60)

    bridge = pratt_truss(
        span=18.0,
        height=4.0,
        panels=6,
        load=-25e3,
        material=materials.StructuralSteel(),
        area=8e-4,
    )
    print(f"\nInitial design: {bridge.size} joints, {len(bridge.connections)} members")
    print(f"  Cost: {bridge.cost:.1f}")
    print(f"  Mass: {bridge.mass:.1f} kg")

    optimizer = TrussOptimizer(
        bridge,
        constraints=TrussConstraints(min_length=1.5, max_length=6.0),
        weights=FitnessWeights(cost=1.0, efficiency=50.0),
        # Keep the deck level: only the unloaded top chord moves
        mutation=MutationConfig(max_offset=0.3, max_multiplier=3, lock_loaded_joints=True),
        size=80,
        mutation_rate=0.4,
        seed=42,
    )

    result = optimizer.optimize(generations=200, log_interval=20)
    result.print_summary()

    best = result.history['best']
    print(f"\nFitness went from {best[0]:.2f} to {best[-1]:.2f} over {result.generations} generations")

    result.export("optimized_pratt.json")
    print("Saved optimized truss to optimized_pratt.json")


if __name__ == "__main__":
    main()
