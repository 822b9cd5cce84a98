"""
Example 3: Multiple Optimization Trials

A genetic search can settle on a poor design. Running several seeds and
comparing the outcomes shows how reliable the result is.
"""

from truss_engine import pratt_truss, run_optimization_trials


def main():
    bridge = pratt_truss(span=12.0, height=3.0, panels=4, load=-20e3)

    results = run_optimization_trials(
        bridge,
        n_trials=8,
        generations=60,
        save_dir="./trial_results",
        size=40,
        mutation_rate=0.3,
    )

    print(results.summary())

    print("\nTop 3 by cost:")
    for i, result in enumerate(results.top_n(3, by='cost'), start=1):
        print(f"  {i}. seed {result.seed}: cost {result.cost:.1f}, fitness {result.fitness:.2f}")


if __name__ == "__main__":
    main()
