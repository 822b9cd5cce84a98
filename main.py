"""A minimal end-to-end example: build a roof truss, solve it, then let the optimizer improve it."""

import json

from truss_engine import (
    PIN,
    ROLLER_Y,
    Connection,
    Joint,
    Truss,
    TrussAnalyzer,
    TrussConstraints,
    TrussOptimizer,
    materials,
)

steel = materials.StructuralSteel()

# A simple king-post style roof truss, 8 m span, 2 m rise
truss = Truss()
left = truss.add_joint(Joint((0.0, 0.0), fixtures=PIN))
right = truss.add_joint(Joint((8.0, 0.0), fixtures=ROLLER_Y))
apex = truss.add_joint(Joint((4.0, 2.0), force=(0.0, -15e3)))
mid = truss.add_joint(Joint((4.0, 0.0), force=(0.0, -5e3)))
quarter_l = truss.add_joint(Joint((2.0, 1.0), force=(0.0, -10e3)))
quarter_r = truss.add_joint(Joint((6.0, 1.0), force=(0.0, -10e3)))

for a, b in [
    (left, quarter_l), (quarter_l, apex), (apex, quarter_r), (quarter_r, right),  # rafters
    (left, mid), (mid, right),                                                     # tie
    (apex, mid), (quarter_l, mid), (quarter_r, mid),                               # web
]:
    truss.add_connection(a.id, b.id, Connection(area=6e-4, material=steel))

if not truss.compute():
    raise SystemExit("The truss is unstable. Check supports and members.")

print("ORIGINAL:")
TrussAnalyzer(truss).print_report()

# Optimize it: members may not carry more than 120 kN and must stay 1-5 m long
constraints = TrussConstraints(max_compression=120e3, max_tension=120e3, min_length=1.0, max_length=5.0)
optimizer = TrussOptimizer(truss, constraints=constraints, size=60, mutation_rate=0.3, seed=7)
result = optimizer.optimize(generations=150, log_interval=25)

print("\nOPTIMIZED:")
result.print_summary()
TrussAnalyzer(result.truss).print_report()

if False:
    # Dump the optimized truss in the exchange format
    print(json.dumps(result.truss.to_json(), indent=2))
