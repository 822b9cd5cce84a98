"""
Example 1: Basic Truss Analysis

Build a small truss joint by joint, solve it with the direct stiffness
method and inspect forces, reactions and displacements.
"""

from truss_engine import PIN, ROLLER_Y, Connection, Joint, Truss, materials


def main():
    print("=" * 60)
    print("  Truss Engine - Basic Analysis")
    print("=" * 60)

    # Step 1: Pick a material
    material = materials.Aluminum()
    print(f"\nMaterial: {material}")
    print(f"  Young's Modulus: {material.E/1e9:.1f} GPa")
    print(f"  Compressive Strength: {material.sigma_compression/1e6:.1f} MPa")
    print(f"  Tensile Strength: {material.sigma_tension/1e6:.1f} MPa")

    # Step 2: Joints. Supports are fixtures, loads are joint forces (N)
    truss = Truss()
    a = truss.add_joint(Joint((0.0, 0.0), fixtures=PIN))
    b = truss.add_joint(Joint((4.0, 0.0), fixtures=ROLLER_Y))
    c = truss.add_joint(Joint((2.0, 3.0), force=(2e3, -10e3)))

    # Step 3: Members
    for p, q in [(a, c), (b, c), (a, b)]:
        truss.add_connection(p.id, q.id, Connection(area=3e-4, material=material))

    # Step 4: Solve
    if not truss.compute():
        print("\nThe truss is a mechanism; nothing to report.")
        return

    names = {a.id: "A", b.id: "B", c.id: "C"}

    print("\nMember forces:")
    for connection in truss.connections:
        i, j = connection.joint_ids
        length = truss.get_length(connection.id)
        print(
            f"  {names[i]}{names[j]}: {connection.force/1e3:8.2f} kN ({connection.stress_type}), "
            f"utilization {connection.get_utilization(length, simple=False):.3f}"
        )

    print("\nReactions:")
    for joint_id, (rx, ry) in truss.reactions.items():
        print(f"  {names[joint_id]}: Rx = {rx/1e3:7.2f} kN, Ry = {ry/1e3:7.2f} kN")

    dx, dy = truss.get_joint(c.id).displacement
    print(f"\nApex displacement: ({dx*1e3:.3f}, {dy*1e3:.3f}) mm")


if __name__ == "__main__":
    main()
