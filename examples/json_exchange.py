"""
Example 5: JSON Exchange Format

Trusses serialize to the editor's JSON format and load back with every id,
support, load and material intact.
"""

import json

from truss_engine import Truss, TrussFormatError, pratt_truss


def main():
    bridge = pratt_truss(panels=2)
    bridge.compute()

    text = json.dumps(bridge.to_json(), indent=2)
    print(text)

    restored = Truss.from_json(json.loads(text))
    print(f"\nRestored {restored.size} joints and {len(restored.connections)} members")
    print(f"Same ids: {restored.joint_ids == bridge.joint_ids}")

    try:
        Truss.from_json({"joints": [{"id": "a"}], "connections": []})
    except TrussFormatError as e:
        print(f"\nRejected malformed input: {e}")


if __name__ == "__main__":
    main()
