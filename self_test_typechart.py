from Data.battle_helper import type_effectiveness
from Data.poke_env_moves_info import MovesInfo

EXPECTED = [
    ("Dark", "Fairy", 0.5),
    ("Fairy", "Dark", 2.0),
    ("Fire", "Grass", 2.0),
    ("Fire", "Water", 0.5),
    ("Water", "Fire", 2.0),
    ("Fighting", "Ghost", 0.0),
    ("Ghost", "Normal", 0.0),
    ("Electric", "Ground", 0.0),
    ("Fire", "Ground", 1.0),
    ("Fire", "Poison", 1.0),
]

# (move type, defender types, move id, inverse, expected)
COMBINED = [
    ("Fire", ["Poison", "Ground"], None, False, 1.0),
    ("Electric", ["Water", "Flying"], None, False, 4.0),
    ("Ice", ["Water"], "freezedry", False, 2.0),
    ("Electric", ["Ground"], None, True, 2.0),
    ("Fire", ["Water"], None, True, 2.0),
]


def run_self_test(gen: int = 9) -> int:
    tc = MovesInfo(gen).get_type_chart()
    fails = []

    for atk, dfd, exp in EXPECTED:
        got = tc.get(atk, {}).get(dfd)
        if got is None:
            fails.append(f"MISSING {atk}->{dfd} (expected {exp})")
        elif abs(got - exp) > 1e-9:
            fails.append(f"WRONG {atk}->{dfd}: got {got} expected {exp}")

    combined = []
    for move_type, types, move_id, inverse, exp in COMBINED:
        got = type_effectiveness(move_type, types, tc, move_id=move_id, inverse=inverse)
        combined.append((move_type, types, move_id, inverse, got, exp))
        if abs(got - exp) > 1e-9:
            fails.append(f"WRONG {move_id or move_type} vs {'/'.join(types)}"
                         f"{' (inverse)' if inverse else ''}: got {got} expected {exp}")

    print("Type Chart Self-Test")
    print("====================")
    for atk, dfd, exp in EXPECTED:
        print(f"{atk:9s} -> {dfd:7s} = {tc.get(atk, {}).get(dfd)} (expected {exp})")
    for move_type, types, move_id, inverse, got, exp in combined:
        label = move_id or move_type
        print(f"{label:9s} -> {'/'.join(types):14s}{' inverse' if inverse else ''} = {got} (expected {exp})")

    if fails:
        print("\nFAILURES:")
        for f in fails:
            print(" -", f)
        return 1
    print("\nAll checks passed.")
    return 0


if __name__ == "__main__":
    code = run_self_test()
    raise SystemExit(code)
