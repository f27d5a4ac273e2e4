import asyncio

from Data.accuracy import calc_move_accuracy
from Knowledge.battle import (
    AbilityKnowledge,
    ActivePokemon,
    GlobalCondition,
    ItemKnowledge,
    PokemonDetails,
    PokemonIdent,
    VolatileStatuses,
)
from Knowledge.initializers import create_battle, create_player


def _active(player_index: int, species: str, level: int = 100, ability: str = "", item: str = "") -> ActivePokemon:
    return ActivePokemon(
        slot=0,
        ident=PokemonIdent(player_index=player_index, name=species),
        index=0,
        details=PokemonDetails(species=species, level=level),
        item=ItemKnowledge(known=bool(item), item=item),
        ability=AbilityKnowledge(known=bool(ability), ability=ability, base_ability=ability),
    )


def _case(name, move, expected, attacker=None, defender=None, weather=None, gimmick=None):
    return name, move, expected, attacker or {}, defender or {}, weather, gimmick


CASES = [
    _case("plain 100%", "thunderbolt", 1.0),
    _case("plain 70%", "thunder", 0.7),
    _case("thunder in rain", "thunder", 1.0, weather="raindance"),
    _case("blizzard in snow", "blizzard", 1.0, weather="snow"),
    _case("max move", "thunder", 1.0, gimmick="dynamax"),
    _case("no guard", "focusblast", 1.0, attacker={"ability": "noguard"}),
    _case("compound eyes", "focusblast", 0.91, attacker={"ability": "compoundeyes"}),
    _case("wide lens", "thunder", 0.77, attacker={"item": "widelens"}),
    _case("ohko equal levels", "fissure", 0.3),
    _case("ohko higher level", "sheercold", 0.6, attacker={"level": 100}, defender={"level": 50}),
    _case("+1 accuracy", "focusblast", 0.931, attacker={"boosts": {"accuracy": 1}}),
    _case("+2 evasion", "thunderbolt", 0.66, defender={"boosts": {"evasion": 2}}),
    _case("sacred sword ignores evasion", "sacredsword", 1.0, defender={"boosts": {"evasion": 2}}),
    _case("telekinesis", "focusblast", 1.0, defender={"volatiles": {VolatileStatuses.Telekinesis}}),
]


def _build(traits: dict, player_index: int, species: str) -> ActivePokemon:
    active = _active(player_index, species, traits.get("level", 100), traits.get("ability", ""), traits.get("item", ""))
    active.boosts = dict(traits.get("boosts", {}))
    active.volatiles = set(traits.get("volatiles", ()))
    return active


async def _accuracy(gen, move, attacker_spec, defender_spec, weather, gimmick) -> float:
    battle = create_battle("battle-selftest-1")
    battle.status.gen = gen
    if weather:
        battle.status.weather = GlobalCondition(id=weather)
    p1, p2 = create_player(0), create_player(1)
    battle.players = {0: p1, 1: p2}
    battle.main_player = 0
    attacker = _build(attacker_spec, 0, "Machamp")
    defender = _build(defender_spec, 1, "Snorlax")
    p1.active[0] = attacker
    p2.active[0] = defender
    return await calc_move_accuracy(battle, p1, attacker, p2, defender, move, gimmick)


def run_self_test(gen: int = 9) -> int:
    fails = []
    rows = []
    for name, move, expected, attacker, defender, weather, gimmick in CASES:
        got = asyncio.run(_accuracy(gen, move, attacker, defender, weather, gimmick))
        rows.append((name, move, got, expected))
        if abs(got - expected) > 1e-3:
            fails.append(f"WRONG {name} ({move}): got {got:.3f} expected {expected}")

    print("Accuracy Self-Test")
    print("==================")
    for name, move, got, expected in rows:
        print(f"{name:30s} {move:12s} = {got:.3f} (expected {expected})")

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
