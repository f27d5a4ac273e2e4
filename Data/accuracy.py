"""
accuracy.py
-----------
Hit chance of a move in [0, 1].

Order of checks: gimmick moves, No Guard, OHKO formula, Telekinesis, weather
sure-hits, then base accuracy scaled by Wide Lens / Compound Eyes and the
accuracy / evasion stage tables.
"""

from __future__ import annotations

from typing import Optional

from poke_env.data.normalize import to_id_str

from Data.abilities import ability_is_enabled, holds_item
from Data.global_status import is_rainy, is_snowy
from Data.poke_env_moves_info import find_move
from Knowledge.battle import ActivePokemon, Battle, Player, VolatileStatuses, compare_ids

OHKO_MOVES = frozenset({"fissure", "sheercold", "horndrill", "guillotine"})

IGNORE_EVASION_MOVES = frozenset({"chipaway", "darkestlariat", "sacredsword"})

BOOST_TABLE = (1 / 3, 0.36, 0.43, 0.5, 0.66, 0.75, 1, 1.33, 1.66, 2, 2.33, 2.66, 3)

SURE_HIT_GIMMICKS = frozenset({"dynamax", "max-move", "z-move"})


def stage_multiplier(stage: int) -> float:
    return BOOST_TABLE[max(-6, min(6, stage)) + 6]


def get_move_accuracy(gen: int, move: str) -> float:
    acc = find_move(gen, move).accuracy
    if acc is True or acc is None:
        return 1.0
    return float(acc) / 100


async def calc_move_accuracy(battle: Battle, attacker_player: Player, attacker: ActivePokemon,
                             defender_player: Player, defender: ActivePokemon, move: str,
                             gimmick: Optional[str] = None) -> float:
    if gimmick in SURE_HIT_GIMMICKS:
        return 1.0

    if ability_is_enabled(battle, attacker) and compare_ids(attacker.ability.ability, "No Guard"):
        return 1.0
    if ability_is_enabled(battle, defender) and compare_ids(defender.ability.ability, "No Guard"):
        return 1.0

    mid = to_id_str(move)

    if mid in OHKO_MOVES:
        return 0.3 * (attacker.details.level / (defender.details.level or 100))

    if VolatileStatuses.Telekinesis in defender.volatiles:
        return 1.0

    if mid == "thunder" and is_rainy(battle):
        return 1.0
    if mid == "blizzard" and is_snowy(battle):
        return 1.0

    accuracy = get_move_accuracy(battle.status.gen, mid)

    if holds_item(battle, attacker, "Wide Lens"):
        accuracy *= 1.1

    if ability_is_enabled(battle, attacker) and compare_ids(attacker.ability.ability, "Compound Eyes"):
        accuracy *= 1.3

    if "accuracy" in attacker.boosts:
        accuracy *= stage_multiplier(attacker.boosts["accuracy"])

    move_data = find_move(battle.status.gen, mid)
    if mid not in IGNORE_EVASION_MOVES and not move_data.ignore_evasion and "evasion" in defender.boosts:
        accuracy *= stage_multiplier(-defender.boosts["evasion"])

    return min(1.0, max(0.0, accuracy))
