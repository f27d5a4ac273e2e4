"""Team-side helpers: ally ability support, entry hazard damage, recent foe switches."""

from __future__ import annotations

from Data.abilities import ability_is_enabled, holds_item
from Data.battle_helper import type_effectiveness
from Data.global_status import is_sunny
from Data.poke_env_moves_info import _build_static_chart
from Data.pokemon_helper import current_types, is_grounded
from Decision.active_decision import players_are_allies
from Knowledge.battle import ActivePokemon, Battle, Player, SideConditions, compare_ids


def _ally_has_ability(battle: Battle, player: Player, slot: int, ability: str) -> bool:
    for s, active in player.active.items():
        if s == slot:
            continue
        if not compare_ids(active.ability.ability, ability):
            continue
        if ability_is_enabled(battle, active):
            return True
    return False


def check_flower_gift(battle: Battle, player: Player, slot: int) -> bool:
    if not is_sunny(battle):
        return False
    return _ally_has_ability(battle, player, slot, "Flower Gift")


def check_friend_guard(battle: Battle, player: Player, slot: int) -> bool:
    return _ally_has_ability(battle, player, slot, "Friend Guard")


def check_battery(battle: Battle, player: Player, slot: int) -> bool:
    return _ally_has_ability(battle, player, slot, "Battery")


def check_power_spot(battle: Battle, player: Player, slot: int) -> bool:
    return _ally_has_ability(battle, player, slot, "Power Spot")


def calc_hazards_damage(battle: Battle, player: Player, pokemon: ActivePokemon) -> float:
    """Percent HP lost to Stealth Rock and Spikes when switching in on `player`'s side."""
    if ability_is_enabled(battle, pokemon) and compare_ids(pokemon.ability.ability, "Magic Guard"):
        return 0.0

    if holds_item(battle, pokemon, "Heavy-Duty Boots"):
        return 0.0

    res = 0.0

    if SideConditions.StealthRock in player.side_conditions:
        types = current_types(battle, pokemon, "avg")
        res += (100 / 8) * type_effectiveness("Rock", types, _build_static_chart(), inverse=battle.status.inverse)

    spikes = player.side_conditions.get(SideConditions.Spikes)
    if spikes is not None and is_grounded(battle, pokemon):
        res += (100 / 24) * spikes.counter

    return res


def check_foe_switched_last_turn(battle: Battle) -> bool:
    if battle.turn <= 1:
        return False

    for player in battle.players.values():
        if player.index == battle.main_player:
            continue
        if battle.main_player is not None and players_are_allies(battle.status.game_type, player.index, battle.main_player):
            continue
        for active in player.active.values():
            if active.switched_on_turn == battle.turn - 1:
                return True

    return False
