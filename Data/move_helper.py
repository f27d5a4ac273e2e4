"""Effective move typing and redirection."""

from __future__ import annotations

from poke_env.data.normalize import to_id_str

from Data.abilities import ability_is_enabled, holds_item, move_breaks_ability
from Data.dex_registry import NATURAL_GIFT_TYPES, item_type
from Data.global_status import is_rainy, is_sandstorm, is_snowy, is_sunny
from Data.poke_env_moves_info import find_move
from Data.pokemon_helper import current_types, is_grounded, type_name
from Knowledge.battle import ActivePokemon, Battle, BattleFields, Player, compare_ids

_ATE_TYPES = {
    "aerilate": "Flying",
    "galvanize": "Electric",
    "pixilate": "Fairy",
    "refrigerate": "Ice",
}

_RAGING_BULL_TYPES = {
    "taurospaldeacombat": "Fighting",
    "taurospaldeablaze": "Fire",
    "taurospaldeaaqua": "Water",
}

_TERRAIN_TYPES = (
    (BattleFields.ElectricTerrain, "Electric"),
    (BattleFields.GrassyTerrain, "Grass"),
    (BattleFields.MistyTerrain, "Fairy"),
    (BattleFields.PsychicTerrain, "Psychic"),
)


def get_move_real_type(battle: Battle, pokemon: ActivePokemon, move: str) -> str:
    """Type the move will actually have when `pokemon` uses it now."""
    gen = battle.status.gen
    move_data = find_move(gen, move)
    mid = move_data.id
    move_type = move_data.type or "???"
    ability_on = ability_is_enabled(battle, pokemon)
    ability = to_id_str(pokemon.ability.ability)

    if ability_on and ability == "normalize":
        return "Normal"

    if mid == "terablast" and pokemon.details.terastallized:
        return type_name(pokemon.details.terastallized)

    if mid == "aurawheel":
        return "Dark" if compare_ids(pokemon.details.species, "Morpeko-Hangry") else "Electric"

    if mid == "weatherball":
        if not holds_item(battle, pokemon, "Utility Umbrella"):
            if is_sunny(battle):
                return "Fire"
            if is_snowy(battle):
                return "Ice"
            if is_sandstorm(battle):
                return "Rock"
            if is_rainy(battle):
                return "Water"
    elif mid in ("judgment", "technoblast", "multiattack"):
        bound = item_type(gen, pokemon.item.item)
        if bound:
            return bound
    elif mid == "naturalgift":
        gift = NATURAL_GIFT_TYPES.get(to_id_str(pokemon.item.item))
        if gift:
            return gift
    elif mid == "naturepower":
        if is_grounded(battle, pokemon):
            for terrain, t in _TERRAIN_TYPES:
                if terrain in battle.status.fields:
                    return t
    elif mid == "revelationdance":
        types = current_types(battle, pokemon)
        return types[0] if types else "???"
    elif mid == "ragingbull":
        bull = _RAGING_BULL_TYPES.get(to_id_str(pokemon.details.species))
        if bull:
            return bull

    if ability_on:
        if ability in _ATE_TYPES and move_type == "Normal":
            move_type = _ATE_TYPES[ability]
        elif ability == "liquidvoice" and move_data.has_flag("sound"):
            move_type = "Water"

    return move_type


TARGETS_CANNOT_BE_REDIRECTED = frozenset({
    "self",
    "allAdjacentFoes",
    "foeSide",
    "allySide",
    "allyTeam",
    "allAdjacent",
    "all",
    "allies",
})


def move_is_redirected(battle: Battle, player: Player, pokemon: ActivePokemon, move: str, move_target: str) -> bool:
    """True when a Lightning Rod / Storm Drain holder on the field draws the move in."""
    if move_target in TARGETS_CANNOT_BE_REDIRECTED:
        return False

    move_data = find_move(battle.status.gen, move)
    move_type = get_move_real_type(battle, pokemon, move)

    for target_player in battle.players.values():
        for target in target_player.active.values():
            if player.index == target_player.index and pokemon.slot == target.slot:
                continue
            if target.condition.fainted:
                continue
            if not ability_is_enabled(battle, target):
                continue
            if move_breaks_ability(battle, pokemon, target, move_data):
                continue

            aid = to_id_str(target.ability.ability)
            if aid == "lightningrod" and move_type == "Electric":
                return True
            if aid == "stormdrain" and move_type == "Water":
                return True

    return False
