"""Ability / item activity checks and the unknown-knowledge defaults."""

from __future__ import annotations

from poke_env.data.normalize import to_id_str

from Knowledge.battle import (
    AbilityEffects,
    AbilityKnowledge,
    ActivePokemon,
    Battle,
    BattleFields,
    ItemKnowledge,
    VolatileStatuses,
    compare_ids,
)
from Data.poke_env_moves_info import MoveInfo

# ---- Items ----

def item_is_enabled(battle: Battle, pokemon: ActivePokemon) -> bool:
    if BattleFields.MagicRoom in battle.status.fields:
        return False
    if VolatileStatuses.Embargo in pokemon.volatiles:
        return False
    return True


def holds_item(battle: Battle, pokemon: ActivePokemon, item: str) -> bool:
    """True if the pokemon holds `item` and items currently work for it."""
    return compare_ids(pokemon.item.item, item) and item_is_enabled(battle, pokemon)


def unknown_item() -> ItemKnowledge:
    return ItemKnowledge(known=False, revealed=False, item="")


# ---- Abilities ----

def ability_is_enabled(battle: Battle, pokemon: ActivePokemon) -> bool:
    if battle.status.gen < 3:
        # no abilities before gen 3
        return False

    if battle.status.gen == 7 and to_id_str(battle.status.tier).startswith("gen7letsgo"):
        return False

    if VolatileStatuses.GastroAcid in pokemon.volatiles:
        return False

    if AbilityEffects.NeutralizingGas in battle.status.ability_effects:
        # only Ability Shield keeps it working
        if not holds_item(battle, pokemon, "Ability Shield"):
            return False

    return True


def has_ability(battle: Battle, pokemon: ActivePokemon, ability: str) -> bool:
    return compare_ids(pokemon.ability.ability, ability) and ability_is_enabled(battle, pokemon)


BREAKING_ABILITY_MOVES = frozenset(to_id_str(m) for m in (
    "G-Max Drum Solo",
    "G-Max Fireball",
    "G-Max Hydrosnipe",
    "Light That Burns the Sky",
    "Menacing Moonraze Maelstrom",
    "Moongeist Beam",
    "Photon Geyser",
    "Searing Sunraze Smash",
    "Sunsteel Strike",
))

MOLD_BREAKER_LIKE_ABILITIES = frozenset({"moldbreaker", "teravolt", "turboblaze"})


def move_breaks_ability(battle: Battle, attacker: ActivePokemon, defender: ActivePokemon, move: MoveInfo) -> bool:
    shielded = holds_item(battle, defender, "Ability Shield")

    if ability_is_enabled(battle, attacker):
        aid = to_id_str(attacker.ability.ability)
        if aid in MOLD_BREAKER_LIKE_ABILITIES and not shielded:
            return True
        if aid == "myceliummight" and move.category == "Status" and not shielded:
            return True

    if move.id in BREAKING_ABILITY_MOVES and not shielded:
        return True

    return False


def unknown_ability() -> AbilityKnowledge:
    return AbilityKnowledge(known=False, revealed=False, ability="", base_ability="", activation_count=0)


PERMANENT_ABILITIES = frozenset(to_id_str(a) for a in (
    "As One",
    "Battle Bond",
    "Comatose",
    "Commander",
    "Disguise",
    "Gulp Missile",
    "Hadron Engine",
    "Ice Face",
    "Multitype",
    "Orichalcum Pulse",
    "Power Construct",
    "Protosynthesis",
    "Quark Drive",
))
