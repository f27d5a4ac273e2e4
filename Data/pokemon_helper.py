"""
pokemon_helper.py
-----------------
Per-combatant mechanics over the knowledge store: grounding, trapping, the
type / stat / disguise overlays used to build oracle inputs, stat ranges from
details, turn recovery and a few defender properties used by the strategies.
"""

from __future__ import annotations

import copy
from typing import List, Optional

from poke_env.data.normalize import to_id_str

from Data.abilities import ability_is_enabled, holds_item, unknown_ability, unknown_item
from Data.damage_helper import CalcPokemon
from Data.dex_registry import calc_stat, find_species, forme_for_item, UNKNOWN_TYPE
from Knowledge.battle import (
    ActivePokemon,
    Battle,
    BattleFields,
    Player,
    PokemonCondition,
    PokemonDetails,
    PokemonIdent,
    PokemonKnownStats,
    SidePokemon,
    SingleTurnStatuses,
    StatKnowledge,
    VolatileStatuses,
    compare_ids,
    get_hp_percent,
)
from Knowledge.request import RequestActivePokemon

STAT_KEYS = ("hp", "atk", "def", "spa", "spd", "spe")

TYPE_NAMES = {
    to_id_str(t): t for t in (
        "Normal", "Fire", "Water", "Electric", "Grass", "Ice", "Fighting", "Poison",
        "Ground", "Flying", "Psychic", "Bug", "Rock", "Ghost", "Dragon", "Dark",
        "Steel", "Fairy", "Stellar",
    )
}


def type_name(type_id: Optional[str]) -> str:
    return TYPE_NAMES.get(to_id_str(type_id or ""), UNKNOWN_TYPE)


def _stat_value(knowledge: StatKnowledge, mode: str) -> int:
    if mode == "max":
        return knowledge.max
    if mode == "min":
        return knowledge.min
    return int(round((knowledge.max + knowledge.min) / 2))


# ---- Calc object overlays ----

def new_calc_pokemon(gen: int, species: str) -> CalcPokemon:
    data = find_species(gen, species)
    return CalcPokemon(
        species=data.name,
        types=list(data.types),
        original_types=list(data.types),
        weightkg=data.weightkg,
    )


def apply_illusion(battle: Battle, poke: CalcPokemon, active: ActivePokemon) -> None:
    """A combatant known to be disguised is evaluated as its guessed true species."""
    vd = active.volatiles_data
    if vd.fake and vd.fake_guess:
        data = find_species(battle.status.gen, vd.fake_guess)
        poke.species = data.name
        poke.types = list(data.types)
        poke.original_types = list(data.types)
        poke.weightkg = data.weightkg


def apply_transform(battle: Battle, poke: CalcPokemon, active: ActivePokemon, mode: str) -> None:
    info = active.volatiles_data.transformed_info
    if VolatileStatuses.Transform not in active.volatiles or info is None:
        return
    data = find_species(battle.status.gen, info.details.species)
    poke.species = data.name
    poke.types = list(data.types)
    poke.original_types = list(data.types)
    poke.gender = info.details.gender
    for s in STAT_KEYS[1:]:
        poke.stats[s] = _stat_value(info.stats.get(s), mode)


def apply_type_changes(poke: CalcPokemon, active: ActivePokemon) -> None:
    roosting = SingleTurnStatuses.Roost in active.single_turn_statuses

    if active.details.terastallized:
        tera = type_name(active.details.terastallized)
        poke.types = [tera]
        poke.tera_type = tera
        if roosting:
            poke.types = [t for t in poke.types if t != "Flying"]
        # tera ignores any other type change
        return

    if VolatileStatuses.TypeAdd in active.volatiles:
        poke.types.append(type_name(active.volatiles_data.type_added))

    if VolatileStatuses.TypeChange in active.volatiles:
        poke.types = [type_name(t) for t in (active.volatiles_data.types_changed or [UNKNOWN_TYPE])]

    if roosting:
        poke.types = [t for t in poke.types if t != "Flying"]


def apply_known_stats(poke: CalcPokemon, active: ActivePokemon, mode: str) -> None:
    for s in STAT_KEYS:
        poke.stats[s] = _stat_value(active.stats.get(s), mode)

    if active.condition.max_hp == 100 and VolatileStatuses.Dynamax in active.volatiles:
        poke.stats["hp"] *= 2

    poke.cur_hp = int(get_hp_percent(active.condition) * poke.stats["hp"] / 100)


def current_types(battle: Battle, active: ActivePokemon, mode: str = "avg") -> List[str]:
    poke = new_calc_pokemon(battle.status.gen, active.details.species)
    apply_illusion(battle, poke, active)
    apply_transform(battle, poke, active, mode)
    apply_type_changes(poke, active)
    return poke.types


def get_pokemon_current_types(battle: Battle, pokemon: ActivePokemon) -> List[str]:
    return list(current_types(battle, pokemon, "avg"))


# ---- Field position ----

def is_grounded(battle: Battle, pokemon: ActivePokemon) -> bool:
    if BattleFields.Gravity in battle.status.fields:
        return True

    if ability_is_enabled(battle, pokemon) and compare_ids(pokemon.ability.ability, "Levitate"):
        return False

    if holds_item(battle, pokemon, "Air Balloon"):
        return False

    if VolatileStatuses.MagnetRise in pokemon.volatiles or VolatileStatuses.Telekinesis in pokemon.volatiles:
        return False

    return "Flying" not in current_types(battle, pokemon, "max")


def is_trappable(battle: Battle, pokemon: ActivePokemon) -> bool:
    if ability_is_enabled(battle, pokemon) and compare_ids(pokemon.ability.ability, "Shadow Tag"):
        return False

    if holds_item(battle, pokemon, "Shed Shell"):
        return False

    if battle.status.gen < 8:
        return True

    return "Ghost" not in current_types(battle, pokemon, "max")


# ---- Stat ranges ----

def get_stat_range_from_details(gen: int, details: PokemonDetails) -> PokemonKnownStats:
    """Widest stat ranges for a species / level: IV 0, EV 0, hindering nature to IV 31, EV 252, boosting nature."""
    base = find_species(gen, details.species).base_stats
    minus = 0.9 if gen > 2 else 1.0
    plus = 1.1 if gen > 2 else 1.0
    level = details.level
    out = PokemonKnownStats()
    for s in STAT_KEYS:
        b = int(base.get(s, 1) or 1)
        if s == "hp":
            lo = calc_stat(b, 0, 0, level, 1.0, True)
            hi = calc_stat(b, 31, 252, level, 1.0, True)
        else:
            lo = calc_stat(b, 0, 0, level, minus, False)
            hi = calc_stat(b, 31, 252, level, plus, False)
        out.set(s, StatKnowledge(known=False, min=lo, max=hi))
    return out


def update_stats_on_species_change(battle: Battle, pokemon) -> None:
    """Refresh unknown stat ranges after a forme / species change. Known stats stay."""
    new_stats = get_stat_range_from_details(battle.status.gen, pokemon.details)
    for s in STAT_KEYS:
        if not pokemon.stats.get(s).known:
            pokemon.stats.set(s, copy.deepcopy(new_stats.get(s)))


def create_side_pokemon_from_details(battle: Battle, player: Player, details: PokemonDetails) -> SidePokemon:
    return SidePokemon(
        index=len(player.team),
        ident=PokemonIdent(player_index=player.index, name=details.species),
        details=copy.deepcopy(details),
        condition=PokemonCondition(hp=100, max_hp=100),
        stats=get_stat_range_from_details(battle.status.gen, details),
        item=unknown_item(),
        ability=unknown_ability(),
        revealed=True,
    )


# ---- Misc combatant properties ----

def is_commanding(battle: Battle, player: Player, pokemon: ActivePokemon) -> bool:
    """Commander with a healthy Dondozo alongside: immune to every move."""
    if not compare_ids(pokemon.ability.ability, "Commander"):
        return False
    for active in player.active.values():
        if active.slot == pokemon.slot or active.condition.fainted:
            continue
        if compare_ids(active.details.species, "Dondozo"):
            return True
    return False


def apply_gimmick_to_active(battle: Battle, pokemon: ActivePokemon, request_active: RequestActivePokemon,
                            gimmick: Optional[str]) -> ActivePokemon:
    """Copy of `pokemon` as it would look after using `gimmick` this turn."""
    active_copy = copy.deepcopy(pokemon)

    if gimmick == "tera":
        active_copy.details.terastallized = request_active.can_terastallize
    elif gimmick == "ultra":
        active_copy.details.species = "necrozmaultra"
    elif gimmick == "mega":
        mega = forme_for_item(battle.status.gen, pokemon.item.item)
        if mega is not None:
            active_copy.details.species = mega.id

    return active_copy


def get_active_pokemon_turn_recovery(battle: Battle, pokemon: ActivePokemon) -> float:
    """Passive end-of-turn recovery in percent HP (Leftovers and friends)."""
    if VolatileStatuses.HealBlock in pokemon.volatiles:
        return 0.0

    res = 0.0
    types = current_types(battle, pokemon, "avg")

    if holds_item(battle, pokemon, "Leftovers"):
        res += 6.25
    if holds_item(battle, pokemon, "Black Sludge") and "Poison" in types:
        res += 6.25
    if VolatileStatuses.Ingrain in pokemon.volatiles:
        res += 6.25
    if VolatileStatuses.AquaRing in pokemon.volatiles:
        res += 6.25
    if BattleFields.GrassyTerrain in battle.status.fields and is_grounded(battle, pokemon):
        res += 6.25

    return res


def can_be_flinched(battle: Battle, pokemon: ActivePokemon) -> bool:
    if holds_item(battle, pokemon, "Covert Cloak"):
        return False
    if ability_is_enabled(battle, pokemon) and compare_ids(pokemon.ability.ability, "Inner Focus"):
        return False
    return True


def checks_pokemon_deals_contact_damage(battle: Battle, pokemon: ActivePokemon) -> bool:
    if holds_item(battle, pokemon, "Rocky Helmet"):
        return True
    if ability_is_enabled(battle, pokemon) and to_id_str(pokemon.ability.ability) in ("roughskin", "ironbarbs"):
        return True
    return False
