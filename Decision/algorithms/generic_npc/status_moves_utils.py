"""
status_moves_utils.py
---------------------
Shared checks for the status move viability predicates.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

from poke_env.data.normalize import to_id_str

from Data.abilities import ability_is_enabled, has_ability, holds_item, move_breaks_ability
from Data.calc import CalcOptions, estimate_damage
from Data.poke_env_moves_info import MoveInfo
from Data.pokemon_helper import (
    apply_illusion,
    apply_transform,
    apply_type_changes,
    get_pokemon_current_types,
    is_grounded,
    new_calc_pokemon,
)
from Decision.active_decision import players_are_allies, target_is_far_away
from Decision.decision import MoveSubDecision, SwitchSubDecision
from Knowledge.battle import ActivePokemon, Battle, BattleFields, Player, SideConditions, get_hp_percent

BOOST_STATS = ("atk", "def", "spa", "spd", "spe")
ALL_BOOST_STATS = BOOST_STATS + ("accuracy", "evasion")

# What another slot of ours already chose this turn
OTHER_DECISION_SWITCH = "switch"
OTHER_DECISION_DAMAGE_MOVE = "damage-move"
OTHER_DECISION_STATUS_MOVE = "status-move"


@dataclass
class GenericNPCContext:
    # active slot -> OTHER_DECISION_*
    other_decisions: Dict[Optional[int], str] = field(default_factory=dict)


@dataclass
class StatusMoveContext:
    battle: Battle
    main_player: Player
    active: ActivePokemon
    decision: MoveSubDecision
    target_player: Player
    target: ActivePokemon
    move: MoveInfo
    extra: GenericNPCContext
    best_switch: Optional[SwitchSubDecision]
    rng: random.Random


# ---- Boosts ----

def can_boost(active: ActivePokemon, stat: str) -> bool:
    return active.boosts.get(stat, 0) < 6


def can_boost_any(active: ActivePokemon, stats: Sequence[str]) -> bool:
    return any(can_boost(active, s) for s in stats)


def is_contrary(battle: Battle, active: ActivePokemon) -> bool:
    return has_ability(battle, active, "Contrary")


def check_offensive_boost_viability(active: ActivePokemon) -> bool:
    return get_hp_percent(active.condition) >= 75


def can_unboost_target(context: StatusMoveContext, stat: str) -> bool:
    battle, target = context.battle, context.target
    if holds_item(battle, target, "Clear Amulet"):
        return False
    if to_id_str(target.ability.ability) in ("clearbody", "whitesmoke"):
        if ability_is_enabled(battle, target) and not move_breaks_ability(battle, context.active, target, context.move):
            return False
    return target.boosts.get(stat, 0) > -6


def count_boosts(pokemon: ActivePokemon, stats: Sequence[str]) -> int:
    return sum(pokemon.boosts.get(s, 0) for s in stats)


# ---- Positions ----

def foe_players(battle: Battle, player: Player) -> Iterator[Player]:
    for other in battle.players.values():
        if other.index == player.index:
            continue
        if players_are_allies(battle.status.game_type, other.index, player.index):
            continue
        yield other


def foe_actives(battle: Battle, player: Player) -> Iterator[ActivePokemon]:
    for foe in foe_players(battle, player):
        for active in foe.active.values():
            if not active.condition.fainted:
                yield active


def find_adjacent_ally(battle: Battle, main_player: Player, main_active: ActivePokemon) -> Optional[ActivePokemon]:
    game_type = battle.status.game_type
    for player_index, player in battle.players.items():
        for slot, active in player.active.items():
            if player_index == main_player.index and slot == main_active.slot:
                continue
            if player_index != main_player.index and not players_are_allies(game_type, player_index, main_player.index):
                continue
            if target_is_far_away(game_type, main_player.index, main_active.slot, player_index, slot):
                continue
            return active
    return None


# ---- Stalling ----

# Consecutive use makes these fail
STALL_MOVES = frozenset(to_id_str(m) for m in (
    "Protect",
    "Baneful Bunker",
    "Detect",
    "Endure",
    "King's Shield",
    "Max Guard",
    "Obstruct",
    "Silk Trap",
    "Spiky Shield",
    "Ally Switch",
))


# ---- Types ----

def _type_change_base(battle: Battle, pokemon: ActivePokemon):
    poke = new_calc_pokemon(battle.status.gen, pokemon.details.species)
    apply_illusion(battle, poke, pokemon)
    apply_transform(battle, poke, pokemon, "max")
    species = to_id_str(poke.species)
    if species.startswith("arceus") or species.startswith("silvally"):
        return None
    apply_type_changes(poke, pokemon)
    return poke


def can_be_type_changed(battle: Battle, pokemon: ActivePokemon, types: Sequence[str]) -> bool:
    if pokemon.details.terastallized:
        return False
    poke = _type_change_base(battle, pokemon)
    if poke is None:
        return False
    if len(poke.types) != len(types):
        return True
    return any(t not in poke.types for t in types)


def can_be_type_added(battle: Battle, pokemon: ActivePokemon, type_name: str) -> bool:
    if pokemon.details.terastallized:
        return False
    poke = _type_change_base(battle, pokemon)
    if poke is None:
        return False
    return type_name not in poke.types


# ---- Hazards ----

def hazards_move_will_be_bounced(battle: Battle, player: Player, pokemon: ActivePokemon, move: MoveInfo) -> bool:
    for foe in foe_players(battle, player):
        for target in foe.active.values():
            if has_ability(battle, target, "Magic Bounce") and not move_breaks_ability(battle, pokemon, target, move):
                return True
    return False


def hazards_move_viable(battle: Battle, player: Player, condition: str, max_count: int, requires_switch: bool) -> bool:
    """True if some foe side can still take another layer of `condition`."""
    for foe in foe_players(battle, player):
        if requires_switch:
            team_size = foe.team_size
            if battle.status.team_preview_size:
                team_size = min(team_size, battle.status.team_preview_size)
            # unseen members count as alive
            alive = max(0, team_size - len(foe.team))
            alive += sum(1 for p in foe.team if not p.condition.fainted and not p.active)
            if alive == 0:
                continue

        existing = foe.side_conditions.get(condition)
        if existing is None or existing.counter < max_count:
            return True

    return False


def count_hazards(player: Player) -> int:
    """Weight of the side conditions on `player`'s side; screens count against."""
    sc = player.side_conditions
    count = 0
    if SideConditions.StealthRock in sc:
        count += 30
    if SideConditions.StickyWeb in sc:
        count += 20
    if SideConditions.ToxicSpikes in sc:
        count += sc[SideConditions.ToxicSpikes].counter * 15
    if SideConditions.Spikes in sc:
        count += sc[SideConditions.Spikes].counter * 10
    for screen in (SideConditions.Reflect, SideConditions.LightScreen, SideConditions.AuroraVeil):
        if screen in sc:
            count -= 20
    return count


# ---- Damage ----

def move_does_damage(context: StatusMoveContext, override_base_power: Optional[int] = None) -> bool:
    gimmick = context.decision.gimmick
    damage = estimate_damage(
        context.battle, context.main_player, context.active, context.target_player, context.target,
        context.move.id,
        CalcOptions(
            consider_stats_attacker="max",
            consider_stats_defender="max",
            use_percent=True,
            use_max=gimmick in ("dynamax", "max-move"),
            use_z_move=gimmick == "z-move",
            override_base_power=override_base_power,
        ),
    )
    return damage.max > 0


# ---- Non-volatile status ----

def _ability_blocks(context: StatusMoveContext, abilities: Sequence[str]) -> bool:
    target = context.target
    if to_id_str(target.ability.ability) not in abilities:
        return False
    return ability_is_enabled(context.battle, target) and not move_breaks_ability(
        context.battle, context.active, target, context.move)


def is_status_viable(context: StatusMoveContext, status: str) -> bool:
    """True if `status` can be inflicted on the target and is worth it."""
    battle, target = context.battle, context.target

    if hazards_move_will_be_bounced(battle, context.main_player, context.active, context.move):
        return False

    if _ability_blocks(context, ("purifyingsalt",)):
        return False

    if is_grounded(battle, target) and BattleFields.MistyTerrain in battle.status.fields:
        return False

    types: List[str] = get_pokemon_current_types(battle, target)

    if status == "BRN":
        if "Fire" in types:
            return False
        if _ability_blocks(context, ("thermalexchange", "waterbubble", "waterveil")):
            return False
    elif status == "FRZ":
        if "Ice" in types:
            return False
    elif status in ("PSN", "TOX"):
        if ("Poison" in types or "Steel" in types) and not has_ability(battle, context.active, "Corrosion"):
            return False
        if _ability_blocks(context, ("immunity",)):
            return False
        if to_id_str(target.ability.ability) in ("poisonheal", "magicguard") and ability_is_enabled(battle, target):
            return False
    elif status == "PAR":
        if battle.status.gen > 5 and "Electric" in types:
            return False
        if _ability_blocks(context, ("limber",)):
            return False
    elif status == "SLP":
        if _ability_blocks(context, ("vitalspirit", "insomnia")):
            return False
        if is_grounded(battle, target) and BattleFields.ElectricTerrain in battle.status.fields:
            return False
        for player in battle.players.values():
            if player.index != context.target_player.index and not players_are_allies(
                    battle.status.game_type, context.target_player.index, player.index):
                continue
            for active in player.active.values():
                if not active.condition.fainted and has_ability(battle, active, "Sweet Veil"):
                    return False
        if battle.status.is_sleep_clause:
            if any(p.condition.status == "SLP" for p in context.target_player.team):
                return False

    return not target.condition.status
