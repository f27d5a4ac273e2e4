"""
evaluate_move_status.py
-----------------------
Sorts move decisions into Viable / Unviable / Negative by asking the status
move registry, after ruling out targets that are immune to the move.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from poke_env.data.normalize import to_id_str

from Data.abilities import ability_is_enabled, holds_item, move_breaks_ability
from Data.move_helper import get_move_real_type, move_is_redirected
from Data.poke_env_moves_info import MoveInfo, find_move
from Data.pokemon_helper import apply_gimmick_to_active, get_pokemon_current_types, is_grounded
from Decision.active_decision import find_move_decision_targets, players_are_allies
from Decision.algorithms.generic_npc.status_moves import STATUS_MOVES, StatusMoveHandler, is_move_viable
from Decision.algorithms.generic_npc.status_moves_utils import GenericNPCContext, StatusMoveContext
from Decision.context import DecisionMakeContext, DecisionSlot
from Decision.decision import MoveSubDecision, SwitchSubDecision
from Knowledge.battle import ActivePokemon, Battle, BattleFields, VolatileStatuses, compare_ids, get_hp_percent
from Knowledge.request import RequestMove
from utils.common_sets import apply_common_sets_to_foe_active

MAX_GIMMICKS = ("dynamax", "max-move")

ALLY_TARGETS = ("adjacentAlly", "adjacentAllyOrSelf")

PASSING_MOVES = frozenset({"batonpass", "shedtail", "partingshot"})

# move type -> abilities that absorb it
TYPE_ABSORB_ABILITIES = {
    "Grass": frozenset({"sapsipper"}),
    "Fire": frozenset({"flashfire", "wellbakedbody"}),
    "Water": frozenset({"dryskin", "stormdrain", "waterabsorb"}),
    "Electric": frozenset({"lightningrod", "motordrive", "voltabsorb"}),
    "Ground": frozenset({"levitate", "eartheater"}),
}

PRANKSTER_BLOCKERS = frozenset({"queenlymajesty", "dazzling", "armortail"})


@dataclass
class StatusMovesEvaluationClassifier:
    viable: List[MoveSubDecision] = field(default_factory=list)
    unviable: List[MoveSubDecision] = field(default_factory=list)
    # hits our own side with something harmful
    negative: List[MoveSubDecision] = field(default_factory=list)
    baton_pass: List[MoveSubDecision] = field(default_factory=list)
    sleep_talk: List[MoveSubDecision] = field(default_factory=list)


def _gimmick_move(move: RequestMove, gimmick: Optional[str]):
    """(move id, target type) actually used under `gimmick`."""
    if gimmick in MAX_GIMMICKS and move.max_move is not None:
        return move.max_move.id, move.max_move.target
    if gimmick == "z-move" and move.z_move is not None:
        move_id = move.id
        # a status Z-move keeps the base move's effect
        if not compare_ids(move.z_move.id, move.id + "Z"):
            move_id = move.z_move.id
        return move_id, move.z_move.target
    return move.id, move.target


def _blocked_by_ability(battle: Battle, attacker: ActivePokemon, target: ActivePokemon, move: MoveInfo,
                        abilities) -> bool:
    if to_id_str(target.ability.ability) not in abilities:
        return False
    return ability_is_enabled(battle, target) and not move_breaks_ability(battle, attacker, target, move)


def status_immunity(battle: Battle, attacker: ActivePokemon, target: ActivePokemon, move: MoveInfo) -> Optional[str]:
    """Why a status move from `attacker` cannot affect `target`, or None."""
    if _blocked_by_ability(battle, attacker, target, move, ("goodasgold",)):
        return "Good as Gold"
    if move.has_flag("reflectable") and _blocked_by_ability(battle, attacker, target, move, ("magicbounce",)):
        return "Magic Bounce"
    if move.has_flag("bullet") and _blocked_by_ability(battle, attacker, target, move, ("bulletproof",)):
        return "Bulletproof"
    if move.has_flag("sound") and _blocked_by_ability(battle, attacker, target, move, ("soundproof",)):
        return "Soundproof"
    if move.has_flag("wind") and _blocked_by_ability(battle, attacker, target, move, ("windpower", "windrider")):
        return target.ability.ability
    if move.has_flag("powder"):
        if battle.status.gen >= 6 and "Grass" in get_pokemon_current_types(battle, target):
            return "Grass type"
        if holds_item(battle, target, "Safety Goggles"):
            return "Safety Goggles"
        if _blocked_by_ability(battle, attacker, target, move, ("overcoat",)):
            return "Overcoat"
    if not move.has_flag("bypasssub") and not move.has_flag("authentic"):
        if VolatileStatuses.Substitute in target.volatiles:
            return "Substitute"
    if compare_ids(attacker.ability.ability, "Prankster") and ability_is_enabled(battle, attacker):
        if battle.status.gen <= 7 and "Dark" in get_pokemon_current_types(battle, target):
            return "Dark type vs Prankster"
        if BattleFields.PsychicTerrain in battle.status.fields and is_grounded(battle, target):
            return "Psychic Terrain vs Prankster"
        if _blocked_by_ability(battle, attacker, target, move, PRANKSTER_BLOCKERS):
            return target.ability.ability
    return None


def absorbing_ability(battle: Battle, attacker: ActivePokemon, target: ActivePokemon, move: MoveInfo,
                      move_id: str) -> Optional[str]:
    if not ability_is_enabled(battle, target) or move_breaks_ability(battle, attacker, target, move):
        return None
    absorbers = TYPE_ABSORB_ABILITIES.get(get_move_real_type(battle, attacker, move_id))
    if absorbers and to_id_str(target.ability.ability) in absorbers:
        return target.ability.ability
    return None


async def classify_status_moves(context: DecisionMakeContext, slot: DecisionSlot, moves: List[MoveSubDecision],
                                extra: GenericNPCContext, best_switch: Optional[SwitchSubDecision],
                                registry: Optional[Mapping[str, StatusMoveHandler]] = None,
                                ) -> Optional[StatusMovesEvaluationClassifier]:
    battle = context.battle
    registry = STATUS_MOVES if registry is None else registry
    rng: random.Random = context.rng

    request = battle.request
    if request is None or not request.active or slot.request_index >= len(request.active):
        return None
    if slot.request_index >= len(request.side.pokemon):
        return None

    main_player = battle.players.get(battle.main_player)
    if main_player is None:
        return None
    active = main_player.active.get(slot.active_slot)
    if active is None:
        return None

    req_active = request.active[slot.request_index]
    result = StatusMovesEvaluationClassifier()

    for decision in moves:
        if decision.move_index >= len(req_active.moves):
            continue
        move = req_active.moves[decision.move_index]
        modified = apply_gimmick_to_active(battle, active, req_active, decision.gimmick)
        move_name, move_target = _gimmick_move(move, decision.gimmick)
        gimmick = decision.gimmick or "-"

        if move_is_redirected(battle, main_player, modified, move_name, move_target):
            context.log("move_redirected", species=modified.details.species, move=move_name, gimmick=gimmick)
            continue

        if decision.gimmick in ("tera", "dynamax") and get_hp_percent(modified.condition) < 50:
            continue

        move_id = to_id_str(move_name)
        move_data = find_move(battle.status.gen, move_name)
        max_status = move_data.category == "Status" and decision.gimmick in MAX_GIMMICKS

        viable = False
        negative = False

        targets = find_move_decision_targets(battle, slot, decision, rng)

        if not targets:
            if not max_status:
                viable = is_move_viable(registry, move_id, StatusMoveContext(
                    battle=battle, main_player=main_player, active=modified, decision=decision,
                    target_player=main_player, target=modified, move=move_data, extra=extra,
                    best_switch=best_switch, rng=rng,
                ))
        else:
            for target in targets:
                target_player = battle.players.get(target.ident.player_index)
                if target_player is None:
                    continue

                if target_player.index == main_player.index or players_are_allies(
                        battle.status.game_type, main_player.index, target_player.index):
                    if move_target not in ALLY_TARGETS:
                        negative = True
                        continue

                is_self = target_player.index == main_player.index and target.slot == slot.active_slot
                modified_target = apply_common_sets_to_foe_active(battle, target)

                if max_status:
                    continue

                if not is_self and move_data.category == "Status":
                    reason = status_immunity(battle, modified, modified_target, move_data)
                    if reason is not None:
                        context.log("status_move_blocked", attacker=modified.details.species,
                                    defender=modified_target.details.species, move=move_name,
                                    gimmick=gimmick, reason=reason)
                        continue

                reason = absorbing_ability(battle, modified, modified_target, move_data, move_id)
                if reason is not None:
                    context.log("status_move_blocked", attacker=modified.details.species,
                                defender=modified_target.details.species, move=move_name,
                                gimmick=gimmick, reason=reason)
                    continue

                if move_id not in registry:
                    continue

                target_viable = is_move_viable(registry, move_id, StatusMoveContext(
                    battle=battle, main_player=main_player, active=modified, decision=decision,
                    target_player=target_player, target=modified_target, move=move_data, extra=extra,
                    best_switch=best_switch, rng=rng,
                ))
                context.log("status_move_target", attacker=modified.details.species,
                            defender=modified_target.details.species, move=move_name, gimmick=gimmick,
                            viable=target_viable)
                viable = viable or target_viable

        context.log("status_move", species=modified.details.species, move=move_name, gimmick=gimmick,
                    viable=viable, negative=negative)

        if viable:
            result.viable.append(decision)
            if move_id == "sleeptalk":
                result.sleep_talk.append(decision)
            elif move_id in PASSING_MOVES:
                result.baton_pass.append(decision)
        elif negative:
            result.negative.append(decision)
        else:
            result.unviable.append(decision)

    return result
