"""
active_decision.py
------------------
Candidate actions for one active slot of the controlled player, and move
targeting.

Two levels of targeting live here:
  * `find_decision_targets` lists the targets the player may *choose* for a
    move target type (what goes into the MoveSubDecision).
  * `find_move_decision_targets` resolves the combatants a chosen
    MoveSubDecision will actually affect (what the evaluators score).
"""

from __future__ import annotations

import random
from typing import List, Optional

from poke_env.data.normalize import to_id_str

from Decision.context import DecisionSlot
from Decision.decision import (
    PASS,
    SHIFT,
    ActiveSubDecision,
    MoveSubDecision,
    MoveSubDecisionTarget,
    SwitchSubDecision,
)
from Knowledge.battle import (
    ActivePokemon,
    Battle,
    VolatileStatuses,
    find_active_by_request_index,
    find_active_slot_by_request_index,
)
from Knowledge.request import RequestMove


# ---- Positions ----

def target_is_far_away(game_type: str, player: Optional[int], poke_slot: Optional[int],
                       target_player: int, target_slot: int) -> bool:
    """Only triples has unreachable positions: allies two slots apart and the far corners across."""
    if game_type != "triples" or poke_slot is None:
        return False
    if player == target_player:
        return abs(poke_slot - target_slot) > 1
    return (poke_slot == 0 and target_slot == 0) or (poke_slot == 2 and target_slot == 2)


def players_are_allies(game_type: str, player: int, target_player: int) -> bool:
    if game_type == "multi":
        return player % 2 == target_player % 2
    return False


def players_are_adjacent(game_type: str, player: int, target_player: int) -> bool:
    if game_type in ("multi", "freeforall"):
        return player % 2 == target_player % 2
    return False


def _field(battle: Battle):
    for player_index, player in sorted(battle.players.items()):
        for slot, active in sorted(player.active.items()):
            yield player_index, slot, active


# ---- Selectable targets ----

def _single_targets(battle: Battle, target: str, active_slot: Optional[int]) -> List[MoveSubDecisionTarget]:
    game_type = battle.status.game_type
    main = battle.main_player
    result: List[MoveSubDecisionTarget] = []
    fallback: Optional[MoveSubDecisionTarget] = None

    for player_index, slot, active in _field(battle):
        if target == "adjacentFoe":
            if player_index == main or players_are_allies(game_type, player_index, main):
                continue
        elif player_index == main and slot == active_slot:
            continue

        if target == "adjacentAlly" and game_type == "freeforall" and not players_are_allies(game_type, player_index, main):
            continue

        if target_is_far_away(game_type, main, active_slot, player_index, slot):
            continue

        if fallback is None:
            fallback = MoveSubDecisionTarget(player_index, slot)

        if active.condition.fainted:
            continue

        result.append(MoveSubDecisionTarget(player_index, slot))

    if not result and fallback is not None:
        # aiming at a fainted slot still spends the move
        result.append(fallback)

    return result


def find_decision_targets(battle: Battle, target: str, active_slot: Optional[int]) -> List[Optional[MoveSubDecisionTarget]]:
    """Choosable targets for a move target type. [None] when no choice is needed."""
    if target in ("normal", "adjacentFoe", "adjacentAlly"):
        return list(_single_targets(battle, target, active_slot))

    game_type = battle.status.game_type
    main = battle.main_player

    if target == "adjacentAllyOrSelf":
        result: List[Optional[MoveSubDecisionTarget]] = []
        for player_index, slot, active in _field(battle):
            if active.condition.fainted:
                continue
            if game_type == "freeforall" and not players_are_allies(game_type, player_index, main):
                continue
            if target_is_far_away(game_type, main, active_slot, player_index, slot):
                continue
            result.append(MoveSubDecisionTarget(player_index, slot))
        return result

    if target == "any":
        result = []
        for player_index, slot, active in _field(battle):
            if active.condition.fainted:
                continue
            if player_index == main and slot == active_slot:
                continue
            result.append(MoveSubDecisionTarget(player_index, slot))
        return result

    return [None]


# ---- Candidate generation ----

def _move_variants(battle: Battle, move_index: int, move: RequestMove, active_slot: Optional[int],
                   can_tera: bool, can_ultra: bool, can_mega: bool, force_mega: bool) -> List[ActiveSubDecision]:
    result: List[ActiveSubDecision] = []

    if move.max_move is not None:
        for target in find_decision_targets(battle, move.max_move.target, active_slot):
            result.append(MoveSubDecision(move_index, target, "dynamax"))

    if move.z_move is not None:
        for target in find_decision_targets(battle, move.z_move.target, active_slot):
            result.append(MoveSubDecision(move_index, target, "z-move"))

    for target in find_decision_targets(battle, move.target, active_slot):
        if not force_mega or not can_mega:
            result.append(MoveSubDecision(move_index, target))
        if can_tera:
            result.append(MoveSubDecision(move_index, target, "tera"))
        if can_ultra:
            result.append(MoveSubDecision(move_index, target, "ultra"))
        if can_mega:
            result.append(MoveSubDecision(move_index, target, "mega"))

    return result


def generate_active_sub_decisions(battle: Battle, request_index: int, force_mega_evolution: bool = False) -> List[ActiveSubDecision]:
    """All legal sub-decisions for the request slot `request_index`."""
    if battle.main_player is None or battle.request is None or not battle.request.active:
        return []
    if request_index >= len(battle.request.active):
        return []

    main_player = battle.players.get(battle.main_player)
    if main_player is None:
        return []

    active_request = battle.request.active[request_index]
    side = battle.request.side.pokemon
    side_request = side[request_index] if request_index < len(side) else None

    if side_request is None or side_request.commanding or side_request.condition.fainted:
        return [PASS]

    active = find_active_by_request_index(main_player, request_index)
    if active is None or active.condition.fainted:
        return [PASS]

    active_slot = find_active_slot_by_request_index(main_player, request_index)
    dynamaxed = VolatileStatuses.Dynamax in active.volatiles

    result: List[ActiveSubDecision] = []

    for move_index, move in enumerate(active_request.moves):
        if move.disabled or (move.pp is not None and move.pp <= 0):
            continue

        if dynamaxed:
            if move.max_move is None:
                continue
            for target in find_decision_targets(battle, move.max_move.target, active_slot):
                result.append(MoveSubDecision(move_index, target, "max-move"))
            continue

        result.extend(_move_variants(
            battle, move_index, move, active_slot,
            can_tera=bool(active_request.can_terastallize),
            can_ultra=active_request.can_ultra_burst,
            can_mega=active_request.can_mega_evo,
            force_mega=force_mega_evolution,
        ))

    if not active_request.trapped:
        for pokemon_index, pokemon in enumerate(side):
            if pokemon.active or pokemon.condition.fainted:
                continue
            result.append(SwitchSubDecision(pokemon_index))

    if battle.status.game_type == "triples":
        result.append(SHIFT)

    return result


# ---- Affected combatants ----

MOVE_TARGETS_REQUIRE_SPECIFIC_TARGET = frozenset({
    "normal",
    "any",
    "adjacentAlly",
    "adjacentAllyOrSelf",
    "adjacentFoe",
})

BATTLE_CONDITION_MOVES = frozenset(to_id_str(m) for m in (
    "Chilly Reception",
    "Electric Terrain",
    "Grassy Terrain",
    "Gravity",
    "Hail",
    "Magic Room",
    "Misty Terrain",
    "Mud Sport",
    "Psychic Terrain",
    "Rain Dance",
    "Sandstorm",
    "Snowscape",
    "Sunny Day",
    "Trick Room",
    "Water Sport",
    "Wonder Room",
))


def _decision_move(battle: Battle, slot: DecisionSlot, decision: MoveSubDecision) -> Optional[RequestMove]:
    if battle.request is None or not battle.request.active:
        return None
    if slot.request_index >= len(battle.request.active):
        return None
    moves = battle.request.active[slot.request_index].moves
    if decision.move_index >= len(moves):
        return None
    return moves[decision.move_index]


def get_move_target_type(move: RequestMove, gimmick: Optional[str]) -> str:
    if gimmick in ("dynamax", "max-move") and move.max_move is not None:
        return move.max_move.target
    if gimmick == "z-move" and move.z_move is not None:
        return move.z_move.target
    return move.target


def _is_foe(battle: Battle, player_index: int) -> bool:
    return player_index != battle.main_player and not players_are_allies(
        battle.status.game_type, battle.main_player, player_index)


def get_default_target(battle: Battle, slot: DecisionSlot, decision: MoveSubDecision) -> Optional[ActivePokemon]:
    """Combatant the host picks when a single-target move was chosen without a target."""
    move = _decision_move(battle, slot, decision)
    if move is None:
        return None

    target = get_move_target_type(move, decision.gimmick)
    if target not in MOVE_TARGETS_REQUIRE_SPECIFIC_TARGET:
        return None

    game_type = battle.status.game_type
    main = battle.main_player

    for player_index, pslot, active in _field(battle):
        if active.condition.fainted:
            continue
        if target == "adjacentAlly":
            if player_index != main or pslot == slot.active_slot:
                continue
            if target_is_far_away(game_type, main, slot.active_slot, player_index, pslot):
                continue
            return active
        if target == "adjacentAllyOrSelf":
            if player_index != main:
                continue
            return active
        if player_index == main:
            continue
        return active

    return None


def find_move_decision_targets(battle: Battle, slot: DecisionSlot, decision: MoveSubDecision,
                               rng: Optional[random.Random] = None) -> List[ActivePokemon]:
    """Combatants the move of `decision` will affect."""
    move = _decision_move(battle, slot, decision)
    if move is None:
        return []

    target = get_move_target_type(move, decision.gimmick)
    game_type = battle.status.game_type
    main = battle.main_player

    if target in MOVE_TARGETS_REQUIRE_SPECIFIC_TARGET:
        if decision.target is not None:
            target_player = battle.players.get(decision.target.player_index)
            if target_player is None:
                return []
            target_active = target_player.active.get(decision.target.slot)
            return [target_active] if target_active is not None else []
        default = get_default_target(battle, slot, decision)
        return [default] if default is not None else []

    if target in ("allAdjacentFoes", "randomNormal", "scripted"):
        result = [
            active for player_index, pslot, active in _field(battle)
            if _is_foe(battle, player_index)
            and not active.condition.fainted
            and not target_is_far_away(game_type, main, slot.active_slot, player_index, pslot)
        ]
        if target == "allAdjacentFoes" or not result:
            return result
        return [(rng or random).choice(result)]

    if target == "allAdjacent":
        return [
            active for player_index, pslot, active in _field(battle)
            if not (player_index == main and pslot == slot.active_slot)
            and not active.condition.fainted
            and not target_is_far_away(game_type, main, slot.active_slot, player_index, pslot)
        ]

    if target == "all":
        if to_id_str(move.id) in BATTLE_CONDITION_MOVES:
            return []
        return [
            active for player_index, pslot, active in _field(battle)
            if not (player_index == main and pslot == slot.active_slot)
            and not active.condition.fainted
        ]

    return []
