"""
top_damage.py
-------------
Greedy strategy: always pick whatever deals the most expected damage.

Every candidate is scored as min(100, adjusted max damage %) x accuracy,
summed over the affected combatants (negative for our own side). Switches
are scored by the best such value the incoming member has against the foes.
Ties are broken at random through the context rng.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

from poke_env.data.normalize import to_id_str

from Data.accuracy import calc_move_accuracy
from Data.calc import CalcOptions, calc_damage
from Data.move_helper import move_is_redirected
from Data.pokemon_helper import apply_gimmick_to_active, create_side_pokemon_from_details
from Decision.active_decision import find_move_decision_targets, get_move_target_type, players_are_allies
from Decision.algorithm import (
    DecisionAlgorithm,
    DecisionMaker,
    fallback_active_decision,
    make_decisions,
)
from Decision.context import DecisionMakeContext, DecisionSlot
from Decision.decision import (
    ActiveSubDecision,
    BattleDecision,
    MoveSubDecision,
    ReviveSubDecision,
    ShiftSubDecision,
    SwitchSubDecision,
    TeamDecision,
)
from Decision.exceptions import apply_exceptions
from Knowledge.battle import ActivePokemon, Battle, Player, get_active_size
from Knowledge.initializers import create_side_pokemon_from_request
from Knowledge.poke_find import create_active_from_side, find_side_pokemon

# Moves a greedy damage maximizer misplays
BAD_MOVES_FOR_ALGORITHM = frozenset(to_id_str(m) for m in (
    "Focus Punch",
    "Explosion",
    "Self-Destruct",
    "Final Gambit",
    "Last Resort",
    "Future Sight",
    "Doom Desire",
    "Synchronoise",
))

FIRST_TURN_ONLY_MOVES = frozenset(to_id_str(m) for m in (
    "Fake Out",
    "First Impression",
    "Burn Up",
    "Double Shock",
))

MAX_GIMMICKS = ("dynamax", "max-move")


async def _scored_damage(battle: Battle, attacker_player: Player, attacker: ActivePokemon,
                         defender_player: Player, defender: ActivePokemon, move: str,
                         options: CalcOptions, gimmick=None) -> float:
    if to_id_str(move) in BAD_MOVES_FOR_ALGORITHM:
        return 0.0
    damage = await calc_damage(battle, attacker_player, attacker, defender_player, defender, move, options)
    accuracy = await calc_move_accuracy(battle, attacker_player, attacker, defender_player, defender, move, gimmick)
    return min(100.0, apply_exceptions(battle, attacker, defender, move, damage.max)) * accuracy


# ---- Move evaluation ----

async def evaluate_move_decision(context: DecisionMakeContext, slot: DecisionSlot, decision: MoveSubDecision) -> float:
    """Expected damage of `decision`, summed over its targets."""
    battle = context.battle
    request = battle.request
    if request is None or not request.active or slot.request_index >= len(request.active):
        return 0.0

    main_player = battle.players.get(battle.main_player)
    if main_player is None:
        return 0.0

    active = main_player.active.get(slot.active_slot)
    if active is None:
        return 0.0

    req_active = request.active[slot.request_index]
    if decision.move_index >= len(req_active.moves):
        return 0.0
    move = req_active.moves[decision.move_index]

    modified = apply_gimmick_to_active(battle, active, req_active, decision.gimmick)

    if move_is_redirected(battle, main_player, modified, move.id, get_move_target_type(move, decision.gimmick)):
        context.log("move_redirected", species=modified.details.species, move=move.id,
                    gimmick=decision.gimmick or "-")
        return 0.0

    options = CalcOptions(
        consider_stats_attacker="max",
        consider_stats_defender="max",
        use_percent=True,
        use_max=decision.gimmick in MAX_GIMMICKS,
        use_z_move=decision.gimmick == "z-move",
    )

    result = 0.0
    for target in find_move_decision_targets(battle, slot, decision, context.rng):
        target_player = battle.players.get(target.ident.player_index)
        if target_player is None:
            continue

        multiplier = 1.0
        if target_player.index == main_player.index or players_are_allies(
                battle.status.game_type, main_player.index, target_player.index):
            multiplier = -1.0

        value = await _scored_damage(battle, main_player, modified, target_player, target, move.id,
                                     options, decision.gimmick)
        context.log("calc", attacker=modified.details.species, defender=target.details.species,
                    move=move.id, gimmick=decision.gimmick or "-", damage=value)
        result += value * multiplier

    return result


# ---- Roster evaluation ----

def _request_member(battle: Battle, request_index: int) -> ActivePokemon:
    req = battle.request.side.pokemon[request_index]
    return create_active_from_side(create_side_pokemon_from_request(battle.status.gen, -1, req), 0, 1)


async def evaluate_pokemon_team_preview(battle: Battle, request_index: int) -> float:
    """Sum over the foes' previewed members of our member's best damage against each."""
    if battle.request is None or request_index >= len(battle.request.side.pokemon):
        return 0.0
    main_player = battle.players.get(battle.main_player)
    if main_player is None:
        return 0.0

    poke_a = _request_member(battle, request_index)
    options = CalcOptions(consider_stats_attacker="max", consider_stats_defender="max", use_percent=True)

    result = 0.0
    for player in battle.players.values():
        if player.index == battle.main_player:
            continue
        for preview in player.team_preview:
            poke_b = create_active_from_side(create_side_pokemon_from_details(battle, player, preview.details), 0, 1)
            top = 0.0
            for move in poke_a.moves.values():
                if to_id_str(move.id) in FIRST_TURN_ONLY_MOVES:
                    continue
                top = max(top, await _scored_damage(battle, main_player, poke_a, player, poke_b, move.id, options))
            result += top

    return result


async def evaluate_pokemon_force_switch(battle: Battle, request_index: int) -> float:
    """Sum over the foes' actives of the incoming member's best damage against each."""
    if battle.request is None or request_index >= len(battle.request.side.pokemon):
        return 0.0
    main_player = battle.players.get(battle.main_player)
    if main_player is None:
        return 0.0

    poke_a = _request_member(battle, request_index)
    known = find_side_pokemon(main_player, poke_a.ident.name, poke_a.details, poke_a.condition, True)
    if known is not None:
        poke_a.moves = copy.deepcopy(known.moves)

    options = CalcOptions(consider_stats_attacker="max", consider_stats_defender="max",
                          use_percent=True, ignore_current_hp=True)

    result = 0.0
    for player in battle.players.values():
        if player.index == battle.main_player:
            continue
        for poke_b in player.active.values():
            if poke_b.condition.fainted:
                continue
            top = 0.0
            for move in poke_a.moves.values():
                if move.pp <= 0 or to_id_str(move.id) in FIRST_TURN_ONLY_MOVES:
                    continue
                top = max(top, await _scored_damage(battle, main_player, poke_a, player, poke_b, move.id, options))
            result += top

    return result


class TopDamageStrategy(DecisionAlgorithm, DecisionMaker):
    async def choose_team(self, context: DecisionMakeContext, available: List[TeamDecision]) -> TeamDecision:
        battle = context.battle
        active_size = get_active_size(battle.status.game_type)

        evaluations: Dict[int, float] = {}
        for request_index in range(len(battle.request.side.pokemon)):
            evaluations[request_index] = await evaluate_pokemon_team_preview(battle, request_index)
            context.log("evaluate_member", request_index=request_index, value=evaluations[request_index])

        best: List[TeamDecision] = []
        best_value = 0.0
        for decision in available:
            value = sum(evaluations.get(i, 0.0) for i in decision.team_order[:active_size])
            if value > best_value:
                best, best_value = [decision], value
            elif value == best_value:
                best.append(decision)

        return context.rng.choice(best or available)

    async def choose_force_switch(self, context: DecisionMakeContext, slot: DecisionSlot,
                                  available: List[SwitchSubDecision], extra: Any) -> SwitchSubDecision:
        best: List[SwitchSubDecision] = []
        best_value = 0.0
        for decision in available:
            value = await evaluate_pokemon_force_switch(context.battle, decision.pokemon_index)
            context.log("evaluate_switch", pokemon_index=decision.pokemon_index, value=value)
            if value > best_value:
                best, best_value = [decision], value
            elif value == best_value:
                best.append(decision)

        return context.rng.choice(best or available)

    async def choose_revival(self, context: DecisionMakeContext, available: List[ReviveSubDecision]) -> ReviveSubDecision:
        return context.rng.choice(available)

    async def choose_active(self, context: DecisionMakeContext, slot: DecisionSlot,
                            moves: List[MoveSubDecision], switches: List[SwitchSubDecision],
                            shifts: List[ShiftSubDecision], extra: Any) -> ActiveSubDecision:
        best: List[MoveSubDecision] = []
        best_value = float("-inf")
        for decision in moves:
            value = await evaluate_move_decision(context, slot, decision)
            context.log("evaluate_move", move_index=decision.move_index,
                        gimmick=decision.gimmick or "normal", value=value)
            if value > best_value:
                best, best_value = [decision], value
            elif value == best_value:
                best.append(decision)

        if best_value <= 0 and switches:
            return await self.choose_force_switch(context, slot, switches, extra)

        if best:
            return context.rng.choice(best)
        return fallback_active_decision(context.rng, moves, switches, shifts)

    async def decide(self, context: DecisionMakeContext) -> BattleDecision:
        return await make_decisions(context, self, force_mega_evolution=True)
