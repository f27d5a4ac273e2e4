"""
strategy.py
-----------
Generic NPC: a rule ladder over the damage and status classifications.

Roughly, in order:
  - leave before Perish Song lands;
  - take a (possible) OHKO;
  - take a guaranteed 2HKO, sometimes preferring a useful status move;
  - otherwise switch out of bad matchups (with a chance to stay put right
    after a switch), else use the best weaker move or a useful status move;
  - as a last resort switch, then chip, then anything.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from Data.poke_env_moves_info import find_move
from Data.side_helper import calc_hazards_damage, check_foe_switched_last_turn
from Decision.algorithm import (
    DecisionAlgorithm,
    DecisionMaker,
    fallback_active_decision,
    make_decisions,
    randomly_choose,
)
from Decision.algorithms.generic_npc.evaluate_move_damage import DamageEvaluationClassifier, classify_damage_moves
from Decision.algorithms.generic_npc.evaluate_move_status import (
    StatusMovesEvaluationClassifier,
    classify_status_moves,
)
from Decision.algorithms.generic_npc.evaluate_pokemon import check_bad_volatile_condition, evaluate_pokemon
from Decision.algorithms.generic_npc.status_moves import STATUS_MOVES, StatusMoveHandler
from Decision.algorithms.generic_npc.status_moves_utils import (
    OTHER_DECISION_DAMAGE_MOVE,
    OTHER_DECISION_STATUS_MOVE,
    OTHER_DECISION_SWITCH,
    GenericNPCContext,
)
from Decision.context import DecisionMakeContext, DecisionSlot
from Decision.decision import (
    PASS,
    ActiveSubDecision,
    BattleDecision,
    MoveSubDecision,
    ReviveSubDecision,
    ShiftSubDecision,
    SwitchSubDecision,
    TeamDecision,
)
from Knowledge.battle import VolatileStatuses, get_hp_percent
from utils.config import Settings, load_settings


class GenericNPCStrategy(DecisionAlgorithm, DecisionMaker):
    def __init__(self, settings: Optional[Settings] = None,
                 registry: Optional[Mapping[str, StatusMoveHandler]] = None):
        self.settings = settings or load_settings()
        self.registry = STATUS_MOVES if registry is None else registry

    def new_extra_data(self) -> GenericNPCContext:
        return GenericNPCContext()

    async def choose_team(self, context: DecisionMakeContext, available: List[TeamDecision]) -> TeamDecision:
        return context.rng.choice(available)

    async def choose_force_switch(self, context: DecisionMakeContext, slot: DecisionSlot,
                                  available: List[SwitchSubDecision], extra: Any) -> SwitchSubDecision:
        best: List[SwitchSubDecision] = []
        best_value = 0.0
        for decision in available:
            value = await evaluate_pokemon(context.battle, decision.pokemon_index)
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
        if extra is None:
            extra = self.new_extra_data()

        decision = await self._choose_active(context, slot, moves, switches, shifts, extra)

        if isinstance(decision, MoveSubDecision):
            req_active = context.battle.request.active[slot.request_index]
            if decision.move_index < len(req_active.moves):
                move = find_move(context.battle.status.gen, req_active.moves[decision.move_index].id)
                extra.other_decisions[slot.active_slot] = (
                    OTHER_DECISION_STATUS_MOVE if move.category == "Status" else OTHER_DECISION_DAMAGE_MOVE)
        elif isinstance(decision, SwitchSubDecision):
            extra.other_decisions[slot.active_slot] = OTHER_DECISION_SWITCH

        return decision

    def _should_switch(self, context: DecisionMakeContext, must_switch: bool, status: StatusMovesEvaluationClassifier,
                       switched_last_turn: bool, stay_chance_after_own_switch: float) -> bool:
        if not must_switch:
            return False
        stay_chance = 0.0
        if status.viable:
            if switched_last_turn:
                stay_chance = stay_chance_after_own_switch
            elif check_foe_switched_last_turn(context.battle):
                stay_chance = self.settings.stay_chance_after_foe_switch
        return not stay_chance or context.rng.random() > stay_chance

    async def _choose_active(self, context: DecisionMakeContext, slot: DecisionSlot,
                             moves: List[MoveSubDecision], switches: List[SwitchSubDecision],
                             shifts: List[ShiftSubDecision], extra: GenericNPCContext) -> ActiveSubDecision:
        battle = context.battle
        rng = context.rng

        main_player = battle.players.get(battle.main_player)
        if main_player is None:
            return PASS
        active = main_player.active.get(slot.active_slot)
        if active is None:
            return PASS

        best_switch: Optional[SwitchSubDecision] = None
        best_switch_value = 0.0
        if switches:
            best_switch = await self.choose_force_switch(context, slot, switches, extra)
            best_switch_value = await evaluate_pokemon(battle, best_switch.pokemon_index)

        if best_switch is not None and VolatileStatuses.PerishSong in active.volatiles \
                and active.volatiles_data.perish_turns_left == 1:
            context.log("perish_switch", slot=slot.active_slot)
            return best_switch

        current_value = await evaluate_pokemon(battle, slot.request_index, True)
        bad_volatile = check_bad_volatile_condition(battle, active)
        has_substitute = VolatileStatuses.Substitute in active.volatiles
        faints_by_hazards = calc_hazards_damage(battle, main_player, active) >= get_hp_percent(active.condition)
        switched_last_turn = battle.turn > 1 and active.switched_on_turn == battle.turn - 1

        context.log("evaluate_active", slot=slot.active_slot, value=current_value, bad_volatile=bad_volatile,
                    substitute=has_substitute, faints_by_hazards=faints_by_hazards,
                    switched_last_turn=switched_last_turn)

        damage = await classify_damage_moves(context, slot, moves) or DamageEvaluationClassifier()
        status = await classify_status_moves(context, slot, moves, extra, best_switch, self.registry) \
            or StatusMovesEvaluationClassifier()

        can_switch_out = best_switch is not None and not faints_by_hazards and not has_substitute

        if damage.has_very_good_move:
            if status.sleep_talk:
                return rng.choice(status.sleep_talk)
            for label in ("SPP", "SP", "S"):
                if damage[label]:
                    return rng.choice(damage[label])

        elif damage.has_good_move:
            if status.sleep_talk:
                return rng.choice(status.sleep_talk)
            if status.viable and rng.random() < self.settings.viable_status_preference:
                return rng.choice(status.viable)
            return rng.choice(damage["A"])

        elif damage.has_viable_move:
            must_switch = can_switch_out and current_value < best_switch_value
            if self._should_switch(context, must_switch, status, switched_last_turn,
                                   self.settings.stay_chance_after_own_switch):
                if status.baton_pass:
                    return rng.choice(status.baton_pass)
                return best_switch
            if status.sleep_talk:
                return rng.choice(status.sleep_talk)
            if damage["B"]:
                return rng.choice(damage["B"] + status.viable)
            return rng.choice(damage["C"] + status.viable)

        elif status.viable or damage["D"]:
            must_switch = can_switch_out and (current_value < best_switch_value or bad_volatile)
            if self._should_switch(context, must_switch, status, switched_last_turn,
                                   self.settings.stay_chance_bad_volatile):
                if status.baton_pass:
                    return rng.choice(status.baton_pass)
                return best_switch
            if status.sleep_talk:
                return rng.choice(status.sleep_talk)
            return rng.choice(damage["D"] + status.viable)

        elif best_switch is not None:
            return best_switch

        elif damage["E"]:
            return rng.choice(damage["E"])

        elif damage["Z"] or status.unviable:
            return rng.choice(damage["Z"] + status.unviable)

        chosen = randomly_choose(rng, moves)
        if chosen is not None:
            return chosen
        return fallback_active_decision(rng, moves, switches, shifts)

    async def decide(self, context: DecisionMakeContext) -> BattleDecision:
        return await make_decisions(context, self, force_mega_evolution=True)
