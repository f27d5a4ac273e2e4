"""
algorithm.py
------------
Decision algorithm interfaces and the orchestrator.

`make_decisions` routes a pending request to the right phase (team preview,
forced switch, active turn), walks the request slots in shuffled order and
asks a DecisionMaker for each individual choice, while keeping the choices of
all slots compatible: no bench member picked twice, one shift, and at most one
use per turn of each once-per-turn gimmick.
"""

from __future__ import annotations

import abc
import random
from typing import Any, List, Optional, Sequence, TypeVar

from Decision.active_decision import generate_active_sub_decisions
from Decision.context import DecisionMakeContext, DecisionSlot
from Decision.decision import (
    ONCE_PER_TURN_GIMMICKS,
    PASS,
    WAIT,
    ActiveDecision,
    ActiveSubDecision,
    BattleDecision,
    ForceSwitchDecision,
    ForceSwitchSubDecision,
    MoveSubDecision,
    PassSubDecision,
    ReviveSubDecision,
    ShiftSubDecision,
    SwitchSubDecision,
    TeamDecision,
)
from Decision.force_switch import generate_force_switch_sub_decisions
from Decision.team_decision import make_team_decisions
from Knowledge.battle import find_active_slot_by_request_index

T = TypeVar("T")


def randomly_choose(rng: random.Random, items: Sequence[T]) -> Optional[T]:
    if not items:
        return None
    return rng.choice(items)


def fallback_active_decision(rng: random.Random, moves: List[MoveSubDecision], switches: List[SwitchSubDecision],
                             shifts: List[ShiftSubDecision]) -> ActiveSubDecision:
    """Uniformly random legal action: a move, else a switch, else a shift, else pass."""
    for group in (moves, switches, shifts):
        if group:
            return rng.choice(group)
    return PASS


class DecisionAlgorithm(abc.ABC):
    @abc.abstractmethod
    async def decide(self, context: DecisionMakeContext) -> BattleDecision:
        ...


class DecisionMaker(abc.ABC):
    """One hook per decision point. `extra` is per-decision scratch state owned by the maker."""

    def new_extra_data(self) -> Any:
        return None

    @abc.abstractmethod
    async def choose_team(self, context: DecisionMakeContext, available: List[TeamDecision]) -> TeamDecision:
        ...

    @abc.abstractmethod
    async def choose_force_switch(self, context: DecisionMakeContext, slot: DecisionSlot,
                                  available: List[SwitchSubDecision], extra: Any) -> SwitchSubDecision:
        ...

    @abc.abstractmethod
    async def choose_revival(self, context: DecisionMakeContext, available: List[ReviveSubDecision]) -> ReviveSubDecision:
        ...

    @abc.abstractmethod
    async def choose_active(self, context: DecisionMakeContext, slot: DecisionSlot,
                            moves: List[MoveSubDecision], switches: List[SwitchSubDecision],
                            shifts: List[ShiftSubDecision], extra: Any) -> ActiveSubDecision:
        ...


async def _force_switch_phase(context: DecisionMakeContext, maker: DecisionMaker, extra: Any) -> ForceSwitchDecision:
    battle = context.battle
    main_player = battle.players[battle.main_player]
    slots_count = len(battle.request.force_switch)

    decision = ForceSwitchDecision(sub_decisions=[PASS] * slots_count)
    already_switched = set()

    order = list(range(slots_count))
    context.rng.shuffle(order)

    for request_index in order:
        active_slot = find_active_slot_by_request_index(main_player, request_index)
        available = generate_force_switch_sub_decisions(battle, request_index)
        if not available or isinstance(available[0], PassSubDecision):
            continue

        switches = [d for d in available if isinstance(d, SwitchSubDecision) and d.pokemon_index not in already_switched]
        revivals = [d for d in available if isinstance(d, ReviveSubDecision) and d.pokemon_index not in already_switched]

        chosen: Optional[ForceSwitchSubDecision] = None
        if revivals:
            context.log("choose_revival", request_index=request_index, slot=active_slot, available=len(revivals))
            chosen = await maker.choose_revival(context, revivals)
        elif switches:
            context.log("choose_force_switch", request_index=request_index, slot=active_slot, available=len(switches))
            chosen = await maker.choose_force_switch(context, DecisionSlot(active_slot, request_index), switches, extra)

        if chosen is None:
            continue

        already_switched.add(chosen.pokemon_index)
        decision.sub_decisions[request_index] = chosen

    return decision


async def _active_phase(context: DecisionMakeContext, maker: DecisionMaker, extra: Any,
                        force_mega_evolution: bool) -> ActiveDecision:
    battle = context.battle
    main_player = battle.players[battle.main_player]
    slots_count = len(battle.request.active)

    decision = ActiveDecision(sub_decisions=[PASS] * slots_count)
    already_switched = set()
    gimmicks_used = set()
    already_shifted = False

    order = list(range(slots_count))
    context.rng.shuffle(order)

    for request_index in order:
        active_slot = find_active_slot_by_request_index(main_player, request_index)
        available = generate_active_sub_decisions(
            battle, request_index, force_mega_evolution and "mega" not in gimmicks_used)
        if not available or isinstance(available[0], PassSubDecision):
            continue

        moves: List[MoveSubDecision] = []
        switches: List[SwitchSubDecision] = []
        shifts: List[ShiftSubDecision] = []

        for d in available:
            if isinstance(d, SwitchSubDecision):
                if d.pokemon_index not in already_switched:
                    switches.append(d)
            elif isinstance(d, ShiftSubDecision):
                if not already_shifted:
                    shifts.append(d)
            elif isinstance(d, MoveSubDecision):
                if d.gimmick in gimmicks_used:
                    continue
                moves.append(d)

        context.log("choose_active", request_index=request_index, slot=active_slot,
                    moves=len(moves), switches=len(switches), shifts=len(shifts))

        chosen = await maker.choose_active(context, DecisionSlot(active_slot, request_index), moves, switches, shifts, extra)
        if chosen is None:
            continue

        if isinstance(chosen, ShiftSubDecision):
            already_shifted = True
        elif isinstance(chosen, SwitchSubDecision):
            already_switched.add(chosen.pokemon_index)
        elif isinstance(chosen, MoveSubDecision) and chosen.gimmick in ONCE_PER_TURN_GIMMICKS:
            gimmicks_used.add(chosen.gimmick)

        decision.sub_decisions[request_index] = chosen

    return decision


async def make_decisions(context: DecisionMakeContext, maker: DecisionMaker,
                         force_mega_evolution: bool = False) -> BattleDecision:
    """Full decision for the pending request. WAIT only when there is nothing to answer."""
    battle = context.battle
    request = battle.request

    if request is None or request.wait:
        context.log("wait", reason="no pending request")
        return WAIT

    if battle.main_player is None or battle.main_player not in battle.players:
        context.log("wait", reason="main player not defined")
        return WAIT

    if request.team_preview:
        teams = make_team_decisions(battle, context.rng)
        context.log("choose_team", available=len(teams))
        return await maker.choose_team(context, teams)

    extra = maker.new_extra_data()

    if request.force_switch:
        return await _force_switch_phase(context, maker, extra)

    if request.active:
        return await _active_phase(context, maker, extra, force_mega_evolution)

    return WAIT
