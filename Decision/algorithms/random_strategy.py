"""
random_strategy.py
------------------
Uniformly random legal play. Switches with probability `switch_chance` when a
switch is available, otherwise picks a random move.
"""

from __future__ import annotations

from typing import Any, List

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


class RandomStrategy(DecisionAlgorithm, DecisionMaker):
    def __init__(self, switch_chance: float = 0.0):
        self.switch_chance = max(0.0, min(1.0, switch_chance or 0.0))

    async def choose_team(self, context: DecisionMakeContext, available: List[TeamDecision]) -> TeamDecision:
        return context.rng.choice(available)

    async def choose_force_switch(self, context: DecisionMakeContext, slot: DecisionSlot,
                                  available: List[SwitchSubDecision], extra: Any) -> SwitchSubDecision:
        return context.rng.choice(available)

    async def choose_revival(self, context: DecisionMakeContext, available: List[ReviveSubDecision]) -> ReviveSubDecision:
        return context.rng.choice(available)

    async def choose_active(self, context: DecisionMakeContext, slot: DecisionSlot,
                            moves: List[MoveSubDecision], switches: List[SwitchSubDecision],
                            shifts: List[ShiftSubDecision], extra: Any) -> ActiveSubDecision:
        if switches and context.rng.random() < self.switch_chance:
            chosen = context.rng.choice(switches)
            context.log("random_switch", slot=slot.active_slot, pokemon_index=chosen.pokemon_index)
            return chosen
        if moves:
            return context.rng.choice(moves)
        return fallback_active_decision(context.rng, moves, switches, shifts)

    async def decide(self, context: DecisionMakeContext) -> BattleDecision:
        return await make_decisions(context, self)
