import asyncio
import random

from builders import MatchBuilder, active_request, battle_request, opening_events, side_pokemon, switch_event

from Decision.algorithm import DecisionMaker, fallback_active_decision, make_decisions, randomly_choose
from Decision.algorithms.random_strategy import RandomStrategy
from Decision.decision import (
    PASS,
    SHIFT,
    WAIT,
    ActiveDecision,
    ForceSwitchDecision,
    MoveSubDecision,
    SwitchSubDecision,
    TeamDecision,
)
from Knowledge.events import RequestEvent, TurnEvent


class GreedyMaker(DecisionMaker):
    """Takes the first candidate with `prefer` as gimmick, else the first switch, else the first move."""

    def __init__(self, prefer=None, switch_first=False, give_up=False):
        self.prefer = prefer
        self.switch_first = switch_first
        self.give_up = give_up
        self.seen = []

    async def choose_team(self, context, available):
        return available[-1]

    async def choose_force_switch(self, context, slot, available, extra):
        return available[0]

    async def choose_revival(self, context, available):
        return available[0]

    async def choose_active(self, context, slot, moves, switches, shifts, extra):
        self.seen.append((slot, list(moves), list(switches)))
        if self.give_up:
            return None
        if self.switch_first and switches:
            return switches[0]
        for move in moves:
            if move.gimmick == self.prefer:
                return move
        return moves[0]


def _doubles(can_terastallize="Water"):
    own = [
        side_pokemon("Pikachu", active=True, moves=("tackle", "growl")),
        side_pokemon("Snorlax", active=True, moves=("tackle", "growl")),
        side_pokemon("Gyarados"),
        side_pokemon("Lapras"),
    ]
    actives = [
        active_request("tackle", "growl", target="adjacentFoe", can_terastallize=can_terastallize),
        active_request("tackle", "growl", target="adjacentFoe", can_terastallize=can_terastallize),
    ]
    return MatchBuilder().feed(
        *opening_events("doubles", 4),
        RequestEvent(request=battle_request(own, active=actives)),
        switch_event(0, 0, "Pikachu", 200, 200),
        switch_event(0, 1, "Snorlax", 200, 200),
        switch_event(1, 0, "Charizard"),
        switch_event(1, 1, "Blastoise"),
        TurnEvent(turn=1),
    )


def test_wait_without_request(match):
    assert asyncio.run(make_decisions(match.context(), RandomStrategy())) is WAIT


def test_wait_request(singles_match):
    singles_match.battle.request.wait = True
    assert asyncio.run(make_decisions(singles_match.context(), RandomStrategy())) is WAIT


def test_random_strategy_picks_a_legal_move(singles_match):
    decision = asyncio.run(RandomStrategy().decide(singles_match.context(seed=3)))

    assert isinstance(decision, ActiveDecision)
    assert len(decision.sub_decisions) == 1
    sub = decision.sub_decisions[0]
    assert isinstance(sub, MoveSubDecision)
    assert 0 <= sub.move_index < 4


def test_random_strategy_is_reproducible(singles_match):
    first = asyncio.run(RandomStrategy(0.5).decide(singles_match.context(seed=11)))
    second = asyncio.run(RandomStrategy(0.5).decide(singles_match.context(seed=11)))
    assert first == second


def test_random_strategy_always_switching(singles_match):
    decision = asyncio.run(RandomStrategy(1.0).decide(singles_match.context()))
    assert isinstance(decision.sub_decisions[0], SwitchSubDecision)


def test_once_per_turn_gimmick_is_used_once():
    builder = _doubles()
    decision = asyncio.run(make_decisions(builder.context(seed=5), GreedyMaker(prefer="tera")))

    gimmicks = [d.gimmick for d in decision.sub_decisions if isinstance(d, MoveSubDecision)]
    assert gimmicks.count("tera") == 1
    assert len(gimmicks) == 2


def test_second_slot_does_not_see_the_spent_gimmick():
    builder = _doubles()
    maker = GreedyMaker(prefer="tera")
    asyncio.run(make_decisions(builder.context(seed=5), maker))

    _, first_moves, _ = maker.seen[0]
    _, second_moves, _ = maker.seen[1]
    assert any(m.gimmick == "tera" for m in first_moves)
    assert not any(m.gimmick == "tera" for m in second_moves)


def test_same_member_is_not_switched_in_twice():
    builder = _doubles()
    decision = asyncio.run(make_decisions(builder.context(seed=1), GreedyMaker(switch_first=True)))

    switched = [d.pokemon_index for d in decision.sub_decisions if isinstance(d, SwitchSubDecision)]
    assert sorted(switched) == [2, 3]


def test_no_choice_leaves_pass(singles_match):
    decision = asyncio.run(make_decisions(singles_match.context(), GreedyMaker(give_up=True)))
    assert decision.sub_decisions == [PASS]


def test_force_switch_phase(singles_match):
    request = singles_match.battle.request
    request.force_switch = [True]
    request.active = None
    request.side.pokemon[0].condition.fainted = True

    decision = asyncio.run(make_decisions(singles_match.context(), GreedyMaker()))

    assert isinstance(decision, ForceSwitchDecision)
    assert decision.sub_decisions == [SwitchSubDecision(1)]


def test_team_preview_phase():
    own = [side_pokemon(s) for s in ("Pikachu", "Snorlax", "Gyarados")]
    builder = MatchBuilder().feed(
        *opening_events("singles", 3),
        RequestEvent(request=battle_request(own, team_preview=True)),
    )
    decision = asyncio.run(make_decisions(builder.context(), GreedyMaker()))

    assert isinstance(decision, TeamDecision)
    assert sorted(decision.team_order) == [0, 1, 2]


def test_fallback_active_decision_order():
    rng = random.Random(0)
    assert fallback_active_decision(rng, [], [], []) is PASS
    assert fallback_active_decision(rng, [], [], [SHIFT]) is SHIFT
    assert fallback_active_decision(rng, [], [SwitchSubDecision(1)], [SHIFT]) == SwitchSubDecision(1)
    assert fallback_active_decision(rng, [MoveSubDecision(0)], [SwitchSubDecision(1)], []) == MoveSubDecision(0)


def test_randomly_choose():
    rng = random.Random(0)
    assert randomly_choose(rng, []) is None
    assert randomly_choose(rng, [7]) == 7
