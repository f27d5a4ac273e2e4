import asyncio

from builders import MatchBuilder, active_request, side_pokemon

from Decision.algorithms.generic_npc.evaluate_pokemon import check_bad_volatile_condition, evaluate_pokemon
from Decision.algorithms.generic_npc.status_moves_utils import OTHER_DECISION_DAMAGE_MOVE, GenericNPCContext
from Decision.algorithms.generic_npc.strategy import GenericNPCStrategy
from Decision.algorithms.top_damage import TopDamageStrategy
from Decision.context import DecisionSlot
from Decision.decision import ActiveDecision, ForceSwitchDecision, MoveSubDecision, SwitchSubDecision
from Knowledge.battle import VolatileStatuses
from utils.config import Settings


def _nearly_fainted_foe():
    return MatchBuilder().singles(
        [
            side_pokemon("Pikachu", active=True, moves=("thunderbolt", "quickattack", "thunderwave", "protect")),
            side_pokemon("Snorlax", moves=("bodyslam", "rest")),
        ],
        active_request("thunderbolt", "quickattack", "thunderwave", "protect"),
        "Charizard",
        foe_hp=1,
    )


def test_generic_npc_takes_the_priority_knockout():
    builder = _nearly_fainted_foe()
    decision = asyncio.run(GenericNPCStrategy(Settings()).decide(builder.context(seed=2)))

    assert isinstance(decision, ActiveDecision)
    sub = decision.sub_decisions[0]
    assert isinstance(sub, MoveSubDecision)
    assert sub.move_index == 1


def test_generic_npc_logs_its_reasoning():
    builder = _nearly_fainted_foe()
    events = {}
    asyncio.run(GenericNPCStrategy(Settings()).decide(builder.context(seed=2, events=events)))

    assert "evaluate_active" in events
    labels = {e["move"]: e["label"] for e in events["damage_move"]}
    assert labels["quickattack"] == "SPP"
    assert labels["thunderbolt"] == "SP"


def test_generic_npc_leaves_before_perish_song(singles_match):
    active = singles_match.battle.players[0].active[0]
    active.volatiles.add(VolatileStatuses.PerishSong)
    active.volatiles_data.perish_turns_left = 1

    decision = asyncio.run(GenericNPCStrategy(Settings()).decide(singles_match.context()))

    assert isinstance(decision.sub_decisions[0], SwitchSubDecision)


def test_generic_npc_records_the_kind_of_choice():
    builder = _nearly_fainted_foe()
    strategy = GenericNPCStrategy(Settings())
    context = builder.context(seed=2)
    extra = GenericNPCContext()
    moves = [MoveSubDecision(i) for i in range(4)]

    chosen = asyncio.run(strategy.choose_active(context, DecisionSlot(0, 0), moves, [SwitchSubDecision(1)], [], extra))

    assert chosen == MoveSubDecision(1)
    assert extra.other_decisions[0] == OTHER_DECISION_DAMAGE_MOVE


def test_generic_npc_force_switch(singles_match):
    request = singles_match.battle.request
    request.force_switch = [True]
    request.active = None
    request.side.pokemon[0].condition.fainted = True

    decision = asyncio.run(GenericNPCStrategy(Settings()).decide(singles_match.context()))

    assert isinstance(decision, ForceSwitchDecision)
    assert decision.sub_decisions[0] in (SwitchSubDecision(1), SwitchSubDecision(2))


def test_top_damage_prefers_the_knockout_move():
    builder = _nearly_fainted_foe()
    decision = asyncio.run(TopDamageStrategy().decide(builder.context(seed=4)))

    sub = decision.sub_decisions[0]
    assert isinstance(sub, MoveSubDecision)
    assert sub.move_index in (0, 1)


def test_evaluate_pokemon_scores_are_non_negative(singles_match):
    for index in range(3):
        assert asyncio.run(evaluate_pokemon(singles_match.battle, index, index == 0)) >= 0


def test_bad_volatile_condition(singles_match):
    battle = singles_match.battle
    active = battle.players[0].active[0]
    assert not check_bad_volatile_condition(battle, active)

    active.boosts["spa"] = -1
    assert check_bad_volatile_condition(battle, active)

    active.boosts["spa"] = 0
    active.volatiles.add(VolatileStatuses.LeechSeed)
    assert check_bad_volatile_condition(battle, active)
