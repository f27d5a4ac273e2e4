import asyncio
import logging
import random

import pytest
from builders import active_request, battle_request, opening_events, side_pokemon, switch_event

from Decision.algorithm import DecisionAlgorithm
from Decision.algorithms.random_strategy import RandomStrategy
from Decision.battle_bot import BattleBot, BattleBotConfig, get_format_details_by_battle_id
from Decision.decision import WAIT, ActiveDecision
from Knowledge.events import GameTypeEvent, RequestEvent, TurnEvent
from utils.config import Settings

BATTLE_ID = "battle-gen9randombattle-100"


class Exploding(DecisionAlgorithm):
    async def decide(self, context):
        raise RuntimeError("boom")


def _pre_request_events():
    return opening_events("singles", 2)


def _request_and_start():
    own = [
        side_pokemon("Pikachu", active=True, moves=("thunderbolt", "quickattack")),
        side_pokemon("Snorlax", moves=("bodyslam",)),
    ]
    return [
        RequestEvent(request=battle_request(own, active=[active_request("thunderbolt", "quickattack")])),
        switch_event(0, 0, "Pikachu", 200, 200),
        switch_event(1, 0, "Charizard"),
        TurnEvent(turn=1),
    ]


def _bot(algorithm=None, max_keep=2, **kwargs):
    def config(details):
        return BattleBotConfig(algorithm=algorithm or RandomStrategy(), scenarios_max_keep=max_keep,
                               rng=random.Random(0))

    return BattleBot(config_func=config, settings=Settings(), **kwargs)


def _feed(bot, events):
    for event in events:
        bot.add_battle_event(BATTLE_ID, event)


@pytest.mark.parametrize("battle_id, gen, fmt", [
    ("battle-gen8randombattle-12", 8, "gen8randombattle"),
    ("battle-gen4ou-1", 4, "gen4ou"),
    ("battle-customgame-1", 9, "customgame"),
    ("garbage", 9, ""),
])
def test_format_details(battle_id, gen, fmt):
    details = get_format_details_by_battle_id(battle_id)
    assert details.id == battle_id
    assert details.gen == gen
    assert details.format == fmt
    assert details.game_type == "singles"


def test_events_are_buffered_until_the_first_request():
    bot = _bot()
    bot.init_battle(BATTLE_ID)
    _feed(bot, _pre_request_events())

    status = bot.battles[BATTLE_ID]
    assert not status.playing
    assert status.analyzer is None
    assert not status.battle.players
    assert len(status.log) == len(_pre_request_events())


def test_first_request_replays_the_log():
    playing = []
    bot = _bot(on_playing=playing.append)
    bot.init_battle(BATTLE_ID)
    _feed(bot, _pre_request_events() + _request_and_start())

    status = bot.battles[BATTLE_ID]
    assert status.playing
    assert playing == [status.battle]
    assert set(status.battle.players) == {0, 1}
    assert status.battle.main_player == 0
    assert status.battle.turn == 1
    assert status.battle.players[1].active[0].details.species == "Charizard"


def test_game_type_is_tracked():
    bot = _bot()
    bot.init_battle(BATTLE_ID)
    bot.add_battle_event(BATTLE_ID, GameTypeEvent(game_type="doubles"))
    assert bot.battles[BATTLE_ID].format_details.game_type == "doubles"


def test_no_decision_before_playing_or_for_unknown_battles():
    bot = _bot()
    bot.init_battle(BATTLE_ID)
    _feed(bot, _pre_request_events())

    assert asyncio.run(bot.make_decision(BATTLE_ID)) is None
    assert asyncio.run(bot.make_decision("battle-gen9ou-404")) is None


def test_events_for_unknown_battles_are_dropped():
    bot = _bot()
    bot.add_battle_event("battle-gen9ou-404", TurnEvent(turn=3))
    assert "battle-gen9ou-404" not in bot.battles


def test_decision_and_scenarios():
    decisions = []
    bot = _bot(max_keep=2, on_decision=lambda battle, decision: decisions.append((battle, decision)))
    bot.init_battle(BATTLE_ID)
    _feed(bot, _pre_request_events() + _request_and_start())

    for _ in range(3):
        decision = asyncio.run(bot.make_decision(BATTLE_ID))
        assert isinstance(decision, ActiveDecision)

    status = bot.battles[BATTLE_ID]
    assert len(status.previous_scenarios) == 2
    assert len(decisions) == 3
    snapshot, _ = decisions[-1]
    assert snapshot is not status.battle
    assert snapshot.turn == status.battle.turn


def test_scenarios_off_by_default():
    bot = _bot(max_keep=0)
    bot.init_battle(BATTLE_ID)
    _feed(bot, _pre_request_events() + _request_and_start())
    asyncio.run(bot.make_decision(BATTLE_ID))
    assert bot.battles[BATTLE_ID].previous_scenarios == []


def test_failing_algorithm_falls_back_to_a_legal_decision():
    bot = _bot(algorithm=Exploding())
    bot.init_battle(BATTLE_ID)
    _feed(bot, _pre_request_events() + _request_and_start())

    decision = asyncio.run(bot.make_decision(BATTLE_ID))

    assert isinstance(decision, ActiveDecision)
    assert decision != WAIT


def test_remove_battle():
    bot = _bot()
    bot.init_battle(BATTLE_ID)
    _feed(bot, _pre_request_events() + _request_and_start())
    battle = bot.battles[BATTLE_ID].battle

    bot.remove_battle(BATTLE_ID)

    assert BATTLE_ID not in bot.battles
    assert battle.ended
    bot.remove_battle(BATTLE_ID)


def test_bad_log_level_does_not_break_the_bot():
    bot = BattleBot(config_func=lambda details: BattleBotConfig(algorithm=RandomStrategy()),
                    settings=Settings(log_level="VERBOSE"))

    assert logging.getLogger("pokedecider").level == logging.INFO
    assert bot.battles == {}


def test_the_event_log_spans_the_whole_match():
    seen = []

    class Recording(DecisionAlgorithm):
        async def decide(self, context):
            seen.append(len(context.battle_log))
            return await RandomStrategy().decide(context)

    bot = _bot(algorithm=Recording(), max_keep=1)
    bot.init_battle(BATTLE_ID)
    events = _pre_request_events() + _request_and_start()
    _feed(bot, events)
    for turn in range(2, 6):
        bot.add_battle_event(BATTLE_ID, TurnEvent(turn=turn))
        asyncio.run(bot.make_decision(BATTLE_ID))

    status = bot.battles[BATTLE_ID]
    assert len(status.log) == len(events) + 4
    assert seen == [len(events) + n for n in range(1, 5)]
    assert len(status.previous_scenarios) == 1
