import random

import pytest
from builders import switch_event

from Data.poke_env_moves_info import find_move
from Decision.algorithms.generic_npc.status_moves import STATUS_MOVES, build_status_move_registry, is_move_viable
from Decision.algorithms.generic_npc.status_moves_utils import (
    GenericNPCContext,
    StatusMoveContext,
    count_hazards,
    hazards_move_viable,
)
from Decision.decision import MoveSubDecision
from Knowledge.battle import GlobalCondition, PokemonCondition, SideCondition, SideConditions, VolatileStatuses


def _context(match, move_id, on_self=False):
    battle = match.battle
    main_player = battle.players[0]
    foe_player = battle.players[1]
    own = main_player.active[0]
    return StatusMoveContext(
        battle=battle,
        main_player=main_player,
        active=own,
        decision=MoveSubDecision(0),
        target_player=main_player if on_self else foe_player,
        target=own if on_self else foe_player.active[0],
        move=find_move(battle.status.gen, move_id),
        extra=GenericNPCContext(),
        best_switch=None,
        rng=random.Random(0),
    )


def _viable(match, move_id, on_self=False):
    return is_move_viable(STATUS_MOVES, move_id, _context(match, move_id, on_self))


# ---- Registry ----

def test_registry_is_read_only():
    with pytest.raises(TypeError):
        STATUS_MOVES["swordsdance"] = lambda context: True


def test_registry_covers_common_moves():
    for move_id in ("swordsdance", "protect", "stealthrock", "thunderwave", "raindance", "reflect", "spore"):
        assert move_id in STATUS_MOVES


def test_each_build_is_a_fresh_snapshot():
    assert build_status_move_registry() is not build_status_move_registry()
    assert dict(build_status_move_registry()) == dict(STATUS_MOVES)


def test_unregistered_move_is_not_viable(singles_match):
    assert not is_move_viable(STATUS_MOVES, "notarealmove", _context(singles_match, "splash"))


def test_undecided_handler_counts_as_not_viable(singles_match):
    registry = {"splash": lambda context: None}
    assert is_move_viable(registry, "Splash", _context(singles_match, "splash")) is False


# ---- Self boosts ----

def test_swords_dance(singles_match):
    own = singles_match.battle.players[0].active[0]
    assert _viable(singles_match, "swordsdance", on_self=True)

    own.boosts["atk"] = 6
    assert not _viable(singles_match, "swordsdance", on_self=True)

    own.boosts["atk"] = 0
    own.condition = PokemonCondition(hp=100, max_hp=200)
    assert not _viable(singles_match, "swordsdance", on_self=True)


def test_contrary_users_skip_boosts(singles_match):
    own = singles_match.battle.players[0].active[0]
    own.ability.known = True
    own.ability.ability = "contrary"
    assert not _viable(singles_match, "swordsdance", on_self=True)


def test_protect_is_not_chained(singles_match):
    own = singles_match.battle.players[0].active[0]
    assert _viable(singles_match, "protect", on_self=True)

    own.last_move = "protect"
    assert not _viable(singles_match, "protect", on_self=True)

    own.last_move = "thunderbolt"
    assert _viable(singles_match, "protect", on_self=True)


# ---- Sides and field ----

def test_screens(singles_match):
    assert _viable(singles_match, "reflect", on_self=True)
    singles_match.battle.players[0].side_conditions[SideConditions.Reflect] = SideCondition(id=SideConditions.Reflect)
    assert not _viable(singles_match, "reflect", on_self=True)


def test_hazard_layers(singles_match):
    foe_side = singles_match.battle.players[1]
    assert _viable(singles_match, "stealthrock")

    foe_side.side_conditions[SideConditions.StealthRock] = SideCondition(id=SideConditions.StealthRock)
    assert not _viable(singles_match, "stealthrock")

    foe_side.side_conditions[SideConditions.Spikes] = SideCondition(id=SideConditions.Spikes, counter=2)
    assert _viable(singles_match, "spikes")
    foe_side.side_conditions[SideConditions.Spikes].counter = 3
    assert not _viable(singles_match, "spikes")


def test_hazards_need_someone_left_to_switch_in(singles_match):
    battle = singles_match.battle
    foe_side = battle.players[1]
    foe_side.team_size = 1
    assert not hazards_move_viable(battle, battle.players[0], SideConditions.StealthRock, 1, True)
    assert hazards_move_viable(battle, battle.players[0], SideConditions.StealthRock, 1, False)


def test_count_hazards(singles_match):
    side = singles_match.battle.players[0]
    side.side_conditions = {
        SideConditions.StealthRock: SideCondition(id=SideConditions.StealthRock),
        SideConditions.Spikes: SideCondition(id=SideConditions.Spikes, counter=2),
        SideConditions.Reflect: SideCondition(id=SideConditions.Reflect),
    }
    assert count_hazards(side) == 30 + 20 - 20


@pytest.mark.parametrize("weather, expected", [
    (None, True),
    ("raindance", False),
    ("sunnyday", True),
    ("primordialsea", False),
    ("desolateland", False),
])
def test_rain_dance(singles_match, weather, expected):
    if weather is not None:
        singles_match.battle.status.weather = GlobalCondition(id=weather)
    assert _viable(singles_match, "raindance", on_self=True) is expected


def test_trick_room_is_not_reversed(singles_match):
    assert _viable(singles_match, "trickroom", on_self=True)
    singles_match.battle.status.fields["trickroom"] = GlobalCondition(id="trickroom")
    assert not _viable(singles_match, "trickroom", on_self=True)


# ---- Status infliction ----

def test_thunder_wave(singles_match):
    foe = singles_match.battle.players[1].active[0]
    assert _viable(singles_match, "thunderwave")

    foe.condition.status = "BRN"
    assert not _viable(singles_match, "thunderwave")


def test_thunder_wave_cannot_touch_ground_types(singles_match):
    singles_match.feed(switch_event(1, 0, "Garchomp"))
    assert not _viable(singles_match, "thunderwave")


def test_will_o_wisp_on_fire_types(singles_match):
    assert not _viable(singles_match, "willowisp")


def test_leech_seed_is_not_stacked(singles_match):
    foe = singles_match.battle.players[1].active[0]
    assert _viable(singles_match, "leechseed")
    foe.volatiles.add(VolatileStatuses.LeechSeed)
    assert not _viable(singles_match, "leechseed")
