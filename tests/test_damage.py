import asyncio

import pytest
from builders import FixedDamageOracle

from Data.accuracy import calc_move_accuracy, stage_multiplier
from Data.calc import CalcOptions, DamageEstimate, calc_damage, estimate_damage
from Decision.algorithms.generic_npc.evaluate_move_damage import DamageEvaluationClassifier, classify_damage
from Decision.decision import MoveSubDecision
from Decision.exceptions import apply_damage_exceptions, exceptions_multiplier
from Knowledge.battle import GlobalCondition, PokemonMove


def _sides(match):
    battle = match.battle
    return battle.players[0], battle.players[0].active[0], battle.players[1], battle.players[1].active[0]


# ---- Oracle bridge ----

def test_raw_rolls_come_from_the_oracle(singles_match):
    own_player, own, foe_player, foe = _sides(singles_match)
    oracle = FixedDamageOracle([30, 32, 35], priority=1)

    damage = estimate_damage(singles_match.battle, own_player, own, foe_player, foe, "quickattack", oracle=oracle)

    assert oracle.calls == 1
    assert (damage.min, damage.max, damage.priority) == (30, 35, 1)


def test_percent_uses_defender_max_hp(singles_match):
    own_player, own, foe_player, foe = _sides(singles_match)
    foe.stats.hp.known = True
    foe.stats.hp.min = foe.stats.hp.max = 200

    options = CalcOptions(consider_stats_defender="max", use_percent=True, ignore_current_hp=True)
    damage = asyncio.run(calc_damage(singles_match.battle, own_player, own, foe_player, foe, "tackle", options,
                                     FixedDamageOracle([50, 100])))

    assert damage.min == pytest.approx(25)
    assert damage.max == pytest.approx(50)


def test_first_turn_only_moves_fail_later(singles_match):
    own_player, own, foe_player, foe = _sides(singles_match)
    singles_match.battle.turn = 5
    oracle = FixedDamageOracle([40])

    damage = estimate_damage(singles_match.battle, own_player, own, foe_player, foe, "fakeout", oracle=oracle)

    assert damage == DamageEstimate(0, 0, 0)
    assert oracle.calls == 0


def test_soundproof_blocks_sound_moves(singles_match):
    own_player, own, foe_player, foe = _sides(singles_match)
    foe.ability.known = True
    foe.ability.ability = "soundproof"

    damage = estimate_damage(singles_match.battle, own_player, own, foe_player, foe, "hypervoice",
                             oracle=FixedDamageOracle([80]))
    assert damage.max == 0


# ---- Exceptions ----

def test_charge_moves_are_halved(singles_match):
    _, own, _, foe = _sides(singles_match)
    assert exceptions_multiplier(singles_match.battle, own, foe, "skyattack", 60) == 0.5
    assert exceptions_multiplier(singles_match.battle, own, foe, "solarbeam", 60) == 0.5


def test_charge_moves_into_protect_are_worthless(singles_match):
    _, own, _, foe = _sides(singles_match)
    foe.moves["protect"] = PokemonMove(id="protect", revealed=True, pp=10, max_pp=10)

    assert exceptions_multiplier(singles_match.battle, own, foe, "skyattack", 60) == 0
    assert exceptions_multiplier(singles_match.battle, own, foe, "fly", 60) == 0
    assert exceptions_multiplier(singles_match.battle, own, foe, "tackle", 60) == 1


def test_solar_beam_in_sun_is_normal(singles_match):
    _, own, _, foe = _sides(singles_match)
    singles_match.battle.status.weather = GlobalCondition(id="sunnyday")
    assert exceptions_multiplier(singles_match.battle, own, foe, "solarbeam", 60) == 1


def test_power_herb_skips_the_charge(singles_match):
    _, own, _, foe = _sides(singles_match)
    own.item.known = True
    own.item.item = "powerherb"
    assert exceptions_multiplier(singles_match.battle, own, foe, "skyattack", 60) == 1


def test_recharge_moves_only_pay_off_on_a_knockout(singles_match):
    _, own, _, foe = _sides(singles_match)
    battle = singles_match.battle

    halved = apply_damage_exceptions(battle, own, foe, "hyperbeam", DamageEstimate(40, 60, 0))
    assert (halved.min, halved.max) == (20, 30)

    kept = apply_damage_exceptions(battle, own, foe, "hyperbeam", DamageEstimate(90, 120, 0))
    assert (kept.min, kept.max) == (90, 120)


# ---- Accuracy ----

def test_accuracy_sources(singles_match):
    own_player, own, foe_player, foe = _sides(singles_match)
    battle = singles_match.battle

    def accuracy(move, gimmick=None):
        return asyncio.run(calc_move_accuracy(battle, own_player, own, foe_player, foe, move, gimmick))

    assert accuracy("thunderbolt") == 1
    assert accuracy("thunder") == pytest.approx(0.7)
    assert accuracy("thunder", "dynamax") == 1
    assert accuracy("fissure") == pytest.approx(0.3)

    battle.status.weather = GlobalCondition(id="raindance")
    assert accuracy("thunder") == 1

    foe.boosts["evasion"] = 1
    assert accuracy("thunderbolt") == pytest.approx(0.75)


def test_stage_multiplier_is_clamped():
    assert stage_multiplier(0) == 1
    assert stage_multiplier(-9) == stage_multiplier(-6)
    assert stage_multiplier(9) == stage_multiplier(6) == 3


# ---- Classification ----

@pytest.mark.parametrize("damage, accuracy, recovery, expected", [
    (DamageEstimate(100, 120, 1), 1.0, 0, "SPP"),
    (DamageEstimate(100, 120, 0), 1.0, 0, "SP"),
    (DamageEstimate(100, 120, 0), 0.9, 0, "S"),
    (DamageEstimate(70, 100, 0), 1.0, 0, "S"),
    (DamageEstimate(55, 70, 0), 1.0, 0, "A"),
    (DamageEstimate(55, 70, 0), 1.0, 10, "B"),
    (DamageEstimate(35, 45, 0), 1.0, 0, "C"),
    (DamageEstimate(10, 20, 0), 1.0, 0, "D"),
    (DamageEstimate(5, 6, 0), 1.0, 6.25, "E"),
    (DamageEstimate(0, 0, 0), 1.0, 0, "Z"),
])
def test_damage_ladder(damage, accuracy, recovery, expected):
    assert classify_damage(damage, accuracy, recovery) == expected


def test_good_fake_out_is_an_s():
    assert classify_damage(DamageEstimate(8, 10, 3), 1.0, 0, good_fake_out=True) == "S"


def test_classifier_flags():
    result = DamageEvaluationClassifier()
    assert not result.has_viable_move

    result.add("C", MoveSubDecision(0))
    assert result.has_viable_move and not result.has_good_move

    result.add("A", MoveSubDecision(1))
    assert result.has_good_move and not result.has_very_good_move

    result.add("SP", MoveSubDecision(2))
    assert result.has_very_good_move
    assert result["SP"] == [MoveSubDecision(2)]
    assert result["Z"] == []
