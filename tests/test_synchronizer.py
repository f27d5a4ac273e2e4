from builders import MatchBuilder, active_request, battle_request, side_pokemon, switch_event

from Knowledge.battle import (
    BattleEffect,
    PokemonCondition,
    PokemonDetails,
    PokemonIdentTarget,
    SideConditions,
    VolatileStatuses,
    hit_key,
    snapshot_battle,
)
from Knowledge.events import (
    AbilityRevealEvent,
    BoostEvent,
    DamageEvent,
    FaintEvent,
    ImmuneEvent,
    ItemRevealEvent,
    MoveEvent,
    ReplaceEvent,
    RequestEvent,
    SideStartEvent,
    TurnEvent,
    WeatherEvent,
)


def _own(match):
    return match.battle.players[0].active[0]


def _foe(match):
    return match.battle.players[1].active[0]


def _target(player_index, name):
    return PokemonIdentTarget(player_index=player_index, name=name, active=True, slot=0)


def test_opening_builds_both_sides(singles_match):
    battle = singles_match.battle

    assert battle.main_player == 0
    assert battle.turn == 1
    assert battle.status.game_type == "singles"
    assert [p.details.species for p in battle.players[0].team] == ["Pikachu", "Snorlax", "Gyarados"]
    assert _foe(singles_match).details.species == "Charizard"
    assert len(battle.players[1].team) == 1


def test_request_is_ground_truth_for_own_side(singles_match):
    own = _own(singles_match)

    assert own.stats.atk.known and own.stats.atk.min == own.stats.atk.max == 150
    assert own.condition.hp == 200
    assert own.ability.known
    assert set(own.moves) == {"thunderbolt", "quickattack", "thunderwave", "protect"}
    assert own.moves["thunderbolt"].pp == 10


def test_foe_knowledge_starts_as_ranges(singles_match):
    foe = _foe(singles_match)

    assert not foe.stats.spe.known
    assert foe.stats.spe.min < foe.stats.spe.max
    assert not foe.ability.known
    assert not foe.item.known


def test_lower_turn_number_is_ignored(singles_match):
    singles_match.feed(TurnEvent(turn=5), TurnEvent(turn=3))
    assert singles_match.battle.turn == 5


def test_move_reveals_and_spends_pp(singles_match):
    singles_match.feed(MoveEvent(pokemon=_target(1, "Charizard"), move="Flamethrower",
                                 target=_target(0, "Pikachu")))
    foe = _foe(singles_match)

    assert foe.moves["flamethrower"].revealed
    assert foe.moves["flamethrower"].pp == foe.moves["flamethrower"].max_pp - 1
    assert foe.last_move == "flamethrower"
    assert foe.times_used_move_in_a_row == 1


def test_damage_from_a_move_counts_as_a_hit(singles_match):
    singles_match.feed(
        MoveEvent(pokemon=_target(0, "Pikachu"), move="Thunderbolt", target=_target(1, "Charizard")),
        DamageEvent(pokemon=_target(1, "Charizard"), condition=PokemonCondition(hp=40, max_hp=100)),
    )
    foe = _foe(singles_match)

    assert foe.condition.hp == 40
    assert foe.times_hit == 1
    hit = singles_match.analyzer.current_move_hits[hit_key(1, 0)]
    assert hit.received_move
    assert hit.damage_dealt == 60


def test_boosts_accumulate(singles_match):
    singles_match.feed(
        BoostEvent(pokemon=_target(1, "Charizard"), stat="spa", amount=2),
        BoostEvent(pokemon=_target(1, "Charizard"), stat="spa", amount=1),
    )
    assert _foe(singles_match).boosts["spa"] == 3


def test_item_reveal(singles_match):
    singles_match.feed(ItemRevealEvent(pokemon=_target(1, "Charizard"), item="Heavy-Duty Boots"))
    foe = _foe(singles_match)
    assert foe.item.known and foe.item.revealed
    assert foe.item.item == "Heavy-Duty Boots"


def test_side_conditions_stack(singles_match):
    spikes = BattleEffect(kind="move", id="Spikes")
    singles_match.feed(SideStartEvent(player_index=1, effect=spikes), SideStartEvent(player_index=1, effect=spikes))
    assert singles_match.battle.players[1].side_conditions[SideConditions.Spikes].counter == 2


def test_weather_starts_and_ends(singles_match):
    singles_match.feed(WeatherEvent(effect=BattleEffect(kind="move", id="RainDance")))
    assert singles_match.battle.status.weather.id == "raindance"

    singles_match.feed(WeatherEvent(effect=BattleEffect(id="none")))
    assert singles_match.battle.status.weather is None


def test_faint_marks_active_and_roster(singles_match):
    singles_match.feed(FaintEvent(pokemon=_target(1, "Charizard")))
    battle = singles_match.battle

    assert _foe(singles_match).condition.fainted
    assert battle.players[1].team[0].condition.fainted
    assert battle.players[1].times_fainted == 1


def test_switch_keeps_the_roster_entry_of_the_outgoing_member(singles_match):
    singles_match.feed(
        BoostEvent(pokemon=_target(1, "Charizard"), stat="atk", amount=1),
        DamageEvent(pokemon=_target(1, "Charizard"), condition=PokemonCondition(hp=55, max_hp=100)),
        switch_event(1, 0, "Blastoise"),
    )
    foe_side = singles_match.battle.players[1]

    assert _foe(singles_match).details.species == "Blastoise"
    assert not _foe(singles_match).boosts
    charizard = foe_side.team[0]
    assert charizard.condition.hp == 55
    assert not charizard.active
    assert foe_side.team[1].active


def test_new_request_updates_own_condition_on_next_turn(singles_match):
    own = [
        side_pokemon("Pikachu", active=True, hp=90, moves=("thunderbolt",)),
        side_pokemon("Snorlax", moves=("bodyslam", "rest")),
        side_pokemon("Gyarados", moves=("waterfall", "dragondance")),
    ]
    singles_match.feed(
        RequestEvent(request=battle_request(own, active=[active_request("thunderbolt")], request_id=2)),
        TurnEvent(turn=2),
    )
    assert _own(singles_match).condition.hp == 90


def test_snapshot_is_independent(singles_match):
    snapshot = snapshot_battle(singles_match.battle)
    singles_match.feed(BoostEvent(pokemon=_target(1, "Charizard"), stat="def", amount=1))

    assert "def" not in snapshot.players[1].active[0].boosts
    assert _foe(singles_match).boosts["def"] == 1


def test_unknown_event_type_is_ignored(match):
    class Unheard(TurnEvent):
        type = "Unheard"

    match.feed(Unheard(turn=9))
    assert match.battle.turn == 0


def test_destroy_marks_battle_ended():
    builder = MatchBuilder()
    builder.analyzer.destroy()
    assert builder.battle.ended


# ---- Switch carry-over ----

def test_baton_pass_carries_boosts_volatiles_and_perish_count(singles_match):
    charizard = _foe(singles_match)
    charizard.volatiles.update({VolatileStatuses.AquaRing, VolatileStatuses.PerishSong, VolatileStatuses.Encore})
    charizard.volatiles_data.perish_turns_left = 2
    singles_match.feed(
        BoostEvent(pokemon=_target(1, "Charizard"), stat="atk", amount=2),
        MoveEvent(pokemon=_target(1, "Charizard"), move="Baton Pass"),
        switch_event(1, 0, "Blastoise"),
    )
    blastoise = _foe(singles_match)

    assert blastoise.details.species == "Blastoise"
    assert blastoise.boosts["atk"] == 2
    assert VolatileStatuses.AquaRing in blastoise.volatiles
    assert VolatileStatuses.PerishSong in blastoise.volatiles
    assert VolatileStatuses.Encore not in blastoise.volatiles
    assert blastoise.volatiles_data.perish_turns_left == 2


def test_plain_switch_carries_nothing(singles_match):
    singles_match.feed(
        BoostEvent(pokemon=_target(1, "Charizard"), stat="atk", amount=2),
        switch_event(1, 0, "Blastoise"),
    )
    assert not _foe(singles_match).boosts


def test_shed_tail_leaves_a_substitute(singles_match):
    singles_match.feed(
        MoveEvent(pokemon=_target(1, "Charizard"), move="Shed Tail"),
        switch_event(1, 0, "Blastoise"),
    )
    assert VolatileStatuses.Substitute in _foe(singles_match).volatiles


# ---- Moves ----

def test_pressure_drains_an_extra_pp(singles_match):
    singles_match.feed(
        AbilityRevealEvent(pokemon=_target(1, "Charizard"), ability="Pressure"),
        MoveEvent(pokemon=_target(0, "Pikachu"), move="Thunderbolt", target=_target(1, "Charizard")),
    )
    assert _own(singles_match).moves["thunderbolt"].pp == 8


def test_repeat_counter_resets_when_the_move_changes(singles_match):
    charizard = _target(1, "Charizard")
    singles_match.feed(
        MoveEvent(pokemon=charizard, move="Flamethrower", target=_target(0, "Pikachu")),
        MoveEvent(pokemon=charizard, move="Flamethrower", target=_target(0, "Pikachu")),
    )
    assert _foe(singles_match).times_used_move_in_a_row == 2

    singles_match.feed(MoveEvent(pokemon=charizard, move="Air Slash", target=_target(0, "Pikachu")))
    assert _foe(singles_match).times_used_move_in_a_row == 1
    assert _foe(singles_match).last_move == "airslash"


# ---- Illusion ----

def _prankster_match(foe_species):
    return MatchBuilder().singles(
        [
            side_pokemon("Whimsicott", active=True, ability="prankster", moves=("encore", "moonblast")),
            side_pokemon("Snorlax", moves=("bodyslam",)),
        ],
        active_request("encore", "moonblast"),
        foe_species,
    )


def test_prankster_move_blocked_by_a_non_dark_target_exposes_illusion():
    builder = _prankster_match("Charizard")
    builder.feed(
        MoveEvent(pokemon=_target(0, "Whimsicott"), move="Encore", target=_target(1, "Charizard")),
        ImmuneEvent(pokemon=_target(1, "Charizard")),
    )
    foe = _foe(builder)

    assert foe.volatiles_data.fake
    assert foe.volatiles_data.fake_guess == "zoroark"


def test_prankster_move_blocked_by_a_dark_target_is_expected():
    builder = _prankster_match("Umbreon")
    builder.feed(
        MoveEvent(pokemon=_target(0, "Whimsicott"), move="Encore", target=_target(1, "Umbreon")),
        ImmuneEvent(pokemon=_target(1, "Umbreon")),
    )
    assert not _foe(builder).volatiles_data.fake


def test_unexpected_immunity_to_a_damaging_move_exposes_illusion(singles_match):
    singles_match.feed(
        MoveEvent(pokemon=_target(0, "Pikachu"), move="Quick Attack", target=_target(1, "Charizard")),
        ImmuneEvent(pokemon=_target(1, "Charizard")),
    )
    foe = _foe(singles_match)

    assert foe.volatiles_data.fake
    # only the Ghost-type disguise explains a Normal move doing nothing
    assert foe.volatiles_data.fake_guess == "zoroarkhisui"


def test_replace_reveals_the_real_combatant(singles_match):
    foe = _foe(singles_match)
    foe.volatiles_data.possible_fake = True
    singles_match.feed(ReplaceEvent(
        pokemon=_target(1, "Zoroark"),
        details=PokemonDetails(species="Zoroark"),
    ))
    foe = _foe(singles_match)
    team = singles_match.battle.players[1].team

    assert foe.details.species == "Zoroark"
    assert not foe.volatiles_data.possible_fake
    assert not foe.volatiles_data.fake
    assert team[foe.index].details.species == "Zoroark"
    assert team[foe.index].active
    assert not team[0].active
