import random

from builders import MatchBuilder, active_request, battle_request, opening_events, side_pokemon, switch_event

from Decision.active_decision import (
    find_decision_targets,
    find_move_decision_targets,
    generate_active_sub_decisions,
    players_are_allies,
    target_is_far_away,
)
from Decision.context import DecisionSlot
from Decision.decision import (
    PASS,
    SHIFT,
    ActiveDecision,
    MoveSubDecision,
    MoveSubDecisionTarget,
    ReviveSubDecision,
    SwitchSubDecision,
    describe_decision,
)
from Decision.force_switch import generate_force_switch_sub_decisions
from Decision.team_decision import make_team_decisions
from Knowledge.events import RequestEvent, TeamPreviewEvent, TurnEvent
from Knowledge.request import GimmickMove, RequestMove


def _doubles_match(own_moves=("tackle",), target="normal", game_type="doubles"):
    own = [
        side_pokemon("Pikachu", active=True, moves=own_moves),
        side_pokemon("Snorlax", active=True, moves=own_moves),
        side_pokemon("Gyarados", moves=own_moves),
        side_pokemon("Lapras", moves=own_moves),
    ]
    actives = [active_request(*own_moves, target=target), active_request(*own_moves, target=target)]
    return MatchBuilder().feed(
        *opening_events(game_type, 4),
        RequestEvent(request=battle_request(own, active=actives)),
        switch_event(0, 0, "Pikachu", 200, 200),
        switch_event(0, 1, "Snorlax", 200, 200),
        switch_event(1, 0, "Charizard"),
        switch_event(1, 1, "Blastoise"),
        TurnEvent(turn=1),
    )


def test_singles_candidates(singles_match):
    decisions = generate_active_sub_decisions(singles_match.battle, 0)

    moves = [d for d in decisions if isinstance(d, MoveSubDecision)]
    switches = [d for d in decisions if isinstance(d, SwitchSubDecision)]

    assert {d.move_index for d in moves} == {0, 1, 2, 3}
    assert all(d.gimmick is None for d in moves)
    assert switches == [SwitchSubDecision(1), SwitchSubDecision(2)]
    assert SHIFT not in decisions


def test_disabled_and_empty_moves_are_skipped(singles_match):
    req_active = singles_match.battle.request.active[0]
    req_active.moves[0].disabled = True
    req_active.moves[1].pp = 0

    moves = [d for d in generate_active_sub_decisions(singles_match.battle, 0) if isinstance(d, MoveSubDecision)]
    assert {d.move_index for d in moves} == {2, 3}


def test_trapped_cannot_switch(singles_match):
    singles_match.battle.request.active[0].trapped = True
    decisions = generate_active_sub_decisions(singles_match.battle, 0)
    assert not any(isinstance(d, SwitchSubDecision) for d in decisions)


def test_fainted_members_are_not_switch_candidates(singles_match):
    singles_match.battle.request.side.pokemon[2].condition.fainted = True
    switches = [d for d in generate_active_sub_decisions(singles_match.battle, 0) if isinstance(d, SwitchSubDecision)]
    assert switches == [SwitchSubDecision(1)]


def test_tera_variants(singles_match):
    singles_match.battle.request.active[0].can_terastallize = "Electric"
    moves = [d for d in generate_active_sub_decisions(singles_match.battle, 0) if isinstance(d, MoveSubDecision)]
    assert len([d for d in moves if d.gimmick == "tera"]) == 4
    assert len([d for d in moves if d.gimmick is None]) == 4


def test_forced_mega_drops_plain_moves(singles_match):
    singles_match.battle.request.active[0].can_mega_evo = True
    moves = [d for d in generate_active_sub_decisions(singles_match.battle, 0, True) if isinstance(d, MoveSubDecision)]
    assert moves and all(d.gimmick == "mega" for d in moves)

    moves = [d for d in generate_active_sub_decisions(singles_match.battle, 0, False) if isinstance(d, MoveSubDecision)]
    assert {d.gimmick for d in moves} == {None, "mega"}


def test_dynamax_and_z_variants(singles_match):
    move = singles_match.battle.request.active[0].moves[0]
    move.max_move = GimmickMove(id="maxlightning", target="adjacentFoe")
    move.z_move = GimmickMove(id="gigavolthavoc", target="normal")

    gimmicks = [d.gimmick for d in generate_active_sub_decisions(singles_match.battle, 0)
                if isinstance(d, MoveSubDecision) and d.move_index == 0]
    assert sorted(g or "" for g in gimmicks) == ["", "dynamax", "z-move"]


def test_fainted_active_only_passes(singles_match):
    singles_match.battle.request.side.pokemon[0].condition.fainted = True
    assert generate_active_sub_decisions(singles_match.battle, 0) == [PASS]


def test_doubles_targets_exclude_self():
    builder = _doubles_match()
    targets = find_decision_targets(builder.battle, "normal", 0)
    assert MoveSubDecisionTarget(0, 0) not in targets
    assert set(targets) == {MoveSubDecisionTarget(0, 1), MoveSubDecisionTarget(1, 0), MoveSubDecisionTarget(1, 1)}

    foes = find_decision_targets(builder.battle, "adjacentFoe", 0)
    assert set(foes) == {MoveSubDecisionTarget(1, 0), MoveSubDecisionTarget(1, 1)}

    assert find_decision_targets(builder.battle, "allAdjacentFoes", 0) == [None]


def test_spread_move_hits_both_foes():
    builder = _doubles_match(("rockslide",), target="allAdjacentFoes")
    affected = find_move_decision_targets(builder.battle, DecisionSlot(0, 0), MoveSubDecision(0), random.Random(1))
    assert {a.details.species for a in affected} == {"Charizard", "Blastoise"}


def test_earthquake_style_move_hits_the_ally_too():
    builder = _doubles_match(("earthquake",), target="allAdjacent")
    affected = find_move_decision_targets(builder.battle, DecisionSlot(0, 0), MoveSubDecision(0))
    assert {a.details.species for a in affected} == {"Snorlax", "Charizard", "Blastoise"}


def test_chosen_target_is_resolved():
    builder = _doubles_match()
    decision = MoveSubDecision(0, MoveSubDecisionTarget(1, 1))
    affected = find_move_decision_targets(builder.battle, DecisionSlot(0, 0), decision)
    assert [a.details.species for a in affected] == ["Blastoise"]


def test_field_wide_condition_moves_affect_nobody(singles_match):
    singles_match.battle.request.active[0].moves.append(RequestMove(id="raindance", target="all", pp=5, max_pp=5))
    affected = find_move_decision_targets(singles_match.battle, DecisionSlot(0, 0), MoveSubDecision(4))
    assert affected == []


def _faint(builder, player_index, *slots):
    for slot in slots:
        builder.battle.players[player_index].active[slot].condition.fainted = True


def test_single_target_falls_back_to_a_fainted_slot():
    builder = _doubles_match()
    _faint(builder, 1, 0, 1)

    assert find_decision_targets(builder.battle, "adjacentFoe", 0) == [MoveSubDecisionTarget(1, 0)]
    # the living ally is still a valid target for a normal move
    assert find_decision_targets(builder.battle, "normal", 0) == [MoveSubDecisionTarget(0, 1)]

    _faint(builder, 0, 1)
    assert find_decision_targets(builder.battle, "normal", 0) == [MoveSubDecisionTarget(0, 1)]


def test_random_normal_picks_one_living_foe_with_the_given_rng():
    builder = _doubles_match(("outrage",), target="randomNormal")
    slot = DecisionSlot(0, 0)

    picks = set()
    for seed in range(20):
        affected = find_move_decision_targets(builder.battle, slot, MoveSubDecision(0), random.Random(seed))
        assert len(affected) == 1
        picks.add(affected[0].details.species)
        again = find_move_decision_targets(builder.battle, slot, MoveSubDecision(0), random.Random(seed))
        assert again == affected
    assert picks == {"Charizard", "Blastoise"}

    _faint(builder, 1, 0)
    affected = find_move_decision_targets(builder.battle, slot, MoveSubDecision(0), random.Random(0))
    assert [a.details.species for a in affected] == ["Blastoise"]

    _faint(builder, 1, 1)
    assert find_move_decision_targets(builder.battle, slot, MoveSubDecision(0), random.Random(0)) == []


def test_triples_positions():
    assert target_is_far_away("triples", 0, 0, 1, 0)
    assert target_is_far_away("triples", 0, 2, 1, 2)
    assert not target_is_far_away("triples", 0, 1, 1, 0)
    assert target_is_far_away("triples", 0, 0, 0, 2)
    assert not target_is_far_away("triples", 0, 0, 0, 1)
    assert not target_is_far_away("doubles", 0, 0, 1, 0)


def test_multi_battle_allies():
    assert players_are_allies("multi", 0, 2)
    assert not players_are_allies("multi", 0, 1)
    assert not players_are_allies("freeforall", 0, 2)


def test_force_switch_candidates(singles_match):
    battle = singles_match.battle
    battle.request.force_switch = [True]
    battle.request.side.pokemon[0].condition.fainted = True
    assert generate_force_switch_sub_decisions(battle, 0) == [SwitchSubDecision(1), SwitchSubDecision(2)]

    battle.request.force_switch = [False]
    assert generate_force_switch_sub_decisions(battle, 0) == [PASS]


def test_revival_candidates(singles_match):
    battle = singles_match.battle
    battle.request.force_switch = [True]
    battle.request.side.pokemon[0].reviving = True
    battle.request.side.pokemon[2].condition.fainted = True
    assert generate_force_switch_sub_decisions(battle, 0) == [ReviveSubDecision(2)]


def test_team_preview_orders():
    own = [side_pokemon(s) for s in ("Pikachu", "Snorlax", "Gyarados")]
    builder = MatchBuilder().feed(
        *opening_events("singles", 3),
        TeamPreviewEvent(max_team_size=3),
        RequestEvent(request=battle_request(own, team_preview=True)),
    )
    teams = make_team_decisions(builder.battle, random.Random(0))

    assert sorted(t.team_order[0] for t in teams) == [0, 1, 2]
    assert all(sorted(t.team_order) == [0, 1, 2] for t in teams)


def test_team_preview_subsets_with_illusion():
    own = [side_pokemon(s) for s in ("Pikachu", "Snorlax", "Gyarados")] + [side_pokemon("Zoroark", ability="Illusion")]
    builder = MatchBuilder().feed(
        *opening_events("singles", 4),
        TeamPreviewEvent(max_team_size=3),
        RequestEvent(request=battle_request(own, team_preview=True)),
    )
    teams = make_team_decisions(builder.battle, random.Random(0))

    # 4 subsets of 3, 3 leads each, 2 choices of the last member
    assert len(teams) == 4 * 3 * 2
    assert all(len(t.team_order) == 3 for t in teams)


def test_describe_decision():
    decision = ActiveDecision([MoveSubDecision(0, MoveSubDecisionTarget(1, 0), "tera"), SwitchSubDecision(2)])
    assert describe_decision(decision) == "move 1 @p2:0 +tera, switch 3"
