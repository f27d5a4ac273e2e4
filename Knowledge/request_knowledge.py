"""
request_knowledge.py
--------------------
Merges the pending request (ground truth for our own side) into the knowledge
store, and correlates roster entries across two requests.
"""

from __future__ import annotations

import copy
from typing import Optional, Set

from poke_env.data.normalize import to_id_str

from Data.poke_env_moves_info import get_move_base_pp, max_pp_from_base_pp
from Knowledge.battle import (
    ActivePokemon,
    Battle,
    PokemonKnownStats,
    PokemonMove,
    StatKnowledge,
    VolatileStatuses,
    compare_details,
    find_active_by_request_index,
    find_active_slot_by_request_index,
)
from Knowledge.initializers import create_side_pokemon_from_request
from Knowledge.poke_find import find_side_pokemon
from Knowledge.request import BattleRequest, RequestActivePokemon, RequestSidePokemon


def known_stats_from_request(req: RequestSidePokemon) -> PokemonKnownStats:
    stats = PokemonKnownStats()
    stats.set("hp", StatKnowledge(known=True, min=req.condition.max_hp, max=req.condition.max_hp))
    for s in ("atk", "def", "spa", "spd", "spe"):
        value = int(req.stats.get(s, 0))
        stats.set(s, StatKnowledge(known=True, min=value, max=value))
    return stats


def _merge_request_moves(active: ActivePokemon, req_active: RequestActivePokemon) -> None:
    if VolatileStatuses.Transform in active.volatiles:
        info = active.volatiles_data.transformed_info
        if info is None:
            return
        moves = info.moves
    else:
        moves = active.moves

    for move in req_active.moves:
        move_id = to_id_str(move.id)
        known: Optional[PokemonMove] = moves.get(move_id)

        if known is not None:
            if move.pp is not None:
                known.pp = move.pp
            if move.max_pp is not None:
                known.max_pp = move.max_pp
            known.disabled = move.disabled
        else:
            max_pp = move.max_pp or 1
            moves[move_id] = PokemonMove(
                id=move_id,
                revealed=False,
                max_pp=max_pp,
                pp=min(max_pp, move.pp or 0),
                disabled=move.disabled,
            )


def apply_request_knowledge(battle: Battle) -> None:
    """Overwrite our own roster and actives with what the pending request states."""
    request = battle.request
    if battle.main_player is None or request is None:
        return

    main_player = battle.players.get(battle.main_player)
    if main_player is None:
        return

    gen = battle.status.gen

    # ---- Roster ----
    for req_poke in request.side.pokemon:
        team_poke = find_side_pokemon(main_player, req_poke.ident.name, req_poke.details, req_poke.condition, False)

        if team_poke is None:
            if main_player.team_size and len(main_player.team) >= main_player.team_size:
                continue
            team_poke = create_side_pokemon_from_request(gen, len(main_player.team), req_poke)
            main_player.team.append(team_poke)

        team_poke.details = copy.deepcopy(req_poke.details)
        team_poke.ident = copy.deepcopy(req_poke.ident)
        team_poke.condition = copy.deepcopy(req_poke.condition)
        team_poke.stats = known_stats_from_request(req_poke)
        team_poke.item.known = True
        team_poke.item.item = req_poke.item
        team_poke.ability.known = True
        team_poke.ability.ability = req_poke.ability
        team_poke.ability.base_ability = req_poke.base_ability or req_poke.ability

        if team_poke.active and request.active:
            # the active section below owns these moves
            continue

        for m in req_poke.moves:
            move_id = to_id_str(m)
            if move_id not in team_poke.moves:
                pp = max_pp_from_base_pp(get_move_base_pp(gen, m))
                team_poke.moves[move_id] = PokemonMove(id=move_id, revealed=False, max_pp=pp, pp=pp, disabled=False)

    if not request.active:
        return

    # ---- Actives ----
    for i in range(min(len(request.active), len(request.side.pokemon))):
        req_poke = request.side.pokemon[i]
        active_slot = find_active_slot_by_request_index(main_player, i)
        active = find_active_by_request_index(main_player, i)
        if active is None:
            continue

        if req_poke.ident.name == active.ident.name and compare_details(req_poke.details, active.details):
            active.condition = copy.deepcopy(req_poke.condition)
            active.stats = known_stats_from_request(req_poke)
            active.item.known = True
            active.item.item = req_poke.item
            active.ability.known = True
            active.ability.ability = req_poke.ability
            active.ability.base_ability = req_poke.base_ability or req_poke.ability
            continue

        # The tracked identity was a disguise: the request names the real one
        impersonator = find_side_pokemon(main_player, req_poke.ident.name, req_poke.details, None, True)
        impersonated = main_player.team[active.index] if 0 <= active.index < len(main_player.team) else None
        if impersonator is None or impersonated is None:
            continue

        impersonator.active = True
        impersonator.active_slot = active_slot
        impersonated.active = False
        impersonated.active_slot = None

        active.index = impersonator.index
        active.ident = copy.deepcopy(impersonator.ident)
        active.details = copy.deepcopy(impersonator.details)
        active.condition = copy.deepcopy(impersonator.condition)
        active.stats = copy.deepcopy(impersonator.stats)
        active.item = copy.deepcopy(impersonator.item)
        active.ability = copy.deepcopy(impersonator.ability)
        active.moves = copy.deepcopy(impersonator.moves)
        active.times_hit = impersonator.times_hit
        active.volatiles.add(VolatileStatuses.Illusion)
        active.volatiles_data.impersonating = impersonated.index

    for i, req_active in enumerate(request.active):
        active = find_active_by_request_index(main_player, i)
        if active is not None:
            _merge_request_moves(active, req_active)


def find_cross_request_side_index(request: BattleRequest, side_poke: RequestSidePokemon,
                                  already_chosen: Set[int]) -> int:
    """Index in `request` of the roster member `side_poke` (taken from another request), or -1."""
    candidates = [
        i for i, p in enumerate(request.side.pokemon)
        if i not in already_chosen
        and p.ident.name == side_poke.ident.name
        and compare_details(p.details, side_poke.details)
    ]

    if not candidates:
        return -1
    if len(candidates) == 1:
        return candidates[0]

    for i in candidates:
        p = request.side.pokemon[i]
        if p.item == side_poke.item and p.base_ability == side_poke.base_ability:
            return i

    return candidates[0]
