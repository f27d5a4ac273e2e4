"""Constructors for fresh knowledge-store records."""

from __future__ import annotations

import copy

from poke_env.data.normalize import to_id_str

from Data.dex_registry import LAST_GEN
from Data.poke_env_moves_info import get_move_base_pp, max_pp_from_base_pp
from Knowledge.battle import (
    AbilityKnowledge,
    Battle,
    GlobalStatus,
    ItemKnowledge,
    Player,
    PokemonKnownStats,
    PokemonMove,
    SidePokemon,
    StatKnowledge,
)
from Knowledge.request import RequestSidePokemon


def create_battle(battle_id: str) -> Battle:
    return Battle(id=battle_id, turn=0, status=GlobalStatus(gen=LAST_GEN))


def create_player(player_index: int, name: str = "", avatar: str = "") -> Player:
    return Player(index=player_index, name=name, avatar=avatar)


def _exact(value: int) -> StatKnowledge:
    return StatKnowledge(known=True, min=value, max=value)


def create_side_pokemon_from_request(gen: int, index: int, req: RequestSidePokemon) -> SidePokemon:
    """Roster entry with everything the request tells us marked as known."""
    stats = PokemonKnownStats()
    stats.set("hp", _exact(req.condition.max_hp))
    for s in ("atk", "def", "spa", "spd", "spe"):
        stats.set(s, _exact(int(req.stats.get(s, 0))))

    moves = {}
    for m in req.moves:
        mid = to_id_str(m)
        pp = max_pp_from_base_pp(get_move_base_pp(gen, mid))
        moves[mid] = PokemonMove(id=mid, revealed=False, pp=pp, max_pp=pp, disabled=False)

    return SidePokemon(
        index=index,
        ident=copy.deepcopy(req.ident),
        details=copy.deepcopy(req.details),
        condition=copy.deepcopy(req.condition),
        stats=stats,
        moves=moves,
        item=ItemKnowledge(known=True, revealed=False, item=req.item),
        ability=AbilityKnowledge(
            known=True,
            revealed=False,
            ability=req.ability,
            base_ability=req.base_ability or req.ability,
            activation_count=0,
        ),
        revealed=False,
        active=False,
    )
