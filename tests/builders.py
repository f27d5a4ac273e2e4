"""Builders for matches assembled by feeding event records to the synchronizer."""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from Data.damage_helper import DamageRange
from Decision.context import DecisionMakeContext
from Knowledge.analyzer import BattleAnalyzer
from Knowledge.battle import PokemonCondition, PokemonDetails, PokemonIdent, PokemonIdentTarget
from Knowledge.events import (
    GameTypeEvent,
    GenEvent,
    PlayerEvent,
    RequestEvent,
    SwitchEvent,
    TeamSizeEvent,
    TurnEvent,
)
from Knowledge.initializers import create_battle
from Knowledge.request import (
    BattleRequest,
    RequestActivePokemon,
    RequestMove,
    RequestSide,
    RequestSidePokemon,
)

DEFAULT_STATS = {"atk": 150, "def": 150, "spa": 150, "spd": 150, "spe": 150}


def side_pokemon(species: str, active: bool = False, hp: int = 200, max_hp: int = 200, status: str = "",
                 moves: Sequence[str] = ("tackle",), item: str = "", ability: str = "",
                 level: int = 100, reviving: bool = False) -> RequestSidePokemon:
    return RequestSidePokemon(
        ident=PokemonIdent(player_index=0, name=species),
        details=PokemonDetails(species=species, level=level),
        condition=PokemonCondition(hp=hp, max_hp=max_hp, status=status, fainted=hp <= 0),
        active=active,
        stats=dict(DEFAULT_STATS),
        moves=list(moves),
        item=item,
        ability=ability,
        base_ability=ability,
        reviving=reviving,
    )


def active_request(*moves: str, target: str = "normal", trapped: bool = False,
                   can_terastallize: str = "", can_mega_evo: bool = False) -> RequestActivePokemon:
    return RequestActivePokemon(
        moves=[RequestMove(id=m, target=target, pp=10, max_pp=10) for m in moves],
        trapped=trapped,
        can_terastallize=can_terastallize,
        can_mega_evo=can_mega_evo,
    )


def battle_request(side: List[RequestSidePokemon], active: Optional[List[RequestActivePokemon]] = None,
                   force_switch: Optional[List[bool]] = None, team_preview: bool = False,
                   wait: bool = False, request_id: int = 1) -> BattleRequest:
    return BattleRequest(
        id=request_id,
        side=RequestSide(name="bot", player_index=0, pokemon=side),
        wait=wait,
        team_preview=team_preview,
        force_switch=force_switch,
        active=active,
    )


def switch_event(player_index: int, slot: int, species: str, hp: int = 100, max_hp: int = 100,
                 level: int = 100) -> SwitchEvent:
    return SwitchEvent(
        pokemon=PokemonIdentTarget(player_index=player_index, name=species, active=True, slot=slot),
        details=PokemonDetails(species=species, level=level),
        condition=PokemonCondition(hp=hp, max_hp=max_hp),
    )


def opening_events(game_type: str = "singles", team_size: int = 3) -> list:
    return [
        GameTypeEvent(game_type=game_type),
        GenEvent(gen=9),
        PlayerEvent(player_index=0, player_name="bot"),
        PlayerEvent(player_index=1, player_name="foe"),
        TeamSizeEvent(player_index=0, team_size=team_size),
        TeamSizeEvent(player_index=1, team_size=team_size),
    ]


class MatchBuilder:
    def __init__(self, battle_id: str = "battle-gen9customgame-1"):
        self.battle = create_battle(battle_id)
        self.analyzer = BattleAnalyzer(self.battle)
        self.log: list = []

    def feed(self, *events) -> "MatchBuilder":
        for event in events:
            self.analyzer.next_event(event)
            self.log.append(event)
        return self

    def singles(self, own: List[RequestSidePokemon], own_active: RequestActivePokemon,
                foe_species: str, foe_hp: int = 100) -> "MatchBuilder":
        """Turn 1 of a singles match with `own[0]` facing `foe_species`."""
        lead = own[0]
        return self.feed(
            *opening_events("singles", len(own)),
            RequestEvent(request=battle_request(own, active=[own_active])),
            switch_event(0, 0, lead.details.species, lead.condition.hp, lead.condition.max_hp),
            switch_event(1, 0, foe_species, foe_hp, 100),
            TurnEvent(turn=1),
        )

    def context(self, seed: int = 0, events: Optional[Dict[str, list]] = None) -> DecisionMakeContext:
        def record(event, fields):
            if events is not None:
                events.setdefault(event, []).append(fields)

        return DecisionMakeContext(
            battle=self.battle,
            analyzer=self.analyzer,
            battle_log=self.log,
            logger=record,
            rng=random.Random(seed),
        )


class FixedDamageOracle:
    """Damage oracle returning the same rolls for every call."""

    def __init__(self, rolls: Sequence[int], priority: int = 0):
        self.rolls = list(rolls)
        self.priority = priority
        self.calls = 0

    def __call__(self, gen, attacker, defender, move, fld) -> DamageRange:
        self.calls += 1
        return DamageRange(rolls=list(self.rolls), priority=self.priority)


