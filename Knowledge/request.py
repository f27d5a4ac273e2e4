"""
request.py
----------
The per-turn prompt for the controlled player. Ground truth for our own side:
exact stats, items, abilities and the legal move list of each active pokemon.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from Knowledge.battle import PokemonCondition, PokemonDetails, PokemonIdent

# normal, self, adjacentAlly, adjacentAllyOrSelf, adjacentFoe, allAdjacentFoes,
# foeSide, allySide, allyTeam, allAdjacent, any, all, scripted, randomNormal, allies
MOVE_TARGETS = (
    "normal", "self", "adjacentAlly", "adjacentAllyOrSelf", "adjacentFoe",
    "allAdjacentFoes", "foeSide", "allySide", "allyTeam", "allAdjacent",
    "any", "all", "scripted", "randomNormal", "allies",
)


@dataclass
class GimmickMove:
    id: str
    target: str = "normal"


@dataclass
class RequestMove:
    id: str
    target: str = "normal"
    pp: Optional[int] = None
    max_pp: Optional[int] = None
    disabled: bool = False
    z_move: Optional[GimmickMove] = None
    max_move: Optional[GimmickMove] = None


@dataclass
class RequestActivePokemon:
    moves: List[RequestMove] = field(default_factory=list)
    trapped: bool = False
    can_terastallize: str = ""
    can_mega_evo: bool = False
    can_ultra_burst: bool = False

    @property
    def can_z_move(self) -> bool:
        return any(m.z_move is not None for m in self.moves)

    @property
    def can_dynamax(self) -> bool:
        return any(m.max_move is not None for m in self.moves)


@dataclass
class RequestSidePokemon:
    ident: PokemonIdent
    details: PokemonDetails
    condition: PokemonCondition
    active: bool = False
    stats: Dict[str, int] = field(default_factory=dict)  # atk/def/spa/spd/spe
    moves: List[str] = field(default_factory=list)
    item: str = ""
    ball: str = ""
    ability: str = ""
    base_ability: str = ""
    commanding: bool = False
    reviving: bool = False
    tera_type: str = ""
    terastallized: str = ""


@dataclass
class RequestSide:
    name: str
    player_index: int
    pokemon: List[RequestSidePokemon] = field(default_factory=list)


@dataclass
class BattleRequest:
    id: int
    side: RequestSide
    wait: bool = False
    team_preview: bool = False
    force_switch: Optional[List[bool]] = None
    active: Optional[List[RequestActivePokemon]] = None
