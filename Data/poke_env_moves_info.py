"""
Move data lookups on top of poke-env's GenData, plus the static type chart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple, Union

from poke_env.data import GenData
from poke_env.data.normalize import to_id_str

from Data.dex_registry import FIRST_GEN, LAST_GEN, gen_data

log = logging.getLogger('pokedecider.typecalc')

FALLBACK_MOVE = "splash"


@dataclass
class MoveInfo:
    id: str
    name: str
    type: Optional[str] = None
    category: Optional[str] = None
    base_power: Optional[int] = None
    accuracy: Optional[Union[int, float, bool]] = None
    priority: int = 0
    target: Optional[str] = None
    pp: Optional[int] = None
    flags: Dict[str, bool] = field(default_factory=dict)
    secondary: Optional[Dict[str, Any]] = None
    secondaries: Optional[List[Dict[str, Any]]] = None
    status: Optional[str] = None
    volatile_status: Optional[str] = None
    boosts: Optional[Dict[str, int]] = None
    self_boost: Optional[Dict[str, int]] = None
    multihit: Optional[Union[int, List[int]]] = None
    drain: Optional[List[int]] = None
    recoil: Optional[List[int]] = None
    heal: Optional[List[int]] = None
    ohko: Union[bool, str, None] = None
    ignore_evasion: bool = False
    is_z: Optional[str] = None
    is_max: Union[bool, str, None] = None
    side_condition: Optional[str] = None
    self_switch: Union[bool, str, None] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def makes_contact(self) -> bool:
        return bool(self.flags.get("contact"))

    @property
    def is_status(self) -> bool:
        return self.category == "Status"

    def has_flag(self, flag: str) -> bool:
        return bool(self.flags.get(flag))


def _move_info(mid: str, m: Dict[str, Any]) -> MoveInfo:
    self_data = m.get("self") or {}
    return MoveInfo(
        id=mid,
        name=m.get("name", mid),
        type=m.get("type"),
        category=m.get("category"),
        base_power=m.get("basePower") if "basePower" in m else m.get("base_power"),
        accuracy=m.get('accuracy'),
        priority=m.get("priority", 0),
        target=m.get("target"),
        pp=m.get("pp"),
        flags=m.get("flags", {}),
        secondary=m.get("secondary"),
        secondaries=m.get("secondaries"),
        status=m.get("status"),
        volatile_status=m.get("volatileStatus") or m.get("volatile_status"),
        boosts=m.get("boosts"),
        self_boost=(m.get("selfBoost") or {}).get("boosts") or self_data.get("boosts"),
        multihit=m.get("multihit"),
        drain=m.get("drain"),
        recoil=m.get("recoil"),
        heal=m.get("heal"),
        ohko=m.get("ohko"),
        ignore_evasion=bool(m.get("ignoreEvasion")),
        is_z=m.get("isZ"),
        is_max=m.get("isMax"),
        side_condition=m.get("sideCondition"),
        self_switch=m.get("selfSwitch"),
        raw=m,
    )


class MovesInfo:
    """Move lookups against one generation's dex."""

    def __init__(self, gen_or_format: Union[int, str] = 9):
        if isinstance(gen_or_format, int):
            self._data = gen_data(gen_or_format)
        else:
            self._data = GenData.from_format(gen_or_format)

    def exists(self, name_or_id: str) -> bool:
        return to_id_str(name_or_id) in self._data.moves

    def get(self, name_or_id: str) -> MoveInfo:
        mid = to_id_str(name_or_id)
        try:
            return _move_info(mid, self._data.moves[mid])
        except KeyError:
            raise KeyError(f"Unknown move: {name_or_id} ({mid})") from None

    def get_type_chart(self) -> Dict[str, Dict[str, float]]:
        return _build_static_chart()


@lru_cache(maxsize=8192)
def find_move(gen: int, move: str) -> MoveInfo:
    """Move data for `gen`, else the newest generation that knows the move.

    Unknown moves resolve to Splash so callers always get a usable record.
    """
    if not FIRST_GEN <= gen <= LAST_GEN:
        gen = LAST_GEN
    mid = to_id_str(move or "")
    for g in (gen, *range(LAST_GEN, FIRST_GEN - 1, -1)):
        info = MovesInfo(g)
        if info.exists(mid):
            return info.get(mid)
    log.debug("Unknown move %r, treating it as %s", move, FALLBACK_MOVE)
    return MovesInfo(LAST_GEN).get(FALLBACK_MOVE)


def get_move_base_pp(gen: int, move: str) -> int:
    return int(find_move(gen, move).pp or 1)


def max_pp_from_base_pp(base_pp: int) -> int:
    # three PP Ups
    return base_pp * 8 // 5


RECHARGE_MOVES = frozenset({
    "blastburn", "eternabeam", "frenzyplant", "gigaimpact",
    "hydrocannon", "hyperbeam", "roaroftime", "rockwrecker",
})


TYPES = (
    "Normal", "Fire", "Water", "Electric", "Grass", "Ice", "Fighting", "Poison", "Ground",
    "Flying", "Psychic", "Bug", "Rock", "Ghost", "Dragon", "Dark", "Steel", "Fairy",
)

# attacking type -> (super effective against, resisted by, no effect on)
_MATCHUPS: Dict[str, Tuple[str, str, str]] = {
    "Normal": ("", "Rock Steel", "Ghost"),
    "Fire": ("Grass Ice Bug Steel", "Fire Water Rock Dragon", ""),
    "Water": ("Fire Ground Rock", "Water Grass Dragon", ""),
    "Electric": ("Water Flying", "Electric Grass Dragon", "Ground"),
    "Grass": ("Water Ground Rock", "Fire Grass Poison Flying Bug Dragon Steel", ""),
    "Ice": ("Grass Ground Flying Dragon", "Fire Water Ice Steel", ""),
    "Fighting": ("Normal Ice Rock Dark Steel", "Poison Flying Psychic Bug Fairy", "Ghost"),
    "Poison": ("Grass Fairy", "Poison Ground Rock Ghost", "Steel"),
    "Ground": ("Fire Electric Poison Rock Steel", "Grass Bug", "Flying"),
    "Flying": ("Grass Fighting Bug", "Electric Rock Steel", ""),
    "Psychic": ("Fighting Poison", "Psychic Steel", "Dark"),
    "Bug": ("Grass Psychic Dark", "Fire Fighting Poison Flying Ghost Steel Fairy", ""),
    "Rock": ("Fire Ice Flying Bug", "Fighting Ground Steel", ""),
    "Ghost": ("Psychic Ghost", "Dark", "Normal"),
    "Dragon": ("Dragon", "Steel", "Fairy"),
    "Dark": ("Psychic Ghost", "Fighting Dark Fairy", ""),
    "Steel": ("Ice Rock Fairy", "Fire Water Electric Steel", ""),
    "Fairy": ("Fighting Dragon Dark", "Fire Poison Steel", ""),
}


@lru_cache(maxsize=1)
def _build_static_chart() -> Dict[str, Dict[str, float]]:
    """Title-case attacking type -> defending type -> multiplier (gen 6+ chart)."""
    chart = {}
    for attacker in TYPES:
        strong, weak, immune = _MATCHUPS[attacker]
        row = dict.fromkeys(TYPES, 1.0)
        row.update(dict.fromkeys(strong.split(), 2.0))
        row.update(dict.fromkeys(weak.split(), 0.5))
        row.update(dict.fromkeys(immune.split(), 0.0))
        chart[attacker] = row
    return chart
