"""
Battle helper module for damage-oracle field mechanics
------------------------------------------------------
This module provides:
- Field / side descriptions handed to the damage oracle
- Type effectiveness (static chart, inverse battles, Freeze-Dry / Flying Press,
  Scrappy-style Ghost hits, Delta Stream)
- Weather / Terrain / Screen / Spread modifiers
- STAB calculation including Terastallization + Adaptability rules

Weather and terrain are carried as battle ids ('sunnyday', 'raindance',
'electricterrain', ...), the same ids the knowledge store records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

# ----------------------------- Data containers ---------------------------------

@dataclass
class CalcSide:
    reflect: bool = False
    light_screen: bool = False
    aurora_veil: bool = False
    helping_hand: bool = False
    friend_guard: bool = False
    flower_gift: bool = False
    battery: bool = False
    power_spot: bool = False
    tailwind: bool = False
    foresight: bool = False


@dataclass
class CalcField:
    game_type: str = "singles"
    weather: Optional[str] = None      # weather id, None when absent or suppressed
    terrain: Optional[str] = None      # 'electric' | 'grassy' | 'misty' | 'psychic'
    inverse: bool = False
    gravity: bool = False
    magic_room: bool = False
    wonder_room: bool = False
    # aurabreak, darkaura, fairyaura, beadsofruin, swordofruin, tabletsofruin, vesselofruin
    ability_effects: List[str] = field(default_factory=list)
    attacker_side: CalcSide = field(default_factory=CalcSide)
    defender_side: CalcSide = field(default_factory=CalcSide)

    @property
    def is_doubles(self) -> bool:
        return self.game_type in ("doubles", "triples", "freeforall", "multi")


# --------------------------- Type effectiveness --------------------------------

def _single(att_type: str, def_type: str, type_chart: Dict[str, Dict[str, float]], inverse: bool) -> float:
    mult = type_chart.get(att_type, {}).get(def_type.capitalize(), 1.0)
    if inverse:
        if mult == 0.0 or mult == 0.5:
            return 2.0
        if mult == 2.0:
            return 0.5
    return mult


def type_effectiveness(
    move_type: str,
    defender_types: Sequence[str],
    type_chart: Dict[str, Dict[str, float]],
    move_id: Optional[str] = None,
    inverse: bool = False,
    ignore_ghost_immunity: bool = False,
    strong_winds: bool = False,
) -> float:
    """Return the effectiveness multiplier for a move against defender types.

    Special cases:
      - Freeze-Dry (move_id == 'freezedry'): always super-effective vs Water (x2).
      - Flying Press (move_id == 'flyingpress'): combine Fighting *and* Flying.
      - ignore_ghost_immunity: Normal / Fighting hit Ghost neutrally (Scrappy, Foresight).
      - strong_winds: Delta Stream removes Flying weaknesses.
      - inverse: immunities and resistances become weaknesses and vice versa.
    """
    if not defender_types:
        return 1.0

    mtype = move_type.capitalize()
    if mtype not in type_chart:
        return 1.0

    def mult_for(att_type: str) -> float:
        mult = 1.0
        for d in defender_types:
            dt = d.capitalize()
            if dt not in type_chart:
                continue
            one = _single(att_type, dt, type_chart, inverse)
            if one == 0.0 and ignore_ghost_immunity and dt == "Ghost" and att_type in ("Normal", "Fighting"):
                one = 1.0
            if strong_winds and dt == "Flying" and one > 1.0:
                one = 1.0
            if move_id == "freezedry" and dt == "Water":
                one = 2.0
            mult *= one
        return mult

    if move_id == "flyingpress":
        return mult_for("Fighting") * mult_for("Flying")

    return mult_for(mtype)


# ------------------------------- Modifiers --------------------------------------

# weather id -> (boosted type, weakened type)
_WEATHER_TYPES: Dict[str, Tuple[str, str]] = {
    "sunnyday": ("Fire", "Water"),
    "desolateland": ("Fire", "Water"),
    "raindance": ("Water", "Fire"),
    "primordialsea": ("Water", "Fire"),
}
_PRIMAL_WEATHERS = ("desolateland", "primordialsea")

# terrain -> type it powers up for grounded users
_TERRAIN_TYPES: Dict[str, str] = {"electric": "Electric", "grassy": "Grass", "psychic": "Psychic"}


def spread_modifier(is_doubles: bool, hits_multiple_targets: bool) -> float:
    """0.75 when a spread move lands in a multi-battle format."""
    if is_doubles and hits_multiple_targets:
        return 0.75
    return 1.0


def weather_modifier(move_type: str, weather: Optional[str], move_id: Optional[str] = None,
                     defender_item: Optional[str] = None) -> Tuple[float, bool]:
    """Return (modifier, move_fails) for the current weather.

    Primal weathers make the weakened type fail outright. Hydro Steam is boosted
    in sun instead of weakened, and Utility Umbrella on the defender cancels
    ordinary sun and rain.
    """
    w = (weather or "").lower()
    if w not in _WEATHER_TYPES:
        return 1.0, False

    boosted, weakened = _WEATHER_TYPES[w]
    t = move_type.capitalize()
    primal = w in _PRIMAL_WEATHERS

    if t == weakened and primal:
        return 0.0, True
    if not primal and defender_item == "utilityumbrella":
        return 1.0, False
    if t == boosted or (move_id == "hydrosteam" and w == "sunnyday"):
        return 1.5, False
    if t == weakened:
        return 0.5, False
    return 1.0, False


def screen_modifier(
    category: str,
    defender_side: CalcSide,
    is_critical: bool,
    is_doubles: bool,
    ignores_screens: bool = False,
) -> float:
    """Reflect / Light Screen / Aurora Veil. Crits and Infiltrator skip them."""
    if is_critical or ignores_screens:
        return 1.0

    screened = {
        "physical": defender_side.reflect,
        "special": defender_side.light_screen,
    }.get((category or "").lower(), False)
    if not (screened or defender_side.aurora_veil):
        return 1.0
    return 2732.0 / 4096.0 if is_doubles else 0.5


def terrain_modifier(
    move_type: str,
    attacker_grounded: bool,
    target_grounded: bool,
    terrain: Optional[str],
    gen: int = 9,
) -> float:
    t = (terrain or "").lower()
    mtype = move_type.capitalize()

    if t == "misty":
        return 0.5 if target_grounded and mtype == "Dragon" else 1.0
    if attacker_grounded and _TERRAIN_TYPES.get(t) == mtype:
        # gen 7 terrains were a flat 1.5
        return 5325.0 / 4096.0 if gen >= 8 else 1.5
    return 1.0


# ------------------------------- STAB -------------------------------------------

def stab_multiplier(
    move_type: str,
    user_types: Sequence[str],
    tera_type: Optional[str] = None,
    ability: Optional[str] = None,
) -> float:
    """STAB with Terastallization and Adaptability.

    A Tera type that repeats one of the original types stacks to 2.0 (2.25 with
    Adaptability). Any other matching type gives 1.5, or 2.0 with Adaptability.
    """
    mtype = move_type.capitalize()
    original = {t.capitalize() for t in user_types if t}
    adaptability = (ability or "").lower() == "adaptability"

    if tera_type and tera_type.capitalize() == mtype:
        if mtype in original:
            return 2.25 if adaptability else 2.0
        return 2.0 if adaptability else 1.5
    if mtype in original:
        return 2.0 if adaptability else 1.5
    return 1.0
