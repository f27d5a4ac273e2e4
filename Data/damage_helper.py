"""
Damage oracle for Pokemon battles (Gen 9 order & fixed-point modifiers)
-----------------------------------------------------------------------

Implements the damage pipeline with fixed-point (1/4096) modifiers similar
to Pokémon Showdown's "chainModify" approach. The order of modifiers follows the
modern (Gen 6+) order used by Smogon/Showdown:

  1) Targets (spread)
  2) Weather
  3) Critical
  4) Random (0.85 .. 1.00, uniform discrete)
  5) STAB
  6) Type effectiveness
  7) Burn (physical only)
  8) Other (items/abilities/field)
  9) Screens (Reflect/Light Screen/Aurora Veil)
  10) Terrain

The oracle only sees synthetic CalcPokemon / CalcMove / CalcField values built by
Data.calc; it knows nothing about the knowledge store. `default_oracle` has the
`DamageOracle` signature and can be swapped for any other calculator.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from poke_env.data.normalize import to_id_str

from Data.battle_helper import (
    CalcField,
    screen_modifier,
    spread_modifier,
    stab_multiplier,
    terrain_modifier,
    type_effectiveness,
    weather_modifier,
)
from Data.poke_env_moves_info import _build_static_chart
from Data.priority import move_priority

log = logging.getLogger('pokedecider.typecalc')

# ---------------------------- Fixed-point helpers --------------------------------

FP_BASE = 4096  # Showdown-style fixed point

def to_fp(x: float) -> int:
    """Convert a float multiplier to fixed-point (rounded)."""
    return int(round(float(x) * FP_BASE))

def chain_mul(base_fp: int, mods_fp: Iterable[int]) -> int:
    """Chain fixed-point multipliers with rounding down each step."""
    out = base_fp
    for m in mods_fp:
        out = (out * m) // FP_BASE
    return out

def apply_fp(damage: int, mods_fp: Iterable[int]) -> int:
    """Apply fixed-point modifiers to integer damage."""
    mult = chain_mul(FP_BASE, mods_fp)
    return max(1, (damage * mult) // FP_BASE)


# ---------------------------- Dataclasses ----------------------------------------

@dataclass
class CalcPokemon:
    species: str
    types: List[str]
    level: int = 100
    # hp / atk / def / spa / spd / spe
    stats: Dict[str, int] = field(default_factory=dict)
    boosts: Dict[str, int] = field(default_factory=dict)
    cur_hp: int = 0
    original_types: List[str] = field(default_factory=list)
    ability: Optional[str] = None
    ability_on: bool = False
    item: Optional[str] = None
    status: str = ""
    gender: str = "N"
    tera_type: Optional[str] = None
    is_dynamaxed: bool = False
    boosted_stat: Optional[str] = None
    allies_fainted: int = 0
    weightkg: float = 0.0
    grounded: bool = True

    @property
    def max_hp(self) -> int:
        return max(1, self.stats.get("hp", 1))

    def has_ability(self, *ids: str) -> bool:
        return to_id_str(self.ability or "") in ids

    def has_item(self, *ids: str) -> bool:
        return to_id_str(self.item or "") in ids


@dataclass
class CalcMove:
    id: str
    name: str
    type: str
    category: str         # 'Physical' | 'Special' | 'Status'
    base_power: int
    priority: int = 0
    target: str = "normal"
    flags: Dict[str, bool] = field(default_factory=dict)
    multihit: Optional[Union[int, List[int]]] = None
    hits: int = 1
    is_crit: bool = False
    use_z: bool = False
    use_max: bool = False
    ohko: bool = False
    recoil: Optional[List[int]] = None
    drain: Optional[List[int]] = None
    heal: bool = False
    will_crit: bool = False
    has_secondary: bool = False
    # type before -ate abilities and other conversions
    base_type: str = ""

    def has_flag(self, flag: str) -> bool:
        return bool(self.flags.get(flag))


@dataclass
class DamageRange:
    rolls: List[int]
    priority: int = 0

    @property
    def min(self) -> int:
        return min(self.rolls) if self.rolls else 0

    @property
    def max(self) -> int:
        return max(self.rolls) if self.rolls else 0


DamageOracle = Callable[[int, CalcPokemon, CalcPokemon, CalcMove, CalcField], DamageRange]


# ---------------------------- Utility: stat stages --------------------------------

_STAGE_NUM = [2, 2, 2, 2, 2, 2, 2, 3, 4, 5, 6, 7, 8]  # index by stage + 6
_STAGE_DEN = [8, 7, 6, 5, 4, 3, 2, 2, 2, 2, 2, 2, 2]

def apply_stage(stat: int, stage: int, ignore_positive: bool=False, ignore_negative: bool=False) -> int:
    """Apply a standard stage multiplier to a stat."""
    if stage == 0:
        return stat
    s = max(-6, min(6, stage))
    if (s > 0 and ignore_positive) or (s < 0 and ignore_negative):
        return stat
    num = _STAGE_NUM[s + 6]
    den = _STAGE_DEN[s + 6]
    return (stat * num) // den


# ---------------------------- Move tables ----------------------------------------

FIXED_LEVEL_DAMAGE_MOVES = frozenset({"seismictoss", "nightshade"})
HALF_HP_MOVES = frozenset({"superfang", "naturesmadness", "ruination"})
FIXED_DAMAGE_MOVES: Dict[str, int] = {"dragonrage": 40, "sonicboom": 20}

ALWAYS_CRIT_MOVES = frozenset({
    "flowertrick", "wickedblow", "surgingstrikes", "frostbreath", "stormthrow",
})

SPREAD_TARGETS = frozenset({"allAdjacentFoes", "allAdjacent"})

# attack type -> (absorbing abilities)
_ABSORB_ABILITIES: Dict[str, Sequence[str]] = {
    "Fire": ("flashfire", "wellbakedbody"),
    "Water": ("waterabsorb", "stormdrain", "dryskin"),
    "Electric": ("voltabsorb", "lightningrod", "motordrive"),
    "Grass": ("sapsipper",),
    "Ground": ("eartheater",),
}

_TYPE_BOOST_ITEMS: Dict[str, str] = {
    "silkscarf": "Normal", "charcoal": "Fire", "mysticwater": "Water",
    "magnet": "Electric", "miracleseed": "Grass", "nevermeltice": "Ice",
    "blackbelt": "Fighting", "poisonbarb": "Poison", "softsand": "Ground",
    "sharpbeak": "Flying", "twistedspoon": "Psychic", "silverpowder": "Bug",
    "hardstone": "Rock", "spelltag": "Ghost", "dragonfang": "Dragon",
    "blackglasses": "Dark", "metalcoat": "Steel", "fairyfeather": "Fairy",
}

_RESIST_BERRIES: Dict[str, str] = {
    "occaberry": "Fire", "passhoberry": "Water", "wacanberry": "Electric",
    "rindoberry": "Grass", "yacheberry": "Ice", "chopleberry": "Fighting",
    "kebiaberry": "Poison", "shucaberry": "Ground", "cobaberry": "Flying",
    "payapaberry": "Psychic", "tangaberry": "Bug", "chartiberry": "Rock",
    "kasibberry": "Ghost", "habanberry": "Dragon", "colburberry": "Dark",
    "babiriberry": "Steel", "roseliberry": "Fairy",
}

_ATE_ABILITIES = frozenset({"aerilate", "galvanize", "pixilate", "refrigerate", "normalize"})
MOLD_BREAKERS = ("moldbreaker", "teravolt", "turboblaze")


def _breaks(attacker: CalcPokemon) -> bool:
    return attacker.has_ability(*MOLD_BREAKERS)


def max_move_power(move: CalcMove) -> int:
    """Base power of the Max Move generated from `move`."""
    bp = move.base_power
    if move.category == "Status":
        return 0
    weak = move.type in ("Fighting", "Poison")
    if bp >= 150:
        return 100 if weak else 150
    if bp >= 110:
        return 95 if weak else 140
    if bp >= 75:
        return 90 if weak else 130
    if bp >= 65:
        return 85 if weak else 120
    if bp >= 55:
        return 80 if weak else 110
    if bp >= 45:
        return 75 if weak else 100
    return 70 if weak else 90


def z_move_power(move: CalcMove) -> int:
    bp = move.base_power
    if move.category == "Status":
        return 0
    if bp >= 140:
        return 200
    if bp >= 130:
        return 195
    if bp >= 120:
        return 190
    if bp >= 110:
        return 185
    if bp >= 100:
        return 180
    if bp >= 90:
        return 175
    if bp >= 80:
        return 160
    if bp >= 70:
        return 140
    if bp >= 60:
        return 120
    return 100


# ---------------------------- Core damage ----------------------------------------

def _base_damage(level: int, base_power: int, atk: int, deff: int) -> int:
    """Core pre-mod damage integer math: floor(floor(floor(2L/5+2)*BP*A/D)/50)+2"""
    if base_power <= 0:
        return 0
    t1 = (2 * level) // 5 + 2
    t2 = (t1 * base_power * atk) // max(1, deff)
    t3 = t2 // 50
    return t3 + 2


def _stat(pokemon: CalcPokemon, stat: str, wonder_room: bool = False) -> int:
    if wonder_room and stat in ("def", "spd"):
        stat = "spd" if stat == "def" else "def"
    return max(1, int(pokemon.stats.get(stat, 1)))


def _weight_power(attacker: CalcPokemon, defender: CalcPokemon, move_id: str) -> int:
    if move_id in ("lowkick", "grassknot"):
        w = defender.weightkg
        if w >= 200:
            return 120
        if w >= 100:
            return 100
        if w >= 50:
            return 80
        if w >= 25:
            return 60
        if w >= 10:
            return 40
        return 20
    # heavyslam / heatcrash
    ratio = attacker.weightkg / max(0.1, defender.weightkg)
    if ratio >= 5:
        return 120
    if ratio >= 4:
        return 100
    if ratio >= 3:
        return 80
    if ratio >= 2:
        return 60
    return 40


def _hp_ratio_power(attacker: CalcPokemon) -> int:
    # flail / reversal
    p = 48 * attacker.cur_hp // attacker.max_hp
    if p <= 1:
        return 200
    if p <= 4:
        return 150
    if p <= 9:
        return 100
    if p <= 16:
        return 80
    if p <= 32:
        return 40
    return 20


def variable_base_power(gen: int, attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove, fld: CalcField) -> int:
    """Base power for moves whose power depends on the battle state."""
    mid = move.id
    bp = move.base_power
    if mid in ("eruption", "waterspout", "dragonenergy"):
        return max(1, 150 * attacker.cur_hp // attacker.max_hp)
    if mid in ("flail", "reversal"):
        return _hp_ratio_power(attacker)
    if mid == "gyroball":
        return min(150, 25 * _stat(defender, "spe") // _stat(attacker, "spe") + 1)
    if mid == "electroball":
        r = _stat(attacker, "spe") // _stat(defender, "spe")
        return 150 if r >= 4 else 120 if r >= 3 else 80 if r >= 2 else 60 if r >= 1 else 40
    if mid in ("heavyslam", "heatcrash", "lowkick", "grassknot"):
        return _weight_power(attacker, defender, mid)
    if mid == "acrobatics" and not attacker.item:
        return bp * 2
    if mid == "facade" and attacker.status in ("BRN", "PAR", "PSN", "TOX"):
        return bp * 2
    if mid in ("hex", "infernalparade") and defender.status:
        return bp * 2
    if mid in ("venoshock", "barbbarrage") and defender.status in ("PSN", "TOX"):
        return bp * 2
    if mid == "knockoff" and gen >= 6 and defender.item:
        return int(bp * 1.5)
    if mid == "brine" and defender.cur_hp * 2 <= defender.max_hp:
        return bp * 2
    if mid == "weatherball" and fld.weather in ("sunnyday", "desolateland", "raindance", "primordialsea",
                                                 "sandstorm", "hail", "snow"):
        return bp * 2
    if mid in ("storedpower", "powertrip"):
        return 20 + 20 * sum(v for k, v in attacker.boosts.items() if v > 0)
    return bp


def type_chart_effectiveness(move: CalcMove, attacker: CalcPokemon, defender: CalcPokemon, fld: CalcField) -> float:
    if move.type == "???":
        return 1.0
    ignore_ghost = attacker.has_ability("scrappy", "mindseye") or fld.defender_side.foresight
    if defender.tera_type and defender.tera_type != "Stellar":
        def_types: Sequence[str] = [defender.tera_type]
    else:
        def_types = defender.types
    if move.id == "thousandarrows" and "Flying" in def_types:
        return 1.0
    return type_effectiveness(
        move.type, def_types, _build_static_chart(), move.id,
        inverse=fld.inverse,
        ignore_ghost_immunity=ignore_ghost,
        strong_winds=fld.weather == "deltastream",
    )


def _ability_immune(attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove, fld: CalcField) -> bool:
    if _breaks(attacker):
        return False
    if move.type in _ABSORB_ABILITIES and defender.has_ability(*_ABSORB_ABILITIES[move.type]):
        return True
    if move.type == "Ground" and defender.has_ability("levitate") and not fld.gravity and move.id != "thousandarrows":
        return True
    return False


def _is_immune(attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove, fld: CalcField, eff: float) -> bool:
    if eff == 0.0:
        return True
    if _ability_immune(attacker, defender, move, fld):
        return True
    if move.type == "Ground" and not fld.gravity and move.id != "thousandarrows":
        if defender.has_item("airballoon") and not fld.magic_room:
            return True
        if not defender.grounded and "Flying" not in defender.types and not defender.has_ability("levitate"):
            # Magnet Rise / Telekinesis
            return True
    if defender.has_ability("wonderguard") and eff <= 1.0:
        if not _breaks(attacker):
            return True
    return False


def _fixed_damage(attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove) -> Optional[int]:
    mid = move.id
    if mid in FIXED_LEVEL_DAMAGE_MOVES:
        return attacker.level
    if mid in HALF_HP_MOVES:
        return max(1, defender.cur_hp // 2)
    if mid in FIXED_DAMAGE_MOVES:
        return FIXED_DAMAGE_MOVES[mid]
    if mid == "finalgambit":
        return attacker.cur_hp
    if mid == "endeavor":
        return max(0, defender.cur_hp - attacker.cur_hp)
    return None


def _attack_modifiers(attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove, fld: CalcField,
                      physical: bool) -> List[float]:
    mods: List[float] = []
    if physical and attacker.has_ability("hugepower", "purepower"):
        mods.append(2.0)
    if physical and attacker.has_ability("hustle"):
        mods.append(1.5)
    if physical and attacker.status and attacker.has_ability("guts"):
        mods.append(1.5)
    if not physical and fld.weather in ("sunnyday", "desolateland") and attacker.has_ability("solarpower"):
        mods.append(1.5)
    if physical and fld.weather in ("sunnyday", "desolateland") and fld.attacker_side.flower_gift:
        mods.append(1.5)
    if attacker.has_ability("flashfire") and attacker.ability_on and move.type == "Fire":
        mods.append(1.5)
    if attacker.boosted_stat in ("atk", "spa") and attacker.has_ability("protosynthesis", "quarkdrive"):
        if (attacker.boosted_stat == "atk") == physical:
            mods.append(5325 / 4096)
    if not attacker.is_dynamaxed and not fld.magic_room:
        if physical and attacker.has_item("choiceband"):
            mods.append(1.5)
        if not physical and attacker.has_item("choicespecs"):
            mods.append(1.5)
    return mods


def _defense_modifiers(attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove, fld: CalcField,
                       physical: bool) -> List[float]:
    mods: List[float] = []
    on = not _breaks(attacker)
    if not fld.magic_room:
        if defender.has_item("eviolite"):
            mods.append(1.5)
        if not physical and defender.has_item("assaultvest"):
            mods.append(1.5)
    if on and physical and defender.has_ability("furcoat"):
        mods.append(2.0)
    if on and physical and defender.status and defender.has_ability("marvelscale"):
        mods.append(1.5)
    if defender.boosted_stat in ("def", "spd") and defender.has_ability("protosynthesis", "quarkdrive"):
        if (defender.boosted_stat == "def") == physical:
            mods.append(5325 / 4096)
    if not physical and fld.weather == "sandstorm" and "Rock" in defender.types:
        mods.append(1.5)
    if physical and fld.weather == "snow" and "Ice" in defender.types:
        mods.append(1.5)
    return mods


def _power_modifiers(attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove, fld: CalcField,
                     base_power: int, original_type: str) -> List[float]:
    mods: List[float] = []
    if attacker.ability:
        if attacker.has_ability("technician") and base_power <= 60:
            mods.append(1.5)
        if attacker.has_ability("strongjaw") and move.has_flag("bite"):
            mods.append(1.5)
        if attacker.has_ability("ironfist") and move.has_flag("punch"):
            mods.append(1.2)
        if attacker.has_ability("toughclaws") and move.has_flag("contact"):
            mods.append(1.3)
        if attacker.has_ability("megalauncher") and move.has_flag("pulse"):
            mods.append(1.5)
        if attacker.has_ability("sharpness") and move.has_flag("slicing"):
            mods.append(1.5)
        if attacker.has_ability("punkrock") and move.has_flag("sound"):
            mods.append(1.3)
        if attacker.has_ability("reckless") and move.recoil:
            mods.append(1.2)
        if attacker.has_ability("sheerforce") and move.has_secondary:
            mods.append(1.3)
        if attacker.has_ability(*_ATE_ABILITIES) and original_type == "Normal":
            mods.append(1.2)
        if attacker.has_ability("sandforce") and fld.weather == "sandstorm" and move.type in ("Rock", "Ground", "Steel"):
            mods.append(1.3)
    if not _breaks(attacker):
        if defender.has_ability("thickfat") and move.type in ("Fire", "Ice"):
            mods.append(0.5)
        if defender.has_ability("heatproof") and move.type == "Fire":
            mods.append(0.5)
        if defender.has_ability("dryskin") and move.type == "Fire":
            mods.append(1.25)
    aura_broken = "aurabreak" in fld.ability_effects
    if move.type == "Dark" and "darkaura" in fld.ability_effects:
        mods.append(0.75 if aura_broken else 4 / 3)
    if move.type == "Fairy" and "fairyaura" in fld.ability_effects:
        mods.append(0.75 if aura_broken else 4 / 3)
    if not fld.magic_room and _TYPE_BOOST_ITEMS.get(to_id_str(attacker.item or "")) == move.type:
        mods.append(1.2)
    if fld.attacker_side.helping_hand:
        mods.append(1.5)
    if fld.attacker_side.battery and move.category == "Special":
        mods.append(5325 / 4096)
    if fld.attacker_side.power_spot:
        mods.append(5325 / 4096)
    return mods


def _final_modifiers(attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove, fld: CalcField,
                     eff: float) -> List[float]:
    mods: List[float] = []
    breaks = _breaks(attacker)
    if attacker.has_ability("tintedlens") and eff < 1.0:
        mods.append(2.0)
    if attacker.has_ability("sniper") and move.is_crit:
        mods.append(1.5)
    if eff > 1.0:
        if defender.has_ability("prismarmor") or (defender.has_ability("filter", "solidrock") and not breaks):
            mods.append(0.75)
    if defender.cur_hp >= defender.max_hp:
        if defender.has_ability("shadowshield") or (defender.has_ability("multiscale") and not breaks):
            mods.append(0.5)
    if fld.defender_side.friend_guard:
        mods.append(0.75)
    if not fld.magic_room:
        berry_type = _RESIST_BERRIES.get(to_id_str(defender.item or ""))
        if berry_type == move.type and (eff > 1.0 or berry_type == "Normal"):
            mods.append(0.5)
        if attacker.has_item("expertbelt") and eff > 1.0:
            mods.append(4915 / 4096)
        if attacker.has_item("lifeorb"):
            mods.append(5324 / 4096)
    return mods


def _ruin_modifiers(fld: CalcField, attacker: CalcPokemon, defender: CalcPokemon,
                    physical: bool) -> Tuple[List[float], List[float]]:
    """(attack stat mods, defense stat mods) from the four Ruin abilities."""
    attack_mods: List[float] = []
    defense_mods: List[float] = []
    if physical:
        if "swordofruin" in fld.ability_effects and not defender.has_ability("swordofruin"):
            defense_mods.append(0.75)
        if "tabletsofruin" in fld.ability_effects and not attacker.has_ability("tabletsofruin"):
            attack_mods.append(0.75)
    else:
        if "beadsofruin" in fld.ability_effects and not defender.has_ability("beadsofruin"):
            defense_mods.append(0.75)
        if "vesselofruin" in fld.ability_effects and not attacker.has_ability("vesselofruin"):
            attack_mods.append(0.75)
    return attack_mods, defense_mods


def _is_crit(attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove) -> bool:
    if defender.has_ability("battlearmor", "shellarmor"):
        return False
    return move.is_crit or move.will_crit or move.id in ALWAYS_CRIT_MOVES


def _hits(attacker: CalcPokemon, move: CalcMove) -> int:
    if move.multihit is None:
        return max(1, move.hits)
    if isinstance(move.multihit, int):
        return move.multihit
    lo, hi = move.multihit[0], move.multihit[-1]
    if attacker.has_ability("skilllink"):
        return hi
    if attacker.has_item("loadeddice"):
        return hi
    return lo + 1 if hi > lo else lo


def calc_damage_range(gen: int, attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove, fld: CalcField) -> List[int]:
    """
    Per-hit damage rolls (16 values) for a single use of `move`.

    Returns sixteen zeroes when the move cannot deal damage.
    """
    zero = [0] * 16
    if move.category == "Status" and not move.use_z:
        return zero

    eff = type_chart_effectiveness(move, attacker, defender, fld)
    if _is_immune(attacker, defender, move, fld, eff):
        return zero

    if move.ohko:
        return [defender.cur_hp] * 16

    fixed = _fixed_damage(attacker, defender, move)
    if fixed is not None:
        return [fixed] * 16

    base_power = variable_base_power(gen, attacker, defender, move, fld)
    original_type = move.base_type or move.type
    if move.use_max or attacker.is_dynamaxed:
        base_power = max_move_power(move)
    elif move.use_z:
        base_power = z_move_power(move)
    if base_power <= 0:
        return zero

    is_critical = _is_crit(attacker, defender, move)
    physical = move.category == "Physical"

    # Stats and stages; crit ignores attacker's negative and defender's positive stages
    if move.id == "bodypress":
        atk_stat, atk_stage = _stat(attacker, "def"), attacker.boosts.get("def", 0)
    elif move.id == "foulplay":
        atk_stat, atk_stage = _stat(defender, "atk"), defender.boosts.get("atk", 0)
    else:
        key = "atk" if physical else "spa"
        atk_stat, atk_stage = _stat(attacker, key), attacker.boosts.get(key, 0)
    def_key = "def" if physical or move.id in ("psyshock", "psystrike", "secretsword") else "spd"
    def_stat = _stat(defender, def_key, fld.wonder_room)
    def_stage = defender.boosts.get(def_key, 0)
    if attacker.has_ability("unaware"):
        def_stage = 0
    if defender.has_ability("unaware"):
        atk_stage = 0
    if move.id in ("sacredsword", "darkestlariat", "chipaway"):
        def_stage = 0

    eff_atk = apply_stage(atk_stat, atk_stage, ignore_negative=is_critical)
    eff_def = apply_stage(def_stat, def_stage, ignore_positive=is_critical)

    ruin_atk, ruin_def = _ruin_modifiers(fld, attacker, defender, physical)
    eff_atk = apply_fp(eff_atk, [to_fp(m) for m in _attack_modifiers(attacker, defender, move, fld, physical) + ruin_atk])
    eff_def = apply_fp(eff_def, [to_fp(m) for m in _defense_modifiers(attacker, defender, move, fld, physical) + ruin_def])

    base_power = apply_fp(base_power, [to_fp(m) for m in _power_modifiers(attacker, defender, move, fld, base_power, original_type)])

    base = _base_damage(attacker.level, base_power, eff_atk, max(1, eff_def))

    mods_fp: List[int] = []

    # 1) Targets (spread)
    mods_fp.append(to_fp(spread_modifier(fld.is_doubles, move.target in SPREAD_TARGETS)))

    # 2) Weather
    wmult, move_fails = weather_modifier(move.type, fld.weather, move.id, to_id_str(defender.item or "") or None)
    if move_fails:
        return zero
    mods_fp.append(to_fp(wmult))

    # 3) Critical
    if is_critical:
        mods_fp.append(to_fp(1.5 if gen >= 6 else 2.0))

    # 5) STAB
    stab_ability = to_id_str(attacker.ability) if attacker.ability else None
    stab_types = attacker.original_types or attacker.types
    if attacker.tera_type:
        stab = stab_multiplier(move.type, stab_types, attacker.tera_type, stab_ability)
    else:
        stab = stab_multiplier(move.type, attacker.types, None, stab_ability)

    # 7) Burn (physical only)
    burn = physical and attacker.status == "BRN" and not (
        attacker.has_ability("guts")) and not (move.id == "facade" and gen >= 6)

    # 8) Other
    other = [to_fp(m) for m in _final_modifiers(attacker, defender, move, fld, eff)]

    # 9) Screens
    screens = screen_modifier(
        move.category, fld.defender_side, is_critical, fld.is_doubles,
        ignores_screens=attacker.has_ability("infiltrator"),
    )
    if move.id in ("brickbreak", "psychicfangs", "ragingbull"):
        screens = 1.0

    # 10) Terrain
    terrain = terrain_modifier(move.type, attacker.grounded, defender.grounded, fld.terrain, gen)

    rolls: List[int] = []
    for r in range(85, 101):
        dmg = (apply_fp(base, mods_fp) * r) // 100
        dmg = apply_fp(dmg, [to_fp(stab)])
        dmg = int(math.floor(dmg * eff))
        if burn:
            dmg = max(1, dmg // 2)
        dmg = apply_fp(dmg, other + [to_fp(screens), to_fp(terrain)])
        rolls.append(max(1, dmg))
    return rolls


def default_oracle(gen: int, attacker: CalcPokemon, defender: CalcPokemon, move: CalcMove, fld: CalcField) -> DamageRange:
    """Raw HP damage rolls for one hit, plus the move's effective priority."""
    rolls = calc_damage_range(gen, attacker, defender, move, fld)
    move.hits = _hits(attacker, move)
    priority = move_priority(
        move.id,
        move.priority,
        category=move.category,
        move_type=move.type,
        ability=to_id_str(attacker.ability or ""),
        hp_is_full=attacker.cur_hp >= attacker.max_hp,
        is_healing_or_drain=bool(move.heal or move.drain),
        terrain=fld.terrain,
        gen=gen,
    )
    log.debug("oracle %s -> %s: %s..%s prio=%s", move.id, defender.species, min(rolls), max(rolls), priority)
    return DamageRange(rolls=rolls, priority=priority)
