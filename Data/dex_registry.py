"""dex_registry.py
Generation-indexed reference data (species, natures, items) for battle logic.

Species and nature data come from poke_env.data.GenData. Items and abilities
are carried as ids; the few item properties we need (forme-bound items,
Natural Gift types, berries) are derived from the pokedex or kept in small
tables here. Optional Showdown JSON dumps (items.json / abilities.json) are
picked up from the first existing directory among:
  - showdown/
  - Resources/showdown/

Lookups never raise: an unknown species resolves to the default entry
(Silvally with an unknown type), searching the requested generation first and
then every generation from the newest down.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
import json
import logging
import os
from typing import Any, Dict, List, Optional

from poke_env.data import GenData
from poke_env.data.normalize import to_id_str

log = logging.getLogger('pokedecider.dex')

LAST_GEN = 9
FIRST_GEN = 1

DEFAULT_SPECIES = "Silvally"
DEFAULT_ABILITY = "Illuminate"
DEFAULT_ITEM = "Poke Ball"
UNKNOWN_TYPE = "???"

_DEF_DIR_CANDIDATES = [
    os.path.join(os.getcwd(), 'showdown'),
    os.path.join(os.getcwd(), 'Resources', 'showdown'),
]


def _clamp_gen(gen: int) -> int:
    if gen < FIRST_GEN or gen > LAST_GEN:
        return LAST_GEN
    return gen


@lru_cache(maxsize=None)
def gen_data(gen: int) -> GenData:
    return GenData.from_gen(_clamp_gen(gen))


# ---- Stats ----

def calc_stat(base: int, iv: int, ev: int, level: int, nature: float, is_hp: bool) -> int:
    if is_hp:
        if base == 1:  # Shedinja
            return 1
        return ((2 * base + iv + (ev // 4)) * level) // 100 + level + 10
    else:
        stat = ((2 * base + iv + (ev // 4)) * level) // 100 + 5
        stat = int(stat * nature)  # floor
        return stat


NATURE_MODS: Dict[str, Dict[str, float]] = {
    "hardy": {"atk":1.0,"def":1.0,"spa":1.0,"spd":1.0,"spe":1.0},
    "lonely": {"atk":1.1,"def":0.9,"spa":1.0,"spd":1.0,"spe":1.0},
    "adamant": {"atk":1.1,"def":1.0,"spa":0.9,"spd":1.0,"spe":1.0},
    "naughty": {"atk":1.1,"def":1.0,"spa":1.0,"spd":0.9,"spe":1.0},
    "brave": {"atk":1.1,"def":1.0,"spa":1.0,"spd":1.0,"spe":0.9},
    "bold": {"atk":0.9,"def":1.1,"spa":1.0,"spd":1.0,"spe":1.0},
    "docile": {"atk":1.0,"def":1.0,"spa":1.0,"spd":1.0,"spe":1.0},
    "impish": {"atk":0.9,"def":1.1,"spa":1.0,"spd":1.0,"spe":1.0},
    "lax": {"atk":1.0,"def":1.1,"spa":1.0,"spd":0.9,"spe":1.0},
    "relaxed": {"atk":1.0,"def":1.1,"spa":1.0,"spd":1.0,"spe":0.9},
    "modest": {"atk":0.9,"def":1.0,"spa":1.1,"spd":1.0,"spe":1.0},
    "mild": {"atk":1.0,"def":0.9,"spa":1.1,"spd":1.0,"spe":1.0},
    "bashful": {"atk":1.0,"def":1.0,"spa":1.0,"spd":1.0,"spe":1.0},
    "rash": {"atk":1.0,"def":1.0,"spa":1.1,"spd":0.9,"spe":1.0},
    "quiet": {"atk":1.0,"def":1.0,"spa":1.1,"spd":1.0,"spe":0.9},
    "calm": {"atk":0.9,"def":1.0,"spa":1.0,"spd":1.1,"spe":1.0},
    "gentle": {"atk":1.0,"def":0.9,"spa":1.0,"spd":1.1,"spe":1.0},
    "careful": {"atk":1.0,"def":1.0,"spa":0.9,"spd":1.1,"spe":1.0},
    "sassy": {"atk":1.0,"def":1.0,"spa":1.0,"spd":1.1,"spe":0.9},
    "timid": {"atk":0.9,"def":1.0,"spa":1.0,"spd":1.0,"spe":1.1},
    "hasty": {"atk":1.0,"def":0.9,"spa":1.0,"spd":1.0,"spe":1.1},
    "jolly": {"atk":1.0,"def":1.0,"spa":0.9,"spd":1.0,"spe":1.1},
    "naive": {"atk":1.0,"def":1.0,"spa":1.0,"spd":0.9,"spe":1.1},
    "serious": {"atk":1.0,"def":1.0,"spa":1.0,"spd":1.0,"spe":1.0},
    "quirky": {"atk":1.0,"def":1.0,"spa":1.0,"spd":1.0,"spe":1.0},
}


def nature_multiplier(nature_id: Optional[str], stat_key: str) -> float:
    n = NATURE_MODS.get(to_id_str(nature_id or ""), NATURE_MODS["hardy"])
    return n.get(stat_key, 1.0)


# ---- Species ----

@dataclass
class SpeciesData:
    id: str
    name: str
    types: List[str]
    base_stats: Dict[str, int]
    abilities: List[str] = field(default_factory=list)
    base_species: str = ""
    forme: str = ""
    required_item: Optional[str] = None
    weightkg: float = 0.0
    num: int = 0


def _species_from_entry(sid: str, entry: Dict[str, Any]) -> SpeciesData:
    abilities = entry.get("abilities") or {}
    return SpeciesData(
        id=sid,
        name=entry.get("name", sid),
        types=list(entry.get("types") or [UNKNOWN_TYPE]),
        base_stats=dict(entry.get("baseStats") or {}),
        abilities=[abilities[k] for k in ("0", "1", "H", "S") if k in abilities],
        base_species=entry.get("baseSpecies") or entry.get("name", sid),
        forme=entry.get("forme") or "",
        required_item=entry.get("requiredItem"),
        weightkg=float(entry.get("weightkg") or 0.0),
        num=int(entry.get("num") or 0),
    )


def _raw_species(gen: int, species: str) -> Optional[Dict[str, Any]]:
    return gen_data(gen).pokedex.get(to_id_str(species))


def species_exists(gen: int, species: str) -> bool:
    return _raw_species(gen, species) is not None


@lru_cache(maxsize=4096)
def find_species(gen: int, species: str) -> SpeciesData:
    """Species data, searching gen first, then newest to oldest, then the default."""
    gen = _clamp_gen(gen)
    sid = to_id_str(species or "")
    entry = _raw_species(gen, sid)
    if entry is not None:
        return _species_from_entry(sid, entry)
    for g in range(LAST_GEN, FIRST_GEN - 1, -1):
        entry = _raw_species(g, sid)
        if entry is not None:
            return _species_from_entry(sid, entry)
    log.debug("Unknown species %r, using default entry", species)
    default_id = to_id_str(DEFAULT_SPECIES)
    data = _species_from_entry(default_id, _raw_species(LAST_GEN, default_id) or {})
    data.types = [UNKNOWN_TYPE]
    return data


# ---- Items ----

# Techno Blast types (Genesect drives keep Genesect's own typing)
DRIVE_TYPES: Dict[str, str] = {
    "burndrive": "Fire",
    "chilldrive": "Ice",
    "dousedrive": "Water",
    "shockdrive": "Electric",
}

NATURAL_GIFT_TYPES: Dict[str, str] = {
    "cheriberry": "Fire", "chestoberry": "Water", "pechaberry": "Electric",
    "rawstberry": "Grass", "aspearberry": "Ice", "leppaberry": "Fighting",
    "oranberry": "Poison", "persimberry": "Ground", "lumberry": "Flying",
    "sitrusberry": "Psychic", "figyberry": "Bug", "wikiberry": "Rock",
    "magoberry": "Ghost", "aguavberry": "Dragon", "iapapaberry": "Dark",
    "razzberry": "Steel",
    "occaberry": "Fire", "passhoberry": "Water", "wacanberry": "Electric",
    "rindoberry": "Grass", "yacheberry": "Ice", "chopleberry": "Fighting",
    "kebiaberry": "Poison", "shucaberry": "Ground", "cobaberry": "Flying",
    "payapaberry": "Psychic", "tangaberry": "Bug", "chartiberry": "Rock",
    "kasibberry": "Ghost", "habanberry": "Dragon", "colburberry": "Dark",
    "babiriberry": "Steel", "chilanberry": "Normal", "roseliberry": "Fairy",
    "liechiberry": "Grass", "ganlonberry": "Ice", "salacberry": "Fighting",
    "petayaberry": "Poison", "apicotberry": "Ground", "lansatberry": "Flying",
    "starfberry": "Psychic", "enigmaberry": "Bug", "micleberry": "Rock",
    "custapberry": "Ghost", "jabocaberry": "Dragon", "rowapberry": "Dark",
    "keeberry": "Fairy", "marangaberry": "Dark",
}


def is_berry(item: str) -> bool:
    return to_id_str(item or "").endswith("berry")


@lru_cache(maxsize=None)
def _item_forme_index(gen: int) -> Dict[str, str]:
    """required item id -> forme species id (plates, memories, mega stones, ...)."""
    out: Dict[str, str] = {}
    for sid, entry in gen_data(gen).pokedex.items():
        req = entry.get("requiredItem")
        if req:
            out.setdefault(to_id_str(req), sid)
        for req in entry.get("requiredItems") or []:
            out.setdefault(to_id_str(req), sid)
    return out


def forme_for_item(gen: int, item: str) -> Optional[SpeciesData]:
    sid = _item_forme_index(_clamp_gen(gen)).get(to_id_str(item or ""))
    if sid is None:
        return None
    return find_species(gen, sid)


def item_type(gen: int, item: str) -> Optional[str]:
    """Type bound to a plate / memory / drive, if any."""
    iid = to_id_str(item or "")
    if iid in DRIVE_TYPES:
        return DRIVE_TYPES[iid]
    if not (iid.endswith("plate") or iid.endswith("memory")):
        return None
    forme = forme_for_item(gen, iid)
    if forme is None or not forme.types:
        return None
    return forme.types[0]


def is_mega_stone(gen: int, item: str) -> bool:
    forme = forme_for_item(gen, item)
    return forme is not None and forme.forme.lower().startswith("mega")


# ---- Optional Showdown dumps ----

@lru_cache(maxsize=1)
def _load_all() -> Dict[str, Dict[str, Any]]:
    root = None
    for cand in _DEF_DIR_CANDIDATES:
        if os.path.isdir(cand):
            root = cand
            break
    if root is None:
        return {'items': {}, 'abilities': {}}

    def load_json(name: str) -> Dict[str, Any]:
        p = os.path.join(root, name)
        if not os.path.isfile(p):
            return {}
        try:
            with open(p, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log.warning("Could not read %s: %s", p, e)
            return {}
        if isinstance(data, dict):
            return {to_id_str(k): v for k, v in data.items()}
        return {}

    return {'items': load_json('items.json'), 'abilities': load_json('abilities.json')}


def get_item(item_id: str) -> Optional[Dict[str, Any]]:
    return _load_all()['items'].get(to_id_str(item_id or ""))


def get_ability(ability_id: str) -> Optional[Dict[str, Any]]:
    return _load_all()['abilities'].get(to_id_str(ability_id or ""))


def find_ability(ability: str) -> str:
    aid = to_id_str(ability or "")
    return aid or to_id_str(DEFAULT_ABILITY)


def find_item(item: str) -> str:
    iid = to_id_str(item or "")
    return iid or to_id_str(DEFAULT_ITEM)


def fling_power(item: str) -> int:
    data = get_item(item) or {}
    fling = data.get("fling") or {}
    try:
        return int(fling.get("basePower") or 0)
    except (TypeError, ValueError):
        return 0
