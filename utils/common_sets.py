"""
common_sets.py
--------------
Per-generation "common competitive set" table, used to fill what is still
unknown about a foe's active combatant before the strategies evaluate it.

Files are ``sets-<gen>.json`` under the configured sets directory, holding
either a list of ``[species_id, set]`` pairs or a ``{species_id: set}`` mapping.
A set may carry ``ability``, ``item``, ``nature``, ``moves``, ``ivs`` and ``evs``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from poke_env.data.normalize import to_id_str

from Data.dex_registry import LAST_GEN, calc_stat, find_species, nature_multiplier
from Data.pokemon_helper import STAT_KEYS
from Knowledge.battle import ActivePokemon, Battle, PokemonMove, StatKnowledge, VolatileStatuses
from utils.config import load_settings

logger = logging.getLogger('pokedecider.sets')

MAX_MOVES = 4


@dataclass
class CommonSet:
    ability: Optional[str] = None
    item: Optional[str] = None
    nature: Optional[str] = None
    moves: List[str] = field(default_factory=list)
    ivs: Dict[str, int] = field(default_factory=dict)
    evs: Dict[str, int] = field(default_factory=dict)


def _stat_table(raw: Any) -> Dict[str, int]:
    if not isinstance(raw, dict):
        return {}
    out: Dict[str, int] = {}
    for k, v in raw.items():
        if k in STAT_KEYS:
            try:
                out[k] = int(v)
            except (TypeError, ValueError):
                continue
    return out


def _parse_set(defn: Dict[str, Any]) -> CommonSet:
    moves = defn.get('moves')
    return CommonSet(
        ability=to_id_str(defn['ability']) if defn.get('ability') else None,
        item=to_id_str(defn['item']) if defn.get('item') else None,
        nature=str(defn['nature']) if defn.get('nature') else None,
        moves=[to_id_str(m) for m in moves if isinstance(m, str)] if isinstance(moves, list) else [],
        ivs=_stat_table(defn.get('ivs')),
        evs=_stat_table(defn.get('evs')),
    )


class CommonSetRepository:
    """Lazily loads and caches one species -> set table per generation."""

    def __init__(self, sets_dir: Optional[str] = None):
        self.sets_dir = Path(sets_dir or load_settings().sets_dir)
        self._cache: Dict[int, Dict[str, CommonSet]] = {}
        self._warned_missing_dir = False

    def _load(self, gen: int) -> Dict[str, CommonSet]:
        if not self.sets_dir.is_dir():
            if not self._warned_missing_dir:
                logger.warning("Common sets directory %s does not exist; foes are evaluated without set guesses",
                               self.sets_dir)
                self._warned_missing_dir = True
            return {}
        path = self.sets_dir / f'sets-{gen}.json'
        if not path.exists():
            logger.debug("No common sets for gen %d at %s", gen, path)
            return {}
        try:
            with path.open('r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not load common sets from %s: %s", path, e)
            return {}

        if isinstance(data, dict):
            pairs = list(data.items())
        elif isinstance(data, list):
            pairs = [tuple(p) for p in data if isinstance(p, (list, tuple)) and len(p) == 2]
        else:
            pairs = []

        table: Dict[str, CommonSet] = {}
        for species, defn in pairs:
            if isinstance(defn, dict):
                table[to_id_str(str(species))] = _parse_set(defn)
        logger.debug("Loaded %d common sets for gen %d", len(table), gen)
        return table

    def get_repository(self, gen: int) -> Dict[str, CommonSet]:
        gen = int(gen or LAST_GEN)
        if gen < 1 or gen > LAST_GEN:
            gen = LAST_GEN
        if gen not in self._cache:
            self._cache[gen] = self._load(gen)
        return self._cache[gen]

    def get(self, gen: int, species: str) -> Optional[CommonSet]:
        return self.get_repository(gen).get(to_id_str(species or ''))


_default_repository: Optional[CommonSetRepository] = None


def default_repository() -> CommonSetRepository:
    global _default_repository
    if _default_repository is None:
        _default_repository = CommonSetRepository(os.getenv('POKEDECIDER_SETS_DIR') or None)
    return _default_repository


# ---- Stat guesses ----

def _guessed_stats(gen: int, species: str, level: int, evs: Dict[str, int], ivs: Dict[str, int],
                   nature: Optional[str]) -> Dict[str, int]:
    base = find_species(gen, species).base_stats
    out: Dict[str, int] = {}
    for s in STAT_KEYS:
        b = int(base.get(s, 1) or 1)
        out[s] = calc_stat(
            b,
            ivs.get(s, 31),
            evs.get(s, 0),
            level,
            1.0 if s == 'hp' else nature_multiplier(nature, s),
            s == 'hp',
        )
    return out


def _role_evs(active: ActivePokemon) -> Dict[str, int]:
    h_atk = max(active.stats.atk.max, active.stats.spa.max)
    h_def = max(active.stats.def_.max, active.stats.spd.max)
    if h_atk > h_def:
        return {'atk': 252, 'spa': 252, 'spe': 252}
    return {'hp': 252, 'def': 128, 'spd': 128}


def apply_common_sets_to_foe_active(battle: Battle, active: ActivePokemon,
                                    repository: Optional[CommonSetRepository] = None) -> ActivePokemon:
    """Snapshot of `active` with unknown ability / item / stats / moves filled from the common set."""
    gen = battle.status.gen
    repo = repository or default_repository()

    species = active.details.species
    if active.volatiles_data.fake and active.volatiles_data.fake_guess:
        species = active.volatiles_data.fake_guess
    if VolatileStatuses.Transform in active.volatiles and active.volatiles_data.transformed_info is not None:
        species = active.volatiles_data.transformed_info.details.species

    common_set = repo.get(gen, species)
    modified = copy.deepcopy(active)

    # ---- Ability ----
    if not modified.ability.known:
        if common_set is not None:
            if common_set.ability:
                modified.ability.known = True
                modified.ability.ability = common_set.ability
        else:
            abilities = find_species(gen, species).abilities
            if abilities:
                modified.ability.known = True
                modified.ability.ability = to_id_str(abilities[0])

    # ---- Item ----
    if common_set is not None and common_set.item and not modified.item.known:
        modified.item.known = True
        modified.item.item = common_set.item

    # ---- Stats ----
    level = modified.details.level
    if common_set is not None:
        guessed = _guessed_stats(gen, modified.details.species, level, common_set.evs, common_set.ivs,
                                 common_set.nature)
    elif level <= 100:
        guessed = _guessed_stats(gen, modified.details.species, level, _role_evs(modified), {}, None)
    else:
        guessed = _guessed_stats(gen, modified.details.species, level,
                                 {'atk': 252, 'def': 252, 'spa': 252, 'spd': 252, 'spe': 252}, {}, None)

    for s in STAT_KEYS:
        if not modified.stats.get(s).known:
            modified.stats.set(s, StatKnowledge(known=True, min=guessed[s], max=guessed[s]))

    # ---- Moves ----
    if common_set is not None and len(modified.moves) < MAX_MOVES:
        for move_id in common_set.moves:
            if len(modified.moves) >= MAX_MOVES:
                break
            if move_id in modified.moves:
                continue
            modified.moves[move_id] = PokemonMove(id=move_id, revealed=False, pp=1, max_pp=1, disabled=False)

    return modified
