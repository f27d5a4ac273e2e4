"""
illusion.py
-----------
Deductions that expose a disguised (Illusion) combatant.

Two situations give a disguise away: a Prankster-boosted status move that is
blocked although the target is not Dark-type, and a damaging move reported as
"immune" while the calculator says the apparent species would take damage.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from poke_env.data.normalize import to_id_str

from Data.calc import estimate_damage
from Data.pokemon_helper import apply_transform, apply_type_changes, new_calc_pokemon
from Knowledge.battle import ActivePokemon, Battle, Player, compare_ids

if TYPE_CHECKING:  # pragma: no cover
    from Knowledge.analyzer import BattleAnalyzer

POKEMON_WITH_ILLUSION = frozenset(to_id_str(s) for s in ("Zorua", "Zorua-Hisui", "Zoroark", "Zoroark-Hisui"))

POKEMON_WITH_ILLUSION_DARK_TYPE = frozenset(to_id_str(s) for s in ("Zorua", "Zoroark"))

DEFAULT_ILLUSION_GUESS = "zoroark"

# Tried in order when nobody in the known roster explains the immunity
FALLBACK_ILLUSION_GUESSES = ("zoroark", "zoroarkhisui")


def _apparent_types(battle: Battle, pokemon: ActivePokemon):
    poke = new_calc_pokemon(battle.status.gen, pokemon.details.species)
    apply_transform(battle, poke, pokemon, "avg")
    apply_type_changes(poke, pokemon)
    return poke.types


def detect_illusion_from_prankster(analyzer: "BattleAnalyzer", battle: Battle, attacker_player: Player,
                                   attacker: ActivePokemon, defender_player: Player, defender: ActivePokemon,
                                   move: str) -> None:
    types = _apparent_types(battle, defender)

    if compare_ids(move, "Thunder Wave") and "Ground" in types:
        return

    if "Dark" in types:
        return

    defender.volatiles_data.fake = True
    analyzer.debug(f"Illusion detected on Player[{defender_player.index}] - Active[{defender.slot}] (Prankster move)")

    for poke in defender_player.team:
        if to_id_str(poke.details.species) in POKEMON_WITH_ILLUSION_DARK_TYPE:
            defender.volatiles_data.fake_guess = poke.details.species
            analyzer.debug(f"Illusion faker guess: {poke.details.species}")
            break

    if not defender.volatiles_data.fake_guess:
        defender.volatiles_data.fake_guess = DEFAULT_ILLUSION_GUESS
        analyzer.debug("Illusion faker guess: Zoroark")


def detect_illusion_from_damage_move_immunity(analyzer: "BattleAnalyzer", battle: Battle, attacker_player: Player,
                                              attacker: ActivePokemon, defender_player: Player,
                                              defender: ActivePokemon, move: str) -> None:
    damage = estimate_damage(battle, attacker_player, attacker, defender_player, defender, move)
    if damage.max <= 0:
        return

    fake_defender = copy.deepcopy(defender)

    defender.volatiles_data.fake = True
    analyzer.debug(f"Illusion detected on Player[{defender_player.index}] - Active[{defender.slot}] (Natural Immunity)")

    for poke in defender_player.team:
        if to_id_str(poke.details.species) not in POKEMON_WITH_ILLUSION:
            continue
        fake_defender.details.species = poke.details.species
        if estimate_damage(battle, attacker_player, attacker, defender_player, fake_defender, move).max <= 0:
            defender.volatiles_data.fake_guess = poke.details.species
            analyzer.debug(f"Illusion faker guess: {poke.details.species}")
            return

    for guess in FALLBACK_ILLUSION_GUESSES:
        fake_defender.details.species = guess
        if estimate_damage(battle, attacker_player, attacker, defender_player, fake_defender, move).max <= 0:
            defender.volatiles_data.fake_guess = guess
            analyzer.debug(f"Illusion faker guess: {guess}")
            return
