"""
evaluate_pokemon.py
-------------------
Matchup score of one of our roster members against the foes' actives, used
to rank switches: for each foe, best damage dealt / (1 + best damage taken).
"""

from __future__ import annotations

import copy

from Data.abilities import has_ability
from Data.accuracy import calc_move_accuracy
from Data.calc import CalcOptions, calc_damage
from Data.pokemon_helper import get_active_pokemon_turn_recovery
from Decision.exceptions import apply_damage_exceptions
from Knowledge.battle import ActivePokemon, Battle, PokemonMove, VolatileStatuses
from Knowledge.initializers import create_side_pokemon_from_request
from Knowledge.poke_find import create_active_from_side, find_side_pokemon
from utils.common_sets import apply_common_sets_to_foe_active

_OPTIONS = CalcOptions(
    consider_stats_attacker="max",
    consider_stats_defender="max",
    use_percent=True,
    ignore_current_hp=True,
)


async def evaluate_pokemon(battle: Battle, request_index: int, is_active: bool = False) -> float:
    request = battle.request
    if request is None or request_index >= len(request.side.pokemon):
        return 0.0

    main_player = battle.players.get(battle.main_player)
    if main_player is None:
        return 0.0

    poke_a = create_active_from_side(
        create_side_pokemon_from_request(battle.status.gen, -1, request.side.pokemon[request_index]), 0, 1)

    if is_active and request.active:
        if request_index < len(request.active):
            poke_a.moves = {}
            for move in request.active[request_index].moves:
                poke_a.moves[move.id] = PokemonMove(
                    id=move.id,
                    revealed=False,
                    pp=move.pp if move.pp is not None else 1,
                    max_pp=move.max_pp or 1,
                    disabled=move.disabled,
                )
    else:
        known = find_side_pokemon(main_player, poke_a.ident.name, poke_a.details, poke_a.condition, True)
        if known is not None:
            poke_a.moves = copy.deepcopy(known.moves)

    result = 0.0
    for player in battle.players.values():
        if player.index == battle.main_player:
            continue

        for foe_active in player.active.values():
            if foe_active.condition.fainted:
                continue

            poke_b = apply_common_sets_to_foe_active(battle, foe_active)
            turn_recovery = get_active_pokemon_turn_recovery(battle, poke_b)

            top_dealt = 0.0
            for move in poke_a.moves.values():
                if move.pp <= 0:
                    continue
                damage = await calc_damage(battle, main_player, poke_a, player, poke_b, move.id, _OPTIONS)
                damage = apply_damage_exceptions(battle, poke_a, poke_b, move.id, damage)
                accuracy = await calc_move_accuracy(battle, main_player, poke_a, player, poke_b, move.id)
                top_dealt = max(top_dealt, min(100.0, max(0.0, damage.max - turn_recovery)) * accuracy)

            top_taken = 0.0
            for move in poke_b.moves.values():
                if move.pp <= 0:
                    continue
                damage = await calc_damage(battle, player, poke_b, main_player, poke_a, move.id, _OPTIONS)
                damage = apply_damage_exceptions(battle, poke_b, poke_a, move.id, damage)
                accuracy = await calc_move_accuracy(battle, player, poke_b, main_player, poke_a, move.id)
                top_taken = max(top_taken, min(100.0, damage.max) * accuracy)

            result += top_dealt / (1 + top_taken)

    return result


def check_bad_volatile_condition(battle: Battle, pokemon: ActivePokemon) -> bool:
    """True if switching out would shed a harmful volatile or a dropped offensive stat."""
    if VolatileStatuses.LeechSeed in pokemon.volatiles or VolatileStatuses.Curse in pokemon.volatiles:
        if not has_ability(battle, pokemon, "Magic Guard"):
            return True

    return any(pokemon.boosts.get(stat, 0) < 0 for stat in ("atk", "spa", "accuracy"))
