"""
poke_find.py
------------
Locating pokemon in the knowledge store and in requests.

Protocol identities are ambiguous (nicknames repeat, disguises lie), so the
lookups narrow candidates step by step: details first, then name, then
condition. The condition match tolerates Regenerator healing between the two
sightings.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import List, Optional

from poke_env.data.normalize import to_id_str

from Data.abilities import unknown_ability, unknown_item
from Data.pokemon_helper import get_stat_range_from_details
from Knowledge.battle import (
    ActivePokemon,
    Battle,
    Player,
    PokemonCondition,
    PokemonDetails,
    PokemonIdent,
    PokemonIdentTarget,
    SidePokemon,
    VolatileData,
    compare_details,
    compare_ids,
)
from Knowledge.request import BattleRequest


@dataclass
class FoundPokemon:
    player: Optional[Player] = None
    pokemon: Optional[SidePokemon] = None
    active: Optional[ActivePokemon] = None


def condition_matches(known: PokemonCondition, seen: PokemonCondition) -> bool:
    """`seen` could be `known` now, allowing for a regeneration of max/3 in between."""
    if known.status != seen.status:
        return False
    if known.max_hp != seen.max_hp:
        return False
    if known.hp == seen.hp:
        return True

    regenerated = int(known.hp + known.max_hp / 3)
    lo = max(0, min(known.max_hp, regenerated - 1))
    hi = max(0, min(known.max_hp, regenerated + 1))
    return lo <= seen.hp <= hi


def find_side_pokemon(player: Player, name: str, details_filter: Optional[PokemonDetails] = None,
                      condition_filter: Optional[PokemonCondition] = None,
                      not_active: bool = False) -> Optional[SidePokemon]:
    team: List[SidePokemon] = [p for p in player.team if not (not_active and p.active)]

    if details_filter is not None:
        team = [p for p in team if compare_details(p.details, details_filter)]
        if not team:
            return None
        if len(team) == 1:
            return team[0]

    team = [p for p in team if p.ident.name == name]
    if not team:
        return None
    if len(team) == 1:
        return team[0]

    if condition_filter is not None:
        team = [p for p in team if condition_matches(p.condition, condition_filter)]
        if not team:
            return None

    return team[0]


def find_pokemon_in_battle(battle: Battle, target: PokemonIdentTarget,
                           details_filter: Optional[PokemonDetails] = None,
                           condition_filter: Optional[PokemonCondition] = None) -> FoundPokemon:
    player = battle.players.get(target.player_index)
    if player is None:
        return FoundPokemon()

    if target.active:
        active = player.active.get(target.slot)
        if active is None:
            return FoundPokemon(player=player)
        pokemon = side_entry_of(player, active)
        return FoundPokemon(player=player, pokemon=pokemon, active=active)

    pokemon = find_side_pokemon(player, target.name, details_filter, condition_filter, True)
    return FoundPokemon(player=player, pokemon=pokemon)


def create_active_from_side(pokemon: SidePokemon, slot: int, turn: int) -> ActivePokemon:
    return ActivePokemon(
        slot=slot,
        ident=copy.deepcopy(pokemon.ident),
        index=pokemon.index,
        details=copy.deepcopy(pokemon.details),
        condition=copy.deepcopy(pokemon.condition),
        stats=copy.deepcopy(pokemon.stats),
        boosts={},
        moves=copy.deepcopy(pokemon.moves),
        item=copy.deepcopy(pokemon.item),
        ability=copy.deepcopy(pokemon.ability),
        volatiles=set(),
        volatiles_data=VolatileData(),
        single_turn_statuses=set(),
        single_move_statuses=set(),
        switched_on_turn=turn,
        times_hit=pokemon.times_hit,
        total_burned_sleep_turns=pokemon.total_burned_sleep_turns,
        slept_by_rest=pokemon.slept_by_rest,
    )


def player_team_full_known(battle: Battle, player: Player) -> bool:
    if player.team_size and len(player.team) >= player.team_size:
        return True
    if battle.status.team_preview and battle.status.team_preview_size and len(player.team) >= battle.status.team_preview_size:
        return True
    return False


def _detached_entry(battle: Battle, player: Player, name: str, details: PokemonDetails,
                    condition: PokemonCondition, index: int) -> SidePokemon:
    return SidePokemon(
        index=index,
        ident=PokemonIdent(player_index=player.index, name=name),
        details=copy.deepcopy(details),
        condition=copy.deepcopy(condition),
        stats=get_stat_range_from_details(battle.status.gen, details),
        moves={},
        item=unknown_item(),
        ability=unknown_ability(),
        revealed=True,
        active=False,
    )


def find_side_pokemon_or_create_it(battle: Battle, player: Player, name: str, details: PokemonDetails,
                                   condition: PokemonCondition) -> SidePokemon:
    """Matching bench entry, else a new one.

    The new entry stays detached (index -1) when it cannot be a real new member:
    the roster is already complete, or the species is already present under
    Species Clause. Both cases mean someone is disguised.
    """
    found = find_side_pokemon(player, name, details, condition, True)
    if found is not None:
        return found

    if player_team_full_known(battle, player):
        return _detached_entry(battle, player, name, details, condition, -1)

    if to_id_str("Species Clause") in battle.status.rules:
        if any(compare_ids(p.details.species, details.species) for p in player.team):
            return _detached_entry(battle, player, name, details, condition, -1)

    entry = _detached_entry(battle, player, name, details, condition, len(player.team))
    player.team.append(entry)
    return entry


def find_request_side_pokemon(request: BattleRequest, name: str, details_filter: PokemonDetails,
                              condition_filter: PokemonCondition) -> int:
    """Request index of the bench member matching the identity, or -1."""
    side = request.side.pokemon
    candidates = [i for i, p in enumerate(side) if not p.active and not p.condition.fainted]

    if not candidates:
        return -1
    if len(candidates) == 1:
        return candidates[0]

    candidates = [i for i in candidates if side[i].ident.name == name]
    if not candidates:
        return -1
    if len(candidates) == 1:
        return candidates[0]

    candidates = [i for i in candidates if compare_details(side[i].details, details_filter)]
    if not candidates:
        return -1
    if len(candidates) == 1:
        return candidates[0]

    candidates = [i for i in candidates if condition_matches(side[i].condition, condition_filter)]
    return candidates[0] if candidates else -1


def sync_active_with_side(player: Player, active: ActivePokemon) -> None:
    """Write the active combatant's state back into its roster entry."""
    if not 0 <= active.index < len(player.team):
        return
    side = player.team[active.index]
    side.ident.name = active.ident.name
    side.details = copy.deepcopy(active.details)
    side.condition = copy.deepcopy(active.condition)
    side.stats = copy.deepcopy(active.stats)
    side.moves = copy.deepcopy(active.moves)
    side.item = copy.deepcopy(active.item)
    side.ability = copy.deepcopy(active.ability)
    side.times_hit = active.times_hit
    side.total_burned_sleep_turns = active.total_burned_sleep_turns
    side.slept_by_rest = active.slept_by_rest


def side_entry_of(player: Player, active: ActivePokemon) -> Optional[SidePokemon]:
    if 0 <= active.index < len(player.team):
        return player.team[active.index]
    return None
