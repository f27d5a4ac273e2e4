"""
analyzer.py
-----------
State synchronizer: applies typed battle events to a Battle, one at a time.

The analyzer owns the transient "move in progress" attribution (which move is
being executed, by whom, against whom, and what each target experienced) that
the incidental handlers need to interpret damage, immunities and misses.

    analyzer = BattleAnalyzer(create_battle("battle-gen9randombattle-1"))
    for event in events:
        analyzer.next_event(event)
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from poke_env.data.normalize import to_id_str

from Data.poke_env_moves_info import get_move_base_pp, max_pp_from_base_pp
from Knowledge.battle import (
    ABILITY_EFFECT_SOURCES,
    ActivePokemon,
    Battle,
    BattleEffect,
    MoveHit,
    PokemonIdentTarget,
    PokemonMove,
    VolatileStatuses,
)
from Knowledge.events import BattleEvent
from Knowledge.majors import MAJOR_EVENT_HANDLERS
from Knowledge.minors import MINOR_EVENT_HANDLERS
from Knowledge.poke_find import find_pokemon_in_battle

logger = logging.getLogger('pokedecider.analyzer')


class BattleAnalyzer:
    def __init__(self, battle: Battle, on_debug: Optional[Callable[[str], None]] = None):
        self.battle = battle
        self.on_debug = on_debug

        self.current_move: Optional[PokemonMove] = None
        self.current_move_user: Optional[ActivePokemon] = None
        self.current_move_targets: List[ActivePokemon] = []
        # keyed by hit_key(player_index, slot)
        self.current_move_hits: Dict[str, MoveHit] = {}

    # ---- Event entry point ----

    def next_event(self, event: Optional[BattleEvent]) -> None:
        if event is None:
            return
        handler = MAJOR_EVENT_HANDLERS.get(event.type) or MINOR_EVENT_HANDLERS.get(event.type)
        if handler is None:
            return
        handler(self, self.battle, event)

    def debug(self, msg: str) -> None:
        logger.debug("[%s] %s", self.battle.id, msg)
        if self.on_debug is not None:
            self.on_debug(msg)

    def destroy(self) -> None:
        self.battle.ended = True
        self.reset_current_move()

    def reset_current_move(self) -> None:
        self.current_move = None
        self.current_move_user = None
        self.current_move_targets = []
        self.current_move_hits = {}

    # ---- Knowledge helpers used by the handlers ----

    def remember_move(self, pokemon: ActivePokemon, move_name: str) -> PokemonMove:
        """Known record of `move_name` for `pokemon`, created on first sight."""
        move_id = to_id_str(move_name)

        if VolatileStatuses.Transform in pokemon.volatiles:
            info = pokemon.volatiles_data.transformed_info
            if info is None or not move_id:
                # nowhere to keep it
                return PokemonMove(id=move_id, revealed=True, pp=5, max_pp=5)
            if move_id not in info.moves:
                info.moves[move_id] = PokemonMove(id=move_id, revealed=True, pp=5, max_pp=5)
            move = info.moves[move_id]
        else:
            if move_id not in pokemon.moves:
                pp = max_pp_from_base_pp(get_move_base_pp(self.battle.status.gen, move_id))
                pokemon.moves[move_id] = PokemonMove(id=move_id, revealed=True, pp=pp, max_pp=pp)
            move = pokemon.moves[move_id]

        move.revealed = True
        return move

    def mark_item_or_ability(self, target: PokemonIdentTarget, effect: BattleEffect) -> None:
        """An effect attributed to an item or ability reveals it on `target`."""
        found = find_pokemon_in_battle(self.battle, target)
        effect_id = to_id_str(effect.id)

        if effect.kind == "ability":
            if found.active is not None:
                if found.active.ability.known:
                    return
                knowledge = found.active.ability
                knowledge.activation_count += 1
                self.record_ability_effect(effect_id)
            elif found.pokemon is not None and not found.pokemon.ability.known:
                knowledge = found.pokemon.ability
            else:
                return
            knowledge.known = True
            knowledge.revealed = True
            knowledge.ability = effect_id
            if not knowledge.base_ability:
                knowledge.base_ability = effect_id

        elif effect.kind == "item":
            if found.active is not None:
                if found.active.item.known:
                    return
                knowledge = found.active.item
            elif found.pokemon is not None and not found.pokemon.item.known:
                knowledge = found.pokemon.item
            else:
                return
            knowledge.known = True
            knowledge.revealed = True
            knowledge.item = effect_id

    # ---- Field-wide ability effects ----

    def record_ability_effect(self, ability: str) -> None:
        effect = ABILITY_EFFECT_SOURCES.get(to_id_str(ability))
        if effect is not None and effect not in self.battle.status.ability_effects:
            self.battle.status.ability_effects.add(effect)
            self.debug(f"Ability effect started: {effect}")

    def refresh_ability_effects(self) -> None:
        """Drop field-wide ability effects whose holder is no longer on the field."""
        effects = self.battle.status.ability_effects
        if not effects:
            return

        present = set()
        for player in self.battle.players.values():
            for active in player.active.values():
                if active.condition.fainted:
                    continue
                effect = ABILITY_EFFECT_SOURCES.get(to_id_str(active.ability.ability))
                if effect is not None:
                    present.add(effect)

        for effect in list(effects):
            if effect not in present:
                effects.discard(effect)
                self.debug(f"Ability effect ended: {effect}")
