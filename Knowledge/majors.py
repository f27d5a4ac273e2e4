"""
majors.py
---------
Handlers for structural events: request, match metadata, team preview,
switches, replacements, faints, swaps and move declarations.

Each handler takes (analyzer, battle, event) and mutates `battle` in place.
A reference to an unknown player or slot makes the handler return untouched.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from poke_env.data.normalize import to_id_str

from Data.abilities import ability_is_enabled, unknown_ability, unknown_item
from Data.poke_env_moves_info import get_move_base_pp, max_pp_from_base_pp
from Data.pokemon_helper import get_stat_range_from_details, update_stats_on_species_change
from Knowledge.battle import (
    ActivePokemon,
    Battle,
    MoveHit,
    Player,
    PokemonCondition,
    PokemonIdent,
    PokemonMove,
    SideCondition,
    SideConditions,
    SidePokemon,
    SingleTurnStatuses,
    TeamPreviewPokemon,
    VOLATILES_NOT_BATON_PASSING,
    VolatileData,
    VolatileStatuses,
    compare_ids,
    hit_key,
    request_index_by_active_slot,
)
from Knowledge.events import (
    BattleEndedEvent,
    CallbackCannotUseMoveEvent,
    CallbackTrappedEvent,
    ClearPokemonEvent,
    DetailsChangeEvent,
    FaintEvent,
    GameTypeEvent,
    GenEvent,
    MoveCannotUseEvent,
    MoveEvent,
    PlayerEvent,
    ReplaceEvent,
    RequestEvent,
    RevealTeamPreviewPokemonEvent,
    RuleEvent,
    StartEvent,
    SwapEvent,
    SwitchEvent,
    TeamPreviewEvent,
    TeamSizeEvent,
    TierEvent,
    TurnEvent,
)
from Knowledge.illusion import DEFAULT_ILLUSION_GUESS, POKEMON_WITH_ILLUSION
from Knowledge.initializers import create_player
from Knowledge.poke_find import (
    create_active_from_side,
    find_pokemon_in_battle,
    find_side_pokemon_or_create_it,
    side_entry_of,
    sync_active_with_side,
)
from Knowledge.request_knowledge import apply_request_knowledge

if TYPE_CHECKING:  # pragma: no cover
    from Knowledge.analyzer import BattleAnalyzer

# Moves that leave a delayed effect on the user's side for the next switch-in
DELAYED_SIDE_MOVES: Dict[str, str] = {
    "wish": SideConditions.Wish,
    "healingwish": SideConditions.HealingWish,
    "lunardance": SideConditions.LunarDance,
}


# ---------------------------- Request / metadata ---------------------------------

def on_request(analyzer: "BattleAnalyzer", battle: Battle, event: RequestEvent) -> None:
    if event.request is None:
        return
    battle.request = event.request
    battle.main_player = event.request.side.player_index


def on_team_preview(analyzer: "BattleAnalyzer", battle: Battle, event: TeamPreviewEvent) -> None:
    battle.status.team_preview = True
    battle.status.team_preview_size = event.max_team_size or 0


def on_start(analyzer: "BattleAnalyzer", battle: Battle, event: StartEvent) -> None:
    if not battle.status.team_preview:
        return

    preview_size = battle.status.team_preview_size
    for player in battle.players.values():
        if preview_size and player.team_size > preview_size:
            # brought a subset: the preview does not tell which members
            continue

        if player.team:
            for poke in player.team:
                poke.revealed = True
            continue

        for tp in player.team_preview:
            player.team.append(SidePokemon(
                index=len(player.team),
                ident=PokemonIdent(player_index=player.index, name=tp.details.species),
                details=copy.deepcopy(tp.details),
                condition=PokemonCondition(hp=100, max_hp=100),
                stats=get_stat_range_from_details(battle.status.gen, tp.details),
                item=unknown_item(),
                ability=unknown_ability(),
                revealed=True,
                active=False,
            ))


def _pending_request_active(battle: Battle, slot: int):
    request = battle.request
    if request is None or not request.active or battle.main_player is None:
        return None
    main_player = battle.players.get(battle.main_player)
    if main_player is None:
        return None
    index = request_index_by_active_slot(main_player, slot)
    if not 0 <= index < len(request.active):
        return None
    return request.active[index]


def on_callback_trapped(analyzer: "BattleAnalyzer", battle: Battle, event: CallbackTrappedEvent) -> None:
    req_active = _pending_request_active(battle, event.slot)
    if req_active is not None:
        req_active.trapped = True


def on_callback_cannot_use_move(analyzer: "BattleAnalyzer", battle: Battle, event: CallbackCannotUseMoveEvent) -> None:
    req_active = _pending_request_active(battle, event.slot)
    if req_active is None:
        return
    for move in req_active.moves:
        if compare_ids(move.id, event.move):
            move.disabled = True


def on_game_type(analyzer: "BattleAnalyzer", battle: Battle, event: GameTypeEvent) -> None:
    battle.status.game_type = event.game_type


def on_gen(analyzer: "BattleAnalyzer", battle: Battle, event: GenEvent) -> None:
    battle.status.gen = event.gen


def on_tier(analyzer: "BattleAnalyzer", battle: Battle, event: TierEvent) -> None:
    battle.status.tier = event.tier


def on_rule(analyzer: "BattleAnalyzer", battle: Battle, event: RuleEvent) -> None:
    battle.status.rules.add(to_id_str(event.name))
    if compare_ids(event.name, "Sleep Clause Mod"):
        battle.status.is_sleep_clause = True
    elif compare_ids(event.name, "Inverse Mod"):
        battle.status.inverse = True


def on_player(analyzer: "BattleAnalyzer", battle: Battle, event: PlayerEvent) -> None:
    player = battle.players.get(event.player_index)
    if player is not None:
        player.name = event.player_name
        player.avatar = event.player_avatar
        return
    battle.players[event.player_index] = create_player(event.player_index, event.player_name, event.player_avatar)


def on_team_size(analyzer: "BattleAnalyzer", battle: Battle, event: TeamSizeEvent) -> None:
    player = battle.players.get(event.player_index)
    if player is not None:
        player.team_size = event.team_size


def on_clear_pokemon(analyzer: "BattleAnalyzer", battle: Battle, event: ClearPokemonEvent) -> None:
    for player in battle.players.values():
        player.team_preview = []


def on_reveal_team_preview_pokemon(analyzer: "BattleAnalyzer", battle: Battle,
                                   event: RevealTeamPreviewPokemonEvent) -> None:
    player = battle.players.get(event.player_index)
    if player is not None:
        player.team_preview.append(TeamPreviewPokemon(details=copy.deepcopy(event.details)))


def on_turn(analyzer: "BattleAnalyzer", battle: Battle, event: TurnEvent) -> None:
    if event.turn < battle.turn:
        analyzer.debug(f"Ignoring turn {event.turn} (current turn is {battle.turn})")
    else:
        battle.turn = event.turn

    for player in battle.players.values():
        for active in player.active.values():
            active.single_turn_statuses.clear()

        expired: List[str] = []
        for cid, condition in player.side_conditions.items():
            if cid == SideConditions.Wish:
                if battle.turn - condition.turn > 1:
                    expired.append(cid)
            elif cid in (SideConditions.HealingWish, SideConditions.LunarDance):
                if battle.status.gen <= 8:
                    expired.append(cid)
        for cid in expired:
            del player.side_conditions[cid]

    analyzer.reset_current_move()
    apply_request_knowledge(battle)


# ---------------------------- Composition ----------------------------------------

def _guess_illusion_user(player: Player) -> str:
    for poke in player.team:
        if to_id_str(poke.details.species) in POKEMON_WITH_ILLUSION:
            return poke.details.species
    return DEFAULT_ILLUSION_GUESS


def _switch_in(analyzer: "BattleAnalyzer", battle: Battle, event: SwitchEvent, carry_over: bool) -> None:
    player = battle.players.get(event.pokemon.player_index)
    slot = event.pokemon.slot
    if player is None or slot is None:
        return

    outgoing = player.active.get(slot)
    if outgoing is not None:
        outgoing.ability.ability = outgoing.ability.base_ability
        if 2 < battle.status.gen < 6:
            outgoing.total_burned_sleep_turns = 0
        sync_active_with_side(player, outgoing)

    incoming = find_side_pokemon_or_create_it(battle, player, event.pokemon.name, event.details, event.condition)
    new_active = create_active_from_side(incoming, slot, battle.turn)

    if new_active.index == -1:
        new_active.volatiles_data.possible_fake = True
        new_active.volatiles_data.fake_guess = _guess_illusion_user(player)
        analyzer.debug(f"Player[{player.index}] - Active[{slot}]: unmatched switch-in, possible Illusion")

    player.active[slot] = new_active

    if carry_over and outgoing is not None:
        if SingleTurnStatuses.BatonPass in outgoing.single_turn_statuses:
            new_active.boosts = dict(outgoing.boosts)
            for volatile in outgoing.volatiles:
                if volatile not in VOLATILES_NOT_BATON_PASSING:
                    new_active.volatiles.add(volatile)
            new_active.volatiles_data.perish_turns_left = outgoing.volatiles_data.perish_turns_left
        elif SingleTurnStatuses.ShedTail in outgoing.single_turn_statuses:
            new_active.volatiles.add(VolatileStatuses.Substitute)

    if outgoing is not None:
        previous = side_entry_of(player, outgoing)
        if previous is not None:
            previous.active = False
            previous.active_slot = None

    incoming.active = True
    incoming.active_slot = slot

    analyzer.refresh_ability_effects()


def on_switch(analyzer: "BattleAnalyzer", battle: Battle, event: SwitchEvent) -> None:
    _switch_in(analyzer, battle, event, carry_over=True)


def on_drag(analyzer: "BattleAnalyzer", battle: Battle, event: SwitchEvent) -> None:
    _switch_in(analyzer, battle, event, carry_over=False)


def on_replace(analyzer: "BattleAnalyzer", battle: Battle, event: ReplaceEvent) -> None:
    player = battle.players.get(event.pokemon.player_index)
    if player is None or event.pokemon.slot is None:
        return

    active = player.active.get(event.pokemon.slot)
    if active is None:
        return

    real = find_side_pokemon_or_create_it(battle, player, event.pokemon.name, event.details,
                                          event.condition or active.condition)
    real.active = True
    real.active_slot = event.pokemon.slot

    if active.index != real.index:
        previous = side_entry_of(player, active)
        if previous is not None:
            previous.active = False
            previous.active_slot = None

    active.index = real.index
    active.ident.name = event.pokemon.name
    active.details = copy.deepcopy(event.details)
    if event.condition is not None:
        active.condition = copy.deepcopy(event.condition)

    active.volatiles_data.possible_fake = False
    active.volatiles_data.fake = False
    analyzer.debug(f"Player[{player.index}] - Active[{active.slot}]: Illusion revealed as {event.details.species}")

    analyzer.refresh_ability_effects()


def on_details_change(analyzer: "BattleAnalyzer", battle: Battle, event: DetailsChangeEvent) -> None:
    found = find_pokemon_in_battle(battle, event.pokemon)
    if found.active is not None:
        found.active.details = copy.deepcopy(event.details)
        update_stats_on_species_change(battle, found.active)
        sync_active_with_side(found.player, found.active)
    elif found.pokemon is not None:
        found.pokemon.details = copy.deepcopy(event.details)
        update_stats_on_species_change(battle, found.pokemon)


def on_faint(analyzer: "BattleAnalyzer", battle: Battle, event: FaintEvent) -> None:
    found = find_pokemon_in_battle(battle, event.pokemon)
    if found.player is None:
        return

    found.player.times_fainted += 1

    if found.active is not None:
        found.active.condition.status = ""
        found.active.condition.hp = 0
        found.active.condition.fainted = True
        found.active.volatiles.clear()
        found.active.volatiles_data = VolatileData()
        sync_active_with_side(found.player, found.active)

    if found.pokemon is not None:
        found.pokemon.condition.status = ""
        found.pokemon.condition.hp = 0
        found.pokemon.condition.fainted = True
        found.pokemon.active = False

    analyzer.refresh_ability_effects()


def _move_active(player: Player, active: Optional[ActivePokemon], to_slot: int) -> None:
    if active is None:
        player.active.pop(to_slot, None)
        return
    active.slot = to_slot
    side = side_entry_of(player, active)
    if side is not None:
        side.active_slot = to_slot
    player.active[to_slot] = active


def on_swap(analyzer: "BattleAnalyzer", battle: Battle, event: SwapEvent) -> None:
    player = battle.players.get(event.pokemon.player_index)
    if player is None or event.pokemon.slot is None:
        return

    slot_a = event.pokemon.slot
    slot_b = event.slot
    active_a = player.active.get(slot_a)
    active_b = player.active.get(slot_b)

    _move_active(player, active_a, slot_b)
    _move_active(player, active_b, slot_a)


# ---------------------------- Moves ----------------------------------------------

def _resolve_declared_move(battle: Battle, active: ActivePokemon, move_id: str, event: MoveEvent) -> PokemonMove:
    if VolatileStatuses.Transform in active.volatiles:
        info = active.volatiles_data.transformed_info
        if info is not None and move_id:
            if move_id not in info.moves:
                info.moves[move_id] = PokemonMove(id=move_id, revealed=True, pp=5, max_pp=5)
            return info.moves[move_id]
        return PokemonMove(id=move_id, revealed=True, pp=5, max_pp=5)

    if move_id in active.moves:
        return active.moves[move_id]

    pp = max_pp_from_base_pp(get_move_base_pp(battle.status.gen, move_id))
    move = PokemonMove(id=move_id, revealed=True, pp=pp, max_pp=pp)

    # moves called through another move (Metronome, Copycat...) are not part of the set
    if event.from_effect is None or compare_ids(event.from_effect.id, "Sleep Talk"):
        active.moves[move_id] = move

    return move


def on_move(analyzer: "BattleAnalyzer", battle: Battle, event: MoveEvent) -> None:
    found = find_pokemon_in_battle(battle, event.pokemon)
    user = found.active
    if user is None:
        return

    user.single_move_statuses.clear()

    move_id = to_id_str(event.move)
    move = _resolve_declared_move(battle, user, move_id, event)
    move.revealed = True

    targets: List[ActivePokemon] = []
    references = ([event.target] if event.target is not None else []) + list(event.spread or [])
    for ref in references:
        target = find_pokemon_in_battle(battle, ref).active
        if target is not None and target is not user and target not in targets:
            targets.append(target)

    move.pp = max(0, move.pp - 1)
    for target in targets:
        if compare_ids(target.ability.ability, "Pressure") and ability_is_enabled(battle, target):
            move.pp = max(0, move.pp - 1)

    if user.last_move == move.id:
        user.times_used_move_in_a_row += 1
    else:
        user.times_used_move_in_a_row = 1
    user.last_move = move.id

    if move.id in DELAYED_SIDE_MOVES:
        cid = DELAYED_SIDE_MOVES[move.id]
        found.player.side_conditions[cid] = SideCondition(
            id=cid,
            counter=1,
            turn=battle.turn,
            estimated_duration=1,
            set_by=copy.deepcopy(event.pokemon),
        )
    elif move.id == "batonpass":
        user.single_turn_statuses.add(SingleTurnStatuses.BatonPass)
    elif move.id == "shedtail":
        user.single_turn_statuses.add(SingleTurnStatuses.ShedTail)

    analyzer.current_move = move
    analyzer.current_move_user = user
    analyzer.current_move_targets = targets
    analyzer.current_move_hits = {hit_key(t.ident.player_index, t.slot): MoveHit() for t in targets}


def on_move_cannot_use(analyzer: "BattleAnalyzer", battle: Battle, event: MoveCannotUseEvent) -> None:
    active = find_pokemon_in_battle(battle, event.pokemon).active
    if active is None:
        return

    active.single_move_statuses.clear()

    if event.effect.id == "slp":
        active.volatiles_data.burned_sleep_turns = (active.volatiles_data.burned_sleep_turns or 0) + 1
        active.total_burned_sleep_turns += 1

    if to_id_str(event.move):
        analyzer.remember_move(active, event.move)


def on_battle_ended(analyzer: "BattleAnalyzer", battle: Battle, event: BattleEndedEvent) -> None:
    battle.ended = True
    if event.tie or not event.winner:
        return
    for player in battle.players.values():
        if compare_ids(player.name, event.winner):
            battle.winner = player.index
            break


MAJOR_EVENT_HANDLERS: Dict[str, Callable] = {
    "Request": on_request,
    "TeamPreview": on_team_preview,
    "Start": on_start,
    "CallbackTrapped": on_callback_trapped,
    "CallbackCannotUseMove": on_callback_cannot_use_move,
    "GameType": on_game_type,
    "Gen": on_gen,
    "Tier": on_tier,
    "Rule": on_rule,
    "Player": on_player,
    "TeamSize": on_team_size,
    "ClearPokemon": on_clear_pokemon,
    "RevealTeamPreviewPokemon": on_reveal_team_preview_pokemon,
    "Turn": on_turn,
    "Switch": on_switch,
    "Drag": on_drag,
    "Replace": on_replace,
    "DetailsChange": on_details_change,
    "Faint": on_faint,
    "Swap": on_swap,
    "Move": on_move,
    "MoveCannotUse": on_move_cannot_use,
    "BattleEnded": on_battle_ended,
}
