"""
minors.py
---------
Handlers for incidental events: HP changes, boosts, hit outcomes, status,
items and abilities, volatiles, side and field conditions.

Same contract as majors.py: (analyzer, battle, event), in-place mutation,
silent no-op when the referenced combatant is unknown.
"""

from __future__ import annotations

import copy
import re
from typing import TYPE_CHECKING, Callable, Dict, Optional

from poke_env.data.normalize import to_id_str

from Data.abilities import ability_is_enabled, move_breaks_ability
from Data.poke_env_moves_info import find_move
from Data.pokemon_helper import get_pokemon_current_types, update_stats_on_species_change
from Knowledge.battle import (
    ActivePokemon,
    Battle,
    BattleEffect,
    GlobalCondition,
    ItemKnowledge,
    MoveHit,
    PokemonIdentTarget,
    SideCondition,
    SideConditions,
    SingleMoveStatuses,
    SingleTurnStatuses,
    TransformedInfo,
    VolatileStatuses,
    compare_ids,
    get_hp_percent,
    hit_key,
)
from Knowledge.events import (
    AbilityRevealEvent,
    ActivateEffectEvent,
    BlockEvent,
    BoostEvent,
    ClearAllBoostsEvent,
    ClearBoostEvent,
    ClearNegativeBoostEvent,
    ClearPositiveBoostEvent,
    CopyBoostEvent,
    CriticalHitEvent,
    CureStatusEvent,
    CureTeamEvent,
    DamageEvent,
    EffectEndEvent,
    EffectStartEvent,
    FailEvent,
    FieldEndEvent,
    FieldStartEvent,
    FormeChangeEvent,
    ImmuneEvent,
    InvertBoostEvent,
    ItemRemoveEvent,
    ItemRevealEvent,
    MegaEvolutionEvent,
    MissEvent,
    MoveStatusEvent,
    MustRechargeEvent,
    PrepareMoveEvent,
    SetBoostEvent,
    SetHPEvent,
    SideEndEvent,
    SideStartEvent,
    StatusEvent,
    SwapBoostEvent,
    SwapSideConditionsEvent,
    TerastallizeEvent,
    TransformEvent,
    TurnStatusEvent,
    UltraBurstEvent,
    WeatherEvent,
)
from Knowledge.illusion import detect_illusion_from_damage_move_immunity, detect_illusion_from_prankster
from Knowledge.poke_find import find_pokemon_in_battle

if TYPE_CHECKING:  # pragma: no cover
    from Knowledge.analyzer import BattleAnalyzer


def _mark_from(analyzer: "BattleAnalyzer", of_pokemon: Optional[PokemonIdentTarget],
               pokemon: PokemonIdentTarget, effect: Optional[BattleEffect]) -> None:
    if effect is not None:
        analyzer.mark_item_or_ability(of_pokemon or pokemon, effect)


def _active(battle: Battle, ref: Optional[PokemonIdentTarget]) -> Optional[ActivePokemon]:
    if ref is None:
        return None
    return find_pokemon_in_battle(battle, ref).active


def _current_hit(analyzer: "BattleAnalyzer", ref: Optional[PokemonIdentTarget]) -> Optional[MoveHit]:
    if ref is None or analyzer.current_move is None:
        return None
    return analyzer.current_move_hits.get(hit_key(ref.player_index, ref.slot))


# ---------------------------- HP -------------------------------------------------

def on_damage(analyzer: "BattleAnalyzer", battle: Battle, event: DamageEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)

    found = find_pokemon_in_battle(battle, event.pokemon)

    if found.active is not None:
        active = found.active
        hp_diff = get_hp_percent(active.condition) - get_hp_percent(event.condition)
        active.condition = copy.deepcopy(event.condition)

        if event.from_effect is not None:
            if compare_ids(event.from_effect.id, "psn"):
                active.volatiles_data.tox_damage_times = (active.volatiles_data.tox_damage_times or 0) + 1
        elif analyzer.current_move is not None:
            active.times_hit += 1
            # Illusion breaks on a direct hit
            active.volatiles_data.possible_fake = False
            active.volatiles_data.fake = False

            hit = _current_hit(analyzer, event.pokemon)
            if hit is not None and not hit.received_move:
                hit.received_move = True
                hit.damage_dealt = hp_diff

    elif found.pokemon is not None:
        found.pokemon.condition = copy.deepcopy(event.condition)


def on_heal(analyzer: "BattleAnalyzer", battle: Battle, event: DamageEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)

    found = find_pokemon_in_battle(battle, event.pokemon)

    if found.active is not None:
        found.active.condition = copy.deepcopy(event.condition)
        effect = event.from_effect
        if effect is None:
            return
        if compare_ids(effect.id, "Lunar Dance"):
            for move in found.active.moves.values():
                move.pp = move.max_pp
            found.player.side_conditions.pop(SideConditions.LunarDance, None)
        elif compare_ids(effect.id, "Healing Wish"):
            found.player.side_conditions.pop(SideConditions.HealingWish, None)
        elif compare_ids(effect.id, "Wish"):
            found.player.side_conditions.pop(SideConditions.Wish, None)

    elif found.pokemon is not None:
        found.pokemon.condition = copy.deepcopy(event.condition)


def on_set_hp(analyzer: "BattleAnalyzer", battle: Battle, event: SetHPEvent) -> None:
    for target in event.targets:
        found = find_pokemon_in_battle(battle, target.pokemon)
        if found.active is not None:
            found.active.condition = copy.deepcopy(target.condition)
        elif found.pokemon is not None:
            found.pokemon.condition = copy.deepcopy(target.condition)


# ---------------------------- Boosts ---------------------------------------------

def on_boost(analyzer: "BattleAnalyzer", battle: Battle, event: BoostEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)
    active = _active(battle, event.pokemon)
    if active is not None:
        active.boosts[event.stat] = active.boosts.get(event.stat, 0) + event.amount


def on_unboost(analyzer: "BattleAnalyzer", battle: Battle, event: BoostEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)
    active = _active(battle, event.pokemon)
    if active is not None:
        active.boosts[event.stat] = active.boosts.get(event.stat, 0) - event.amount


def on_set_boost(analyzer: "BattleAnalyzer", battle: Battle, event: SetBoostEvent) -> None:
    active = _active(battle, event.pokemon)
    if active is not None:
        active.boosts[event.stat] = event.amount


def on_swap_boost(analyzer: "BattleAnalyzer", battle: Battle, event: SwapBoostEvent) -> None:
    active = _active(battle, event.pokemon)
    target = _active(battle, event.target)
    if active is None or target is None:
        return
    for stat in event.stats:
        mine = active.boosts.get(stat, 0)
        active.boosts[stat] = target.boosts.get(stat, 0)
        target.boosts[stat] = mine


def on_copy_boost(analyzer: "BattleAnalyzer", battle: Battle, event: CopyBoostEvent) -> None:
    _mark_from(analyzer, None, event.pokemon, event.from_effect)
    active = _active(battle, event.pokemon)
    source = _active(battle, event.from_pokemon)
    if active is None or source is None:
        return
    for stat in event.stats:
        active.boosts[stat] = source.boosts.get(stat, 0)


def on_invert_boost(analyzer: "BattleAnalyzer", battle: Battle, event: InvertBoostEvent) -> None:
    active = _active(battle, event.pokemon)
    if active is not None:
        active.boosts = {stat: -value for stat, value in active.boosts.items()}


def on_clear_positive_boost(analyzer: "BattleAnalyzer", battle: Battle, event: ClearPositiveBoostEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)
    active = _active(battle, event.pokemon)
    if active is not None:
        active.boosts = {stat: (0 if value > 0 else value) for stat, value in active.boosts.items()}


def on_clear_negative_boost(analyzer: "BattleAnalyzer", battle: Battle, event: ClearNegativeBoostEvent) -> None:
    active = _active(battle, event.pokemon)
    if active is not None:
        active.boosts = {stat: (0 if value < 0 else value) for stat, value in active.boosts.items()}


def on_clear_boost(analyzer: "BattleAnalyzer", battle: Battle, event: ClearBoostEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)
    active = _active(battle, event.pokemon)
    if active is not None:
        active.boosts.clear()


def on_clear_all_boosts(analyzer: "BattleAnalyzer", battle: Battle, event: ClearAllBoostsEvent) -> None:
    for player in battle.players.values():
        for active in player.active.values():
            active.boosts.clear()


# ---------------------------- Hit outcomes ---------------------------------------

def on_critical_hit(analyzer: "BattleAnalyzer", battle: Battle, event: CriticalHitEvent) -> None:
    hit = _current_hit(analyzer, event.pokemon)
    if hit is not None:
        hit.crit = True


def on_hit_effectiveness(analyzer: "BattleAnalyzer", battle: Battle, event) -> None:
    # the damage event that follows carries everything we track
    return None


def on_miss(analyzer: "BattleAnalyzer", battle: Battle, event: MissEvent) -> None:
    hit = _current_hit(analyzer, event.target)
    if hit is not None and not hit.received_move:
        hit.received_move = True
        hit.miss = True


def on_immune(analyzer: "BattleAnalyzer", battle: Battle, event: ImmuneEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)

    found = find_pokemon_in_battle(battle, event.pokemon)
    defender = found.active
    if defender is None:
        return

    hit = _current_hit(analyzer, event.pokemon)
    if hit is None or hit.received_move:
        return

    hit.received_move = True
    hit.immune = True

    user = analyzer.current_move_user
    if user is None:
        return
    user_player = battle.players.get(user.ident.player_index)
    if user_player is None:
        return

    move_data = find_move(battle.status.gen, analyzer.current_move.id)

    if event.from_effect is not None:
        if event.from_effect.kind == "ability":
            if not ability_is_enabled(battle, defender) or move_breaks_ability(battle, user, defender, move_data):
                # the ability worked where it should not have
                analyzer.debug(f"Ability Shield detected on Player[{found.player.index}] - Active[{defender.slot}]")
                defender.item.known = True
                defender.item.item = "abilityshield"
    elif move_data.category != "Status":
        detect_illusion_from_damage_move_immunity(analyzer, battle, user_player, user, found.player, defender,
                                                  analyzer.current_move.id)
    elif compare_ids(user.ability.ability, "Prankster") and ability_is_enabled(battle, user):
        detect_illusion_from_prankster(analyzer, battle, user_player, user, found.player, defender,
                                       analyzer.current_move.id)


def on_fail(analyzer: "BattleAnalyzer", battle: Battle, event: FailEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)

    active = _active(battle, event.pokemon)
    if active is None:
        return

    if event.from_effect is not None or analyzer.current_move is None or len(analyzer.current_move_targets) != 1:
        return

    move_id = to_id_str(analyzer.current_move.id)
    if move_id in ("trick", "switcheroo", "corrosivegas"):
        active.item.trick_move_failed = True
    elif move_id == "poltergeist":
        active.item.known = True
        active.item.revealed = True
        active.item.item = ""
    elif move_id == "skillswap":
        active.ability.cannot_be_swapped = True
    elif move_id in ("entrainment", "simplebeam", "worryseed"):
        active.ability.cannot_be_changed = True
    elif move_id == "gastroacid":
        active.ability.cannot_be_disabled = True


def on_block(analyzer: "BattleAnalyzer", battle: Battle, event: BlockEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.effect)


def on_prepare_move(analyzer: "BattleAnalyzer", battle: Battle, event: PrepareMoveEvent) -> None:
    active = _active(battle, event.pokemon)
    if active is not None:
        analyzer.remember_move(active, event.move)


def on_must_recharge(analyzer: "BattleAnalyzer", battle: Battle, event: MustRechargeEvent) -> None:
    active = _active(battle, event.pokemon)
    if active is not None:
        active.single_move_statuses.add(SingleMoveStatuses.MustRecharge)


# ---------------------------- Status ---------------------------------------------

def on_status(analyzer: "BattleAnalyzer", battle: Battle, event: StatusEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)

    active = _active(battle, event.pokemon)
    if active is None:
        return

    active.condition.status = event.status
    if event.status == "SLP":
        active.volatiles_data.burned_sleep_turns = 0
        active.total_burned_sleep_turns = 0
        active.slept_by_rest = event.from_effect is not None and compare_ids(event.from_effect.id, "rest")
    elif event.status in ("PSN", "TOX"):
        active.volatiles_data.tox_damage_times = 0


def on_cure_status(analyzer: "BattleAnalyzer", battle: Battle, event: CureStatusEvent) -> None:
    _mark_from(analyzer, None, event.pokemon, event.from_effect)

    found = find_pokemon_in_battle(battle, event.pokemon)
    if found.active is not None:
        if event.status.upper() == "CONFUSION":
            found.active.volatiles.discard(VolatileStatuses.Confusion)
        else:
            found.active.condition.status = ""
    elif found.pokemon is not None:
        found.pokemon.condition.status = ""


def on_cure_team(analyzer: "BattleAnalyzer", battle: Battle, event: CureTeamEvent) -> None:
    player = battle.players.get(event.player_index)
    if player is None:
        return
    for poke in player.team:
        poke.condition.status = ""
    for active in player.active.values():
        active.condition.status = ""


# ---------------------------- Items / abilities ----------------------------------

ITEM_LOST_CAUSE_BY_EFFECT: Dict[str, str] = {
    "fling": "flung",
    "knockoff": "knocked off",
    "stealeat": "stolen",
    "gem": "consumed",
    "incinerate": "incinerated",
}

# lost on their own, without an attributed effect; Focus Band is never lost
ITEM_LOST_CAUSE_BY_ITEM: Dict[str, Optional[str]] = {
    "airballoon": "popped",
    "focusband": None,
    "redcard": "held up",
}


def on_item_reveal(analyzer: "BattleAnalyzer", battle: Battle, event: ItemRevealEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)

    active = _active(battle, event.pokemon)
    if active is None:
        return

    active.item.known = True
    active.item.revealed = True
    active.item.item = event.item

    if compare_ids(event.item, VolatileStatuses.AirBalloon):
        active.volatiles.add(VolatileStatuses.AirBalloon)

    if event.from_effect is not None and to_id_str(event.from_effect.id) in ("thief", "covet"):
        victim = _active(battle, event.of_pokemon)
        if victim is not None:
            victim.item = ItemKnowledge(
                known=True,
                revealed=True,
                item="",
                item_lost_cause="stolen",
                previous_item=event.item,
            )


def on_item_remove(analyzer: "BattleAnalyzer", battle: Battle, event: ItemRemoveEvent) -> None:
    _mark_from(analyzer, None, event.pokemon, event.from_effect)

    active = _active(battle, event.pokemon)
    if active is None:
        return

    active.item.known = True
    active.item.revealed = True
    active.item.item = ""
    active.item.previous_item = event.item
    active.volatiles.discard(VolatileStatuses.AirBalloon)

    if event.eaten:
        active.item.item_lost_cause = "eaten"
    elif event.from_effect is not None:
        cause = ITEM_LOST_CAUSE_BY_EFFECT.get(to_id_str(event.from_effect.id))
        if cause is not None:
            active.item.item_lost_cause = cause
    else:
        item_id = to_id_str(event.item)
        if item_id in ITEM_LOST_CAUSE_BY_ITEM:
            cause = ITEM_LOST_CAUSE_BY_ITEM[item_id]
            if cause is not None:
                active.item.item_lost_cause = cause
        else:
            active.item.item_lost_cause = "consumed"


def on_ability_reveal(analyzer: "BattleAnalyzer", battle: Battle, event: AbilityRevealEvent) -> None:
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)

    active = _active(battle, event.pokemon)
    if active is None:
        return

    active.ability.known = True
    active.ability.revealed = True
    active.ability.ability = event.ability
    if not active.ability.base_ability:
        active.ability.base_ability = event.ability
    active.ability.activation_count += 1

    analyzer.record_ability_effect(event.ability)


def on_transform(analyzer: "BattleAnalyzer", battle: Battle, event: TransformEvent) -> None:
    _mark_from(analyzer, None, event.pokemon, event.from_effect)

    active = _active(battle, event.pokemon)
    if active is None:
        return

    target_found = find_pokemon_in_battle(battle, event.target)
    target = target_found.active
    if target is None:
        return

    active.boosts = dict(target.boosts)
    if target.ability.known:
        active.ability.known = True
        active.ability.revealed = True
        active.ability.ability = target.ability.ability

    active.volatiles.add(VolatileStatuses.Transform)
    active.volatiles_data.transformed_info = TransformedInfo(
        player_index=target_found.player.index,
        pokemon_index=target.index,
        details=copy.deepcopy(target.details),
        stats=copy.deepcopy(target.stats),
        moves=copy.deepcopy(target.moves),
    )


def on_forme_change(analyzer: "BattleAnalyzer", battle: Battle, event: FormeChangeEvent) -> None:
    _mark_from(analyzer, None, event.pokemon, event.from_effect)
    active = _active(battle, event.pokemon)
    if active is None:
        return
    active.details.species = event.species
    update_stats_on_species_change(battle, active)


def on_mega_evolution(analyzer: "BattleAnalyzer", battle: Battle, event: MegaEvolutionEvent) -> None:
    active = _active(battle, event.pokemon)
    if active is None:
        return
    active.item.known = True
    active.item.revealed = True
    active.item.item = event.stone


def on_ultra_burst(analyzer: "BattleAnalyzer", battle: Battle, event: UltraBurstEvent) -> None:
    active = _active(battle, event.pokemon)
    if active is None:
        return
    active.item.known = True
    active.item.revealed = True
    active.item.item = event.item


def on_terastallize(analyzer: "BattleAnalyzer", battle: Battle, event: TerastallizeEvent) -> None:
    active = _active(battle, event.pokemon)
    if active is not None:
        active.details.terastallized = to_id_str(event.tera_type)


# ---------------------------- Volatiles ------------------------------------------

_STAT_BOOSTING_VOLATILE = re.compile(r"^(protosynthesis|quarkdrive)(atk|def|spa|spd|spe)$")
_STOCKPILE = re.compile(r"^stockpile([1-3])$")
_PERISH = re.compile(r"^perish([0-3])$")
_FALLEN = re.compile(r"^fallen([0-9]+)$")

# Future attacks land on the target's side two turns later
FUTURE_ATTACKS = {
    "doomdesire": SideConditions.DoomDesire,
    "futuresight": SideConditions.FutureSight,
}


def on_effect_start(analyzer: "BattleAnalyzer", battle: Battle, event: EffectStartEvent) -> None:
    analyzer.mark_item_or_ability(event.pokemon, event.effect)
    _mark_from(analyzer, event.of_pokemon, event.pokemon, event.from_effect)

    found = find_pokemon_in_battle(battle, event.pokemon)
    active = found.active
    if active is None:
        return

    effect_id = to_id_str(event.effect.id)
    extra = event.extra
    data = active.volatiles_data

    if effect_id == VolatileStatuses.TypeChange:
        if active.details.terastallized:
            return
        if event.of_pokemon is not None and event.from_effect is not None and compare_ids(event.from_effect.id, "reflecttype"):
            source = _active(battle, event.of_pokemon)
            if source is not None:
                data.types_changed = get_pokemon_current_types(battle, source)
        elif extra is not None and extra.types_changed:
            data.types_changed = list(extra.types_changed)
        active.volatiles.add(effect_id)
        return

    if effect_id == VolatileStatuses.TypeAdd:
        data.type_added = extra.type_added if extra is not None else None
        active.volatiles.add(effect_id)
        return

    if effect_id == VolatileStatuses.Mimic:
        data.move_mimic = extra.move_mimic if extra is not None else None
        active.volatiles.add(effect_id)
        return

    if effect_id == VolatileStatuses.Disable:
        data.move_disabled = extra.move_disabled if extra is not None else None
        active.volatiles.add(effect_id)
        return

    if effect_id == VolatileStatuses.SmackDown:
        active.volatiles.discard(VolatileStatuses.MagnetRise)
        active.volatiles.discard(VolatileStatuses.Telekinesis)
        active.volatiles.add(effect_id)
        return

    if effect_id in FUTURE_ATTACKS:
        cid = FUTURE_ATTACKS[effect_id]
        found.player.side_conditions[cid] = SideCondition(
            id=cid,
            counter=1,
            turn=battle.turn,
            estimated_duration=2,
            set_by=copy.deepcopy(event.pokemon),
        )
        return

    m = _STOCKPILE.match(effect_id)
    if m:
        data.stockpile_level = int(m.group(1))
        active.volatiles.add(VolatileStatuses.Stockpile)
        return

    m = _PERISH.match(effect_id)
    if m:
        data.perish_turns_left = int(m.group(1))
        active.volatiles.add(VolatileStatuses.PerishSong)
        return

    m = _STAT_BOOSTING_VOLATILE.match(effect_id)
    if m:
        data.boosted_stat = m.group(2)
        active.volatiles.add(m.group(1))
        return

    m = _FALLEN.match(effect_id)
    if m:
        data.fallen_level = int(m.group(1))
        active.volatiles.add(VolatileStatuses.Fallen)
        return

    active.volatiles.add(effect_id)


# effect ids whose volatile is stored under another id
_EFFECT_END_VOLATILES = {
    "stockpile": VolatileStatuses.Stockpile,
    "perishsong": VolatileStatuses.PerishSong,
}


def on_effect_end(analyzer: "BattleAnalyzer", battle: Battle, event: EffectEndEvent) -> None:
    _mark_from(analyzer, None, event.pokemon, event.from_effect)

    found = find_pokemon_in_battle(battle, event.pokemon)
    if found.active is None:
        return

    effect_id = to_id_str(event.effect.id)

    if effect_id in FUTURE_ATTACKS:
        found.player.side_conditions.pop(FUTURE_ATTACKS[effect_id], None)
        return

    found.active.volatiles.discard(_EFFECT_END_VOLATILES.get(effect_id, effect_id))


def on_turn_status(analyzer: "BattleAnalyzer", battle: Battle, event: TurnStatusEvent) -> None:
    active = _active(battle, event.pokemon)
    if active is not None:
        active.single_turn_statuses.add(to_id_str(event.effect.id))


def on_move_status(analyzer: "BattleAnalyzer", battle: Battle, event: MoveStatusEvent) -> None:
    active = _active(battle, event.pokemon)
    if active is not None:
        active.single_move_statuses.add(to_id_str(event.effect.id))


# ---------------------------- Activations ----------------------------------------

PROTECTION_BREAKING_MOVES = frozenset({
    "hyperdrill", "hyperspacefury", "hyperspacehole", "phantomforce", "shadowforce", "feint",
})

TEAM_PROTECTIONS = (
    SingleTurnStatuses.WideGuard,
    SingleTurnStatuses.QuickGuard,
    SingleTurnStatuses.CraftyShield,
    SingleTurnStatuses.MatBlock,
)


def _swap_abilities(active: ActivePokemon, target: Optional[ActivePokemon],
                    ability: Optional[str], ability2: Optional[str]) -> None:
    mine = ability or (target.ability.ability if target is not None else "")
    theirs = ability2 or active.ability.ability

    if mine:
        active.ability.known = True
        active.ability.revealed = True
        active.ability.ability = mine
        if target is not None and not target.ability.base_ability:
            target.ability.base_ability = mine

    if theirs:
        if target is not None:
            target.ability.known = True
            target.ability.revealed = True
            target.ability.ability = theirs
        if not active.ability.base_ability:
            active.ability.base_ability = theirs


def on_activate_effect(analyzer: "BattleAnalyzer", battle: Battle, event: ActivateEffectEvent) -> None:
    found = find_pokemon_in_battle(battle, event.pokemon)
    active = found.active
    if active is None:
        return

    target_found = find_pokemon_in_battle(battle, event.target) if event.target is not None else None
    target = target_found.active if target_found is not None else None

    analyzer.mark_item_or_ability(event.pokemon, event.effect)

    effect_id = to_id_str(event.effect.id)
    extra = event.extra

    if effect_id == "poltergeist":
        if extra is not None and extra.item:
            active.item.known = True
            active.item.revealed = True
            active.item.item = extra.item

    elif effect_id == "grudge":
        if extra is not None and extra.move:
            analyzer.remember_move(active, extra.move).pp = 0

    elif effect_id == "brickbreak":
        if target_found is not None and target_found.player is not None:
            target_found.player.side_conditions.pop(SideConditions.Reflect, None)
            target_found.player.side_conditions.pop(SideConditions.LightScreen, None)

    elif effect_id in PROTECTION_BREAKING_MOVES:
        active.single_turn_statuses.discard(SingleTurnStatuses.Protect)
        for ally in found.player.active.values():
            for status in TEAM_PROTECTIONS:
                ally.single_turn_statuses.discard(status)

    elif effect_id in ("eeriespell", "gmaxdepletion", "spite"):
        if extra is not None and extra.move:
            move = analyzer.remember_move(active, extra.move)
            move.pp = max(0, move.pp - (extra.number or 4))

    elif effect_id == "gravity":
        active.volatiles.discard(VolatileStatuses.MagnetRise)
        active.volatiles.discard(VolatileStatuses.Telekinesis)

    elif effect_id in ("skillswap", "wanderingspirit"):
        if battle.status.gen > 4:
            _swap_abilities(active, target,
                            extra.ability if extra is not None else None,
                            extra.ability2 if extra is not None else None)

    elif effect_id in ("electromorphosis", "windpower"):
        active.single_move_statuses.add(SingleMoveStatuses.Charge)

    elif effect_id == "forewarn":
        if extra is not None and extra.move and target is not None:
            analyzer.remember_move(active, extra.move)

    elif effect_id in ("lingeringaroma", "mummy"):
        if extra is not None and extra.ability and target is not None:
            target.ability.known = True
            target.ability.revealed = True
            target.ability.ability = effect_id
            if not target.ability.base_ability:
                target.ability.base_ability = extra.ability

    elif effect_id == "leppaberry":
        if extra is not None and extra.move:
            move = analyzer.remember_move(active, extra.move)
            move.pp = min(move.max_pp, move.pp + 10)

    elif effect_id == "mysteryberry":
        if extra is not None and extra.move:
            move = analyzer.remember_move(active, extra.move)
            move.pp = min(move.max_pp, move.pp + 5)


# ---------------------------- Side / field ---------------------------------------

SIDE_CONDITION_DURATIONS: Dict[str, int] = {
    "auroraveil": 5,
    "reflect": 5,
    "safeguard": 5,
    "lightscreen": 5,
    "mist": 5,
    "luckychant": 5,
    "tailwind": 4,
    "gmaxwildfire": 4,
    "gmaxvolcalith": 4,
    "gmaxvinelash": 4,
    "gmaxcannonade": 4,
    "grasspledge": 4,
    "waterpledge": 4,
    "firepledge": 4,
}

# Court Change moves exactly these
SWAPPABLE_SIDE_CONDITIONS = (
    "mist", "lightscreen", "reflect", "spikes", "safeguard", "tailwind",
    "toxicspikes", "stealthrock", "waterpledge", "firepledge", "grasspledge",
    "stickyweb", "auroraveil", "gmaxsteelsurge", "gmaxcannonade",
    "gmaxvinelash", "gmaxwildfire",
)


def on_side_start(analyzer: "BattleAnalyzer", battle: Battle, event: SideStartEvent) -> None:
    player = battle.players.get(event.player_index)
    if player is None:
        return

    cid = to_id_str(event.effect.id)
    if cid in player.side_conditions:
        player.side_conditions[cid].counter += 1
        return

    duration = SIDE_CONDITION_DURATIONS.get(cid, 0)
    if event.persistent:
        duration += 2

    player.side_conditions[cid] = SideCondition(id=cid, counter=1, turn=battle.turn, estimated_duration=duration)


def on_side_end(analyzer: "BattleAnalyzer", battle: Battle, event: SideEndEvent) -> None:
    player = battle.players.get(event.player_index)
    if player is not None:
        player.side_conditions.pop(to_id_str(event.effect.id), None)


def on_swap_side_conditions(analyzer: "BattleAnalyzer", battle: Battle, event: SwapSideConditionsEvent) -> None:
    players = list(battle.players.values())
    if len(players) != 2:
        return

    first, second = players
    for cid in SWAPPABLE_SIDE_CONDITIONS:
        a = first.side_conditions.pop(cid, None)
        b = second.side_conditions.pop(cid, None)
        if b is not None:
            first.side_conditions[cid] = copy.deepcopy(b)
        if a is not None:
            second.side_conditions[cid] = copy.deepcopy(a)


def on_weather(analyzer: "BattleAnalyzer", battle: Battle, event: WeatherEvent) -> None:
    if event.from_effect is not None and event.of_pokemon is not None:
        analyzer.mark_item_or_ability(event.of_pokemon, event.from_effect)

    weather = to_id_str(event.effect.id)
    if not weather or weather == "none":
        battle.status.weather = None
        return

    battle.status.weather = GlobalCondition(
        id=weather,
        turn=battle.turn,
        estimated_duration=5,
        set_by=copy.deepcopy(event.of_pokemon),
    )


def on_field_start(analyzer: "BattleAnalyzer", battle: Battle, event: FieldStartEvent) -> None:
    if event.from_effect is not None and event.of_pokemon is not None:
        analyzer.mark_item_or_ability(event.of_pokemon, event.from_effect)

    field_id = to_id_str(event.effect.id)

    duration = 5
    if field_id.endswith("terrain") and battle.status.gen > 6:
        duration = 8
    if event.persistent:
        duration += 2

    battle.status.fields[field_id] = GlobalCondition(
        id=field_id,
        turn=battle.turn,
        estimated_duration=duration,
        set_by=copy.deepcopy(event.of_pokemon),
    )


def on_field_end(analyzer: "BattleAnalyzer", battle: Battle, event: FieldEndEvent) -> None:
    battle.status.fields.pop(to_id_str(event.effect.id), None)


MINOR_EVENT_HANDLERS: Dict[str, Callable] = {
    "Damage": on_damage,
    "Heal": on_heal,
    "SetHP": on_set_hp,
    "Boost": on_boost,
    "UnBoost": on_unboost,
    "SetBoost": on_set_boost,
    "SwapBoost": on_swap_boost,
    "CopyBoost": on_copy_boost,
    "InvertBoost": on_invert_boost,
    "ClearPositiveBoost": on_clear_positive_boost,
    "ClearNegativeBoost": on_clear_negative_boost,
    "ClearBoost": on_clear_boost,
    "ClearAllBoosts": on_clear_all_boosts,
    "CriticalHit": on_critical_hit,
    "SuperEffectiveHit": on_hit_effectiveness,
    "ResistedHit": on_hit_effectiveness,
    "Immune": on_immune,
    "Miss": on_miss,
    "Fail": on_fail,
    "Block": on_block,
    "PrepareMove": on_prepare_move,
    "MustRecharge": on_must_recharge,
    "Status": on_status,
    "CureStatus": on_cure_status,
    "CureTeam": on_cure_team,
    "ItemReveal": on_item_reveal,
    "ItemRemove": on_item_remove,
    "AbilityReveal": on_ability_reveal,
    "Transform": on_transform,
    "FormeChange": on_forme_change,
    "MegaEvolution": on_mega_evolution,
    "UltraBurst": on_ultra_burst,
    "Terastallize": on_terastallize,
    "EffectStart": on_effect_start,
    "EffectEnd": on_effect_end,
    "TurnStatus": on_turn_status,
    "MoveStatus": on_move_status,
    "ActivateEffect": on_activate_effect,
    "SideStart": on_side_start,
    "SideEnd": on_side_end,
    "SwapSideConditions": on_swap_side_conditions,
    "Weather": on_weather,
    "FieldStart": on_field_start,
    "FieldEnd": on_field_end,
}
