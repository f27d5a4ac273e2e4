"""
status_moves.py
---------------
Viability predicates for status moves, keyed by move id.

A predicate answers "is using this move on this target worth a turn right
now?". Handlers are registered with the `status_move` decorator while the
module loads; `build_status_move_registry` freezes them into a read-only
mapping. A predicate may return None when it has no opinion, which callers
treat as not viable.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from poke_env.data.normalize import to_id_str

from Data.abilities import PERMANENT_ABILITIES, ability_is_enabled, has_ability, holds_item, move_breaks_ability
from Data.battle_helper import type_effectiveness
from Data.dex_registry import is_berry
from Data.global_status import is_snowy
from Data.move_helper import get_move_real_type
from Data.poke_env_moves_info import _build_static_chart, find_move
from Data.pokemon_helper import get_pokemon_current_types, is_grounded, is_trappable
from Decision.active_decision import players_are_allies
from Decision.algorithms.generic_npc.status_moves_utils import (
    ALL_BOOST_STATS,
    BOOST_STATS,
    OTHER_DECISION_DAMAGE_MOVE,
    STALL_MOVES,
    StatusMoveContext,
    can_be_type_added,
    can_be_type_changed,
    can_boost,
    can_boost_any,
    can_unboost_target,
    check_offensive_boost_viability,
    count_boosts,
    count_hazards,
    find_adjacent_ally,
    foe_actives,
    foe_players,
    hazards_move_viable,
    hazards_move_will_be_bounced,
    is_contrary,
    is_status_viable,
    move_does_damage,
)
from Knowledge.battle import (
    ActivePokemon,
    BattleFields,
    SideConditions,
    SingleMoveStatuses,
    VolatileStatuses,
    Weathers,
    compare_ids,
    get_hp_percent,
)

StatusMoveHandler = Callable[[StatusMoveContext], Optional[bool]]

_HANDLERS: Dict[str, StatusMoveHandler] = {}


def status_move(*moves: str):
    def register(handler: StatusMoveHandler) -> StatusMoveHandler:
        for move in moves:
            _HANDLERS[to_id_str(move)] = handler
        return handler
    return register


def build_status_move_registry() -> Mapping[str, StatusMoveHandler]:
    return MappingProxyType(dict(_HANDLERS))


def is_move_viable(registry: Mapping[str, StatusMoveHandler], move_id: str, context: StatusMoveContext) -> bool:
    handler = registry.get(to_id_str(move_id))
    if handler is None:
        return False
    return bool(handler(context))


# ---- Self boosting moves ----

@status_move("Acid Armor", "Barrier", "Cotton Guard", "Defense Curl", "Harden", "Iron Defense", "Shelter", "Withdraw")
def _boost_def(context: StatusMoveContext) -> bool:
    if is_contrary(context.battle, context.active):
        return False
    return can_boost(context.active, "def")


@status_move("Acupressure")
def _acupressure(context: StatusMoveContext) -> bool:
    if is_contrary(context.battle, context.active):
        return False
    return can_boost_any(context.active, ALL_BOOST_STATS)


@status_move("Agility", "Autotomize", "Rock Polish")
def _boost_spe(context: StatusMoveContext) -> bool:
    if is_contrary(context.battle, context.active):
        return False
    return can_boost(context.active, "spe") and check_offensive_boost_viability(context.active)


@status_move("Amnesia")
def _boost_spd(context: StatusMoveContext) -> bool:
    if is_contrary(context.battle, context.active):
        return False
    return can_boost(context.active, "spd")


@status_move("Belly Drum")
def _belly_drum(context: StatusMoveContext) -> bool:
    return can_boost(context.active, "atk") and get_hp_percent(context.active.condition) > 50


def _offensive_boost(*stats: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        if is_contrary(context.battle, context.active):
            return False
        return can_boost_any(context.active, stats) and check_offensive_boost_viability(context.active)
    return handler


def _defensive_boost(*stats: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        if is_contrary(context.battle, context.active):
            return False
        return can_boost_any(context.active, stats)
    return handler


status_move("Bulk Up", "Coil")(_offensive_boost("atk", "def"))
status_move("Calm Mind")(_offensive_boost("spa", "spd"))
status_move("Dragon Dance", "Shift Gear")(_offensive_boost("atk", "spe"))
status_move("Geomancy", "Quiver Dance")(_offensive_boost("spa", "spd", "spe"))
status_move("Growth", "Work Up")(_offensive_boost("atk", "spa"))
status_move("Hone Claws")(_offensive_boost("atk", "accuracy"))
status_move("Howl", "Meditate", "Sharpen", "Swords Dance")(_offensive_boost("atk"))
status_move("Nasty Plot", "Tail Glow")(_offensive_boost("spa"))
status_move("Shell Smash")(_offensive_boost("atk", "spa", "spe"))
status_move("Victory Dance")(_offensive_boost("atk", "def", "spe"))
status_move("Cosmic Power", "Defend Order")(_defensive_boost("def", "spd"))
status_move("Double Team", "Minimize")(_defensive_boost("evasion"))
status_move("Extreme Evoboost")(_defensive_boost(*BOOST_STATS))


@status_move("Celebrate", "Conversion", "Happy Hour", "Hold Hands")
def _z_boost(context: StatusMoveContext) -> bool:
    # only worth it as the Z version
    if is_contrary(context.battle, context.active):
        return False
    if context.decision.gimmick != "z-move":
        return False
    return can_boost_any(context.active, BOOST_STATS)


@status_move("Clangorous Soul")
def _clangorous_soul(context: StatusMoveContext) -> bool:
    if not check_offensive_boost_viability(context.active):
        return False
    if is_contrary(context.battle, context.active):
        return False
    return can_boost_any(context.active, BOOST_STATS)


@status_move("Fillet Away")
def _fillet_away(context: StatusMoveContext) -> bool:
    if is_contrary(context.battle, context.active):
        return False
    if get_hp_percent(context.active.condition) <= 50:
        return False
    return can_boost_any(context.active, ("atk", "spa", "spe"))


@status_move("No Retreat")
def _no_retreat(context: StatusMoveContext) -> bool:
    if is_contrary(context.battle, context.active):
        return False
    if VolatileStatuses.NoRetreat in context.active.volatiles:
        return False
    return can_boost_any(context.active, BOOST_STATS)


@status_move("Stockpile")
def _stockpile(context: StatusMoveContext) -> bool:
    if is_contrary(context.battle, context.active):
        return False
    level = context.active.volatiles_data.stockpile_level
    if VolatileStatuses.Stockpile in context.active.volatiles and level and level >= 3:
        return False
    return can_boost_any(context.active, ("def", "spd"))


@status_move("Stuff Cheeks")
def _stuff_cheeks(context: StatusMoveContext) -> bool:
    if is_contrary(context.battle, context.active):
        return False
    if not context.active.item.item or not is_berry(context.active.item.item):
        return False
    return can_boost(context.active, "def")


# ---- Self positive volatiles ----

def _missing_self_volatile(volatile: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        return volatile not in context.active.volatiles
    return handler


status_move("Aqua Ring")(_missing_self_volatile(VolatileStatuses.AquaRing))
status_move("Charge")(_missing_self_volatile(VolatileStatuses.Charge))
status_move("Focus Energy")(_missing_self_volatile(VolatileStatuses.FocusEnergy))
status_move("Imprison")(_missing_self_volatile(VolatileStatuses.Imprison))
status_move("Mimic")(_missing_self_volatile(VolatileStatuses.Mimic))
status_move("Power Trick")(_missing_self_volatile(VolatileStatuses.PowerTrick))


TERRAIN_TYPES = (
    (BattleFields.ElectricTerrain, "Electric"),
    (BattleFields.GrassyTerrain, "Grass"),
    (BattleFields.MistyTerrain, "Fairy"),
    (BattleFields.PsychicTerrain, "Psychic"),
)


@status_move("Camouflage")
def _camouflage(context: StatusMoveContext) -> bool:
    new_type = "Normal"
    for terrain, type_name in TERRAIN_TYPES:
        if terrain in context.battle.status.fields:
            new_type = type_name
            break
    return can_be_type_changed(context.battle, context.active, [new_type])


@status_move("Ingrain")
def _ingrain(context: StatusMoveContext) -> bool:
    if VolatileStatuses.PerishSong in context.active.volatiles:
        return False
    return VolatileStatuses.Ingrain not in context.active.volatiles


@status_move("Laser Focus", "Lock-On", "Mind Reader")
def _laser_focus(context: StatusMoveContext) -> bool:
    volatiles = context.active.volatiles
    return VolatileStatuses.LaserFocus not in volatiles and VolatileStatuses.LockOn not in volatiles


@status_move("Magnet Rise")
def _magnet_rise(context: StatusMoveContext) -> bool:
    if not is_grounded(context.battle, context.active):
        return False
    return VolatileStatuses.MagnetRise not in context.active.volatiles


@status_move("Substitute")
def _substitute(context: StatusMoveContext) -> bool:
    if get_hp_percent(context.active.condition) <= 25:
        return False
    return VolatileStatuses.Substitute not in context.active.volatiles


# ---- Status cures ----

@status_move("Aromatherapy", "Heal Bell")
def _team_cure(context: StatusMoveContext) -> bool:
    for pokemon in context.main_player.team:
        if pokemon.condition.fainted:
            continue
        if pokemon.condition.status:
            return True
    return False


@status_move("Lunar Blessing", "Refresh", "Purify", "Take Heart")
def _self_cure(context: StatusMoveContext) -> bool:
    return bool(context.active.condition.status)


# ---- Healing ----

@status_move(
    "Heal Order", "Jungle Healing", "Life Dew", "Milk Drink", "Moonlight", "Morning Sun",
    "Recover", "Roost", "Shore Up", "Slack Off", "Soft-Boiled", "Synthesis",
)
def _heal(context: StatusMoveContext) -> bool:
    if VolatileStatuses.HealBlock in context.active.volatiles:
        return False
    return get_hp_percent(context.active.condition) < 85


@status_move("Rest")
def _rest(context: StatusMoveContext) -> bool:
    active = context.active
    if VolatileStatuses.HealBlock in active.volatiles:
        return False
    if is_grounded(context.battle, active) and BattleFields.ElectricTerrain in context.battle.status.fields:
        return False
    if has_ability(context.battle, active, "Comatose"):
        return False
    if active.condition.status == "SLP":
        return False
    return get_hp_percent(active.condition) < 85 or bool(active.condition.status)


@status_move("Swallow")
def _swallow(context: StatusMoveContext) -> bool:
    if VolatileStatuses.HealBlock in context.active.volatiles:
        return False
    if VolatileStatuses.Stockpile not in context.active.volatiles:
        return False
    return get_hp_percent(context.active.condition) < 85


@status_move("Wish")
def _wish(context: StatusMoveContext) -> bool:
    return not context.active.last_move or not compare_ids(context.active.last_move, "Wish")


@status_move("Pain Split")
def _pain_split(context: StatusMoveContext) -> bool:
    own = context.active.stats.hp.max * get_hp_percent(context.active.condition)
    other = context.target.stats.hp.max * get_hp_percent(context.target.condition)
    return own < other


# ---- Positive side conditions ----

@status_move("Aurora Veil")
def _aurora_veil(context: StatusMoveContext) -> bool:
    if SideConditions.AuroraVeil in context.main_player.side_conditions:
        return False
    return is_snowy(context.battle)


def _missing_side_condition(condition: str, gen1_volatile: Optional[str] = None) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        # gen 1 screens are volatiles on the user
        if gen1_volatile and context.battle.status.gen == 1 and gen1_volatile in context.active.volatiles:
            return False
        return condition not in context.main_player.side_conditions
    return handler


status_move("Light Screen")(_missing_side_condition(SideConditions.LightScreen, VolatileStatuses.LightScreen))
status_move("Reflect")(_missing_side_condition(SideConditions.Reflect, VolatileStatuses.Reflect))
status_move("Mist")(_missing_side_condition(SideConditions.Mist, VolatileStatuses.Mist))
status_move("Lucky Chant")(_missing_side_condition(SideConditions.LuckyChant))
status_move("Safeguard")(_missing_side_condition(SideConditions.Safeguard))
status_move("Tailwind")(_missing_side_condition(SideConditions.Tailwind))


# ---- Hazard removal ----

REMOVABLE_HAZARDS = (
    SideConditions.StealthRock,
    SideConditions.Spikes,
    SideConditions.StickyWeb,
    SideConditions.ToxicSpikes,
)


def _has_future_switches(context: StatusMoveContext) -> bool:
    request = context.battle.request
    if request is None:
        return False
    return any(not p.condition.fainted and not p.active for p in request.side.pokemon)


def _own_side_hazarded(context: StatusMoveContext) -> bool:
    return any(h in context.main_player.side_conditions for h in REMOVABLE_HAZARDS)


@status_move("Rapid Spin", "Mortal Spin", "G-Max Wind Rage")
def _rapid_spin(context: StatusMoveContext) -> bool:
    if not move_does_damage(context):
        return False
    if VolatileStatuses.LeechSeed in context.active.volatiles:
        return True
    return _has_future_switches(context) and _own_side_hazarded(context)


@status_move("Defog", "Tidy Up")
def _defog(context: StatusMoveContext) -> bool:
    return _has_future_switches(context) and _own_side_hazarded(context)


@status_move("Court Change")
def _court_change(context: StatusMoveContext) -> bool:
    own = count_hazards(context.main_player)
    return any(own > count_hazards(foe) for foe in foe_players(context.battle, context.main_player))


# ---- Target de-boosting ----

def _unboost(*stats: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        if is_contrary(context.battle, context.target):
            return False
        return any(can_unboost_target(context, s) for s in stats)
    return handler


status_move("Baby-Doll Eyes", "Leer", "Screech", "Tail Whip")(_unboost("def"))
status_move("Captivate", "Confide", "Eerie Impulse")(_unboost("spa"))
status_move("Charm", "Feather Dance", "Growl", "Strength Sap", "Play Nice")(_unboost("atk"))
status_move("Cotton Spore", "Scary Face", "String Shot")(_unboost("spe"))
status_move("Fake Tears", "Metal Sound")(_unboost("spd"))
status_move("Flash", "Kinesis", "Sand Attack", "Smokescreen")(_unboost("accuracy"))
status_move("Memento", "Noble Roar", "Parting Shot", "Tearful Look")(_unboost("atk", "spa"))
status_move("Spicy Extract", "Tickle")(_unboost("atk", "def"))
status_move("Sweet Scent")(_unboost("evasion"))


@status_move("Venom Drench")
def _venom_drench(context: StatusMoveContext) -> bool:
    if is_contrary(context.battle, context.target):
        return False
    if context.target.condition.status not in ("TOX", "PSN"):
        return False
    return any(can_unboost_target(context, s) for s in ("atk", "spa", "spe"))


# ---- Non-volatile status on target ----

def _inflicts(status: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        return is_status_viable(context, status)
    return handler


status_move("Glare", "Stun Spore")(_inflicts("PAR"))
status_move("Grass Whistle", "Hypnosis", "Lovely Kiss", "Sing", "Sleep Powder", "Spore")(_inflicts("SLP"))
status_move("Poison Gas", "Poison Powder", "Toxic Thread")(_inflicts("PSN"))
status_move("Toxic")(_inflicts("TOX"))
status_move("Will-O-Wisp")(_inflicts("BRN"))


@status_move("Dark Void")
def _dark_void(context: StatusMoveContext) -> Optional[bool]:
    if not compare_ids(context.active.details.species, "Darkrai"):
        return None
    return is_status_viable(context, "SLP")


@status_move("Psycho Shift")
def _psycho_shift(context: StatusMoveContext) -> Optional[bool]:
    if not context.active.condition.status:
        return None
    return is_status_viable(context, context.active.condition.status)


@status_move("Thunder Wave")
def _thunder_wave(context: StatusMoveContext) -> bool:
    # natural immunities apply
    types = get_pokemon_current_types(context.battle, context.target)
    if type_effectiveness("Electric", types, _build_static_chart(), inverse=context.battle.status.inverse) == 0:
        return False
    return is_status_viable(context, "PAR")


@status_move("Yawn")
def _yawn(context: StatusMoveContext) -> bool:
    if VolatileStatuses.Yawn in context.target.volatiles:
        return False
    return is_status_viable(context, "SLP")


# ---- Negative volatiles on target ----

def _missing_target_volatile(volatile: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        return volatile not in context.target.volatiles
    return handler


status_move("Heal Block")(_missing_target_volatile(VolatileStatuses.HealBlock))
status_move("Embargo")(_missing_target_volatile(VolatileStatuses.Embargo))
status_move("Taunt")(_missing_target_volatile(VolatileStatuses.Taunt))
status_move("Torment")(_missing_target_volatile(VolatileStatuses.Torment))


@status_move("Attract")
def _attract(context: StatusMoveContext) -> bool:
    if VolatileStatuses.Attract in context.target.volatiles:
        return False
    genders = {context.target.details.gender, context.active.details.gender}
    return genders == {"M", "F"}


@status_move("Block", "Mean Look", "Spider Web")
def _trap(context: StatusMoveContext) -> bool:
    if VolatileStatuses.Trapped in context.target.volatiles:
        return False
    return is_trappable(context.battle, context.target)


@status_move("Octolock")
def _octolock(context: StatusMoveContext) -> bool:
    if VolatileStatuses.Octolock in context.target.volatiles:
        return False
    return is_trappable(context.battle, context.target)


@status_move("Confuse Ray", "Flatter", "Swagger", "Sweet Kiss", "Supersonic", "Teeter Dance")
def _confuse(context: StatusMoveContext) -> bool:
    if has_ability(context.battle, context.target, "Own Tempo") and not move_breaks_ability(
            context.battle, context.active, context.target, context.move):
        return False
    return VolatileStatuses.Confusion not in context.target.volatiles


@status_move("Curse")
def _curse(context: StatusMoveContext) -> bool:
    if "Ghost" in get_pokemon_current_types(context.battle, context.active):
        return get_hp_percent(context.active.condition) > 50 and VolatileStatuses.Curse not in context.target.volatiles
    return can_boost_any(context.active, ("atk", "def"))


def _usable_last_move(context: StatusMoveContext, pokemon: ActivePokemon) -> bool:
    if not pokemon.last_move or compare_ids(pokemon.last_move, "Struggle"):
        return False
    move = find_move(context.battle.status.gen, pokemon.last_move)
    return not move.is_max and not move.is_z


@status_move("Disable")
def _disable(context: StatusMoveContext) -> bool:
    if VolatileStatuses.Disable in context.target.volatiles:
        return False
    return _usable_last_move(context, context.target)


@status_move("Encore")
def _encore(context: StatusMoveContext) -> bool:
    if VolatileStatuses.Encore in context.target.volatiles:
        return False
    return _usable_last_move(context, context.target)


def _identify(type_name: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        if type_name not in get_pokemon_current_types(context.battle, context.target):
            return False
        volatiles = context.target.volatiles
        return VolatileStatuses.Foresight not in volatiles and VolatileStatuses.MiracleEye not in volatiles
    return handler


status_move("Foresight", "Odor Sleuth")(_identify("Ghost"))
status_move("Miracle Eye")(_identify("Dark"))


@status_move("Leech Seed")
def _leech_seed(context: StatusMoveContext) -> bool:
    if "Grass" in get_pokemon_current_types(context.battle, context.target):
        return False
    if to_id_str(context.target.ability.ability) in ("magicguard", "liquidooze"):
        if ability_is_enabled(context.battle, context.target):
            return False
    return VolatileStatuses.LeechSeed not in context.target.volatiles


@status_move("Nightmare")
def _nightmare(context: StatusMoveContext) -> bool:
    return VolatileStatuses.Nightmare not in context.target.volatiles and context.target.condition.status == "SLP"


@status_move("Perish Song")
def _perish_song(context: StatusMoveContext) -> bool:
    if VolatileStatuses.Ingrain in context.active.volatiles:
        return False
    return VolatileStatuses.PerishSong not in context.target.volatiles


@status_move("Telekinesis")
def _telekinesis(context: StatusMoveContext) -> bool:
    if BattleFields.Gravity in context.battle.status.fields:
        return False
    return VolatileStatuses.Telekinesis not in context.target.volatiles


# ---- Type changes ----

@status_move("Forest's Curse")
def _forests_curse(context: StatusMoveContext) -> bool:
    return can_be_type_added(context.battle, context.target, "Grass")


@status_move("Trick-or-Treat")
def _trick_or_treat(context: StatusMoveContext) -> bool:
    return can_be_type_added(context.battle, context.target, "Ghost")


@status_move("Magic Powder")
def _magic_powder(context: StatusMoveContext) -> bool:
    return can_be_type_changed(context.battle, context.target, ["Psychic"])


@status_move("Soak")
def _soak(context: StatusMoveContext) -> bool:
    return can_be_type_changed(context.battle, context.target, ["Water"])


@status_move("Reflect Type")
def _reflect_type(context: StatusMoveContext) -> bool:
    types = get_pokemon_current_types(context.battle, context.target)
    return can_be_type_changed(context.battle, context.active, types)


# ---- Hazards ----

def _hazard(condition: str, max_count: int) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        if hazards_move_will_be_bounced(context.battle, context.main_player, context.active, context.move):
            return False
        return hazards_move_viable(context.battle, context.main_player, condition, max_count, True)
    return handler


status_move("Spikes")(_hazard(SideConditions.Spikes, 3))
status_move("Stealth Rock")(_hazard(SideConditions.StealthRock, 1))
status_move("Sticky Web")(_hazard(SideConditions.StickyWeb, 1))
status_move("Toxic Spikes")(_hazard(SideConditions.ToxicSpikes, 2))


@status_move("G-Max Steelsurge")
def _steelsurge(context: StatusMoveContext) -> bool:
    if not move_does_damage(context):
        return False
    return hazards_move_viable(context.battle, context.main_player, SideConditions.GMaxSteelsurge, 1, True)


@status_move("G-Max Wildfire", "G-Max Volcalith", "G-Max Vine Lash", "G-Max Cannonade")
def _gmax_residual(context: StatusMoveContext) -> bool:
    if not move_does_damage(context):
        return False
    return hazards_move_viable(context.battle, context.main_player, to_id_str(context.move.name), 1, False)


# ---- Ally moves ----

def _targets_own_side(context: StatusMoveContext) -> bool:
    if context.target_player.index == context.main_player.index:
        return True
    return players_are_allies(context.battle.status.game_type, context.target_player.index, context.main_player.index)


@status_move("Ally Switch")
def _ally_switch(context: StatusMoveContext) -> bool:
    if context.active.last_move and to_id_str(context.active.last_move) in STALL_MOVES:
        return False
    ally = find_adjacent_ally(context.battle, context.main_player, context.active)
    if ally is None or ally.condition.fainted:
        return False
    return context.extra.other_decisions.get(ally.slot) == OTHER_DECISION_DAMAGE_MOVE


@status_move("Aromatic Mist")
def _aromatic_mist(context: StatusMoveContext) -> bool:
    return _targets_own_side(context) and can_boost(context.target, "spd")


@status_move("Coaching")
def _coaching(context: StatusMoveContext) -> bool:
    return _targets_own_side(context) and can_boost_any(context.target, ("atk", "def"))


@status_move("Decorate")
def _decorate(context: StatusMoveContext) -> bool:
    return _targets_own_side(context) and can_boost_any(context.target, ("atk", "spa"))


@status_move("Floral Healing", "Heal Pulse")
def _heal_ally(context: StatusMoveContext) -> bool:
    return _targets_own_side(context) and get_hp_percent(context.target.condition) < 100


@status_move("Helping Hand", "Instruct")
def _helping_hand(context: StatusMoveContext) -> bool:
    if not _targets_own_side(context):
        return False
    if context.target_player.index != context.main_player.index:
        return True
    return context.extra.other_decisions.get(context.target.slot) == OTHER_DECISION_DAMAGE_MOVE


# ---- Randomized moves ----

@status_move("Assist")
def _assist(context: StatusMoveContext) -> bool:
    return len(context.main_player.team) > 1


@status_move("Metronome", "Electrify")
def _always(context: StatusMoveContext) -> bool:
    return True


# ---- Protection ----

@status_move("Protect", "Baneful Bunker", "Detect", "Endure", "King's Shield", "Max Guard",
             "Obstruct", "Silk Trap", "Spiky Shield")
def _protect(context: StatusMoveContext) -> bool:
    return not context.active.last_move or to_id_str(context.active.last_move) not in STALL_MOVES


@status_move("Mat Block")
def _mat_block(context: StatusMoveContext) -> bool:
    return context.active.switched_on_turn in (context.battle.turn, context.battle.turn - 1)


# ---- Passing ----

@status_move("Baton Pass")
def _baton_pass(context: StatusMoveContext) -> bool:
    if context.best_switch is None:
        return False
    if VolatileStatuses.PerishSong in context.active.volatiles:
        return False
    return sum(context.active.boosts.values()) > 0


@status_move("Shed Tail")
def _shed_tail(context: StatusMoveContext) -> bool:
    return context.best_switch is not None and get_hp_percent(context.active.condition) > 50


@status_move("Teleport")
def _teleport(context: StatusMoveContext) -> bool:
    return context.best_switch is not None


# ---- Weather ----

PRIMAL_WEATHERS = frozenset({Weathers.PrimordialSea, Weathers.DesolateLand, Weathers.DeltaStream})


def _set_weather(*weathers: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        current = context.battle.status.weather
        if current is None or current.id == Weathers.None_:
            return True
        if current.id in PRIMAL_WEATHERS:
            return False
        return current.id not in weathers
    return handler


status_move("Chilly Reception", "Hail", "Snowscape")(_set_weather(Weathers.Hail, Weathers.Snow))
status_move("Rain Dance")(_set_weather(Weathers.RainDance))
status_move("Sandstorm")(_set_weather(Weathers.Sandstorm))
status_move("Sunny Day")(_set_weather(Weathers.SunnyDay))


# ---- Fields ----

@status_move("Electric Terrain", "Grassy Terrain", "Gravity", "Magic Room", "Misty Terrain", "Mud Sport",
             "Psychic Terrain", "Trick Room", "Water Sport", "Wonder Room")
def _field(context: StatusMoveContext) -> bool:
    return to_id_str(context.move.name) not in context.battle.status.fields


# ---- Ability changes ----

ENTRAINMENT_FAILS = frozenset(to_id_str(a) for a in (
    "Truant", "Multitype", "Stance Change", "Schooling", "Comatose", "Shields Down",
    "Disguise", "RKS System", "Battle Bond", "Ice Face", "Gulp Missile",
))

SKILL_SWAP_FAILS = frozenset(to_id_str(a) for a in (
    "Wonder Guard", "Multitype", "Illusion", "Stance Change", "Schooling", "Comatose",
    "Shields Down", "Disguise", "RKS System", "Battle Bond", "Power Construct", "Ice Face",
    "Gulp Missile", "Neutralizing Gas",
))


def _permanent(pokemon: ActivePokemon) -> bool:
    return to_id_str(pokemon.ability.ability) in PERMANENT_ABILITIES


def _ability_shielded(context: StatusMoveContext) -> bool:
    return holds_item(context.battle, context.target, "Ability Shield")


@status_move("Doodle", "Role Play")
def _role_play(context: StatusMoveContext) -> bool:
    if _permanent(context.active) or _permanent(context.target):
        return False
    return not compare_ids(context.active.ability.ability, context.target.ability.ability)


@status_move("Entrainment")
def _entrainment(context: StatusMoveContext) -> bool:
    active, target = context.active, context.target
    if _permanent(active) or _permanent(target) or _ability_shielded(context):
        return False
    if to_id_str(active.ability.ability) in ENTRAINMENT_FAILS or to_id_str(target.ability.ability) in ENTRAINMENT_FAILS:
        return False
    if target.ability.cannot_be_changed:
        return False
    return not compare_ids(active.ability.ability, target.ability.ability)


@status_move("Gastro Acid")
def _gastro_acid(context: StatusMoveContext) -> bool:
    if _permanent(context.target) or _ability_shielded(context):
        return False
    if context.target.ability.cannot_be_disabled:
        return False
    return ability_is_enabled(context.battle, context.target)


@status_move("Skill Swap")
def _skill_swap(context: StatusMoveContext) -> bool:
    active, target = context.active, context.target
    if _permanent(active) or _permanent(target) or _ability_shielded(context):
        return False
    if to_id_str(active.ability.ability) in SKILL_SWAP_FAILS or to_id_str(target.ability.ability) in SKILL_SWAP_FAILS:
        return False
    if target.ability.cannot_be_changed or target.ability.cannot_be_swapped:
        return False
    return not compare_ids(active.ability.ability, target.ability.ability)


def _replace_ability(ability: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        if _permanent(context.target) or _ability_shielded(context):
            return False
        if context.target.ability.cannot_be_changed:
            return False
        return not compare_ids(context.target.ability.ability, ability)
    return handler


status_move("Simple Beam")(_replace_ability("Simple"))
status_move("Worry Seed")(_replace_ability("Insomnia"))


# ---- Item changes ----

ITEMS_TO_TRICK = frozenset(to_id_str(i) for i in (
    "Choice Scarf", "Choice Band", "Choice Specs", "Sticky Barb", "Ring Target",
))


@status_move("Corrosive Gas")
def _corrosive_gas(context: StatusMoveContext) -> bool:
    if context.target.item.trick_move_failed:
        return False
    return bool(context.target.item.item)


@status_move("Trick", "Switcheroo")
def _trick(context: StatusMoveContext) -> bool:
    if context.target.item.trick_move_failed:
        return False
    return to_id_str(context.active.item.item) in ITEMS_TO_TRICK


@status_move("Recycle")
def _recycle(context: StatusMoveContext) -> bool:
    item = context.active.item
    if item.item or not item.previous_item:
        return False
    return item.item_lost_cause in ("consumed", "eaten")


# ---- Doubles only ----

@status_move("Follow Me", "Quash", "Rage Powder", "Spotlight")
def _doubles_only(context: StatusMoveContext) -> bool:
    return context.battle.status.game_type in ("doubles", "triples", "multi")


# ---- Counters ----

def _foes_have_move(context: StatusMoveContext, predicate: Callable[[ActivePokemon, str], bool]) -> bool:
    for foe in foe_actives(context.battle, context.main_player):
        for move in foe.moves.values():
            if move.disabled or move.pp <= 0:
                continue
            if predicate(foe, move.id):
                return True
    return False


def _foe_category(*categories: str) -> Callable[[StatusMoveContext], bool]:
    def handler(context: StatusMoveContext) -> bool:
        if not move_does_damage(context, 50):
            return False
        gen = context.battle.status.gen
        return _foes_have_move(context, lambda _foe, move_id: find_move(gen, move_id).category in categories)
    return handler


status_move("Counter")(_foe_category("Physical"))
status_move("Mirror Coat")(_foe_category("Special"))
status_move("Comeuppance", "Metal Burst")(_foe_category("Physical", "Special"))


def _last_move_not_repeated(move_name: str, status: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        if context.active.last_move and compare_ids(context.active.last_move, move_name):
            return False
        return status not in context.active.single_move_statuses
    return handler


status_move("Destiny Bond")(_last_move_not_repeated("Destiny Bond", SingleMoveStatuses.DestinyBond))
status_move("Grudge")(_last_move_not_repeated("Grudge", SingleMoveStatuses.Grudge))


def _foe_flag(flag: str) -> Callable[[StatusMoveContext, ActivePokemon, str], bool]:
    def predicate(context: StatusMoveContext, _foe: ActivePokemon, move_id: str) -> bool:
        return find_move(context.battle.status.gen, move_id).has_flag(flag)
    return predicate


@status_move("Magic Coat")
def _magic_coat(context: StatusMoveContext) -> bool:
    check = _foe_flag("reflectable")
    return _foes_have_move(context, lambda foe, move_id: check(context, foe, move_id))


@status_move("Snatch")
def _snatch(context: StatusMoveContext) -> bool:
    if not context.target.last_move:
        return False
    check = _foe_flag("snatch")
    return _foes_have_move(context, lambda foe, move_id: check(context, foe, move_id))


@status_move("Powder")
def _powder(context: StatusMoveContext) -> bool:
    return _foes_have_move(
        context, lambda foe, move_id: get_move_real_type(context.battle, foe, move_id) == "Fire")


@status_move("Mirror Move")
def _mirror_move(context: StatusMoveContext) -> bool:
    if not _usable_last_move(context, context.target):
        return False
    return find_move(context.battle.status.gen, context.target.last_move).has_flag("mirror")


@status_move("Spite")
def _spite(context: StatusMoveContext) -> bool:
    last_move = context.target.last_move
    if not last_move or compare_ids(last_move, "Struggle"):
        return False
    known = context.target.moves.get(to_id_str(last_move))
    return known is not None and known.pp > 0


@status_move("Tar Shot")
def _tar_shot(context: StatusMoveContext) -> bool:
    last_move = context.target.last_move
    if not last_move or compare_ids(last_move, "Struggle"):
        return False
    return get_move_real_type(context.battle, context.target, last_move) == "Fire"


# ---- Boost swaps ----

def _boost_swap(*stats: str) -> StatusMoveHandler:
    def handler(context: StatusMoveContext) -> bool:
        return count_boosts(context.target, stats) > count_boosts(context.active, stats)
    return handler


status_move("Guard Swap")(_boost_swap("def", "spd"))
status_move("Power Swap")(_boost_swap("atk", "spa"))
status_move("Heart Swap", "Haze", "Psych Up")(_boost_swap(*ALL_BOOST_STATS))


@status_move("Topsy-Turvy")
def _topsy_turvy(context: StatusMoveContext) -> bool:
    return count_boosts(context.target, ALL_BOOST_STATS) > 0


# ---- Phasing ----

@status_move("Roar", "Whirlwind")
def _phase(context: StatusMoveContext) -> bool:
    if VolatileStatuses.Ingrain in context.target.volatiles:
        return False
    if has_ability(context.battle, context.target, "Suction Cups"):
        return False
    return count_boosts(context.target, ALL_BOOST_STATS) > 0 or count_hazards(context.target_player) > 0


# ---- Side healing and revival ----

@status_move("Healing Wish", "Lunar Dance")
def _healing_wish(context: StatusMoveContext) -> bool:
    request = context.battle.request
    if context.best_switch is None or request is None:
        return False
    if context.best_switch.pokemon_index >= len(request.side.pokemon):
        return False
    incoming = request.side.pokemon[context.best_switch.pokemon_index]
    return get_hp_percent(incoming.condition) < 100 or bool(incoming.condition.status)


@status_move("Revival Blessing")
def _revival_blessing(context: StatusMoveContext) -> bool:
    request = context.battle.request
    if request is None:
        return False
    return any(p.condition.fainted for p in request.side.pokemon)


# ---- Other ----

@status_move("Sleep Talk")
def _sleep_talk(context: StatusMoveContext) -> bool:
    active = context.active
    if active.condition.status != "SLP":
        return False
    if active.total_burned_sleep_turns == 0:
        # asleep for at least this turn
        return True
    if active.slept_by_rest:
        return active.total_burned_sleep_turns < 2
    return context.rng.random() > 1 / (2 ** active.total_burned_sleep_turns)


@status_move("Transform")
def _transform(context: StatusMoveContext) -> bool:
    if context.target.volatiles_data.fake:
        return False
    return (VolatileStatuses.Transform not in context.active.volatiles
            and VolatileStatuses.Transform not in context.target.volatiles)


STATUS_MOVES: Mapping[str, StatusMoveHandler] = build_status_move_registry()