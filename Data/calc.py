"""
calc.py
-------
Bridge between the knowledge store and the damage oracle.

`estimate_damage` turns partially known combatants into CalcPokemon values (stat
mode min / max / avg for unknowns, disguise and transform overlays, type
changes, known item / ability), resolves variable base power, short-circuits
the moves that cannot deal damage in the current situation, describes the
field and both sides, and forwards everything to the oracle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from poke_env.data.normalize import to_id_str

from Data.abilities import ability_is_enabled, holds_item, move_breaks_ability
from Data.battle_helper import CalcField, CalcSide
from Data.damage_helper import CalcMove, CalcPokemon, DamageOracle, default_oracle
from Data.dex_registry import find_species
from Data.global_status import active_weather
from Data.move_helper import get_move_real_type
from Data.poke_env_moves_info import MoveInfo, find_move
from Data.pokemon_helper import (
    apply_illusion,
    apply_known_stats,
    apply_transform,
    apply_type_changes,
    get_pokemon_current_types,
    is_commanding,
    is_grounded,
    new_calc_pokemon,
)
from Data.side_helper import check_battery, check_flower_gift, check_friend_guard, check_power_spot
from Knowledge.battle import (
    AbilityEffects,
    ActivePokemon,
    Battle,
    BattleFields,
    Player,
    SideConditions,
    VolatileStatuses,
    compare_ids,
)


@dataclass
class CalcOptions:
    consider_stats_attacker: str = "avg"   # 'min' | 'max' | 'avg'
    consider_stats_defender: str = "avg"
    use_percent: bool = False
    ignore_current_hp: bool = False
    override_base_power: Optional[int] = None
    override_category: Optional[str] = None
    use_max: bool = False
    use_z_move: bool = False
    is_helping_hand: bool = False


@dataclass
class DamageEstimate:
    min: float = 0
    max: float = 0
    priority: int = 0


NO_DAMAGE = DamageEstimate(0, 0, 0)

FIRST_TURN_ONLY_MOVES = frozenset({"fakeout", "firstimpression"})

_TERRAINS = (
    (BattleFields.ElectricTerrain, "electric"),
    (BattleFields.GrassyTerrain, "grassy"),
    (BattleFields.MistyTerrain, "misty"),
    (BattleFields.PsychicTerrain, "psychic"),
)

_BOOST_STATS = ("atk", "def", "spa", "spd", "spe")


def _calc_pokemon(battle: Battle, player: Player, active: ActivePokemon, mode: str, is_attacker: bool) -> CalcPokemon:
    poke = new_calc_pokemon(battle.status.gen, active.details.species)

    apply_illusion(battle, poke, active)
    apply_transform(battle, poke, active, mode)

    poke.level = active.details.level
    poke.gender = active.details.gender
    poke.status = active.condition.status

    apply_known_stats(poke, active, mode)
    apply_type_changes(poke, active)

    if active.item.known:
        poke.item = active.item.item or None

    if ability_is_enabled(battle, active):
        if active.ability.known:
            poke.ability = active.ability.ability
            aid = to_id_str(active.ability.ability)
            if aid == "flashfire":
                poke.ability_on = VolatileStatuses.FlashFire in active.volatiles
            elif aid in ("protosynthesis", "quarkdrive"):
                if not poke.item and aid in active.volatiles:
                    poke.item = "Booster Energy"
                    poke.boosted_stat = active.volatiles_data.boosted_stat
            elif aid in ("protean", "libero") and is_attacker:
                # only once per switch-in from gen 9
                if battle.status.gen >= 9 and VolatileStatuses.TypeChange in active.volatiles:
                    poke.ability = None
    else:
        poke.ability = None

    poke.boosts = {s: active.boosts.get(s, 0) for s in _BOOST_STATS}
    poke.allies_fainted = player.times_fainted
    poke.is_dynamaxed = VolatileStatuses.Dynamax in active.volatiles
    poke.grounded = is_grounded(battle, active)

    return poke


def _calc_move(battle: Battle, attacker_player: Player, attacker: ActivePokemon, move_data: MoveInfo,
               options: CalcOptions) -> CalcMove:
    base_power = int(move_data.base_power or 0)

    if base_power == 0 and move_data.id == "beatup":
        base_power = 5
        for poke in attacker_player.team:
            if poke.condition.fainted:
                continue
            base_power += find_species(battle.status.gen, poke.details.species).base_stats.get("atk", 0) // 10
    elif move_data.id == "lastrespects":
        base_power = 50 + 50 * attacker_player.times_fainted
    elif move_data.id == "ragefist":
        base_power = min(350, 50 + 50 * attacker.times_hit)

    category = move_data.category or "Status"
    if options.override_category is not None:
        category = options.override_category
    if options.override_base_power is not None:
        base_power = options.override_base_power

    return CalcMove(
        id=move_data.id,
        name=move_data.name,
        type=get_move_real_type(battle, attacker, move_data.id),
        base_type=move_data.type or "???",
        category=category,
        base_power=base_power,
        priority=move_data.priority,
        target=move_data.target or "normal",
        flags=dict(move_data.flags),
        multihit=move_data.multihit,
        use_z=options.use_z_move,
        use_max=options.use_max,
        ohko=bool(move_data.ohko),
        recoil=move_data.recoil,
        drain=move_data.drain,
        heal=bool(move_data.heal),
        will_crit=bool(move_data.raw.get("willCrit")),
        has_secondary=bool(move_data.secondary or move_data.secondaries),
    )


def _cannot_deal_damage(battle: Battle, attacker_player: Player, attacker: ActivePokemon,
                        defender_player: Player, defender: ActivePokemon,
                        move_data: MoveInfo, attacker_calc: CalcPokemon) -> bool:
    mid = move_data.id

    if is_commanding(battle, defender_player, defender):
        return True

    if mid in FIRST_TURN_ONLY_MOVES:
        if attacker.switched_on_turn not in (battle.turn, battle.turn - 1):
            return True
    elif mid == "hyperspacefury":
        if not compare_ids(attacker_calc.species, "Hoopa-Unbound"):
            return True
    elif mid == "aurawheel":
        if to_id_str(attacker_calc.species) not in ("morpeko", "morpekohangry"):
            return True
    elif mid == "burnup":
        if "Fire" not in attacker_calc.types:
            return True
    elif mid == "doubleshock":
        if "Electric" not in attacker_calc.types:
            return True
    elif mid == "futuresight":
        if SideConditions.FutureSight in attacker_player.side_conditions:
            return True
    elif mid == "doomdesire":
        if SideConditions.DoomDesire in attacker_player.side_conditions:
            return True

    def defender_ability(*ids: str) -> bool:
        return (
            to_id_str(defender.ability.ability) in ids
            and ability_is_enabled(battle, defender)
            and not move_breaks_ability(battle, attacker, defender, move_data)
        )

    if move_data.has_flag("reflectable") and defender_ability("magicbounce"):
        return True
    if move_data.has_flag("bullet") and defender_ability("bulletproof"):
        return True
    if move_data.has_flag("sound") and defender_ability("soundproof"):
        return True
    if move_data.has_flag("wind") and defender_ability("windpower", "windrider"):
        return True

    if move_data.has_flag("powder"):
        if battle.status.gen >= 6 and "Grass" in get_pokemon_current_types(battle, defender):
            return True
        if holds_item(battle, defender, "Safety Goggles"):
            return True
        if defender_ability("overcoat"):
            return True

    if compare_ids(defender.details.species, "Shedinja") and defender_ability("sturdy"):
        return True

    return False


def _side(battle: Battle, player: Player, active: ActivePokemon, helping_hand: bool = False) -> CalcSide:
    return CalcSide(
        tailwind=SideConditions.Tailwind in player.side_conditions,
        helping_hand=helping_hand,
        reflect=SideConditions.Reflect in player.side_conditions or VolatileStatuses.Reflect in active.volatiles,
        light_screen=SideConditions.LightScreen in player.side_conditions,
        aurora_veil=SideConditions.AuroraVeil in player.side_conditions,
        foresight=VolatileStatuses.Foresight in active.volatiles,
        flower_gift=check_flower_gift(battle, player, active.slot),
        friend_guard=check_friend_guard(battle, player, active.slot),
        power_spot=check_power_spot(battle, player, active.slot),
        battery=check_battery(battle, player, active.slot),
    )


def build_field(battle: Battle, attacker_player: Player, attacker: ActivePokemon,
                defender_player: Player, defender: ActivePokemon, helping_hand: bool = False) -> CalcField:
    terrain = None
    for field_id, name in _TERRAINS:
        if field_id in battle.status.fields:
            terrain = name
            break

    effects = battle.status.ability_effects
    return CalcField(
        game_type=battle.status.game_type,
        weather=active_weather(battle),
        terrain=terrain,
        inverse=battle.status.inverse,
        gravity=BattleFields.Gravity in battle.status.fields,
        magic_room=BattleFields.MagicRoom in battle.status.fields,
        wonder_room=BattleFields.WonderRoom in battle.status.fields,
        ability_effects=[e for e in (
            AbilityEffects.AuraBreak, AbilityEffects.DarkAura, AbilityEffects.FairyAura,
            AbilityEffects.BeadsOfRuin, AbilityEffects.SwordOfRuin,
            AbilityEffects.TabletsOfRuin, AbilityEffects.VesselOfRuin,
        ) if e in effects],
        attacker_side=_side(battle, attacker_player, attacker, helping_hand),
        defender_side=_side(battle, defender_player, defender),
    )


def estimate_damage(battle: Battle, attacker_player: Player, attacker: ActivePokemon,
                    defender_player: Player, defender: ActivePokemon, move: str,
                    options: Optional[CalcOptions] = None,
                    oracle: Optional[DamageOracle] = None) -> DamageEstimate:
    """Estimated damage range of `move`, raw HP or percent of the defender's HP.

    Synchronous so event handlers can use it; decision code goes through `calc_damage`.
    """
    if options is None:
        options = CalcOptions()
    if oracle is None:
        oracle = default_oracle

    gen = battle.status.gen
    attacker_calc = _calc_pokemon(battle, attacker_player, attacker, options.consider_stats_attacker, True)
    defender_calc = _calc_pokemon(battle, defender_player, defender, options.consider_stats_defender, False)

    move_data = find_move(gen, move)
    move_calc = _calc_move(battle, attacker_player, attacker, move_data, options)

    if _cannot_deal_damage(battle, attacker_player, attacker, defender_player, defender, move_data, attacker_calc):
        return DamageEstimate(0, 0, 0)

    fld = build_field(battle, attacker_player, attacker, defender_player, defender, options.is_helping_hand)

    result = oracle(gen, attacker_calc, defender_calc, move_calc, fld)

    lo: float = result.min
    hi: float = result.max

    if move_calc.hits > 1:
        lo *= move_calc.hits
        hi *= move_calc.hits

    if options.use_percent:
        if options.ignore_current_hp:
            hp = defender_calc.max_hp
        else:
            hp = defender_calc.cur_hp or 1
        lo = lo * 100 / hp
        hi = hi * 100 / hp

    return DamageEstimate(min=lo, max=hi, priority=result.priority)


async def calc_damage(battle: Battle, attacker_player: Player, attacker: ActivePokemon,
                      defender_player: Player, defender: ActivePokemon, move: str,
                      options: Optional[CalcOptions] = None,
                      oracle: Optional[DamageOracle] = None) -> DamageEstimate:
    return estimate_damage(battle, attacker_player, attacker, defender_player, defender, move, options, oracle)
