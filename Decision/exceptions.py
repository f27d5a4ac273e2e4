"""
exceptions.py
-------------
Post-oracle damage adjustments shared by the decision strategies.

The damage oracle scores a move as if it lands this turn. Charge moves, moves
that leave the user recharging, and moves a protecting target can simply wait
out are worth less than that, so their estimate is scaled here.
"""

from __future__ import annotations

from poke_env.data.normalize import to_id_str

from Data.abilities import holds_item
from Data.calc import DamageEstimate
from Data.global_status import is_sunny
from Data.poke_env_moves_info import RECHARGE_MOVES
from Knowledge.battle import ActivePokemon, Battle

PROTECT_MOVES = frozenset(to_id_str(m) for m in (
    "Protect",
    "Baneful Bunker",
    "Detect",
    "Endure",
    "King's Shield",
    "Max Guard",
    "Obstruct",
    "Silk Trap",
    "Spiky Shield",
))

SUN_CHARGE_MOVES = frozenset({"solarbeam", "solarblade"})

# Semi-invulnerable during the charge turn: no halving, only the protect check
TWO_TURNS_MOVES_WITH_IMMUNITY = frozenset(to_id_str(m) for m in (
    "Bounce",
    "Dig",
    "Dive",
    "Fly",
    "Sky Drop",
))

TWO_TURNS_MOVES = frozenset(to_id_str(m) for m in (
    "Freeze Shock",
    "Ice Burn",
    "Meteor Beam",
    "Razor Wind",
    "Sky Attack",
    "Skull Bash",
))


def target_can_protect(target: ActivePokemon) -> bool:
    for m in target.moves.values():
        if to_id_str(m.id) in PROTECT_MOVES and not m.disabled and m.pp > 0:
            return True
    return False


def exceptions_multiplier(battle: Battle, attacker: ActivePokemon, target: ActivePokemon,
                          move: str, max_damage: float) -> float:
    """Factor in [0, 1] applied to a damage estimate of `move` (percent of the target's HP)."""
    move_id = to_id_str(move)
    can_protect = target_can_protect(target)
    skips_charge = holds_item(battle, attacker, "Power Herb")

    if move_id in SUN_CHARGE_MOVES and not is_sunny(battle):
        return 0.0 if can_protect else 0.5

    if move_id in TWO_TURNS_MOVES and not skips_charge:
        return 0.0 if can_protect else 0.5

    if move_id in TWO_TURNS_MOVES_WITH_IMMUNITY and not skips_charge and can_protect:
        return 0.0

    if move_id in RECHARGE_MOVES and max_damage < 100:
        # the lost turn halves damage per turn unless the target goes down
        return 0.5

    return 1.0


def apply_exceptions(battle: Battle, attacker: ActivePokemon, target: ActivePokemon,
                     move: str, damage: float) -> float:
    return damage * exceptions_multiplier(battle, attacker, target, move, damage)


def apply_damage_exceptions(battle: Battle, attacker: ActivePokemon, target: ActivePokemon,
                            move: str, damage: DamageEstimate) -> DamageEstimate:
    factor = exceptions_multiplier(battle, attacker, target, move, damage.max)
    return DamageEstimate(min=damage.min * factor, max=damage.max * factor, priority=damage.priority)
