"""
evaluate_move_damage.py
-----------------------
Sorts the damaging move decisions of one slot into labeled buckets.

Labels, best first:
  SPP  guaranteed OHKO, priority, perfect accuracy
  SP   guaranteed OHKO
  S    possible OHKO, or a Fake Out that will flinch
  A    guaranteed 2HKO after the target's recovery
  B    possible 2HKO
  C    possible 3HKO
  D    some net damage
  E    the target heals back more than we deal
  Z    no damage
  N    only our own side is hit
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from poke_env.data.normalize import to_id_str

from Data.accuracy import OHKO_MOVES, calc_move_accuracy
from Data.calc import CalcOptions, DamageEstimate, calc_damage
from Data.move_helper import get_move_real_type, move_is_redirected
from Data.pokemon_helper import (
    apply_gimmick_to_active,
    can_be_flinched,
    checks_pokemon_deals_contact_damage,
    get_active_pokemon_turn_recovery,
)
from Decision.active_decision import find_move_decision_targets, get_move_target_type, players_are_allies
from Decision.context import DecisionMakeContext, DecisionSlot
from Decision.decision import MoveSubDecision
from Decision.exceptions import apply_damage_exceptions
from Knowledge.battle import BattleFields, SideConditions, compare_ids, get_hp_percent
from utils.common_sets import apply_common_sets_to_foe_active

# worst to best
LABELS = ("N", "Z", "E", "D", "C", "B", "A", "S", "SP", "SPP")
LABEL_RANK: Dict[str, int] = {label: i for i, label in enumerate(LABELS)}

VERY_GOOD_LABELS = frozenset({"SPP", "SP", "S"})
GOOD_LABELS = VERY_GOOD_LABELS | {"A"}
VIABLE_LABELS = GOOD_LABELS | {"B", "C"}
# dynamax is only spent on these
DYNAMAX_LABELS = GOOD_LABELS

MAX_GIMMICKS = ("dynamax", "max-move")


@dataclass
class DamageEvaluationClassifier:
    buckets: Dict[str, List[MoveSubDecision]] = field(default_factory=lambda: {label: [] for label in LABELS})
    has_very_good_move: bool = False
    has_good_move: bool = False
    has_viable_move: bool = False

    def __getitem__(self, label: str) -> List[MoveSubDecision]:
        return self.buckets[label]

    def add(self, label: str, decision: MoveSubDecision) -> None:
        self.buckets[label].append(decision)
        if label in VERY_GOOD_LABELS:
            self.has_very_good_move = True
        if label in GOOD_LABELS:
            self.has_good_move = True
        if label in VIABLE_LABELS:
            self.has_viable_move = True


def classify_damage(damage: DamageEstimate, accuracy: float, turn_recovery: float, good_fake_out: bool = False) -> str:
    """Label for one target, given percent damage after exceptions."""
    if damage.min >= 100 and accuracy >= 1:
        return "SPP" if damage.priority > 0 else "SP"
    if damage.max >= 100 or good_fake_out:
        return "S"
    if damage.min - turn_recovery >= 50:
        return "A"
    if damage.max - turn_recovery >= 50:
        return "B"
    if damage.max - turn_recovery > 30:
        return "C"
    if damage.max - turn_recovery > 0:
        return "D"
    if damage.min > 0:
        return "E"
    return "Z"


async def classify_damage_moves(context: DecisionMakeContext, slot: DecisionSlot,
                                moves: List[MoveSubDecision]) -> Optional[DamageEvaluationClassifier]:
    battle = context.battle
    request = battle.request
    if request is None or not request.active or slot.request_index >= len(request.active):
        return None
    if slot.request_index >= len(request.side.pokemon):
        return None

    main_player = battle.players.get(battle.main_player)
    if main_player is None:
        return None
    active = main_player.active.get(slot.active_slot)
    if active is None:
        return None

    req_active = request.active[slot.request_index]
    result = DamageEvaluationClassifier()

    for decision in moves:
        if decision.move_index >= len(req_active.moves):
            continue
        move = req_active.moves[decision.move_index]
        modified = apply_gimmick_to_active(battle, active, req_active, decision.gimmick)
        gimmick = decision.gimmick or "-"

        if move_is_redirected(battle, main_player, modified, move.id, get_move_target_type(move, decision.gimmick)):
            context.log("move_redirected", species=modified.details.species, move=move.id, gimmick=gimmick)
            continue

        if decision.gimmick == "tera":
            if get_hp_percent(modified.condition) < 50:
                continue
            if not compare_ids(move.id, "Tera Blast") and not compare_ids(
                    get_move_real_type(battle, modified, move.id), req_active.can_terastallize or ""):
                continue

        options = CalcOptions(
            consider_stats_attacker="max",
            consider_stats_defender="max",
            use_percent=True,
            use_max=decision.gimmick in MAX_GIMMICKS,
            use_z_move=decision.gimmick == "z-move",
        )

        label: Optional[str] = None
        for target in find_move_decision_targets(battle, slot, decision, context.rng):
            target_player = battle.players.get(target.ident.player_index)
            if target_player is None:
                continue

            if target_player.index == main_player.index or players_are_allies(
                    battle.status.game_type, main_player.index, target_player.index):
                if label is None:
                    label = "N"
                continue

            modified_target = apply_common_sets_to_foe_active(battle, target)

            damage = await calc_damage(battle, main_player, modified, target_player, modified_target, move.id, options)
            damage = apply_damage_exceptions(battle, modified, modified_target, move.id, damage)
            accuracy = await calc_move_accuracy(battle, main_player, modified, target_player, target, move.id,
                                                decision.gimmick)

            if to_id_str(move.id) in OHKO_MOVES and accuracy < 1:
                cap = accuracy * 100
                damage = DamageEstimate(min=min(damage.min, cap), max=min(damage.max, cap), priority=damage.priority)

            good_fake_out = (
                compare_ids(move.id, "Fake Out")
                and decision.gimmick not in ("dynamax", "max-move", "z-move")
                and damage.min > 0
                and can_be_flinched(battle, modified_target)
                and not checks_pokemon_deals_contact_damage(battle, modified_target)
            )
            turn_recovery = get_active_pokemon_turn_recovery(battle, modified_target)

            context.log("calc", attacker=modified.details.species, defender=modified_target.details.species,
                        move=move.id, gimmick=gimmick, min=damage.min, max=damage.max, accuracy=accuracy,
                        good_fake_out=good_fake_out, turn_recovery=turn_recovery)

            target_label = classify_damage(damage, accuracy, turn_recovery, good_fake_out)
            if label is None or LABEL_RANK[target_label] > LABEL_RANK[label]:
                label = target_label

        if label is None:
            continue

        if decision.gimmick == "dynamax":
            if label not in DYNAMAX_LABELS:
                continue
            speed_boost = (
                modified.boosts.get("spe", 0) > 0 or SideConditions.Tailwind in main_player.side_conditions
            ) and BattleFields.TrickRoom not in battle.status.fields
            if not speed_boost and get_hp_percent(modified.condition) < 50:
                continue

        result.add(label, decision)
        context.log("damage_move", species=modified.details.species, move=move.id, gimmick=gimmick, label=label)

    return result
