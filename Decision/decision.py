"""
decision.py
-----------
Decision records produced by the decision layer.

A decision is one of: team order (team preview), one active sub-decision per
request slot, one forced-switch sub-decision per request slot, or wait.
Indices are request indices (positions in the request's side list / move list),
never knowledge-store roster indices.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Union

# Optional power-ups attached to a move sub-decision
GIMMICKS = ("mega", "ultra", "z-move", "dynamax", "max-move", "tera")

# Gimmicks limited to one use per turn across all slots of the player
ONCE_PER_TURN_GIMMICKS = ("mega", "ultra", "z-move", "dynamax", "tera")


@dataclass(frozen=True)
class MoveSubDecisionTarget:
    player_index: int
    slot: int


@dataclass(frozen=True)
class MoveSubDecision:
    type: ClassVar[str] = "move"
    move_index: int
    target: Optional[MoveSubDecisionTarget] = None
    gimmick: Optional[str] = None


@dataclass(frozen=True)
class SwitchSubDecision:
    type: ClassVar[str] = "switch"
    pokemon_index: int


@dataclass(frozen=True)
class ShiftSubDecision:
    type: ClassVar[str] = "shift"


@dataclass(frozen=True)
class PassSubDecision:
    type: ClassVar[str] = "pass"


@dataclass(frozen=True)
class ReviveSubDecision:
    type: ClassVar[str] = "revive"
    pokemon_index: int


ActiveSubDecision = Union[MoveSubDecision, SwitchSubDecision, ShiftSubDecision, PassSubDecision]
ForceSwitchSubDecision = Union[SwitchSubDecision, ReviveSubDecision, PassSubDecision]


@dataclass
class ActiveDecision:
    type: ClassVar[str] = "active"
    sub_decisions: List[ActiveSubDecision] = field(default_factory=list)


@dataclass
class ForceSwitchDecision:
    type: ClassVar[str] = "force-switch"
    sub_decisions: List[ForceSwitchSubDecision] = field(default_factory=list)


@dataclass
class TeamDecision:
    type: ClassVar[str] = "team"
    # request indices, leads first
    team_order: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class WaitDecision:
    type: ClassVar[str] = "wait"


BattleDecision = Union[TeamDecision, ActiveDecision, ForceSwitchDecision, WaitDecision]

# ---- Static decisions ----

WAIT = WaitDecision()
PASS = PassSubDecision()
SHIFT = ShiftSubDecision()


def describe_decision(decision: BattleDecision) -> str:
    """Compact human readable form, used in logs."""
    if isinstance(decision, WaitDecision):
        return "wait"
    if isinstance(decision, TeamDecision):
        return "team " + "".join(str(i + 1) for i in decision.team_order)

    parts = []
    for sub in decision.sub_decisions:
        if isinstance(sub, MoveSubDecision):
            text = f"move {sub.move_index + 1}"
            if sub.target is not None:
                text += f" @p{sub.target.player_index + 1}:{sub.target.slot}"
            if sub.gimmick:
                text += f" +{sub.gimmick}"
            parts.append(text)
        elif isinstance(sub, SwitchSubDecision):
            parts.append(f"switch {sub.pokemon_index + 1}")
        elif isinstance(sub, ReviveSubDecision):
            parts.append(f"revive {sub.pokemon_index + 1}")
        else:
            parts.append(sub.type)
    return ", ".join(parts)
