"""Context handed to decision algorithms, and the structured decision logger."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from Knowledge.battle import Battle
from Knowledge.events import BattleEvent

if TYPE_CHECKING:  # pragma: no cover
    from Decision.decision import BattleDecision
    from Knowledge.analyzer import BattleAnalyzer

# (event name, fields)
DecisionLogger = Callable[[str, Dict[str, Any]], None]


def null_logger(event: str, fields: Dict[str, Any]) -> None:
    return None


def logging_callback(logger: logging.Logger, level: int = logging.DEBUG) -> DecisionLogger:
    """DecisionLogger writing one `event key=value ...` record per call."""

    def _log(event: str, fields: Dict[str, Any]) -> None:
        if not logger.isEnabledFor(level):
            return
        if fields:
            logger.log(level, "%s %s", event, " ".join(f"{k}={v}" for k, v in fields.items()))
        else:
            logger.log(level, "%s", event)

    return _log


@dataclass(frozen=True)
class DecisionSlot:
    # key into player.active
    active_slot: Optional[int]
    # position in request.active / request.side.pokemon
    request_index: int


@dataclass
class BattleDecisionScenario:
    battle: Battle
    decision: Optional["BattleDecision"] = None


@dataclass
class DecisionMakeContext:
    battle: Battle
    analyzer: Optional["BattleAnalyzer"] = None
    battle_log: List[BattleEvent] = field(default_factory=list)
    previous_scenarios: List[BattleDecisionScenario] = field(default_factory=list)
    logger: DecisionLogger = null_logger
    rng: random.Random = field(default_factory=random.Random)

    def log(self, event: str, **fields: Any) -> None:
        self.logger(event, fields)
