"""
battle_bot.py
-------------
Session driver: one knowledge store + synchronizer + strategy per match.

Events are buffered from the start of the match. The first Request turns the
match into a "playing" one: the configuration function picks the analyzer and
the decision algorithm, and the buffered log is replayed through the analyzer.
From then on each event is applied as it arrives and `make_decision` asks the
algorithm for the pending request.
"""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from Data.dex_registry import LAST_GEN
from Decision.algorithm import DecisionAlgorithm, make_decisions
from Decision.algorithms.generic_npc.strategy import GenericNPCStrategy
from Decision.algorithms.random_strategy import RandomStrategy
from Decision.context import BattleDecisionScenario, DecisionMakeContext, logging_callback
from Decision.decision import WAIT, BattleDecision
from Knowledge.analyzer import BattleAnalyzer
from Knowledge.battle import Battle, snapshot_battle
from Knowledge.events import BattleEvent
from Knowledge.initializers import create_battle
from utils.config import Settings, load_settings, resolve_log_level

logger = logging.getLogger('pokedecider.bot')
decision_logger = logging.getLogger('pokedecider.decision')

_GEN_RE = re.compile(r'^gen([0-9]+)')


@dataclass
class BattleFormatDetails:
    id: str
    gen: int = LAST_GEN
    game_type: str = "singles"
    format: str = ""


def get_format_details_by_battle_id(battle_id: str) -> BattleFormatDetails:
    """`battle-gen9randombattle-123` -> gen 9, format gen9randombattle. Game type defaults to singles."""
    parts = battle_id.split("-")
    fmt = parts[1] if len(parts) > 1 else ""
    gen = LAST_GEN
    m = _GEN_RE.match(fmt)
    if m:
        gen = int(m.group(1)) or LAST_GEN
    return BattleFormatDetails(id=battle_id, gen=gen, game_type="singles", format=fmt)


AnalyzerFactory = Callable[[Battle], BattleAnalyzer]


@dataclass
class BattleBotConfig:
    algorithm: DecisionAlgorithm
    analyzer_factory: AnalyzerFactory = BattleAnalyzer
    # 0 keeps no scenarios
    scenarios_max_keep: int = 0
    rng: Optional[random.Random] = None


BattleBotConfigFunc = Callable[[BattleFormatDetails], BattleBotConfig]


def default_config_func(settings: Optional[Settings] = None) -> BattleBotConfigFunc:
    settings = settings or load_settings()

    def config(details: BattleFormatDetails) -> BattleBotConfig:
        return BattleBotConfig(
            algorithm=GenericNPCStrategy(settings),
            scenarios_max_keep=settings.scenarios_max_keep,
            rng=random.Random(settings.seed),
        )

    return config


@dataclass
class BattleBotBattleStatus:
    battle: Battle
    format_details: BattleFormatDetails
    # every event of the match: replayed on the first request, then handed to
    # algorithms as DecisionMakeContext.battle_log, so it is never trimmed
    log: List[BattleEvent] = field(default_factory=list)
    previous_scenarios: List[BattleDecisionScenario] = field(default_factory=list)
    scenarios_max_keep: int = 0
    playing: bool = False
    analyzer: Optional[BattleAnalyzer] = None
    algorithm: Optional[DecisionAlgorithm] = None
    rng: random.Random = field(default_factory=random.Random)


class BattleBot:
    def __init__(self, config_func: Optional[BattleBotConfigFunc] = None, settings: Optional[Settings] = None,
                 on_playing: Optional[Callable[[Battle], None]] = None,
                 on_decision: Optional[Callable[[Battle, BattleDecision], None]] = None):
        self.settings = settings or load_settings()
        self.config_func = config_func or default_config_func(self.settings)
        self.on_playing = on_playing
        self.on_decision = on_decision
        self.battles: Dict[str, BattleBotBattleStatus] = {}

        try:
            level = resolve_log_level(self.settings.log_level)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring log_level=%r: %s", self.settings.log_level, e)
            level = logging.INFO
        logging.getLogger('pokedecider').setLevel(level)

    def init_battle(self, battle_id: str) -> None:
        self.battles[battle_id] = BattleBotBattleStatus(
            battle=create_battle(battle_id),
            format_details=get_format_details_by_battle_id(battle_id),
        )

    def remove_battle(self, battle_id: str) -> None:
        status = self.battles.pop(battle_id, None)
        if status is None or status.analyzer is None:
            return
        try:
            status.analyzer.destroy()
        except Exception:
            logger.exception("[%s] Failed to destroy analyzer", battle_id)

    def _apply(self, status: BattleBotBattleStatus, event: BattleEvent) -> None:
        try:
            status.analyzer.next_event(event)
        except Exception:
            logger.exception("[%s] Failed to apply %s event", status.battle.id, event.type)

    def _start_playing(self, battle_id: str, status: BattleBotBattleStatus) -> None:
        config = self.config_func(status.format_details)

        status.playing = True
        status.analyzer = config.analyzer_factory(status.battle)
        status.algorithm = config.algorithm
        status.scenarios_max_keep = max(0, config.scenarios_max_keep or 0)
        if config.rng is not None:
            status.rng = config.rng

        logger.info("[%s] Playing %s (gen %d, %s)", battle_id, status.format_details.format or "?",
                    status.format_details.gen, type(status.algorithm).__name__)

        for entry in status.log:
            self._apply(status, entry)

        if self.on_playing is not None:
            self.on_playing(status.battle)

    def add_battle_event(self, battle_id: str, event: BattleEvent) -> None:
        status = self.battles.get(battle_id)
        if status is None:
            return

        if status.analyzer is not None:
            self._apply(status, event)

        status.log.append(event)

        if event.type == "Request" and not status.playing:
            self._start_playing(battle_id, status)
        elif event.type == "GameType":
            status.format_details.game_type = event.game_type

    def _context(self, status: BattleBotBattleStatus) -> DecisionMakeContext:
        return DecisionMakeContext(
            battle=status.battle,
            analyzer=status.analyzer,
            battle_log=status.log,
            previous_scenarios=status.previous_scenarios,
            logger=logging_callback(decision_logger),
            rng=status.rng,
        )

    async def _fallback(self, status: BattleBotBattleStatus) -> BattleDecision:
        try:
            return await make_decisions(self._context(status), RandomStrategy())
        except Exception:
            logger.exception("[%s] Fallback decision failed", status.battle.id)
            return WAIT

    async def make_decision(self, battle_id: str) -> Optional[BattleDecision]:
        """Decision for the pending request, or None if the match is unknown or not playing yet."""
        status = self.battles.get(battle_id)
        if status is None or not status.playing:
            return None

        try:
            decision = await status.algorithm.decide(self._context(status))
        except Exception:
            logger.exception("[%s] Decision algorithm failed, using a random legal decision", battle_id)
            decision = await self._fallback(status)

        snapshot = snapshot_battle(status.battle)

        if status.scenarios_max_keep > 0:
            status.previous_scenarios.append(BattleDecisionScenario(battle=snapshot, decision=decision))
            del status.previous_scenarios[:-status.scenarios_max_keep]

        if self.on_decision is not None:
            self.on_decision(snapshot, decision)

        return decision
