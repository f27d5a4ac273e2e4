"""Weather predicates. Every one of them is False while Air Lock / Cloud Nine is out."""

from __future__ import annotations

from typing import Optional

from Knowledge.battle import AbilityEffects, Battle, Weathers


def _weather(battle: Battle) -> Optional[str]:
    if battle.status.weather is None:
        return None
    if AbilityEffects.AirLock in battle.status.ability_effects:
        return None
    return battle.status.weather.id


def is_sunny(battle: Battle) -> bool:
    return _weather(battle) in (Weathers.SunnyDay, Weathers.DesolateLand)


def is_rainy(battle: Battle) -> bool:
    return _weather(battle) in (Weathers.RainDance, Weathers.PrimordialSea)


def is_snowy(battle: Battle) -> bool:
    return _weather(battle) in (Weathers.Snow, Weathers.Hail)


def is_sandstorm(battle: Battle) -> bool:
    return _weather(battle) == Weathers.Sandstorm


def active_weather(battle: Battle) -> Optional[str]:
    """Current weather id, or None when absent or suppressed."""
    return _weather(battle)
