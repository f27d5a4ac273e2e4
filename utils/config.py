"""
config.py
---------
Settings for the decision agent.

Sources, later ones winning: built-in defaults, a JSON file (explicit path,
``POKEDECIDER_CONFIG`` or ``config.json`` in the working directory), and
``POKEDECIDER_<KEY>`` environment variables. Malformed input is logged and
ignored; loading never fails.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger('pokedecider.config')

ENV_PREFIX = 'POKEDECIDER_'


@dataclass(frozen=True)
class Settings:
    # RandomStrategy: probability of switching instead of attacking
    switch_chance: float = 0.1
    # GenericNPCStrategy: odds of staying in when a switch would be better
    stay_chance_after_own_switch: float = 0.2
    stay_chance_after_foe_switch: float = 0.1
    stay_chance_bad_volatile: float = 0.3
    # GenericNPCStrategy: odds of picking a viable status move over a strong attack
    viable_status_preference: float = 0.5
    # decision scenarios kept per battle (0 keeps none)
    scenarios_max_keep: int = 0
    sets_dir: str = 'Resources/sets'
    log_level: str = 'INFO'
    seed: Optional[int] = None


_DEFAULT_SETTINGS = Settings()


def resolve_log_level(name: Any) -> int:
    """Numeric level for a level name such as 'debug'. Raises ValueError for unknown names."""
    if not isinstance(name, str):
        raise TypeError(f"expected a level name, got {type(name).__name__}")
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {name!r}")
    return level


def _coerce(name: str, raw: Any, default: Any) -> Any:
    """Convert `raw` to the type of the field default. Raises ValueError / TypeError."""
    if name == 'seed':
        if raw is None or (isinstance(raw, str) and raw.strip().lower() in ('', 'none', 'null')):
            return None
        return int(raw)
    if name == 'log_level':
        resolve_log_level(raw)
        return raw.strip().upper()
    if isinstance(default, bool):
        if isinstance(raw, str):
            return raw.strip().lower() in ('1', 'true', 'yes', 'on')
        return bool(raw)
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    if isinstance(default, str):
        if not isinstance(raw, str):
            raise TypeError(f"expected a string, got {type(raw).__name__}")
        return raw
    return raw


def _apply(settings: Settings, values: Dict[str, Any], source: str) -> Settings:
    known = {f.name: f for f in fields(Settings)}
    updates: Dict[str, Any] = {}
    for key, raw in values.items():
        if key not in known:
            continue
        try:
            updates[key] = _coerce(key, raw, getattr(_DEFAULT_SETTINGS, key))
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring %s=%r from %s: %s", key, raw, source, e)
    return replace(settings, **updates) if updates else settings


def _config_path(path: Optional[str]) -> Optional[Path]:
    if path:
        return Path(path)
    env_path = os.getenv(ENV_PREFIX + 'CONFIG')
    if env_path:
        return Path(env_path)
    default = Path('config.json')
    return default if default.exists() else None


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Could not read settings from %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Settings file %s does not hold a JSON object", path)
        return {}
    return data


def load_settings(path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> Settings:
    settings = _DEFAULT_SETTINGS

    cfg = _config_path(path)
    if cfg is not None:
        settings = _apply(settings, _read_json(cfg), str(cfg))

    env = os.environ if environ is None else environ
    overrides = {}
    for f in fields(Settings):
        value = env.get(ENV_PREFIX + f.name.upper())
        if value is not None:
            overrides[f.name] = value
    if overrides:
        settings = _apply(settings, overrides, 'environment')

    return settings
