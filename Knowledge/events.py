"""
events.py
---------
Typed battle events consumed by the analyzer.

Raw protocol parsing happens elsewhere; these records are what the parser
produces. Structural events change the composition of the battle (switches,
faints, requests, metadata); incidental events cover everything else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

from Knowledge.battle import (
    BattleEffect,
    PokemonCondition,
    PokemonDetails,
    PokemonIdentTarget,
)
from Knowledge.request import BattleRequest


@dataclass
class BattleEvent:
    type: ClassVar[str] = ""
    major: ClassVar[bool] = False


# ---------------------------- Structural -----------------------------------------

@dataclass
class RequestEvent(BattleEvent):
    type: ClassVar[str] = "Request"
    major: ClassVar[bool] = True
    request: Optional[BattleRequest] = None


@dataclass
class TeamPreviewEvent(BattleEvent):
    type: ClassVar[str] = "TeamPreview"
    major: ClassVar[bool] = True
    max_team_size: Optional[int] = None


@dataclass
class StartEvent(BattleEvent):
    type: ClassVar[str] = "Start"
    major: ClassVar[bool] = True


@dataclass
class CallbackTrappedEvent(BattleEvent):
    type: ClassVar[str] = "CallbackTrapped"
    major: ClassVar[bool] = True
    slot: int = 0


@dataclass
class CallbackCannotUseMoveEvent(BattleEvent):
    type: ClassVar[str] = "CallbackCannotUseMove"
    major: ClassVar[bool] = True
    slot: int = 0
    move: str = ""


@dataclass
class GameTypeEvent(BattleEvent):
    type: ClassVar[str] = "GameType"
    major: ClassVar[bool] = True
    game_type: str = "singles"


@dataclass
class GenEvent(BattleEvent):
    type: ClassVar[str] = "Gen"
    major: ClassVar[bool] = True
    gen: int = 9


@dataclass
class TierEvent(BattleEvent):
    type: ClassVar[str] = "Tier"
    major: ClassVar[bool] = True
    tier: str = ""


@dataclass
class RuleEvent(BattleEvent):
    type: ClassVar[str] = "Rule"
    major: ClassVar[bool] = True
    name: str = ""
    description: str = ""


@dataclass
class PlayerEvent(BattleEvent):
    type: ClassVar[str] = "Player"
    major: ClassVar[bool] = True
    player_index: int = 0
    player_name: str = ""
    player_avatar: str = ""


@dataclass
class TeamSizeEvent(BattleEvent):
    type: ClassVar[str] = "TeamSize"
    major: ClassVar[bool] = True
    player_index: int = 0
    team_size: int = 0


@dataclass
class ClearPokemonEvent(BattleEvent):
    type: ClassVar[str] = "ClearPokemon"
    major: ClassVar[bool] = True


@dataclass
class RevealTeamPreviewPokemonEvent(BattleEvent):
    type: ClassVar[str] = "RevealTeamPreviewPokemon"
    major: ClassVar[bool] = True
    player_index: int = 0
    details: PokemonDetails = field(default_factory=lambda: PokemonDetails(species=""))


@dataclass
class TurnEvent(BattleEvent):
    type: ClassVar[str] = "Turn"
    major: ClassVar[bool] = True
    turn: int = 0


@dataclass
class SwitchEvent(BattleEvent):
    type: ClassVar[str] = "Switch"
    major: ClassVar[bool] = True
    pokemon: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))
    details: PokemonDetails = field(default_factory=lambda: PokemonDetails(species=""))
    condition: PokemonCondition = field(default_factory=PokemonCondition)


@dataclass
class DragEvent(SwitchEvent):
    type: ClassVar[str] = "Drag"


@dataclass
class ReplaceEvent(BattleEvent):
    type: ClassVar[str] = "Replace"
    major: ClassVar[bool] = True
    pokemon: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))
    details: PokemonDetails = field(default_factory=lambda: PokemonDetails(species=""))
    condition: Optional[PokemonCondition] = None


@dataclass
class DetailsChangeEvent(BattleEvent):
    type: ClassVar[str] = "DetailsChange"
    major: ClassVar[bool] = True
    pokemon: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))
    details: PokemonDetails = field(default_factory=lambda: PokemonDetails(species=""))


@dataclass
class FaintEvent(BattleEvent):
    type: ClassVar[str] = "Faint"
    major: ClassVar[bool] = True
    pokemon: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))


@dataclass
class SwapEvent(BattleEvent):
    type: ClassVar[str] = "Swap"
    major: ClassVar[bool] = True
    pokemon: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))
    slot: int = 0


@dataclass
class MoveEvent(BattleEvent):
    type: ClassVar[str] = "Move"
    major: ClassVar[bool] = True
    pokemon: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))
    move: str = ""
    target: Optional[PokemonIdentTarget] = None
    from_effect: Optional[BattleEffect] = None
    spread: Optional[List[PokemonIdentTarget]] = None


@dataclass
class MoveCannotUseEvent(BattleEvent):
    type: ClassVar[str] = "MoveCannotUse"
    major: ClassVar[bool] = True
    pokemon: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))
    move: str = ""
    effect: BattleEffect = field(default_factory=BattleEffect)


@dataclass
class BattleEndedEvent(BattleEvent):
    type: ClassVar[str] = "BattleEnded"
    major: ClassVar[bool] = True
    tie: bool = False
    winner: Optional[str] = None


# ---------------------------- Incidental -----------------------------------------

@dataclass
class PokemonEvent(BattleEvent):
    """Base for incidental events bound to one pokemon."""
    pokemon: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))


@dataclass
class DamageEvent(PokemonEvent):
    type: ClassVar[str] = "Damage"
    condition: PokemonCondition = field(default_factory=PokemonCondition)
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class HealEvent(DamageEvent):
    type: ClassVar[str] = "Heal"


@dataclass
class SetHPTarget:
    pokemon: PokemonIdentTarget
    condition: PokemonCondition


@dataclass
class SetHPEvent(BattleEvent):
    type: ClassVar[str] = "SetHP"
    targets: List[SetHPTarget] = field(default_factory=list)


@dataclass
class BoostEvent(PokemonEvent):
    type: ClassVar[str] = "Boost"
    stat: str = "atk"
    amount: int = 0
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class UnBoostEvent(BoostEvent):
    type: ClassVar[str] = "UnBoost"


@dataclass
class SetBoostEvent(PokemonEvent):
    type: ClassVar[str] = "SetBoost"
    stat: str = "atk"
    amount: int = 0


@dataclass
class SwapBoostEvent(PokemonEvent):
    type: ClassVar[str] = "SwapBoost"
    target: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))
    stats: List[str] = field(default_factory=list)


@dataclass
class ClearPositiveBoostEvent(PokemonEvent):
    type: ClassVar[str] = "ClearPositiveBoost"
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class ClearNegativeBoostEvent(PokemonEvent):
    type: ClassVar[str] = "ClearNegativeBoost"


@dataclass
class ClearBoostEvent(PokemonEvent):
    type: ClassVar[str] = "ClearBoost"
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class CopyBoostEvent(PokemonEvent):
    type: ClassVar[str] = "CopyBoost"
    from_pokemon: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))
    from_effect: Optional[BattleEffect] = None
    stats: List[str] = field(default_factory=list)


@dataclass
class InvertBoostEvent(PokemonEvent):
    type: ClassVar[str] = "InvertBoost"


@dataclass
class ClearAllBoostsEvent(BattleEvent):
    type: ClassVar[str] = "ClearAllBoosts"


@dataclass
class CriticalHitEvent(PokemonEvent):
    type: ClassVar[str] = "CriticalHit"


@dataclass
class SuperEffectiveHitEvent(PokemonEvent):
    type: ClassVar[str] = "SuperEffectiveHit"


@dataclass
class ResistedHitEvent(PokemonEvent):
    type: ClassVar[str] = "ResistedHit"


@dataclass
class ImmuneEvent(PokemonEvent):
    type: ClassVar[str] = "Immune"
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class MissEvent(PokemonEvent):
    type: ClassVar[str] = "Miss"
    target: Optional[PokemonIdentTarget] = None


@dataclass
class FailEvent(PokemonEvent):
    type: ClassVar[str] = "Fail"
    effect: Optional[BattleEffect] = None
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class BlockEvent(PokemonEvent):
    type: ClassVar[str] = "Block"
    effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class PrepareMoveEvent(PokemonEvent):
    type: ClassVar[str] = "PrepareMove"
    move: str = ""
    target: Optional[PokemonIdentTarget] = None


@dataclass
class MustRechargeEvent(PokemonEvent):
    type: ClassVar[str] = "MustRecharge"


@dataclass
class StatusEvent(PokemonEvent):
    type: ClassVar[str] = "Status"
    status: str = ""
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class CureStatusEvent(PokemonEvent):
    type: ClassVar[str] = "CureStatus"
    status: str = ""
    from_effect: Optional[BattleEffect] = None


@dataclass
class CureTeamEvent(BattleEvent):
    type: ClassVar[str] = "CureTeam"
    player_index: int = 0


@dataclass
class ItemRevealEvent(PokemonEvent):
    type: ClassVar[str] = "ItemReveal"
    item: str = ""
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class ItemRemoveEvent(PokemonEvent):
    type: ClassVar[str] = "ItemRemove"
    item: str = ""
    eaten: bool = False
    from_effect: Optional[BattleEffect] = None


@dataclass
class AbilityRevealEvent(PokemonEvent):
    type: ClassVar[str] = "AbilityReveal"
    ability: str = ""
    activation_failed: bool = False
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class TransformEvent(PokemonEvent):
    type: ClassVar[str] = "Transform"
    target: PokemonIdentTarget = field(default_factory=lambda: PokemonIdentTarget(0))
    from_effect: Optional[BattleEffect] = None


@dataclass
class FormeChangeEvent(PokemonEvent):
    type: ClassVar[str] = "FormeChange"
    species: str = ""
    from_effect: Optional[BattleEffect] = None


@dataclass
class MegaEvolutionEvent(PokemonEvent):
    type: ClassVar[str] = "MegaEvolution"
    species: str = ""
    stone: str = ""


@dataclass
class UltraBurstEvent(PokemonEvent):
    type: ClassVar[str] = "UltraBurst"
    species: str = ""
    item: str = ""


@dataclass
class TerastallizeEvent(PokemonEvent):
    type: ClassVar[str] = "Terastallize"
    tera_type: str = ""


@dataclass
class EffectStartExtra:
    type_added: Optional[str] = None
    types_changed: Optional[List[str]] = None
    move_disabled: Optional[str] = None
    move_mimic: Optional[str] = None


@dataclass
class EffectStartEvent(PokemonEvent):
    type: ClassVar[str] = "EffectStart"
    effect: BattleEffect = field(default_factory=BattleEffect)
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None
    extra: Optional[EffectStartExtra] = None


@dataclass
class EffectEndEvent(PokemonEvent):
    type: ClassVar[str] = "EffectEnd"
    effect: BattleEffect = field(default_factory=BattleEffect)
    from_effect: Optional[BattleEffect] = None


@dataclass
class TurnStatusEvent(PokemonEvent):
    type: ClassVar[str] = "TurnStatus"
    effect: BattleEffect = field(default_factory=BattleEffect)


@dataclass
class MoveStatusEvent(PokemonEvent):
    type: ClassVar[str] = "MoveStatus"
    effect: BattleEffect = field(default_factory=BattleEffect)


@dataclass
class ActivateEffectExtra:
    item: Optional[str] = None
    move: Optional[str] = None
    number: Optional[int] = None
    ability: Optional[str] = None
    ability2: Optional[str] = None


@dataclass
class ActivateEffectEvent(PokemonEvent):
    type: ClassVar[str] = "ActivateEffect"
    effect: BattleEffect = field(default_factory=BattleEffect)
    target: Optional[PokemonIdentTarget] = None
    extra: Optional[ActivateEffectExtra] = None


@dataclass
class SideStartEvent(BattleEvent):
    type: ClassVar[str] = "SideStart"
    player_index: int = 0
    effect: BattleEffect = field(default_factory=BattleEffect)
    persistent: bool = False


@dataclass
class SideEndEvent(BattleEvent):
    type: ClassVar[str] = "SideEnd"
    player_index: int = 0
    effect: BattleEffect = field(default_factory=BattleEffect)


@dataclass
class SwapSideConditionsEvent(BattleEvent):
    type: ClassVar[str] = "SwapSideConditions"


@dataclass
class WeatherEvent(BattleEvent):
    type: ClassVar[str] = "Weather"
    effect: BattleEffect = field(default_factory=BattleEffect)
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class FieldStartEvent(BattleEvent):
    type: ClassVar[str] = "FieldStart"
    effect: BattleEffect = field(default_factory=BattleEffect)
    persistent: bool = False
    from_effect: Optional[BattleEffect] = None
    of_pokemon: Optional[PokemonIdentTarget] = None


@dataclass
class FieldEndEvent(BattleEvent):
    type: ClassVar[str] = "FieldEnd"
    effect: BattleEffect = field(default_factory=BattleEffect)
