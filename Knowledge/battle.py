"""
battle.py
---------
Knowledge store for a single match: players, rosters, active combatants,
side/field conditions and the pending request of the controlled player.

Everything here is plain mutable dataclasses. The synchronizer (analyzer.py)
is the single writer; evaluation code must work on snapshots taken with the
``snapshot_*`` helpers at the bottom of this module.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, TYPE_CHECKING

from poke_env.data.normalize import to_id_str

if TYPE_CHECKING:  # pragma: no cover
    from Knowledge.request import BattleRequest


def compare_ids(a: Optional[str], b: Optional[str]) -> bool:
    return to_id_str(a or "") == to_id_str(b or "")


# ---------------------------- Basic records -------------------------------------

STATUSES = ("", "BRN", "PSN", "TOX", "PAR", "SLP", "FRZ")
STAT_NAMES = ("atk", "def", "spa", "spd", "spe", "evasion", "accuracy")


@dataclass
class PokemonIdent:
    player_index: int
    name: str


@dataclass
class PokemonIdentTarget:
    player_index: int
    name: str = ""
    active: bool = False
    slot: Optional[int] = None


@dataclass
class BattleEffect:
    kind: str = "pure"  # 'item' | 'ability' | 'move' | 'pure'
    id: str = ""


@dataclass
class PokemonDetails:
    species: str
    level: int = 100
    shiny: bool = False
    gender: str = "N"
    terastallized: str = ""


def compare_details(a: PokemonDetails, b: PokemonDetails) -> bool:
    return (
        compare_ids(a.species, b.species)
        and a.level == b.level
        and a.shiny == b.shiny
        and a.gender == b.gender
        and compare_ids(a.terastallized, b.terastallized)
    )


@dataclass
class PokemonCondition:
    hp: int = 100
    max_hp: int = 100
    status: str = ""
    fainted: bool = False


def get_hp_percent(condition: PokemonCondition) -> float:
    if condition.fainted or not condition.max_hp:
        return 0.0
    return condition.hp * 100 / condition.max_hp


@dataclass
class StatKnowledge:
    known: bool = False
    min: int = 0
    max: int = 0


@dataclass
class PokemonKnownStats:
    hp: StatKnowledge = field(default_factory=StatKnowledge)
    atk: StatKnowledge = field(default_factory=StatKnowledge)
    def_: StatKnowledge = field(default_factory=StatKnowledge)
    spa: StatKnowledge = field(default_factory=StatKnowledge)
    spd: StatKnowledge = field(default_factory=StatKnowledge)
    spe: StatKnowledge = field(default_factory=StatKnowledge)

    def get(self, stat: str) -> StatKnowledge:
        return getattr(self, "def_" if stat == "def" else stat)

    def set(self, stat: str, value: StatKnowledge) -> None:
        setattr(self, "def_" if stat == "def" else stat, value)


@dataclass
class PokemonMove:
    id: str
    revealed: bool = False
    pp: int = 0
    max_pp: int = 0
    disabled: bool = False


@dataclass
class ItemKnowledge:
    known: bool = False
    revealed: bool = False
    item: str = ""
    previous_item: Optional[str] = None
    # eaten | flung | knocked off | stolen | consumed | incinerated | popped | held up
    item_lost_cause: Optional[str] = None
    trick_move_failed: bool = False


@dataclass
class AbilityKnowledge:
    known: bool = False
    revealed: bool = False
    ability: str = ""
    base_ability: str = ""
    activation_count: int = 0
    cannot_be_swapped: bool = False
    cannot_be_changed: bool = False
    cannot_be_disabled: bool = False


# ---------------------------- Volatile data --------------------------------------

@dataclass
class TransformedInfo:
    player_index: int
    pokemon_index: int
    details: PokemonDetails
    stats: PokemonKnownStats
    moves: Dict[str, PokemonMove] = field(default_factory=dict)


@dataclass
class VolatileData:
    """Arguments attached to volatiles.

    Each field is only meaningful while the matching volatile is present:
    type_added (typeadd), types_changed (typechange), move_disabled (disable),
    move_mimic (mimic), stockpile_level (stockpile), fallen_level (fallen),
    boosted_stat (protosynthesis / quarkdrive), perish_turns_left (perish),
    transformed_info (transform), impersonating (illusion).
    """
    type_added: Optional[str] = None
    types_changed: Optional[List[str]] = None
    move_disabled: Optional[str] = None
    move_mimic: Optional[str] = None
    stockpile_level: Optional[int] = None
    fallen_level: Optional[int] = None
    boosted_stat: Optional[str] = None
    perish_turns_left: Optional[int] = None
    transformed_info: Optional[TransformedInfo] = None
    impersonating: Optional[int] = None
    burned_sleep_turns: Optional[int] = None
    tox_damage_times: Optional[int] = None
    # Illusion bookkeeping
    possible_fake: bool = False
    fake: bool = False
    fake_guess: Optional[str] = None


# ---------------------------- Combatants -----------------------------------------

@dataclass
class SidePokemon:
    index: int
    ident: PokemonIdent
    details: PokemonDetails
    condition: PokemonCondition = field(default_factory=PokemonCondition)
    stats: PokemonKnownStats = field(default_factory=PokemonKnownStats)
    moves: Dict[str, PokemonMove] = field(default_factory=dict)
    item: ItemKnowledge = field(default_factory=ItemKnowledge)
    ability: AbilityKnowledge = field(default_factory=AbilityKnowledge)
    revealed: bool = False
    active: bool = False
    active_slot: Optional[int] = None
    times_hit: int = 0
    total_burned_sleep_turns: int = 0
    slept_by_rest: bool = False


@dataclass
class ActivePokemon:
    slot: int
    ident: PokemonIdent
    index: int
    details: PokemonDetails
    condition: PokemonCondition = field(default_factory=PokemonCondition)
    stats: PokemonKnownStats = field(default_factory=PokemonKnownStats)
    boosts: Dict[str, int] = field(default_factory=dict)
    moves: Dict[str, PokemonMove] = field(default_factory=dict)
    item: ItemKnowledge = field(default_factory=ItemKnowledge)
    ability: AbilityKnowledge = field(default_factory=AbilityKnowledge)
    volatiles: Set[str] = field(default_factory=set)
    volatiles_data: VolatileData = field(default_factory=VolatileData)
    single_turn_statuses: Set[str] = field(default_factory=set)
    single_move_statuses: Set[str] = field(default_factory=set)
    switched_on_turn: int = 0
    last_move: Optional[str] = None
    times_used_move_in_a_row: int = 0
    times_hit: int = 0
    total_burned_sleep_turns: int = 0
    slept_by_rest: bool = False


# ---------------------------- Sides / field --------------------------------------

@dataclass
class SideCondition:
    id: str
    counter: int = 1
    turn: int = 0
    estimated_duration: int = 0
    set_by: Optional[PokemonIdentTarget] = None


@dataclass
class GlobalCondition:
    id: str
    turn: int = 0
    estimated_duration: int = 0
    set_by: Optional[PokemonIdentTarget] = None


@dataclass
class TeamPreviewPokemon:
    details: PokemonDetails


@dataclass
class Player:
    index: int
    name: str = ""
    avatar: str = ""
    team_size: int = 0
    team_preview: List[TeamPreviewPokemon] = field(default_factory=list)
    team: List[SidePokemon] = field(default_factory=list)
    active: Dict[int, ActivePokemon] = field(default_factory=dict)
    times_fainted: int = 0
    side_conditions: Dict[str, SideCondition] = field(default_factory=dict)


GAME_TYPE_ACTIVE_SIZES: Dict[str, int] = {
    "singles": 1,
    "doubles": 2,
    "triples": 3,
    "multi": 1,
    "freeforall": 1,
}


def get_active_size(game_type: str) -> int:
    return GAME_TYPE_ACTIVE_SIZES.get(game_type, 1)


@dataclass
class GlobalStatus:
    gen: int = 9
    game_type: str = "singles"
    tier: str = ""
    rules: Set[str] = field(default_factory=set)
    is_sleep_clause: bool = False
    inverse: bool = False
    team_preview: bool = False
    team_preview_size: int = 0
    weather: Optional[GlobalCondition] = None
    fields: Dict[str, GlobalCondition] = field(default_factory=dict)
    ability_effects: Set[str] = field(default_factory=set)


@dataclass
class Battle:
    id: str
    turn: int = 0
    status: GlobalStatus = field(default_factory=GlobalStatus)
    players: Dict[int, Player] = field(default_factory=dict)
    main_player: Optional[int] = None
    request: Optional["BattleRequest"] = None
    ended: bool = False
    winner: Optional[int] = None


# ---------------------------- Well-known ids -------------------------------------

class VolatileStatuses:
    AirBalloon = "airballoon"
    TypeChange = "typechange"
    TypeAdd = "typeadd"
    Imprison = "imprison"
    PerishSong = "perish"
    Mimic = "mimic"
    Disable = "disable"
    Taunt = "taunt"
    Encore = "encore"
    Confusion = "confusion"
    Attract = "attract"
    Curse = "curse"
    Embargo = "embargo"
    Foresight = "foresight"
    HealBlock = "healblock"
    LeechSeed = "leechseed"
    MiracleEye = "miracleeye"
    Nightmare = "nightmare"
    Octolock = "octolock"
    SaltCure = "saltcure"
    SmackDown = "smackdown"
    Telekinesis = "telekinesis"
    ThroatChop = "throatchop"
    Torment = "torment"
    FocusEnergy = "focusenergy"
    GMaxChiStrike = "gmaxchistrike"
    LaserFocus = "laserfocus"
    LockOn = "lockon"
    AquaRing = "aquaring"
    Ingrain = "ingrain"
    NoRetreat = "noretreat"
    Bide = "bide"
    MagnetRise = "magnetrise"
    GastroAcid = "gastroacid"
    FlashFire = "flashfire"
    Charge = "charge"
    ProtoSynthesis = "protosynthesis"
    QuarkDrive = "quarkdrive"
    SlowStart = "slowstart"
    Fallen = "fallen"
    PowerShift = "powershift"
    PowerTrick = "powertrick"
    Stockpile = "stockpile"
    Substitute = "substitute"
    Uproar = "uproar"
    Yawn = "yawn"
    Reflect = "reflect"
    LightScreen = "lightscreen"
    Dynamax = "dynamax"
    Transform = "transform"
    Illusion = "illusion"
    Trapped = "trapped"
    Mist = "mist"
    Rage = "rage"


VOLATILES_NOT_BATON_PASSING = frozenset({
    "airballoon", "attract", "autotomize", "disable", "encore", "foresight",
    "gmaxchistrike", "imprison", "laserfocus", "mimic", "miracleeye",
    "nightmare", "saltcure", "smackdown", "stockpile", "torment", "typeadd",
    "typechange", "yawn",
})


class SingleTurnStatuses:
    Protect = "protect"
    BeakBlast = "beakblast"
    CraftyShield = "craftyshield"
    Electrify = "electrify"
    Endure = "endure"
    FocusPunch = "focuspunch"
    FollowMe = "followme"
    HelpingHand = "helpinghand"
    Instruct = "instruct"
    MagicCoat = "magiccoat"
    MatBlock = "matblock"
    MaxGuard = "maxguard"
    Powder = "powder"
    QuickGuard = "quickguard"
    RagePowder = "ragepowder"
    Roost = "roost"
    ShellTrap = "shelltrap"
    Snatch = "snatch"
    Spotlight = "spotlight"
    WideGuard = "wideguard"
    BatonPass = "batonpass"
    ShedTail = "shedtail"


class SingleMoveStatuses:
    DestinyBond = "destinybond"
    GlaiveRush = "glaiverush"
    Grudge = "grudge"
    Rage = "rage"
    MustRecharge = "mustrecharge"
    Charge = "charge"


class SideConditions:
    AuroraVeil = "auroraveil"
    GMaxCannonade = "gmaxcannonade"
    GMaxSteelsurge = "gmaxsteelsurge"
    GMaxVineLash = "gmaxvinelash"
    GMaxVolcalith = "gmaxvolcalith"
    GMaxWildfire = "gmaxwildfire"
    LightScreen = "lightscreen"
    LuckyChant = "luckychant"
    Mist = "mist"
    Reflect = "reflect"
    Safeguard = "safeguard"
    Spikes = "spikes"
    StealthRock = "stealthrock"
    StickyWeb = "stickyweb"
    Tailwind = "tailwind"
    ToxicSpikes = "toxicspikes"
    Wish = "wish"
    HealingWish = "healingwish"
    LunarDance = "lunardance"
    DoomDesire = "doomdesire"
    FutureSight = "futuresight"


class Weathers:
    None_ = "none"
    RainDance = "raindance"
    PrimordialSea = "primordialsea"
    SunnyDay = "sunnyday"
    DesolateLand = "desolateland"
    Sandstorm = "sandstorm"
    Hail = "hail"
    Snow = "snow"
    DeltaStream = "deltastream"


class BattleFields:
    ElectricTerrain = "electricterrain"
    GrassyTerrain = "grassyterrain"
    MistyTerrain = "mistyterrain"
    PsychicTerrain = "psychicterrain"
    MudSport = "mudsport"
    WaterSport = "watersport"
    Gravity = "gravity"
    MagicRoom = "magicroom"
    TrickRoom = "trickroom"
    WonderRoom = "wonderroom"


class AbilityEffects:
    AirLock = "airlock"
    AuraBreak = "aurabreak"
    DarkAura = "darkaura"
    FairyAura = "fairyaura"
    NeutralizingGas = "neutralizinggas"
    BeadsOfRuin = "beadsofruin"
    TabletsOfRuin = "tabletsofruin"
    SwordOfRuin = "swordofruin"
    VesselOfRuin = "vesselofruin"


# Abilities whose presence on the field changes the global status
ABILITY_EFFECT_SOURCES: Dict[str, str] = {
    "airlock": AbilityEffects.AirLock,
    "cloudnine": AbilityEffects.AirLock,
    "aurabreak": AbilityEffects.AuraBreak,
    "darkaura": AbilityEffects.DarkAura,
    "fairyaura": AbilityEffects.FairyAura,
    "neutralizinggas": AbilityEffects.NeutralizingGas,
    "beadsofruin": AbilityEffects.BeadsOfRuin,
    "tabletsofruin": AbilityEffects.TabletsOfRuin,
    "swordofruin": AbilityEffects.SwordOfRuin,
    "vesselofruin": AbilityEffects.VesselOfRuin,
}


# ---------------------------- Move attribution -----------------------------------

@dataclass
class MoveHit:
    """What the move being executed did to one of its targets."""
    received_move: bool = False
    immune: bool = False
    crit: bool = False
    miss: bool = False
    damage_dealt: float = 0.0


def hit_key(player_index: int, slot: Optional[int]) -> str:
    return f"p{player_index}-{slot}"


# ---------------------------- Slot helpers ---------------------------------------

def _sorted_slots(player: Player) -> List[int]:
    return sorted(player.active.keys())


def find_active_slot_by_request_index(player: Player, request_index: int) -> Optional[int]:
    slots = _sorted_slots(player)
    if request_index < 0 or request_index >= len(slots):
        return None
    return slots[request_index]


def find_active_by_request_index(player: Player, request_index: int) -> Optional[ActivePokemon]:
    slot = find_active_slot_by_request_index(player, request_index)
    if slot is None:
        return None
    return player.active.get(slot)


def request_index_by_active_slot(player: Player, slot: int) -> int:
    slots = _sorted_slots(player)
    return slots.index(slot) if slot in slots else -1


# ---------------------------- Snapshots ------------------------------------------

def snapshot_battle(battle: Battle) -> Battle:
    """Deep copy of the whole match (used for decision scenarios)."""
    return copy.deepcopy(battle)


def snapshot_active(active: ActivePokemon) -> ActivePokemon:
    return copy.deepcopy(active)


def snapshot_side_pokemon(pokemon: SidePokemon) -> SidePokemon:
    return copy.deepcopy(pokemon)
