"""Effective priority bracket of a move, as reported alongside the damage rolls."""

from typing import Optional

# terrain-gated priority moves: move id -> (terrain, bonus)
TERRAIN_PRIORITY_MOVES = {
    "grassyglide": ("grassy", 1),
}


def _ability_bonus(ability: str, category: str, move_type: str, hp_is_full: bool,
                   is_healing_or_drain: bool, gen: int) -> int:
    if ability == "prankster" and category.lower() == "status":
        return 1
    if ability == "triage" and is_healing_or_drain:
        return 3
    if ability == "galewings" and move_type.lower() == "flying":
        # full hp requirement arrived in gen 7
        return 1 if gen < 7 or hp_is_full else 0
    return 0


def move_priority(
    move_id: str,
    base_priority: int,
    category: str = "",
    move_type: str = "",
    ability: str = "",
    hp_is_full: bool = False,
    is_healing_or_drain: bool = False,
    terrain: Optional[str] = None,
    gen: int = 9,
) -> int:
    priority = int(base_priority or 0)
    gated = TERRAIN_PRIORITY_MOVES.get(move_id)
    if gated is not None and (terrain or "").lower() == gated[0]:
        priority += gated[1]
    return priority + _ability_bonus(ability or "", category or "", move_type or "", hp_is_full,
                                     is_healing_or_drain, gen)
