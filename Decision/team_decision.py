"""Team preview candidates: which members to bring, which lead, and in what order."""

from __future__ import annotations

import itertools
import random
from typing import List, Optional, Sequence

from Decision.decision import TeamDecision
from Knowledge.battle import Battle, compare_ids, get_active_size

# Past this size the number of subsets gets out of hand
MAX_TEAM_SIZE_COMBINABLE = 6


def find_subsets(items: Sequence[int], size: int) -> List[List[int]]:
    if size >= len(items):
        return [list(items)]
    return [list(c) for c in itertools.combinations(items, size)]


def make_team_decisions(battle: Battle, rng: Optional[random.Random] = None) -> List[TeamDecision]:
    request = battle.request
    if request is None or not request.team_preview:
        return []

    rng = rng or random.Random()

    team_size = len(request.side.pokemon)
    preview_size = battle.status.team_preview_size or team_size

    # the member placed last matters only with an Illusion user in the team
    has_illusion = any(compare_ids(p.ability, "illusion") for p in request.side.pokemon)

    if team_size != preview_size and (team_size > MAX_TEAM_SIZE_COMBINABLE or preview_size > MAX_TEAM_SIZE_COMBINABLE):
        team = sorted(rng.sample(range(team_size), min(preview_size, team_size)))
    else:
        team = list(range(team_size))

    lead_size = get_active_size(battle.status.game_type)
    result: List[TeamDecision] = []

    for chosen in find_subsets(team, preview_size):
        for leads in find_subsets(chosen, lead_size):
            if len(leads) >= len(chosen):
                result.append(TeamDecision(team_order=list(leads)))
                continue

            rest = [p for p in chosen if p not in leads]

            if not has_illusion:
                result.append(TeamDecision(team_order=list(leads) + rest))
                continue

            for last in rest:
                result.append(TeamDecision(team_order=list(leads) + [p for p in rest if p != last] + [last]))

    return result
