"""Candidates for a forced switch (faint replacement, pivot moves, Revival Blessing)."""

from __future__ import annotations

from typing import List

from Decision.decision import PASS, ForceSwitchSubDecision, ReviveSubDecision, SwitchSubDecision
from Knowledge.battle import Battle


def generate_force_switch_sub_decisions(battle: Battle, request_index: int) -> List[ForceSwitchSubDecision]:
    request = battle.request
    if battle.main_player is None or request is None or request.force_switch is None:
        return []

    if request_index >= len(request.force_switch) or not request.force_switch[request_index]:
        return [PASS]

    side = request.side.pokemon
    if request_index >= len(side):
        return [PASS]

    result: List[ForceSwitchSubDecision] = []

    if side[request_index].reviving:
        for pokemon_index, pokemon in enumerate(side):
            if pokemon.active or not pokemon.condition.fainted:
                continue
            result.append(ReviveSubDecision(pokemon_index))
    else:
        for pokemon_index, pokemon in enumerate(side):
            if pokemon.active or pokemon.condition.fainted:
                continue
            result.append(SwitchSubDecision(pokemon_index))

    return result
