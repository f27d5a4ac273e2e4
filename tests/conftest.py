from __future__ import annotations

import pytest

from builders import MatchBuilder, active_request, side_pokemon


@pytest.fixture
def match() -> MatchBuilder:
    return MatchBuilder()


@pytest.fixture
def singles_match() -> MatchBuilder:
    return MatchBuilder().singles(
        [
            side_pokemon("Pikachu", active=True, moves=("thunderbolt", "quickattack", "thunderwave", "protect")),
            side_pokemon("Snorlax", moves=("bodyslam", "rest")),
            side_pokemon("Gyarados", moves=("waterfall", "dragondance")),
        ],
        active_request("thunderbolt", "quickattack", "thunderwave", "protect"),
        "Charizard",
    )
