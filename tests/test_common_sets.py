import json
import logging

from utils.common_sets import CommonSetRepository, apply_common_sets_to_foe_active


def _repository(tmp_path, data, gen=9):
    (tmp_path / f"sets-{gen}.json").write_text(json.dumps(data))
    return CommonSetRepository(str(tmp_path))


def _foe(match):
    return match.battle.players[1].active[0]


def test_repository_accepts_pairs_and_mappings(tmp_path):
    repo = _repository(tmp_path, [["charizard", {"ability": "Solar Power", "moves": ["Fire Blast"]}]])
    assert repo.get(9, "Charizard").ability == "solarpower"
    assert repo.get(9, "Charizard").moves == ["fireblast"]

    repo = _repository(tmp_path, {"Snorlax": {"item": "Leftovers"}}, gen=8)
    assert repo.get(8, "snorlax").item == "leftovers"


def test_repository_without_file_is_empty(tmp_path):
    repo = CommonSetRepository(str(tmp_path))
    assert repo.get_repository(9) == {}
    assert repo.get(9, "Pikachu") is None


def test_missing_sets_directory_warns_once(tmp_path, caplog):
    repo = CommonSetRepository(str(tmp_path / "no-such-dir"))

    with caplog.at_level(logging.WARNING, logger="pokedecider.sets"):
        assert repo.get(9, "Pikachu") is None
        assert repo.get(8, "Pikachu") is None

    warnings = [r for r in caplog.records if r.name == "pokedecider.sets" and r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "no-such-dir" in warnings[0].getMessage()


def test_repository_unknown_generation_uses_latest(tmp_path):
    repo = _repository(tmp_path, {"pikachu": {"item": "Light Ball"}})
    assert repo.get(42, "Pikachu").item == "lightball"


def test_malformed_file_is_ignored(tmp_path):
    (tmp_path / "sets-9.json").write_text("{oops")
    assert CommonSetRepository(str(tmp_path)).get_repository(9) == {}


def test_common_set_fills_unknowns_only(singles_match, tmp_path):
    repo = _repository(tmp_path, {"charizard": {
        "ability": "Solar Power",
        "item": "Choice Specs",
        "nature": "Timid",
        "evs": {"spa": 252, "spe": 252},
        "moves": ["Fire Blast", "Air Slash", "Focus Blast", "Solar Beam", "Roost"],
    }})
    foe = _foe(singles_match)
    foe.item.known = True
    foe.item.item = "heavydutyboots"

    modified = apply_common_sets_to_foe_active(singles_match.battle, foe, repo)

    assert modified.ability.known and modified.ability.ability == "solarpower"
    assert modified.item.item == "heavydutyboots"
    assert list(modified.moves) == ["fireblast", "airslash", "focusblast", "solarbeam"]
    assert all(modified.stats.get(s).known for s in ("hp", "atk", "def", "spa", "spd", "spe"))
    assert modified.stats.spa.max > modified.stats.atk.max
    # the live record is untouched
    assert not foe.ability.known
    assert not foe.moves


def test_without_common_set_first_species_ability_is_assumed(singles_match, tmp_path):
    modified = apply_common_sets_to_foe_active(singles_match.battle, _foe(singles_match),
                                               CommonSetRepository(str(tmp_path)))
    assert modified.ability.known
    assert modified.ability.ability == "blaze"
    assert modified.stats.hp.known
