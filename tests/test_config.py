import json

import pytest

from utils.config import Settings, load_settings


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("POKEDECIDER_CONFIG", raising=False)


def test_defaults_without_sources():
    settings = load_settings(environ={})
    assert settings == Settings()
    assert settings.seed is None
    assert settings.scenarios_max_keep == 0


def test_json_file_overrides_defaults(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"switch_chance": 0.25, "seed": 7, "unknown_key": 1}))

    settings = load_settings(str(path), environ={})

    assert settings.switch_chance == 0.25
    assert settings.seed == 7
    assert settings.stay_chance_bad_volatile == Settings().stay_chance_bad_volatile


def test_config_json_in_working_directory_is_picked_up(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"scenarios_max_keep": 3}))
    assert load_settings(environ={}).scenarios_max_keep == 3


def test_environment_wins_over_file(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"log_level": "WARNING", "viable_status_preference": 0.9}))

    settings = load_settings(str(path), environ={
        "POKEDECIDER_LOG_LEVEL": "DEBUG",
        "POKEDECIDER_SEED": "42",
    })

    assert settings.log_level == "DEBUG"
    assert settings.seed == 42
    assert settings.viable_status_preference == 0.9


def test_bad_values_are_ignored(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"switch_chance": "often", "sets_dir": 12}))

    settings = load_settings(str(path), environ={"POKEDECIDER_SCENARIOS_MAX_KEEP": "many"})

    assert settings.switch_chance == Settings().switch_chance
    assert settings.sets_dir == Settings().sets_dir
    assert settings.scenarios_max_keep == 0


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_unreadable_file_falls_back_to_defaults(tmp_path, content):
    path = tmp_path / "broken.json"
    path.write_text(content)
    assert load_settings(str(path), environ={}) == Settings()


def test_missing_file_falls_back_to_defaults(tmp_path):
    assert load_settings(str(tmp_path / "nope.json"), environ={}) == Settings()


def test_seed_can_be_cleared_from_environment():
    assert load_settings(environ={"POKEDECIDER_SEED": "none"}).seed is None


def test_unknown_log_level_is_ignored(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"log_level": "VERBOSE"}))

    assert load_settings(str(path), environ={}).log_level == "INFO"
    assert load_settings(environ={"POKEDECIDER_LOG_LEVEL": "loud"}).log_level == "INFO"


def test_log_level_names_are_normalized():
    assert load_settings(environ={"POKEDECIDER_LOG_LEVEL": " debug "}).log_level == "DEBUG"
