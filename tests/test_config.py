import pytest
from pydantic import ValidationError

from caves.config import GenerationSettings
from caves.exceptions import ConfigError
from caves.generator.bounds import Bounds


def test_defaults_load_from_packaged_yaml():
    s = GenerationSettings.default()
    assert s.attempts == 2000
    assert s.levels == 10
    assert (s.rows, s.cols) == (40, 50)
    assert s.rooms == Bounds(6, 9)
    assert s.room_rows == Bounds(7, 14)
    assert s.max_overlap == pytest.approx(0.35)
    assert s.next_prev_tiles == 2
    assert "rat" in s.enemies.kinds


def test_yaml_file_overrides_only_what_it_names(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("levels: 4\nrooms: [2, 3]\nenemies:\n  levels:\n    - {rat: 2.0}\n", encoding="utf-8")
    s = GenerationSettings.from_yaml(path)
    assert s.levels == 4
    assert s.rooms == Bounds(2, 3)
    # Nested mappings merge with the defaults
    assert s.enemies.levels == [{"rat": 2.0}]
    assert s.enemies.kinds["rat"].health_points == 15
    assert s.rows == 40


def test_missing_yaml_file(tmp_path):
    with pytest.raises(ConfigError):
        GenerationSettings.from_yaml(tmp_path / "nope.yaml")


def test_yaml_must_be_a_mapping(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        GenerationSettings.from_yaml(path)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CAVES_LEVELS", "2")
    monkeypatch.setenv("CAVES_ROOMS", "3,5")
    monkeypatch.setenv("CAVES_VALIDATE_LEVELS", "false")
    s = GenerationSettings.from_env()
    assert s.levels == 2
    assert s.rooms == Bounds(3, 5)
    assert s.validate_levels is False


def test_env_override_with_explicit_mapping():
    base = GenerationSettings.default()
    s = GenerationSettings.from_env(base, environ={"CAVES_ROOM_ENEMIES": "1"})
    assert s.room_enemies == Bounds(1, 1)
    assert GenerationSettings.from_env(base, environ={}) is base


def test_bad_env_number(monkeypatch):
    monkeypatch.setenv("CAVES_ROOMS", "a,b")
    with pytest.raises(ConfigError):
        GenerationSettings.from_env()


@pytest.mark.parametrize(
    "overrides",
    [
        {"attempts": 0},
        {"max_overlap": 1.5},
        {"rooms": [0, 2]},
        {"rooms": [5, 2]},
        {"room_rows": [2, 4]},
        {"room_cols": [8, 60]},
        {"doors": [0, 1]},
        {"unknown_setting": 1},
        {"workers": -1},
    ],
)
def test_invalid_settings_are_config_errors(overrides):
    with pytest.raises(ConfigError):
        GenerationSettings.default().with_overrides(**overrides)


def test_enemy_weights_must_name_known_kinds():
    data = GenerationSettings.default().to_dict()
    data["enemies"]["levels"] = [{"bat": 1.0}]
    with pytest.raises(ConfigError):
        GenerationSettings.from_mapping(data)


def test_settings_are_immutable():
    s = GenerationSettings.default()
    with pytest.raises(ValidationError):
        s.levels = 3


def test_to_dict_round_trips():
    s = GenerationSettings.default().with_overrides(levels=3)
    assert GenerationSettings.from_mapping(s.to_dict()) == s
