import json

import pytest
import yaml

from caves.cli import main

from conftest import FIXED_KEY, SMALL_DUNGEON


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "small.yaml"
    path.write_text(yaml.safe_dump(SMALL_DUNGEON), encoding="utf-8")
    return path


def test_json_output(config_file, capsys):
    code = main(["--config", str(config_file), "--key", FIXED_KEY, "--levels", "2"])
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["key"] == FIXED_KEY
    assert len(data["levels"]) == 2


def test_ascii_output(config_file, capsys):
    code = main(["--config", str(config_file), "--key", FIXED_KEY, "--format", "ascii", "--levels", "1"])
    assert code == 0
    out = capsys.readouterr().out
    assert out.startswith(f"key: {FIXED_KEY}")
    assert "level 1" in out
    assert "#" in out


def test_bad_key(config_file, capsys):
    assert main(["--config", str(config_file), "--key", "not-a-key!"]) == 2
    assert "error" in capsys.readouterr().err


def test_missing_config(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "missing.yaml")]) == 2
    assert "not found" in capsys.readouterr().err


def test_unsatisfiable_settings(tmp_path, capsys):
    path = tmp_path / "crowded.yaml"
    path.write_text(yaml.safe_dump(dict(SMALL_DUNGEON, rooms=[30, 30], attempts=20)), encoding="utf-8")
    assert main(["--config", str(path), "--key", FIXED_KEY, "--levels", "1"]) == 3
    assert "unsatisfiable" in capsys.readouterr().err
