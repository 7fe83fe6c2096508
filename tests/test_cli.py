import json

import pytest

from matchplay.cli import build_config, create_main_parser, main, parse_players
from matchplay.models.config import (
    GroupStageConfig,
    RoundRobinConfig,
    SingleEliminationConfig,
    TournamentFormat,
)


def _create(path, *extra):
    return main(
        ["create", "--file", str(path), "--seed", "4", "--players", "A,B,C,D", *extra]
    )


def test_parse_players_drops_blanks():
    assert parse_players(" Ann, Bob ,,Cy ") == ["Ann", "Bob", "Cy"]


def test_build_config_applies_overrides():
    parser = create_main_parser()

    args = parser.parse_args(
        ["create", "--format", "round-robin", "--players", "x", "--matches-per-player", "3"]
    )
    assert build_config(TournamentFormat.ROUND_ROBIN, 8, args) == RoundRobinConfig(3)

    args = parser.parse_args(
        ["create", "--format", "single-elimination", "--players", "x",
         "--seeding", "seeded", "--third-place"]
    )
    assert build_config(TournamentFormat.SINGLE_ELIMINATION, 8, args) == (
        SingleEliminationConfig(seeding_method="seeded", third_place_match=True)
    )

    args = parser.parse_args(
        ["create", "--format", "group-stage", "--players", "x", "--groups", "3"]
    )
    assert build_config(TournamentFormat.GROUP_STAGE, 12, args) == GroupStageConfig(3, 4, 2)


def test_report_arguments_are_range_checked():
    parser = create_main_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["report", "0", "4", "1"])
    with pytest.raises(SystemExit):
        parser.parse_args(["report", "0", "1", "3"])


def test_create_report_and_standings(tmp_path, capsys):
    path = tmp_path / "league.json"
    assert _create(path, "--format", "round-robin", "--matches-per-player", "3") == 0
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["format"] == "round-robin"
    assert len(data["matches"]) == 6

    assert main(["report", "--file", str(path), "0", "1", "2"]) == 0
    assert main(["report", "--file", str(path), "0", "2", "2"]) == 0
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["matches"][0]["games"] == [2, 2, None]
    assert data["matches"][0]["winner"] == 2

    assert main(["standings", "--file", str(path)]) == 0
    assert main(["show", "--file", str(path), "--pending"]) == 0
    out = capsys.readouterr().out
    assert "Standings" in out
    assert "1/6 matches complete" in out


def test_rejected_report_returns_error(tmp_path, capsys):
    path = tmp_path / "league.json"
    _create(path, "--format", "round-robin", "--matches-per-player", "3")

    assert main(["report", "--file", str(path), "0", "2", "1"]) == 1
    assert "complete earlier game first" in capsys.readouterr().out


def test_invalid_create_returns_error(tmp_path, capsys):
    path = tmp_path / "bad.json"
    assert _create(path, "--format", "double-elimination", "--seeding", "seeded") == 0
    assert main(["create", "--file", str(path), "--format", "double-elimination",
                 "--players", "A,B,C,D,E,F"]) == 1
    assert "unsupported" in capsys.readouterr().out


def test_missing_file_returns_error(tmp_path):
    assert main(["standings", "--file", str(tmp_path / "none.json")]) == 1


def test_advance_without_next_stage(tmp_path):
    path = tmp_path / "cup.json"
    _create(path, "--format", "single-elimination")
    assert main(["advance", "--file", str(path)]) == 1


def test_simulate_saves_output(tmp_path):
    path = tmp_path / "sim.json"
    code = main(
        ["simulate", "--format", "group-stage", "--players", "12", "--seed", "3",
         "--output", str(path)]
    )
    assert code == 0
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["currentStage"] == "playoffs"
