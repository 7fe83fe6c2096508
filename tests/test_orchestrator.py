import random

import pytest

from matchplay.exceptions import InvalidConfigurationException, MatchPlayException
from matchplay.models.config import (
    RoundRobinConfig,
    SwissConfig,
    TournamentFormat,
)
from matchplay.tournament.orchestrator import TournamentOrchestrator


def _names(n):
    return [f"P{i}" for i in range(n)]


@pytest.mark.parametrize(
    "fmt,num_players",
    [
        ("round-robin", 2),
        ("swiss", 3),
        ("swiss", 101),
        ("single-elimination", 1),
        ("single-elimination", 129),
        ("double-elimination", 6),
        ("group-stage", 7),
        ("group-stage", 65),
    ],
)
def test_roster_size_is_checked_before_generation(fmt, num_players):
    orchestrator = TournamentOrchestrator()
    with pytest.raises(InvalidConfigurationException):
        orchestrator.create(_names(num_players), fmt)
    assert orchestrator.state is None


def test_unknown_format_is_rejected():
    with pytest.raises(InvalidConfigurationException, match="Unknown tournament format"):
        TournamentOrchestrator().create(_names(4), "ladder")


def test_config_must_match_the_format():
    with pytest.raises(InvalidConfigurationException):
        TournamentOrchestrator().create(_names(8), "swiss", RoundRobinConfig(3))


def test_rejected_create_keeps_the_running_tournament():
    orchestrator = TournamentOrchestrator(rng=random.Random(1))
    orchestrator.create(_names(8), "swiss", SwissConfig(rounds=3))
    matches = orchestrator.matches
    revision = orchestrator.revision

    with pytest.raises(InvalidConfigurationException):
        orchestrator.create(_names(8), "swiss", SwissConfig(rounds=11))

    assert orchestrator.matches is matches
    assert orchestrator.revision == revision


def test_queries_need_a_tournament():
    with pytest.raises(MatchPlayException):
        TournamentOrchestrator().matches


def test_progress_counts_playable_matches():
    orchestrator = TournamentOrchestrator(rng=random.Random(2))
    orchestrator.create(_names(5), TournamentFormat.SINGLE_ELIMINATION)
    # the three byes are not counted, the two top seeds already meet in round two
    assert orchestrator.get_progress() == {"completed": 0, "total": 2, "percentage": 0.0}

    first = next(m for m in orchestrator.matches if m.is_ready)
    orchestrator.report_game_result(first.id, 0, 1)
    orchestrator.report_game_result(first.id, 1, 1)
    progress = orchestrator.get_progress()
    assert progress["completed"] == 1
    assert progress["total"] == 3
    assert progress["percentage"] == 33.3


def test_player_schedule():
    orchestrator = TournamentOrchestrator(rng=random.Random(2))
    orchestrator.create(_names(6), "round-robin", RoundRobinConfig(matches_per_player=5))
    for player in range(6):
        schedule = orchestrator.get_player_schedule(player)
        assert len(schedule) == 5
        assert [m.id for m in schedule] == sorted(m.id for m in schedule)


def test_get_match():
    orchestrator = TournamentOrchestrator(rng=random.Random(2))
    orchestrator.create(_names(4), "round-robin", RoundRobinConfig(matches_per_player=3))
    assert orchestrator.get_match(0) is orchestrator.matches[0]
    assert orchestrator.get_match(6) is None
    assert orchestrator.get_match(1.0) is None
    assert orchestrator.get_match("0") is None
    assert orchestrator.get_match(True) is None


def test_revision_only_moves_on_change():
    orchestrator = TournamentOrchestrator(rng=random.Random(2))
    orchestrator.create(_names(8), "swiss", SwissConfig(rounds=3))
    revision = orchestrator.revision

    orchestrator.report_game_result(99, 0, 1)
    orchestrator.advance_stage()
    assert orchestrator.revision == revision

    match = next(m for m in orchestrator.matches if m.is_ready)
    orchestrator.report_game_result(match.id, 0, 2)
    assert orchestrator.revision == revision + 1


def test_non_staged_formats_never_advance():
    orchestrator = TournamentOrchestrator(rng=random.Random(2))
    orchestrator.create(_names(4), "round-robin", RoundRobinConfig(matches_per_player=3))
    for match in orchestrator.matches:
        orchestrator.report_game_result(match.id, 0, 1)
        orchestrator.report_game_result(match.id, 1, 1)

    assert orchestrator.is_complete()
    assert orchestrator.current_swiss_round() is None
    result = orchestrator.advance_stage()
    assert not result.success
    assert result.error == "no next stage"


def test_format_info():
    orchestrator = TournamentOrchestrator()
    orchestrator.create(_names(8), "double-elimination")
    info = orchestrator.format_info()
    assert info["format"] == "double-elimination"
    assert info["supportedSizes"] == [4, 8, 16, 32]
