import random

import pytest

from matchplay.exceptions import InvalidConfigurationException
from matchplay.formats.single_elimination import SingleEliminationEngine
from matchplay.models.config import SingleEliminationConfig, TournamentFormat
from matchplay.tournament.orchestrator import TournamentOrchestrator


def _create(num_players, **config):
    orchestrator = TournamentOrchestrator(rng=random.Random(num_players))
    orchestrator.create(
        [f"P{i}" for i in range(num_players)],
        TournamentFormat.SINGLE_ELIMINATION,
        SingleEliminationConfig(**config),
    )
    return orchestrator


def _win(orchestrator, match_id, side):
    orchestrator.report_game_result(match_id, 0, side)
    return orchestrator.report_game_result(match_id, 1, side)


def test_five_players_bracket_shape():
    assert SingleEliminationEngine.bracket_size(5) == 8
    assert SingleEliminationEngine.num_byes(5) == 3
    assert SingleEliminationEngine.num_rounds(5) == 3

    orchestrator = _create(5)
    assert len(orchestrator.matches) == 7
    assert sum(1 for m in orchestrator.matches if m.is_bye) == 3


@pytest.mark.parametrize("num_players", [2, 3, 5, 8, 11, 16, 23, 32])
def test_one_final_and_playable_matches_equal_players_minus_one(num_players):
    matches = _create(num_players).matches

    sinks = [m for m in matches if m.feeds_into is None]
    assert len(sinks) == 1
    assert sinks[0].id == len(matches) - 1
    assert sum(1 for m in matches if not m.is_bye) == num_players - 1


def test_top_seeds_take_the_byes():
    orchestrator = _create(5, seeding_method="seeded")
    matches = orchestrator.matches

    assert [m.player1 for m in matches[:3]] == [0, 1, 2]
    assert all(m.is_bye for m in matches[:3])
    assert (matches[3].player1, matches[3].player2) == (3, 4)

    # byes are already advanced into round two
    assert (matches[4].player1, matches[4].player2) == (0, 1)
    assert not matches[4].is_placeholder
    assert matches[5].player1 == 2
    assert matches[5].player2 is None
    assert matches[5].is_placeholder


def test_third_place_match_receives_semifinal_losers():
    orchestrator = _create(8, seeding_method="seeded", third_place_match=True)
    matches = orchestrator.matches
    assert len(matches) == 8
    third_place = matches[7]
    assert third_place.is_third_place
    assert matches[4].loser_feeds_into.match_id == third_place.id
    assert matches[5].loser_feeds_into.match_id == third_place.id

    for match_id in range(4):
        _win(orchestrator, match_id, 1)
    _win(orchestrator, 4, 1)
    _win(orchestrator, 5, 2)

    assert third_place.is_ready
    assert third_place.player1 == matches[4].loser_index
    assert third_place.player2 == matches[5].loser_index

    _win(orchestrator, 6, 1)
    assert not orchestrator.is_complete()
    _win(orchestrator, 7, 2)
    assert orchestrator.is_complete()

    standings = orchestrator.get_standings()
    positions = {row.player_index: row.final_position for row in standings.ranked_rows}
    assert positions[matches[6].winner_index] == 1
    assert positions[matches[6].loser_index] == 2
    assert positions[third_place.winner_index] == 3
    assert positions[third_place.loser_index] == 4


def test_third_place_needs_four_players():
    with pytest.raises(InvalidConfigurationException):
        _create(3, third_place_match=True)


def test_round_names():
    assert SingleEliminationEngine.round_name(3, 3) == "Finals"
    assert SingleEliminationEngine.round_name(2, 3) == "Semifinals"
    assert SingleEliminationEngine.round_name(2, 4) == "Quarterfinals"
    assert SingleEliminationEngine.round_name(1, 5) == "Round 1"


def test_unknown_seeding_method():
    with pytest.raises(InvalidConfigurationException):
        _create(4, seeding_method="alphabetical")
