import copy
import random

import pytest

from matchplay.exceptions import BracketIntegrityException
from matchplay.models.config import SingleEliminationConfig, TournamentFormat
from matchplay.models.match import FeedEdge, Match
from matchplay.tournament.orchestrator import TournamentOrchestrator
from matchplay.tournament.result_processor import MatchResultProcessor, decide


def _bracket(num_players=8):
    orchestrator = TournamentOrchestrator(rng=random.Random(0))
    orchestrator.create(
        [f"P{i}" for i in range(num_players)],
        TournamentFormat.SINGLE_ELIMINATION,
        SingleEliminationConfig(seeding_method="seeded"),
    )
    return orchestrator


def _win(orchestrator, match_id, side):
    orchestrator.report_game_result(match_id, 0, side)
    return orchestrator.report_game_result(match_id, 1, side)


def _snapshot(orchestrator):
    return [m.to_dict() for m in orchestrator.matches]


def test_decide_scans_in_order():
    assert decide([1, 1, None]) == (1, 1)
    assert decide([1, 2, 2]) == (2, 2)
    assert decide([2, None, None]) == (None, None)
    assert decide([None, None, None]) == (None, None)


def test_two_game_sweep_decides_the_match():
    orchestrator = _bracket()
    first = orchestrator.report_game_result(0, 0, 1)
    assert first.updated and not first.transitioned

    second = orchestrator.report_game_result(0, 1, 1)
    assert second.transitioned
    assert second.match.winner == 1
    assert second.match.games == [1, 1, None]
    assert orchestrator.matches[4].player1 == 0


@pytest.mark.parametrize(
    "match_id,game_index,side,error",
    [
        (99, 0, 1, "match not found"),
        (-1, 0, 1, "match not found"),
        (0, 3, 1, "invalid game index"),
        (0, -1, 1, "invalid game index"),
        (0, 1.0, 1, "invalid game index"),
        (0, "0", 1, "invalid game index"),
        (0, 0, 3, "invalid side"),
        (0, 0, 1.0, "invalid side"),
        (1.0, 0, 1, "match not found"),
        (4, 0, 1, "match not ready"),
        (0, 1, 1, "complete earlier game first"),
    ],
)
def test_rejected_reports_leave_state_untouched(match_id, game_index, side, error):
    orchestrator = _bracket()
    before = _snapshot(orchestrator)
    revision = orchestrator.revision

    report = orchestrator.report_game_result(match_id, game_index, side)

    assert report.error == error
    assert not report.updated
    assert _snapshot(orchestrator) == before
    assert orchestrator.revision == revision


def test_bye_matches_take_no_games():
    orchestrator = _bracket(5)
    report = orchestrator.report_game_result(0, 0, 1)
    assert report.error == "bye matches have no games"


def test_completed_match_rejects_new_games():
    orchestrator = _bracket()
    _win(orchestrator, 0, 2)
    report = orchestrator.report_game_result(0, 2, 1)
    assert report.error == "match already completed"


def test_reporting_the_same_side_toggles_the_slot_off():
    orchestrator = _bracket()
    orchestrator.report_game_result(0, 0, 1)
    orchestrator.report_game_result(0, 1, 2)
    orchestrator.report_game_result(0, 2, 1)
    match = orchestrator.matches[0]
    assert match.winner == 1

    report = orchestrator.report_game_result(0, 1, 2)
    assert report.transitioned
    assert match.games == [1, None, None]
    assert match.winner is None
    assert orchestrator.matches[4].player1 is None


def test_changing_an_early_game_clears_games_after_the_decider():
    orchestrator = _bracket()
    orchestrator.report_game_result(0, 0, 1)
    orchestrator.report_game_result(0, 1, 2)
    orchestrator.report_game_result(0, 2, 2)
    match = orchestrator.matches[0]
    assert match.winner == 2

    report = orchestrator.report_game_result(0, 0, 2)
    assert match.games == [2, 2, None]
    assert match.winner == 2
    assert not report.transitioned


def test_flipping_the_winner_moves_the_other_player_on():
    orchestrator = _bracket()
    orchestrator.report_game_result(0, 0, 1)
    orchestrator.report_game_result(0, 1, 2)
    orchestrator.report_game_result(0, 2, 1)
    assert orchestrator.matches[4].player1 == 0

    orchestrator.report_game_result(0, 2, 2)
    assert orchestrator.matches[0].winner == 2
    assert orchestrator.matches[4].player1 == 7


def test_undo_restores_downstream_state_exactly():
    orchestrator = _bracket()
    _win(orchestrator, 1, 1)
    orchestrator.report_game_result(0, 0, 1)
    before = _snapshot(orchestrator)

    orchestrator.report_game_result(0, 1, 1)
    assert orchestrator.matches[4].is_ready

    orchestrator.report_game_result(0, 1, 1)
    assert _snapshot(orchestrator) == before


def test_undo_cascades_through_later_rounds():
    orchestrator = _bracket()
    for match_id in range(4):
        _win(orchestrator, match_id, 1)
    _win(orchestrator, 4, 1)
    _win(orchestrator, 5, 1)
    _win(orchestrator, 6, 1)
    assert orchestrator.is_complete()

    orchestrator.report_game_result(0, 1, 1)

    semifinal, final = orchestrator.matches[4], orchestrator.matches[6]
    assert semifinal.player1 is None and semifinal.winner is None
    assert semifinal.games == [None, None, None]
    assert semifinal.is_placeholder
    assert final.player1 is None and final.winner is None
    assert final.player2 == 2
    assert final.is_placeholder
    assert not orchestrator.is_complete()


def test_advance_refuses_to_overwrite_a_different_player():
    matches = [
        Match(id=0, player1=0, player2=1, winner=1, feeds_into=FeedEdge(1, 1)),
        Match(id=1, player1=5, player2=None, is_placeholder=True),
    ]
    with pytest.raises(BracketIntegrityException):
        MatchResultProcessor().advance(matches, matches[0])


def test_rebuild_refills_dropped_slots():
    orchestrator = _bracket()
    _win(orchestrator, 0, 1)
    _win(orchestrator, 1, 2)
    expected = _snapshot(orchestrator)

    matches = copy.deepcopy(orchestrator.matches)
    matches[4].player1 = None
    matches[4].player2 = None
    MatchResultProcessor().rebuild(matches)

    assert [m.to_dict() for m in matches] == expected
