import random

import pytest

from matchplay.models.config import (
    DoubleEliminationConfig,
    GroupStageConfig,
    RoundRobinConfig,
    SingleEliminationConfig,
    SwissConfig,
    TournamentFormat,
)
from matchplay.models.match import Match
from matchplay.models.standings import StandingsRow
from matchplay.simulation import RandomResultSimulator, SimulationConfig
from matchplay.tournament.orchestrator import TournamentOrchestrator
from matchplay.tournament.standings_calculator import StandingsCalculator


def _names(n):
    return [f"P{i}" for i in range(n)]


def _row(index, **stats):
    return StandingsRow(player_index=index, player=f"P{index}", **stats)


def test_round_robin_points_and_quality():
    matches = [
        Match(id=0, player1=0, player2=1, games=[1, 1, None], winner=1),
        Match(id=1, player1=1, player2=2, games=[1, 2, 1], winner=1),
        Match(id=2, player1=0, player2=2, games=[2, 1, 1], winner=1),
    ]
    standings = StandingsCalculator().round_robin(_names(3), matches)
    rows = {row.player_index: row for row in standings.ranked_rows}

    # 2 wins, 4 games won, 1 lost
    assert rows[0].points == 2 * 3 + 4 - 0.5
    # 1 win, 2 games won, 3 lost
    assert rows[1].points == 3 + 2 - 1.5
    # 0 wins, 2 games won, 4 lost
    assert rows[2].points == 2 - 2.0
    assert rows[0].quality_score == rows[1].points + rows[2].points
    assert rows[1].quality_score == rows[2].points
    assert [row.player_index for row in standings.ranked_rows] == [0, 1, 2]
    assert [row.rank for row in standings.ranked_rows] == [1, 2, 3]
    assert standings.tied_ranks == set()


def test_head_to_head_breaks_equal_points():
    a = _row(0, points=9.0, quality_score=1.0, beaten=[1])
    b = _row(1, points=9.0, quality_score=5.0, lost_to=[0])
    assert StandingsCalculator.compare_round_robin(a, b) == 1
    assert StandingsCalculator.compare_round_robin(b, a) == -1


def test_points_within_tolerance_count_as_equal():
    a = _row(0, points=6.004, quality_score=3.0)
    b = _row(1, points=6.0, quality_score=2.0)
    assert StandingsCalculator.compare_round_robin(a, b) == 1
    assert StandingsCalculator.compare_round_robin(b, a) == -1


def test_equal_rank_keys_share_a_rank():
    rows = [
        _row(0, points=9.0),
        _row(1, points=6.0, quality_score=3.0),
        _row(2, points=6.0, quality_score=3.0),
        _row(3, points=3.0),
    ]
    standings = StandingsCalculator.assign_ranks(
        rows, StandingsCalculator.same_round_robin_rank
    )
    assert [row.rank for row in standings.ranked_rows] == [1, 2, 2, 4]
    assert standings.tied_ranks == {2}


def test_swiss_opponent_win_rates():
    matches = [
        Match(id=0, round=1, player1=0, player2=1, games=[1, 1, None], winner=1),
        Match(id=1, round=1, player1=2, player2=3, games=[2, 1, 2], winner=2),
        Match(id=2, round=2, player1=0, player2=3, games=[1, 2, 1], winner=1),
        Match(id=3, round=2, player1=1, player2=2, games=[2, 2, None], winner=2),
    ]
    standings = StandingsCalculator().swiss(_names(4), matches)
    rows = {row.player_index: row for row in standings.ranked_rows}

    assert rows[0].points == 6
    # opponents 1 and 3 won 0 + 1 of their 4 matches
    assert rows[0].omw == pytest.approx(0.25)
    assert rows[0].gwp == pytest.approx(4 / 5)
    assert standings.ranked_rows[0].player_index == 0
    assert standings.ranked_rows[-1].player_index == 1


def test_byes_count_as_wins():
    matches = [
        Match(id=0, round=1, player1=0, player2=1, games=[1, 1, None], winner=1),
        Match(id=1, round=1, player1=2, is_bye=True, winner=1),
    ]
    rows = StandingsCalculator.collect(_names(3), matches)
    assert rows[2].wins == 1
    assert rows[2].byes == 1
    assert rows[2].matches_played == 1
    assert rows[2].games_won == 0


def test_placeholders_and_open_matches_are_ignored():
    matches = [
        Match(id=0, player1=0, player2=1, games=[1, None, None]),
        Match(id=1, is_placeholder=True),
    ]
    rows = StandingsCalculator.collect(_names(2), matches)
    assert all(row.matches_played == 0 and row.games_won == 0 for row in rows)


def test_single_elimination_positions():
    orchestrator = TournamentOrchestrator(rng=random.Random(0))
    orchestrator.create(
        _names(4),
        TournamentFormat.SINGLE_ELIMINATION,
        SingleEliminationConfig(seeding_method="seeded"),
    )
    for match_id, side in ((0, 1), (1, 2), (2, 2)):
        orchestrator.report_game_result(match_id, 0, side)
        orchestrator.report_game_result(match_id, 1, side)

    standings = orchestrator.get_standings()
    rows = {row.player_index: row for row in standings.ranked_rows}
    assert rows[2].final_position == 1 and rows[2].rank == 1
    assert rows[0].final_position == 2 and rows[0].rank == 2
    assert rows[3].final_position == 3 and rows[1].final_position == 3
    assert rows[3].rank == rows[1].rank == 3
    assert standings.tied_ranks == {3}


def test_standings_are_cached_until_a_change():
    orchestrator = TournamentOrchestrator(rng=random.Random(0))
    orchestrator.create(_names(4), "round-robin", RoundRobinConfig(matches_per_player=3))

    first = orchestrator.get_standings()
    assert orchestrator.get_standings() is first

    orchestrator.report_game_result(0, 0, 1)
    assert orchestrator.get_standings() is not first


@pytest.mark.parametrize(
    "fmt,num_players,config",
    [
        (TournamentFormat.ROUND_ROBIN, 6, RoundRobinConfig(matches_per_player=5)),
        (TournamentFormat.SWISS, 9, SwissConfig(rounds=4)),
        (TournamentFormat.SINGLE_ELIMINATION, 11, SingleEliminationConfig()),
        (TournamentFormat.DOUBLE_ELIMINATION, 16, DoubleEliminationConfig()),
        (TournamentFormat.GROUP_STAGE, 12, GroupStageConfig(3, 4, 2)),
    ],
)
def test_final_standings_are_consistently_ranked(fmt, num_players, config):
    result = RandomResultSimulator(
        SimulationConfig(num_players=num_players, format=fmt, format_config=config, seed=21)
    ).run()
    assert result.completed

    calculator = StandingsCalculator()
    same_rank = {
        TournamentFormat.ROUND_ROBIN: calculator.same_round_robin_rank,
        TournamentFormat.SWISS: calculator.same_swiss_rank,
        TournamentFormat.SINGLE_ELIMINATION: calculator.same_elimination_rank,
        TournamentFormat.DOUBLE_ELIMINATION: calculator.same_elimination_rank,
        TournamentFormat.GROUP_STAGE: calculator.same_elimination_rank,
    }[fmt]

    rows = result.standings.ranked_rows
    assert len(rows) == num_players
    assert rows[0].rank == 1
    for position in range(1, len(rows)):
        above, row = rows[position - 1], rows[position]
        if fmt.is_elimination or fmt is TournamentFormat.GROUP_STAGE:
            assert (above.depth, above.wins) >= (row.depth, row.wins)
        else:
            assert above.points >= row.points - 0.01
        if same_rank(above, row):
            assert row.rank == above.rank
        else:
            assert row.rank == position + 1
