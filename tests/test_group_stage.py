import random

import pytest

from matchplay.constants import STAGE_GROUPS, STAGE_PLAYOFFS
from matchplay.exceptions import InvalidConfigurationException
from matchplay.formats.group_stage import (
    GroupStageEngine,
    group_matches,
    group_members,
    playoff_matches,
)
from matchplay.models.config import GroupStageConfig, TournamentFormat
from matchplay.tournament.orchestrator import TournamentOrchestrator


def _create(num_players, config=None, seed=0):
    orchestrator = TournamentOrchestrator(rng=random.Random(seed))
    orchestrator.create(
        [f"P{i}" for i in range(num_players)], TournamentFormat.GROUP_STAGE, config
    )
    return orchestrator


def _play_groups(orchestrator, side=1):
    for match in group_matches(orchestrator.matches):
        orchestrator.report_game_result(match.id, 0, side)
        orchestrator.report_game_result(match.id, 1, side)


def _play_ready(orchestrator, side=1):
    while True:
        pending = [m for m in orchestrator.matches if m.is_ready and m.winner is None]
        if not pending:
            return
        for match in pending:
            orchestrator.report_game_result(match.id, 0, side)
            orchestrator.report_game_result(match.id, 1, side)


def test_default_layout_for_eight_players():
    orchestrator = _create(8)
    matches = orchestrator.matches

    assert orchestrator.current_stage == STAGE_GROUPS
    assert len(group_matches(matches)) == 12
    assert len(playoff_matches(matches)) == 3
    assert all(m.is_placeholder for m in playoff_matches(matches))

    members = group_members(matches)
    assert sorted(members) == ["A", "B"]
    assert all(len(players) == 4 for players in members.values())
    assert sorted(p for players in members.values() for p in players) == list(range(8))


def test_groups_are_dealt_round_robin_style():
    config = GroupStageConfig(num_groups=3, players_per_group=3, advancing_per_group=1)
    groups = GroupStageEngine().assign_groups(10, config, random.Random(4))

    assert list(groups) == ["A", "B", "C"]
    assert all(len(members) == 3 for members in groups.values())
    placed = [p for members in groups.values() for p in members]
    assert len(set(placed)) == 9


def test_unplaced_players_sort_last():
    orchestrator = _create(10, seed=2)
    _play_groups(orchestrator)
    rows = orchestrator.get_standings().ranked_rows

    unplaced = [row for row in rows if row.group is None]
    assert len(unplaced) == 2
    assert rows[-2:] == unplaced
    assert all(row.group_rank is not None for row in rows[:-2])


def test_advance_seeds_group_winners_across_groups():
    orchestrator = _create(8, seed=6)

    early = orchestrator.advance_stage()
    assert not early.success
    assert early.error == "current stage is not complete"

    _play_groups(orchestrator)
    rankings = orchestrator.standings_calculator.group_rankings(
        orchestrator.players, orchestrator.matches
    )
    assert orchestrator.can_advance_stage()

    advance = orchestrator.advance_stage()
    assert advance.success
    assert advance.stage == STAGE_PLAYOFFS
    a, b = rankings["A"], rankings["B"]
    assert advance.advancing_players == [a[0], b[0], a[1], b[1]]
    assert orchestrator.current_stage == STAGE_PLAYOFFS

    first, second = [m for m in playoff_matches(orchestrator.matches) if m.round == 1]
    assert (first.player1, first.player2) == (a[0], b[0])
    assert (second.player1, second.player2) == (a[1], b[1])

    _play_ready(orchestrator)
    assert orchestrator.is_complete()
    assert not orchestrator.advance_stage().success

    standings = orchestrator.get_standings()
    assert standings.ranked_rows[0].final_position == 1
    assert standings.ranked_rows[0].group in ("A", "B")


def test_top_seeds_get_playoff_byes():
    config = GroupStageConfig(num_groups=3, players_per_group=4, advancing_per_group=2)
    orchestrator = _create(12, config, seed=9)
    _play_groups(orchestrator, side=2)

    advance = orchestrator.advance_stage()
    seeds = advance.advancing_players
    assert len(seeds) == 6

    round_one = [m for m in playoff_matches(orchestrator.matches) if m.round == 1]
    assert [m.is_bye for m in round_one] == [True, True, False, False]
    assert [m.player1 for m in round_one[:2]] == seeds[:2]
    assert [(m.player1, m.player2) for m in round_one[2:]] == [
        (seeds[2], seeds[3]),
        (seeds[4], seeds[5]),
    ]

    second_round = [m for m in playoff_matches(orchestrator.matches) if m.round == 2][0]
    assert (second_round.player1, second_round.player2) == (seeds[0], seeds[1])
    assert second_round.is_ready


def test_consecutive_seeds_meet_in_first_round():
    engine = GroupStageEngine()
    config = GroupStageConfig(num_groups=3, players_per_group=3, advancing_per_group=1)
    matches = engine.generate_matches(
        [f"P{i}" for i in range(9)], config, random.Random(2)
    )
    rankings = {"A": [4, 0, 8], "B": [7, 1, 5], "C": [2, 6, 3]}

    seeds = engine.seed_playoffs(matches, rankings, 1)

    assert seeds == [4, 7, 2]
    first, second = [m for m in playoff_matches(matches) if m.round == 1]
    assert first.is_bye and first.player1 == 4 and first.player2 is None
    assert not second.is_bye
    assert (second.player1, second.player2) == (7, 2)


@pytest.mark.parametrize(
    "config",
    [
        GroupStageConfig(num_groups=1, players_per_group=8),
        GroupStageConfig(num_groups=9, players_per_group=3),
        GroupStageConfig(num_groups=2, players_per_group=2),
        GroupStageConfig(num_groups=3, players_per_group=4),
        GroupStageConfig(num_groups=2, players_per_group=4, advancing_per_group=4),
        GroupStageConfig(num_groups=2, players_per_group=4, advancing_per_group=0),
    ],
)
def test_invalid_group_configs(config):
    with pytest.raises(InvalidConfigurationException):
        GroupStageEngine().validate_config(config, 10)


def test_roster_limits():
    with pytest.raises(InvalidConfigurationException):
        _create(7)
