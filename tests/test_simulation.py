import pytest

from matchplay.models.config import TournamentFormat
from matchplay.simulation import RandomResultSimulator, ResultPattern, SimulationConfig


@pytest.mark.parametrize(
    "fmt,num_players",
    [
        (TournamentFormat.ROUND_ROBIN, 7),
        (TournamentFormat.SWISS, 10),
        (TournamentFormat.SINGLE_ELIMINATION, 13),
        (TournamentFormat.DOUBLE_ELIMINATION, 8),
        (TournamentFormat.GROUP_STAGE, 16),
    ],
)
@pytest.mark.parametrize("pattern", list(ResultPattern))
def test_every_format_plays_to_completion(fmt, num_players, pattern):
    config = SimulationConfig(
        num_players=num_players, format=fmt, result_pattern=pattern, seed=99
    )
    result = RandomResultSimulator(config).run()

    assert result.completed
    assert not result.errors
    assert result.champion is not None
    assert result.standings.ranked_rows[0].rank == 1

    for match in result.orchestrator.matches:
        if match.winner is not None and not match.is_bye:
            assert sum(1 for g in match.games if g == match.winner) == 2


def test_same_seed_same_tournament():
    config = SimulationConfig(num_players=9, format=TournamentFormat.SWISS, seed=5)
    first = RandomResultSimulator(config).run()
    second = RandomResultSimulator(config).run()

    assert [m.to_dict() for m in first.orchestrator.matches] == [
        m.to_dict() for m in second.orchestrator.matches
    ]


def test_straight_sets_take_two_games():
    config = SimulationConfig(
        num_players=8,
        format=TournamentFormat.SINGLE_ELIMINATION,
        result_pattern=ResultPattern.STRAIGHT_SETS,
        seed=1,
    )
    result = RandomResultSimulator(config).run()
    assert result.games_reported == 2 * 7
    assert all(m.games[2] is None for m in result.orchestrator.matches)


def test_stages_are_advanced():
    config = SimulationConfig(num_players=8, format=TournamentFormat.SWISS, seed=2)
    result = RandomResultSimulator(config).run()
    assert result.stages_advanced == 2
    assert result.orchestrator.current_swiss_round() == 3
