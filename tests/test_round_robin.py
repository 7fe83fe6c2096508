import random
from collections import Counter

import pytest

from matchplay.exceptions import InvalidConfigurationException, NoValidStructureException
from matchplay.formats.round_robin import RoundRobinEngine
from matchplay.models.config import RoundRobinConfig, TournamentFormat
from matchplay.tournament.orchestrator import TournamentOrchestrator


def _names(n):
    return [f"P{i}" for i in range(n)]


@pytest.mark.parametrize(
    "num_players,matches_per_player",
    [(4, 1), (4, 3), (5, 2), (5, 4), (6, 3), (7, 4), (8, 3), (9, 4), (10, 5), (12, 11)],
)
def test_every_player_hits_quota(num_players, matches_per_player):
    engine = RoundRobinEngine()
    pairings = engine.generate_pairings(
        num_players, matches_per_player, random.Random(num_players * 31)
    )

    assert len(pairings) == num_players * matches_per_player // 2
    counts = Counter(p for pair in pairings for p in pair)
    assert all(counts[p] == matches_per_player for p in range(num_players))
    assert all(p1 != p2 for p1, p2 in pairings)
    assert len({frozenset(pair) for pair in pairings}) == len(pairings)


def test_eight_players_three_matches_gives_twelve_matches():
    orchestrator = TournamentOrchestrator(rng=random.Random(1))
    matches = orchestrator.create(
        _names(8), TournamentFormat.ROUND_ROBIN, RoundRobinConfig(matches_per_player=3)
    )

    assert len(matches) == 12
    assert [m.id for m in matches] == list(range(12))
    assert all(m.is_ready and m.winner is None for m in matches)


def test_odd_player_slot_total_is_rejected():
    with pytest.raises(InvalidConfigurationException):
        RoundRobinEngine.total_matches(7, 3)

    orchestrator = TournamentOrchestrator()
    with pytest.raises(InvalidConfigurationException):
        orchestrator.create(
            _names(7), "round-robin", RoundRobinConfig(matches_per_player=3)
        )
    assert orchestrator.state is None


def test_valid_matches_per_player_options():
    assert RoundRobinEngine.valid_matches_per_player(7) == [2, 4, 6]
    assert RoundRobinEngine.valid_matches_per_player(4) == [1, 2, 3]


def test_matches_per_player_must_be_below_roster_size():
    with pytest.raises(InvalidConfigurationException):
        RoundRobinEngine().validate_config(RoundRobinConfig(matches_per_player=4), 4)


def test_gives_up_when_attempts_are_exhausted():
    engine = RoundRobinEngine(max_attempts=0)
    with pytest.raises(NoValidStructureException, match="no valid match structure"):
        engine.generate_pairings(4, 3, random.Random(0))


def test_roster_limits():
    orchestrator = TournamentOrchestrator()
    with pytest.raises(InvalidConfigurationException):
        orchestrator.create(_names(2), "round-robin")
    with pytest.raises(InvalidConfigurationException):
        orchestrator.create(_names(13), "round-robin")
