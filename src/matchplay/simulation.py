"""Random result simulator.

Plays a tournament to completion with seeded random game results. Used by
the test suite and the ``simulate`` command to exercise every format end
to end.
"""

# Match Play
# Copyright (C) 2025  Match Play developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from matchplay.constants import GAMES_PER_MATCH, SIDE_PLAYER1, SIDE_PLAYER2
from matchplay.exceptions import MatchPlayException
from matchplay.models.config import FormatConfig, TournamentFormat
from matchplay.models.match import Match
from matchplay.models.standings import Standings
from matchplay.tournament.orchestrator import TournamentOrchestrator
from matchplay.utils import setup_logger

logger = setup_logger(__name__)


class ResultPattern(Enum):
    """How simulated games are decided."""

    RANDOM = "random"
    FAVOURITES = "favourites"
    STRAIGHT_SETS = "straight_sets"


@dataclass
class SimulationConfig:
    """Configuration for a simulated tournament."""

    num_players: int
    format: TournamentFormat
    format_config: Optional[FormatConfig] = None
    result_pattern: ResultPattern = ResultPattern.RANDOM
    seed: Optional[int] = None
    favourite_win_rate: float = 0.65
    max_steps: int = 10000


@dataclass
class SimulationResult:
    """Summary of a simulated tournament."""

    orchestrator: TournamentOrchestrator
    completed: bool
    steps: int
    games_reported: int
    stages_advanced: int
    standings: Standings
    champion: Optional[int] = None
    errors: List[str] = field(default_factory=list)


class RandomResultSimulator:
    """Plays a tournament with random game results until nothing is left."""

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )

    def player_names(self) -> List[str]:
        return [f"Player {i + 1}" for i in range(self.config.num_players)]

    def pick_game_winner(self, match: Match, decided: Optional[int]) -> int:
        """Side that wins the next game of ``match``.

        ``decided`` is the side chosen for the whole match by patterns that
        fix it up front.
        """
        pattern = self.config.result_pattern
        if pattern is ResultPattern.STRAIGHT_SETS and decided is not None:
            return decided
        if pattern is ResultPattern.FAVOURITES:
            # lower roster index is the favourite
            favourite = SIDE_PLAYER1 if match.player1 < match.player2 else SIDE_PLAYER2
            underdog = SIDE_PLAYER2 if favourite == SIDE_PLAYER1 else SIDE_PLAYER1
            if self.random.random() < self.config.favourite_win_rate:
                return favourite
            return underdog
        return self.random.choice((SIDE_PLAYER1, SIDE_PLAYER2))

    def play_match(self, orchestrator: TournamentOrchestrator, match: Match) -> int:
        """Report games until the match is decided. Returns games reported."""
        decided = self.random.choice((SIDE_PLAYER1, SIDE_PLAYER2))
        reported = 0
        for game_index in range(GAMES_PER_MATCH):
            if match.winner is not None:
                break
            side = self.pick_game_winner(match, decided)
            report = orchestrator.report_game_result(match.id, game_index, side)
            if report.error:
                raise MatchPlayException(
                    f"Simulated report rejected for match {match.id}: {report.error}"
                )
            reported += 1
        return reported

    def run(self) -> SimulationResult:
        """Create the tournament and play it out.

        Each step plays every ready match; when none is left the stage is
        advanced. The loop stops when neither is possible or after
        ``max_steps`` steps.
        """
        orchestrator = TournamentOrchestrator(rng=self.random)
        orchestrator.create(
            self.player_names(), self.config.format, self.config.format_config
        )

        steps = 0
        games = 0
        stages = 0
        errors: List[str] = []

        while steps < self.config.max_steps:
            steps += 1
            pending = [
                m for m in orchestrator.matches if m.is_ready and m.winner is None
            ]
            if pending:
                for match in pending:
                    games += self.play_match(orchestrator, match)
                continue

            if orchestrator.can_advance_stage():
                advance = orchestrator.advance_stage()
                if not advance.success:
                    errors.append(advance.error)
                    break
                stages += 1
                continue
            break

        standings = orchestrator.get_standings()
        completed = orchestrator.is_complete()
        champion = standings.ranked_rows[0].player_index if completed else None

        logger.info(
            f"Simulated {self.config.format.value}: {steps} steps, {games} games, "
            f"{stages} stage advances, completed={completed}"
        )
        return SimulationResult(
            orchestrator=orchestrator,
            completed=completed,
            steps=steps,
            games_reported=games,
            stages_advanced=stages,
            standings=standings,
            champion=champion,
            errors=errors,
        )
