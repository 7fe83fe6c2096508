"""Stage and round progression.

This module decides when a stage is finished and performs the transitions
between stages: pairing the next Swiss round and seeding the playoff bracket
of a group stage tournament.
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

from typing import List, Optional, Tuple

from matchplay.constants import SIDE_PLAYER1, STAGE_GROUPS, STAGE_PLAYOFFS
from matchplay.exceptions import StageException
from matchplay.formats.group_stage import GroupStageEngine, group_matches, playoff_matches
from matchplay.formats.swiss import SwissEngine
from matchplay.models.config import GroupStageConfig, SwissConfig, TournamentFormat
from matchplay.models.match import Match
from matchplay.models.results import StageAdvance
from matchplay.models.state import TournamentState
from matchplay.tournament.result_processor import MatchResultProcessor
from matchplay.tournament.standings_calculator import (
    StandingsCalculator,
    elimination_champion,
)
from matchplay.type_hints import PlayerIndex
from matchplay.utils import setup_logger

logger = setup_logger(__name__)


def _all_decided(matches: List[Match]) -> bool:
    """Every match that can be played has a winner."""
    return all(m.winner is not None for m in matches if m.is_ready or m.is_bye)


def current_swiss_round(matches: List[Match]) -> int:
    """Highest round with paired matches, 0 if nothing is paired."""
    return max((m.round or 0 for m in matches if not m.is_placeholder), default=0)


class StageManager:
    """Completion checks and stage transitions for a tournament state.

    This class is responsible for:
    - Detecting whether the current round or stage is finished
    - Pairing the next Swiss round from the standings
    - Moving a group stage tournament into its playoffs
    """

    def __init__(
        self,
        standings_calculator: Optional[StandingsCalculator] = None,
        result_processor: Optional[MatchResultProcessor] = None,
    ):
        self.standings_calculator = standings_calculator or StandingsCalculator()
        self.result_processor = result_processor or MatchResultProcessor()

    # ========== Completion ==========

    def is_stage_complete(self, state: TournamentState) -> bool:
        """Whether the current stage (or Swiss round) has been fully played."""
        fmt = state.format
        matches = state.matches

        if fmt is TournamentFormat.ROUND_ROBIN:
            return _all_decided(matches)
        elif fmt is TournamentFormat.SWISS:
            round_number = current_swiss_round(matches)
            return _all_decided([m for m in matches if m.round == round_number])
        elif fmt.is_elimination:
            return elimination_champion(matches) is not None and _all_decided(matches)
        elif fmt is TournamentFormat.GROUP_STAGE:
            if state.current_stage == STAGE_PLAYOFFS:
                bracket = playoff_matches(matches)
                return elimination_champion(bracket) is not None and _all_decided(
                    bracket
                )
            return _all_decided(group_matches(matches))
        raise ValueError(f"Unhandled tournament format: {fmt!r}")

    def has_next_stage(self, state: TournamentState) -> bool:
        if state.format is TournamentFormat.SWISS:
            config: SwissConfig = state.format_config
            return current_swiss_round(state.matches) < config.rounds
        if state.format is TournamentFormat.GROUP_STAGE:
            return state.current_stage != STAGE_PLAYOFFS
        return False

    def can_advance_stage(self, state: TournamentState) -> bool:
        return self.has_next_stage(state) and self.is_stage_complete(state)

    def is_tournament_complete(self, state: TournamentState) -> bool:
        return self.is_stage_complete(state) and not self.has_next_stage(state)

    # ========== Transitions ==========

    def advance_stage(self, state: TournamentState) -> StageAdvance:
        """Move the tournament to its next round or stage.

        Raises:
            StageException: If the stage is incomplete or has no successor
        """
        if not self.has_next_stage(state):
            raise StageException("no next stage")
        if not self.is_stage_complete(state):
            raise StageException("current stage is not complete")

        if state.format is TournamentFormat.SWISS:
            return self._next_swiss_round(state)
        return self._advance_to_playoffs(state)

    def _next_swiss_round(self, state: TournamentState) -> StageAdvance:
        round_number = current_swiss_round(state.matches) + 1
        standings = self.standings_calculator.swiss(state.players, state.matches)
        previous: List[Tuple[PlayerIndex, Optional[PlayerIndex]]] = [
            (m.player1, m.player2)
            for m in state.matches
            if not m.is_placeholder and m.player1 is not None
        ]

        pairings = SwissEngine().generate_round_pairings(
            standings.ranked_rows, previous
        )
        slots = [
            m for m in state.matches if m.round == round_number and m.is_placeholder
        ]
        if len(pairings) > len(slots):
            raise StageException(
                f"Round {round_number} has {len(slots)} match slots "
                f"but {len(pairings)} pairings"
            )

        for match, (p1, p2) in zip(slots, pairings):
            match.player1 = p1
            match.player2 = p2
            match.is_placeholder = False
            match.reset_result()
            if p2 is None:
                match.is_bye = True
                match.winner = SIDE_PLAYER1

        logger.info(f"Paired Swiss round {round_number}: {len(pairings)} matches")
        return StageAdvance(success=True, round=round_number)

    def _advance_to_playoffs(self, state: TournamentState) -> StageAdvance:
        config: GroupStageConfig = state.format_config
        rankings = self.standings_calculator.group_rankings(
            state.players, state.matches
        )
        seeds = GroupStageEngine().seed_playoffs(
            state.matches, rankings, config.advancing_per_group
        )
        self.result_processor.resolve_byes(state.matches)
        state.current_stage = STAGE_PLAYOFFS

        logger.info(
            f"Advanced from {STAGE_GROUPS} to {STAGE_PLAYOFFS} with {len(seeds)} players"
        )
        return StageAdvance(
            success=True, stage=STAGE_PLAYOFFS, advancing_players=seeds
        )
