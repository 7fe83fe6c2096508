"""Tournament orchestrator.

The orchestrator is the single entry point for running a tournament. It
owns one tournament's state and delegates to the format generators, the
result processor, the standings calculator and the stage manager.
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
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from matchplay import formats
from matchplay.constants import STAGE_GROUPS
from matchplay.exceptions import MatchPlayException, StageException
from matchplay.models.config import FormatConfig, TournamentFormat
from matchplay.models.match import Match
from matchplay.models.results import GameReport, StageAdvance
from matchplay.models.standings import Standings
from matchplay.models.state import TournamentState
from matchplay.tournament.result_processor import MatchResultProcessor
from matchplay.tournament.stage_manager import StageManager, current_swiss_round
from matchplay.tournament.standings_calculator import StandingsCalculator
from matchplay.type_hints import PlayerIndex
from matchplay.utils import setup_logger

logger = setup_logger(__name__)


class TournamentOrchestrator:
    """Runs one tournament from creation to its final result.

    Every mutating call bumps a revision counter; standings are cached
    against it and recomputed on the next read after a change.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """Initialize an empty orchestrator.

        Args:
            rng: Random source for shuffles, for reproducible tournaments
        """
        self.rng = rng
        self.state: Optional[TournamentState] = None
        self.result_processor = MatchResultProcessor()
        self.standings_calculator = StandingsCalculator()
        self.stage_manager = StageManager(
            self.standings_calculator, self.result_processor
        )
        self._revision = 0
        self._standings_cache: Optional[Tuple[int, Standings]] = None

    # ========== Properties ==========

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def players(self) -> List[str]:
        return self._require_state().players

    @property
    def matches(self) -> List[Match]:
        return self._require_state().matches

    @property
    def format(self) -> TournamentFormat:
        return self._require_state().format

    @property
    def current_stage(self) -> Optional[str]:
        return self._require_state().current_stage

    def _require_state(self) -> TournamentState:
        if self.state is None:
            raise MatchPlayException("No tournament has been created")
        return self.state

    def _touch(self) -> None:
        self._revision += 1

    # ========== Creation ==========

    def create(
        self,
        players: Sequence[str],
        fmt: Union[str, TournamentFormat],
        config: Optional[FormatConfig] = None,
    ) -> List[Match]:
        """Generate every match of a new tournament.

        Unlike :meth:`report_game_result` and :meth:`advance_stage`, which
        return their rejection as an ``error`` on the result value, a bad
        setup raises. Nothing is stored until generation succeeds.

        Args:
            players: Ordered roster; a player's identity is their index
            fmt: Format enum member or its tag (e.g. ``"swiss"``)
            config: Format parameters, the format default when omitted

        Returns:
            The generated match list

        Raises:
            InvalidConfigurationException: Bad player count or parameters
            NoValidStructureException: Round robin generation gave up
        """
        fmt = TournamentFormat.from_value(fmt)
        roster = list(players)
        formats.validate_player_count(fmt, len(roster))
        if config is None:
            config = formats.default_config(fmt, len(roster))

        matches = formats.generate_matches(fmt, roster, config, self.rng)
        self.result_processor.resolve_byes(matches)

        warning = formats.player_count_warning(fmt, len(roster))
        if warning:
            logger.warning(warning)

        self.state = TournamentState(
            players=roster,
            format=fmt,
            format_config=config,
            matches=matches,
            current_stage=STAGE_GROUPS if fmt is TournamentFormat.GROUP_STAGE else None,
        )
        self._touch()
        logger.info(
            f"Created {fmt.value} tournament: {len(roster)} players, "
            f"{len(matches)} matches"
        )
        return matches

    # ========== Results ==========

    def report_game_result(
        self, match_id: int, game_index: int, side: int
    ) -> GameReport:
        """Record one game; see :meth:`MatchResultProcessor.report_game_result`."""
        report = self.result_processor.report_game_result(
            self.matches, match_id, game_index, side
        )
        if report.updated:
            self._touch()
        if report.transitioned:
            logger.info(
                f"Match {match_id} "
                + (
                    f"won by side {report.match.winner}"
                    if report.match.winner is not None
                    else "reopened"
                )
            )
        return report

    def get_standings(self) -> Standings:
        """Current standings, recomputed only after a change."""
        if self._standings_cache and self._standings_cache[0] == self._revision:
            return self._standings_cache[1]
        state = self._require_state()
        standings = self.standings_calculator.calculate(
            state.format, state.players, state.matches, state.current_stage
        )
        self._standings_cache = (self._revision, standings)
        return standings

    # ========== Stages ==========

    def is_stage_complete(self) -> bool:
        return self.stage_manager.is_stage_complete(self._require_state())

    def can_advance_stage(self) -> bool:
        return self.stage_manager.can_advance_stage(self._require_state())

    def is_complete(self) -> bool:
        return self.stage_manager.is_tournament_complete(self._require_state())

    def advance_stage(self) -> StageAdvance:
        """Pair the next Swiss round or start the playoffs.

        Returns:
            StageAdvance; ``success`` is False with ``error`` set when the
            stage is incomplete or there is nothing to advance to
        """
        try:
            result = self.stage_manager.advance_stage(self._require_state())
        except StageException as e:
            logger.info(f"Stage advance rejected: {e}")
            return StageAdvance(success=False, error=str(e))
        self._touch()
        return result

    def current_swiss_round(self) -> Optional[int]:
        if self.format is not TournamentFormat.SWISS:
            return None
        return current_swiss_round(self.matches)

    # ========== Queries ==========

    def get_match(self, match_id: int) -> Optional[Match]:
        if isinstance(match_id, bool) or not isinstance(match_id, int):
            return None
        matches = self.matches
        if 0 <= match_id < len(matches):
            return matches[match_id]
        return None

    def get_player_schedule(self, player_index: PlayerIndex) -> List[Match]:
        """Matches the player has been placed in, in id order."""
        return [m for m in self.matches if m.involves(player_index)]

    def get_progress(self) -> Dict[str, Any]:
        """Completed and total playable matches.

        Byes are not counted; neither are matches still waiting on players.
        """
        playable = [m for m in self.matches if m.is_ready]
        completed = sum(1 for m in playable if m.winner is not None)
        total = len(playable)
        return {
            "completed": completed,
            "total": total,
            "percentage": round(100.0 * completed / total, 1) if total else 0.0,
        }

    def format_info(self) -> Dict[str, Any]:
        return formats.format_info(self.format)

    # ========== Persistence ==========

    def to_state(self) -> TournamentState:
        return self._require_state()

    @classmethod
    def from_state(
        cls, state: TournamentState, rng: Optional[random.Random] = None
    ) -> "TournamentOrchestrator":
        """Resume a tournament from stored state.

        Advancement is replayed so downstream slots dropped by the storage
        layer are filled in again.

        Raises:
            BracketIntegrityException: If the stored bracket is malformed
        """
        orchestrator = cls(rng=rng)
        formats.validate_bracket(state.matches)
        orchestrator.result_processor.rebuild(state.matches)
        if state.format is TournamentFormat.GROUP_STAGE and not state.current_stage:
            state.current_stage = STAGE_GROUPS
        orchestrator.state = state
        orchestrator._touch()
        logger.info(
            f"Loaded {state.format.value} tournament with {len(state.matches)} matches"
        )
        return orchestrator
