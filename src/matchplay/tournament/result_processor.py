"""Game-by-game result recording and bracket advancement.

A match is pending until one side has won two games, reading the game slots
in order, and decided from then on. Deciding a match pushes its players
along the match's feed edges; undeciding it pulls them back out again and
clears every downstream result that depended on them.
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

from matchplay.constants import (
    ERROR_BYE_MATCH,
    ERROR_EARLIER_GAME,
    ERROR_INVALID_GAME,
    ERROR_INVALID_SIDE,
    ERROR_MATCH_COMPLETED,
    ERROR_MATCH_NOT_FOUND,
    ERROR_MATCH_NOT_READY,
    GAMES_PER_MATCH,
    GAMES_TO_WIN,
    SIDE_PLAYER1,
    SIDE_PLAYER2,
)
from matchplay.exceptions import BracketIntegrityException, SequenceException
from matchplay.models.match import FeedEdge, Match
from matchplay.models.results import GameReport
from matchplay.type_hints import GameSlot, PlayerIndex
from matchplay.utils import setup_logger

logger = setup_logger(__name__)


def decide(games: List[GameSlot]) -> Tuple[Optional[int], Optional[int]]:
    """Scan game slots in order for the first side to reach two wins.

    Returns:
        (winning side, slot index where it happened), both None if undecided
    """
    wins = {SIDE_PLAYER1: 0, SIDE_PLAYER2: 0}
    for index, game in enumerate(games):
        if game in wins:
            wins[game] += 1
            if wins[game] >= GAMES_TO_WIN:
                return game, index
    return None, None


class MatchResultProcessor:
    """Applies game reports to a match list and keeps the bracket consistent.

    The processor holds no state of its own; every call works on the list
    it is given, where ``matches[i].id == i``.
    """

    def report_game_result(
        self, matches: List[Match], match_id: int, game_index: int, side: int
    ) -> GameReport:
        """Record that ``side`` won game ``game_index`` of a match.

        Reporting the side already stored in a slot toggles it off and clears
        every later slot. Rejected reports leave the match list untouched.

        Args:
            matches: The tournament's match list
            match_id: Id of the match
            game_index: Game slot, 0 to 2
            side: 1 for player1, 2 for player2

        Returns:
            GameReport with the updated match, or with ``error`` set

        Raises:
            BracketIntegrityException: If a feed edge of the match is broken
        """
        match = self._find(matches, match_id)
        if match is None:
            return GameReport(error=ERROR_MATCH_NOT_FOUND)

        try:
            self._check_report(match, game_index, side)
        except SequenceException as e:
            logger.debug(f"Rejected report for match {match_id}: {e}")
            return GameReport(match=match, error=str(e))

        previous_winner = match.winner

        if match.games[game_index] == side:
            for index in range(game_index, GAMES_PER_MATCH):
                match.games[index] = None
        else:
            match.games[game_index] = side

        winner, decided_at = decide(match.games)
        if decided_at is not None:
            for index in range(decided_at + 1, GAMES_PER_MATCH):
                match.games[index] = None

        transitioned = winner != previous_winner
        if transitioned and previous_winner is not None:
            self.retract(matches, match)
        match.winner = winner
        if transitioned and winner is not None:
            self.advance(matches, match)

        logger.debug(
            f"Match {match.id} game {game_index + 1} -> side {side}: "
            f"games={match.games} winner={match.winner}"
        )
        return GameReport(match=match, updated=True, transitioned=transitioned)

    @staticmethod
    def _find(matches: List[Match], match_id: int) -> Optional[Match]:
        if isinstance(match_id, bool) or not isinstance(match_id, int):
            return None
        if 0 <= match_id < len(matches):
            return matches[match_id]
        return None

    @staticmethod
    def _check_report(match: Match, game_index: int, side: int) -> None:
        """Raise SequenceException if the report may not be applied."""
        if (
            isinstance(game_index, bool)
            or not isinstance(game_index, int)
            or game_index not in range(GAMES_PER_MATCH)
        ):
            raise SequenceException(ERROR_INVALID_GAME)
        if (
            isinstance(side, bool)
            or not isinstance(side, int)
            or side not in (SIDE_PLAYER1, SIDE_PLAYER2)
        ):
            raise SequenceException(ERROR_INVALID_SIDE)
        if match.is_bye:
            raise SequenceException(ERROR_BYE_MATCH)
        if not match.is_ready:
            raise SequenceException(ERROR_MATCH_NOT_READY)
        if any(match.games[i] is None for i in range(game_index)):
            raise SequenceException(ERROR_EARLIER_GAME)
        if match.winner is not None and match.games[game_index] is None:
            raise SequenceException(ERROR_MATCH_COMPLETED)

    # ---- advancement ----

    def _routes(self, match: Match) -> List[Tuple[FeedEdge, Optional[PlayerIndex]]]:
        """Edges of a decided match paired with the player each one carries."""
        routes = []
        for edge in (match.feeds_into, match.feeds_into_win):
            if edge is not None:
                routes.append((edge, match.winner_index))
        for edge in (match.feeds_into_loss, match.loser_feeds_into):
            if edge is not None:
                routes.append((edge, match.loser_index))
        return routes

    def _target(self, matches: List[Match], source: Match, edge: FeedEdge) -> Match:
        if not 0 <= edge.match_id < len(matches):
            raise BracketIntegrityException(
                f"Match {source.id} feeds missing match {edge.match_id}"
            )
        if edge.slot not in (SIDE_PLAYER1, SIDE_PLAYER2):
            raise BracketIntegrityException(
                f"Match {source.id} feeds invalid slot {edge.slot}"
            )
        return matches[edge.match_id]

    def advance(self, matches: List[Match], match: Match) -> None:
        """Place the players of a decided match into their next matches.

        Placing a player into a slot that already holds them is a no-op, so
        the same match can be advanced again after a reload.
        """
        if match.winner is None:
            return

        for edge, player in self._routes(match):
            if player is None:
                # the loser of a bye goes nowhere
                continue
            target = self._target(matches, match, edge)
            current = target.get_player(edge.slot)
            if current is not None and current != player:
                raise BracketIntegrityException(
                    f"Slot {edge.slot} of match {target.id} already holds "
                    f"player {current}, cannot place player {player}"
                )
            target.set_player(edge.slot, player)
            if target.player1 is not None and target.player2 is not None:
                target.is_placeholder = False
            logger.debug(
                f"Match {match.id}: player {player} -> match {target.id} slot {edge.slot}"
            )

        if match.reset_match_id is not None:
            self._update_reset(matches, match)

    def _update_reset(self, matches: List[Match], grand_final: Match) -> None:
        """Fill the bracket reset only when the losers bracket side won."""
        reset = matches[grand_final.reset_match_id]
        if grand_final.winner == SIDE_PLAYER2:
            reset.player1 = grand_final.player1
            reset.player2 = grand_final.player2
            reset.is_placeholder = False
            logger.info(f"Grand final {grand_final.id} reset into match {reset.id}")
        else:
            self._clear_match(matches, reset)

    def retract(self, matches: List[Match], match: Match) -> None:
        """Undo :meth:`advance` for a match that is about to lose its winner.

        Every downstream slot holding a player from this match is emptied;
        the downstream match becomes a placeholder again and its own result
        is cleared, recursively.
        """
        involved = {match.player1, match.player2} - {None}
        for edge in match.outgoing_edges():
            target = self._target(matches, match, edge)
            if target.get_player(edge.slot) not in involved:
                continue
            self._clear_match(matches, target)
            target.set_player(edge.slot, None)
            target.is_placeholder = True
            logger.debug(f"Match {match.id}: cleared match {target.id} slot {edge.slot}")

        if match.reset_match_id is not None:
            self._clear_match(matches, matches[match.reset_match_id])

    def _clear_match(self, matches: List[Match], match: Match) -> None:
        """Drop a match's result along with everything it advanced."""
        if match.winner is not None:
            self.retract(matches, match)
        match.reset_result()
        if match.is_conditional:
            match.player1 = None
            match.player2 = None
            match.is_placeholder = True

    # ---- whole bracket ----

    def resolve_byes(self, matches: List[Match]) -> int:
        """Advance every decided bye. Returns how many were advanced."""
        count = 0
        for match in matches:
            if match.is_bye and match.winner is not None:
                self.advance(matches, match)
                count += 1
        if count:
            logger.debug(f"Advanced {count} bye(s)")
        return count

    def rebuild(self, matches: List[Match]) -> None:
        """Re-run advancement for every decided match in id order.

        Used after loading, when a storage layer may have lost downstream
        player slots. Feed edges always point forward, so one pass suffices.
        """
        for match in matches:
            if match.winner is not None:
                self.advance(matches, match)
        for match in matches:
            if match.is_bye:
                continue
            if match.player1 is None or match.player2 is None:
                match.is_placeholder = True
