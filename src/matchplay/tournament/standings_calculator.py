"""Standings and tiebreak calculation.

Round robin and group tables use match points with game bonuses, Swiss uses
match wins with opponent based tiebreaks, and the elimination formats rank
by how far each player got in the bracket.
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

import functools
from collections import Counter
from typing import Callable, Dict, List, Optional, Sequence

from matchplay.constants import (
    BRACKET_GRAND_FINALS,
    BRACKET_LOSERS,
    BRACKET_WINNERS,
    GAME_LOSS_POINTS,
    GAME_WIN_POINTS,
    MATCH_WIN_POINTS,
    PERCENTAGE_EPSILON,
    POINTS_EPSILON,
    SIDE_PLAYER1,
    SIDE_PLAYER2,
    STAGE_GROUPS,
    STAGE_PLAYOFFS,
)
from matchplay.models.config import TournamentFormat
from matchplay.models.match import Match
from matchplay.models.standings import Standings, StandingsRow
from matchplay.type_hints import PlayerIndex
from matchplay.utils import setup_logger

logger = setup_logger(__name__)

Comparator = Callable[[StandingsRow, StandingsRow], int]
RankKey = Callable[[StandingsRow, StandingsRow], bool]


def _compare_float(a: float, b: float, epsilon: float) -> int:
    if abs(a - b) <= epsilon:
        return 0
    return 1 if a > b else -1


def _compare_int(a: int, b: int) -> int:
    if a == b:
        return 0
    return 1 if a > b else -1


def elimination_champion(matches: Sequence[Match]) -> Optional[PlayerIndex]:
    """Winner of the deciding final, None while it is still open."""
    finals = [
        m
        for m in matches
        if m.stage != STAGE_GROUPS
        and not m.is_third_place
        and not m.is_conditional
        and not m.outgoing_edges()
    ]
    if not finals:
        return None
    final = finals[-1]
    if final.winner is None:
        return None
    if final.reset_match_id is not None and final.winner == SIDE_PLAYER2:
        reset = matches[final.reset_match_id]
        return reset.winner_index
    return final.winner_index


class StandingsCalculator:
    """Builds ranked standings from a match list."""

    def calculate(
        self,
        fmt: TournamentFormat,
        players: Sequence[str],
        matches: Sequence[Match],
        current_stage: Optional[str] = None,
    ) -> Standings:
        """Rank every player under the rules of ``fmt``.

        Group stage tournaments use group tables while the groups are being
        played and playoff standings afterwards.
        """
        if fmt is TournamentFormat.ROUND_ROBIN:
            return self.round_robin(players, matches)
        elif fmt is TournamentFormat.SWISS:
            return self.swiss(players, matches)
        elif fmt is TournamentFormat.SINGLE_ELIMINATION:
            return self.single_elimination(players, matches)
        elif fmt is TournamentFormat.DOUBLE_ELIMINATION:
            return self.double_elimination(players, matches)
        elif fmt is TournamentFormat.GROUP_STAGE:
            if current_stage == STAGE_PLAYOFFS:
                return self.playoffs(players, matches)
            return self.groups(players, matches)
        raise ValueError(f"Unhandled tournament format: {fmt!r}")

    # ========== Shared bookkeeping ==========

    @staticmethod
    def collect(
        players: Sequence[str], matches: Sequence[Match]
    ) -> List[StandingsRow]:
        """Count wins, losses, games and opponents from decided matches.

        A bye counts as a win and a match played for its recipient.
        """
        rows = [StandingsRow(player_index=i, player=name) for i, name in enumerate(players)]

        for match in matches:
            if match.is_placeholder or match.winner is None:
                continue
            if match.is_bye:
                if match.player1 is not None:
                    row = rows[match.player1]
                    row.wins += 1
                    row.byes += 1
                    row.matches_played += 1
                continue
            if match.player1 is None or match.player2 is None:
                continue

            one = rows[match.player1]
            two = rows[match.player2]
            for game in match.games:
                if game == SIDE_PLAYER1:
                    one.games_won += 1
                    two.games_lost += 1
                elif game == SIDE_PLAYER2:
                    two.games_won += 1
                    one.games_lost += 1

            winner, loser = (one, two) if match.winner == SIDE_PLAYER1 else (two, one)
            winner.wins += 1
            loser.losses += 1
            winner.beaten.append(loser.player_index)
            loser.lost_to.append(winner.player_index)
            one.matches_played += 1
            two.matches_played += 1
            one.opponents.append(two.player_index)
            two.opponents.append(one.player_index)

        return rows

    @staticmethod
    def assign_ranks(rows: List[StandingsRow], same_rank: RankKey) -> Standings:
        """Give each row ``position + 1`` unless it ties the row above it."""
        for position, row in enumerate(rows):
            if position > 0 and same_rank(rows[position - 1], row):
                row.rank = rows[position - 1].rank
            else:
                row.rank = position + 1
        counts = Counter(row.rank for row in rows)
        tied = {rank for rank, count in counts.items() if count > 1}
        return Standings(ranked_rows=rows, tied_ranks=tied)

    @staticmethod
    def _sort(rows: List[StandingsRow], compare: Comparator) -> List[StandingsRow]:
        return sorted(rows, key=functools.cmp_to_key(compare), reverse=True)

    # ========== Round robin ==========

    @staticmethod
    def score_round_robin(rows: Sequence[StandingsRow]) -> None:
        """Points and quality score for round robin style tables."""
        for row in rows:
            row.points = (
                row.wins * MATCH_WIN_POINTS
                + row.games_won * GAME_WIN_POINTS
                + row.games_lost * GAME_LOSS_POINTS
            )
        by_index = {row.player_index: row for row in rows}
        for row in rows:
            row.quality_score = sum(by_index[p].points for p in row.beaten)

    @staticmethod
    def compare_round_robin(a: StandingsRow, b: StandingsRow) -> int:
        """Compare two rows for round robin order.

        Returns:
            1 if a ranks higher, -1 if b ranks higher, 0 if equal
        """
        result = _compare_float(a.points, b.points, POINTS_EPSILON)
        if result:
            return result

        a_won = b.player_index in a.beaten
        b_won = a.player_index in b.beaten
        if a_won and not b_won:
            return 1
        if b_won and not a_won:
            return -1

        result = _compare_float(a.quality_score, b.quality_score, POINTS_EPSILON)
        if result:
            return result
        result = _compare_float(a.win_percentage, b.win_percentage, PERCENTAGE_EPSILON)
        if result:
            return result
        result = _compare_int(a.game_differential, b.game_differential)
        if result:
            return result
        return _compare_int(a.games_won, b.games_won)

    @staticmethod
    def same_round_robin_rank(a: StandingsRow, b: StandingsRow) -> bool:
        return (
            abs(a.points - b.points) < POINTS_EPSILON
            and abs(a.quality_score - b.quality_score) < POINTS_EPSILON
        )

    def round_robin(
        self, players: Sequence[str], matches: Sequence[Match]
    ) -> Standings:
        rows = self.collect(players, matches)
        self.score_round_robin(rows)
        ordered = self._sort(rows, self.compare_round_robin)
        return self.assign_ranks(ordered, self.same_round_robin_rank)

    # ========== Group stage ==========

    def groups(self, players: Sequence[str], matches: Sequence[Match]) -> Standings:
        """Overall round robin table with in-group ranks filled in.

        Players who were never placed in a group stay in the table with no
        group and sort to the bottom.
        """
        group_stage = [m for m in matches if m.stage == STAGE_GROUPS]
        rows = self.collect(players, group_stage)
        self.score_round_robin(rows)

        membership: Dict[PlayerIndex, str] = {}
        for match in group_stage:
            for player in (match.player1, match.player2):
                if player is not None:
                    membership[player] = match.group
        for row in rows:
            row.group = membership.get(row.player_index)

        for table in self.group_tables(rows).values():
            self.assign_ranks(table, self.same_round_robin_rank)
            for row in table:
                row.group_rank = row.rank

        placed = [row for row in rows if row.group is not None]
        unplaced = [row for row in rows if row.group is None]
        ordered = self._sort(placed, self.compare_round_robin) + unplaced
        return self.assign_ranks(ordered, self.same_round_robin_rank)

    def group_tables(
        self, rows: Sequence[StandingsRow]
    ) -> Dict[str, List[StandingsRow]]:
        """Rows of each group in round robin order, keyed by group letter."""
        tables: Dict[str, List[StandingsRow]] = {}
        for row in rows:
            if row.group is not None:
                tables.setdefault(row.group, []).append(row)
        return {
            letter: self._sort(table, self.compare_round_robin)
            for letter, table in sorted(tables.items())
        }

    def group_rankings(
        self, players: Sequence[str], matches: Sequence[Match]
    ) -> Dict[str, List[PlayerIndex]]:
        """Players of every group in finishing order."""
        standings = self.groups(players, matches)
        return {
            letter: [row.player_index for row in table]
            for letter, table in self.group_tables(standings.ranked_rows).items()
        }

    # ========== Swiss ==========

    @staticmethod
    def compare_swiss(a: StandingsRow, b: StandingsRow) -> int:
        result = _compare_float(a.points, b.points, POINTS_EPSILON)
        if result:
            return result
        for attr in ("omw", "gwp", "ogw"):
            result = _compare_float(
                getattr(a, attr), getattr(b, attr), PERCENTAGE_EPSILON
            )
            if result:
                return result
        return _compare_int(a.games_won, b.games_won)

    @staticmethod
    def same_swiss_rank(a: StandingsRow, b: StandingsRow) -> bool:
        return (
            abs(a.points - b.points) < POINTS_EPSILON
            and abs(a.omw - b.omw) < PERCENTAGE_EPSILON
        )

    def swiss(self, players: Sequence[str], matches: Sequence[Match]) -> Standings:
        """Swiss table.

        OMW is total opponent match wins over total opponent matches played;
        OGW is the same ratio over games.
        """
        rows = self.collect(players, matches)
        by_index = {row.player_index: row for row in rows}

        for row in rows:
            row.points = row.wins * MATCH_WIN_POINTS

            opponent_wins = sum(by_index[p].wins for p in row.opponents)
            opponent_matches = sum(by_index[p].matches_played for p in row.opponents)
            row.omw = opponent_wins / opponent_matches if opponent_matches else 0.0
            row.quality_score = float(opponent_wins)

            total_games = row.games_won + row.games_lost
            row.gwp = row.games_won / total_games if total_games else 0.0

            opponent_games_won = sum(by_index[p].games_won for p in row.opponents)
            opponent_games = sum(
                by_index[p].games_won + by_index[p].games_lost for p in row.opponents
            )
            row.ogw = opponent_games_won / opponent_games if opponent_games else 0.0

        ordered = self._sort(rows, self.compare_swiss)
        return self.assign_ranks(ordered, self.same_swiss_rank)

    # ========== Elimination ==========

    @staticmethod
    def compare_elimination(a: StandingsRow, b: StandingsRow) -> int:
        result = _compare_int(a.depth, b.depth)
        if result:
            return result
        result = _compare_int(a.wins, b.wins)
        if result:
            return result
        return _compare_int(a.game_differential, b.game_differential)

    @staticmethod
    def same_elimination_rank(a: StandingsRow, b: StandingsRow) -> bool:
        return a.depth == b.depth and a.wins == b.wins

    def single_elimination(
        self, players: Sequence[str], matches: Sequence[Match]
    ) -> Standings:
        return self._knockout(players, list(matches))

    def playoffs(self, players: Sequence[str], matches: Sequence[Match]) -> Standings:
        bracket = [m for m in matches if m.stage == STAGE_PLAYOFFS]
        standings = self._knockout(players, bracket)
        membership = {
            p: m.group
            for m in matches
            if m.stage == STAGE_GROUPS
            for p in (m.player1, m.player2)
            if p is not None
        }
        for row in standings.ranked_rows:
            row.group = membership.get(row.player_index)
        return standings

    def _knockout(self, players: Sequence[str], bracket: List[Match]) -> Standings:
        """Single elimination standings over one bracket.

        Depth is the furthest round reached, plus one for the champion.
        """
        rows = self.collect(players, bracket)
        total_rounds = max((m.round or 0 for m in bracket), default=0)

        for match in bracket:
            if match.is_third_place:
                continue
            for player in (match.player1, match.player2):
                if player is not None:
                    rows[player].depth = max(rows[player].depth, match.round or 0)
            if match.winner is not None and not match.is_bye:
                loser = match.loser_index
                if loser is not None and rows[loser].round_eliminated is None:
                    rows[loser].round_eliminated = match.round

        champion = elimination_champion(bracket)
        if champion is not None:
            rows[champion].depth = total_rounds + 1
            rows[champion].final_position = 1

        third_place = next((m for m in bracket if m.is_third_place), None)
        for row in rows:
            if row.final_position is not None or row.round_eliminated is None:
                continue
            row.final_position = 2 ** (total_rounds - row.round_eliminated) + 1
        if third_place is not None and third_place.winner is not None:
            rows[third_place.winner_index].final_position = 3
            rows[third_place.loser_index].final_position = 4

        ordered = self._sort(rows, self.compare_elimination)
        return self.assign_ranks(ordered, self.same_elimination_rank)

    def double_elimination(
        self, players: Sequence[str], matches: Sequence[Match]
    ) -> Standings:
        """Double elimination standings.

        Every match is mapped onto one progress ladder: winners bracket
        round ``r`` sits level with the losers round its losers drop into,
        the losers rounds follow in order, then the grand final and reset.
        A player's depth is the highest level they have played at, plus
        one for the champion; elimination is the second loss.
        """
        rows = self.collect(players, matches)
        losers_rounds = max(
            (m.round or 0 for m in matches if m.bracket == BRACKET_LOSERS), default=0
        )
        losers_sizes = Counter(
            m.round for m in matches if m.bracket == BRACKET_LOSERS
        )

        def level(match: Match) -> int:
            if match.bracket == BRACKET_WINNERS:
                return 1 if match.round == 1 else 2 * ((match.round or 1) - 1)
            if match.bracket == BRACKET_LOSERS:
                return match.round or 0
            if match.bracket == BRACKET_GRAND_FINALS:
                return losers_rounds + (match.round or 1)
            return 0

        loss_count: Dict[PlayerIndex, int] = Counter()
        for match in matches:
            for player in (match.player1, match.player2):
                if player is not None:
                    rows[player].depth = max(rows[player].depth, level(match))
            if match.winner is None or match.is_bye:
                continue
            loser = match.loser_index
            if loser is None:
                continue
            loss_count[loser] += 1
            if loss_count[loser] == 2 and rows[loser].round_eliminated is None:
                rows[loser].round_eliminated = match.round
                if match.bracket == BRACKET_LOSERS:
                    later = sum(
                        size
                        for lb_round, size in losers_sizes.items()
                        if lb_round > match.round
                    )
                    rows[loser].final_position = 3 + later
                else:
                    rows[loser].final_position = 2

        champion = elimination_champion(matches)
        if champion is not None:
            rows[champion].depth = losers_rounds + 3
            rows[champion].final_position = 1
            grand_final = next(
                m
                for m in matches
                if m.bracket == BRACKET_GRAND_FINALS and not m.is_conditional
            )
            runner_up = grand_final.opponent_of(champion)
            if runner_up is not None:
                rows[runner_up].final_position = 2

        ordered = self._sort(rows, self.compare_elimination)
        return self.assign_ranks(ordered, self.same_elimination_rank)

