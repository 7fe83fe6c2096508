"""Double elimination bracket generation.

The winners bracket is an ordinary knockout bracket. Its losers drop into a
losers bracket that alternates two kinds of rounds:

* merge rounds keep the match count: the previous losers bracket winner
  plays in slot 1 against a player dropping from the winners bracket in
  slot 2;
* consolidation rounds halve the count by pairing merge round winners.

The losers bracket final meets the winners bracket champion in the grand
final, optionally followed by a conditional reset match.
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
from typing import Dict, List, Optional

from matchplay.constants import (
    BRACKET_GRAND_FINALS,
    BRACKET_LOSERS,
    BRACKET_WINNERS,
    DOUBLE_ELIMINATION_SUPPORTED_SIZES,
    SIDE_PLAYER1,
    SIDE_PLAYER2,
)
from matchplay.exceptions import InvalidConfigurationException
from matchplay.formats.bracket import (
    apply_first_round,
    build_elimination_rounds,
    first_round_pairings,
    num_rounds_for,
    seed_order,
    slot_for_position,
    validate_bracket,
)
from matchplay.models.config import SEEDING_METHODS, DoubleEliminationConfig
from matchplay.models.match import FeedEdge, Match
from matchplay.type_hints import MatchId
from matchplay.utils import setup_logger

logger = setup_logger(__name__)


class DoubleEliminationEngine:
    """Winners bracket, losers bracket and grand final for 4, 8, 16 or 32 players."""

    format_name = "Double Elimination"
    description = "Players are out after their second loss"
    min_players = min(DOUBLE_ELIMINATION_SUPPORTED_SIZES)
    max_players = max(DOUBLE_ELIMINATION_SUPPORTED_SIZES)
    supported_sizes = DOUBLE_ELIMINATION_SUPPORTED_SIZES

    @staticmethod
    def losers_rounds(num_players: int) -> int:
        return 2 * num_rounds_for(num_players) - 2

    @staticmethod
    def losers_round_size(num_players: int, losers_round: int) -> int:
        """Matches in losers round ``losers_round`` (1-indexed)."""
        # LB1 and LB2 have n/4 matches, every two rounds after that halve it
        return num_players // (2 ** ((losers_round + 1) // 2 + 1))

    def default_config(self, num_players: int) -> DoubleEliminationConfig:
        return DoubleEliminationConfig()

    def validate_player_count(self, num_players: int) -> None:
        if num_players not in self.supported_sizes:
            sizes = ", ".join(str(s) for s in self.supported_sizes)
            raise InvalidConfigurationException(
                f"Double elimination with {num_players} players is unsupported. "
                f"Supported sizes: {sizes}"
            )

    def validate_config(
        self, config: DoubleEliminationConfig, num_players: int
    ) -> None:
        self.validate_player_count(num_players)
        if config.seeding_method not in SEEDING_METHODS:
            raise InvalidConfigurationException(
                f"Unknown seeding method '{config.seeding_method}'"
            )

    def player_count_warning(self, num_players: int) -> Optional[str]:
        return None

    def generate_matches(
        self,
        players: List[str],
        config: DoubleEliminationConfig,
        rng: Optional[random.Random] = None,
    ) -> List[Match]:
        num_players = len(players)
        self.validate_player_count(num_players)
        matches: List[Match] = []

        winners = build_elimination_rounds(
            matches,
            num_players,
            bracket=BRACKET_WINNERS,
            label_prefix="W",
            double_elimination=True,
        )
        ordered = seed_order(range(num_players), config.seeding_method, rng)
        apply_first_round(
            [matches[i] for i in winners[1]], first_round_pairings(ordered)
        )

        losers = self._build_losers_bracket(matches, num_players)
        self._link_winners_losses(matches, winners, losers)

        grand_final = Match(
            id=len(matches),
            round=1,
            bracket=BRACKET_GRAND_FINALS,
            bracket_position="GF",
            is_placeholder=True,
        )
        matches.append(grand_final)

        winners_final = winners[len(winners)][0]
        losers_final = losers[len(losers)][0]
        matches[winners_final].feeds_into_win = FeedEdge(grand_final.id, SIDE_PLAYER1)
        matches[losers_final].feeds_into_win = FeedEdge(grand_final.id, SIDE_PLAYER2)

        if config.grand_final_reset:
            reset = Match(
                id=len(matches),
                round=2,
                bracket=BRACKET_GRAND_FINALS,
                bracket_position="GF Reset",
                is_placeholder=True,
                is_conditional=True,
            )
            matches.append(reset)
            grand_final.reset_match_id = reset.id

        validate_bracket(matches)
        logger.info(
            f"Double elimination bracket: {num_players} players, "
            f"{len(winners)} winners rounds, {len(losers)} losers rounds, "
            f"{len(matches)} matches"
        )
        return matches

    def _build_losers_bracket(
        self, matches: List[Match], num_players: int
    ) -> Dict[int, List[MatchId]]:
        """Append the losers bracket and link its internal winner edges."""
        rounds: Dict[int, List[MatchId]] = {}
        total = self.losers_rounds(num_players)

        for losers_round in range(1, total + 1):
            rounds[losers_round] = []
            for position in range(self.losers_round_size(num_players, losers_round)):
                match = Match(
                    id=len(matches),
                    round=losers_round,
                    bracket=BRACKET_LOSERS,
                    bracket_position=f"LR{losers_round}-M{position + 1}",
                    is_placeholder=True,
                )
                matches.append(match)
                rounds[losers_round].append(match.id)

        for losers_round in range(1, total):
            next_round = rounds[losers_round + 1]
            for position, match_id in enumerate(rounds[losers_round]):
                if losers_round % 2 == 1:
                    # into a merge round, same position, slot 1
                    edge = FeedEdge(next_round[position], SIDE_PLAYER1)
                else:
                    edge = FeedEdge(
                        next_round[position // 2], slot_for_position(position)
                    )
                matches[match_id].feeds_into_win = edge

        return rounds

    @staticmethod
    def _link_winners_losses(
        matches: List[Match],
        winners: Dict[int, List[MatchId]],
        losers: Dict[int, List[MatchId]],
    ) -> None:
        """Drop every winners bracket loser into the losers bracket."""
        for position, match_id in enumerate(winners[1]):
            matches[match_id].feeds_into_loss = FeedEdge(
                losers[1][position // 2], slot_for_position(position)
            )
        # losers of winners round j + 1 enter merge round 2j
        for winners_round in range(2, len(winners) + 1):
            merge_round = losers[2 * (winners_round - 1)]
            for position, match_id in enumerate(winners[winners_round]):
                matches[match_id].feeds_into_loss = FeedEdge(
                    merge_round[position], SIDE_PLAYER2
                )
