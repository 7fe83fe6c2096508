"""Single elimination bracket generation."""

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
from typing import List, Optional

from matchplay.constants import (
    SIDE_PLAYER1,
    SIDE_PLAYER2,
    SINGLE_ELIMINATION_MAX_PLAYERS,
    SINGLE_ELIMINATION_MIN_PLAYERS,
)
from matchplay.exceptions import InvalidConfigurationException
from matchplay.formats.bracket import (
    apply_first_round,
    build_elimination_rounds,
    first_round_pairings,
    num_rounds_for,
    round_name,
    seed_order,
    validate_bracket,
)
from matchplay.models.config import SEEDING_METHODS, SingleEliminationConfig
from matchplay.models.match import FeedEdge, Match
from matchplay.utils import next_power_of_two, setup_logger

logger = setup_logger(__name__)


class SingleEliminationEngine:
    """Knockout bracket padded to a power of two with byes for the top seeds."""

    format_name = "Single Elimination"
    description = "Lose once and you are out"
    min_players = SINGLE_ELIMINATION_MIN_PLAYERS
    max_players = SINGLE_ELIMINATION_MAX_PLAYERS

    @staticmethod
    def bracket_size(num_players: int) -> int:
        return next_power_of_two(num_players)

    @staticmethod
    def num_byes(num_players: int) -> int:
        return next_power_of_two(num_players) - num_players

    @staticmethod
    def num_rounds(num_players: int) -> int:
        return num_rounds_for(next_power_of_two(num_players))

    @staticmethod
    def round_name(round_number: int, total_rounds: int) -> str:
        return round_name(round_number, total_rounds)

    def default_config(self, num_players: int) -> SingleEliminationConfig:
        return SingleEliminationConfig()

    def validate_config(
        self, config: SingleEliminationConfig, num_players: int
    ) -> None:
        if config.seeding_method not in SEEDING_METHODS:
            raise InvalidConfigurationException(
                f"Unknown seeding method '{config.seeding_method}'"
            )
        if config.third_place_match and num_players < 4:
            raise InvalidConfigurationException(
                "A third place match needs at least 4 players"
            )

    def player_count_warning(self, num_players: int) -> Optional[str]:
        byes = self.num_byes(num_players)
        if byes:
            return f"{byes} player(s) will receive a first round bye"
        return None

    def generate_matches(
        self,
        players: List[str],
        config: SingleEliminationConfig,
        rng: Optional[random.Random] = None,
    ) -> List[Match]:
        """Build the whole bracket with round one filled in.

        Bye matches are marked decided here; moving their winners into
        round two is left to the result processor.
        """
        num_players = len(players)
        size = self.bracket_size(num_players)
        matches: List[Match] = []
        rounds = build_elimination_rounds(matches, size)

        ordered = seed_order(range(num_players), config.seeding_method, rng)
        apply_first_round(
            [matches[i] for i in rounds[1]], first_round_pairings(ordered)
        )

        total_rounds = len(rounds)
        if config.third_place_match and total_rounds >= 2:
            semifinals = rounds[total_rounds - 1]
            third_place = Match(
                id=len(matches),
                round=total_rounds,
                bracket_position="3rd Place",
                is_placeholder=True,
                is_third_place=True,
            )
            matches.append(third_place)
            matches[semifinals[0]].loser_feeds_into = FeedEdge(
                third_place.id, SIDE_PLAYER1
            )
            matches[semifinals[1]].loser_feeds_into = FeedEdge(
                third_place.id, SIDE_PLAYER2
            )

        validate_bracket(matches)
        logger.info(
            f"Single elimination bracket: {num_players} players, size {size}, "
            f"{self.num_byes(num_players)} byes, {total_rounds} rounds, "
            f"{len(matches)} matches"
        )
        return matches
