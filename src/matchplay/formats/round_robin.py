"""Quota-balanced round robin generation.

Every player plays a fixed number of matches against distinct opponents,
chosen from a shuffled list of all possible pairings.
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
from itertools import combinations
from typing import List, Optional, Set, Tuple

from matchplay.constants import (
    MAX_GENERATION_ATTEMPTS,
    ROUND_ROBIN_MAX_PLAYERS,
    ROUND_ROBIN_MIN_PLAYERS,
)
from matchplay.exceptions import (
    InvalidConfigurationException,
    NoValidStructureException,
)
from matchplay.models.config import RoundRobinConfig
from matchplay.models.match import Match
from matchplay.type_hints import PlayerIndex
from matchplay.utils import setup_logger, shuffle

logger = setup_logger(__name__)


class RoundRobinEngine:
    """Builds a subset of all pairings where everyone plays the same number of matches."""

    format_name = "Round Robin"
    description = "Everyone plays everyone else (or a fixed number of matches)"
    min_players = ROUND_ROBIN_MIN_PLAYERS
    max_players = ROUND_ROBIN_MAX_PLAYERS

    def __init__(self, max_attempts: int = MAX_GENERATION_ATTEMPTS):
        self.max_attempts = max_attempts

    @staticmethod
    def valid_matches_per_player(num_players: int) -> List[int]:
        """All matches-per-player values for which players x matches is even."""
        return [m for m in range(1, num_players) if (num_players * m) % 2 == 0]

    @staticmethod
    def total_matches(num_players: int, matches_per_player: int) -> int:
        """Number of matches needed so everyone plays ``matches_per_player``.

        Raises:
            InvalidConfigurationException: If players x matches is odd
        """
        product = num_players * matches_per_player
        if product % 2 != 0:
            raise InvalidConfigurationException(
                f"{num_players} players x {matches_per_player} matches = {product} "
                "player slots, which cannot be split into pairs"
            )
        return product // 2

    def default_config(self, num_players: int) -> RoundRobinConfig:
        options = self.valid_matches_per_player(num_players)
        return RoundRobinConfig(matches_per_player=options[0] if options else 3)

    def validate_config(self, config: RoundRobinConfig, num_players: int) -> None:
        """Raise InvalidConfigurationException unless the config is playable."""
        if not config.matches_per_player:
            raise InvalidConfigurationException("Matches per player is required")
        options = self.valid_matches_per_player(num_players)
        if config.matches_per_player not in options:
            raise InvalidConfigurationException(
                "Invalid matches per player. Valid options: "
                + ", ".join(str(m) for m in options)
            )

    def generate_pairings(
        self,
        num_players: int,
        matches_per_player: int,
        rng: Optional[random.Random] = None,
    ) -> List[Tuple[PlayerIndex, PlayerIndex]]:
        """Select pairings so every player hits their quota exactly.

        The greedy pass walks the shuffled pair list and takes any pair whose
        players are both under quota. A pass that falls short is thrown away
        and retried with a fresh shuffle.

        Raises:
            InvalidConfigurationException: If players x matches is odd
            NoValidStructureException: If every attempt falls short
        """
        target = self.total_matches(num_players, matches_per_player)
        all_pairs = list(combinations(range(num_players), 2))
        shuffle(all_pairs, rng)

        for attempt in range(1, self.max_attempts + 1):
            match_count = [0] * num_players
            selected: List[Tuple[PlayerIndex, PlayerIndex]] = []
            seen: Set[frozenset] = set()

            for p1, p2 in all_pairs:
                if len(selected) >= target:
                    break
                if (
                    match_count[p1] >= matches_per_player
                    or match_count[p2] >= matches_per_player
                ):
                    continue
                key = frozenset((p1, p2))
                if key in seen:
                    continue
                seen.add(key)
                selected.append((p1, p2))
                match_count[p1] += 1
                match_count[p2] += 1

            if len(selected) == target:
                logger.debug(
                    f"Round robin structure found on attempt {attempt}: "
                    f"{target} matches"
                )
                return selected

            shuffle(all_pairs, rng)

        logger.error(
            f"No valid match structure for {num_players} players x "
            f"{matches_per_player} matches after {self.max_attempts} attempts"
        )
        raise NoValidStructureException("no valid match structure found")

    def generate_matches(
        self,
        players: List[str],
        config: RoundRobinConfig,
        rng: Optional[random.Random] = None,
    ) -> List[Match]:
        pairings = self.generate_pairings(len(players), config.matches_per_player, rng)
        return [
            Match(id=index, player1=p1, player2=p2)
            for index, (p1, p2) in enumerate(pairings)
        ]
