"""Swiss system pairing.

Round one is paired at random. Later rounds are reserved as placeholder
matches and paired from the standings once the previous round is complete.
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

import math
import random
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from matchplay.constants import (
    SIDE_PLAYER1,
    SWISS_DEFAULT_MAX_ROUNDS,
    SWISS_MAX_PLAYERS,
    SWISS_MAX_ROUNDS,
    SWISS_MIN_PLAYERS,
)
from matchplay.exceptions import InvalidConfigurationException
from matchplay.models.config import SwissConfig
from matchplay.models.match import Match
from matchplay.models.standings import StandingsRow
from matchplay.type_hints import Pairings, PlayerIndex
from matchplay.utils import setup_logger, shuffle

logger = setup_logger(__name__)


def matches_per_round(num_players: int) -> int:
    return math.ceil(num_players / 2)


class SwissEngine:
    """Score-group pairing with carry-down and last-resort repeats."""

    format_name = "Swiss Tournament"
    description = "Pair players with similar records each round"
    min_players = SWISS_MIN_PLAYERS
    max_players = SWISS_MAX_PLAYERS

    def default_config(self, num_players: int) -> SwissConfig:
        rounds = math.ceil(math.log2(max(num_players, 2)))
        return SwissConfig(rounds=min(rounds, SWISS_DEFAULT_MAX_ROUNDS))

    def validate_config(self, config: SwissConfig, num_players: int) -> None:
        if not config.rounds or config.rounds < 1:
            raise InvalidConfigurationException("At least 1 round is required")
        if config.rounds > SWISS_MAX_ROUNDS:
            raise InvalidConfigurationException(
                f"Maximum {SWISS_MAX_ROUNDS} rounds allowed"
            )

    def player_count_warning(self, num_players: int) -> Optional[str]:
        if num_players % 2 == 1:
            return "With an odd player count, one player receives a bye each round"
        return None

    def generate_round1_pairings(
        self, num_players: int, rng: Optional[random.Random] = None
    ) -> Pairings:
        """Shuffle the roster and pair consecutive players.

        An odd leftover player gets a bye (``None`` opponent).
        """
        order = shuffle(list(range(num_players)), rng)
        pairings: Pairings = []
        for i in range(0, len(order), 2):
            if i + 1 < len(order):
                pairings.append((order[i], order[i + 1]))
            else:
                pairings.append((order[i], None))
        return pairings

    def generate_matches(
        self,
        players: List[str],
        config: SwissConfig,
        rng: Optional[random.Random] = None,
    ) -> List[Match]:
        """Pair round one and reserve placeholder slots for later rounds."""
        num_players = len(players)
        matches: List[Match] = []

        for p1, p2 in self.generate_round1_pairings(num_players, rng):
            match = Match(id=len(matches), round=1, player1=p1, player2=p2)
            if p2 is None:
                match.is_bye = True
                match.winner = SIDE_PLAYER1
            matches.append(match)

        slots = matches_per_round(num_players)
        for round_number in range(2, config.rounds + 1):
            for _ in range(slots):
                matches.append(
                    Match(id=len(matches), round=round_number, is_placeholder=True)
                )

        return matches

    def generate_round_pairings(
        self,
        standings: Sequence[StandingsRow],
        previous_pairings: Iterable[Tuple[PlayerIndex, Optional[PlayerIndex]]],
    ) -> Pairings:
        """Pair the next round from current standings.

        Players are grouped by match wins, highest group first. Each player is
        paired with the first player in the combined pool (carried-down players
        first) they have not met yet; a player with no such opponent is carried
        down to the next group. Whoever is still unpaired at the end is paired
        in ranking order even if that repeats a pairing, and an odd remainder
        gives the bye to the lowest-ranked unpaired player. Nobody gets a
        second bye while another player has fewer.

        The greedy pass does not guarantee a perfect no-repeat matching; a
        repeat pairing is logged but never signalled as an error.

        Args:
            standings: Rows in ranked order (best first)
            previous_pairings: Every (player1, player2) already played

        Returns:
            Pairings for the round; ``(player, None)`` is a bye
        """
        previous: Set[frozenset] = {
            frozenset((p1, p2)) for p1, p2 in previous_pairings if p2 is not None
        }
        rank_order: Dict[PlayerIndex, int] = {
            row.player_index: position for position, row in enumerate(standings)
        }
        byes: Dict[PlayerIndex, int] = {row.player_index: row.byes for row in standings}

        score_groups: Dict[int, List[PlayerIndex]] = {}
        for row in standings:
            score_groups.setdefault(row.wins, []).append(row.player_index)

        pairings: Pairings = []
        paired: Set[PlayerIndex] = set()
        unpaired: List[PlayerIndex] = []

        for wins in sorted(score_groups, reverse=True):
            pool = unpaired + score_groups[wins]
            unpaired = []

            while pool:
                p1 = pool.pop(0)
                if p1 in paired:
                    continue

                opponent_position = None
                for position, p2 in enumerate(pool):
                    if p2 in paired:
                        continue
                    if frozenset((p1, p2)) not in previous:
                        opponent_position = position
                        break

                if opponent_position is None:
                    unpaired.append(p1)
                    continue

                p2 = pool.pop(opponent_position)
                pairings.append((p1, p2))
                paired.update((p1, p2))

        if not unpaired:
            return pairings

        unpaired.sort(key=lambda p: rank_order.get(p, len(rank_order)))

        if len(unpaired) % 2 == 1:
            bye_player = self._select_bye(unpaired, byes)
            unpaired.remove(bye_player)
            logger.info(f"Player {bye_player} receives a bye")
        else:
            bye_player = None

        while len(unpaired) >= 2:
            p1 = unpaired.pop(0)
            p2 = unpaired.pop(0)
            if frozenset((p1, p2)) in previous:
                logger.warning(f"Repeat pairing {p1} vs {p2}: no fresh opponent left")
            pairings.append((p1, p2))

        if bye_player is not None:
            bye_player = self._rebalance_bye(
                bye_player, pairings, byes, rank_order, previous
            )
            pairings.append((bye_player, None))

        return pairings

    @staticmethod
    def _rebalance_bye(
        bye_player: PlayerIndex,
        pairings: Pairings,
        byes: Dict[PlayerIndex, int],
        rank_order: Dict[PlayerIndex, int],
        previous: Set[frozenset],
    ) -> PlayerIndex:
        """Hand the bye to a player with the fewest byes so far.

        If ``bye_player`` already has more byes than someone else, the
        lowest-ranked player with the fewest byes takes the bye and their
        opponent plays ``bye_player`` instead.
        """
        fewest = min(byes.values(), default=0)
        if byes.get(bye_player, 0) <= fewest:
            return bye_player

        candidates = [
            p
            for pairing in pairings
            for p in pairing
            if p is not None and byes.get(p, 0) == fewest
        ]
        if not candidates:
            return bye_player
        replacement = max(candidates, key=lambda p: rank_order.get(p, len(rank_order)))

        for position, (p1, p2) in enumerate(pairings):
            if replacement not in (p1, p2):
                continue
            opponent = p2 if p1 == replacement else p1
            first, second = sorted(
                (opponent, bye_player), key=lambda p: rank_order.get(p, len(rank_order))
            )
            if frozenset((first, second)) in previous:
                logger.warning(
                    f"Repeat pairing {first} vs {second} to avoid a second bye"
                )
            pairings[position] = (first, second)
            break

        logger.info(f"Bye moved from player {bye_player} to player {replacement}")
        return replacement

    @staticmethod
    def _select_bye(
        candidates: List[PlayerIndex], byes: Dict[PlayerIndex, int]
    ) -> PlayerIndex:
        """Lowest-ranked candidate among those with the fewest byes so far."""
        fewest = min(byes.get(p, 0) for p in candidates)
        for player in reversed(candidates):
            if byes.get(player, 0) == fewest:
                return player
        return candidates[-1]
