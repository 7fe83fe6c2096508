"""Group stage followed by a single elimination playoff."""

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
from typing import Dict, List, Mapping, Optional, Sequence

from matchplay.constants import (
    GROUP_NAMES,
    GROUP_STAGE_MAX_GROUPS,
    GROUP_STAGE_MAX_PLAYERS,
    GROUP_STAGE_MIN_GROUP_SIZE,
    GROUP_STAGE_MIN_GROUPS,
    GROUP_STAGE_MIN_PLAYERS,
    STAGE_GROUPS,
    STAGE_PLAYOFFS,
)
from matchplay.exceptions import InvalidConfigurationException
from matchplay.formats.bracket import (
    apply_first_round,
    build_elimination_rounds,
    first_round_pairings,
    validate_bracket,
)
from matchplay.models.config import GroupStageConfig
from matchplay.models.match import Match
from matchplay.type_hints import PlayerIndex
from matchplay.utils import next_power_of_two, setup_logger, shuffle

logger = setup_logger(__name__)


def playoff_matches(matches: Sequence[Match]) -> List[Match]:
    return [m for m in matches if m.stage == STAGE_PLAYOFFS]


def group_matches(matches: Sequence[Match]) -> List[Match]:
    return [m for m in matches if m.stage == STAGE_GROUPS]


def group_members(matches: Sequence[Match]) -> Dict[str, List[PlayerIndex]]:
    """Players of every group, in order of first appearance."""
    members: Dict[str, List[PlayerIndex]] = {}
    for match in group_matches(matches):
        roster = members.setdefault(match.group, [])
        for player in (match.player1, match.player2):
            if player is not None and player not in roster:
                roster.append(player)
    return dict(sorted(members.items()))


class GroupStageEngine:
    """Round robin groups whose top finishers are seeded into a knockout."""

    format_name = "Group Stage + Playoffs"
    description = "Round robin groups, then a knockout between the group leaders"
    min_players = GROUP_STAGE_MIN_PLAYERS
    max_players = GROUP_STAGE_MAX_PLAYERS

    def default_config(self, num_players: int) -> GroupStageConfig:
        num_groups = max(
            GROUP_STAGE_MIN_GROUPS, min(GROUP_STAGE_MAX_GROUPS, num_players // 4)
        )
        return GroupStageConfig(
            num_groups=num_groups, players_per_group=4, advancing_per_group=2
        )

    def validate_config(self, config: GroupStageConfig, num_players: int) -> None:
        if not GROUP_STAGE_MIN_GROUPS <= config.num_groups <= GROUP_STAGE_MAX_GROUPS:
            raise InvalidConfigurationException(
                f"Number of groups must be between {GROUP_STAGE_MIN_GROUPS} "
                f"and {GROUP_STAGE_MAX_GROUPS}"
            )
        if config.players_per_group < GROUP_STAGE_MIN_GROUP_SIZE:
            raise InvalidConfigurationException(
                f"Each group needs at least {GROUP_STAGE_MIN_GROUP_SIZE} players"
            )
        if config.num_groups * config.players_per_group > num_players:
            raise InvalidConfigurationException(
                f"{config.num_groups} groups of {config.players_per_group} need "
                f"{config.num_groups * config.players_per_group} players, "
                f"only {num_players} registered"
            )
        if not 1 <= config.advancing_per_group < config.players_per_group:
            raise InvalidConfigurationException(
                "Players advancing per group must be at least 1 and fewer "
                "than the group size"
            )

    def player_count_warning(self, num_players: int) -> Optional[str]:
        return None

    def assign_groups(
        self,
        num_players: int,
        config: GroupStageConfig,
        rng: Optional[random.Random] = None,
    ) -> Dict[str, List[PlayerIndex]]:
        """Deal the shuffled roster into groups like cards.

        Players left over once every group is full are not placed.
        """
        order = shuffle(list(range(num_players)), rng)
        groups: Dict[str, List[PlayerIndex]] = {
            GROUP_NAMES[g]: [] for g in range(config.num_groups)
        }
        capacity = config.num_groups * config.players_per_group
        for position, player in enumerate(order[:capacity]):
            groups[GROUP_NAMES[position % config.num_groups]].append(player)

        unplaced = num_players - min(num_players, capacity)
        if unplaced:
            logger.warning(f"{unplaced} player(s) were not placed in any group")
        return groups

    def generate_matches(
        self,
        players: List[str],
        config: GroupStageConfig,
        rng: Optional[random.Random] = None,
    ) -> List[Match]:
        """Full round robin inside each group plus an empty playoff bracket."""
        matches: List[Match] = []
        groups = self.assign_groups(len(players), config, rng)

        for letter, members in groups.items():
            for p1, p2 in combinations(members, 2):
                matches.append(
                    Match(
                        id=len(matches),
                        player1=p1,
                        player2=p2,
                        stage=STAGE_GROUPS,
                        group=letter,
                    )
                )

        bracket_size = next_power_of_two(config.playoff_spots)
        build_elimination_rounds(
            matches, bracket_size, stage=STAGE_PLAYOFFS, label_prefix="P"
        )
        validate_bracket(matches)

        logger.info(
            f"Group stage: {config.num_groups} groups of {config.players_per_group}, "
            f"{len(group_matches(matches))} group matches, playoff bracket of "
            f"{bracket_size}"
        )
        return matches

    def seed_playoffs(
        self,
        matches: List[Match],
        group_rankings: Mapping[str, Sequence[PlayerIndex]],
        advancing_per_group: int,
    ) -> List[PlayerIndex]:
        """Fill the first playoff round from the final group tables.

        Seeds interleave across groups (A1, B1, ..., A2, B2, ...). The top
        seeds take any byes, then the rest fill the remaining first round
        matches in order, so consecutive seeds meet (A1 v B1, A2 v B2).
        Byes are decided here; advancing them is left to the caller.

        Args:
            matches: The tournament's match list
            group_rankings: Group letter to players in group finishing order
            advancing_per_group: Finishers taken from each group

        Returns:
            Seeded players, best seed first
        """
        seeds: List[PlayerIndex] = []
        letters = sorted(group_rankings)
        for place in range(advancing_per_group):
            for letter in letters:
                ranking = group_rankings[letter]
                if place < len(ranking):
                    seeds.append(ranking[place])

        round_one = [m for m in playoff_matches(matches) if m.round == 1]
        num_byes = max(2 * len(round_one) - len(seeds), 0)
        ordered: List[Optional[PlayerIndex]] = []
        for seed in seeds[:num_byes]:
            ordered.extend((seed, None))
        ordered.extend(seeds[num_byes:])
        apply_first_round(round_one, first_round_pairings(ordered))
        logger.info(f"Playoffs seeded with {len(seeds)} players, {num_byes} byes")
        return seeds
