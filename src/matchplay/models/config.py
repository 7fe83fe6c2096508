"""Tournament format tags and per-format configuration data classes."""

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

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from matchplay.constants import SEEDING_RANDOM, SEEDING_SEEDED
from matchplay.exceptions import InvalidConfigurationException


class TournamentFormat(Enum):
    """The five supported competition formats."""

    ROUND_ROBIN = "round-robin"
    SWISS = "swiss"
    SINGLE_ELIMINATION = "single-elimination"
    DOUBLE_ELIMINATION = "double-elimination"
    GROUP_STAGE = "group-stage"

    @classmethod
    def from_value(cls, value: Union[str, "TournamentFormat"]) -> "TournamentFormat":
        """Resolve a format tag, rejecting unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(f.value for f in cls)
            raise InvalidConfigurationException(
                f"Unknown tournament format '{value}'. Valid formats: {valid}"
            ) from None

    @property
    def is_elimination(self) -> bool:
        return self in (
            TournamentFormat.SINGLE_ELIMINATION,
            TournamentFormat.DOUBLE_ELIMINATION,
        )


@dataclass
class RoundRobinConfig:
    """Round robin settings.

    Attributes:
        matches_per_player: Matches every player plays; players x matches must be even
    """

    matches_per_player: int

    def to_dict(self) -> Dict[str, Any]:
        return {"matchesPerPlayer": self.matches_per_player}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundRobinConfig":
        return cls(matches_per_player=int(data["matchesPerPlayer"]))


@dataclass
class SwissConfig:
    """Swiss settings.

    Attributes:
        rounds: Number of Swiss rounds
    """

    rounds: int

    def to_dict(self) -> Dict[str, Any]:
        return {"rounds": self.rounds}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SwissConfig":
        return cls(rounds=int(data["rounds"]))


@dataclass
class SingleEliminationConfig:
    """Single elimination settings.

    Attributes:
        seeding_method: 'random' shuffles the roster, 'seeded' keeps roster order
        third_place_match: Add a match between the semifinal losers
    """

    seeding_method: str = SEEDING_RANDOM
    third_place_match: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seedingMethod": self.seeding_method,
            "thirdPlaceMatch": self.third_place_match,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SingleEliminationConfig":
        return cls(
            seeding_method=data.get("seedingMethod", SEEDING_RANDOM),
            third_place_match=bool(data.get("thirdPlaceMatch", False)),
        )


@dataclass
class DoubleEliminationConfig:
    """Double elimination settings.

    Attributes:
        seeding_method: 'random' or 'seeded'
        grand_final_reset: Play a second grand final if the losers bracket side wins
    """

    seeding_method: str = SEEDING_RANDOM
    grand_final_reset: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seedingMethod": self.seeding_method,
            "grandFinalReset": self.grand_final_reset,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DoubleEliminationConfig":
        return cls(
            seeding_method=data.get("seedingMethod", SEEDING_RANDOM),
            grand_final_reset=bool(data.get("grandFinalReset", False)),
        )


@dataclass
class GroupStageConfig:
    """Group stage + playoffs settings.

    Attributes:
        num_groups: Number of groups
        players_per_group: Players dealt into each group
        advancing_per_group: Top finishers per group seeded into the playoffs
    """

    num_groups: int
    players_per_group: int
    advancing_per_group: int = 2

    @property
    def playoff_spots(self) -> int:
        return self.num_groups * self.advancing_per_group

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numGroups": self.num_groups,
            "playersPerGroup": self.players_per_group,
            "advancingPerGroup": self.advancing_per_group,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroupStageConfig":
        return cls(
            num_groups=int(data["numGroups"]),
            players_per_group=int(data["playersPerGroup"]),
            advancing_per_group=int(data.get("advancingPerGroup", 2)),
        )


FormatConfig = Union[
    RoundRobinConfig,
    SwissConfig,
    SingleEliminationConfig,
    DoubleEliminationConfig,
    GroupStageConfig,
]

CONFIG_TYPES = {
    TournamentFormat.ROUND_ROBIN: RoundRobinConfig,
    TournamentFormat.SWISS: SwissConfig,
    TournamentFormat.SINGLE_ELIMINATION: SingleEliminationConfig,
    TournamentFormat.DOUBLE_ELIMINATION: DoubleEliminationConfig,
    TournamentFormat.GROUP_STAGE: GroupStageConfig,
}

SEEDING_METHODS = (SEEDING_RANDOM, SEEDING_SEEDED)


def config_from_dict(fmt: TournamentFormat, data: Dict[str, Any]) -> FormatConfig:
    """Build the config variant for ``fmt`` from its serialized form.

    Raises:
        InvalidConfigurationException: If a required parameter is missing
    """
    try:
        return CONFIG_TYPES[fmt].from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidConfigurationException(
            f"Invalid {fmt.value} configuration: {e}"
        ) from e


def check_config_type(fmt: TournamentFormat, config: Any) -> None:
    """Make sure ``config`` is the variant that belongs to ``fmt``."""
    expected = CONFIG_TYPES[fmt]
    if not isinstance(config, expected):
        raise InvalidConfigurationException(
            f"{fmt.value} requires {expected.__name__}, got {type(config).__name__}"
        )
