"""Match structure generators for every tournament format.

Dispatch over :class:`~matchplay.models.config.TournamentFormat` is a closed
if/elif chain; an unknown member is a programming error and raises.
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
from typing import Any, Dict, List, Optional, Union

from matchplay.exceptions import InvalidConfigurationException
from matchplay.formats.bracket import round_name, validate_bracket
from matchplay.formats.double_elimination import DoubleEliminationEngine
from matchplay.formats.group_stage import GroupStageEngine
from matchplay.formats.round_robin import RoundRobinEngine
from matchplay.formats.single_elimination import SingleEliminationEngine
from matchplay.formats.swiss import SwissEngine
from matchplay.models.config import FormatConfig, TournamentFormat, check_config_type
from matchplay.models.match import Match

Engine = Union[
    RoundRobinEngine,
    SwissEngine,
    SingleEliminationEngine,
    DoubleEliminationEngine,
    GroupStageEngine,
]


def get_engine(fmt: TournamentFormat) -> Engine:
    """Return the generator for ``fmt``."""
    if fmt is TournamentFormat.ROUND_ROBIN:
        return RoundRobinEngine()
    elif fmt is TournamentFormat.SWISS:
        return SwissEngine()
    elif fmt is TournamentFormat.SINGLE_ELIMINATION:
        return SingleEliminationEngine()
    elif fmt is TournamentFormat.DOUBLE_ELIMINATION:
        return DoubleEliminationEngine()
    elif fmt is TournamentFormat.GROUP_STAGE:
        return GroupStageEngine()
    raise ValueError(f"Unhandled tournament format: {fmt!r}")


def validate_player_count(fmt: TournamentFormat, num_players: int) -> None:
    """Raise InvalidConfigurationException if ``fmt`` cannot host the roster."""
    engine = get_engine(fmt)
    if isinstance(engine, DoubleEliminationEngine):
        engine.validate_player_count(num_players)
        return
    if num_players < engine.min_players:
        raise InvalidConfigurationException(
            f"{engine.format_name} needs at least {engine.min_players} players"
        )
    if num_players > engine.max_players:
        raise InvalidConfigurationException(
            f"{engine.format_name} allows at most {engine.max_players} players"
        )


def default_config(fmt: TournamentFormat, num_players: int) -> FormatConfig:
    return get_engine(fmt).default_config(num_players)


def validate_config(
    fmt: TournamentFormat, config: FormatConfig, num_players: int
) -> None:
    check_config_type(fmt, config)
    get_engine(fmt).validate_config(config, num_players)


def player_count_warning(fmt: TournamentFormat, num_players: int) -> Optional[str]:
    return get_engine(fmt).player_count_warning(num_players)


def generate_matches(
    fmt: TournamentFormat,
    players: List[str],
    config: FormatConfig,
    rng: Optional[random.Random] = None,
) -> List[Match]:
    """Validate the roster and config, then build the full match list.

    Raises:
        InvalidConfigurationException: Before anything is generated
        NoValidStructureException: If round robin generation gives up
    """
    validate_player_count(fmt, len(players))
    validate_config(fmt, config, len(players))
    return get_engine(fmt).generate_matches(players, config, rng)


def format_info(fmt: TournamentFormat) -> Dict[str, Any]:
    """Display metadata for a format."""
    engine = get_engine(fmt)
    info: Dict[str, Any] = {
        "format": fmt.value,
        "name": engine.format_name,
        "description": engine.description,
        "minPlayers": engine.min_players,
        "maxPlayers": engine.max_players,
    }
    if isinstance(engine, DoubleEliminationEngine):
        info["supportedSizes"] = list(engine.supported_sizes)
    return info


__all__ = [
    "DoubleEliminationEngine",
    "GroupStageEngine",
    "RoundRobinEngine",
    "SingleEliminationEngine",
    "SwissEngine",
    "default_config",
    "format_info",
    "generate_matches",
    "get_engine",
    "player_count_warning",
    "round_name",
    "validate_bracket",
    "validate_config",
    "validate_player_count",
]
