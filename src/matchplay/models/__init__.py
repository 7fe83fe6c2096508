"""Data models for Match Play."""

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

from matchplay.models.config import (
    DoubleEliminationConfig,
    FormatConfig,
    GroupStageConfig,
    RoundRobinConfig,
    SingleEliminationConfig,
    SwissConfig,
    TournamentFormat,
    config_from_dict,
)
from matchplay.models.match import FeedEdge, Match, normalize_games
from matchplay.models.results import GameReport, StageAdvance
from matchplay.models.standings import Standings, StandingsRow
from matchplay.models.state import TournamentState

__all__ = [
    "DoubleEliminationConfig",
    "FeedEdge",
    "FormatConfig",
    "GameReport",
    "GroupStageConfig",
    "Match",
    "RoundRobinConfig",
    "SingleEliminationConfig",
    "StageAdvance",
    "Standings",
    "StandingsRow",
    "SwissConfig",
    "TournamentFormat",
    "TournamentState",
    "config_from_dict",
    "normalize_games",
]
