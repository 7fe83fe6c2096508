"""Tournament running for Match Play.

This package ties the format generators together: result recording and
bracket advancement, standings, stage transitions and the orchestrator
facade that drives them.
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

from matchplay.tournament.orchestrator import TournamentOrchestrator
from matchplay.tournament.result_processor import MatchResultProcessor
from matchplay.tournament.stage_manager import StageManager
from matchplay.tournament.standings_calculator import StandingsCalculator

__all__ = [
    "TournamentOrchestrator",
    "MatchResultProcessor",
    "StageManager",
    "StandingsCalculator",
]
