"""Result values returned by mutating operations."""

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

from dataclasses import dataclass, field
from typing import List, Optional

from matchplay.models.match import Match
from matchplay.type_hints import PlayerIndex


@dataclass
class GameReport:
    """Outcome of reporting one game.

    Attributes:
        match: The match after the update (None if it was not found)
        updated: Whether any state changed
        transitioned: Whether the match moved between pending and decided
        error: Reason the report was rejected, None on success
    """

    match: Optional[Match] = None
    updated: bool = False
    transitioned: bool = False
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.error is None


@dataclass
class StageAdvance:
    """Outcome of a stage transition.

    Attributes:
        success: Whether the transition happened
        error: Reason it did not, None on success
        round: Swiss round that was paired
        stage: Stage entered
        advancing_players: Playoff seeds in seeding order
    """

    success: bool
    error: Optional[str] = None
    round: Optional[int] = None
    stage: Optional[str] = None
    advancing_players: List[PlayerIndex] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success
