"""Standings data classes."""

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
from typing import Any, Dict, List, Optional, Set

from matchplay.type_hints import PlayerIndex


@dataclass
class StandingsRow:
    """Aggregate statistics for one player.

    Attributes
    ----------
    player_index : int
        Roster index of the player.
    player : str
        Display name.
    points : float
        Format specific score (0 for elimination formats).
    quality_score : float
        Sum of points of every opponent this player beat.
    omw, gwp, ogw : float
        Swiss opponent match-win, game-win and opponent game-win rates.
    depth : int
        Elimination progress; larger is further.
    round_eliminated : int or None
        Round of the eliminating loss, None while still alive.
    final_position : int or None
        Best placement the elimination depth guarantees.
    group, group_rank : str, int or None
        Group letter and in-group rank for group stage tournaments.
    rank : int
        Overall rank; tied rows share a rank.
    """

    player_index: PlayerIndex
    player: str
    wins: int = 0
    losses: int = 0
    games_won: int = 0
    games_lost: int = 0
    matches_played: int = 0
    byes: int = 0
    points: float = 0.0
    quality_score: float = 0.0
    omw: float = 0.0
    gwp: float = 0.0
    ogw: float = 0.0
    depth: int = 0
    round_eliminated: Optional[int] = None
    final_position: Optional[int] = None
    group: Optional[str] = None
    group_rank: Optional[int] = None
    rank: int = 0
    beaten: List[PlayerIndex] = field(default_factory=list)
    lost_to: List[PlayerIndex] = field(default_factory=list)
    opponents: List[PlayerIndex] = field(default_factory=list)

    @property
    def win_percentage(self) -> float:
        if self.matches_played == 0:
            return 0.0
        return self.wins / self.matches_played

    @property
    def game_differential(self) -> int:
        return self.games_won - self.games_lost

    def to_dict(self) -> Dict[str, Any]:
        return {
            "playerIndex": self.player_index,
            "player": self.player,
            "rank": self.rank,
            "wins": self.wins,
            "losses": self.losses,
            "gamesWon": self.games_won,
            "gamesLost": self.games_lost,
            "matchesPlayed": self.matches_played,
            "byes": self.byes,
            "points": self.points,
            "qualityScore": self.quality_score,
            "omw": self.omw,
            "gwp": self.gwp,
            "ogw": self.ogw,
            "depth": self.depth,
            "roundEliminated": self.round_eliminated,
            "finalPosition": self.final_position,
            "group": self.group,
            "groupRank": self.group_rank,
        }


@dataclass
class Standings:
    """Ranked rows plus the set of ranks shared by more than one row."""

    ranked_rows: List[StandingsRow] = field(default_factory=list)
    tied_ranks: Set[int] = field(default_factory=set)

    def row_for(self, player_index: PlayerIndex) -> Optional[StandingsRow]:
        for row in self.ranked_rows:
            if row.player_index == player_index:
                return row
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rankedRows": [row.to_dict() for row in self.ranked_rows],
            "tiedRanks": sorted(self.tied_ranks),
        }
