"""Match and feed edge data classes."""

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
from typing import Any, Dict, List, Optional

from matchplay.constants import GAMES_PER_MATCH, SIDE_PLAYER1, SIDE_PLAYER2
from matchplay.type_hints import GameSlot, MatchId, PlayerIndex


def empty_games() -> List[GameSlot]:
    return [None] * GAMES_PER_MATCH


def _normalize_side(value: Any) -> Optional[int]:
    """Return 1 or 2, anything else becomes None."""
    if value in (SIDE_PLAYER1, SIDE_PLAYER2) and not isinstance(value, bool):
        return int(value)
    return None


def normalize_games(raw: Any) -> List[GameSlot]:
    """Re-pad a stored games list to exactly three slots.

    Some storage layers drop ``null`` entries from arrays, so a stored
    ``[1, null, 2]`` can come back as ``[1, 2]`` with index gaps or as a
    dict keyed by position. Both shapes are accepted.
    """
    if isinstance(raw, dict):
        return [_normalize_side(raw.get(str(i), raw.get(i))) for i in range(GAMES_PER_MATCH)]
    if isinstance(raw, (list, tuple)):
        return [
            _normalize_side(raw[i]) if i < len(raw) else None
            for i in range(GAMES_PER_MATCH)
        ]
    return empty_games()


@dataclass(frozen=True)
class FeedEdge:
    """Directed edge from a decided match to one player slot of its successor.

    Attributes
    ----------
    match_id : int
        Id of the successor match.
    slot : int
        Player slot in the successor (1 or 2).
    """

    match_id: MatchId
    slot: int

    def to_dict(self) -> Dict[str, int]:
        return {"matchId": self.match_id, "slot": self.slot}

    @classmethod
    def from_dict(cls, data: Any) -> Optional["FeedEdge"]:
        if data is None:
            return None
        return cls(match_id=int(data["matchId"]), slot=int(data["slot"]))


@dataclass
class Match:
    """A single best-of-three match.

    Attributes
    ----------
    id : int
        Position of the match in the tournament's match list.
    player1, player2 : int or None
        Roster indices; None while the slot is still waiting on a feeder.
    games : list
        Three game slots, each None (unset) or the side (1 or 2) that won.
    winner : int or None
        Side that won the match once it is decided.
    round : int or None
        Round number within its bracket or stage.
    stage : str or None
        ``"groups"`` or ``"playoffs"`` for group stage tournaments.
    group : str or None
        Group letter for group stage matches.
    bracket : str or None
        ``"winners"``, ``"losers"`` or ``"grand-finals"`` in double elimination.
    feeds_into : FeedEdge or None
        Single elimination winner edge.
    feeds_into_win, feeds_into_loss : FeedEdge or None
        Double elimination winner and loser edges.
    loser_feeds_into : FeedEdge or None
        Semifinal loser edge into a third place match.
    reset_match_id : int or None
        Conditional bracket reset played if the grand final slot 2 wins.
    """

    id: MatchId
    player1: Optional[PlayerIndex] = None
    player2: Optional[PlayerIndex] = None
    games: List[GameSlot] = field(default_factory=empty_games)
    winner: Optional[int] = None
    round: Optional[int] = None
    stage: Optional[str] = None
    group: Optional[str] = None
    bracket: Optional[str] = None
    bracket_position: Optional[str] = None
    is_bye: bool = False
    is_placeholder: bool = False
    is_third_place: bool = False
    is_conditional: bool = False
    feeds_into: Optional[FeedEdge] = None
    feeds_into_win: Optional[FeedEdge] = None
    feeds_into_loss: Optional[FeedEdge] = None
    loser_feeds_into: Optional[FeedEdge] = None
    reset_match_id: Optional[MatchId] = None

    @property
    def is_ready(self) -> bool:
        """Both players known and not a bye."""
        return (
            self.player1 is not None and self.player2 is not None and not self.is_bye
        )

    @property
    def winner_index(self) -> Optional[PlayerIndex]:
        if self.winner == SIDE_PLAYER1:
            return self.player1
        if self.winner == SIDE_PLAYER2:
            return self.player2
        return None

    @property
    def loser_index(self) -> Optional[PlayerIndex]:
        if self.winner == SIDE_PLAYER1:
            return self.player2
        if self.winner == SIDE_PLAYER2:
            return self.player1
        return None

    def involves(self, player_index: PlayerIndex) -> bool:
        return player_index in (self.player1, self.player2)

    def opponent_of(self, player_index: PlayerIndex) -> Optional[PlayerIndex]:
        if self.player1 == player_index:
            return self.player2
        if self.player2 == player_index:
            return self.player1
        return None

    def get_player(self, slot: int) -> Optional[PlayerIndex]:
        return self.player1 if slot == SIDE_PLAYER1 else self.player2

    def set_player(self, slot: int, player_index: Optional[PlayerIndex]) -> None:
        if slot == SIDE_PLAYER1:
            self.player1 = player_index
        else:
            self.player2 = player_index

    def outgoing_edges(self) -> List[FeedEdge]:
        edges = [
            self.feeds_into,
            self.feeds_into_win,
            self.feeds_into_loss,
            self.loser_feeds_into,
        ]
        return [edge for edge in edges if edge is not None]

    def reset_result(self) -> None:
        """Clear all games and the winner."""
        self.games = empty_games()
        self.winner = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the match using the persisted camelCase field names."""
        return {
            "id": self.id,
            "round": self.round,
            "stage": self.stage,
            "group": self.group,
            "bracket": self.bracket,
            "bracketPosition": self.bracket_position,
            "player1": self.player1,
            "player2": self.player2,
            "games": list(self.games),
            "winner": self.winner,
            "isBye": self.is_bye,
            "isPlaceholder": self.is_placeholder,
            "isThirdPlace": self.is_third_place,
            "isConditional": self.is_conditional,
            "feedsInto": self.feeds_into.to_dict() if self.feeds_into else None,
            "feedsIntoWin": (
                self.feeds_into_win.to_dict() if self.feeds_into_win else None
            ),
            "feedsIntoLoss": (
                self.feeds_into_loss.to_dict() if self.feeds_into_loss else None
            ),
            "loserFeedsInto": (
                self.loser_feeds_into.to_dict() if self.loser_feeds_into else None
            ),
            "resetMatchId": self.reset_match_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize a match, normalizing game slots and winner."""
        return cls(
            id=int(data["id"]),
            round=data.get("round"),
            stage=data.get("stage"),
            group=data.get("group"),
            bracket=data.get("bracket"),
            bracket_position=data.get("bracketPosition"),
            player1=data.get("player1"),
            player2=data.get("player2"),
            games=normalize_games(data.get("games")),
            winner=_normalize_side(data.get("winner")),
            is_bye=bool(data.get("isBye", False)),
            is_placeholder=bool(data.get("isPlaceholder", False)),
            is_third_place=bool(data.get("isThirdPlace", False)),
            is_conditional=bool(data.get("isConditional", False)),
            feeds_into=FeedEdge.from_dict(data.get("feedsInto")),
            feeds_into_win=FeedEdge.from_dict(data.get("feedsIntoWin")),
            feeds_into_loss=FeedEdge.from_dict(data.get("feedsIntoLoss")),
            loser_feeds_into=FeedEdge.from_dict(data.get("loserFeedsInto")),
            reset_match_id=data.get("resetMatchId"),
        )
