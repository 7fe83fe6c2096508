"""Persisted tournament state."""

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

from matchplay.models.config import FormatConfig, TournamentFormat, config_from_dict
from matchplay.models.match import Match


@dataclass
class TournamentState:
    """Everything needed to rebuild a tournament.

    Attributes
    ----------
    players : list of str
        Ordered roster; a player's identity is their index.
    matches : list of Match
        Match arena; ``matches[i].id == i``.
    format : TournamentFormat
        Competition format.
    format_config : FormatConfig
        Config variant matching ``format``.
    current_stage : str or None
        ``"groups"`` or ``"playoffs"`` for group stage tournaments.
    """

    players: List[str]
    format: TournamentFormat
    format_config: FormatConfig
    matches: List[Match] = field(default_factory=list)
    current_stage: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize state to dictionary."""
        return {
            "players": list(self.players),
            "format": self.format.value,
            "formatConfig": self.format_config.to_dict(),
            "currentStage": self.current_stage,
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentState":
        """Deserialize state, normalizing the match list.

        Matches may arrive as a list or as a dict keyed by position (the shape
        some document stores produce); both are sorted by numeric key.
        """
        fmt = TournamentFormat.from_value(data["format"])
        raw_matches = data.get("matches") or []
        if isinstance(raw_matches, dict):
            raw_matches = [
                raw_matches[key] for key in sorted(raw_matches, key=lambda k: int(k))
            ]
        matches = [Match.from_dict(m) for m in raw_matches if m]
        return cls(
            players=list(data["players"]),
            format=fmt,
            format_config=config_from_dict(fmt, data.get("formatConfig") or {}),
            matches=matches,
            current_stage=data.get("currentStage"),
        )
