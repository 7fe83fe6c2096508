"""Tournament persistence.

The engine only needs something that can load and save a
:class:`~matchplay.models.state.TournamentState`. Stored state is always
read back through ``TournamentState.from_dict``, which re-pads game slots
and accepts match collections stored as dicts, for backends that drop
``null`` values.
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

import json
from pathlib import Path
from typing import Any, Dict, List, Protocol, Union

from matchplay.constants import SAVE_FILE_EXTENSION
from matchplay.exceptions import (
    MatchPlayException,
    StorageException,
    TournamentNotFoundException,
)
from matchplay.models.state import TournamentState
from matchplay.utils import setup_logger

logger = setup_logger(__name__)


class TournamentStore(Protocol):
    """Anything that can load and save tournaments by id."""

    def load(self, tournament_id: str) -> TournamentState: ...

    def save(self, tournament_id: str, state: TournamentState) -> None: ...


class InMemoryStore:
    """Keeps serialized tournaments in a dict.

    State is stored in its serialized form so a load goes through the same
    normalization as a file or remote backend would.
    """

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}

    def save(self, tournament_id: str, state: TournamentState) -> None:
        self._data[tournament_id] = json.loads(json.dumps(state.to_dict()))

    def load(self, tournament_id: str) -> TournamentState:
        if tournament_id not in self._data:
            raise TournamentNotFoundException(f"Tournament '{tournament_id}' not found")
        return TournamentState.from_dict(self._data[tournament_id])

    def put_raw(self, tournament_id: str, data: Dict[str, Any]) -> None:
        """Store an already serialized tournament as-is."""
        self._data[tournament_id] = data


class JsonFileStore:
    """One ``<id>.json`` file per tournament inside a directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, tournament_id: str) -> Path:
        return self.directory / f"{tournament_id}{SAVE_FILE_EXTENSION}"

    def save(self, tournament_id: str, state: TournamentState) -> None:
        path = self.path_for(tournament_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(state.to_dict(), f, indent=4)
        except OSError as e:
            raise StorageException(f"Could not save tournament to {path}: {e}") from e
        logger.debug(f"Saved tournament '{tournament_id}' to {path}")

    def load(self, tournament_id: str) -> TournamentState:
        path = self.path_for(tournament_id)
        if not path.exists():
            raise TournamentNotFoundException(f"No saved tournament at {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            state = TournamentState.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise StorageException(f"Could not load tournament from {path}: {e}") from e
        except MatchPlayException as e:
            raise StorageException(f"Invalid tournament in {path}: {e}") from e
        logger.debug(f"Loaded tournament '{tournament_id}' from {path}")
        return state

    def exists(self, tournament_id: str) -> bool:
        return self.path_for(tournament_id).exists()

    def list_ids(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob(f"*{SAVE_FILE_EXTENSION}"))
