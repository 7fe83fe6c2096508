"""Type hints used in Match Play."""

from typing import List, Literal, Optional, Tuple

# Player slot in a match: 1 = player1, 2 = player2
Side = Literal[1, 2]

# Zero-based index into the roster
PlayerIndex = int

# Match ids are positions in the tournament's match list
MatchId = int

# One game slot: unset, or the side that won it
GameSlot = Optional[int]

# (player1, player2); player2 is None for a bye
Pairing = Tuple[PlayerIndex, Optional[PlayerIndex]]
Pairings = List[Pairing]

BracketName = Literal["winners", "losers", "grand-finals"]
StageName = Literal["groups", "playoffs"]
