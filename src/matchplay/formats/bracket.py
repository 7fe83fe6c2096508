"""Bracket construction helpers shared by the elimination formats."""

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

import math
import random
from typing import Dict, List, Optional, Sequence, Set, Tuple

from matchplay.constants import (
    SEEDING_RANDOM,
    SIDE_PLAYER1,
    SIDE_PLAYER2,
    STAGE_GROUPS,
)
from matchplay.exceptions import BracketIntegrityException
from matchplay.models.match import FeedEdge, Match
from matchplay.type_hints import MatchId, PlayerIndex
from matchplay.utils import next_power_of_two, shuffle


def slot_for_position(position: int) -> int:
    """Even positions feed slot 1 of their successor, odd positions slot 2."""
    return SIDE_PLAYER1 if position % 2 == 0 else SIDE_PLAYER2


def interleave_seeds(
    seeds: Sequence[Optional[PlayerIndex]],
) -> List[Optional[PlayerIndex]]:
    """Pad ``seeds`` to a power of two and interleave top and bottom halves.

    ``[s0, s1, s2, s3, s4]`` becomes ``[s0, None, s1, None, s2, None, s3, s4]``
    so consecutive entries form first round pairings and the padding lands
    against the top seeds.
    """
    size = next_power_of_two(len(seeds))
    padded: List[Optional[PlayerIndex]] = list(seeds) + [None] * (size - len(seeds))
    ordered: List[Optional[PlayerIndex]] = []
    for i in range(size // 2):
        ordered.append(padded[i])
        ordered.append(padded[size - 1 - i])
    return ordered


def seed_order(
    players: Sequence[PlayerIndex],
    method: str = SEEDING_RANDOM,
    rng: Optional[random.Random] = None,
) -> List[Optional[PlayerIndex]]:
    """Bracket slot order for ``players``, shuffled first for random seeding."""
    seeds = list(players)
    if method == SEEDING_RANDOM:
        shuffle(seeds, rng)
    return interleave_seeds(seeds)


def first_round_pairings(
    ordered: Sequence[Optional[PlayerIndex]],
) -> List[Tuple[Optional[PlayerIndex], Optional[PlayerIndex]]]:
    return [(ordered[i], ordered[i + 1]) for i in range(0, len(ordered), 2)]


def num_rounds_for(bracket_size: int) -> int:
    return int(math.log2(bracket_size)) if bracket_size > 1 else 0


def round_name(round_number: int, total_rounds: int) -> str:
    """Display name for an elimination round by its distance from the final."""
    distance = total_rounds - round_number
    if distance == 0:
        return "Finals"
    if distance == 1:
        return "Semifinals"
    if distance == 2:
        return "Quarterfinals"
    return f"Round {round_number}"


def apply_first_round(
    round_one: Sequence[Match],
    pairings: Sequence[Tuple[Optional[PlayerIndex], Optional[PlayerIndex]]],
) -> None:
    """Place first round pairings; a pairing with one empty side becomes a bye."""
    for match, (top, bottom) in zip(round_one, pairings):
        if top is None and bottom is None:
            continue
        if top is None or bottom is None:
            match.player1 = top if top is not None else bottom
            match.player2 = None
            match.is_bye = True
            match.winner = SIDE_PLAYER1
            match.is_placeholder = False
        else:
            match.player1 = top
            match.player2 = bottom
            match.is_bye = False
            match.winner = None
            match.is_placeholder = False


def build_elimination_rounds(
    matches: List[Match],
    bracket_size: int,
    *,
    stage: Optional[str] = None,
    bracket: Optional[str] = None,
    label_prefix: str = "",
    double_elimination: bool = False,
) -> Dict[int, List[MatchId]]:
    """Append an empty knockout bracket to ``matches``.

    Every match starts as a placeholder. Match ``2k`` and ``2k + 1`` of round
    ``r`` feed match ``k`` of round ``r + 1`` at slot 1 and slot 2.
    Single elimination links use ``feeds_into``; double elimination winners
    bracket links use ``feeds_into_win`` (loser edges are added by the caller).

    Returns:
        Mapping of round number to the ids of its matches
    """
    total_rounds = num_rounds_for(bracket_size)
    rounds: Dict[int, List[MatchId]] = {}

    for round_number in range(1, total_rounds + 1):
        rounds[round_number] = []
        for position in range(bracket_size // (2 ** round_number)):
            match = Match(
                id=len(matches),
                round=round_number,
                stage=stage,
                bracket=bracket,
                bracket_position=f"{label_prefix}R{round_number}-M{position + 1}",
                is_placeholder=True,
            )
            matches.append(match)
            rounds[round_number].append(match.id)

    for round_number in range(1, total_rounds):
        next_round = rounds[round_number + 1]
        for position, match_id in enumerate(rounds[round_number]):
            edge = FeedEdge(next_round[position // 2], slot_for_position(position))
            if double_elimination:
                matches[match_id].feeds_into_win = edge
            else:
                matches[match_id].feeds_into = edge

    return rounds


def validate_bracket(matches: Sequence[Match]) -> None:
    """Check the feed edges of a match list.

    Every edge must point at an existing, later match and no player slot may
    be fed by two edges. Apart from third place and bracket reset matches,
    exactly one match may have no outgoing edge.

    Raises:
        BracketIntegrityException: If any check fails
    """
    targets: Set[Tuple[MatchId, int]] = set()
    linked = False

    for position, match in enumerate(matches):
        if match.id != position:
            raise BracketIntegrityException(
                f"Match at position {position} has id {match.id}"
            )
        if match.feeds_into is not None and (
            match.feeds_into_win is not None or match.feeds_into_loss is not None
        ):
            raise BracketIntegrityException(
                f"Match {match.id} mixes single and double elimination routing"
            )
        for edge in match.outgoing_edges():
            linked = True
            if not 0 <= edge.match_id < len(matches):
                raise BracketIntegrityException(
                    f"Match {match.id} feeds missing match {edge.match_id}"
                )
            if edge.match_id <= match.id:
                raise BracketIntegrityException(
                    f"Match {match.id} feeds earlier match {edge.match_id}"
                )
            if edge.slot not in (SIDE_PLAYER1, SIDE_PLAYER2):
                raise BracketIntegrityException(
                    f"Match {match.id} feeds invalid slot {edge.slot}"
                )
            key = (edge.match_id, edge.slot)
            if key in targets:
                raise BracketIntegrityException(
                    f"Slot {edge.slot} of match {edge.match_id} has two feeders"
                )
            targets.add(key)
        if match.reset_match_id is not None and not (
            0 <= match.reset_match_id < len(matches)
        ):
            raise BracketIntegrityException(
                f"Match {match.id} resets into missing match {match.reset_match_id}"
            )

    if not linked:
        return

    sinks = [
        m
        for m in matches
        if not m.outgoing_edges()
        and not m.is_third_place
        and not m.is_conditional
        and m.stage != STAGE_GROUPS
    ]
    if len(sinks) != 1:
        raise BracketIntegrityException(
            f"Bracket must have exactly one final, found {len(sinks)}"
        )
