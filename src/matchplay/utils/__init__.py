"""Shared helpers: logging setup, shuffling and bracket arithmetic."""

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

import logging
import os
import random
from typing import List, Optional, TypeVar

from matchplay.constants import LOG_FORMAT, LOG_LEVEL_ENV_VAR

T = TypeVar("T")


def setup_logger(name: str) -> logging.Logger:
    """Return a module logger with the project handler attached once.

    The level is read from the ``MATCHPLAY_LOG_LEVEL`` environment variable
    and defaults to WARNING.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
        logger.setLevel(getattr(logging, level_name, logging.WARNING))
        logger.propagate = False
    return logger


def shuffle(items: List[T], rng: Optional[random.Random] = None) -> List[T]:
    """Shuffle ``items`` in place with Fisher-Yates and return it.

    Args:
        items: List to shuffle
        rng: Random source, the module level generator when omitted

    Returns:
        The same list, shuffled
    """
    rand = rng if rng is not None else random
    for i in range(len(items) - 1, 0, -1):
        j = rand.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def next_power_of_two(n: int) -> int:
    """Smallest power of two greater than or equal to ``n``."""
    power = 1
    while power < n:
        power *= 2
    return power
