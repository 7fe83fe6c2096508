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

# --- Constants ---
SAVE_FILE_EXTENSION = ".json"

# Logging
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVEL_ENV_VAR = "MATCHPLAY_LOG_LEVEL"

# Best of three
GAMES_PER_MATCH = 3
GAMES_TO_WIN = 2

# Match sides
SIDE_PLAYER1 = 1
SIDE_PLAYER2 = 2

# Round robin / default scoring
MATCH_WIN_POINTS = 3.0
GAME_WIN_POINTS = 1.0
GAME_LOSS_POINTS = -0.5

# Round robin generation retry ceiling
MAX_GENERATION_ATTEMPTS = 1000

# Comparison tolerances
POINTS_EPSILON = 0.01
PERCENTAGE_EPSILON = 0.001

# Stages
STAGE_GROUPS = "groups"
STAGE_PLAYOFFS = "playoffs"

# Bracket tags
BRACKET_WINNERS = "winners"
BRACKET_LOSERS = "losers"
BRACKET_GRAND_FINALS = "grand-finals"

# Seeding
SEEDING_RANDOM = "random"
SEEDING_SEEDED = "seeded"

# Group labels
GROUP_NAMES = ["A", "B", "C", "D", "E", "F", "G", "H"]

# Roster limits per format
ROUND_ROBIN_MIN_PLAYERS = 3
ROUND_ROBIN_MAX_PLAYERS = 12
SWISS_MIN_PLAYERS = 4
SWISS_MAX_PLAYERS = 100
SWISS_MAX_ROUNDS = 10
SWISS_DEFAULT_MAX_ROUNDS = 7
SINGLE_ELIMINATION_MIN_PLAYERS = 2
SINGLE_ELIMINATION_MAX_PLAYERS = 128
DOUBLE_ELIMINATION_SUPPORTED_SIZES = (4, 8, 16, 32)
GROUP_STAGE_MIN_PLAYERS = 8
GROUP_STAGE_MAX_PLAYERS = 64
GROUP_STAGE_MIN_GROUPS = 2
GROUP_STAGE_MAX_GROUPS = len(GROUP_NAMES)
GROUP_STAGE_MIN_GROUP_SIZE = 3

# Result processor error messages
ERROR_EARLIER_GAME = "complete earlier game first"
ERROR_MATCH_COMPLETED = "match already completed"
ERROR_MATCH_NOT_FOUND = "match not found"
ERROR_MATCH_NOT_READY = "match not ready"
ERROR_INVALID_GAME = "invalid game index"
ERROR_INVALID_SIDE = "invalid side"
ERROR_BYE_MATCH = "bye matches have no games"
