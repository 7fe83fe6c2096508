"""Exceptions for use in Match Play"""

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


# ========== Base Application Exception ==========


class MatchPlayException(Exception):
    """Base exception for all Match Play errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(MatchPlayException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when the roster size or format parameters are invalid.

    Raised before any match is generated.
    """

    pass


# ========== Generation Exceptions ==========


class GenerationException(MatchPlayException):
    """Base exception for match structure generation errors."""

    pass


class NoValidStructureException(GenerationException):
    """Raised when the round robin retry budget is exhausted."""

    pass


# ========== Result Exceptions ==========


class ResultException(MatchPlayException):
    """Base exception for result recording errors."""

    pass


class SequenceException(ResultException):
    """Raised when a game is reported out of order or a locked slot is edited."""

    pass


# ========== Stage Exceptions ==========


class StageException(MatchPlayException):
    """Raised when advancing a stage that is incomplete or has no successor."""

    pass


# ========== Bracket Exceptions ==========


class BracketIntegrityException(MatchPlayException):
    """Raised when feed edges do not form a well-formed bracket.

    This signals a construction bug in a generator, never a user error.
    """

    pass


# ========== Storage Exceptions ==========


class StorageException(MatchPlayException):
    """Base exception for persistence errors."""

    pass


class TournamentNotFoundException(StorageException):
    """Raised when a requested tournament cannot be found."""

    pass
