"""
Error hierarchy for the chess bot.

Two families:
- CommandRejected: the issue author asked for something that cannot be done.
  The bot answers on the issue (comment, optional "Invalid" label, close) and
  the process exits with status 1.
- FatalError: the workspace or configuration is broken. Nothing is reported on
  the issue; the CLI logs the traceback and exits with status 2.

Usage:
    try:
        result = bot.handle(issue, author)
    except FatalError:
        log.exception("Invocation failed")
"""
from __future__ import annotations

__all__ = [
    "ChessBotError",
    "CommandRejected",
    "MalformedCommandError",
    "NoActiveMatchError",
    "UnauthorizedNewGameError",
    "SelfTargetingMoveError",
    "ConsecutiveMoveError",
    "IllegalMoveError",
    "InvalidResultingPositionError",
    "FatalError",
    "ConfigurationError",
    "CorruptArtifactError",
]


class ChessBotError(Exception):
    """Base class for every error raised by the bot."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------------- User-attributable rejections -----------------
class CommandRejected(ChessBotError):
    """A command that is answered on the issue instead of being applied.

    template names the entry of Settings.comments used for the reply;
    mark_invalid decides whether the issue also gets the "Invalid" label.
    """

    template: str = "unknown_command"
    mark_invalid: bool = True
    default_message: str = "ERROR: Command rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class MalformedCommandError(CommandRejected):
    template = "unknown_command"
    default_message = "ERROR: Unknown action"


class NoActiveMatchError(CommandRejected):
    template = "no_active_game"
    mark_invalid = False
    default_message = "ERROR: There is no game in progress! Start a new game first"


class UnauthorizedNewGameError(CommandRejected):
    template = "invalid_new_game"
    mark_invalid = False
    default_message = "ERROR: A current game is in progress. Only the repo owner can start a new game"


class SelfTargetingMoveError(CommandRejected):
    template = "invalid_move"
    default_message = "ERROR: Move is invalid! Source and destination are the same square"


class ConsecutiveMoveError(CommandRejected):
    template = "consecutive_moves"
    default_message = "ERROR: Two moves in a row!"


class IllegalMoveError(CommandRejected):
    template = "invalid_move"
    default_message = "ERROR: Move is invalid!"


class InvalidResultingPositionError(CommandRejected):
    template = "invalid_board"
    default_message = "ERROR: Board is invalid!"


# ---------------- Fatal errors -----------------
class FatalError(ChessBotError):
    """Unrecoverable condition; the issue is left untouched."""


class ConfigurationError(FatalError):
    """Settings file missing or lacking a required key."""


class CorruptArtifactError(FatalError):
    """A persisted artifact (game record, leaderboard) cannot be parsed."""
