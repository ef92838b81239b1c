"""
Session state: the game in progress, rebuilt from disk at the start of every run.

games/current.pgn is authoritative for the moves; data/last_moves.txt names who
played them. When the two disagree (a run died between writing them) the
author comment stored with the last PGN move wins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import Workspace
from .errors import NoActiveMatchError
from .history import MoveHistory, MoveRecord
from .referee import Referee

log = logging.getLogger("session")


@dataclass
class SessionState:
    referee: Referee
    records: list[MoveRecord]
    last_mover: str | None
    last_is_start_marker: bool

    @property
    def moves(self) -> list[str]:
        return [uci for uci, _ in self.referee.move_authors()]

    def is_consecutive(self, author: str) -> bool:
        return self.last_mover == author and not self.last_is_start_marker


def has_active_match(workspace: Workspace) -> bool:
    if workspace.current_game.exists():
        return True
    if workspace.last_moves.exists():
        log.warning(
            "Found %s without %s; treating it as residue of an archived game",
            workspace.last_moves, workspace.current_game,
        )
    return False


def load_session(workspace: Workspace) -> SessionState:
    if not has_active_match(workspace):
        raise NoActiveMatchError()
    referee = Referee.load(workspace.current_game)
    records = MoveHistory(workspace.last_moves).read()
    last = records[-1] if records else None
    played = referee.move_authors()

    if not played:
        if last is not None and not last.is_start_marker:
            log.warning("Move history ends with %r but the game has no moves; treating the game as just started", last.line())
        return SessionState(referee, records, last.author if last else None, True)

    uci, author = played[-1]
    if last is None or last.is_start_marker or last.move != uci:
        log.warning(
            "Move history out of step with the game record (last logged %r, last played %s by %s)",
            last.line() if last else None, uci, author or "?",
        )
        if author:
            return SessionState(referee, records, author, False)
        log.error("Last move %s of the game record has no author; keeping the consecutive-move check on", uci)
        return SessionState(referee, records, last.author if last else None, False)
    return SessionState(referee, records, last.author, last.is_start_marker)
