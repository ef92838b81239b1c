"""
End-of-game handling: detect a finished game, summarise it, archive it.

Archival renames games/current.pgn first and deletes data/last_moves.txt
second. A crash in between leaves only a history log behind, which the
session loader reports as residue rather than as a corrupt game.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .config import Workspace
from .history import MoveHistory
from .referee import Referee

log = logging.getLogger("terminal")

RESULT_OUTCOMES = {
    "1/2-1/2": "draw",
    "1-0": "white wins",
    "0-1": "black wins",
}
UNKNOWN_OUTCOME = "unknown"


@dataclass(frozen=True)
class GameOver:
    result: str
    outcome: str
    termination: str
    players: list[str]
    num_moves: int
    archive_path: Path

    @property
    def is_draw(self) -> bool:
        return self.outcome == "draw"


def outcome_for(result: str) -> str:
    return RESULT_OUTCOMES.get(result, UNKNOWN_OUTCOME)


def archive_match(workspace: Workspace, when: datetime) -> Path:
    """Move the current game into the archive, then drop the move history."""
    target = workspace.archive_path(when)
    if target.exists():
        raise FileExistsError(f"Archive {target} already exists")
    workspace.current_game.rename(target)
    MoveHistory(workspace.last_moves).delete()
    log.info("Archived game to %s", target)
    return target


def conclude_if_over(referee: Referee, workspace: Workspace, when: datetime) -> GameOver | None:
    """Archive the game when the board is terminal; None while it goes on."""
    outcome = referee.outcome()
    if outcome is None:
        return None
    history = MoveHistory(workspace.last_moves)
    players = history.participants()
    num_moves = sum(1 for r in history.read() if not r.is_start_marker)
    result = outcome.result()
    summary = GameOver(
        result=result,
        outcome=outcome_for(result),
        termination=outcome.termination.name.lower(),
        players=players,
        num_moves=num_moves,
        archive_path=archive_match(workspace, when),
    )
    log.info("Game over: %s (%s) after %d moves by %d players", summary.outcome, summary.termination, num_moves, len(players))
    return summary
