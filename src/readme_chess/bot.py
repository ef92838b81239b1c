"""
Single-invocation command handler.

- ChessBot.handle(): parse the issue title, start a game or apply one move, report
  back on the issue, archive the game when it ends, refresh README.md.
- BotResult: what happened, for the CLI exit status and for tests.

Every run starts from the files in the workspace; nothing is kept in memory
between runs. Rejections are answered on the issue and never touch the files.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .commands import Action, Command, parse_issue
from .config import Settings, Workspace
from .errors import (
    CommandRejected,
    ConsecutiveMoveError,
    IllegalMoveError,
    InvalidResultingPositionError,
    MalformedCommandError,
    SelfTargetingMoveError,
    UnauthorizedNewGameError,
)
from .github_client import IssueHandle
from .history import MoveHistory, MoveRecord
from .ledger import Leaderboard
from .markdown import generate_last_moves, generate_top_moves, update_readme
from .referee import Referee
from .session import has_active_match, load_session
from .templates import render
from .terminal import GameOver, archive_match, conclude_if_over


@dataclass
class BotResult:
    ok: bool
    reason: str = ""
    command: Command | None = None
    move: str | None = None  # as applied, including an adopted promotion suffix
    capture: bool = False
    game_over: GameOver | None = None


class ChessBot:
    def __init__(
        self,
        settings: Settings,
        workspace: Workspace,
        repository: str,
        owner: str,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.log = logging.getLogger("ChessBot")
        self.settings = settings
        self.ws = workspace
        self.repository = repository
        self.owner = owner
        self.clock = clock
        self.history = MoveHistory(workspace.last_moves)
        self.leaderboard = Leaderboard(workspace.top_moves)

    # ---------------- Entry point -----------------
    def handle(self, issue: IssueHandle, author: str) -> BotResult:
        command = parse_issue(issue.title)
        self.log.info("Issue %r by %s -> %s %s", issue.title, author, command.action.name, command.move or "")
        try:
            if command.action is Action.NEW_GAME:
                result = self._start_new_game(issue, author)
            elif command.action is Action.MOVE:
                result = self._play_move(issue, author, command.move or "")
            else:
                raise MalformedCommandError()
        except CommandRejected as e:
            self._reject(issue, author, command, e)
            return BotResult(ok=False, reason=e.message, command=command, move=command.move)
        result.command = command
        return result

    # ---------------- New game -----------------
    def _start_new_game(self, issue: IssueHandle, author: str) -> BotResult:
        if has_active_match(self.ws):
            if author != self.owner:
                raise UnauthorizedNewGameError()
            self.log.info("Owner %s is replacing the game in progress", author)
            archive_match(self.ws, self.clock())

        self.history.reset(author)
        referee = Referee()
        referee.set_headers(
            event=f"{self.owner}'s Online Open Chess Tournament",
            site=f"https://github.com/{self.repository}",
            date=self.clock().strftime("%Y.%m.%d"),
            round_="1",
        )
        referee.save(self.ws.current_game)
        self.log.info("New game started by %s", author)

        issue.create_comment(render(self.settings.comments.successful_new_game, {"author": author}))
        issue.close()
        return self._finish(issue, referee, BotResult(ok=True))

    # ---------------- Move -----------------
    def _play_move(self, issue: IssueHandle, author: str, move: str) -> BotResult:
        session = load_session(self.ws)
        referee = session.referee

        if len(move) < 4:
            raise IllegalMoveError()
        if move[:2] == move[2:]:
            raise SelfTargetingMoveError()

        # Pawns reaching the last rank always become queens
        if referee.is_legal(move + "q"):
            move = move + "q"

        if session.is_consecutive(author):
            raise ConsecutiveMoveError()
        if not referee.is_legal(move):
            raise IllegalMoveError()
        if not referee.leaves_valid_position(move):
            raise InvalidResultingPositionError()

        capture = referee.is_capture(move)
        mover_label = self.settings.labels.white if referee.turn_name == "white" else self.settings.labels.black

        # nothing is written until the ledger has been read
        counts = self.leaderboard.load()
        san = referee.apply_uci(move, author)
        referee.save(self.ws.current_game)
        self.history.append(MoveRecord(move, author))
        total = self.leaderboard.increment(author, counts)
        self.log.info("Applied %s (%s) for %s; %d moves on record", move, san, author, total)

        labels = [self.settings.labels.capture] if capture else []
        labels.append(mover_label)
        issue.create_comment(render(self.settings.comments.successful_move, {"author": author, "move": move}))
        issue.close(labels=labels)
        return self._finish(issue, referee, BotResult(ok=True, move=move, capture=capture))

    # ---------------- Shared tail -----------------
    def _finish(self, issue: IssueHandle, referee: Referee, result: BotResult) -> BotResult:
        last_moves = generate_last_moves(self.settings, self.history.read())
        over = conclude_if_over(referee, self.ws, self.clock())
        if over is not None:
            issue.add_labels(self.settings.labels.draw if over.is_draw else self.settings.labels.winner)
            issue.create_comment(render(self.settings.comments.game_over, {
                "outcome": over.outcome,
                "players": ", ".join(over.players),
                "num_moves": over.num_moves,
                "num_players": len(over.players),
            }))
            result.game_over = over
        self._refresh_readme(referee, last_moves)
        return result

    def _refresh_readme(self, referee: Referee, last_moves: str) -> None:
        if not self.ws.readme.exists():
            self.log.warning("%s not found; skipping board update", self.ws.readme)
            return
        top_moves = generate_top_moves(self.leaderboard.top(self.settings.misc.max_top_moves))
        text = self.ws.readme.read_text(encoding="utf-8")
        text = update_readme(text, self.settings, self.repository, referee.board, last_moves, top_moves)
        self.ws.readme.write_text(text, encoding="utf-8")
        self.log.info("Updated %s", self.ws.readme)

    def _reject(self, issue: IssueHandle, author: str, command: Command, error: CommandRejected) -> None:
        self.log.warning("Rejected %s by %s: %s", command.action.name, author, error.message)
        template = self.settings.comments.get(error.template)
        issue.create_comment(render(template, {"author": author, "move": command.move or ""}))
        if error.mark_invalid:
            issue.close(labels=[self.settings.labels.invalid])
        else:
            issue.close()
