"""
Referee: the match artifact and its board.

- Owns a python-chess PGN Game and the Board at the end of its mainline.
- Answers the rules questions the move pipeline asks (legal? capture? valid afterwards?).
- Applies accepted moves, storing the author as the move comment.
- Loads from / saves to games/current.pgn.

"""
from __future__ import annotations

import datetime
import io
import os
from pathlib import Path

import chess
import chess.pgn

from .errors import CorruptArtifactError


class Referee:
    """Plain chess referee around a python-chess Game/Board pair."""

    def __init__(self, game: chess.pgn.Game | None = None):
        self.game = game if game is not None else chess.pgn.Game()
        self.board = self.game.end().board()

    # ---------------- Loading -----------------
    @classmethod
    def from_pgn(cls, text: str, source: str = "<pgn>") -> "Referee":
        game = chess.pgn.read_game(io.StringIO(text))
        if game is None:
            raise CorruptArtifactError(f"{source}: no game found")
        if game.errors:
            raise CorruptArtifactError(f"{source}: unreadable game record ({game.errors[0]})")
        return cls(game)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "Referee":
        path = Path(path)
        return cls.from_pgn(path.read_text(encoding="utf-8"), source=str(path))

    # ---------------- Header Management -----------------
    def set_headers(self, event: str, site: str, date: str | None = None, round_: str = "1") -> None:
        date = date or datetime.date.today().strftime("%Y.%m.%d")
        self.game.headers.update({
            "Event": event,
            "Site": site,
            "Date": date,
            "Round": round_,
        })

    # ---------------- Rules questions -----------------
    @staticmethod
    def parse_uci(uci: str) -> chess.Move | None:
        try:
            return chess.Move.from_uci(uci)
        except ValueError:
            return None

    def is_legal(self, uci: str) -> bool:
        mv = self.parse_uci(uci)
        return mv is not None and self.board.is_legal(mv)

    def is_capture(self, uci: str) -> bool:
        mv = self.parse_uci(uci)
        return mv is not None and self.board.is_capture(mv)

    def leaves_valid_position(self, uci: str) -> bool:
        mv = self.parse_uci(uci)
        if mv is None:
            return False
        tmp = self.board.copy(stack=False)
        tmp.push(mv)
        return tmp.is_valid()

    @property
    def turn_name(self) -> str:
        return "white" if self.board.turn == chess.WHITE else "black"

    # ---------------- Move Application -----------------
    def apply_uci(self, uci: str, author: str) -> str:
        """Push a move already checked by the caller; returns its SAN."""
        mv = chess.Move.from_uci(uci)
        san = self.board.san(mv)
        self.board.push(mv)
        self.game.end().add_main_variation(mv, comment=author)
        self.game.headers["Result"] = self.status()
        return san

    def move_authors(self) -> list[tuple[str, str]]:
        """(uci, author comment) for every move of the mainline."""
        return [(node.move.uci(), node.comment.strip()) for node in self.game.mainline()]

    # ---------------- Status / PGN -----------------
    def outcome(self) -> chess.Outcome | None:
        return self.board.outcome()

    def status(self) -> str:
        return self.board.result()

    def pgn(self) -> str:
        exporter = chess.pgn.StringExporter(headers=True, variations=False, comments=True)
        return self.game.accept(exporter)

    def save(self, path: str | os.PathLike) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.pgn() + "\n", encoding="utf-8")
