"""
Move-history log (data/last_moves.txt).

One entry per line, oldest first: `<move-or-marker>: <identity>`, e.g.
`Start game: @owner` followed by `e2e4: @alice`.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

START_MARKER = "Start game"
# trailing GitHub handle: alphanumerics and single inner hyphens, 1-39 characters
PLAYER_RE = re.compile(r".*: (@[a-z\d](?:[a-z\d]|-(?=[a-z\d])){0,38})", re.I)


@dataclass(frozen=True)
class MoveRecord:
    move: str
    author: str

    @property
    def is_start_marker(self) -> bool:
        return START_MARKER in self.move

    def line(self) -> str:
        return f"{self.move}: {self.author}"

    @classmethod
    def parse(cls, line: str) -> "MoveRecord | None":
        if ":" not in line:
            return None
        move, _, author = line.partition(":")
        return cls(move.strip(), author.strip())


class MoveHistory:
    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def lines(self) -> list[str]:
        if not self.path.exists():
            return []
        return [ln for ln in self.path.read_text(encoding="utf-8").splitlines() if ln.strip()]

    def read(self) -> list[MoveRecord]:
        records = (MoveRecord.parse(ln) for ln in self.lines())
        return [r for r in records if r is not None]

    def reset(self, author: str) -> None:
        """Start a fresh log holding only the start marker."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(MoveRecord(START_MARKER, author).line() + "\n", encoding="utf-8")

    def append(self, record: MoveRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(record.line() + "\n")

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)

    def participants(self) -> list[str]:
        """Distinct identities in order of first appearance."""
        found = (PLAYER_RE.match(ln) for ln in self.lines())
        return list(dict.fromkeys(m.group(1) for m in found if m))
