"""
Leaderboard ledger (data/top_moves.txt).

Lifetime number of accepted moves per player, kept across games as a JSON
object in insertion order. Counts only ever go up.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .errors import CorruptArtifactError

log = logging.getLogger("ledger")


class Leaderboard:
    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def load(self) -> dict[str, int]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptArtifactError(f"{self.path}: not a JSON object ({e})") from e
        if not isinstance(data, dict) or not all(isinstance(v, int) for v in data.values()):
            raise CorruptArtifactError(f"{self.path}: expected a mapping of identity to move count")
        return data

    def save(self, counts: dict[str, int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(counts, f, ensure_ascii=False, indent=2)

    def increment(self, identity: str, counts: dict[str, int] | None = None) -> int:
        """Add one move for identity. counts, when given, is a mapping already read with load()."""
        counts = self.load() if counts is None else dict(counts)
        counts[identity] = counts.get(identity, 0) + 1
        self.save(counts)
        log.debug("Leaderboard %s -> %d", identity, counts[identity])
        return counts[identity]

    def top(self, n: int) -> list[tuple[str, int]]:
        # sorted() is stable, so equal counts keep insertion order
        ranked = sorted(self.load().items(), key=lambda kv: kv[1], reverse=True)
        return ranked[:n]
