"""Issue title parsing."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

NEW_GAME_TITLE = "chess: start new game"
MOVE_PREFIX = "chess: move"
MOVE_RE = re.compile(r"Chess: Move ([A-H][1-8]) to ([A-H][1-8])", re.I)


class Action(Enum):
    UNKNOWN = 0
    MOVE = 1
    NEW_GAME = 2


@dataclass(frozen=True)
class Command:
    action: Action
    move: str | None = None  # lower-case "e2e4"; "" when the move phrase did not match


def parse_issue(title: str | None) -> Command:
    """Map an issue title to a Command. Never raises."""
    text = title or ""
    lowered = text.lower()
    if lowered == NEW_GAME_TITLE:
        return Command(Action.NEW_GAME)
    if MOVE_PREFIX in lowered:
        m = MOVE_RE.search(text)
        if not m:
            # Left to the move pipeline, which rejects it as an invalid move
            return Command(Action.MOVE, "")
        return Command(Action.MOVE, (m.group(1) + m.group(2)).lower())
    return Command(Action.UNKNOWN)
