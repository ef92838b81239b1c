"""
Scenario replay (`readme-chess --self-test DIR`).

Each YAML file in DIR describes one sequence of issues:

    name: Fool's mate
    owner: "@owner"
    moves:
      - {move: "Chess: Start new game", author: "@owner"}
      - {move: "Chess: Move F2 to F3", author: "@alice"}
      - {move: "Chess: Move D8 to H4", author: "@bob", is_winner: true}

Optional flags per entry: is_capture, is_consecutive, is_invalid, is_unknown,
is_no_game, is_winner, is_draw. Every issue is fed to a ChessBot running in a
throw-away workspace; a MockIssue checks the comments and labels the flags
predict.
"""
from __future__ import annotations

import glob
import itertools
import os
import re
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

import yaml

from .bot import ChessBot
from .config import Settings, Workspace
from .mock_github import MockIssue

HANDLE = r"@[A-Za-z\d-]+"


def template_regex(template: str, patterns: dict[str, str]) -> str:
    """Escape a reply template and turn its placeholders into the given regexes."""
    escaped = re.escape(template)
    for key, pattern in patterns.items():
        escaped = escaped.replace(re.escape("{" + key + "}"), pattern)
    return escaped


def _ticking_clock(start: datetime | None = None) -> Callable[[], datetime]:
    # one second per call so archive names never collide
    base = start or datetime.now().replace(microsecond=0)
    counter = itertools.count()
    return lambda: base + timedelta(seconds=next(counter))


def expectations(settings: Settings, move_data: dict, ply: int) -> tuple[list[str], list[str]]:
    """Labels and comment regexes a scenario entry should produce. ply counts accepted moves including this one."""
    c, lab = settings.comments, settings.labels
    labels: list[str] = []
    comments: list[str] = []
    title = str(move_data["move"])

    if move_data.get("is_unknown"):
        return [lab.invalid], [template_regex(c.unknown_command, {"author": HANDLE})]
    if move_data.get("is_no_game"):
        return [], [template_regex(c.no_active_game, {"author": HANDLE, "move": ".*"})]

    if "start new game" in title.lower():
        key = c.invalid_new_game if move_data.get("is_invalid") else c.successful_new_game
        return [], [template_regex(key, {"author": HANDLE})]

    if move_data.get("is_consecutive"):
        return [lab.invalid], [template_regex(c.consecutive_moves, {"author": HANDLE, "move": ".*"})]
    if move_data.get("is_invalid"):
        return [lab.invalid], [template_regex(c.invalid_move, {"author": HANDLE, "move": ".*"})]

    labels.append(lab.white if ply % 2 == 1 else lab.black)
    comments.append(template_regex(c.successful_move, {"author": HANDLE, "move": ".....?"}))
    if move_data.get("is_capture"):
        labels.append(lab.capture)
    if move_data.get("is_winner") or move_data.get("is_draw"):
        labels.append(lab.winner if move_data.get("is_winner") else lab.draw)
        comments.append(template_regex(c.game_over, {
            "outcome": ".+",
            "players": rf"{HANDLE}(?:, {HANDLE})*",
            "num_moves": r"\d+",
            "num_players": r"\d+",
        }))
    return labels, comments


def _is_accepted_move(move_data: dict) -> bool:
    flags = ("is_unknown", "is_no_game", "is_consecutive", "is_invalid")
    return "start new game" not in str(move_data["move"]).lower() and not any(move_data.get(f) for f in flags)


def run_test_case(path: str | os.PathLike, settings: Settings) -> tuple[int, int]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    owner = str(data["owner"])
    repository = f"{owner[1:]}/{owner[1:]}"
    passed = failed = 0
    ply = 0

    print(data.get("name", Path(path).stem))
    with tempfile.TemporaryDirectory() as td:
        bot = ChessBot(settings, Workspace(Path(td)), repository, owner, clock=_ticking_clock())
        for move_data in data.get("moves") or []:
            title = str(move_data["move"])
            if "start new game" in title.lower() and not move_data.get("is_invalid"):
                ply = 0
            elif _is_accepted_move(move_data):
                ply += 1

            issue = MockIssue(title)
            labels, comments = expectations(settings, move_data, ply)
            issue.expect_labels(labels)
            issue.expect_comments(comments)
            bot.handle(issue, str(move_data["author"]))

            ok, reason = issue.expectations_fulfilled()
            if ok:
                print(f"    ✓ {title} by {move_data['author']}")
                passed += 1
            else:
                print(f"    ✗ {title} by {move_data['author']} → {reason}")
                failed += 1
    return passed, failed


def run(directory: str | os.PathLike, settings: Settings) -> tuple[int, int]:
    files = sorted(
        glob.glob(os.path.join(directory, "*.yml")) + glob.glob(os.path.join(directory, "*.yaml"))
    )
    passed = failed = 0
    for path in files:
        p, f = run_test_case(path, settings)
        passed += p
        failed += f
    print()
    print(f"    {passed + failed} total")
    print(f"    {passed} passed")
    print(f"    {failed} failed")
    return passed, failed
