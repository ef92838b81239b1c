"""
Command-line entry point.

    readme-chess --issue 42                 # handle one issue of $GITHUB_REPOSITORY
    readme-chess --self-test tests/games    # replay YAML scenarios

Exit status: 0 applied, 1 rejected (reason on stderr, reply posted on the issue),
2 fatal (broken workspace/settings or GitHub failure; nothing posted).
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from github import GithubException

from . import selftest
from .bot import ChessBot
from .config import RUNTIME, Workspace, load_settings, owner_identity
from .errors import FatalError
from .github_client import fetch_issue
from .locking import single_flight

log = logging.getLogger("readme_chess")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="readme-chess", description="Play one chess command from a GitHub issue.")
    ap.add_argument("--repo", default=None, help="owner/name (defaults to $GITHUB_REPOSITORY)")
    ap.add_argument("--issue", type=int, default=None, help="Issue number (defaults to $ISSUE_NUMBER)")
    ap.add_argument("--owner", default=None, help="Identity allowed to restart a running game (defaults to @<repo owner>)")
    ap.add_argument("--workspace", default=None, help="Directory holding games/, data/ and README.md")
    ap.add_argument("--settings", default=None, help="Settings YAML (defaults to <workspace>/data/settings.yaml)")
    ap.add_argument("--self-test", nargs="?", const="tests/games", default=None, metavar="DIR",
                    help="Replay the YAML scenarios in DIR instead of handling an issue")
    ap.add_argument("--log-level", default="INFO", help="Python logging level (e.g., INFO, DEBUG)")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    workspace = Workspace(Path(args.workspace or RUNTIME.workspace))
    repository = args.repo or RUNTIME.repository
    number = args.issue if args.issue is not None else RUNTIME.issue_number
    if args.self_test is None and (not repository or number is None):
        ap.error("a repository (--repo / GITHUB_REPOSITORY) and an issue (--issue / ISSUE_NUMBER) are required")

    try:
        settings = load_settings(args.settings or workspace.settings)
        if args.self_test is not None:
            _, failed = selftest.run(args.self_test, settings)
            return 1 if failed else 0

        owner = owner_identity(repository, args.owner or RUNTIME.owner)
        issue = fetch_issue(repository, number, RUNTIME.github_token)
        bot = ChessBot(settings, workspace, repository=repository, owner=owner)
        with single_flight(workspace.lock_file):
            result = bot.handle(issue, issue.author)
    except (FatalError, OSError, GithubException):
        log.exception("Invocation failed")
        return 2

    if not result.ok:
        print(result.reason, file=sys.stderr)
        return 1
    return 0
