import contextlib
import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import yaml

from src.readme_chess.cli import main
from src.readme_chess.config import load_settings
from src.readme_chess.mock_github import MockIssue
from src.readme_chess.selftest import run, template_regex

ROOT = Path(__file__).resolve().parents[1]
GAMES = ROOT / "tests" / "games"
SETTINGS_FILE = ROOT / "data" / "settings.yaml"


class ScenarioTests(unittest.TestCase):
    def test_all_scenarios_pass(self):
        settings = load_settings(SETTINGS_FILE)
        expected = 0
        for path in GAMES.glob("*.yml"):
            with open(path, "r", encoding="utf-8") as f:
                expected += len(yaml.safe_load(f)["moves"])
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            passed, failed = run(GAMES, settings)
        self.assertEqual(failed, 0, out.getvalue())
        self.assertEqual(passed, expected)

    def test_template_regex_escapes_literal_text(self):
        pattern = template_regex("{author} played `{move}` (really!)", {"author": "@[a-z]+", "move": ".+"})
        issue = MockIssue("t")
        issue.expect_comments([pattern])
        issue.create_comment("@alice played `e2e4` (really!)")
        issue.close()
        self.assertEqual(issue.expectations_fulfilled(), (True, None))


class MockIssueTests(unittest.TestCase):
    def test_reports_missing_and_unexpected(self):
        issue = MockIssue("t")
        issue.expect_labels(["White"])
        issue.close(labels=["Black"])
        ok, reason = issue.expectations_fulfilled()
        self.assertFalse(ok)
        self.assertIn("White", reason)

    def test_unclosed_issue_fails(self):
        issue = MockIssue("t")
        self.assertEqual(issue.expectations_fulfilled(), (False, "Issue not closed"))


class CliTests(unittest.TestCase):
    def test_self_test_mode_exit_status(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main(["--settings", str(SETTINGS_FILE), "--self-test", str(GAMES)])
        self.assertEqual(code, 0, out.getvalue())

    def test_missing_settings_is_fatal(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertLogs("readme_chess", "ERROR"):
                code = main(["--workspace", td, "--self-test", str(GAMES)])
        self.assertEqual(code, 2)

    def test_rejected_issue_exits_one(self):
        issue = MockIssue("Chess: Move E2 to E4")
        issue.author = "@alice"
        with tempfile.TemporaryDirectory() as td, \
                mock.patch("src.readme_chess.cli.fetch_issue", return_value=issue), \
                contextlib.redirect_stderr(io.StringIO()) as err:
            code = main(["--workspace", td, "--settings", str(SETTINGS_FILE), "--repo", "owner/repo", "--issue", "7"])
            self.assertTrue((Path(td) / "data" / ".chess.lock").exists())
        self.assertEqual(code, 1)
        self.assertIn("no game in progress", err.getvalue())
        self.assertTrue(issue.closed)

    def test_new_game_issue_exits_zero(self):
        issue = MockIssue("Chess: Start new game")
        issue.author = "@owner"
        with tempfile.TemporaryDirectory() as td, \
                mock.patch("src.readme_chess.cli.fetch_issue", return_value=issue):
            code = main(["--workspace", td, "--settings", str(SETTINGS_FILE), "--repo", "owner/repo", "--issue", "7"])
            self.assertTrue((Path(td) / "games" / "current.pgn").exists())
        self.assertEqual(code, 0)


if __name__ == "__main__":
    unittest.main()
