import tempfile
import unittest
from pathlib import Path

import yaml

from src.readme_chess.config import Labels, load_settings, owner_identity, parse_settings
from src.readme_chess.errors import ConfigurationError

ROOT = Path(__file__).resolve().parents[1]
SETTINGS_FILE = ROOT / "data" / "settings.yaml"


def _settings_data():
    with open(SETTINGS_FILE, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


class SettingsTests(unittest.TestCase):
    def test_shipped_settings_load(self):
        settings = load_settings(SETTINGS_FILE)
        self.assertIn("{author}", settings.comments.successful_move)
        self.assertEqual(settings.markers.board.begin, "<!-- BEGIN CHESS BOARD -->")
        self.assertEqual(settings.issues.new_game["title"], "Chess: Start new game")
        self.assertEqual(settings.labels.invalid, "Invalid")
        self.assertEqual(settings.misc.max_last_moves, 5)

    def test_missing_comment_template_rejected(self):
        data = _settings_data()
        del data["comments"]["game_over"]
        with self.assertRaises(ConfigurationError) as ctx:
            parse_settings(data)
        self.assertIn("comments.game_over", ctx.exception.message)

    def test_missing_marker_rejected(self):
        data = _settings_data()
        del data["markers"]["top_moves"]
        with self.assertRaises(ConfigurationError):
            parse_settings(data)

    def test_labels_and_misc_default_when_absent(self):
        data = _settings_data()
        del data["labels"]
        del data["misc"]
        settings = parse_settings(data)
        self.assertEqual(settings.labels, Labels())
        self.assertEqual(settings.misc.max_top_moves, 10)

    def test_missing_or_broken_file(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ConfigurationError):
                load_settings(Path(td) / "nope.yaml")
            broken = Path(td) / "broken.yaml"
            broken.write_text("comments: [unclosed\n", encoding="utf-8")
            with self.assertRaises(ConfigurationError):
                load_settings(broken)


class OwnerIdentityTests(unittest.TestCase):
    def test_derived_from_repository(self):
        self.assertEqual(owner_identity("octocat/chess"), "@octocat")

    def test_override_wins(self):
        self.assertEqual(owner_identity("octocat/chess", "maintainer"), "@maintainer")
        self.assertEqual(owner_identity("octocat/chess", "@maintainer"), "@maintainer")


if __name__ == "__main__":
    unittest.main()
