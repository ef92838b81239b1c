import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from src.readme_chess.config import Workspace
from src.readme_chess.history import MoveHistory, MoveRecord
from src.readme_chess.referee import Referee
from src.readme_chess.terminal import archive_match, conclude_if_over, outcome_for

WHEN = datetime(2024, 3, 1, 12, 30, 45)


class OutcomeTests(unittest.TestCase):
    def test_result_strings(self):
        self.assertEqual(outcome_for("1/2-1/2"), "draw")
        self.assertEqual(outcome_for("1-0"), "white wins")
        self.assertEqual(outcome_for("0-1"), "black wins")
        self.assertEqual(outcome_for("*"), "unknown")


class ArchiveTests(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.ws = Workspace(Path(self._td.name))
        self.history = MoveHistory(self.ws.last_moves)

    def tearDown(self):
        self._td.cleanup()

    def _play(self, moves):
        referee = Referee()
        self.history.reset("@owner")
        for i, uci in enumerate(moves):
            author = "@alice" if i % 2 == 0 else "@bob"
            referee.apply_uci(uci, author)
            self.history.append(MoveRecord(uci, author))
        referee.save(self.ws.current_game)
        return referee

    def test_archive_moves_game_and_drops_history(self):
        self._play(["e2e4"])
        target = archive_match(self.ws, WHEN)
        self.assertEqual(target.name, "game-20240301-123045.pgn")
        self.assertTrue(target.exists())
        self.assertFalse(self.ws.current_game.exists())
        self.assertFalse(self.ws.last_moves.exists())

    def test_archive_refuses_to_overwrite(self):
        self._play(["e2e4"])
        self.ws.archive_path(WHEN).write_text("old\n", encoding="utf-8")
        with self.assertRaises(FileExistsError):
            archive_match(self.ws, WHEN)
        self.assertTrue(self.ws.current_game.exists())
        self.assertTrue(self.ws.last_moves.exists())

    def test_ongoing_game_is_not_concluded(self):
        referee = self._play(["e2e4", "e7e5"])
        self.assertIsNone(conclude_if_over(referee, self.ws, WHEN))
        self.assertTrue(self.ws.current_game.exists())

    def test_checkmate_is_summarised_and_archived(self):
        referee = self._play(["f2f3", "e7e5", "g2g4", "d8h4"])
        over = conclude_if_over(referee, self.ws, WHEN)
        self.assertIsNotNone(over)
        self.assertEqual(over.result, "0-1")
        self.assertEqual(over.outcome, "black wins")
        self.assertEqual(over.termination, "checkmate")
        self.assertFalse(over.is_draw)
        self.assertEqual(over.players, ["@owner", "@alice", "@bob"])
        self.assertEqual(over.num_moves, 4)
        self.assertTrue(over.archive_path.exists())
        self.assertFalse(self.ws.current_game.exists())

        archived = Referee.load(over.archive_path)
        self.assertEqual(archived.game.headers["Result"], "0-1")
        self.assertEqual(len(archived.move_authors()), 4)


if __name__ == "__main__":
    unittest.main()
