import json
import os
import tempfile
import unittest
from unittest import mock

from interactive_game import build_config, game_status, parse_args, pump_events
from tictactoe.game_state import O, X, GameState
from tictactoe.visualizer import CELL_SIZE, MARGIN, cell_at

_ = None


class TestCellAt(unittest.TestCase):
    def test_cell_centres(self):
        for index in range(9):
            r, c = divmod(index, 3)
            pos = (MARGIN + c * CELL_SIZE + CELL_SIZE // 2,
                   MARGIN + r * CELL_SIZE + CELL_SIZE // 2)
            self.assertEqual(cell_at(pos), index)

    def test_outside_grid(self):
        self.assertIsNone(cell_at((0, 0)))
        self.assertIsNone(cell_at((MARGIN + 3 * CELL_SIZE + 1, MARGIN + 1)))
        self.assertIsNone(cell_at((MARGIN + 1, MARGIN + 3 * CELL_SIZE + 5)))


class TestGameStatus(unittest.TestCase):
    def test_messages(self):
        self.assertEqual(game_status(GameState.initial()), "Your turn")
        self.assertEqual(game_status(GameState.initial().apply_move(0)), "AI is thinking...")
        self.assertEqual(game_status(GameState((X, X, X, O, O, _, _, _, _), O)), "You win!")
        self.assertEqual(game_status(GameState((O, O, O, X, X, _, X, _, _), X)), "AI wins!")
        self.assertEqual(game_status(GameState((X, O, X, X, O, O, O, X, X), O)), "It's a draw!")


class TestPumpEvents(unittest.TestCase):
    def test_pumps_every_hundred_iterations(self):
        with mock.patch("interactive_game.pygame.event.pump") as pump:
            for i in range(250):
                pump_events([], i)
        self.assertEqual(pump.call_count, 3)


class TestBuildConfig(unittest.TestCase):
    def test_defaults(self):
        config = build_config(parse_args([]))
        self.assertEqual(config.iterations, 2000)

    def test_flags_override_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "mcts.json")
            with open(path, "w") as f:
                json.dump({"iterations": 100, "rewardMode": "decisive"}, f)
            config = build_config(parse_args(["--config", path, "--iterations", "50"]))
        self.assertEqual(config.iterations, 50)
        self.assertEqual(config.reward_mode, "decisive")


if __name__ == "__main__":
    unittest.main()
