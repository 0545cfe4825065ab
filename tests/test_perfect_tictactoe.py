import unittest
from functools import lru_cache

import numpy as np

from tictactoe.game_state import NUM_STATES, O, X, GameState, Outcome, index_to_board
from tictactoe.perfect_player import (
    PerfectTicTacToePlayer, precompute_outcomes, shared_outcome_table,
)

_ = None

# Positions reachable from the empty board, counting the empty board and
# stopping at wins.
REACHABLE_POSITIONS = 5478


class TestOutcomeTable(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.table = shared_outcome_table()

    def test_shape_and_dtype(self):
        self.assertEqual(self.table.shape, (NUM_STATES,))
        self.assertEqual(self.table.dtype, np.uint8)

    def test_empty_board_is_a_draw(self):
        self.assertEqual(self.table[GameState.initial().index()], Outcome.DRAW)

    def test_every_reachable_position_is_solved(self):
        self.assertEqual(int(np.count_nonzero(self.table)), REACHABLE_POSITIONS)

    def test_unreachable_board_keeps_sentinel(self):
        # Three X and no O can never occur
        board = (X, X, X) + (None,) * 6
        self.assertEqual(self.table[GameState(board).index()], Outcome.ONGOING)

    def test_terminal_entries_match_board(self):
        for index in np.flatnonzero(self.table):
            state = GameState(index_to_board(int(index)))
            if state.is_terminal():
                self.assertEqual(self.table[index], state.outcome())

    def test_table_is_read_only(self):
        with self.assertRaises(ValueError):
            self.table[0] = Outcome.X_WINS

    def test_shared_table_is_computed_once(self):
        self.assertIs(shared_outcome_table(), self.table)

    def test_precompute_is_deterministic(self):
        np.testing.assert_array_equal(precompute_outcomes(), self.table)

    def test_known_positions(self):
        # X in a corner, O on an adjacent edge: X forces a win
        state = GameState((X, O, _, _, _, _, _, _, _), X)
        self.assertEqual(self.table[state.index()], Outcome.X_WINS)
        # X in the centre, O in a corner: still a draw
        state = GameState((O, _, _, _, X, _, _, _, _), X)
        self.assertEqual(self.table[state.index()], Outcome.DRAW)


class TestPerfectPlayer(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.player = PerfectTicTacToePlayer(shared_outcome_table())

    def test_takes_immediate_win(self):
        state = GameState((X, X, _, O, O, _, _, _, _), X)
        self.assertEqual(self.player.search(state), 2)

    def test_o_takes_immediate_win(self):
        state = GameState((X, X, _, O, O, _, X, _, _), O)
        self.assertEqual(self.player.search(state), 5)

    def test_blocks_immediate_threat(self):
        state = GameState((X, X, _, _, O, _, _, _, _), O)
        self.assertEqual(self.player.search(state), 2)

    def test_is_deterministic(self):
        state = GameState.initial()
        moves = {self.player.search(state) for _ in range(5)}
        self.assertEqual(len(moves), 1)
        # All opening moves draw, so the first one is taken
        self.assertEqual(moves.pop(), 0)

    def test_terminal_position_returns_none(self):
        before = self.player.outcomes.copy()
        state = GameState((X, O, X, X, O, O, O, X, X), O)
        self.assertIsNone(self.player.search(state))
        np.testing.assert_array_equal(self.player.outcomes, before)

    def test_default_uses_shared_table(self):
        self.assertIs(PerfectTicTacToePlayer().outcomes, shared_outcome_table())

    def test_self_play_is_a_draw(self):
        state = GameState.initial()
        while not state.is_terminal():
            state = state.apply_move(self.player.search(state))
        self.assertIsNone(state.winner())

    def _can_beat(self, state: GameState, perfect_role: str) -> bool:
        """True if some opponent line beats the perfect player from ``state``."""
        if state.is_terminal():
            return state.winner() not in (None, perfect_role)
        if state.current_player == perfect_role:
            return self._can_beat(state.apply_move(self.player.search(state)), perfect_role)
        return any(self._can_beat(state.apply_move(m), perfect_role)
                   for m in state.legal_moves())

    def test_never_loses_as_o_against_any_opponent(self):
        self.assertFalse(self._can_beat(GameState.initial(), O))

    def test_never_loses_as_x_against_any_opponent(self):
        self.assertFalse(self._can_beat(GameState.initial(), X))

    def test_lost_position_falls_back_to_first_move(self):
        # X corner, O adjacent edge, X centre: every O reply loses
        state = GameState((X, O, _, _, X, _, _, _, _), O)
        self.assertEqual(self.player.search(state), 2)

    def test_takes_a_fork_when_one_exists(self):
        # Only 4 wins for O: it threatens both 1 and 3
        state = GameState((_, _, X, _, _, O, X, O, X), O)
        self.assertEqual(self.player.search(state), 4)
        self.assertEqual(self.player.lookup(state.apply_move(4)), Outcome.O_WINS)

    def test_matches_full_minimax_on_every_reachable_position(self):
        @lru_cache(maxsize=None)
        def negamax(state: GameState) -> int:
            # +1 if the player to move wins with best play, -1 if they lose
            if state.winner() is not None:
                return -1
            if state.is_terminal():
                return 0
            return max(-negamax(state.apply_move(m)) for m in state.legal_moves())

        seen = set()
        stack = [GameState.initial()]
        checked = 0
        while stack:
            state = stack.pop()
            if state in seen or state.is_terminal():
                continue
            seen.add(state)
            move = self.player.search(state)
            self.assertEqual(-negamax(state.apply_move(move)), negamax(state),
                             f"suboptimal move {move} on {state.board}")
            checked += 1
            stack.extend(state.apply_move(m) for m in state.legal_moves())
        self.assertEqual(checked, 4520)


if __name__ == "__main__":
    unittest.main()
