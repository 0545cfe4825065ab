from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Dict, Optional

import numpy as np

from .game_state import NUM_STATES, X, GameState, Outcome

logger = logging.getLogger(__name__)


def _win_for(player: str) -> Outcome:
    return Outcome.X_WINS if player == X else Outcome.O_WINS


def _loss_for(player: str) -> Outcome:
    return Outcome.O_WINS if player == X else Outcome.X_WINS


def precompute_outcomes() -> np.ndarray:
    """Solve every position reachable from the empty board.

    Backward induction from the initial state with a memo keyed by board
    index.  The result is a read-only ``uint8`` array of length 19,683 holding
    an :class:`Outcome` per index; boards that cannot arise from the empty
    board keep ``Outcome.ONGOING``.
    """
    start = time.perf_counter()
    outcomes = np.full(NUM_STATES, Outcome.ONGOING, dtype=np.uint8)
    memo: Dict[int, Outcome] = {}

    def minimax(state: GameState) -> Outcome:
        index = state.index()
        cached = memo.get(index)
        if cached is not None:
            return cached

        if state.is_terminal():
            best = state.outcome()
        else:
            mover = state.current_player
            win = _win_for(mover)
            best = _loss_for(mover)
            # Once a win is found the value is settled, but the remaining
            # children are still solved so the table covers them too.
            for move in state.legal_moves():
                result = minimax(state.apply_move(move))
                if best == win:
                    continue
                if result == win:
                    best = win
                elif result == Outcome.DRAW:
                    best = Outcome.DRAW

        memo[index] = best
        outcomes[index] = best
        return best

    root = minimax(GameState.initial())
    outcomes.flags.writeable = False
    logger.info("Solved %d positions in %.1f ms (empty board: %s)",
                len(memo), (time.perf_counter() - start) * 1000, root.name)
    return outcomes


@lru_cache(maxsize=None)
def shared_outcome_table() -> np.ndarray:
    """The outcome table, computed on first use and kept for the process."""
    return precompute_outcomes()


class PerfectTicTacToePlayer:
    """Table-driven player that never loses."""

    def __init__(self, outcomes: Optional[np.ndarray] = None):
        self.outcomes = shared_outcome_table() if outcomes is None else outcomes

    def lookup(self, state: GameState) -> Outcome:
        return Outcome(int(self.outcomes[state.index()]))

    def search(self, state: GameState) -> Optional[int]:
        """Return the first move realizing the best outcome for the mover.

        ``None`` when the position has no legal moves.
        """
        moves = state.legal_moves()
        if not moves:
            return None
        mover = state.current_player
        win = _win_for(mover)
        best_move = moves[0]
        best = _loss_for(mover)
        for move in moves:
            result = self.lookup(state.apply_move(move))
            if result == Outcome.ONGOING:
                logger.warning("No solved outcome for board index %d", state.apply_move(move).index())
            if result == win:
                return move
            if result == Outcome.DRAW and best != Outcome.DRAW:
                best_move, best = move, Outcome.DRAW
        return best_move
