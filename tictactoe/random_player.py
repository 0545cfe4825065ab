import random
from typing import Optional

from .game_state import GameState


def random_move(state: GameState, rng: random.Random) -> Optional[int]:
    legal = state.legal_moves()
    if not legal:
        return None
    return rng.choice(legal)


def random_playout(state: GameState, rng: random.Random) -> GameState:
    """Play uniformly random moves for both sides until the game ends."""
    while not state.is_terminal():
        state = state.apply_move(random_move(state, rng))
    return state


class RandomPlayer:
    """Baseline player choosing uniformly among the legal moves."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def search(self, state: GameState) -> Optional[int]:
        return random_move(state, self.rng)
