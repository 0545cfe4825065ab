"""Move selection by policy name, the entry point for front-ends.

Three policies are available, under their own names or the difficulty labels
used by the game menu:

* ``"easy"``: uniform random move.
* ``"perfect"`` / ``"precomputed"``: lookup in the solved outcome table.
* ``"mcts"`` / ``"difficult"``: Monte-Carlo Tree Search.
"""
from __future__ import annotations

import logging
import random
import time
from typing import Optional

import numpy as np

from mcts.Mcts import MCTS
from mcts.config import MCTSConfig
from .game_state import GameState
from .perfect_player import PerfectTicTacToePlayer
from .random_player import RandomPlayer

logger = logging.getLogger(__name__)

POLICIES = ("easy", "perfect", "mcts")
_POLICY_ALIASES = {
    "easy": "easy",
    "random": "easy",
    "perfect": "perfect",
    "precomputed": "perfect",
    "mcts": "mcts",
    "difficult": "mcts",
}


def normalize_policy(policy: str) -> str:
    try:
        return _POLICY_ALIASES[policy.lower()]
    except KeyError:
        raise ValueError(f"unknown policy {policy!r}; expected one of "
                         f"{sorted(_POLICY_ALIASES)}") from None


def make_player(policy: str, *, rng: Optional[random.Random] = None,
                config: Optional[MCTSConfig] = None,
                outcomes: Optional[np.ndarray] = None):
    """Build an object with a ``search(state)`` method for ``policy``.

    MCTS players build a fresh tree on every call to ``search``.
    """
    policy = normalize_policy(policy)
    if policy == "easy":
        return RandomPlayer(rng)
    if policy == "perfect":
        return PerfectTicTacToePlayer(outcomes)
    return MCTS(config, rng=rng)


def choose_move(state: GameState, policy: str, *, rng: Optional[random.Random] = None,
                config: Optional[MCTSConfig] = None,
                outcomes: Optional[np.ndarray] = None,
                draw_callback=None) -> Optional[int]:
    """Pick a move for the side to move in ``state``.

    ``draw_callback(tree, iteration)`` is forwarded to MCTS searches and
    ignored by the other policies.
    """
    start = time.perf_counter()
    player = make_player(policy, rng=rng, config=config, outcomes=outcomes)
    if isinstance(player, MCTS):
        move = player.search(state, draw_callback=draw_callback)
    else:
        move = player.search(state)
    logger.info("%s chose %s in %.2f ms", normalize_policy(policy), move,
                (time.perf_counter() - start) * 1000)
    return move
