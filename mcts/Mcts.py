from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from tictactoe.game_state import GameState, get_opponent
from tictactoe.random_player import random_playout
from .config import MCTSConfig

logger = logging.getLogger(__name__)


class ExpansionError(RuntimeError):
    """Raised when expansion is attempted on a node with no untried moves."""


@dataclass(slots=True)
class MCTSNode:
    """A single node of the Monte-Carlo tree.

    Nodes live in a flat list owned by :class:`MCTS`; ``parent`` and
    ``children`` are indices into that list.  ``wins`` is accumulated from the
    point of view of the player who made ``move`` (the player *not* to move in
    ``state``).
    """

    state: GameState
    parent: Optional[int] = None
    move: Optional[int] = None
    children: List[int] = field(default_factory=list)
    visits: int = 0
    wins: float = 0.0
    untried_moves: List[int] = field(default_factory=list)

    def is_terminal(self) -> bool:
        return self.state.is_terminal()

    def is_fully_expanded(self) -> bool:
        return not self.untried_moves

    def win_rate(self) -> float:
        return 0.0 if self.visits == 0 else self.wins / self.visits

    def ucb1(self, parent_visits: int, c_param: float) -> float:
        if self.visits == 0:
            return float("inf")
        explore = math.sqrt(math.log(parent_visits) / self.visits)
        return self.win_rate() + c_param * explore

    def update(self, reward: float):
        assert 0.0 <= reward <= 1.0, "reward outside [0,1]"
        self.visits += 1
        self.wins += reward

    def __str__(self):
        return (f"MCTSNode(move={self.move}, visits={self.visits}, "
                f"win_rate={self.win_rate():.3f})")


@dataclass(frozen=True)
class SearchResult:
    """Everything a finished search knows about the root's moves."""

    move: Optional[int]
    iterations: int
    tree_size: int
    # move -> (visits, wins) for every expanded root child
    child_stats: Dict[int, Tuple[int, float]]

    def visit_counts(self) -> Dict[int, int]:
        return {move: visits for move, (visits, _) in self.child_stats.items()}


# =============================================================================
# Main MCTS driver
# =============================================================================
class MCTS:
    """UCB1 Monte-Carlo Tree Search for a single position.

    Build one per move: the tree is rooted at the state passed to
    :meth:`search` / :meth:`run` and discarded afterwards.
    """

    def __init__(self, config: Optional[MCTSConfig] = None, *,
                 rng: Optional[random.Random] = None):
        self.config = config or MCTSConfig()
        self.rng = rng or random.Random()
        self.tree: List[MCTSNode] = []

    # -----------------------------------------------------------------
    # Public API -------------------------------------------------------
    # -----------------------------------------------------------------
    def search(self, root_state: GameState, draw_callback=None) -> Optional[int]:
        return self.run(root_state, draw_callback).move

    def run(self, root_state: GameState,
            draw_callback: Optional[Callable[[List[MCTSNode], int], None]] = None) -> SearchResult:
        self.tree = [self._new_node(root_state)]
        iterations = self.config.iterations

        for i in range(iterations):
            # --------------- SELECTION ------------------
            selected = self._select()

            # --------------- EXPANSION ------------------
            leaf = self._expand(selected)

            # --------------- SIMULATION -----------------
            reward = self._simulate(leaf)

            # --------------- BACKPROP -------------------
            self._backpropagate(leaf, reward)

            if draw_callback is not None:
                draw_callback(self.tree, i)

        root = self.tree[0]
        assert root.visits == iterations, (
            f"root.visits={root.visits} but expected {iterations}")

        result = SearchResult(
            move=self._best_move(),
            iterations=iterations,
            tree_size=len(self.tree),
            child_stats={self.tree[c].move: (self.tree[c].visits, self.tree[c].wins)
                         for c in root.children},
        )
        logger.debug("MCTS: %d iterations, %d nodes, chose %s",
                     iterations, result.tree_size, result.move)
        return result

    # -------------------------------------------------------------
    # Internal helpers --------------------------------------------
    # -------------------------------------------------------------
    def _new_node(self, state: GameState, parent: Optional[int] = None,
                  move: Optional[int] = None) -> MCTSNode:
        return MCTSNode(state, parent=parent, move=move,
                        untried_moves=state.legal_moves())

    def _select(self) -> int:
        index = 0
        node = self.tree[index]
        while not node.is_terminal() and node.is_fully_expanded():
            index = self._best_child(index)
            node = self.tree[index]
        return index

    def _best_child(self, index: int) -> int:
        """UCB1 selection among the node's children, first one on ties."""
        node = self.tree[index]
        best_index, best_score = None, -float("inf")
        for child_index in node.children:
            score = self.tree[child_index].ucb1(node.visits, self.config.exploration_constant)
            if best_index is None or score > best_score:
                best_index, best_score = child_index, score
        return best_index

    def _expand(self, index: int) -> int:
        node = self.tree[index]
        if node.is_terminal():
            return index
        if not node.untried_moves:
            raise ExpansionError(f"no untried moves left at node {index}")
        move = node.untried_moves.pop()
        child = self._new_node(node.state.apply_move(move), parent=index, move=move)
        self.tree.append(child)
        child_index = len(self.tree) - 1
        node.children.append(child_index)
        return child_index

    def _simulate(self, index: int) -> float:
        """Random playout scored for the player who moved into the node."""
        state = self.tree[index].state
        final = random_playout(state, self.rng)
        winner = final.winner()
        if winner is None:
            return 0.5
        if self.config.reward_mode == "decisive":
            return 1.0
        return 1.0 if winner == get_opponent(state.current_player) else 0.0

    def _backpropagate(self, index: Optional[int], reward: float):
        while index is not None:
            node = self.tree[index]
            node.update(reward)
            index = node.parent
            reward = 1.0 - reward  # flip perspective at each level

    def _best_move(self) -> Optional[int]:
        root = self.tree[0]
        best_move, best_visits = None, -1
        for child_index in root.children:
            child = self.tree[child_index]
            if child.visits > best_visits:
                best_move, best_visits = child.move, child.visits
        return best_move
