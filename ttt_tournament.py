#!/usr/bin/env python3
"""Round-robin tournament between the tic-tac-toe policies.

Every pair of players meets twice per round, once with each side playing X.
Ratings are Elo with K=16, kept in memory only.  Players are the three
built-in policies (``easy``, ``perfect``, ``mcts``) unless ``--players``
points at a directory of JSON files, each describing one player::

    {"policy": "mcts", "iterations": 200, "explorationConstant": 1.4}
"""
from __future__ import annotations

import argparse
import json
import logging
import random
from pathlib import Path
from typing import Dict, List, Tuple

from mcts.config import MCTSConfig
from tictactoe.game_state import O, X, GameState
from tictactoe.perfect_player import shared_outcome_table
from tictactoe.players import make_player, normalize_policy

K_FACTOR = 16
INITIAL_RATING = 1500.0


def expected(r_a: float, r_b: float) -> float:
    return 1.0 / (1.0 + 10 ** ((r_b - r_a) / 400))


def update(r: float, s: float, e: float, k: float = K_FACTOR) -> float:
    return r + k * (s - e)


def next_game(pair_idx: int, orientation: int, total_pairs: int) -> Tuple[int, int]:
    orientation += 1
    if orientation == 2:
        orientation = 0
        pair_idx = (pair_idx + 1) % total_pairs
    return pair_idx, orientation


def seat_players(names: List[str], pair: Tuple[int, int], orientation: int) -> Tuple[str, str]:
    """Return ``(x_name, o_name)`` for one game of ``pair``."""
    i, j = pair
    if orientation == 0:
        return names[i], names[j]
    return names[j], names[i]


def load_players(directory: Path) -> Dict[str, dict]:
    players = {}
    for path in sorted(directory.glob("*.json")):
        with path.open() as f:
            players[path.stem] = json.load(f)
    if not players:
        raise FileNotFoundError(f"No player configs found in '{directory}'.")
    return players


def default_players() -> Dict[str, dict]:
    return {"easy": {"policy": "easy"},
            "perfect": {"policy": "perfect"},
            "mcts": {"policy": "mcts"}}


def build_player(player_cfg: dict, rng: random.Random):
    options = dict(player_cfg)
    policy = normalize_policy(options.pop("policy", "mcts"))
    config = MCTSConfig.from_dict(options) if policy == "mcts" else None
    return make_player(policy, rng=rng, config=config, outcomes=shared_outcome_table())


def play_one_game(player_x, player_o) -> int:
    """Play a full game; +1 for an X win, -1 for an O win, 0 for a draw."""
    state = GameState.initial()
    while not state.is_terminal():
        player = player_x if state.current_player == X else player_o
        state = state.apply_move(player.search(state))
    winner = state.winner()
    return 1 if winner == X else -1 if winner == O else 0


def run(players: Dict[str, dict], rounds: int, seed=None) -> Dict[str, float]:
    rng = random.Random(seed)
    names = list(players)
    if len(names) < 2:
        raise ValueError("a tournament needs at least two players")
    agents = {name: build_player(cfg, rng) for name, cfg in players.items()}
    pairs = [(i, j) for i in range(len(names)) for j in range(i + 1, len(names))]
    ratings = {n: INITIAL_RATING for n in names}
    records: Dict[str, Dict[str, int]] = {}

    pair_idx, orientation = 0, 0
    total_games = rounds * len(pairs) * 2
    try:
        for g in range(1, total_games + 1):
            x_name, o_name = seat_players(names, pairs[pair_idx], orientation)
            result = play_one_game(agents[x_name], agents[o_name])

            record = records.setdefault(f"{x_name}_vs_{o_name}", {"w": 0, "d": 0, "l": 0})
            if result == 1:
                record["w"] += 1
                score_x = 1.0
            elif result == 0:
                record["d"] += 1
                score_x = 0.5
            else:
                record["l"] += 1
                score_x = 0.0
            logging.info("Game %d: %s (X) vs %s (O): %s", g, x_name, o_name,
                         {1.0: "X wins", 0.5: "Draw", 0.0: "O wins"}[score_x])

            ra, rb = ratings[x_name], ratings[o_name]
            ratings[x_name] = update(ra, score_x, expected(ra, rb))
            ratings[o_name] = update(rb, 1 - score_x, expected(rb, ra))

            pair_idx, orientation = next_game(pair_idx, orientation, len(pairs))
    except KeyboardInterrupt:
        logging.info("Tournament stopped by user.")

    logging.info("Final Elo standings (highest first):")
    for name, rating in sorted(ratings.items(), key=lambda x: -x[1]):
        logging.info("  %-15s %6.1f", name, rating)
    for key, record in sorted(records.items()):
        logging.info("  %-25s W%d D%d L%d", key, record["w"], record["d"], record["l"])
    return ratings


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Tic-tac-toe policy tournament")
    parser.add_argument("--players", type=Path, help="directory of player JSON files")
    parser.add_argument("--rounds", type=int, default=5, help="double round-robins to play")
    parser.add_argument("--seed", type=int, help="random seed")
    parser.add_argument("--verbose", action="store_true", help="debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    run(load_players(args.players) if args.players else default_players(),
        args.rounds, seed=args.seed)
