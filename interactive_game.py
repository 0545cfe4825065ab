#!/usr/bin/env python3
"""Play tic-tac-toe against the computer in a pygame window.

The human plays X, the computer plays O.  Pick a difficulty with the keys
1 (easy, random moves), 2 (perfect, precomputed minimax) or 3 (MCTS); press R
for a new game.
"""
import argparse
import logging
import random
import sys
import time

import pygame

from mcts.config import MCTSConfig, REWARD_MODES, load_config
from tictactoe.game_state import O, X, GameState
from tictactoe.perfect_player import shared_outcome_table
from tictactoe.players import choose_move
from tictactoe.visualizer import cell_at, draw_board, init_display

HUMAN = X
AI = O
MODES = {pygame.K_1: "easy", pygame.K_2: "precomputed", pygame.K_3: "difficult"}
MODE_LABELS = {"easy": "Easy Mode", "precomputed": "Perfect Mode", "difficult": "MCTS Mode"}


def pump_events(tree, iteration):
    # keep the window responsive while MCTS runs
    if iteration % 100 == 0:
        pygame.event.pump()


def game_status(state: GameState) -> str:
    winner = state.winner()
    if winner == HUMAN:
        return "You win!"
    if winner == AI:
        return "AI wins!"
    if state.is_terminal():
        return "It's a draw!"
    if state.current_player == HUMAN:
        return "Your turn"
    return "AI is thinking..."


def play(config: MCTSConfig, rng: random.Random):
    screen = init_display()
    draw_board(screen, GameState().board, "Precomputing game states...")

    start = time.perf_counter()
    outcomes = shared_outcome_table()
    precompute_ms = (time.perf_counter() - start) * 1000

    state = GameState.initial()
    mode = None
    detail = f"Precomputed in {precompute_ms:.2f}ms"
    clock = pygame.time.Clock()

    while True:
        if mode is None:
            draw_board(screen, state.board, "1: Easy  2: Perfect  3: MCTS", detail)
        else:
            draw_board(screen, state.board, game_status(state),
                       f"{MODE_LABELS[mode]} - {detail}",
                       show_hints=state.current_player == HUMAN)

        if mode is not None and not state.is_terminal() and state.current_player == AI:
            move_start = time.perf_counter()
            move = choose_move(state, mode, rng=rng, config=config, outcomes=outcomes,
                               draw_callback=pump_events)
            elapsed = (time.perf_counter() - move_start) * 1000
            if mode == "difficult":
                detail = f"AI computed in {elapsed:.2f}ms ({config.iterations} sims)"
            elif mode == "precomputed":
                detail = f"Lookup time: {elapsed:.2f}ms"
            else:
                detail = f"Move time: {elapsed:.2f}ms"
            if move is not None:
                state = state.apply_move(move)
            continue

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit()
                sys.exit()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_r:
                    state, mode = GameState.initial(), None
                    detail = f"Precomputed in {precompute_ms:.2f}ms"
                elif mode is None and event.key in MODES:
                    mode = MODES[event.key]
                    logging.info("Selected %s", MODE_LABELS[mode])
            elif event.type == pygame.MOUSEBUTTONDOWN and mode is not None:
                cell = cell_at(event.pos)
                if (cell is not None and state.board[cell] is None
                        and not state.is_terminal() and state.current_player == HUMAN):
                    state = state.apply_move(cell)
        clock.tick(30)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Human (X) vs AI (O) tic-tac-toe")
    parser.add_argument("--iterations", type=int, help="MCTS simulations per move")
    parser.add_argument("--exploration-constant", type=float, help="UCB1 exploration weight")
    parser.add_argument("--reward-mode", choices=REWARD_MODES)
    parser.add_argument("--config", help="JSON file with MCTS options")
    parser.add_argument("--seed", type=int, help="seed for the AI's random choices")
    parser.add_argument("--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def build_config(args) -> MCTSConfig:
    options = load_config(args.config).to_dict() if args.config else {}
    if args.iterations is not None:
        options["iterations"] = args.iterations
    if args.exploration_constant is not None:
        options["exploration_constant"] = args.exploration_constant
    if args.reward_mode is not None:
        options["reward_mode"] = args.reward_mode
    return MCTSConfig.from_dict(options)


if __name__ == "__main__":
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    play(build_config(args), random.Random(args.seed))
