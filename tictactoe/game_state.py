from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

X = "X"
O = "O"
PLAYERS = (X, O)

BOARD_SIZE = 9
NUM_STATES = 3 ** BOARD_SIZE  # 19,683 encodable boards

# Rows, columns, diagonals.  Scan order matters when a malformed board has
# more than one completed line: the first match wins everywhere.
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

_CELL_VALUE = {None: 0, X: 1, O: 2}
_VALUE_CELL = (None, X, O)

Board = Tuple[Optional[str], ...]


class Outcome(IntEnum):
    ONGOING = 0
    X_WINS = 1
    O_WINS = 2
    DRAW = 3


class InvalidMoveError(ValueError):
    """Raised when a move targets an occupied or out-of-range cell."""


def get_opponent(player: str) -> str:
    return O if player == X else X


def board_to_index(board: Sequence[Optional[str]]) -> int:
    """Encode a nine-cell board as its base-3 index in ``[0, 19683)``."""
    if len(board) != BOARD_SIZE:
        raise ValueError(f"board must have {BOARD_SIZE} cells, got {len(board)}")
    index = 0
    for i, cell in enumerate(board):
        try:
            value = _CELL_VALUE[cell]
        except KeyError:
            raise ValueError(f"invalid cell value {cell!r} at {i}") from None
        index += value * 3 ** i
    return index


def index_to_board(index: int) -> Board:
    if not 0 <= index < NUM_STATES:
        raise ValueError(f"board index {index} outside [0, {NUM_STATES})")
    cells = []
    for _ in range(BOARD_SIZE):
        index, value = divmod(index, 3)
        cells.append(_VALUE_CELL[value])
    return tuple(cells)


def winner_of(board: Sequence[Optional[str]]) -> Optional[str]:
    for a, b, c in WINNING_LINES:
        first = board[a]
        if first is not None and first == board[b] == board[c]:
            return first
    return None


@dataclass(frozen=True, slots=True)
class GameState:
    """An immutable tic-tac-toe position: nine cells plus the player to move.

    Cells hold ``None``, ``"X"`` or ``"O"`` and are numbered row by row::

        0 | 1 | 2
        3 | 4 | 5
        6 | 7 | 8

    The player to move is stored explicitly rather than derived from the
    piece count, so arbitrary boards can be searched with either side to move.
    """

    board: Board = (None,) * BOARD_SIZE
    current_player: str = X

    def __post_init__(self):
        board = tuple(self.board)
        if len(board) != BOARD_SIZE:
            raise ValueError(f"board must have {BOARD_SIZE} cells, got {len(board)}")
        for i, cell in enumerate(board):
            if cell not in _CELL_VALUE:
                raise ValueError(f"invalid cell value {cell!r} at {i}")
        if self.current_player not in PLAYERS:
            raise ValueError(f"invalid player {self.current_player!r}")
        # Accept lists from callers but always store a tuple.
        object.__setattr__(self, "board", board)

    @classmethod
    def initial(cls) -> "GameState":
        return cls()

    @classmethod
    def from_index(cls, index: int, current_player: str = X) -> "GameState":
        return cls(index_to_board(index), current_player)

    def index(self) -> int:
        return board_to_index(self.board)

    def legal_moves(self) -> List[int]:
        return [i for i, cell in enumerate(self.board) if cell is None]

    def apply_move(self, cell: int) -> "GameState":
        if isinstance(cell, bool):
            raise InvalidMoveError(f"cell {cell!r} is not a board position")
        try:
            cell = operator.index(cell)
        except TypeError:
            raise InvalidMoveError(f"cell {cell!r} is not a board position") from None
        if not 0 <= cell < BOARD_SIZE:
            raise InvalidMoveError(f"cell {cell!r} is outside 0..{BOARD_SIZE - 1}")
        if self.board[cell] is not None:
            raise InvalidMoveError(f"cell {cell} is already taken by {self.board[cell]}")
        board = list(self.board)
        board[cell] = self.current_player
        return GameState(tuple(board), get_opponent(self.current_player))

    def winner(self) -> Optional[str]:
        return winner_of(self.board)

    def is_terminal(self) -> bool:
        return self.winner() is not None or None not in self.board

    def outcome(self) -> Outcome:
        """Outcome of a finished game, ``Outcome.ONGOING`` otherwise."""
        won = self.winner()
        if won == X:
            return Outcome.X_WINS
        if won == O:
            return Outcome.O_WINS
        if None not in self.board:
            return Outcome.DRAW
        return Outcome.ONGOING

    def __str__(self):
        rows = []
        for r in range(3):
            rows.append(" ".join(cell or "." for cell in self.board[3 * r:3 * r + 3]))
        return "\n".join(rows) + f"\n({self.current_player} to move)"
