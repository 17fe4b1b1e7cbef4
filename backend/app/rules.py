"""
Правила крестиков-ноликов: победа и заполненность доски.
Чистые функции, без состояния.
"""
from functools import lru_cache

from .constants import BOARD_SIZE, EMPTY_CELL

Board = list[list[str]]
Line = tuple[tuple[int, int], ...]


def empty_board(size: int = BOARD_SIZE) -> Board:
    return [[EMPTY_CELL] * size for _ in range(size)]


@lru_cache
def winning_lines(size: int = BOARD_SIZE) -> tuple[Line, ...]:
    """Все строки, столбцы и две диагонали доски size x size."""
    rows = [tuple((r, c) for c in range(size)) for r in range(size)]
    cols = [tuple((r, c) for r in range(size)) for c in range(size)]
    diagonals = [
        tuple((i, i) for i in range(size)),
        tuple((i, size - 1 - i) for i in range(size)),
    ]
    return tuple(rows + cols + diagonals)


def has_won(board: Board, marker: str) -> bool:
    """True если какая-либо линия целиком занята marker."""
    if marker == EMPTY_CELL:
        return False
    return any(
        all(board[r][c] == marker for r, c in line)
        for line in winning_lines(len(board))
    )


def is_full(board: Board) -> bool:
    return all(cell != EMPTY_CELL for row in board for cell in row)
