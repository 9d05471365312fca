"""Text rendering of board positions."""

from __future__ import annotations

from typing import Iterable

from armada.config import BOARD_SIZE
from armada.engine.position import Position

EMPTY_CELL = "."


def render_board(positions: Iterable[Position], marker: str, size: int = BOARD_SIZE) -> str:
    """Draw ``positions`` with ``marker`` on a ``size`` x ``size`` grid of dots.

    Positions that fall outside the grid are left out.
    """
    grid = [[EMPTY_CELL] * size for _ in range(size)]
    for pos in positions:
        if 0 <= pos.row < size and 0 <= pos.column < size:
            grid[pos.row][pos.column] = marker
    return "\n".join("".join(row) for row in grid)
