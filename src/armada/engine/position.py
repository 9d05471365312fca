"""Board cells."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Position:
    """A board cell; identity is the (row, column) pair, the flags are state."""

    row: int
    column: int
    occupied: bool = field(default=False, compare=False)
    hit: bool = field(default=False, compare=False)

    def __hash__(self) -> int:
        return hash((self.row, self.column))

    def __str__(self) -> str:
        return f"row={self.row} column={self.column}"

    def occupy(self) -> None:
        self.occupied = True

    def shoot(self) -> None:
        self.hit = True

    def is_adjacent_to(self, other: Position) -> bool:
        """Return True if ``other`` is within one cell, diagonals and self included."""
        return abs(self.row - other.row) <= 1 and abs(self.column - other.column) <= 1
