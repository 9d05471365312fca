"""Ship domain model: hull shapes, hit tracking and proximity rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from .orientation import Orientation
from .position import Position

Offset = tuple[int, int]
ShapeFn = Callable[[Orientation], tuple[Offset, ...]]


class InvalidOrientationError(ValueError):
    """Raised when a ship is built without a usable orientation."""


class ShipKind(Enum):
    """Supported ship classes, keyed by the name used to order them."""

    SLOOP = "sloop"
    CARAVEL = "caravel"
    CARRACK = "carrack"
    FRIGATE = "frigate"
    GALLEON = "galleon"

    @property
    def size(self) -> int:
        """Number of cells in the hull."""
        return _SIZES[self]

    @property
    def category(self) -> str:
        return self.name.title()


_SIZES = {
    ShipKind.SLOOP: 1,
    ShipKind.CARAVEL: 2,
    ShipKind.CARRACK: 3,
    ShipKind.FRIGATE: 4,
    ShipKind.GALLEON: 5,
}

# Galleon hulls are fixed pentominoes, one per orientation.
GALLEON_OFFSETS: dict[Orientation, tuple[Offset, ...]] = {
    Orientation.NORTH: ((0, 0), (0, 1), (0, 2), (1, 1), (2, 1)),
    Orientation.SOUTH: ((0, 0), (1, 0), (2, -1), (2, 0), (2, 1)),
    Orientation.EAST: ((0, 0), (1, -2), (1, -1), (1, 0), (2, 0)),
    Orientation.WEST: ((0, 0), (1, 0), (1, 1), (1, 2), (2, 0)),
}


def _straight(size: int) -> ShapeFn:
    """Shape of a straight hull; orientation only picks the axis."""

    def shape(orientation: Orientation) -> tuple[Offset, ...]:
        if orientation in (Orientation.NORTH, Orientation.SOUTH):
            return tuple((offset, 0) for offset in range(size))
        return tuple((0, offset) for offset in range(size))

    return shape


def _galleon(orientation: Orientation) -> tuple[Offset, ...]:
    return GALLEON_OFFSETS[orientation]


SHAPES: dict[ShipKind, ShapeFn] = {
    ShipKind.SLOOP: _straight(1),
    ShipKind.CARAVEL: _straight(2),
    ShipKind.CARRACK: _straight(3),
    ShipKind.FRIGATE: _straight(4),
    ShipKind.GALLEON: _galleon,
}


@dataclass(eq=False)
class Ship:
    """A single ship anchored at ``position``.

    The hull cells are computed once from the kind's shape and the
    orientation. Every derived query (bounding box, occupancy, hits) scans
    ``cells``.
    """

    kind: ShipKind
    orientation: Orientation
    position: Position
    cells: list[Position] = field(init=False)

    def __post_init__(self) -> None:
        if self.orientation is None or self.orientation is Orientation.UNKNOWN:
            raise InvalidOrientationError(
                f"invalid orientation {self.orientation!r} for {self.kind.category}"
            )
        cells: list[Position] = []
        for delta_row, delta_col in SHAPES[self.kind](self.orientation):
            cell = Position(self.position.row + delta_row, self.position.column + delta_col)
            cell.occupy()
            cells.append(cell)
        self.cells = cells

    def __str__(self) -> str:
        return f"[{self.category} {self.orientation} {self.position}]"

    @property
    def category(self) -> str:
        return self.kind.category

    @property
    def size(self) -> int:
        return self.kind.size

    @property
    def top_most(self) -> int:
        return min(cell.row for cell in self.cells)

    @property
    def bottom_most(self) -> int:
        return max(cell.row for cell in self.cells)

    @property
    def left_most(self) -> int:
        return min(cell.column for cell in self.cells)

    @property
    def right_most(self) -> int:
        return max(cell.column for cell in self.cells)

    def occupies(self, pos: Position) -> bool:
        return any(cell == pos for cell in self.cells)

    def still_floating(self) -> bool:
        """Return True while at least one hull cell has not been hit."""
        return any(not cell.hit for cell in self.cells)

    def too_close_to(self, other: Ship | Position) -> bool:
        """Return True if ``other`` touches or overlaps this hull, diagonals included."""
        if isinstance(other, Ship):
            return any(self.too_close_to(cell) for cell in other.cells)
        return any(cell.is_adjacent_to(other) for cell in self.cells)

    def shoot(self, pos: Position) -> None:
        """Mark the hull cell at ``pos`` as hit; positions off the hull are ignored."""
        for cell in self.cells:
            if cell == pos:
                cell.shoot()


_KINDS_BY_NAME = {kind.value: kind for kind in ShipKind}


def build_ship(kind_name: str, orientation: Orientation, position: Position) -> Ship | None:
    """Build a ship from its kind name, or return None for an unknown name.

    A known kind with an invalid orientation still raises
    :class:`InvalidOrientationError`.
    """
    kind = _KINDS_BY_NAME.get(kind_name)
    if kind is None:
        return None
    return Ship(kind, orientation, position)
