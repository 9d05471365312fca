"""Fleet management: placement rules and ship queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from armada.config import BOARD_SIZE, FLEET_SIZE
from armada.telemetry import get_meter, get_tracer

from .position import Position
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("armada.engine.fleet")
meter = get_meter("armada.engine.fleet")

PLACEMENT_COUNTER = meter.create_counter(
    "armada_engine_ship_placements",
    unit="1",
    description="Number of attempted ship placements",
)


@dataclass
class Fleet:
    """Ships placed on a ``board_size`` x ``board_size`` board.

    Placement rules are only checked when a ship is added; ships are never
    removed.
    """

    board_size: int = BOARD_SIZE
    fleet_size: int = FLEET_SIZE
    ships: list[Ship] = field(default_factory=list, init=False)

    def add_ship(self, ship: Ship) -> bool:
        """Add ``ship`` if the fleet has room, it fits the board and keeps its distance.

        The capacity check is ``len(ships) <= fleet_size``, so a fleet accepts
        ``fleet_size + 1`` ships.
        """
        with tracer.start_as_current_span("fleet.add_ship") as span:
            span.set_attribute("ship.category", ship.category)
            span.set_attribute("ship.size", ship.size)
            span.set_attribute("ship.row", ship.position.row)
            span.set_attribute("ship.column", ship.position.column)

            if len(self.ships) > self.fleet_size:
                reason = "fleet_full"
            elif not self._inside_board(ship):
                reason = "out_of_bounds"
            elif self._collision_risk(ship):
                reason = "too_close"
            else:
                self.ships.append(ship)
                span.set_attribute("placement.result", "success")
                PLACEMENT_COUNTER.add(1, attributes={"result": "success"})
                logger.info(
                    "ship_placed",
                    extra={
                        "category": ship.category,
                        "orientation": ship.orientation.name,
                        "row": ship.position.row,
                        "column": ship.position.column,
                        "fleet_count": len(self.ships),
                    },
                )
                return True

            span.set_attribute("placement.result", reason)
            PLACEMENT_COUNTER.add(1, attributes={"result": reason})
            logger.warning(
                "ship_placement_rejected",
                extra={
                    "reason": reason,
                    "category": ship.category,
                    "orientation": ship.orientation.name,
                    "row": ship.position.row,
                    "column": ship.position.column,
                },
            )
            return False

    def get_ships_like(self, category: str) -> list[Ship]:
        return [ship for ship in self.ships if ship.category == category]

    def get_floating_ships(self) -> list[Ship]:
        return [ship for ship in self.ships if ship.still_floating()]

    def ship_at(self, pos: Position) -> Ship | None:
        """Return the first ship occupying ``pos``, in placement order."""
        for ship in self.ships:
            if ship.occupies(pos):
                return ship
        return None

    def _inside_board(self, ship: Ship) -> bool:
        last = self.board_size - 1
        return (
            ship.left_most >= 0
            and ship.right_most <= last
            and ship.top_most >= 0
            and ship.bottom_most <= last
        )

    def _collision_risk(self, ship: Ship) -> bool:
        return any(existing.too_close_to(ship) for existing in self.ships)
