"""Shot resolution against a placed fleet."""

from __future__ import annotations

import logging
from enum import Enum

from armada.telemetry import get_meter, get_tracer

from .fleet import Fleet
from .position import Position
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("armada.engine.game")
meter = get_meter("armada.engine.game")

SHOT_COUNTER = meter.create_counter(
    "armada_engine_shots",
    unit="1",
    description="Shots fired at a fleet, by outcome",
)


class ShotOutcome(Enum):
    """Classification of a single shot."""

    INVALID = "invalid"
    REPEATED = "repeated"
    MISS = "miss"
    HIT = "hit"
    HIT_AND_SUNK = "hit_and_sunk"


class Game:
    """Fires shots at a fleet and keeps the shot history and statistics.

    The fleet is shared with the caller, not copied. ``resolve`` is the only
    method that updates the counters.
    """

    def __init__(self, fleet: Fleet) -> None:
        self.fleet = fleet
        self._shots: list[Position] = []
        self._invalid = 0
        self._repeated = 0
        self._hits = 0
        self._sunk = 0

    def fire(self, pos: Position) -> Ship | None:
        """Fire at ``pos`` and return the ship it sank, if any."""
        _, ship = self.resolve(pos)
        return ship

    def resolve(self, pos: Position) -> tuple[ShotOutcome, Ship | None]:
        """Classify and apply a shot; the ship is only returned when it sank."""
        with tracer.start_as_current_span("game.resolve") as span:
            span.set_attribute("shot.row", pos.row)
            span.set_attribute("shot.column", pos.column)

            outcome, sunk = self._apply(pos)

            span.set_attribute("shot.outcome", outcome.value)
            SHOT_COUNTER.add(1, attributes={"outcome": outcome.value})
            log = logger.warning if outcome is ShotOutcome.INVALID else logger.info
            log(
                "shot_resolved",
                extra={"row": pos.row, "column": pos.column, "outcome": outcome.value},
            )
            if sunk is not None:
                logger.info(
                    "ship_sunk",
                    extra={"category": sunk.category, "remaining": self.remaining_ships},
                )
            return outcome, sunk

    def _apply(self, pos: Position) -> tuple[ShotOutcome, Ship | None]:
        if not self._valid_shot(pos):
            self._invalid += 1
            return ShotOutcome.INVALID, None
        if pos in self._shots:
            self._repeated += 1
            return ShotOutcome.REPEATED, None

        self._shots.append(pos)
        ship = self.fleet.ship_at(pos)
        if ship is None:
            return ShotOutcome.MISS, None

        ship.shoot(pos)
        self._hits += 1
        if ship.still_floating():
            return ShotOutcome.HIT, None
        self._sunk += 1
        return ShotOutcome.HIT_AND_SUNK, ship

    def _valid_shot(self, pos: Position) -> bool:
        # Inclusive of board_size, unlike the fleet's placement bound.
        limit = self.fleet.board_size
        return 0 <= pos.row <= limit and 0 <= pos.column <= limit

    @property
    def shots(self) -> list[Position]:
        return list(self._shots)

    @property
    def invalid_shots(self) -> int:
        return self._invalid

    @property
    def repeated_shots(self) -> int:
        return self._repeated

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def sunk_ships(self) -> int:
        return self._sunk

    @property
    def remaining_ships(self) -> int:
        return len(self.fleet.get_floating_ships())

    def is_over(self) -> bool:
        """Return True once no ship of the fleet is afloat."""
        return self.remaining_ships == 0

    def fleet_positions(self) -> list[Position]:
        """Every hull cell of the fleet, in placement order."""
        return [cell for ship in self.fleet.ships for cell in ship.cells]
