"""Game with a game-level trace span and per-outcome metrics."""

from __future__ import annotations

import time

from armada.engine.fleet import Fleet
from armada.engine.game import Game, ShotOutcome
from armada.engine.position import Position
from armada.engine.ship import Ship
from armada.telemetry import get_logger, get_tracer, record_game_metric


class InstrumentedGame(Game):
    """Wraps Game with tracing, metrics and logging."""

    def __init__(self, fleet: Fleet) -> None:
        super().__init__(fleet)
        self._logger = get_logger("armada.engine")
        self._tracer = get_tracer("armada.engine")
        self._game_span_cm = None
        self._game_span = None
        self._started_at = time.perf_counter()
        self._start_game_span()

    def resolve(self, pos: Position) -> tuple[ShotOutcome, Ship | None]:
        with self._tracer.start_as_current_span("armada.engine.resolve") as span:
            span.set_attribute("shot.row", pos.row)
            span.set_attribute("shot.column", pos.column)

            outcome, ship = super().resolve(pos)

            span.set_attribute("shot.outcome", outcome.name)
            record_game_metric("armada_shots_total", 1)
            record_game_metric(
                "armada_shots_by_outcome_total", 1, {"outcome": outcome.value}
            )
            if ship is not None:
                span.set_attribute("sunk.category", ship.category)
                record_game_metric("armada_ships_sunk_total", 1, {"category": ship.category})

            self._logger.info(
                "resolve shot=(%d,%d) outcome=%s", pos.row, pos.column, outcome.name
            )

            if outcome is ShotOutcome.HIT_AND_SUNK and self.is_over():
                self._finish_game()
            return outcome, ship

    def _start_game_span(self) -> None:
        self._game_span_cm = self._tracer.start_as_current_span("armada.engine.game")
        self._game_span = self._game_span_cm.__enter__()
        self._game_span.set_attribute("fleet.ships", len(self.fleet.ships))

    def _finish_game(self) -> None:
        duration = time.perf_counter() - self._started_at
        turns = len(self._shots)

        record_game_metric("armada_game_completed_total", 1)
        record_game_metric("armada_game_duration_seconds", duration)

        with self._tracer.start_as_current_span("armada.engine.game_complete") as span:
            span.set_attribute("turns", turns)
            span.set_attribute("hits", self.hits)
            span.set_attribute("duration_ms", duration * 1000)

        if self._game_span is not None:
            self._game_span.set_attribute("turns", turns)
            self._game_span.set_attribute("invalid_shots", self.invalid_shots)
            self._game_span.set_attribute("repeated_shots", self.repeated_shots)

        self._logger.info(
            "Fleet destroyed. turns=%d hits=%d duration_s=%.3f", turns, self.hits, duration
        )
        self._close_game_span()

    def _close_game_span(self) -> None:
        if self._game_span_cm is not None:
            self._game_span_cm.__exit__(None, None, None)
            self._game_span_cm = None
            self._game_span = None
