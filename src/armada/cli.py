"""Command-driven text interface for building a fleet and firing at it.

Input is a stream of whitespace-separated tokens, for example::

    new
    galleon 2 2 e
    sloop 8 8 n
    ...
    burst 2 2 3 0 9 9
    status
    quit
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence, TextIO

from armada.config import RulesConfig
from armada.engine.fleet import Fleet
from armada.engine.game import Game
from armada.engine.instrumented_game import InstrumentedGame
from armada.engine.orientation import Orientation
from armada.engine.position import Position
from armada.engine.ship import InvalidOrientationError, Ship, ShipKind, build_ship
from armada.render import render_board
from armada.telemetry import configure_logging, init_telemetry

logger = logging.getLogger(__name__)

FLEET_MARKER = "#"
SHOT_MARKER = "X"
GOODBYE_MESSAGE = "Fair winds!"
STATUS_CATEGORIES = tuple(
    kind.category
    for kind in (
        ShipKind.GALLEON,
        ShipKind.FRIGATE,
        ShipKind.CARRACK,
        ShipKind.CARAVEL,
        ShipKind.SLOOP,
    )
)

GameFactory = Callable[[Fleet], Game]


class TokenReader:
    """Pulls whitespace-separated tokens from a text stream on demand."""

    def __init__(self, stream: TextIO) -> None:
        self._tokens = self._iter_tokens(stream)

    @staticmethod
    def _iter_tokens(stream: TextIO) -> Iterator[str]:
        for line in stream:
            yield from line.split()

    def next(self) -> str:
        try:
            return next(self._tokens)
        except StopIteration:
            raise EOFError("input exhausted") from None

    def take(self, count: int) -> list[str]:
        """Read the next ``count`` tokens as one record."""
        return [self.next() for _ in range(count)]


def parse_int(token: str) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise ValueError(f"expected a number, got {token!r}") from exc


@dataclass
class Session:
    """State shared by the command handlers."""

    rules: RulesConfig
    out: TextIO
    game_factory: GameFactory = Game
    fleet: Fleet | None = None
    game: Game | None = None

    def say(self, message: str = "") -> None:
        print(message, file=self.out)


def read_position(tokens: TokenReader) -> Position:
    """Read ``row column``; both tokens are consumed even when one is malformed."""
    row, column = tokens.take(2)
    return Position(parse_int(row), parse_int(column))


def read_ship(tokens: TokenReader) -> Ship | None:
    """Read ``kind row column orientation`` and build the ship it names.

    The whole record is consumed before any field is parsed, so a bad field
    drops exactly one record.
    """
    kind_name, row, column, orientation = tokens.take(4)
    pos = Position(parse_int(row), parse_int(column))
    return build_ship(kind_name, Orientation.from_char(orientation), pos)


def build_fleet(tokens: TokenReader, session: Session) -> Fleet:
    """Read ship records until the fleet holds ``fleet_size`` ships.

    If the input ends first, the ships accepted so far form the fleet.
    """
    fleet = Fleet(board_size=session.rules.board_size, fleet_size=session.rules.fleet_size)
    try:
        while len(fleet.ships) < session.rules.fleet_size:
            try:
                ship = read_ship(tokens)
            except (InvalidOrientationError, ValueError) as exc:
                session.say(f"Bad ship record: {exc}")
                continue
            if ship is None:
                session.say("Unknown ship!")
                continue
            if not fleet.add_ship(ship):
                session.say(
                    f"Could not place {ship.category} {ship.orientation} {ship.position}"
                )
    except EOFError:
        session.say("Input ended before the fleet was complete.")
    session.say(f"{len(fleet.ships)} ships added.")
    return fleet


def print_ships(session: Session, title: str, ships: Sequence[Ship]) -> None:
    session.say(title)
    for ship in ships:
        session.say(f"  {ship}")


def _cmd_new(tokens: TokenReader, session: Session) -> None:
    session.fleet = build_fleet(tokens, session)
    session.game = session.game_factory(session.fleet)


def _cmd_status(tokens: TokenReader, session: Session) -> None:
    fleet = session.fleet
    if fleet is None:
        return
    print_ships(session, "All ships:", fleet.ships)
    print_ships(session, "Floating ships:", fleet.get_floating_ships())
    for category in STATUS_CATEGORIES:
        print_ships(session, f"{category}:", fleet.get_ships_like(category))


def _cmd_map(tokens: TokenReader, session: Session) -> None:
    if session.game is None:
        return
    session.say(
        render_board(session.game.fleet_positions(), FLEET_MARKER, session.rules.board_size)
    )


def _cmd_burst(tokens: TokenReader, session: Session) -> None:
    game = session.game
    if game is None:
        return
    for _ in range(session.rules.shots_per_burst):
        try:
            pos = read_position(tokens)
        except ValueError as exc:
            session.say(f"Bad position: {exc}")
            continue
        sunk = game.fire(pos)
        if sunk is not None:
            session.say(f"The {sunk.category} went down!")
    session.say(
        f"Hits: {game.hits} Inv: {game.invalid_shots} Rep: {game.repeated_shots} "
        f"Remaining: {game.remaining_ships} ships."
    )
    if game.is_over():
        session.say("The whole fleet is at the bottom of the sea.")


def _cmd_shots(tokens: TokenReader, session: Session) -> None:
    if session.game is None:
        return
    session.say(render_board(session.game.shots, SHOT_MARKER, session.rules.board_size))


COMMANDS: dict[str, Callable[[TokenReader, Session], None]] = {
    "new": _cmd_new,
    "status": _cmd_status,
    "map": _cmd_map,
    "burst": _cmd_burst,
    "shots": _cmd_shots,
}
QUIT_COMMAND = "quit"


def run_session(
    stream: TextIO,
    out: TextIO,
    rules: RulesConfig | None = None,
    game_factory: GameFactory = Game,
) -> Session:
    """Process commands from ``stream`` until ``quit`` or end of input."""
    session = Session(rules=rules or RulesConfig(), out=out, game_factory=game_factory)
    tokens = TokenReader(stream)
    try:
        while True:
            command = tokens.next()
            if command == QUIT_COMMAND:
                break
            handler = COMMANDS.get(command)
            if handler is None:
                session.say(f"Unknown command {command!r}. Try: {', '.join(COMMANDS)}, quit")
                continue
            logger.debug("command", extra={"command": command})
            handler(tokens, session)
    except EOFError:
        logger.debug("input_exhausted")
    session.say(GOODBYE_MESSAGE)
    return session


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build a fleet and fire at it.")
    parser.add_argument(
        "--telemetry",
        action="store_true",
        help="Initialise tracing/metrics/logging exporters from the environment.",
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Console log level (default: WARNING)."
    )
    args = parser.parse_args(argv)

    configure_logging(args.log_level.upper())
    rules = RulesConfig.from_env()
    game_factory: GameFactory = Game
    if args.telemetry:
        init_telemetry()
        game_factory = InstrumentedGame
    run_session(sys.stdin, sys.stdout, rules, game_factory)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
