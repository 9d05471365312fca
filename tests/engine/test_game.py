"""Shot resolution tests."""

import pytest

from armada.engine.fleet import Fleet
from armada.engine.game import Game, ShotOutcome
from armada.engine.orientation import Orientation
from armada.engine.position import Position
from armada.engine.ship import Ship, ShipKind


@pytest.fixture
def fleet() -> Fleet:
    fleet = Fleet()
    assert fleet.add_ship(Ship(ShipKind.SLOOP, Orientation.NORTH, Position(0, 0)))
    assert fleet.add_ship(Ship(ShipKind.CARAVEL, Orientation.EAST, Position(5, 5)))
    return fleet


def test_single_shot_sinks_sloop() -> None:
    fleet = Fleet()
    sloop = Ship(ShipKind.SLOOP, Orientation.NORTH, Position(0, 0))
    assert fleet.add_ship(sloop)
    game = Game(fleet)

    assert game.fire(Position(0, 0)) is sloop
    assert game.hits == 1
    assert game.sunk_ships == 1
    assert game.remaining_ships == 0
    assert game.is_over()


def test_counters_start_at_zero(fleet: Fleet) -> None:
    game = Game(fleet)
    assert (game.hits, game.invalid_shots, game.repeated_shots, game.sunk_ships) == (0, 0, 0, 0)
    assert game.shots == []
    assert game.remaining_ships == 2
    assert not game.is_over()


def test_miss_is_recorded(fleet: Fleet) -> None:
    game = Game(fleet)
    assert game.resolve(Position(3, 3)) == (ShotOutcome.MISS, None)
    assert game.shots == [Position(3, 3)]
    assert game.hits == 0


def test_hit_without_sinking(fleet: Fleet) -> None:
    game = Game(fleet)
    assert game.resolve(Position(5, 5)) == (ShotOutcome.HIT, None)
    outcome, ship = game.resolve(Position(5, 6))
    assert outcome is ShotOutcome.HIT_AND_SUNK
    assert ship is fleet.ship_at(Position(5, 5))
    assert game.hits == 2
    assert game.sunk_ships == 1
    assert game.remaining_ships == 1


@pytest.mark.parametrize(("row", "col"), [(11, 0), (0, 11), (-1, 0), (0, -1)])
def test_out_of_range_shot_is_invalid(fleet: Fleet, row: int, col: int) -> None:
    game = Game(fleet)
    assert game.resolve(Position(row, col)) == (ShotOutcome.INVALID, None)
    assert game.invalid_shots == 1
    assert game.shots == []


def test_shot_at_board_size_index_is_accepted(fleet: Fleet) -> None:
    # The shot bound is inclusive of board_size, one wider than placement.
    game = Game(fleet)
    assert game.resolve(Position(10, 0)) == (ShotOutcome.MISS, None)
    assert game.resolve(Position(10, 10)) == (ShotOutcome.MISS, None)
    assert game.invalid_shots == 0
    assert game.shots == [Position(10, 0), Position(10, 10)]


def test_repeated_shot_is_counted_and_not_reapplied(
    fleet: Fleet, monkeypatch: pytest.MonkeyPatch
) -> None:
    game = Game(fleet)
    caravel = fleet.ship_at(Position(5, 5))
    assert caravel is not None

    assert game.resolve(Position(5, 5)) == (ShotOutcome.HIT, None)

    calls: list[Position] = []
    monkeypatch.setattr(caravel, "shoot", lambda pos: calls.append(pos))
    assert game.resolve(Position(5, 5)) == (ShotOutcome.REPEATED, None)
    assert calls == []
    assert game.repeated_shots == 1
    assert game.hits == 1
    assert game.shots == [Position(5, 5)]


def test_repeated_miss_is_counted(fleet: Fleet) -> None:
    game = Game(fleet)
    assert game.fire(Position(3, 3)) is None
    assert game.fire(Position(3, 3)) is None
    assert game.repeated_shots == 1
    assert game.shots == [Position(3, 3)]


def test_shots_history_preserves_order_and_is_a_copy(fleet: Fleet) -> None:
    game = Game(fleet)
    for pos in (Position(9, 9), Position(0, 0), Position(2, 7)):
        game.fire(pos)
    history = game.shots
    assert history == [Position(9, 9), Position(0, 0), Position(2, 7)]
    history.clear()
    assert len(game.shots) == 3


def test_game_detects_end_once_all_ships_sunk(fleet: Fleet) -> None:
    game = Game(fleet)
    sunk = [game.fire(pos) for pos in game.fleet_positions()]
    assert [ship.category for ship in sunk if ship is not None] == ["Sloop", "Caravel"]
    assert game.is_over()
    assert game.sunk_ships == 2
    assert game.hits == 3


def test_fleet_positions_lists_every_hull_cell(fleet: Fleet) -> None:
    game = Game(fleet)
    assert game.fleet_positions() == [Position(0, 0), Position(5, 5), Position(5, 6)]


def test_galleon_game_end_to_end() -> None:
    fleet = Fleet()
    galleon = Ship(ShipKind.GALLEON, Orientation.EAST, Position(2, 2))
    assert fleet.add_ship(galleon)
    game = Game(fleet)

    footprint = [(2, 2), (3, 0), (3, 1), (3, 2), (4, 2)]
    results = [game.fire(Position(row, col)) for row, col in footprint]
    assert results[:-1] == [None] * 4
    assert results[-1] is galleon
    assert game.fire(Position(2, 0)) is None
    assert game.hits == 5
    assert len(game.shots) == 6
