"""Tests for the command loop."""

import io

import pytest

from armada import cli
from armada.config import RulesConfig
from armada.engine.instrumented_game import InstrumentedGame
from armada.engine.orientation import Orientation
from armada.engine.position import Position
from armada.engine.ship import Ship, ShipKind

SCRIPT = """\
status
new
sloop 0 0 n
submarine 1 1 n
caravel 0 1 e
frigate 3 3 x
caravel 5 5 e
status
burst 0 0 5 5 5 6
map
shots
quit
new
"""


def _run(script: str, **kwargs) -> tuple[cli.Session, list[str]]:
    out = io.StringIO()
    rules = kwargs.pop("rules", RulesConfig(fleet_size=2))
    session = cli.run_session(io.StringIO(script), out, rules, **kwargs)
    return session, out.getvalue().splitlines()


def test_full_session() -> None:
    session, lines = _run(SCRIPT)

    assert "Unknown ship!" in lines
    assert "Could not place Caravel e row=0 column=1" in lines
    assert any(line.startswith("Bad ship record: invalid orientation") for line in lines)
    assert "2 ships added." in lines

    assert "The Sloop went down!" in lines
    assert "The Caravel went down!" in lines
    assert "Hits: 3 Inv: 0 Rep: 0 Remaining: 0 ships." in lines
    assert "The whole fleet is at the bottom of the sea." in lines
    assert lines[-1] == cli.GOODBYE_MESSAGE

    assert session.game is not None
    assert session.game.hits == 3
    assert len(session.fleet.ships) == 2


def test_commands_before_new_are_ignored() -> None:
    session, lines = _run("status\nmap\nshots\nburst\nquit\n")
    assert lines == [cli.GOODBYE_MESSAGE]
    assert session.fleet is None and session.game is None


def test_status_lists_ships_by_category() -> None:
    _, lines = _run("new sloop 0 0 n galleon 5 5 n status")
    start = lines.index("All ships:")
    assert lines[start:] == [
        "All ships:",
        "  [Sloop n row=0 column=0]",
        "  [Galleon n row=5 column=5]",
        "Floating ships:",
        "  [Sloop n row=0 column=0]",
        "  [Galleon n row=5 column=5]",
        "Galleon:",
        "  [Galleon n row=5 column=5]",
        "Frigate:",
        "Carrack:",
        "Caravel:",
        "Sloop:",
        "  [Sloop n row=0 column=0]",
        cli.GOODBYE_MESSAGE,
    ]


def test_map_and_shots_render_boards() -> None:
    _, lines = _run(
        "new sloop 0 0 n caravel 2 2 e map burst 9 9 10 10 2 2 shots",
        rules=RulesConfig(fleet_size=2, board_size=4),
    )
    assert lines[1:5] == ["#...", "....", "..##", "...."]
    assert lines[5] == "Hits: 1 Inv: 2 Rep: 0 Remaining: 2 ships."
    # (9, 9) is invalid on a 4x4 board, (10, 10) too; only (2, 2) is drawn.
    assert lines[6:10] == ["....", "....", "..X.", "...."]


def test_burst_reports_invalid_and_repeated_shots() -> None:
    _, lines = _run("new sloop 0 0 n sloop 4 4 n burst 11 0 3 3 3 3 quit")
    assert "Hits: 0 Inv: 1 Rep: 1 Remaining: 2 ships." in lines


def test_bad_position_in_burst_is_reported() -> None:
    _, lines = _run(
        "new sloop 0 0 n burst x 0 0 0 quit",
        rules=RulesConfig(fleet_size=1, shots_per_burst=2),
    )
    assert "Bad position: expected a number, got 'x'" in lines
    assert "The Sloop went down!" in lines


def test_unknown_command_and_end_of_input() -> None:
    _, lines = _run("fire 1 2")
    assert lines[0].startswith("Unknown command 'fire'")
    assert lines[-1] == cli.GOODBYE_MESSAGE


def test_session_uses_game_factory() -> None:
    session, _ = _run(
        "new sloop 0 0 n", game_factory=InstrumentedGame, rules=RulesConfig(fleet_size=1)
    )
    assert isinstance(session.game, InstrumentedGame)


def test_main_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    for name in ("ARMADA_BOARD_SIZE", "ARMADA_FLEET_SIZE", "ARMADA_SHOTS_PER_BURST"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ARMADA_FLEET_SIZE", "1")
    monkeypatch.setattr("sys.stdin", io.StringIO("new carrack 0 0 s burst 0 0 1 0 2 0\n"))

    assert cli.main([]) == 0
    out = capsys.readouterr().out
    assert "1 ships added." in out
    assert "The Carrack went down!" in out
    assert "Hits: 3 Inv: 0 Rep: 0 Remaining: 0 ships." in out


def test_malformed_ship_record_drops_only_that_record() -> None:
    session, lines = _run(
        "new sloop 0 x n sloop 5 5 n status quit", rules=RulesConfig(fleet_size=1)
    )
    assert lines.count("Bad ship record: expected a number, got 'x'") == 1
    assert not any("got 'sloop'" in line or "got 'quit'" in line for line in lines)
    assert "1 ships added." in lines
    assert "  [Sloop n row=5 column=5]" in lines
    assert session.fleet is not None
    assert len(session.fleet.ships) == 1


def test_malformed_position_drops_only_that_shot() -> None:
    session, lines = _run(
        "new sloop 0 0 n burst 1 y 0 0 2 2 quit",
        rules=RulesConfig(fleet_size=1, shots_per_burst=3),
    )
    assert lines.count("Bad position: expected a number, got 'y'") == 1
    assert "Hits: 1 Inv: 0 Rep: 0 Remaining: 0 ships." in lines
    assert session.game is not None
    assert session.game.shots == [Position(0, 0), Position(2, 2)]


def test_new_stops_at_fleet_size_although_fleet_takes_one_more() -> None:
    # Fleet.add_ship would accept fleet_size + 1 ships; `new` reads fleet_size.
    session, lines = _run(
        "new sloop 0 0 n sloop 0 2 n sloop 0 4 n quit", rules=RulesConfig(fleet_size=2)
    )
    assert "2 ships added." in lines
    assert session.fleet is not None
    assert len(session.fleet.ships) == 2
    assert session.fleet.add_ship(Ship(ShipKind.SLOOP, Orientation.NORTH, Position(0, 4)))


def test_input_ending_during_new_keeps_partial_fleet() -> None:
    session, lines = _run("new sloop 0 0 n caravel 5", rules=RulesConfig(fleet_size=3))
    assert "Input ended before the fleet was complete." in lines
    assert "1 ships added." in lines
    assert lines[-1] == cli.GOODBYE_MESSAGE
    assert session.fleet is not None
    assert len(session.fleet.ships) == 1
    assert session.game is not None
