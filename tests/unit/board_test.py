"""Tests for the board grid and ship catalog."""

from __future__ import annotations

import pytest

from src.broadside.game.board import BOARD_SIZE, Board, Mark, Orientation
from src.broadside.game.fleet import STANDARD_CATALOG, Fleet, ShipType

STANDARD_SHIPS = 5
TOTAL_CELLS = BOARD_SIZE * BOARD_SIZE


class TestBoard:
    def test_new_board_is_empty(self) -> None:
        """A fresh board is 10x10 open water with no marks."""
        board = Board()
        assert board.size == BOARD_SIZE
        assert len(board.grid) == BOARD_SIZE
        assert all(len(row) == BOARD_SIZE for row in board.grid)
        assert board.occupied_cells == set()
        assert board.marks == {}

    def test_invalid_size_rejected(self) -> None:
        with pytest.raises(ValueError):
            Board(size=0)

    def test_in_bounds(self) -> None:
        board = Board()
        assert board.in_bounds(0, 0)
        assert board.in_bounds(9, 9)
        assert not board.in_bounds(-1, 0)
        assert not board.in_bounds(0, 10)

    def test_occupy_and_query(self) -> None:
        board = Board()
        board.occupy([(2, 3), (2, 4)], ship_id=7)
        assert board.occupant(2, 3) == 7
        assert board.is_occupied(2, 4)
        assert not board.is_occupied(3, 3)
        assert board.occupied_cells == {(2, 3), (2, 4)}

    def test_unattacked_cells_skip_marks(self) -> None:
        """Both hits and misses remove a cell from the untried set."""
        board = Board()
        board.record(0, 0, Mark.HIT)
        board.record(5, 5, Mark.MISS)

        untried = board.unattacked_cells()

        assert len(untried) == TOTAL_CELLS - 2
        assert (0, 0) not in untried
        assert (5, 5) not in untried
        assert board.is_attacked(5, 5)
        assert board.mark(0, 0) is Mark.HIT

    def test_orientation_toggle(self) -> None:
        assert Orientation.HORIZONTAL.toggled() is Orientation.VERTICAL
        assert Orientation.VERTICAL.toggled() is Orientation.HORIZONTAL


class TestFleet:
    def test_standard_catalog(self) -> None:
        assert [s.length for s in STANDARD_CATALOG] == [5, 4, 3, 3, 2]

    def test_ship_type_validation(self) -> None:
        with pytest.raises(ValueError):
            ShipType("raft", 0)
        with pytest.raises(ValueError):
            ShipType("raft", 1, count=0)

    def test_from_catalog_one_instance_per_count(self) -> None:
        """Each count-unit becomes its own hull with a distinct id."""
        fleet = Fleet.from_catalog([ShipType("destroyer", 2, count=2), ShipType("carrier", 5)])

        assert [s.name for s in fleet.ships] == ["destroyer", "destroyer", "carrier"]
        assert [s.ship_id for s in fleet.ships] == [0, 1, 2]
        assert fleet.remaining_types() == {"destroyer": 2, "carrier": 1}
        assert not fleet.all_placed

    def test_standard_fleet_size(self) -> None:
        fleet = Fleet.from_catalog(STANDARD_CATALOG)
        assert len(fleet.ships) == STANDARD_SHIPS
        assert fleet.afloat == []
        assert not fleet.all_sunk

    def test_ship_sinks_at_length(self) -> None:
        fleet = Fleet.from_catalog([ShipType("destroyer", 2)])
        ship = fleet.ships[0]
        ship.placed = True

        assert ship.register_hit() is False
        assert ship.register_hit() is True
        assert ship.is_sunk
        assert fleet.all_sunk
        with pytest.raises(ValueError):
            ship.register_hit()

    def test_next_unplaced(self) -> None:
        fleet = Fleet.from_catalog([ShipType("destroyer", 2, count=2)])
        first = fleet.next_unplaced("destroyer")
        assert first is fleet.ships[0]
        first.placed = True
        assert fleet.next_unplaced("destroyer") is fleet.ships[1]
        fleet.ships[1].placed = True
        assert fleet.next_unplaced("destroyer") is None
        assert fleet.all_placed
