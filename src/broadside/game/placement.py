"""
Placement rules: legality checks, committing a ship, random fleet layout.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from src.broadside.core.errors import FleetPlacementError
from src.broadside.game.board import Board, Coord, Orientation
from src.broadside.game.fleet import Fleet, ShipInstance

logger = logging.getLogger(__name__)

ORIENTATIONS: tuple[Orientation, ...] = (Orientation.HORIZONTAL, Orientation.VERTICAL)


@dataclass(frozen=True)
class Preview:
    """In-bounds cells a candidate placement would cover, and whether it fits."""

    cells: tuple[Coord, ...]
    legal: bool


def span(origin: Coord, length: int, orientation: Orientation) -> list[Coord]:
    row, col = origin
    if orientation is Orientation.HORIZONTAL:
        return [(row, col + i) for i in range(length)]
    return [(row + i, col) for i in range(length)]


def can_place(
    board: Board,
    origin: Coord,
    length: int,
    orientation: Orientation,
) -> bool:
    """Return True if every spanned cell is on the board and open water."""
    for row, col in span(origin, length, orientation):
        if not board.in_bounds(row, col):
            return False
        if board.is_occupied(row, col):
            return False
    return True


def preview(
    board: Board,
    origin: Coord,
    length: int,
    orientation: Orientation,
) -> Preview:
    cells = tuple(
        (row, col)
        for row, col in span(origin, length, orientation)
        if board.in_bounds(row, col)
    )
    return Preview(cells=cells, legal=can_place(board, origin, length, orientation))


def apply_placement(
    board: Board,
    ship: ShipInstance,
    origin: Coord,
    orientation: Orientation,
) -> list[Coord]:
    """Write ``ship`` onto ``board``. Callers check ``can_place`` first."""
    if ship.placed:
        raise ValueError(f"{ship.name} is already placed")
    if not can_place(board, origin, ship.length, orientation):
        raise ValueError(f"{ship.name} does not fit at {origin} {orientation.value}")
    cells = span(origin, ship.length, orientation)
    board.occupy(cells, ship.ship_id)
    ship.cells = cells
    ship.placed = True
    logger.debug("Placed %s at %s", ship.name, cells)
    return cells


def legal_placements(board: Board, length: int) -> list[tuple[Coord, Orientation]]:
    return [
        ((row, col), orientation)
        for row in range(board.size)
        for col in range(board.size)
        for orientation in ORIENTATIONS
        if can_place(board, (row, col), length, orientation)
    ]


def place_fleet_randomly(
    board: Board,
    fleet: Fleet,
    rng: random.Random,
    max_attempts: int = 0,
) -> None:
    """Drop every unplaced ship at a uniformly random legal spot.

    Each try samples an origin cell and a 50/50 orientation and is kept if
    it fits. With ``max_attempts == 0`` the retries never stop, so
    termination is probabilistic: it holds with probability 1 whenever the
    fleet can fit, and quickly for the standard fleet on a 10x10 board.
    With a cap, the last resort picks uniformly from an exhaustive list of
    legal spots, which is the same distribution the retries sample.
    """
    for ship in fleet.unplaced():
        attempts = 0
        while True:
            if max_attempts and attempts >= max_attempts:
                options = legal_placements(board, ship.length)
                if not options:
                    raise FleetPlacementError(
                        f"No legal position left for {ship.name} (length {ship.length})"
                    )
                origin, orientation = rng.choice(options)
                break
            origin = (rng.randrange(board.size), rng.randrange(board.size))
            orientation = rng.choice(ORIENTATIONS)
            attempts += 1
            if can_place(board, origin, ship.length, orientation):
                break
        apply_placement(board, ship, origin, orientation)
