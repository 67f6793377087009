"""
Grid storage for one player's waters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

BOARD_SIZE = 10

Coord = tuple[int, int]


class Orientation(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def toggled(self) -> Orientation:
        if self is Orientation.HORIZONTAL:
            return Orientation.VERTICAL
        return Orientation.HORIZONTAL


class Mark(Enum):
    """Result left on a cell once it has been fired at."""

    HIT = "hit"
    MISS = "miss"


@dataclass
class Board:
    """Occupancy matrix plus the attack marks on top of it.

    ``grid[row][col]`` holds the id of the occupying ship, or ``None`` for
    open water. Marks are kept apart from occupancy so that empty cells can
    carry a permanent miss.
    """

    size: int = BOARD_SIZE
    grid: list[list[int | None]] = field(default_factory=list)
    marks: dict[Coord, Mark] = field(default_factory=dict)

    def __post_init__(self: Board) -> None:
        if self.size < 1:
            raise ValueError(f"Board size must be positive, got {self.size}")
        if not self.grid:
            self.grid = [[None] * self.size for _ in range(self.size)]

    def in_bounds(self: Board, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def occupant(self: Board, row: int, col: int) -> int | None:
        return self.grid[row][col]

    def is_occupied(self: Board, row: int, col: int) -> bool:
        return self.grid[row][col] is not None

    def occupy(self: Board, cells: list[Coord], ship_id: int) -> None:
        for row, col in cells:
            self.grid[row][col] = ship_id

    def mark(self: Board, row: int, col: int) -> Mark | None:
        return self.marks.get((row, col))

    def is_attacked(self: Board, row: int, col: int) -> bool:
        return (row, col) in self.marks

    def record(self: Board, row: int, col: int, mark: Mark) -> None:
        self.marks[(row, col)] = mark

    @property
    def occupied_cells(self: Board) -> set[Coord]:
        return {
            (row, col)
            for row in range(self.size)
            for col in range(self.size)
            if self.grid[row][col] is not None
        }

    def unattacked_cells(self: Board) -> list[Coord]:
        """Return every cell without a hit or miss mark, row-major."""
        return [
            (row, col)
            for row in range(self.size)
            for col in range(self.size)
            if (row, col) not in self.marks
        ]
