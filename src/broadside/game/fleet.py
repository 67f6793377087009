"""Ship catalog and per-player fleet bookkeeping."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from src.broadside.game.board import Coord


@dataclass(frozen=True)
class ShipType:
    name: str
    length: int
    count: int = 1

    def __post_init__(self: ShipType) -> None:
        if self.length < 1:
            raise ValueError(f"{self.name}: length must be at least 1")
        if self.count < 1:
            raise ValueError(f"{self.name}: count must be at least 1")


STANDARD_CATALOG: tuple[ShipType, ...] = (
    ShipType("carrier", 5),
    ShipType("battleship", 4),
    ShipType("cruiser", 3),
    ShipType("submarine", 3),
    ShipType("destroyer", 2),
)


@dataclass
class ShipInstance:
    """One hull of a fleet. ``ship_id`` is what the board stores."""

    ship_id: int
    name: str
    length: int
    cells: list[Coord] = field(default_factory=list)
    hit_count: int = 0
    placed: bool = False

    @property
    def is_sunk(self: ShipInstance) -> bool:
        return self.placed and self.hit_count >= self.length

    def register_hit(self: ShipInstance) -> bool:
        """Count one hit and return True if it sank the ship."""
        if self.is_sunk:
            raise ValueError(f"{self.name} is already sunk")
        self.hit_count += 1
        return self.is_sunk


@dataclass
class Fleet:
    ships: list[ShipInstance] = field(default_factory=list)

    @classmethod
    def from_catalog(cls: type[Fleet], catalog: Iterable[ShipType]) -> Fleet:
        ships: list[ShipInstance] = []
        for ship_type in catalog:
            for _ in range(ship_type.count):
                ships.append(
                    ShipInstance(
                        ship_id=len(ships),
                        name=ship_type.name,
                        length=ship_type.length,
                    )
                )
        return cls(ships=ships)

    def get(self: Fleet, ship_id: int) -> ShipInstance:
        return self.ships[ship_id]

    def next_unplaced(self: Fleet, name: str) -> ShipInstance | None:
        for ship in self.ships:
            if ship.name == name and not ship.placed:
                return ship
        return None

    def unplaced(self: Fleet) -> list[ShipInstance]:
        return [ship for ship in self.ships if not ship.placed]

    def remaining_types(self: Fleet) -> dict[str, int]:
        """Map each ship name to how many of it are still waiting to be placed."""
        remaining: dict[str, int] = {}
        for ship in self.unplaced():
            remaining[ship.name] = remaining.get(ship.name, 0) + 1
        return remaining

    @property
    def all_placed(self: Fleet) -> bool:
        return all(ship.placed for ship in self.ships)

    @property
    def all_sunk(self: Fleet) -> bool:
        return bool(self.ships) and all(ship.is_sunk for ship in self.ships)

    @property
    def afloat(self: Fleet) -> list[ShipInstance]:
        return [ship for ship in self.ships if ship.placed and not ship.is_sunk]
