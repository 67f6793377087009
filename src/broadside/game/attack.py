"""Shot resolution against one player's board and fleet."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from src.broadside.game.board import Board, Mark
from src.broadside.game.fleet import Fleet

logger = logging.getLogger(__name__)


class AttackOutcome(Enum):
    ALREADY_ATTACKED = "already_attacked"
    MISS = "miss"
    HIT = "hit"
    HIT_AND_SUNK = "hit_and_sunk"
    HIT_AND_WIN = "hit_and_win"

    @property
    def is_hit(self: AttackOutcome) -> bool:
        return self in (
            AttackOutcome.HIT,
            AttackOutcome.HIT_AND_SUNK,
            AttackOutcome.HIT_AND_WIN,
        )


@dataclass(frozen=True)
class AttackReport:
    outcome: AttackOutcome
    row: int
    col: int
    ship_name: str | None = None


def resolve_attack(board: Board, fleet: Fleet, row: int, col: int) -> AttackReport:
    """Fire at ``(row, col)`` and update marks and hit counts.

    A repeat shot changes nothing and reports ``ALREADY_ATTACKED``.
    """
    if not board.in_bounds(row, col):
        raise ValueError(f"({row}, {col}) is off the board")
    if board.is_attacked(row, col):
        return AttackReport(AttackOutcome.ALREADY_ATTACKED, row, col)

    ship_id = board.occupant(row, col)
    if ship_id is None:
        board.record(row, col, Mark.MISS)
        return AttackReport(AttackOutcome.MISS, row, col)

    ship = fleet.get(ship_id)
    board.record(row, col, Mark.HIT)
    if not ship.register_hit():
        return AttackReport(AttackOutcome.HIT, row, col, ship.name)
    if fleet.all_sunk:
        logger.debug("Last ship %s sunk at (%d, %d)", ship.name, row, col)
        return AttackReport(AttackOutcome.HIT_AND_WIN, row, col, ship.name)
    return AttackReport(AttackOutcome.HIT_AND_SUNK, row, col, ship.name)
