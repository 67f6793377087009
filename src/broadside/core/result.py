from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class Rejection(Enum):
    """Why a command was refused. Engine state is untouched in every case."""

    WRONG_PHASE = "wrong_phase"
    WRONG_PLAYER = "wrong_player"
    INVALID_MODE = "invalid_mode"
    INVALID_ORIENTATION = "invalid_orientation"
    UNKNOWN_SHIP = "unknown_ship"
    NO_SHIP_SELECTED = "no_ship_selected"
    ILLEGAL_PLACEMENT = "illegal_placement"
    FLEET_INCOMPLETE = "fleet_incomplete"
    OUT_OF_BOUNDS = "out_of_bounds"
    ALREADY_ATTACKED = "already_attacked"


@dataclass
class CommandResult(Generic[T]):
    success: bool
    data: T | None = None
    error: str = ""
    rejection: Rejection | None = None
    message: str = ""

    @classmethod
    def ok(cls, data: T = None, message: str = "") -> CommandResult[T]:
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, rejection: Rejection, message: str) -> CommandResult[T]:
        return cls(
            success=False,
            error=message,
            rejection=rejection,
            message=message,
        )
