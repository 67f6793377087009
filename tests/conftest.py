"""Pytest fixtures: seeded engines driven by a hand-cranked scheduler."""

from __future__ import annotations

import os
import random
from collections.abc import Callable

import pytest

os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"

from src.broadside.core.scheduling import ManualScheduler  # noqa: E402
from src.broadside.game.board import Orientation  # noqa: E402
from src.broadside.game.engine import GameEngine  # noqa: E402

SEED = 1234


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(SEED)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def engine(rng: random.Random, scheduler: ManualScheduler) -> GameEngine:
    """Standard-fleet engine whose deferred AI moves only run on demand."""
    return GameEngine(rng=rng, scheduler=scheduler)


@pytest.fixture()
def place_in_rows() -> Callable[[GameEngine], None]:
    """Place the active player's whole fleet, one ship per row from (0, 0) down."""

    def _place(engine: GameEngine) -> None:
        engine.set_orientation(Orientation.HORIZONTAL)
        row = 0
        for ship in list(engine.state.active.fleet.unplaced()):
            assert engine.select_ship(ship.name).success
            assert engine.place_ship(row, 0).success
            row += 1

    return _place
