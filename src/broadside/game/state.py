"""Match state owned by a single engine."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from src.broadside.game.board import BOARD_SIZE, Board, Orientation
from src.broadside.game.fleet import STANDARD_CATALOG, Fleet, ShipType

PLAYERS: tuple[int, int] = (1, 2)
AI_PLAYER = 2


class Phase(Enum):
    MODE_SELECTION = "mode-selection"
    PLACEMENT = "placement"
    BATTLE = "battle"
    GAME_OVER = "game-over"


class Mode(Enum):
    VS_HUMAN = "vs-player"
    VS_AI = "vs-ai"


def opponent_of(player: int) -> int:
    return 2 if player == 1 else 1


@dataclass
class PlayerState:
    board: Board
    fleet: Fleet

    @classmethod
    def new(
        cls: type[PlayerState],
        catalog: Sequence[ShipType],
        size: int = BOARD_SIZE,
    ) -> PlayerState:
        return cls(board=Board(size=size), fleet=Fleet.from_catalog(catalog))


@dataclass
class GameState:
    catalog: tuple[ShipType, ...]
    player1: PlayerState
    player2: PlayerState
    phase: Phase = Phase.MODE_SELECTION
    current_player: int = 1
    mode: Mode | None = None
    orientation: Orientation = Orientation.HORIZONTAL
    selected_ship: ShipType | None = None
    winner: int | None = None
    epoch: int = 0
    ai_move_pending: bool = False

    @classmethod
    def new(
        cls: type[GameState],
        catalog: Sequence[ShipType] = STANDARD_CATALOG,
        size: int = BOARD_SIZE,
        epoch: int = 0,
    ) -> GameState:
        catalog = tuple(catalog)
        return cls(
            catalog=catalog,
            player1=PlayerState.new(catalog, size),
            player2=PlayerState.new(catalog, size),
            epoch=epoch,
        )

    def player(self: GameState, number: int) -> PlayerState:
        if number == 1:
            return self.player1
        if number == 2:  # noqa: PLR2004
            return self.player2
        raise ValueError(f"No player {number}")

    @property
    def active(self: GameState) -> PlayerState:
        return self.player(self.current_player)

    def ship_type(self: GameState, name: str) -> ShipType | None:
        for ship_type in self.catalog:
            if ship_type.name == name:
                return ship_type
        return None

    def is_ai(self: GameState, player: int) -> bool:
        return self.mode is Mode.VS_AI and player == AI_PLAYER
