"""Read-only projections of engine state for a presentation layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.broadside.game.board import Mark
from src.broadside.game.state import PLAYERS, GameState, Mode, Phase


class CellView(Enum):
    EMPTY = "empty"
    SHIP = "ship"
    HIT = "hit"
    MISS = "miss"
    SUNK = "sunk"


def ships_visible(state: GameState, owner: int) -> bool:
    """Decide whether ``owner``'s intact ships may be drawn.

    Everything is revealed at game over. Before that only the placing
    player sees their own fleet, plus the human's own fleet in a match
    against the automated opponent, where nobody else shares the screen.
    """
    if state.phase is Phase.GAME_OVER:
        return True
    if state.phase is Phase.PLACEMENT:
        return owner == state.current_player
    return state.phase is Phase.BATTLE and state.mode is Mode.VS_AI and owner == 1


def render_board(state: GameState, owner: int) -> list[list[CellView]]:
    player = state.player(owner)
    board = player.board
    show_ships = ships_visible(state, owner)
    rows: list[list[CellView]] = []
    for row in range(board.size):
        cells: list[CellView] = []
        for col in range(board.size):
            mark = board.mark(row, col)
            ship_id = board.occupant(row, col)
            if mark is Mark.MISS:
                cells.append(CellView.MISS)
            elif mark is Mark.HIT:
                sunk = ship_id is not None and player.fleet.get(ship_id).is_sunk
                cells.append(CellView.SUNK if sunk else CellView.HIT)
            elif ship_id is not None and show_ships:
                cells.append(CellView.SHIP)
            else:
                cells.append(CellView.EMPTY)
        rows.append(cells)
    return rows


@dataclass(frozen=True)
class GameSnapshot:
    phase: Phase
    current_player: int
    mode: Mode | None
    orientation: str
    selected_ship: str | None
    ready: bool
    remaining_ships: dict[str, int]
    winner: int | None
    message: str
    ai_move_pending: bool
    boards: dict[int, list[list[CellView]]] = field(default_factory=dict)

    def to_dict(self: GameSnapshot) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "current_player": self.current_player,
            "mode": self.mode.value if self.mode else None,
            "orientation": self.orientation,
            "selected_ship": self.selected_ship,
            "ready": self.ready,
            "remaining_ships": dict(self.remaining_ships),
            "winner": self.winner,
            "message": self.message,
            "ai_move_pending": self.ai_move_pending,
            "boards": {
                str(owner): [[cell.value for cell in row] for row in grid]
                for owner, grid in self.boards.items()
            },
        }


def snapshot(state: GameState, message: str = "") -> GameSnapshot:
    active = state.active
    return GameSnapshot(
        phase=state.phase,
        current_player=state.current_player,
        mode=state.mode,
        orientation=state.orientation.value,
        selected_ship=state.selected_ship.name if state.selected_ship else None,
        ready=state.phase is Phase.PLACEMENT and active.fleet.all_placed,
        remaining_ships=active.fleet.remaining_types(),
        winner=state.winner,
        message=message,
        ai_move_pending=state.ai_move_pending,
        boards={owner: render_board(state, owner) for owner in PLAYERS},
    )
