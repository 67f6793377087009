"""HTMX routes that drive one GameEngine per browser session."""

from __future__ import annotations

import logging
import uuid
from html import escape
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from src.broadside.core.config import AI_FOLLOW_UP_DELAY, AI_TURN_DELAY
from src.broadside.core.result import CommandResult
from src.broadside.core.scheduling import LoopScheduler
from src.broadside.game.board import Orientation
from src.broadside.game.engine import GameEngine
from src.broadside.game.state import PLAYERS, Mode, Phase, opponent_of
from src.broadside.game.views import CellView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/game", tags=["game"])

# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

SESSION_KEY = "game_id"

_ENGINES: dict[str, GameEngine] = {}

_CELL_LABELS: dict[CellView, str] = {
    CellView.EMPTY: "•",
    CellView.SHIP: "■",
    CellView.HIT: "✳",
    CellView.MISS: "×",  # noqa: RUF001
    CellView.SUNK: "☠",
}


def _new_engine() -> GameEngine:
    return GameEngine(scheduler=LoopScheduler())


def get_engine(request: Request) -> GameEngine:
    """Return the engine bound to this browser session, creating it on first use."""
    game_id = request.session.get(SESSION_KEY)
    if game_id is None or game_id not in _ENGINES:
        game_id = uuid.uuid4().hex
        request.session[SESSION_KEY] = game_id
        _ENGINES[game_id] = _new_engine()
        logger.info("Created engine for session %s", game_id)
    return _ENGINES[game_id]


EngineDep = Annotated[GameEngine, Depends(get_engine)]

# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _render_mode_selection() -> str:
    buttons = "".join(
        f"<button class='btn' hx-post='/game/mode' "
        f'hx-vals=\'{{"mode":"{mode.value}"}}\' '
        f"hx-target='#game' hx-swap='innerHTML'>{label}</button>"
        for mode, label in (
            (Mode.VS_HUMAN, "Player vs Player"),
            (Mode.VS_AI, "Player vs AI"),
        )
    )
    return f"<section id='game-mode-selection' class='panel'>{buttons}</section>"


def _render_info(engine: GameEngine) -> str:
    state = engine.state
    phase_label = {
        Phase.PLACEMENT: "Ship Placement",
        Phase.BATTLE: "Battle",
        Phase.GAME_OVER: "Game Over",
    }.get(state.phase, "")
    return (
        "<div class='game-info'>"
        f"<span id='current-player'>Player {state.current_player}</span>"
        f"<span id='game-phase'>{phase_label}</span>"
        "</div>"
    )


def _render_placement_controls(engine: GameEngine) -> str:
    state = engine.state
    remaining = state.active.fleet.remaining_types()
    items: list[str] = []
    for ship_type in state.catalog:
        left = remaining.get(ship_type.name, 0)
        classes = ["ship-item"]
        if left == 0:
            classes.append("placed")
        if state.selected_ship is ship_type:
            classes.append("selected")
        disabled = "disabled" if left == 0 else ""
        items.append(
            f"<button class='{' '.join(classes)}' hx-post='/game/select' "
            f'hx-vals=\'{{"ship":"{escape(ship_type.name)}"}}\' '
            f"hx-target='#game' hx-swap='innerHTML' {disabled}>"
            f"{escape(ship_type.name.title())} ({ship_type.length})</button>"
        )
    ready_attr = "" if engine.all_ships_placed() else "disabled"
    return (
        "<div class='ships-to-place'>"
        + "".join(items)
        + "</div><div class='controls'>"
        "<button id='rotate-btn' class='btn' hx-post='/game/rotate' "
        "hx-target='#game' hx-swap='innerHTML'>"
        f"Rotate ({state.orientation.value})</button>"
        "<button id='ready-btn' class='btn' hx-post='/game/ready' "
        f"hx-target='#game' hx-swap='innerHTML' {ready_attr}>Ready</button>"
        "</div>"
    )


def _cell_action(engine: GameEngine, owner: int, view: CellView) -> str | None:
    """Return the endpoint a click on this cell should post to, if any."""
    state = engine.state
    if state.phase is Phase.PLACEMENT and owner == state.current_player:
        return "/game/place"
    if (
        state.phase is Phase.BATTLE
        and owner == opponent_of(state.current_player)
        and not state.is_ai(state.current_player)
        and view in (CellView.EMPTY, CellView.SHIP)
    ):
        return "/game/attack"
    return None


def _render_board(engine: GameEngine, owner: int) -> str:
    grid = engine.board_view(owner)
    rows: list[str] = [
        f"<table id='player{owner}-board' class='grid' role='grid' "
        f"aria-label='Player {owner} waters'>"
    ]
    for row, cells in enumerate(grid):
        rows.append("<tr role='row'>")
        for col, view in enumerate(cells):
            action = _cell_action(engine, owner, view)
            label = _CELL_LABELS[view]
            if action is None:
                rows.append(
                    "<td role='gridcell'>"
                    f"<div class='cell {view.value}'>{label}</div>"
                    "</td>"
                )
                continue
            rows.append(
                "<td role='gridcell'>"
                f"<button class='cell {view.value}' hx-post='{action}' "
                f'hx-vals=\'{{"row": {row}, "col": {col}, "board": {owner}}}\' '
                f"hx-target='#game' hx-swap='innerHTML'>{label}</button>"
                "</td>"
            )
        rows.append("</tr>")
    rows.append("</table>")
    return "".join(rows)


def _render_refresh(engine: GameEngine) -> str:
    """Ask the browser to pull the board again once the AI has moved."""
    if not engine.state.ai_move_pending:
        return ""
    delay = max(AI_TURN_DELAY, AI_FOLLOW_UP_DELAY) + 0.1
    return (
        "<div hx-get='/game/board' "
        f"hx-trigger='load delay:{delay:.1f}s' "
        "hx-target='#game' hx-swap='innerHTML'></div>"
    )


def render_game(engine: GameEngine, message: str | None = None) -> str:
    state = engine.state
    text = escape(message if message is not None else engine.message)
    if state.phase is Phase.MODE_SELECTION:
        return (
            _render_mode_selection()
            + f"<div class='game-messages'><p id='message-display'>{text}</p></div>"
        )

    parts = [_render_info(engine)]
    if state.phase is Phase.PLACEMENT:
        parts.append(_render_placement_controls(engine))
    parts.append("<div class='game-boards'>")
    for owner in PLAYERS:
        title = "AI" if state.is_ai(owner) else f"Player {owner}"
        parts.append(f"<div class='board'><h4>{title}</h4>{_render_board(engine, owner)}</div>")
    parts.append("</div>")
    parts.append(f"<div class='game-messages'><p id='message-display'>{text}</p></div>")
    parts.append(
        "<button id='new-game-btn' class='btn' hx-post='/game/new' "
        "hx-target='#game' hx-swap='innerHTML'>New Game</button>"
    )
    parts.append(_render_refresh(engine))
    return "".join(parts)


def _respond(engine: GameEngine, result: CommandResult[Any]) -> HTMLResponse:
    return HTMLResponse(render_game(engine, result.message))


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


@router.get("/board", response_class=HTMLResponse)
async def board_fragment(engine: EngineDep) -> HTMLResponse:
    return HTMLResponse(render_game(engine))


@router.get("/state")
async def game_state(engine: EngineDep) -> dict[str, Any]:
    data = engine.snapshot().to_dict()
    data["stats"] = {str(player): engine.get_stats(player) for player in PLAYERS}
    return data


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@router.post("/mode", response_class=HTMLResponse)
async def select_mode(engine: EngineDep, mode: Annotated[Mode, Form()]) -> HTMLResponse:
    return _respond(engine, engine.select_mode(mode))


@router.post("/select", response_class=HTMLResponse)
async def select_ship(engine: EngineDep, ship: Annotated[str, Form()]) -> HTMLResponse:
    return _respond(engine, engine.select_ship(ship))


@router.post("/orientation", response_class=HTMLResponse)
async def set_orientation(
    engine: EngineDep,
    orientation: Annotated[Orientation, Form()],
) -> HTMLResponse:
    return _respond(engine, engine.set_orientation(orientation))


@router.post("/rotate", response_class=HTMLResponse)
async def rotate(engine: EngineDep) -> HTMLResponse:
    return _respond(engine, engine.rotate())


@router.post("/place", response_class=HTMLResponse)
async def place_ship(
    engine: EngineDep,
    row: Annotated[int, Form()],
    col: Annotated[int, Form()],
    board: Annotated[int, Form()],
) -> HTMLResponse:
    return _respond(engine, engine.place_ship(row, col, player=board))


@router.post("/ready", response_class=HTMLResponse)
async def ready(engine: EngineDep) -> HTMLResponse:
    return _respond(engine, engine.ready())


@router.post("/attack", response_class=HTMLResponse)
async def attack(
    engine: EngineDep,
    row: Annotated[int, Form()],
    col: Annotated[int, Form()],
    board: Annotated[int, Form()],
) -> HTMLResponse:
    """``board`` is the owner of the clicked waters; the other side fires."""
    return _respond(engine, engine.attack(row, col, attacker=opponent_of(board)))


@router.post("/new", response_class=HTMLResponse)
async def new_game(engine: EngineDep) -> HTMLResponse:
    return _respond(engine, engine.new_game())
