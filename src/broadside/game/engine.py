"""
Two-player Battleship engine.

Commands validate first and mutate last, so a rejected command leaves the
match exactly as it was. Every command returns a ``CommandResult``.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Any

from src.broadside.ai.opponent import AiOpponent
from src.broadside.core.config import (
    AI_FOLLOW_UP_DELAY,
    AI_TURN_DELAY,
    PLACEMENT_MAX_ATTEMPTS,
)
from src.broadside.core.result import CommandResult, Rejection
from src.broadside.core.scheduling import ManualScheduler, Scheduler
from src.broadside.game.attack import AttackOutcome, AttackReport, resolve_attack
from src.broadside.game.board import BOARD_SIZE, Mark, Orientation
from src.broadside.game.fleet import STANDARD_CATALOG, ShipInstance, ShipType
from src.broadside.game.placement import (
    Preview,
    apply_placement,
    can_place,
    place_fleet_randomly,
    preview,
)
from src.broadside.game.state import (
    AI_PLAYER,
    GameState,
    Mode,
    Phase,
    PlayerState,
    opponent_of,
)
from src.broadside.game.views import CellView, GameSnapshot, render_board, snapshot

logger = logging.getLogger(__name__)


class GameEngine:
    """Owns one match and applies commands to it in order."""

    def __init__(
        self: GameEngine,
        *,
        catalog: Sequence[ShipType] = STANDARD_CATALOG,
        size: int = BOARD_SIZE,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        turn_delay: float = AI_TURN_DELAY,
        follow_up_delay: float = AI_FOLLOW_UP_DELAY,
        placement_attempts: int = PLACEMENT_MAX_ATTEMPTS,
    ) -> None:
        self.catalog = tuple(catalog)
        self.size = size
        self.rng = rng or random.Random()  # noqa: S311
        self.scheduler: Scheduler = scheduler or ManualScheduler()
        self.opponent = AiOpponent(self.rng)
        self.turn_delay = turn_delay
        self.follow_up_delay = follow_up_delay
        self.placement_attempts = placement_attempts
        self.state = GameState.new(self.catalog, self.size)
        self.message = "Choose a game mode to begin."

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def phase(self: GameEngine) -> Phase:
        return self.state.phase

    @property
    def current_player(self: GameEngine) -> int:
        return self.state.current_player

    @property
    def winner(self: GameEngine) -> int | None:
        return self.state.winner

    def all_ships_placed(self: GameEngine) -> bool:
        """Readiness gate for the active player."""
        return self.state.phase is Phase.PLACEMENT and self.state.active.fleet.all_placed

    def board_view(self: GameEngine, owner: int) -> list[list[CellView]]:
        return render_board(self.state, owner)

    def snapshot(self: GameEngine) -> GameSnapshot:
        return snapshot(self.state, self.message)

    def preview_placement(self: GameEngine, row: int, col: int) -> Preview | None:
        """Cells the selected ship would cover from ``(row, col)``, if one is selected."""
        state = self.state
        if state.phase is not Phase.PLACEMENT or state.selected_ship is None:
            return None
        return preview(
            state.active.board,
            (row, col),
            state.selected_ship.length,
            state.orientation,
        )

    def get_stats(self: GameEngine, player: int) -> dict[str, Any]:
        """Shooting record of ``player`` against the opposing board."""
        target = self.state.player(opponent_of(player))
        shots_fired = len(target.board.marks)
        hits = sum(1 for mark in target.board.marks.values() if mark is Mark.HIT)
        accuracy = hits / shots_fired * 100 if shots_fired > 0 else 0.0
        return {
            "shots_fired": shots_fired,
            "hits": hits,
            "accuracy": round(accuracy, 1),
            "ships_remaining": len(target.fleet.afloat),
            "ships_total": len(target.fleet.ships),
        }

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def select_mode(self: GameEngine, mode: Mode | str) -> CommandResult[Mode]:
        state = self.state
        if state.phase is not Phase.MODE_SELECTION:
            return self._reject(Rejection.WRONG_PHASE, "The game mode is already chosen.")
        try:
            chosen = Mode(mode)
        except ValueError:
            return self._reject(Rejection.INVALID_MODE, f"Unknown game mode: {mode}")

        if chosen is Mode.VS_AI:
            # Build the automated fleet aside so a failure leaves no half-placed board.
            ai_side = PlayerState.new(self.catalog, self.size)
            place_fleet_randomly(ai_side.board, ai_side.fleet, self.rng, self.placement_attempts)
            state.player2 = ai_side

        state.mode = chosen
        state.phase = Phase.PLACEMENT
        state.current_player = 1
        logger.info("Mode selected: %s (epoch %d)", chosen.value, state.epoch)
        return self._ok(
            chosen,
            "Click on ships to select them, then click on your board to place them!",
        )

    def select_ship(self: GameEngine, name: str) -> CommandResult[ShipType]:
        state = self.state
        if state.phase is not Phase.PLACEMENT:
            return self._reject(
                Rejection.WRONG_PHASE, "Ships can only be selected during placement."
            )
        ship_type = state.ship_type(name)
        if ship_type is None:
            return self._reject(Rejection.UNKNOWN_SHIP, f"There is no {name} in this fleet.")
        if state.active.fleet.next_unplaced(name) is None:
            return self._reject(Rejection.UNKNOWN_SHIP, f"Every {name} is already placed.")

        state.selected_ship = ship_type
        return self._ok(
            ship_type,
            f"Selected {name} ({ship_type.length} cells). Click on your board to place it.",
        )

    def set_orientation(
        self: GameEngine,
        orientation: Orientation | str,
    ) -> CommandResult[Orientation]:
        try:
            chosen = Orientation(orientation)
        except ValueError:
            return self._reject(
                Rejection.INVALID_ORIENTATION, f"Unknown orientation: {orientation}"
            )
        self.state.orientation = chosen
        return self._ok(chosen, f"Ship orientation: {chosen.value}")

    def rotate(self: GameEngine) -> CommandResult[Orientation]:
        return self.set_orientation(self.state.orientation.toggled())

    def place_ship(
        self: GameEngine,
        row: int,
        col: int,
        player: int | None = None,
    ) -> CommandResult[ShipInstance]:
        state = self.state
        if state.phase is not Phase.PLACEMENT:
            return self._reject(
                Rejection.WRONG_PHASE, "Ships can only be placed during placement."
            )
        if player is not None and player != state.current_player:
            return self._reject(
                Rejection.WRONG_PLAYER,
                f"It is Player {state.current_player}'s turn to place ships.",
            )
        ship_type = state.selected_ship
        ship = state.active.fleet.next_unplaced(ship_type.name) if ship_type else None
        if ship is None:
            return self._reject(Rejection.NO_SHIP_SELECTED, "Please select a ship first!")
        if not can_place(state.active.board, (row, col), ship.length, state.orientation):
            return self._reject(
                Rejection.ILLEGAL_PLACEMENT,
                "Cannot place ship here! Make sure it fits and doesn't overlap.",
            )

        apply_placement(state.active.board, ship, (row, col), state.orientation)
        state.selected_ship = None
        if state.active.fleet.all_placed:
            message = "All ships placed! Click Ready when you're done."
        else:
            message = "Continue placing your ships."
        return self._ok(ship, message)

    def ready(self: GameEngine, player: int | None = None) -> CommandResult[Phase]:
        state = self.state
        if state.phase is not Phase.PLACEMENT:
            return self._reject(Rejection.WRONG_PHASE, "There is no placement to finish.")
        if player is not None and player != state.current_player:
            return self._reject(
                Rejection.WRONG_PLAYER,
                f"It is Player {state.current_player}'s turn to place ships.",
            )
        if not state.active.fleet.all_placed:
            return self._reject(
                Rejection.FLEET_INCOMPLETE,
                "Place all of your ships before pressing Ready.",
            )

        if state.current_player == 1 and state.mode is Mode.VS_HUMAN:
            state.current_player = 2
            state.selected_ship = None
            logger.info("Player 1 ready; player 2 placing")
            return self._ok(state.phase, "Player 2: Place your ships!")
        return self._start_battle()

    def attack(
        self: GameEngine,
        row: int,
        col: int,
        attacker: int | None = None,
    ) -> CommandResult[AttackReport]:
        """Fire for a human player. The automated side fires through ``run_ai_move``."""
        state = self.state
        if state.phase is Phase.GAME_OVER:
            return self._reject(Rejection.WRONG_PHASE, "The game is over.")
        if state.phase is not Phase.BATTLE:
            return self._reject(
                Rejection.WRONG_PHASE, "Attacks are only allowed during battle."
            )
        if attacker is None:
            attacker = state.current_player
        if state.is_ai(state.current_player):
            return self._reject(Rejection.WRONG_PLAYER, "Wait for the AI to finish its turn.")
        if attacker != state.current_player:
            return self._reject(
                Rejection.WRONG_PLAYER, f"It is Player {state.current_player}'s turn."
            )
        return self._fire(attacker, row, col)

    def new_game(self: GameEngine) -> CommandResult[Phase]:
        """Start over. Deferred moves from the old match become no-ops."""
        epoch = self.state.epoch + 1
        self.state = GameState.new(self.catalog, self.size, epoch=epoch)
        logger.info("New game (epoch %d)", epoch)
        return self._ok(self.state.phase, "Choose a game mode to begin.")

    def run_ai_move(self: GameEngine, epoch: int) -> CommandResult[AttackReport] | None:
        """Deferred automated turn. Returns None when it no longer applies."""
        state = self.state
        if epoch != state.epoch:
            logger.debug("Dropping stale AI move from epoch %d", epoch)
            return None
        state.ai_move_pending = False
        if state.phase is not Phase.BATTLE or not state.is_ai(state.current_player):
            return None
        target = state.player(opponent_of(AI_PLAYER)).board
        row, col = self.opponent.choose_attack(target)
        return self._fire(AI_PLAYER, row, col)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_battle(self: GameEngine) -> CommandResult[Phase]:
        state = self.state
        state.phase = Phase.BATTLE
        state.current_player = 1
        state.selected_ship = None
        logger.info("Battle started (epoch %d)", state.epoch)
        result = self._ok(
            state.phase,
            f"Battle begins! {self._turn_prompt()}",
        )
        if state.is_ai(state.current_player):
            self._schedule_ai_move(self.turn_delay)
        return result

    def _fire(
        self: GameEngine,
        attacker: int,
        row: int,
        col: int,
    ) -> CommandResult[AttackReport]:
        state = self.state
        defender = state.player(opponent_of(attacker))
        if not defender.board.in_bounds(row, col):
            return self._reject(Rejection.OUT_OF_BOUNDS, "That cell is off the board.")

        report = resolve_attack(defender.board, defender.fleet, row, col)
        outcome = report.outcome
        if outcome is AttackOutcome.ALREADY_ATTACKED:
            return self._reject(
                Rejection.ALREADY_ATTACKED, "You already attacked this cell!"
            )
        logger.debug("Player %d fired at (%d, %d): %s", attacker, row, col, outcome.value)

        delay: float | None = None
        if outcome is AttackOutcome.MISS:
            state.current_player = opponent_of(attacker)
            message = f"Miss! {self._turn_prompt()}"
            if state.is_ai(state.current_player):
                delay = self.turn_delay
        elif outcome is AttackOutcome.HIT_AND_WIN:
            state.phase = Phase.GAME_OVER
            state.winner = attacker
            state.ai_move_pending = False
            message = f"{self._sunk_message(attacker, report)} Player {attacker} wins!"
            logger.info("Game over: player %d wins (epoch %d)", attacker, state.epoch)
        else:
            if outcome is AttackOutcome.HIT_AND_SUNK:
                message = self._sunk_message(attacker, report)
            else:
                message = "Hit!"
            if state.is_ai(attacker):
                delay = self.follow_up_delay
            elif state.mode is Mode.VS_HUMAN:
                message += f" Player {attacker} gets another turn!"

        result = self._ok(report, message)
        if delay is not None:
            self._schedule_ai_move(delay)
        return result

    def _schedule_ai_move(self: GameEngine, delay: float) -> None:
        epoch = self.state.epoch
        self.state.ai_move_pending = True
        logger.debug("AI move scheduled in %.2fs (epoch %d)", delay, epoch)
        self.scheduler.call_later(delay, lambda: self.run_ai_move(epoch))

    def _turn_prompt(self: GameEngine) -> str:
        player = self.state.current_player
        if self.state.is_ai(player):
            return "AI is thinking..."
        return f"Player {player}'s turn! Click on enemy waters to attack."

    def _sunk_message(self: GameEngine, attacker: int, report: AttackReport) -> str:
        if self.state.is_ai(attacker):
            return f"Hit! The AI sunk your {report.ship_name}!"
        return f"Hit! You sunk the {report.ship_name}!"

    def _ok(self: GameEngine, data: Any, message: str) -> CommandResult[Any]:
        self.message = message
        return CommandResult.ok(data, message)

    def _reject(self: GameEngine, rejection: Rejection, message: str) -> CommandResult[Any]:
        logger.debug("Rejected (%s): %s", rejection.value, message)
        self.message = message
        return CommandResult.fail(rejection, message)
