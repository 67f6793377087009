"""Automated opponent: uniform random fire at untried cells."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from src.broadside.core.errors import NoCandidateCellsError

if TYPE_CHECKING:
    from src.broadside.game.board import Board, Coord


class AiOpponent:
    """Picks targets using only what a player could see: the hit/miss marks."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()  # noqa: S311

    def get_legal_moves(self, board: Board) -> list[Coord]:
        """Return all untried coordinates."""
        return board.unattacked_cells()

    def choose_attack(self, board: Board) -> Coord:
        moves = self.get_legal_moves(board)
        if not moves:
            # A fleet is always sunk before its board runs out of cells.
            raise NoCandidateCellsError("Every cell on the target board was already attacked")
        return self.rng.choice(moves)
