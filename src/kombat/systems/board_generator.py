from __future__ import annotations

import logging
import random
from typing import List, Sequence

from kombat.components.board import Board
from kombat.constants import GRID_COLS, GRID_ROWS, MAX_GENERATION_ATTEMPTS
from kombat.systems.board_ops import Position, new_piece
from kombat.systems.match import find_matches
from kombat.systems.move_advisor import has_possible_moves

logger = logging.getLogger(__name__)


class BoardGenerationError(RuntimeError):
    """Raised when no valid board was produced within the attempt bound."""


def create_initial_board(
    active_types: Sequence[str],
    *,
    rng: random.Random | None = None,
    rows: int = GRID_ROWS,
    cols: int = GRID_COLS,
    start_id: int = 0,
    max_attempts: int = MAX_GENERATION_ATTEMPTS,
) -> Board:
    """Fill a fresh board that contains no matches and at least one valid move.

    Each attempt draws every cell uniformly from the kinds that would not
    complete a triple with the two cells to its left or above, so the
    per-cell distribution is skewed away from those kinds rather than
    uniform over the whole pool. The result is then re-checked against the
    match detector and move advisor.
    """
    choices = list(dict.fromkeys(active_types))
    if not choices:
        raise ValueError("At least one active piece type is required")
    rng = rng or random.Random()
    next_id = start_id

    for attempt in range(1, max_attempts + 1):
        board = Board(rows=rows, cols=cols, next_id=next_id)
        for row in range(rows):
            for col in range(cols):
                available = list(choices)
                if col >= 2:
                    left1 = board.at(row, col - 1).kind
                    left2 = board.at(row, col - 2).kind
                    if left1 == left2 and left1 in available and len(available) > 1:
                        available = [t for t in available if t != left1]
                if row >= 2:
                    up1 = board.at(row - 1, col).kind
                    up2 = board.at(row - 2, col).kind
                    if up1 == up2 and up1 in available and len(available) > 1:
                        available = [t for t in available if t != up1]
                new_piece(board, row, col, rng.choice(available))
        next_id = board.next_id

        if find_matches(board):
            continue
        if not has_possible_moves(board):
            continue
        if attempt > 1:
            log = logger.warning if attempt > max_attempts // 2 else logger.debug
            log("Board generated after %d attempts", attempt)
        return board

    raise BoardGenerationError(
        f"Unable to generate a board without matches and with a valid move in {max_attempts} attempts"
    )


def apply_gravity(board: Board) -> List[Position]:
    """Compact non-empty pieces downward per column; return the cells that received a piece."""
    moved: List[Position] = []
    for col in range(board.cols):
        target_row = board.rows - 1
        for row in range(board.rows - 1, -1, -1):
            piece = board.at(row, col)
            if piece.kind is None:
                continue
            if target_row != row:
                board.place(piece, target_row, col)
                new_piece(board, row, col, None)
                moved.append((target_row, col))
            target_row -= 1
    return moved


def refill_board(board: Board, active_types: Sequence[str], *, rng: random.Random | None = None) -> List[Position]:
    """Fill empty cells with uniformly random kinds; no match/solvability guarantee."""
    choices = list(active_types)
    if not choices:
        raise ValueError("At least one active piece type is required")
    rng = rng or random.Random()
    spawned: List[Position] = []
    for row in range(board.rows):
        for col in range(board.cols):
            if board.at(row, col).kind is None:
                new_piece(board, row, col, rng.choice(choices))
                spawned.append((row, col))
    return spawned
