from __future__ import annotations

from typing import Tuple

from kombat.components.board import Board
from kombat.components.piece import Piece
from kombat.systems.board_ops import copy_board, swap_pieces
from kombat.systems.match import find_matches


def find_a_possible_move(board: Board) -> Tuple[Piece, Piece] | None:
    """Return the first adjacent pair whose swap creates a match.

    Candidates are tried in row-major order, right neighbour before down
    neighbour, on a scratch copy. The returned pieces belong to ``board``.
    """
    scratch = copy_board(board)
    for r in range(board.rows):
        for c in range(board.cols):
            for dr, dc in ((0, 1), (1, 0)):
                nr, nc = r + dr, c + dc
                if not board.in_bounds(nr, nc):
                    continue
                swap_pieces(scratch, (r, c), (nr, nc))
                found = bool(find_matches(scratch))
                swap_pieces(scratch, (r, c), (nr, nc))
                if found:
                    return board.at(r, c), board.at(nr, nc)
    return None


def has_possible_moves(board: Board) -> bool:
    return find_a_possible_move(board) is not None
