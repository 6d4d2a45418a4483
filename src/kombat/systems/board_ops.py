from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from esper import World

from kombat.components.board import Board
from kombat.components.piece import Piece, PieceState, PieceView, SpecialKind

Position = Tuple[int, int]


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def new_piece(
    board: Board,
    row: int,
    col: int,
    kind: Optional[str],
    special: SpecialKind = SpecialKind.NONE,
) -> Piece:
    """Create a piece with a fresh id and place it at (row, col)."""
    piece = Piece(id=board.allocate_id(), kind=kind, row=row, col=col, special=special)
    board.place(piece, row, col)
    return piece


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)


def swap_pieces(board: Board, a: Position, b: Position) -> None:
    piece_a = board.at(*a)
    piece_b = board.at(*b)
    board.place(piece_a, *b)
    board.place(piece_b, *a)


def copy_board(board: Board) -> Board:
    """Return an independent copy; pieces keep their ids."""
    clone = Board(rows=board.rows, cols=board.cols, next_id=board.next_id)
    for piece in board.pieces():
        clone.place(replace(piece), piece.row, piece.col)
    return clone


def restore_board(board: Board, source: Board) -> None:
    """Overwrite ``board`` slot-for-slot with copies of ``source`` pieces."""
    if (board.rows, board.cols) != (source.rows, source.cols):
        raise ValueError("Cannot restore a board of different dimensions")
    for piece in source.pieces():
        board.place(replace(piece), piece.row, piece.col)
    board.next_id = max(board.next_id, source.next_id)


def clear_pieces(board: Board, pieces: Iterable[Piece], *, keep: Optional[Piece] = None) -> List[Position]:
    """Replace each piece with a fresh empty piece, except ``keep``."""
    cleared: List[Position] = []
    for piece in pieces:
        if keep is not None and piece is keep:
            continue
        current = board.slots[board.index(piece.row, piece.col)]
        if current is not piece:
            continue
        new_piece(board, piece.row, piece.col, None)
        cleared.append((piece.row, piece.col))
    return sorted(cleared)


def mark_pieces(pieces: Iterable[Piece], state: PieceState) -> None:
    for piece in pieces:
        piece.state = state


def kinds_present(board: Board) -> List[str]:
    return sorted({piece.kind for piece in board.pieces() if piece.kind is not None})


def snapshot_board(board: Board) -> Tuple[PieceView, ...]:
    return tuple(
        PieceView(
            id=piece.id,
            kind=piece.kind,
            row=piece.row,
            col=piece.col,
            state=piece.state.value,
            special=piece.special.value,
        )
        for piece in board.pieces()
    )


def find_piece_by_id(board: Board, piece_id: int) -> Piece | None:
    for piece in board.pieces():
        if piece.id == piece_id:
            return piece
    return None


def positions_of(pieces: Sequence[Piece]) -> List[Position]:
    return [(piece.row, piece.col) for piece in pieces]
