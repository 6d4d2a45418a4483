from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from kombat.components.piece import Piece


@dataclass(slots=True)
class Board:
    """Fixed-size arena of piece slots addressed by ``row * cols + col``.

    Moving a piece means reassigning slot contents; ``place`` keeps the
    piece's own row/col in sync with its slot. ``next_id`` hands out
    monotonically increasing piece ids.
    """
    rows: int
    cols: int
    slots: List[Optional[Piece]] = field(default_factory=list)
    next_id: int = 0

    def __post_init__(self) -> None:
        if not self.slots:
            self.slots = [None] * (self.rows * self.cols)

    def index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def at(self, row: int, col: int) -> Piece:
        piece = self.slots[self.index(row, col)]
        if piece is None:
            raise KeyError(f"Empty slot at {(row, col)}")
        return piece

    def place(self, piece: Piece, row: int, col: int) -> None:
        piece.row = row
        piece.col = col
        self.slots[self.index(row, col)] = piece

    def allocate_id(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value

    def pieces(self) -> Iterator[Piece]:
        for piece in self.slots:
            if piece is not None:
                yield piece
