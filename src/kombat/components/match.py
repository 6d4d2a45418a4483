from dataclasses import dataclass
from enum import Enum
from typing import List

from kombat.components.piece import Piece


class MatchOrientation(Enum):
    ROW = 'row'
    COL = 'col'
    # Synthesized by clearing abilities; never creates specials.
    ABILITY = 'ability'


@dataclass(slots=True)
class Match:
    pieces: List[Piece]
    orientation: MatchOrientation

    @property
    def length(self) -> int:
        return len(self.pieces)

    def positions(self) -> list[tuple[int, int]]:
        return [(piece.row, piece.col) for piece in self.pieces]
