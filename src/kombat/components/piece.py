from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PieceState(Enum):
    """Presentation hint carried by a piece; the engine only sets IDLE and MATCHED."""
    IDLE = 'idle'
    MATCHED = 'matched'
    FROZEN = 'frozen'
    FATALITY = 'fatality'


class SpecialKind(Enum):
    NONE = 'none'
    ROW = 'row'
    COL = 'col'
    DRAGON = 'dragon'


@dataclass(slots=True)
class Piece:
    """A single board cell occupant.

    ``kind`` is the character type name, or None for an empty cell. Pieces are
    owned by the Board and mutated in place by the engine.
    """
    id: int
    kind: Optional[str]
    row: int
    col: int
    state: PieceState = PieceState.IDLE
    special: SpecialKind = SpecialKind.NONE

    @property
    def is_empty(self) -> bool:
        return self.kind is None

    @property
    def position(self) -> tuple[int, int]:
        return self.row, self.col


@dataclass(frozen=True, slots=True)
class PieceView:
    """Read-only copy of a piece handed to callers in snapshots."""
    id: int
    kind: Optional[str]
    row: int
    col: int
    state: str
    special: str
