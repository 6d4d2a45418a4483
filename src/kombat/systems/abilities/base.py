from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, List, Protocol, Sequence

from esper import World

from kombat.components.ability import AbilitySpec
from kombat.components.board import Board
from kombat.components.character import Character
from kombat.components.piece import Piece
from kombat.systems.board_ops import Position, is_adjacent


@dataclass(slots=True)
class AbilityContext:
    """Execution context shared by ability resolvers."""

    world: World
    board: Board
    rng: random.Random
    character: Character
    spec: AbilitySpec
    targets: List[Position] = field(default_factory=list)

    @property
    def params(self) -> dict[str, Any]:
        return self.spec.params


@dataclass(slots=True)
class AbilityOutcome:
    """What an ability did to the board.

    Clearing abilities list the pieces to destroy; the cascade feeds them in
    as a pseudo-match. Non-clearing abilities mutate the board in place and
    report the touched cells.
    """
    destroyed: List[Piece] = field(default_factory=list)
    mutated: List[Position] = field(default_factory=list)

    @property
    def affected(self) -> List[Position]:
        if self.destroyed:
            return sorted((piece.row, piece.col) for piece in self.destroyed)
        return sorted(self.mutated)


class AbilityResolver(Protocol):
    """Interface implemented by concrete ability resolvers."""

    name: str
    targets: int

    def validate_targets(self, board: Board, targets: Sequence[Position]) -> bool:
        ...

    def resolve(self, ctx: AbilityContext) -> AbilityOutcome:
        ...


class BoardAbilityResolver:
    """Base class providing target validation and board geometry helpers."""

    name: str = ""
    targets: int = 0

    def validate_targets(self, board: Board, targets: Sequence[Position]) -> bool:
        if len(targets) > self.targets:
            return False
        for row, col in targets:
            if not board.in_bounds(row, col):
                return False
            if board.at(row, col).kind is None:
                return False
        if len(targets) == 2 and not is_adjacent(targets[0], targets[1]):
            return False
        return True

    @staticmethod
    def _clamp(value: int, low: int, high: int) -> int:
        return max(low, min(high, value))

    @staticmethod
    def _block(board: Board, top: int, left: int, height: int, width: int) -> List[Piece]:
        pieces: List[Piece] = []
        for row in range(top, top + height):
            for col in range(left, left + width):
                if board.in_bounds(row, col):
                    piece = board.at(row, col)
                    if piece.kind is not None:
                        pieces.append(piece)
        return pieces
