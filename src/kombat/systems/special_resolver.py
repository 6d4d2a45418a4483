from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Sequence, Set

from kombat.components.board import Board
from kombat.components.match import Match, MatchOrientation
from kombat.components.piece import Piece, SpecialKind
from kombat.constants import SPECIAL_ACTIVATION_DAMAGE
from kombat.systems.board_ops import Position, kinds_present


@dataclass(slots=True)
class ActivatedSpecial:
    position: Position
    kind: SpecialKind
    # Piece kind chosen by a dragon activation.
    target_kind: Optional[str] = None

    def as_payload(self) -> dict:
        return {
            "position": self.position,
            "special": self.kind.value,
            "target_kind": self.target_kind,
        }


@dataclass(slots=True)
class SpecialResolution:
    """Outcome of expanding one iteration's matches through chained specials."""
    cleared: List[Piece] = field(default_factory=list)
    special_damage: int = 0
    activated: List[ActivatedSpecial] = field(default_factory=list)
    created_piece: Optional[Piece] = None
    created_kind: SpecialKind = SpecialKind.NONE

    def created_payload(self) -> dict | None:
        if self.created_piece is None:
            return None
        return {
            "position": (self.created_piece.row, self.created_piece.col),
            "special": self.created_kind.value,
            "kind": self.created_piece.kind,
        }


def special_for_match(match: Match) -> SpecialKind:
    """Map a freshly formed match to the special it awards."""
    if match.orientation is MatchOrientation.ABILITY:
        return SpecialKind.NONE
    if match.length >= 5:
        return SpecialKind.DRAGON
    if match.length == 4:
        return SpecialKind.ROW if match.orientation is MatchOrientation.ROW else SpecialKind.COL
    return SpecialKind.NONE


def resolve_specials(
    board: Board,
    matches: Sequence[Match],
    swap_location: Position | None,
    *,
    rng: random.Random,
    allow_creation: bool = True,
) -> SpecialResolution:
    """Compute the transitive clear set of ``matches`` and the special to create.

    Uses an explicit FIFO worklist with a visited set of slot indices so that
    dense chains of dragons never recurse.
    """
    result = SpecialResolution()
    worklist: Deque[Piece] = deque()
    queued: Set[int] = set()

    def enqueue(piece: Piece) -> None:
        if piece.kind is None:
            return
        index = board.index(piece.row, piece.col)
        if index in queued:
            return
        queued.add(index)
        worklist.append(piece)

    for match in matches:
        for piece in match.pieces:
            enqueue(piece)

    activated_ids: Set[int] = set()
    while worklist:
        piece = worklist.popleft()
        result.cleared.append(piece)
        if piece.special is SpecialKind.NONE or piece.id in activated_ids:
            continue
        activated_ids.add(piece.id)
        result.special_damage += SPECIAL_ACTIVATION_DAMAGE
        activation = ActivatedSpecial(position=(piece.row, piece.col), kind=piece.special)
        if piece.special is SpecialKind.ROW:
            for col in range(board.cols):
                enqueue(board.at(piece.row, col))
        elif piece.special is SpecialKind.COL:
            for row in range(board.rows):
                enqueue(board.at(row, piece.col))
        elif piece.special is SpecialKind.DRAGON:
            present = kinds_present(board)
            if present:
                target_kind = rng.choice(present)
                activation.target_kind = target_kind
                for other in board.pieces():
                    if other.kind == target_kind:
                        enqueue(other)
        result.activated.append(activation)

    if allow_creation:
        _choose_special(board, matches, swap_location, activated_ids, result)
    return result


def _choose_special(
    board: Board,
    matches: Sequence[Match],
    swap_location: Position | None,
    activated_ids: Set[int],
    result: SpecialResolution,
) -> None:
    candidates = [
        match for match in matches
        if not any(piece.id in activated_ids for piece in match.pieces)
    ]
    if swap_location is not None:
        for match in candidates:
            if swap_location in match.positions():
                kind = special_for_match(match)
                if kind is not SpecialKind.NONE:
                    result.created_piece = board.at(*swap_location)
                    result.created_kind = kind
                    return
    for match in candidates:
        kind = special_for_match(match)
        if kind is not SpecialKind.NONE:
            result.created_piece = match.pieces[0]
            result.created_kind = kind
            return
