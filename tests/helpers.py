from __future__ import annotations

import random
from typing import Sequence

from kombat.components.board import Board
from kombat.events.bus import EventBus
from kombat.systems.board_ops import get_board, new_piece, restore_board

# Single-letter shorthand for board layouts; '.' is an empty cell.
LETTER_KINDS = {
    'a': 'kano',
    'b': 'reptile',
    'c': 'raiden',
    'd': 'subzero',
    'e': 'scorpion',
    'f': 'liukang',
    '.': None,
}


def background_rows(rows: int = 8, cols: int = 8) -> list[str]:
    """Match-free filler: rows never repeat horizontally, columns never vertically."""
    letters = 'acb'
    return [''.join(letters[(r + 2 * c) % 3] for c in range(cols)) for r in range(rows)]


def stalemate_rows(rows: int = 8, cols: int = 8) -> list[str]:
    """Diagonal stripes of three kinds: no matches and no match-making swap."""
    letters = 'abc'
    return [''.join(letters[(r + c) % 3] for c in range(cols)) for r in range(rows)]


def with_rows(overrides: dict[int, str], rows: int = 8, cols: int = 8) -> list[str]:
    layout = background_rows(rows, cols)
    for index, row in overrides.items():
        layout[index] = row
    return layout


def board_from_rows(layout: Sequence[str], *, start_id: int = 0) -> Board:
    board = Board(rows=len(layout), cols=len(layout[0]), next_id=start_id)
    for r, line in enumerate(layout):
        for c, letter in enumerate(line):
            new_piece(board, r, c, LETTER_KINDS[letter])
    return board


def load_layout(world, layout: Sequence[str]) -> Board:
    """Replace the world's board contents with ``layout``."""
    board = get_board(world)
    restore_board(board, board_from_rows(layout, start_id=board.next_id))
    return board


def kinds(board: Board) -> list[str]:
    letters = {kind: letter for letter, kind in LETTER_KINDS.items()}
    return [''.join(letters[board.at(r, c).kind] for c in range(board.cols)) for r in range(board.rows)]


def record(bus: EventBus, *names: str) -> dict[str, list[dict]]:
    """Subscribe to events and collect their payloads by name."""
    received: dict[str, list[dict]] = {name: [] for name in names}
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: received[_name].append(payload))
    return received


class FixedChoiceRandom(random.Random):
    """Random whose ``choice`` returns a preset value when it is available."""

    def __init__(self, preferred, seed: int = 0):
        super().__init__(seed)
        self.preferred = preferred

    def choice(self, seq):
        if self.preferred in seq:
            return self.preferred
        return super().choice(seq)


# Length-4 row of subzero pieces formed by swapping (1,3) down into (2,3).
FOUR_IN_ROW = with_rows({1: 'bacdacba', 2: 'cbdeddcb'})
FOUR_IN_ROW_SWAP = ((1, 3), (2, 3))

# Three subzero pieces in row 5; gravity then lines up three scorpion pieces.
COMBO_CHAIN = with_rows({4: 'beebacba', 5: 'ddfebacb', 6: 'acdacbac'})
COMBO_CHAIN_SWAP = ((6, 2), (5, 2))

# Five subzero pieces in row 2 once (1,2) is swapped down into the gap.
FIVE_IN_ROW = with_rows({1: 'badbacba', 2: 'ddeddacb'})
FIVE_IN_ROW_SWAP = ((1, 2), (2, 2))
