import random

import pytest

from kombat.constants import PIECE_TYPES
from kombat.systems.board_generator import (
    BoardGenerationError,
    apply_gravity,
    create_initial_board,
    refill_board,
)
from kombat.systems.match import find_matches
from kombat.systems.move_advisor import has_possible_moves

from tests.helpers import board_from_rows, kinds, with_rows


@pytest.mark.parametrize("seed", [0, 1, 7, 42, 1234])
def test_initial_board_is_settled_and_solvable(seed):
    board = create_initial_board(PIECE_TYPES, rng=random.Random(seed))
    assert find_matches(board) == []
    assert has_possible_moves(board)
    assert all(piece.kind in PIECE_TYPES for piece in board.pieces())


def test_initial_board_ids_are_sequential_from_start_id():
    board = create_initial_board(PIECE_TYPES, rng=random.Random(3), start_id=100)
    ids = sorted(piece.id for piece in board.pieces())
    assert len(set(ids)) == 64
    assert ids[0] >= 100
    assert board.next_id > ids[-1]


def test_same_seed_gives_same_board():
    first = create_initial_board(PIECE_TYPES, rng=random.Random(99))
    second = create_initial_board(PIECE_TYPES, rng=random.Random(99))
    assert [p.kind for p in first.pieces()] == [p.kind for p in second.pieces()]


def test_three_kind_pool_still_generates():
    pool = ["kano", "reptile", "raiden"]
    board = create_initial_board(pool, rng=random.Random(5))
    assert {piece.kind for piece in board.pieces()} <= set(pool)
    assert find_matches(board) == []


def test_single_kind_pool_exhausts_attempts():
    with pytest.raises(BoardGenerationError):
        create_initial_board(["kano"], rng=random.Random(0), max_attempts=5)


def test_empty_pool_is_rejected():
    with pytest.raises(ValueError):
        create_initial_board([], rng=random.Random(0))


def test_generation_error_is_runtime_error():
    assert issubclass(BoardGenerationError, RuntimeError)


def test_gravity_compacts_columns_downward():
    layout = with_rows({0: 'd.......', 1: '.e......', 5: '........'})
    board = board_from_rows(layout)
    dropped_id = board.at(0, 0).id

    moved = apply_gravity(board)

    column = [board.at(r, 0).kind for r in range(8)]
    assert column[:2] == [None, None]
    assert column[2:] == ['subzero', 'reptile', 'kano', 'raiden', 'kano', 'raiden']
    assert board.at(2, 0).id == dropped_id
    assert board.at(1, 1).kind is None and board.at(2, 1).kind == 'scorpion'
    assert {(2, 0), (3, 0), (4, 0), (5, 0)} <= set(moved)
    assert (7, 0) not in moved


def test_gravity_preserves_column_order():
    layout = with_rows({3: '.acbacba'})
    board = board_from_rows(layout)
    above = [board.at(r, 0).id for r in range(3)]

    apply_gravity(board)

    assert [board.at(r, 0).id for r in range(1, 4)] == above
    assert board.at(0, 0).kind is None


def test_vacated_cells_get_fresh_ids():
    board = board_from_rows(with_rows({7: '.acbacba'}))
    before = {piece.id for piece in board.pieces()}

    apply_gravity(board)

    top = board.at(0, 0)
    assert top.kind is None
    assert top.id not in before


def test_refill_only_touches_empty_cells():
    board = board_from_rows(with_rows({0: '..bacbac'}))
    before = kinds(board)

    spawned = refill_board(board, ["kano", "reptile"], rng=random.Random(1))

    assert spawned == [(0, 0), (0, 1)]
    after = kinds(board)
    assert after[1:] == before[1:]
    assert after[0][2:] == before[0][2:]
    assert all(board.at(0, c).kind in ("kano", "reptile") for c in range(2))
