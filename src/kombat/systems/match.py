from typing import List

from kombat.components.board import Board
from kombat.components.match import Match, MatchOrientation
from kombat.constants import MATCH_THRESHOLD


def find_matches(board: Board) -> List[Match]:
    """Detect every horizontal and vertical run of >= 3 identical non-empty pieces.

    Rows are scanned left to right, then columns top to bottom. Runs never
    overlap within one axis; a piece may belong to both a row and a column
    match, and callers merge those by set union.
    """
    matches: List[Match] = []
    # Horizontal runs
    for r in range(board.rows):
        c = 0
        while c <= board.cols - MATCH_THRESHOLD:
            piece = board.at(r, c)
            if piece.kind is None:
                c += 1
                continue
            run = [piece]
            k = c + 1
            while k < board.cols and board.at(r, k).kind == piece.kind:
                run.append(board.at(r, k))
                k += 1
            if len(run) >= MATCH_THRESHOLD:
                matches.append(Match(pieces=run, orientation=MatchOrientation.ROW))
            c = k
    # Vertical runs
    for c in range(board.cols):
        r = 0
        while r <= board.rows - MATCH_THRESHOLD:
            piece = board.at(r, c)
            if piece.kind is None:
                r += 1
                continue
            run = [piece]
            k = r + 1
            while k < board.rows and board.at(k, c).kind == piece.kind:
                run.append(board.at(k, c))
                k += 1
            if len(run) >= MATCH_THRESHOLD:
                matches.append(Match(pieces=run, orientation=MatchOrientation.COL))
            r = k
    return matches
