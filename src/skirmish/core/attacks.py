"""Per-piece movement geometry and attack detection.

Attack queries only use pseudo-legal movement: they never ask whether the
attacking side's own king would be exposed. The legality checker calls
:func:`is_square_attacked` while validating castling, so it must not call
back into legality checking.
"""

from __future__ import annotations

from skirmish.core.board import Board
from skirmish.core.enums import Color, PieceType
from skirmish.core.types import Square, file_of, make_square, on_board, rank_of

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

SLIDER_DIRS: dict[PieceType, tuple[tuple[int, int], ...]] = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}


def pawn_direction(color: Color) -> int:
    """Rank step of a forward pawn move for *color*."""
    return 1 if color == Color.WHITE else -1


def pawn_home_rank(color: Color) -> int:
    return 1 if color == Color.WHITE else 6


def promotion_rank(color: Color) -> int:
    return 7 if color == Color.WHITE else 0


# -- Geometry shared with the legality checker -----------------------------


def is_knight_jump(from_sq: Square, to_sq: Square) -> bool:
    df = abs(file_of(to_sq) - file_of(from_sq))
    dr = abs(rank_of(to_sq) - rank_of(from_sq))
    return (df, dr) in ((1, 2), (2, 1))


def is_king_step(from_sq: Square, to_sq: Square) -> bool:
    df = abs(file_of(to_sq) - file_of(from_sq))
    dr = abs(rank_of(to_sq) - rank_of(from_sq))
    return max(df, dr) == 1


def step_towards(
    from_sq: Square,
    to_sq: Square,
    directions: tuple[tuple[int, int], ...],
) -> tuple[int, int] | None:
    """Unit step from *from_sq* to *to_sq* if they share one of *directions*."""
    df = file_of(to_sq) - file_of(from_sq)
    dr = rank_of(to_sq) - rank_of(from_sq)
    if df == 0 and dr == 0:
        return None
    if df != 0 and dr != 0 and abs(df) != abs(dr):
        return None
    step = ((df > 0) - (df < 0), (dr > 0) - (dr < 0))
    return step if step in directions else None


def path_is_clear(
    board: Board, from_sq: Square, to_sq: Square, step: tuple[int, int]
) -> bool:
    """Every square strictly between *from_sq* and *to_sq* is empty."""
    df, dr = step
    file = file_of(from_sq) + df
    rank = rank_of(from_sq) + dr
    while make_square(file, rank) != to_sq:
        if not board.is_empty(make_square(file, rank)):
            return False
        file += df
        rank += dr
    return True


# -- Attack oracle ---------------------------------------------------------


def _offset_targets(sq: Square, offsets: tuple[tuple[int, int], ...]) -> set[Square]:
    file, rank = file_of(sq), rank_of(sq)
    return {
        make_square(file + df, rank + dr)
        for df, dr in offsets
        if on_board(file + df, rank + dr)
    }


def _ray_targets(
    board: Board, sq: Square, directions: tuple[tuple[int, int], ...]
) -> set[Square]:
    targets: set[Square] = set()
    for df, dr in directions:
        file, rank = file_of(sq) + df, rank_of(sq) + dr
        while on_board(file, rank):
            to_sq = make_square(file, rank)
            targets.add(to_sq)
            if not board.is_empty(to_sq):
                break
            file += df
            rank += dr
    return targets


def attacked_squares(board: Board, sq: Square) -> set[Square]:
    """Squares the piece on *sq* attacks (empty set for an empty square).

    Pawns attack both forward diagonals whatever stands there; castling is
    never an attack.
    """
    piece = board[sq]
    if piece is None:
        return set()
    ptype = piece.piece_type
    if ptype == PieceType.PAWN:
        forward = pawn_direction(piece.color)
        return _offset_targets(sq, ((-1, forward), (1, forward)))
    if ptype == PieceType.KNIGHT:
        return _offset_targets(sq, KNIGHT_OFFSETS)
    if ptype == PieceType.KING:
        return _offset_targets(sq, KING_OFFSETS)
    return _ray_targets(board, sq, SLIDER_DIRS[ptype])


def attack_map(board: Board, by_color: Color) -> set[Square]:
    """Union of :func:`attacked_squares` over every piece of *by_color*."""
    attacked: set[Square] = set()
    for sq in board.occupied(by_color):
        attacked |= attacked_squares(board, sq)
    return attacked


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?"""
    return any(
        sq in attacked_squares(board, from_sq) for from_sq in board.occupied(by_color)
    )


def is_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked? ``False`` if that king is missing."""
    king_sq = board.find_king(color)
    if king_sq is None:
        return False
    return is_square_attacked(board, king_sq, color.opposite)
