"""Move legality checker.

Each candidate goes through cheap guards, a per-piece movement check and
finally a simulate-then-verify step: the move is applied to the position,
the mover's king is tested for attack, and the position is restored from a
snapshot. That last step handles pins, discovered checks and escaping check
without any dedicated bookkeeping.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from skirmish.core.attacks import (
    SLIDER_DIRS,
    is_in_check,
    is_king_step,
    is_knight_jump,
    is_square_attacked,
    path_is_clear,
    pawn_direction,
    pawn_home_rank,
    promotion_rank,
    step_towards,
)
from skirmish.core.enums import (
    CastlingRights,
    Color,
    IllegalReason,
    MoveFlag,
    PieceType,
)
from skirmish.core.errors import IllegalMoveError
from skirmish.core.move import PROMO_TYPES, Move
from skirmish.core.piece import Piece
from skirmish.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from skirmish.core.position import Position

PromotionChoice = PieceType | str | None

_PROMOTABLE: frozenset[PieceType] = frozenset(PROMO_TYPES.values())

_BAD_SLIDER_MOVE: dict[PieceType, IllegalReason] = {
    PieceType.BISHOP: IllegalReason.BAD_BISHOP_MOVE,
    PieceType.ROOK: IllegalReason.BAD_ROOK_MOVE,
    PieceType.QUEEN: IllegalReason.BAD_QUEEN_MOVE,
}

# (kingside, queenside) rights per color
_CASTLING_RIGHTS: dict[Color, tuple[CastlingRights, CastlingRights]] = {
    Color.WHITE: (CastlingRights.WHITE_KINGSIDE, CastlingRights.WHITE_QUEENSIDE),
    Color.BLACK: (CastlingRights.BLACK_KINGSIDE, CastlingRights.BLACK_QUEENSIDE),
}


def resolve_promotion(choice: PromotionChoice) -> PieceType:
    """Map a caller's promotion choice to a piece type, defaulting to a queen."""
    if isinstance(choice, PieceType):
        return choice if choice in _PROMOTABLE else PieceType.QUEEN
    if isinstance(choice, str):
        return PROMO_TYPES.get(choice.lower(), PieceType.QUEEN)
    return PieceType.QUEEN


class MoveValidator:
    """Decides whether a proposed move is legal in a :class:`Position`.

    The position is mutated while a candidate is simulated but is always
    restored before a verdict is returned. Calls must not interleave
    against the same position.
    """

    __slots__ = ("_pos",)

    def __init__(self, position: Position) -> None:
        self._pos = position

    # -- Public API ---------------------------------------------------------

    def check(
        self,
        from_sq: Square,
        to_sq: Square,
        piece: Piece | None = None,
        promotion: PromotionChoice = None,
    ) -> Move | IllegalReason:
        """Return the fully classified :class:`Move`, or why it is illegal.

        *piece* defaults to whatever stands on *from_sq*; if given, it must
        match the board.
        """
        board = self._pos.board
        on_square = board[from_sq]
        if on_square is None or (piece is not None and piece != on_square):
            return IllegalReason.NO_PIECE
        piece = on_square

        if from_sq == to_sq:
            return IllegalReason.SAME_SQUARE
        target = board[to_sq]
        if target is not None and target.color == piece.color:
            return IllegalReason.OWN_PIECE_ON_TARGET
        if piece.color != self._pos.side_to_move:
            return IllegalReason.NOT_YOUR_TURN

        ptype = piece.piece_type
        result: Move | IllegalReason
        if ptype == PieceType.PAWN:
            result = self._check_pawn(from_sq, to_sq, piece.color, target, promotion)
        elif ptype == PieceType.KNIGHT:
            if is_knight_jump(from_sq, to_sq):
                result = Move(from_sq, to_sq)
            else:
                result = IllegalReason.BAD_KNIGHT_MOVE
        elif ptype == PieceType.KING:
            result = self._check_king(from_sq, to_sq, piece.color)
        else:
            result = self._check_slider(from_sq, to_sq, ptype)

        if isinstance(result, IllegalReason):
            return result
        if self._leaves_king_in_check(result, piece.color):
            return IllegalReason.LEAVES_KING_IN_CHECK
        return result

    def validate(
        self,
        from_sq: Square,
        to_sq: Square,
        piece: Piece | None = None,
        promotion: PromotionChoice = None,
    ) -> Move:
        """Like :meth:`check` but raises :class:`IllegalMoveError` on rejection."""
        result = self.check(from_sq, to_sq, piece, promotion)
        if isinstance(result, IllegalReason):
            raise IllegalMoveError(result)
        return result

    def is_legal(
        self,
        from_sq: Square,
        to_sq: Square,
        piece: Piece | None = None,
        promotion: PromotionChoice = None,
    ) -> bool:
        return isinstance(self.check(from_sq, to_sq, piece, promotion), Move)

    # -- Piece-specific checks (private) -----------------------------------

    def _check_pawn(
        self,
        from_sq: Square,
        to_sq: Square,
        color: Color,
        target: Piece | None,
        promotion: PromotionChoice,
    ) -> Move | IllegalReason:
        board = self._pos.board
        forward = pawn_direction(color)
        df = file_of(to_sq) - file_of(from_sq)
        dr = rank_of(to_sq) - rank_of(from_sq)
        flag = MoveFlag.NORMAL

        if df == 0:
            if dr == forward:
                if target is not None:
                    return IllegalReason.PAWN_BLOCKED
            elif dr == 2 * forward and rank_of(from_sq) == pawn_home_rank(color):
                skipped = make_square(file_of(from_sq), rank_of(from_sq) + forward)
                if target is not None or not board.is_empty(skipped):
                    return IllegalReason.PAWN_BLOCKED
                flag = MoveFlag.DOUBLE_PAWN
            else:
                return IllegalReason.BAD_PAWN_MOVE
        elif abs(df) == 1 and dr == forward:
            if target is None:
                if to_sq != self._pos.en_passant:
                    return IllegalReason.NO_EN_PASSANT
                victim = board[make_square(file_of(to_sq), rank_of(from_sq))]
                if victim != Piece(color.opposite, PieceType.PAWN):
                    return IllegalReason.NO_EN_PASSANT
                flag = MoveFlag.EN_PASSANT
        else:
            return IllegalReason.BAD_PAWN_MOVE

        if rank_of(to_sq) == promotion_rank(color):
            return Move(
                from_sq, to_sq, MoveFlag.PROMOTION, resolve_promotion(promotion)
            )
        return Move(from_sq, to_sq, flag)

    def _check_slider(
        self, from_sq: Square, to_sq: Square, ptype: PieceType
    ) -> Move | IllegalReason:
        step = step_towards(from_sq, to_sq, SLIDER_DIRS[ptype])
        if step is None:
            return _BAD_SLIDER_MOVE[ptype]
        if not path_is_clear(self._pos.board, from_sq, to_sq, step):
            return IllegalReason.PATH_BLOCKED
        return Move(from_sq, to_sq)

    def _check_king(
        self, from_sq: Square, to_sq: Square, color: Color
    ) -> Move | IllegalReason:
        df = file_of(to_sq) - file_of(from_sq)
        if rank_of(to_sq) == rank_of(from_sq) and abs(df) == 2:
            return self._check_castling(from_sq, to_sq, color)
        if not is_king_step(from_sq, to_sq):
            return IllegalReason.BAD_KING_MOVE
        return Move(from_sq, to_sq)

    def _check_castling(
        self, from_sq: Square, to_sq: Square, color: Color
    ) -> Move | IllegalReason:
        pos = self._pos
        board = pos.board
        home_rank = 0 if color == Color.WHITE else 7
        if from_sq != make_square(4, home_rank):
            return IllegalReason.KING_NOT_ON_START

        kingside = file_of(to_sq) == 6
        kingside_right, queenside_right = _CASTLING_RIGHTS[color]
        if not pos.castling & (kingside_right if kingside else queenside_right):
            return IllegalReason.NO_CASTLING_RIGHTS

        rook_file = 7 if kingside else 0
        if board[make_square(rook_file, home_rank)] != Piece(color, PieceType.ROOK):
            return IllegalReason.NO_CASTLING_ROOK

        step = 1 if kingside else -1
        for file in range(file_of(from_sq) + step, rook_file, step):
            if not board.is_empty(make_square(file, home_rank)):
                return IllegalReason.CASTLE_PATH_BLOCKED

        opponent = color.opposite
        if is_square_attacked(board, from_sq, opponent):
            return IllegalReason.CASTLE_OUT_OF_CHECK
        if is_square_attacked(board, from_sq + step, opponent):
            return IllegalReason.CASTLE_THROUGH_CHECK
        if is_square_attacked(board, to_sq, opponent):
            return IllegalReason.CASTLE_INTO_CHECK

        flag = MoveFlag.CASTLE_KINGSIDE if kingside else MoveFlag.CASTLE_QUEENSIDE
        return Move(from_sq, to_sq, flag)

    # -- King safety --------------------------------------------------------

    def _leaves_king_in_check(self, move: Move, color: Color) -> bool:
        pos = self._pos
        snapshot = pos.snapshot()
        try:
            pos.apply_move(move, simulate=True)
            return is_in_check(pos.board, color)
        finally:
            pos.restore(snapshot)
