"""Complete game state (board + metadata), snapshots and the move applier."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from skirmish.core.board import Board
from skirmish.core.enums import CastlingRights, Color, MoveFlag, PieceType
from skirmish.core.move import Move
from skirmish.core.piece import Piece
from skirmish.core.types import Square, file_of, make_square, rank_of


@dataclass(frozen=True, slots=True)
class PositionSnapshot:
    """Independent value copy of a :class:`Position`, used to roll back probes."""

    squares: tuple[Piece | None, ...]
    side_to_move: Color
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    fullmove_number: int


@dataclass(frozen=True, slots=True)
class AppliedMove:
    """What happened when a move was applied; handed to move listeners."""

    move: Move
    piece: Piece
    color: Color
    captured: Piece | None
    captured_sq: Square | None


MoveListener = Callable[[AppliedMove], None]


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Speculative moves are undone by taking a :meth:`snapshot` before
    :meth:`apply_move` and calling :meth:`restore` afterwards. Probes must
    not be nested: each one restores to its own snapshot only.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "move_listeners",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        # Notified after every non-simulated move.
        self.move_listeners: list[MoveListener] = []

    # ── Move applier ─────────────────────────────────────────────────────

    def apply_move(self, move: Move, *, simulate: bool = False) -> AppliedMove:
        """Apply a move already accepted by the legality checker.

        Board mutation is identical with ``simulate=True``; only the fullmove
        counter and listener notification are skipped, so a simulated move
        must always be rolled back with :meth:`restore`.
        """
        board = self.board
        piece = board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        captured_sq: Square | None = move.to_sq
        if move.flag == MoveFlag.EN_PASSANT:
            # The captured pawn sits beside the origin, not on the destination
            captured_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
        captured = board[captured_sq]
        if captured is None:
            captured_sq = None

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if captured_sq is not None:
            board[captured_sq] = None

        if move.flag == MoveFlag.CASTLE_KINGSIDE:
            self._slide_rook(rank_of(move.from_sq), 7, 5)
        elif move.flag == MoveFlag.CASTLE_QUEENSIDE:
            self._slide_rook(rank_of(move.from_sq), 0, 3)

        board[move.from_sq] = None
        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            board[move.to_sq] = Piece(piece.color, move.promotion)
        else:
            board[move.to_sq] = piece

        self._update_castling(piece, move.from_sq, captured, captured_sq)

        if move.flag == MoveFlag.DOUBLE_PAWN:
            self.en_passant = make_square(
                file_of(move.from_sq),
                (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
            )
        else:
            self.en_passant = None

        self.side_to_move = piece.color.opposite

        applied = AppliedMove(move, piece, piece.color, captured, captured_sq)
        if not simulate:
            if piece.color == Color.BLACK:
                self.fullmove_number += 1
            for listener in self.move_listeners:
                listener(applied)
        return applied

    def _slide_rook(self, rank: int, from_file: int, to_file: int) -> None:
        rook_from = make_square(from_file, rank)
        rook = self.board[rook_from]
        self.board[rook_from] = None
        self.board[make_square(to_file, rank)] = rook

    # ── Castling bookkeeping ─────────────────────────────────────────────

    _ROOK_CORNERS: dict[tuple[Color, Square], CastlingRights] = {
        (Color.WHITE, make_square(0, 0)): CastlingRights.WHITE_QUEENSIDE,
        (Color.WHITE, make_square(7, 0)): CastlingRights.WHITE_KINGSIDE,
        (Color.BLACK, make_square(0, 7)): CastlingRights.BLACK_QUEENSIDE,
        (Color.BLACK, make_square(7, 7)): CastlingRights.BLACK_KINGSIDE,
    }

    def _lost_rights(self, piece: Piece, sq: Square) -> CastlingRights:
        if piece.piece_type == PieceType.KING:
            if piece.color == Color.WHITE:
                return CastlingRights.WHITE_BOTH
            return CastlingRights.BLACK_BOTH
        if piece.piece_type == PieceType.ROOK:
            return self._ROOK_CORNERS.get((piece.color, sq), CastlingRights.NONE)
        return CastlingRights.NONE

    def _update_castling(
        self,
        piece: Piece,
        from_sq: Square,
        captured: Piece | None,
        captured_sq: Square | None,
    ) -> None:
        lost = self._lost_rights(piece, from_sq)
        if captured is not None and captured_sq is not None:
            lost |= self._lost_rights(captured, captured_sq)
        if lost:
            self.castling &= ~lost

    # ── Snapshots ────────────────────────────────────────────────────────

    def snapshot(self) -> PositionSnapshot:
        return PositionSnapshot(
            squares=self.board.squares(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def restore(self, snapshot: PositionSnapshot) -> None:
        """Return to the exact state captured by :meth:`snapshot`."""
        self.board.load(snapshot.squares)
        self.side_to_move = snapshot.side_to_move
        self.castling = snapshot.castling
        self.en_passant = snapshot.en_passant
        self.halfmove_clock = snapshot.halfmove_clock
        self.fullmove_number = snapshot.fullmove_number

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Deep copy without listeners."""
        return Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def is_playable(self) -> bool:
        """Exactly one king per side, the minimum for starting a match."""
        return (
            self.board.king_count(Color.WHITE) == 1
            and self.board.king_count(Color.BLACK) == 1
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        from skirmish.core.notation.fen import position_to_fen

        return f"Position({position_to_fen(self)!r})"
