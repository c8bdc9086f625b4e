"""Free-form board setup before a match: drop, drag and remove pieces."""

from __future__ import annotations

from skirmish.core.board import Board
from skirmish.core.enums import CastlingRights, Color
from skirmish.core.notation.fen import (
    STARTING_FEN,
    is_valid_fen,
    position_from_fen,
    position_to_fen,
)
from skirmish.core.piece import Piece
from skirmish.core.position import Position
from skirmish.core.types import Square


class BoardEditor:
    """Edits a :class:`Position` without any legality or reachability checks.

    Only :meth:`can_start` applies a rule: a match needs exactly one king
    per side.
    """

    __slots__ = ("_position",)

    def __init__(self, fen: str | None = None) -> None:
        self._position = position_from_fen(fen or STARTING_FEN)

    @property
    def position(self) -> Position:
        return self._position

    @property
    def board(self) -> Board:
        return self._position.board

    # ── FEN ──────────────────────────────────────────────────────────────

    def load_fen(self, fen: str) -> None:
        """Replace the position; raises :class:`FenError` and keeps the old one."""
        self._position = position_from_fen(fen)

    def to_fen(self) -> str:
        return position_to_fen(self._position)

    @staticmethod
    def validate_fen(fen: str) -> bool:
        return is_valid_fen(fen)

    # ── Editing ──────────────────────────────────────────────────────────

    def place(self, sq: Square, piece: Piece) -> None:
        """Drop a spare *piece* on *sq*, replacing whatever stood there."""
        self.board[sq] = piece

    def move_piece(self, from_sq: Square, to_sq: Square) -> None:
        """Drag the piece on *from_sq* to *to_sq*, overwriting the target."""
        if from_sq == to_sq:
            return
        piece = self.board[from_sq]
        if piece is None:
            return
        self.board[from_sq] = None
        self.board[to_sq] = piece

    def remove(self, sq: Square) -> Piece | None:
        piece = self.board[sq]
        self.board[sq] = None
        return piece

    def clear(self) -> None:
        """Empty board, White to move, no castling or en passant."""
        self._position = Position(
            Board(), Color.WHITE, CastlingRights.NONE, None, 0, 1
        )

    def set_start_position(self) -> None:
        self._position = position_from_fen(STARTING_FEN)

    def set_side_to_move(self, color: Color) -> None:
        self._position.side_to_move = color

    def can_start(self) -> bool:
        return self._position.is_playable()
