"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Sequence

from skirmish.core.enums import Color, PieceType
from skirmish.core.piece import Piece
from skirmish.core.types import Square, make_square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 64-square board; each square holds one :class:`Piece` or ``None``."""

    __slots__ = ("_squares",)

    def __init__(self, squares: list[Piece | None] | None = None) -> None:
        if squares is None:
            squares = [None] * 64
        elif len(squares) != 64:
            raise ValueError(f"Board needs 64 squares, got {len(squares)}")
        self._squares: list[Piece | None] = list(squares)

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self._squares[sq] = piece

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    def squares(self) -> tuple[Piece | None, ...]:
        """Immutable view of all 64 squares, a1 first."""
        return tuple(self._squares)

    # -- Query helpers ------------------------------------------------------

    def occupied(self, color: Color) -> list[Square]:
        """All squares holding a piece of *color*."""
        return [
            sq
            for sq, piece in enumerate(self._squares)
            if piece is not None and piece.color == color
        ]

    def find_king(self, color: Color) -> Square | None:
        """Square of *color*'s king, or ``None`` if it is not on the board."""
        for sq, piece in enumerate(self._squares):
            if (
                piece is not None
                and piece.color == color
                and piece.piece_type == PieceType.KING
            ):
                return sq
        return None

    def king_square(self, color: Color) -> Square:
        """Return the king square for *color*."""
        sq = self.find_king(color)
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    def king_count(self, color: Color) -> int:
        king = Piece(color, PieceType.KING)
        return sum(1 for piece in self._squares if piece == king)

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        return Board(self._squares)

    def clear(self) -> None:
        self._squares = [None] * 64

    def load(self, squares: Sequence[Piece | None]) -> None:
        """Replace every square in place with *squares* (a1 first)."""
        if len(squares) != 64:
            raise ValueError(f"Board needs 64 squares, got {len(squares)}")
        self._squares = list(squares)

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f in range(8):
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
        for f, pt in enumerate(_BACK_RANK):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    __hash__ = None  # type: ignore[assignment]

    def render(self, *, unicode: bool = False, flipped: bool = False) -> str:
        """Text diagram, white at the bottom unless *flipped*."""
        ranks = range(8) if flipped else range(7, -1, -1)
        files = range(7, -1, -1) if flipped else range(8)
        rows: list[str] = []
        for rank in ranks:
            row = []
            for file in files:
                p = self[make_square(file, rank)]
                if p is None:
                    row.append(".")
                else:
                    row.append(p.symbol if unicode else str(p))
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  " + " ".join("abcdefgh"[f] for f in files))
        return "\n".join(rows)

    def __repr__(self) -> str:
        return self.render()
