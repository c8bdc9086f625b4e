"""Piece value object, its FEN letter, board glyph and capture points."""

from __future__ import annotations

from dataclasses import dataclass

from skirmish.core.enums import Color, PieceType

# PieceType -> (FEN letter, white glyph, black glyph)
_NOTATION: dict[PieceType, tuple[str, str, str]] = {
    PieceType.PAWN: ("p", "♙", "♟"),
    PieceType.KNIGHT: ("n", "♘", "♞"),
    PieceType.BISHOP: ("b", "♗", "♝"),
    PieceType.ROOK: ("r", "♖", "♜"),
    PieceType.QUEEN: ("q", "♕", "♛"),
    PieceType.KING: ("k", "♔", "♚"),
}

_BY_LETTER: dict[str, PieceType] = {
    letter: ptype for ptype, (letter, _, _) in _NOTATION.items()
}

# Points awarded for capturing a piece of this type.
PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 0,
}


@dataclass(frozen=True, slots=True)
class Piece:
    """A coloured piece. Equal pieces compare and hash equal."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        letter = _NOTATION[self.piece_type][0]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Decode a FEN letter; uppercase is White. Raises :class:`ValueError`."""
        ptype = _BY_LETTER.get(char.lower()) if len(char) == 1 else None
        if ptype is None:
            raise ValueError(f"Invalid piece character: {char!r}")
        return cls(Color.WHITE if char.isupper() else Color.BLACK, ptype)

    @property
    def symbol(self) -> str:
        _, white, black = _NOTATION[self.piece_type]
        return white if self.color == Color.WHITE else black

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.piece_type]
