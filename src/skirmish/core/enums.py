"""Core enumerations and flags for the rules engine."""

from __future__ import annotations

from enum import Enum, IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class MoveFlag(IntEnum):
    """Special move classification."""

    NORMAL = 0
    DOUBLE_PAWN = 1
    EN_PASSANT = 2
    CASTLE_KINGSIDE = 3
    CASTLE_QUEENSIDE = 4
    PROMOTION = 5


class CastlingRights(IntFlag):
    """Bitmask for castling availability."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH


class GameResult(IntEnum):
    """Outcome of a position as far as the rules are concerned."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3


class IllegalReason(Enum):
    """Why the legality checker rejected a move.

    The value is the human-readable message shown to the player.
    """

    NO_PIECE = "No piece"
    SAME_SQUARE = "Same square"
    OWN_PIECE_ON_TARGET = "Own piece on target"
    NOT_YOUR_TURN = "Not your turn"
    BAD_PAWN_MOVE = "Bad pawn move"
    PAWN_BLOCKED = "Pawn blocked"
    NO_EN_PASSANT = "No en passant available"
    BAD_KNIGHT_MOVE = "Bad knight move"
    BAD_BISHOP_MOVE = "Bad bishop move"
    BAD_ROOK_MOVE = "Bad rook move"
    BAD_QUEEN_MOVE = "Bad queen move"
    BAD_KING_MOVE = "Bad king move"
    PATH_BLOCKED = "Path blocked"
    KING_NOT_ON_START = "King not on start square"
    NO_CASTLING_RIGHTS = "No castling rights"
    NO_CASTLING_ROOK = "No rook to castle with"
    CASTLE_PATH_BLOCKED = "Castling path blocked"
    CASTLE_OUT_OF_CHECK = "Cannot castle out of check"
    CASTLE_THROUGH_CHECK = "Cannot castle through check"
    CASTLE_INTO_CHECK = "Cannot castle into check"
    LEAVES_KING_IN_CHECK = "Leaves king in check"

    def __str__(self) -> str:
        return self.value
