"""Core domain layer: board, FEN, attack map, legality and move enumeration.

Quick start::

    from skirmish.core import MoveGenerator, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    for move in MoveGenerator(pos).generate_legal_moves():
        print(move)
"""

from skirmish.core.board import Board
from skirmish.core.enums import (
    CastlingRights,
    Color,
    GameResult,
    IllegalReason,
    MoveFlag,
    PieceType,
)
from skirmish.core.errors import (
    ChessError,
    EngineError,
    FenError,
    IllegalEngineMoveError,
    IllegalMoveError,
)
from skirmish.core.legality import MoveValidator
from skirmish.core.move import Move
from skirmish.core.move_generator import MoveGenerator
from skirmish.core.notation import (
    STARTING_FEN,
    is_valid_fen,
    move_from_uci,
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from skirmish.core.piece import Piece
from skirmish.core.position import AppliedMove, Position, PositionSnapshot
from skirmish.core.rules import Rules
from skirmish.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameResult",
    "IllegalReason",
    "MoveFlag",
    "PieceType",
    # Errors
    "ChessError",
    "EngineError",
    "FenError",
    "IllegalEngineMoveError",
    "IllegalMoveError",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "AppliedMove",
    "Board",
    "Move",
    "MoveGenerator",
    "MoveValidator",
    "Piece",
    "Position",
    "PositionSnapshot",
    "Rules",
    # Notation
    "STARTING_FEN",
    "is_valid_fen",
    "move_from_uci",
    "move_to_san",
    "parse_san",
    "position_from_fen",
    "position_to_fen",
]
