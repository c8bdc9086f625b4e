"""Notation package: FEN / UCI / SAN parsing and serialization."""

from skirmish.core.notation.fen import (
    STARTING_FEN,
    is_valid_fen,
    placement_to_fen,
    position_from_fen,
    position_to_fen,
)
from skirmish.core.notation.san import move_to_san, parse_san
from skirmish.core.notation.uci import (
    NULL_MOVE,
    UciMove,
    move_from_uci,
    parse_uci_move,
)

__all__ = [
    "STARTING_FEN",
    "NULL_MOVE",
    "UciMove",
    "is_valid_fen",
    "placement_to_fen",
    "position_from_fen",
    "position_to_fen",
    "move_to_san",
    "parse_san",
    "parse_uci_move",
    "move_from_uci",
]
