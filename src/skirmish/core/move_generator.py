"""Legal move enumeration on top of the legality checker."""

from __future__ import annotations

from typing import TYPE_CHECKING

from skirmish.core.enums import Color
from skirmish.core.legality import MoveValidator
from skirmish.core.move import Move

if TYPE_CHECKING:
    from skirmish.core.position import Position


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    Every square owned by the side is paired with all 64 squares and each
    pair goes through :class:`MoveValidator`. That is 64×64 candidates at
    most, which is affordable on a fixed 8x8 board and keeps a single source
    of truth for legality. Pawn promotions are listed once, with the default
    queen.
    """

    __slots__ = ("_pos",)

    def __init__(self, position: Position) -> None:
        self._pos = position

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self, color: Color | None = None) -> list[Move]:
        """All strictly legal moves for *color* (default: the side to move)."""
        pos = self._pos
        if color is not None and color != pos.side_to_move:
            # Turn order is part of legality; ask on a copy where it is *color*'s move.
            pos = pos.copy()
            pos.side_to_move = color
        color = pos.side_to_move

        validator = MoveValidator(pos)
        legal: list[Move] = []
        for from_sq in pos.board.occupied(color):
            for to_sq in range(64):
                result = validator.check(from_sq, to_sq)
                if isinstance(result, Move):
                    legal.append(result)
        return legal

    def has_legal_move(self, color: Color | None = None) -> bool:
        return bool(self.generate_legal_moves(color))
