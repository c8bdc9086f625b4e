"""High-level chess rules: check, checkmate and stalemate detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from skirmish.core import attacks
from skirmish.core.enums import Color, GameResult
from skirmish.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from skirmish.core.move import Move
    from skirmish.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Only checkmate and stalemate end a game here. Repetition and the
    fifty-move rule are not applied; the halfmove clock is merely tracked.
    """

    @staticmethod
    def legal_moves(position: Position, color: Color | None = None) -> list[Move]:
        return MoveGenerator(position).generate_legal_moves(color)

    @staticmethod
    def is_in_check(position: Position, color: Color | None = None) -> bool:
        if color is None:
            color = position.side_to_move
        return attacks.is_in_check(position.board, color)

    @staticmethod
    def is_checkmate(position: Position, color: Color | None = None) -> bool:
        if not Rules.is_in_check(position, color):
            return False
        return not Rules.legal_moves(position, color)

    @staticmethod
    def is_stalemate(position: Position, color: Color | None = None) -> bool:
        if Rules.is_in_check(position, color):
            return False
        return not Rules.legal_moves(position, color)

    @staticmethod
    def game_result(position: Position) -> GameResult:
        """Result for the side to move: mate, stalemate or still playing."""
        color = position.side_to_move
        if Rules.legal_moves(position, color):
            return GameResult.IN_PROGRESS
        if Rules.is_in_check(position, color):
            return (
                GameResult.BLACK_WINS if color == Color.WHITE else GameResult.WHITE_WINS
            )
        return GameResult.DRAW  # stalemate
