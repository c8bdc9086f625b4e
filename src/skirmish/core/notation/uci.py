"""UCI long-algebraic move text, as returned by the external engine."""

from __future__ import annotations

from dataclasses import dataclass

from skirmish.core.enums import IllegalReason
from skirmish.core.errors import IllegalEngineMoveError
from skirmish.core.legality import MoveValidator
from skirmish.core.move import PROMO_CHARS, Move
from skirmish.core.position import Position
from skirmish.core.types import Square, parse_square

NULL_MOVE = "(none)"

_PROMO_LETTERS = frozenset(PROMO_CHARS.values())


@dataclass(frozen=True, slots=True)
class UciMove:
    """Parsed but not yet validated ``e2e4`` / ``e7e8q`` text."""

    from_sq: Square
    to_sq: Square
    promotion: str | None = None


def parse_uci_move(text: str) -> UciMove:
    """Split engine move text into origin, destination and promotion letter.

    Raises :class:`IllegalEngineMoveError` for ``(none)`` or anything that
    is not four or five lowercase characters naming two squares.
    """
    text = text.strip()
    if text == NULL_MOVE or len(text) not in (4, 5):
        raise IllegalEngineMoveError(text)
    try:
        from_sq = parse_square(text[:2])
        to_sq = parse_square(text[2:4])
    except ValueError:
        raise IllegalEngineMoveError(text) from None
    promotion = text[4] if len(text) == 5 else None
    if promotion is not None and promotion not in _PROMO_LETTERS:
        raise IllegalEngineMoveError(text)
    return UciMove(from_sq, to_sq, promotion)


def move_from_uci(position: Position, text: str) -> Move:
    """Parse *text* and check it against *position*'s legality rules.

    A promotion letter is only accepted on a move that promotes.
    """
    parsed = parse_uci_move(text)
    result = MoveValidator(position).check(
        parsed.from_sq, parsed.to_sq, promotion=parsed.promotion
    )
    if isinstance(result, IllegalReason):
        raise IllegalEngineMoveError(text.strip(), result)
    if parsed.promotion is not None and not result.is_promotion:
        raise IllegalEngineMoveError(
            text.strip(), message="promotion letter on a non-promotion move"
        )
    return result
