"""Move value object (UCI-style representation)."""

from __future__ import annotations

from dataclasses import dataclass

from skirmish.core.enums import MoveFlag, PieceType
from skirmish.core.types import Square, square_name

PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}
PROMO_TYPES: dict[str, PieceType] = {v: k for k, v in PROMO_CHARS.items()}


@dataclass(frozen=True, slots=True)
class Move:
    """A move accepted by the legality checker.

    ``flag`` records what the checker found out about the move so the
    applier does not have to work it out again.
    """

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    @property
    def is_en_passant(self) -> bool:
        return self.flag == MoveFlag.EN_PASSANT

    @property
    def is_castling(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)

    @property
    def is_promotion(self) -> bool:
        return self.flag == MoveFlag.PROMOTION

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += PROMO_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)
