"""User-configurable match settings."""

from __future__ import annotations

from dataclasses import dataclass

from skirmish.core.enums import Color
from skirmish.engine.search import DEFAULT_STRENGTH, ENGINE_STRENGTHS

MIN_MAX_MOVES = 1
MAX_MAX_MOVES = 20
DEFAULT_MAX_MOVES = 6


def clamp_max_moves(value: int | str | None) -> int:
    """Coerce user input to a per-side move budget in 1–20.

    Empty, zero or non-numeric input falls back to the default.
    """
    try:
        moves = int(value) if value is not None else 0
    except ValueError:
        moves = 0
    if moves == 0:
        moves = DEFAULT_MAX_MOVES
    return max(MIN_MAX_MOVES, min(MAX_MAX_MOVES, moves))


@dataclass
class MatchSettings:
    """All settings chosen before a match starts."""

    first_move: Color = Color.WHITE
    player_side: Color = Color.WHITE
    max_moves: int = DEFAULT_MAX_MOVES  # per side
    engine_strength: str = DEFAULT_STRENGTH
    engine_path: str | None = None

    def __post_init__(self) -> None:
        self.max_moves = clamp_max_moves(self.max_moves)
        if self.engine_strength not in ENGINE_STRENGTHS:
            raise ValueError(
                f"Unknown engine strength {self.engine_strength!r}; "
                f"choose one of {', '.join(ENGINE_STRENGTHS)}"
            )

    @property
    def engine_side(self) -> Color:
        return self.player_side.opposite

    @property
    def base_movetime_ms(self) -> int:
        return ENGINE_STRENGTHS[self.engine_strength]
