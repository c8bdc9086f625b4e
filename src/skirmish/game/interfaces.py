"""Abstract interfaces and states for the match layer.

Follows Dependency Inversion: the high-level MatchController depends on
these ABCs, not on concrete human/engine player implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from skirmish.core.enums import Color

if TYPE_CHECKING:
    from skirmish.core.position import Position


# ── Match phase FSM states ───────────────────────────────────────────────────


class MatchPhase(IntEnum):
    """Finite-state-machine states for a short match."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    THINKING = auto()  # engine is computing
    GAME_OVER = auto()


class MatchEndReason(IntEnum):
    """Why a match ended."""

    CHECKMATE = auto()
    STALEMATE = auto()
    MOVE_LIMIT = auto()
    RESIGNATION = auto()

    def __str__(self) -> str:
        return {
            MatchEndReason.CHECKMATE: "Checkmate",
            MatchEndReason.STALEMATE: "Stalemate",
            MatchEndReason.MOVE_LIMIT: "Move limit reached",
            MatchEndReason.RESIGNATION: "Resignation",
        }[self]


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IPlayer(ABC):
    """Interface for a match participant (human or engine)."""

    @property
    @abstractmethod
    def color(self) -> Color: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...

    @abstractmethod
    def request_move(self, position: Position, remaining_moves: int) -> None:
        """Begin the move-selection process.

        For humans this is a no-op (they type or drag their moves).
        For the engine this starts a search sized by *remaining_moves*.
        """

    @abstractmethod
    def cancel(self) -> None:
        """Cancel an ongoing move computation (engine only, no-op for human)."""
