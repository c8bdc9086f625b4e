"""Exception hierarchy shared by the rules engine and its collaborators.

Every error here is recoverable by the caller: a failed decode produces no
position and a rejected move leaves the position untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skirmish.core.enums import IllegalReason


class ChessError(Exception):
    """Base class for all skirmish errors."""


class FenError(ChessError, ValueError):
    """A FEN string is not well-formed.

    ``field`` names the offending FEN field (``placement``, ``side``,
    ``castling``, ``en_passant``, ``halfmove``, ``fullmove`` or ``fields``
    for a wrong field count) and ``value`` holds the text that failed.
    """

    def __init__(self, message: str, *, field: str, value: str) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class IllegalMoveError(ChessError, ValueError):
    """A proposed move was rejected by the legality checker."""

    def __init__(self, reason: IllegalReason, message: str | None = None) -> None:
        super().__init__(message or str(reason))
        self.reason = reason


class IllegalEngineMoveError(IllegalMoveError):
    """A move supplied by the external engine is missing, malformed or illegal.

    ``reason`` is ``None`` when the text could not even be parsed.
    """

    def __init__(
        self,
        text: str,
        reason: IllegalReason | None = None,
        message: str | None = None,
    ) -> None:
        detail = message or (str(reason) if reason is not None else "unparseable move")
        ChessError.__init__(self, f"Illegal engine move {text!r}: {detail}")
        self.reason = reason  # type: ignore[assignment]
        self.text = text


class EngineError(ChessError):
    """The external engine process could not be started or stopped answering."""
