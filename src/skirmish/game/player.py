"""Concrete player implementations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from skirmish.core.enums import Color
from skirmish.core.errors import EngineError
from skirmish.core.notation.fen import position_to_fen
from skirmish.engine.search import (
    DEFAULT_STRENGTH,
    ENGINE_STRENGTHS,
    IEngine,
    SearchLimits,
    movetime_for,
)
from skirmish.game.interfaces import IPlayer

if TYPE_CHECKING:
    from skirmish.core.position import Position

_LOGGER = logging.getLogger(__name__)

# Extra wall-clock allowance on top of the requested think time.
SEARCH_GRACE_MS = 2000


class HumanPlayer(IPlayer):
    """A human participant whose moves come from the console or board editor.

    ``request_move`` is a no-op because humans select moves interactively.
    """

    __slots__ = ("_color", "_name")

    def __init__(self, color: Color, name: str = "") -> None:
        self._color = color
        self._name = name or f"Player ({color})"

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return True

    def request_move(self, position: Position, remaining_moves: int) -> None:
        pass  # Human moves arrive via controller.submit_move()

    def cancel(self) -> None:
        pass


class EnginePlayer(IPlayer):
    """An engine participant that asks an :class:`IEngine` for its moves.

    The engine's raw answer is not trusted: it is handed to *on_move*
    unchecked, and the controller validates it. Engine failures (a timeout
    or a dead process) are reported through *on_failure* instead.

    Args:
        color: Side the engine plays.
        engine: Move supplier, usually a :class:`~skirmish.engine.UciEngine`.
        on_move: ``(str) -> None``, receives the ``bestmove`` text.
        on_failure: ``(str) -> None``, receives an error description.
        base_movetime_ms: Think time before scaling by remaining moves.
        name: Display name.
    """

    __slots__ = (
        "_color",
        "_name",
        "_engine",
        "_on_move",
        "_on_failure",
        "_base_movetime_ms",
        "_cancelled",
    )

    def __init__(
        self,
        color: Color,
        engine: IEngine,
        on_move: Callable[[str], None],
        on_failure: Callable[[str], None],
        *,
        base_movetime_ms: int = ENGINE_STRENGTHS[DEFAULT_STRENGTH],
        name: str = "Engine",
    ) -> None:
        self._color = color
        self._name = name
        self._engine = engine
        self._on_move = on_move
        self._on_failure = on_failure
        self._base_movetime_ms = base_movetime_ms
        self._cancelled = False

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return False

    def limits_for(self, remaining_moves: int) -> SearchLimits:
        movetime = movetime_for(remaining_moves, self._base_movetime_ms)
        return SearchLimits(movetime_ms=movetime, timeout_ms=movetime + SEARCH_GRACE_MS)

    def request_move(self, position: Position, remaining_moves: int) -> None:
        self._cancelled = False
        limits = self.limits_for(remaining_moves)
        _LOGGER.info("%s thinking for %s ms", self._name, limits.movetime_ms)
        try:
            result = self._engine.best_move(position_to_fen(position), limits)
        except EngineError as exc:
            if not self._cancelled:
                self._on_failure(str(exc))
            return

        if self._cancelled:
            return
        if not result.ok or result.best_move is None:
            self._on_failure(result.error or "engine search failed")
            return
        self._on_move(result.best_move)

    def cancel(self) -> None:
        self._cancelled = True
