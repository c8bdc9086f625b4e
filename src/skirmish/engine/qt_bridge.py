"""Qt bridge to run engine searches in a worker thread."""

from __future__ import annotations

import threading
from collections.abc import Callable

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from skirmish.core.errors import ChessError
from skirmish.core.notation.fen import is_valid_fen
from skirmish.core.notation.uci import NULL_MOVE
from skirmish.engine.search import (
    DEFAULT_STRENGTH,
    ENGINE_STRENGTHS,
    IEngine,
    SearchLimits,
)

EngineFactory = Callable[[], IEngine]


class EngineWorker(QObject):
    """Thread-affine worker that asks an engine for moves on demand.

    The engine is created lazily by *engine_factory* on the first request,
    so that it lives in the thread the worker was moved to.
    """

    best_move_ready = pyqtSignal(int, str)
    search_cancelled = pyqtSignal(int)
    search_no_move = pyqtSignal(int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_engine", "_engine_factory", "_limits")

    def __init__(
        self,
        engine_factory: EngineFactory,
        *,
        movetime_ms: int = ENGINE_STRENGTHS[DEFAULT_STRENGTH],
        timeout_ms: int | None = None,
    ) -> None:
        super().__init__()
        self._engine_factory = engine_factory
        self._engine: IEngine | None = None
        self._limits = SearchLimits(movetime_ms=movetime_ms, timeout_ms=timeout_ms)
        self._cancel_event = threading.Event()

    @pyqtSlot(str, int)
    def request_move(self, fen: str, request_id: int) -> None:
        """Search for the best move in *fen* and emit the result."""
        if not is_valid_fen(fen):
            self.search_error.emit(request_id, "Engine received invalid position")
            return

        self._cancel_event.clear()
        try:
            if self._engine is None:
                self._engine = self._engine_factory()
            result = self._engine.best_move(fen, self._limits)
        except ChessError as exc:
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return

        if not result.ok:
            self.search_error.emit(request_id, result.error or "engine search failed")
            return

        if not result.best_move or result.best_move == NULL_MOVE:
            self.search_no_move.emit(request_id)
            return

        self.best_move_ready.emit(request_id, result.best_move)

    @pyqtSlot()
    def cancel(self) -> None:
        """Drop the result of the search currently in flight."""
        self._cancel_event.set()

    @pyqtSlot(int)
    def set_movetime(self, movetime_ms: int) -> None:
        """Update the think time (takes effect on the next search)."""
        self._limits = SearchLimits(
            movetime_ms=movetime_ms, timeout_ms=self._limits.timeout_ms
        )
