"""Shared engine search models and protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

# Base think time per move, in milliseconds.
ENGINE_STRENGTHS: dict[str, int] = {
    "max": 1200,
    "high": 1000,
    "medium": 800,
}
DEFAULT_STRENGTH = "max"


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single ``go`` command.

    Zero or negative values are left out of the command. ``timeout_ms`` is
    enforced on our side: when it elapses the engine is told to ``stop``.
    """

    movetime_ms: int | None = None
    depth: int | None = None
    nodes: int | None = None
    timeout_ms: int | None = None

    def go_command(self) -> str:
        args: list[str] = []
        for name, value in (
            ("movetime", self.movetime_ms),
            ("depth", self.depth),
            ("nodes", self.nodes),
        ):
            if value is not None and value > 0:
                args.append(f"{name} {int(value)}")
        return " ".join(["go", *args])


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Outcome of one engine search.

    ``best_move`` is the raw ``bestmove`` text (possibly ``(none)``); it has
    not been checked against any position.
    """

    ok: bool
    best_move: str | None = None
    info: tuple[str, ...] = field(default_factory=tuple)
    error: str | None = None


class IEngine(Protocol):
    """Protocol for move suppliers used by the match layer."""

    def best_move(self, fen: str, limits: SearchLimits) -> SearchResult: ...


def movetime_for(remaining_moves: int, base_ms: int) -> int:
    """Think longer early in a short match, a little less near its end."""
    if remaining_moves > 4:
        return round(base_ms * 1.3)
    if remaining_moves > 2:
        return base_ms
    return round(base_ms * 0.8)
