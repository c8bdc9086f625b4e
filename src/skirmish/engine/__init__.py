"""Engine package: UCI process wrapper, search models and Qt worker bridge."""

from skirmish.engine.qt_bridge import EngineWorker
from skirmish.engine.search import (
    DEFAULT_STRENGTH,
    ENGINE_STRENGTHS,
    IEngine,
    SearchLimits,
    SearchResult,
    movetime_for,
)
from skirmish.engine.uci_process import UciEngine

__all__ = [
    "DEFAULT_STRENGTH",
    "ENGINE_STRENGTHS",
    "EngineWorker",
    "IEngine",
    "SearchLimits",
    "SearchResult",
    "UciEngine",
    "movetime_for",
]
