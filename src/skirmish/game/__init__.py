"""Match layer: settings, players, state machine, controller and board editor."""

from skirmish.game.controller import GameEvents, MatchController, mvv_lva_score
from skirmish.game.editor import BoardEditor
from skirmish.game.interfaces import IPlayer, MatchEndReason, MatchPhase
from skirmish.game.player import EnginePlayer, HumanPlayer
from skirmish.game.settings import MatchSettings, clamp_max_moves
from skirmish.game.state import MatchResult, MatchState, MoveRecord

__all__ = [
    "BoardEditor",
    "EnginePlayer",
    "GameEvents",
    "HumanPlayer",
    "IPlayer",
    "MatchController",
    "MatchEndReason",
    "MatchPhase",
    "MatchResult",
    "MatchSettings",
    "MatchState",
    "MoveRecord",
    "clamp_max_moves",
    "mvv_lva_score",
]
