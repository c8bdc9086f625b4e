"""MatchController, the central orchestrator of a short match.

Coordinates: Players, MatchState, the legality checker and the engine
fallback. Emits events via simple callbacks so the console / tests can
subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from skirmish.core.enums import Color, IllegalReason
from skirmish.core.errors import IllegalEngineMoveError, IllegalMoveError
from skirmish.core.legality import MoveValidator, PromotionChoice
from skirmish.core.move import Move
from skirmish.core.notation.uci import move_from_uci
from skirmish.core.piece import Piece
from skirmish.core.position import Position
from skirmish.core.types import Square, file_of, make_square, rank_of
from skirmish.game.interfaces import IPlayer, MatchPhase
from skirmish.game.settings import MatchSettings
from skirmish.game.state import MatchResult, MatchState, MoveRecord

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, "MatchState"], None]
GameOverCallback = Callable[[MatchResult], None]
PhaseCallback = Callable[[MatchPhase], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


# ── Fallback move choice ─────────────────────────────────────────────────────


def captured_piece(position: Position, move: Move) -> Piece | None:
    """Piece *move* would capture, including an en-passant pawn."""
    if move.is_en_passant:
        return position.board[make_square(file_of(move.to_sq), rank_of(move.from_sq))]
    return position.board[move.to_sq]


def mvv_lva_score(position: Position, move: Move) -> int:
    """Most-valuable-victim / least-valuable-attacker ordering score.

    Quiet moves score 0; captures score ``victim * 8 - attacker`` plus 5 for
    a promotion and 1 for en passant.
    """
    victim = captured_piece(position, move)
    if victim is None:
        return 0
    attacker = position.board[move.from_sq]
    assert attacker is not None
    score = victim.value * 8 - attacker.value
    if move.is_promotion:
        score += 5
    if move.is_en_passant:
        score += 1
    return score


def choose_fallback_move(position: Position, legal: list[Move]) -> Move | None:
    """Best capture by MVV-LVA, else the first legal move."""
    best: Move | None = None
    best_score = 0
    for move in legal:
        score = mvv_lva_score(position, move)
        if best is None or score > best_score:
            best, best_score = move, score
    return best


# ── Controller ───────────────────────────────────────────────────────────────


class MatchController:
    """Orchestrates a short match: validates moves, counts the move budget,
    switches turns, notifies listeners.

    Thread-safety: methods are designed to be called from a single thread.
    Engine answers arrive via :meth:`engine_replied` /
    :meth:`engine_failed`, which the engine player calls on that thread.
    """

    __slots__ = ("_state", "_players", "events")

    def __init__(self) -> None:
        self._state = MatchState()
        self._players: dict[Color, IPlayer] = {}
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def position(self) -> Position:
        return self._state.position

    @property
    def current_player(self) -> IPlayer | None:
        if self._state.phase == MatchPhase.NOT_STARTED:
            return None
        return self._players.get(self._state.side_to_move)

    def player(self, color: Color) -> IPlayer | None:
        return self._players.get(color)

    def remaining_moves(self, color: Color) -> int:
        return self._state.remaining_moves(color)

    # ── Match lifecycle ──────────────────────────────────────────────────

    def new_match(
        self,
        white: IPlayer,
        black: IPlayer,
        settings: MatchSettings | None = None,
        fen: str | None = None,
    ) -> None:
        """Set up and start a match.

        Raises :class:`~skirmish.core.errors.FenError` for a malformed *fen*
        and :class:`ValueError` unless each side has exactly one king.
        """
        for old in self._players.values():
            old.cancel()

        state = MatchState(settings or MatchSettings())
        state.setup(fen)
        self._state = state
        self._players = {Color.WHITE: white, Color.BLACK: black}
        _LOGGER.info(
            "New match: %s vs %s, %s moves each, %s to move",
            white.name,
            black.name,
            state.settings.max_moves,
            state.side_to_move,
        )

        if state.is_game_over:
            assert state.result is not None
            self._emit_game_over(state.result)
            return
        self._emit_phase(MatchPhase.AWAITING_MOVE)
        self._prompt_current_player()

    def submit_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PromotionChoice = None,
    ) -> MoveRecord:
        """Play a human move; raises :class:`IllegalMoveError` if rejected."""
        cp = self.current_player
        if self._state.phase != MatchPhase.AWAITING_MOVE or cp is None:
            raise IllegalMoveError(IllegalReason.NOT_YOUR_TURN, "No move expected now")
        if not cp.is_human:
            raise IllegalMoveError(IllegalReason.NOT_YOUR_TURN)
        move = MoveValidator(self._state.position).validate(
            from_sq, to_sq, promotion=promotion
        )
        return self._play(move)

    def submit_engine_move(self, text: str) -> MoveRecord:
        """Play the engine's ``bestmove`` text.

        Raises :class:`IllegalEngineMoveError` for ``(none)``, malformed
        text or an illegal move; the position is left untouched.
        """
        if self._state.phase != MatchPhase.THINKING:
            raise IllegalEngineMoveError(text, IllegalReason.NOT_YOUR_TURN)
        move = move_from_uci(self._state.position, text)
        return self._play(move)

    def play_fallback_move(self) -> MoveRecord | None:
        """Play our own choice for the side to move (best MVV-LVA capture)."""
        if self._state.is_game_over:
            return None
        move = choose_fallback_move(self._state.position, self._state.legal_moves())
        if move is None:
            return None
        _LOGGER.info("Playing fallback move %s", move)
        return self._play(move)

    def engine_replied(self, text: str) -> None:
        """Engine player callback: play *text*, or fall back if it is unusable."""
        if self._state.phase != MatchPhase.THINKING:
            _LOGGER.debug("Ignoring engine reply %r outside its turn", text)
            return
        try:
            self.submit_engine_move(text)
        except IllegalEngineMoveError as exc:
            _LOGGER.warning("%s; using fallback move", exc)
            self.play_fallback_move()

    def engine_failed(self, message: str) -> None:
        """Engine player callback: the search failed outright."""
        if self._state.phase != MatchPhase.THINKING:
            return
        _LOGGER.warning("Engine failed (%s); using fallback move", message)
        self.play_fallback_move()

    def resign(self, color: Color) -> None:
        if self._state.is_game_over or self._state.phase == MatchPhase.NOT_STARTED:
            return
        cp = self.current_player
        if cp is not None and not cp.is_human:
            cp.cancel()
        self._state.resign(color)
        assert self._state.result is not None
        self._emit_game_over(self._state.result)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _play(self, move: Move) -> MoveRecord:
        record = self._state.apply_move(move)
        _LOGGER.debug("%s played %s", record.color, record.san)
        self._emit_move(record)

        if self._state.is_game_over:
            assert self._state.result is not None
            self._emit_game_over(self._state.result)
        else:
            self._prompt_current_player()
        return record

    def _prompt_current_player(self) -> None:
        """Ask the current player to move."""
        cp = self.current_player
        if cp is None:
            return

        if cp.is_human:
            self._state.phase = MatchPhase.AWAITING_MOVE
            self._emit_phase(MatchPhase.AWAITING_MOVE)
        else:
            self._state.phase = MatchPhase.THINKING
            self._emit_phase(MatchPhase.THINKING)
            cp.request_move(self._state.position, self.remaining_moves(cp.color))

    def _emit_move(self, record: MoveRecord) -> None:
        for cb in self.events.on_move:
            cb(record, self._state)

    def _emit_game_over(self, result: MatchResult) -> None:
        _LOGGER.info("Match over: %s", result)
        self._emit_phase(MatchPhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(result)

    def _emit_phase(self, phase: MatchPhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)
