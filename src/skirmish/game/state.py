"""Match state machine: phase, move budget, capture scores and history."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from skirmish.core.enums import Color, GameResult
from skirmish.core.notation import (
    STARTING_FEN,
    move_to_san,
    position_from_fen,
    position_to_fen,
)
from skirmish.core.position import AppliedMove, Position
from skirmish.core.rules import Rules
from skirmish.game.interfaces import MatchEndReason, MatchPhase
from skirmish.game.settings import MatchSettings

if TYPE_CHECKING:
    from skirmish.core.move import Move
    from skirmish.core.piece import Piece


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    color: Color
    san: str
    fen_after: str
    captured: Piece | None = None
    points: int = 0


@dataclass(frozen=True)
class MatchResult:
    """Final outcome; ``winner`` is ``None`` for a draw."""

    reason: MatchEndReason
    winner: Color | None
    final_score: dict[Color, int]
    total_moves: int

    @property
    def game_result(self) -> GameResult:
        if self.winner is None:
            return GameResult.DRAW
        if self.winner == Color.WHITE:
            return GameResult.WHITE_WINS
        return GameResult.BLACK_WINS

    def __str__(self) -> str:
        verdict = "Draw" if self.winner is None else f"{self.winner.name.title()} wins"
        white = self.final_score[Color.WHITE]
        black = self.final_score[Color.BLACK]
        return (
            f"{verdict} ({self.reason}), score {white}:{black}, "
            f"{self.total_moves} moves"
        )


def _zero_per_side() -> dict[Color, int]:
    return {Color.WHITE: 0, Color.BLACK: 0}


@dataclass
class MatchState:
    """Manages match lifecycle: phase, result, move budget and history.

    A pure data/logic class with no threading, engine or I/O.
    Capture points are collected from the position's move notifications.
    """

    settings: MatchSettings = field(default_factory=MatchSettings)
    position: Position = field(init=False)
    phase: MatchPhase = field(default=MatchPhase.NOT_STARTED, init=False)
    result: MatchResult | None = field(default=None, init=False)
    move_counts: dict[Color, int] = field(default_factory=_zero_per_side, init=False)
    scores: dict[Color, int] = field(default_factory=_zero_per_side, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None) -> None:
        """Initialise (or reset) the match.

        The side to move comes from ``settings.first_move``, overriding the
        FEN; an en-passant target is dropped when that flips the turn.
        Raises :class:`ValueError` unless each side has exactly one king.
        """
        position = position_from_fen(fen or STARTING_FEN)
        if not position.is_playable():
            raise ValueError("Both kings must be present on the board")
        if position.side_to_move != self.settings.first_move:
            position.side_to_move = self.settings.first_move
            position.en_passant = None
        position.move_listeners.append(self._on_move_applied)

        self.position = position
        self.start_fen = position_to_fen(position)
        self.phase = MatchPhase.AWAITING_MOVE
        self.result = None
        self.move_counts = _zero_per_side()
        self.scores = _zero_per_side()
        self.move_history.clear()

        # A position given by FEN may already be decided.
        self._check_no_moves(mover=position.side_to_move.opposite)

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> MoveRecord:
        """Apply a validated move and return the history record.

        Caller is responsible for the legality check.
        """
        mover = self.position.side_to_move
        san = move_to_san(self.position, move)
        before = self.scores[mover]
        applied = self.position.apply_move(move)

        record = MoveRecord(
            move=move,
            color=mover,
            san=san,
            fen_after=position_to_fen(self.position),
            captured=applied.captured,
            points=self.scores[mover] - before,
        )
        self.move_history.append(record)
        self.move_counts[mover] += 1

        if not self._check_no_moves(mover):
            self._check_move_limit()
        return record

    def _on_move_applied(self, applied: AppliedMove) -> None:
        if applied.captured is not None:
            self.scores[applied.color] += applied.captured.value

    # ── Resignation ──────────────────────────────────────────────────────

    def resign(self, color: Color) -> None:
        self._finish(MatchEndReason.RESIGNATION, color.opposite)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def is_game_over(self) -> bool:
        return self.phase == MatchPhase.GAME_OVER

    @property
    def total_moves(self) -> int:
        return self.move_counts[Color.WHITE] + self.move_counts[Color.BLACK]

    def remaining_moves(self, color: Color) -> int:
        return max(0, self.settings.max_moves - self.move_counts[color])

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        return Rules.legal_moves(self.position)

    # ── Internal ─────────────────────────────────────────────────────────

    def _check_no_moves(self, mover: Color) -> bool:
        """End the match if the side now to move is mated or stalemated."""
        if Rules.legal_moves(self.position):
            return False
        if Rules.is_in_check(self.position):
            self._finish(MatchEndReason.CHECKMATE, mover)
        else:
            self._finish(MatchEndReason.STALEMATE, self._leader())
        return True

    def _check_move_limit(self) -> None:
        limit = self.settings.max_moves
        if all(count >= limit for count in self.move_counts.values()):
            self._finish(MatchEndReason.MOVE_LIMIT, self._leader())

    def _leader(self) -> Color | None:
        white, black = self.scores[Color.WHITE], self.scores[Color.BLACK]
        if white > black:
            return Color.WHITE
        if black > white:
            return Color.BLACK
        return None

    def _finish(self, reason: MatchEndReason, winner: Color | None) -> None:
        self.result = MatchResult(
            reason=reason,
            winner=winner,
            final_score=dict(self.scores),
            total_moves=self.total_moves,
        )
        self.phase = MatchPhase.GAME_OVER
