"""Tests for the console front end: input parsing and the match loop."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from skirmish.app import (
    build_parser,
    format_status,
    main,
    parse_human_move,
    run_match,
)
from skirmish.core.enums import Color, MoveFlag
from skirmish.core.errors import IllegalMoveError
from skirmish.core.notation import STARTING_FEN, position_from_fen
from skirmish.core.types import E2, E4, G1, parse_square
from skirmish.engine.search import SearchLimits, SearchResult
from skirmish.game.controller import MatchController
from skirmish.game.interfaces import MatchEndReason
from skirmish.game.player import EnginePlayer, HumanPlayer
from skirmish.game.settings import MatchSettings


class _ReplyEngine:
    def __init__(self, *moves: str) -> None:
        self._moves = list(moves)

    def best_move(self, fen: str, limits: SearchLimits) -> SearchResult:
        return SearchResult(ok=True, best_move=self._moves.pop(0))


def _controller(*engine_moves: str, max_moves: int = 6) -> MatchController:
    ctrl = MatchController()
    engine = EnginePlayer(
        Color.BLACK,
        _ReplyEngine(*engine_moves),
        ctrl.engine_replied,
        ctrl.engine_failed,
    )
    ctrl.new_match(HumanPlayer(Color.WHITE), engine, MatchSettings(max_moves=max_moves))
    return ctrl


def _reader(*lines: str | None):
    it: Iterator[str | None] = iter(lines)
    return lambda: next(it)


class TestParseHumanMove:
    def test_uci_text(self) -> None:
        move = parse_human_move(position_from_fen(STARTING_FEN), " e2e4 ")
        assert (move.from_sq, move.to_sq, move.flag) == (E2, E4, MoveFlag.DOUBLE_PAWN)

    def test_san_text(self) -> None:
        move = parse_human_move(position_from_fen(STARTING_FEN), "Nf3")
        assert (move.from_sq, move.to_sq) == (G1, parse_square("f3"))

    def test_illegal_uci(self) -> None:
        with pytest.raises(IllegalMoveError):
            parse_human_move(position_from_fen(STARTING_FEN), "e2e5")

    def test_gibberish(self) -> None:
        with pytest.raises(ValueError):
            parse_human_move(position_from_fen(STARTING_FEN), "hello")


class TestRunMatch:
    def test_plays_to_move_limit(self) -> None:
        ctrl = _controller("e7e5", max_moves=1)
        output: list[str] = []

        result = run_match(ctrl, _reader("", "e2e4"), output.append)

        assert result is not None
        assert result.reason == MatchEndReason.MOVE_LIMIT
        assert output[-1] == "Draw (Move limit reached), score 0:0, 2 moves"
        assert "8 r n b q k b n r" in output[0]

    def test_illegal_input_reprompts(self) -> None:
        ctrl = _controller("e7e5")
        output: list[str] = []

        run_match(ctrl, _reader("e2e5", "resign"), output.append)

        assert any(line.startswith("Illegal move: ") for line in output)
        assert ctrl.state.result is not None
        assert ctrl.state.result.winner == Color.BLACK

    def test_end_of_input_resigns(self) -> None:
        ctrl = _controller()
        result = run_match(ctrl, _reader(None), lambda _line: None)
        assert result is not None
        assert result.reason == MatchEndReason.RESIGNATION

    def test_status_line(self) -> None:
        ctrl = _controller()
        assert format_status(ctrl.state, Color.WHITE) == (
            "Your turn | Moves: W 0/6 B 0/6 | Score W 0 B 0"
        )


class TestCommandLine:
    def test_parser(self) -> None:
        args = build_parser().parse_args(
            ["--engine", "stockfish", "--moves", "50", "--side", "black"]
        )
        assert args.engine == "stockfish"
        assert args.moves == 20
        assert args.side == "black"
        assert args.first == "white"
        assert args.strength == "max"

    def test_engine_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_missing_engine_binary(self, tmp_path: Path) -> None:
        assert main(["--engine", str(tmp_path / "no-engine")]) == 1
