"""Tests for the UCI subprocess driver, run against a scripted fake engine."""

from __future__ import annotations

import sys
import textwrap
from pathlib import Path

import pytest

from skirmish.core.errors import EngineError
from skirmish.core.notation import STARTING_FEN
from skirmish.engine.search import SearchLimits
from skirmish.engine.uci_process import UciEngine

_FAKE_ENGINE = textwrap.dedent(
    """
    import sys

    mode = sys.argv[1]
    log = open(sys.argv[2], "a")

    def say(text):
        print(text, flush=True)

    for line in sys.stdin:
        cmd = line.strip()
        log.write(cmd + "\\n")
        log.flush()
        if cmd == "uci":
            if mode != "mute":
                say("id name Fake")
                say("uciok")
        elif cmd == "isready":
            say("readyok")
        elif cmd.startswith("go"):
            if mode == "normal":
                say("info depth 1 score cp 20 pv e2e4")
                say("info depth 2 score cp 25 pv e2e4 e7e5")
                say("bestmove e2e4 ponder e7e5")
            elif mode == "none":
                say("bestmove (none)")
            elif mode == "crash":
                sys.exit(3)
        elif cmd == "quit":
            break
    """
)


@pytest.fixture
def fake_engine(tmp_path: Path):
    script = tmp_path / "fake_engine.py"
    script.write_text(_FAKE_ENGINE)
    log = tmp_path / "commands.log"
    engines: list[UciEngine] = []

    def start(mode: str = "normal", **kwargs) -> UciEngine:
        engine = UciEngine(sys.executable, args=[str(script), mode, str(log)], **kwargs)
        engines.append(engine)
        return engine

    start.log = log  # type: ignore[attr-defined]
    yield start
    for engine in engines:
        engine.quit()


def _commands(log: Path) -> list[str]:
    return log.read_text().splitlines()


class TestHandshake:
    def test_start_and_quit(self, fake_engine) -> None:
        engine = fake_engine()
        assert engine.ready
        assert engine.running
        engine.quit()
        assert not engine.running
        assert not engine.ready
        assert _commands(fake_engine.log)[:2] == ["uci", "isready"]
        assert _commands(fake_engine.log)[-1] == "quit"

    def test_quit_releases_pipes_and_readers(self, fake_engine) -> None:
        engine = fake_engine()
        proc = engine._proc
        readers = list(engine._readers)
        engine.quit()
        assert proc.stdout.closed
        assert proc.stderr.closed
        assert proc.stdin.closed
        assert not any(reader.is_alive() for reader in readers)

    def test_quit_twice_is_harmless(self, fake_engine) -> None:
        engine = fake_engine()
        engine.quit()
        engine.quit()

    def test_missing_uciok_fails(self, fake_engine) -> None:
        with pytest.raises(EngineError, match="uciok"):
            fake_engine("mute", handshake_timeout_ms=300)

    def test_missing_binary(self, tmp_path: Path) -> None:
        with pytest.raises(EngineError, match="Cannot start engine"):
            UciEngine(tmp_path / "no-such-engine")

    def test_context_manager_quits(self, fake_engine) -> None:
        with fake_engine() as engine:
            assert engine.running
        assert not engine.running


class TestSearch:
    def test_best_move_with_info(self, fake_engine) -> None:
        engine = fake_engine()
        result = engine.best_move(STARTING_FEN, SearchLimits(movetime_ms=50))

        assert result.ok
        assert result.best_move == "e2e4"
        assert len(result.info) == 2
        assert result.info[0].startswith("info depth 1")
        commands = _commands(fake_engine.log)
        assert f"position fen {STARTING_FEN}" in commands
        assert "ucinewgame" in commands
        assert commands[-1] == "go movetime 50"

    def test_null_move(self, fake_engine) -> None:
        engine = fake_engine("none")
        result = engine.best_move(STARTING_FEN, SearchLimits(movetime_ms=50))
        assert result.ok
        assert result.best_move == "(none)"

    def test_timeout_sends_stop(self, fake_engine) -> None:
        engine = fake_engine("silent")
        result = engine.best_move(
            STARTING_FEN, SearchLimits(movetime_ms=50, timeout_ms=200)
        )

        assert not result.ok
        assert result.error == "search timeout"
        assert result.best_move is None
        engine.quit()
        assert "stop" in _commands(fake_engine.log)

    def test_engine_exit_during_search(self, fake_engine) -> None:
        engine = fake_engine("crash")
        with pytest.raises(EngineError, match="exited unexpectedly"):
            engine.best_move(STARTING_FEN, SearchLimits(movetime_ms=50))

    def test_send_after_quit_fails(self, fake_engine) -> None:
        engine = fake_engine()
        engine.quit()
        with pytest.raises(EngineError, match="not running"):
            engine.new_position(STARTING_FEN)
