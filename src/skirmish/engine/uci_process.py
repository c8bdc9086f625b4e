"""External UCI engine driven over stdin/stdout of a child process."""

from __future__ import annotations

import logging
import queue
import subprocess
import threading
import time
from collections.abc import Sequence
from pathlib import Path
from typing import IO

from skirmish.core.errors import EngineError
from skirmish.core.notation.uci import NULL_MOVE
from skirmish.engine.search import SearchLimits, SearchResult

_LOGGER = logging.getLogger(__name__)

# Marks end of the engine's stdout in the line queue.
_EOF = None


class UciEngine:
    """Blocking wrapper around a UCI engine process.

    The process is started and handshaken (``uci``/``uciok``,
    ``isready``/``readyok``) in the constructor. Output is read by a daemon
    thread into a queue so that every wait can carry a deadline.

    Not thread-safe: use one instance per worker thread.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        args: Sequence[str] = (),
        handshake_timeout_ms: int = 10_000,
    ) -> None:
        self.path = Path(path)
        self._args = tuple(args)
        self._handshake_timeout_ms = handshake_timeout_ms
        self._proc: subprocess.Popen[str] | None = None
        self._readers: list[threading.Thread] = []
        self._lines: queue.Queue[str | None] = queue.Queue()
        self.ready = False
        self.start()

    # -- Lifecycle ----------------------------------------------------------

    def start(self) -> None:
        if self._proc is not None:
            return
        try:
            self._proc = subprocess.Popen(
                [str(self.path), *self._args],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,
                cwd=self.path.parent if self.path.parent != Path() else None,
            )
        except OSError as exc:
            raise EngineError(f"Cannot start engine {self.path}: {exc}") from exc

        _LOGGER.info("Started engine %s (pid %s)", self.path, self._proc.pid)
        self._lines = queue.Queue()
        assert self._proc.stdout is not None and self._proc.stderr is not None
        self._readers = [
            threading.Thread(
                target=self._pump_stdout, args=(self._proc.stdout,), daemon=True
            ),
            threading.Thread(
                target=self._pump_stderr, args=(self._proc.stderr,), daemon=True
            ),
        ]
        for reader in self._readers:
            reader.start()

        try:
            self._send("uci")
            self._wait_for("uciok", self._handshake_timeout_ms)
            self._send("isready")
            self._wait_for("readyok", self._handshake_timeout_ms)
        except EngineError:
            self.quit()
            raise
        self.ready = True

    def quit(self) -> None:
        """Ask the engine to exit, killing it if it does not."""
        proc = self._proc
        if proc is None:
            return
        self._proc = None
        self.ready = False
        if proc.poll() is None:
            try:
                assert proc.stdin is not None
                proc.stdin.write("quit\n")
                proc.stdin.flush()
            except OSError:
                pass  # already gone
            try:
                proc.wait(timeout=2)
            except subprocess.TimeoutExpired:
                _LOGGER.warning("Engine %s ignored quit; killing it", self.path)
                proc.kill()
                proc.wait()
        # Readers stop at EOF once the process is gone.
        for reader in self._readers:
            reader.join(timeout=1)
        self._readers = []
        for stream in (proc.stdin, proc.stdout, proc.stderr):
            if stream is not None:
                stream.close()
        _LOGGER.info("Engine %s exited with %s", self.path, proc.returncode)

    def __enter__(self) -> UciEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.quit()

    @property
    def running(self) -> bool:
        return self._proc is not None and self._proc.poll() is None

    # -- Commands -----------------------------------------------------------

    def new_position(self, fen: str) -> None:
        """Reset the engine and load *fen*; returns once it is ready."""
        self._send("ucinewgame")
        self._send(f"position fen {fen}")
        self._send("isready")
        self._wait_for("readyok", self._handshake_timeout_ms)

    def search(self, limits: SearchLimits) -> SearchResult:
        """Run ``go`` and collect ``info`` lines until ``bestmove``.

        When ``limits.timeout_ms`` elapses first the engine is sent ``stop``
        and a failed result with ``error="search timeout"`` is returned. The
        late ``bestmove`` is skipped by the next :meth:`new_position`.
        """
        info: list[str] = []
        self._send(limits.go_command())
        deadline = (
            time.monotonic() + limits.timeout_ms / 1000
            if limits.timeout_ms is not None and limits.timeout_ms > 0
            else None
        )
        while True:
            line = self._next_line(deadline)
            if line is None:
                self._send("stop")
                _LOGGER.warning(
                    "Engine search timed out after %s ms", limits.timeout_ms
                )
                return SearchResult(ok=False, info=tuple(info), error="search timeout")
            if line.startswith("info "):
                info.append(line)
            elif line.startswith("bestmove"):
                parts = line.split()
                best = parts[1] if len(parts) > 1 else NULL_MOVE
                return SearchResult(ok=True, best_move=best, info=tuple(info))

    def best_move(self, fen: str, limits: SearchLimits) -> SearchResult:
        self.new_position(fen)
        return self.search(limits)

    # -- Internals ----------------------------------------------------------

    def _send(self, command: str) -> None:
        proc = self._proc
        if proc is None or proc.poll() is not None:
            raise EngineError(f"Engine {self.path} is not running")
        _LOGGER.debug(">> %s", command)
        try:
            assert proc.stdin is not None
            proc.stdin.write(command + "\n")
            proc.stdin.flush()
        except OSError as exc:
            raise EngineError(f"Engine {self.path} stopped accepting input") from exc

    def _next_line(self, deadline: float | None) -> str | None:
        """Next output line, or ``None`` once *deadline* has passed."""
        timeout = None if deadline is None else max(0.0, deadline - time.monotonic())
        try:
            line = self._lines.get(timeout=timeout)
        except queue.Empty:
            return None
        if line is _EOF:
            self._lines.put(_EOF)
            raise EngineError(f"Engine {self.path} exited unexpectedly")
        return line

    def _wait_for(self, token: str, timeout_ms: int) -> None:
        deadline = time.monotonic() + timeout_ms / 1000
        while True:
            line = self._next_line(deadline)
            if line is None:
                raise EngineError(f"Engine {self.path} did not answer {token!r}")
            if line == token:
                return

    def _pump_stdout(self, stream: IO[str]) -> None:
        for raw in stream:
            line = raw.strip()
            if line:
                _LOGGER.debug("<< %s", line)
                self._lines.put(line)
        self._lines.put(_EOF)

    def _pump_stderr(self, stream: IO[str]) -> None:
        for raw in stream:
            if raw.strip():
                _LOGGER.warning("engine stderr: %s", raw.rstrip())
