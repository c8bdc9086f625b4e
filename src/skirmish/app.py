"""Console entry point: a short match against an external UCI engine."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence

from skirmish.core.enums import Color
from skirmish.core.errors import EngineError, IllegalEngineMoveError
from skirmish.core.legality import MoveValidator
from skirmish.core.move import Move
from skirmish.core.notation.san import parse_san
from skirmish.core.notation.uci import parse_uci_move
from skirmish.core.position import Position
from skirmish.engine.search import DEFAULT_STRENGTH, ENGINE_STRENGTHS
from skirmish.engine.uci_process import UciEngine
from skirmish.game.controller import MatchController
from skirmish.game.interfaces import MatchPhase
from skirmish.game.player import EnginePlayer, HumanPlayer
from skirmish.game.settings import DEFAULT_MAX_MOVES, MatchSettings, clamp_max_moves
from skirmish.game.state import MatchResult, MatchState, MoveRecord

_LOGGER = logging.getLogger(__name__)

_COLORS = {"white": Color.WHITE, "black": Color.BLACK}
_RESIGN_WORDS = frozenset({"resign", "quit"})

ReadLine = Callable[[], "str | None"]
Write = Callable[[str], None]


def parse_human_move(position: Position, text: str) -> Move:
    """Accept ``g1f3`` / ``e7e8q`` or SAN such as ``Nf3``.

    Raises :class:`ValueError` (``IllegalMoveError`` included) on rejection.
    """
    text = text.strip()
    try:
        parsed = parse_uci_move(text)
    except IllegalEngineMoveError:
        return parse_san(position, text)
    return MoveValidator(position).validate(
        parsed.from_sq, parsed.to_sq, promotion=parsed.promotion
    )


def format_record(record: MoveRecord, state: MatchState) -> str:
    number = state.move_counts[record.color]
    line = f"{record.color.name.title()} {number}: {record.san}"
    if record.points:
        line += f" (+{record.points})"
    return line


def format_status(state: MatchState, human: Color) -> str:
    max_moves = state.settings.max_moves
    turn = "Your" if state.side_to_move == human else "Engine"
    return (
        f"{turn} turn | Moves: W {state.move_counts[Color.WHITE]}/{max_moves} "
        f"B {state.move_counts[Color.BLACK]}/{max_moves} | "
        f"Score W {state.scores[Color.WHITE]} B {state.scores[Color.BLACK]}"
    )


def run_match(
    controller: MatchController, read_line: ReadLine, write: Write
) -> MatchResult | None:
    """Drive a started match from text input until it ends.

    Engine moves are played synchronously inside the controller, so the
    loop only ever waits on the human. End of input resigns.
    """
    state = controller.state
    while not state.is_game_over:
        player = controller.current_player
        if player is None or not player.is_human:
            _LOGGER.error("No human move expected in phase %s", state.phase.name)
            break
        if state.phase != MatchPhase.AWAITING_MOVE:
            break

        write(state.position.board.render(flipped=player.color == Color.BLACK))
        write(format_status(state, player.color))
        line = read_line()
        if line is None or line.strip().lower() in _RESIGN_WORDS:
            controller.resign(player.color)
            break
        if not line.strip():
            continue
        try:
            move = parse_human_move(state.position, line)
            controller.submit_move(move.from_sq, move.to_sq, move.promotion)
        except ValueError as exc:
            write(f"Illegal move: {exc}")

    result = state.result
    if result is not None:
        write(str(result))
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skirmish",
        description="Play a short scored chess match against a UCI engine.",
    )
    parser.add_argument("--engine", required=True, help="Path to the UCI engine")
    parser.add_argument("--fen", default=None, help="Start position (default: initial)")
    parser.add_argument(
        "--side", choices=tuple(_COLORS), default="white", help="Colour you play"
    )
    parser.add_argument(
        "--first", choices=tuple(_COLORS), default="white", help="Side that moves first"
    )
    parser.add_argument(
        "--moves",
        type=clamp_max_moves,
        default=DEFAULT_MAX_MOVES,
        help="Moves per side, 1-20 (default: %(default)s)",
    )
    parser.add_argument(
        "--strength",
        choices=tuple(ENGINE_STRENGTHS),
        default=DEFAULT_STRENGTH,
        help="Engine think time preset",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _read_stdin() -> str | None:
    try:
        return input("> ")
    except EOFError:
        return None


def main(argv: Sequence[str] | None = None) -> int:
    """Launch a console match; returns the process exit status."""
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = MatchSettings(
        first_move=_COLORS[args.first],
        player_side=_COLORS[args.side],
        max_moves=args.moves,
        engine_strength=args.strength,
        engine_path=args.engine,
    )

    try:
        engine = UciEngine(args.engine)
    except EngineError as exc:
        _LOGGER.error("%s", exc)
        return 1

    with engine:
        controller = MatchController()
        controller.events.on_move.append(
            lambda record, state: print(format_record(record, state))
        )
        human = HumanPlayer(settings.player_side, "You")
        bot = EnginePlayer(
            settings.engine_side,
            engine,
            controller.engine_replied,
            controller.engine_failed,
            base_movetime_ms=settings.base_movetime_ms,
        )
        players = {human.color: human, bot.color: bot}
        try:
            controller.new_match(
                players[Color.WHITE], players[Color.BLACK], settings, args.fen
            )
        except ValueError as exc:
            _LOGGER.error("Cannot start match: %s", exc)
            return 2
        run_match(controller, _read_stdin, print)
    return 0


if __name__ == "__main__":
    sys.exit(main())
