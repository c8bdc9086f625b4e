"""FEN parsing and serialization."""

from __future__ import annotations

from skirmish.core.board import Board
from skirmish.core.enums import CastlingRights, Color
from skirmish.core.errors import FenError
from skirmish.core.piece import Piece
from skirmish.core.position import Position
from skirmish.core.types import Square, make_square, parse_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def _parse_placement(placement: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise FenError(
            f"Invalid FEN board (must contain 8 ranks): {placement!r}",
            field="placement",
            value=placement,
        )
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch in "12345678":
                file += int(ch)
            else:
                try:
                    piece = Piece.from_char(ch)
                except ValueError:
                    raise FenError(
                        f"Invalid FEN piece character {ch!r} in rank {rank + 1}",
                        field="placement",
                        value=placement,
                    ) from None
                if file < 8:
                    board[make_square(file, rank)] = piece
                file += 1
        if file != 8:
            raise FenError(
                f"Invalid FEN rank width ({file} squares) in rank {rank + 1}",
                field="placement",
                value=placement,
            )
    return board


def _parse_side(side_part: str) -> Color:
    if side_part == "w":
        return Color.WHITE
    if side_part == "b":
        return Color.BLACK
    raise FenError(
        f"Invalid FEN side-to-move field: {side_part!r}", field="side", value=side_part
    )


def _parse_castling(castling_part: str) -> CastlingRights:
    castling = CastlingRights.NONE
    if castling_part == "-":
        return castling
    seen: set[str] = set()
    for ch in castling_part:
        right = _CASTLING_CHARS.get(ch)
        if right is None or ch in seen:
            raise FenError(
                f"Invalid FEN castling field: {castling_part!r}",
                field="castling",
                value=castling_part,
            )
        seen.add(ch)
        castling |= right
    return castling


def _parse_en_passant(ep_part: str) -> Square | None:
    if ep_part == "-":
        return None
    try:
        return parse_square(ep_part)
    except ValueError:
        raise FenError(
            f"Invalid FEN en-passant square: {ep_part!r}",
            field="en_passant",
            value=ep_part,
        ) from None


def _parse_counter(text: str, field: str, minimum: int) -> int:
    if not (text.isascii() and text.isdigit()) or int(text) < minimum:
        raise FenError(
            f"Invalid FEN {field} counter: {text!r}", field=field, value=text
        )
    return int(text)


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    The halfmove and fullmove fields may be omitted (defaults 0 and 1).
    Raises :class:`FenError` naming the first malformed field.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise FenError(
            f"Invalid FEN (need 4-6 fields): {fen!r}", field="fields", value=fen
        )

    board = _parse_placement(parts[0])
    side = _parse_side(parts[1])
    castling = _parse_castling(parts[2])
    ep = _parse_en_passant(parts[3])
    halfmove = _parse_counter(parts[4], "halfmove", 0) if len(parts) > 4 else 0
    fullmove = _parse_counter(parts[5], "fullmove", 1) if len(parts) > 5 else 1

    return Position(board, side, castling, ep, halfmove, fullmove)


def is_valid_fen(fen: str) -> bool:
    """Whether *fen* is well-formed; says nothing about reachability."""
    try:
        position_from_fen(fen)
    except FenError:
        return False
    return True


def placement_to_fen(board: Board) -> str:
    """Serialise only the piece-placement field."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    board_str = placement_to_fen(pos.board)
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    castling_str = "".join(
        ch for ch, right in _CASTLING_CHARS.items() if pos.castling & right
    )
    if not castling_str:
        castling_str = "-"

    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    counters = f"{pos.halfmove_clock} {pos.fullmove_number}"
    return f"{board_str} {side_str} {castling_str} {ep_str} {counters}"
