"""SAN (Standard Algebraic Notation) for the move log and typed input."""

from __future__ import annotations

import re
from dataclasses import replace

from skirmish.core.enums import MoveFlag, PieceType
from skirmish.core.move import Move
from skirmish.core.move_generator import MoveGenerator
from skirmish.core.piece import Piece
from skirmish.core.position import Position
from skirmish.core.rules import Rules
from skirmish.core.types import FILE_NAMES, RANK_NAMES, file_of, rank_of, square_name

_LETTERS: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_BY_LETTER: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}

_CASTLES: dict[str, MoveFlag] = {
    "O-O": MoveFlag.CASTLE_KINGSIDE,
    "0-0": MoveFlag.CASTLE_KINGSIDE,
    "O-O-O": MoveFlag.CASTLE_QUEENSIDE,
    "0-0-0": MoveFlag.CASTLE_QUEENSIDE,
}

_SAN_RE = re.compile(
    r"(?P<piece>[NBRQK])?"
    r"(?P<file>[a-h])?(?P<rank>[1-8])?"
    r"x?"
    r"(?P<to>[a-h][1-8])"
    r"(?:=(?P<promo>[NBRQ]))?"
)


# ── Writing ──────────────────────────────────────────────────────────────────


def move_to_san(position: Position, move: Move) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    piece = position.board[move.from_sq]
    assert piece is not None

    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        body = "O-O"
    elif move.flag == MoveFlag.CASTLE_QUEENSIDE:
        body = "O-O-O"
    else:
        capture = position.board[move.to_sq] is not None or move.is_en_passant
        if piece.piece_type == PieceType.PAWN:
            prefix = FILE_NAMES[file_of(move.from_sq)] if capture else ""
        else:
            prefix = _LETTERS[piece.piece_type] + _disambiguation(
                position, move, piece
            )
        body = prefix + ("x" if capture else "") + square_name(move.to_sq)
        if move.is_promotion and move.promotion is not None:
            body += "=" + _LETTERS[move.promotion]

    return body + _check_suffix(position, move, piece)


def _disambiguation(position: Position, move: Move, piece: Piece) -> str:
    """File, rank or full origin square when another twin reaches the target."""
    twins = [
        m.from_sq
        for m in MoveGenerator(position).generate_legal_moves(piece.color)
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and position.board[m.from_sq] == piece
    ]
    if not twins:
        return ""
    if all(file_of(sq) != file_of(move.from_sq) for sq in twins):
        return FILE_NAMES[file_of(move.from_sq)]
    if all(rank_of(sq) != rank_of(move.from_sq) for sq in twins):
        return RANK_NAMES[rank_of(move.from_sq)]
    return square_name(move.from_sq)


def _check_suffix(position: Position, move: Move, piece: Piece) -> str:
    opponent = piece.color.opposite
    snapshot = position.snapshot()
    try:
        position.apply_move(move, simulate=True)
        if not Rules.is_in_check(position, opponent):
            return ""
        return "+" if Rules.legal_moves(position, opponent) else "#"
    finally:
        position.restore(snapshot)


# ── Reading ──────────────────────────────────────────────────────────────────


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a legal :class:`Move` for the side to move.

    Check marks and annotation glyphs are ignored; ``0-0`` is accepted for
    ``O-O``. Raises :class:`ValueError` for text that is not SAN, for no
    matching legal move and for an ambiguous one.
    """
    legal = MoveGenerator(position).generate_legal_moves()
    clean = san.strip().rstrip("+#!?")

    if clean in _CASTLES:
        flag = _CASTLES[clean]
        for m in legal:
            if m.flag == flag:
                return m
        raise ValueError(f"Illegal move: {san}")

    match = _SAN_RE.fullmatch(clean)
    if match is None:
        raise ValueError(f"Invalid SAN: {san}")

    piece_type = _BY_LETTER.get(match["piece"] or "", PieceType.PAWN)
    to_name = match["to"]
    from_file = FILE_NAMES.index(match["file"]) if match["file"] else None
    from_rank = RANK_NAMES.index(match["rank"]) if match["rank"] else None
    mover = Piece(position.side_to_move, piece_type)
    if piece_type == PieceType.PAWN and from_file is None:
        # A pawn without a file prefix only pushes along its own file.
        from_file = FILE_NAMES.index(to_name[0])

    candidates = [
        m
        for m in legal
        if square_name(m.to_sq) == to_name
        and position.board[m.from_sq] == mover
        and (from_file is None or file_of(m.from_sq) == from_file)
        and (from_rank is None or rank_of(m.from_sq) == from_rank)
    ]
    if not candidates:
        raise ValueError(f"Illegal move: {san}")
    if len(candidates) > 1:
        raise ValueError(f"Ambiguous move: {san} → {candidates}")

    move = candidates[0]
    if move.is_promotion and match["promo"]:
        # The generator lists promotions with a queen only.
        move = replace(move, promotion=_BY_LETTER[match["promo"]])
    return move
