"""Tests for FEN, UCI move text and SAN notation."""

import pytest

from skirmish.core.enums import (
    CastlingRights,
    Color,
    IllegalReason,
    MoveFlag,
    PieceType,
)
from skirmish.core.errors import FenError, IllegalEngineMoveError, IllegalMoveError
from skirmish.core.move import Move
from skirmish.core.move_generator import MoveGenerator
from skirmish.core.notation import (
    STARTING_FEN,
    is_valid_fen,
    move_from_uci,
    move_to_san,
    parse_san,
    parse_uci_move,
    placement_to_fen,
    position_from_fen,
    position_to_fen,
)
from skirmish.core.piece import Piece
from skirmish.core.types import A7, A8, E1, E2, E3, E4, E8, G1, parse_square


class TestFenParsing:
    def test_starting_position(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert pos.side_to_move == Color.WHITE
        assert pos.castling == CastlingRights.ALL
        assert pos.en_passant is None
        assert (pos.halfmove_clock, pos.fullmove_number) == (0, 1)
        assert pos.board[E1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[E8] == Piece(Color.BLACK, PieceType.KING)

    def test_en_passant_square(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        assert position_from_fen(fen).en_passant == E3

    def test_partial_castling(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w Kq - 0 1")
        assert pos.castling == (
            CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_QUEENSIDE
        )

    def test_counters_may_be_omitted(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4K3 b - -")
        assert pos.side_to_move == Color.BLACK
        assert (pos.halfmove_clock, pos.fullmove_number) == (0, 1)

    def test_extra_whitespace_tolerated(self) -> None:
        pos = position_from_fen("  4k3/8/8/8/8/8/8/4K3   w  -  -  3  7 ")
        assert (pos.halfmove_clock, pos.fullmove_number) == (3, 7)

    def test_not_a_fen(self) -> None:
        with pytest.raises(FenError) as info:
            position_from_fen("not a fen")
        assert info.value.field == "fields"

    @pytest.mark.parametrize(
        ("fen", "field"),
        [
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP w KQkq - 0 1", "placement"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBN w KQkq - 0 1", "placement"),
            ("rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", "placement"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNRR w KQkq - 0 1", "placement"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBXKBNR w KQkq - 0 1", "placement"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1", "side"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQxq - 0 1", "castling"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KKq - 0 1", "castling"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e9 0 1", "en_passant"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1", "halfmove"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 0", "fullmove"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 x", "fullmove"),
            ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 9", "fields"),
        ],
    )
    def test_malformed_field_named(self, fen: str, field: str) -> None:
        with pytest.raises(FenError) as info:
            position_from_fen(fen)
        assert info.value.field == field
        assert isinstance(info.value, ValueError)

    def test_is_valid_fen(self) -> None:
        assert is_valid_fen(STARTING_FEN)
        assert not is_valid_fen("not a fen")

    def test_kingless_board_is_well_formed(self) -> None:
        # Reachability is not checked; the editor needs such boards.
        pos = position_from_fen("8/8/8/8/8/8/8/8 w - - 0 1")
        assert pos.board.find_king(Color.WHITE) is None


class TestFenSerialisation:
    @pytest.mark.parametrize(
        "fen",
        [
            STARTING_FEN,
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
            "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
            "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
            "4k3/8/8/8/8/8/8/4K3 b - - 12 40",
        ],
    )
    def test_roundtrip(self, fen: str) -> None:
        assert position_to_fen(position_from_fen(fen)) == fen

    def test_omitted_counters_written_back(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4K3 w - -")
        assert position_to_fen(pos) == "4k3/8/8/8/8/8/8/4K3 w - - 0 1"

    def test_after_e4(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.apply_move(Move(E2, E4, MoveFlag.DOUBLE_PAWN))
        assert position_to_fen(pos) == (
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        )

    def test_placement_only(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert placement_to_fen(pos.board) == STARTING_FEN.split()[0]


class TestUciMoveText:
    def test_parse_plain_move(self) -> None:
        parsed = parse_uci_move("e2e4")
        assert (parsed.from_sq, parsed.to_sq, parsed.promotion) == (E2, E4, None)

    def test_parse_promotion(self) -> None:
        parsed = parse_uci_move("a7a8n\n")
        assert (parsed.from_sq, parsed.to_sq, parsed.promotion) == (A7, A8, "n")

    @pytest.mark.parametrize("text", ["(none)", "", "e2", "e2e9", "i2e4", "a7a8k"])
    def test_parse_rejects(self, text: str) -> None:
        with pytest.raises(IllegalEngineMoveError) as info:
            parse_uci_move(text)
        assert info.value.reason is None

    def test_move_from_uci_classifies(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert move_from_uci(pos, "e2e4") == Move(E2, E4, MoveFlag.DOUBLE_PAWN)

    def test_move_from_uci_underpromotion(self) -> None:
        pos = position_from_fen("8/P7/8/8/8/8/8/k1K5 w - - 0 1")
        move = move_from_uci(pos, "a7a8r")
        assert move.flag == MoveFlag.PROMOTION
        assert move.promotion == PieceType.ROOK

    def test_move_from_uci_illegal(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        with pytest.raises(IllegalEngineMoveError) as info:
            move_from_uci(pos, "e2e5")
        assert info.value.reason == IllegalReason.BAD_PAWN_MOVE
        assert info.value.text == "e2e5"
        assert isinstance(info.value, IllegalMoveError)

    def test_move_from_uci_wrong_side(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        with pytest.raises(IllegalEngineMoveError) as info:
            move_from_uci(pos, "e7e5")
        assert info.value.reason == IllegalReason.NOT_YOUR_TURN

    @pytest.mark.parametrize("text", ["e2e4q", "g1f3n"])
    def test_move_from_uci_rejects_stray_promotion(self, text: str) -> None:
        pos = position_from_fen(STARTING_FEN)
        with pytest.raises(IllegalEngineMoveError, match="non-promotion") as info:
            move_from_uci(pos, text)
        assert info.value.text == text
        assert position_to_fen(pos) == STARTING_FEN


class TestSAN:
    def test_pawn_push(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert move_to_san(pos, Move(E2, E4, MoveFlag.DOUBLE_PAWN)) == "e4"

    def test_knight_move(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert move_to_san(pos, Move(G1, parse_square("f3"))) == "Nf3"

    def test_san_leaves_position_untouched(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        move_to_san(pos, Move(G1, parse_square("f3")))
        assert position_to_fen(pos) == STARTING_FEN

    def test_parse_san_e4(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        move = parse_san(pos, "e4")
        assert move.to_sq == E4
        assert move.flag == MoveFlag.DOUBLE_PAWN

    def test_parse_san_illegal_raises(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        with pytest.raises(ValueError, match="Illegal"):
            parse_san(pos, "Ke5")

    def test_san_roundtrip(self) -> None:
        """parse_san(move_to_san(m)) should return the same move."""
        pos = position_from_fen(
            "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
        )
        for move in MoveGenerator(pos).generate_legal_moves():
            san = move_to_san(pos, move)
            assert parse_san(pos, san) == move, f"Roundtrip failed for {san}"

    def test_castling_both_sides(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        assert move_to_san(pos, Move(E1, G1, MoveFlag.CASTLE_KINGSIDE)) == "O-O"
        assert (
            move_to_san(pos, Move(E1, parse_square("c1"), MoveFlag.CASTLE_QUEENSIDE))
            == "O-O-O"
        )
        assert parse_san(pos, "0-0").flag == MoveFlag.CASTLE_KINGSIDE

    def test_knight_disambiguation(self) -> None:
        pos = position_from_fen("7k/8/8/8/8/8/8/K1N3N1 w - - 0 1")
        assert move_to_san(pos, Move(parse_square("c1"), E2)) == "Nce2"
        with pytest.raises(ValueError, match="Ambiguous"):
            parse_san(pos, "Ne2")
        assert parse_san(pos, "Nce2").from_sq == parse_square("c1")

    def test_rank_disambiguation(self) -> None:
        pos = position_from_fen("7k/8/8/8/8/8/R7/4R2K w - - 0 1")
        move = parse_san(pos, "R1e2")
        assert (move.from_sq, move.to_sq) == (E1, E2)

    def test_en_passant_is_capture(self) -> None:
        pos = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        move = Move(parse_square("e5"), parse_square("d6"), MoveFlag.EN_PASSANT)
        assert move_to_san(pos, move) == "exd6"

    def test_pawn_push_text_never_captures(self) -> None:
        single = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        with pytest.raises(ValueError, match="Illegal"):
            parse_san(single, "d6")
        assert parse_san(single, "exd6").flag == MoveFlag.EN_PASSANT

        double = position_from_fen("4k3/8/8/2PpP3/8/8/8/4K3 w - d6 0 1")
        with pytest.raises(ValueError, match="Illegal"):
            parse_san(double, "d6")
        assert parse_san(double, "cxd6").from_sq == parse_square("c5")

    def test_promotion_with_check(self) -> None:
        pos = position_from_fen("7k/6P1/8/8/8/8/8/4K3 w - - 0 1")
        move = parse_san(pos, "g8=Q+")
        assert move.flag == MoveFlag.PROMOTION
        assert move.promotion == PieceType.QUEEN
        assert move_to_san(pos, move) == "g8=Q+"

    def test_underpromotion_parsed(self) -> None:
        pos = position_from_fen("7k/6P1/8/8/8/8/8/4K3 w - - 0 1")
        assert parse_san(pos, "g8=N").promotion == PieceType.KNIGHT

    def test_mate_suffix(self) -> None:
        pos = position_from_fen("3rkr2/3p1p2/8/8/8/8/8/R5K1 w - - 0 1")
        assert move_to_san(pos, Move(parse_square("a1"), E1)) == "Re1#"
