"""Tests for match settings and the move-budget clamp."""

import pytest

from skirmish.core.enums import Color
from skirmish.game.settings import DEFAULT_MAX_MOVES, MatchSettings, clamp_max_moves


class TestClampMaxMoves:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1, 1),
            (6, 6),
            (20, 20),
            (21, 20),
            (500, 20),
            (-3, 1),
            (0, DEFAULT_MAX_MOVES),
            (None, DEFAULT_MAX_MOVES),
            ("12", 12),
            ("", DEFAULT_MAX_MOVES),
            ("many", DEFAULT_MAX_MOVES),
        ],
    )
    def test_clamp(self, value: object, expected: int) -> None:
        assert clamp_max_moves(value) == expected  # type: ignore[arg-type]


class TestMatchSettings:
    def test_defaults(self) -> None:
        settings = MatchSettings()
        assert settings.first_move == Color.WHITE
        assert settings.player_side == Color.WHITE
        assert settings.engine_side == Color.BLACK
        assert settings.max_moves == 6
        assert settings.base_movetime_ms == 1200

    def test_max_moves_clamped(self) -> None:
        assert MatchSettings(max_moves=99).max_moves == 20

    def test_strength_preset(self) -> None:
        settings = MatchSettings(engine_strength="medium", player_side=Color.BLACK)
        assert settings.base_movetime_ms == 800
        assert settings.engine_side == Color.WHITE

    def test_unknown_strength(self) -> None:
        with pytest.raises(ValueError, match="Unknown engine strength"):
            MatchSettings(engine_strength="grandmaster")
