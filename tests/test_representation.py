"""
Unit Tests for Board Representation

Tests for cell index helpers and text rendering.
"""

from shogi_engine.board.representation import (
    cell_name,
    coord_to_index,
    index_to_coord,
    render_state,
)
from shogi_engine.game.state import GameState


class TestCoordinates:
    """Tests for index/coordinate conversion."""

    def test_index_to_coord(self):
        assert index_to_coord(0, 5) == (0, 0)
        assert index_to_coord(7, 5) == (2, 1)
        assert index_to_coord(29, 5) == (4, 5)

    def test_roundtrip_every_cell(self):
        """Every cell of a 5x6 board maps back to itself."""
        for index in range(30):
            column, row = index_to_coord(index, 5)
            assert coord_to_index(column, row, 5) == index

    def test_cell_name(self):
        assert cell_name(0, 5) == "a1"
        assert cell_name(16, 5) == "b4"
        assert cell_name(29, 5) == "e6"


class TestRendering:
    """Tests for render_state."""

    def test_default_layout(self):
        """The starting position prints player 1 on top and empty reserves."""
        text = render_state(GameState.from_layout())
        lines = text.splitlines()

        assert lines[1] == "6 | s | g | k | g | s |"
        assert "1 | S | G | K | G | S |" in lines
        assert "reserve 0: -" in lines
        assert "reserve 1: -" in lines
        assert lines[-1] == "to move: 0 (ONGOING)"

    def test_reserve_is_listed(self):
        """A captured piece shows up in the capturer's reserve."""
        state = GameState.from_layout()
        state.apply(5, 16)  # pawn takes pawn
        text = str(state)

        assert "reserve 0: P" in text
        assert "to move: 1" in text
