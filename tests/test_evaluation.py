"""
Unit Tests for Evaluation Module

Tests for material evaluation and terminal scoring.
"""

import numpy as np
import pytest

from shogi_engine.evaluation import Evaluator, MaterialEvaluator, PIECE_VALUES, WIN_SCORE
from shogi_engine.game.piece import PieceKind
from shogi_engine.game.state import GameState, Status

ROOK_VS_KING = "K---R" + "-----" * 3 + "p----" + "----k"


class TestMaterialEvaluator:
    """Tests for the material evaluator."""

    @pytest.fixture
    def evaluator(self):
        """Create evaluator for testing."""
        return MaterialEvaluator()

    def test_starting_position_is_equal(self, evaluator):
        state = GameState.from_layout()
        assert evaluator.evaluate(state, 0) == 0.0
        assert evaluator.evaluate(state, 1) == 0.0

    def test_piece_values(self):
        assert PIECE_VALUES[PieceKind.KING] == 0.0
        assert PIECE_VALUES[PieceKind.PAWN] == 1.0
        assert PIECE_VALUES[PieceKind.ROOK_PRO] == 9.0
        assert PIECE_VALUES.shape == (len(PieceKind),)

    def test_capture_swings_by_twice_the_value(self, evaluator):
        """The captured pawn leaves one side's total and joins the other's."""
        state = GameState.from_layout()
        state.apply(5, 16)
        assert evaluator.evaluate(state, 0) == 2.0
        assert evaluator.evaluate(state, 1) == -2.0

    def test_material_totals(self, evaluator):
        state = GameState.from_layout()
        totals = evaluator.material(state)
        # S G K G S P P P = 4 + 5 + 0 + 5 + 4 + 3
        np.testing.assert_allclose(totals, [21.0, 21.0])

    def test_custom_values(self):
        values = np.ones(len(PieceKind), dtype=np.float32)
        evaluator = MaterialEvaluator(piece_values=values)
        state = GameState.from_layout()
        state.apply(5, 16)
        assert evaluator.evaluate(state, 0) == 2.0


class TestTerminalScoring:
    """Tests for evaluate_terminal."""

    @pytest.fixture
    def won(self):
        """Player 0 has captured the enemy king."""
        state = GameState.from_layout(ROOK_VS_KING)
        state.apply(state.piece_at(4).id, 29)
        state.update_status()
        return state

    def test_ongoing_is_not_terminal(self):
        state = GameState.from_layout()
        assert MaterialEvaluator().evaluate_terminal(state, 0) is None

    def test_win_and_loss(self, won):
        evaluator = MaterialEvaluator()
        assert won.status is Status.WIN_PLAYER_0
        assert evaluator.evaluate_terminal(won, 0, 1) == WIN_SCORE - 1
        assert evaluator.evaluate_terminal(won, 1, 1) == -(WIN_SCORE - 1)

    def test_faster_win_scores_higher(self, won):
        """Wins decay and losses improve with distance from the root."""
        evaluator = MaterialEvaluator()
        assert evaluator.evaluate_terminal(won, 0, 1) > evaluator.evaluate_terminal(won, 0, 3)
        assert evaluator.evaluate_terminal(won, 1, 1) < evaluator.evaluate_terminal(won, 1, 3)

    def test_win_outweighs_material(self, won):
        evaluator = MaterialEvaluator()
        total = float(evaluator.material(won).sum())
        assert evaluator.evaluate_terminal(won, 0, 10) > total
        assert evaluator.evaluate_terminal(won, 1, 10) < -total

    def test_draw_scores_zero(self):
        state = GameState.from_layout("KB--bk", columns=1, rows=6)
        state.update_status()
        assert MaterialEvaluator().evaluate_terminal(state, 0, 2) == 0.0

    def test_custom_win_score(self, won):
        evaluator = MaterialEvaluator(win_score=50.0)
        assert evaluator.evaluate_terminal(won, 0) == 50.0


class TestEvaluatorInterface:
    """Tests for the abstract interface."""

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            Evaluator()

    def test_subclass_must_implement_evaluate(self):
        class Incomplete(Evaluator):
            pass

        with pytest.raises(TypeError):
            Incomplete()

    def test_repr(self):
        assert repr(MaterialEvaluator()) == "MaterialEvaluator()"
