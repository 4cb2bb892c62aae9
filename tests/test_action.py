"""
Unit Tests for Reversible Actions

Tests that actions describe plies faithfully, agree with GameState.apply()
and can be undone exactly.
"""

import pytest

from shogi_engine.errors import IllegalMove
from shogi_engine.game.action import Action, ActionKind, perform_action
from shogi_engine.game.piece import Location, PieceKind
from shogi_engine.game.state import GameState

PROMOTION = "K----" + "-----" * 2 + "--P--" + "-----" + "--g-k"


@pytest.fixture
def state():
    return GameState.from_layout()


@pytest.fixture
def promoted_pawn():
    """Player 1 to move, a promoted player 0 pawn on c5 next to a gold."""
    s = GameState.from_layout(PROMOTION)
    s.apply(s.piece_at(17).id, 22)
    return s


class TestFromState:
    """Tests for building actions from a state."""

    def test_quiet_move(self, state):
        action = Action.from_state(state, 2, 7)
        assert action.kind is ActionKind.MOVE
        assert action.source == 2
        assert action.destination == 7
        assert not action.promotes

    def test_capture(self, state):
        action = Action.from_state(state, 5, 16)
        assert action.kind is ActionKind.MOVE_WITH_CAPTURE
        assert action.captured_id == 8
        assert action.captured_kind is PieceKind.PAWN
        assert action.reserve_slot == 0

    def test_promotion_is_recorded(self):
        s = GameState.from_layout(PROMOTION)
        action = Action.from_state(s, s.piece_at(17).id, 22)
        assert action.promotes

    def test_drop(self, promoted_pawn):
        s = promoted_pawn
        s.apply(s.piece_at(27).id, 22)  # gold takes the promoted pawn
        s.apply(0, 1)
        pawn = s.reserve_pieces(1)[0]

        action = Action.from_state(s, pawn.id, 6)
        assert action.kind is ActionKind.DROP
        assert action.reserve_slot == pawn.slot
        assert action.source is None

    def test_illegal(self, state):
        with pytest.raises(IllegalMove):
            Action.from_state(state, 5, 21)
        with pytest.raises(IllegalMove):
            Action.from_state(state, 8, 11)


class TestUndo:
    """Tests for the inverse action."""

    def test_undo_is_an_involution(self, state):
        for piece_id, destination in state.legal_moves(0):
            action = Action.from_state(state, piece_id, destination)
            assert action.undo().undo() == action

    def test_drop_inverts_to_reserve(self, promoted_pawn):
        s = promoted_pawn
        s.apply(s.piece_at(27).id, 22)
        s.apply(0, 1)
        pawn = s.reserve_pieces(1)[0]

        action = Action.from_state(s, pawn.id, 6)
        inverse = action.undo()
        assert inverse.kind is ActionKind.TO_RESERVE
        assert inverse.source == 6
        assert inverse.destination is None
        assert inverse.as_move() is None

    def test_capture_inverse_keeps_kind(self, state):
        action = Action.from_state(state, 5, 16)
        inverse = action.undo()
        assert inverse.kind is ActionKind.MOVE_WITH_CAPTURE
        assert inverse.reverse


class TestPerform:
    """Tests for perform_action."""

    def test_matches_apply(self, state):
        """Every legal move performs exactly like GameState.apply()."""
        for piece_id, destination in state.legal_moves(0):
            via_action = perform_action(state.copy(), Action.from_state(state, piece_id, destination))
            via_apply = state.copy().apply(piece_id, destination)
            assert via_action == via_apply, f"Mismatch for piece {piece_id} to {destination}"

    def test_perform_then_undo_restores(self, state):
        for piece_id, destination in state.legal_moves(0):
            action = Action.from_state(state, piece_id, destination)
            s = perform_action(state.copy(), action)
            perform_action(s, action.undo())
            assert s == state, f"Undo failed for piece {piece_id} to {destination}"

    def test_promotion_undo_demotes(self):
        s = GameState.from_layout(PROMOTION)
        before = s.copy()
        action = Action.from_state(s, s.piece_at(17).id, 22)

        perform_action(s, action)
        assert s.piece_at(22).kind is PieceKind.PAWN_PRO

        perform_action(s, action.undo())
        assert s == before
        assert s.piece_at(17).kind is PieceKind.PAWN

    def test_capture_of_promoted_piece_undo(self, promoted_pawn):
        """Undoing a capture gives the victim back its promoted kind."""
        s = promoted_pawn
        before = s.copy()
        action = Action.from_state(s, s.piece_at(27).id, 22)

        perform_action(s, action)
        victim = s.piece(action.captured_id)
        assert victim.kind is PieceKind.PAWN
        assert victim.location is Location.IN_RESERVE
        s.check_invariants()

        perform_action(s, action.undo())
        assert s == before
        assert s.piece_at(22).kind is PieceKind.PAWN_PRO
        assert s.piece_at(22).player == 0

    def test_drop_and_return(self, promoted_pawn):
        s = promoted_pawn
        s.apply(s.piece_at(27).id, 22)
        s.apply(0, 1)
        before = s.copy()
        pawn = s.reserve_pieces(1)[0]

        action = Action.from_state(s, pawn.id, 6)
        perform_action(s, action)
        assert s.piece(pawn.id).location is Location.ON_BOARD
        s.check_invariants()

        perform_action(s, action.undo())
        assert s == before

    def test_without_advancing_player(self, state):
        action = Action.from_state(state, 2, 7)
        perform_action(state, action, advance_player=False)
        assert state.current_player == 0
