"""
Reversible Actions

An Action is a richer description of a ply than a Move: it records where the
piece came from, what was captured and whether the piece promoted, so it can
be undone. It is an alternate, auditable mutation path; the search uses
GameState.apply() semantics through child_nodes() instead.

Action Kinds:
    - MOVE: on-board move to an empty cell
    - MOVE_WITH_CAPTURE: on-board move onto an enemy piece
    - DROP: reserve piece placed on an empty cell
    - TO_RESERVE: on-board piece returned to its owner's reserve
      (the inverse of DROP)

undo() returns the structurally inverse action, and undo() of that returns
the original again. Performing an action and then its undo() restores the
state exactly, including the last move.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from shogi_engine.errors import IllegalMove
from shogi_engine.game.piece import Location, PieceKind, demoted, promoted
from shogi_engine.game.state import EMPTY, GameState, Move


class ActionKind(Enum):
    MOVE = 0
    MOVE_WITH_CAPTURE = 1
    DROP = 2
    TO_RESERVE = 3


@dataclass(frozen=True)
class Action:
    """
    A single reversible ply.

    Attributes:
        kind: What the action does
        piece_id: The piece that moves
        source: Board cell the piece leaves (None for a drop)
        destination: Board cell the piece arrives on (None for TO_RESERVE)
        captured_id: Piece taken by a capture
        reserve_slot: Reserve slot involved (dropped from, or where the
            captured / returned piece goes)
        promotes: True if the moving piece promotes on arrival
        captured_kind: Kind of the captured piece before it was demoted
        prior_move: The state's last_move before this action
        reverse: True when this action replays its forward form backwards
    """
    kind: ActionKind
    piece_id: int
    source: Optional[int] = None
    destination: Optional[int] = None
    captured_id: Optional[int] = None
    reserve_slot: Optional[int] = None
    promotes: bool = False
    captured_kind: Optional[PieceKind] = None
    prior_move: Optional[Move] = None
    reverse: bool = False

    @classmethod
    def from_state(cls, state: GameState, piece_id: int, destination: int) -> "Action":
        """
        Describe the ply that state.apply(piece_id, destination) would perform.

        Raises:
            IllegalMove: If the move is not legal for the player to move
        """
        if not 0 <= piece_id < len(state.pieces):
            raise IllegalMove(piece_id, destination, "no such piece")
        piece = state.piece(piece_id)
        if piece.player != state.current_player:
            raise IllegalMove(piece_id, destination, "not the player to move")
        if destination not in state.moves_for(piece_id):
            raise IllegalMove(piece_id, destination)

        if piece.location is Location.IN_RESERVE:
            return cls(
                ActionKind.DROP,
                piece_id,
                destination=destination,
                reserve_slot=piece.slot,
                prior_move=state.last_move,
            )

        promotes = (
            destination // state.columns in state.promotion_rows(piece.player)
            and promoted(piece.kind) is not None
        )
        target = state.piece_at(destination)
        if target is None:
            return cls(
                ActionKind.MOVE,
                piece_id,
                source=piece.slot,
                destination=destination,
                promotes=promotes,
                prior_move=state.last_move,
            )

        return cls(
            ActionKind.MOVE_WITH_CAPTURE,
            piece_id,
            source=piece.slot,
            destination=destination,
            captured_id=target.id,
            reserve_slot=state._free_reserve_slot(piece.player),
            promotes=promotes,
            captured_kind=target.kind,
            prior_move=state.last_move,
        )

    def undo(self) -> "Action":
        """Return the structurally inverse action."""
        if self.kind is ActionKind.MOVE:
            return replace(
                self, source=self.destination, destination=self.source, reverse=not self.reverse
            )
        if self.kind is ActionKind.DROP:
            return replace(
                self,
                kind=ActionKind.TO_RESERVE,
                source=self.destination,
                destination=None,
                reverse=not self.reverse,
            )
        if self.kind is ActionKind.TO_RESERVE:
            return replace(
                self,
                kind=ActionKind.DROP,
                source=None,
                destination=self.source,
                reverse=not self.reverse,
            )
        return replace(self, reverse=not self.reverse)

    def as_move(self) -> Optional[Move]:
        """The Move this action records, None for TO_RESERVE."""
        if self.destination is None:
            return None
        return Move(self.piece_id, self.destination, self.kind is ActionKind.MOVE_WITH_CAPTURE)


def _place(state: GameState, piece_id: int, cell: int, kind: PieceKind, player: int) -> None:
    state.pieces[piece_id] = replace(
        state.pieces[piece_id], kind=kind, player=player, location=Location.ON_BOARD, slot=cell
    )
    state.board[cell] = piece_id


def _reserve(state: GameState, piece_id: int, slot: int, kind: PieceKind, player: int) -> None:
    state.pieces[piece_id] = replace(
        state.pieces[piece_id], kind=kind, player=player, location=Location.IN_RESERVE, slot=slot
    )
    state.reserves[player][slot] = piece_id


def perform_action(state: GameState, action: Action, advance_player: bool = True) -> GameState:
    """
    Apply an action (forward or reversed) to a state in place.

    The action must have been built from this state (or be the undo() of an
    action just performed on it); no legality check is made here.

    Args:
        state: State to mutate
        action: Action to perform
        advance_player: Flip the player to move afterwards

    Returns:
        The mutated state
    """
    piece = state.piece(action.piece_id)

    if action.kind is ActionKind.DROP:
        state.reserves[piece.player][action.reserve_slot] = EMPTY
        _place(state, piece.id, action.destination, piece.kind, piece.player)

    elif action.kind is ActionKind.TO_RESERVE:
        state.board[action.source] = EMPTY
        _reserve(state, piece.id, action.reserve_slot, piece.kind, piece.player)

    elif action.kind is ActionKind.MOVE:
        state.board[action.source] = EMPTY
        kind = piece.kind
        if action.promotes:
            kind = (demoted(kind) if action.reverse else promoted(kind)) or kind
        _place(state, piece.id, action.destination, kind, piece.player)

    elif not action.reverse:
        captured = state.piece(action.captured_id)
        state.board[action.destination] = EMPTY
        _reserve(state, captured.id, action.reserve_slot, demoted(captured.kind) or captured.kind, piece.player)
        state.board[action.source] = EMPTY
        kind = (promoted(piece.kind) if action.promotes else None) or piece.kind
        _place(state, piece.id, action.destination, kind, piece.player)

    else:
        # Move the capturer back, then return the captured piece to its owner.
        state.board[action.destination] = EMPTY
        kind = (demoted(piece.kind) if action.promotes else None) or piece.kind
        _place(state, piece.id, action.source, kind, piece.player)
        state.reserves[piece.player][action.reserve_slot] = EMPTY
        _place(state, action.captured_id, action.destination, action.captured_kind, 1 - piece.player)

    state.last_move = action.prior_move if action.reverse else action.as_move()
    if advance_player:
        state.current_player = 1 - state.current_player
    return state
