"""
Game Module

The rules engine: pieces, the game state with legal-move generation, and
reversible actions.

Key Components:
    - Piece / PieceKind / Location: piece model and movement geometry
    - GameState: board + reserves snapshot, move generation, apply()
    - Move: (piece id, destination, captured) record of a ply
    - Action / perform_action: reversible ply description and its executor

Data Flow:
    layout string → GameState.from_layout() → moves_for() / child_nodes()
                                             → apply() → next GameState
"""

from shogi_engine.game.piece import Location, Piece, PieceKind
from shogi_engine.game.state import (
    DEFAULT_LAYOUT,
    EMPTY,
    GameState,
    Move,
    Status,
)
from shogi_engine.game.action import Action, ActionKind, perform_action

__all__ = [
    'Action',
    'ActionKind',
    'DEFAULT_LAYOUT',
    'EMPTY',
    'GameState',
    'Location',
    'Move',
    'Piece',
    'PieceKind',
    'Status',
    'perform_action',
]
