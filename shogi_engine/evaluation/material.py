"""
Material Evaluation

Scores a position by counting material: each side's pieces (on the board and
in reserve) are summed with a fixed per-kind value. Captured pieces change
owner, so a capture moves the value from one side's total to the other's.

Evaluation Components:
    - Material: K=0, P=1, S=4, G=5, +S=5, +P=5, B=6, R=7, +B=8, +R=9
"""

import numpy as np

from shogi_engine.evaluation.base import Evaluator, WIN_SCORE
from shogi_engine.game.piece import PieceKind
from shogi_engine.game.state import GameState

#fmt: off
# ============================================================================
# Material Values (pawns), indexed by PieceKind
# ============================================================================

PIECE_VALUES = np.zeros(len(PieceKind), dtype=np.float32)
PIECE_VALUES[PieceKind.KING]       = 0.0
PIECE_VALUES[PieceKind.PAWN]       = 1.0
PIECE_VALUES[PieceKind.SILVER]     = 4.0
PIECE_VALUES[PieceKind.GOLD]       = 5.0
PIECE_VALUES[PieceKind.SILVER_PRO] = 5.0
PIECE_VALUES[PieceKind.PAWN_PRO]   = 5.0
PIECE_VALUES[PieceKind.BISHOP]     = 6.0
PIECE_VALUES[PieceKind.ROOK]       = 7.0
PIECE_VALUES[PieceKind.BISHOP_PRO] = 8.0
PIECE_VALUES[PieceKind.ROOK_PRO]   = 9.0
#fmt: on


class MaterialEvaluator(Evaluator):
    """
    Material-only evaluation.

    Attributes:
        piece_values: Array of per-kind values, indexed by PieceKind
    """

    def __init__(self, piece_values: np.ndarray = PIECE_VALUES, win_score: float = WIN_SCORE):
        super().__init__(win_score)
        self.piece_values = piece_values

    def material(self, state: GameState) -> np.ndarray:
        """
        Total material owned by each player.

        Returns:
            Array of shape (2,): [player 0 total, player 1 total]
        """
        kinds = np.fromiter((p.kind for p in state.pieces), dtype=np.int64, count=len(state.pieces))
        owners = np.fromiter((p.player for p in state.pieces), dtype=np.int64, count=len(state.pieces))
        return np.bincount(owners, weights=self.piece_values[kinds], minlength=2)

    def evaluate(self, state: GameState, player: int) -> float:
        totals = self.material(state)
        return float(totals[player] - totals[1 - player])
