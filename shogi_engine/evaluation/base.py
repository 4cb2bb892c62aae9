"""
Abstract Evaluator Interface

This module defines the abstract base class for all position evaluators.
By defining a common interface, we can swap between evaluators without
modifying the search algorithm.

Key Principles:
    1. Evaluators are stateless
    2. evaluate() scores a position from the point of view of a given player
    3. Positive = advantage for that player, Negative = for the opponent
    4. Finished games score ±(WIN_SCORE - plies from the root)

Convention:
    - Material values in whole pawns (pawn = 1)
    - Return 0 for perfectly equal positions
    - WIN_SCORE is far above any material total, so a won game always
      outranks a material advantage
"""

from abc import ABC, abstractmethod
from typing import Optional

from shogi_engine.game.state import GameState, Status


# Evaluation constants
WIN_SCORE = 1000.0  # Base score for a finished game


class Evaluator(ABC):
    """
    Abstract base class for position evaluation.

    All evaluator implementations must inherit from this class and implement
    the evaluate() method. This ensures compatibility with the search algorithm.

    Methods:
        evaluate(state, player): Returns position evaluation for player
        evaluate_terminal(state, player, ply): Score of a finished game
    """

    def __init__(self, win_score: float = WIN_SCORE):
        self.win_score = win_score

    @abstractmethod
    def evaluate(self, state: GameState, player: int) -> float:
        """
        Evaluate an ongoing position from the point of view of player.

        Args:
            state: Position to evaluate
            player: Player the score is relative to

        Returns:
            float: Evaluation, positive if player is better

        Raises:
            NotImplementedError: If subclass doesn't implement this method
        """
        pass

    def evaluate_terminal(self, state: GameState, player: int, ply_from_root: int = 0) -> Optional[float]:
        """
        Evaluate a finished game.

        The status must be up to date (see GameState.update_status).
        Wins are worth less the further they are from the root and losses
        cost less the later they happen, so the search prefers fast wins and
        slow losses.

        Args:
            state: Position to evaluate
            player: Player the score is relative to
            ply_from_root: Distance from the search root

        Returns:
            float: Score if the game is over
            None: If the game is ongoing
        """
        if state.status is Status.ONGOING:
            return None
        if state.status is Status.DRAW:
            return 0.0
        if state.status.winner == player:
            return self.win_score - ply_from_root
        return -(self.win_score - ply_from_root)

    def __repr__(self) -> str:
        """String representation of evaluator."""
        return f"{self.__class__.__name__}()"
