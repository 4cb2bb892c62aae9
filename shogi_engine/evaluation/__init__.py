"""
Evaluation Module

This module provides position evaluation functions for the search. The key
design principle is that evaluators are SWAPPABLE - the search algorithm
works with any evaluator that implements the base interface.

Key Components:
    - Evaluator (ABC): Abstract base class defining the evaluation interface
    - MaterialEvaluator: Per-kind material count (numpy value table)
    - WIN_SCORE: Magnitude of a finished game's score

Data Flow:
    GameState, player → evaluator.evaluate() → float
                                               Positive = player is ahead
                                               Negative = opponent is ahead
"""

from shogi_engine.evaluation.base import Evaluator, WIN_SCORE
from shogi_engine.evaluation.material import MaterialEvaluator, PIECE_VALUES

__all__ = ['Evaluator', 'MaterialEvaluator', 'PIECE_VALUES', 'WIN_SCORE']
