"""
Search Module

This module implements the move search strategies. All of them share one
capability, think(state), which reports progress through a rate-limited
sender and returns a final SearchProgress whose best_node is the chosen
next state.

Key Components:
    - MinimaxSearch: Fixed-depth minimax with alpha-beta pruning and PV
    - MonteCarloSearch: Pure random-playout scoring of each root move
    - RandomSearch: Uniform random move (baseline and zero-budget fallback)
    - think: Dispatch a PlayerConfig to its strategy and send the result
"""

from shogi_engine.search.progress import SearchProgress
from shogi_engine.search.base import SearchStrategy
from shogi_engine.search.minimax import MinimaxSearch
from shogi_engine.search.monte_carlo import MonteCarloSearch
from shogi_engine.search.random_search import RandomSearch
from shogi_engine.search.dispatch import create_strategy, think

__all__ = [
    'MinimaxSearch',
    'MonteCarloSearch',
    'RandomSearch',
    'SearchProgress',
    'SearchStrategy',
    'create_strategy',
    'think',
]
