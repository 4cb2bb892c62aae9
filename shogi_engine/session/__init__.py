"""
Game Session

This module connects the engine to a front end. A GameSession owns the
authoritative state, accepts human moves, runs AI searches on a background
thread and applies their results once the progress channel reports them.

Turn Flow:
    session.next_turn()          → HUMAN_TURN / AI_THINKING / game over
    session.apply_human_move()   → human plays a legal move
    session.poll()               → handles one search message (non-blocking)
    session.play_ai_turn()       → next_turn() + wait for the AI move

Usage:
    python -m shogi_engine.session --player0 minimax --player1 monte_carlo
"""

from shogi_engine.session.controller import GameSession, TurnState, setup_logger

__all__ = ['GameSession', 'TurnState', 'setup_logger']
