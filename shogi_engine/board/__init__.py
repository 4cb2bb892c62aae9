"""
Board Representation Module

Coordinate helpers for the flat, row-major cell list used by the game state,
and a text renderer for logs and the command line.

Key Components:
    - index_to_coord / coord_to_index: cell index <-> (column, row)
    - cell_name: "a1"-style cell names
    - render_state: text diagram of a GameState
"""

from shogi_engine.board.representation import (
    cell_name,
    coord_to_index,
    index_to_coord,
    render_state,
)

__all__ = ['cell_name', 'coord_to_index', 'index_to_coord', 'render_state']
