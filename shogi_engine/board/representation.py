"""
Board Coordinates and Text Rendering

The board is stored as a flat, row-major list of cells. These helpers convert
between flat cell indices and (column, row) coordinates and render a game
state as text for logs and the command line.

Board Orientation:
    - Row 0 = player 0's home row (printed at the bottom)
    - Row rows-1 = player 1's home row (printed at the top)
    - Column 0 = file "a"
"""

from typing import TYPE_CHECKING, List, Tuple

if TYPE_CHECKING:
    from shogi_engine.game.state import GameState

FILE_LABELS = "abcdefghijklmnopqrstuvwxyz"


def index_to_coord(index: int, columns: int) -> Tuple[int, int]:
    """
    Convert a flat cell index to (column, row) coordinates.

    Args:
        index: Cell index (0 .. columns*rows-1)
        columns: Board width

    Returns:
        Tuple of (column, row)
    """
    return index % columns, index // columns


def coord_to_index(column: int, row: int, columns: int) -> int:
    """Convert (column, row) coordinates to a flat cell index."""
    return row * columns + column


def cell_name(index: int, columns: int) -> str:
    """
    Human-readable cell name, chess style ("a1" is cell 0).

    Rows are numbered from 1 to match the way the board is printed.
    """
    column, row = index_to_coord(index, columns)
    return f"{FILE_LABELS[column]}{row + 1}"


def render_state(state: "GameState") -> str:
    """
    Render a state as a text diagram.

    Example (default layout):
          +---+---+---+---+---+
        6 | s | g | k | g | s |
          ...
        1 | S | G | K | G | S |
          +---+---+---+---+---+
            a   b   c   d   e
        reserve 0: -
        reserve 1: -
        to move: 0 (ONGOING)
    """
    separator = "  +" + "---+" * state.columns
    lines: List[str] = [separator]

    for row in reversed(range(state.rows)):
        cells = []
        for column in range(state.columns):
            piece = state.piece_at(coord_to_index(column, row, state.columns))
            cells.append(piece.symbol() if piece is not None else " ")
        lines.append(f"{row + 1} | " + " | ".join(cells) + " |")
        lines.append(separator)

    lines.append("    " + "   ".join(FILE_LABELS[c] for c in range(state.columns)))

    for player in (0, 1):
        held = [piece.symbol() for piece in state.reserve_pieces(player)]
        lines.append(f"reserve {player}: {' '.join(held) if held else '-'}")

    lines.append(f"to move: {state.current_player} ({state.status.name})")
    return "\n".join(lines)
