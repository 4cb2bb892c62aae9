"""
Engine Errors

All errors raised by the game engine derive from GameError so callers at the
boundary (a UI, the session, a search thread) can catch the whole family.

Taxonomy:
    - IllegalMove: requested destination not in the piece's legal set
    - NoLegalMoves: a search was asked to pick a move where none exists
    - ReserveOverflow: a capture found no free reserve slot
    - LayoutError: the starting layout string is malformed
    - ChannelDisconnected: the progress receiver went away
"""


class GameError(Exception):
    """Base class for all engine errors."""


class IllegalMove(GameError):
    """Raised when a move is not among the generated legal moves."""

    def __init__(self, piece_id: int, destination: int, reason: str = "not a legal destination"):
        self.piece_id = piece_id
        self.destination = destination
        self.reason = reason
        super().__init__(f"Illegal move: piece {piece_id} to cell {destination} ({reason})")


class NoLegalMoves(GameError):
    """Raised when a search is started on a position with no child states."""

    def __init__(self, player: int):
        self.player = player
        super().__init__(f"No legal moves available for player {player}")


class ReserveOverflow(GameError):
    """Raised when a captured piece has no free reserve slot to go to."""


class LayoutError(GameError):
    """Raised when a starting layout string cannot be parsed."""


class ChannelDisconnected(GameError):
    """Raised internally when the receiving end of a progress channel is closed."""
