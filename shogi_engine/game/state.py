"""
Game State

The authoritative snapshot of a game: every piece, the board, both reserves,
the player to move, the game status and the last move applied.

Value Semantics:
    The state is a small aggregate of flat lists. Child states are produced by
    copying the whole thing and applying one ply to the copy, so search code
    can branch freely without sharing mutable data between branches. Two
    states compare (and hash) equal when their full content is equal.

Board Layout:
    Cells are stored row-major; cell = row * columns + column. Player 0 starts
    on the low rows and moves toward increasing rows. A layout string has one
    character per cell, "-" for empty, a piece letter otherwise (upper case =
    player 0, lower case = player 1).

Operations:
    - moves_for(): legal destinations for one piece
    - child_nodes_for_piece() / child_nodes(): copies with one ply applied
    - apply(): the validated mutator used at the boundary
    - update_status(): recompute the outcome (pulled, never pushed)
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from shogi_engine.board.representation import (
    coord_to_index,
    index_to_coord,
    render_state,
)
from shogi_engine.errors import IllegalMove, LayoutError, ReserveOverflow
from shogi_engine.game.piece import (
    LETTERS,
    Location,
    Piece,
    PieceKind,
    demoted,
    long_vectors,
    promoted,
    short_vectors,
)

logger = logging.getLogger(__name__)

EMPTY = -1  # sentinel for an unoccupied cell or reserve slot

DEFAULT_COLUMNS = 5
DEFAULT_ROWS = 6
DEFAULT_LAYOUT = "SGKGS------PPP--ppp------sgkgs"

PROMOTION_ROWS = 2  # depth of the promotion zone


class Status(Enum):
    """Outcome of a game."""
    ONGOING = 0
    DRAW = 1
    WIN_PLAYER_0 = 2
    WIN_PLAYER_1 = 3

    @classmethod
    def win_for(cls, player: int) -> "Status":
        return cls.WIN_PLAYER_0 if player == 0 else cls.WIN_PLAYER_1

    @property
    def winner(self) -> Optional[int]:
        if self is Status.WIN_PLAYER_0:
            return 0
        if self is Status.WIN_PLAYER_1:
            return 1
        return None


class CellCheck(Enum):
    """
    Result of testing a target cell for a moving piece.

        BLOCKED: out of bounds or own piece (reject, stop scanning)
        EMPTY: free cell (accept, keep scanning long vectors)
        ENEMY: opponent piece (accept as capture, stop scanning)
    """
    BLOCKED = 0
    EMPTY = 1
    ENEMY = 2


@dataclass(frozen=True)
class Move:
    """
    A single ply as (moving piece, destination cell, capture flag).

    Enough to replay or display a ply, not to undo it: the source cell is
    not recorded. See Action for the reversible form.
    """
    piece_id: int
    destination: int
    captured: bool = False


class GameState:
    """
    Board + reserves + piece ownership snapshot.

    Attributes:
        columns: Board width
        rows: Board height
        pieces: All pieces of both players, indexed by piece id
        board: Cell index -> piece id (EMPTY when unoccupied)
        reserves: One EMPTY-filled list per player of reserve piece ids
        current_player: Player to move (0 or 1)
        status: Game outcome, refreshed by update_status()
        last_move: The last Move applied, None at the start
    """

    def __init__(self, columns: int = DEFAULT_COLUMNS, rows: int = DEFAULT_ROWS):
        self.columns = columns
        self.rows = rows
        self.pieces: List[Piece] = []
        self.board: List[int] = [EMPTY] * (columns * rows)
        self.reserves: List[List[int]] = [[], []]
        self.current_player = 0
        self.status = Status.ONGOING
        self.last_move: Optional[Move] = None

    @classmethod
    def from_layout(
        cls,
        layout: str = DEFAULT_LAYOUT,
        columns: int = DEFAULT_COLUMNS,
        rows: int = DEFAULT_ROWS,
        reserve_capacity: Optional[int] = None,
    ) -> "GameState":
        """
        Build a starting state from a layout string.

        Args:
            layout: One character per cell, row-major, "-" for empty
            columns: Board width
            rows: Board height
            reserve_capacity: Slots per reserve (default: total pieces - 1)

        Returns:
            New GameState with player 0 to move

        Raises:
            LayoutError: If the layout does not fit the board, contains an
                unknown letter, the sides are unequal, or a side does not
                have exactly one king
            ReserveOverflow: If a reserve could not hold every piece its
                player may capture
        """
        if columns < 1 or rows < 2 * PROMOTION_ROWS:
            raise LayoutError(f"Board too small: {columns}x{rows}")
        if len(layout) != columns * rows:
            raise LayoutError(
                f"Layout has {len(layout)} cells, expected {columns * rows} for a {columns}x{rows} board"
            )

        state = cls(columns, rows)
        for cell, char in enumerate(layout):
            if char == "-":
                continue
            kind = LETTERS.get(char.upper())
            if kind is None:
                raise LayoutError(f"Unknown piece letter {char!r} at cell {cell}")
            player = 0 if char.isupper() else 1
            piece = Piece(len(state.pieces), kind, player, Location.ON_BOARD, cell)
            state.pieces.append(piece)
            state.board[cell] = piece.id

        per_side = [sum(1 for p in state.pieces if p.player == player) for player in (0, 1)]
        if per_side[0] != per_side[1]:
            raise LayoutError(f"Sides are unequal: {per_side[0]} vs {per_side[1]} pieces")
        for player in (0, 1):
            kings = sum(1 for p in state.pieces if p.player == player and p.kind is PieceKind.KING)
            if kings != 1:
                raise LayoutError(f"Player {player} has {kings} kings, expected 1")

        capacity = len(state.pieces) - 1 if reserve_capacity is None else reserve_capacity
        for player in (0, 1):
            # Every piece but the player's own king can end up in their reserve.
            max_held = sum(
                1 for p in state.pieces if not (p.kind is PieceKind.KING and p.player == player)
            )
            if capacity < max_held:
                raise ReserveOverflow(
                    f"Reserve capacity {capacity} cannot hold the {max_held} pieces player {player} may capture"
                )
        state.reserves = [[EMPTY] * capacity for _ in range(2)]

        logger.debug(f"Layout {layout!r} -> {len(state.pieces)} pieces on {columns}x{rows}")
        return state

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def copy(self) -> "GameState":
        """Return an independent copy (pieces are immutable and shared)."""
        other = GameState.__new__(GameState)
        other.columns = self.columns
        other.rows = self.rows
        other.pieces = list(self.pieces)
        other.board = list(self.board)
        other.reserves = [list(reserve) for reserve in self.reserves]
        other.current_player = self.current_player
        other.status = self.status
        other.last_move = self.last_move
        return other

    __copy__ = copy

    def _key(self) -> Tuple:
        return (
            self.columns,
            self.rows,
            tuple(self.pieces),
            tuple(self.board),
            tuple(tuple(reserve) for reserve in self.reserves),
            self.current_player,
            self.status,
            self.last_move,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, GameState):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"GameState(to_move={self.current_player}, status={self.status.name}, "
            f"last_move={self.last_move})"
        )

    def __str__(self) -> str:
        return render_state(self)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def piece(self, piece_id: int) -> Piece:
        return self.pieces[piece_id]

    def piece_at(self, cell: int) -> Optional[Piece]:
        piece_id = self.board[cell]
        return None if piece_id == EMPTY else self.pieces[piece_id]

    def reserve_pieces(self, player: int) -> List[Piece]:
        """Pieces held in a player's reserve, in slot order."""
        return [self.pieces[i] for i in self.reserves[player] if i != EMPTY]

    def board_pieces(self, player: int) -> List[Piece]:
        return [p for p in self.pieces if p.player == player and p.location is Location.ON_BOARD]

    def empty_cells(self) -> List[int]:
        return [cell for cell, piece_id in enumerate(self.board) if piece_id == EMPTY]

    def promotion_rows(self, player: int) -> range:
        """The rows nearest the opponent's edge."""
        if player == 0:
            return range(self.rows - PROMOTION_ROWS, self.rows)
        return range(0, PROMOTION_ROWS)

    def back_row(self, player: int) -> int:
        """The far row a pawn of this player can never leave."""
        return self.rows - 1 if player == 0 else 0

    def _movable_pieces(self, player: int) -> Iterator[Piece]:
        return (p for p in self.pieces if p.player == player and p.location is not Location.OUT_OF_GAME)

    # ------------------------------------------------------------------
    # Move generation
    # ------------------------------------------------------------------

    def _check_cell(self, column: int, row: int, player: int) -> CellCheck:
        if not (0 <= column < self.columns and 0 <= row < self.rows):
            return CellCheck.BLOCKED
        piece_id = self.board[coord_to_index(column, row, self.columns)]
        if piece_id == EMPTY:
            return CellCheck.EMPTY
        if self.pieces[piece_id].player == player:
            return CellCheck.BLOCKED
        return CellCheck.ENEMY

    def _board_moves(self, piece: Piece) -> List[int]:
        column, row = index_to_coord(piece.slot, self.columns)
        moves = []

        for dx, dy in short_vectors(piece.kind, piece.player):
            if self._check_cell(column + dx, row + dy, piece.player) is not CellCheck.BLOCKED:
                moves.append(coord_to_index(column + dx, row + dy, self.columns))

        for dx, dy in long_vectors(piece.kind, piece.player):
            c, r = column + dx, row + dy
            while True:
                check = self._check_cell(c, r, piece.player)
                if check is CellCheck.BLOCKED:
                    break
                moves.append(coord_to_index(c, r, self.columns))
                if check is CellCheck.ENEMY:
                    break
                c, r = c + dx, r + dy

        return moves

    def _drop_moves(self, piece: Piece) -> List[int]:
        empties = self.empty_cells()
        if piece.kind is not PieceKind.PAWN:
            return empties

        back_row = self.back_row(piece.player)
        pawn_columns = {
            index_to_coord(p.slot, self.columns)[0]
            for p in self.board_pieces(piece.player)
            if p.kind is PieceKind.PAWN
        }
        drops = []
        for cell in empties:
            column, row = index_to_coord(cell, self.columns)
            if row != back_row and column not in pawn_columns:
                drops.append(cell)
        return drops

    def moves_for(self, piece_id: int) -> List[int]:
        """
        Legal destination cells for one piece in the current state.

        On-board pieces step along their short vectors and slide along their
        long vectors; reserve pieces may be dropped on any empty cell, except
        that pawns may not be dropped on their back row or into a column that
        already holds one of their owner's pawns.

        Args:
            piece_id: Piece to move

        Returns:
            Destination cells (board moves in vector order, drops ascending)
        """
        piece = self.pieces[piece_id]
        if piece.location is Location.ON_BOARD:
            return self._board_moves(piece)
        if piece.location is Location.IN_RESERVE:
            return self._drop_moves(piece)
        return []

    legal_destinations = moves_for

    def legal_moves(self, player: int) -> List[Tuple[int, int]]:
        """Every legal (piece id, destination) pair for a player."""
        return [
            (piece.id, destination)
            for piece in self._movable_pieces(player)
            for destination in self.moves_for(piece.id)
        ]

    def has_legal_moves(self, player: int) -> bool:
        return any(self.moves_for(piece.id) for piece in self._movable_pieces(player))

    def child_for(self, piece_id: int, destination: int) -> "GameState":
        """A copy of this state with one pre-validated move applied."""
        child = self.copy()
        child.play(piece_id, destination)
        return child

    def child_nodes_for_piece(self, piece_id: int) -> List["GameState"]:
        """Copies of this state with each legal move of one piece applied."""
        return [self.child_for(piece_id, destination) for destination in self.moves_for(piece_id)]

    def child_nodes(self, player: int) -> List["GameState"]:
        """Copies of this state with each legal move of a player applied."""
        children = []
        for piece in self._movable_pieces(player):
            children.extend(self.child_nodes_for_piece(piece.id))
        return children

    # ------------------------------------------------------------------
    # State transition
    # ------------------------------------------------------------------

    def _free_reserve_slot(self, player: int) -> int:
        for slot, piece_id in enumerate(self.reserves[player]):
            if piece_id == EMPTY:
                return slot
        raise ReserveOverflow(f"No free reserve slot for player {player}")

    def _capture(self, target_id: int, player: int) -> None:
        target = self.pieces[target_id]
        slot = self._free_reserve_slot(player)
        self.board[target.slot] = EMPTY
        self.pieces[target_id] = replace(
            target,
            kind=demoted(target.kind) or target.kind,
            player=player,
            location=Location.IN_RESERVE,
            slot=slot,
        )
        self.reserves[player][slot] = target_id

    def play(self, piece_id: int, destination: int) -> "GameState":
        """
        Apply a move in place without validating it.

        The single ply-execution routine: capture (to the mover's reserve,
        demoted), lift the mover, place it, promote on a board move into the
        promotion zone, record the move and flip the player to move. Callers
        must pass a destination taken from moves_for(piece_id); apply() is
        the validated entry point.

        Returns:
            self, mutated
        """
        mover = self.pieces[piece_id]
        captured = self.board[destination] != EMPTY
        if captured:
            self._capture(self.board[destination], mover.player)

        from_board = mover.location is Location.ON_BOARD
        if from_board:
            self.board[mover.slot] = EMPTY
        else:
            self.reserves[mover.player][mover.slot] = EMPTY

        kind = mover.kind
        if from_board and destination // self.columns in self.promotion_rows(mover.player):
            kind = promoted(kind) or kind

        self.pieces[piece_id] = replace(mover, kind=kind, location=Location.ON_BOARD, slot=destination)
        self.board[destination] = piece_id
        self.last_move = Move(piece_id, destination, captured)
        self.current_player = 1 - self.current_player
        return self

    def apply(self, piece_id: int, destination: int) -> "GameState":
        """
        Apply a move after checking it against the generated legal moves.

        Args:
            piece_id: Piece to move (must belong to the player to move)
            destination: Target cell (must be in moves_for(piece_id))

        Returns:
            self, mutated

        Raises:
            IllegalMove: If the game is over, the piece does not exist or
                belongs to the other player, or the destination is not legal.
                The state is left unchanged.
        """
        if self.update_status() is not Status.ONGOING:
            raise IllegalMove(piece_id, destination, f"game is over ({self.status.name})")
        if not 0 <= piece_id < len(self.pieces):
            raise IllegalMove(piece_id, destination, "no such piece")
        if self.pieces[piece_id].player != self.current_player:
            raise IllegalMove(piece_id, destination, "not the player to move")
        if destination not in self.moves_for(piece_id):
            raise IllegalMove(piece_id, destination)

        return self.play(piece_id, destination)

    def update_status(self) -> Status:
        """
        Recompute and return the game status.

        A player without a king of their own on the board has lost. Otherwise,
        a player to move with no legal move at all ends the game in a draw.
        """
        for player in (0, 1):
            has_king = any(
                p.kind is PieceKind.KING and p.player == player and p.location is Location.ON_BOARD
                for p in self.pieces
            )
            if not has_king:
                self.status = Status.win_for(1 - player)
                return self.status

        if self.has_legal_moves(self.current_player):
            self.status = Status.ONGOING
        else:
            self.status = Status.DRAW
        return self.status

    # ------------------------------------------------------------------
    # Consistency
    # ------------------------------------------------------------------

    def check_invariants(self) -> None:
        """
        Verify the board/reserve/piece cross references.

        Raises:
            AssertionError: Describing the first inconsistency found
        """
        seen = set()
        for cell, piece_id in enumerate(self.board):
            if piece_id == EMPTY:
                continue
            piece = self.pieces[piece_id]
            if piece.location is not Location.ON_BOARD or piece.slot != cell:
                raise AssertionError(f"Board cell {cell} references {piece!r}")
            if piece_id in seen:
                raise AssertionError(f"Piece {piece_id} referenced twice")
            seen.add(piece_id)

        for player, reserve in enumerate(self.reserves):
            for slot, piece_id in enumerate(reserve):
                if piece_id == EMPTY:
                    continue
                piece = self.pieces[piece_id]
                if piece.location is not Location.IN_RESERVE or piece.slot != slot or piece.player != player:
                    raise AssertionError(f"Reserve {player} slot {slot} references {piece!r}")
                if piece.is_promoted:
                    raise AssertionError(f"Promoted piece in reserve: {piece!r}")
                if piece_id in seen:
                    raise AssertionError(f"Piece {piece_id} referenced twice")
                seen.add(piece_id)

        for piece in self.pieces:
            if piece.location is not Location.OUT_OF_GAME and piece.id not in seen:
                raise AssertionError(f"{piece!r} is not referenced from board or reserve")

        if self.current_player not in (0, 1):
            raise AssertionError(f"Invalid player to move: {self.current_player}")
