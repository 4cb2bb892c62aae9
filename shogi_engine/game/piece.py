"""
Piece Model

Each piece has a kind, an owner and a location. Kinds form short promotion
chains (base form <-> promoted form); the king and the gold have neither.

Movement Geometry:
    Vectors are (dx, dy) pairs. Player 0 moves toward increasing rows, so
    "forward" is dy = +1. Player 1's vectors are the same vectors mirrored
    vertically (dy negated).

    - Short vectors: a single step, tested once
    - Long vectors: a direction walked cell by cell until blocked

Layout Letters:
    K = King, R = Rook, B = Bishop, G = Gold, S = Silver, P = Pawn
    Upper case belongs to player 0, lower case to player 1.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple

Vector = Tuple[int, int]


class PieceKind(IntEnum):
    """All piece kinds, base and promoted."""
    KING = 0
    ROOK = 1
    ROOK_PRO = 2
    BISHOP = 3
    BISHOP_PRO = 4
    GOLD = 5
    SILVER = 6
    SILVER_PRO = 7
    PAWN = 8
    PAWN_PRO = 9


class Location(Enum):
    """Where a piece currently lives."""
    OUT_OF_GAME = 0
    ON_BOARD = 1
    IN_RESERVE = 2


# ============================================================================
# Promotion chains
# ============================================================================

PROMOTIONS: Dict[PieceKind, PieceKind] = {
    PieceKind.ROOK: PieceKind.ROOK_PRO,
    PieceKind.BISHOP: PieceKind.BISHOP_PRO,
    PieceKind.SILVER: PieceKind.SILVER_PRO,
    PieceKind.PAWN: PieceKind.PAWN_PRO,
}

DEMOTIONS: Dict[PieceKind, PieceKind] = {pro: base for base, pro in PROMOTIONS.items()}

LETTERS: Dict[str, PieceKind] = {
    "K": PieceKind.KING,
    "R": PieceKind.ROOK,
    "B": PieceKind.BISHOP,
    "G": PieceKind.GOLD,
    "S": PieceKind.SILVER,
    "P": PieceKind.PAWN,
}

SYMBOLS: Dict[PieceKind, str] = {
    PieceKind.KING: "K",
    PieceKind.ROOK: "R",
    PieceKind.ROOK_PRO: "D",  # dragon
    PieceKind.BISHOP: "B",
    PieceKind.BISHOP_PRO: "H",  # horse
    PieceKind.GOLD: "G",
    PieceKind.SILVER: "S",
    PieceKind.SILVER_PRO: "N",
    PieceKind.PAWN: "P",
    PieceKind.PAWN_PRO: "T",  # tokin
}


# ============================================================================
# Movement vectors (player 0 orientation, forward = +y)
# ============================================================================

ORTHOGONAL = ((0, 1), (1, 0), (0, -1), (-1, 0))
DIAGONAL = ((1, 1), (1, -1), (-1, -1), (-1, 1))
GOLD_STEPS = ((0, 1), (1, 1), (-1, 1), (1, 0), (-1, 0), (0, -1))

SHORT_VECTORS: Dict[PieceKind, Tuple[Vector, ...]] = {
    PieceKind.KING: ORTHOGONAL + DIAGONAL,
    PieceKind.ROOK: (),
    PieceKind.ROOK_PRO: DIAGONAL,
    PieceKind.BISHOP: (),
    PieceKind.BISHOP_PRO: ORTHOGONAL,
    PieceKind.GOLD: GOLD_STEPS,
    PieceKind.SILVER: ((0, 1),) + DIAGONAL,
    PieceKind.SILVER_PRO: GOLD_STEPS,
    PieceKind.PAWN: ((0, 1),),
    PieceKind.PAWN_PRO: GOLD_STEPS,
}

LONG_VECTORS: Dict[PieceKind, Tuple[Vector, ...]] = {
    PieceKind.ROOK: ORTHOGONAL,
    PieceKind.ROOK_PRO: ORTHOGONAL,
    PieceKind.BISHOP: DIAGONAL,
    PieceKind.BISHOP_PRO: DIAGONAL,
}


def _orient(vectors: Tuple[Vector, ...], player: int) -> Tuple[Vector, ...]:
    if player == 0:
        return vectors
    return tuple((dx, -dy) for dx, dy in vectors)


def short_vectors(kind: PieceKind, player: int) -> Tuple[Vector, ...]:
    """
    Single-step displacement vectors for a kind, oriented for its owner.

    Args:
        kind: Piece kind
        player: Owning player (0 or 1)

    Returns:
        Tuple of (dx, dy) vectors, mirrored vertically for player 1
    """
    return _orient(SHORT_VECTORS[kind], player)


def long_vectors(kind: PieceKind, player: int) -> Tuple[Vector, ...]:
    """Unlimited-range directions for a kind (empty for short-range kinds)."""
    return _orient(LONG_VECTORS.get(kind, ()), player)


def promoted(kind: PieceKind) -> Optional[PieceKind]:
    """Return the promoted form of a kind, or None if it cannot promote."""
    return PROMOTIONS.get(kind)


def demoted(kind: PieceKind) -> Optional[PieceKind]:
    """Return the base form of a promoted kind, or None if not promoted."""
    return DEMOTIONS.get(kind)


@dataclass(frozen=True)
class Piece:
    """
    A single piece.

    Pieces are values: the game state replaces them with
    dataclasses.replace() rather than mutating them, so copies of a state
    can share Piece objects safely.

    Attributes:
        id: Stable integer handle (index into the state's piece list)
        kind: Current kind (promoted or not)
        player: Owning player, 0 or 1
        location: OUT_OF_GAME, ON_BOARD or IN_RESERVE
        slot: Board cell index or reserve slot index, None when out of game
    """
    id: int
    kind: PieceKind
    player: int
    location: Location = Location.OUT_OF_GAME
    slot: Optional[int] = None

    @property
    def is_promoted(self) -> bool:
        return self.kind in DEMOTIONS

    def symbol(self) -> str:
        """Single-letter symbol, upper case for player 0."""
        letter = SYMBOLS[self.kind]
        return letter if self.player == 0 else letter.lower()

    def __repr__(self) -> str:
        return (
            f"Piece(id={self.id}, kind={self.kind.name}, player={self.player}, "
            f"location={self.location.name}, slot={self.slot})"
        )
