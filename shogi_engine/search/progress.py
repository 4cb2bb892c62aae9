"""
Search progress record.

One SearchProgress is owned by each search invocation and passed explicitly
through the search (never shared between searches). Snapshots of it are
what travel over the progress channel.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional

from shogi_engine.game.state import GameState, Move


@dataclass
class SearchProgress:
    """
    Progress of a search, culminating in the chosen next state.

    Attributes:
        is_complete: True once the search has finished
        nodes: States explored so far (cumulative)
        pv: Best line found so far, root move first
        duration: Seconds elapsed since the search started
        score: Score of the best line, relative to the search player
        percent_complete: Fraction of root moves scored (0.0 to 1.0)
        best_node: Child state of the root the search currently prefers
    """
    is_complete: bool = False
    nodes: int = 0
    pv: List[Move] = field(default_factory=list)
    duration: float = 0.0
    score: float = 0.0
    percent_complete: float = 0.0
    best_node: Optional[GameState] = None

    def snapshot(self) -> "SearchProgress":
        """Independent copy, safe to hand to another thread."""
        return replace(
            self,
            pv=list(self.pv),
            best_node=self.best_node.copy() if self.best_node is not None else None,
        )

    @property
    def best_move(self) -> Optional[Move]:
        return self.pv[0] if self.pv else None
