"""
Random move selection.

The degenerate baseline: pick one child of the root uniformly at random and
report it as a finished search in a single update. Used as the easiest
opponent and as the fallback when a configured strategy has no budget.
"""

import random
import time
from typing import TYPE_CHECKING, Optional

from shogi_engine.game.state import GameState
from shogi_engine.search.base import SearchStrategy
from shogi_engine.search.progress import SearchProgress

if TYPE_CHECKING:
    from shogi_engine.channel.sender import ProgressSender


class RandomSearch(SearchStrategy):
    """Uniformly random choice among all legal moves."""

    def __init__(self, sender: "ProgressSender", rng: Optional[random.Random] = None):
        super().__init__(sender)
        self.rng = rng or random.Random()

    def think(self, state: GameState) -> SearchProgress:
        start_time = time.time()
        children = self.root_children(state)
        node = self.rng.choice(children)

        progress = SearchProgress(
            is_complete=True,
            nodes=len(children),
            pv=[node.last_move],
            duration=time.time() - start_time,
            percent_complete=1.0,
            best_node=node,
        )
        self.sender.send_update(progress)
        return progress
