"""
Search strategy interface.

Every strategy implements one capability, think(state): search from the
given state for the player to move, push intermediate progress through its
sender, and return the final progress record whose best_node is the chosen
next state.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, List, Optional

from shogi_engine.errors import NoLegalMoves
from shogi_engine.game.state import GameState
from shogi_engine.search.progress import SearchProgress

if TYPE_CHECKING:
    from shogi_engine.channel.sender import ProgressSender

StopCheck = Callable[[], bool]


def _never_stop() -> bool:
    return False


class SearchStrategy(ABC):
    """
    Abstract base class for search strategies.

    Attributes:
        sender: Channel endpoint for intermediate progress updates
        should_stop: Cooperative cancellation check, polled between root moves
    """

    def __init__(self, sender: "ProgressSender", should_stop: Optional[StopCheck] = None):
        self.sender = sender
        self.should_stop = should_stop or _never_stop

    @abstractmethod
    def think(self, state: GameState) -> SearchProgress:  # pragma: no cover
        raise NotImplementedError

    @staticmethod
    def root_children(state: GameState) -> List[GameState]:
        """
        Child states of the root for the player to move.

        Raises:
            NoLegalMoves: If the player to move has no legal move
        """
        children = state.child_nodes(state.current_player)
        if not children:
            raise NoLegalMoves(state.current_player)
        return children

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
