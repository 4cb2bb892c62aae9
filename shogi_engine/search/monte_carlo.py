"""
Pure Monte Carlo Search

Each candidate move is scored by playing many completely random games
(playouts) from the position it leads to and adding up the results:

    - search player wins:  + win_reward
    - search player loses: + loss_penalty (negative, larger magnitude)
    - draw:                  0

Weighting losses heavier than wins makes the search avoid moves that give the
opponent winning chances, even at the cost of some winning chances of its
own. There is no tree and no heuristic bias; each playout picks uniformly
among all legal moves of the player to move.

Playouts are capped at max_playout_plies and scored as draws past the cap.
"""

import logging
import random
import time
from typing import TYPE_CHECKING, Optional

from shogi_engine.game.state import GameState, Status
from shogi_engine.search.base import SearchStrategy, StopCheck
from shogi_engine.search.progress import SearchProgress

if TYPE_CHECKING:
    from shogi_engine.channel.sender import ProgressSender

logger = logging.getLogger(__name__)


class MonteCarloSearch(SearchStrategy):
    """
    Random-playout search.

    Attributes:
        rounds: Playouts per candidate move
        rng: Random source (seed it for reproducible searches)
        win_reward: Score added for a won playout
        loss_penalty: Score added for a lost playout
        max_playout_plies: Playout length after which the game counts as drawn
    """

    def __init__(
        self,
        sender: "ProgressSender",
        rounds: int,
        rng: Optional[random.Random] = None,
        win_reward: float = 1.0,
        loss_penalty: float = -2.0,
        max_playout_plies: int = 300,
        should_stop: Optional[StopCheck] = None,
    ):
        super().__init__(sender, should_stop)
        if rounds < 1:
            raise ValueError(f"rounds must be positive, got {rounds}")
        self.rounds = rounds
        self.rng = rng or random.Random()
        self.win_reward = win_reward
        self.loss_penalty = loss_penalty
        self.max_playout_plies = max_playout_plies

    def playout(self, node: GameState, progress: SearchProgress) -> Status:
        """
        Play random moves from node until the game ends.

        The node itself is not modified; one copy is mutated in place.

        Returns:
            Final status (DRAW if the ply cap was reached)
        """
        state = node.copy()
        plies = 0
        while state.update_status() is Status.ONGOING:
            if plies >= self.max_playout_plies:
                logger.debug(f"Playout capped at {plies} plies, scored as a draw")
                return Status.DRAW
            piece_id, destination = self.rng.choice(state.legal_moves(state.current_player))
            state.play(piece_id, destination)
            progress.nodes += 1
            plies += 1
        return state.status

    def reward(self, outcome: Status, search_player: int) -> float:
        winner = outcome.winner
        if winner is None:
            return 0.0
        return self.win_reward if winner == search_player else self.loss_penalty

    def think(self, state: GameState) -> SearchProgress:
        """
        Score every root move with random playouts and pick the best.

        Raises:
            NoLegalMoves: If the player to move has no legal move
        """
        start_time = time.time()
        progress = SearchProgress()
        search_player = state.current_player

        children = self.root_children(state)
        # Any move beats the sentinel score; the first child is the fallback.
        best_node = children[0]
        best_score = -float("inf")

        logger.debug(
            f"Monte Carlo: rounds={self.rounds}, player={search_player}, root moves={len(children)}"
        )

        for index, node in enumerate(children):
            if index > 0 and self.should_stop():
                logger.info(f"Monte Carlo stopped after {index}/{len(children)} root moves")
                break

            node_score = 0.0
            for _ in range(self.rounds):
                node_score += self.reward(self.playout(node, progress), search_player)

            if node_score > best_score:
                best_score = node_score
                best_node = node
                progress.score = best_score

            progress.percent_complete = (index + 1) / len(children)
            progress.pv = [best_node.last_move]
            progress.best_node = best_node
            progress.duration = time.time() - start_time
            self.sender.send_update(progress)

        progress.pv = [best_node.last_move]
        progress.best_node = best_node
        progress.duration = time.time() - start_time
        progress.is_complete = True

        logger.info(
            f"Monte Carlo done: best={best_node.last_move}, score={progress.score:.1f}, "
            f"nodes={progress.nodes}, time={progress.duration * 1000:.0f}ms"
        )
        return progress

    def __repr__(self) -> str:
        return f"MonteCarloSearch(rounds={self.rounds})"
