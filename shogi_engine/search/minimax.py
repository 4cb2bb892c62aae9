"""
Minimax Search with Alpha-Beta Pruning

This module implements the main search algorithm for the engine. Minimax
explores the game tree to find the best move, and alpha-beta pruning
reduces the number of nodes evaluated without changing the result.

Key Concepts:
    - Minimax: Recursive algorithm that assumes optimal play by both sides
    - Alpha-Beta: Optimization that prunes branches that can't affect result
    - Move Ordering: Evaluate better moves first to maximize pruning
    - Principal Variation (PV): Best line of play found

Scores are always from the point of view of the search player (the player
to move at the root): the root and every node where that player moves are
maximizing, the others minimizing.

Progress:
    After each root move is scored, an update (PV, node count, elapsed time,
    fraction of root moves done, best child so far) goes out through the
    rate-limited sender. Nodes are counted at every level.

References:
    - Minimax: https://www.chessprogramming.org/Minimax
    - Alpha-Beta: https://www.chessprogramming.org/Alpha-Beta
    - Move Ordering: https://www.chessprogramming.org/Move_Ordering
"""

import logging
import time
from typing import TYPE_CHECKING, List, Optional, Tuple

from shogi_engine.errors import NoLegalMoves
from shogi_engine.evaluation.base import Evaluator
from shogi_engine.evaluation.material import MaterialEvaluator
from shogi_engine.game.state import GameState, Move, Status
from shogi_engine.search.base import SearchStrategy, StopCheck
from shogi_engine.search.progress import SearchProgress

if TYPE_CHECKING:
    from shogi_engine.channel.sender import ProgressSender

logger = logging.getLogger(__name__)

MAX_DEPTH = 32  # Maximum search depth


def order_children(parent: GameState, children: List[GameState], evaluator: MaterialEvaluator) -> List[GameState]:
    """
    Order child states to improve alpha-beta pruning efficiency.

    Captures come first, most valuable victim first; the sort is stable so
    quiet moves keep their generation order.

    Args:
        parent: State the children were generated from
        children: Child states of parent
        evaluator: Supplies the per-kind piece values

    Returns:
        Sorted list of children (captures first)
    """

    def victim_value(child: GameState) -> float:
        move = child.last_move
        if move is None or not move.captured:
            return -1.0
        victim = parent.piece_at(move.destination)
        return float(evaluator.piece_values[victim.kind])

    return sorted(children, key=victim_value, reverse=True)


class MinimaxSearch(SearchStrategy):
    """
    Fixed-depth minimax with alpha-beta pruning and PV tracking.

    Attributes:
        depth: Plies to search below the root (>= 1)
        evaluator: Position evaluation function
        order_moves: Search captures first (off: pure generation order)
    """

    def __init__(
        self,
        sender: "ProgressSender",
        depth: int,
        evaluator: Optional[Evaluator] = None,
        order_moves: bool = False,
        should_stop: Optional[StopCheck] = None,
    ):
        super().__init__(sender, should_stop)
        if not 1 <= depth <= MAX_DEPTH:
            raise ValueError(f"depth must be between 1 and {MAX_DEPTH}, got {depth}")
        self.depth = depth
        self.evaluator = evaluator if evaluator else MaterialEvaluator()
        self.order_moves = order_moves

    def _children(self, state: GameState) -> List[GameState]:
        children = state.child_nodes(state.current_player)
        if self.order_moves and isinstance(self.evaluator, MaterialEvaluator):
            children = order_children(state, children, self.evaluator)
        return children

    def alpha_beta(
        self,
        state: GameState,
        depth: int,
        maximizing: bool,
        alpha: float,
        beta: float,
        ply_from_root: int,
        search_player: int,
        progress: SearchProgress,
    ) -> Tuple[float, List[Move]]:
        """
        Minimax search with alpha-beta pruning.

        Args:
            state: Current position (not mutated)
            depth: Remaining search depth (decrements each recursive call)
            maximizing: True if the search player is to move here
            alpha: Best score the maximizer is assured of so far
            beta: Best score the minimizer is assured of so far
            ply_from_root: Distance from root (for win distance scoring)
            search_player: Player the scores are relative to
            progress: Accumulator for the node count

        Returns:
            Tuple of (score, pv) where pv is the best line from this node

        Algorithm:
            1. Finished game or depth = 0 → evaluate position
            2. Generate all child states
            3. For each child:
                a. Recursively search (depth - 1, flag flipped)
                b. On a new best, PV = [this move] + child PV
                c. Update alpha/beta
                d. Prune if beta <= alpha
            4. Return best score found
        """
        progress.nodes += 1

        status = state.update_status()
        if status is not Status.ONGOING or depth == 0:
            terminal_score = self.evaluator.evaluate_terminal(state, search_player, ply_from_root)
            if terminal_score is not None:
                return terminal_score, []
            return self.evaluator.evaluate(state, search_player), []

        children = self._children(state)
        if not children:
            # update_status() reports a draw for a player without moves.
            raise NoLegalMoves(state.current_player)

        pv: List[Move] = []

        if maximizing:
            best_score = -float("inf")
            for child in children:
                score, child_pv = self.alpha_beta(
                    child, depth - 1, False, alpha, beta, ply_from_root + 1, search_player, progress
                )
                if score > best_score:
                    best_score = score
                    pv = [child.last_move] + child_pv
                alpha = max(alpha, best_score)

                # Beta cutoff: Minimizing player won't allow this branch
                if beta <= alpha:
                    break
        else:
            best_score = float("inf")
            for child in children:
                score, child_pv = self.alpha_beta(
                    child, depth - 1, True, alpha, beta, ply_from_root + 1, search_player, progress
                )
                if score < best_score:
                    best_score = score
                    pv = [child.last_move] + child_pv
                beta = min(beta, best_score)

                # Alpha cutoff: Maximizing player won't allow this branch
                if beta <= alpha:
                    break

        return best_score, pv

    def think(self, state: GameState) -> SearchProgress:
        """
        Search the root and return the final progress record.

        The root is searched move by move so progress can be reported after
        each one. The result (score, PV, best child) is the last improvement
        found; the score is the root's final alpha.

        Raises:
            NoLegalMoves: If the player to move has no legal move
        """
        start_time = time.time()
        progress = SearchProgress()
        search_player = state.current_player

        children = self.root_children(state)
        if self.order_moves and isinstance(self.evaluator, MaterialEvaluator):
            children = order_children(state, children, self.evaluator)

        logger.debug(f"Minimax: depth={self.depth}, player={search_player}, root moves={len(children)}")

        alpha = -float("inf")
        beta = float("inf")

        for index, child in enumerate(children):
            if index > 0 and self.should_stop():
                logger.info(f"Minimax stopped after {index}/{len(children)} root moves")
                break

            score, child_pv = self.alpha_beta(
                child, self.depth - 1, False, alpha, beta, 1, search_player, progress
            )

            if score > alpha:
                alpha = score
                progress.score = score
                progress.pv = [child.last_move] + child_pv
                progress.best_node = child
                logger.debug(f"Root move {child.last_move}: new best score {score:.2f}")

            progress.percent_complete = (index + 1) / len(children)
            progress.duration = time.time() - start_time
            self.sender.send_update(progress)

        progress.score = alpha
        progress.duration = time.time() - start_time
        progress.is_complete = True

        logger.info(
            f"Minimax done: score={alpha:.2f}, nodes={progress.nodes}, "
            f"time={progress.duration * 1000:.0f}ms, pv={progress.pv}"
        )
        return progress

    def __repr__(self) -> str:
        return f"MinimaxSearch(depth={self.depth}, evaluator={self.evaluator!r})"
