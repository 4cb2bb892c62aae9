"""
Strategy dispatch.

Maps a player's configuration to a search strategy and runs it to the end,
sending throttled updates and exactly one final message: SearchCompleted
with the chosen next state, or SearchFailed if the search aborted.
"""

import logging
import random
from typing import TYPE_CHECKING, Optional

from shogi_engine.config import PlayerConfig, PlayerKind, SearchConfig
from shogi_engine.evaluation.material import MaterialEvaluator
from shogi_engine.game.state import GameState
from shogi_engine.search.base import SearchStrategy, StopCheck
from shogi_engine.search.minimax import MinimaxSearch
from shogi_engine.search.monte_carlo import MonteCarloSearch
from shogi_engine.search.progress import SearchProgress
from shogi_engine.search.random_search import RandomSearch

if TYPE_CHECKING:
    from shogi_engine.channel.sender import ProgressSender

logger = logging.getLogger(__name__)


def create_strategy(
    player: PlayerConfig,
    sender: "ProgressSender",
    search_config: Optional[SearchConfig] = None,
    should_stop: Optional[StopCheck] = None,
    rng: Optional[random.Random] = None,
) -> SearchStrategy:
    """
    Build the search strategy for a player.

    A minimax player with depth 0 or a Monte Carlo player with 0 rounds
    gets the random strategy instead.

    Args:
        player: Configuration of the player to move
        sender: Channel endpoint for progress updates
        search_config: Shared search settings
        should_stop: Optional cooperative cancellation check
        rng: Random source to draw from. Callers running several searches
            (a session, a match) pass one generator so successive searches
            continue the same stream; without one, a new generator is
            seeded from search_config.random_seed.

    Raises:
        ValueError: If the player is human
    """
    search_config = search_config or SearchConfig()
    if rng is None:
        rng = random.Random(search_config.random_seed)

    if player.kind is PlayerKind.HUMAN:
        raise ValueError("Human players do not search")

    if not player.has_budget:
        logger.info(f"{player!r} has no search budget, using a random move")
        return RandomSearch(sender, rng=rng)

    if player.kind is PlayerKind.AI_MINIMAX:
        return MinimaxSearch(
            sender,
            player.search_depth,
            evaluator=MaterialEvaluator(win_score=search_config.win_score),
            should_stop=should_stop,
        )

    if player.kind is PlayerKind.AI_MONTE_CARLO:
        return MonteCarloSearch(
            sender,
            player.search_rounds,
            rng=rng,
            win_reward=search_config.monte_carlo_win_reward,
            loss_penalty=search_config.monte_carlo_loss_penalty,
            max_playout_plies=search_config.max_playout_plies,
            should_stop=should_stop,
        )

    return RandomSearch(sender, rng=rng)


def think(
    player: PlayerConfig,
    state: GameState,
    sender: "ProgressSender",
    search_config: Optional[SearchConfig] = None,
    should_stop: Optional[StopCheck] = None,
    rng: Optional[random.Random] = None,
) -> Optional[SearchProgress]:
    """
    Run one search to completion on a copy of state.

    Intermediate updates go through a clone of sender rate limited to
    search_config.update_interval; the final message goes through sender
    itself and is never suppressed.

    Args:
        player: Configuration of the player to move
        state: Position to search (copied, never mutated)
        sender: Channel endpoint to report on
        search_config: Shared search settings
        should_stop: Optional cooperative cancellation check
        rng: Random source shared across searches (see create_strategy)

    Returns:
        Final progress, or None if the search failed
    """
    search_config = search_config or SearchConfig()
    throttled = sender.clone(min_interval=search_config.update_interval)

    try:
        strategy = create_strategy(player, throttled, search_config, should_stop, rng)
        logger.info(f"Search started: {strategy!r} for player {state.current_player}")
        progress = strategy.think(state.copy())
    except Exception as e:
        logger.error(f"Search error: {e}", exc_info=True)
        sender.send_failed(f"{type(e).__name__}: {e}")
        return None

    progress.is_complete = True
    progress.percent_complete = 1.0
    sender.send_completed(progress)
    return progress
