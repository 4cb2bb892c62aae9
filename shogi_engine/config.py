"""
Player and search configuration.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from shogi_engine.evaluation.base import WIN_SCORE


class PlayerKind(Enum):
    """Who (or what) makes the moves for a player."""
    HUMAN = "human"
    AI_RANDOM = "random"
    AI_MINIMAX = "minimax"
    AI_MONTE_CARLO = "monte_carlo"

    @property
    def is_ai(self) -> bool:
        return self is not PlayerKind.HUMAN


@dataclass
class PlayerConfig:
    """Configuration for one player.

    Only the budget matching the player's kind is used: search_depth for
    minimax, search_rounds for Monte Carlo. A zero budget makes the AI fall
    back to a random move.
    """

    kind: PlayerKind = PlayerKind.HUMAN
    """Human or one of the AI strategies"""

    search_depth: int = 2
    """Plies searched by the minimax strategy"""

    search_rounds: int = 200
    """Random playouts per candidate move for the Monte Carlo strategy"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.kind = PlayerKind(self.kind)

        if self.search_depth < 0:
            raise ValueError(f"search_depth must be non-negative, got {self.search_depth}")

        if self.search_rounds < 0:
            raise ValueError(f"search_rounds must be non-negative, got {self.search_rounds}")

    @property
    def has_budget(self) -> bool:
        """False when the configured strategy would search nothing."""
        if self.kind is PlayerKind.AI_MINIMAX:
            return self.search_depth > 0
        if self.kind is PlayerKind.AI_MONTE_CARLO:
            return self.search_rounds > 0
        return True

    def __repr__(self) -> str:
        if self.kind is PlayerKind.AI_MINIMAX:
            return f"PlayerConfig(minimax, depth={self.search_depth})"
        if self.kind is PlayerKind.AI_MONTE_CARLO:
            return f"PlayerConfig(monte_carlo, rounds={self.search_rounds})"
        return f"PlayerConfig({self.kind.value})"


@dataclass
class SearchConfig:
    """Settings shared by all search strategies."""

    update_interval: Optional[float] = 0.1
    """Minimum seconds between intermediate progress messages (None = no limit)"""

    win_score: float = WIN_SCORE
    """Score magnitude of a won or lost game"""

    monte_carlo_win_reward: float = 1.0
    """Added to a candidate's score for each playout the search player wins"""

    monte_carlo_loss_penalty: float = -2.0
    """Added for each playout the search player loses (weighted heavier than a win)"""

    max_playout_plies: int = 300
    """Playouts longer than this are scored as draws"""

    random_seed: Optional[int] = None
    """Seed for the random and Monte Carlo strategies (None for random)"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.update_interval is not None and self.update_interval < 0:
            raise ValueError(f"update_interval must be non-negative, got {self.update_interval}")

        if self.win_score <= 0:
            raise ValueError(f"win_score must be positive, got {self.win_score}")

        if self.monte_carlo_win_reward <= 0:
            raise ValueError(
                f"monte_carlo_win_reward must be positive, got {self.monte_carlo_win_reward}"
            )

        if self.monte_carlo_loss_penalty >= 0:
            raise ValueError(
                f"monte_carlo_loss_penalty must be negative, got {self.monte_carlo_loss_penalty}"
            )

        if abs(self.monte_carlo_loss_penalty) <= self.monte_carlo_win_reward:
            raise ValueError(
                f"monte_carlo_loss_penalty ({self.monte_carlo_loss_penalty}) must outweigh "
                f"monte_carlo_win_reward ({self.monte_carlo_win_reward})"
            )

        if self.max_playout_plies <= 0:
            raise ValueError(f"max_playout_plies must be positive, got {self.max_playout_plies}")
