"""
Unit Tests for Configuration

Tests for player and search configuration validation.
"""

import pytest

from shogi_engine.config import PlayerConfig, PlayerKind, SearchConfig


class TestPlayerConfig:
    """Tests for PlayerConfig."""

    def test_defaults(self):
        config = PlayerConfig()
        assert config.kind is PlayerKind.HUMAN
        assert config.search_depth == 2
        assert config.search_rounds == 200

    def test_kind_from_string(self):
        assert PlayerConfig("monte_carlo").kind is PlayerKind.AI_MONTE_CARLO

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            PlayerConfig("alphazero")

    @pytest.mark.parametrize("field", ["search_depth", "search_rounds"])
    def test_negative_budget(self, field):
        with pytest.raises(ValueError, match=field):
            PlayerConfig(PlayerKind.AI_MINIMAX, **{field: -1})

    def test_budget(self):
        assert not PlayerConfig(PlayerKind.AI_MINIMAX, search_depth=0).has_budget
        assert PlayerConfig(PlayerKind.AI_MINIMAX, search_depth=0, search_rounds=0).kind.is_ai
        assert not PlayerConfig(PlayerKind.AI_MONTE_CARLO, search_rounds=0).has_budget
        assert PlayerConfig(PlayerKind.AI_MONTE_CARLO, search_depth=0).has_budget
        assert PlayerConfig(PlayerKind.AI_RANDOM).has_budget

    def test_repr(self):
        assert repr(PlayerConfig(PlayerKind.AI_MINIMAX, search_depth=3)) == "PlayerConfig(minimax, depth=3)"
        assert repr(PlayerConfig()) == "PlayerConfig(human)"


class TestSearchConfig:
    """Tests for SearchConfig."""

    def test_defaults(self):
        config = SearchConfig()
        assert config.update_interval == 0.1
        assert config.monte_carlo_win_reward == 1.0
        assert config.monte_carlo_loss_penalty == -2.0
        assert config.random_seed is None

    @pytest.mark.parametrize("kwargs", [
        {"update_interval": -1.0},
        {"win_score": 0.0},
        {"monte_carlo_win_reward": 0.0},
        {"monte_carlo_loss_penalty": 1.0},
        {"monte_carlo_win_reward": 5.0, "monte_carlo_loss_penalty": -1.0},
        {"monte_carlo_win_reward": 2.0, "monte_carlo_loss_penalty": -2.0},
        {"max_playout_plies": 0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            SearchConfig(**kwargs)

    def test_no_rate_limit(self):
        assert SearchConfig(update_interval=None).update_interval is None
