"""
Unit Tests for Game Session

Tests for turn sequencing, human moves, background AI searches and the
random-move fallback. Searches are kept tiny and every wait has a timeout.
"""

import pytest

from shogi_engine.config import PlayerConfig, PlayerKind, SearchConfig
from shogi_engine.errors import GameError, IllegalMove
from shogi_engine.game.state import Move
from shogi_engine.search.progress import SearchProgress
from shogi_engine.session import GameSession, TurnState, setup_logger

ROOK_VS_KING = "K---R" + "-----" * 3 + "p----" + "----k"
STALEMATE = "KB--bk"

HUMAN = PlayerConfig(PlayerKind.HUMAN)
MINIMAX = PlayerConfig(PlayerKind.AI_MINIMAX, search_depth=1)
RANDOM = PlayerConfig(PlayerKind.AI_RANDOM)

TIMEOUT = 10.0


@pytest.fixture
def make_session(tmp_path):
    """Factory for sessions logging to a temporary file."""
    sessions = []

    def factory(players, **kwargs):
        kwargs.setdefault("log_file", tmp_path / "engine.log")
        kwargs.setdefault("search_config", SearchConfig(update_interval=None, random_seed=0))
        session = GameSession(players, **kwargs)
        sessions.append(session)
        return session

    yield factory

    for session in sessions:
        session.shutdown()


class TestSetup:
    """Tests for session construction and logging."""

    def test_requires_two_players(self, make_session):
        with pytest.raises(ValueError):
            make_session([HUMAN])

    def test_log_file_written(self, make_session, tmp_path):
        make_session([HUMAN, HUMAN])
        text = (tmp_path / "engine.log").read_text()
        assert "Game session started" in text

    def test_setup_logger_level(self, tmp_path):
        logger = setup_logger(debug=False, log_file=tmp_path / "sub" / "x.log")
        assert logger.name == "shogi_engine"
        assert (tmp_path / "sub" / "x.log").exists()
        assert len(logger.handlers) == 1


class TestHumanTurns:
    """Tests for human move handling."""

    def test_human_turn(self, make_session):
        session = make_session([HUMAN, HUMAN])
        assert session.next_turn() is TurnState.HUMAN_TURN
        assert session.legal_destinations(5) == [16]

    def test_apply_human_move(self, make_session):
        session = make_session([HUMAN, HUMAN])
        state = session.apply_human_move(5, 16)

        assert state is session.state
        assert session.move_history == [Move(5, 16, True)]
        assert session.state.current_player == 1

    def test_illegal_move_leaves_state(self, make_session):
        session = make_session([HUMAN, HUMAN])
        before = session.state.copy()

        with pytest.raises(IllegalMove):
            session.apply_human_move(5, 21)

        assert session.state == before
        assert session.move_history == []

    def test_human_move_on_ai_turn(self, make_session):
        session = make_session([MINIMAX, HUMAN])
        with pytest.raises(IllegalMove, match="not a human"):
            session.apply_human_move(5, 16)

    def test_king_capture_ends_game(self, make_session):
        session = make_session([HUMAN, HUMAN], layout=ROOK_VS_KING)
        session.apply_human_move(session.state.piece_at(4).id, 29)

        assert session.next_turn() is TurnState.PLAYER_0_WON
        assert session.turn.is_game_over

    def test_no_moves_is_draw(self, make_session):
        session = make_session([MINIMAX, HUMAN], layout=STALEMATE, columns=1, rows=6)
        assert session.next_turn() is TurnState.DRAW
        assert not session.searching, "No search starts when there is nothing to play"


class TestAITurns:
    """Tests for background searches."""

    def test_ai_reply(self, make_session):
        session = make_session([HUMAN, MINIMAX])
        session.apply_human_move(2, 7)

        assert session.next_turn() is TurnState.AI_THINKING
        assert session.searching
        with pytest.raises(IllegalMove, match="search is running"):
            session.apply_human_move(5, 16)

        progress = session.wait_for_search(timeout=TIMEOUT)

        assert not session.searching
        assert progress.is_complete
        assert session.state.current_player == 0
        assert len(session.move_history) == 2
        assert session.move_history[-1] == session.state.last_move
        session.state.check_invariants()

    def test_ai_takes_free_capture(self, make_session):
        session = make_session([MINIMAX, HUMAN])
        session.play_ai_turn(timeout=TIMEOUT)
        assert session.state.last_move == Move(5, 16, True)

    def test_poll_without_search(self, make_session):
        session = make_session([HUMAN, HUMAN])
        assert session.poll() is None

    def test_second_search_rejected(self, make_session):
        session = make_session([RANDOM, RANDOM])
        session.start_search()
        with pytest.raises(GameError):
            session.start_search()
        session.wait_for_search(timeout=TIMEOUT)

    def test_failed_search_falls_back_to_random(self, make_session):
        """A depth the minimax search refuses still produces a move."""
        session = make_session([PlayerConfig(PlayerKind.AI_MINIMAX, search_depth=40), HUMAN])

        assert session.next_turn() is TurnState.AI_THINKING
        session.wait_for_search(timeout=TIMEOUT)

        assert len(session.move_history) == 1
        assert session.state.current_player == 1

    def test_self_play(self, make_session):
        session = make_session([RANDOM, PlayerConfig(PlayerKind.AI_MONTE_CARLO, search_rounds=1)],
                               search_config=SearchConfig(update_interval=None, random_seed=3,
                                                          max_playout_plies=20))
        for _ in range(10):
            turn = session.play_ai_turn(timeout=TIMEOUT)
            if turn.is_game_over:
                break
            session.state.check_invariants()

        assert len(session.move_history) >= 1

    def test_searches_share_one_rng(self, make_session):
        """Every AI turn of a game draws from the session's generator."""
        session = make_session([RANDOM, RANDOM])
        before = session.rng.getstate()

        session.play_ai_turn(timeout=TIMEOUT)
        after_first = session.rng.getstate()
        session.play_ai_turn(timeout=TIMEOUT)

        assert before != after_first, "The first search must draw from session.rng"
        assert after_first != session.rng.getstate(), "The second search must continue the stream"

    def test_seeded_sessions_replay_the_same_game(self, make_session):
        games = []
        for _ in range(2):
            session = make_session([RANDOM, RANDOM])
            for _ in range(4):
                if session.play_ai_turn(timeout=TIMEOUT).is_game_over:
                    break
            games.append(session.move_history)

        assert games[0] == games[1]

    def test_shutdown_is_idempotent(self, make_session):
        session = make_session([RANDOM, RANDOM])
        session.start_search()
        session.shutdown()
        session.shutdown()
        assert not session.searching


class TestFormatting:
    """Tests for display helpers."""

    def test_format_progress(self, make_session):
        session = make_session([HUMAN, HUMAN])
        progress = SearchProgress(nodes=12345, duration=0.25, score=2.0, pv=[Move(5, 16, True), Move(9, 12, False)])

        assert session.format_progress(progress) == (
            "nodes: 12,345 / ms: 250 = nps: 49,380. score: 2. pv: b4x, c3"
        )

    def test_format_progress_without_time(self, make_session):
        session = make_session([HUMAN, HUMAN])
        text = session.format_progress(SearchProgress(nodes=3))
        assert text.startswith("nodes: 3 / ms: 0")

    def test_describe_move(self, make_session):
        session = make_session([HUMAN, HUMAN])
        assert session.describe_move(Move(5, 16, True)) == "P#5 b4x"
