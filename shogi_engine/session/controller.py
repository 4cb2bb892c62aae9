"""
Game Session

The boundary between the engine and whatever drives a game (a UI, a script,
the self-play command line). The session owns the authoritative game state,
knows which players are human and which are AI, runs AI searches on a
background thread and applies their results.

Threading:
    - Caller's thread: queries, human moves, poll() for search messages
    - Search thread: one per AI turn, runs search.dispatch.think on a copy
      of the state
    - Communication: the progress channel (non-blocking on both ends) and a
      cooperative stop flag

Turn Flow:
    next_turn() → HUMAN_TURN          → apply_human_move()
                → AI_THINKING         → poll() ... SearchCompleted
                → PLAYER_0_WON / PLAYER_1_WON / DRAW
"""

import logging
import random
import threading
import time
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from shogi_engine.board.representation import cell_name
from shogi_engine.channel.sender import (
    Message,
    ProgressReceiver,
    ProgressSender,
    SearchCompleted,
    SearchFailed,
    SearchUpdate,
    create_channel,
)
from shogi_engine.config import PlayerConfig, PlayerKind, SearchConfig
from shogi_engine.errors import GameError, IllegalMove
from shogi_engine.game.state import (
    DEFAULT_COLUMNS,
    DEFAULT_LAYOUT,
    DEFAULT_ROWS,
    GameState,
    Move,
    Status,
)
from shogi_engine.search.dispatch import think
from shogi_engine.search.progress import SearchProgress

POLL_INTERVAL = 0.01  # seconds between polls while waiting on a search


def setup_logger(debug: bool = True, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Setup file-based logger for the engine.

    Configures the "shogi_engine" package logger, so every engine module's
    logger writes to the same file.

    Args:
        debug: If True, log at DEBUG level; otherwise INFO level
        log_file: Log file path (default: ~/.shogi_engine/engine.log)

    Returns:
        Configured logger instance
    """
    if log_file is None:
        log_file = Path.home() / ".shogi_engine" / "engine.log"
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("shogi_engine")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    handler = logging.FileHandler(log_file, mode='w')
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


class TurnState(Enum):
    HUMAN_TURN = "human_turn"
    AI_THINKING = "ai_thinking"
    PLAYER_0_WON = "player_0_won"
    PLAYER_1_WON = "player_1_won"
    DRAW = "draw"

    @property
    def is_game_over(self) -> bool:
        return self in (TurnState.PLAYER_0_WON, TurnState.PLAYER_1_WON, TurnState.DRAW)


class GameSession:
    """
    One game between two configured players.

    Attributes:
        players: PlayerConfig for player 0 and player 1
        state: Authoritative game state
        search_config: Settings passed to every search
        rng: Random source shared by every search of the game
        turn: Result of the last next_turn() call
        move_history: Moves applied so far, for display
        latest_progress: Most recent progress received from a search
        search_thread: Background thread of the running search
        stop_search: Cooperative stop flag polled by the search
    """

    def __init__(
        self,
        players: Sequence[PlayerConfig],
        layout: str = DEFAULT_LAYOUT,
        columns: int = DEFAULT_COLUMNS,
        rows: int = DEFAULT_ROWS,
        search_config: Optional[SearchConfig] = None,
        log_file: Optional[Path] = None,
        debug: bool = False,
    ):
        """
        Initialize a session.

        Args:
            players: Exactly two player configurations
            layout: Starting layout string
            columns: Board width
            rows: Board height
            search_config: Search settings (default: SearchConfig())
            log_file: Engine log file (default: ~/.shogi_engine/engine.log)
            debug: Enable debug logging

        Raises:
            ValueError: If there are not exactly two players
            LayoutError: If the layout is invalid
        """
        if len(players) != 2:
            raise ValueError(f"A game needs exactly 2 players, got {len(players)}")

        self.players: List[PlayerConfig] = list(players)
        self.state = GameState.from_layout(layout, columns, rows)
        self.search_config = search_config or SearchConfig()
        # One stream for the whole game; searches run one at a time.
        self.rng = random.Random(self.search_config.random_seed)

        self.turn: Optional[TurnState] = None
        self.move_history: List[Move] = []
        self.latest_progress: Optional[SearchProgress] = None

        # Search state
        self.search_thread: Optional[threading.Thread] = None
        self.stop_search = False
        self._receiver: Optional[ProgressReceiver] = None
        self._searching_player: Optional[PlayerConfig] = None

        self.logger = setup_logger(debug=debug, log_file=log_file)
        self.logger.info("=== Game session started ===")
        self.logger.info(f"Players: {self.players[0]!r} vs {self.players[1]!r}")
        self.logger.debug(f"Starting position:\n{self.state}")

    @property
    def searching(self) -> bool:
        return self._receiver is not None

    # ------------------------------------------------------------------
    # Human side
    # ------------------------------------------------------------------

    def legal_destinations(self, piece_id: int) -> List[int]:
        """Legal destination cells for a piece (for highlighting)."""
        return self.state.legal_destinations(piece_id)

    def apply_human_move(self, piece_id: int, destination: int) -> GameState:
        """
        Apply a move chosen by a human player.

        Args:
            piece_id: Piece to move
            destination: Destination cell

        Returns:
            The new authoritative state

        Raises:
            IllegalMove: If it is not a human's turn, a search is running, or
                the move is not legal. The state is unchanged.
        """
        if self.searching:
            raise IllegalMove(piece_id, destination, "a search is running")
        if self.players[self.state.current_player].kind is not PlayerKind.HUMAN:
            raise IllegalMove(piece_id, destination, "not a human player's turn")

        try:
            self.state.apply(piece_id, destination)
        except IllegalMove as e:
            self.logger.warning(str(e))
            raise

        self.move_history.append(self.state.last_move)
        self.logger.info(f"Human move: {self.describe_move(self.state.last_move)}")
        return self.state

    # ------------------------------------------------------------------
    # Turn sequencing
    # ------------------------------------------------------------------

    def next_turn(self) -> TurnState:
        """
        Resolve whose turn it is, starting a search for an AI player.

        A player to move without any legal move ends the game in a draw
        here, before any search is started.
        """
        status = self.state.update_status()
        if status is Status.WIN_PLAYER_0:
            self.turn = TurnState.PLAYER_0_WON
        elif status is Status.WIN_PLAYER_1:
            self.turn = TurnState.PLAYER_1_WON
        elif status is Status.DRAW:
            self.turn = TurnState.DRAW
        elif self.players[self.state.current_player].kind is PlayerKind.HUMAN:
            self.turn = TurnState.HUMAN_TURN
        else:
            self.start_search()
            self.turn = TurnState.AI_THINKING

        if self.turn.is_game_over:
            self.logger.info(f"Game over: {self.turn.value} after {len(self.move_history)} moves")
        return self.turn

    def start_search(self, player: Optional[PlayerConfig] = None) -> None:
        """
        Start a background search for the player to move.

        Args:
            player: Configuration to search with (default: the player to move)

        Raises:
            GameError: If a search is already running or the game is over
        """
        if self.searching:
            raise GameError("A search is already running")
        if self.state.update_status() is not Status.ONGOING:
            raise GameError(f"Game is over ({self.state.status.name})")

        player = player or self.players[self.state.current_player]
        sender, receiver = create_channel()

        # Make a copy of the state for the search thread to avoid race conditions
        state_copy = self.state.copy()

        self.stop_search = False
        self._receiver = receiver
        self._searching_player = player
        self.latest_progress = None
        self.search_thread = threading.Thread(
            target=self._search_thread,
            args=(player, state_copy, sender),
            daemon=True,
        )
        self.logger.info(f"Starting search thread: {player!r}, player {state_copy.current_player}")
        self.search_thread.start()

    def _search_thread(self, player: PlayerConfig, state: GameState, sender: ProgressSender) -> None:
        """Background thread body: run one search to completion."""
        start_time = time.time()
        try:
            think(
                player,
                state,
                sender,
                self.search_config,
                should_stop=lambda: self.stop_search,
                rng=self.rng,
            )
        finally:
            elapsed_ms = int((time.time() - start_time) * 1000)
            self.logger.debug(f"Search thread finished ({elapsed_ms}ms)")

    def _finish_search(self) -> None:
        if self.search_thread is not None:
            self.search_thread.join()
        self.search_thread = None
        self._receiver = None

    def poll(self) -> Optional[Message]:
        """
        Handle at most one waiting search message without blocking.

        Returns:
            The message handled, or None if nothing was waiting

        Raises:
            GameError: If the search and its random-move fallback both failed
        """
        if self._receiver is None:
            return None
        message = self._receiver.try_receive()
        if message is None:
            return None

        if isinstance(message, SearchUpdate):
            self.latest_progress = message.progress
            self.logger.debug(f"Progress: {self.format_progress(message.progress)}")

        elif isinstance(message, SearchCompleted):
            self._finish_search()
            self.latest_progress = message.progress
            self._install(message.progress)

        elif isinstance(message, SearchFailed):
            failed_player = self._searching_player
            self._finish_search()
            self.logger.error(f"Search failed: {message.reason}")
            if failed_player is not None and failed_player.kind is PlayerKind.AI_RANDOM:
                raise GameError(f"Search failed: {message.reason}")
            self.logger.warning("Falling back to a random move")
            self.start_search(PlayerConfig(PlayerKind.AI_RANDOM))

        return message

    def _install(self, progress: SearchProgress) -> None:
        node = progress.best_node
        if node is None or node.last_move is None:
            raise GameError("Search completed without a best move")

        move = node.last_move
        if move.destination not in self.state.moves_for(move.piece_id):
            raise GameError(f"Search returned an illegal move: {move}")

        self.state = node
        self.move_history.append(move)
        self.logger.info(f"AI move: {self.describe_move(move)} ({self.format_progress(progress)})")
        self.logger.debug(f"Position:\n{self.state}")

    def wait_for_search(self, timeout: Optional[float] = None) -> Optional[SearchProgress]:
        """
        Poll until the running search has finished and been applied.

        Args:
            timeout: Seconds to wait at most (None = no limit)

        Returns:
            Final progress of the search (None if no search was running)

        Raises:
            TimeoutError: If the search does not finish in time
        """
        deadline = None if timeout is None else time.time() + timeout
        while self.searching:
            if self.poll() is None:
                if deadline is not None and time.time() > deadline:
                    raise TimeoutError(f"Search did not finish within {timeout}s")
                time.sleep(POLL_INTERVAL)
        return self.latest_progress

    def play_ai_turn(self, timeout: Optional[float] = None) -> TurnState:
        """Resolve the turn and, for an AI player, wait for its move."""
        turn = self.next_turn()
        if turn is TurnState.AI_THINKING:
            self.wait_for_search(timeout)
        return turn

    def shutdown(self) -> None:
        """Stop and join any running search, then disconnect the channel."""
        self.stop_search = True
        receiver = self._receiver
        if self.search_thread is not None and self.search_thread.is_alive():
            self.logger.debug("Waiting for search thread to finish")
            self.search_thread.join()
        if receiver is not None:
            receiver.close()
        self.search_thread = None
        self._receiver = None
        self.logger.info("=== Game session stopped ===")

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    def describe_move(self, move: Move) -> str:
        """e.g. "P#5 c3x" for piece 5 (a pawn) capturing on c3."""
        piece = self.state.piece(move.piece_id)
        capture = "x" if move.captured else ""
        return f"{piece.symbol()}#{move.piece_id} {cell_name(move.destination, self.state.columns)}{capture}"

    def format_progress(self, progress: SearchProgress) -> str:
        """
        One-line progress summary.

        Example:
            nodes: 12,345 / ms: 250 = nps: 49,380. score: 2. pv: c3x, c4
        """
        text = f"nodes: {progress.nodes:,}"
        ms = int(progress.duration * 1000)
        if ms > 0:
            nps = int(progress.nodes / ms * 1000)
            text += f" / ms: {ms:,} = nps: {nps:,}"
        else:
            text += " / ms: 0 = nps: --"
        text += f". score: {int(progress.score):,}"
        cells = [
            cell_name(move.destination, self.state.columns) + ("x" if move.captured else "")
            for move in progress.pv
        ]
        text += ". pv: " + ", ".join(cells)
        return text
