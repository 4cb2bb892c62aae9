"""
Self-play from the command line.

    python -m shogi_engine.session --player0 minimax --depth0 3 \
        --player1 monte_carlo --rounds1 100
"""

import argparse
import sys
from pathlib import Path

from shogi_engine.board.representation import render_state
from shogi_engine.config import PlayerConfig, PlayerKind, SearchConfig
from shogi_engine.errors import GameError
from shogi_engine.session.controller import GameSession, TurnState

AI_KINDS = [kind.value for kind in PlayerKind if kind.is_ai]


def build_player(kind: str, depth: int, rounds: int) -> PlayerConfig:
    return PlayerConfig(PlayerKind(kind), search_depth=depth, search_rounds=rounds)


def main():
    parser = argparse.ArgumentParser(
        description="Play a game between two AI players"
    )
    parser.add_argument("--player0", choices=AI_KINDS, default="minimax",
                        help="Strategy for player 0 (default: minimax)")
    parser.add_argument("--player1", choices=AI_KINDS, default="monte_carlo",
                        help="Strategy for player 1 (default: monte_carlo)")
    parser.add_argument("--depth0", type=int, default=2, help="Minimax depth for player 0")
    parser.add_argument("--depth1", type=int, default=2, help="Minimax depth for player 1")
    parser.add_argument("--rounds0", type=int, default=50, help="Monte Carlo rounds for player 0")
    parser.add_argument("--rounds1", type=int, default=50, help="Monte Carlo rounds for player 1")
    parser.add_argument("--max-moves", type=int, default=200,
                        help="Stop the game as a draw after this many moves (default: 200)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible games")
    parser.add_argument("--log-file", type=Path, default=None,
                        help="Log file (default: ~/.shogi_engine/engine.log)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", action="store_true", help="Only print the result")

    args = parser.parse_args()

    try:
        players = [
            build_player(args.player0, args.depth0, args.rounds0),
            build_player(args.player1, args.depth1, args.rounds1),
        ]
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    session = GameSession(
        players,
        search_config=SearchConfig(random_seed=args.seed),
        log_file=args.log_file,
        debug=args.debug,
    )

    turn = None
    try:
        if not args.quiet:
            print(render_state(session.state))
        while len(session.move_history) < args.max_moves:
            turn = session.play_ai_turn()
            if turn.is_game_over:
                break
            if not args.quiet:
                print(f"\nMove {len(session.move_history)}: "
                      f"{session.describe_move(session.state.last_move)}")
                if session.latest_progress is not None:
                    print(session.format_progress(session.latest_progress))
                print(render_state(session.state))
    except KeyboardInterrupt:
        print("\n\nGame interrupted by user")
        sys.exit(1)
    except GameError as e:
        print(f"\n\nError: {e}")
        sys.exit(1)
    finally:
        session.shutdown()

    if turn is None or not turn.is_game_over:
        print(f"\nNo result after {args.max_moves} moves: draw")
    elif turn is TurnState.DRAW:
        print(f"\nDraw after {len(session.move_history)} moves")
    else:
        winner = 0 if turn is TurnState.PLAYER_0_WON else 1
        print(f"\nPlayer {winner} wins after {len(session.move_history)} moves")


if __name__ == "__main__":
    main()
