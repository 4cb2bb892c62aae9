#!/usr/bin/env python3
"""
Strategy Match Runner

Plays a series of games between two AI player configurations and prints a
summary table (wins, draws, average game length, nodes per second). Players
swap sides every game so neither strategy always moves first.

Usage:
    python tools/run_match.py [--games 20] [--a minimax:2] [--b monte_carlo:50]
"""

import sys
import argparse
import logging
import random
import time
from pathlib import Path

from tqdm import tqdm

sys.path.insert(0, str(Path(__file__).parent.parent))

from shogi_engine.channel import create_channel
from shogi_engine.config import PlayerConfig, PlayerKind, SearchConfig
from shogi_engine.game.state import GameState, Status
from shogi_engine.search import think


def format_time(seconds: float) -> str:
    """Format time"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.0f}s"


def parse_player(text: str) -> PlayerConfig:
    """
    Parse "kind[:budget]", e.g. "minimax:3", "monte_carlo:100", "random".

    The budget is the search depth for minimax and the rounds for Monte Carlo.
    """
    kind_name, _, budget = text.partition(":")
    kind = PlayerKind(kind_name)
    if not kind.is_ai:
        raise ValueError("Only AI players can take part in a match")
    if kind is PlayerKind.AI_MINIMAX and budget:
        return PlayerConfig(kind, search_depth=int(budget))
    if kind is PlayerKind.AI_MONTE_CARLO and budget:
        return PlayerConfig(kind, search_rounds=int(budget))
    return PlayerConfig(kind)


def play_game(players, search_config: SearchConfig, max_moves: int, rng: random.Random) -> dict:
    """
    Play one game without a session (searches run on this thread).

    Returns:
        Dict with the final status, number of moves and per-player nodes/time
    """
    state = GameState.from_layout()
    sender, receiver = create_channel()
    nodes = [0, 0]
    elapsed = [0.0, 0.0]
    moves = 0

    while state.update_status() is Status.ONGOING and moves < max_moves:
        player = state.current_player
        progress = think(players[player], state, sender, search_config, rng=rng)
        # Drain the updates; only the final result matters here.
        while receiver.try_receive() is not None:
            pass
        if progress is None:
            raise RuntimeError(f"Search failed for {players[player]!r}")

        nodes[player] += progress.nodes
        elapsed[player] += progress.duration
        state = progress.best_node
        moves += 1

    status = state.status if state.status is not Status.ONGOING else Status.DRAW
    return {'status': status, 'moves': moves, 'nodes': nodes, 'time': elapsed}


def run_match(a: PlayerConfig, b: PlayerConfig, games: int, max_moves: int, seed=None):
    """
    Play a match between two players, alternating sides.

    Args:
        a: First player configuration
        b: Second player configuration
        games: Number of games
        max_moves: Moves after which an unfinished game counts as a draw
        seed: Base random seed (game i uses seed + i)
    """
    print("=" * 80)
    print("MATCH - Shogi Engine")
    print("=" * 80)
    print(f"A: {a!r}")
    print(f"B: {b!r}")
    print(f"Games: {games} (max {max_moves} moves each)")
    print("=" * 80)
    print()

    totals = {
        'A': {'wins': 0, 'nodes': 0, 'time': 0.0},
        'B': {'wins': 0, 'nodes': 0, 'time': 0.0},
    }
    draws = 0
    lengths = []

    start_time = time.time()
    for game in tqdm(range(games), desc="Playing games"):
        a_side = game % 2
        players = [a, b] if a_side == 0 else [b, a]
        labels = ['A', 'B'] if a_side == 0 else ['B', 'A']
        search_config = SearchConfig(random_seed=None if seed is None else seed + game)
        rng = random.Random(search_config.random_seed)

        result = play_game(players, search_config, max_moves, rng)
        lengths.append(result['moves'])
        for side in (0, 1):
            totals[labels[side]]['nodes'] += result['nodes'][side]
            totals[labels[side]]['time'] += result['time'][side]

        winner = result['status'].winner
        if winner is None:
            draws += 1
        else:
            totals[labels[winner]]['wins'] += 1
    total_time = time.time() - start_time

    print("\n" + "=" * 80)
    print("SUMMARY TABLE")
    print("=" * 80)
    print(f"{'Player':<8} {'Wins':<8} {'%':<8} {'Nodes':<15} {'Think time':<12} {'Nodes/sec':<15}")
    print("-" * 80)

    for label, stats in totals.items():
        pct = 100 * stats['wins'] / games if games else 0
        nps = stats['nodes'] / stats['time'] if stats['time'] > 0 else 0
        print(f"{label:<8} {stats['wins']:<8} {pct:<7.1f}% {stats['nodes']:<15,} "
              f"{format_time(stats['time']):<12} {nps:>12,.0f}")

    print("-" * 80)
    print(f"Draws: {draws}")
    if lengths:
        print(f"Average game length: {sum(lengths) / len(lengths):.1f} moves")
    print(f"Total time: {format_time(total_time)}")
    print("=" * 80)

    return totals, draws


def main():
    parser = argparse.ArgumentParser(
        description="Play a match between two AI player configurations"
    )
    parser.add_argument("--a", type=str, default="minimax:2",
                        help="First player as kind[:budget] (default: minimax:2)")
    parser.add_argument("--b", type=str, default="monte_carlo:50",
                        help="Second player as kind[:budget] (default: monte_carlo:50)")
    parser.add_argument("--games", type=int, default=10, help="Number of games (default: 10)")
    parser.add_argument("--max-moves", type=int, default=200,
                        help="Unfinished games are drawn after this many moves (default: 200)")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed")
    parser.add_argument("--verbose", action="store_true", help="Log search details to stderr")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S',
    )

    try:
        a = parse_player(args.a)
        b = parse_player(args.b)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    try:
        run_match(a, b, args.games, args.max_moves, seed=args.seed)
    except KeyboardInterrupt:
        print("\n\nMatch interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\n\nError running match: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
