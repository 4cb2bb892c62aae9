"""
Shogi Engine

A small-board shogi-style game engine: the rules (moves, captures into the
reserve, drops, promotion), three AI strategies and a threaded game session
that streams search progress to a front end.

## Architecture

The engine is organized into several key modules:

1. **game**: Rules and state
   - Piece kinds, movement vectors, promotion and demotion
   - GameState: value-type board + reserves, move generation, status
   - Action: reversible form of a move (apply and undo)

2. **board**: Cell coordinates and text rendering

3. **evaluation**: Position evaluation functions
   - Abstract Evaluator interface (swappable design)
   - MaterialEvaluator: piece value difference

4. **search**: Search algorithms
   - Minimax with alpha-beta pruning and principal variation
   - Pure Monte Carlo random playouts
   - Random move baseline

5. **channel**: Rate-limited progress channel from search to front end

6. **session**: Turn sequencing, human moves and background AI searches

## Quick Start

### As a Python Library

```python
from shogi_engine import GameState, PlayerConfig, PlayerKind
from shogi_engine.channel import create_channel
from shogi_engine.search import think

state = GameState.from_layout()
sender, receiver = create_channel()
progress = think(PlayerConfig(PlayerKind.AI_MINIMAX, search_depth=3), state, sender)
print(f"Best move: {progress.best_move} (score: {progress.score:.2f})")
```

### Self-play

```bash
python -m shogi_engine.session --player0 minimax --player1 monte_carlo
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from shogi_engine.errors import (
    ChannelDisconnected,
    GameError,
    IllegalMove,
    LayoutError,
    NoLegalMoves,
    ReserveOverflow,
)
from shogi_engine.game import GameState, Move, Piece, PieceKind, Status
from shogi_engine.config import PlayerConfig, PlayerKind, SearchConfig

__all__ = [
    'ChannelDisconnected',
    'GameError',
    'GameState',
    'IllegalMove',
    'LayoutError',
    'Move',
    'NoLegalMoves',
    'Piece',
    'PieceKind',
    'PlayerConfig',
    'PlayerKind',
    'ReserveOverflow',
    'SearchConfig',
    'Status',
]
