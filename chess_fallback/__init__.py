"""
chess-fallback

A small, self-contained move search used to produce a best move when no
external move suggestion service is available: fixed-depth negamax with
alpha-beta pruning over a pure material evaluation.

## Architecture

1. **board**: Facade over the python-chess rules engine
   - Position interface (legal_moves, apply, undo, is_terminal)
   - ChessPosition, MoveInfo

2. **evaluation**: Position evaluation functions
   - Abstract Evaluator interface (swappable design)
   - MaterialEvaluator: P=1, N=3, B=3, R=5, Q=9 in centipawns

3. **search**: Negamax with alpha-beta pruning

4. **advisor**: External suggestions with local search fallback

5. **uci**: Universal Chess Interface protocol front end

## Quick Start

```python
from chess_fallback.board import ChessPosition
from chess_fallback.evaluation import MaterialEvaluator
from chess_fallback.search import find_best_move

position = ChessPosition.from_fen("startpos", ["e4", "e5"])
result = find_best_move(position, depth=4, evaluator=MaterialEvaluator())
print(f"Best move: {result.move} (score: {result.score})")
```

### As a UCI Engine

```bash
python -m chess_fallback.uci
```
"""

__version__ = "0.1.0"
__license__ = "MIT"

from chess_fallback.board import ChessPosition, MoveInfo, Position
from chess_fallback.config import EngineConfig
from chess_fallback.evaluation import Evaluator, MaterialEvaluator
from chess_fallback.search import SearchResult, best_move, find_best_move, minimax, negamax
from chess_fallback.advisor import MoveAdvisor, PositionAnalysis

__all__ = [
    'ChessPosition',
    'MoveInfo',
    'Position',
    'EngineConfig',
    'Evaluator',
    'MaterialEvaluator',
    'SearchResult',
    'best_move',
    'find_best_move',
    'minimax',
    'negamax',
    'MoveAdvisor',
    'PositionAnalysis',
]
