"""
Search Module

This module implements the move search: fixed-depth negamax with
alpha-beta pruning over a Position, scored by a swappable Evaluator.

Key Components:
    - negamax: Core recursive search (side to move's perspective)
    - minimax: Same search, White-centric score
    - find_best_move: Root-level search returning a SearchResult
    - best_move: Shortcut returning just the move (or None)
    - rank_moves: Every root move with its score, best first
"""

from chess_fallback.search.negamax import (
    INFINITY,
    SearchResult,
    negamax,
    minimax,
    find_best_move,
    best_move,
    rank_moves,
)

__all__ = [
    'INFINITY',
    'SearchResult',
    'negamax',
    'minimax',
    'find_best_move',
    'best_move',
    'rank_moves',
]
