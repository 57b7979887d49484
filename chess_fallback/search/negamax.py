"""
Negamax Search with Alpha-Beta Pruning

This module implements the core search algorithm. It explores the game
tree to a fixed depth, assuming optimal play by both sides, and picks the
move with the best outcome for the side to move.

Key Concepts:
    - Negamax: Minimax written from the side to move's point of view. A
      child's score is negated on the way up, so every node maximizes and
      there is no maximizing/minimizing flag to keep in sync with the
      White-centric evaluator.
    - Alpha-Beta: Prunes branches that can't affect the result. Pruning
      never changes the returned move or score, only the work done.
    - Undo-based exploration: each move is applied to the one position,
      searched, then undone. No copies are kept.

Algorithm Complexity:
    - Minimax: O(b^d) where b=branching factor (~35), d=depth
    - Alpha-Beta: O(b^(d/2)) with perfect move ordering

References:
    - Negamax: https://www.chessprogramming.org/Negamax
    - Alpha-Beta: https://www.chessprogramming.org/Alpha-Beta
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

import chess

from chess_fallback.board.position import Position
from chess_fallback.evaluation.base import Evaluator
from chess_fallback.evaluation.material import MaterialEvaluator

logger = logging.getLogger(__name__)

INFINITY = float("inf")


@dataclass
class SearchResult:
    """
    Outcome of a root search.

    Attributes:
        move: Best move found, None if the side to move has no legal move
        score: Evaluation of that move in centipawns (White's perspective)
        depth: Requested search depth
        nodes: Number of positions visited
    """

    move: Optional[Any]
    score: int
    depth: int
    nodes: int = 0

    @property
    def found(self) -> bool:
        return self.move is not None


def negamax(
    position: Position,
    depth: int,
    alpha: float,
    beta: float,
    evaluator: Evaluator,
    alpha_beta: bool = True,
    nodes_searched: Optional[List[int]] = None,
) -> int:
    """
    Negamax search with alpha-beta pruning.

    Args:
        position: Position to search (mutated during the search, restored
            before returning)
        depth: Remaining search depth in plies
        alpha: Lower bound of the window, side to move's perspective
        beta: Upper bound of the window, side to move's perspective
        evaluator: Position evaluation function
        alpha_beta: If False, search every move (exhaustive minimax)
        nodes_searched: Optional mutable list [count] to track positions visited

    Returns:
        int: Score in centipawns from the side to move's perspective

    Algorithm:
        1. Leaf (depth 0, game over or no legal moves) → static evaluation
        2. For each legal move:
            a. Apply move
            b. score = -negamax(child, depth - 1, -beta, -alpha)
            c. Undo move
            d. Raise alpha
            e. Stop once alpha >= beta (the opponent avoids this line)
        3. Return best score found
    """
    if nodes_searched is not None:
        nodes_searched[0] += 1

    if depth <= 0 or position.is_terminal():
        return evaluator.evaluate_relative(position)

    moves = position.legal_moves()
    if not moves:
        return evaluator.evaluate_relative(position)

    best_score = -INFINITY
    for move in moves:
        position.apply(move)
        try:
            score = -negamax(
                position,
                depth - 1,
                -beta,
                -alpha,
                evaluator,
                alpha_beta,
                nodes_searched,
            )
        finally:
            position.undo()

        best_score = max(best_score, score)

        if alpha_beta:
            alpha = max(alpha, score)
            if alpha >= beta:
                break  # Cutoff

    return best_score


def minimax(
    position: Position,
    depth: int,
    evaluator: Evaluator,
    alpha: float = -INFINITY,
    beta: float = INFINITY,
    alpha_beta: bool = True,
    nodes_searched: Optional[List[int]] = None,
) -> int:
    """
    Minimax value of a position from White's perspective.

    The maximizing side is whoever is to move: White maximizes the
    White-centric score, Black minimizes it. Implemented on top of negamax
    by flipping the sign and the (alpha, beta) window for Black.

    Args:
        position: Position to search
        depth: Search depth in plies
        evaluator: Position evaluation function
        alpha: Lower bound of the window, White's perspective
        beta: Upper bound of the window, White's perspective
        alpha_beta: If False, search every move
        nodes_searched: Optional mutable list [count]

    Returns:
        int: Score in centipawns, positive = good for White
    """
    if position.turn == chess.WHITE:
        return negamax(position, depth, alpha, beta, evaluator, alpha_beta, nodes_searched)
    return -negamax(position, depth, -beta, -alpha, evaluator, alpha_beta, nodes_searched)


def _score_root_moves(
    position: Position,
    depth: int,
    evaluator: Evaluator,
    alpha_beta: bool,
    nodes_searched: List[int],
) -> Iterator[Tuple[Any, int]]:
    """
    Yield (move, score) for every legal root move, score from the side to
    move's perspective.

    Each child gets the full window so its score is exact. The root always
    looks one ply ahead, so depth 0 and depth 1 both score the children
    statically.
    """
    child_depth = max(depth - 1, 0)

    for move in position.legal_moves():
        position.apply(move)
        try:
            score = -negamax(
                position,
                child_depth,
                -INFINITY,
                INFINITY,
                evaluator,
                alpha_beta,
                nodes_searched,
            )
        finally:
            position.undo()

        logger.debug(f"Move: {move}, Score: {score}")
        yield move, score


def _check_depth(depth: int) -> None:
    if depth < 0:
        raise ValueError(f"Search depth must be >= 0, got {depth}")


def find_best_move(
    position: Position,
    depth: int,
    evaluator: Evaluator,
    alpha_beta: bool = True,
) -> SearchResult:
    """
    Find the best move for the side to move.

    Args:
        position: Current position (restored before returning)
        depth: Search depth in plies
        evaluator: Position evaluation function
        alpha_beta: If False, search exhaustively (same result, more nodes)

    Returns:
        SearchResult. Its move is None when there is no legal move
        (checkmate or stalemate) and its score is then the static evaluation.
        Equal scores keep the first move in legal move order.

    Raises:
        ValueError: If depth is negative
    """
    _check_depth(depth)

    nodes = [1]
    best_move = None
    best_score = -INFINITY

    for move, score in _score_root_moves(position, depth, evaluator, alpha_beta, nodes):
        if score > best_score:
            best_score = score
            best_move = move

    if best_move is None:
        score = evaluator.evaluate(position)
        logger.debug(f"No legal moves, static score: {score}")
        return SearchResult(move=None, score=score, depth=depth, nodes=nodes[0])

    # Back to White's perspective
    if position.turn == chess.BLACK:
        best_score = -best_score

    logger.debug(f"Nodes searched: {nodes[0]}")
    logger.debug(f"Best move: {best_move}, Score: {best_score}")

    return SearchResult(move=best_move, score=int(best_score), depth=depth, nodes=nodes[0])


def rank_moves(
    position: Position,
    depth: int,
    evaluator: Evaluator,
    alpha_beta: bool = True,
) -> List[Tuple[Any, int]]:
    """
    Score every legal move and order them best-first for the side to move.

    Args:
        position: Current position (restored before returning)
        depth: Search depth in plies
        evaluator: Position evaluation function
        alpha_beta: If False, search exhaustively

    Returns:
        List of (move, score) with White-centric scores. Moves with equal
        scores keep legal move order. Empty if there is no legal move.

    Raises:
        ValueError: If depth is negative
    """
    _check_depth(depth)

    sign = 1 if position.turn == chess.WHITE else -1
    scored = list(_score_root_moves(position, depth, evaluator, alpha_beta, [0]))
    scored.sort(key=lambda item: item[1], reverse=True)

    return [(move, sign * score) for move, score in scored]


def best_move(
    position: Position,
    depth: int,
    evaluator: Optional[Evaluator] = None,
) -> Optional[Any]:
    """
    Best move for the side to move, or None if there is no legal move.

    Uses MaterialEvaluator when no evaluator is given.
    """
    if evaluator is None:
        evaluator = MaterialEvaluator()

    return find_best_move(position, depth, evaluator).move
