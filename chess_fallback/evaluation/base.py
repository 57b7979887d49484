"""
Abstract Evaluator Interface

This module defines the abstract base class for all position evaluators.
By defining a common interface, we can swap between evaluators without
modifying the search algorithm.

Key Principles:
    1. Evaluators are stateless
    2. evaluate() always returns centipawns from White's perspective
    3. Positive = White advantage, Negative = Black advantage
    4. evaluate_relative() converts to the side to move's perspective,
       which is what negamax works with

Convention:
    - Scores are integers in centipawns (1/100th of a pawn)
    - Return 0 for perfectly equal positions
"""

from abc import ABC, abstractmethod

import chess

from chess_fallback.board.position import Position

CENTIPAWNS_PER_PAWN = 100


class Evaluator(ABC):
    """
    Abstract base class for position evaluation.

    All evaluator implementations must inherit from this class and implement
    the evaluate() method. This ensures compatibility with the search algorithm.
    """

    @abstractmethod
    def evaluate(self, position: Position) -> int:
        """
        Evaluate a position from White's perspective.

        Args:
            position: Position to evaluate (not modified)

        Returns:
            int: Evaluation in centipawns
        """

    def evaluate_relative(self, position: Position) -> int:
        """
        Evaluate a position from the side to move's perspective.

        Args:
            position: Position to evaluate (not modified)

        Returns:
            int: Evaluation in centipawns, positive = good for the side to move
        """
        score = self.evaluate(position)
        return score if position.turn == chess.WHITE else -score

    def __repr__(self) -> str:
        """String representation of evaluator."""
        return f"{self.__class__.__name__}()"
