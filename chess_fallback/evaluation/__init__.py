"""
Evaluation Module

This module provides position evaluation functions for the engine.
Evaluators are SWAPPABLE: the search works with any evaluator that
implements the base interface.

Key Components:
    - Evaluator (ABC): Abstract base class defining the evaluation interface
    - MaterialEvaluator: Plain material count in centipawns
    - format_evaluation / evaluation_percentage: Display helpers

Data Flow:
    Position → evaluator.evaluate() → int (centipawns)
                                      Positive = White advantage
                                      Negative = Black advantage
"""

from chess_fallback.evaluation.base import Evaluator
from chess_fallback.evaluation.material import MaterialEvaluator, PIECE_VALUES
from chess_fallback.evaluation.display import format_evaluation, evaluation_percentage

__all__ = [
    'Evaluator',
    'MaterialEvaluator',
    'PIECE_VALUES',
    'format_evaluation',
    'evaluation_percentage',
]
