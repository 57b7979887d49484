"""
Material Evaluation

Counts material and nothing else: no piece-square tables, mobility, pawn
structure or king safety. It exists to give the search something to
optimize, not to play strong chess.

Evaluation:
    - Material: P=1, N=3, B=3, R=5, Q=9, K=0 (pawns)
    - White pieces add, Black pieces subtract
    - Total * 100 = centipawns

Known weakness: checkmate is not special-cased. A mated side is scored on
its remaining material only, so the search can prefer grabbing material
over a forced mate.
"""

from typing import Mapping, Optional

import chess

from chess_fallback.board.position import Position
from chess_fallback.board.representation import COLOR_TO_ROW, material_vector, piece_counts
from chess_fallback.evaluation.base import Evaluator, CENTIPAWNS_PER_PAWN

# Material values in pawns
PIECE_VALUES = {
    chess.PAWN: 1,
    chess.KNIGHT: 3,
    chess.BISHOP: 3,
    chess.ROOK: 5,
    chess.QUEEN: 9,
    chess.KING: 0,
}


class MaterialEvaluator(Evaluator):
    """
    Pure material count.

    Attributes:
        piece_values: Piece type → value in pawns
    """

    def __init__(self, piece_values: Optional[Mapping[int, int]] = None):
        self.piece_values = dict(PIECE_VALUES)
        if piece_values:
            self.piece_values.update(piece_values)

        self._values = material_vector(self.piece_values)

    def material_balance(self, position: Position) -> int:
        """White material minus Black material, in pawns."""
        counts = piece_counts(position.piece_map())
        balance = counts[COLOR_TO_ROW[chess.WHITE]] - counts[COLOR_TO_ROW[chess.BLACK]]
        return int(balance @ self._values)

    def evaluate(self, position: Position) -> int:
        return self.material_balance(position) * CENTIPAWNS_PER_PAWN

    def __repr__(self) -> str:
        if self.piece_values == PIECE_VALUES:
            return "MaterialEvaluator()"
        values = {chess.piece_symbol(k): v for k, v in sorted(self.piece_values.items())}
        return f"MaterialEvaluator(piece_values={values})"
