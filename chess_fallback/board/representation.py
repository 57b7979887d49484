"""
Piece Count Representation

This module turns a piece placement into a small numpy array that the
material evaluator can reduce with a single dot product.

Layout (2 rows x 6 columns):
    row 0: White pieces     row 1: Black pieces
    col 0: Pawns            col 3: Rooks
    col 1: Knights          col 4: Queens
    col 2: Bishops          col 5: Kings

Data Flow:
    Position.piece_map() → piece_counts() → (2, 6) int array → evaluator
"""

import chess
import numpy as np
from typing import Mapping

# Color to row index mapping
COLOR_TO_ROW = {
    chess.WHITE: 0,
    chess.BLACK: 1,
}

PIECE_TYPES = [chess.PAWN, chess.KNIGHT, chess.BISHOP, chess.ROOK, chess.QUEEN, chess.KING]


def piece_type_to_column(piece_type: int) -> int:
    """
    Convert a python-chess piece type to its column in the count array.

    Args:
        piece_type: chess.PAWN (1) through chess.KING (6)

    Returns:
        Column index (0-5)
    """
    return piece_type - chess.PAWN


def piece_counts(piece_map: Mapping[chess.Square, chess.Piece]) -> np.ndarray:
    """
    Count pieces of each kind and color.

    Args:
        piece_map: Mapping of square to piece, as returned by
            chess.Board.piece_map()

    Returns:
        numpy array of shape (2, 6) with dtype int64
    """
    counts = np.zeros((2, len(PIECE_TYPES)), dtype=np.int64)

    for piece in piece_map.values():
        counts[COLOR_TO_ROW[piece.color], piece_type_to_column(piece.piece_type)] += 1

    return counts


def material_vector(values: Mapping[int, int]) -> np.ndarray:
    """
    Build a per-column value vector from a piece type → value mapping.

    Piece types missing from the mapping are worth 0.
    """
    return np.array([values.get(piece_type, 0) for piece_type in PIECE_TYPES], dtype=np.int64)
