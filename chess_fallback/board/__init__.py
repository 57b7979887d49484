"""
Board Module

Thin facade over the python-chess rules engine. The search and the
evaluator only see the Position interface defined here, never a raw board.

Key Components:
    - Position: Abstract interface (legal_moves, apply, undo, is_terminal)
    - ChessPosition: python-chess implementation
    - MoveInfo: Human-readable move description (from, to, promotion, SAN)
    - piece_counts: (2, 6) numpy array of piece counts per color and kind

Data Flow:
    FEN → ChessPosition.from_fen() → search → chess.Move → describe() → MoveInfo
"""

from chess_fallback.board.position import Position, ChessPosition, MoveInfo, STARTPOS
from chess_fallback.board.representation import piece_counts

__all__ = ['Position', 'ChessPosition', 'MoveInfo', 'STARTPOS', 'piece_counts']
