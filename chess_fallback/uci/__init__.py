"""
UCI Protocol Interface

This module implements the Universal Chess Interface (UCI) protocol so the
fallback search can be driven by any chess GUI.

Protocol Flow:
    GUI → "uci"
    Engine → "id name ChessFallback"
    Engine → "uciok"
    GUI → "isready"
    Engine → "readyok"
    GUI → "position startpos moves e2e4"
    GUI → "go depth 4"
    Engine → "info depth 4 score cp 0 nodes 12345 time 850 pv e7e5"
    Engine → "bestmove e7e5"

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from chess_fallback.uci.interface import UCIEngine

__all__ = ['UCIEngine']
