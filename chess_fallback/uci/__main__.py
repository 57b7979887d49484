"""
Main entry point for running the fallback engine over UCI.

Usage:
    python -m chess_fallback.uci [config.toml]
"""

from chess_fallback.uci.interface import main

if __name__ == "__main__":
    main()
