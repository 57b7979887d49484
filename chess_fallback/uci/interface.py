"""
UCI Protocol Implementation

This module implements the Universal Chess Interface (UCI) protocol for
communication between the engine and GUI applications.

UCI Commands Supported:
    - uci: Identify engine
    - isready: Synchronization check
    - ucinewgame: Start new game
    - position: Set board position
    - go: Start searching (depth only)
    - stop: Wait for the running search
    - quit: Shutdown engine

Threading:
    - Main thread: Listen for UCI commands
    - Search thread: Run the search on a copy of the board
    - The search itself has no cancellation; stop waits for it to finish

References:
    - UCI Protocol: https://www.chessprogramming.org/UCI
"""

import logging
import sys
import threading
import time
from typing import List, Optional

import chess

from chess_fallback.board.position import ChessPosition
from chess_fallback.config import EngineConfig
from chess_fallback.evaluation.base import Evaluator
from chess_fallback.evaluation.material import MaterialEvaluator
from chess_fallback.search.negamax import find_best_move

LOGGER_NAME = "chess_fallback"


def setup_logger(config: EngineConfig) -> logging.Logger:
    """
    Setup the package logger for UCI debugging.

    stdout carries the protocol, so logs go to config.log_file when set
    and to stderr otherwise.

    Args:
        config: Engine configuration (log_level, log_file)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level_value)

    for old_handler in list(logger.handlers):
        old_handler.close()
        logger.removeHandler(old_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(config.log_file, mode='w')
    else:
        handler = logging.StreamHandler(sys.stderr)

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


class UCIEngine:
    """
    UCI-compliant front end for the fallback search.

    Attributes:
        board: Current chess position of the session
        evaluator: Position evaluation function
        config: Engine configuration
        search_thread: Background thread for the running search
        last_result: Result of the most recent completed search
    """

    def __init__(self, evaluator: Optional[Evaluator] = None, config: Optional[EngineConfig] = None):
        """
        Initialize UCI engine.

        Args:
            evaluator: Position evaluator (default: MaterialEvaluator)
            config: Engine configuration (default: EngineConfig())
        """
        self.config = config if config else EngineConfig()
        self.board = chess.Board()
        self.evaluator = evaluator if evaluator else MaterialEvaluator()

        self.searching = False
        self.search_thread: Optional[threading.Thread] = None
        self.last_result = None

        self.logger = setup_logger(self.config)
        self.logger.info(f"=== {self.config.engine_name} Engine Started ===")

    def run(self):
        """
        Main UCI command loop.

        Listens for UCI commands on stdin and responds on stdout.
        Runs until 'quit' command or end of input.
        """
        while True:
            try:
                command = input().strip()
            except EOFError:
                self.logger.info("EOF received, shutting down")
                self.handle_quit()
                break

            if not command:
                continue

            if not self.handle_command(command):
                break

    def handle_command(self, command: str) -> bool:
        """
        Dispatch one command line.

        Returns:
            False once the engine should stop reading commands
        """
        self.logger.debug(f">>> {command}")

        tokens = command.split()
        cmd = tokens[0].lower()

        try:
            if cmd == "uci":
                self.handle_uci()
            elif cmd == "isready":
                self.handle_isready()
            elif cmd == "ucinewgame":
                self.handle_ucinewgame()
            elif cmd == "position":
                self.handle_position(tokens)
            elif cmd == "go":
                self.handle_go(tokens)
            elif cmd == "stop":
                self.handle_stop()
            elif cmd == "quit":
                self.handle_quit()
                return False
            else:
                # Unknown commands are ignored per UCI
                self.logger.debug(f"Unknown command ignored: {command}")
        except Exception as e:
            self.logger.error(f"Command error: {e}", exc_info=True)
            print(f"# Error: {e}", file=sys.stderr)

        return True

    def _send(self, line: str):
        print(line)
        sys.stdout.flush()
        self.logger.debug(f"<<< {line}")

    def handle_uci(self):
        """
        Handle 'uci' command - identify engine.

        Response:
            id name <name>
            id author <author>
            option name Depth ...
            uciok
        """
        self._send(f"id name {self.config.engine_name}")
        self._send(f"id author {self.config.engine_author}")
        self._send(f"option name Depth type spin default {self.config.depth} min 0 max 64")
        self._send("uciok")

    def handle_isready(self):
        """Handle 'isready' command - synchronization."""
        self.handle_stop()
        self._send("readyok")

    def handle_ucinewgame(self):
        """Handle 'ucinewgame' command - reset for new game."""
        self.logger.info("Handling: ucinewgame - resetting board")
        self.handle_stop()
        self.board = chess.Board()
        self.last_result = None

    def handle_position(self, tokens: List[str]):
        """
        Handle 'position' command - set board position.

        Formats:
            position startpos
            position startpos moves e2e4 e7e5
            position fen <FEN string>
            position fen <FEN string> moves e2e4

        An invalid FEN leaves the current board untouched. Moves are
        applied up to the first illegal one.

        Args:
            tokens: Command tokens (e.g., ['position', 'startpos', 'moves', 'e2e4'])
        """
        self.logger.info(f"Handling: position {' '.join(tokens[1:])}")

        if len(tokens) < 2:
            self.logger.warning("Position command with insufficient arguments")
            return

        if "moves" in tokens:
            moves_index = tokens.index("moves")
        else:
            moves_index = len(tokens)

        if tokens[1] == "startpos":
            board = chess.Board()
        elif tokens[1] == "fen":
            fen = " ".join(tokens[2:moves_index])
            try:
                board = chess.Board(fen)
            except ValueError as e:
                self.logger.error(f"Invalid FEN: {e}")
                print(f"# Invalid FEN: {e}", file=sys.stderr)
                return
        else:
            self.logger.warning(f"Unknown position type: {tokens[1]}")
            return

        for move_str in tokens[moves_index + 1:]:
            try:
                move = chess.Move.from_uci(move_str)
            except ValueError as e:
                self.logger.error(f"Invalid move format: {move_str} - {e}")
                print(f"# Invalid move format: {move_str}", file=sys.stderr)
                break

            if not board.is_legal(move):
                self.logger.error(f"Illegal move: {move_str}")
                print(f"# Illegal move: {move_str}", file=sys.stderr)
                break

            board.push(move)

        self.board = board
        self.logger.debug(f"Position updated: {self.board.fen()}")

    def handle_go(self, tokens: List[str]):
        """
        Handle 'go' command - start search.

        Formats:
            go depth 5
            go (uses the configured depth)

        Time controls (movetime, wtime, btime, infinite) are accepted and
        ignored; depth is the only search limit.

        Args:
            tokens: Command tokens (e.g., ['go', 'depth', '5'])
        """
        self.logger.info(f"Handling: go {' '.join(tokens[1:])}")

        depth = self.config.depth
        if "depth" in tokens:
            index = tokens.index("depth")
            if index + 1 < len(tokens):
                depth = max(0, int(tokens[index + 1]))

        # One search at a time
        self.handle_stop()

        position = ChessPosition(self.board.copy(), claim_draw=self.config.claim_draw)

        self.searching = True
        self.search_thread = threading.Thread(
            target=self._search_thread,
            args=(position, depth),
            daemon=True,
        )
        self.search_thread.start()

    def _search_thread(self, position: ChessPosition, depth: int):
        """
        Background thread for search.

        Output:
            info depth X score cp Y nodes Z time T
            bestmove <move>
        """
        start_time = time.time()

        try:
            result = find_best_move(
                position,
                depth,
                self.evaluator,
                alpha_beta=self.config.alpha_beta,
            )
            elapsed_ms = int((time.time() - start_time) * 1000)
            self.last_result = result

            if not result.found:
                self.logger.info(f"No legal moves in {position.fen()}")
                self._send("bestmove 0000")
                return

            # UCI scores are from the engine's (side to move's) point of view
            score_cp = result.score if position.turn == chess.WHITE else -result.score

            self.logger.info(
                f"Search complete: best_move={result.move.uci()}, score={result.score}, "
                f"nodes={result.nodes}, time={elapsed_ms}ms"
            )
            self._send(
                f"info depth {depth} score cp {score_cp} nodes {result.nodes} "
                f"time {elapsed_ms} pv {result.move.uci()}"
            )
            self._send(f"bestmove {result.move.uci()}")

        except Exception as e:
            self.logger.error(f"Search error: {e}", exc_info=True)
            print(f"# Search error: {e}", file=sys.stderr)

            legal_moves = position.legal_moves()
            if legal_moves:
                self.logger.warning(f"Using fallback move: {legal_moves[0].uci()}")
                self._send(f"bestmove {legal_moves[0].uci()}")
            else:
                self._send("bestmove 0000")

        finally:
            self.searching = False

    def handle_stop(self):
        """
        Handle 'stop' command.

        The search cannot be interrupted, so this waits for it to finish
        and report its move.
        """
        if self.searching and self.search_thread is not None:
            self.logger.debug("Waiting for search thread to finish")
            self.search_thread.join()

    def handle_quit(self):
        """Handle 'quit' command - shutdown engine."""
        self.logger.info("Handling: quit - shutting down engine")
        self.handle_stop()
        self.logger.info(f"=== {self.config.engine_name} Engine Stopped ===")


def main(argv: Optional[List[str]] = None):
    """
    Run the engine over stdin/stdout.

    Args:
        argv: Command line arguments; an optional path to a TOML config file
    """
    argv = sys.argv[1:] if argv is None else argv
    config = EngineConfig.from_toml(argv[0]) if argv else EngineConfig()
    UCIEngine(config=config).run()
