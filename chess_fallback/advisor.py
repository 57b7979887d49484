"""
Move Advisor

Answers "what should be played here?" for a FEN and move history. An
external move suggestion service can be plugged in as a plain callable;
whenever it is missing, fails, or suggests something illegal, the local
search provides the move instead.

Every call builds its own position, so one advisor can serve independent
games without any shared board state.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Union

from chess_fallback.board.position import ChessPosition, MoveInfo
from chess_fallback.config import EngineConfig
from chess_fallback.evaluation.base import Evaluator
from chess_fallback.evaluation.material import MaterialEvaluator
from chess_fallback.search.negamax import find_best_move, rank_moves

logger = logging.getLogger(__name__)

# (fen, move history in SAN) → suggested move
MoveSuggester = Callable[[str, List[str]], Optional[Union[MoveInfo, Mapping[str, Any]]]]


@dataclass
class PositionAnalysis:
    """
    Local analysis of a position.

    Attributes:
        score: Static evaluation in centipawns (White's perspective)
        best_moves: Strongest moves first
        depth: Search depth used to rank the moves
    """

    score: int
    best_moves: List[MoveInfo] = field(default_factory=list)
    depth: int = 0

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "bestMoves": [move.to_dict() for move in self.best_moves],
            "depth": self.depth,
        }


class MoveAdvisor:
    """
    Move suggestions with a local search fallback.

    Attributes:
        suggester: Optional external move source
        evaluator: Evaluator used by the local search
        config: Search depth and draw handling
    """

    def __init__(
        self,
        suggester: Optional[MoveSuggester] = None,
        evaluator: Optional[Evaluator] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.suggester = suggester
        self.evaluator = evaluator if evaluator else MaterialEvaluator()
        self.config = config if config else EngineConfig()

    def _position(self, fen: str, move_history: Iterable[str]) -> ChessPosition:
        return ChessPosition.from_fen(fen, move_history, claim_draw=self.config.claim_draw)

    def suggest(self, fen: str, move_history: Sequence[str] = ()) -> Optional[MoveInfo]:
        """
        Suggest a move for the side to move.

        Args:
            fen: Position in FEN, or "startpos"
            move_history: Moves already played from the FEN position
                (UCI or SAN); they are applied before searching

        Returns:
            MoveInfo, or None if the side to move has no legal move

        Raises:
            ValueError: If the FEN or a history move is invalid
        """
        position = self._position(fen, move_history)

        external = self._ask_suggester(position, fen, list(move_history))
        if external is not None:
            return external

        result = find_best_move(
            position,
            self.config.depth,
            self.evaluator,
            alpha_beta=self.config.alpha_beta,
        )

        if not result.found:
            logger.info(f"No legal moves in {position.fen()}")
            return None

        info = position.describe(result.move)
        logger.info(
            f"Local search: {info.san} (score={result.score}, depth={result.depth}, nodes={result.nodes})"
        )
        return info

    def _ask_suggester(
        self,
        position: ChessPosition,
        fen: str,
        move_history: List[str],
    ) -> Optional[MoveInfo]:
        """Ask the external suggester; None means fall back to local search."""
        if self.suggester is None:
            return None

        try:
            suggestion = self.suggester(fen, move_history)
        except Exception as e:
            logger.warning(f"Move suggester failed, using local search: {e}")
            return None

        if not suggestion:
            logger.warning("Move suggester returned nothing, using local search")
            return None

        move = position.resolve(suggestion)
        if move is None:
            logger.warning(f"Illegal suggested move {suggestion!r}, using local search")
            return None

        logger.debug(f"Suggested move accepted: {move.uci()}")
        return position.describe(move)

    def analyze(self, fen: str, move_history: Sequence[str] = (), top: int = 3) -> PositionAnalysis:
        """
        Evaluate a position and list its best moves.

        Args:
            fen: Position in FEN, or "startpos"
            move_history: Moves played from the FEN position
            top: Number of moves to return

        Returns:
            PositionAnalysis with up to `top` moves
        """
        position = self._position(fen, move_history)

        ranked = rank_moves(
            position,
            self.config.depth,
            self.evaluator,
            alpha_beta=self.config.alpha_beta,
        )

        return PositionAnalysis(
            score=self.evaluator.evaluate(position),
            best_moves=[position.describe(move) for move, _ in ranked[:top]],
            depth=self.config.depth,
        )

    def __repr__(self) -> str:
        return f"MoveAdvisor(suggester={self.suggester!r}, evaluator={self.evaluator!r}, depth={self.config.depth})"
