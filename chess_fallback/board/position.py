"""
Position Interface

The search never looks inside a board. It only needs a handful of operations
from whatever rules engine owns the position, so those operations are pinned
down here as an abstract base class.

Key Principles:
    1. Positions are mutated in place: apply() before recursing, undo() after
    2. After apply(move) followed by undo() the position is unchanged
    3. Legal move order is stable for the lifetime of a search call

ChessPosition is the python-chess implementation used everywhere outside
the tests.
"""

import collections.abc
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import chess

STARTPOS = "startpos"


@dataclass(frozen=True)
class MoveInfo:
    """
    Human-readable description of a move.

    Attributes:
        from_square: Origin square name (e.g. "e2")
        to_square: Destination square name (e.g. "e4")
        promotion: Promotion piece letter ("q", "r", "b", "n") or None
        san: Standard algebraic notation (e.g. "e4", "Nxf7+")
    """

    from_square: str
    to_square: str
    promotion: Optional[str]
    san: str

    @property
    def uci(self) -> str:
        return f"{self.from_square}{self.to_square}{self.promotion or ''}"

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Serialize with the keys move suggestion services use."""
        return {
            "from": self.from_square,
            "to": self.to_square,
            "promotion": self.promotion,
            "san": self.san,
        }


class Position(ABC):
    """
    Abstract rules-engine position as seen by the search.

    Moves are opaque tokens: the search only hands back what legal_moves()
    produced.
    """

    @property
    @abstractmethod
    def turn(self) -> chess.Color:
        """Side to move (chess.WHITE or chess.BLACK)."""

    @abstractmethod
    def legal_moves(self, from_square: Optional[chess.Square] = None) -> List[Any]:
        """
        Legal moves in the current position.

        Args:
            from_square: If given, only moves starting on this square

        Returns:
            List of moves, empty on checkmate or stalemate
        """

    @abstractmethod
    def apply(self, move: Any) -> None:
        """Play a move, mutating the position."""

    @abstractmethod
    def undo(self) -> Any:
        """Take back the most recent apply() and return its move."""

    @abstractmethod
    def is_terminal(self) -> bool:
        """True if the game is over (checkmate, stalemate, draw)."""

    @abstractmethod
    def piece_map(self) -> Mapping[chess.Square, chess.Piece]:
        """Pieces on the board keyed by square."""


class ChessPosition(Position):
    """
    Position backed by a python-chess Board.

    Attributes:
        board: The wrapped chess.Board (owned by this position)
        claim_draw: Also treat claimable draws (threefold repetition,
            fifty-move rule) as game over
    """

    def __init__(self, board: Optional[chess.Board] = None, claim_draw: bool = False):
        self.board = board if board is not None else chess.Board()
        self.claim_draw = claim_draw

    @classmethod
    def from_fen(
        cls,
        fen: str = STARTPOS,
        moves: Iterable[str] = (),
        claim_draw: bool = False,
    ) -> "ChessPosition":
        """
        Build a position from a FEN string and a list of moves.

        Args:
            fen: FEN string, or "startpos" for the initial position
            moves: Moves to play from there, in UCI ("e2e4") or SAN ("e4")
            claim_draw: See class attributes

        Raises:
            ValueError: If the FEN is invalid or a move is illegal
        """
        board = chess.Board() if fen == STARTPOS else chess.Board(fen)

        for text in moves:
            board.push(_parse_move(board, text))

        return cls(board, claim_draw=claim_draw)

    @property
    def turn(self) -> chess.Color:
        return self.board.turn

    def legal_moves(self, from_square: Optional[chess.Square] = None) -> List[chess.Move]:
        if from_square is None:
            return list(self.board.legal_moves)
        return list(self.board.generate_legal_moves(from_mask=chess.BB_SQUARES[from_square]))

    def apply(self, move: chess.Move) -> None:
        self.board.push(move)

    def undo(self) -> chess.Move:
        return self.board.pop()

    def is_terminal(self) -> bool:
        return self.board.is_game_over(claim_draw=self.claim_draw)

    def piece_map(self) -> Mapping[chess.Square, chess.Piece]:
        return self.board.piece_map()

    def fen(self) -> str:
        return self.board.fen()

    def copy(self) -> "ChessPosition":
        return ChessPosition(self.board.copy(), claim_draw=self.claim_draw)

    def mirror(self) -> "ChessPosition":
        """
        Full color inversion: every piece changes color, ranks are flipped
        and the other side is to move.
        """
        return ChessPosition(self.board.mirror(), claim_draw=self.claim_draw)

    def describe(self, move: chess.Move) -> MoveInfo:
        """
        Describe a legal move of the current position.

        Raises:
            ValueError: If the move is not legal here (SAN needs legality)
        """
        if not self.board.is_legal(move):
            raise ValueError(f"Illegal move in {self.fen()}: {move.uci()}")

        return MoveInfo(
            from_square=chess.square_name(move.from_square),
            to_square=chess.square_name(move.to_square),
            promotion=chess.piece_symbol(move.promotion) if move.promotion else None,
            san=self.board.san(move),
        )

    def resolve(self, suggestion: Union[MoveInfo, Mapping[str, Any]]) -> Optional[chess.Move]:
        """
        Find the legal move matching an externally suggested move.

        Args:
            suggestion: MoveInfo, or a mapping with "from", "to" and an
                optional "promotion" key

        Returns:
            The matching legal move, or None if nothing legal matches or
            the suggestion is neither a MoveInfo nor a mapping
        """
        if isinstance(suggestion, MoveInfo):
            suggestion = suggestion.to_dict()
        elif not isinstance(suggestion, collections.abc.Mapping):
            return None

        try:
            from_square = chess.parse_square(str(suggestion.get("from", "")).lower())
            to_square = chess.parse_square(str(suggestion.get("to", "")).lower())
        except ValueError:
            return None

        promotion = suggestion.get("promotion")
        candidates = [m for m in self.legal_moves(from_square) if m.to_square == to_square]

        # The promotion piece only matters when the move is a promotion
        if any(m.promotion for m in candidates):
            if promotion:
                try:
                    piece_type = chess.Piece.from_symbol(str(promotion)).piece_type
                except ValueError:
                    return None
            else:
                piece_type = chess.QUEEN
            candidates = [m for m in candidates if m.promotion == piece_type]

        return candidates[0] if candidates else None

    def __repr__(self) -> str:
        return f"ChessPosition('{self.fen()}')"


def _parse_move(board: chess.Board, text: str) -> chess.Move:
    """Parse a UCI or SAN move that must be legal on the board."""
    try:
        move = chess.Move.from_uci(text)
    except ValueError:
        # Not UCI, try SAN (raises a ValueError subclass if illegal)
        return board.parse_san(text)

    if not board.is_legal(move):
        raise ValueError(f"Illegal move in {board.fen()}: {text}")

    return move
