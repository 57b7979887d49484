"""
Unit Tests for Search Module

Tests for negamax search with alpha-beta pruning, on real chess positions
and on small hand-built game trees.
"""

import chess
import pytest
from chess_fallback.board import ChessPosition, Position
from chess_fallback.evaluation import Evaluator, MaterialEvaluator
from chess_fallback.search import (
    INFINITY,
    SearchResult,
    best_move,
    find_best_move,
    minimax,
    negamax,
    rank_moves,
)

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE = "k7/2Q5/1K6/8/8/8/8/8 b - - 0 1"
# Qxd5 wins a pawn but exd5 wins the queen back
DEFENDED_PAWN = "6k1/5ppp/4p3/3p4/8/8/5PPP/3Q2K1 w - - 0 1"
# Black to move can take White's undefended queen
FREE_QUEEN_FOR_BLACK = "k7/8/8/8/8/8/8/q2Q3K b - - 0 1"
ITALIAN = "r1bqk1nr/pppp1ppp/2n5/2b1p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"
KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
ROOK_ENDGAME = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


# ============================================================================
# Test Utilities
# ============================================================================

class TreePosition(Position):
    """
    Position over a hand-built game tree.

    Inner nodes are lists of children, leaves are White-centric scores.
    Moves are child indexes.
    """

    def __init__(self, tree, turn=chess.WHITE):
        self.tree = tree
        self.root_turn = turn
        self.path = []

    def node(self):
        node = self.tree
        for index in self.path:
            node = node[index]
        return node

    @property
    def turn(self):
        return self.root_turn if len(self.path) % 2 == 0 else not self.root_turn

    def legal_moves(self, from_square=None):
        node = self.node()
        return [] if isinstance(node, int) else list(range(len(node)))

    def apply(self, move):
        self.path.append(move)

    def undo(self):
        return self.path.pop()

    def is_terminal(self):
        return isinstance(self.node(), int)

    def piece_map(self):
        return {}


class LeafEvaluator(Evaluator):
    """Scores tree leaves and records which ones were visited."""

    def __init__(self):
        self.visited = []

    def evaluate(self, position):
        node = position.node()
        if isinstance(node, int):
            self.visited.append(node)
            return node
        return 0


class RaisingEvaluator(MaterialEvaluator):
    """Fails after a fixed number of evaluations."""

    def __init__(self, fail_after):
        super().__init__()
        self.calls = 0
        self.fail_after = fail_after

    def evaluate(self, position):
        self.calls += 1
        if self.calls > self.fail_after:
            raise RuntimeError("evaluation failed")
        return super().evaluate(position)


def reference_minimax(position, depth, evaluator):
    """Plain White-centric minimax with an explicit max/min switch."""
    if depth == 0 or position.is_terminal():
        return evaluator.evaluate(position)

    moves = position.legal_moves()
    if not moves:
        return evaluator.evaluate(position)

    scores = []
    for move in moves:
        position.apply(move)
        scores.append(reference_minimax(position, depth - 1, evaluator))
        position.undo()

    return max(scores) if position.turn == chess.WHITE else min(scores)


# ============================================================================
# Game Tree Tests
# ============================================================================

class TestGameTree:
    """Tests for negamax/minimax on hand-built trees."""

    TREE = [[[3, 12], [8, 2]], [[4, 6], [14, 5]], [[2, 1], [7, 9]]]

    def test_minimax_value(self):
        """Test the minimax value of a three-ply tree."""
        assert minimax(TreePosition(self.TREE), 3, LeafEvaluator()) == 8

    def test_minimax_value_black_to_move(self):
        """Test that Black minimizes the White-centric score."""
        # min over max over min
        tree = [[[3, 12], [8, 2]], [[4, 6], [14, 5]]]

        assert minimax(TreePosition(tree, turn=chess.BLACK), 3, LeafEvaluator()) == 3

    def test_negamax_is_side_to_move_relative(self):
        """Test that negamax scores from the side to move's perspective."""
        tree = [[5, 6], [7, 4, 9]]

        assert negamax(TreePosition(tree, turn=chess.BLACK), 2, -INFINITY, INFINITY, LeafEvaluator()) == -6
        assert minimax(TreePosition(tree, turn=chess.BLACK), 2, LeafEvaluator()) == 6

    def test_pruning_skips_refuted_branch(self):
        """
        Test that alpha-beta stops once a move is refuted.

        Black already has 6 from the first branch. In the second, White's
        first reply gives 7, so leaves 4 and 9 can't matter.
        """
        tree = [[5, 6], [7, 4, 9]]
        evaluator = LeafEvaluator()

        score = minimax(TreePosition(tree, turn=chess.BLACK), 2, evaluator)

        assert score == 6
        assert evaluator.visited == [5, 6, 7]

    def test_exhaustive_visits_every_leaf(self):
        """Test that disabling pruning visits the whole tree."""
        tree = [[5, 6], [7, 4, 9]]
        evaluator = LeafEvaluator()

        score = minimax(TreePosition(tree, turn=chess.BLACK), 2, evaluator, alpha_beta=False)

        assert score == 6
        assert evaluator.visited == [5, 6, 7, 4, 9]

    def test_find_best_move_on_tree(self):
        """Test root move selection and node counts on a tree."""
        pruned = find_best_move(TreePosition(self.TREE), 3, LeafEvaluator())
        full = find_best_move(TreePosition(self.TREE), 3, LeafEvaluator(), alpha_beta=False)

        assert (pruned.move, pruned.score) == (0, 8)
        assert (full.move, full.score) == (0, 8)
        assert pruned.nodes < full.nodes

    def test_ties_keep_first_move(self):
        """Test that equal scores keep the first move in move order."""
        white = find_best_move(TreePosition([5, 7, 7, 3]), 1, LeafEvaluator())
        black = find_best_move(TreePosition([5, 3, 3, 7], turn=chess.BLACK), 1, LeafEvaluator())

        assert (white.move, white.score) == (1, 7)
        assert (black.move, black.score) == (1, 3)

    def test_tree_restored_after_search(self):
        """Test that every apply is matched by an undo."""
        position = TreePosition(self.TREE)

        find_best_move(position, 3, LeafEvaluator())

        assert position.path == []


# ============================================================================
# Chess Position Tests
# ============================================================================

class TestFindBestMove:
    """Tests for root move selection on chess positions."""

    @pytest.fixture
    def evaluator(self):
        """Create evaluator for testing."""
        return MaterialEvaluator()

    @pytest.mark.parametrize("fen", [FOOLS_MATE, STALEMATE])
    @pytest.mark.parametrize("depth", [0, 1, 2, 3])
    def test_no_legal_moves_returns_no_move(self, evaluator, fen, depth):
        """Test that checkmate and stalemate give no move at any depth."""
        position = ChessPosition.from_fen(fen)

        result = find_best_move(position, depth, evaluator)

        assert result.move is None
        assert not result.found
        assert result.score == evaluator.evaluate(position)

    def test_negative_depth_raises(self, evaluator):
        """Test that a negative depth fails fast."""
        with pytest.raises(ValueError):
            find_best_move(ChessPosition(), -1, evaluator)

        with pytest.raises(ValueError):
            rank_moves(ChessPosition(), -1, evaluator)

    def test_starting_position_depth_one(self, evaluator):
        """Test that the opening search returns a legal move with a non-negative score."""
        position = ChessPosition()

        result = find_best_move(position, 1, evaluator)

        assert result.move in position.legal_moves()
        assert result.score >= 0
        assert result.depth == 1
        assert result.nodes > 0

    @pytest.mark.parametrize("fen", [chess.STARTING_FEN, DEFENDED_PAWN, FREE_QUEEN_FOR_BLACK, KIWIPETE])
    def test_depth_zero_is_greedy(self, evaluator, fen):
        """
        Test that depth 0 picks the best immediate static evaluation.
        """
        position = ChessPosition.from_fen(fen)
        sign = 1 if position.turn == chess.WHITE else -1

        child_scores = []
        for move in position.legal_moves():
            position.apply(move)
            child_scores.append(evaluator.evaluate(position))
            position.undo()

        result = find_best_move(position, 0, evaluator)

        assert result.score == sign * max(sign * s for s in child_scores)

        position.apply(result.move)
        assert evaluator.evaluate(position) == result.score
        position.undo()

        assert result.move == find_best_move(position, 1, evaluator).move

    def test_greedy_search_grabs_defended_pawn(self, evaluator):
        """Test that one ply of lookahead takes the pawn on d5."""
        result = find_best_move(ChessPosition.from_fen(DEFENDED_PAWN), 1, evaluator)

        assert result.move == chess.Move.from_uci("d1d5")
        assert result.score == 800

    @pytest.mark.parametrize("depth", [2, 3])
    def test_avoids_losing_the_queen(self, evaluator, depth):
        """
        Test that the search sees the recapture.

        Qxd5 wins a pawn but exd5 takes the queen. From depth 2 the
        opponent's best reply is considered and Qxd5 is avoided.
        """
        position = ChessPosition.from_fen(DEFENDED_PAWN)

        result = find_best_move(position, depth, evaluator)

        assert result.move != chess.Move.from_uci("d1d5")
        assert result.move.to_square != chess.D5
        assert result.score >= 700

    @pytest.mark.parametrize("depth", [1, 2])
    def test_black_takes_free_queen(self, evaluator, depth):
        """Test that Black to move maximizes Black's side (negative scores)."""
        result = find_best_move(ChessPosition.from_fen(FREE_QUEEN_FOR_BLACK), depth, evaluator)

        assert result.move == chess.Move.from_uci("a1d1")
        assert result.score == -900

    def test_finds_mate_that_also_wins_material(self, evaluator):
        """
        Test that Qxf7# is found at depth 2.

        Mate is not scored, but every other capture loses material to the
        reply and quiet moves leave the queen to Nxh5.
        """
        position = ChessPosition.from_fen(
            "r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 4 4"
        )

        result = find_best_move(position, 2, evaluator)

        assert result.move == chess.Move.from_uci("h5f7")

    def test_search_is_repeatable(self, evaluator):
        """Test that searching twice gives identical results."""
        position = ChessPosition.from_fen(ITALIAN)

        first = find_best_move(position, 2, evaluator)
        second = find_best_move(position, 2, evaluator)

        assert first == second

    def test_position_restored_after_search(self, evaluator):
        """Test that the search leaves no trace on the position."""
        position = ChessPosition.from_fen("startpos", ["e4", "e5", "Nf3", "Nc6", "Bc4"])
        fen = position.fen()
        stack = list(position.board.move_stack)

        find_best_move(position, 3, evaluator)
        rank_moves(position, 2, evaluator)

        assert position.fen() == fen
        assert list(position.board.move_stack) == stack

    def test_position_restored_after_evaluator_error(self):
        """Test that positions are restored even when evaluation fails."""
        position = ChessPosition.from_fen(ITALIAN)
        fen = position.fen()

        with pytest.raises(RuntimeError):
            find_best_move(position, 3, RaisingEvaluator(fail_after=50))

        assert position.fen() == fen
        assert position.board.move_stack == []

    def test_best_move_shortcut(self):
        """Test best_move with the default evaluator."""
        assert best_move(ChessPosition.from_fen(FOOLS_MATE), 2) is None
        assert best_move(ChessPosition.from_fen(DEFENDED_PAWN), 1) == chess.Move.from_uci("d1d5")
        assert best_move(ChessPosition.from_fen(DEFENDED_PAWN), 2) != chess.Move.from_uci("d1d5")

    def test_search_result_found(self):
        assert SearchResult(move=chess.Move.from_uci("e2e4"), score=0, depth=1).found
        assert not SearchResult(move=None, score=0, depth=1).found


class TestPruningCorrectness:
    """Alpha-beta must return exactly what exhaustive minimax returns."""

    @pytest.fixture
    def evaluator(self):
        return MaterialEvaluator()

    @pytest.mark.parametrize(
        "fen, depth",
        [
            (chess.STARTING_FEN, 2),
            (DEFENDED_PAWN, 3),
            (FREE_QUEEN_FOR_BLACK, 3),
            (ITALIAN, 2),
            (KIWIPETE, 2),
            (ROOK_ENDGAME, 3),
        ],
    )
    def test_pruned_equals_exhaustive(self, evaluator, fen, depth):
        """Test that pruning changes neither move nor score, only node count."""
        pruned = find_best_move(ChessPosition.from_fen(fen), depth, evaluator)
        full = find_best_move(ChessPosition.from_fen(fen), depth, evaluator, alpha_beta=False)

        assert pruned.move == full.move
        assert pruned.score == full.score
        assert pruned.nodes <= full.nodes

    @pytest.mark.parametrize(
        "fen, depth",
        [
            (DEFENDED_PAWN, 2),
            (FREE_QUEEN_FOR_BLACK, 2),
            (ITALIAN, 2),
            (ROOK_ENDGAME, 3),
        ],
    )
    def test_minimax_matches_reference(self, evaluator, fen, depth):
        """Test negamax-based minimax against a plain max/min implementation."""
        position = ChessPosition.from_fen(fen)

        assert minimax(position, depth, evaluator) == reference_minimax(position, depth, evaluator)

    @pytest.mark.parametrize("fen", [DEFENDED_PAWN, FREE_QUEEN_FOR_BLACK, ROOK_ENDGAME])
    def test_root_score_matches_reference(self, evaluator, fen):
        """Test that the root score is the best reference score over the children."""
        position = ChessPosition.from_fen(fen)
        depth = 2

        child_scores = []
        for move in position.legal_moves():
            position.apply(move)
            child_scores.append(reference_minimax(position, depth - 1, evaluator))
            position.undo()

        expected = max(child_scores) if position.turn == chess.WHITE else min(child_scores)

        assert find_best_move(position, depth, evaluator).score == expected

    def test_minimax_is_idempotent(self, evaluator):
        """Test that repeated searches of an unmodified position agree."""
        position = ChessPosition.from_fen(KIWIPETE)

        assert minimax(position, 2, evaluator) == minimax(position, 2, evaluator)

    def test_nodes_counted(self, evaluator):
        """Test the optional node counter."""
        nodes = [0]

        negamax(ChessPosition(), 1, -INFINITY, INFINITY, evaluator, nodes_searched=nodes)

        # Root plus its 20 children
        assert nodes[0] == 21


class TestRankMoves:
    """Tests for ranking all root moves."""

    @pytest.fixture
    def evaluator(self):
        return MaterialEvaluator()

    def test_rank_white_moves(self, evaluator):
        """Test that White's moves come highest score first."""
        position = ChessPosition.from_fen(DEFENDED_PAWN)

        ranked = rank_moves(position, 1, evaluator)

        assert len(ranked) == len(position.legal_moves())
        assert ranked[0] == (chess.Move.from_uci("d1d5"), 800)
        scores = [score for _, score in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_rank_black_moves(self, evaluator):
        """Test that Black's moves come lowest White-centric score first."""
        position = ChessPosition.from_fen(FREE_QUEEN_FOR_BLACK)

        ranked = rank_moves(position, 1, evaluator)

        assert ranked[0] == (chess.Move.from_uci("a1d1"), -900)
        scores = [score for _, score in ranked]
        assert scores == sorted(scores)

    def test_rank_ties_keep_move_order(self, evaluator):
        """Test that equal scores stay in legal move order."""
        position = ChessPosition()

        ranked = rank_moves(position, 1, evaluator)

        assert [move for move, _ in ranked] == position.legal_moves()

    def test_rank_no_moves(self, evaluator):
        assert rank_moves(ChessPosition.from_fen(FOOLS_MATE), 2, evaluator) == []
