from typing import List, Optional

from check10.core.board import GameState, Move
from check10.core.captures import promotion_matches
from check10.core.evaluator import Evaluator
from check10.core.movegen import moves_for_color
from check10.core.search import SearchEngine, SearchResult
from check10.core.simulate import IllegalMoveError, apply_move


class Engine:
    """A live game plus a search engine to play it."""

    def __init__(self, time_limit_ms: Optional[int] = None, depth: Optional[int] = None):
        self.state = GameState.initial()
        self.search = SearchEngine(Evaluator(), max_depth=depth, time_limit_ms=time_limit_ms)
        self.history: List[GameState] = []
        self.move_history: List[Move] = []

    def get_best_move(self) -> SearchResult:
        return self.search.find_best_move(self.state)

    def play_best_move(self) -> SearchResult:
        """Search and play the engine's move, honouring its promotion capture."""
        result = self.get_best_move()
        if result.move is None:
            return result
        choice = 0
        if result.promotion_capture is not None:
            piece = self.state.board.piece_at(*result.move.origin)
            choice = promotion_matches(self.state.board, piece).index(result.promotion_capture)
        self.make_move(result.move, choice)
        return result

    def legal_moves(self) -> List[Move]:
        if self.state.game_over:
            return []
        return moves_for_color(self.state.board, self.state.current_player)

    def make_move(self, move: Move, choice: int = 0) -> bool:
        """Play a move for the side to move. Returns True if legal."""
        try:
            nxt = apply_move(self.state, move, choice)
        except IllegalMoveError:
            return False
        self.history.append(self.state)
        self.move_history.append(move)
        self.state = nxt
        return True

    def undo_move(self):
        if self.history:
            self.state = self.history.pop()
            self.move_history.pop()

    def reset(self):
        self.state = GameState.initial()
        self.history.clear()
        self.move_history.clear()

    def print_board(self):
        print(self.state.board.render())
        print(f"white {self.state.white_score}  black {self.state.black_score}  to move: {self.state.current_player}")
