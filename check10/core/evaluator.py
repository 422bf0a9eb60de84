"""Static evaluation of Check10 positions."""

from check10.config import CONFIG
from check10.core.board import BOARD_SIZE, WHITE, GameState, opponent


class Evaluator:
    def __init__(self, cfg=None):
        self.cfg = cfg or CONFIG.eval

    def evaluate(self, state: GameState, root_color: str) -> float:
        """Return the static score from ``root_color``'s point of view.

        Score difference, plus for every piece a bonus for being promoted
        and for each row it has advanced toward its promotion rank. Own
        pieces count positively, the opponent's negatively.
        """
        score = state.score_of(root_color) - state.score_of(opponent(root_color))
        promoted_weight = self.cfg.promoted_weight
        advancement_weight = self.cfg.advancement_weight

        for r, _c, piece in state.board.pieces():
            value = piece.number * promoted_weight if piece.promoted else 0.0
            advanced = (BOARD_SIZE - 1 - r) if piece.color == WHITE else r
            value += advanced * advancement_weight
            if piece.color == root_color:
                score += value
            else:
                score -= value
        return score
