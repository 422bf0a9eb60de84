"""Single-move state transitions.

``simulate_move`` is what the search calls at every node: it copies the
board, plays the step, resolves the promotion and combination passes and
reports the outcome. ``apply_move`` wraps it for real game turns.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from check10.core.board import (
    PHASE_GAME_OVER,
    Board,
    GameState,
    Move,
    Piece,
    in_bounds,
)
from check10.core.captures import combination_captures, process_promotion, reaches_promotion_rank
from check10.core.movegen import has_valid_moves, moves_for

CapturedPiece = Tuple[int, int, Piece]


class IllegalMoveError(ValueError):
    """Raised when an externally supplied move cannot be played."""


@dataclass
class SimulationResult:
    board: Optional[Board]
    score_gain: float = 0
    leads_to_choice: bool = False
    captured: List[CapturedPiece] = field(default_factory=list)
    promoted: bool = False
    promotion_matches: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.board is not None


# Returned for moves that cannot be played; the search treats it as a dead branch.
INVALID = SimulationResult(board=None, score_gain=-math.inf)


def simulate_move(board: Board, move: Move, color: str, choice: int = 0) -> SimulationResult:
    """Play ``move`` for ``color`` on a copy of ``board``.

    Returns ``INVALID`` if the origin is empty or foreign or the destination
    is taken. ``choice`` picks which promotion match is captured when there
    is more than one.
    """
    if not (in_bounds(move.from_row, move.from_col) and in_bounds(move.to_row, move.to_col)):
        return INVALID
    original = board.piece_at(move.from_row, move.from_col)
    if original is None or original.color != color:
        return INVALID
    if board.piece_at(move.to_row, move.to_col) is not None:
        return INVALID

    result = board.copy()
    result.remove(move.from_row, move.from_col)
    moved = original
    gain = 0
    leads_to_choice = False
    promoted = False
    matches: List[Tuple[int, int]] = []
    captured: List[CapturedPiece] = []

    if reaches_promotion_rank(original.color, move.to_row) and not original.promoted:
        moved = original.promote()
        promoted = True
    result.place(move.to_row, move.to_col, moved)

    if promoted:
        promotion = process_promotion(result, move.to_row, move.to_col, choice)
        gain += promotion.points
        leads_to_choice = promotion.leads_to_choice
        matches = promotion.matches
        for r, c in promotion.captures:
            captured.append((r, c, result.remove(r, c)))

    for (r, c), piece in combination_captures(result, move.to_row, move.to_col, color).items():
        gain += piece.number
        captured.append((r, c, piece))
        result.remove(r, c)

    return SimulationResult(
        board=result,
        score_gain=gain,
        leads_to_choice=leads_to_choice,
        captured=captured,
        promoted=promoted,
        promotion_matches=matches,
    )


def apply_move(state: GameState, move: Move, choice: int = 0) -> GameState:
    """Play a real turn and return the next game state."""
    if state.game_over:
        raise IllegalMoveError("Game is already over")
    if not in_bounds(move.from_row, move.from_col):
        raise IllegalMoveError(f"Illegal move {move}")
    if move not in moves_for(state.board, move.from_row, move.from_col):
        raise IllegalMoveError(f"Illegal move {move}")
    piece = state.board.piece_at(move.from_row, move.from_col)
    if piece.color != state.current_player:
        raise IllegalMoveError(f"It is {state.current_player}'s turn")

    outcome = simulate_move(state.board, move, state.current_player, choice)
    if not outcome.ok:
        raise IllegalMoveError(f"Illegal move {move}")

    nxt = state.after(outcome.board, outcome.score_gain)
    if not has_valid_moves(nxt.board, nxt.current_player):
        nxt.game_over = True
        nxt.phase = PHASE_GAME_OVER
    return nxt

