"""Move generation on arbitrary board snapshots.

Pieces only step forward: straight ahead or one column to either side, and
only onto empty squares. Nothing is captured by landing on it.
"""

from typing import List

from check10.core.board import Board, GameState, Move, direction, in_bounds

_COLUMN_STEPS = (0, -1, 1)


def moves_for(board: Board, row: int, col: int) -> List[Move]:
    piece = board.piece_at(row, col)
    if piece is None:
        return []
    new_row = row + direction(piece.color)
    moves = []
    for dc in _COLUMN_STEPS:
        new_col = col + dc
        if in_bounds(new_row, new_col) and board.piece_at(new_row, new_col) is None:
            moves.append(Move(row, col, new_row, new_col, piece))
    return moves


def moves_for_color(board: Board, color: str) -> List[Move]:
    moves = []
    for r, c, _piece in board.pieces(color):
        moves.extend(moves_for(board, r, c))
    return moves


def has_valid_moves(board: Board, color: str) -> bool:
    return any(moves_for(board, r, c) for r, c, _piece in board.pieces(color))


def is_game_over(state: GameState) -> bool:
    """True once flagged, or when the side to move is stuck."""
    return state.game_over or not has_valid_moves(state.board, state.current_player)
