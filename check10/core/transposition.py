"""Zobrist hashing and the per-search transposition table.

This module provides two main classes:

- Zobrist: holds one random 64-bit key per (piece identity, square) pair
  plus a side-to-move key. Identity is colour and number only, so a
  promotion does not change a piece's key. Keys are computed from scratch
  once at the search root and then updated incrementally per move.

- TranspositionTable: a dict keyed by zobrist keys. Each entry stores the
  searched depth, the value and a bound flag. A table belongs to a single
  search call; it is neither shared nor locked.

Usage (example):

    from check10.core.transposition import ZOBRIST, TranspositionTable, TT_EXACT

    tt = TranspositionTable()
    key = ZOBRIST.hash(board, "white")
    tt.store(key, depth=3, value=1.5, flag=TT_EXACT)
    entry = tt.get(key)

"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from check10.config import CONFIG
from check10.core.board import BOARD_SIZE, BLACK, WHITE, Board, Move, Piece

TT_EXACT = 0
TT_LOWERBOUND = 1
TT_UPPERBOUND = 2

PIECE_KINDS = 16  # 2 colours x numbers 1..8
SQUARES = BOARD_SIZE * BOARD_SIZE


def piece_index(piece: Piece) -> int:
    """White 1..8 map to 0..7, Black 1..8 to 8..15."""
    base = 0 if piece.color == WHITE else 8
    return base + piece.number - 1


def square_index(row: int, col: int) -> int:
    return row * BOARD_SIZE + col


class Zobrist:
    def __init__(self, seed: Optional[int] = None):
        rng = random.Random(seed)
        self.table: List[List[int]] = [
            [rng.getrandbits(64) for _ in range(SQUARES)] for _ in range(PIECE_KINDS)
        ]
        # xor'd in when black is to move
        self.black_to_move: int = rng.getrandbits(64)

    def key_for(self, piece: Piece, row: int, col: int) -> int:
        return self.table[piece_index(piece)][square_index(row, col)]

    def hash(self, board: Board, side: str) -> int:
        h = 0
        for r, c, piece in board.pieces():
            h ^= self.key_for(piece, r, c)
        if side == BLACK:
            h ^= self.black_to_move
        return h

    def step(self, key: int, move: Move) -> int:
        """Key after a plain step: piece leaves origin, lands, side flips."""
        key ^= self.key_for(move.piece, move.from_row, move.from_col)
        key ^= self.key_for(move.piece, move.to_row, move.to_col)
        return key ^ self.black_to_move

    def fold_captures(self, key: int, captured: Iterable[Tuple[int, int, Piece]]) -> int:
        for r, c, piece in captured:
            key ^= self.key_for(piece, r, c)
        return key


@dataclass
class TTEntry:
    value: float
    depth: int
    flag: int

    def __iter__(self):
        return iter((self.value, self.depth, self.flag))


class TranspositionTable:
    """Maps zobrist keys to search results.

    Methods:
      - get(key) -> Optional[TTEntry]
      - store(key, depth, value, flag)
      - clear()
    """

    def __init__(self):
        self._table: Dict[int, TTEntry] = {}

    def get(self, key: int) -> Optional[TTEntry]:
        return self._table.get(key)

    def store(self, key: int, depth: int, value: float, flag: int) -> None:
        self._table[key] = TTEntry(value, depth, flag)

    def clear(self) -> None:
        self._table.clear()

    def __len__(self) -> int:
        return len(self._table)


# built once per process
ZOBRIST = Zobrist(CONFIG.search.zobrist_seed)
