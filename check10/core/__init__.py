"""Core engine components: board, move generation, captures, search, and transposition table."""

from .board import Board, GameState, Move, Piece
from .evaluator import Evaluator
from .search import SearchEngine
from .transposition import TranspositionTable
