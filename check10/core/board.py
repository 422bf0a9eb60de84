"""Board model for Check10: pieces, moves, the 8x8 grid and game snapshots."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Tuple

WHITE = "white"
BLACK = "black"
COLORS = (WHITE, BLACK)

BOARD_SIZE = 8
MIN_NUMBER = 1
MAX_NUMBER = 8

PHASE_PLAYING = "playing"
PHASE_GAME_OVER = "gameOver"

# Back rows are laid out high-to-low, front rows low-to-high.
BACK_ROW = [8, 7, 6, 5, 4, 3, 2, 1]
FRONT_ROW = [1, 2, 3, 4, 5, 6, 7, 8]


class InvalidStateError(ValueError):
    """A client-supplied snapshot could not be turned into a game state."""


def opponent(color: str) -> str:
    return BLACK if color == WHITE else WHITE


def direction(color: str) -> int:
    """Row step for forward movement: White heads to row 0, Black to row 7."""
    return -1 if color == WHITE else 1


def promotion_row(color: str) -> int:
    return 0 if color == WHITE else BOARD_SIZE - 1


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


@dataclass(frozen=True)
class Piece:
    color: str
    number: int
    promoted: bool = False

    def promote(self) -> "Piece":
        return replace(self, promoted=True)

    def symbol(self) -> str:
        s = f"{'W' if self.color == WHITE else 'B'}{self.number}"
        return s + ("*" if self.promoted else " ")

    def to_payload(self) -> Dict[str, Any]:
        return {"color": self.color, "number": self.number, "promoted": self.promoted}

    @classmethod
    def from_payload(cls, data: Any) -> "Piece":
        if not isinstance(data, dict):
            raise InvalidStateError(f"Piece must be an object, got {data!r}")
        color = data.get("color")
        number = data.get("number")
        if color not in COLORS:
            raise InvalidStateError(f"Unknown piece color: {color!r}")
        if isinstance(number, bool) or not isinstance(number, int) or not MIN_NUMBER <= number <= MAX_NUMBER:
            raise InvalidStateError(f"Piece number out of range: {number!r}")
        return cls(color, number, bool(data.get("promoted", False)))


@dataclass(frozen=True)
class Move:
    """A single forward or forward-diagonal step.

    ``piece`` is the mover as it stood when the move was generated; it takes
    no part in equality or hashing.
    """

    from_row: int
    from_col: int
    to_row: int
    to_col: int
    piece: Optional[Piece] = field(default=None, compare=False)

    @property
    def origin(self) -> Tuple[int, int]:
        return self.from_row, self.from_col

    @property
    def destination(self) -> Tuple[int, int]:
        return self.to_row, self.to_col

    def to_payload(self) -> Dict[str, Any]:
        return {
            "fromRow": self.from_row,
            "fromCol": self.from_col,
            "toRow": self.to_row,
            "toCol": self.to_col,
            "piece": self.piece.to_payload() if self.piece else None,
        }

    def __str__(self) -> str:
        return f"({self.from_row},{self.from_col})->({self.to_row},{self.to_col})"


class Board:
    """8x8 grid of optional pieces.

    Pieces are immutable, so ``copy`` only duplicates the row lists and the
    copy can be edited without touching the original.
    """

    __slots__ = ("grid",)

    def __init__(self, grid: Optional[List[List[Optional[Piece]]]] = None):
        if grid is None:
            grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        self.grid = grid

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def initial(cls) -> "Board":
        board = cls()
        for col in range(BOARD_SIZE):
            board.grid[0][col] = Piece(BLACK, BACK_ROW[col])
            board.grid[1][col] = Piece(BLACK, FRONT_ROW[col])
            board.grid[6][col] = Piece(WHITE, BACK_ROW[col])
            board.grid[7][col] = Piece(WHITE, FRONT_ROW[col])
        return board

    @classmethod
    def from_payload(cls, rows: Any) -> "Board":
        """Hydrate a board from client JSON (8 rows of 8 piece objects or null)."""
        if not isinstance(rows, list) or len(rows) != BOARD_SIZE:
            raise InvalidStateError("Board must have 8 rows")
        grid = []
        for r, row in enumerate(rows):
            if not isinstance(row, list) or len(row) != BOARD_SIZE:
                raise InvalidStateError(f"Board row {r} must have 8 squares")
            grid.append([Piece.from_payload(cell) if cell is not None else None for cell in row])
        return cls(grid)

    def to_payload(self) -> List[List[Optional[Dict[str, Any]]]]:
        return [[p.to_payload() if p else None for p in row] for row in self.grid]

    def copy(self) -> "Board":
        return Board([row[:] for row in self.grid])

    def piece_at(self, row: int, col: int) -> Optional[Piece]:
        return self.grid[row][col]

    def place(self, row: int, col: int, piece: Optional[Piece]) -> None:
        self.grid[row][col] = piece

    def remove(self, row: int, col: int) -> Optional[Piece]:
        piece = self.grid[row][col]
        self.grid[row][col] = None
        return piece

    def pieces(self, color: Optional[str] = None) -> Iterator[Tuple[int, int, Piece]]:
        """Yield ``(row, col, piece)`` in row-major order."""
        for r, row in enumerate(self.grid):
            for c, piece in enumerate(row):
                if piece is not None and (color is None or piece.color == color):
                    yield r, c, piece

    def count(self, color: Optional[str] = None) -> int:
        return sum(1 for _ in self.pieces(color))

    def render(self) -> str:
        lines = ["    " + "   ".join(str(c) for c in range(BOARD_SIZE))]
        for r, row in enumerate(self.grid):
            lines.append(f"{r}  " + " ".join(p.symbol() if p else " . " for p in row))
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Board) and self.grid == other.grid

    def __repr__(self) -> str:
        return f"Board({self.count(WHITE)} white, {self.count(BLACK)} black)"


@dataclass
class GameState:
    board: Board
    current_player: str = WHITE
    white_score: int = 0
    black_score: int = 0
    game_over: bool = False
    phase: str = PHASE_PLAYING

    @classmethod
    def initial(cls) -> "GameState":
        return cls(Board.initial())

    @classmethod
    def from_payload(cls, data: Any) -> "GameState":
        """Build a state from the client's JSON snapshot.

        Only the shape is checked: a full 8x8 board and a known player to move.
        Reachability of the position is not.
        """
        if not isinstance(data, dict) or data.get("board") is None or not data.get("currentPlayer"):
            raise InvalidStateError("Invalid game state provided.")
        player = data["currentPlayer"]
        if player not in COLORS:
            raise InvalidStateError(f"Unknown current player: {player!r}")
        return cls(
            board=Board.from_payload(data["board"]),
            current_player=player,
            white_score=data.get("whiteScore") or 0,
            black_score=data.get("blackScore") or 0,
            game_over=bool(data.get("gameOver", False)),
            phase=data.get("gameState") or PHASE_PLAYING,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "board": self.board.to_payload(),
            "currentPlayer": self.current_player,
            "whiteScore": self.white_score,
            "blackScore": self.black_score,
            "gameOver": self.game_over,
            "gameState": self.phase,
        }

    def score_of(self, color: str) -> int:
        return self.white_score if color == WHITE else self.black_score

    def after(self, board: Board, gain: int) -> "GameState":
        """Child state once the side to move has played onto ``board``."""
        mover = self.current_player
        return GameState(
            board=board,
            current_player=opponent(mover),
            white_score=self.white_score + (gain if mover == WHITE else 0),
            black_score=self.black_score + (gain if mover == BLACK else 0),
        )
