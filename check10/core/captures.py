"""Capture resolution: promotion captures and sum-to-10 combinations.

Both passes read a board snapshot and report what would be captured; removing
the pieces is left to the simulator, which works on its own copy.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set, Tuple

from check10.core.board import BOARD_SIZE, Board, Piece, opponent, promotion_row

Square = Tuple[int, int]
Cell = Tuple[int, int, Piece]

# The window and subset size bound the enumeration; both are part of the rules.
NEIGHBORHOOD_RADIUS = 3
MIN_COMBINATION_SIZE = 2
MAX_COMBINATION_SIZE = 8
COMBINATION_TARGET = 10

_NEIGHBOURS = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))


@dataclass
class PromotionResult:
    points: int = 0
    leads_to_choice: bool = False
    captures: List[Square] = field(default_factory=list)
    matches: List[Square] = field(default_factory=list)


def reaches_promotion_rank(color: str, row: int) -> bool:
    return row == promotion_row(color)


def promotion_matches(board: Board, piece: Piece) -> List[Square]:
    """Unpromoted opposing pieces carrying the same number, row-major."""
    target = opponent(piece.color)
    return [
        (r, c)
        for r, c, other in board.pieces(target)
        if other.number == piece.number and not other.promoted
    ]


def process_promotion(board: Board, row: int, col: int, choice: int = 0) -> PromotionResult:
    """Resolve the capture earned by the promoted piece standing on (row, col).

    With several matches the capturing player would normally pick one; here
    ``choice`` indexes into the row-major match list and the result is
    flagged with ``leads_to_choice``.
    """
    piece = board.piece_at(row, col)
    matches = promotion_matches(board, piece)
    if not matches:
        return PromotionResult()
    if not 0 <= choice < len(matches):
        raise ValueError(f"Promotion choice {choice} out of range for {len(matches)} matches")
    return PromotionResult(
        points=piece.number,
        leads_to_choice=len(matches) > 1,
        captures=[matches[choice]],
        matches=matches,
    )


def neighborhood(board: Board, row: int, col: int, radius: int = NEIGHBORHOOD_RADIUS) -> List[Cell]:
    cells = []
    for r in range(max(0, row - radius), min(BOARD_SIZE - 1, row + radius) + 1):
        for c in range(max(0, col - radius), min(BOARD_SIZE - 1, col + radius) + 1):
            piece = board.piece_at(r, c)
            if piece is not None:
                cells.append((r, c, piece))
    return cells


def _has_both_colors(cells: Sequence[Cell]) -> bool:
    seen = set()
    for _r, _c, piece in cells:
        seen.add(piece.color)
        if len(seen) == 2:
            return True
    return False


def is_connected(cells: Sequence[Cell]) -> bool:
    """Breadth-first check that the cells form one 8-connected group."""
    if len(cells) <= 1:
        return True
    squares = {(r, c) for r, c, _p in cells}
    start = (cells[0][0], cells[0][1])
    visited = {start}
    queue = deque([start])
    while queue:
        r, c = queue.popleft()
        for dr, dc in _NEIGHBOURS:
            nxt = (r + dr, c + dc)
            if nxt in squares and nxt not in visited:
                visited.add(nxt)
                queue.append(nxt)
    return len(visited) == len(squares)


def _adjacency(ordered: Sequence[Cell]) -> List[List[int]]:
    index = {(r, c): i for i, (r, c, _p) in enumerate(ordered)}
    return [
        [index[(r + dr, c + dc)] for dr, dc in _NEIGHBOURS if (r + dr, c + dc) in index]
        for r, c, _p in ordered
    ]


def _mixed_components(ordered: Sequence[Cell], adjacent: List[List[int]]) -> Set[int]:
    """Indices of cells whose connected group holds both colours."""
    keep: Set[int] = set()
    seen: Set[int] = set()
    for start in range(len(ordered)):
        if start in seen:
            continue
        group = [start]
        seen.add(start)
        for i in group:
            for j in adjacent[i]:
                if j not in seen:
                    seen.add(j)
                    group.append(j)
        if _has_both_colors([ordered[i] for i in group]):
            keep.update(group)
    return keep


def find_combinations(cells: Sequence[Cell]) -> List[List[Cell]]:
    """Every connected, two-colour subset of ``cells`` summing to exactly 10.

    Only connected subsets are ever built: each one is grown from its lowest
    square, adding neighbours of the squares already chosen, and dropped as
    soon as its sum passes 10 or it reaches 8 pieces. Numbers are positive,
    so this yields exactly the subsets a plain scan of all 2..8 piece subsets
    would accept, in far fewer steps.
    """
    ordered = sorted(cells, key=lambda cell: (cell[0], cell[1]))
    adjacent = _adjacency(ordered)
    numbers = [piece.number for _r, _c, piece in ordered]
    usable = _mixed_components(ordered, adjacent)
    found: List[List[Cell]] = []

    def extend(subset: List[int], reach: Set[int], extension: List[int], total: int, root: int) -> None:
        if total == COMBINATION_TARGET:
            chosen = [ordered[i] for i in subset]
            if len(chosen) >= MIN_COMBINATION_SIZE and _has_both_colors(chosen):
                found.append(chosen)
            return
        if len(subset) == MAX_COMBINATION_SIZE:
            return
        extension = list(extension)
        while extension:
            w = extension.pop()
            if total + numbers[w] > COMBINATION_TARGET:
                continue
            fresh = [u for u in adjacent[w] if u > root and u not in reach]
            extend(subset + [w], reach.union(adjacent[w]), extension + fresh, total + numbers[w], root)

    for v in sorted(usable):
        extend([v], {v, *adjacent[v]}, [u for u in adjacent[v] if u > v], numbers[v], v)
    return found


def combinations_around(board: Board, row: int, col: int) -> List[List[Cell]]:
    cells = neighborhood(board, row, col)
    # One colour in the window means no combination can exist.
    if not _has_both_colors(cells):
        return []
    return find_combinations(cells)


def combination_captures(board: Board, row: int, col: int, mover: str) -> Dict[Square, Piece]:
    """Opposing pieces taken by combinations near (row, col), keyed by square.

    A square shared by overlapping combinations appears once.
    """
    captured: Dict[Square, Piece] = {}
    for combo in combinations_around(board, row, col):
        for r, c, piece in combo:
            if piece.color != mover:
                captured.setdefault((r, c), piece)
    return captured

