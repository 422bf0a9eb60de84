"""Iterative-deepening alpha-beta search with a transposition table.

The root player maximises, the opponent minimises. Node values are from
the root player's point of view: a child's value is the mover's immediate
gain (added at max nodes, subtracted at min nodes) plus the value of the
position it leads to.

Time is checked before each root move and after each completed depth; a
subtree that has started always finishes.
"""

import logging
import math
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple

from check10.config import CONFIG
from check10.core.board import GameState, Move
from check10.core.evaluator import Evaluator
from check10.core.movegen import moves_for_color
from check10.core.simulate import SimulationResult, simulate_move
from check10.core.transposition import (
    TT_EXACT,
    TT_LOWERBOUND,
    TT_UPPERBOUND,
    ZOBRIST,
    TranspositionTable,
    Zobrist,
)
from check10.core.utils import log_depth_info

logger = logging.getLogger(__name__)

INF = math.inf
MAX_DEPTH = 15


class ChoicePolicy(str, Enum):
    """How promotion moves with several possible captures are searched.

    IMMEDIATE: at the root such a move is worth its immediate gain and is not
    looked into further; below the root the first match is assumed.
    BRANCH: each possible capture is a separate child and the mover gets
    the best of them.
    """

    IMMEDIATE = "immediate"
    BRANCH = "branch"


@dataclass
class SearchResult:
    move: Optional[Move]
    value: float = -INF
    depth: int = 0
    nodes: int = 0
    elapsed_ms: float = 0.0
    promotion_capture: Optional[Tuple[int, int]] = None


@dataclass
class _SearchContext:
    root_color: str
    tt: Optional[TranspositionTable]
    deadline: float = INF
    nodes: int = 0
    choices: dict = field(default_factory=dict)


class SearchEngine:
    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        max_depth: Optional[int] = None,
        time_limit_ms: Optional[int] = None,
        choice_policy: Optional[ChoicePolicy] = None,
        hash_captures: Optional[bool] = None,
        use_tt: bool = True,
        clock: Callable[[], float] = time.perf_counter,
        rng: Optional[random.Random] = None,
        zobrist: Optional[Zobrist] = None,
    ):
        cfg = CONFIG.search
        self.evaluator = evaluator or Evaluator()
        self.max_depth = min(max_depth or cfg.max_depth, MAX_DEPTH)
        self.time_limit_ms = time_limit_ms if time_limit_ms is not None else cfg.time_limit_ms
        self.choice_policy = ChoicePolicy(choice_policy or cfg.choice_policy)
        self.hash_captures = cfg.hash_captures if hash_captures is None else hash_captures
        self.use_tt = use_tt
        self.clock = clock
        self.rng = rng or random.Random(cfg.fallback_seed)
        self.zobrist = zobrist or ZOBRIST
        self.last_tt_size = 0

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def find_best_move(self, state: GameState, time_limit_ms: Optional[int] = None) -> SearchResult:
        """Best move for ``state.current_player`` within the time budget.

        Returns a result whose ``move`` is None when the side to move has no
        legal move. Otherwise a move is always returned, even if depth 1
        could not finish in time.
        """
        start = self.clock()
        limit_ms = self.time_limit_ms if time_limit_ms is None else time_limit_ms
        color = state.current_player
        ctx = self._new_context(color, deadline=start + limit_ms / 1000.0)

        moves = [] if state.game_over else moves_for_color(state.board, color)
        if not moves:
            logger.info("No legal moves for %s", color)
            return SearchResult(move=None)

        # Something to return if even depth 1 runs out of time.
        best_move = self.rng.choice(moves)
        best_value = -INF
        best_capture = None
        completed = 0
        root_key = self.zobrist.hash(state.board, color)

        for depth in range(1, self.max_depth + 1):
            logger.debug("Starting search at depth %d", depth)
            ordered = self._prioritize(moves, best_move)
            depth_move, depth_value = None, -INF

            for move in ordered:
                if self.clock() > ctx.deadline:
                    logger.info(
                        "Time limit reached during depth %d, using depth %d", depth, completed
                    )
                    return self._result(ctx, best_move, best_value, completed, start, best_capture)
                value = self._search_root_move(ctx, state, move, depth, root_key)
                if value > depth_value:
                    depth_move, depth_value = move, value

            if depth_move is not None:
                best_move, best_value, completed = depth_move, depth_value, depth
                best_capture = ctx.choices.get(depth_move)
            log_depth_info(
                depth, best_value, ctx.nodes, self.clock() - start, best_move,
                len(ctx.tt) if ctx.tt is not None else 0,
            )
            if self.clock() > ctx.deadline:
                logger.info("Time limit reached after completing depth %d", depth)
                break

        return self._result(ctx, best_move, best_value, completed, start, best_capture)

    def search_fixed_depth(self, state: GameState, depth: int) -> SearchResult:
        """One complete pass at ``depth`` with no deadline, in generation order."""
        start = self.clock()
        color = state.current_player
        ctx = self._new_context(color)
        moves = [] if state.game_over else moves_for_color(state.board, color)
        if not moves:
            return SearchResult(move=None)
        root_key = self.zobrist.hash(state.board, color)
        best_move, best_value = None, -INF
        for move in moves:
            value = self._search_root_move(ctx, state, move, depth, root_key)
            if value > best_value:
                best_move, best_value = move, value
        return self._result(ctx, best_move, best_value, depth, start, ctx.choices.get(best_move))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _new_context(self, color: str, deadline: float = INF) -> _SearchContext:
        tt = TranspositionTable() if self.use_tt else None
        return _SearchContext(root_color=color, tt=tt, deadline=deadline)

    def _result(self, ctx, move, value, depth, start, capture=None) -> SearchResult:
        self.last_tt_size = len(ctx.tt) if ctx.tt is not None else 0
        return SearchResult(
            move=move,
            value=value,
            depth=depth,
            nodes=ctx.nodes,
            elapsed_ms=(self.clock() - start) * 1000.0,
            promotion_capture=capture,
        )

    @staticmethod
    def _prioritize(moves: List[Move], first: Move) -> List[Move]:
        ordered = list(moves)
        if first in ordered:
            ordered.remove(first)
            ordered.insert(0, first)
        return ordered

    def _outcomes(self, state: GameState, move: Move) -> Iterator[SimulationResult]:
        result = simulate_move(state.board, move, state.current_player)
        if not result.ok:
            # Unreachable for generated moves; treat as a dead branch.
            logger.error("Invalid simulated move %s for %s", move, state.current_player)
            return
        yield result
        if result.leads_to_choice and self.choice_policy is ChoicePolicy.BRANCH:
            for choice in range(1, len(result.promotion_matches)):
                yield simulate_move(state.board, move, state.current_player, choice)

    def _child_key(self, key: int, move: Move, result: SimulationResult) -> int:
        key = self.zobrist.step(key, move)
        if self.hash_captures:
            key = self.zobrist.fold_captures(key, result.captured)
        return key

    def _search_root_move(self, ctx, state, move, depth, root_key) -> float:
        best = -INF
        for result in self._outcomes(state, move):
            if result.leads_to_choice and self.choice_policy is ChoicePolicy.IMMEDIATE:
                value = result.score_gain
            else:
                child = state.after(result.board, result.score_gain)
                value = result.score_gain + self._alphabeta(
                    ctx, child, depth - 1, -INF, INF, False, self._child_key(root_key, move, result)
                )
            if value > best:
                best = value
                if result.leads_to_choice:
                    ctx.choices[move] = result.captured[0][:2]
                else:
                    ctx.choices.pop(move, None)
        return best

    def _alphabeta(self, ctx, state, depth, alpha, beta, maximizing, key) -> float:
        ctx.nodes += 1
        alpha_orig, beta_orig = alpha, beta

        tt = ctx.tt
        if tt is not None:
            entry = tt.get(key)
            if entry is not None and entry.depth >= depth:
                if entry.flag == TT_EXACT:
                    return entry.value
                if entry.flag == TT_LOWERBOUND:
                    alpha = max(alpha, entry.value)
                elif entry.flag == TT_UPPERBOUND:
                    beta = min(beta, entry.value)
                if alpha >= beta:
                    return entry.value

        if depth == 0 or state.game_over:
            return self.evaluator.evaluate(state, ctx.root_color)
        moves = moves_for_color(state.board, state.current_player)
        if not moves:
            return self.evaluator.evaluate(state, ctx.root_color)

        best = -INF if maximizing else INF
        for move in moves:
            for result in self._outcomes(state, move):
                child = state.after(result.board, result.score_gain)
                child_key = self._child_key(key, move, result)
                if maximizing:
                    value = result.score_gain + self._alphabeta(
                        ctx, child, depth - 1, alpha, beta, False, child_key
                    )
                    best = max(best, value)
                    alpha = max(alpha, value)
                else:
                    value = -result.score_gain + self._alphabeta(
                        ctx, child, depth - 1, alpha, beta, True, child_key
                    )
                    best = min(best, value)
                    beta = min(beta, value)
                if beta <= alpha:
                    break
            if beta <= alpha:
                break

        if tt is not None:
            if best <= alpha_orig:
                flag = TT_UPPERBOUND
            elif best >= beta_orig:
                flag = TT_LOWERBOUND
            else:
                flag = TT_EXACT
            tt.store(key, depth, best, flag)
        return best
