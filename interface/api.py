"""FastAPI REST interface for the Check10 engine.

Stateless per request: the client sends the full game state each time and
gets back one move. Every request runs its own search with its own
transposition table.
"""

import logging
import math
import time
from typing import Any, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from check10.config import CONFIG, configure_logging
from check10.core.board import GameState, InvalidStateError
from check10.core.search import SearchEngine

configure_logging()
_log = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.server.engine_name, version="1.0.0")


class GameStateRequest(BaseModel):
    """Game state as the client holds it, plus an optional time budget."""

    board: Optional[List[Any]] = None
    currentPlayer: Optional[str] = None
    whiteScore: int = 0
    blackScore: int = 0
    gameOver: bool = False
    gameState: Optional[str] = None
    timeLimitMs: Optional[int] = None

    @field_validator("timeLimitMs")
    @classmethod
    def clamp_time_limit(cls, v: Optional[int]) -> Optional[int]:
        if v is None:
            return v
        return max(CONFIG.server.min_time_limit_ms, min(v, CONFIG.server.max_time_limit_ms))


@app.get("/health")
def health():
    return {"status": "ok", "engine": CONFIG.server.engine_name}


@app.get("/api/initial-state")
def initial_state():
    return GameState.initial().to_payload()


@app.post("/api/get-best-move")
def get_best_move(req: GameStateRequest):
    _log.info("Received request for best move")
    start = time.perf_counter()

    try:
        state = GameState.from_payload(req.model_dump())
    except InvalidStateError as e:
        raise HTTPException(status_code=400, detail=f"Invalid game state provided. {e}")

    time_limit = req.timeLimitMs if req.timeLimitMs is not None else CONFIG.search.time_limit_ms
    engine = SearchEngine()
    try:
        result = engine.find_best_move(state, time_limit_ms=time_limit)
    except Exception as exc:
        _log.exception("Engine search failed for player=%s", state.current_player)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    _log.info(
        "Final AI calculation took %dms. TT size: %d",
        int((time.perf_counter() - start) * 1000),
        engine.last_tt_size,
    )

    if result.move is None:
        _log.info("AI found no valid moves.")
        return {"noMove": True}

    _log.info("AI chose final move: %s depth=%d score=%s", result.move, result.depth, result.value)
    payload = result.move.to_payload()
    payload["score"] = result.value if math.isfinite(result.value) else None
    payload["depth"] = result.depth
    if result.promotion_capture is not None:
        row, col = result.promotion_capture
        payload["promotionCapture"] = {"row": row, "col": col}
    return payload


def main():
    uvicorn.run(app, host=CONFIG.server.host, port=CONFIG.server.port)


if __name__ == "__main__":
    main()
