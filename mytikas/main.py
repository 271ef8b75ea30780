"""
Mytikas Engine Service - FastAPI Application
Exposes turn enumeration, turn execution and position rendering to web
front ends
"""

import logging
import os
import time

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from . import api
from .actions import Turn
from .ai.random_ai import RandomAI
from .errors import IllegalTurnError, MytikasError
from .game_engine import GameEngine
from .metrics import record_api_request
from .models import (
    AITurnRequest,
    AITurnResponse,
    ExecuteRequest,
    ExecuteResponse,
    PlayerName,
    PositionRequest,
    PositionView,
    TurnsResponse,
)
from .state import Position

# Configure logging
logging.basicConfig(
    level=os.getenv("MYTIKAS_LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Mytikas Engine Service",
    description="Rules engine for Mytikas: legal turns, turn execution, position encoding",
    version="1.0.0"
)

cors_origins = os.getenv("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _decode_position(text: str) -> Position:
    position = api.decode_position(text)
    if position is None:
        raise HTTPException(status_code=400, detail=f"invalid position: {text!r}")
    return position


def _decode_turn(text: str) -> Turn:
    turn = api.decode_turn(text)
    if turn is None:
        raise HTTPException(status_code=400, detail=f"invalid turn: {text!r}")
    return turn


def _execute_response(position: Position, turn: Turn) -> ExecuteResponse:
    winner = position.winner
    return ExecuteResponse(
        position=position.encode(),
        turn=turn.encode(),
        player_to_move=PlayerName.of(position.player),
        winner=PlayerName.of(winner) if winner is not None else None,
        is_over=position.is_over,
    )


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "service": "Mytikas Engine Service",
        "status": "running",
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check():
    """Health check for container orchestration"""
    return {"status": "healthy", "turnCache": GameEngine.cache_stats()}


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.get("/state/initial", response_model=PositionView)
async def initial_state():
    """The start position: every god summonable, Light to move."""
    return PositionView.from_position(Position.initial())


@app.post("/turns", response_model=TurnsResponse)
async def list_turns(request: PositionRequest):
    """
    Enumerate all legal turns for the side to move.

    Returns an empty list once the game is over.
    """
    start_time = time.time()
    outcome = "error"
    try:
        position = _decode_position(request.position)
        turns = api.enumerate_turns(position)
        outcome = "success"
        return TurnsResponse(
            position=position.encode(),
            player_to_move=PlayerName.of(position.player),
            turns=[turn.encode() for turn in turns],
            count=len(turns),
        )
    except HTTPException:
        outcome = "rejected"
        raise
    finally:
        record_api_request("turns", outcome, time.time() - start_time)


@app.post("/execute", response_model=ExecuteResponse)
async def execute_turn(request: ExecuteRequest):
    """
    Apply a turn and return the resulting position.

    Malformed input is rejected with 400; a well-formed turn that is not
    legal in the position (or a finished game) with 422.
    """
    start_time = time.time()
    outcome = "error"
    try:
        position = _decode_position(request.position)
        turn = _decode_turn(request.turn)
        try:
            result = GameEngine.apply_turn(position, turn, validate=True)
        except IllegalTurnError as e:
            raise HTTPException(status_code=422, detail=e.to_dict())
        outcome = "success"
        return _execute_response(result, turn)
    except HTTPException:
        outcome = "rejected"
        raise
    except MytikasError as e:
        logger.error("Error executing turn: %s", str(e), exc_info=True)
        raise HTTPException(status_code=500, detail=e.to_dict())
    finally:
        record_api_request("execute", outcome, time.time() - start_time)


@app.post("/describe", response_model=PositionView)
async def describe_position(request: PositionRequest):
    """Render a position: gods, hit points, cells and status effects."""
    start_time = time.time()
    outcome = "error"
    try:
        view = PositionView.from_position(_decode_position(request.position))
        outcome = "success"
        return view
    except HTTPException:
        outcome = "rejected"
        raise
    finally:
        record_api_request("describe", outcome, time.time() - start_time)


@app.post("/ai/turn", response_model=AITurnResponse)
async def ai_turn(request: AITurnRequest):
    """
    Pick a random legal turn for the side to move and apply it.

    Args:
        request: Encoded position and optional RNG seed.

    Returns:
        AITurnResponse with the chosen turn and the resulting position.
    """
    start_time = time.time()
    outcome = "error"
    try:
        position = _decode_position(request.position)
        ai = RandomAI(position.player, seed=request.seed)
        turn = ai.select_turn(position)
        if turn is None:
            raise HTTPException(status_code=422, detail="game is already over")
        result = api.execute(position, turn)
        thinking_time = int((time.time() - start_time) * 1000)
        logger.info(
            "AI turn: player=%s, turn=%s, time=%dms",
            position.player.name.lower(),
            turn.encode(),
            thinking_time,
        )
        outcome = "success"
        return AITurnResponse(
            turn=turn.encode(),
            position=result.encode(),
            ai_type="random",
            thinking_time_ms=thinking_time,
        )
    except HTTPException:
        outcome = "rejected"
        raise
    finally:
        record_api_request("ai_turn", outcome, time.time() - start_time)


if __name__ == "__main__":
    import uvicorn

    port_str = os.getenv("MYTIKAS_PORT", "8001")
    try:
        port = int(port_str)
    except ValueError:
        port = 8001

    uvicorn.run(app, host="0.0.0.0", port=port)
