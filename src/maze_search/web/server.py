"""
Backend for the maze search browser front-end.
It uses FastAPI for HTTP endpoints and Socket.IO for streaming replay frames.
Rendering stays in the browser; the server owns the single maze session.
"""

import logging
from typing import Any, List, Optional

import socketio
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from maze_search.analysis.metrics import analyze_results
from maze_search.comparison.aggregator import ReplayFrame
from maze_search.comparison.ownership import ALGORITHM_COLORS
from maze_search.core.data_models import (
    EditMode, MazeSearchError, RunCancelledError, SELECTABLE_ALGORITHMS, SINGLE_ALGORITHMS
)
from maze_search.replay.session import MazeSession, create_session

logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    seed: Optional[int] = None


class EditRequest(BaseModel):
    row: int
    col: int
    mode: EditMode = EditMode.TOGGLE_WALL


class SpeedRequest(BaseModel):
    speed: int


class RunRequest(BaseModel):
    algorithm: str = 'A*'


class CompareRequest(BaseModel):
    algorithms: Optional[List[str]] = None


def _conflict(action: str) -> HTTPException:
    return HTTPException(status_code=409, detail=f"Cannot {action} while a run is in progress")


def _cancelled() -> dict:
    return {'cancelled': True, 'results': [], 'summary': None}


def create_app(config: Optional[Any] = None, session: Optional[MazeSession] = None) -> FastAPI:
    """Build the FastAPI app and its Socket.IO server around one session.

    Args:
        config: Full configuration used to build the session
        session: Existing session to serve instead

    Returns:
        FastAPI app; ``app.state.sio`` holds the Socket.IO server and
        ``app.state.asgi`` the combined ASGI application to serve
    """
    session = session or create_session(config)
    app = FastAPI(title="Maze Search Demonstrator")
    sio = socketio.AsyncServer(async_mode='asgi', cors_allowed_origins='*')

    app.state.session = session
    app.state.sio = sio
    app.state.asgi = socketio.ASGIApp(sio, app)

    async def broadcast_frame(frame: ReplayFrame) -> None:
        await sio.emit('frame', frame.to_dict())

    @app.exception_handler(MazeSearchError)
    async def maze_error_handler(request: Request, exc: MazeSearchError):
        return JSONResponse(status_code=400, content={'detail': str(exc)})

    # --- HTTP endpoints ---

    @app.get("/api/maze")
    async def get_maze():
        return session.state_dict()

    @app.get("/api/algorithms")
    async def get_algorithms():
        return [
            {
                'id': algorithm.name,
                'name': algorithm.display_name,
                'color': ALGORITHM_COLORS[algorithm],
                'selectable': algorithm in SELECTABLE_ALGORITHMS,
            }
            for algorithm in SINGLE_ALGORITHMS
        ]

    @app.post("/api/maze/generate")
    async def generate_maze(request: GenerateRequest):
        if not session.regenerate(request.seed):
            raise _conflict('regenerate the maze')
        return session.state_dict()

    @app.post("/api/maze/clear")
    async def clear_maze():
        if not session.clear():
            raise _conflict('clear the maze')
        return session.state_dict()

    @app.post("/api/maze/reset")
    async def reset_visualization():
        if not session.reset_visualization():
            raise _conflict('reset the visualization')
        return session.state_dict()

    @app.post("/api/maze/edit")
    async def edit_maze(request: EditRequest):
        if session.is_running:
            raise _conflict('edit the maze')
        changed = session.edit(request.row, request.col, request.mode)
        return {'changed': changed, 'maze': session.state_dict()}

    @app.post("/api/speed")
    async def set_speed(request: SpeedRequest):
        if not 1 <= request.speed <= 100:
            raise HTTPException(status_code=400, detail="speed must be in [1, 100]")
        session.set_speed(request.speed)
        return {'speed': session.speed}

    @app.post("/api/run")
    async def run_single(request: RunRequest):
        try:
            result = await session.run_single(request.algorithm, broadcast_frame)
        except RunCancelledError:
            return _cancelled()
        if result is None:
            raise _conflict('start a run')
        return {'results': [result.to_dict()], 'summary': analyze_results([result]).to_dict()}

    @app.post("/api/compare")
    async def run_comparison(request: CompareRequest):
        try:
            results = await session.run_comparison(request.algorithms, broadcast_frame)
        except RunCancelledError:
            return _cancelled()
        if results is None:
            raise _conflict('start a comparison')
        return {
            'results': [r.to_dict() for r in results],
            'summary': analyze_results(results).to_dict(),
        }

    # --- Socket.IO event handlers ---

    @sio.event
    async def connect(sid, environ):
        logger.info(f"Socket.IO client connected: {sid}")

    @sio.event
    async def disconnect(sid):
        logger.info(f"Socket.IO client disconnected: {sid}")

    @sio.on('start_replay')
    async def start_replay(sid, data):
        """Run a single algorithm or a comparison and stream its frames to the caller."""
        data = data or {}

        async def send_frame(frame: ReplayFrame) -> None:
            await sio.emit('frame', frame.to_dict(), to=sid)

        try:
            if data.get('mode', 'compare') == 'single':
                result = await session.run_single(data.get('algorithm', 'A*'), send_frame)
                results = [result] if result is not None else None
            else:
                results = await session.run_comparison(data.get('algorithms'), send_frame)
        except RunCancelledError:
            await sio.emit('replay_cancelled', {'cancelled': True}, to=sid)
            return
        except MazeSearchError as e:
            await sio.emit('replay_error', {'error': str(e)}, to=sid)
            return

        if results is None:
            await sio.emit('replay_error', {'error': 'A run is already in progress'}, to=sid)
            return

        await sio.emit('results', {
            'results': [r.to_dict() for r in results],
            'summary': analyze_results(results).to_dict(),
        }, to=sid)

    @sio.on('cancel_replay')
    async def cancel_replay(sid, data=None):
        cancelled = await session.cancel()
        await sio.emit('replay_cancelled', {'cancelled': cancelled}, to=sid)

    return app


def create_asgi_app(config: Optional[Any] = None) -> socketio.ASGIApp:
    """FastAPI app wrapped by the Socket.IO server, ready for uvicorn."""
    return create_app(config).state.asgi
