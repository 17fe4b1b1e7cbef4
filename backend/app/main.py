"""
Tic-Tac-Toe API и WebSocket.
"""
import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .broadcast import ChannelBroadcaster
from .config import get_config
from .constants import GAME_STATUS_LABELS, WINNER_STATUS_LABELS
from .game import SessionDirectory
from .registry import ParticipantRegistry
from .ws_handlers import ws_session_loop
from .ws_manager import manager

config = get_config()

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Очередь создаётся внутри цикла событий приложения
    broadcaster = ChannelBroadcaster(maxsize=config.broadcast_queue_size)
    app.state.directory = SessionDirectory(broadcaster, ParticipantRegistry())
    pump = asyncio.create_task(broadcaster.run(manager.deliver_snapshot))
    logger.info("broadcast pump started (queue size %s)", config.broadcast_queue_size)
    try:
        yield
    finally:
        pump.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await pump


app = FastAPI(title="Tic-Tac-Toe API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/game_status")
def game_status():
    return GAME_STATUS_LABELS


@app.get("/api/game_winner")
def game_winner():
    return WINNER_STATUS_LABELS


@app.get("/api/sessions/pending")
def pending_sessions(request: Request):
    return request.app.state.directory.pending_snapshots()


@app.get("/api/sessions/active")
def active_sessions(request: Request):
    return request.app.state.directory.active_snapshots()


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    logger.info("WS: connection attempt from %s", ws.client)
    await ws_session_loop(ws)


# Статика фронтенда (для разработки)
frontend_path = Path(__file__).resolve().parent.parent.parent / "frontend"
if frontend_path.is_dir():
    app.mount("/", StaticFiles(directory=str(frontend_path), html=True), name="frontend")
