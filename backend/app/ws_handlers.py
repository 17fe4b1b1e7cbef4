"""
Обработка сообщений WebSocket: find_game, make_move, end_game.
Снимки сессий уходят клиентам через очередь рассылки, а не отсюда.
"""
import json
import logging
import uuid

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from .exceptions import SessionError
from .game import SessionDirectory
from .ws_manager import manager

logger = logging.getLogger(__name__)


def _new_participant_id() -> str:
    return uuid.uuid4().hex


async def handle_ws_message(directory: SessionDirectory, raw: str, participant_id: str) -> bool:
    """
    Обрабатывает одно сообщение от клиента.
    Возвращает False если соединение нужно закрыть.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("WS: invalid JSON from %s: %s", participant_id, e)
        return True
    if not isinstance(data, dict):
        logger.warning("WS: unexpected payload from %s", participant_id)
        return True
    t = data.get("type")
    logger.info("WS: msg from %s type=%s", participant_id, t)
    if t == "find_game":
        try:
            game_id = directory.request_match(participant_id)
        except SessionError as e:
            logger.info("WS: find_game rejected for %s: %s", participant_id, e)
            await manager.send_to_participant(
                participant_id,
                {"type": "error", "code": e.code, "message": str(e)},
            )
            return True
        logger.info("WS: %s placed in session %s", participant_id, game_id)
        return True
    if t == "make_move":
        game_id = data.get("game_id")
        try:
            directory.submit_move(game_id, participant_id, data.get("row"), data.get("col"))
        except SessionError as e:
            # Устаревший интерфейс шлёт лишние клики, это не ошибка сервера
            logger.info("WS: move rejected for %s: %s", participant_id, e)
        return True
    if t == "end_game":
        directory.release(participant_id)
        return True
    return True


async def ws_session_loop(ws: WebSocket) -> None:
    """
    Выдаёт анонимный participant_id и принимает сообщения до отключения.
    """
    directory: SessionDirectory = ws.app.state.directory
    participant_id = None
    try:
        await ws.accept()
        participant_id = _new_participant_id()
        manager.connect(ws, participant_id)
        directory.connect(participant_id)
        logger.info("WS: accepted participant_id=%s", participant_id)
        await manager.send_to_participant(
            participant_id,
            {"type": "connected", "participant_id": participant_id},
        )
        while True:
            msg = await ws.receive_text()
            if not await handle_ws_message(directory, msg, participant_id):
                break
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s reason=%s participant_id=%s", e.code, e.reason or "", participant_id)
    except Exception as e:
        logger.exception("WS: error participant_id=%s: %s", participant_id, e)
    finally:
        if participant_id:
            directory.notify_disconnect(participant_id)
            manager.disconnect(participant_id)
            logger.info("WS: disconnected participant_id=%s", participant_id)
