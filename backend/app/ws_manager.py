"""
Менеджер WebSocket: подключения по participant_id и доставка снимков сессий.
"""
import logging
from typing import Any

from fastapi import WebSocket

from .pairing import SessionSnapshot

logger = logging.getLogger(__name__)


class Connection:
    def __init__(self, ws: WebSocket, participant_id: str):
        self.ws = ws
        self.participant_id = participant_id


class WSManager:
    def __init__(self):
        self._by_participant: dict[str, Connection] = {}

    def connect(self, ws: WebSocket, participant_id: str) -> None:
        self._by_participant[participant_id] = Connection(ws, participant_id)

    def disconnect(self, participant_id: str) -> None:
        self._by_participant.pop(participant_id, None)

    def is_connected(self, participant_id: str) -> bool:
        return participant_id in self._by_participant

    async def send_to_participant(self, participant_id: str, payload: dict[str, Any]) -> bool:
        conn = self._by_participant.get(participant_id)
        if not conn:
            return False
        try:
            await conn.ws.send_json(payload)
            return True
        except Exception as e:
            logger.warning("send_to_participant %s: %s", participant_id, e)
            return False

    async def deliver_snapshot(self, session_id: str, snapshot: SessionSnapshot) -> None:
        """Отправить снимок каждому участнику сессии из самого снимка."""
        payload = {"type": "game_state", "game": snapshot}
        for participant_id in snapshot["players"]:
            if not await self.send_to_participant(participant_id, payload):
                logger.info("game_state for %s not delivered to %s", session_id, participant_id)


manager = WSManager()
