"""
Рассылка снимков сессий.

Ядро зовёт publish() и не ждёт доставки. ChannelBroadcaster кладёт снимок
в ограниченную очередь, которую разбирает WebSocket-слой (см. ws_manager).
"""
import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from .pairing import SessionSnapshot

logger = logging.getLogger(__name__)

Deliver = Callable[[str, SessionSnapshot], Awaitable[None]]


class Broadcaster(Protocol):
    def publish(self, session_id: str, snapshot: SessionSnapshot) -> None:
        ...


class ChannelBroadcaster:
    """Ограниченная FIFO-очередь снимков с одним потребителем."""

    def __init__(self, maxsize: int = 1024):
        self._queue: asyncio.Queue[tuple[str, SessionSnapshot]] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def publish(self, session_id: str, snapshot: SessionSnapshot) -> None:
        try:
            self._queue.put_nowait((session_id, snapshot))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning("broadcast: queue full, dropped snapshot for session %s", session_id)

    def pending(self) -> int:
        return self._queue.qsize()

    async def run(self, deliver: Deliver) -> None:
        """Разбирать очередь до отмены задачи. Ошибка доставки не останавливает цикл."""
        while True:
            session_id, snapshot = await self._queue.get()
            try:
                await deliver(session_id, snapshot)
            except Exception:
                logger.exception("broadcast: delivery failed for session %s", session_id)
            finally:
                self._queue.task_done()
