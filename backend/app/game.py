"""
Ядро партий: подбор, ходы, завершение.

SessionDirectory — единственная точка входа для транспорта. Все изменения
одной сессии идут под её замком; рассылка снимка выполняется под тем же
замком, поэтому порядок снимков совпадает с порядком изменений.
"""
import logging
import random

from .broadcast import Broadcaster
from .constants import BOARD_SIZE, EMPTY_CELL, SessionStatus, WinnerStatus
from .exceptions import (
    AlreadyInSession,
    CellOccupied,
    NotYourTurn,
    OutOfBounds,
    UnknownSession,
)
from .pairing import Matchmaker, Session, SessionSnapshot, session_snapshot
from .registry import ParticipantRegistry
from .rules import has_won, is_full

logger = logging.getLogger(__name__)


def _valid_index(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < BOARD_SIZE


class SessionDirectory:
    def __init__(
        self,
        broadcaster: Broadcaster,
        registry: ParticipantRegistry | None = None,
        rng: random.Random | None = None,
    ):
        self.broadcaster = broadcaster
        self.registry = registry if registry is not None else ParticipantRegistry()
        self.matchmaker = Matchmaker(broadcaster, rng=rng)

    # --- входящие операции транспорта ---

    def connect(self, participant_id: str) -> None:
        self.registry.add(participant_id)

    def request_match(self, participant_id: str) -> str:
        """Найти или создать сессию для участника. Возвращает id сессии."""
        current = self.registry.get(participant_id)
        if current:
            raise AlreadyInSession(participant_id, current)
        session = self.matchmaker.match(participant_id)
        self.registry.set(participant_id, session.id)
        return session.id

    def submit_move(self, session_id: str, participant_id: str, row: int, col: int) -> SessionSnapshot:
        return self.apply_move(session_id, participant_id, row, col)

    def release(self, participant_id: str) -> None:
        """
        Клиент закончил партию и может искать новую.
        Из ожидающей сессии участник уходит; идущую партию это не прерывает.
        """
        session_id = self.registry.get(participant_id)
        if not session_id:
            return
        if self.matchmaker.get_active(session_id) is not None:
            logger.info("release ignored for %s: session %s still in progress", participant_id, session_id)
            return
        self.matchmaker.leave_pending(session_id, participant_id)
        self.registry.set(participant_id, None)

    def notify_disconnect(self, participant_id: str) -> None:
        session_id = self.registry.get(participant_id)
        if session_id:
            if self.matchmaker.get_active(session_id) is not None:
                self.abrupt_end(session_id)
            else:
                self.matchmaker.leave_pending(session_id, participant_id)
        self.registry.remove(participant_id)

    # --- обработка сессий ---

    def apply_move(self, session_id: str, participant_id: str, row: int, col: int) -> SessionSnapshot:
        """
        Применить ход. При отказе бросает SessionError без изменений и рассылки.
        Возвращает разосланный снимок.
        """
        session = self.matchmaker.get_active(session_id)
        if session is None:
            raise UnknownSession(session_id)
        with session.lock:
            # Хэндл мог устареть, пока ждали замок
            if session.status is not SessionStatus.IN_PROGRESS:
                raise UnknownSession(session_id)
            if session.turn != participant_id:
                raise NotYourTurn(session_id, participant_id)
            if not (_valid_index(row) and _valid_index(col)):
                raise OutOfBounds(row, col)
            if session.board[row][col] != EMPTY_CELL:
                raise CellOccupied(row, col)

            marker = session.seat_of(participant_id).marker
            session.board[row][col] = marker.value
            session.turn = session.other_participant()

            if has_won(session.board, marker.value):
                self._finish(session, participant_id)
            elif is_full(session.board):
                self._finish(session, WinnerStatus.TIE.value)

            snapshot = session_snapshot(session)
            self.broadcaster.publish(session_id, snapshot)
            if session.status is SessionStatus.FINISHED:
                self._retire(session)
        return snapshot

    def abrupt_end(self, session_id: str) -> None:
        """Завершить партию без победителя (участник отключился). Повторный вызов безопасен."""
        session = self.matchmaker.get_active(session_id)
        if session is None:
            return
        with session.lock:
            if session.status is not SessionStatus.IN_PROGRESS:
                return
            self._finish(session, WinnerStatus.NO_WINNER.value)
            self.broadcaster.publish(session_id, session_snapshot(session))
            self._retire(session)

    def _finish(self, session: Session, winner: str) -> None:
        session.winner = winner
        session.status = SessionStatus.FINISHED
        logger.info("session %s finished, winner=%s", session.id, winner)

    def _retire(self, session: Session) -> None:
        self.matchmaker.retire(session.id)
        for participant_id in session.participant_ids:
            self.registry.clear_if(participant_id, session.id)

    # --- только чтение ---

    def pending_snapshots(self) -> list[SessionSnapshot]:
        return self.matchmaker.pending_snapshots()

    def active_snapshots(self) -> list[SessionSnapshot]:
        return self.matchmaker.active_snapshots()
