"""
Пул ожидающих сессий и подбор пар (in-memory).

Сессия ждёт в pending, пока не займут второе место, затем переходит
в active. Завершённые сессии не хранятся.
"""
import copy
import logging
import random
import threading
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypedDict

from .constants import MAX_PARTICIPANTS, Marker, SessionStatus
from .exceptions import InvalidSession
from .rules import Board, empty_board

if TYPE_CHECKING:
    from .broadcast import Broadcaster

logger = logging.getLogger(__name__)


@dataclass
class Seat:
    participant_id: str
    marker: Marker


@dataclass
class Session:
    id: str
    is_private: bool = False
    seats: list[Seat] = field(default_factory=list)  # порядок входа, не больше двух
    turn: str | None = None
    board: Board = field(default_factory=empty_board)
    status: SessionStatus = SessionStatus.SEARCHING
    winner: str | None = None  # None | participant_id | WinnerStatus.value
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def participant_ids(self) -> list[str]:
        return [s.participant_id for s in self.seats]

    @property
    def is_full(self) -> bool:
        return len(self.seats) >= MAX_PARTICIPANTS

    def seat_of(self, participant_id: str) -> Seat | None:
        for seat in self.seats:
            if seat.participant_id == participant_id:
                return seat
        return None

    def next_marker(self) -> Marker:
        # Первому всегда X; второму то, что не занято оставшимся
        if not self.seats:
            return Marker.X
        return self.seats[0].marker.other

    def other_participant(self) -> str:
        """Второй из двух участников относительно текущего хода."""
        first, second = self.participant_ids
        return second if self.turn == first else first


class PlayerState(TypedDict):
    marker: str


class SessionSnapshot(TypedDict):
    id: str
    is_private: bool
    players: dict[str, PlayerState]
    player_turn: str
    board: list[list[str]]
    status: str
    winner: str


def session_snapshot(session: Session) -> SessionSnapshot:
    """Независимая копия видимого клиентам состояния сессии."""
    return {
        "id": session.id,
        "is_private": session.is_private,
        "players": {s.participant_id: {"marker": s.marker.value} for s in session.seats},
        "player_turn": session.turn or "",
        "board": copy.deepcopy(session.board),
        "status": session.status.value,
        "winner": session.winner or "",
    }


class Matchmaker:
    def __init__(self, broadcaster: "Broadcaster", rng: random.Random | None = None):
        self._broadcaster = broadcaster
        self._rng = rng or random.Random()
        self._pending: dict[str, Session] = {}
        self._active: dict[str, Session] = {}
        self._lock = threading.RLock()

    def create_session(self, is_private: bool = False) -> str:
        session = Session(id=str(uuid.uuid4()), is_private=is_private)
        with self._lock:
            self._pending[session.id] = session
        logger.info("session %s created (private=%s)", session.id, is_private)
        return session.id

    def find_or_create_session(self) -> str:
        """Самая старая публичная сессия со свободным местом, иначе новая."""
        with self._lock:
            for session_id, session in self._pending.items():
                if not session.is_private and not session.is_full:
                    return session_id
            return self.create_session()

    def join(self, session_id: str, participant_id: str) -> Session:
        """
        Посадить участника в ожидающую сессию.
        При заполнении сессия стартует: случайный первый ход, переход в active.
        """
        with self._lock:
            session = self._pending.get(session_id)
            if session is None:
                raise InvalidSession(session_id)
            with session.lock:
                if session.is_full or session.seat_of(participant_id):
                    raise InvalidSession(session_id)
                marker = session.next_marker()
                session.seats.append(Seat(participant_id=participant_id, marker=marker))
                logger.info("participant %s joined session %s as %s", participant_id, session_id, marker.value)
                if session.is_full:
                    del self._pending[session_id]
                    session.status = SessionStatus.IN_PROGRESS
                    session.turn = self._rng.choice(session.participant_ids)
                    self._active[session_id] = session
                    logger.info("session %s started, first turn %s", session_id, session.turn)
                self._broadcaster.publish(session_id, session_snapshot(session))
                return session

    def match(self, participant_id: str) -> Session:
        """find_or_create_session + join атомарно."""
        with self._lock:
            return self.join(self.find_or_create_session(), participant_id)

    def leave_pending(self, session_id: str, participant_id: str) -> None:
        with self._lock:
            session = self._pending.get(session_id)
            if session is None:
                return
            with session.lock:
                seat = session.seat_of(participant_id)
                if seat is None:
                    return
                session.seats.remove(seat)
        logger.info("participant %s left pending session %s", participant_id, session_id)

    def get_pending(self, session_id: str) -> Session | None:
        if not isinstance(session_id, str):
            return None
        with self._lock:
            return self._pending.get(session_id)

    def get_active(self, session_id: str) -> Session | None:
        # id приходит от клиента как есть, и может быть не строкой
        if not isinstance(session_id, str):
            return None
        with self._lock:
            return self._active.get(session_id)

    def retire(self, session_id: str) -> None:
        with self._lock:
            self._active.pop(session_id, None)

    def pending_snapshots(self) -> list[SessionSnapshot]:
        with self._lock:
            sessions = list(self._pending.values())
        return [_locked_snapshot(s) for s in sessions]

    def active_snapshots(self) -> list[SessionSnapshot]:
        with self._lock:
            sessions = list(self._active.values())
        return [_locked_snapshot(s) for s in sessions]

    def counts(self) -> dict[str, int]:
        with self._lock:
            return {"pending": len(self._pending), "active": len(self._active)}


def _locked_snapshot(session: Session) -> SessionSnapshot:
    with session.lock:
        return session_snapshot(session)
