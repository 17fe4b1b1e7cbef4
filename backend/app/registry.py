"""Соответствие подключение -> текущая сессия."""
import threading


class ParticipantRegistry:
    def __init__(self):
        self._sessions: dict[str, str | None] = {}
        self._lock = threading.Lock()

    def add(self, participant_id: str) -> None:
        with self._lock:
            self._sessions[participant_id] = None

    def remove(self, participant_id: str) -> None:
        with self._lock:
            self._sessions.pop(participant_id, None)

    def get(self, participant_id: str) -> str | None:
        with self._lock:
            return self._sessions.get(participant_id)

    def set(self, participant_id: str, session_id: str | None) -> None:
        with self._lock:
            self._sessions[participant_id] = session_id

    def clear_if(self, participant_id: str, session_id: str) -> bool:
        """Сбросить запись, только если она всё ещё указывает на session_id."""
        with self._lock:
            if participant_id in self._sessions and self._sessions[participant_id] == session_id:
                self._sessions[participant_id] = None
                return True
            return False

    def __contains__(self, participant_id: str) -> bool:
        with self._lock:
            return participant_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
