"""
Ошибки ядра сессий.

Все они восстановимые: операция отклоняется без изменения состояния
и без рассылки. Транспорт сам решает, показывать ли их клиенту.
"""


class SessionError(Exception):
    """Базовый класс отклонённых операций."""

    code = "session_error"


class InvalidSession(SessionError):
    """Сессии нет среди ожидающих или она уже заполнена."""

    code = "invalid_session"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} is not open for joining")


class UnknownSession(SessionError):
    """Сессии нет среди активных."""

    code = "unknown_session"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} is not active")


class NotYourTurn(SessionError):
    code = "not_your_turn"

    def __init__(self, session_id: str, participant_id: str):
        self.session_id = session_id
        self.participant_id = participant_id
        super().__init__(f"Participant {participant_id} cannot move now in {session_id}")


class CellOccupied(SessionError):
    code = "cell_occupied"

    def __init__(self, row: int, col: int):
        self.row = row
        self.col = col
        super().__init__(f"Cell ({row}, {col}) is already taken")


class OutOfBounds(SessionError):
    code = "out_of_bounds"

    def __init__(self, row, col):
        self.row = row
        self.col = col
        super().__init__(f"Cell ({row!r}, {col!r}) is outside the board")


class AlreadyInSession(SessionError):
    """Участник уже числится в сессии и не может искать новую."""

    code = "already_in_session"

    def __init__(self, participant_id: str, session_id: str):
        self.participant_id = participant_id
        self.session_id = session_id
        super().__init__(f"Participant {participant_id} is already in session {session_id}")
