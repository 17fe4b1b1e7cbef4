"""Константы игры: маркеры, статусы сессии и исходы."""
from enum import Enum

BOARD_SIZE = 3
EMPTY_CELL = "-"
MAX_PARTICIPANTS = 2


class Marker(str, Enum):
    X = "X"
    O = "O"

    @property
    def other(self) -> "Marker":
        return Marker.O if self is Marker.X else Marker.X


class SessionStatus(str, Enum):
    SEARCHING = "Searching for players"
    IN_PROGRESS = "Game in progress"
    FINISHED = "Game finished"


class WinnerStatus(str, Enum):
    NO_WINNER = "No Winner"
    TIE = "Tie"


GAME_STATUS_LABELS: dict[str, str] = {s.name: s.value for s in SessionStatus}
WINNER_STATUS_LABELS: dict[str, str] = {s.name: s.value for s in WinnerStatus}
