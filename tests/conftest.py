"""Shared fixtures for the session core tests."""

from unittest.mock import Mock

import pytest

from app.game import SessionDirectory
from app.pairing import Matchmaker
from app.registry import ParticipantRegistry


class RecordingBroadcaster:
    """Collects published snapshots instead of delivering them."""

    def __init__(self):
        self.published = []

    def publish(self, session_id, snapshot):
        self.published.append((session_id, snapshot))

    def for_session(self, session_id):
        return [snap for sid, snap in self.published if sid == session_id]


def first_seat_rng():
    """RNG stub whose choice() always picks the first participant."""
    rng = Mock()
    rng.choice.side_effect = lambda seq: seq[0]
    return rng


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def registry():
    return ParticipantRegistry()


@pytest.fixture
def directory(broadcaster, registry):
    return SessionDirectory(broadcaster, registry, rng=first_seat_rng())


@pytest.fixture
def matchmaker(broadcaster):
    return Matchmaker(broadcaster, rng=first_seat_rng())
