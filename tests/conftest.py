"""
Pytest configuration for meditation timer tests.
"""

import pytest

from audio import CuePlayer
from sync.base import UserIdentity
from tests.fakes import (
    DictAssetLoader,
    FakeClock,
    FakeIdentity,
    FakeScheduler,
    FakeStore,
    RecordingCuePlayer,
    RecordingOutput,
)
from tracking.countdown import CountdownEngine
from tracking.lifecycle import SessionController


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return FakeScheduler(clock)


@pytest.fixture
def cues():
    return RecordingCuePlayer()


@pytest.fixture
def engine(scheduler, cues, clock):
    return CountdownEngine(scheduler, cues, clock=clock)


@pytest.fixture
def user():
    return UserIdentity(id="user-1", email="ada@example.com")


@pytest.fixture
def identity(user):
    return FakeIdentity(user)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def controller(engine, identity, store):
    return SessionController(engine, identity, store)


@pytest.fixture
def output():
    return RecordingOutput()


@pytest.fixture
def cue_player(scheduler, output):
    return CuePlayer(scheduler, asset_loader=DictAssetLoader(), output=output)
