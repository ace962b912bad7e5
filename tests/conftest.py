"""
Shared fixtures: a chat service on a hand-driven clock with timers disabled.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from parley.config import Settings
from parley.services.chat_service import ChatService
from parley.services.scheduler import Scheduler


class FakeClock:
    """Epoch-second clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    # Minimum bcrypt cost keeps registration fast
    return Settings(persist=False, password_hash_rounds=4)


@pytest.fixture
def service(settings, clock):
    return ChatService(settings, clock, Scheduler(clock, enabled=False))


@pytest.fixture
def alice(service):
    """First registered user, so also the global owner. Handle: alicesmith"""
    return service.auth.register("alice@example.com", "password1", "Alice", "Smith").auth_user_id


@pytest.fixture
def bob(service, alice):
    """Handle: bobjones"""
    return service.auth.register("bob@example.com", "password2", "Bob", "Jones").auth_user_id


@pytest.fixture
def carol(service, bob):
    """Handle: carolwhite"""
    return service.auth.register("carol@example.com", "password3", "Carol", "White").auth_user_id


@pytest.fixture
def general(service, alice, bob):
    """Public channel owned by alice with bob invited."""
    channel_id = service.channels.create(alice, "general", True)
    service.channels.invite(alice, channel_id, bob)
    return channel_id
