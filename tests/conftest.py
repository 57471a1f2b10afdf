"""Shared fixtures for Pantau Ops tests."""

import os
from datetime import datetime, timezone

import pytest

# Set environment variables before imports
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('POWERTOOLS_METRICS_NAMESPACE', 'PantauOpsTest')
os.environ.setdefault('POWERTOOLS_SERVICE_NAME', 'pantau-ops-test')
os.environ.setdefault('POWERTOOLS_METRICS_DISABLED', 'false')

from pantau_shared.event_publisher import EventPublisher
from pantau_shared.models import Notification
from pantau_shared.utils import SequentialIdGenerator
from escalation_pipeline.app import IncidentFactory, OpsStore


FIXED_NOW = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock returning a settable instant."""

    def __init__(self, now=FIXED_NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    """Clock frozen at 2025-01-01T00:00:00Z."""
    return FrozenClock()


@pytest.fixture
def id_generator():
    """Deterministic id seeds."""
    return SequentialIdGenerator()


@pytest.fixture
def factory(id_generator, clock):
    """Incident factory with deterministic ids and time."""
    return IncidentFactory(id_generator=id_generator, clock=clock)


@pytest.fixture
def publisher():
    """Event publisher recording every event it dispatches."""
    publisher = EventPublisher("test-session")
    publisher.received = []
    publisher.subscribe("*", publisher.received.append)
    return publisher


@pytest.fixture
def store(factory, publisher, id_generator):
    """Empty session store."""
    with OpsStore(factory=factory, publisher=publisher, id_generator=id_generator) as session:
        yield session


@pytest.fixture
def make_notification():
    """Build a notification with sensible defaults."""
    def _make(**overrides):
        data = {
            "id": "n-1",
            "severity": "Tinggi",
            "lifecycle": "new",
            "title": "Kebutuhan Darah Segera",
            "time": "Baru saja",
            "description": "desc",
            "location": "ICU",
        }
        data.update(overrides)
        return Notification(**data)
    return _make
