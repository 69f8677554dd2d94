"""Pytest configuration and fixtures."""

import json
import os
import sys
from datetime import datetime, timezone
from typing import Optional
from unittest.mock import patch, AsyncMock

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reminders import (
    FakeClock,
    InAppBanner,
    MemoryKVStore,
    NoopSink,
    Permission,
    ReminderScheduler,
)
from reminders import config as reminder_config


class FlakyKVStore(MemoryKVStore):
    """Memory store whose reads / writes can be switched to fail."""

    def __init__(self, initial: Optional[dict] = None):
        super().__init__(initial)
        self.fail_reads = False
        self.fail_writes = False

    def get(self, key):
        if self.fail_reads:
            raise OSError("storage unavailable")
        return super().get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise OSError("disk full")
        super().set(key, value)


def _ms(year, month, day, hour=0, minute=0, second=0) -> int:
    """Epoch ms for a UTC wall-clock time."""
    return int(datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc).timestamp() * 1000)


@pytest.fixture
def at():
    """Helper turning a UTC date/time into epoch ms."""
    return _ms


@pytest.fixture
def store():
    return MemoryKVStore()


@pytest.fixture
def flaky_store():
    return FlakyKVStore()


@pytest.fixture
def clock():
    """Fake clock starting at 2026-10-19 08:00 UTC."""
    return FakeClock(_ms(2026, 10, 19, 8, 0))


@pytest.fixture
def sink():
    return NoopSink(permission=Permission.GRANTED)


@pytest.fixture
def banner_events():
    """Collects everything rendered on the banner."""
    return []


@pytest.fixture
def banner(banner_events):
    banner = InAppBanner()
    banner.subscribe(banner_events.append)
    yield banner
    banner.close()


@pytest.fixture
def write_settings():
    """Store a settings record the way the settings screen does."""
    def _write(store, **values):
        store.set(reminder_config.SETTINGS_KEY, json.dumps(values))
    return _write


@pytest.fixture
def make_scheduler(clock, sink, banner):
    """Build a ReminderScheduler in UTC with the shared fakes."""
    created = []

    def _make(store, notification_sink=None, **overrides):
        kwargs = {"clock": clock, "tz": timezone.utc, "banner": banner}
        kwargs.update(overrides)
        scheduler = ReminderScheduler(store, notification_sink or sink, **kwargs)
        created.append(scheduler)
        return scheduler

    yield _make

    for scheduler in created:
        scheduler.shutdown()


@pytest.fixture
def mock_httpx_client():
    """Create a mock httpx client."""
    with patch('httpx.AsyncClient') as mock:
        client = AsyncMock()
        mock.return_value.__aenter__.return_value = client
        yield client
