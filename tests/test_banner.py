"""Tests for the in-app reminder banner."""

import asyncio

import pytest

from reminders.banner import InAppBanner
from reminders.types import ReminderEvent, ReminderType


def _event(reminder_type=ReminderType.WATER, fired_at=0) -> ReminderEvent:
    return ReminderEvent(type=reminder_type, message=f"{reminder_type.value} reminder", fired_at=fired_at)


@pytest.mark.asyncio
async def test_show_renders_and_auto_dismisses():
    rendered = []
    banner = InAppBanner(timeout_seconds=0.05)
    banner.subscribe(rendered.append)
    event = _event()

    assert banner.show(event) is True
    assert banner.active is event

    await asyncio.sleep(0.15)

    assert banner.active is None
    assert rendered == [event, None]


@pytest.mark.asyncio
async def test_new_reminder_replaces_and_restarts_timer():
    banner = InAppBanner(timeout_seconds=0.1)
    first, second = _event(ReminderType.WATER), _event(ReminderType.EXERCISE)

    banner.show(first)
    await asyncio.sleep(0.06)
    banner.show(second)
    await asyncio.sleep(0.06)

    # First timer was cancelled, second has not expired yet
    assert banner.active is second

    await asyncio.sleep(0.1)
    assert banner.active is None


@pytest.mark.asyncio
async def test_manual_dismiss():
    rendered = []
    banner = InAppBanner()
    banner.subscribe(rendered.append)

    banner.show(_event())
    banner.dismiss()

    assert banner.active is None
    assert rendered[-1] is None
    banner.close()


@pytest.mark.asyncio
async def test_renderer_failure_does_not_propagate():
    def broken(_event):
        raise RuntimeError("render crashed")

    seen = []
    banner = InAppBanner()
    banner.subscribe(broken)
    banner.subscribe(seen.append)
    event = _event()

    assert banner.show(event) is True
    assert seen == [event]
    banner.close()


@pytest.mark.asyncio
async def test_close_cancels_pending_dismiss():
    banner = InAppBanner(timeout_seconds=0.05)
    event = _event()
    banner.show(event)

    banner.close()
    await asyncio.sleep(0.1)

    assert banner.active is event


def test_show_without_event_loop_stays_until_dismissed():
    banner = InAppBanner(timeout_seconds=0.01)
    event = _event()

    banner.show(event)
    assert banner.active is event

    banner.dismiss()
    assert banner.active is None


def test_event_contract():
    event = ReminderEvent(type=ReminderType.TIP, message="tip", fired_at=42, title="Fit Buddy Reminder")
    assert event.to_dict() == {"type": "tip", "message": "tip", "firedAt": 42}
