"""Wellness reminders - hydration, exercise and daily tip reminders.

Polls every 60 seconds, decides what is due from the user's settings and a
durable last-fired ledger, and surfaces reminders as an in-app banner plus a
best-effort OS notification.
"""

from .types import ReminderType, ReminderEvent, DispatchResult, Permission, REMINDER_ORDER
from .clock import Clock, SystemClock, FakeClock
from .kv_store import KVStore, MemoryKVStore, SqliteKVStore
from .settings import ReminderSettings, load_settings, parse_settings
from .ledger import DedupLedger
from .evaluator import Evaluation, evaluate
from .banner import InAppBanner
from .sinks import NotificationSink, BrowserSink, MobileSink, NoopSink
from .dispatcher import Dispatcher
from .ticker import Ticker
from .scheduler import ReminderScheduler, build_sink, resolve_timezone

__all__ = [
    "ReminderType",
    "ReminderEvent",
    "DispatchResult",
    "Permission",
    "REMINDER_ORDER",
    "Clock",
    "SystemClock",
    "FakeClock",
    "KVStore",
    "MemoryKVStore",
    "SqliteKVStore",
    "ReminderSettings",
    "load_settings",
    "parse_settings",
    "DedupLedger",
    "Evaluation",
    "evaluate",
    "InAppBanner",
    "NotificationSink",
    "BrowserSink",
    "MobileSink",
    "NoopSink",
    "Dispatcher",
    "Ticker",
    "ReminderScheduler",
    "build_sink",
    "resolve_timezone",
]
