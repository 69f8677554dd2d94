"""Reminder scheduler - one explicit object owning the whole reminder loop.

Usage:
    async with ReminderScheduler(store, sink) as reminders:
        ...  # ticks every 60s until the block exits

Tests skip the ticker and call tick() directly with a FakeClock.
"""

from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from logger import logger
from .banner import InAppBanner
from .clock import Clock, SystemClock
from .dispatcher import Dispatcher
from .evaluator import Evaluation, evaluate
from .kv_store import KVStore
from .ledger import DedupLedger
from .settings import load_settings
from .sinks import BrowserSink, MobileSink, NoopSink, NotificationSink
from .ticker import Ticker
from .types import DispatchResult, Permission, ReminderType


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """ZoneInfo for a configured name; None (host local time) if empty or unknown."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}, using host local time")
        return None


def build_sink(
    channel: str,
    store: KVStore,
    relay_url: Optional[str] = None,
    ntfy_server: str = "https://ntfy.sh",
    ntfy_topic: Optional[str] = None
) -> NotificationSink:
    """Pick the platform adapter for the configured notification channel."""
    channel = (channel or "none").lower()
    if channel == "browser":
        return BrowserSink(relay_url, store)
    if channel == "mobile":
        return MobileSink(ntfy_server, ntfy_topic, store)
    if channel != "none":
        logger.warning(f"Unknown notification channel {channel!r}, OS notifications disabled")
    return NoopSink(permission=Permission.DENIED, grant_on_request=False)


class ReminderScheduler:
    """Owns the clock, ledger, banner, dispatcher and ticker for one session."""

    def __init__(
        self,
        store: KVStore,
        sink: NotificationSink,
        clock: Optional[Clock] = None,
        tz: Optional[tzinfo] = None,
        banner: Optional[InAppBanner] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
        owns_store: bool = False
    ):
        """Initialize reminder scheduler.

        Args:
            store: Key-value store holding settings and the ledger
            sink: Platform notification adapter
            clock: Time source (wall clock when omitted)
            tz: Timezone for exercise / tip times (host local when omitted)
            banner: In-app banner (a fresh one when omitted)
            scheduler: Shared APScheduler instance for the ticker job
            owns_store: Close the store on shutdown
        """
        self.store = store
        self.sink = sink
        self.clock = clock or SystemClock()
        self.tz = tz
        self.banner = banner or InAppBanner()
        self.ledger = DedupLedger(store)
        self.dispatcher = Dispatcher(self.banner, sink, self.ledger, tz)
        self.ticker = Ticker(self.tick, scheduler)
        self.owns_store = owns_store

        self.last_evaluation: Optional[Evaluation] = None
        self._tick_in_progress = False

    async def __aenter__(self) -> "ReminderScheduler":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def start(self) -> None:
        """Start ticking (first tick runs immediately)."""
        self.ticker.start()

    def shutdown(self) -> None:
        """Stop ticking and release timers. Safe to call more than once."""
        self.ticker.stop()
        self.banner.close()
        if self.owns_store:
            self.store.close()

    async def tick(self) -> list[DispatchResult]:
        """Evaluate once and dispatch everything that is due.

        Never raises. Returns the dispatch results (empty if nothing was due).
        """
        if self._tick_in_progress:
            logger.warning("Previous reminder tick still running, skipping")
            return []

        self._tick_in_progress = True
        results: list[DispatchResult] = []
        try:
            now = self.clock.now()
            settings = load_settings(self.store)
            evaluation = evaluate(now, settings, self.ledger.snapshot(), self.tz)
            self.last_evaluation = evaluation

            # One type failing must not block the others
            for reminder_type in evaluation.due:
                try:
                    results.append(await self.dispatcher.dispatch(reminder_type, now))
                except Exception as e:
                    logger.error(f"Failed to dispatch {reminder_type.value} reminder: {e}")

        except Exception as e:
            logger.error(f"Reminder tick failed: {e}")
        finally:
            self._tick_in_progress = False

        return results

    async def fire_test_reminder(self, reminder_type: ReminderType = ReminderType.TIP) -> DispatchResult:
        """Show a diagnostic reminder now, bypassing the evaluator and the ledger.

        Runs immediately, outside the ticker and its overlap guard; awaiting it
        completes the whole delivery (banner, then OS notification if permitted).
        Callers without a loop can use asyncio.run(), as `main.py test` does.
        """
        return await self.dispatcher.fire_test(self.clock.now(), reminder_type)

    async def request_notification_permission(self) -> Permission:
        """Ask the platform for OS notification permission."""
        try:
            permission = await self.sink.request_permission()
        except Exception as e:
            logger.error(f"Notification permission request failed: {e}")
            return Permission.DEFAULT

        if permission == Permission.GRANTED:
            logger.info("Notifications enabled - reminders will follow your settings")
        else:
            logger.warning(f"Notifications {permission.value} - only in-app reminders will show")
        return permission

    def dismiss_banner(self) -> None:
        self.banner.dismiss()

    def reset_ledger(self, reminder_type: Optional[ReminderType] = None) -> bool:
        """Explicitly clear last-fired markers."""
        return self.ledger.reset(reminder_type)

    def status(self) -> dict:
        """Snapshot for diagnostics."""
        try:
            permission = self.sink.permission().value
        except Exception as e:
            logger.warning(f"Could not read notification permission: {e}")
            permission = Permission.DEFAULT.value

        next_run = self.ticker.next_run_time
        return {
            "running": self.ticker.running,
            "next_tick": next_run.isoformat() if next_run else None,
            "sink": self.sink.name,
            "permission": permission,
            "settings": load_settings(self.store).to_dict(),
            "ledger": {t.ledger_key: v for t, v in self.ledger.snapshot().items()},
            "active_banner": self.banner.active.to_dict() if self.banner.active else None,
        }
