"""Deliver due reminders and record them in the ledger."""

from datetime import tzinfo
from typing import Optional

from logger import logger
from .banner import InAppBanner
from .evaluator import local_datetime
from .ledger import DedupLedger, MarkerValue
from .sinks import NotificationSink
from .types import DispatchResult, Permission, ReminderEvent, ReminderType
from . import config


class Dispatcher:
    """Turns a "due" decision into a delivered reminder."""

    def __init__(
        self,
        banner: InAppBanner,
        sink: NotificationSink,
        ledger: DedupLedger,
        tz: Optional[tzinfo] = None
    ):
        self.banner = banner
        self.sink = sink
        self.ledger = ledger
        self.tz = tz

    def build_event(self, reminder_type: ReminderType, now_ms: int) -> ReminderEvent:
        return ReminderEvent(
            type=reminder_type,
            message=config.MESSAGES[reminder_type.value],
            fired_at=now_ms,
            title=config.NOTIFICATION_TITLE,
        )

    def _marker_for(self, reminder_type: ReminderType, now_ms: int) -> MarkerValue:
        """Water stores the fire time; daily reminders store the local date."""
        if reminder_type is ReminderType.WATER:
            return now_ms
        return local_datetime(now_ms, self.tz).strftime("%Y-%m-%d")

    async def _deliver(self, event: ReminderEvent, result: DispatchResult) -> None:
        """Banner first (always), then the OS channel if permitted right now."""
        result.banner_shown = self.banner.show(event)

        try:
            permission = self.sink.permission()
        except Exception as e:
            logger.warning(f"Could not read {self.sink.name} permission, skipping OS notification: {e}")
            return

        if permission != Permission.GRANTED:
            logger.debug(f"OS notification skipped for {event.type.value} (permission: {permission.value})")
            return

        result.os_attempted = True
        try:
            result.os_delivered = await self.sink.deliver(event.title, event.message)
        except Exception as e:
            logger.error(f"{self.sink.name} sink raised while delivering {event.type.value}: {e}")
            result.os_delivered = False

        if not result.os_delivered:
            result.warnings.append(f"OS notification via {self.sink.name} failed")

    async def dispatch(self, reminder_type: ReminderType, now_ms: int) -> DispatchResult:
        """Fire one reminder and mark it in the ledger.

        The ledger is written whether or not the OS notification went through:
        the in-app banner is what counts as "fired".

        Args:
            reminder_type: The due reminder
            now_ms: Tick time in epoch ms

        Returns:
            DispatchResult with delivery flags and non-fatal warnings
        """
        event = self.build_event(reminder_type, now_ms)
        result = DispatchResult(event=event)

        try:
            await self._deliver(event, result)
        finally:
            result.ledger_written = self.ledger.write(reminder_type, self._marker_for(reminder_type, now_ms))
            if not result.ledger_written:
                result.warnings.append(
                    f"Could not persist {reminder_type.value} reminder; it may repeat after a restart"
                )

        logger.info(
            f"Fired {reminder_type.value} reminder "
            f"(os={'sent' if result.os_delivered else 'skipped' if not result.os_attempted else 'failed'})"
        )
        for warning in result.warnings:
            logger.warning(warning)
        return result

    async def fire_test(self, now_ms: int, reminder_type: ReminderType = ReminderType.TIP) -> DispatchResult:
        """Diagnostic reminder: same delivery path, never touches the ledger."""
        event = ReminderEvent(
            type=reminder_type,
            message=config.TEST_NOTIFICATION_MESSAGE,
            fired_at=now_ms,
            title=config.TEST_NOTIFICATION_TITLE,
        )
        result = DispatchResult(event=event)
        await self._deliver(event, result)

        if not result.os_attempted:
            result.warnings.append("Notifications are not enabled; only the in-app banner was shown")
        logger.info(f"Test reminder fired (os_delivered={result.os_delivered})")
        return result
