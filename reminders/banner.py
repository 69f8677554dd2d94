"""In-app reminder banner.

Holds at most one active reminder and auto-dismisses it after a fixed timeout.
Rendering is somebody else's job: renderers subscribe with a callback that gets
the ReminderEvent on show and None on dismiss.
"""

import asyncio
from typing import Callable, Optional

from logger import logger
from .types import ReminderEvent
from . import config

BannerRenderer = Callable[[Optional[ReminderEvent]], None]


class InAppBanner:
    """The active in-app reminder and its auto-dismiss timer."""

    def __init__(self, timeout_seconds: float = config.BANNER_TIMEOUT_SECONDS):
        self.timeout_seconds = timeout_seconds
        self.active: Optional[ReminderEvent] = None
        self._renderers: list[BannerRenderer] = []
        self._dismiss_handle: Optional[asyncio.TimerHandle] = None

    def subscribe(self, renderer: BannerRenderer) -> None:
        """Register a renderer callback."""
        self._renderers.append(renderer)

    def _notify(self, event: Optional[ReminderEvent]) -> None:
        for renderer in self._renderers:
            try:
                renderer(event)
            except Exception as e:
                logger.error(f"Banner renderer failed: {e}")

    def _cancel_timer(self) -> None:
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()
            self._dismiss_handle = None

    def show(self, event: ReminderEvent) -> bool:
        """Show a reminder, replacing any active one and restarting the timer.

        Never raises; renderer failures are logged.

        Returns:
            True (the banner is the source of truth for "fired")
        """
        self._cancel_timer()
        self.active = event
        self._notify(event)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (sync caller) - stays up until dismissed manually
            logger.debug("No running event loop, banner will not auto-dismiss")
        else:
            self._dismiss_handle = loop.call_later(self.timeout_seconds, self._expire, event)

        return True

    def _expire(self, event: ReminderEvent) -> None:
        self._dismiss_handle = None
        if self.active is event:
            self.dismiss()

    def dismiss(self) -> None:
        """Hide the active reminder."""
        self._cancel_timer()
        if self.active is None:
            return
        self.active = None
        self._notify(None)

    def close(self) -> None:
        """Drop the pending dismiss timer (subsystem teardown)."""
        self._cancel_timer()
