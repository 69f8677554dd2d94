"""OS-level notification sinks.

One interface, one adapter per platform, chosen at construction time:

- BrowserSink: web notifications via a web-push relay
- MobileSink: phone notifications via an ntfy-compatible push server
- NoopSink: records deliveries in memory (tests, headless runs)

Permission is whatever the platform reports at the moment of asking; sinks
never cache it. Delivery is best effort: deliver() returns False instead of
raising.
"""

import json
from typing import Optional

import httpx

from logger import logger
from utils.log_sanitizer import mask_topic, mask_url, sanitize_log
from .kv_store import KVStore
from .types import Permission
from . import config


def _parse_permission(stored: Optional[str]) -> Permission:
    """Decode a stored permission string ("granted" or '"granted"')."""
    if stored is None:
        return Permission.DEFAULT
    value = stored.strip().strip('"').lower()
    try:
        return Permission(value)
    except ValueError:
        return Permission.DEFAULT


class NotificationSink:
    """Platform notification capability."""

    name = "sink"

    def permission(self) -> Permission:
        """Current permission as reported by the platform."""
        raise NotImplementedError

    async def request_permission(self) -> Permission:
        """Ask the user/platform for permission; returns the resulting state."""
        raise NotImplementedError

    async def deliver(self, title: str, body: str) -> bool:
        """Show an OS notification. Best effort, never raises."""
        raise NotImplementedError


class NoopSink(NotificationSink):
    """Sink that only records what it would have delivered."""

    name = "noop"

    def __init__(self, permission: Permission = Permission.DEFAULT, grant_on_request: bool = True):
        self._permission = Permission(permission)
        self.grant_on_request = grant_on_request
        self.delivered: list[tuple[str, str]] = []

    def permission(self) -> Permission:
        return self._permission

    def set_permission(self, permission: Permission) -> None:
        """Simulate the user changing permission outside the app."""
        self._permission = Permission(permission)

    async def request_permission(self) -> Permission:
        if self._permission == Permission.DEFAULT:
            self._permission = Permission.GRANTED if self.grant_on_request else Permission.DENIED
        return self._permission

    async def deliver(self, title: str, body: str) -> bool:
        self.delivered.append((title, body))
        return True


class BrowserSink(NotificationSink):
    """Browser notifications through a web-push relay.

    The browser client writes its Notification.permission value to the
    key-value store; this sink reads it on every call.
    """

    name = "browser"

    def __init__(self, relay_url: Optional[str], store: KVStore):
        """Initialize browser sink.

        Args:
            relay_url: Base URL of the web-push relay (None disables delivery)
            store: Key-value store shared with the browser client
        """
        self.relay_url = relay_url.rstrip("/") if relay_url else None
        self.store = store

    def permission(self) -> Permission:
        try:
            return _parse_permission(self.store.get(config.BROWSER_PERMISSION_KEY))
        except Exception as e:
            logger.warning(f"Could not read browser notification permission: {e}")
            return Permission.DEFAULT

    async def request_permission(self) -> Permission:
        current = self.permission()
        if current != Permission.DEFAULT:
            # Browsers only prompt once; the answer sticks until changed in browser settings
            return current

        if not self.relay_url:
            logger.warning("Web push relay not configured, cannot request browser permission")
            return Permission.DENIED

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.relay_url}/permission",
                    timeout=config.SINK_TIMEOUT_SECONDS
                )
                response.raise_for_status()
                granted = _parse_permission(response.json().get("permission"))
        except Exception as e:
            error = sanitize_log(str(e), [self.relay_url])
            logger.error(f"Browser permission request failed via {mask_url(self.relay_url)}: {error}")
            return current

        try:
            self.store.set(config.BROWSER_PERMISSION_KEY, granted.value)
        except Exception as e:
            logger.warning(f"Could not record browser permission: {e}")
        return granted

    async def deliver(self, title: str, body: str) -> bool:
        if not self.relay_url:
            logger.debug("Web push relay not configured, skipping browser notification")
            return False

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.relay_url}/notify",
                    json={
                        "title": title,
                        "body": body,
                        "icon": "/favicon.ico",
                        "badge": "/favicon.ico",
                    },
                    timeout=config.SINK_TIMEOUT_SECONDS
                )
                response.raise_for_status()
                return True
        except Exception as e:
            error = sanitize_log(str(e), [self.relay_url])
            logger.error(f"Browser notification failed via {mask_url(self.relay_url)}: {error}")
            return False


class MobileSink(NotificationSink):
    """Phone notifications through an ntfy-compatible push server.

    Permission follows the mobile app's master "notifications" toggle.
    """

    name = "mobile"

    def __init__(self, server: str, topic: Optional[str], store: KVStore):
        """Initialize mobile sink.

        Args:
            server: Push server base URL (e.g. https://ntfy.sh)
            topic: Topic the phone subscribes to (None disables delivery)
            store: Key-value store holding the notifications toggle
        """
        self.server = server.rstrip("/")
        self.topic = topic
        self.store = store

    def permission(self) -> Permission:
        try:
            stored = self.store.get(config.MOBILE_NOTIFICATIONS_KEY)
        except Exception as e:
            logger.warning(f"Could not read mobile notifications toggle: {e}")
            return Permission.DEFAULT

        if stored is None:
            return Permission.DEFAULT
        try:
            enabled = json.loads(stored)
        except ValueError:
            return Permission.DEFAULT
        if enabled is True:
            return Permission.GRANTED
        if enabled is False:
            return Permission.DENIED
        return Permission.DEFAULT

    async def request_permission(self) -> Permission:
        current = self.permission()
        if current != Permission.DEFAULT:
            return current

        if not self.topic:
            logger.warning("Push topic not configured, mobile notifications unavailable")
            return Permission.DENIED

        try:
            self.store.set(config.MOBILE_NOTIFICATIONS_KEY, json.dumps(True))
        except Exception as e:
            logger.warning(f"Could not record mobile notifications toggle: {e}")
            return Permission.DEFAULT
        return Permission.GRANTED

    async def deliver(self, title: str, body: str) -> bool:
        if not self.topic:
            logger.debug("Push topic not configured, skipping mobile notification")
            return False

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.server}/{self.topic}",
                    content=body.encode("utf-8"),
                    headers={"Title": title, "Tags": "bell"},
                    timeout=config.SINK_TIMEOUT_SECONDS
                )
                response.raise_for_status()
                return True
        except Exception as e:
            error = sanitize_log(str(e), [self.topic])
            logger.error(f"Mobile notification to topic {mask_topic(self.topic)} failed: {error}")
            return False
