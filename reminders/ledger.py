"""Dedup ledger - durable "last fired" markers per reminder type.

Persisted shape (JSON under config.LEDGER_KEY):

    {"water": 1729332000000, "exercise": "2026-10-19", "dailyTip": "2026-10-19"}

Reads never raise: anything unreadable counts as "never fired", which can at
worst cause one early reminder but never blocks one. Writes update the
in-session copy before touching storage, so a failing store still keeps the
rest of the session deduplicated. Markers only move forward; a stale value is
ignored rather than rolling a marker back. Only reset() clears them.
"""

import json
import re
from datetime import date
from typing import Optional, Union

from logger import logger
from .kv_store import KVStore
from .types import ReminderType, REMINDER_ORDER
from . import config

MarkerValue = Union[int, str]

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _valid_marker(reminder_type: ReminderType, value) -> Optional[MarkerValue]:
    """Return the value if it has the right shape for this type, else None."""
    if value is None:
        return None

    if reminder_type is ReminderType.WATER:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return None
        return value

    if not isinstance(value, str) or not _DATE_RE.match(value):
        return None
    try:
        date.fromisoformat(value)
    except ValueError:
        return None
    return value


class DedupLedger:
    """Last-fired markers backed by a key-value store."""

    def __init__(self, store: KVStore):
        self.store = store
        self._entries: dict[ReminderType, MarkerValue] = {}
        self._loaded = False

    def _load(self) -> None:
        """Merge persisted markers into the session copy (once per successful read)."""
        if self._loaded:
            return

        try:
            stored = self.store.get(config.LEDGER_KEY)
        except Exception as e:
            # Leave _loaded False so the next read retries
            logger.warning(f"Failed to read reminder ledger, treating as never fired: {e}")
            return

        self._loaded = True
        if not stored:
            return

        try:
            raw = json.loads(stored)
        except (TypeError, ValueError) as e:
            logger.warning(f"Reminder ledger is corrupt, treating as never fired: {e}")
            return

        if not isinstance(raw, dict):
            logger.warning("Reminder ledger is not an object, treating as never fired")
            return

        for reminder_type in REMINDER_ORDER:
            value = _valid_marker(reminder_type, raw.get(reminder_type.ledger_key))
            if value is None:
                continue
            current = self._entries.get(reminder_type)
            if current is None or value > current:
                self._entries[reminder_type] = value

    def _persist(self) -> bool:
        """Write the session copy to storage. Returns False on failure.

        The stored record is never overwritten until it has been read, so
        markers for other types survive an earlier failed read.
        """
        if not self._loaded:
            self._load()
        if not self._loaded:
            logger.warning("Reminder ledger unreadable, keeping markers for this session only")
            return False

        payload = {t.ledger_key: v for t, v in self._entries.items()}
        try:
            self.store.set(config.LEDGER_KEY, json.dumps(payload))
            return True
        except Exception as e:
            logger.warning(f"Failed to persist reminder ledger (session state kept): {e}")
            return False

    def read(self, reminder_type: ReminderType) -> Optional[MarkerValue]:
        """Last-fired marker for a type, or None if it never fired (or can't be read)."""
        self._load()
        return self._entries.get(reminder_type)

    def snapshot(self) -> dict[ReminderType, MarkerValue]:
        """Copy of all known markers, for the evaluator."""
        self._load()
        return dict(self._entries)

    def write(self, reminder_type: ReminderType, value: MarkerValue) -> bool:
        """Record that a reminder fired.

        Args:
            reminder_type: Which reminder fired
            value: Epoch ms for water, "YYYY-MM-DD" for exercise / tip

        Returns:
            True if the marker is durably stored, False if only the session copy
            could be updated

        Raises:
            ValueError: If the value has the wrong shape for the type
        """
        if _valid_marker(reminder_type, value) is None:
            raise ValueError(f"Invalid ledger value for {reminder_type.value}: {value!r}")

        self._load()
        current = self._entries.get(reminder_type)
        if current is not None and value < current:
            logger.debug(f"Ignoring older {reminder_type.value} marker {value!r} (have {current!r})")
            return True

        self._entries[reminder_type] = value
        return self._persist()

    def reset(self, reminder_type: Optional[ReminderType] = None) -> bool:
        """Clear one marker, or all of them.

        Returns:
            True if the cleared state was persisted
        """
        self._load()
        if reminder_type is None:
            self._entries.clear()
            logger.info("Reminder ledger reset (all types)")
        else:
            self._entries.pop(reminder_type, None)
            logger.info(f"Reminder ledger reset ({reminder_type.value})")

        if not self._loaded:
            # Persisting now would merge the cleared markers back in
            logger.warning("Reminder ledger unreadable, reset applies to this session only")
            return False
        return self._persist()
