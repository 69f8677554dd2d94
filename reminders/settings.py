"""Read-only view of the user's reminder settings.

Settings are owned by the settings screen and stored as JSON in the key-value
store. This module never writes them. Reading follows a defaulting policy:

- Record missing entirely      -> all defaults (everything enabled)
- Key missing                  -> default for that key
- Value malformed              -> that reminder type is disabled
- Record unreadable / not JSON -> every reminder disabled
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Optional

from logger import logger
from .kv_store import KVStore
from . import config

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

# Key names written by the original web settings screen
_LEGACY_ALIASES = {
    "waterEnabled": "waterReminders",
    "waterIntervalMinutes": "waterInterval",
    "exerciseEnabled": "exerciseReminders",
    "exerciseTimeOfDay": "exerciseTime",
    "dailyTipEnabled": "dailyTipReminder",
}

_MISSING = object()


@dataclass(frozen=True)
class ReminderSettings:
    """Per-type reminder configuration."""
    water_enabled: bool = config.DEFAULT_WATER_ENABLED
    water_interval_minutes: Optional[int] = config.DEFAULT_WATER_INTERVAL_MINUTES
    exercise_enabled: bool = config.DEFAULT_EXERCISE_ENABLED
    exercise_time_of_day: Optional[str] = config.DEFAULT_EXERCISE_TIME
    daily_tip_enabled: bool = config.DEFAULT_DAILY_TIP_ENABLED

    @classmethod
    def all_disabled(cls) -> "ReminderSettings":
        return cls(
            water_enabled=False,
            water_interval_minutes=None,
            exercise_enabled=False,
            exercise_time_of_day=None,
            daily_tip_enabled=False,
        )

    def to_dict(self) -> dict:
        """Settings in the persisted JSON shape."""
        return {
            "waterEnabled": self.water_enabled,
            "waterIntervalMinutes": self.water_interval_minutes,
            "exerciseEnabled": self.exercise_enabled,
            "exerciseTimeOfDay": self.exercise_time_of_day,
            "dailyTipEnabled": self.daily_tip_enabled,
        }


def parse_time_of_day(value: Any) -> Optional[tuple[int, int]]:
    """Parse "HH:MM" into (hour, minute), or None if malformed."""
    if not isinstance(value, str):
        return None

    match = _TIME_RE.match(value.strip())
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour, minute


def _parse_interval(value: Any) -> Optional[int]:
    """Interval in minutes, must be a positive whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float) and value.is_integer():
        return int(value) if value > 0 else None
    if isinstance(value, str) and value.strip().isdecimal():
        try:
            minutes = int(value.strip())
        except ValueError:
            return None
        return minutes if minutes > 0 else None
    return None


def _lookup(raw: dict, key: str) -> Any:
    """Get a settings value by its current name or its legacy alias."""
    if key in raw:
        return raw[key]
    return raw.get(_LEGACY_ALIASES[key], _MISSING)


def _flag(raw: dict, key: str, default: bool) -> bool:
    value = _lookup(raw, key)
    if value is _MISSING:
        return default
    if not isinstance(value, bool):
        logger.warning(f"Reminder setting {key}={value!r} is not a boolean, treating as disabled")
        return False
    return value


def parse_settings(raw: Any) -> ReminderSettings:
    """Build ReminderSettings from the decoded JSON record.

    Args:
        raw: Decoded settings record (expected to be a dict)

    Returns:
        ReminderSettings with malformed reminder types disabled
    """
    if not isinstance(raw, dict):
        logger.warning(f"Reminder settings record is {type(raw).__name__}, not an object - reminders disabled")
        return ReminderSettings.all_disabled()

    water_enabled = _flag(raw, "waterEnabled", config.DEFAULT_WATER_ENABLED)
    exercise_enabled = _flag(raw, "exerciseEnabled", config.DEFAULT_EXERCISE_ENABLED)
    daily_tip_enabled = _flag(raw, "dailyTipEnabled", config.DEFAULT_DAILY_TIP_ENABLED)

    interval_raw = _lookup(raw, "waterIntervalMinutes")
    if interval_raw is _MISSING:
        interval = config.DEFAULT_WATER_INTERVAL_MINUTES
    else:
        interval = _parse_interval(interval_raw)
        if interval is None:
            logger.warning(f"Invalid water interval {interval_raw!r}, water reminders disabled")
            water_enabled = False

    time_raw = _lookup(raw, "exerciseTimeOfDay")
    if time_raw is _MISSING:
        exercise_time = config.DEFAULT_EXERCISE_TIME
    else:
        parsed = parse_time_of_day(time_raw)
        if parsed is None:
            logger.warning(f"Invalid exercise time {time_raw!r}, exercise reminders disabled")
            exercise_enabled = False
            exercise_time = None
        else:
            exercise_time = f"{parsed[0]:02d}:{parsed[1]:02d}"

    return ReminderSettings(
        water_enabled=water_enabled,
        water_interval_minutes=interval,
        exercise_enabled=exercise_enabled,
        exercise_time_of_day=exercise_time,
        daily_tip_enabled=daily_tip_enabled,
    )


def load_settings(store: KVStore) -> ReminderSettings:
    """Read the current settings from the key-value store.

    Called on every tick so edits in the settings screen apply without restart.
    Never raises.
    """
    try:
        stored = store.get(config.SETTINGS_KEY)
    except Exception as e:
        logger.error(f"Failed to read reminder settings: {e}")
        return ReminderSettings.all_disabled()

    if stored is None:
        return ReminderSettings()

    try:
        raw = json.loads(stored)
    except (TypeError, ValueError) as e:
        logger.error(f"Reminder settings are not valid JSON: {e}")
        return ReminderSettings.all_disabled()

    try:
        return parse_settings(raw)
    except Exception as e:
        logger.error(f"Failed to parse reminder settings, reminders disabled: {e}")
        return ReminderSettings.all_disabled()
