"""Type definitions for the reminder scheduler."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ReminderType(str, Enum):
    """Independently scheduled class of reminder (evaluation order = declaration order)."""
    WATER = "water"        # Interval-based
    EXERCISE = "exercise"  # Time of day, once per day
    TIP = "tip"            # Fixed 09:00, once per day

    @property
    def ledger_key(self) -> str:
        """Key used in the persisted ledger map."""
        return "dailyTip" if self is ReminderType.TIP else self.value

    @classmethod
    def parse(cls, value: str) -> "ReminderType":
        """Parse a reminder type name, accepting the ledger spelling of the tip type."""
        normalized = (value or "").strip()
        if normalized in ("dailyTip", "daily_tip"):
            return cls.TIP
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown reminder type: {value!r}") from None


# Fixed dispatch order when several types are due in one tick
REMINDER_ORDER = (ReminderType.WATER, ReminderType.EXERCISE, ReminderType.TIP)


class Permission(str, Enum):
    """OS notification permission as reported by a sink."""
    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"  # User has not been asked yet


@dataclass(frozen=True)
class ReminderEvent:
    """A reminder surfaced to the user (emitted, never persisted)."""
    type: ReminderType
    message: str
    fired_at: int  # epoch ms
    title: str = ""

    def to_dict(self) -> dict:
        """Emitted event contract consumed by banner renderers."""
        return {
            "type": self.type.value,
            "message": self.message,
            "firedAt": self.fired_at,
        }


@dataclass
class DispatchResult:
    """Outcome of delivering one reminder."""
    event: ReminderEvent
    banner_shown: bool = False
    os_attempted: bool = False
    os_delivered: bool = False
    ledger_written: Optional[bool] = None  # None = ledger not touched (manual trigger)
    warnings: list[str] = field(default_factory=list)
