"""Reminder evaluator - decides which reminders are due right now.

Pure function of (now, settings, ledger snapshot, timezone); no I/O.

Rules:
- Water: elapsed-duration rule. Due when enabled and at least the configured
  interval has passed since it last fired (or it never fired). Firing resets
  the countdown, so reminders drift against clock boundaries. That is expected.
- Exercise: due when enabled, local HH:MM equals the configured time exactly,
  and it has not fired today.
- Daily tip: due when enabled, local time is exactly 09:00, and it has not
  fired today.

Exercise and tip reminders are matched to the minute and are NOT caught up:
the ticker polls every 60 seconds, so if the process is suspended through the
target minute, that reminder is skipped for the day. Known limitation, see
DESIGN.md.

Clock skew fails closed: a water marker in the future means "not elapsed", and
a date marker later than today counts as "already fired".
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Optional

from .clock import MS_PER_MINUTE, MS_PER_SECOND
from .ledger import MarkerValue
from .settings import ReminderSettings, parse_time_of_day
from .types import ReminderType, REMINDER_ORDER
from . import config


@dataclass
class Evaluation:
    """Result of one evaluation pass."""
    due: list[ReminderType] = field(default_factory=list)
    reasons: dict[ReminderType, str] = field(default_factory=dict)
    today: str = ""  # Local date (YYYY-MM-DD) the decision was made for

    def is_due(self, reminder_type: ReminderType) -> bool:
        return reminder_type in self.due


def local_datetime(now_ms: int, tz: Optional[tzinfo] = None) -> datetime:
    """Convert epoch ms to a datetime in tz (host local time when tz is None)."""
    if tz is None:
        return datetime.fromtimestamp(now_ms / MS_PER_SECOND).astimezone()
    return datetime.fromtimestamp(now_ms / MS_PER_SECOND, tz=tz)


def _water(now_ms: int, settings: ReminderSettings, last_fired: Optional[MarkerValue]) -> tuple[bool, str]:
    if not settings.water_enabled or not settings.water_interval_minutes:
        return False, "disabled"

    if last_fired is None:
        return True, "never fired"

    interval_ms = settings.water_interval_minutes * MS_PER_MINUTE
    elapsed = now_ms - int(last_fired)
    if elapsed < 0:
        return False, "last fire is in the future (clock moved back)"
    if elapsed >= interval_ms:
        return True, f"{elapsed // MS_PER_MINUTE} min since last reminder"

    remaining = -(-(interval_ms - elapsed) // MS_PER_MINUTE)
    return False, f"{remaining} min until next reminder"


def _time_of_day(
    enabled: bool,
    target: Optional[str],
    local_now: datetime,
    today: str,
    last_fired_on: Optional[MarkerValue]
) -> tuple[bool, str]:
    if not enabled:
        return False, "disabled"

    parsed = parse_time_of_day(target)
    if parsed is None:
        return False, "disabled (no valid time)"

    if last_fired_on is not None and str(last_fired_on) >= today:
        return False, "already fired today"

    if (local_now.hour, local_now.minute) != parsed:
        return False, f"waiting for {parsed[0]:02d}:{parsed[1]:02d}"

    return True, f"it is {parsed[0]:02d}:{parsed[1]:02d}"


def evaluate(
    now_ms: int,
    settings: ReminderSettings,
    ledger: dict[ReminderType, MarkerValue],
    tz: Optional[tzinfo] = None
) -> Evaluation:
    """Decide which reminder types are due.

    Args:
        now_ms: Current time in epoch ms
        settings: Current reminder settings
        ledger: Last-fired markers (see DedupLedger.snapshot)
        tz: Timezone for time-of-day rules (host local time when None)

    Returns:
        Evaluation with due types in dispatch order (water, exercise, tip)
    """
    local_now = local_datetime(now_ms, tz)
    today = local_now.strftime("%Y-%m-%d")

    decisions = {
        ReminderType.WATER: _water(now_ms, settings, ledger.get(ReminderType.WATER)),
        ReminderType.EXERCISE: _time_of_day(
            settings.exercise_enabled,
            settings.exercise_time_of_day,
            local_now,
            today,
            ledger.get(ReminderType.EXERCISE),
        ),
        ReminderType.TIP: _time_of_day(
            settings.daily_tip_enabled,
            config.DAILY_TIP_TIME,
            local_now,
            today,
            ledger.get(ReminderType.TIP),
        ),
    }

    evaluation = Evaluation(today=today)
    for reminder_type in REMINDER_ORDER:
        is_due, reason = decisions[reminder_type]
        evaluation.reasons[reminder_type] = reason
        if is_due:
            evaluation.due.append(reminder_type)

    return evaluation
