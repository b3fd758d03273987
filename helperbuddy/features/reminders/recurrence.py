"""Next-occurrence calculation for repeating reminders.

Patterns are simple calendar steps (daily, weekly, monthly, yearly) computed
with python-dateutil's relativedelta in the deployment's civil timezone, so
a 09:00 reminder stays at 09:00 local time.

Month-end rule: when the target month is shorter, the day is clamped to the
last day of that month. It is never rolled into the following month:

    2024-01-31 monthly -> 2024-02-29
    2024-02-29 yearly  -> 2025-02-28
    2024-03-31 monthly -> 2024-04-30
"""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from enum import Enum

from dateutil.relativedelta import relativedelta


class RecurrencePattern(str, Enum):
    """Supported recurrence patterns."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


_STEPS: dict[RecurrencePattern, relativedelta] = {
    RecurrencePattern.DAILY: relativedelta(days=1),
    RecurrencePattern.WEEKLY: relativedelta(weeks=1),
    RecurrencePattern.MONTHLY: relativedelta(months=1),
    RecurrencePattern.YEARLY: relativedelta(years=1),
}


def parse_pattern(value: RecurrencePattern | str | None) -> RecurrencePattern | None:
    """Coerce a stored or user-supplied value to a pattern.

    Returns:
        The pattern, or None for values outside the supported set.
    """
    if value is None:
        return None
    if isinstance(value, RecurrencePattern):
        return value
    try:
        return RecurrencePattern(str(value).strip().lower())
    except ValueError:
        return None


def next_occurrence(
    base: datetime,
    pattern: RecurrencePattern | str | None,
    *,
    tz: tzinfo | None = None,
) -> datetime | None:
    """Compute the instant after ``base`` for ``pattern``.

    Args:
        base: Scheduled instant of the current occurrence. Naive values are
            read as wall-clock time in ``tz``.
        pattern: Recurrence pattern.
        tz: Civil timezone for calendar arithmetic. Defaults to the zone of
            ``base`` (UTC for naive input).

    Returns:
        Timezone-aware UTC instant of the next occurrence, or None when the
        pattern is absent, ``none`` or unknown.

    Example:
        >>> next_occurrence(datetime(2024, 1, 31, 10, tzinfo=UTC), "monthly")
        datetime.datetime(2024, 2, 29, 10, 0, tzinfo=datetime.timezone.utc)
    """
    parsed = parse_pattern(pattern)
    step = _STEPS.get(parsed) if parsed is not None else None
    if step is None:
        return None

    zone = tz or base.tzinfo or UTC
    if base.tzinfo is None:
        local = base.replace(tzinfo=zone)
    else:
        local = base.astimezone(zone)

    # Step the wall clock, then re-attach the zone to pick up any DST change
    wall_clock = local.replace(tzinfo=None) + step
    return wall_clock.replace(tzinfo=zone).astimezone(UTC)


__all__ = ["RecurrencePattern", "next_occurrence", "parse_pattern"]
