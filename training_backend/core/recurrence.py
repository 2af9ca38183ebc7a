"""
Recurrence calculator.

Expands a recurring rule into concrete occurrence timestamps. Pure and
deterministic: safe to call for previews as often as needed.

Horizon: all frequencies share one window. Every generated occurrence
lies strictly before ``first_occurrence + horizon_weeks`` weeks.

- DAILY steps ``interval`` days from the first occurrence.
- MONTHLY steps ``interval`` months on the first occurrence's day of
  month; months without that day (e.g. the 31st in April) are skipped.
- WEEKLY anchors week 0 to the Sunday-aligned calendar week containing
  the first occurrence and visits weeks 0, interval, 2*interval, ...
  emitting each selected weekday until the horizon is reached.

The first occurrence's time of day is kept on every generated date.

Dependencies: training_backend.models.recurrence
System role: Occurrence generation for previews and instance materialization
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Iterator

from training_backend.core.clock import ensure_utc
from training_backend.core.exceptions import InvalidRecurrenceRuleError, ValidationError
from training_backend.models.recurrence import DailyRule, MonthlyRule, WeeklyRule

MAX_HORIZON_WEEKS = 52


def weekday_sunday_first(value: datetime | date) -> int:
    """Weekday number with 0=Sunday .. 6=Saturday."""
    return (value.weekday() + 1) % 7


def _daily(first: datetime, interval: int, horizon_end: datetime) -> Iterator[datetime]:
    step = timedelta(days=interval)
    candidate = first
    while candidate < horizon_end:
        yield candidate
        candidate += step


def _monthly(first: datetime, interval: int, horizon_end: datetime) -> Iterator[datetime]:
    month_index = first.year * 12 + (first.month - 1)
    while True:
        year, month = divmod(month_index, 12)
        month += 1
        if datetime(year, month, 1, tzinfo=timezone.utc) >= horizon_end:
            return
        if first.day <= calendar.monthrange(year, month)[1]:
            candidate = first.replace(year=year, month=month)
            if candidate >= horizon_end:
                return
            yield candidate
        month_index += interval


def _weekly(
    first: datetime,
    interval: int,
    days_of_week: list[int] | None,
    horizon_end: datetime,
) -> Iterator[datetime]:
    days = days_of_week or [weekday_sunday_first(first)]
    week_start = first.date() - timedelta(days=weekday_sunday_first(first))
    time_of_day = first.timetz()
    week = 0
    while True:
        for day in days:
            candidate = datetime.combine(week_start + timedelta(weeks=week, days=day), time_of_day)
            if candidate >= horizon_end:
                return
            yield candidate
        week += interval


def compute_occurrences(
    first_occurrence: datetime,
    rule: DailyRule | WeeklyRule | MonthlyRule,
    horizon_weeks: int,
    include_first: bool,
) -> list[datetime]:
    """
    Compute the ordered occurrences of a recurring rule.

    Args:
        first_occurrence: Template start (naive values are treated as UTC)
        rule: Validated recurring rule
        horizon_weeks: Window length in weeks (1-52)
        include_first: Whether the first occurrence itself is element 0

    Returns:
        Strictly ascending list of aware UTC datetimes, bounded by the
        horizon, ``end_date`` and ``end_after_occurrences``

    Raises:
        ValidationError: If horizon_weeks is out of range
        InvalidRecurrenceRuleError: If end_date precedes the first occurrence
    """
    if not 1 <= horizon_weeks <= MAX_HORIZON_WEEKS:
        raise ValidationError(
            f"Horizon must be between 1 and {MAX_HORIZON_WEEKS} weeks",
            field="weeks",
            details={"weeks": horizon_weeks},
        )

    first = ensure_utc(first_occurrence)
    if rule.end_date is not None and rule.end_date < first.date():
        raise InvalidRecurrenceRuleError(
            "Recurring rule ends before the first occurrence",
            details={"end_date": rule.end_date.isoformat(), "first_occurrence": first.isoformat()},
        )

    horizon_end = first + timedelta(weeks=horizon_weeks)
    if isinstance(rule, DailyRule):
        candidates = _daily(first, rule.interval, horizon_end)
    elif isinstance(rule, MonthlyRule):
        candidates = _monthly(first, rule.interval, horizon_end)
    else:
        candidates = _weekly(first, rule.interval, rule.days_of_week, horizon_end)

    limit = rule.end_after_occurrences
    occurrences: list[datetime] = [first] if include_first else []
    for candidate in candidates:
        if limit is not None and len(occurrences) >= limit:
            break
        if candidate <= first:
            continue
        if rule.end_date is not None and candidate.date() > rule.end_date:
            break
        occurrences.append(candidate)

    return occurrences


def to_iso(value: datetime) -> str:
    """Render a timestamp as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    value = ensure_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
