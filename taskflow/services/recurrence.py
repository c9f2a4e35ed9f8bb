"""
Validation of recurrence input and derivation of a schedule descriptor.

Validation never raises: it returns a mapping of form error keys to messages,
empty when the input is acceptable. Only stored rules are produced from a
valid recurrence; occurrences are not expanded.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from ..core.errors import ValidationError
from ..core.timeutils import today as current_date
from ..schemas.recurrence import (
    DayOfWeek,
    Frequency,
    MonthlyPolicy,
    RecurrenceSpec,
    RecurrenceValidation,
    ScheduleDescriptor,
    WeekOfMonth,
)

MIN_INTERVAL = 1
MAX_INTERVAL = 365

_INVALID = object()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_date(value: Any) -> date | None | object:
    """``None`` for blank input, ``_INVALID`` for garbage, else the date."""
    if _is_blank(value):
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return _INVALID


def parse_int(value: Any) -> int | None | object:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        return _INVALID
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return _INVALID


def _enum(enum_cls, value: Any):
    if _is_blank(value):
        return None
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        return _INVALID


def validate_recurrence(spec: RecurrenceSpec, today: date | None = None) -> dict[str, str]:
    today = today or current_date()
    errors: dict[str, str] = {}

    start = parse_date(spec.start_date)
    end = parse_date(spec.end_date)

    if start is None:
        errors["recurrenceStartDate"] = "Start date is required for recurring tasks"
    elif start is _INVALID:
        errors["recurrenceStartDate"] = "Start date is not a valid date"
    elif start < today:
        errors["recurrenceStartDate"] = "Start date cannot be in the past"

    if end is _INVALID:
        errors["recurrenceEndDate"] = "End date is not a valid date"
    elif end is not None and isinstance(start, date) and end <= start:
        errors["recurrenceEndDate"] = "End date must be after start date"

    interval = parse_int(spec.interval)
    if not isinstance(interval, int) or not MIN_INTERVAL <= interval <= MAX_INTERVAL:
        errors["recurrenceInterval"] = f"Interval must be between {MIN_INTERVAL} and {MAX_INTERVAL}"

    frequency = _enum(Frequency, spec.frequency)
    if frequency is None or frequency is _INVALID:
        errors["recurrenceFrequency"] = "Frequency must be one of Daily, Weekly, Monthly, Yearly"

    if frequency is Frequency.WEEKLY:
        day = _enum(DayOfWeek, spec.day_of_week)
        if day is None or day is _INVALID:
            errors["recurrenceDayOfWeek"] = "Day of week is required for weekly recurrence"

    if frequency is Frequency.MONTHLY:
        day_of_month = parse_int(spec.day_of_month)
        week = _enum(WeekOfMonth, spec.week_of_month)
        if not spec.end_of_month and day_of_month is None and week is None:
            errors["recurrenceMonthly"] = "Please specify day of month, week of month, or end of month"
        if day_of_month is _INVALID or (isinstance(day_of_month, int) and not 1 <= day_of_month <= 31):
            errors["recurrenceDayOfMonth"] = "Day of month must be between 1 and 31"
        if week is _INVALID:
            errors["recurrenceWeekOfMonth"] = "Week of month must be one of First, Second, Third, Fourth, Last"

    return errors


def _every(interval: int, unit: str) -> str:
    return f"Every {unit}" if interval == 1 else f"Every {interval} {unit}s"


def derive_schedule(spec: RecurrenceSpec, today: date | None = None) -> ScheduleDescriptor:
    """
    Concrete schedule for valid recurrence input.

    Monthly schedules resolve a single policy with the precedence day of month,
    week of month, end of month. Raises ``ValidationError`` if ``spec`` is invalid.
    """
    errors = validate_recurrence(spec, today)
    if errors:
        raise ValidationError(errors)

    frequency = Frequency(spec.frequency.strip())
    interval = parse_int(spec.interval)
    start = parse_date(spec.start_date)
    end = parse_date(spec.end_date)

    descriptor: dict[str, Any] = {
        "frequency": frequency,
        "interval": interval,
        "start_date": start,
        "end_date": end,
    }

    if frequency is Frequency.DAILY:
        summary = _every(interval, "day")
    elif frequency is Frequency.WEEKLY:
        day = DayOfWeek(spec.day_of_week.strip())
        descriptor["day_of_week"] = day
        summary = f"{_every(interval, 'week')} on {day.value}"
    elif frequency is Frequency.MONTHLY:
        day_of_month = parse_int(spec.day_of_month)
        week = _enum(WeekOfMonth, spec.week_of_month)
        if day_of_month is not None:
            descriptor["monthly_policy"] = MonthlyPolicy.DAY_OF_MONTH
            descriptor["day_of_month"] = day_of_month
            summary = f"{_every(interval, 'month')} on day {day_of_month}"
        elif week is not None:
            descriptor["monthly_policy"] = MonthlyPolicy.WEEK_OF_MONTH
            descriptor["week_of_month"] = week
            summary = f"{_every(interval, 'month')} in the {week.value.lower()} week"
        else:
            descriptor["monthly_policy"] = MonthlyPolicy.END_OF_MONTH
            summary = f"{_every(interval, 'month')} on the last day"
    else:
        summary = _every(interval, "year")

    summary += f" from {start.isoformat()}"
    if end is not None:
        summary += f" until {end.isoformat()}"
    descriptor["summary"] = summary
    return ScheduleDescriptor(**descriptor)


def check_recurrence(spec: RecurrenceSpec, today: date | None = None) -> RecurrenceValidation:
    errors = validate_recurrence(spec, today)
    if errors:
        return RecurrenceValidation(valid=False, errors=errors)
    return RecurrenceValidation(valid=True, schedule=derive_schedule(spec, today))
