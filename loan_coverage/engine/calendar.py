"""Week calendar: Monday-anchored ISO weeks on the UTC calendar.

All bucketing happens on UTC calendar dates. Aware datetimes are converted to
UTC first, naive datetimes are taken to already be UTC, and plain dates are
used as-is. The current instant is always passed in by the caller.
"""

from datetime import date, datetime, timedelta, timezone

from loan_coverage.exceptions import InvalidInputError
from loan_coverage.models.enums import WeekMode
from loan_coverage.models.week import WeekBucket

ONE_WEEK = timedelta(days=7)


def to_utc_date(value: datetime | date) -> date:
    """Normalize a date or datetime to its UTC calendar date."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidInputError(f"Expected date or datetime, got {type(value).__name__}")


def to_utc_datetime(value: datetime | date) -> datetime:
    """Normalize to a naive UTC datetime, used as a sort key."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise InvalidInputError(f"Expected date or datetime, got {type(value).__name__}")


def monday_of(value: datetime | date) -> date:
    """Monday of the ISO week containing ``value``."""
    day = to_utc_date(value)
    return day - timedelta(days=day.weekday())


def week_of(value: datetime | date, anchor: datetime | date | None = None) -> WeekBucket:
    """Return the Monday-to-Sunday week containing ``value``.

    Parameters
    ----------
    value : datetime | date
        Any instant inside the wanted week.
    anchor : datetime | date | None
        Sign date defining week 0. When omitted the bucket has index 0.

    Returns
    -------
    WeekBucket
        Week bounds and index relative to the anchor's week (negative when
        ``value`` precedes the anchor).
    """
    monday = monday_of(value)
    index = 0
    if anchor is not None:
        index = (monday - monday_of(anchor)).days // 7
    return WeekBucket(monday=monday, sunday=monday + timedelta(days=6), index=index)


def weeks_between(sign_date: datetime | date, end_date: datetime | date) -> list[WeekBucket]:
    """Enumerate weeks from the sign date's week up to ``end_date``.

    Every week whose Monday falls on or before ``end_date`` is included, so
    the last bucket may still be in progress at ``end_date``.
    """
    end = to_utc_date(end_date)
    monday = monday_of(sign_date)

    weeks: list[WeekBucket] = []
    index = 0
    while monday <= end:
        weeks.append(WeekBucket(monday=monday, sunday=monday + timedelta(days=6), index=index))
        monday += ONE_WEEK
        index += 1
    return weeks


def parse_week_mode(value: WeekMode | str) -> WeekMode:
    """Accept a ``WeekMode`` or its name in any case.

    Raises
    ------
    InvalidInputError
        If the value is not a known week mode.
    """
    if isinstance(value, WeekMode):
        return value
    if isinstance(value, str):
        try:
            return WeekMode(value.strip().lower())
        except ValueError:
            pass
    raise InvalidInputError(
        f"Unknown week mode {value!r}, expected one of {[m.value for m in WeekMode]}"
    )


def evaluation_end(now: datetime | date, week_mode: WeekMode | str = WeekMode.CURRENT) -> date:
    """Last calendar date an arrears evaluation may look at.

    ``CURRENT`` stops at the Sunday closing the previous week. ``NEXT`` stops
    at ``min(now, this week's Sunday)``, which is ``now``'s own date.
    """
    today = to_utc_date(now)
    if parse_week_mode(week_mode) == WeekMode.CURRENT:
        return monday_of(today) - timedelta(days=1)
    return min(today, week_of(today).sunday)
