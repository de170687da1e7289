"""Date helpers shared by the batch jobs."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite round-trips) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def utc_now() -> datetime:
    return datetime.now(UTC)


def week_start(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def start_of_day(day: date) -> datetime:
    """Midnight UTC at the start of day."""
    return datetime.combine(day, datetime.min.time()).replace(tzinfo=UTC)


def resolve_run_clock(queue_date: date | None, now: datetime | None) -> tuple[date, datetime]:
    """Pick one clock for a queue run.

    An explicit now wins. With only queue_date, now is the end of that day in
    UTC, so backfilled and forward-dated runs measure every window from the
    queue date. With neither, both come from the wall clock.
    """
    if now is not None:
        now = as_utc(now)
        return (queue_date or now.date()), now
    if queue_date is not None:
        return queue_date, start_of_day(queue_date + timedelta(days=1))
    now = utc_now()
    return now.date(), now
