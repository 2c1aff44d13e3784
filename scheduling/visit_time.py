"""Turn caller supplied visit date/time strings into concrete timestamps.

All values are naive local wall-clock datetimes, the same clock the
registration records are stored with.
"""
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

DEFAULT_VISIT_TIME = time(9, 0)

_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


class InvalidVisitTime(ValueError):
    """Raised when a visit date or time string cannot be parsed."""


def parse_clock(value: str) -> time:
    match = _CLOCK_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidVisitTime(f"Invalid time '{value}', expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidVisitTime(f"Invalid time '{value}', expected HH:MM")
    return time(hour, minute)


def minutes_since_midnight(value: str) -> int:
    clock = parse_clock(value)
    return clock.hour * 60 + clock.minute


def format_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_clock(value: str) -> str:
    return format_clock(minutes_since_midnight(value))


def parse_visit_date(value: str) -> date:
    # Frontends sometimes send a full ISO timestamp; only the date part counts
    raw = value.strip().split("T")[0] if isinstance(value, str) else ""
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidVisitTime(f"Invalid date '{value}', expected YYYY-MM-DD") from None


def resolve_visit_time(
    visit_date: Optional[str] = None,
    visit_time: Optional[str] = None,
    now: Optional[datetime] = None,
) -> datetime:
    """Resolve the timestamp a registration is stored and counted under.

    A supplied date replaces today's date, a supplied time is applied to
    that base date, a date without a time means 09:00, and with neither
    the current moment is used unchanged. Malformed input raises
    ``InvalidVisitTime`` instead of silently falling back to "now".
    """
    now = now or datetime.now()
    if not visit_date and not visit_time:
        return now

    base_date = parse_visit_date(visit_date) if visit_date else now.date()
    clock = parse_clock(visit_time) if visit_time else DEFAULT_VISIT_TIME
    return datetime.combine(base_date, clock)


def day_window(moment: datetime) -> Tuple[datetime, datetime]:
    start = datetime.combine(moment.date(), time.min)
    return start, start + timedelta(days=1)
