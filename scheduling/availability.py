"""Decide whether a doctor can be booked on a date and at a time.

Two backward-compatible defaults apply: a weekday with no schedule entry
is bookable, and a doctor with no visiting hours can be booked at any
time on a bookable date.
"""
from datetime import date
from typing import Iterator, List, Optional
from models.doctor_schedule import PERIODS, WEEKDAYS, DoctorProfile, VisitingPeriod
from scheduling.visit_time import format_clock, minutes_since_midnight

SLOT_MINUTES = 30
TIME_TOLERANCE_MINUTES = 30


def weekday_name(day: date) -> str:
    # isoweekday(): Monday=1 .. Sunday=7, so % 7 gives Sunday=0
    return WEEKDAYS[day.isoweekday() % 7]


def is_date_available(day: Optional[date], doctor: Optional[DoctorProfile]) -> bool:
    if doctor is None or day is None:
        return True
    if doctor.weekly_schedule is None:
        return True
    return getattr(doctor.weekly_schedule, weekday_name(day)) is not False


def _period_slots(period: Optional[VisitingPeriod]) -> Iterator[str]:
    if period is None or not period.enabled or not period.start or not period.end:
        return
    current = minutes_since_midnight(period.start)
    end = minutes_since_midnight(period.end)
    while current < end:
        yield format_clock(current)
        current += SLOT_MINUTES


def list_available_slots(doctor: Optional[DoctorProfile], day: Optional[date]) -> List[str]:
    if doctor is None or not is_date_available(day, doctor):
        return []
    hours = doctor.visiting_hours
    if hours is None:
        return []

    slots: List[str] = []
    for name in PERIODS:
        slots.extend(_period_slots(getattr(hours, name)))
    # Overlapping periods may repeat a slot; duplicates are kept
    return sorted(slots)


def is_time_available(
    time: Optional[str], doctor: Optional[DoctorProfile], day: Optional[date]
) -> bool:
    if not time or doctor is None or day is None:
        return True
    if not is_date_available(day, doctor):
        return False

    slots = list_available_slots(doctor, day)
    if not slots:
        return True

    requested = minutes_since_midnight(time)
    return any(
        abs(requested - minutes_since_midnight(slot)) <= TIME_TOLERANCE_MINUTES
        for slot in slots
    )
