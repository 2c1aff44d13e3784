from datetime import date, timedelta
from models.doctor_schedule import VisitingHours, VisitingPeriod, WeeklySchedule
from scheduling.availability import (
    is_date_available,
    is_time_available,
    list_available_slots,
    weekday_name,
)

# 2025-03-09 is a Sunday
SUNDAY = date(2025, 3, 9)
MONDAY = date(2025, 3, 10)


def week_from(start):
    return [start + timedelta(days=offset) for offset in range(7)]


def morning_only(start, end):
    return VisitingHours(morning=VisitingPeriod(enabled=True, start=start, end=end))


def test_weekday_names_start_on_sunday():
    assert [weekday_name(day) for day in week_from(SUNDAY)] == [
        "sunday",
        "monday",
        "tuesday",
        "wednesday",
        "thursday",
        "friday",
        "saturday",
    ]


def test_doctor_without_schedule_is_available_every_day(make_doctor):
    doctor = make_doctor()
    for week in range(4):
        for day in week_from(SUNDAY + timedelta(weeks=week)):
            assert is_date_available(day, doctor)


def test_missing_inputs_are_available(make_doctor):
    assert is_date_available(None, make_doctor())
    assert is_date_available(MONDAY, None)
    assert is_time_available(None, make_doctor(), MONDAY)
    assert is_time_available("09:00", None, MONDAY)
    assert is_time_available("09:00", make_doctor(), None)


def test_monday_off_blocks_only_mondays(make_doctor):
    doctor = make_doctor(weekly_schedule=WeeklySchedule(monday=False, tuesday=True))
    for week in range(3):
        for day in week_from(SUNDAY + timedelta(weeks=week)):
            assert is_date_available(day, doctor) == (day.weekday() != 0)


def test_slots_are_end_exclusive_half_hours(make_doctor):
    doctor = make_doctor(visiting_hours=morning_only("09:00", "10:00"))
    assert list_available_slots(doctor, MONDAY) == ["09:00", "09:30"]


def test_slots_roll_minutes_into_hours(make_doctor):
    doctor = make_doctor(visiting_hours=morning_only("10:30", "12:15"))
    assert list_available_slots(doctor, MONDAY) == ["10:30", "11:00", "11:30", "12:00"]


def test_slots_merge_periods_in_order(make_doctor):
    hours = VisitingHours(
        evening=VisitingPeriod(enabled=True, start="18:00", end="19:00"),
        morning=VisitingPeriod(enabled=True, start="09:00", end="10:00"),
        afternoon=VisitingPeriod(enabled=False, start="14:00", end="16:00"),
    )
    doctor = make_doctor(visiting_hours=hours)
    assert list_available_slots(doctor, MONDAY) == ["09:00", "09:30", "18:00", "18:30"]


def test_overlapping_periods_keep_duplicates(make_doctor):
    hours = VisitingHours(
        morning=VisitingPeriod(enabled=True, start="09:00", end="10:00"),
        afternoon=VisitingPeriod(enabled=True, start="09:30", end="10:30"),
    )
    doctor = make_doctor(visiting_hours=hours)
    assert list_available_slots(doctor, MONDAY) == ["09:00", "09:30", "09:30", "10:00"]


def test_period_without_end_yields_nothing(make_doctor):
    hours = VisitingHours(morning=VisitingPeriod(enabled=True, start="09:00"))
    assert list_available_slots(make_doctor(visiting_hours=hours), MONDAY) == []


def test_no_slots_on_unavailable_date(make_doctor):
    doctor = make_doctor(
        weekly_schedule=WeeklySchedule(monday=False),
        visiting_hours=morning_only("09:00", "10:00"),
    )
    assert list_available_slots(doctor, MONDAY) == []
    assert not is_time_available("09:00", doctor, MONDAY)


def test_no_visiting_hours_means_any_time(make_doctor):
    doctor = make_doctor()
    for clock in ("00:00", "06:45", "13:10", "23:59"):
        assert is_time_available(clock, doctor, MONDAY)


def test_time_tolerance_is_thirty_minutes_inclusive(make_doctor):
    doctor = make_doctor(visiting_hours=morning_only("09:00", "09:30"))
    assert list_available_slots(doctor, MONDAY) == ["09:00"]

    assert is_time_available("09:25", doctor, MONDAY)
    assert is_time_available("09:30", doctor, MONDAY)
    assert is_time_available("08:30", doctor, MONDAY)
    assert not is_time_available("09:31", doctor, MONDAY)
    assert not is_time_available("08:29", doctor, MONDAY)
    assert not is_time_available("10:00", doctor, MONDAY)


def test_adjacent_slots_overlap_acceptance(make_doctor):
    doctor = make_doctor(visiting_hours=morning_only("09:00", "10:00"))
    # 10:00 is 30 minutes from the 09:30 slot
    assert is_time_available("10:00", doctor, MONDAY)
    assert not is_time_available("10:01", doctor, MONDAY)


def test_resolver_is_pure(make_doctor):
    doctor = make_doctor(
        weekly_schedule=WeeklySchedule(sunday=False),
        visiting_hours=morning_only("09:00", "11:00"),
    )
    first = list_available_slots(doctor, MONDAY)
    assert list_available_slots(doctor, MONDAY) == first
    assert [is_date_available(SUNDAY, doctor) for _ in range(3)] == [False] * 3
    assert [is_time_available("10:15", doctor, MONDAY) for _ in range(3)] == [True] * 3
