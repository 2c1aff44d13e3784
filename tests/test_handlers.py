"""Route handlers called directly against an in-memory MongoDB."""
import asyncio
from datetime import datetime
import pytest
from beanie import Link
from bson import DBRef, ObjectId
from fastapi import HTTPException
from conftest import init_test_database
from appointment import routes as appointment_routes
from models.appointment import Appointment, AppointmentStatus
from models.doctor_schedule import VisitingHours, VisitingPeriod
from models.patient import Patient
from models.user import User, UserRole
from patient import routes as patient_routes
from scheduling.engine import SchedulingEngine
from scheduling.store import AppointmentBookings, RegistrationStore
from schemas.registration import AppointmentReschedule, PatientRegistration
from utils.notifications import NotificationResult


class StoredPatients(RegistrationStore):
    """Reads back inserted patients, matching the doctor outside the query."""

    async def _day(self, doctor_id, day_start, day_end):
        patients = await Patient.find(
            Patient.registration_date >= day_start, Patient.registration_date < day_end
        ).to_list()
        return [p for p in patients if str(p.doctor.ref.id) == doctor_id]

    async def count_for_day(self, doctor_id, day_start, day_end):
        return len(await self._day(doctor_id, day_start, day_end))

    async def max_token_for_day(self, doctor_id, day_start, day_end):
        tokens = [p.token_number for p in await self._day(doctor_id, day_start, day_end)]
        return max(tokens) if tokens else None


def not_sent(*args, **kwargs):
    return NotificationResult(success=True, provider="mock", actually_sent=False)


async def add_doctor(**overrides) -> User:
    values = {
        "full_name": "Asha Rao",
        "email": "asha@example.com",
        "role": UserRole.DOCTOR,
        "specialization": "Cardiology",
    }
    values.update(overrides)
    doctor = User(**values)
    await doctor.insert()
    return doctor


def registration(doctor: User, visit_date: str = "2025-03-10") -> PatientRegistration:
    return PatientRegistration(
        full_name="Meera Joshi",
        mobile_number="9876543210",
        address="12 MG Road",
        age=42,
        disease="Fever",
        doctor=str(doctor.id),
        visit_date=visit_date,
    )


@pytest.fixture
def patient_handler(monkeypatch):
    monkeypatch.setattr(
        patient_routes, "build_engine", lambda registrations: SchedulingEngine(StoredPatients())
    )
    monkeypatch.setattr(patient_routes, "send_whatsapp", not_sent)


def test_register_numbers_patients_and_stops_at_limit(patient_handler):
    async def register_day():
        await init_test_database()
        doctor = await add_doctor(daily_patient_limit=2)
        first = await patient_routes.register_patient(registration(doctor))
        second = await patient_routes.register_patient(registration(doctor))
        with pytest.raises(HTTPException) as rejected:
            await patient_routes.register_patient(registration(doctor))
        next_day = await patient_routes.register_patient(registration(doctor, "2025-03-11"))
        stored = await Patient.find_all().to_list()
        return first, second, rejected.value, next_day, stored

    first, second, rejected, next_day, stored = asyncio.run(register_day())
    assert (first.token_number, first.remaining_slots) == (1, 1)
    assert (second.token_number, second.remaining_slots) == (2, 0)
    assert rejected.status_code == 400
    assert rejected.detail["reason"] == "limit-reached"
    assert rejected.detail["current_count"] == 2
    assert next_day.token_number == 1
    assert sorted((p.registration_date, p.token_number) for p in stored) == [
        (datetime(2025, 3, 10, 9, 0), 1),
        (datetime(2025, 3, 10, 9, 0), 2),
        (datetime(2025, 3, 11, 9, 0), 1),
    ]


def test_register_unknown_doctor_is_not_found(patient_handler):
    async def register_missing():
        await init_test_database()
        missing = User(id=ObjectId(), full_name="Gone", email="gone@example.com")
        with pytest.raises(HTTPException) as rejected:
            await patient_routes.register_patient(registration(missing))
        return rejected.value, await Patient.count()

    rejected, stored = asyncio.run(register_missing())
    assert rejected.status_code == 404
    assert rejected.detail["reason"] == "doctor-not-found"
    assert stored == 0


@pytest.fixture
def appointment_handler(monkeypatch, registrations):
    stores = []

    def build_engine(bookings):
        stores.append(bookings)
        return SchedulingEngine(registrations)

    monkeypatch.setattr(appointment_routes, "build_engine", build_engine)
    monkeypatch.setattr(appointment_routes, "send_sms", not_sent)
    return stores


def use_appointment(monkeypatch, appointment):
    async def get_appointment_or_404(id):
        return appointment

    monkeypatch.setattr(appointment_routes, "get_appointment_or_404", get_appointment_or_404)


def test_reschedule_checks_hours_and_resets_confirmation(monkeypatch, appointment_handler):
    async def reschedule():
        await init_test_database()
        doctor = await add_doctor(
            visiting_hours=VisitingHours(
                morning=VisitingPeriod(enabled=True, start="09:00", end="12:00")
            )
        )
        appointment = Appointment(
            patient_name="Ravi Kumar",
            mobile_number="9876543210",
            appointment_date=datetime(2025, 3, 10, 9, 30),
            appointment_time="09:30",
            doctor=doctor,
            status=AppointmentStatus.CONFIRMED,
        )
        await appointment.insert()
        use_appointment(monkeypatch, appointment)

        with pytest.raises(HTTPException) as rejected:
            await appointment_routes.reschedule_appointment(
                str(appointment.id),
                AppointmentReschedule(appointment_date="2025-03-11", appointment_time="15:00"),
            )
        moved = await appointment_routes.reschedule_appointment(
            str(appointment.id),
            AppointmentReschedule(appointment_date="2025-03-11", appointment_time="10:00"),
        )
        return appointment.id, rejected.value, moved, await Appointment.get(appointment.id)

    appointment_id, rejected, moved, saved = asyncio.run(reschedule())
    assert rejected.status_code == 400
    assert rejected.detail["reason"] == "time-unavailable"
    assert "09:00" in rejected.detail["available_slots"]
    assert moved["data"]["appointment_time"] == "10:00"
    assert saved.appointment_date == datetime(2025, 3, 11, 10, 0)
    assert saved.status == AppointmentStatus.SCHEDULED
    assert len(appointment_handler) == 2
    assert all(isinstance(store, AppointmentBookings) for store in appointment_handler)
    assert all(store.exclude_id == appointment_id for store in appointment_handler)


def test_reschedule_with_missing_doctor_is_not_found(monkeypatch, appointment_handler):
    async def reschedule():
        await init_test_database()
        # fetch_links leaves a bare Link when the doctor document is gone
        appointment = Appointment(
            id=ObjectId(),
            patient_name="Ravi Kumar",
            mobile_number="9876543210",
            appointment_date=datetime(2025, 3, 10, 9, 30),
            appointment_time="09:30",
            doctor=Link(DBRef("users", ObjectId()), User),
        )
        use_appointment(monkeypatch, appointment)
        with pytest.raises(HTTPException) as rejected:
            await appointment_routes.reschedule_appointment(
                str(appointment.id),
                AppointmentReschedule(appointment_date="2025-03-11", appointment_time="10:00"),
            )
        return rejected.value

    rejected = asyncio.run(reschedule())
    assert rejected.status_code == 404
    assert rejected.detail["reason"] == "doctor-not-found"
