import pytest
from pydantic import ValidationError
from models.doctor_schedule import VisitingPeriod
from scheduling.decisions import Decision, RejectionReason
from schemas.doctor import PatientLimitUpdate
from schemas.registration import AppointmentCreate, PatientRegistration
from utils.route_helpers import rejection_exception

PATIENT = {
    "full_name": "Meera Joshi",
    "mobile_number": "9876543210",
    "address": "12 MG Road",
    "age": 42,
    "disease": "Fever",
    "doctor": "65f1c0a2b3c4d5e6f7a8b9c0",
}


def test_visiting_period_normalizes_times():
    period = VisitingPeriod(enabled=True, start="9:00", end="12:30")
    assert (period.start, period.end) == ("09:00", "12:30")
    assert VisitingPeriod(enabled=False, start="").start is None


def test_visiting_period_rejects_bad_time():
    with pytest.raises(ValidationError):
        VisitingPeriod(enabled=True, start="9am", end="12:00")


def test_registration_visit_fields_are_optional():
    registration = PatientRegistration(**PATIENT, visit_date="", visit_time="")
    assert registration.visit_date is None
    assert registration.visit_time is None


def test_registration_rejects_malformed_visit_time():
    with pytest.raises(ValidationError):
        PatientRegistration(**PATIENT, visit_date="2025-03-10", visit_time="25:99")
    with pytest.raises(ValidationError):
        PatientRegistration(**PATIENT, visit_date="tomorrow")


def test_appointment_requires_date_and_time():
    with pytest.raises(ValidationError):
        AppointmentCreate(
            patient_name="Meera Joshi",
            mobile_number="9876543210",
            appointment_date="2025-03-10",
            appointment_time="",
            doctor=PATIENT["doctor"],
        )


def test_patient_limit_bounds():
    assert PatientLimitUpdate(daily_patient_limit=100).daily_patient_limit == 100
    for value in (0, 101):
        with pytest.raises(ValidationError):
            PatientLimitUpdate(daily_patient_limit=value)


def test_limit_rejection_maps_to_bad_request():
    decision = Decision.reject(
        RejectionReason.LIMIT_REACHED,
        "Doctor Asha Rao has reached their daily patient limit of 2.",
        doctor_name="Asha Rao",
        current_count=2,
        limit=2,
    )
    exc = rejection_exception(decision)
    assert exc.status_code == 400
    assert exc.detail["reason"] == "limit-reached"
    assert exc.detail["limit_reached"] is True
    assert exc.detail["current_count"] == 2
    assert exc.detail["daily_limit"] == 2
    assert exc.detail["doctor_name"] == "Asha Rao"


def test_missing_doctor_maps_to_not_found():
    exc = rejection_exception(Decision.reject(RejectionReason.DOCTOR_NOT_FOUND, "Doctor not found"))
    assert exc.status_code == 404
    assert exc.detail["reason"] == "doctor-not-found"
    assert exc.detail["limit_reached"] is False
