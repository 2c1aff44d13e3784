from fastapi import APIRouter, HTTPException
from typing import Optional
from datetime import datetime
import logging
from models.patient import Patient
from schemas.registration import PatientRegistration, PatientStatusUpdate, RegistrationResponse
from scheduling.engine import build_engine
from scheduling.store import PatientRegistrations
from scheduling.visit_time import InvalidVisitTime, day_window, resolve_visit_time
from utils.notifications import registration_whatsapp_text, send_whatsapp
from utils.route_helpers import (
    find_doctor,
    get_doctor_or_404,
    parse_day,
    parse_object_id,
    rejection_exception,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patient")


def serialize_patient(patient: Patient) -> dict:
    data = patient.model_dump(mode="json", exclude={"doctor"})
    data["id"] = str(patient.id)
    data["doctor"] = str(patient.doctor.ref.id) if hasattr(patient.doctor, "ref") else str(patient.doctor.id)
    return data


@router.post("/register", response_model=RegistrationResponse, status_code=201)
async def register_patient(registration: PatientRegistration):
    try:
        visit_at = resolve_visit_time(registration.visit_date, registration.visit_time)
    except InvalidVisitTime as e:
        raise HTTPException(status_code=400, detail=str(e))

    doctor = await find_doctor(registration.doctor)
    engine = build_engine(PatientRegistrations())
    decision = await engine.admit(
        doctor.to_profile() if doctor else None,
        visit_at,
        visit_time=registration.visit_time,
    )
    if not decision.accepted:
        logger.info(f"Registration rejected ({decision.reason.value}): {decision.message}")
        raise rejection_exception(decision)

    patient = Patient(
        **registration.model_dump(exclude={"doctor", "visit_date", "visit_time"}),
        doctor=doctor,
        token_number=decision.token_number,
        registration_date=visit_at,
    )
    await patient.insert()
    logger.info(
        f"Patient {patient.id} registered with doctor {doctor.id}, token {decision.token_number}"
    )

    notification_sent = False
    try:
        result = send_whatsapp(patient.mobile_number, registration_whatsapp_text(patient, doctor.full_name))
        notification_sent = result.actually_sent
    except Exception as e:
        # Log the error but don't fail the registration
        logger.error(f"Failed to send registration WhatsApp message: {str(e)}")

    return RegistrationResponse(
        message=f"Patient registered successfully. Token number: {decision.token_number}",
        id=str(patient.id),
        token_number=decision.token_number,
        visit_at=visit_at,
        remaining_slots=decision.remaining_slots,
        notification_sent=notification_sent,
    )


@router.get("/today/{doctor_id}")
async def get_today_patients(doctor_id: str, date: Optional[str] = None):
    doctor = await get_doctor_or_404(doctor_id)
    day_start, day_end = day_window(datetime.combine(parse_day(date), datetime.min.time()))

    patients = (
        await Patient.find(
            Patient.doctor.id == doctor.id,
            Patient.registration_date >= day_start,
            Patient.registration_date < day_end,
        )
        .sort(Patient.token_number)
        .to_list()
    )
    return {
        "success": True,
        "count": len(patients),
        "data": [serialize_patient(patient) for patient in patients],
    }


@router.get("/")
async def get_all_patients():
    patients = await Patient.find_all().sort(-Patient.created_at).to_list()
    return {
        "success": True,
        "count": len(patients),
        "data": [serialize_patient(patient) for patient in patients],
    }


@router.put("/{id}/status")
async def update_patient_status(id: str, update: PatientStatusUpdate):
    patient = await Patient.get(parse_object_id(id, "patient ID"))
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")

    if not patient.can_move_to(update.status):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot change status from {patient.status.value} to {update.status.value}",
        )

    await patient.move_to(update.status, update.reason)
    return {"success": True, "status": patient.status}
