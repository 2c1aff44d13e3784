from fastapi import APIRouter, HTTPException
from typing import Optional
from datetime import datetime
import logging
from models.appointment import Appointment, AppointmentStatus
from models.user import User
from schemas.registration import AppointmentCreate, AppointmentReschedule, RegistrationResponse
from scheduling.engine import build_engine
from scheduling.store import AppointmentBookings
from scheduling.visit_time import day_window, resolve_visit_time
from utils.notifications import appointment_sms_text, send_appointment_email, send_sms
from utils.route_helpers import find_doctor, parse_day, parse_object_id, rejection_exception

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointment")


def serialize_appointment(appointment: Appointment, doctor: Optional[User] = None) -> dict:
    data = appointment.model_dump(mode="json", exclude={"doctor"})
    data["id"] = str(appointment.id)
    if doctor is not None:
        data["doctor"] = {
            "id": str(doctor.id),
            "full_name": doctor.full_name,
            "specialization": doctor.specialization,
        }
    elif isinstance(appointment.doctor, User):
        data["doctor"] = {
            "id": str(appointment.doctor.id),
            "full_name": appointment.doctor.full_name,
            "specialization": appointment.doctor.specialization,
        }
    else:
        data["doctor"] = {"id": str(appointment.doctor.ref.id)}
    return data


async def get_appointment_or_404(id: str) -> Appointment:
    appointment = await Appointment.get(parse_object_id(id, "appointment ID"), fetch_links=True)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


def notify_by_sms(appointment: Appointment, doctor: User) -> bool:
    """Send the appointment SMS; True only when a real provider delivered it."""
    try:
        result = send_sms(
            appointment.mobile_number,
            appointment_sms_text(appointment, doctor.full_name, doctor.specialization),
        )
    except Exception as e:
        logger.error(f"Failed to send appointment SMS: {str(e)}")
        return False
    if not result.actually_sent:
        logger.warning(f"SMS was not actually sent (provider {result.provider})")
    return result.actually_sent


def notify_by_email(appointment: Appointment, doctor: User, subject: str):
    if not appointment.email:
        return
    try:
        send_appointment_email(appointment.email, subject, appointment, doctor.full_name)
    except Exception as e:
        # Log the error but don't fail the request
        logger.error(f"Failed to send appointment email: {str(e)}")


@router.post("/", response_model=RegistrationResponse, status_code=201)
async def create_appointment(request: AppointmentCreate):
    visit_at = resolve_visit_time(request.appointment_date, request.appointment_time)

    doctor = await find_doctor(request.doctor)
    engine = build_engine(AppointmentBookings())
    decision = await engine.admit(
        doctor.to_profile() if doctor else None,
        visit_at,
        visit_time=request.appointment_time,
        issue_token=False,
    )
    if not decision.accepted:
        logger.info(f"Appointment rejected ({decision.reason.value}): {decision.message}")
        raise rejection_exception(decision)

    appointment = Appointment(
        patient_name=request.patient_name,
        mobile_number=request.mobile_number,
        email=request.email,
        appointment_date=visit_at,
        appointment_time=request.appointment_time,
        doctor=doctor,
        reason=request.reason,
        notes=request.notes,
    )
    await appointment.insert()

    sms_sent = notify_by_sms(appointment, doctor)
    if sms_sent:
        await appointment.mark_sms_sent()
    notify_by_email(appointment, doctor, "Appointment Scheduled")

    message = "Appointment scheduled successfully"
    message += " and SMS sent to patient" if sms_sent else ", SMS not sent"
    return RegistrationResponse(
        message=message,
        id=str(appointment.id),
        visit_at=visit_at,
        remaining_slots=decision.remaining_slots,
        notification_sent=sms_sent,
    )


@router.get("/")
async def get_all_appointments(
    doctor: Optional[str] = None,
    status: Optional[AppointmentStatus] = None,
    date: Optional[str] = None,
):
    filters = []
    if doctor:
        filters.append(Appointment.doctor.id == parse_object_id(doctor, "doctor ID"))
    if status:
        filters.append(Appointment.status == status)
    if date:
        day_start, day_end = day_window(datetime.combine(parse_day(date), datetime.min.time()))
        filters.append(Appointment.appointment_date >= day_start)
        filters.append(Appointment.appointment_date < day_end)

    appointments = (
        await Appointment.find(*filters, fetch_links=True)
        .sort(Appointment.appointment_date, Appointment.appointment_time)
        .to_list()
    )
    return {
        "success": True,
        "count": len(appointments),
        "data": [serialize_appointment(appointment) for appointment in appointments],
    }


@router.get("/{id}")
async def get_appointment(id: str):
    appointment = await get_appointment_or_404(id)
    return {"success": True, "data": serialize_appointment(appointment)}


@router.put("/{id}/reschedule")
async def reschedule_appointment(id: str, request: AppointmentReschedule):
    appointment = await get_appointment_or_404(id)
    if not appointment.is_open:
        raise HTTPException(status_code=400, detail="Cannot reschedule this appointment")

    doctor = appointment.doctor
    # An unresolved Link means the doctor document is gone
    profile = doctor.to_profile() if isinstance(doctor, User) else None
    visit_at = resolve_visit_time(request.appointment_date, request.appointment_time)
    engine = build_engine(AppointmentBookings(exclude_id=appointment.id))
    decision = await engine.admit(
        profile, visit_at, visit_time=request.appointment_time, issue_token=False
    )
    if not decision.accepted:
        raise rejection_exception(decision)

    appointment.appointment_date = visit_at
    appointment.appointment_time = request.appointment_time
    # Requires confirmation again
    appointment.status = AppointmentStatus.SCHEDULED
    appointment.sms_sent = False
    appointment.sms_sent_at = None
    appointment.updated_at = datetime.utcnow()
    await appointment.save()

    if notify_by_sms(appointment, doctor):
        await appointment.mark_sms_sent()
    notify_by_email(appointment, doctor, "Appointment Rescheduled")

    return {"success": True, "data": serialize_appointment(appointment, doctor)}


@router.put("/{id}/confirm")
async def confirm_appointment(id: str):
    appointment = await get_appointment_or_404(id)
    if appointment.status != AppointmentStatus.SCHEDULED:
        raise HTTPException(status_code=400, detail="Appointment cannot be confirmed")

    await appointment.confirm()
    notify_by_email(appointment, appointment.doctor, "Appointment Confirmed")
    return {"success": True, "data": serialize_appointment(appointment)}


@router.put("/{id}/complete")
async def complete_appointment(id: str):
    appointment = await get_appointment_or_404(id)
    if not appointment.is_open:
        raise HTTPException(status_code=400, detail="Appointment cannot be completed")

    await appointment.complete()
    return {"success": True, "data": serialize_appointment(appointment)}


@router.put("/{id}/cancel")
async def cancel_appointment(id: str):
    appointment = await get_appointment_or_404(id)
    if not appointment.is_open:
        raise HTTPException(status_code=400, detail="Cannot cancel this appointment")

    await appointment.cancel()
    notify_by_email(appointment, appointment.doctor, "Appointment Cancelled")
    return {"success": True, "data": serialize_appointment(appointment)}


@router.post("/{id}/resend-sms")
async def resend_sms(id: str):
    appointment = await get_appointment_or_404(id)
    if not notify_by_sms(appointment, appointment.doctor):
        raise HTTPException(status_code=502, detail="SMS could not be sent")

    await appointment.mark_sms_sent()
    return {"success": True, "message": "SMS sent successfully", "data": serialize_appointment(appointment)}
