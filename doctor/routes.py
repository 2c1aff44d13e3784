from fastapi import APIRouter, HTTPException
from typing import List, Optional
from datetime import datetime
import logging
from models.user import User, UserRole
from schemas.doctor import (
    AvailabilityUpdate,
    DoctorResponse,
    DoctorSlots,
    DoctorStats,
    PatientLimitUpdate,
    ScheduleUpdate,
)
from scheduling.availability import is_date_available, list_available_slots, weekday_name
from scheduling.capacity import check_capacity
from scheduling.store import PatientRegistrations
from scheduling.visit_time import day_window
from utils.route_helpers import get_doctor_or_404, parse_day

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/doctor")


@router.get("/", response_model=List[DoctorResponse])
async def get_all_doctors():
    doctors = (
        await User.find(User.role == UserRole.DOCTOR, User.is_active == True)  # noqa: E712
        .sort(User.full_name)
        .to_list()
    )
    return [DoctorResponse.model_validate(doctor) for doctor in doctors]


@router.get("/{id}", response_model=DoctorResponse)
async def get_doctor_profile(id: str):
    doctor = await get_doctor_or_404(id)
    return DoctorResponse.model_validate(doctor)


@router.put("/{id}/patient-limit", response_model=DoctorResponse)
async def set_patient_limit(id: str, update: PatientLimitUpdate):
    doctor = await get_doctor_or_404(id)
    doctor.daily_patient_limit = update.daily_patient_limit
    doctor.last_limit_reset_date = datetime.utcnow()
    doctor.updated_at = datetime.utcnow()
    await doctor.save()
    logger.info(f"Daily patient limit for doctor {id} set to {update.daily_patient_limit}")
    return DoctorResponse.model_validate(doctor)


@router.put("/{id}/availability", response_model=DoctorResponse)
async def set_availability(id: str, update: AvailabilityUpdate):
    doctor = await get_doctor_or_404(id)
    doctor.is_available = update.is_available
    # A reason only makes sense while the doctor is away
    doctor.unavailable_reason = None if update.is_available else update.unavailable_reason
    doctor.updated_at = datetime.utcnow()
    await doctor.save()
    logger.info(f"Doctor {id} availability set to {update.is_available}")
    return DoctorResponse.model_validate(doctor)


@router.put("/{id}/schedule", response_model=DoctorResponse)
async def set_schedule(id: str, update: ScheduleUpdate):
    if update.weekly_schedule is None and update.visiting_hours is None:
        raise HTTPException(status_code=400, detail="Nothing to update")

    doctor = await get_doctor_or_404(id)
    if update.weekly_schedule is not None:
        doctor.weekly_schedule = update.weekly_schedule
    if update.visiting_hours is not None:
        doctor.visiting_hours = update.visiting_hours
    doctor.updated_at = datetime.utcnow()
    await doctor.save()
    return DoctorResponse.model_validate(doctor)


@router.get("/{id}/stats", response_model=DoctorStats)
async def get_doctor_stats(id: str, date: Optional[str] = None):
    doctor = await get_doctor_or_404(id)
    day = parse_day(date)
    day_start, day_end = day_window(datetime.combine(day, datetime.min.time()))

    capacity = await check_capacity(PatientRegistrations(), doctor.to_profile(), day_start, day_end)
    return DoctorStats(
        doctor_id=str(doctor.id),
        full_name=doctor.full_name,
        specialization=doctor.specialization,
        date=day,
        daily_patient_limit=capacity.limit,
        patient_count=capacity.current_count,
        remaining_slots=capacity.remaining,
        is_limit_reached=not capacity.accepted,
    )


@router.get("/{id}/slots", response_model=DoctorSlots)
async def get_doctor_slots(id: str, date: Optional[str] = None):
    doctor = await get_doctor_or_404(id)
    day = parse_day(date)
    profile = doctor.to_profile()

    date_available = is_date_available(day, profile)
    slots = list_available_slots(profile, day)
    return DoctorSlots(
        doctor_id=str(doctor.id),
        date=day,
        weekday=weekday_name(day),
        is_date_available=date_available,
        slots=slots,
        unrestricted=date_available and not slots,
    )
