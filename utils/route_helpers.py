from fastapi import HTTPException
from beanie import PydanticObjectId
from bson import ObjectId
from typing import Optional
from datetime import date, datetime
from models.user import User, UserRole
from scheduling.decisions import Decision, RejectionReason
from scheduling.visit_time import InvalidVisitTime, parse_visit_date
from schemas.registration import RejectionDetail


def parse_object_id(value: str, label: str = "ID") -> PydanticObjectId:
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=400, detail=f"Invalid {label} format")
    return PydanticObjectId(value)


def parse_day(value: Optional[str]) -> date:
    """Date from a query parameter, defaulting to today."""
    if not value:
        return datetime.now().date()
    try:
        return parse_visit_date(value)
    except InvalidVisitTime as e:
        raise HTTPException(status_code=400, detail=str(e))


async def find_doctor(doctor_id: str) -> Optional[User]:
    if not ObjectId.is_valid(doctor_id):
        return None
    return await User.find_one(
        User.id == PydanticObjectId(doctor_id), User.role == UserRole.DOCTOR
    )


async def get_doctor_or_404(doctor_id: str) -> User:
    doctor = await User.find_one(
        User.id == parse_object_id(doctor_id, "doctor ID"), User.role == UserRole.DOCTOR
    )
    if doctor is None:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return doctor


def rejection_exception(decision: Decision) -> HTTPException:
    status_code = 404 if decision.reason == RejectionReason.DOCTOR_NOT_FOUND else 400
    return HTTPException(
        status_code=status_code,
        detail=RejectionDetail.from_decision(decision).model_dump(),
    )
