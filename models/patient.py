from beanie import Document, Link
from pydantic import Field
from typing import Optional
from enum import Enum
from datetime import datetime
import pymongo
from models.user import User


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class FeeStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    NOT_REQUIRED = "not_required"


class PatientStatus(str, Enum):
    WAITING = "waiting"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Allowed queue moves; completed and cancelled are final
STATUS_TRANSITIONS = {
    PatientStatus.WAITING: {PatientStatus.IN_PROGRESS, PatientStatus.CANCELLED},
    PatientStatus.IN_PROGRESS: {PatientStatus.COMPLETED, PatientStatus.CANCELLED},
    PatientStatus.COMPLETED: set(),
    PatientStatus.CANCELLED: set(),
}


class Patient(Document):
    full_name: str
    mobile_number: str
    address: str
    age: int = Field(..., ge=0, le=150)
    gender: Optional[Gender] = None
    disease: str
    blood_pressure: Optional[str] = None
    sugar_level: Optional[float] = Field(None, gt=0)
    doctor: Link[User]
    fees: float = 0
    fee_status: FeeStatus = FeeStatus.PENDING
    is_recheck: bool = False
    token_number: int
    # Resolved visit timestamp; the token/capacity day window is derived from it
    registration_date: datetime = Field(default_factory=datetime.now)
    status: PatientStatus = PatientStatus.WAITING
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    class Settings:
        name = "patients"
        indexes = [
            [("doctor.$id", pymongo.ASCENDING), ("registration_date", pymongo.DESCENDING)],
            [("token_number", pymongo.ASCENDING), ("registration_date", pymongo.ASCENDING)],
        ]

    def can_move_to(self, status: PatientStatus) -> bool:
        return status in STATUS_TRANSITIONS.get(self.status, set())

    async def move_to(self, status: PatientStatus, reason: Optional[str] = None):
        self.status = status
        if status == PatientStatus.CANCELLED:
            self.cancelled_at = datetime.now()
            self.cancellation_reason = reason
        self.updated_at = datetime.utcnow()
        await self.save()
