from beanie import Document, Link
from pydantic import Field
from typing import Optional
from enum import Enum
from datetime import datetime
import pymongo
from models.user import User


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Appointment(Document):
    patient_name: str
    mobile_number: str
    email: Optional[str] = None
    appointment_date: datetime = Field(...)
    appointment_time: str
    doctor: Link[User]
    reason: Optional[str] = None
    notes: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    sms_sent: bool = False
    sms_sent_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    class Settings:
        name = "appointments"
        indexes = [
            [("doctor.$id", pymongo.ASCENDING), ("appointment_date", pymongo.ASCENDING)],
            "mobile_number",
        ]

    @property
    def is_open(self) -> bool:
        return self.status in (AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED)

    async def confirm(self):
        self.status = AppointmentStatus.CONFIRMED
        self.updated_at = datetime.utcnow()
        await self.save()

    async def cancel(self):
        self.status = AppointmentStatus.CANCELLED
        self.updated_at = datetime.utcnow()
        await self.save()

    async def complete(self):
        self.status = AppointmentStatus.COMPLETED
        self.updated_at = datetime.utcnow()
        await self.save()

    async def mark_sms_sent(self):
        self.sms_sent = True
        self.sms_sent_at = datetime.utcnow()
        self.updated_at = datetime.utcnow()
        await self.save()
