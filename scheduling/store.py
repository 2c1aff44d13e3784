"""Queries the scheduling engine needs from the persistence layer."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from beanie import PydanticObjectId
from beanie.operators import NE
from models.appointment import Appointment, AppointmentStatus
from models.patient import Patient
from models.sequence_counter import SequenceCounter


class RegistrationStore(ABC):
    """Registrations for one doctor inside a ``[start, end)`` window."""

    @abstractmethod
    async def count_for_day(self, doctor_id: str, day_start: datetime, day_end: datetime) -> int:
        ...

    @abstractmethod
    async def max_token_for_day(
        self, doctor_id: str, day_start: datetime, day_end: datetime
    ) -> Optional[int]:
        ...


class TokenCounter(ABC):
    @abstractmethod
    async def reserve(
        self, key: str, floor: int, limit: int, expires_at: Optional[datetime] = None
    ) -> Optional[int]:
        ...


class PatientRegistrations(RegistrationStore):
    def _day_query(self, doctor_id: str, day_start: datetime, day_end: datetime):
        return Patient.find(
            Patient.doctor.id == PydanticObjectId(doctor_id),
            Patient.registration_date >= day_start,
            Patient.registration_date < day_end,
        )

    async def count_for_day(self, doctor_id, day_start, day_end):
        return await self._day_query(doctor_id, day_start, day_end).count()

    async def max_token_for_day(self, doctor_id, day_start, day_end):
        last = await (
            self._day_query(doctor_id, day_start, day_end)
            .sort(-Patient.token_number)
            .first_or_none()
        )
        return last.token_number if last else None


class AppointmentBookings(RegistrationStore):
    """Appointments still holding a place on the doctor's day.

    ``exclude_id`` leaves out an appointment being rescheduled so it does
    not count against its own new day.
    """

    def __init__(self, exclude_id: Optional[PydanticObjectId] = None):
        self.exclude_id = exclude_id

    def _day_query(self, doctor_id: str, day_start: datetime, day_end: datetime):
        filters = [
            Appointment.doctor.id == PydanticObjectId(doctor_id),
            Appointment.appointment_date >= day_start,
            Appointment.appointment_date < day_end,
            NE(Appointment.status, AppointmentStatus.CANCELLED),
        ]
        if self.exclude_id is not None:
            filters.append(NE(Appointment.id, self.exclude_id))
        return Appointment.find(*filters)

    async def count_for_day(self, doctor_id, day_start, day_end):
        return await self._day_query(doctor_id, day_start, day_end).count()

    async def max_token_for_day(self, doctor_id, day_start, day_end):
        # Appointments are not queued by token
        return None


class SequenceCounterTokens(TokenCounter):
    async def reserve(self, key, floor, limit, expires_at=None):
        return await SequenceCounter.reserve(key, floor, limit, expires_at=expires_at)
