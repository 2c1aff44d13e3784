import logging
from datetime import datetime
from typing import Optional
from config import settings
from models.doctor_schedule import DoctorProfile
from scheduling.availability import (
    is_date_available,
    is_time_available,
    list_available_slots,
    weekday_name,
)
from scheduling.capacity import check_capacity
from scheduling.decisions import Decision, RejectionReason
from scheduling.store import RegistrationStore, SequenceCounterTokens, TokenCounter
from scheduling.tokens import TokenAllocator
from scheduling.visit_time import day_window

logger = logging.getLogger(__name__)


class SchedulingEngine:
    def __init__(self, registrations: RegistrationStore, counter: Optional[TokenCounter] = None):
        self.registrations = registrations
        self.tokens = TokenAllocator(registrations, counter)

    async def admit(
        self,
        doctor: Optional[DoctorProfile],
        visit_at: datetime,
        visit_time: Optional[str] = None,
        issue_token: bool = True,
    ) -> Decision:
        """Check a visit request against the doctor's configuration.

        The time of day is only checked when the caller asked for one.
        Expected rejections come back as a ``Decision``; errors from the
        store propagate.
        """
        if doctor is None:
            return Decision.reject(RejectionReason.DOCTOR_NOT_FOUND, "Doctor not found")

        context = {"doctor_id": doctor.id, "doctor_name": doctor.full_name, "visit_at": visit_at}

        if not doctor.is_available:
            message = f"Dr. {doctor.full_name} is currently unavailable"
            if doctor.unavailable_reason:
                message += f": {doctor.unavailable_reason}"
            return Decision.reject(
                RejectionReason.DOCTOR_UNAVAILABLE,
                message,
                unavailable_reason=doctor.unavailable_reason,
                **context,
            )

        visit_date = visit_at.date()
        if not is_date_available(visit_date, doctor):
            return Decision.reject(
                RejectionReason.DATE_UNAVAILABLE,
                f"Dr. {doctor.full_name} does not see patients on "
                f"{weekday_name(visit_date).capitalize()}",
                **context,
            )

        if visit_time and not is_time_available(visit_time, doctor, visit_date):
            slots = list_available_slots(doctor, visit_date)
            return Decision.reject(
                RejectionReason.TIME_UNAVAILABLE,
                f"Dr. {doctor.full_name} is not available at {visit_time} on {visit_date:%Y-%m-%d}",
                available_slots=slots,
                **context,
            )

        day_start, day_end = day_window(visit_at)
        capacity = await check_capacity(self.registrations, doctor, day_start, day_end)
        if not capacity.accepted:
            return self._limit_reached(doctor, capacity.current_count, context)

        token_number = None
        if issue_token:
            token_number = await self.tokens.next_token(doctor, day_start, day_end)
            if token_number is None:
                logger.warning(
                    f"Token counter full for doctor {doctor.id} on {day_start:%Y-%m-%d}"
                )
                return self._limit_reached(
                    doctor,
                    capacity.current_count,
                    context,
                    detail="All of the day's tokens are already reserved.",
                )

        return Decision(
            accepted=True,
            message="Registration accepted",
            token_number=token_number,
            current_count=capacity.current_count,
            limit=capacity.limit,
            remaining_slots=max(capacity.limit - capacity.current_count - 1, 0),
            **context,
        )

    def _limit_reached(
        self, doctor: DoctorProfile, current_count: int, context: dict, detail: str = ""
    ) -> Decision:
        message = (
            f"Doctor {doctor.full_name} has reached their daily patient limit of "
            f"{doctor.daily_patient_limit}. "
        )
        if detail:
            message += detail + " "
        return Decision.reject(
            RejectionReason.LIMIT_REACHED,
            message + "Please select another doctor or another day.",
            current_count=current_count,
            limit=doctor.daily_patient_limit,
            remaining_slots=0,
            **context,
        )


def build_engine(registrations: RegistrationStore) -> SchedulingEngine:
    counter = SequenceCounterTokens() if settings.token_allocation == "counter" else None
    return SchedulingEngine(registrations, counter)
