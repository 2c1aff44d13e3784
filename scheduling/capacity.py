from datetime import datetime
from pydantic import BaseModel
from models.doctor_schedule import DoctorProfile
from scheduling.store import RegistrationStore


class CapacityCheck(BaseModel):
    accepted: bool
    current_count: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.current_count, 0)


async def check_capacity(
    store: RegistrationStore,
    doctor: DoctorProfile,
    day_start: datetime,
    day_end: datetime,
) -> CapacityCheck:
    """Compare the doctor's registrations in the window with their daily limit.

    The window belongs to the intended visit day, which staff may set in
    the past or the future, not to the day the request is made.
    """
    current_count = await store.count_for_day(doctor.id, day_start, day_end)
    return CapacityCheck(
        accepted=current_count < doctor.daily_patient_limit,
        current_count=current_count,
        limit=doctor.daily_patient_limit,
    )
