from datetime import datetime, timedelta
from typing import Optional
from models.doctor_schedule import DoctorProfile
from scheduling.store import RegistrationStore, TokenCounter

# A day's counter outlives the day by this much before MongoDB drops it
COUNTER_RETENTION = timedelta(days=1)


def counter_key(doctor_id: str, day_start: datetime) -> str:
    return f"token:{doctor_id}:{day_start:%Y-%m-%d}"


class TokenAllocator:
    """Hands out the next queue token for a doctor's day.

    Without a counter the token is the day's highest token plus one, read
    right before the insert. Two concurrent registrations can read the
    same maximum and share a token. With a counter the token is reserved
    by one conditional increment per (doctor, day), which also refuses
    tokens beyond the daily limit.
    """

    def __init__(self, registrations: RegistrationStore, counter: Optional[TokenCounter] = None):
        self.registrations = registrations
        self.counter = counter

    async def next_token(
        self, doctor: DoctorProfile, day_start: datetime, day_end: datetime
    ) -> Optional[int]:
        last_token = await self.registrations.max_token_for_day(doctor.id, day_start, day_end)
        if self.counter is None:
            return (last_token or 0) + 1

        return await self.counter.reserve(
            counter_key(doctor.id, day_start),
            floor=last_token or 0,
            limit=doctor.daily_patient_limit,
            expires_at=day_end + COUNTER_RETENTION,
        )
