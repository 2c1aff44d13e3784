import pytest
from datetime import datetime
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient
from models.appointment import Appointment
from models.doctor_schedule import DoctorProfile
from models.patient import Patient
from models.sequence_counter import SequenceCounter
from models.user import User
from scheduling.store import RegistrationStore, TokenCounter


async def init_test_database():
    """Bind every document to a fresh in-memory MongoDB."""
    client = AsyncMongoMockClient()
    await init_beanie(
        database=client["opd_test"],
        document_models=[User, Patient, Appointment, SequenceCounter],
    )


class InMemoryRegistrations(RegistrationStore):
    """Registrations kept as (doctor_id, visit_at, token_number) tuples."""

    def __init__(self):
        self.records = []

    def add(self, doctor_id: str, visit_at: datetime, token_number=None):
        self.records.append((doctor_id, visit_at, token_number))

    def _in_window(self, doctor_id, day_start, day_end):
        return [
            record
            for record in self.records
            if record[0] == doctor_id and day_start <= record[1] < day_end
        ]

    async def count_for_day(self, doctor_id, day_start, day_end):
        return len(self._in_window(doctor_id, day_start, day_end))

    async def max_token_for_day(self, doctor_id, day_start, day_end):
        tokens = [r[2] for r in self._in_window(doctor_id, day_start, day_end) if r[2] is not None]
        return max(tokens) if tokens else None


class InMemoryCounter(TokenCounter):
    def __init__(self):
        self.counters = {}
        self.expiry = {}

    async def reserve(self, key, floor, limit, expires_at=None):
        self.expiry[key] = expires_at
        self.counters[key] = max(self.counters.get(key, 0), floor)
        if self.counters[key] >= limit:
            return None
        self.counters[key] += 1
        return self.counters[key]


@pytest.fixture
def registrations():
    return InMemoryRegistrations()


@pytest.fixture
def counter():
    return InMemoryCounter()


@pytest.fixture
def make_doctor():
    def _make_doctor(**overrides):
        values = {"id": "doc-1", "full_name": "Asha Rao", "daily_patient_limit": 20}
        values.update(overrides)
        return DoctorProfile(**values)

    return _make_doctor
