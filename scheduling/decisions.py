from pydantic import BaseModel, Field
from typing import List, Optional
from enum import Enum
from datetime import datetime


class RejectionReason(str, Enum):
    DOCTOR_NOT_FOUND = "doctor-not-found"
    DOCTOR_UNAVAILABLE = "doctor-unavailable"
    DATE_UNAVAILABLE = "date-unavailable"
    TIME_UNAVAILABLE = "time-unavailable"
    LIMIT_REACHED = "limit-reached"


class Decision(BaseModel):
    """Outcome of a registration request.

    Rejections are ordinary values; every rejection names the constraint
    that failed and carries the numbers needed to explain it to staff.
    """

    accepted: bool
    reason: Optional[RejectionReason] = None
    message: str = ""
    doctor_id: Optional[str] = None
    doctor_name: Optional[str] = None
    unavailable_reason: Optional[str] = None
    visit_at: Optional[datetime] = None
    token_number: Optional[int] = None
    current_count: Optional[int] = None
    limit: Optional[int] = None
    remaining_slots: Optional[int] = None
    available_slots: List[str] = Field(default_factory=list)

    @classmethod
    def reject(cls, reason: RejectionReason, message: str, **context) -> "Decision":
        return cls(accepted=False, reason=reason, message=message, **context)

    @property
    def limit_reached(self) -> bool:
        return self.reason == RejectionReason.LIMIT_REACHED
