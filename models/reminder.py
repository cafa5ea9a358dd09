"""
models/reminder.py
------------------
Domain model for a reminder about one upcoming occurrence.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

PENDING = "pending"
CONFIRMED = "confirmed"
CANCELED = "canceled"


@dataclass
class Reminder:
    """
    A pending question to the donor: go ahead with this occurrence or not.

    Attributes:
        id: Database primary key (None for new records).
        recurring_donation_id: The series this reminder belongs to.
        scheduled_for: The occurrence timestamp being announced.
        message: Human-readable text sent to the donor.
        status: 'pending' | 'confirmed' | 'canceled'.
        created_at: Timestamp when the record was created.
    """
    recurring_donation_id: int
    scheduled_for: datetime
    message: str = ""
    status: str = PENDING
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING

    def __str__(self) -> str:
        return f"#{self.id} [{self.status}] {self.message}"
