"""
models/recurring.py
-------------------
Domain model for recurring donation schedules.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

ACTIVE = "active"
PAUSED = "paused"
CANCELED = "canceled"
COMPLETED = "completed"


@dataclass(frozen=True)
class RecurringDonation:
    """
    Template for a donation that repeats on a schedule.

    Records are immutable; schedule changes produce a new instance
    (see services/schedule.py) which the repository then persists.

    Attributes:
        id: Database primary key (None for new records).
        user_id: Telegram user ID of the owning donor.
        base_donation_id: The donation that started the series.
        amount: Amount of every occurrence.
        currency: ISO currency code.
        payment_method: Payment method reused for every occurrence.
        payment_details: Payment details reused for every occurrence.
        frequency: 'daily' | 'weekly' | 'monthly' | 'yearly'.
        next_run: Next occurrence; None when the series is not active.
        end_date: Optional last moment an occurrence may fall on.
        max_occurrences: Optional cap on the number of donations.
        total_occurrences: Donations already materialized (starts at 1).
        status: 'active' | 'paused' | 'canceled' | 'completed'.
        created_at: Timestamp when the record was created.
    """
    user_id: int
    amount: float
    payment_method: str
    frequency: str
    next_run: Optional[datetime]
    currency: str = "INR"
    payment_details: dict = field(default_factory=dict)
    base_donation_id: Optional[int] = None
    end_date: Optional[datetime] = None
    max_occurrences: Optional[int] = None
    total_occurrences: int = 1
    status: str = ACTIVE
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE and self.next_run is not None

    def __str__(self) -> str:
        nxt = self.next_run.strftime("%Y-%m-%d %H:%M %Z") if self.next_run else "-"
        cap = f"/{self.max_occurrences}" if self.max_occurrences else ""
        return (
            f"#{self.id} {self.currency} {self.amount:.2f} ({self.frequency}) "
            f"[{self.status}] occurrences {self.total_occurrences}{cap} - Next: {nxt}"
        )
