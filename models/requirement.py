"""
models/requirement.py
---------------------
Planned needs the NGO publishes before they become campaigns, and messages
donors send to the NGO team.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass
class Requirement:
    """
    Something the NGO expects to fund, with a rough budget and time frame.

    Attributes:
        id: Database primary key (None for new records).
        title: Short name of the need.
        description: Free-text details.
        budget_amount: Estimated cost.
        tentative_start: Optional planned start day.
        tentative_end: Optional planned end day.
        created_by: Telegram ID of the admin who added it.
        created_at: Timestamp when the record was created.
        updated_at: Timestamp of the last edit.
    """
    title: str
    budget_amount: float
    description: str = ""
    tentative_start: Optional[date] = None
    tentative_end: Optional[date] = None
    created_by: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __str__(self) -> str:
        window = ""
        if self.tentative_start or self.tentative_end:
            window = f" ({self.tentative_start or '?'} to {self.tentative_end or '?'})"
        return f"#{self.id} {self.title}: budget {self.budget_amount:,.2f}{window}"


@dataclass
class ContactMessage:
    """A message a donor sent to the NGO admins with /contact."""
    user_id: int
    subject: str
    message: str
    name: str = ""
    email: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __str__(self) -> str:
        return f"#{self.id} {self.name or self.user_id}: {self.subject}"
