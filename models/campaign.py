"""
models/campaign.py
------------------
Domain models for fundraising campaigns and NGO expenditures.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass
class Campaign:
    """
    A fundraising campaign with a goal amount.

    Attributes:
        id: Database primary key (None for new records).
        title: Short campaign name.
        description: Longer explanation shown to donors.
        goal_amount: Target to raise.
        raised_amount: Sum of completed donations made to the campaign.
        start_date: First day of the campaign.
        end_date: Optional last day.
        status: 'active' | 'completed' | 'paused'.
        created_by: Telegram ID of the admin who created it.
        created_at: Timestamp when the record was created.
    """
    title: str
    description: str
    goal_amount: float
    start_date: date
    end_date: Optional[date] = None
    raised_amount: float = 0.0
    status: str = "active"
    created_by: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def progress_percentage(self) -> float:
        if self.goal_amount <= 0:
            return 0.0
        return round(min(self.raised_amount / self.goal_amount * 100, 100.0), 1)

    @property
    def remaining_amount(self) -> float:
        return max(self.goal_amount - self.raised_amount, 0.0)

    def __str__(self) -> str:
        return (
            f"#{self.id} {self.title} [{self.status}] "
            f"{self.raised_amount:.2f}/{self.goal_amount:.2f} ({self.progress_percentage:.1f}%)"
        )


@dataclass
class Expenditure:
    """Money spent by the NGO, recorded by an admin."""
    title: str
    amount: float
    spent_on: date
    description: str = ""
    added_by: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __str__(self) -> str:
        return f"#{self.id} {self.spent_on} | {self.title}: {self.amount:.2f}"
