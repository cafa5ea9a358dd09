"""
models/donation.py
------------------
Domain model for a single completed donation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Donation:
    """
    Represents one donation, either made directly or materialized
    from a recurring donation.

    Attributes:
        id: Database primary key (None for new records).
        user_id: Telegram user ID of the donor.
        amount: Donated amount.
        currency: ISO currency code (default: INR).
        payment_method: 'upi', 'netbanking', 'card', 'wallet', 'cash' or 'other'.
        payment_details: Method-specific details (card last 4 digits, UPI id...).
        status: Always 'completed' for now.
        campaign_id: Campaign the donation was made to, if any.
        receipt_path: Location of the generated PDF receipt.
        created_at: Timestamp when the record was created.
    """
    user_id: int
    amount: float
    payment_method: str
    currency: str = "INR"
    payment_details: dict = field(default_factory=dict)
    status: str = "completed"
    campaign_id: Optional[int] = None
    receipt_path: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def reference(self) -> str:
        """Transaction reference printed on receipts."""
        details = self.payment_details or {}
        return details.get("reference") or details.get("txn_id") or "N/A"

    def __str__(self) -> str:
        when = self.created_at.strftime("%Y-%m-%d") if self.created_at else "-"
        return f"#{self.id} {self.currency} {self.amount:.2f} | {self.payment_method} | {when}"
