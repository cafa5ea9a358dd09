"""
services/campaign_service.py
----------------------------
Fundraising campaigns and NGO expenditures.
Admin mutations are recorded in the audit trail inside the same transaction.
"""

from datetime import date
from typing import Optional

from models.campaign import Campaign, Expenditure
from repositories.store import unit_of_work
from utils.errors import InvalidInput, NotFound
from utils.logger import get_logger

logger = get_logger(__name__)

CAMPAIGN_STATUSES = ("active", "paused", "completed")


def _parse_date(value, label: str, errors: list[str]) -> Optional[date]:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        errors.append(f"{label} must be a date in YYYY-MM-DD format.")
        return None


def _parse_positive(value, label: str, errors: list[str]) -> Optional[float]:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        amount = 0
    if amount <= 0:
        errors.append(f"{label} must be greater than zero.")
        return None
    return amount


class CampaignService:
    """Creates and lists campaigns, records expenditures."""

    def __init__(self, store_factory=unit_of_work):
        self._store_factory = store_factory

    def create(self, admin_id: int, title: str, goal_amount, start_date,
               end_date=None, description: str = "") -> Campaign:
        """
        Create an active campaign.

        Raises:
            InvalidInput: With every validation message.
        """
        errors = []
        if not title or len(title.strip()) < 3:
            errors.append("Campaign title must be at least 3 characters long.")
        goal = _parse_positive(goal_amount, "Goal amount", errors)
        start = _parse_date(start_date, "Start date", errors)
        end = _parse_date(end_date, "End date", errors) if end_date else None
        if start and end and end < start:
            errors.append("End date must be on or after the start date.")
        if errors:
            raise InvalidInput(errors)

        with self._store_factory() as store:
            campaign = store.campaigns.add(Campaign(
                title=title.strip(),
                description=(description or "").strip(),
                goal_amount=goal,
                start_date=start,
                end_date=end,
                created_by=admin_id,
            ))
            store.audit.add(admin_id, "campaign_create", f"#{campaign.id} {campaign.title}")
        return campaign

    def set_status(self, admin_id: int, campaign_id: int, status: str) -> Campaign:
        if status not in CAMPAIGN_STATUSES:
            raise InvalidInput(f"Status must be one of: {', '.join(CAMPAIGN_STATUSES)}.")
        with self._store_factory() as store:
            if not store.campaigns.set_status(campaign_id, status):
                raise NotFound(f"Campaign #{campaign_id} not found.")
            store.audit.add(admin_id, "campaign_status", f"#{campaign_id} -> {status}")
            return store.campaigns.get_by_id(campaign_id)

    def list_campaigns(self, status: Optional[str] = None) -> list[Campaign]:
        with self._store_factory() as store:
            return store.campaigns.list(status)

    def add_expenditure(self, admin_id: int, title: str, amount, spent_on=None,
                        description: str = "") -> Expenditure:
        """Record money spent by the NGO (defaults to today)."""
        errors = []
        if not title or not title.strip():
            errors.append("Expenditure title is required.")
        value = _parse_positive(amount, "Amount", errors)
        day = _parse_date(spent_on, "Date", errors) if spent_on else date.today()
        if errors:
            raise InvalidInput(errors)

        with self._store_factory() as store:
            expenditure = store.expenditures.add(Expenditure(
                title=title.strip(),
                amount=value,
                spent_on=day,
                description=(description or "").strip(),
                added_by=admin_id,
            ))
            store.audit.add(admin_id, "expenditure_add", f"#{expenditure.id} {value:.2f}")
        return expenditure

    # ── FORMATTING ────────────────────────────────────────

    def active_text(self) -> str:
        """Active campaigns with progress, for donors."""
        campaigns = self.list_campaigns("active")
        if not campaigns:
            return "📭 No active campaigns right now."
        lines = ["📣 Active campaigns:\n"]
        for c in campaigns:
            lines.append(f"#{c.id} {c.title}")
            if c.description:
                lines.append(f"  {c.description}")
            lines.append(
                f"  Raised {c.raised_amount:,.2f} of {c.goal_amount:,.2f} "
                f"({c.progress_percentage:.1f}%), {c.remaining_amount:,.2f} to go\n"
            )
        lines.append("Donate to one with /donate <amount> <method> campaign=<id>")
        return "\n".join(lines)

    def admin_text(self) -> str:
        campaigns = self.list_campaigns()
        if not campaigns:
            return "📭 No campaigns yet. Create one with /campaign_add."
        return "\n".join(["📣 Campaigns:\n"] + [f"  • {c}" for c in campaigns])
