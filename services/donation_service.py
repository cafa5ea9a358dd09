"""
services/donation_service.py
----------------------------
Business logic for capturing donations and setting up recurring ones.

Workflow of donate():
    1. Validate the form (every problem is reported at once).
    2. In one transaction: store the donation, credit the campaign,
       attach the PDF receipt and, if requested, create the recurring series.
    3. Return what was created for the handler to display.
"""

from dataclasses import dataclass
from datetime import timezone
from typing import Optional

from config import DEFAULT_CURRENCY, PAYMENT_METHODS
from models.donation import Donation
from models.recurring import RecurringDonation
from repositories.store import unit_of_work
from services.receipt_service import ReceiptService
from utils.errors import InvalidInput, NotFound
from utils.logger import get_logger
from utils.recurrence import FREQUENCIES, parse_timestamp

logger = get_logger(__name__)


@dataclass
class RecurringPlan:
    """Raw recurring options as typed by the donor."""
    frequency: Optional[str] = None
    start: Optional[str] = None
    end_date: Optional[str] = None
    max_occurrences: Optional[str] = None


@dataclass
class DonationResult:
    donation: Donation
    recurring: Optional[RecurringDonation] = None


def build_payment_details(method: str, fields: dict) -> dict:
    """Keep only the details relevant to the payment method."""
    details = {"method": method}
    if method == "upi":
        details["upi_id"] = fields.get("upi_id")
    elif method == "netbanking":
        details["bank_name"] = fields.get("bank_name")
        details["account_reference"] = fields.get("account_reference")
    elif method == "card":
        details["card_last4"] = (fields.get("card_number") or "")[-4:]
        details["card_holder"] = fields.get("card_holder")
    elif method == "wallet":
        details["wallet_provider"] = fields.get("wallet_provider")
    else:
        details["notes"] = fields.get("notes")
    if fields.get("reference"):
        details["reference"] = fields["reference"]
    return {k: v for k, v in details.items() if v}


def _parse_amount(value) -> Optional[float]:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    return amount if amount > 0 else None


def validate_donation(amount, payment_method, plan: Optional[RecurringPlan]) -> list[str]:
    """Return every problem with a donation form (empty list when valid)."""
    errors = []
    if _parse_amount(amount) is None:
        errors.append("Enter a valid donation amount.")
    if not payment_method:
        errors.append("Select a payment method.")
    elif payment_method not in PAYMENT_METHODS:
        errors.append(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}.")

    if plan is None:
        return errors

    if not plan.frequency:
        errors.append("Select a recurrence frequency.")
    elif plan.frequency not in FREQUENCIES:
        errors.append("Frequency must be daily, weekly, monthly or yearly.")

    start = end = None
    if not plan.start:
        errors.append("Provide a start date/time for the recurring donation.")
    else:
        try:
            start = parse_timestamp(plan.start)
        except InvalidInput:
            errors.append("Start date/time is not a valid ISO date.")
    if plan.end_date:
        try:
            end = parse_timestamp(plan.end_date)
        except InvalidInput:
            errors.append("End date is not a valid ISO date.")
    if start and end and end < start:
        errors.append("End date must be after the start date.")
    if plan.max_occurrences not in (None, ""):
        try:
            if int(plan.max_occurrences) < 1:
                raise ValueError
        except (TypeError, ValueError):
            errors.append("Number of occurrences must be a positive whole number.")
    return errors


class DonationService:
    """Handles donation capture and the donor's donation history."""

    def __init__(self, store_factory=unit_of_work, receipts: ReceiptService | None = None):
        self._store_factory = store_factory
        self.receipts = receipts or ReceiptService()

    def donate(self, user_id: int, amount, payment_method: str,
               payment_details: Optional[dict] = None, campaign_id: Optional[int] = None,
               plan: Optional[RecurringPlan] = None,
               currency: str = DEFAULT_CURRENCY) -> DonationResult:
        """
        Capture a completed donation, optionally starting a recurring series.

        Raises:
            InvalidInput: Form problems, or an inactive campaign.
            NotFound: Unregistered donor or unknown campaign.
        """
        errors = validate_donation(amount, payment_method, plan)
        if errors:
            raise InvalidInput(errors)

        with self._store_factory() as store:
            donor = store.donors.get_by_telegram_id(user_id)
            if donor is None:
                raise NotFound("You are not registered yet. Use /register first.")

            if campaign_id is not None:
                campaign = store.campaigns.get_by_id(campaign_id)
                if campaign is None:
                    raise NotFound(f"Campaign #{campaign_id} not found.")
                if campaign.status != "active":
                    raise InvalidInput(f"Campaign #{campaign_id} is not accepting donations.")

            donation = store.donations.add(Donation(
                user_id=user_id,
                amount=_parse_amount(amount),
                currency=currency,
                payment_method=payment_method,
                payment_details=payment_details or {},
                campaign_id=campaign_id,
                status="completed",
            ))
            if campaign_id is not None:
                store.campaigns.add_to_raised(campaign_id, donation.amount)

            donation.receipt_path = self.receipts.generate(donation, donor)
            store.donations.set_receipt_path(donation.id, donation.receipt_path)

            recurring = None
            if plan is not None:
                recurring = store.recurring.add(RecurringDonation(
                    user_id=user_id,
                    base_donation_id=donation.id,
                    amount=donation.amount,
                    currency=currency,
                    payment_method=payment_method,
                    payment_details=donation.payment_details,
                    frequency=plan.frequency,
                    next_run=parse_timestamp(plan.start),
                    end_date=parse_timestamp(plan.end_date) if plan.end_date else None,
                    max_occurrences=int(plan.max_occurrences) if plan.max_occurrences else None,
                    total_occurrences=1,
                ))

        if recurring:
            logger.info(f"Recurring donation #{recurring.id} scheduled for {recurring.next_run}")
        return DonationResult(donation=donation, recurring=recurring)

    # ── READ ──────────────────────────────────────────────

    def list_donations(self, user_id: int, limit: int = 10) -> list[Donation]:
        with self._store_factory() as store:
            return store.donations.get_by_user(user_id, limit=limit)

    def donor_summary(self, user_id: int) -> dict:
        """Count, total and last donation time for one donor."""
        with self._store_factory() as store:
            return store.donations.get_user_summary(user_id)

    def list_recurring(self, user_id: int) -> list[RecurringDonation]:
        with self._store_factory() as store:
            return store.recurring.get_by_user(user_id)

    def pending_reminders(self, user_id: int) -> list[dict]:
        with self._store_factory() as store:
            return store.reminders.get_pending_by_user(user_id)

    def receipt_path(self, user_id: int, donation_id: int) -> str:
        """Receipt location of one of the donor's own donations."""
        with self._store_factory() as store:
            donation = store.donations.get_by_id(donation_id, user_id)
        if donation is None or not donation.receipt_path:
            raise NotFound("Receipt not found.")
        return donation.receipt_path

    # ── FORMATTING ────────────────────────────────────────

    def history_text(self, user_id: int) -> str:
        """Summary plus the most recent donations."""
        donations = self.list_donations(user_id)
        if not donations:
            return "📭 You have not made any donations yet. Use /donate to start."

        summary = self.donor_summary(user_id)
        lines = [
            "💝 Your donations:\n",
            f"  Total given: {DEFAULT_CURRENCY} {summary['total']:,.2f} in {summary['count']} donation(s)\n",
        ]
        lines += [f"  • {d}" for d in donations]
        lines.append("\nUse /receipt <id> to download a receipt.")
        return "\n".join(lines)

    def recurring_text(self, user_id: int) -> str:
        series = self.list_recurring(user_id)
        if not series:
            return "📭 You have no recurring donations."
        return "\n".join(["🔁 Your recurring donations:\n"] + [f"  • {r}" for r in series])

    def reminders_text(self, user_id: int) -> str:
        pending = self.pending_reminders(user_id)
        if not pending:
            return "✅ No reminders waiting for you."
        lines = ["⏰ Pending reminders:\n"]
        for r in pending:
            when = r["scheduled_for"].astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
            lines.append(
                f"  #{r['id']} {r['currency']} {r['amount']:.2f} ({r['frequency']}) on {when}"
            )
        lines.append("\nReply /confirm <id> or /cancel <id>.")
        return "\n".join(lines)
