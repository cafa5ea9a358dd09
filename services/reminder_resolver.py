"""
services/reminder_resolver.py
-----------------------------
Donor-facing confirm/cancel actions on pending reminders.

Confirm materializes a donation (with receipt) and advances or completes
the series; cancel pauses the whole series. Either action is one database
transaction: if any step fails, nothing is written.
"""

from dataclasses import dataclass

from models.donation import Donation
from models.recurring import RecurringDonation
from models.reminder import CANCELED, CONFIRMED, Reminder
from repositories.store import DonationStore, unit_of_work
from services import schedule
from services.receipt_service import ReceiptService
from utils.errors import InvalidInput, NotFound, Unauthorized
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ConfirmResult:
    donation: Donation
    recurring: RecurringDonation
    reminder: Reminder


@dataclass
class CancelResult:
    recurring: RecurringDonation
    reminder: Reminder


class ReminderResolver:
    """Applies a donor's answer to a reminder."""

    def __init__(self, store_factory=unit_of_work, receipts: ReceiptService | None = None):
        self._store_factory = store_factory
        self.receipts = receipts or ReceiptService()

    def confirm(self, reminder_id: int, donor_id: int) -> ConfirmResult:
        """
        Go ahead with the occurrence a reminder announced.

        Raises:
            NotFound: Reminder or recurring donation missing.
            Unauthorized: The donor does not own the series.
            InvalidInput: Reminder already resolved or series inactive.
        """
        with self._store_factory() as store:
            reminder, recurring = self._load(store, reminder_id, donor_id)
            updated = schedule.confirm_occurrence(recurring)

            donation = store.donations.add(Donation(
                user_id=recurring.user_id,
                amount=recurring.amount,
                currency=recurring.currency,
                payment_method=recurring.payment_method,
                payment_details=dict(recurring.payment_details or {}),
                status="completed",
            ))
            donor = store.donors.get_by_telegram_id(recurring.user_id) or {
                "telegram_id": recurring.user_id, "full_name": str(recurring.user_id),
            }
            donation.receipt_path = self.receipts.generate(donation, donor)
            store.donations.set_receipt_path(donation.id, donation.receipt_path)

            store.recurring.save_schedule(updated)
            store.reminders.set_status(reminder.id, CONFIRMED)
            reminder.status = CONFIRMED

        logger.info(
            f"Donor {donor_id} confirmed reminder #{reminder.id}: donation #{donation.id}, "
            f"series #{updated.id} now {updated.status}"
        )
        return ConfirmResult(donation=donation, recurring=updated, reminder=reminder)

    def cancel(self, reminder_id: int, donor_id: int) -> CancelResult:
        """
        Decline the occurrence. This pauses the entire series and clears
        next_run; it does not skip a single payment.

        Raises:
            NotFound, Unauthorized, InvalidInput: As for confirm().
        """
        with self._store_factory() as store:
            reminder, recurring = self._load(store, reminder_id, donor_id)
            store.reminders.set_status(reminder.id, CANCELED)
            reminder.status = CANCELED
            updated = schedule.pause(recurring)
            store.recurring.save_schedule(updated)

        logger.info(f"Donor {donor_id} canceled reminder #{reminder.id}; series #{updated.id} paused")
        return CancelResult(recurring=updated, reminder=reminder)

    @staticmethod
    def _load(store: DonationStore, reminder_id: int, donor_id: int) -> tuple[Reminder, RecurringDonation]:
        reminder = store.reminders.get_by_id(reminder_id)
        if reminder is None:
            raise NotFound("Reminder not found.")
        recurring = store.recurring.get_by_id(reminder.recurring_donation_id)
        if recurring is None:
            raise NotFound("Recurring donation not found.")
        if recurring.user_id != donor_id:
            raise Unauthorized("You cannot manage this reminder.")
        if not reminder.is_pending:
            raise InvalidInput(f"This reminder was already {reminder.status}.")
        return reminder, recurring
