"""
services/reminder_scanner.py
----------------------------
Finds recurring donations about to run and asks their donors to confirm.

Runs on the bot's job queue every REMINDER_SCAN_INTERVAL_SECONDS. One tick:
    1. Load active series whose next_run is within the lookahead window.
    2. Create one pending reminder per (series, next_run), skipping existing ones.
    3. Notify the donor; a failed notification never undoes the reminder.
A failure on one series is logged and the scan moves on to the next.
"""

from datetime import datetime, timedelta, timezone

from config import REMINDER_LOOKAHEAD_MINUTES
from models.recurring import RecurringDonation
from models.reminder import Reminder
from repositories.store import unit_of_work
from utils.errors import NotificationFailure
from utils.logger import get_logger

logger = get_logger(__name__)


def build_message(recurring: RecurringDonation) -> str:
    """Reminder text embedding amount, currency and scheduled time."""
    when = recurring.next_run.strftime("%Y-%m-%d %H:%M %Z").strip()
    return (
        f"Reminder: Your recurring donation of {recurring.currency} {recurring.amount:.2f} "
        f"is scheduled for {when}. Please confirm or cancel."
    )


class ReminderScanner:
    """
    Creates pending reminders for upcoming occurrences.

    Args:
        store_factory: Context manager factory yielding a DonationStore.
        notifier: Object with an async ``notify_reminder(recurring, reminder)``
            returning True on delivery. None disables notifications.
        lookahead: Width of the due window.
    """

    def __init__(self, store_factory=unit_of_work, notifier=None,
                 lookahead: timedelta = timedelta(minutes=REMINDER_LOOKAHEAD_MINUTES)):
        self._store_factory = store_factory
        self.notifier = notifier
        self.lookahead = lookahead

    async def scan(self, now: datetime | None = None) -> list[Reminder]:
        """
        Run one tick.

        Args:
            now: Start of the window (defaults to the current UTC time).

        Returns:
            The reminders created during this tick.
        """
        now = now or datetime.now(timezone.utc)
        window_end = now + self.lookahead

        try:
            with self._store_factory() as store:
                due = store.recurring.get_due_in_window(now, window_end)
        except Exception as e:
            logger.error(f"Reminder scan could not load due donations: {e}")
            return []

        created: list[Reminder] = []
        for recurring in due:
            if recurring.next_run is None:
                continue
            try:
                reminder = self._create_reminder(recurring)
            except Exception as e:
                logger.error(f"Failed to create reminder for recurring donation #{recurring.id}: {e}")
                continue
            if reminder is None:
                continue

            created.append(reminder)
            logger.info(f"Created reminder #{reminder.id} for recurring donation #{recurring.id}")
            await self._notify(recurring, reminder)

        return created

    def _create_reminder(self, recurring: RecurringDonation) -> Reminder | None:
        """Insert the reminder for the series' next run unless it already exists."""
        with self._store_factory() as store:
            if store.reminders.find(recurring.id, recurring.next_run) is not None:
                return None
            # None here means another scanner won the race on the unique key
            return store.reminders.add(Reminder(
                recurring_donation_id=recurring.id,
                scheduled_for=recurring.next_run,
                message=build_message(recurring),
            ))

    async def _notify(self, recurring: RecurringDonation, reminder: Reminder) -> None:
        if self.notifier is None:
            return
        try:
            delivered = await self.notifier.notify_reminder(recurring, reminder)
        except NotificationFailure as e:
            logger.warning(f"Reminder #{reminder.id} was created but the donor was not notified: {e}")
            return
        except Exception as e:
            logger.error(f"Notification for reminder #{reminder.id} raised: {e}")
            return
        if not delivered:
            logger.warning(f"Reminder #{reminder.id} was created but the donor was not notified")
