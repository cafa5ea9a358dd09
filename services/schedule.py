"""
services/schedule.py
--------------------
Pure state transitions for recurring donations.

Each function takes a RecurringDonation and returns a new one; nothing here
touches the database, so the continue/complete decision can be tested alone.
"""

from dataclasses import replace

from models.recurring import COMPLETED, PAUSED, RecurringDonation
from utils.errors import InvalidInput
from utils.recurrence import next_run, parse_timestamp


def is_exhausted(recurring: RecurringDonation, candidate) -> bool:
    """
    True when the occurrence being confirmed is the last one of the series.

    Args:
        recurring: The series as it was before the confirmation.
        candidate: The next run computed from the current one.
    """
    if recurring.end_date is not None and candidate > parse_timestamp(recurring.end_date):
        return True
    if recurring.max_occurrences is not None and (
        recurring.total_occurrences + 1 >= recurring.max_occurrences
    ):
        return True
    return False


def confirm_occurrence(recurring: RecurringDonation) -> RecurringDonation:
    """
    Record one more materialized donation and move the schedule forward.

    The series completes (next_run cleared) when the next run would pass
    `end_date` or the occurrence cap is reached; otherwise it stays active
    with next_run advanced by one period.

    Raises:
        InvalidInput: If the series is not active.
        UnsupportedFrequency: If the stored frequency is unknown.
    """
    if not recurring.is_active:
        raise InvalidInput("This recurring donation is no longer active.")

    candidate = next_run(recurring.next_run, recurring.frequency)
    total = recurring.total_occurrences + 1

    if is_exhausted(recurring, candidate):
        return replace(recurring, total_occurrences=total, status=COMPLETED, next_run=None)
    return replace(recurring, total_occurrences=total, next_run=candidate)


def pause(recurring: RecurringDonation) -> RecurringDonation:
    """Stop the series; it only runs again once a fresh next_run is set."""
    return replace(recurring, status=PAUSED, next_run=None)
