from datetime import datetime, timezone

import pytest

from models.recurring import ACTIVE, COMPLETED, PAUSED
from models.reminder import CANCELED, CONFIRMED, PENDING, Reminder
from services.reminder_resolver import ReminderResolver
from tests.conftest import DONOR_ID, OTHER_DONOR_ID
from tests.fakes import FakeReceipts
from utils.errors import InvalidInput, NotFound, PersistenceFailure, Unauthorized

UTC = timezone.utc


@pytest.fixture
def resolver(db, receipts):
    return ReminderResolver(store_factory=db.unit_of_work, receipts=receipts)


@pytest.fixture
def add_reminder(store):
    def _add(series):
        return store.reminders.add(Reminder(
            recurring_donation_id=series.id,
            scheduled_for=series.next_run,
            message="Reminder",
        ))
    return _add


def test_confirm_records_donation_and_advances(resolver, store, receipts, make_series, add_reminder):
    series = make_series()
    reminder = add_reminder(series)

    result = resolver.confirm(reminder.id, DONOR_ID)

    donation = store.donations.get_by_id(result.donation.id)
    assert donation.amount == 500.0
    assert donation.payment_method == "upi"
    assert donation.status == "completed"
    assert donation.receipt_path == f"/tmp/receipts/{donation.id}.pdf"
    assert receipts.generated == [(donation.id, "Asha Verma")]

    saved = store.recurring.get_by_id(series.id)
    assert saved.status == ACTIVE
    assert saved.total_occurrences == 2
    assert saved.next_run == datetime(2026, 2, 28, 9, 0, tzinfo=UTC)
    assert store.reminders.get_by_id(reminder.id).status == CONFIRMED
    assert result.reminder.status == CONFIRMED


def test_confirm_last_occurrence_completes(resolver, store, make_series, add_reminder):
    series = make_series(max_occurrences=2)
    reminder = add_reminder(series)

    result = resolver.confirm(reminder.id, DONOR_ID)

    assert result.recurring.status == COMPLETED
    saved = store.recurring.get_by_id(series.id)
    assert saved.status == COMPLETED
    assert saved.next_run is None
    assert saved.total_occurrences == 2


def test_cancel_pauses_series(resolver, store, make_series, add_reminder):
    series = make_series(total_occurrences=3)
    reminder = add_reminder(series)

    resolver.cancel(reminder.id, DONOR_ID)

    saved = store.recurring.get_by_id(series.id)
    assert saved.status == PAUSED
    assert saved.next_run is None
    assert saved.total_occurrences == 3
    assert store.reminders.get_by_id(reminder.id).status == CANCELED
    assert store.donations.get_by_user(DONOR_ID) == []


@pytest.mark.parametrize("action", ["confirm", "cancel"])
def test_other_donor_is_rejected(resolver, store, make_series, add_reminder, action):
    series = make_series()
    reminder = add_reminder(series)

    with pytest.raises(Unauthorized, match="You cannot manage this reminder."):
        getattr(resolver, action)(reminder.id, OTHER_DONOR_ID)

    assert store.reminders.get_by_id(reminder.id).status == PENDING
    assert store.recurring.get_by_id(series.id) == series


def test_unknown_reminder(db, resolver, store, make_series, add_reminder):
    series = make_series()
    reminder = add_reminder(series)
    commits = db.commits

    for action in (resolver.confirm, resolver.cancel):
        with pytest.raises(NotFound, match="Reminder not found."):
            action(999, DONOR_ID)

    assert store.donations.get_by_user(DONOR_ID) == []
    assert store.recurring.get_by_id(series.id) == series
    assert store.reminders.get_by_id(reminder.id).status == PENDING
    assert db.commits == commits


def test_orphan_reminder(resolver, store):
    reminder = store.reminders.add(Reminder(
        recurring_donation_id=4242, scheduled_for=datetime(2026, 1, 1, tzinfo=UTC),
    ))
    with pytest.raises(NotFound, match="Recurring donation not found."):
        resolver.cancel(reminder.id, DONOR_ID)


def test_resolved_reminder_cannot_be_resolved_again(resolver, make_series, add_reminder):
    reminder = add_reminder(make_series())
    resolver.confirm(reminder.id, DONOR_ID)

    with pytest.raises(InvalidInput):
        resolver.confirm(reminder.id, DONOR_ID)
    with pytest.raises(InvalidInput):
        resolver.cancel(reminder.id, DONOR_ID)


def test_receipt_failure_rolls_everything_back(db, store, make_series, add_reminder):
    series = make_series()
    reminder = add_reminder(series)
    resolver = ReminderResolver(store_factory=db.unit_of_work,
                                receipts=FakeReceipts(fail=OSError("disk full")))

    with pytest.raises(OSError):
        resolver.confirm(reminder.id, DONOR_ID)

    assert store.donations.get_by_user(DONOR_ID) == []
    assert store.recurring.get_by_id(series.id) == series
    assert store.reminders.get_by_id(reminder.id).status == PENDING


def test_schedule_write_failure_rolls_back(db, store, resolver, make_series, add_reminder):
    series = make_series()
    reminder = add_reminder(series)
    db.failures["recurring.save_schedule"] = PersistenceFailure("deadlock detected")

    with pytest.raises(PersistenceFailure):
        resolver.confirm(reminder.id, DONOR_ID)

    assert store.donations.get_by_user(DONOR_ID) == []
    assert store.recurring.get_by_id(series.id).total_occurrences == 1
    assert store.reminders.get_by_id(reminder.id).status == PENDING


def test_donation_insert_failure_rolls_back(db, store, resolver, receipts, make_series, add_reminder):
    series = make_series()
    reminder = add_reminder(series)
    db.failures["donations.add"] = PersistenceFailure("could not serialize access")

    with pytest.raises(PersistenceFailure):
        resolver.confirm(reminder.id, DONOR_ID)

    assert store.donations.get_by_user(DONOR_ID) == []
    assert receipts.generated == []
    assert store.recurring.get_by_id(series.id) == series
    assert store.reminders.get_by_id(reminder.id).status == PENDING
