from datetime import datetime, timezone

import pytest

from models.recurring import RecurringDonation
from tests.fakes import FakeDatabase, FakeReceipts, FakeStore

DONOR_ID = 111
OTHER_DONOR_ID = 222


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def store(db):
    """Direct access to the fake tables, outside any unit of work."""
    return FakeStore(db)


@pytest.fixture
def receipts():
    return FakeReceipts()


@pytest.fixture
def donor(store):
    return store.donors.upsert(
        DONOR_ID, "Asha Verma", "asha@example.com", "+91 98765 43210", "4 Lake Road, Pune 411001"
    )


@pytest.fixture
def make_series(store, donor):
    def _make(**overrides):
        fields = dict(
            user_id=DONOR_ID,
            amount=500.0,
            payment_method="upi",
            payment_details={"upi_id": "asha@okbank"},
            frequency="monthly",
            next_run=datetime(2026, 1, 31, 9, 0, tzinfo=timezone.utc),
        )
        fields.update(overrides)
        return store.recurring.add(RecurringDonation(**fields))
    return _make
