from datetime import date, datetime, timezone

import pytest

from models.campaign import Campaign
from models.recurring import ACTIVE
from services.donation_service import DonationService, RecurringPlan, build_payment_details
from tests.conftest import DONOR_ID, OTHER_DONOR_ID
from tests.fakes import FakeReceipts
from utils.errors import InvalidInput, NotFound


@pytest.fixture
def service(db, receipts):
    return DonationService(store_factory=db.unit_of_work, receipts=receipts)


@pytest.fixture
def campaign(store):
    return store.campaigns.add(Campaign(
        title="Winter Blankets", description="Blankets for 500 families",
        goal_amount=50000.0, start_date=date(2026, 11, 1),
    ))


def test_one_off_donation(service, store, receipts, donor):
    result = service.donate(DONOR_ID, "500", "upi", {"upi_id": "asha@okbank"})

    saved = store.donations.get_by_id(result.donation.id)
    assert saved.amount == 500.0
    assert saved.currency == "INR"
    assert saved.status == "completed"
    assert saved.receipt_path == f"/tmp/receipts/{saved.id}.pdf"
    assert result.recurring is None
    assert len(receipts.generated) == 1


def test_every_validation_error_is_reported(service, donor):
    with pytest.raises(InvalidInput) as exc:
        service.donate(DONOR_ID, "abc", "bitcoin")
    assert len(exc.value.errors) == 2


def test_recurring_plan_validation(service, donor):
    plan = RecurringPlan(frequency="hourly", start=None, max_occurrences="0")
    with pytest.raises(InvalidInput) as exc:
        service.donate(DONOR_ID, 100, "upi", plan=plan)
    messages = " ".join(exc.value.errors)
    assert "Frequency" in messages
    assert "start date" in messages
    assert "occurrences" in messages


def test_end_before_start_is_rejected(service, donor):
    plan = RecurringPlan(frequency="monthly", start="2026-05-01T09:00", end_date="2026-04-01")
    with pytest.raises(InvalidInput, match="End date must be after"):
        service.donate(DONOR_ID, 100, "upi", plan=plan)


def test_unregistered_donor(service):
    with pytest.raises(NotFound):
        service.donate(OTHER_DONOR_ID, 100, "cash")


def test_recurring_donation_starts_series(service, store, donor):
    plan = RecurringPlan(frequency="monthly", start="2026-11-01T09:00", max_occurrences="12")

    result = service.donate(DONOR_ID, 250, "upi", plan=plan)

    series = store.recurring.get_by_id(result.recurring.id)
    assert series.status == ACTIVE
    assert series.total_occurrences == 1
    assert series.max_occurrences == 12
    assert series.base_donation_id == result.donation.id
    assert series.next_run == datetime(2026, 11, 1, 9, 0, tzinfo=timezone.utc)


def test_campaign_donation_raises_total(service, store, donor, campaign):
    service.donate(DONOR_ID, 1500, "card", campaign_id=campaign.id)
    service.donate(DONOR_ID, 500, "upi", campaign_id=campaign.id)

    assert store.campaigns.get_by_id(campaign.id).raised_amount == 2000.0


def test_inactive_or_missing_campaign(service, store, donor, campaign):
    with pytest.raises(NotFound):
        service.donate(DONOR_ID, 100, "upi", campaign_id=9999)

    store.campaigns.set_status(campaign.id, "completed")
    with pytest.raises(InvalidInput):
        service.donate(DONOR_ID, 100, "upi", campaign_id=campaign.id)


def test_receipt_failure_writes_nothing(db, store, donor, campaign):
    service = DonationService(store_factory=db.unit_of_work,
                              receipts=FakeReceipts(fail=OSError("disk full")))
    plan = RecurringPlan(frequency="weekly", start="2026-11-01T09:00")

    with pytest.raises(OSError):
        service.donate(DONOR_ID, 100, "upi", campaign_id=campaign.id, plan=plan)

    assert store.donations.get_by_user(DONOR_ID) == []
    assert store.recurring.get_by_user(DONOR_ID) == []
    assert store.campaigns.get_by_id(campaign.id).raised_amount == 0.0


def test_receipt_is_scoped_to_owner(service, donor):
    donation = service.donate(DONOR_ID, 100, "cash").donation

    assert service.receipt_path(DONOR_ID, donation.id).endswith(f"{donation.id}.pdf")
    with pytest.raises(NotFound):
        service.receipt_path(OTHER_DONOR_ID, donation.id)


def test_history_text(service, donor):
    assert "not made any donations" in service.history_text(DONOR_ID)
    service.donate(DONOR_ID, 100, "cash")
    service.donate(DONOR_ID, 250, "upi")

    text = service.history_text(DONOR_ID)
    assert "INR 350.00 in 2 donation(s)" in text


def test_card_details_keep_last_four_digits():
    details = build_payment_details("card", {"card_number": "4111111111111234", "card_holder": "A Verma"})
    assert details == {"method": "card", "card_last4": "1234", "card_holder": "A Verma"}


def test_details_drop_empty_fields():
    assert build_payment_details("upi", {}) == {"method": "upi"}
    assert build_payment_details("cash", {"reference": "TXN-9"}) == {"method": "cash", "reference": "TXN-9"}
