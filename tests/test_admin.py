import pytest

from services.admin_service import AdminService
from services.donation_service import DonationService
from tests.conftest import DONOR_ID, OTHER_DONOR_ID
from utils.errors import NotFound


@pytest.fixture
def admin(db, receipts, donor):
    donations = DonationService(store_factory=db.unit_of_work, receipts=receipts)
    donations.donate(DONOR_ID, 750, "upi")
    donations.donate(DONOR_ID, 250, "cash")
    return AdminService(store_factory=db.unit_of_work)


def test_donor_detail(admin):
    detail = admin.donor_detail(DONOR_ID)
    assert detail["donor"]["full_name"] == "Asha Verma"
    assert detail["summary"]["total"] == 1000.0
    assert [d.amount for d in detail["donations"]] == [250.0, 750.0]

    text = admin.donor_detail_text(DONOR_ID)
    assert "INR 1,000.00 over 2 donation(s)" in text


def test_unknown_donor(admin):
    with pytest.raises(NotFound, match="User not found."):
        admin.donor_detail(OTHER_DONOR_ID)


def test_donor_search(admin, store):
    store.donors.upsert(OTHER_DONOR_ID, "Ravi Kumar", "ravi@example.org")

    assert [d["telegram_id"] for d in admin.search_donors("asha@")] == [DONOR_ID]
    assert [d["telegram_id"] for d in admin.search_donors("kumar")] == [OTHER_DONOR_ID]
    assert admin.search_donors("nobody") == []
    assert "No donors match 'nobody'" in admin.donors_text("nobody")
    assert "1,000.00 (2)" in admin.donors_text("verma")
