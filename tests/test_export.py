from datetime import date

import pandas as pd
import pytest

from services.donation_service import DonationService
from services.export_service import COLUMNS, DONOR_COLUMNS, ExportService, parse_filters
from tests.conftest import DONOR_ID, OTHER_DONOR_ID
from utils.errors import InvalidInput


@pytest.fixture
def exporter(db, receipts, donor):
    donations = DonationService(store_factory=db.unit_of_work, receipts=receipts)
    donations.donate(DONOR_ID, 500, "upi")
    donations.donate(DONOR_ID, 1200, "card")
    donations.donate(DONOR_ID, 300, "upi")
    return ExportService(store_factory=db.unit_of_work)


def test_csv_has_expected_columns(exporter):
    df = pd.read_csv(exporter.export_csv(), encoding="utf-8-sig")
    assert list(df.columns) == COLUMNS
    assert len(df) == 3
    assert set(df["Donor"]) == {"Asha Verma"}


def test_csv_filters_by_method(exporter):
    df = pd.read_csv(exporter.export_csv(payment_method="upi"), encoding="utf-8-sig")
    assert sorted(df["Amount"]) == [300.0, 500.0]


def test_csv_date_filter(exporter):
    df = pd.read_csv(exporter.export_csv(end=date(2000, 1, 1)), encoding="utf-8-sig")
    assert list(df.columns) == COLUMNS
    assert df.empty


def test_excel_has_summary_by_method(exporter):
    sheets = pd.read_excel(exporter.export_excel(), sheet_name=None)
    assert set(sheets) == {"Donations", "Summary"}
    summary = sheets["Summary"].set_index("Payment Method")
    assert summary.loc["upi", "Donations"] == 2
    assert summary.loc["upi", "Total"] == 800.0
    assert summary.loc["card", "Total"] == 1200.0


def test_csv_amount_range_is_inclusive(exporter):
    df = pd.read_csv(exporter.export_csv(min_amount=500, max_amount=1200), encoding="utf-8-sig")
    assert sorted(df["Amount"]) == [500.0, 1200.0]


def test_csv_filters_by_status(exporter):
    assert len(pd.read_csv(exporter.export_csv(status="completed"), encoding="utf-8-sig")) == 3
    assert pd.read_csv(exporter.export_csv(status="refunded"), encoding="utf-8-sig").empty


def test_parse_filters_reads_every_option():
    filters = parse_filters([
        "from=2026-01-01", "to=2026-03-31", "campaign=#4", "method=UPI",
        "min=100", "max=2500.50", "status=Completed",
    ])
    assert filters == {
        "start": date(2026, 1, 1), "end": date(2026, 3, 31), "campaign_id": 4,
        "payment_method": "upi", "min_amount": 100.0, "max_amount": 2500.5,
        "status": "completed",
    }


def test_parse_filters_reports_all_problems():
    with pytest.raises(InvalidInput) as exc:
        parse_filters(["from=yesterday", "min=lots", "max=-5", "campaign=x"])
    assert exc.value.errors == [
        "from= must use the YYYY-MM-DD format.",
        "campaign= must be a campaign number.",
        "min= must be a number.",
        "max= cannot be negative.",
    ]


def test_parse_filters_rejects_inverted_ranges():
    with pytest.raises(InvalidInput) as exc:
        parse_filters(["from=2026-02-01", "to=2026-01-01", "min=900", "max=100"])
    assert len(exc.value.errors) == 2


@pytest.fixture
def donor_exporter(exporter, store):
    store.donors.upsert(OTHER_DONOR_ID, "Ravi Kumar", "ravi@example.org")
    return exporter


def test_donor_csv_lists_totals(donor_exporter):
    df = pd.read_csv(donor_exporter.export_donors_csv(), encoding="utf-8-sig")
    assert list(df.columns) == DONOR_COLUMNS
    rows = df.set_index("Telegram ID")
    assert rows.loc[DONOR_ID, "Total Donated"] == 2000.0
    assert rows.loc[DONOR_ID, "Donation Count"] == 3
    assert rows.loc[OTHER_DONOR_ID, "Donation Count"] == 0


def test_donor_csv_search_matches_name_or_email(donor_exporter):
    by_name = pd.read_csv(donor_exporter.export_donors_csv("VERMA"), encoding="utf-8-sig")
    by_email = pd.read_csv(donor_exporter.export_donors_csv("example.org"), encoding="utf-8-sig")
    assert list(by_name["Name"]) == ["Asha Verma"]
    assert list(by_email["Name"]) == ["Ravi Kumar"]


def test_donor_excel_ends_with_total_row(donor_exporter):
    sheets = pd.read_excel(donor_exporter.export_donors_excel(), sheet_name=None)
    assert set(sheets) == {"Donors"}
    donors = sheets["Donors"]
    assert len(donors) == 3
    total = donors.iloc[-1]
    assert total["Name"] == "TOTAL"
    assert total["Total Donated"] == 2000.0
    assert total["Donation Count"] == 3


def test_donor_excel_without_donors(db):
    donors = pd.read_excel(ExportService(store_factory=db.unit_of_work).export_donors_excel(),
                           sheet_name="Donors")
    assert list(donors["Name"]) == ["TOTAL"]
    assert donors.iloc[0]["Total Donated"] == 0
