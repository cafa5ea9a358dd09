import os
from datetime import date, datetime, timezone

from models.campaign import Campaign, Expenditure
from models.donation import Donation
from services.receipt_service import ReceiptPDF, ReceiptService, default_font_dir
from services.report_service import FinancialReport, ReportService


def _read(path):
    with open(path, "rb") as fh:
        return fh.read()


def _donation():
    return Donation(
        id=42, user_id=111, amount=2500.0, payment_method="upi",
        payment_details={"upi_id": "asha@okbank", "reference": "TXN-77"},
        created_at=datetime(2026, 10, 1, 10, 0, tzinfo=timezone.utc),
    )


def test_receipt_embeds_unicode_font(tmp_path):
    donor = {"full_name": "Zoë Łukasiewicz / Ярослава Іваненко", "email": "zoe@example.com",
             "contact_number": "+48 600 100 200", "address": "ul. Świętokrzyska 12, Warszawa"}

    path = ReceiptService(output_dir=str(tmp_path)).generate(_donation(), donor)

    data = _read(path)
    assert data.startswith(b"%PDF")
    assert b"DejaVuSans" in data
    assert b"Helvetica" not in data


def test_missing_fallback_font_is_skipped():
    pdf = ReceiptPDF(format="A4", fallback_fonts=["/nonexistent/NotoSansDevanagari-Regular.ttf"])
    assert pdf.fallback_families == []


def test_fallback_font_is_registered():
    serif = os.path.join(default_font_dir(), "DejaVuSerif.ttf")
    pdf = ReceiptPDF(format="A4", fallback_fonts=[serif])
    assert pdf.fallback_families == ["DejaVuSerif"]


def test_receipt_pdf_is_written(tmp_path):
    donor = {"full_name": "Asha Verma", "email": "asha@example.com",
             "contact_number": "+91 98765 43210", "address": "4 Lake Road, Pune 411001"}

    path = ReceiptService(output_dir=str(tmp_path)).generate(_donation(), donor)

    assert path == str(tmp_path / "42.pdf")
    assert _read(path).startswith(b"%PDF")


def test_report_pdf_with_chart(tmp_path):
    report = FinancialReport(
        start=date(2026, 1, 1),
        end=date(2026, 6, 30),
        donations={
            "count": 3, "total": 4000.0, "average": 1333.33, "minimum": 500.0, "maximum": 2500.0,
            "by_method": [{"payment_method": "upi", "count": 2, "total": 3000.0},
                          {"payment_method": "card", "count": 1, "total": 1000.0}],
            "monthly": [{"month": "2026-01", "count": 1, "total": 500.0},
                        {"month": "2026-03", "count": 2, "total": 3500.0}],
        },
        expenditures={
            "count": 1, "total": 1500.0, "average": 1500.0,
            "top": [Expenditure(title="School supplies", amount=1500.0, spent_on=date(2026, 2, 3))],
        },
        donors={"active_donors": 2, "new_donors": 1,
                "top_donors": [{"full_name": "Asha Verma", "count": 2, "total": 3000.0}]},
        campaigns=[Campaign(title="Winter Blankets", description="", goal_amount=5000.0,
                            raised_amount=1000.0, start_date=date(2026, 1, 1))],
    )
    assert report.net_balance == 2500.0

    path = ReportService(output_dir=str(tmp_path)).render_pdf(report)

    assert path.endswith("financial-report-20260101-20260630.pdf")
    assert _read(path).startswith(b"%PDF")
