"""
services/report_service.py
--------------------------
Financial report for a date range: donations, expenditures, donors and
campaign progress, rendered to PDF with an embedded monthly chart.
"""

import os
from dataclasses import dataclass, field
from datetime import date

from fpdf.enums import XPos, YPos

from config import DEFAULT_CURRENCY, REPORTS_DIR
from models.campaign import Campaign, Expenditure
from repositories.store import unit_of_work
from services.chart_service import ChartService
from services.receipt_service import ACCENT, FONT, PRIMARY, ReceiptPDF
from utils.errors import InvalidInput
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class FinancialReport:
    start: date
    end: date
    donations: dict
    expenditures: dict
    donors: dict
    campaigns: list[Campaign] = field(default_factory=list)

    @property
    def net_balance(self) -> float:
        return self.donations["total"] - self.expenditures["total"]


class ReportPDF(ReceiptPDF):
    """Same letterhead as receipts, with a table helper."""

    def table(self, headers: list[str], rows: list[list], widths: list[int]):
        self.set_font(FONT, "B", 9)
        self.set_fill_color(*PRIMARY)
        self.set_text_color(255, 255, 255)
        for head, w in zip(headers, widths):
            self.cell(w, 7, str(head), border=1, fill=True)
        self.ln()
        self.set_font(FONT, "", 9)
        self.set_text_color(0, 0, 0)
        for row in rows:
            for value, w in zip(row, widths):
                self.cell(w, 6, str(value), border=1)
            self.ln()
        self.ln(3)


class ReportService:
    """Builds and renders the admin financial report."""

    def __init__(self, store_factory=unit_of_work, output_dir: str = REPORTS_DIR,
                 charts: ChartService | None = None):
        self._store_factory = store_factory
        self.output_dir = output_dir
        self.charts = charts or ChartService()

    def build(self, start: date, end: date) -> FinancialReport:
        """
        Gather every figure of the report.

        Raises:
            InvalidInput: If the range is reversed.
        """
        if end < start:
            raise InvalidInput("End date must be on or after the start date.")
        with self._store_factory() as store:
            donations = store.donations.get_stats(start, end)
            expenditures = store.expenditures.get_stats(start, end, top=10)
            donors = store.donations.get_top_donors(start, end, limit=10)
            donors["new_donors"] = store.donors.count_new(start, end)
            campaigns = store.campaigns.list()
        return FinancialReport(start, end, donations, expenditures, donors, campaigns)

    def render_pdf(self, report: FinancialReport) -> str:
        """Write the report PDF and return its path."""
        os.makedirs(self.output_dir, exist_ok=True)
        path = os.path.join(
            self.output_dir,
            f"financial-report-{report.start:%Y%m%d}-{report.end:%Y%m%d}.pdf",
        )
        cur = DEFAULT_CURRENCY
        d, e, dn = report.donations, report.expenditures, report.donors

        pdf = ReportPDF(format="A4")
        pdf.set_title("Financial Report")
        pdf.add_page()

        pdf.set_font(FONT, "B", 18)
        pdf.set_text_color(*PRIMARY)
        pdf.cell(0, 10, "FINANCIAL REPORT", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font(FONT, "", 10)
        pdf.set_text_color(*ACCENT)
        pdf.cell(0, 6, f"{report.start:%d %b %Y} - {report.end:%d %b %Y}", align="C",
                 new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.section("SUMMARY")
        pdf.field("Total donations:", f"{cur} {d['total']:,.2f} ({d['count']} donations)")
        pdf.field("Total expenditures:", f"{cur} {e['total']:,.2f} ({e['count']} items)")
        pdf.field("Net balance:", f"{cur} {report.net_balance:,.2f}")

        pdf.section("DONATIONS")
        pdf.field("Average:", f"{cur} {d['average']:,.2f}")
        pdf.field("Smallest / largest:", f"{cur} {d['minimum']:,.2f} / {cur} {d['maximum']:,.2f}")
        if d["by_method"]:
            pdf.ln(2)
            pdf.table(
                ["Payment method", "Donations", "Total"],
                [[m["payment_method"], m["count"], f"{m['total']:,.2f}"] for m in d["by_method"]],
                [70, 40, 60],
            )

        chart = self.charts.generate_monthly_bar(d["monthly"], cur, title="Donations per month")
        if chart:
            pdf.image(chart, x=15, w=180)
            pdf.ln(4)

        pdf.section("DONORS")
        pdf.field("Active donors:", str(dn["active_donors"]))
        pdf.field("New donors:", str(dn["new_donors"]))
        if dn["top_donors"]:
            pdf.ln(2)
            pdf.table(
                ["Donor", "Donations", "Total"],
                [[t["full_name"], t["count"], f"{t['total']:,.2f}"] for t in dn["top_donors"]],
                [90, 30, 50],
            )

        pdf.section("EXPENDITURES")
        top: list[Expenditure] = e["top"]
        if top:
            pdf.table(
                ["Date", "Title", "Amount"],
                [[x.spent_on.isoformat(), x.title[:45], f"{x.amount:,.2f}"] for x in top],
                [30, 100, 40],
            )
        else:
            pdf.field("Recorded:", "none in this period")

        if report.campaigns:
            pdf.section("CAMPAIGNS")
            pdf.table(
                ["Campaign", "Status", "Raised", "Goal", "Progress"],
                [
                    [c.title[:35], c.status, f"{c.raised_amount:,.2f}",
                     f"{c.goal_amount:,.2f}", f"{c.progress_percentage:.1f}%"]
                    for c in report.campaigns
                ],
                [65, 25, 30, 30, 25],
            )

        pdf.output(path)
        logger.info(f"Financial report written to {path}")
        return path
