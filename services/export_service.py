"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of donation and donor data for admins.

Donation filters (all optional, given as key=value command arguments):
    from=YYYY-MM-DD to=YYYY-MM-DD campaign=<id> method=<payment method>
    min=<amount> max=<amount> status=<donation status>
"""

import io
from datetime import date
from typing import Optional

import pandas as pd

from repositories.store import unit_of_work
from utils.args import parse_id, parse_options
from utils.errors import InvalidInput
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = [
    "Donation ID", "Date", "Donor", "Email", "Telegram ID", "Campaign",
    "Amount", "Currency", "Payment Method", "Status",
]

DONOR_COLUMNS = [
    "Name", "Email", "Contact", "Address", "Telegram ID",
    "Total Donated", "Donation Count", "Joined Date",
]


def _amount(options: dict, key: str) -> Optional[float]:
    if not options.get(key):
        return None
    try:
        value = float(options[key])
    except ValueError as e:
        raise InvalidInput(f"{key}= must be a number.") from e
    if value < 0:
        raise InvalidInput(f"{key}= cannot be negative.")
    return value


def parse_filters(args: list[str]) -> dict:
    """
    Turn key=value command arguments into donation search filters.

    Raises:
        InvalidInput: Every problem found, reported together.
    """
    _, options = parse_options(args)
    filters, errors = {}, []
    for key, name in (("from", "start"), ("to", "end")):
        if options.get(key):
            try:
                filters[name] = date.fromisoformat(options[key])
            except ValueError:
                errors.append(f"{key}= must use the YYYY-MM-DD format.")
    if options.get("campaign"):
        filters["campaign_id"] = parse_id(options["campaign"])
        if filters["campaign_id"] is None:
            errors.append("campaign= must be a campaign number.")
    if options.get("method"):
        filters["payment_method"] = options["method"].lower()
    if options.get("status"):
        filters["status"] = options["status"].lower()
    for key, name in (("min", "min_amount"), ("max", "max_amount")):
        try:
            value = _amount(options, key)
        except InvalidInput as e:
            errors.extend(e.errors)
            continue
        if value is not None:
            filters[name] = value

    if filters.get("start") and filters.get("end") and filters["start"] > filters["end"]:
        errors.append("from= must not be after to=.")
    if ("min_amount" in filters and "max_amount" in filters
            and filters["min_amount"] > filters["max_amount"]):
        errors.append("min= must not be greater than max=.")
    if errors:
        raise InvalidInput(errors)
    return filters


def describe_filters(filters: dict) -> str:
    return ", ".join(f"{k}={v}" for k, v in filters.items()) or "all donations"


class ExportService:
    """Generates downloadable donation and donor exports in CSV and Excel formats."""

    def __init__(self, store_factory=unit_of_work):
        self._store_factory = store_factory

    def _frame(self, **filters) -> pd.DataFrame:
        with self._store_factory() as store:
            rows = store.donations.search(**filters)

        data = [
            {
                "Donation ID": r["id"],
                "Date": r["created_at"].strftime("%Y-%m-%d %H:%M"),
                "Donor": r.get("donor_name") or "",
                "Email": r.get("donor_email") or "",
                "Telegram ID": r["user_id"],
                "Campaign": r.get("campaign_title") or "",
                "Amount": float(r["amount"]),
                "Currency": r["currency"],
                "Payment Method": r["payment_method"],
                "Status": r["status"],
            }
            for r in rows
        ]
        return pd.DataFrame(data, columns=COLUMNS)

    def export_csv(self, **filters) -> io.BytesIO:
        """
        Export filtered donations as a CSV file.

        Args:
            **filters: Keyword filters accepted by DonationRepository.search
                (start, end, campaign_id, payment_method, min_amount, max_amount, status).

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        df = self._frame(**filters)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} donations as CSV")
        return buffer

    def export_excel(self, **filters) -> io.BytesIO:
        """
        Export filtered donations as an Excel (.xlsx) file with a summary sheet.

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        df = self._frame(**filters)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Donations", index=False)

            if not df.empty:
                summary = (
                    df.groupby("Payment Method")["Amount"]
                    .agg(["count", "sum"])
                    .reset_index()
                )
                summary.columns = ["Payment Method", "Donations", "Total"]
                summary.to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} donations as Excel")
        return buffer

    def _donor_frame(self, search: Optional[str] = None) -> pd.DataFrame:
        with self._store_factory() as store:
            rows = store.donors.list_with_totals(search)

        data = [
            {
                "Name": r["full_name"],
                "Email": r.get("email") or "",
                "Contact": r.get("contact_number") or "",
                "Address": r.get("address") or "",
                "Telegram ID": r["telegram_id"],
                "Total Donated": float(r["total_donated"]),
                "Donation Count": int(r["donation_count"]),
                "Joined Date": r["created_at"].strftime("%Y-%m-%d") if r.get("created_at") else "",
            }
            for r in rows
        ]
        return pd.DataFrame(data, columns=DONOR_COLUMNS)

    def export_donors_csv(self, search: Optional[str] = None) -> io.BytesIO:
        """Export donors with their lifetime totals as CSV."""
        df = self._donor_frame(search)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} donors as CSV")
        return buffer

    def export_donors_excel(self, search: Optional[str] = None) -> io.BytesIO:
        """Export donors as Excel; the 'Donors' sheet ends with a TOTAL row."""
        df = self._donor_frame(search)
        total = {column: "" for column in DONOR_COLUMNS}
        total.update({
            "Name": "TOTAL",
            "Total Donated": df["Total Donated"].sum() if not df.empty else 0.0,
            "Donation Count": int(df["Donation Count"].sum()) if not df.empty else 0,
        })
        total_row = pd.DataFrame([total], columns=DONOR_COLUMNS)
        sheet = pd.concat([df, total_row], ignore_index=True) if not df.empty else total_row

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            sheet.to_excel(writer, sheet_name="Donors", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} donors as Excel")
        return buffer
