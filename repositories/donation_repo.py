"""
repositories/donation_repo.py
-----------------------------
Data access layer for donations.
All SQL queries related to the `donations` table live here.
"""

from datetime import date
from typing import Optional

from psycopg2.extras import Json

from db.connection import connection_scope
from models.donation import Donation
from utils.logger import get_logger

logger = get_logger(__name__)


class DonationRepository:
    """Repository for CRUD and aggregate queries on the donations table."""

    def __init__(self, conn=None):
        self._conn = conn

    # ── CREATE ────────────────────────────────────────────

    def add(self, donation: Donation) -> Donation:
        """
        Insert a new donation.

        Args:
            donation: The Donation domain object to persist.

        Returns:
            The same Donation with its `id` and `created_at` populated.
        """
        sql = """
            INSERT INTO donations
                (user_id, campaign_id, amount, currency, payment_method,
                 payment_details, status, receipt_path)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    donation.user_id, donation.campaign_id, donation.amount,
                    donation.currency, donation.payment_method,
                    Json(donation.payment_details or {}), donation.status,
                    donation.receipt_path,
                ))
                row = cur.fetchone()
        donation.id = row["id"]
        donation.created_at = row["created_at"]
        logger.info(f"Added donation #{donation.id} for user {donation.user_id}")
        return donation

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, donation_id: int, user_id: Optional[int] = None) -> Optional[Donation]:
        """Fetch a single donation, optionally scoped to its donor."""
        sql = "SELECT * FROM donations WHERE id = %s"
        params: list = [donation_id]
        if user_id is not None:
            sql += " AND user_id = %s"
            params.append(user_id)
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql + ";", params)
                row = cur.fetchone()
        return self._row_to_donation(row) if row else None

    def get_by_user(self, user_id: int, limit: int = 20) -> list[Donation]:
        """Most recent donations of a donor."""
        sql = """
            SELECT * FROM donations WHERE user_id = %s
            ORDER BY created_at DESC, id DESC LIMIT %s;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id, limit))
                return [self._row_to_donation(r) for r in cur.fetchall()]

    def search(self, start: Optional[date] = None, end: Optional[date] = None,
               campaign_id: Optional[int] = None,
               payment_method: Optional[str] = None,
               min_amount: Optional[float] = None,
               max_amount: Optional[float] = None,
               status: Optional[str] = None) -> list[dict]:
        """
        Filtered donation listing joined with donor and campaign names.
        Used by the admin export. Amount bounds are inclusive.

        Returns:
            List of dicts ordered by creation time descending.
        """
        sql = """
            SELECT d.id, d.created_at, d.amount, d.currency, d.payment_method, d.status,
                   d.user_id, u.full_name AS donor_name, u.email AS donor_email,
                   c.title AS campaign_title
            FROM donations d
            JOIN donors u ON u.telegram_id = d.user_id
            LEFT JOIN campaigns c ON c.id = d.campaign_id
            WHERE TRUE
        """
        params: list = []
        if start:
            sql += " AND d.created_at::date >= %s"
            params.append(start)
        if end:
            sql += " AND d.created_at::date <= %s"
            params.append(end)
        if campaign_id:
            sql += " AND d.campaign_id = %s"
            params.append(campaign_id)
        if payment_method:
            sql += " AND d.payment_method = %s"
            params.append(payment_method)
        if min_amount is not None:
            sql += " AND d.amount >= %s"
            params.append(min_amount)
        if max_amount is not None:
            sql += " AND d.amount <= %s"
            params.append(max_amount)
        if status:
            sql += " AND d.status = %s"
            params.append(status)
        sql += " ORDER BY d.created_at DESC, d.id DESC;"

        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [
                    {**r, "amount": float(r["amount"])}
                    for r in cur.fetchall()
                ]

    def get_user_summary(self, user_id: int) -> dict:
        """
        Lifetime totals of one donor.

        Returns:
            Dict with keys 'count', 'total', 'last_donation_at'.
        """
        sql = """
            SELECT COUNT(*) AS count, COALESCE(SUM(amount), 0) AS total,
                   MAX(created_at) AS last_donation_at
            FROM donations WHERE user_id = %s AND status = 'completed';
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                row = cur.fetchone()
        return {
            "count": int(row["count"]),
            "total": float(row["total"]),
            "last_donation_at": row["last_donation_at"],
        }

    def get_aggregates(self, months: int = 12) -> dict:
        """
        Overall totals and the per-month series for the admin dashboard.

        Returns:
            {'total_amount', 'donation_count', 'monthly': [{'period', 'total'}, ...]}
            with the monthly series in chronological order.
        """
        totals_sql = """
            SELECT COALESCE(SUM(amount), 0) AS total_amount, COUNT(*) AS donation_count
            FROM donations WHERE status = 'completed';
        """
        monthly_sql = """
            SELECT to_char(created_at, 'YYYY-MM') AS period, SUM(amount) AS total
            FROM donations WHERE status = 'completed'
            GROUP BY period ORDER BY period DESC LIMIT %s;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(totals_sql)
                totals = cur.fetchone()
                cur.execute(monthly_sql, (months,))
                monthly = [
                    {"period": r["period"], "total": float(r["total"])}
                    for r in cur.fetchall()
                ]
        monthly.reverse()
        return {
            "total_amount": float(totals["total_amount"]),
            "donation_count": int(totals["donation_count"]),
            "monthly": monthly,
        }

    def get_stats(self, start: date, end: date) -> dict:
        """
        Donation statistics for the financial report.

        Returns:
            Dict with 'count', 'total', 'average', 'minimum', 'maximum',
            'by_method' and 'monthly'.
        """
        where = "status = 'completed' AND created_at::date BETWEEN %s AND %s"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(f"""
                    SELECT COUNT(*) AS count, COALESCE(SUM(amount), 0) AS total,
                           COALESCE(AVG(amount), 0) AS average,
                           COALESCE(MIN(amount), 0) AS minimum,
                           COALESCE(MAX(amount), 0) AS maximum
                    FROM donations WHERE {where};
                """, (start, end))
                stats = cur.fetchone()
                cur.execute(f"""
                    SELECT payment_method, COUNT(*) AS count, SUM(amount) AS total
                    FROM donations WHERE {where}
                    GROUP BY payment_method ORDER BY total DESC;
                """, (start, end))
                by_method = cur.fetchall()
                cur.execute(f"""
                    SELECT to_char(created_at, 'YYYY-MM') AS month, COUNT(*) AS count,
                           SUM(amount) AS total
                    FROM donations WHERE {where}
                    GROUP BY month ORDER BY month;
                """, (start, end))
                monthly = cur.fetchall()
        return {
            "count": int(stats["count"]),
            "total": float(stats["total"]),
            "average": float(stats["average"]),
            "minimum": float(stats["minimum"]),
            "maximum": float(stats["maximum"]),
            "by_method": [
                {"payment_method": r["payment_method"], "count": int(r["count"]), "total": float(r["total"])}
                for r in by_method
            ],
            "monthly": [
                {"month": r["month"], "count": int(r["count"]), "total": float(r["total"])}
                for r in monthly
            ],
        }

    def get_top_donors(self, start: date, end: date, limit: int = 10) -> dict:
        """Distinct donor count and the biggest donors in a period."""
        where = "d.status = 'completed' AND d.created_at::date BETWEEN %s AND %s"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT COUNT(DISTINCT d.user_id) AS n FROM donations d WHERE {where};",
                    (start, end),
                )
                active = int(cur.fetchone()["n"])
                cur.execute(f"""
                    SELECT u.full_name, COUNT(*) AS count, SUM(d.amount) AS total
                    FROM donations d JOIN donors u ON u.telegram_id = d.user_id
                    WHERE {where}
                    GROUP BY u.telegram_id, u.full_name
                    ORDER BY total DESC LIMIT %s;
                """, (start, end, limit))
                top = [
                    {"full_name": r["full_name"], "count": int(r["count"]), "total": float(r["total"])}
                    for r in cur.fetchall()
                ]
        return {"active_donors": active, "top_donors": top}

    # ── UPDATE ────────────────────────────────────────────

    def set_receipt_path(self, donation_id: int, receipt_path: str) -> bool:
        """Store the generated receipt location on a donation."""
        sql = "UPDATE donations SET receipt_path = %s WHERE id = %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (receipt_path, donation_id))
                return cur.rowcount > 0

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_donation(row: dict) -> Donation:
        """Convert a database row to a Donation domain object."""
        return Donation(
            id=row["id"],
            user_id=row["user_id"],
            campaign_id=row["campaign_id"],
            amount=float(row["amount"]),
            currency=row["currency"],
            payment_method=row["payment_method"],
            payment_details=row["payment_details"] or {},
            status=row["status"],
            receipt_path=row["receipt_path"],
            created_at=row["created_at"],
        )
