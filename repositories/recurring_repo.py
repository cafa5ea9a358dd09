"""
repositories/recurring_repo.py
-------------------------------
Data access layer for recurring donations.
All SQL queries related to the `recurring_donations` table live here.
"""

from dataclasses import replace
from datetime import datetime
from typing import Optional

from psycopg2.extras import Json

from db.connection import connection_scope
from models.recurring import RecurringDonation
from utils.logger import get_logger

logger = get_logger(__name__)


class RecurringRepository:
    """Repository for CRUD operations on the recurring_donations table."""

    def __init__(self, conn=None):
        self._conn = conn

    # ── CREATE ────────────────────────────────────────────

    def add(self, recurring: RecurringDonation) -> RecurringDonation:
        """
        Insert a new recurring donation.

        Args:
            recurring: The RecurringDonation to persist.

        Returns:
            A copy with `id` and `created_at` populated.
        """
        sql = """
            INSERT INTO recurring_donations
                (user_id, base_donation_id, amount, currency, payment_method, payment_details,
                 frequency, next_run, end_date, max_occurrences, total_occurrences, status)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    recurring.user_id, recurring.base_donation_id, recurring.amount,
                    recurring.currency, recurring.payment_method,
                    Json(recurring.payment_details or {}), recurring.frequency,
                    recurring.next_run, recurring.end_date, recurring.max_occurrences,
                    recurring.total_occurrences, recurring.status,
                ))
                row = cur.fetchone()
        saved = replace(recurring, id=row["id"], created_at=row["created_at"])
        logger.info(f"Added recurring donation #{saved.id} ({saved.frequency}) for user {saved.user_id}")
        return saved

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, recurring_id: int) -> Optional[RecurringDonation]:
        """Fetch a single recurring donation by ID (ownership is checked by the caller)."""
        sql = "SELECT * FROM recurring_donations WHERE id = %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (recurring_id,))
                row = cur.fetchone()
        return self._row_to_recurring(row) if row else None

    def get_by_user(self, user_id: int) -> list[RecurringDonation]:
        """All recurring donations of a donor, newest first."""
        sql = """
            SELECT * FROM recurring_donations WHERE user_id = %s
            ORDER BY created_at DESC, id DESC;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                return [self._row_to_recurring(r) for r in cur.fetchall()]

    def get_due_in_window(self, start: datetime, end: datetime) -> list[RecurringDonation]:
        """
        Active recurring donations whose next run falls inside [start, end].
        Used by the reminder scanner.
        """
        sql = """
            SELECT * FROM recurring_donations
            WHERE status = 'active'
              AND next_run IS NOT NULL
              AND next_run BETWEEN %s AND %s
            ORDER BY next_run ASC;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (start, end))
                return [self._row_to_recurring(r) for r in cur.fetchall()]

    def count_active(self) -> int:
        """Number of active series."""
        sql = "SELECT COUNT(*) AS n FROM recurring_donations WHERE status = 'active';"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                return int(cur.fetchone()["n"])

    # ── UPDATE ────────────────────────────────────────────

    def save_schedule(self, recurring: RecurringDonation) -> bool:
        """
        Persist the schedule fields of a transitioned record.

        Args:
            recurring: Record produced by one of the services/schedule.py transitions.

        Returns:
            True if a row was updated.
        """
        sql = """
            UPDATE recurring_donations
            SET next_run = %s, status = %s, total_occurrences = %s
            WHERE id = %s;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    recurring.next_run, recurring.status,
                    recurring.total_occurrences, recurring.id,
                ))
                updated = cur.rowcount > 0
        logger.info(
            f"Recurring donation #{recurring.id} -> {recurring.status}, next run {recurring.next_run}"
        )
        return updated

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_recurring(row: dict) -> RecurringDonation:
        """Convert a database row to a RecurringDonation domain object."""
        return RecurringDonation(
            id=row["id"],
            user_id=row["user_id"],
            base_donation_id=row["base_donation_id"],
            amount=float(row["amount"]),
            currency=row["currency"],
            payment_method=row["payment_method"],
            payment_details=row["payment_details"] or {},
            frequency=row["frequency"],
            next_run=row["next_run"],
            end_date=row["end_date"],
            max_occurrences=row["max_occurrences"],
            total_occurrences=row["total_occurrences"],
            status=row["status"],
            created_at=row["created_at"],
        )
