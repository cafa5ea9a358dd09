"""
repositories/reminder_repo.py
-----------------------------
Data access layer for donation reminders.
"""

from datetime import datetime
from typing import Optional

from db.connection import connection_scope
from models.reminder import Reminder
from utils.logger import get_logger

logger = get_logger(__name__)


class ReminderRepository:
    """Repository for CRUD operations on the donation_reminders table."""

    def __init__(self, conn=None):
        self._conn = conn

    def add(self, reminder: Reminder) -> Optional[Reminder]:
        """
        Insert a reminder unless one already exists for the same
        (recurring_donation_id, scheduled_for) pair.

        Returns:
            The reminder with `id` and `created_at` set, or None when the
            unique key rejected it.
        """
        sql = """
            INSERT INTO donation_reminders (recurring_donation_id, scheduled_for, status, message)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (recurring_donation_id, scheduled_for) DO NOTHING
            RETURNING id, created_at;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    reminder.recurring_donation_id, reminder.scheduled_for,
                    reminder.status, reminder.message,
                ))
                row = cur.fetchone()
        if row is None:
            return None
        reminder.id = row["id"]
        reminder.created_at = row["created_at"]
        return reminder

    def get_by_id(self, reminder_id: int) -> Optional[Reminder]:
        sql = "SELECT * FROM donation_reminders WHERE id = %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (reminder_id,))
                row = cur.fetchone()
        return self._row_to_reminder(row) if row else None

    def find(self, recurring_id: int, scheduled_for: datetime) -> Optional[Reminder]:
        """Reminder for one occurrence of a series, if any."""
        sql = """
            SELECT * FROM donation_reminders
            WHERE recurring_donation_id = %s AND scheduled_for = %s;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (recurring_id, scheduled_for))
                row = cur.fetchone()
        return self._row_to_reminder(row) if row else None

    def get_pending_by_user(self, user_id: int) -> list[dict]:
        """
        Pending reminders of a donor joined with their series.

        Returns:
            Dicts with the reminder columns plus 'amount', 'currency', 'frequency'.
        """
        sql = """
            SELECT dr.id, dr.recurring_donation_id, dr.scheduled_for, dr.message,
                   rd.amount, rd.currency, rd.frequency
            FROM donation_reminders dr
            JOIN recurring_donations rd ON rd.id = dr.recurring_donation_id
            WHERE rd.user_id = %s AND dr.status = 'pending'
            ORDER BY dr.scheduled_for ASC;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                return [{**r, "amount": float(r["amount"])} for r in cur.fetchall()]

    def count_pending(self) -> int:
        sql = "SELECT COUNT(*) AS n FROM donation_reminders WHERE status = 'pending';"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                return int(cur.fetchone()["n"])

    def set_status(self, reminder_id: int, status: str) -> bool:
        sql = "UPDATE donation_reminders SET status = %s WHERE id = %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (status, reminder_id))
                updated = cur.rowcount > 0
        logger.info(f"Reminder #{reminder_id} marked {status}")
        return updated

    @staticmethod
    def _row_to_reminder(row: dict) -> Reminder:
        """Convert a database row to a Reminder domain object."""
        return Reminder(
            id=row["id"],
            recurring_donation_id=row["recurring_donation_id"],
            scheduled_for=row["scheduled_for"],
            status=row["status"],
            message=row["message"] or "",
            created_at=row["created_at"],
        )
