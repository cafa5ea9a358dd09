"""
repositories/donor_repo.py
--------------------------
Data access layer for donor records.
"""

from typing import Optional

from db.connection import connection_scope
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "telegram_id, full_name, email, contact_number, address, created_at"


class DonorRepository:
    """Repository for CRUD operations on the donors table."""

    def __init__(self, conn=None):
        self._conn = conn

    def upsert(self, telegram_id: int, full_name: str, email: Optional[str] = None,
               contact_number: Optional[str] = None, address: Optional[str] = None) -> dict:
        """
        Insert a donor, or update the profile if they are already registered.
        Uses PostgreSQL's ON CONFLICT (upsert) for atomicity.

        Returns:
            Donor dict: {'telegram_id', 'full_name', 'email', 'contact_number', 'address', 'created_at'}.
        """
        sql = f"""
            INSERT INTO donors (telegram_id, full_name, email, contact_number, address)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (telegram_id) DO UPDATE
                SET full_name = EXCLUDED.full_name,
                    email = EXCLUDED.email,
                    contact_number = EXCLUDED.contact_number,
                    address = EXCLUDED.address
            RETURNING {_COLUMNS};
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (telegram_id, full_name, email, contact_number, address))
                row = cur.fetchone()
        logger.info(f"Saved donor profile for {telegram_id}")
        return dict(row)

    def get_by_telegram_id(self, telegram_id: int) -> Optional[dict]:
        """
        Fetch a donor by their Telegram ID.

        Returns:
            Donor dict or None.
        """
        sql = f"SELECT {_COLUMNS} FROM donors WHERE telegram_id = %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (telegram_id,))
                row = cur.fetchone()
        return dict(row) if row else None

    def count_new(self, start, end) -> int:
        """Number of donors who registered between start and end (inclusive)."""
        sql = "SELECT COUNT(*) AS n FROM donors WHERE created_at::date BETWEEN %s AND %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (start, end))
                return int(cur.fetchone()["n"])

    def list_with_totals(self, search: Optional[str] = None) -> list[dict]:
        """
        Donors with their lifetime donation totals, newest registration first.

        Args:
            search: Optional case-insensitive fragment of the name or email.

        Returns:
            Donor dicts with extra keys 'total_donated' and 'donation_count'.
        """
        sql = f"""
            SELECT {", ".join("u." + c.strip() for c in _COLUMNS.split(","))},
                   COALESCE(SUM(d.amount), 0) AS total_donated,
                   COUNT(d.id) AS donation_count
            FROM donors u
            LEFT JOIN donations d ON d.user_id = u.telegram_id
        """
        params: list = []
        if search:
            sql += " WHERE u.full_name ILIKE %s OR u.email ILIKE %s"
            pattern = f"%{search}%"
            params += [pattern, pattern]
        sql += " GROUP BY u.telegram_id ORDER BY u.created_at DESC, u.telegram_id;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [
                    {**r, "total_donated": float(r["total_donated"]),
                     "donation_count": int(r["donation_count"])}
                    for r in cur.fetchall()
                ]
