"""
repositories/campaign_repo.py
-----------------------------
Data access layer for fundraising campaigns and expenditures.
"""

from datetime import date
from typing import Optional

from db.connection import connection_scope
from models.campaign import Campaign, Expenditure
from utils.logger import get_logger

logger = get_logger(__name__)


class CampaignRepository:
    """Repository for CRUD operations on the campaigns table."""

    def __init__(self, conn=None):
        self._conn = conn

    def add(self, campaign: Campaign) -> Campaign:
        """Insert a new campaign and return it with `id` populated."""
        sql = """
            INSERT INTO campaigns (title, description, goal_amount, start_date, end_date, status, created_by)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    campaign.title, campaign.description, campaign.goal_amount,
                    campaign.start_date, campaign.end_date, campaign.status, campaign.created_by,
                ))
                row = cur.fetchone()
        campaign.id = row["id"]
        campaign.created_at = row["created_at"]
        logger.info(f"Added campaign '{campaign.title}' #{campaign.id}")
        return campaign

    def get_by_id(self, campaign_id: int) -> Optional[Campaign]:
        sql = "SELECT * FROM campaigns WHERE id = %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (campaign_id,))
                row = cur.fetchone()
        return self._row_to_campaign(row) if row else None

    def list(self, status: Optional[str] = None) -> list[Campaign]:
        """All campaigns, optionally filtered by status, newest first."""
        sql = "SELECT * FROM campaigns"
        params: list = []
        if status:
            sql += " WHERE status = %s"
            params.append(status)
        sql += " ORDER BY created_at DESC, id DESC;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_campaign(r) for r in cur.fetchall()]

    def add_to_raised(self, campaign_id: int, amount: float) -> bool:
        """Add a completed donation's amount to the campaign total."""
        sql = """
            UPDATE campaigns
            SET raised_amount = raised_amount + %s, updated_at = NOW()
            WHERE id = %s;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (amount, campaign_id))
                return cur.rowcount > 0

    def set_status(self, campaign_id: int, status: str) -> bool:
        sql = "UPDATE campaigns SET status = %s, updated_at = NOW() WHERE id = %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (status, campaign_id))
                return cur.rowcount > 0

    @staticmethod
    def _row_to_campaign(row: dict) -> Campaign:
        """Convert a database row to a Campaign domain object."""
        return Campaign(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            goal_amount=float(row["goal_amount"]),
            raised_amount=float(row["raised_amount"]),
            start_date=row["start_date"],
            end_date=row["end_date"],
            status=row["status"],
            created_by=row["created_by"],
            created_at=row["created_at"],
        )


class ExpenditureRepository:
    """Repository for the expenditures table."""

    def __init__(self, conn=None):
        self._conn = conn

    def add(self, expenditure: Expenditure) -> Expenditure:
        sql = """
            INSERT INTO expenditures (title, description, amount, spent_on, added_by)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    expenditure.title, expenditure.description, expenditure.amount,
                    expenditure.spent_on, expenditure.added_by,
                ))
                row = cur.fetchone()
        expenditure.id = row["id"]
        expenditure.created_at = row["created_at"]
        logger.info(f"Added expenditure '{expenditure.title}' #{expenditure.id}")
        return expenditure

    def get_stats(self, start: date, end: date, top: int = 10) -> dict:
        """
        Expenditure totals and the largest items in a period.

        Returns:
            Dict with 'count', 'total', 'average' and 'top' (list of Expenditure).
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    SELECT COUNT(*) AS count, COALESCE(SUM(amount), 0) AS total,
                           COALESCE(AVG(amount), 0) AS average
                    FROM expenditures WHERE spent_on BETWEEN %s AND %s;
                """, (start, end))
                stats = cur.fetchone()
                cur.execute("""
                    SELECT * FROM expenditures WHERE spent_on BETWEEN %s AND %s
                    ORDER BY amount DESC LIMIT %s;
                """, (start, end, top))
                rows = cur.fetchall()
        return {
            "count": int(stats["count"]),
            "total": float(stats["total"]),
            "average": float(stats["average"]),
            "top": [
                Expenditure(
                    id=r["id"], title=r["title"], description=r["description"],
                    amount=float(r["amount"]), spent_on=r["spent_on"],
                    added_by=r["added_by"], created_at=r["created_at"],
                )
                for r in rows
            ],
        }
