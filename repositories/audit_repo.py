"""
repositories/audit_repo.py
--------------------------
Append-only trail of admin actions.
"""

from db.connection import connection_scope
from utils.logger import get_logger

logger = get_logger(__name__)


class AuditRepository:
    """Repository for the admin_audit_logs table."""

    def __init__(self, conn=None):
        self._conn = conn

    def add(self, admin_id: int, action: str, details: str = "") -> None:
        sql = "INSERT INTO admin_audit_logs (admin_id, action, details) VALUES (%s, %s, %s);"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (admin_id, action, details))
        logger.info(f"Audit: admin {admin_id} {action} {details}")

    def recent(self, limit: int = 20) -> list[dict]:
        sql = """
            SELECT admin_id, action, details, created_at FROM admin_audit_logs
            ORDER BY created_at DESC, id DESC LIMIT %s;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (limit,))
                return [dict(r) for r in cur.fetchall()]
