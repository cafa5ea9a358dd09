"""
repositories/requirement_repo.py
--------------------------------
Data access layer for NGO requirements and donor contact messages.
"""

from typing import Optional

from db.connection import connection_scope
from models.requirement import ContactMessage, Requirement
from utils.logger import get_logger

logger = get_logger(__name__)


class RequirementRepository:
    """Repository for CRUD operations on the requirements table."""

    def __init__(self, conn=None):
        self._conn = conn

    def add(self, requirement: Requirement) -> Requirement:
        """Insert a new requirement and return it with `id` populated."""
        sql = """
            INSERT INTO requirements
                (title, description, budget_amount, tentative_start, tentative_end, created_by)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING id, created_at, updated_at;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    requirement.title, requirement.description, requirement.budget_amount,
                    requirement.tentative_start, requirement.tentative_end, requirement.created_by,
                ))
                row = cur.fetchone()
        requirement.id = row["id"]
        requirement.created_at = row["created_at"]
        requirement.updated_at = row["updated_at"]
        logger.info(f"Added requirement '{requirement.title}' #{requirement.id}")
        return requirement

    def get_by_id(self, requirement_id: int) -> Optional[Requirement]:
        sql = "SELECT * FROM requirements WHERE id = %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (requirement_id,))
                row = cur.fetchone()
        return self._row_to_requirement(row) if row else None

    def list(self) -> list[Requirement]:
        """All requirements, newest first."""
        sql = "SELECT * FROM requirements ORDER BY created_at DESC, id DESC;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_requirement(r) for r in cur.fetchall()]

    def update(self, requirement: Requirement) -> bool:
        """Overwrite the editable fields of an existing requirement."""
        sql = """
            UPDATE requirements
            SET title = %s, description = %s, budget_amount = %s,
                tentative_start = %s, tentative_end = %s, updated_at = NOW()
            WHERE id = %s;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    requirement.title, requirement.description, requirement.budget_amount,
                    requirement.tentative_start, requirement.tentative_end, requirement.id,
                ))
                return cur.rowcount > 0

    def delete(self, requirement_id: int) -> bool:
        sql = "DELETE FROM requirements WHERE id = %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (requirement_id,))
                return cur.rowcount > 0

    @staticmethod
    def _row_to_requirement(row: dict) -> Requirement:
        return Requirement(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            budget_amount=float(row["budget_amount"]),
            tentative_start=row["tentative_start"],
            tentative_end=row["tentative_end"],
            created_by=row["created_by"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


class MessageRepository:
    """Repository for the contact_messages table."""

    def __init__(self, conn=None):
        self._conn = conn

    def add(self, message: ContactMessage) -> ContactMessage:
        sql = """
            INSERT INTO contact_messages (user_id, name, email, subject, message)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    message.user_id, message.name, message.email, message.subject, message.message,
                ))
                row = cur.fetchone()
        message.id = row["id"]
        message.created_at = row["created_at"]
        logger.info(f"Stored contact message #{message.id} from {message.user_id}")
        return message

    def recent(self, limit: int = 20) -> list[ContactMessage]:
        """Latest messages, newest first."""
        sql = "SELECT * FROM contact_messages ORDER BY created_at DESC, id DESC LIMIT %s;"
        with connection_scope(self._conn) as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (limit,))
                return [
                    ContactMessage(
                        id=r["id"], user_id=r["user_id"], name=r["name"], email=r["email"],
                        subject=r["subject"], message=r["message"], created_at=r["created_at"],
                    )
                    for r in cur.fetchall()
                ]
