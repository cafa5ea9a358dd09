"""
services/requirement_service.py
-------------------------------
NGO requirements (planned needs with a budget) and donor contact messages.
Admin mutations are recorded in the audit trail inside the same transaction.
"""

from typing import Optional

from models.requirement import ContactMessage, Requirement
from repositories.store import unit_of_work
from services.campaign_service import _parse_date, _parse_positive
from utils.errors import InvalidInput, NotFound
from utils.logger import get_logger

logger = get_logger(__name__)

MAX_SUBJECT_LENGTH = 150
MAX_MESSAGE_LENGTH = 2000


def validate_requirement(title: str, budget_amount, tentative_start=None,
                         tentative_end=None, description: str = "") -> Requirement:
    """
    Build an unsaved Requirement from raw admin input.

    Raises:
        InvalidInput: With every validation message.
    """
    errors = []
    if not title or len(title.strip()) < 3:
        errors.append("Requirement title must be at least 3 characters long.")
    budget = _parse_positive(budget_amount, "Budget", errors)
    start = _parse_date(tentative_start, "Start date", errors) if tentative_start else None
    end = _parse_date(tentative_end, "End date", errors) if tentative_end else None
    if start and end and end < start:
        errors.append("End date must be on or after the start date.")
    if errors:
        raise InvalidInput(errors)
    return Requirement(
        title=title.strip(),
        budget_amount=budget,
        description=(description or "").strip(),
        tentative_start=start,
        tentative_end=end,
    )


class RequirementService:
    """Creates, edits, deletes and lists requirements."""

    def __init__(self, store_factory=unit_of_work):
        self._store_factory = store_factory

    def create(self, admin_id: int, title: str, budget_amount, tentative_start=None,
               tentative_end=None, description: str = "") -> Requirement:
        requirement = validate_requirement(title, budget_amount, tentative_start,
                                           tentative_end, description)
        requirement.created_by = admin_id
        with self._store_factory() as store:
            store.requirements.add(requirement)
            store.audit.add(admin_id, "create_requirement",
                            f"Requirement #{requirement.id} {requirement.title}")
        return requirement

    def update(self, admin_id: int, requirement_id: int, title: str, budget_amount,
               tentative_start=None, tentative_end=None, description: str = "") -> Requirement:
        """
        Replace every editable field of a requirement.

        Raises:
            InvalidInput: Bad fields (nothing is written).
            NotFound: No requirement with that id.
        """
        changes = validate_requirement(title, budget_amount, tentative_start,
                                       tentative_end, description)
        with self._store_factory() as store:
            current = store.requirements.get_by_id(requirement_id)
            if current is None:
                raise NotFound("Requirement not found.")
            changes.id = current.id
            changes.created_by = current.created_by
            changes.created_at = current.created_at
            store.requirements.update(changes)
            store.audit.add(admin_id, "update_requirement",
                            f"Requirement #{changes.id} {changes.title}")
            return store.requirements.get_by_id(requirement_id)

    def delete(self, admin_id: int, requirement_id: int) -> Requirement:
        with self._store_factory() as store:
            current = store.requirements.get_by_id(requirement_id)
            if current is None:
                raise NotFound("Requirement not found.")
            store.requirements.delete(requirement_id)
            store.audit.add(admin_id, "delete_requirement",
                            f"Requirement #{current.id} {current.title}")
        return current

    def list_requirements(self) -> list[Requirement]:
        with self._store_factory() as store:
            return store.requirements.list()

    def list_text(self) -> str:
        requirements = self.list_requirements()
        if not requirements:
            return "📭 No requirements yet. Add one with /requirement_add."
        lines = ["📋 Requirements:\n"]
        for r in requirements:
            lines.append(f"  • {r}")
            if r.description:
                lines.append(f"    {r.description}")
        return "\n".join(lines)


class ContactService:
    """Stores messages donors send to the NGO team."""

    def __init__(self, store_factory=unit_of_work):
        self._store_factory = store_factory

    def send(self, user_id: int, subject: str, message: str) -> ContactMessage:
        """
        Save a donor's message, stamped with their profile name and email.

        Raises:
            InvalidInput: Missing or oversized subject/message.
            NotFound: The sender is not a registered donor.
        """
        subject, message = (subject or "").strip(), (message or "").strip()
        errors = []
        if not subject:
            errors.append("Subject is required.")
        elif len(subject) > MAX_SUBJECT_LENGTH:
            errors.append(f"Subject must be at most {MAX_SUBJECT_LENGTH} characters.")
        if not message:
            errors.append("Message is required.")
        elif len(message) > MAX_MESSAGE_LENGTH:
            errors.append(f"Message must be at most {MAX_MESSAGE_LENGTH} characters.")
        if errors:
            raise InvalidInput(errors)

        with self._store_factory() as store:
            donor = store.donors.get_by_telegram_id(user_id)
            if donor is None:
                raise NotFound("User not found.")
            saved = store.messages.add(ContactMessage(
                user_id=user_id,
                name=donor["full_name"],
                email=donor.get("email"),
                subject=subject,
                message=message,
            ))
        logger.info(f"Donor {user_id} sent contact message #{saved.id}")
        return saved

    def recent(self, limit: int = 20) -> list[ContactMessage]:
        with self._store_factory() as store:
            return store.messages.recent(limit)

    def recent_text(self, limit: int = 20) -> str:
        messages = self.recent(limit)
        if not messages:
            return "📭 No messages from donors."
        lines = ["✉️ Messages from donors:\n"]
        for m in messages:
            sender = m.name or str(m.user_id)
            if m.email:
                sender += f" <{m.email}>"
            lines.append(f"#{m.id} {m.created_at:%Y-%m-%d %H:%M} | {sender} (id {m.user_id})")
            lines.append(f"  {m.subject}")
            lines.append(f"  {m.message}\n")
        return "\n".join(lines).rstrip()


def admin_alert(message: ContactMessage) -> str:
    """Text forwarded to admins when a donor writes in."""
    sender = message.name or str(message.user_id)
    return (
        f"✉️ New message #{message.id} from {sender} (id {message.user_id})\n"
        f"Subject: {message.subject}\n\n{message.message}"
    )


def requirement_fields(parts: list[str]) -> Optional[dict]:
    """
    Map 'Title | budget | [start] | [end] | [description]' fields to keyword arguments.
    Returns None when the title or budget is missing.
    """
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    return {
        "title": parts[0],
        "budget_amount": parts[1].replace(",", ""),
        "tentative_start": parts[2] if len(parts) > 2 and parts[2] else None,
        "tentative_end": parts[3] if len(parts) > 3 and parts[3] else None,
        "description": " | ".join(parts[4:]),
    }
