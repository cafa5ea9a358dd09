"""
services/donor_service.py
-------------------------
Donor registration and profile display.
"""

import re

from repositories.donor_repo import DonorRepository
from utils.errors import InvalidInput, NotFound
from utils.logger import get_logger

logger = get_logger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[0-9+()\-\s]{7,20}$")


def validate_profile(full_name: str, email: str, contact_number: str, address: str) -> list[str]:
    """Return every problem with a signup form (empty list when valid)."""
    errors = []
    if not full_name or len(full_name.strip()) < 3:
        errors.append("Full name must be at least 3 characters long.")
    if not email or not EMAIL_RE.match(email.strip()):
        errors.append("Provide a valid email address.")
    if not contact_number or not PHONE_RE.match(contact_number.strip()):
        errors.append("Provide a valid contact number.")
    if not address or len(address.strip()) < 10:
        errors.append("Address must contain at least 10 characters.")
    return errors


class DonorService:
    """Registers donors and renders their profile."""

    def __init__(self, repo: DonorRepository | None = None):
        self.repo = repo or DonorRepository()

    def register(self, telegram_id: int, full_name: str, email: str,
                 contact_number: str, address: str) -> dict:
        """
        Create or update a donor profile.

        Raises:
            InvalidInput: With every validation message.
        """
        errors = validate_profile(full_name, email, contact_number, address)
        if errors:
            raise InvalidInput(errors)
        donor = self.repo.upsert(
            telegram_id,
            full_name.strip(),
            email.strip().lower(),
            contact_number.strip(),
            address.strip(),
        )
        logger.info(f"Donor {telegram_id} registered as {donor['full_name']}")
        return donor

    def get(self, telegram_id: int) -> dict:
        donor = self.repo.get_by_telegram_id(telegram_id)
        if donor is None:
            raise NotFound("You are not registered yet. Use /register first.")
        return donor

    def is_registered(self, telegram_id: int) -> bool:
        return self.repo.get_by_telegram_id(telegram_id) is not None

    def profile_text(self, telegram_id: int) -> str:
        d = self.get(telegram_id)
        return (
            "👤 Your donor profile:\n"
            f"  Name: {d['full_name']}\n"
            f"  Email: {d.get('email') or '-'}\n"
            f"  Phone: {d.get('contact_number') or '-'}\n"
            f"  Address: {d.get('address') or '-'}"
        )
