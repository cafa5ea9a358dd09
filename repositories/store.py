"""
repositories/store.py
---------------------
Groups the repositories so a service can touch several tables in one
database transaction.

    with unit_of_work() as store:
        donation = store.donations.add(...)
        store.recurring.save_schedule(...)
"""

from contextlib import contextmanager
from typing import Iterator

from db.connection import transaction
from repositories.audit_repo import AuditRepository
from repositories.campaign_repo import CampaignRepository, ExpenditureRepository
from repositories.donation_repo import DonationRepository
from repositories.donor_repo import DonorRepository
from repositories.recurring_repo import RecurringRepository
from repositories.reminder_repo import ReminderRepository
from repositories.requirement_repo import MessageRepository, RequirementRepository


class DonationStore:
    """All repositories, bound to the same connection when one is given."""

    def __init__(self, conn=None):
        self.donors = DonorRepository(conn)
        self.donations = DonationRepository(conn)
        self.recurring = RecurringRepository(conn)
        self.reminders = ReminderRepository(conn)
        self.campaigns = CampaignRepository(conn)
        self.expenditures = ExpenditureRepository(conn)
        self.audit = AuditRepository(conn)
        self.requirements = RequirementRepository(conn)
        self.messages = MessageRepository(conn)


@contextmanager
def unit_of_work() -> Iterator[DonationStore]:
    """Yield a DonationStore whose writes commit together or not at all."""
    with transaction() as conn:
        yield DonationStore(conn)
