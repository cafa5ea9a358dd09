"""
services/admin_service.py
-------------------------
Admin dashboard figures and the audit trail.
"""

from config import DEFAULT_CURRENCY
from repositories.store import unit_of_work
from utils.errors import NotFound
from utils.logger import get_logger

logger = get_logger(__name__)


class AdminService:
    """Read-only overview for admins plus audit recording."""

    def __init__(self, store_factory=unit_of_work):
        self._store_factory = store_factory

    def dashboard(self) -> dict:
        """
        Figures shown by /admin.

        Returns:
            Dict with 'total_amount', 'donation_count', 'monthly',
            'active_recurring', 'pending_reminders' and 'campaigns'.
        """
        with self._store_factory() as store:
            data = store.donations.get_aggregates(months=12)
            data["active_recurring"] = store.recurring.count_active()
            data["pending_reminders"] = store.reminders.count_pending()
            data["campaigns"] = store.campaigns.list("active")
        return data

    def dashboard_text(self) -> str:
        d = self.dashboard()
        lines = [
            "📊 Admin dashboard\n",
            f"  Total raised: {DEFAULT_CURRENCY} {d['total_amount']:,.2f} ({d['donation_count']} donations)",
            f"  Active recurring series: {d['active_recurring']}",
            f"  Pending reminders: {d['pending_reminders']}",
        ]
        if d["monthly"]:
            lines.append("\n📅 Last months:")
            lines += [f"  {m['period']}: {m['total']:,.2f}" for m in d["monthly"]]
        if d["campaigns"]:
            lines.append("\n📣 Active campaigns:")
            lines += [f"  • {c}" for c in d["campaigns"]]
        return "\n".join(lines)

    def record(self, admin_id: int, action: str, details: str = "") -> None:
        with self._store_factory() as store:
            store.audit.add(admin_id, action, details)

    def audit_text(self, limit: int = 20) -> str:
        with self._store_factory() as store:
            entries = store.audit.recent(limit)
        if not entries:
            return "📭 The audit log is empty."
        lines = ["🧾 Recent admin actions:\n"]
        for a in entries:
            lines.append(
                f"  {a['created_at']:%Y-%m-%d %H:%M} | {a['admin_id']} | {a['action']} {a['details'] or ''}".rstrip()
            )
        return "\n".join(lines)

    def donor_detail(self, telegram_id: int, limit: int = 10) -> dict:
        """
        One donor's profile, lifetime totals and latest donations.

        Raises:
            NotFound: No donor with that Telegram ID.
        """
        with self._store_factory() as store:
            donor = store.donors.get_by_telegram_id(telegram_id)
            if donor is None:
                raise NotFound("User not found.")
            return {
                "donor": donor,
                "summary": store.donations.get_user_summary(telegram_id),
                "donations": store.donations.get_by_user(telegram_id, limit),
            }

    def donor_detail_text(self, telegram_id: int) -> str:
        detail = self.donor_detail(telegram_id)
        donor, summary = detail["donor"], detail["summary"]
        lines = [
            f"👤 {donor['full_name']} (id {donor['telegram_id']})",
            f"  Email: {donor.get('email') or '-'}",
            f"  Contact: {donor.get('contact_number') or '-'}",
            f"  Address: {donor.get('address') or '-'}",
            f"  Total: {DEFAULT_CURRENCY} {summary['total']:,.2f} over {summary['count']} donation(s)",
        ]
        if detail["donations"]:
            lines.append("\n📜 Latest donations:")
            lines += [f"  • {d}" for d in detail["donations"]]
        return "\n".join(lines)

    def search_donors(self, search: str | None = None) -> list[dict]:
        """Donors with lifetime totals, optionally matching a name/email fragment."""
        with self._store_factory() as store:
            return store.donors.list_with_totals(search)

    def donors_text(self, search: str | None = None, limit: int = 30) -> str:
        donors = self.search_donors(search)
        if not donors:
            return f"📭 No donors match '{search}'." if search else "📭 No donors registered yet."
        header = f"👥 Donors matching '{search}':\n" if search else "👥 Donors:\n"
        lines = [header]
        for d in donors[:limit]:
            lines.append(
                f"  {d['telegram_id']} | {d['full_name']} | {d.get('email') or '-'} | "
                f"{d['total_donated']:,.2f} ({d['donation_count']})"
            )
        if len(donors) > limit:
            lines.append(f"\n…and {len(donors) - limit} more. Use /export_donors_csv for the full list.")
        lines.append("\nDetails: /donor <telegram id>")
        return "\n".join(lines)
