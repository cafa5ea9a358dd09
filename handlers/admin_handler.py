"""
handlers/admin_handler.py
--------------------------
Handles /admin, /report, /audit, /donors and /donor.
"""

from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import admin_only
from services.admin_service import AdminService
from services.report_service import ReportService
from utils.args import parse_id
from utils.errors import DonorBotError, user_message
from utils.logger import get_logger

logger = get_logger(__name__)
admin_service = AdminService()
report_service = ReportService()


@admin_only
async def admin_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /admin command - dashboard summary."""
    try:
        text = admin_service.dashboard_text()
    except DonorBotError as e:
        text = user_message(e)
    await update.message.reply_text(text)


@admin_only
async def report_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /report command - financial report PDF.

    Usage:
        /report                        → from January 1st until today
        /report 2026-01-01 2026-06-30  → explicit range
    """
    today = date.today()
    start, end = date(today.year, 1, 1), today
    if context.args:
        try:
            start = date.fromisoformat(context.args[0])
            if len(context.args) >= 2:
                end = date.fromisoformat(context.args[1])
        except ValueError:
            await update.message.reply_text("⚠️ Usage: /report [YYYY-MM-DD] [YYYY-MM-DD]")
            return

    await update.message.reply_text("📑 Building the financial report...")

    try:
        report = report_service.build(start, end)
        path = report_service.render_pdf(report)
        admin_service.record(update.effective_user.id, "report", f"{start} - {end}")
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return

    with open(path, "rb") as fh:
        await update.message.reply_document(
            document=fh,
            filename=f"financial-report-{start}-{end}.pdf",
            caption=(
                f"📑 {start} to {end}\n"
                f"Donations {report.donations['total']:,.2f} | "
                f"Expenditures {report.expenditures['total']:,.2f} | "
                f"Net {report.net_balance:,.2f}"
            ),
        )


@admin_only
async def audit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /audit command - recent admin actions."""
    await update.message.reply_text(admin_service.audit_text())


@admin_only
async def donors_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /donors - donors with lifetime totals.
    Usage: /donors [name or email fragment]
    """
    search = " ".join(context.args or []).strip() or None
    try:
        text = admin_service.donors_text(search)
    except DonorBotError as e:
        text = user_message(e)
    await update.message.reply_text(text)


@admin_only
async def donor_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /donor <telegram id> - one donor's profile and donations."""
    telegram_id = parse_id(context.args[0]) if context.args else None
    if telegram_id is None:
        await update.message.reply_text("⚠️ Usage: /donor <telegram id>")
        return
    try:
        text = admin_service.donor_detail_text(telegram_id)
    except DonorBotError as e:
        text = user_message(e)
    await update.message.reply_text(text)
