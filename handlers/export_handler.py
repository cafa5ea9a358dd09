"""
handlers/export_handler.py
---------------------------
Handles admin data export commands (CSV, Excel).
Delegates to ExportService.

Donation filters (all optional):
    from=YYYY-MM-DD to=YYYY-MM-DD campaign=<id> method=<payment method>
    min=<amount> max=<amount> status=<status>
Donor exports take an optional name/email fragment.
"""

from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import admin_only
from services.admin_service import AdminService
from services.export_service import ExportService, describe_filters, parse_filters
from utils.errors import DonorBotError, user_message
from utils.logger import get_logger

logger = get_logger(__name__)
export_service = ExportService()
admin_service = AdminService()


@admin_only
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_csv command - send filtered donations as CSV.
    Example: /export_csv from=2026-01-01 to=2026-03-31 method=upi min=1000
    """
    try:
        filters = parse_filters(context.args or [])
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return

    await update.message.reply_text("📄 Preparing CSV export...")

    try:
        buffer = export_service.export_csv(**filters)
        admin_service.record(update.effective_user.id, "export_csv", describe_filters(filters))
        await update.message.reply_document(
            document=buffer,
            filename=f"donations_{date.today():%Y%m%d}.csv",
            caption=f"📊 Donations export ({describe_filters(filters)})",
        )
    except DonorBotError as e:
        logger.error(f"CSV export failed: {e}")
        await update.message.reply_text(user_message(e))


@admin_only
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_excel command - send filtered donations as Excel.
    Example: /export_excel campaign=2 status=completed
    """
    try:
        filters = parse_filters(context.args or [])
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return

    await update.message.reply_text("📊 Preparing Excel export...")

    try:
        buffer = export_service.export_excel(**filters)
        admin_service.record(update.effective_user.id, "export_excel", describe_filters(filters))
        await update.message.reply_document(
            document=buffer,
            filename=f"donations_{date.today():%Y%m%d}.xlsx",
            caption=f"📊 Donations export ({describe_filters(filters)})",
        )
    except DonorBotError as e:
        logger.error(f"Excel export failed: {e}")
        await update.message.reply_text(user_message(e))


@admin_only
async def export_donors_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_donors_csv command - donors with lifetime totals.
    Example: /export_donors_csv verma
    """
    search = " ".join(context.args or []).strip() or None
    await update.message.reply_text("📄 Preparing donor export...")
    try:
        buffer = export_service.export_donors_csv(search)
        admin_service.record(update.effective_user.id, "export_donors_csv", search or "all donors")
        await update.message.reply_document(
            document=buffer,
            filename=f"donors_{date.today():%Y%m%d}.csv",
            caption=f"👥 Donors export ({search or 'all donors'})",
        )
    except DonorBotError as e:
        logger.error(f"Donor CSV export failed: {e}")
        await update.message.reply_text(user_message(e))


@admin_only
async def export_donors_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export_donors_excel command - donors sheet with a TOTAL row."""
    search = " ".join(context.args or []).strip() or None
    await update.message.reply_text("📊 Preparing donor export...")
    try:
        buffer = export_service.export_donors_excel(search)
        admin_service.record(update.effective_user.id, "export_donors_excel", search or "all donors")
        await update.message.reply_document(
            document=buffer,
            filename=f"donors_{date.today():%Y%m%d}.xlsx",
            caption=f"👥 Donors export ({search or 'all donors'})",
        )
    except DonorBotError as e:
        logger.error(f"Donor Excel export failed: {e}")
        await update.message.reply_text(user_message(e))
