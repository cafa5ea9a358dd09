"""
handlers/campaign_handler.py
-----------------------------
Handles campaign and expenditure commands.
/campaigns is public to registered donors; the rest are admin only.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import admin_only
from security.rate_limiter import rate_limited
from services.campaign_service import CAMPAIGN_STATUSES, CampaignService
from utils.args import parse_id, split_pipes
from utils.errors import DonorBotError, user_message
from utils.logger import get_logger

logger = get_logger(__name__)
campaign_service = CampaignService()


@rate_limited
async def campaigns_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /campaigns - active campaigns with their progress."""
    await update.message.reply_text(campaign_service.active_text())


@admin_only
async def campaign_add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /campaign_add - create a campaign.

    Format:
        /campaign_add Title | goal | start date | [end date] | [description]
    Example:
        /campaign_add Winter Blankets | 50000 | 2026-11-01 | 2027-01-31 | Blankets for 500 families
    """
    parts = split_pipes(context.args) if context.args else []
    if len(parts) < 3:
        await update.message.reply_text(
            "⚠️ Usage: /campaign_add Title | goal | start date | [end date] | [description]\n"
            "Example: /campaign_add Winter Blankets | 50000 | 2026-11-01 | 2027-01-31 | Blankets for 500 families"
        )
        return

    title, goal, start = parts[0], parts[1].replace(",", ""), parts[2]
    end = parts[3] if len(parts) > 3 and parts[3] else None
    description = " | ".join(parts[4:])
    try:
        campaign = campaign_service.create(
            update.effective_user.id, title, goal, start, end, description
        )
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return
    await update.message.reply_text(f"✅ Campaign created:\n{campaign}")


@admin_only
async def campaign_status_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /campaign_status - list campaigns, or change one's status.
    Usage: /campaign_status 2 completed
    """
    if not context.args:
        await update.message.reply_text(campaign_service.admin_text())
        return

    campaign_id = parse_id(context.args[0])
    if campaign_id is None or len(context.args) < 2:
        await update.message.reply_text(
            f"⚠️ Usage: /campaign_status <id> <{'|'.join(CAMPAIGN_STATUSES)}>"
        )
        return

    try:
        campaign = campaign_service.set_status(
            update.effective_user.id, campaign_id, context.args[1].lower()
        )
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return
    await update.message.reply_text(f"✅ Updated:\n{campaign}")


@admin_only
async def expense_add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /expense_add - record NGO spending.

    Format:
        /expense_add Title | amount | [date] | [description]
    """
    parts = split_pipes(context.args) if context.args else []
    if len(parts) < 2:
        await update.message.reply_text(
            "⚠️ Usage: /expense_add Title | amount | [YYYY-MM-DD] | [description]\n"
            "Example: /expense_add School supplies | 12000 | 2026-10-15 | Notebooks and pens"
        )
        return

    spent_on = parts[2] if len(parts) > 2 and parts[2] else None
    try:
        expenditure = campaign_service.add_expenditure(
            update.effective_user.id,
            parts[0],
            parts[1].replace(",", ""),
            spent_on,
            " | ".join(parts[3:]),
        )
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return
    await update.message.reply_text(f"✅ Expenditure recorded:\n{expenditure}")
