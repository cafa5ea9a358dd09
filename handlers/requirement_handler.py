"""
handlers/requirement_handler.py
--------------------------------
Handles NGO requirements (admin) and donor contact messages.
/contact is for registered donors; the rest are admin only.
"""

from telegram import Update
from telegram.ext import ContextTypes

from config import ADMIN_USER_IDS
from security.auth import admin_only, registered_only
from security.rate_limiter import rate_limited
from services.notification_service import TelegramNotifier
from services.requirement_service import (
    ContactService,
    RequirementService,
    admin_alert,
    requirement_fields,
)
from utils.args import parse_id, split_pipes
from utils.errors import DonorBotError, user_message
from utils.logger import get_logger

logger = get_logger(__name__)
requirement_service = RequirementService()
contact_service = ContactService()

REQUIREMENT_USAGE = (
    "Title | budget | [start date] | [end date] | [description]\n"
    "Example: Title | 25000 | 2026-12-01 | 2026-12-31 | Stationery for 200 children"
)


@admin_only
async def requirements_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /requirements - list requirements, newest first."""
    try:
        text = requirement_service.list_text()
    except DonorBotError as e:
        text = user_message(e)
    await update.message.reply_text(text)


@admin_only
async def requirement_add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /requirement_add - record a planned need.

    Format:
        /requirement_add Title | budget | [start date] | [end date] | [description]
    """
    fields = requirement_fields(split_pipes(context.args)) if context.args else None
    if fields is None:
        await update.message.reply_text(f"⚠️ Usage: /requirement_add {REQUIREMENT_USAGE}")
        return
    try:
        requirement = requirement_service.create(update.effective_user.id, **fields)
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return
    await update.message.reply_text(f"✅ Requirement added:\n{requirement}")


@admin_only
async def requirement_update_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /requirement_update - replace a requirement's fields.

    Format:
        /requirement_update <id> | Title | budget | [start date] | [end date] | [description]
    """
    parts = split_pipes(context.args) if context.args else []
    requirement_id = parse_id(parts[0]) if parts else None
    fields = requirement_fields(parts[1:]) if requirement_id else None
    if fields is None:
        await update.message.reply_text(f"⚠️ Usage: /requirement_update <id> | {REQUIREMENT_USAGE}")
        return
    try:
        requirement = requirement_service.update(update.effective_user.id, requirement_id, **fields)
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return
    await update.message.reply_text(f"✅ Requirement updated:\n{requirement}")


@admin_only
async def requirement_delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /requirement_delete <id>."""
    requirement_id = parse_id(context.args[0]) if context.args else None
    if requirement_id is None:
        await update.message.reply_text("⚠️ Usage: /requirement_delete <id>")
        return
    try:
        requirement = requirement_service.delete(update.effective_user.id, requirement_id)
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return
    await update.message.reply_text(f"🗑️ Requirement deleted: {requirement.title}")


@registered_only
@rate_limited
async def contact_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /contact - write to the NGO team.
    Usage: /contact Subject | your message
    """
    parts = split_pipes(context.args) if context.args else []
    if len(parts) < 2:
        await update.message.reply_text("⚠️ Usage: /contact Subject | your message")
        return

    try:
        message = contact_service.send(update.effective_user.id, parts[0], " | ".join(parts[1:]))
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return

    delivered = await TelegramNotifier(context.bot).notify_admins(ADMIN_USER_IDS, admin_alert(message))
    logger.info(f"Contact message #{message.id} forwarded to {delivered} admin(s)")
    await update.message.reply_text("✅ Message sent to the NGO admin.")


@admin_only
async def messages_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /messages - latest donor messages."""
    try:
        text = contact_service.recent_text()
    except DonorBotError as e:
        text = user_message(e)
    await update.message.reply_text(text)
