"""
handlers/recurring_handler.py
------------------------------
Handles recurring donations and their reminders:
/recurring, /reminders, /confirm, /cancel and the inline Confirm/Cancel buttons.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import registered_only
from security.rate_limiter import rate_limited
from services.donation_service import DonationService
from services.reminder_resolver import ReminderResolver
from utils.args import parse_id
from utils.errors import DonorBotError, user_message
from utils.logger import get_logger

logger = get_logger(__name__)
donation_service = DonationService()
resolver = ReminderResolver()


def _confirm_text(reminder_id: int, donor_id: int) -> str:
    try:
        result = resolver.confirm(reminder_id, donor_id)
    except DonorBotError as e:
        return user_message(e)

    d, r = result.donation, result.recurring
    text = f"✅ Donation #{d.id} of {d.currency} {d.amount:,.2f} recorded. Thank you!"
    if r.next_run:
        text += f"\n📅 Next one: {r.next_run:%Y-%m-%d %H:%M %Z}"
    else:
        text += "\n🏁 That was the last donation of this series."
    text += f"\nUse /receipt {d.id} for your receipt."
    return text


def _cancel_text(reminder_id: int, donor_id: int) -> str:
    try:
        resolver.cancel(reminder_id, donor_id)
    except DonorBotError as e:
        return user_message(e)
    return "⏸️ Reminder canceled. Your recurring donation is paused."


@registered_only
@rate_limited
async def recurring_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /recurring command - list the donor's recurring donations."""
    await update.message.reply_text(donation_service.recurring_text(update.effective_user.id))


@registered_only
@rate_limited
async def reminders_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /reminders command - list reminders waiting for an answer."""
    await update.message.reply_text(donation_service.reminders_text(update.effective_user.id))


@registered_only
@rate_limited
async def confirm_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /confirm <id> - go ahead with a reminded donation.
    Usage: /confirm 3
    """
    reminder_id = parse_id(context.args[0]) if context.args else None
    if reminder_id is None:
        await update.message.reply_text("⚠️ Usage: /confirm <reminder id>\nSee /reminders.")
        return
    await update.message.reply_text(_confirm_text(reminder_id, update.effective_user.id))


@registered_only
@rate_limited
async def cancel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /cancel <id> - decline a reminder and pause its series.
    Usage: /cancel 3
    """
    reminder_id = parse_id(context.args[0]) if context.args else None
    if reminder_id is None:
        await update.message.reply_text("⚠️ Usage: /cancel <reminder id>\nSee /reminders.")
        return
    await update.message.reply_text(_cancel_text(reminder_id, update.effective_user.id))


@rate_limited
async def reminder_button(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle the inline buttons attached to reminder notifications."""
    query = update.callback_query
    await query.answer()

    action, _, raw_id = (query.data or "").partition(":")
    reminder_id = parse_id(raw_id)
    if reminder_id is None or action not in ("confirm", "cancel"):
        return

    if action == "confirm":
        text = _confirm_text(reminder_id, update.effective_user.id)
    else:
        text = _cancel_text(reminder_id, update.effective_user.id)
    await query.edit_message_text(text)
