"""
handlers/start_handler.py
--------------------------
Handles /start, /help, /myid, /register and /profile.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import is_admin, registered_only
from security.rate_limiter import rate_limited
from services.donor_service import DonorService
from utils.args import split_pipes
from utils.errors import DonorBotError, user_message
from utils.logger import get_logger

logger = get_logger(__name__)
donor_service = DonorService()

HELP_TEXT = """
🤝 *HopeDonor* helps you support our work.

*Getting started*
/register Name | email | phone | address
/profile - your donor profile
/myid - your Telegram ID

*Giving*
/campaigns - active campaigns
/donate <amount> <method> [options] - make a donation
/donations - your donation history
/receipt <id> - download a receipt

*Recurring donations*
/recurring - your recurring donations
/reminders - reminders waiting for an answer
/confirm <id> - go ahead with a reminded donation
/cancel <id> - pause that recurring donation

*Contact*
/contact Subject | message - write to the NGO team

Methods: upi, netbanking, card, wallet, cash, other
Options: campaign=<id> every=daily|weekly|monthly|yearly start=YYYY-MM-DDTHH:MM
until=YYYY-MM-DD times=<n> reference=<txn id>
"""

ADMIN_HELP_TEXT = """
*Admin*
/admin - dashboard
/campaign\\_add Title | goal | start | end | description
/campaign\\_status <id> <active|paused|completed>
/expense\\_add Title | amount | date | description
/export\\_csv, /export\\_excel [from=..] [to=..] [campaign=..] [method=..]
    [min=..] [max=..] [status=..]
/export\\_donors\\_csv, /export\\_donors\\_excel [search]
/donors [search] - donors with totals
/donor <telegram id> - one donor in detail
/requirements - planned needs
/requirement\\_add Title | budget | start | end | description
/requirement\\_update <id> | Title | budget | start | end | description
/requirement\\_delete <id>
/messages - messages from donors
/report [from] [to] - financial report PDF
/audit - recent admin actions
"""


@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - greet the user and point at /register."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")

    registered = donor_service.is_registered(user.id)
    next_step = (
        "Use /campaigns to see where your help is needed, or /donate to give."
        if registered
        else "Register once with:\n/register Full Name | email | phone | address"
    )
    await update.message.reply_text(
        f"Hello {user.first_name}! 👋\n"
        f"Welcome to HopeDonor.\n\n{next_step}\n\n"
        f"Type /help to see every command."
    )


@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    text = HELP_TEXT
    if is_admin(update.effective_user.id):
        text += ADMIN_HELP_TEXT
    await update.message.reply_text(text, parse_mode="Markdown")


async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show the user's Telegram ID (used for ADMIN_USER_IDS)."""
    user = update.effective_user
    await update.message.reply_text(f"🆔 Your Telegram ID: `{user.id}`", parse_mode="Markdown")


@rate_limited
async def register_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /register - create or update the donor profile.

    Format:
        /register Full Name | email | phone | address
    """
    user = update.effective_user
    parts = split_pipes(context.args) if context.args else []
    if len(parts) < 4:
        await update.message.reply_text(
            "📝 Register as a donor:\n\n"
            "/register Full Name | email | phone | address\n\n"
            "Example:\n"
            "/register Asha Verma | asha@example.com | +91 98765 43210 | 4 Lake Road, Pune 411001"
        )
        return

    full_name, email, phone = parts[0], parts[1], parts[2]
    address = " | ".join(parts[3:])
    try:
        donor = donor_service.register(user.id, full_name, email, phone, address)
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return

    await update.message.reply_text(
        f"✅ Thank you, {donor['full_name']}! You are registered.\n"
        f"Use /donate to make your first donation."
    )


@registered_only
@rate_limited
async def profile_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /profile - show the stored donor details."""
    try:
        text = donor_service.profile_text(update.effective_user.id)
    except DonorBotError as e:
        text = user_message(e)
    await update.message.reply_text(text)
