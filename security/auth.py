"""
security/auth.py
-----------------
Access checks for the Telegram bot.

    - admin_only: restricts a handler to the Telegram IDs in ADMIN_USER_IDS.
    - registered_only: requires the donor to have completed /register.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from config import ADMIN_USER_IDS
from repositories.donor_repo import DonorRepository
from utils.logger import get_logger

logger = get_logger(__name__)
donor_repo = DonorRepository()


def is_admin(user_id: int) -> bool:
    return user_id in ADMIN_USER_IDS


def admin_only(func: Callable):
    """
    Decorator that restricts a handler to admins.

    Usage:
        @admin_only
        async def my_handler(update, context):
            ...

    Unlike a donor command, an empty ADMIN_USER_IDS locks every admin
    command. Unauthorized attempts are logged.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not is_admin(user.id):
            logger.warning(
                f"🚫 Admin command refused: user_id={user.id}, "
                f"username={user.username}, name={user.first_name}"
            )
            await update.effective_message.reply_text("⛔ This command is for NGO admins only.")
            return

        return await func(update, context, *args, **kwargs)

    return wrapper


def registered_only(func: Callable):
    """Decorator that asks unregistered users to run /register first."""
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if donor_repo.get_by_telegram_id(user.id) is None:
            await update.effective_message.reply_text(
                "📝 Please register first:\n"
                "/register Full Name | email | phone | address"
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
