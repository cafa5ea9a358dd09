"""
services/notification_service.py
--------------------------------
Delivers notifications over Telegram.

`send` raises NotificationFailure when Telegram rejects a message.
The higher-level helpers are best-effort: they log the failure and report it
as a False / partial result so that callers never roll back on delivery.
"""

from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from telegram.error import TelegramError

from models.recurring import RecurringDonation
from models.reminder import Reminder
from utils.errors import NotificationFailure
from utils.logger import get_logger

logger = get_logger(__name__)


def reminder_keyboard(reminder_id: int) -> InlineKeyboardMarkup:
    """Confirm / Cancel buttons; callback data is '<action>:<reminder id>'."""
    return InlineKeyboardMarkup([[
        InlineKeyboardButton("Confirm", callback_data=f"confirm:{reminder_id}"),
        InlineKeyboardButton("Cancel series", callback_data=f"cancel:{reminder_id}"),
    ]])


class TelegramNotifier:
    """Sends messages through the running bot."""

    def __init__(self, bot):
        self.bot = bot

    async def send(self, chat_id: int, text: str, reply_markup=None) -> None:
        """
        Deliver one message.

        Raises:
            NotificationFailure: Telegram refused the message (blocked bot, bad chat id, network).
        """
        try:
            await self.bot.send_message(chat_id=chat_id, text=text, reply_markup=reply_markup)
        except TelegramError as e:
            raise NotificationFailure(f"Could not message {chat_id}: {e}") from e

    async def notify_reminder(self, recurring: RecurringDonation, reminder: Reminder) -> bool:
        """
        Message the donor about an upcoming occurrence.

        Returns:
            True when Telegram accepted the message, False otherwise.
        """
        text = (
            f"⏰ {reminder.message}\n\n"
            f"Use /confirm {reminder.id} to donate now or /cancel {reminder.id} to pause the series."
        )
        try:
            await self.send(recurring.user_id, text, reply_markup=reminder_keyboard(reminder.id))
        except NotificationFailure as e:
            logger.error(f"Reminder #{reminder.id} not delivered: {e}")
            return False
        logger.info(f"Notified user {recurring.user_id} about reminder #{reminder.id}")
        return True

    async def notify_admins(self, admin_ids, text: str) -> int:
        """Forward text to every admin. Returns how many messages went through."""
        delivered = 0
        for admin_id in admin_ids:
            try:
                await self.send(admin_id, text)
            except NotificationFailure as e:
                logger.warning(str(e))
                continue
            delivered += 1
        return delivered
