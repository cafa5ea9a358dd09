from datetime import datetime, timezone

import pytest
from telegram.error import Forbidden

from models.reminder import Reminder
from services.notification_service import TelegramNotifier
from utils.errors import NotificationFailure


class StubBot:
    def __init__(self, refuse=()):
        self.refuse = set(refuse)
        self.messages = []

    async def send_message(self, chat_id, text, reply_markup=None):
        if chat_id in self.refuse:
            raise Forbidden("Forbidden: bot was blocked by the user")
        self.messages.append((chat_id, text, reply_markup))


def _reminder():
    return Reminder(id=5, recurring_donation_id=3,
                    scheduled_for=datetime(2026, 1, 31, 9, 0, tzinfo=timezone.utc),
                    message="Reminder: Your recurring donation of INR 500.00 is due.")


@pytest.mark.asyncio
async def test_send_raises_notification_failure():
    notifier = TelegramNotifier(StubBot(refuse={111}))

    with pytest.raises(NotificationFailure, match="blocked"):
        await notifier.send(111, "hello")


@pytest.mark.asyncio
async def test_reminder_carries_buttons(make_series):
    bot = StubBot()
    series = make_series()

    assert await TelegramNotifier(bot).notify_reminder(series, _reminder()) is True

    chat_id, text, markup = bot.messages[0]
    assert chat_id == series.user_id
    assert "/confirm 5" in text
    assert [b.callback_data for b in markup.inline_keyboard[0]] == ["confirm:5", "cancel:5"]


@pytest.mark.asyncio
async def test_refused_reminder_reports_false(make_series):
    series = make_series()
    notifier = TelegramNotifier(StubBot(refuse={series.user_id}))

    assert await notifier.notify_reminder(series, _reminder()) is False


@pytest.mark.asyncio
async def test_admin_broadcast_counts_deliveries():
    bot = StubBot(refuse={2})

    assert await TelegramNotifier(bot).notify_admins([1, 2, 3], "New message") == 2
    assert [m[0] for m in bot.messages] == [1, 3]
