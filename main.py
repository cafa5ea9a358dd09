"""
main.py
-------
Entry point for the HopeDonor Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Configure and start the Telegram bot with all handlers.
    - Schedule the recurring-donation reminder scanner.
"""

from telegram import BotCommand
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
)

from config import RATE_LIMIT_WINDOW_SECONDS, REMINDER_SCAN_INTERVAL_SECONDS, TELEGRAM_BOT_TOKEN
from db.connection import init_pool, close_pool
from db.init_db import create_tables
from handlers.admin_handler import (
    admin_command,
    audit_command,
    donor_command,
    donors_command,
    report_command,
)
from handlers.campaign_handler import (
    campaign_add_command,
    campaign_status_command,
    campaigns_command,
    expense_add_command,
)
from handlers.donation_handler import donate_command, donations_command, receipt_command
from handlers.export_handler import (
    export_csv_command,
    export_donors_csv_command,
    export_donors_excel_command,
    export_excel_command,
)
from handlers.recurring_handler import (
    cancel_command,
    confirm_command,
    recurring_command,
    reminder_button,
    reminders_command,
)
from handlers.requirement_handler import (
    contact_command,
    messages_command,
    requirement_add_command,
    requirement_delete_command,
    requirement_update_command,
    requirements_command,
)
from handlers.start_handler import (
    help_command,
    myid_command,
    profile_command,
    register_command,
    start_command,
)
from security.rate_limiter import sweep_rate_limits
from services.notification_service import TelegramNotifier
from services.reminder_scanner import ReminderScanner
from utils.logger import get_logger

logger = get_logger(__name__)


async def scan_reminders(context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Scheduled job: create reminders for recurring donations that are due soon
    and notify their donors.
    """
    scanner = ReminderScanner(notifier=TelegramNotifier(context.bot))
    created = await scanner.scan()
    if created:
        logger.info(f"Reminder scan created {len(created)} reminder(s)")


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("start", "🚀 Start"),
        BotCommand("help", "📖 Help"),
        BotCommand("register", "📝 Register as a donor"),
        BotCommand("profile", "👤 Your profile"),
        BotCommand("campaigns", "📣 Active campaigns"),
        BotCommand("donate", "💝 Make a donation"),
        BotCommand("donations", "📜 Your donations"),
        BotCommand("receipt", "🧾 Download a receipt"),
        BotCommand("recurring", "🔁 Recurring donations"),
        BotCommand("reminders", "⏰ Pending reminders"),
        BotCommand("confirm", "✅ Confirm a reminder"),
        BotCommand("cancel", "⏸️ Cancel a reminder"),
        BotCommand("contact", "✉️ Write to the NGO team"),
        BotCommand("myid", "🆔 Your Telegram ID"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()

    # ── 3. Donor commands ─────────────────────────────────
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("myid", myid_command))
    app.add_handler(CommandHandler("register", register_command))
    app.add_handler(CommandHandler("profile", profile_command))
    app.add_handler(CommandHandler("campaigns", campaigns_command))
    app.add_handler(CommandHandler("donate", donate_command))
    app.add_handler(CommandHandler("donations", donations_command))
    app.add_handler(CommandHandler("receipt", receipt_command))
    app.add_handler(CommandHandler("recurring", recurring_command))
    app.add_handler(CommandHandler("reminders", reminders_command))
    app.add_handler(CommandHandler("confirm", confirm_command))
    app.add_handler(CommandHandler("cancel", cancel_command))
    app.add_handler(CommandHandler("contact", contact_command))
    app.add_handler(CallbackQueryHandler(reminder_button, pattern=r"^(confirm|cancel):\d+$"))

    # ── 4. Admin commands ─────────────────────────────────
    app.add_handler(CommandHandler("admin", admin_command))
    app.add_handler(CommandHandler("campaign_add", campaign_add_command))
    app.add_handler(CommandHandler("campaign_status", campaign_status_command))
    app.add_handler(CommandHandler("expense_add", expense_add_command))
    app.add_handler(CommandHandler("export_csv", export_csv_command))
    app.add_handler(CommandHandler("export_excel", export_excel_command))
    app.add_handler(CommandHandler("export_donors_csv", export_donors_csv_command))
    app.add_handler(CommandHandler("export_donors_excel", export_donors_excel_command))
    app.add_handler(CommandHandler("donors", donors_command))
    app.add_handler(CommandHandler("donor", donor_command))
    app.add_handler(CommandHandler("requirements", requirements_command))
    app.add_handler(CommandHandler("requirement_add", requirement_add_command))
    app.add_handler(CommandHandler("requirement_update", requirement_update_command))
    app.add_handler(CommandHandler("requirement_delete", requirement_delete_command))
    app.add_handler(CommandHandler("messages", messages_command))
    app.add_handler(CommandHandler("report", report_command))
    app.add_handler(CommandHandler("audit", audit_command))

    # ── 5. Schedule background jobs ───────────────────────
    job_queue = app.job_queue
    if job_queue:
        job_queue.run_repeating(
            scan_reminders,
            interval=REMINDER_SCAN_INTERVAL_SECONDS,
            first=10,
            name="reminder_scan",
        )
        logger.info(f"Scheduled reminder scan every {REMINDER_SCAN_INTERVAL_SECONDS}s")
        job_queue.run_repeating(
            sweep_rate_limits,
            interval=RATE_LIMIT_WINDOW_SECONDS,
            first=RATE_LIMIT_WINDOW_SECONDS,
            name="rate_limit_sweep",
        )
    else:
        logger.warning("JobQueue unavailable; install python-telegram-bot[job-queue] for reminders.")

    # ── 6. Start polling ──────────────────────────────────
    logger.info("🚀 HopeDonor is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message", "callback_query"])

    # ── 7. Cleanup on shutdown ────────────────────────────
    close_pool()
    logger.info("HopeDonor stopped.")


if __name__ == "__main__":
    main()
