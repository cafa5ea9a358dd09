"""
handlers/donation_handler.py
-----------------------------
Handles /donate, /donations and /receipt.
Delegates to DonationService.
"""

import os

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import registered_only
from security.rate_limiter import rate_limited
from services.donation_service import DonationService, RecurringPlan, build_payment_details
from utils.args import parse_id, parse_options
from utils.errors import DonorBotError, user_message
from utils.logger import get_logger

logger = get_logger(__name__)
donation_service = DonationService()

# Option names accepted on the command line -> payment detail fields
_PAYMENT_OPTIONS = {
    "upi_id": "upi_id",
    "bank": "bank_name",
    "account": "account_reference",
    "card": "card_number",
    "holder": "card_holder",
    "wallet": "wallet_provider",
    "notes": "notes",
    "reference": "reference",
    "ref": "reference",
}

DONATE_USAGE = (
    "💝 *Make a donation*\n\n"
    "`/donate <amount> <method> [options]`\n\n"
    "*Examples:*\n"
    "• `/donate 500 upi upi_id=asha@okbank`\n"
    "• `/donate 1000 card card=4111111111111111 campaign=2`\n"
    "• `/donate 250 upi every=monthly start=2026-11-01T09:00 times=12`\n\n"
    "*Methods:* upi, netbanking, card, wallet, cash, other"
)


def _plan_from_options(options: dict) -> RecurringPlan | None:
    if not any(k in options for k in ("every", "start", "until", "times")):
        return None
    return RecurringPlan(
        frequency=options.get("every"),
        start=options.get("start"),
        end_date=options.get("until"),
        max_occurrences=options.get("times"),
    )


@registered_only
@rate_limited
async def donate_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /donate - record a donation, optionally recurring."""
    user = update.effective_user
    positional, options = parse_options(context.args or [])

    if len(positional) < 2:
        await update.message.reply_text(DONATE_USAGE, parse_mode="Markdown")
        return

    amount, method = positional[0].replace(",", ""), positional[1].lower()
    fields = {target: options[key] for key, target in _PAYMENT_OPTIONS.items() if key in options}

    campaign_id = None
    if "campaign" in options:
        campaign_id = parse_id(options["campaign"])
        if campaign_id is None:
            await update.message.reply_text("⚠️ campaign= must be a campaign number.")
            return

    try:
        result = donation_service.donate(
            user_id=user.id,
            amount=amount,
            payment_method=method,
            payment_details=build_payment_details(method, fields),
            campaign_id=campaign_id,
            plan=_plan_from_options(options),
        )
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return

    donation = result.donation
    text = (
        f"🙏 Thank you! Donation #{donation.id} of "
        f"{donation.currency} {donation.amount:,.2f} received."
    )
    if result.recurring:
        text += (
            f"\n🔁 Recurring {result.recurring.frequency} donation set up "
            f"(#{result.recurring.id}). We will remind you before each one."
        )
    await update.message.reply_text(text)
    await _send_receipt(update, donation.receipt_path, donation.id)


@registered_only
@rate_limited
async def donations_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /donations - show the donor's history."""
    try:
        text = donation_service.history_text(update.effective_user.id)
    except DonorBotError as e:
        text = user_message(e)
    await update.message.reply_text(text)


@registered_only
@rate_limited
async def receipt_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /receipt <id> - send the PDF receipt of one of the donor's donations.
    Usage: /receipt 12
    """
    donation_id = parse_id(context.args[0]) if context.args else None
    if donation_id is None:
        await update.message.reply_text("⚠️ Usage: /receipt <donation id>\nExample: /receipt 12")
        return

    try:
        path = donation_service.receipt_path(update.effective_user.id, donation_id)
    except DonorBotError as e:
        await update.message.reply_text(user_message(e))
        return
    await _send_receipt(update, path, donation_id)


async def _send_receipt(update: Update, path: str | None, donation_id: int) -> None:
    if not path or not os.path.exists(path):
        logger.warning(f"Receipt file for donation #{donation_id} is missing: {path}")
        await update.effective_message.reply_text("⚠️ The receipt file is not available right now.")
        return
    with open(path, "rb") as fh:
        await update.effective_message.reply_document(
            document=fh,
            filename=f"receipt-{donation_id}.pdf",
            caption=f"🧾 Receipt for donation #{donation_id}",
        )
