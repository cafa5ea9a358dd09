"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "hope_donor")
DB_USER: str = os.getenv("DB_USER", "hopedonor_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = os.getenv("DATABASE_URL") or (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ── Security ──────────────────────────────────────────────
_raw_ids = os.getenv("ADMIN_USER_IDS", "")
ADMIN_USER_IDS: list[int] = (
    [int(uid.strip()) for uid in _raw_ids.split(",") if uid.strip()]
    if _raw_ids
    else []
)

# ── Rate Limiting ─────────────────────────────────────────
RATE_LIMIT_MESSAGES: int = int(os.getenv("RATE_LIMIT_MESSAGES", "30"))
RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

# ── Donations ─────────────────────────────────────────────
DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "INR")
PAYMENT_METHODS: tuple[str, ...] = ("upi", "netbanking", "card", "wallet", "cash", "other")

# ── Reminder scanner ──────────────────────────────────────
REMINDER_SCAN_INTERVAL_SECONDS: int = int(os.getenv("REMINDER_SCAN_INTERVAL_SECONDS", "60"))
REMINDER_LOOKAHEAD_MINUTES: int = int(os.getenv("REMINDER_LOOKAHEAD_MINUTES", "60"))

# ── Generated files ───────────────────────────────────────
RECEIPTS_DIR: str = os.getenv("RECEIPTS_DIR", os.path.join("data", "receipts"))
REPORTS_DIR: str = os.getenv("REPORTS_DIR", os.path.join("data", "reports"))

# ── PDF fonts ─────────────────────────────────────────────
# Directory holding DejaVuSans*.ttf; empty means the copy bundled with matplotlib.
PDF_FONT_DIR: str = os.getenv("PDF_FONT_DIR", "")
# Comma-separated TTFs used for glyphs DejaVu lacks, e.g. NotoSansDevanagari-Regular.ttf
PDF_FALLBACK_FONTS: list[str] = [
    path.strip() for path in os.getenv("PDF_FALLBACK_FONTS", "").split(",") if path.strip()
]
# Complex-script shaping (Devanagari conjuncts); needs the optional uharfbuzz package.
PDF_TEXT_SHAPING: bool = os.getenv("PDF_TEXT_SHAPING", "false").lower() in ("1", "true", "yes")

# ── NGO profile (printed on receipts and reports) ─────────
NGO_NAME: str = os.getenv("NGO_NAME", "Hope Foundation")
NGO_TAGLINE: str = os.getenv("NGO_TAGLINE", "Empowering under-served communities")
NGO_ADDRESS: str = os.getenv("NGO_ADDRESS", "12 Seva Marg, New Delhi 110001, India")
NGO_EMAIL: str = os.getenv("NGO_EMAIL", "contact@hopefoundation.org")
NGO_PHONE: str = os.getenv("NGO_PHONE", "+91 11 4000 0000")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE: str = os.getenv("LOG_FILE", "")
