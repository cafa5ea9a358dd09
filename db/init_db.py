"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import transaction
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Donors: one row per registered Telegram user
CREATE TABLE IF NOT EXISTS donors (
    telegram_id     BIGINT PRIMARY KEY,
    full_name       VARCHAR(120) NOT NULL,
    email           VARCHAR(254),
    contact_number  VARCHAR(20),
    address         TEXT,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Campaigns: fundraising goals donations can be attached to
CREATE TABLE IF NOT EXISTS campaigns (
    id              SERIAL PRIMARY KEY,
    title           VARCHAR(150) NOT NULL,
    description     TEXT NOT NULL DEFAULT '',
    goal_amount     NUMERIC(12,2) NOT NULL CHECK (goal_amount > 0),
    raised_amount   NUMERIC(12,2) NOT NULL DEFAULT 0,
    start_date      DATE NOT NULL DEFAULT CURRENT_DATE,
    end_date        DATE,
    status          VARCHAR(10) NOT NULL DEFAULT 'active'
                    CHECK (status IN ('active', 'completed', 'paused')),
    created_by      BIGINT,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Donations: every completed donation, one-time or materialized from a series
CREATE TABLE IF NOT EXISTS donations (
    id              SERIAL PRIMARY KEY,
    user_id         BIGINT NOT NULL REFERENCES donors(telegram_id) ON DELETE CASCADE,
    campaign_id     INT REFERENCES campaigns(id) ON DELETE SET NULL,
    amount          NUMERIC(12,2) NOT NULL CHECK (amount > 0),
    currency        VARCHAR(5) NOT NULL DEFAULT 'INR',
    payment_method  VARCHAR(20) NOT NULL,
    payment_details JSONB,
    status          VARCHAR(10) NOT NULL DEFAULT 'completed',
    receipt_path    TEXT,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Recurring donations: schedule templates; next_run is set iff status is active
CREATE TABLE IF NOT EXISTS recurring_donations (
    id                  SERIAL PRIMARY KEY,
    user_id             BIGINT NOT NULL REFERENCES donors(telegram_id) ON DELETE CASCADE,
    base_donation_id    INT REFERENCES donations(id) ON DELETE SET NULL,
    amount              NUMERIC(12,2) NOT NULL CHECK (amount > 0),
    currency            VARCHAR(5) NOT NULL DEFAULT 'INR',
    payment_method      VARCHAR(20) NOT NULL,
    payment_details     JSONB,
    frequency           VARCHAR(10) NOT NULL
                        CHECK (frequency IN ('daily', 'weekly', 'monthly', 'yearly')),
    next_run            TIMESTAMPTZ,
    end_date            TIMESTAMPTZ,
    max_occurrences     INT CHECK (max_occurrences IS NULL OR max_occurrences > 0),
    total_occurrences   INT NOT NULL DEFAULT 1,
    status              VARCHAR(10) NOT NULL DEFAULT 'active'
                        CHECK (status IN ('active', 'paused', 'canceled', 'completed')),
    created_at          TIMESTAMPTZ DEFAULT NOW(),
    CONSTRAINT next_run_iff_active CHECK ((status = 'active') = (next_run IS NOT NULL))
);

-- Reminders: one per (series, occurrence); the unique key guards concurrent scanners
CREATE TABLE IF NOT EXISTS donation_reminders (
    id                      SERIAL PRIMARY KEY,
    recurring_donation_id   INT NOT NULL REFERENCES recurring_donations(id) ON DELETE CASCADE,
    scheduled_for           TIMESTAMPTZ NOT NULL,
    status                  VARCHAR(10) NOT NULL DEFAULT 'pending'
                            CHECK (status IN ('pending', 'confirmed', 'canceled')),
    message                 TEXT,
    created_at              TIMESTAMPTZ DEFAULT NOW(),
    UNIQUE (recurring_donation_id, scheduled_for)
);

-- Expenditures: money spent by the NGO
CREATE TABLE IF NOT EXISTS expenditures (
    id              SERIAL PRIMARY KEY,
    title           VARCHAR(150) NOT NULL,
    description     TEXT NOT NULL DEFAULT '',
    amount          NUMERIC(12,2) NOT NULL CHECK (amount > 0),
    spent_on        DATE NOT NULL DEFAULT CURRENT_DATE,
    added_by        BIGINT,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Admin audit trail
CREATE TABLE IF NOT EXISTS admin_audit_logs (
    id              SERIAL PRIMARY KEY,
    admin_id        BIGINT NOT NULL,
    action          VARCHAR(50) NOT NULL,
    details         TEXT,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Requirements: planned needs with an estimated budget
CREATE TABLE IF NOT EXISTS requirements (
    id              SERIAL PRIMARY KEY,
    title           VARCHAR(150) NOT NULL,
    description     TEXT NOT NULL DEFAULT '',
    budget_amount   NUMERIC(12,2) NOT NULL CHECK (budget_amount > 0),
    tentative_start DATE,
    tentative_end   DATE,
    created_by      BIGINT,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW(),
    CHECK (tentative_end IS NULL OR tentative_start IS NULL OR tentative_end >= tentative_start)
);

-- Contact messages: donors writing to the NGO team
CREATE TABLE IF NOT EXISTS contact_messages (
    id              SERIAL PRIMARY KEY,
    user_id         BIGINT NOT NULL REFERENCES donors(telegram_id) ON DELETE CASCADE,
    name            VARCHAR(120) NOT NULL DEFAULT '',
    email           VARCHAR(254),
    subject         VARCHAR(150) NOT NULL,
    message         TEXT NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_donations_user_date ON donations(user_id, created_at);
CREATE INDEX IF NOT EXISTS idx_donations_campaign ON donations(campaign_id);
CREATE INDEX IF NOT EXISTS idx_recurring_due ON recurring_donations(next_run) WHERE status = 'active';
CREATE INDEX IF NOT EXISTS idx_reminders_status ON donation_reminders(status);
CREATE INDEX IF NOT EXISTS idx_messages_date ON contact_messages(created_at);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    with transaction() as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
    logger.info("Database schema initialized successfully.")


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
