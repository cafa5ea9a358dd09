"""
utils/recurrence.py
-------------------
Next-occurrence arithmetic for recurring donations.

Month and year steps use ``relativedelta``, which clamps to the last valid
day of the target month: Jan 31 + 1 month is Feb 29 (leap year) or Feb 28,
and Feb 29 + 1 year is Feb 28.
"""

from datetime import datetime, timezone

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from utils.errors import InvalidInput, UnsupportedFrequency

FREQUENCIES: dict[str, relativedelta] = {
    "daily": relativedelta(days=1),
    "weekly": relativedelta(weeks=1),
    "monthly": relativedelta(months=1),
    "yearly": relativedelta(years=1),
}


def parse_timestamp(value) -> datetime:
    """
    Coerce an ISO-8601 string or datetime into a timezone-aware datetime.

    Naive values are interpreted as UTC.

    Raises:
        InvalidInput: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError) as e:
            raise InvalidInput(f"Invalid date for recurrence: {value!r}") from e
    else:
        raise InvalidInput(f"Invalid date for recurrence: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def next_run(timestamp, frequency: str) -> datetime:
    """
    Advance a timestamp by exactly one recurrence period.

    Args:
        timestamp: ISO-8601 string or datetime.
        frequency: One of 'daily', 'weekly', 'monthly', 'yearly'.

    Returns:
        Timezone-aware datetime one period later, same time of day.

    Raises:
        InvalidInput: If the timestamp cannot be parsed.
        UnsupportedFrequency: If the frequency tag is unknown.
    """
    current = parse_timestamp(timestamp)
    step = FREQUENCIES.get(frequency) if isinstance(frequency, str) else None
    if step is None:
        raise UnsupportedFrequency(frequency)
    return current + step
