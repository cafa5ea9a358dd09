"""
utils/errors.py
---------------
Exception hierarchy shared by every layer.

Services raise these; handlers catch ``DonorBotError`` and turn the
message into a reply for the user.
"""


class DonorBotError(Exception):
    """Base class for all expected application errors."""


class InvalidInput(DonorBotError, ValueError):
    """Bad timestamp, bad frequency value or failed form validation.

    Attributes:
        errors: Every validation message collected (at least one).
    """

    def __init__(self, message: str | list[str]):
        self.errors = [message] if isinstance(message, str) else list(message)
        super().__init__("\n".join(self.errors))


class UnsupportedFrequency(DonorBotError, ValueError):
    """Frequency tag is not one of daily/weekly/monthly/yearly."""

    def __init__(self, frequency):
        self.frequency = frequency
        super().__init__(f"Unsupported recurrence frequency: {frequency!r}")


class NotFound(DonorBotError, LookupError):
    """A reminder, recurring donation, donation or campaign does not exist."""


class Unauthorized(DonorBotError, PermissionError):
    """The acting user does not own the target record."""


class NotificationFailure(DonorBotError):
    """Delivery to the donor failed. Soft: logged, never fatal."""


class PersistenceFailure(DonorBotError):
    """A storage operation failed and the unit of work was rolled back."""


def user_message(error: DonorBotError) -> str:
    """Text shown to the Telegram user for an expected error."""
    if isinstance(error, InvalidInput):
        return "⚠️ " + "\n⚠️ ".join(error.errors)
    if isinstance(error, PersistenceFailure):
        return "❌ Something went wrong while saving. Nothing was changed, please try again."
    if isinstance(error, Unauthorized):
        return f"⛔ {error}"
    return f"⚠️ {error}"
