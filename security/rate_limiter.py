"""
security/rate_limiter.py
-------------------------
Rate limiting middleware to prevent bot abuse.
Limits the number of messages a user can send within a sliding time window.
"""

import time
from collections import defaultdict
from functools import wraps
from typing import Callable, Optional

from telegram import Update
from telegram.ext import ContextTypes

from config import RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """Per-user sliding window: at most `limit` hits per `window` seconds."""

    def __init__(self, limit: int = RATE_LIMIT_MESSAGES, window: float = RATE_LIMIT_WINDOW_SECONDS):
        self.limit = limit
        self.window = window
        # {user_id: [timestamp1, timestamp2, ...]}
        self._hits: dict[int, list[float]] = defaultdict(list)

    def _cleanup(self, user_id: int, now: float) -> None:
        """Remove expired timestamps for a user; drop the user once none remain."""
        cutoff = now - self.window
        recent = [t for t in self._hits.get(user_id, ()) if t > cutoff]
        if recent:
            self._hits[user_id] = recent
        else:
            self._hits.pop(user_id, None)

    def hit(self, user_id: int, now: Optional[float] = None) -> bool:
        """Record a message. Returns False (and records nothing) when over the limit."""
        now = time.time() if now is None else now
        self._cleanup(user_id, now)
        if len(self._hits[user_id]) >= self.limit:
            return False
        self._hits[user_id].append(now)
        return True

    def sweep(self, now: Optional[float] = None) -> int:
        """Forget users whose whole window has expired. Returns how many were dropped."""
        now = time.time() if now is None else now
        before = len(self._hits)
        for user_id in list(self._hits):
            self._cleanup(user_id, now)
        return before - len(self._hits)

    def tracked_users(self) -> int:
        return len(self._hits)


limiter = RateLimiter()


async def sweep_rate_limits(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Job queue callback that keeps the limiter's memory bounded by active users."""
    dropped = limiter.sweep()
    if dropped:
        logger.debug(f"Rate limiter forgot {dropped} idle users")


def rate_limited(func: Callable):
    """
    Decorator that enforces rate limiting per user.

    Configuration (via .env):
        RATE_LIMIT_MESSAGES: Max messages per window (default: 30).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not limiter.hit(user.id):
            logger.warning(f"⚠️ Rate limit hit for user {user.id}")
            await update.effective_message.reply_text(
                "⚠️ You are sending messages too quickly. Please wait a moment and try again."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
