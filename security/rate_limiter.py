"""
security/rate_limiter.py
-------------------------
Per-user sliding-window rate limit for the bot's handlers.
Reports, charts and exports all hit PostgreSQL, so each user gets a
bounded number of commands per window.
"""

import time
from collections import defaultdict, deque
from functools import wraps
from typing import Callable, Optional

from telegram import Update
from telegram.ext import ContextTypes

from config import RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)


class SlidingWindowLimiter:
    """
    Remembers the timestamps of each user's recent commands.

    Attributes:
        limit: Commands allowed per window.
        window: Window length in seconds.
    """

    def __init__(self, limit: int, window: float):
        self.limit = limit
        self.window = window
        self._hits: dict[int, deque[float]] = defaultdict(deque)

    def allow(self, user_id: int, now: Optional[float] = None) -> bool:
        """Record a command and return False if it exceeds the limit."""
        now = time.monotonic() if now is None else now
        hits = self._hits[user_id]
        while hits and hits[0] <= now - self.window:
            hits.popleft()
        if len(hits) >= self.limit:
            return False
        hits.append(now)
        return True

    def reset(self) -> None:
        self._hits.clear()


limiter = SlidingWindowLimiter(RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS)


def rate_limited(func: Callable):
    """
    Decorator that enforces the per-user limit.

    Configuration (via .env):
        RATE_LIMIT_MESSAGES: Max commands per window (default: 30).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not limiter.allow(user.id):
            logger.warning(f"⚠️ Rate limit hit for user {user.id} on {func.__name__}")
            await update.message.reply_text(
                "⚠️ Demasiadas consultas seguidas. Espera un momento e inténtalo de nuevo."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
