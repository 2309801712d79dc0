"""
security/auth.py
-----------------
Whitelist check for the bot's handlers.
Only the Telegram IDs listed in ALLOWED_USER_IDS may query the database.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from config import ALLOWED_USER_IDS
from utils.logger import get_logger

logger = get_logger(__name__)


def is_allowed(user_id: int) -> bool:
    """An empty whitelist allows everyone (local development)."""
    return not ALLOWED_USER_IDS or user_id in ALLOWED_USER_IDS


def authorized_only(func: Callable):
    """
    Decorator that restricts a handler to whitelisted users.

    Updates without a user are ignored; refused users get a short reply
    and the attempt is logged.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not is_allowed(user.id):
            logger.warning(
                f"🚫 Access refused: user_id={user.id}, "
                f"username={user.username}, command={func.__name__}"
            )
            await update.message.reply_text(
                "⛔ Este bot es privado. Pide al administrador que agregue tu ID (/myid)."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
