"""
handlers/verification_handler.py
---------------------------------
Handles /verify and /integrity, which query the normalized tables.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.verification_service import SECTION_SEPARATOR, VerificationService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)
verification_service = VerificationService()


@authorized_only
@rate_limited
async def verify_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /verify command - run the verification queries.

    Usage:
        /verify      → all three points and the integrity check
        /verify 2    → point 2 only
    """
    key = context.args[0] if context.args else None
    try:
        msg = verification_service.verify(key)
    except Exception as e:
        logger.error(f"Verification failed (point={key}): {e}")
        await update.message.reply_text("❌ No se pudo consultar la base de datos. Inténtalo de nuevo.")
        return

    # One message per point keeps each under Telegram's length limit
    for section in msg.split(SECTION_SEPARATOR):
        await update.message.reply_text(section, parse_mode="Markdown")


@authorized_only
@rate_limited
async def integrity_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /integrity command - foreign key and unique constraint checks."""
    try:
        msg = verification_service.check_integrity()
    except Exception as e:
        logger.error(f"Integrity check failed: {e}")
        await update.message.reply_text("❌ No se pudo consultar la base de datos. Inténtalo de nuevo.")
        return
    await update.message.reply_text(msg, parse_mode="Markdown")
