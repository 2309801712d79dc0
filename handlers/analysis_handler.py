"""
handlers/analysis_handler.py
-----------------------------
Handles the normalization commands: /cases, /analyze, /normalize, /sample.
Delegates to NormalizationService; none of these touch the database.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.normalization_service import NormalizationService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)
normalization_service = NormalizationService()


async def _require_case(update: Update, context: ContextTypes.DEFAULT_TYPE, command: str) -> str | None:
    """Return the case number argument, or reply with the usage and return None."""
    if not context.args:
        await update.message.reply_text(
            f"⚠️ Uso: /{command} <n>\nEjemplo: /{command} 1  (ver /cases)"
        )
        return None
    return context.args[0]


@authorized_only
@rate_limited
async def cases_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(normalization_service.list_cases(), parse_mode="Markdown")


@authorized_only
@rate_limited
async def analyze_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /analyze <n> - normal forms violated by a case."""
    key = await _require_case(update, context, "analyze")
    if key is None:
        return
    msg = normalization_service.analyze_case(key)
    await update.message.reply_text(msg, parse_mode="Markdown")


@authorized_only
@rate_limited
async def normalize_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /normalize <n> - decomposition and proposed tables."""
    key = await _require_case(update, context, "normalize")
    if key is None:
        return
    msg = normalization_service.normalize_case(key)
    await update.message.reply_text(msg, parse_mode="Markdown")


@authorized_only
@rate_limited
async def sample_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /sample <n> - dependency and redundancy checks on the sample rows."""
    key = await _require_case(update, context, "sample")
    if key is None:
        return
    msg = normalization_service.instance_report(key)
    await update.message.reply_text(msg, parse_mode="Markdown")
