"""
handlers/chart_handler.py
--------------------------
Handles /chart. Delegates to ChartService and sends the image.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.chart_service import ChartService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)
chart_service = ChartService()


@authorized_only
@rate_limited
async def chart_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /chart command - rows stored before and after normalizing.

    Usage:
        /chart 3   → point 3 (12 rows vs 3 + 4)
    """
    if not context.args:
        await update.message.reply_text("⚠️ Uso: /chart <n>\nEjemplo: /chart 3")
        return
    key = context.args[0]

    await update.message.reply_text("📊 Generando el gráfico...")

    try:
        buf = chart_service.generate_redundancy_bar(key)
    except KeyError:
        await update.message.reply_text(f"⚠️ No existe el punto \"{key}\". Usa /cases para ver la lista.")
        return

    if buf:
        await update.message.reply_photo(photo=buf, caption=f"📊 Punto {key}: filas antes y después")
    else:
        await update.message.reply_text(
            f"📭 El punto {key} no se divide en varias tablas; no hay nada que comparar."
        )
