"""
handlers/export_handler.py
---------------------------
Handles data export commands (CSV, Excel).
Delegates to ExportService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.export_service import ExportService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)
export_service = ExportService()


@authorized_only
@rate_limited
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_csv command - send one point's verification rows as CSV.
    Optional: /export_csv 3 (defaults to point 1).
    """
    key = context.args[0] if context.args else "1"

    await update.message.reply_text("📄 Preparando el archivo CSV...")

    try:
        buffer = export_service.export_point_csv(key)
    except KeyError:
        await update.message.reply_text("⚠️ Uso: /export_csv [1|2|3]")
        return
    except Exception as e:
        logger.error(f"CSV export failed: {e}")
        await update.message.reply_text("❌ Hubo un problema con la exportación. Inténtalo de nuevo.")
        return

    await update.message.reply_document(
        document=buffer,
        filename=f"punto_{key}.csv",
        caption=f"📊 Punto {key}: consulta de verificación (CSV)",
    )


@authorized_only
@rate_limited
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export_excel command - every point plus integrity, one sheet each."""
    await update.message.reply_text("📊 Preparando el archivo Excel...")

    try:
        buffer = export_service.export_excel()
    except Exception as e:
        logger.error(f"Excel export failed: {e}")
        await update.message.reply_text("❌ Hubo un problema con la exportación. Inténtalo de nuevo.")
        return

    await update.message.reply_document(
        document=buffer,
        filename="discografia_verificacion.xlsx",
        caption="📊 Verificación de los tres puntos + integridad (Excel)",
    )
