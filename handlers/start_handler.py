"""
handlers/start_handler.py
--------------------------
Handles /start, /help and /myid.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🎼 *Taller de normalización: discografía*
Análisis de tres diseños de tablas y su versión normalizada en PostgreSQL.

*📚 Análisis:*
/cases - Lista de puntos
/analyze <n> - Formas normales que viola el punto n
/normalize <n> - Descomposición y tablas propuestas
/sample <n> - Comprobaciones sobre los datos de ejemplo
/chart <n> - Gráfico de filas antes/después

*🐘 Base de datos:*
/verify [n] - Consultas de verificación (todas o la del punto n)
/integrity - Claves foráneas y restricciones UNIQUE
/export\\_csv [n] - Resultado del punto n en CSV
/export\\_excel - Todos los resultados en Excel

/myid - Tu ID de Telegram
"""


@authorized_only
@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - greet the user."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")

    await update.message.reply_text(
        f"¡Hola {user.first_name}! 👋\n"
        f"Analizo tablas de una discografía hasta 3FN, BCNF, 4FN y 5FN.\n\n"
        f"Escribe /help para ver todos los comandos.",
        parse_mode="Markdown",
    )


@authorized_only
@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")


@authorized_only
async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show the Telegram ID to put in the whitelist."""
    user = update.effective_user
    await update.message.reply_text(
        f"🆔 Tu ID: `{user.id}`\n"
        f"Agrégalo a `ALLOWED_USER_IDS` en el archivo `.env` para restringir el bot.",
        parse_mode="Markdown",
    )
