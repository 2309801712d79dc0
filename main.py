"""
main.py
-------
Entry point for the discography normalization bot.

Responsibilities:
    - Initialize the database connection pool, schema and sample rows.
    - Configure and start the Telegram bot with all handlers.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import SEED_SAMPLE_DATA, TELEGRAM_BOT_TOKEN
from db.connection import close_pool, init_pool
from db.init_db import create_tables
from db.seed import seed_sample_data
from handlers.analysis_handler import (
    analyze_command,
    cases_command,
    normalize_command,
    sample_command,
)
from handlers.chart_handler import chart_command
from handlers.export_handler import export_csv_command, export_excel_command
from handlers.start_handler import help_command, myid_command, start_command
from handlers.verification_handler import integrity_command, verify_command
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = [
    ("start", start_command, "🚀 Iniciar el bot"),
    ("help", help_command, "📖 Ayuda"),
    ("myid", myid_command, "🆔 Tu ID de Telegram"),
    ("cases", cases_command, "📚 Lista de puntos"),
    ("analyze", analyze_command, "🔍 Formas normales violadas"),
    ("normalize", normalize_command, "🛠️ Descomposición propuesta"),
    ("sample", sample_command, "🧪 Comprobar datos de ejemplo"),
    ("verify", verify_command, "✅ Consultas de verificación"),
    ("integrity", integrity_command, "🛡️ Integridad referencial"),
    ("chart", chart_command, "📊 Filas antes/después"),
    ("export_csv", export_csv_command, "📄 Exportar CSV"),
    ("export_excel", export_excel_command, "📊 Exportar Excel"),
]


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    await application.bot.set_my_commands(
        [BotCommand(name, description) for name, _, description in COMMANDS]
    )
    logger.info("Bot commands menu registered successfully.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()
    if SEED_SAMPLE_DATA:
        seed_sample_data()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()

    # ── 3. Register command handlers ──────────────────────
    for name, callback, _ in COMMANDS:
        app.add_handler(CommandHandler(name, callback))

    # ── 4. Start polling ──────────────────────────────────
    logger.info("🚀 Normalization bot is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 5. Cleanup on shutdown ────────────────────────────
    close_pool()
    logger.info("Normalization bot stopped.")


if __name__ == "__main__":
    main()
