"""Bot handlers with fake Telegram updates (no network)."""

import asyncio
from types import SimpleNamespace

import pytest

from handlers import analysis_handler, export_handler, verification_handler
from security import auth
from security.rate_limiter import SlidingWindowLimiter, limiter


class _FakeMessage:
    def __init__(self):
        self.replies: list[str] = []
        self.documents: list[dict] = []

    async def reply_text(self, text, **kwargs):
        self.replies.append(text)

    async def reply_document(self, **kwargs):
        self.documents.append(kwargs)


def _update(user_id: int = 42):
    user = SimpleNamespace(id=user_id, username="tester", first_name="Ana")
    return SimpleNamespace(effective_user=user, message=_FakeMessage())


def _context(*args):
    return SimpleNamespace(args=list(args))


@pytest.fixture(autouse=True)
def _open_bot(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(auth, "ALLOWED_USER_IDS", [])
    limiter.reset()


def test_analyze_command_replies_with_report():
    update = _update()
    asyncio.run(analysis_handler.analyze_command(update, _context("3")))
    assert "CampanaPromocion" in update.message.replies[0]


def test_analyze_command_without_argument_shows_usage():
    update = _update()
    asyncio.run(analysis_handler.analyze_command(update, _context()))
    assert update.message.replies[0].startswith("⚠️ Uso: /analyze")


def test_unlisted_user_is_refused(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(auth, "ALLOWED_USER_IDS", [1])
    update = _update(user_id=42)
    asyncio.run(analysis_handler.cases_command(update, _context()))
    assert update.message.replies == [
        "⛔ Este bot es privado. Pide al administrador que agregue tu ID (/myid)."
    ]


def test_verify_command_reports_database_errors(monkeypatch: pytest.MonkeyPatch):
    def _boom(key=None):
        raise RuntimeError("Database pool not initialized.")

    monkeypatch.setattr(verification_handler.verification_service, "verify", _boom)
    update = _update()
    asyncio.run(verification_handler.verify_command(update, _context()))
    assert update.message.replies[0].startswith("❌")


def test_verify_command_sends_one_message_per_section(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(
        verification_handler.verification_service, "verify",
        lambda key=None: verification_handler.SECTION_SEPARATOR.join(["a", "b", "c"]),
    )
    update = _update()
    asyncio.run(verification_handler.verify_command(update, _context()))
    assert update.message.replies == ["a", "b", "c"]


def test_export_csv_rejects_unknown_point():
    update = _update()
    asyncio.run(export_handler.export_csv_command(update, _context("9")))
    assert update.message.replies[-1] == "⚠️ Uso: /export_csv [1|2|3]"
    assert update.message.documents == []


def test_sliding_window_limiter():
    window = SlidingWindowLimiter(limit=2, window=10)
    assert window.allow(1, now=0)
    assert window.allow(1, now=1)
    assert not window.allow(1, now=2)
    assert window.allow(2, now=2)
    assert window.allow(1, now=10.5)
