"""Service-level reports, with repositories replaced by in-memory fakes."""

import io

import pandas as pd
import pytest

from models.catalog import Language, Song
from models.promotion import PlatformPromotion
from repositories.integrity_repo import FOREIGN_KEYS, UNIQUE_KEYS
from services.chart_service import ChartService
from services.export_service import INTEGRITY_SHEET, SHEET_NAMES, ExportService
from services.normalization_service import NormalizationService
from services.verification_service import SECTION_SEPARATOR, VerificationService

PLATFORMS = ["Spotify", "YouTube", "Apple Music"]
COUNTRIES = ["Colombia", "México", "España", "Argentina"]


class _FakeCatalogRepo:
    def get_song_overview(self):
        return [
            {"performer": "Shakira", "song": "Hips Dont Lie", "languages": "Inglés",
             "rhythm": "Pop", "country": "Colombia"},
            {"performer": "Shakira", "song": "La Tortura", "languages": "Español, Inglés",
             "rhythm": "Reggaeton", "country": "Colombia"},
        ]

    def get_languages(self):
        return [Language(1, "Español"), Language(2, "Inglés"), Language(3, "Portugués")]

    def find_songs_by_language(self, name):
        songs = {"Español": [Song(1, "La Tortura", "Reggaeton")],
                 "Inglés": [Song(1, "La Tortura", "Reggaeton"), Song(2, "Hips Dont Lie", "Pop")]}
        return songs.get(name, [])


class _FakeRecordingRepo:
    def get_recording_overview(self):
        return [
            {"id": 1, "performance": "Estoy Aquí", "album": "Pies Descalzos", "format": "CD", "recorded_on": None},
            {"id": 2, "performance": "Estoy Aquí", "album": "Pies Descalzos", "format": "Digital", "recorded_on": None},
        ]


class _FakePromotionRepo:
    def count_campaign_rows(self):
        return {"platform_rows": 3, "country_rows": 4, "reconstructed_rows": 12}

    def get_platform_promotions(self, song_id=None, performer_id=None):
        return [PlatformPromotion(1, 1, p, id=i) for i, p in enumerate(PLATFORMS, start=1)]

    def reconstruct_campaign(self, song_id, performer_id):
        return [
            {"song_id": song_id, "performer_id": performer_id, "platform": p, "country": c}
            for p in PLATFORMS for c in COUNTRIES
        ]


class _FakeIntegrityRepo:
    def __init__(self, orphans=0):
        self.orphans = orphans

    def count_orphans(self, fk):
        return self.orphans if fk is FOREIGN_KEYS[0] else 0

    def count_duplicates(self, uk):
        return 0

    def table_counts(self):
        return {"countries": 3, "recordings": 4}


@pytest.fixture
def verification():
    service = VerificationService()
    service.catalog_repo = _FakeCatalogRepo()
    service.recording_repo = _FakeRecordingRepo()
    service.promotion_repo = _FakePromotionRepo()
    service.integrity_repo = _FakeIntegrityRepo()
    return service


# ── NormalizationService ─────────────────────────────────

def test_analyze_case_report():
    text = NormalizationService().analyze_case("1")
    assert "ArtistaCancion" in text
    assert "❌ *Viola 1NF*" in text
    assert "IdInterprete → IdPais → Pais" in text
    assert "*0NF*" in text


def test_analyze_case_reports_key_findings():
    text = NormalizationService().analyze_case("2")
    assert "no es mínima" in text
    assert "*5NF*" in text


def test_analyze_case_explains_disagreement_with_exercise():
    text = NormalizationService().analyze_case("2")
    assert "NO está en BCNF" in text
    assert "(IdInterpretacion, IdAlbum) es clave candidata" in text


def test_analyze_case_without_claim_adds_no_note():
    assert "📝" not in NormalizationService().analyze_case("3")


def test_unknown_case_is_a_message_not_an_error():
    text = NormalizationService().analyze_case("7")
    assert text.startswith("⚠️")
    assert "/cases" in text


def test_normalize_case_lists_engine_and_proposed_tables():
    text = NormalizationService().normalize_case("3")
    assert "PromocionPlataforma(IdCancion, IdInterprete, Plataforma)" in text
    assert "IdPromocionPlataforma" in text
    assert "`platform_promotions`" in text


def test_instance_report_shows_redundancy():
    text = NormalizationService().instance_report("3")
    assert "12 filas" in text
    assert "41.7% menos" in text


def test_instance_report_quotes_fragment_names(monkeypatch):
    fragments = {
        "R_1_1": frozenset(["IdCancion", "IdInterprete", "Plataforma"]),
        "R_1_2": frozenset(["IdCancion", "IdInterprete", "Pais"]),
    }
    monkeypatch.setattr(NormalizationService, "_fragments", staticmethod(lambda case: fragments))

    text = NormalizationService().instance_report("3")
    assert "• `R_1_1`: 3 filas" in text
    assert "• `R_1_2`: 4 filas" in text


def test_instance_report_shows_contradicted_fd():
    text = NormalizationService().instance_report("2")
    assert "❌ FD" in text
    assert "IdInterpretacion=1, IdAlbum=1" in text


# ── VerificationService ──────────────────────────────────

def test_verify_promotions(verification):
    text = verification.verify_promotions()
    assert "3 plataformas × 4 países = 12 combinaciones" in text
    assert "3 + 4 = 7" in text
    assert "41.7%" in text


def test_verify_catalog_counts_songs_per_language(verification):
    text = verification.verify_catalog()
    assert "La Tortura" in text
    assert "Español: 1, Inglés: 2" in text


def test_verify_unknown_point(verification):
    assert verification.verify("5").startswith("⚠️")


def test_verify_all_has_four_sections(verification):
    assert len(verification.verify().split(SECTION_SEPARATOR)) == 4


def test_check_integrity_all_clear(verification):
    text = verification.check_integrity()
    assert "Todas las restricciones se cumplen" in text
    results = verification.integrity_results()
    assert len(results) == len(FOREIGN_KEYS) + len(UNIQUE_KEYS)


def test_check_integrity_reports_orphans(verification):
    verification.integrity_repo = _FakeIntegrityRepo(orphans=2)
    text = verification.check_integrity()
    assert f"❌ FOREIGN KEY `{FOREIGN_KEYS[0].name}` (2 infracciones)" in text


# ── ExportService ────────────────────────────────────────

@pytest.fixture
def exporter(verification):
    service = ExportService()
    service.catalog_repo = verification.catalog_repo
    service.recording_repo = verification.recording_repo
    service.promotion_repo = verification.promotion_repo
    service.verification = verification
    return service


def test_export_point_csv(exporter):
    buffer = exporter.export_point_csv("3")
    df = pd.read_csv(buffer, encoding="utf-8-sig")
    assert list(df.columns) == ["IdCancion", "IdInterprete", "Plataforma", "País"]
    assert len(df) == 12


def test_export_unknown_point(exporter):
    with pytest.raises(KeyError):
        exporter.export_point_csv("4")


def test_export_excel_has_one_sheet_per_point(exporter):
    buffer = exporter.export_excel()
    sheets = pd.read_excel(buffer, sheet_name=None, engine="openpyxl")
    assert list(sheets) == [*SHEET_NAMES.values(), INTEGRITY_SHEET]
    assert len(sheets[SHEET_NAMES["1"]]) == 2
    assert len(sheets[INTEGRITY_SHEET]) == len(FOREIGN_KEYS) + len(UNIQUE_KEYS)


# ── ChartService ─────────────────────────────────────────

def test_redundancy_chart_is_png():
    buf = ChartService().generate_redundancy_bar("3")
    assert isinstance(buf, io.BytesIO)
    assert buf.read(8) == b"\x89PNG\r\n\x1a\n"


def test_no_chart_for_unsplit_case():
    assert ChartService().generate_redundancy_bar("2") is None
