"""Repository SQL plumbing against a fake psycopg2 connection."""

from datetime import date

import psycopg2.errors
import pytest

from models.catalog import Country, PerformerSong
from models.promotion import PlatformPromotion
from models.recording import Performance, Recording
from repositories import catalog_repo, integrity_repo, promotion_repo, recording_repo
from repositories.catalog_repo import CatalogRepository
from repositories.integrity_repo import FOREIGN_KEYS, UNIQUE_KEYS, IntegrityRepository
from repositories.promotion_repo import PromotionRepository
from repositories.recording_repo import RecordingRepository
from db.init_db import TABLES


def test_add_country_commits_and_releases(use_conn):
    conn = use_conn(catalog_repo)
    country = CatalogRepository().add_country(Country(id=1, name="Colombia"))

    assert country.name == "Colombia"
    assert conn.executes[0][1] == (1, "Colombia")
    assert conn.commits == 1
    assert conn.released == 1


def test_link_performer_song_reports_existing_link(use_conn):
    conn = use_conn(catalog_repo, results=[[]])
    created = CatalogRepository().link_performer_song(PerformerSong(1, 1, date(2005, 5, 29)))

    assert created is False
    assert "ON CONFLICT" in conn.executes[0][0]


def test_get_songs_maps_language_arrays(use_conn):
    use_conn(catalog_repo, results=[[
        (1, "La Tortura", "Reggaeton", ["Español", "Inglés"]),
        (2, "Hips Dont Lie", "Pop", []),
    ]])
    songs = CatalogRepository().get_songs()

    assert songs[0].languages == ["Español", "Inglés"]
    assert songs[1].languages == []


def test_song_overview_rows(use_conn):
    conn = use_conn(catalog_repo, results=[[
        ("Shakira", "Hips Dont Lie", "Inglés", "Pop", "Colombia"),
        ("Shakira", "La Tortura", "Español, Inglés", "Reggaeton", "Colombia"),
    ]])
    rows = CatalogRepository().get_song_overview()

    assert "STRING_AGG" in conn.executes[0][0]
    assert rows[1] == {
        "performer": "Shakira",
        "song": "La Tortura",
        "languages": "Español, Inglés",
        "rhythm": "Reggaeton",
        "country": "Colombia",
    }


def test_find_songs_by_language_uses_equality(use_conn):
    conn = use_conn(catalog_repo, results=[[(1, "La Tortura", "Reggaeton")]])
    songs = CatalogRepository().find_songs_by_language("Español")

    assert [s.title for s in songs] == ["La Tortura"]
    assert conn.executes[0][1] == ("Español",)
    assert "LIKE" not in conn.executes[0][0]


def test_add_performance_takes_serial_id(use_conn):
    use_conn(recording_repo, results=[[(7,)]])
    perf = RecordingRepository().add_performance(Performance(title="Estoy Aquí"))
    assert perf.id == 7


def test_duplicate_recording_rolls_back_and_raises(use_conn):
    error = psycopg2.errors.UniqueViolation("duplicate key value violates unique constraint")
    conn = use_conn(recording_repo, error=error)

    with pytest.raises(psycopg2.errors.UniqueViolation):
        RecordingRepository().add_recording(Recording(performance_id=1, album_id=1, format_id=1))

    assert conn.rollbacks == 1
    assert conn.commits == 0
    assert conn.released == 1


def test_reconstruct_campaign_filters_by_song_and_performer(use_conn):
    conn = use_conn(promotion_repo, results=[[
        (1, 1, "Spotify", "Colombia"),
        (1, 1, "Spotify", "México"),
    ]])
    rows = PromotionRepository().reconstruct_campaign(1, 1)

    assert conn.executes[0][1] == (1, 1)
    assert rows[1]["country"] == "México"


def test_platform_promotion_filters():
    where, params = PromotionRepository._filters(1, None)
    assert where == "WHERE song_id = %s"
    assert params == (1,)
    assert PromotionRepository._filters(None, None) == ("", ())


def test_add_platform_promotion(use_conn):
    use_conn(promotion_repo, results=[[(3,)]])
    promo = PromotionRepository().add_platform_promotion(PlatformPromotion(1, 1, "Apple Music"))
    assert promo.id == 3


def test_count_campaign_rows(use_conn):
    use_conn(promotion_repo, results=[[(3, 4, 12)]])
    assert PromotionRepository().count_campaign_rows() == {
        "platform_rows": 3,
        "country_rows": 4,
        "reconstructed_rows": 12,
    }


def test_integrity_counts(use_conn):
    use_conn(integrity_repo, results=[[(0,)], [(2,)]])
    repo = IntegrityRepository()
    assert repo.count_orphans(FOREIGN_KEYS[0]) == 0
    assert repo.count_duplicates(UNIQUE_KEYS[0]) == 2


def test_table_counts_cover_every_table(use_conn):
    use_conn(integrity_repo, results=[[(n,)] for n in range(len(TABLES))])
    counts = IntegrityRepository().table_counts()
    assert list(counts) == TABLES
    assert counts["countries"] == 0
    assert counts["country_promotions"] == len(TABLES) - 1
