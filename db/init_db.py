"""
db/init_db.py
-------------
Creates the normalized discography schema (tables) if they do not already exist.
Run this module directly to initialize and seed a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- ── Point 1: 3NF catalog ──────────────────────────────────

-- Countries: removes the transitive dependency performer -> country -> name
CREATE TABLE IF NOT EXISTS countries (
    id              INT PRIMARY KEY,
    name            VARCHAR(50) NOT NULL
);

-- Performers: performer data stored once (no partial dependency)
CREATE TABLE IF NOT EXISTS performers (
    id              INT PRIMARY KEY,
    name            VARCHAR(50) NOT NULL,
    country_id      INT NOT NULL,
    CONSTRAINT fk_performers_country
        FOREIGN KEY (country_id) REFERENCES countries(id)
);

-- Songs: song data stored once (no partial dependency)
CREATE TABLE IF NOT EXISTS songs (
    id              INT PRIMARY KEY,
    title           VARCHAR(50) NOT NULL,
    rhythm          VARCHAR(50) NOT NULL
);

-- Languages: one row per language, replaces the comma-separated list (1NF)
CREATE TABLE IF NOT EXISTS languages (
    id              INT PRIMARY KEY,
    name            VARCHAR(50) NOT NULL UNIQUE
);

-- Song <-> language: one atomic row per combination
CREATE TABLE IF NOT EXISTS song_languages (
    song_id         INT NOT NULL,
    language_id     INT NOT NULL,
    PRIMARY KEY (song_id, language_id),
    CONSTRAINT fk_song_languages_song
        FOREIGN KEY (song_id) REFERENCES songs(id),
    CONSTRAINT fk_song_languages_language
        FOREIGN KEY (language_id) REFERENCES languages(id)
);

-- Performer <-> song: the original relationship without redundancy
CREATE TABLE IF NOT EXISTS performer_songs (
    performer_id    INT NOT NULL,
    song_id         INT NOT NULL,
    recorded_on     DATE NULL,
    PRIMARY KEY (performer_id, song_id),
    CONSTRAINT fk_performer_songs_performer
        FOREIGN KEY (performer_id) REFERENCES performers(id),
    CONSTRAINT fk_performer_songs_song
        FOREIGN KEY (song_id) REFERENCES songs(id)
);

-- ── Point 2: BCNF recordings ──────────────────────────────

CREATE TABLE IF NOT EXISTS performances (
    id              SERIAL PRIMARY KEY,
    title           VARCHAR(100) NOT NULL,
    duration        TIME NULL
);

CREATE TABLE IF NOT EXISTS albums (
    id              INT PRIMARY KEY,
    title           VARCHAR(100) NOT NULL,
    release_year    INT NULL
);

CREATE TABLE IF NOT EXISTS formats (
    id              INT PRIMARY KEY,
    name            VARCHAR(50) NOT NULL,
    description     VARCHAR(200) NULL
);

-- Recordings: simple surrogate key; the unique constraint enforces
-- "within an album, a performance exists once per format"
CREATE TABLE IF NOT EXISTS recordings (
    id              SERIAL PRIMARY KEY,
    performance_id  INT NOT NULL,
    album_id        INT NOT NULL,
    format_id       INT NOT NULL,
    recorded_on     DATE NULL,
    CONSTRAINT uq_recordings_album_performance_format
        UNIQUE (album_id, performance_id, format_id),
    CONSTRAINT fk_recordings_performance
        FOREIGN KEY (performance_id) REFERENCES performances(id),
    CONSTRAINT fk_recordings_album
        FOREIGN KEY (album_id) REFERENCES albums(id),
    CONSTRAINT fk_recordings_format
        FOREIGN KEY (format_id) REFERENCES formats(id)
);

-- ── Point 3: 4NF/5NF promotions ───────────────────────────

-- Each independent multivalued dependency lives in its own table
CREATE TABLE IF NOT EXISTS platform_promotions (
    id              SERIAL PRIMARY KEY,
    song_id         INT NOT NULL,
    performer_id    INT NOT NULL,
    platform        VARCHAR(50) NOT NULL,
    starts_on       DATE NULL,
    ends_on         DATE NULL,
    CONSTRAINT uq_platform_promotions
        UNIQUE (song_id, performer_id, platform)
);

CREATE TABLE IF NOT EXISTS country_promotions (
    id              SERIAL PRIMARY KEY,
    song_id         INT NOT NULL,
    performer_id    INT NOT NULL,
    country         VARCHAR(50) NOT NULL,
    starts_on       DATE NULL,
    ends_on         DATE NULL,
    CONSTRAINT uq_country_promotions
        UNIQUE (song_id, performer_id, country)
);
"""

# Creation order; dropped in reverse so foreign keys never block the drop
TABLES: list[str] = [
    "countries",
    "performers",
    "songs",
    "languages",
    "song_languages",
    "performer_songs",
    "performances",
    "albums",
    "formats",
    "recordings",
    "platform_promotions",
    "country_promotions",
]

DROP_SQL = "\n".join(f"DROP TABLE IF EXISTS {t} CASCADE;" for t in reversed(TABLES))


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info(f"Database schema initialized ({len(TABLES)} tables).")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


def drop_tables() -> None:
    """Drop every table of the schema (used to rebuild from scratch)."""
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(DROP_SQL)
        conn.commit()
        logger.warning("All discography tables dropped.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to drop schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    import sys

    from db.connection import init_pool, close_pool
    from db.seed import seed_sample_data

    init_pool()
    if "--reset" in sys.argv:
        drop_tables()
    create_tables()
    seed_sample_data()
    close_pool()
    print("✅ Discography schema created and sample data loaded.")
