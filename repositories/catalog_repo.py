"""
repositories/catalog_repo.py
----------------------------
Data access layer for the 3NF catalog (point 1): countries, performers,
songs, languages and their association tables.
"""

from typing import Optional

from db.connection import get_connection, release_connection
from models.catalog import Country, Language, Performer, PerformerSong, Song
from utils.logger import get_logger

logger = get_logger(__name__)

# Rebuilds the original ArtistaCancion view from the normalized tables
SONG_OVERVIEW_SQL = """
    SELECT p.name                                       AS performer,
           s.title                                      AS song,
           STRING_AGG(l.name, ', ' ORDER BY l.id)       AS languages,
           s.rhythm                                     AS rhythm,
           c.name                                       AS country
    FROM performer_songs ps
    JOIN performers p ON ps.performer_id = p.id
    JOIN songs s      ON ps.song_id = s.id
    JOIN countries c  ON p.country_id = c.id
    LEFT JOIN song_languages sl ON s.id = sl.song_id
    LEFT JOIN languages l       ON sl.language_id = l.id
    GROUP BY p.name, s.title, s.rhythm, c.name
    ORDER BY p.name, s.title;
"""


class CatalogRepository:
    """Repository for the countries/performers/songs/languages tables."""

    # ── CREATE ────────────────────────────────────────────

    def add_country(self, country: Country) -> Country:
        """Insert a country. Raises on a duplicate id."""
        sql = "INSERT INTO countries (id, name) VALUES (%s, %s);"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (country.id, country.name))
            conn.commit()
            logger.info(f"Added country #{country.id} {country.name}")
            return country
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add country #{country.id}: {e}")
            raise
        finally:
            release_connection(conn)

    def add_performer(self, performer: Performer) -> Performer:
        """
        Insert a performer.

        Raises:
            psycopg2.errors.ForeignKeyViolation: If the country does not exist.
        """
        sql = "INSERT INTO performers (id, name, country_id) VALUES (%s, %s, %s);"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (performer.id, performer.name, performer.country_id))
            conn.commit()
            logger.info(f"Added performer #{performer.id} {performer.name}")
            return performer
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add performer #{performer.id}: {e}")
            raise
        finally:
            release_connection(conn)

    def add_song(self, song: Song) -> Song:
        """Insert a song (its languages are linked separately)."""
        sql = "INSERT INTO songs (id, title, rhythm) VALUES (%s, %s, %s);"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (song.id, song.title, song.rhythm))
            conn.commit()
            logger.info(f"Added song #{song.id} '{song.title}'")
            return song
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add song #{song.id}: {e}")
            raise
        finally:
            release_connection(conn)

    def add_language(self, language: Language) -> Language:
        """
        Insert a language.

        Raises:
            psycopg2.errors.UniqueViolation: If the name already exists.
        """
        sql = "INSERT INTO languages (id, name) VALUES (%s, %s);"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (language.id, language.name))
            conn.commit()
            logger.info(f"Added language #{language.id} {language.name}")
            return language
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add language '{language.name}': {e}")
            raise
        finally:
            release_connection(conn)

    def link_song_language(self, song_id: int, language_id: int) -> bool:
        """
        Record that a song is sung in a language.

        Returns:
            True if a new link was created, False if it already existed.
        """
        sql = """
            INSERT INTO song_languages (song_id, language_id)
            VALUES (%s, %s)
            ON CONFLICT (song_id, language_id) DO NOTHING;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (song_id, language_id))
                created = cur.rowcount > 0
            conn.commit()
            return created
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to link song #{song_id} to language #{language_id}: {e}")
            raise
        finally:
            release_connection(conn)

    def link_performer_song(self, link: PerformerSong) -> bool:
        """Record that a performer sings a song; returns False if already linked."""
        sql = """
            INSERT INTO performer_songs (performer_id, song_id, recorded_on)
            VALUES (%s, %s, %s)
            ON CONFLICT (performer_id, song_id) DO NOTHING;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (link.performer_id, link.song_id, link.recorded_on))
                created = cur.rowcount > 0
            conn.commit()
            return created
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to link performer #{link.performer_id} to song #{link.song_id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_countries(self) -> list[Country]:
        sql = "SELECT id, name FROM countries ORDER BY id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [Country(id=r[0], name=r[1]) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_performer(self, performer_id: int) -> Optional[Performer]:
        """Fetch a single performer by ID, or None."""
        sql = "SELECT id, name, country_id FROM performers WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (performer_id,))
                row = cur.fetchone()
                return Performer(id=row[0], name=row[1], country_id=row[2]) if row else None
        finally:
            release_connection(conn)

    def get_performers(self) -> list[Performer]:
        sql = "SELECT id, name, country_id FROM performers ORDER BY id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [Performer(id=r[0], name=r[1], country_id=r[2]) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_songs(self) -> list[Song]:
        """
        Fetch all songs with their languages.

        Returns:
            List of Song objects; `languages` ordered by language id.
        """
        sql = """
            SELECT s.id, s.title, s.rhythm,
                   COALESCE(ARRAY_AGG(l.name ORDER BY l.id) FILTER (WHERE l.id IS NOT NULL), '{}')
            FROM songs s
            LEFT JOIN song_languages sl ON s.id = sl.song_id
            LEFT JOIN languages l       ON sl.language_id = l.id
            GROUP BY s.id, s.title, s.rhythm
            ORDER BY s.id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_song(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_languages(self) -> list[Language]:
        sql = "SELECT id, name FROM languages ORDER BY id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [Language(id=r[0], name=r[1]) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def find_songs_by_language(self, language_name: str) -> list[Song]:
        """
        All songs sung in a language.

        With atomic languages this is a plain equality join instead of
        LIKE '%…%' over a comma-separated column.
        """
        sql = """
            SELECT s.id, s.title, s.rhythm
            FROM songs s
            JOIN song_languages sl ON s.id = sl.song_id
            JOIN languages l       ON sl.language_id = l.id
            WHERE l.name = %s
            ORDER BY s.id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (language_name,))
                return [Song(id=r[0], title=r[1], rhythm=r[2]) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_song_overview(self) -> list[dict]:
        """
        Point 1 verification query: performer, song, languages (aggregated),
        rhythm and country, joined back from the normalized tables.

        Returns:
            List of dicts: [{'performer', 'song', 'languages', 'rhythm', 'country'}, ...]
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(SONG_OVERVIEW_SQL)
                return [
                    {
                        "performer": r[0],
                        "song": r[1],
                        "languages": r[2] or "",
                        "rhythm": r[3],
                        "country": r[4],
                    }
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_song(row: tuple) -> Song:
        """Convert a (id, title, rhythm, languages[]) row to a Song."""
        return Song(id=row[0], title=row[1], rhythm=row[2], languages=list(row[3] or []))
