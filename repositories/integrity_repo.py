"""
repositories/integrity_repo.py
------------------------------
Read-only checks that the stored data honours the schema's referential
and uniqueness rules: no orphan references, no duplicate natural keys.

The catalogues below mirror the constraints declared in db/init_db.py.
The database already enforces them; these queries make the guarantee
visible and catch data loaded while constraints were disabled.
"""

from dataclasses import dataclass

from psycopg2.sql import SQL, Identifier

from db.connection import get_connection, release_connection
from db.init_db import TABLES
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ForeignKey:
    name: str
    table: str
    column: str
    ref_table: str
    ref_column: str = "id"

    def __str__(self) -> str:
        return f"{self.table}.{self.column} → {self.ref_table}.{self.ref_column}"


@dataclass(frozen=True)
class UniqueKey:
    name: str
    table: str
    columns: tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.table}({', '.join(self.columns)})"


FOREIGN_KEYS: list[ForeignKey] = [
    ForeignKey("fk_performers_country", "performers", "country_id", "countries"),
    ForeignKey("fk_song_languages_song", "song_languages", "song_id", "songs"),
    ForeignKey("fk_song_languages_language", "song_languages", "language_id", "languages"),
    ForeignKey("fk_performer_songs_performer", "performer_songs", "performer_id", "performers"),
    ForeignKey("fk_performer_songs_song", "performer_songs", "song_id", "songs"),
    ForeignKey("fk_recordings_performance", "recordings", "performance_id", "performances"),
    ForeignKey("fk_recordings_album", "recordings", "album_id", "albums"),
    ForeignKey("fk_recordings_format", "recordings", "format_id", "formats"),
]

UNIQUE_KEYS: list[UniqueKey] = [
    UniqueKey("languages_name_key", "languages", ("name",)),
    UniqueKey("song_languages_pkey", "song_languages", ("song_id", "language_id")),
    UniqueKey("performer_songs_pkey", "performer_songs", ("performer_id", "song_id")),
    UniqueKey(
        "uq_recordings_album_performance_format",
        "recordings",
        ("album_id", "performance_id", "format_id"),
    ),
    UniqueKey("uq_platform_promotions", "platform_promotions", ("song_id", "performer_id", "platform")),
    UniqueKey("uq_country_promotions", "country_promotions", ("song_id", "performer_id", "country")),
]


class IntegrityRepository:
    """Counts violations of the declared foreign and unique keys."""

    def count_orphans(self, fk: ForeignKey) -> int:
        """Rows of `fk.table` whose reference points at no existing row."""
        query = SQL(
            "SELECT COUNT(*) FROM {t} c "
            "LEFT JOIN {rt} p ON c.{col} = p.{rcol} "
            "WHERE c.{col} IS NOT NULL AND p.{rcol} IS NULL;"
        ).format(
            t=Identifier(fk.table),
            rt=Identifier(fk.ref_table),
            col=Identifier(fk.column),
            rcol=Identifier(fk.ref_column),
        )
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query)
                return cur.fetchone()[0]
        except Exception as e:
            logger.error(f"Orphan check failed for {fk.name}: {e}")
            raise
        finally:
            release_connection(conn)

    def count_duplicates(self, uk: UniqueKey) -> int:
        """Number of key values that appear more than once in `uk.table`."""
        cols = SQL(", ").join(Identifier(c) for c in uk.columns)
        query = SQL(
            "SELECT COUNT(*) FROM ("
            "SELECT {cols} FROM {t} GROUP BY {cols} HAVING COUNT(*) > 1"
            ") d;"
        ).format(cols=cols, t=Identifier(uk.table))
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query)
                return cur.fetchone()[0]
        except Exception as e:
            logger.error(f"Duplicate check failed for {uk.name}: {e}")
            raise
        finally:
            release_connection(conn)

    def table_counts(self) -> dict[str, int]:
        """Row count per table, in creation order."""
        counts: dict[str, int] = {}
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                for table in TABLES:
                    cur.execute(SQL("SELECT COUNT(*) FROM {t};").format(t=Identifier(table)))
                    counts[table] = cur.fetchone()[0]
            return counts
        finally:
            release_connection(conn)
