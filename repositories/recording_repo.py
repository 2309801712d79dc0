"""
repositories/recording_repo.py
------------------------------
Data access layer for the BCNF recording design (point 2).
"""

from db.connection import get_connection, release_connection
from models.recording import Album, Format, Performance, Recording
from utils.logger import get_logger

logger = get_logger(__name__)


class RecordingRepository:
    """Repository for performances, albums, formats and recordings."""

    # ── CREATE ────────────────────────────────────────────

    def add_performance(self, performance: Performance) -> Performance:
        """
        Insert a performance. The id comes from the SERIAL column.

        Returns:
            The same Performance with its id set.
        """
        sql = """
            INSERT INTO performances (title, duration)
            VALUES (%s, %s)
            RETURNING id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (performance.title, performance.duration))
                performance.id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Added performance #{performance.id} '{performance.title}'")
            return performance
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add performance '{performance.title}': {e}")
            raise
        finally:
            release_connection(conn)

    def add_album(self, album: Album) -> Album:
        sql = "INSERT INTO albums (id, title, release_year) VALUES (%s, %s, %s);"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (album.id, album.title, album.release_year))
            conn.commit()
            logger.info(f"Added album #{album.id} '{album.title}'")
            return album
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add album #{album.id}: {e}")
            raise
        finally:
            release_connection(conn)

    def add_format(self, fmt: Format) -> Format:
        sql = "INSERT INTO formats (id, name, description) VALUES (%s, %s, %s);"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (fmt.id, fmt.name, fmt.description))
            conn.commit()
            logger.info(f"Added format #{fmt.id} {fmt.name}")
            return fmt
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add format #{fmt.id}: {e}")
            raise
        finally:
            release_connection(conn)

    def add_recording(self, recording: Recording) -> Recording:
        """
        Insert a recording.

        Raises:
            psycopg2.errors.UniqueViolation: If the (album, performance, format)
                combination is already recorded.
            psycopg2.errors.ForeignKeyViolation: If a referenced row is missing.
        """
        sql = """
            INSERT INTO recordings (performance_id, album_id, format_id, recorded_on)
            VALUES (%s, %s, %s, %s)
            RETURNING id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    recording.performance_id,
                    recording.album_id,
                    recording.format_id,
                    recording.recorded_on,
                ))
                recording.id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Added recording #{recording.id} {recording.natural_key}")
            return recording
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add recording {recording.natural_key}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_performances(self) -> list[Performance]:
        sql = "SELECT id, title, duration FROM performances ORDER BY id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [Performance(id=r[0], title=r[1], duration=r[2]) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_albums(self) -> list[Album]:
        sql = "SELECT id, title, release_year FROM albums ORDER BY id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [Album(id=r[0], title=r[1], release_year=r[2]) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_formats(self) -> list[Format]:
        sql = "SELECT id, name, description FROM formats ORDER BY id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [Format(id=r[0], name=r[1], description=r[2]) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_recordings(self) -> list[Recording]:
        sql = """
            SELECT id, performance_id, album_id, format_id, recorded_on
            FROM recordings
            ORDER BY id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_recording(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_recording_overview(self) -> list[dict]:
        """
        Point 2 verification query: each recording with its performance,
        album and format resolved by name.

        Returns:
            List of dicts: [{'id', 'performance', 'album', 'format', 'recorded_on'}, ...]
        """
        sql = """
            SELECT r.id, p.title, a.title, f.name, r.recorded_on
            FROM recordings r
            JOIN performances p ON r.performance_id = p.id
            JOIN albums a       ON r.album_id = a.id
            JOIN formats f      ON r.format_id = f.id
            ORDER BY r.id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [
                    {
                        "id": r[0],
                        "performance": r[1],
                        "album": r[2],
                        "format": r[3],
                        "recorded_on": r[4],
                    }
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_recording(row: tuple) -> Recording:
        return Recording(
            id=row[0],
            performance_id=row[1],
            album_id=row[2],
            format_id=row[3],
            recorded_on=row[4],
        )
