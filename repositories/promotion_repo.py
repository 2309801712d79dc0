"""
repositories/promotion_repo.py
------------------------------
Data access layer for the 4NF/5NF promotion design (point 3).

Platforms and countries are stored independently; the original
campaign table is the natural join of both on (song_id, performer_id).
"""

from typing import Optional

from db.connection import get_connection, release_connection
from models.promotion import CountryPromotion, PlatformPromotion
from utils.logger import get_logger

logger = get_logger(__name__)


class PromotionRepository:
    """Repository for platform_promotions and country_promotions."""

    # ── CREATE ────────────────────────────────────────────

    def add_platform_promotion(self, promo: PlatformPromotion) -> PlatformPromotion:
        """
        Insert a platform promotion.

        Raises:
            psycopg2.errors.UniqueViolation: If the song/performer is
                already promoted on that platform.
        """
        sql = """
            INSERT INTO platform_promotions (song_id, performer_id, platform, starts_on, ends_on)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    promo.song_id, promo.performer_id, promo.platform,
                    promo.starts_on, promo.ends_on,
                ))
                promo.id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Added platform promotion #{promo.id}: {promo}")
            return promo
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add platform promotion '{promo.platform}': {e}")
            raise
        finally:
            release_connection(conn)

    def add_country_promotion(self, promo: CountryPromotion) -> CountryPromotion:
        """Insert a country promotion. Same constraints as platforms."""
        sql = """
            INSERT INTO country_promotions (song_id, performer_id, country, starts_on, ends_on)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    promo.song_id, promo.performer_id, promo.country,
                    promo.starts_on, promo.ends_on,
                ))
                promo.id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Added country promotion #{promo.id}: {promo}")
            return promo
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add country promotion '{promo.country}': {e}")
            raise
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_platform_promotions(
        self, song_id: Optional[int] = None, performer_id: Optional[int] = None
    ) -> list[PlatformPromotion]:
        """Platform promotions, optionally filtered by song and/or performer."""
        where, params = self._filters(song_id, performer_id)
        sql = f"""
            SELECT id, song_id, performer_id, platform, starts_on, ends_on
            FROM platform_promotions
            {where}
            ORDER BY id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [
                    PlatformPromotion(
                        id=r[0], song_id=r[1], performer_id=r[2],
                        platform=r[3], starts_on=r[4], ends_on=r[5],
                    )
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)

    def get_country_promotions(
        self, song_id: Optional[int] = None, performer_id: Optional[int] = None
    ) -> list[CountryPromotion]:
        where, params = self._filters(song_id, performer_id)
        sql = f"""
            SELECT id, song_id, performer_id, country, starts_on, ends_on
            FROM country_promotions
            {where}
            ORDER BY id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [
                    CountryPromotion(
                        id=r[0], song_id=r[1], performer_id=r[2],
                        country=r[3], starts_on=r[4], ends_on=r[5],
                    )
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)

    def reconstruct_campaign(self, song_id: int, performer_id: int) -> list[dict]:
        """
        Point 3 verification query: rebuild the original campaign rows
        (every platform × every country) for one song/performer.

        Returns:
            List of dicts: [{'song_id', 'performer_id', 'platform', 'country'}, ...]
        """
        sql = """
            SELECT pp.song_id, pp.performer_id, pp.platform, cp.country
            FROM platform_promotions pp
            JOIN country_promotions cp
              ON pp.song_id = cp.song_id
             AND pp.performer_id = cp.performer_id
            WHERE pp.song_id = %s AND pp.performer_id = %s
            ORDER BY pp.id, cp.id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (song_id, performer_id))
                return [
                    {
                        "song_id": r[0],
                        "performer_id": r[1],
                        "platform": r[2],
                        "country": r[3],
                    }
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)

    def count_campaign_rows(self) -> dict:
        """
        Stored rows vs rows the denormalized table would need.

        Returns:
            Dict: {'platform_rows', 'country_rows', 'reconstructed_rows'}
        """
        sql = """
            SELECT
                (SELECT COUNT(*) FROM platform_promotions),
                (SELECT COUNT(*) FROM country_promotions),
                (SELECT COUNT(*)
                   FROM platform_promotions pp
                   JOIN country_promotions cp
                     ON pp.song_id = cp.song_id
                    AND pp.performer_id = cp.performer_id);
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                row = cur.fetchone()
                return {
                    "platform_rows": row[0],
                    "country_rows": row[1],
                    "reconstructed_rows": row[2],
                }
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _filters(song_id: Optional[int], performer_id: Optional[int]) -> tuple[str, tuple]:
        """Build the WHERE clause and its parameters for the optional filters."""
        clauses, params = [], []
        if song_id is not None:
            clauses.append("song_id = %s")
            params.append(song_id)
        if performer_id is not None:
            clauses.append("performer_id = %s")
            params.append(performer_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, tuple(params)
