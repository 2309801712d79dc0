"""
db/seed.py
----------
Loads the exam's sample rows into the normalized tables.
Idempotent: re-running it inserts nothing new (ON CONFLICT DO NOTHING).
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SEED_SQL = """
-- Point 1
INSERT INTO countries (id, name) VALUES
    (1, 'Colombia'), (2, 'España'), (3, 'Estados Unidos')
ON CONFLICT (id) DO NOTHING;

INSERT INTO performers (id, name, country_id) VALUES
    (1, 'Shakira', 1), (2, 'Alejandro Sanz', 2)
ON CONFLICT (id) DO NOTHING;

INSERT INTO songs (id, title, rhythm) VALUES
    (1, 'La Tortura', 'Reggaeton'), (2, 'Hips Dont Lie', 'Pop')
ON CONFLICT (id) DO NOTHING;

INSERT INTO languages (id, name) VALUES
    (1, 'Español'), (2, 'Inglés'), (3, 'Portugués')
ON CONFLICT (id) DO NOTHING;

INSERT INTO song_languages (song_id, language_id) VALUES
    (1, 1), (1, 2), (2, 2)
ON CONFLICT (song_id, language_id) DO NOTHING;

INSERT INTO performer_songs (performer_id, song_id, recorded_on) VALUES
    (1, 1, '2005-05-29'), (1, 2, '2006-02-03')
ON CONFLICT (performer_id, song_id) DO NOTHING;

-- Point 2
INSERT INTO albums (id, title, release_year) VALUES
    (1, 'Pies Descalzos', 1995), (2, 'Dónde Están los Ladrones', 1998)
ON CONFLICT (id) DO NOTHING;

INSERT INTO formats (id, name, description) VALUES
    (1, 'CD', NULL), (2, 'Vinilo', NULL), (3, 'Digital', NULL)
ON CONFLICT (id) DO NOTHING;

INSERT INTO performances (id, title, duration) VALUES
    (1, 'Estoy Aquí', '00:03:52'), (2, 'Antología', '00:04:47')
ON CONFLICT (id) DO NOTHING;

-- Explicit ids above bypass the sequence; move it past them
SELECT setval(pg_get_serial_sequence('performances', 'id'), (SELECT MAX(id) FROM performances));

INSERT INTO recordings (performance_id, album_id, format_id) VALUES
    (1, 1, 1), (1, 1, 3), (2, 2, 1), (2, 2, 2)
ON CONFLICT ON CONSTRAINT uq_recordings_album_performance_format DO NOTHING;

-- Point 3
INSERT INTO platform_promotions (song_id, performer_id, platform) VALUES
    (1, 1, 'Spotify'), (1, 1, 'YouTube'), (1, 1, 'Apple Music')
ON CONFLICT ON CONSTRAINT uq_platform_promotions DO NOTHING;

INSERT INTO country_promotions (song_id, performer_id, country) VALUES
    (1, 1, 'Colombia'), (1, 1, 'México'), (1, 1, 'España'), (1, 1, 'Argentina')
ON CONFLICT ON CONSTRAINT uq_country_promotions DO NOTHING;
"""


def seed_sample_data() -> None:
    """
    Insert the sample rows of all three points.
    Safe to call multiple times.
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SEED_SQL)
        conn.commit()
        logger.info("Sample data loaded.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to load sample data: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool, close_pool

    init_pool()
    seed_sample_data()
    close_pool()
    print("✅ Sample data loaded.")
