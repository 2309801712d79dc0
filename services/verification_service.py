"""
services/verification_service.py
--------------------------------
Runs the verification queries against the normalized PostgreSQL tables
and formats the results: one printout per point, plus the integrity check
(every foreign key resolves, every unique constraint holds).
"""

from repositories.catalog_repo import CatalogRepository
from repositories.integrity_repo import FOREIGN_KEYS, UNIQUE_KEYS, IntegrityRepository
from repositories.promotion_repo import PromotionRepository
from repositories.recording_repo import RecordingRepository
from utils.logger import get_logger

logger = get_logger(__name__)

SECTION_SEPARATOR = "\n\n━━━━━━━━━━━━━━━\n\n"


class VerificationService:
    """Verification printouts for the three points and the integrity check."""

    def __init__(self):
        self.catalog_repo = CatalogRepository()
        self.recording_repo = RecordingRepository()
        self.promotion_repo = PromotionRepository()
        self.integrity_repo = IntegrityRepository()

    def verify(self, key: str | None = None) -> str:
        """Printout for one point, or all of them when no key is given."""
        if not key:
            return self.verify_all()
        by_point = {
            "1": self.verify_catalog,
            "2": self.verify_recordings,
            "3": self.verify_promotions,
        }
        handler = by_point.get(key.strip())
        if handler is None:
            return f"⚠️ No existe el punto \"{key}\". Usa 1, 2 o 3."
        return handler()

    def verify_catalog(self) -> str:
        """Point 1: the original performer/song view rebuilt by joins."""
        rows = self.catalog_repo.get_song_overview()
        if not rows:
            return "📭 Punto 1: no hay canciones cargadas."

        lines = [f"🎤 *Punto 1: catálogo en 3FN* ({len(rows)} filas)\n"]
        for r in rows:
            lines.append(
                f"• *{r['performer']}* ({r['country']})\n"
                f"  🎵 {r['song']} | {r['rhythm']}\n"
                f"  🗣️ {r['languages'] or 'sin idiomas'}"
            )

        languages = self.catalog_repo.get_languages()
        usage = []
        for lang in languages:
            songs = self.catalog_repo.find_songs_by_language(lang.name)
            if songs:
                usage.append(f"{lang.name}: {len(songs)}")
        if usage:
            lines.append(f"\n🔎 Canciones por idioma: {', '.join(usage)}")
        return "\n".join(lines)

    def verify_recordings(self) -> str:
        """Point 2: recordings with performance, album and format resolved."""
        rows = self.recording_repo.get_recording_overview()
        if not rows:
            return "📭 Punto 2: no hay grabaciones cargadas."

        lines = [f"💿 *Punto 2: grabaciones en BCNF* ({len(rows)} filas)\n"]
        for r in rows:
            when = f" | {r['recorded_on']}" if r["recorded_on"] else ""
            lines.append(f"#{r['id']} {r['performance']} | {r['album']} | {r['format']}{when}")
        lines.append(
            "\n🔒 UNIQUE (álbum, interpretación, formato): una interpretación "
            "existe una sola vez por formato en cada álbum."
        )
        return "\n".join(lines)

    def verify_promotions(self) -> str:
        """Point 3: the campaign table rebuilt by joining platforms and countries."""
        counts = self.promotion_repo.count_campaign_rows()
        stored = counts["platform_rows"] + counts["country_rows"]
        if stored == 0:
            return "📭 Punto 3: no hay promociones cargadas."

        lines = ["📣 *Punto 3: promociones en 4FN/5FN*\n"]
        pairs = sorted({(p.song_id, p.performer_id) for p in self.promotion_repo.get_platform_promotions()})
        for song_id, performer_id in pairs:
            campaign = self.promotion_repo.reconstruct_campaign(song_id, performer_id)
            platforms = list(dict.fromkeys(r["platform"] for r in campaign))
            countries = list(dict.fromkeys(r["country"] for r in campaign))
            lines.append(
                f"• Canción {song_id} / intérprete {performer_id}: "
                f"{len(platforms)} plataformas × {len(countries)} países = {len(campaign)} combinaciones\n"
                f"  📱 {', '.join(platforms)}\n"
                f"  🌎 {', '.join(countries)}"
            )

        rebuilt = counts["reconstructed_rows"]
        lines.append(
            f"\n📦 Filas guardadas: {counts['platform_rows']} + {counts['country_rows']} = {stored}\n"
            f"🔁 Filas reconstruidas por el join: {rebuilt}"
        )
        if rebuilt:
            saved = (rebuilt - stored) / rebuilt * 100
            lines.append(f"💾 Ahorro: {saved:.1f}%")
        return "\n".join(lines)

    def integrity_results(self) -> list[dict]:
        """
        One entry per declared foreign or unique key.

        Returns:
            List of dicts: [{'constraint', 'kind', 'target', 'violations'}, ...]
        """
        results = []
        for fk in FOREIGN_KEYS:
            results.append({
                "constraint": fk.name,
                "kind": "FOREIGN KEY",
                "target": str(fk),
                "violations": self.integrity_repo.count_orphans(fk),
            })
        for uk in UNIQUE_KEYS:
            results.append({
                "constraint": uk.name,
                "kind": "UNIQUE",
                "target": str(uk),
                "violations": self.integrity_repo.count_duplicates(uk),
            })
        broken = [r["constraint"] for r in results if r["violations"]]
        if broken:
            logger.warning(f"Integrity violations found: {broken}")
        return results

    def check_integrity(self) -> str:
        """Every foreign key resolves and every unique constraint holds."""
        results = self.integrity_results()
        counts = self.integrity_repo.table_counts()

        lines = ["🛡️ *Integridad referencial*\n"]
        for r in results:
            icon = "✅" if r["violations"] == 0 else "❌"
            detail = "" if r["violations"] == 0 else f" ({r['violations']} infracciones)"
            lines.append(f"{icon} {r['kind']} `{r['constraint']}`{detail}")

        ok = all(r["violations"] == 0 for r in results)
        lines.append(
            "\n🎉 Todas las restricciones se cumplen." if ok
            else "\n⚠️ Hay restricciones incumplidas."
        )
        lines.append("\n📊 *Filas por tabla:*")
        lines.extend(f"  `{table}`: {n}" for table, n in counts.items())
        return "\n".join(lines)

    def verify_all(self) -> str:
        sections = [
            self.verify_catalog(),
            self.verify_recordings(),
            self.verify_promotions(),
            self.check_integrity(),
        ]
        return SECTION_SEPARATOR.join(sections)
