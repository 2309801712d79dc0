"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of the verification result sets.
"""

import io

import pandas as pd

from repositories.catalog_repo import CatalogRepository
from repositories.promotion_repo import PromotionRepository
from repositories.recording_repo import RecordingRepository
from services.verification_service import VerificationService
from utils.logger import get_logger

logger = get_logger(__name__)

SHEET_NAMES = {
    "1": "Punto 1 - Catálogo",
    "2": "Punto 2 - Grabaciones",
    "3": "Punto 3 - Promociones",
}
INTEGRITY_SHEET = "Integridad"


class ExportService:
    """Downloadable copies of the verification queries in CSV and Excel."""

    def __init__(self):
        self.catalog_repo = CatalogRepository()
        self.recording_repo = RecordingRepository()
        self.promotion_repo = PromotionRepository()
        self.verification = VerificationService()

    def point_frame(self, key: str) -> pd.DataFrame:
        """
        Result set of one point's verification query.

        Raises:
            KeyError: If the point does not exist.
        """
        key = key.strip()
        if key == "1":
            rows = [
                {
                    "Intérprete": r["performer"],
                    "Canción": r["song"],
                    "Idiomas": r["languages"],
                    "Ritmo": r["rhythm"],
                    "País": r["country"],
                }
                for r in self.catalog_repo.get_song_overview()
            ]
        elif key == "2":
            rows = [
                {
                    "IdGrabacion": r["id"],
                    "Interpretación": r["performance"],
                    "Álbum": r["album"],
                    "Formato": r["format"],
                    "FechaGrabacion": r["recorded_on"].isoformat() if r["recorded_on"] else "",
                }
                for r in self.recording_repo.get_recording_overview()
            ]
        elif key == "3":
            pairs = sorted({
                (p.song_id, p.performer_id)
                for p in self.promotion_repo.get_platform_promotions()
            })
            rows = [
                {
                    "IdCancion": r["song_id"],
                    "IdInterprete": r["performer_id"],
                    "Plataforma": r["platform"],
                    "País": r["country"],
                }
                for song_id, performer_id in pairs
                for r in self.promotion_repo.reconstruct_campaign(song_id, performer_id)
            ]
        else:
            raise KeyError(f"Unknown point '{key}'")
        return pd.DataFrame(rows)

    def integrity_frame(self) -> pd.DataFrame:
        rows = [
            {
                "Restricción": r["constraint"],
                "Tipo": r["kind"],
                "Columnas": r["target"],
                "Infracciones": r["violations"],
            }
            for r in self.verification.integrity_results()
        ]
        return pd.DataFrame(rows)

    def export_point_csv(self, key: str) -> io.BytesIO:
        """
        Export one point's verification rows as a CSV file.

        Args:
            key: Point number ('1', '2' or '3').

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        df = self.point_frame(key)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} rows of point {key} as CSV")
        return buffer

    def export_excel(self) -> io.BytesIO:
        """
        Export every point plus the integrity check as an Excel (.xlsx) file,
        one sheet each.

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        buffer = io.BytesIO()
        total = 0
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            for key, sheet in SHEET_NAMES.items():
                df = self.point_frame(key)
                total += len(df)
                df.to_excel(writer, sheet_name=sheet, index=False)
            self.integrity_frame().to_excel(writer, sheet_name=INTEGRITY_SHEET, index=False)

        buffer.seek(0)
        logger.info(f"Exported {total} verification rows as Excel")
        return buffer
