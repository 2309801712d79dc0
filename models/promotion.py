"""
models/promotion.py
-------------------
Domain models for the 4NF/5NF promotion design (point 3).
Platforms and countries are promoted independently, so each lives
in its own table.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class PlatformPromotion:
    """
    A song of a performer promoted on a streaming platform.

    Attributes:
        song_id: Song being promoted.
        performer_id: Performer of the song.
        platform: Platform name (e.g. 'Spotify').
        starts_on: Campaign start date.
        ends_on: Campaign end date.
        id: SERIAL primary key (None for new records).
    """
    song_id: int
    performer_id: int
    platform: str
    starts_on: Optional[date] = None
    ends_on: Optional[date] = None
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"canción {self.song_id} / intérprete {self.performer_id} → {self.platform}"


@dataclass
class CountryPromotion:
    """A song of a performer promoted in a country. Same shape as PlatformPromotion."""
    song_id: int
    performer_id: int
    country: str
    starts_on: Optional[date] = None
    ends_on: Optional[date] = None
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"canción {self.song_id} / intérprete {self.performer_id} → {self.country}"
