"""
models/recording.py
-------------------
Domain models for the BCNF recording design (point 2).
"""

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass
class Performance:
    """
    A performance (interpretation) of a piece.

    Attributes:
        title: Performance title.
        duration: Running time, if known.
        id: SERIAL primary key (None for new records).
    """
    title: str
    duration: Optional[time] = None
    id: Optional[int] = None

    def __str__(self) -> str:
        length = f" ({self.duration})" if self.duration else ""
        return f"{self.title}{length}"


@dataclass
class Album:
    id: int
    title: str
    release_year: Optional[int] = None

    def __str__(self) -> str:
        year = f" ({self.release_year})" if self.release_year else ""
        return f"{self.title}{year}"


@dataclass
class Format:
    id: int
    name: str
    description: Optional[str] = None

    def __str__(self) -> str:
        return self.name


@dataclass
class Recording:
    """
    One performance on one album in one format.

    The surrogate `id` is the primary key; (album_id, performance_id,
    format_id) is enforced unique by the database.
    """
    performance_id: int
    album_id: int
    format_id: int
    recorded_on: Optional[date] = None
    id: Optional[int] = None

    @property
    def natural_key(self) -> tuple[int, int, int]:
        return (self.album_id, self.performance_id, self.format_id)

    def __str__(self) -> str:
        return (
            f"#{self.id} interpretación {self.performance_id} | "
            f"álbum {self.album_id} | formato {self.format_id}"
        )
