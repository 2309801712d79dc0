"""
models/catalog.py
-----------------
Domain models for the 3NF catalog (point 1): countries, performers,
songs, languages and the two association tables.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass
class Country:
    """A country; stored once so its name never repeats per performer."""
    id: int
    name: str

    def __str__(self) -> str:
        return f"#{self.id} {self.name}"


@dataclass
class Performer:
    """
    Represents a performer (artist).

    Attributes:
        id: Primary key.
        name: Stage name.
        country_id: FK to countries.
    """
    id: int
    name: str
    country_id: int

    def __str__(self) -> str:
        return f"#{self.id} {self.name} (país {self.country_id})"


@dataclass
class Song:
    """
    Represents a song.

    Attributes:
        id: Primary key.
        title: Song title.
        rhythm: Musical genre / rhythm.
        languages: Language names, filled only by read queries that join
            song_languages; never persisted on the songs table.
    """
    id: int
    title: str
    rhythm: str
    languages: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        langs = f" [{', '.join(self.languages)}]" if self.languages else ""
        return f"#{self.id} {self.title} - {self.rhythm}{langs}"


@dataclass
class Language:
    """A language a song can be sung in. Names are unique."""
    id: int
    name: str

    def __str__(self) -> str:
        return f"#{self.id} {self.name}"


@dataclass
class PerformerSong:
    """Association between a performer and a song, with the recording date."""
    performer_id: int
    song_id: int
    recorded_on: Optional[date] = None

    def __str__(self) -> str:
        when = f" ({self.recorded_on})" if self.recorded_on else ""
        return f"intérprete {self.performer_id} ↔ canción {self.song_id}{when}"
