"""Descriptive media metadata models."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class DescriptiveMetadata:
    """Library-side description of a movie, as reported by Radarr."""

    title: Optional[str] = None  # Localized title
    original_title: Optional[str] = None
    year: Optional[int] = None
    original_language: Optional[str] = None  # ISO 639-1 code
    quality: Optional[str] = None  # Radarr quality name, e.g. "Bluray-2160p"
    release_group: Optional[str] = None
    scene_name: Optional[str] = None  # Radarr's recorded release name
    file_name: Optional[str] = None  # Relative path of the movie file
    audio_languages: List[str] = field(default_factory=list)
    subtitle_languages: List[str] = field(default_factory=list)
    remote_path: Optional[str] = None  # Movie file path as seen by Radarr
    radarr_id: Optional[int] = None

    @property
    def salvage_text(self) -> Optional[str]:
        """Best free-text source for edition markers."""
        return self.scene_name or self.file_name

    def __str__(self) -> str:
        """Human-readable representation."""
        title = self.title or self.original_title or "Unknown"
        year_part = f" ({self.year})" if self.year else ""
        return f"{title}{year_part}"
