"""Technical media metadata models.

These are pydantic models because they are persisted in the sidecar
cache file next to each video.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class AudioTrack(BaseModel):
    """Audio track as reported by mediainfo."""

    language: Optional[str] = None  # ISO 639-1 code
    codec: Optional[str] = None  # mediainfo Format, e.g. "E-AC-3"
    codec_commercial: Optional[str] = None  # e.g. "Dolby Digital Plus with Dolby Atmos"
    channels: Optional[int] = None
    title: Optional[str] = None
    is_default: bool = False

    def __str__(self) -> str:
        """Human-readable representation."""
        title_part = f" ({self.title})" if self.title else ""
        return f"{self.language or 'und'} {self.codec or '?'} {self.channels or '?'}ch{title_part}"


class TechnicalMetadata(BaseModel):
    """Machine-measured properties of a media file."""

    container: Optional[str] = None
    video_codec: Optional[str] = None  # mediainfo Format, e.g. "HEVC"
    video_profile: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    bit_depth: Optional[int] = None
    hdr: bool = False
    dv: bool = False
    audio_tracks: List[AudioTrack] = Field(default_factory=list)
    subtitle_languages: List[str] = Field(default_factory=list)


class CacheEntry(BaseModel):
    """Technical metadata plus the source mtime it was extracted at."""

    mtime: float
    technical: TechnicalMetadata

    def is_fresh(self, current_mtime: float) -> bool:
        """Entry stays valid while the source has not been modified since."""
        return current_mtime <= self.mtime
