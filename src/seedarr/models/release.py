"""Release naming and export models."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Optional

from seedarr.models.technical import AudioTrack


@dataclass(frozen=True)
class ReconciledMetadata:
    """Descriptive and technical metadata merged under fixed precedence."""

    title: str
    year: Optional[int] = None
    resolution: Optional[str] = None  # Resolution bucket value, e.g. "2160p"
    source: Optional[str] = None  # e.g. "BluRay", dropped on resolution conflict
    video_codec: Optional[str] = None  # Raw mediainfo Format
    bit_depth: Optional[int] = None
    hdr: bool = False
    dv: bool = False
    audio_tracks: List[AudioTrack] = field(default_factory=list)
    original_language: Optional[str] = None
    release_group: Optional[str] = None
    salvage_text: Optional[str] = None


@dataclass
class NameTokens:
    """Ordered slots of a release name.

    The video codec is always the last dot-joined slot; the group is
    appended with a leading hyphen.
    """

    title: Optional[str] = None
    year: Optional[str] = None
    language_tag: Optional[str] = None
    resolution: Optional[str] = None
    source: Optional[str] = None
    extras: List[str] = field(default_factory=list)
    audio_codec: Optional[str] = None
    audio_channels: Optional[str] = None
    video_codec: Optional[str] = None
    group: Optional[str] = None

    def dotted_slots(self) -> List[Optional[str]]:
        """Slots joined with dots, in output order."""
        return [
            self.title,
            self.year,
            self.language_tag,
            self.resolution,
            self.source,
            *self.extras,
            self.audio_codec,
            self.audio_channels,
            self.video_codec,
        ]


@dataclass
class ExportDecision:
    """Which export steps are still needed for a release name."""

    name: str
    scene_dir: Path
    media_path: Path
    sidecar_path: Path
    torrent_path: Path
    needs_directory: bool
    needs_media_link: bool
    needs_sidecar: bool
    needs_packaging: bool

    @property
    def is_complete(self) -> bool:
        """True when nothing is left to do."""
        return not (
            self.needs_directory
            or self.needs_media_link
            or self.needs_sidecar
            or self.needs_packaging
        )


@dataclass
class ProcessResult:
    """Result of processing a single movie."""

    status: Literal["success", "skipped", "error", "dry_run"]
    label: str
    name: Optional[str] = None
    actions: List[str] = field(default_factory=list)
    reason: Optional[str] = None  # Reason for skip
    error: Optional[str] = None  # Error message if failed

    def __str__(self) -> str:
        """Human-readable representation."""
        if self.status == "success":
            done = ", ".join(self.actions) if self.actions else "up to date"
            return f"✓ {self.label}: {self.name} ({done})"
        elif self.status == "skipped":
            return f"⊘ {self.label}: Skipped ({self.reason})"
        elif self.status == "dry_run":
            done = ", ".join(self.actions) if self.actions else "up to date"
            return f"⊙ {self.label}: {self.name} ({done}, torrent skipped)"
        else:
            name_part = f" [{self.name}]" if self.name else ""
            return f"✗ {self.label}{name_part}: Failed ({self.error or self.reason})"
