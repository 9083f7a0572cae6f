"""Quality checks for existing scene names."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

YEAR_RE = re.compile(r"(19|20)\d{2}")
RESOLUTION_RE = re.compile(r"\b(480p|576p|720p|1080p|1440p|2160p|4k|8k)\b", re.IGNORECASE)
SOURCE_RE = re.compile(
    r"\b(AMZN(\.WEB(-?DL)?)?|WEB(-?DL|Rip)?|Blu[- ]?Ray|BRRip|BDRip|WEBRip|HDTV|DVDRip|HDLight|mHD)\b",
    re.IGNORECASE,
)
VIDEO_CODEC_RE = re.compile(r"\b(x265|x264|h\.?265|h\.?264|hevc|avc|av1)\b", re.IGNORECASE)


class Issue(str, Enum):
    """Problems found in a scene name."""

    EMPTY = "empty"
    IS_UNKNOWN = "is_unknown"
    MISSING_DOTS = "missing_dots"
    MISSING_YEAR = "missing_year"
    MISSING_RESOLUTION = "missing_resolution"
    MISSING_SOURCE = "missing_source"
    MISSING_VIDEO_CODEC = "missing_video_codec"


@dataclass
class ValidationResult:
    """Outcome of validating a scene name."""

    issues: List[Issue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues


def validate_scene_name(name: Optional[str]) -> ValidationResult:
    """Check whether a name already looks like a dotted scene release name.

    >>> validate_scene_name("Heat.1995.1080p.BluRay.x264-FGT").valid
    True
    >>> [i.value for i in validate_scene_name("Heat (1995)").issues][:2]
    ['missing_dots', 'missing_resolution']
    """
    result = ValidationResult()
    trimmed = (name or "").strip()

    if not trimmed:
        result.issues.append(Issue.EMPTY)
        return result

    if trimmed.lower() == "unknown":
        result.issues.append(Issue.IS_UNKNOWN)
    if trimmed.count(".") < 2:
        result.issues.append(Issue.MISSING_DOTS)
    if not YEAR_RE.search(trimmed):
        result.issues.append(Issue.MISSING_YEAR)
    if not RESOLUTION_RE.search(trimmed):
        result.issues.append(Issue.MISSING_RESOLUTION)
    if not SOURCE_RE.search(trimmed):
        result.issues.append(Issue.MISSING_SOURCE)
    if not VIDEO_CODEC_RE.search(trimmed):
        result.issues.append(Issue.MISSING_VIDEO_CODEC)

    return result
