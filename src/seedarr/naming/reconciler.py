"""Merge Radarr and mediainfo metadata under fixed precedence.

Technical data is authoritative for resolution, codecs, audio, bit depth
and HDR/DV. Radarr is authoritative for title, year and release group.
"""

from typing import Optional

from seedarr.config import MediaConfig, TitleStrategy
from seedarr.models.metadata import DescriptiveMetadata
from seedarr.models.release import ReconciledMetadata
from seedarr.models.technical import TechnicalMetadata
from seedarr.naming.resolution import Resolution, classify_resolution, resolution_from_quality
from seedarr.utils.language import is_english
from seedarr.utils.logger import get_logger

logger = get_logger(__name__)

UNKNOWN_TITLE = "Unknown"

# Checked in order; first match wins
QUALITY_SOURCES = (
    ("remux", "BluRay.REMUX"),
    ("bluray", "BluRay"),
    ("blu-ray", "BluRay"),
    ("web", "WEB"),
    ("hdtv", "HDTV"),
    ("dvd", "DVD"),
)


def source_from_quality(quality: Optional[str]) -> Optional[str]:
    """Infer the distribution source implied by a Radarr quality name.

    >>> source_from_quality("WEBDL-1080p")
    'WEB'
    """
    if not quality:
        return None
    q = quality.lower()
    for marker, source in QUALITY_SOURCES:
        if marker in q:
            return source
    return None


def choose_title(descriptive: DescriptiveMetadata, strategy: TitleStrategy) -> str:
    """Pick the title according to the configured strategy."""
    local = descriptive.title or descriptive.original_title
    original = descriptive.original_title or descriptive.title

    if strategy == TitleStrategy.ALWAYS_ORIGINAL:
        chosen = original
    elif strategy == TitleStrategy.ALWAYS_LOCAL:
        chosen = local
    elif is_english(descriptive.original_language):
        chosen = original
    else:
        chosen = local

    return chosen or UNKNOWN_TITLE


def reconcile(
    descriptive: DescriptiveMetadata,
    technical: TechnicalMetadata,
    media_config: MediaConfig,
) -> ReconciledMetadata:
    """Merge descriptive and technical metadata.

    When the resolution implied by Radarr's quality disagrees with the
    one measured by mediainfo, the measured one wins and the source token
    is dropped instead of guessed.

    Args:
        descriptive: Radarr-side metadata
        technical: mediainfo-side metadata
        media_config: Media configuration (resolved title strategy)

    Returns:
        ReconciledMetadata
    """
    measured = classify_resolution(technical.width, technical.height)
    implied = resolution_from_quality(descriptive.quality)
    source = source_from_quality(descriptive.quality)

    if measured != Resolution.UNKNOWN:
        resolution = measured
        if implied is not None and implied != measured:
            logger.info(
                "Quality resolution disagrees with file, dropping source",
                quality=descriptive.quality,
                measured=measured.value,
                implied=implied.value,
            )
            source = None
    else:
        resolution = implied

    return ReconciledMetadata(
        title=choose_title(descriptive, media_config.title_strategy),
        year=descriptive.year,
        resolution=resolution.value if resolution else None,
        source=source,
        video_codec=technical.video_codec,
        bit_depth=technical.bit_depth,
        hdr=technical.hdr,
        dv=technical.dv,
        audio_tracks=list(technical.audio_tracks),
        original_language=descriptive.original_language,
        release_group=descriptive.release_group,
        salvage_text=descriptive.salvage_text,
    )
