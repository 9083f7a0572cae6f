"""Resolution bucket classification from pixel dimensions."""

from enum import Enum
from typing import Optional


class Resolution(str, Enum):
    """Resolution buckets used in release names."""

    UHD = "2160p"
    QHD = "1440p"
    FHD = "1080p"
    HD = "720p"
    PAL = "576p"
    NTSC = "480p"
    UNKNOWN = "unknown"


# Lower bounds sit 5% under the nominal size so that cropped encodes
# (letterbox/pillarbox) still land in their bucket. Bands are half-open:
# a bucket covers [its bound, the next larger bucket's bound).
TOLERANCE_PERCENT = 5

NOMINAL_WIDTHS = (
    (Resolution.UHD, 3840),
    (Resolution.QHD, 2560),
    (Resolution.FHD, 1920),
    (Resolution.HD, 1280),
)
SD_NOMINAL_WIDTH = 720

NOMINAL_HEIGHTS = (
    (Resolution.UHD, 2160),
    (Resolution.QHD, 1440),
    (Resolution.FHD, 1080),
    (Resolution.HD, 720),
    (Resolution.PAL, 576),
    (Resolution.NTSC, 480),
)

# 576p and 480p share a 720px width; height decides between them
SD_PAL_MIN_HEIGHT = 540


def _lower_bound(nominal: int) -> int:
    return nominal * (100 - TOLERANCE_PERCENT) // 100


WIDTH_BANDS = tuple((bucket, _lower_bound(width)) for bucket, width in NOMINAL_WIDTHS)
SD_MIN_WIDTH = _lower_bound(SD_NOMINAL_WIDTH)
HEIGHT_BANDS = tuple((bucket, _lower_bound(height)) for bucket, height in NOMINAL_HEIGHTS)


def classify_resolution(width: Optional[int], height: Optional[int] = None) -> Resolution:
    """Map pixel dimensions to a resolution bucket.

    Width is the primary signal since movies are usually cropped
    vertically. Height is used to split SD, and on its own when no
    width is available.

    >>> classify_resolution(1915).value
    '1080p'
    >>> classify_resolution(1280).value
    '720p'
    """
    if width and width > 0:
        for bucket, bound in WIDTH_BANDS:
            if width >= bound:
                return bucket
        if width >= SD_MIN_WIDTH:
            if height and height >= SD_PAL_MIN_HEIGHT:
                return Resolution.PAL
            return Resolution.NTSC
        return Resolution.UNKNOWN

    if height and height > 0:
        for bucket, bound in HEIGHT_BANDS:
            if height >= bound:
                return bucket

    return Resolution.UNKNOWN


def resolution_from_quality(quality: Optional[str]) -> Optional[Resolution]:
    """Infer the resolution implied by a Radarr quality name.

    >>> resolution_from_quality("Bluray-2160p").value
    '2160p'
    """
    if not quality:
        return None
    q = quality.lower()
    if "2160" in q or "uhd" in q or "4k" in q:
        return Resolution.UHD
    if "1440" in q:
        return Resolution.QHD
    if "1080" in q or "fhd" in q:
        return Resolution.FHD
    if "720" in q:
        return Resolution.HD
    if "576" in q:
        return Resolution.PAL
    if "480" in q:
        return Resolution.NTSC
    return None
