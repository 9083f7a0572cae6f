"""Descriptive metadata sources for Seedarr.

Radarr is the media-management service that owns titles, years,
quality names and release groups.
"""

from seedarr.metadata.radarr import RadarrClient, RadarrMetadataParser, RadarrMovie

__all__ = ["RadarrClient", "RadarrMetadataParser", "RadarrMovie"]
