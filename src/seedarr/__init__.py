"""Seedarr - publish a Radarr library as symlinked, torrent-ready releases."""

__version__ = "0.3.0"
