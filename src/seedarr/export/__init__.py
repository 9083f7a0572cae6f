"""Symlinked export tree and torrent packaging."""
