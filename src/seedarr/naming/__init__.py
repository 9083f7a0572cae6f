"""Deterministic release naming.

Turns Radarr's descriptive metadata and mediainfo's technical metadata
into a single scene-style release name.
"""

from seedarr.naming.builder import NameDecision, build_release_name

__all__ = ["NameDecision", "build_release_name"]
