"""Total text normalizers for release name tokens.

None of these functions raise; the worst case is an empty string.
"""

import re
import unicodedata
from typing import Optional

JOIN = "."
NO_TAG_PLACEHOLDER = "NoTag"

# Decorative symbols that never belong in a release name
BLACKLIST = frozenset("©®™℗§¶•†‡°ºª")

_DOT_RUN = re.compile(r"\.{2,}")


def _is_dropped(ch: str) -> bool:
    return ch in BLACKLIST or unicodedata.category(ch).startswith("C")


def collapse_dots(text: str) -> str:
    """Collapse runs of dots and trim dots at both ends."""
    return _DOT_RUN.sub(JOIN, text).strip(JOIN)


def sanitize_title(text: Optional[str]) -> str:
    """Turn free text into dot-separated title tokens.

    Letters (accented included) and digits are kept, blacklisted symbols
    and control characters are dropped, and any other character acts as a
    separator. Separator runs collapse into a single dot.

    >>> sanitize_title("À bout de souffle")
    'À.bout.de.souffle'
    >>> sanitize_title("Mission: Impossible - Dead Reckoning (Part One)")
    'Mission.Impossible.Dead.Reckoning.Part.One'
    """
    if not text:
        return ""
    try:
        normalized = unicodedata.normalize("NFC", str(text))
    except (TypeError, ValueError):
        return ""

    out = []
    for ch in normalized:
        if _is_dropped(ch):
            continue
        elif ch.isalnum():
            out.append(ch)
        else:
            out.append(JOIN)
    return collapse_dots("".join(out))


def sanitize_group(text: Optional[str]) -> str:
    """Keep only ASCII letters and digits of a release group.

    >>> sanitize_group("QxR [HEVC]")
    'QxRHEVC'
    """
    if not text:
        return ""
    return "".join(ch for ch in str(text) if ch.isascii() and ch.isalnum())


def resolve_group(text: Optional[str], placeholder_on_missing: bool) -> Optional[str]:
    """Sanitized group, the placeholder, or None when the suffix is omitted."""
    group = sanitize_group(text)
    if group:
        return group
    return NO_TAG_PLACEHOLDER if placeholder_on_missing else None


def sanitize_release_name(text: Optional[str]) -> str:
    """Final pass over an assembled name.

    Drops blacklisted symbols and control characters, keeps everything
    else including dots and hyphens.
    """
    if not text:
        return ""
    return "".join(ch for ch in str(text) if not _is_dropped(ch))
