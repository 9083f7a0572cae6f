"""Fixed-order release name assembly."""

from seedarr.models.release import NameTokens
from seedarr.naming.reconciler import UNKNOWN_TITLE
from seedarr.naming.sanitize import JOIN, collapse_dots, sanitize_release_name


def assemble(tokens: NameTokens) -> str:
    """Join name slots into a release name.

    Empty slots contribute nothing. Dot runs created at slot boundaries
    are collapsed again, and the group is appended as ``-<group>``. The
    body is never empty, so the name never starts with the group.

    >>> assemble(NameTokens(title="Heat", year="1995", video_codec="x264", group="FGT"))
    'Heat.1995.x264-FGT'
    """
    slots = [sanitize_release_name(slot) for slot in tokens.dotted_slots() if slot]
    body = collapse_dots(JOIN.join(slot for slot in slots if slot)) or UNKNOWN_TITLE
    if tokens.group:
        return f"{body}-{tokens.group}"
    return body
