"""Tag derivation for release names.

Every mapping here is a declarative table; adding a marker or a codec is a
table edit.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Sequence, Tuple

from seedarr.config import LanguageConfig
from seedarr.models.release import ReconciledMetadata
from seedarr.models.technical import AudioTrack
from seedarr.utils.language import normalize_language_code


def _marker(words: str) -> Pattern[str]:
    # Letters may not touch the marker on either side; dots, spaces,
    # underscores and digits may.
    return re.compile(rf"(?<![a-z]){words}(?![a-z])", re.IGNORECASE)


# Edition markers salvaged from free text, in output order
SALVAGE_MARKERS: Tuple[Tuple[Pattern[str], str], ...] = (
    (_marker(r"imax"), "IMAX"),
    (_marker(r"4k[\s._-]?light"), "4KLight"),
    (_marker(r"hd[\s._-]?light"), "HDLight"),
    (_marker(r"unrated"), "Unrated"),
    (_marker(r"extended"), "Extended"),
    (_marker(r"remastered"), "Remastered"),
    (_marker(r"director[’'`]?s?[\s._-]*(?:\w+[\s._-]*)?cut"), "Directors.Cut"),
    (_marker(r"theatrical[\s._-]*cut"), "Theatrical.Cut"),
    (_marker(r"proper"), "Proper"),
    (_marker(r"repack"), "Repack"),
)

# mediainfo video Format -> release token; checked in order
VIDEO_CODECS: Tuple[Tuple[str, str], ...] = (
    ("hevc", "x265"),
    ("h.265", "x265"),
    ("h265", "x265"),
    ("x265", "x265"),
    ("avc", "x264"),
    ("h.264", "x264"),
    ("h264", "x264"),
    ("x264", "x264"),
    ("av1", "AV1"),
    ("vp9", "VP9"),
)

# Legacy formats that are never rendered
EXCLUDED_VIDEO_CODECS = frozenset({"mpeg video", "vc-1"})

# mediainfo audio Format -> release token; checked in order, E-AC-3 before AC-3
AUDIO_CODECS: Tuple[Tuple[str, str], ...] = (
    ("e-ac-3", "EAC3"),
    ("eac3", "EAC3"),
    ("ac-3", "AC3"),
    ("ac3", "AC3"),
    ("mlp fba", "TrueHD"),
    ("truehd", "TrueHD"),
    ("dts", "DTS"),
    ("aac", "AAC"),
    ("flac", "FLAC"),
    ("opus", "OPUS"),
    ("mpeg audio", "MP3"),
)

AUDIO_CHANNELS = {
    8: "7.1",
    7: "6.1",
    6: "5.1",
    2: "2.0",
    1: "1.0",
}

BIT_DEPTH_BASELINE = 8


@dataclass(frozen=True)
class LanguagePolicy:
    """Target-language tagging policy.

    One language is treated as the dub target; the other tags are named
    relative to it.
    """

    dub_language: str = "fr"
    dub_tag: str = "VF"
    multi_tag: str = "MULTi"
    subtitled_original_tag: str = "VOSTFR"
    subtitled_original_languages: Tuple[str, ...] = ("en",)
    regional_dub_tags: Tuple[Tuple[str, str], ...] = (
        ("vff", "VFF"),
        ("vfq", "VFQ"),
        ("vfi", "VFI"),
    )

    @classmethod
    def from_config(cls, config: LanguageConfig) -> "LanguagePolicy":
        return cls(
            dub_language=normalize_language_code(config.dub_language) or config.dub_language,
            dub_tag=config.dub_tag,
            multi_tag=config.multi_tag,
            subtitled_original_tag=config.subtitled_original_tag,
            subtitled_original_languages=tuple(
                normalize_language_code(code) or code
                for code in config.subtitled_original_languages
            ),
            regional_dub_tags=tuple(
                (entry.pattern.lower(), entry.tag) for entry in config.regional_dub_tags
            ),
        )


def _distinct(values: Sequence[Optional[str]]) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def language_tag(
    audio_tracks: Sequence[AudioTrack],
    original_language: Optional[str],
    policy: LanguagePolicy,
) -> Optional[str]:
    """Tag describing the spoken languages of a release.

    >>> tracks = [AudioTrack(language="fr"), AudioTrack(language="en")]
    >>> language_tag(tracks, "en", LanguagePolicy())
    'MULTi.VF'
    """
    languages = _distinct([normalize_language_code(t.language) for t in audio_tracks])
    if not languages:
        return None
    if len(languages) > 1:
        return f"{policy.multi_tag}.{policy.dub_tag}"

    only = languages[0]
    if only == policy.dub_language:
        return policy.dub_tag

    original = normalize_language_code(original_language)
    if original is not None:
        if only == original:
            return policy.subtitled_original_tag
    elif only in policy.subtitled_original_languages:
        return policy.subtitled_original_tag
    return None


def regional_dub_tags(audio_tracks: Sequence[AudioTrack], policy: LanguagePolicy) -> List[str]:
    """Tags for regional dub variants named in audio track titles."""
    titles = [t.title.lower() for t in audio_tracks if t.title]
    return [tag for pattern, tag in policy.regional_dub_tags if any(pattern in t for t in titles)]


def dynamic_range_tags(hdr: bool, dv: bool) -> List[str]:
    """DV and HDR tags. DV implies HDR."""
    tags = []
    if dv:
        tags.append("DV")
    if hdr or dv:
        tags.append("HDR")
    return tags


def salvage_extras(text: Optional[str]) -> List[str]:
    """Edition markers found in free text, in table order, each once.

    >>> salvage_extras("Movie.2019.REPACK.IMAX.2160p")
    ['IMAX', 'Repack']
    """
    if not text:
        return []
    return [token for pattern, token in SALVAGE_MARKERS if pattern.search(text)]


def video_codec_token(codec: Optional[str]) -> Optional[str]:
    """Canonical video codec token, or None when unknown or excluded."""
    if not codec:
        return None
    c = codec.strip().lower()
    if c in EXCLUDED_VIDEO_CODECS:
        return None
    for marker, token in VIDEO_CODECS:
        if marker in c:
            return token
    return None


def bit_depth_token(bit_depth: Optional[int]) -> Optional[str]:
    """'<n>bit' above the 8-bit baseline, else None."""
    if bit_depth is None or bit_depth <= BIT_DEPTH_BASELINE:
        return None
    return f"{bit_depth}bit"


def audio_codec_token(track: Optional[AudioTrack]) -> Optional[str]:
    """Canonical audio codec token of a track."""
    if track is None or not track.codec:
        return None
    c = track.codec.lower()
    for marker, token in AUDIO_CODECS:
        if marker in c:
            return token
    return None


def audio_channels_token(track: Optional[AudioTrack]) -> Optional[str]:
    """Channel layout token of a track."""
    if track is None or track.channels is None:
        return None
    return AUDIO_CHANNELS.get(track.channels)


def primary_audio(audio_tracks: Sequence[AudioTrack]) -> Optional[AudioTrack]:
    """First default-flagged track, else the first track."""
    for track in audio_tracks:
        if track.is_default:
            return track
    return audio_tracks[0] if audio_tracks else None


@dataclass
class DerivedTags:
    """All non-title tokens derived from reconciled metadata."""

    language_tag: Optional[str] = None
    extras: List[str] = field(default_factory=list)
    audio_codec: Optional[str] = None
    audio_channels: Optional[str] = None
    video_codec: Optional[str] = None


def derive_tags(reconciled: ReconciledMetadata, policy: LanguagePolicy) -> DerivedTags:
    """Derive language, extras and technical tokens.

    Extras order: bit depth, DV, HDR, regional dub tags, salvaged
    edition markers.
    """
    extras: List[str] = []

    def add(token: Optional[str]) -> None:
        if token and token not in extras:
            extras.append(token)

    add(bit_depth_token(reconciled.bit_depth))
    for token in dynamic_range_tags(reconciled.hdr, reconciled.dv):
        add(token)
    for token in regional_dub_tags(reconciled.audio_tracks, policy):
        add(token)
    for token in salvage_extras(reconciled.salvage_text):
        add(token)

    audio = primary_audio(reconciled.audio_tracks)
    return DerivedTags(
        language_tag=language_tag(reconciled.audio_tracks, reconciled.original_language, policy),
        extras=extras,
        audio_codec=audio_codec_token(audio),
        audio_channels=audio_channels_token(audio),
        video_codec=video_codec_token(reconciled.video_codec),
    )
