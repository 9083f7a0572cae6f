"""Release name construction from Radarr and mediainfo metadata."""

from dataclasses import dataclass
from typing import List, Optional

from seedarr.config import Config
from seedarr.models.metadata import DescriptiveMetadata
from seedarr.models.release import NameTokens, ReconciledMetadata
from seedarr.models.technical import TechnicalMetadata
from seedarr.naming.assembler import assemble
from seedarr.naming.reconciler import UNKNOWN_TITLE, reconcile
from seedarr.naming.sanitize import resolve_group, sanitize_title
from seedarr.naming.tags import LanguagePolicy, derive_tags
from seedarr.naming.validator import Issue, validate_scene_name


@dataclass
class NameDecision:
    """A rebuilt release name and why the existing one was not reused."""

    name: str
    tokens: NameTokens
    reconciled: ReconciledMetadata
    original: Optional[str] = None
    issues: Optional[List[Issue]] = None

    @property
    def changed(self) -> bool:
        return self.name != self.original


def build_tokens(
    reconciled: ReconciledMetadata,
    policy: LanguagePolicy,
    placeholder_on_missing_group: bool,
) -> NameTokens:
    """Fill name slots from reconciled metadata."""
    tags = derive_tags(reconciled, policy)
    return NameTokens(
        title=sanitize_title(reconciled.title) or UNKNOWN_TITLE,
        year=str(reconciled.year) if reconciled.year else None,
        language_tag=tags.language_tag,
        resolution=reconciled.resolution,
        source=reconciled.source,
        extras=tags.extras,
        audio_codec=tags.audio_codec,
        audio_channels=tags.audio_channels,
        video_codec=tags.video_codec,
        group=resolve_group(reconciled.release_group, placeholder_on_missing_group),
    )


def build_release_name(
    descriptive: DescriptiveMetadata,
    technical: TechnicalMetadata,
    config: Config,
) -> NameDecision:
    """Deterministically build the release name for a movie.

    The name is always rebuilt from metadata, never copied from Radarr's
    recorded scene name; that name is only validated for reporting and
    searched for edition markers.

    Args:
        descriptive: Radarr-side metadata
        technical: mediainfo-side metadata
        config: Application configuration

    Returns:
        NameDecision with the canonical name
    """
    reconciled = reconcile(descriptive, technical, config.media)
    tokens = build_tokens(
        reconciled,
        LanguagePolicy.from_config(config.language),
        config.media.append_no_tag_on_missing_group,
    )
    return NameDecision(
        name=assemble(tokens),
        tokens=tokens,
        reconciled=reconciled,
        original=descriptive.scene_name,
        issues=validate_scene_name(descriptive.scene_name).issues,
    )
