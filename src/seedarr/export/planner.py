"""Idempotent export of a release into the seed tree.

Layout for a release name N and source video ``movie.mkv``:

    <seed_root>/N/N.mkv  -> symlink to the source video
    <seed_root>/N/N.nfo  -> symlink to the cached mediainfo report, or a copy
    <output_dir or seed_root/N>/N.torrent

Each step is probed and applied independently so that a partial earlier
run is completed without redoing finished steps.
"""

import os
from pathlib import Path
from typing import Callable, List, Optional

from seedarr.core.cache import atomic_write_text
from seedarr.exceptions import AnalysisError, ExportError, PackagingError
from seedarr.export.packager import Packager
from seedarr.models.release import ExportDecision
from seedarr.utils.locks import KeyedLocks
from seedarr.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_EXTENSION = "mkv"


def entry_exists(path: Path) -> bool:
    """True if anything, a dangling symlink included, sits at ``path``."""
    return os.path.lexists(path)


def link_target(link_dir: Path, target: Path) -> Path:
    """Target to store in a symlink placed in ``link_dir``.

    Relative when both paths share an ancestor below the filesystem root,
    absolute otherwise.
    """
    link_dir_abs = os.path.abspath(link_dir)
    target_abs = os.path.abspath(target)
    try:
        common = os.path.commonpath([link_dir_abs, target_abs])
    except ValueError:
        # Different drives
        return Path(target_abs)

    # A filesystem root is its own parent
    if Path(common).parent == Path(common):
        return Path(target_abs)
    return Path(os.path.relpath(target_abs, link_dir_abs))


def ensure_seed_root(seed_root: Path) -> None:
    """Create the seed root if missing.

    Raises:
        ExportError: If the path exists but is not a directory, or cannot be created
    """
    if seed_root.exists():
        if not seed_root.is_dir():
            raise ExportError(f"Configured seed_path '{seed_root}' exists but is not a directory")
        return
    try:
        seed_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Failed to create configured seed_path '{seed_root}': {e}") from e
    logger.info("Created seed_path directory", seed_path=str(seed_root))


class ExportPlanner:
    """Decide and apply the export steps for one release name."""

    def __init__(
        self,
        seed_root: Path,
        packager: Optional[Packager] = None,
        dry_run: bool = False,
        torrent_output_dir: Optional[Path] = None,
    ):
        """Initialize export planner.

        Args:
            seed_root: Root of the export tree
            packager: Packaging collaborator; packaging is skipped when None
            dry_run: Skip packaging, still export files
            torrent_output_dir: Where .torrent files go (defaults to the scene dir)
        """
        self.seed_root = seed_root
        self.packager = packager
        self.dry_run = dry_run
        self.torrent_output_dir = torrent_output_dir
        self._locks = KeyedLocks()

    def torrent_path(self, name: str) -> Path:
        output_root = self.torrent_output_dir or (self.seed_root / name)
        return output_root / f"{name}.torrent"

    def plan(self, name: str, source: Path) -> ExportDecision:
        """Probe current filesystem state for a release name.

        Args:
            name: Canonical release name
            source: Local source video

        Returns:
            ExportDecision with one flag per pending step
        """
        scene_dir = self.seed_root / name
        ext = source.suffix.lstrip(".") or DEFAULT_EXTENSION
        media_path = scene_dir / f"{name}.{ext}"
        sidecar_path = scene_dir / f"{name}.nfo"
        torrent_path = self.torrent_path(name)

        return ExportDecision(
            name=name,
            scene_dir=scene_dir,
            media_path=media_path,
            sidecar_path=sidecar_path,
            torrent_path=torrent_path,
            needs_directory=not scene_dir.is_dir(),
            needs_media_link=not entry_exists(media_path),
            needs_sidecar=not entry_exists(sidecar_path),
            needs_packaging=(
                self.packager is not None
                and not self.dry_run
                and not torrent_path.exists()
            ),
        )

    def export(
        self,
        name: str,
        source: Path,
        cached_report: Optional[Path] = None,
        render_report: Optional[Callable[[], str]] = None,
    ) -> List[str]:
        """Plan and apply all pending steps for a release name.

        Steps for the same name are serialized.

        Args:
            name: Canonical release name
            source: Local source video
            cached_report: On-disk mediainfo report to link as .nfo
            render_report: Produces report text when no cached report exists

        Returns:
            Names of the steps that were performed

        Raises:
            ExportError: If a filesystem step fails
            PackagingError: If torrent creation fails; files stay in place
        """
        with self._locks.hold(name):
            decision = self.plan(name, source)
            if decision.is_complete:
                logger.debug("Export already complete", name=name)
                return []
            return self.apply(decision, source, cached_report, render_report)

    def apply(
        self,
        decision: ExportDecision,
        source: Path,
        cached_report: Optional[Path] = None,
        render_report: Optional[Callable[[], str]] = None,
    ) -> List[str]:
        """Perform the steps flagged in ``decision``."""
        actions: List[str] = []

        if decision.needs_directory:
            try:
                decision.scene_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ExportError(f"Failed to create '{decision.scene_dir}': {e}") from e
            logger.debug("Created scene directory", scene_dir=str(decision.scene_dir))
            actions.append("directory")

        if decision.needs_media_link:
            self._symlink(source, decision.media_path)
            actions.append("media")

        if decision.needs_sidecar:
            if self._write_sidecar(decision, cached_report, render_report):
                actions.append("nfo")

        if decision.needs_packaging:
            try:
                self.packager.package(decision.scene_dir, decision.torrent_path)
            except PackagingError as e:
                logger.error(
                    "Torrent creation failed, exported files kept",
                    name=decision.name,
                    error=str(e),
                )
                raise
            actions.append("torrent")
        elif self.dry_run and not decision.torrent_path.exists():
            logger.info("Dry-run enabled: skipping torrent creation", name=decision.name)

        logger.info("Export updated", name=decision.name, actions=actions)
        return actions

    def _symlink(self, target: Path, link: Path) -> None:
        stored = link_target(link.parent, target)
        logger.debug("Symlinking", link=str(link), target=str(stored))
        try:
            os.symlink(stored, link)
        except FileExistsError:
            logger.debug("Link appeared concurrently, keeping it", link=str(link))
        except OSError as e:
            raise ExportError(f"Failed to symlink '{link}' -> '{stored}': {e}") from e

    def _write_sidecar(
        self,
        decision: ExportDecision,
        cached_report: Optional[Path],
        render_report: Optional[Callable[[], str]],
    ) -> bool:
        if cached_report is not None and cached_report.is_file():
            try:
                self._symlink(cached_report, decision.sidecar_path)
                return True
            except ExportError as e:
                logger.warning("Falling back to a rendered .nfo", error=str(e))

        if render_report is None:
            logger.warning("No mediainfo report available for .nfo", name=decision.name)
            return False

        try:
            text = render_report()
        except AnalysisError as e:
            logger.warning("Could not render .nfo", name=decision.name, error=str(e))
            return False

        try:
            atomic_write_text(decision.sidecar_path, text)
        except OSError as e:
            raise ExportError(f"Failed to write '{decision.sidecar_path}': {e}") from e
        return True
