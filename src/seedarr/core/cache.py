"""Sidecar cache for mediainfo output, gated on the source file's mtime."""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from seedarr.core.analyzer import MediaInfoAnalyzer
from seedarr.exceptions import AnalysisError
from seedarr.models.technical import CacheEntry, TechnicalMetadata
from seedarr.utils.locks import KeyedLocks
from seedarr.utils.logger import get_logger

logger = get_logger(__name__)

CACHE_SUFFIX = ".mediainfo.json"
REPORT_SUFFIX = ".mediainfo.nfo"


def atomic_write_text(path: Path, text: str) -> None:
    """Write text to ``path`` via a temp file in the same directory and rename.

    Readers see either the previous content or the new one, never a
    partial write.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class CacheRepository(ABC):
    """Key-value store for CacheEntry objects, keyed by source video path."""

    @abstractmethod
    def get(self, video_path: Path) -> Optional[CacheEntry]:
        """Return the stored entry, or None on miss or unreadable state."""

    @abstractmethod
    def put(self, video_path: Path, entry: CacheEntry) -> None:
        """Store an entry, replacing any previous one."""

    @abstractmethod
    def invalidate(self, video_path: Path) -> None:
        """Drop the stored entry if any."""

    @abstractmethod
    def put_report(self, video_path: Path, text: str) -> None:
        """Store the human-readable report for a video."""

    @abstractmethod
    def report_path(self, video_path: Path) -> Optional[Path]:
        """Return an on-disk path of the stored report, if there is one."""

    @abstractmethod
    def has_report(self, video_path: Path) -> bool:
        """Whether a report is stored for a video."""


class SidecarCacheRepository(CacheRepository):
    """Stores cache files next to each video.

    Layout for ``/movies/Dune (2021)/Dune.mkv``:

        /movies/Dune (2021)/Dune.mkv.mediainfo.json
        /movies/Dune (2021)/Dune.mkv.mediainfo.nfo
    """

    @staticmethod
    def cache_path(video_path: Path) -> Path:
        return video_path.with_name(video_path.name + CACHE_SUFFIX)

    @staticmethod
    def _report_file(video_path: Path) -> Path:
        return video_path.with_name(video_path.name + REPORT_SUFFIX)

    def get(self, video_path: Path) -> Optional[CacheEntry]:
        path = self.cache_path(video_path)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Unreadable cache file, ignoring", cache=str(path), error=str(e))
            return None

        try:
            return CacheEntry.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Malformed cache file, ignoring",
                cache=str(path),
                error_count=e.error_count(),
            )
            return None

    def put(self, video_path: Path, entry: CacheEntry) -> None:
        path = self.cache_path(video_path)
        atomic_write_text(path, entry.model_dump_json(indent=2))
        logger.debug("Cache written", cache=str(path), mtime=entry.mtime)

    def invalidate(self, video_path: Path) -> None:
        try:
            self.cache_path(video_path).unlink()
        except FileNotFoundError:
            pass

    def put_report(self, video_path: Path, text: str) -> None:
        atomic_write_text(self._report_file(video_path), text)

    def report_path(self, video_path: Path) -> Optional[Path]:
        path = self._report_file(video_path)
        return path if path.is_file() else None

    def has_report(self, video_path: Path) -> bool:
        return self._report_file(video_path).is_file()


class InMemoryCacheRepository(CacheRepository):
    """Process-local repository; nothing touches the disk."""

    def __init__(self):
        self.entries: Dict[str, CacheEntry] = {}
        self.reports: Dict[str, str] = {}

    def get(self, video_path: Path) -> Optional[CacheEntry]:
        return self.entries.get(str(video_path))

    def put(self, video_path: Path, entry: CacheEntry) -> None:
        self.entries[str(video_path)] = entry

    def invalidate(self, video_path: Path) -> None:
        self.entries.pop(str(video_path), None)

    def put_report(self, video_path: Path, text: str) -> None:
        self.reports[str(video_path)] = text

    def report_path(self, video_path: Path) -> Optional[Path]:
        return None

    def has_report(self, video_path: Path) -> bool:
        return str(video_path) in self.reports


class TechnicalMetadataCache:
    """Memoize mediainfo analysis per source path, invalidated by mtime."""

    def __init__(
        self,
        repository: CacheRepository,
        analyzer: MediaInfoAnalyzer,
        enabled: bool = True,
    ):
        """Initialize cache.

        Args:
            repository: Where entries are stored
            analyzer: Collaborator invoked on miss
            enabled: When False, always analyze and never persist
        """
        self.repository = repository
        self.analyzer = analyzer
        self.enabled = enabled
        self._locks = KeyedLocks()

    def get_or_refresh(
        self, video_path: Path, current_mtime: Optional[float] = None
    ) -> TechnicalMetadata:
        """Return technical metadata for a video, re-analyzing when stale.

        Args:
            video_path: Local path of the source video
            current_mtime: Source mtime; read from disk when omitted

        Returns:
            TechnicalMetadata for the video

        Raises:
            AnalysisError: If a refresh is needed and analysis fails.
                Nothing is written in that case.
        """
        if not self.enabled:
            return self.analyzer.analyze(video_path)

        if current_mtime is None:
            try:
                current_mtime = video_path.stat().st_mtime
            except OSError as e:
                raise AnalysisError(f"Cannot stat {video_path}: {e}") from e

        with self._locks.hold(str(video_path)):
            entry = self.repository.get(video_path)
            if entry is not None and entry.is_fresh(current_mtime):
                logger.debug("Cache hit", file=str(video_path))
                if not self.repository.has_report(video_path):
                    logger.info("Regenerating missing mediainfo report", file=str(video_path))
                    self._refresh_report(video_path)
                return entry.technical

            logger.info(
                "Refreshing technical metadata",
                file=str(video_path),
                reason="miss" if entry is None else "stale",
            )
            technical = self.analyzer.analyze(video_path)
            try:
                self.repository.put(
                    video_path, CacheEntry(mtime=current_mtime, technical=technical)
                )
            except OSError as e:
                logger.warning("Could not write cache", file=str(video_path), error=str(e))
                return technical
            self._refresh_report(video_path)
            return technical

    def _refresh_report(self, video_path: Path) -> None:
        try:
            text = self.analyzer.render_report(video_path)
        except AnalysisError as e:
            logger.warning("Could not render mediainfo report", file=str(video_path), error=str(e))
            return
        try:
            self.repository.put_report(video_path, text)
        except OSError as e:
            logger.warning("Could not write mediainfo report", file=str(video_path), error=str(e))

    def report_path(self, video_path: Path) -> Optional[Path]:
        """On-disk cached report for a video, when caching is enabled."""
        if not self.enabled:
            return None
        return self.repository.report_path(video_path)
