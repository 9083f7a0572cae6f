"""Per-movie processing pipeline orchestrator."""

import time
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from seedarr.config import Config
from seedarr.core.analyzer import MediaInfoAnalyzer
from seedarr.core.cache import SidecarCacheRepository, TechnicalMetadataCache
from seedarr.exceptions import AnalysisError, ExportError, PackagingError
from seedarr.export.packager import IntermodalPackager
from seedarr.export.planner import ExportPlanner, ensure_seed_root
from seedarr.metadata.radarr import RadarrMetadataParser, RadarrMovie
from seedarr.models.metadata import DescriptiveMetadata
from seedarr.models.release import ProcessResult
from seedarr.naming.builder import build_release_name
from seedarr.utils.logger import get_logger, movie_context
from seedarr.utils.path_mapper import PathMapper

logger = get_logger(__name__)


class ReleasePipeline:
    """Orchestrates naming and export for each movie independently."""

    def __init__(
        self,
        config: Config,
        analyzer: Optional[MediaInfoAnalyzer] = None,
        cache: Optional[TechnicalMetadataCache] = None,
        planner: Optional[ExportPlanner] = None,
        path_mapper: Optional[PathMapper] = None,
    ):
        """Initialize the pipeline with configuration.

        Collaborators default to the production implementations built
        from ``config``.

        Args:
            config: Application configuration
            analyzer: mediainfo analyzer
            cache: Technical metadata cache
            planner: Export planner; None disables export when no seed_path is set
            path_mapper: Radarr to local path mapper
        """
        self.config = config
        self.analyzer = analyzer or MediaInfoAnalyzer()
        self.cache = cache or TechnicalMetadataCache(
            SidecarCacheRepository(),
            self.analyzer,
            enabled=config.media.enable_mediainfo_cache,
        )
        self.path_mapper = path_mapper or PathMapper(config.radarr.path_mappings)
        self.parser = RadarrMetadataParser()

        if planner is None and config.media.seed_path:
            seed_root = Path(config.media.seed_path)
            ensure_seed_root(seed_root)
            planner = ExportPlanner(
                seed_root,
                packager=IntermodalPackager.from_config(config.torrent),
                dry_run=config.torrent.dry_run,
                torrent_output_dir=(
                    Path(config.torrent.output_dir) if config.torrent.output_dir else None
                ),
            )
        self.planner = planner

    def process_movie(self, movie: RadarrMovie) -> ProcessResult:
        """Resolve the local file of a Radarr movie and process it."""
        descriptive = self.parser.parse(movie)
        label = str(descriptive)

        if not descriptive.remote_path:
            logger.warning("Skipping movie with no file path", movie=label)
            return ProcessResult(status="skipped", label=label, reason="no_file")

        local_path = self.path_mapper.map_path(descriptive.remote_path)
        if local_path is None:
            logger.warning(
                "Skipping unmapped path (no radarr.path_mappings match)",
                movie=label,
                remote_path=descriptive.remote_path,
            )
            return ProcessResult(status="skipped", label=label, reason="unmapped_path")

        return self.process(descriptive, local_path)

    def process(self, descriptive: DescriptiveMetadata, local_path: Path) -> ProcessResult:
        """Process one movie through the complete pipeline.

        Pipeline steps:
        1. Validation (local file exists)
        2. Technical metadata (cached mediainfo)
        3. Release name (reconcile, derive tags, assemble)
        4. Export (scene dir, media link, .nfo, torrent)

        Errors are contained to this movie and reported in the result.

        Args:
            descriptive: Radarr-side metadata
            local_path: Local path of the movie file

        Returns:
            ProcessResult with status and details
        """
        label = str(descriptive)
        with movie_context(label):
            return self._process(descriptive, label, local_path)

    def _process(
        self, descriptive: DescriptiveMetadata, label: str, local_path: Path
    ) -> ProcessResult:
        start_time = time.time()
        logger.info("Processing movie", file=str(local_path))

        if not local_path.is_file():
            logger.warning("File not found", file=str(local_path))
            return ProcessResult(status="skipped", label=label, reason="file_missing")

        name = None
        try:
            technical = self.cache.get_or_refresh(local_path)

            decision = build_release_name(descriptive, technical, self.config)
            name = decision.name
            logger.info(
                "Release name built",
                original=decision.original,
                proposed=name,
                issues=[issue.value for issue in decision.issues or []],
            )

            if self.planner is None:
                return ProcessResult(
                    status="success", label=label, name=name, reason="no_seed_path"
                )

            actions = self.planner.export(
                name,
                local_path,
                cached_report=self.cache.report_path(local_path),
                render_report=lambda: self.analyzer.render_report(local_path),
            )

            duration_ms = int((time.time() - start_time) * 1000)
            logger.info(
                "Movie processed",
                name=name,
                actions=actions,
                duration_ms=duration_ms,
            )
            status = "dry_run" if self.config.torrent.dry_run else "success"
            return ProcessResult(status=status, label=label, name=name, actions=actions)

        except AnalysisError as e:
            logger.error("Technical analysis failed, skipping movie", error=str(e))
            return ProcessResult(status="error", label=label, reason="analysis_failed", error=str(e))
        except ExportError as e:
            logger.error("Export failed", name=name, error=str(e))
            return ProcessResult(
                status="error", label=label, name=name, reason="export_failed", error=str(e)
            )
        except PackagingError as e:
            return ProcessResult(
                status="error", label=label, name=name, reason="packaging_failed", error=str(e)
            )
        except Exception as e:
            logger.exception("Pipeline error", error=str(e))
            return ProcessResult(status="error", label=label, name=name, error=str(e))

    def run(self, movies: Iterable[RadarrMovie]) -> List[ProcessResult]:
        """Process movies sequentially; one failure never stops the run."""
        results = [self.process_movie(movie) for movie in movies]
        logger.info("Run finished", **summarize(results))
        return results


def summarize(results: Iterable[ProcessResult]) -> Dict[str, int]:
    """Count results per status."""
    counts = Counter(result.status for result in results)
    return {status: counts.get(status, 0) for status in ("success", "dry_run", "skipped", "error")}
