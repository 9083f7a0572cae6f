"""Path mapping utility for Radarr integration."""

from pathlib import PurePosixPath, Path
from typing import List, Optional

from seedarr.config import PathMapping
from seedarr.utils.logger import get_logger

logger = get_logger(__name__)


class PathMapper:
    """Map remote Radarr paths to local filesystem paths."""

    def __init__(self, mappings: List[PathMapping]):
        """Initialize path mapper.

        Args:
            mappings: List of PathMapping objects
        """
        self.mappings = [(PurePosixPath(m.remote), Path(m.local)) for m in mappings]

    def map_path(self, remote_path: str) -> Optional[Path]:
        """Translate a Radarr path to a local filesystem path.

        The longest matching remote prefix wins. Prefixes only match on
        whole path components, so "/movies" does not match "/movies-4k".
        With no mappings configured the path is used as-is.

        Args:
            remote_path: Path as reported by Radarr

        Returns:
            Local filesystem path, or None if no mapping matches

        Example:
            mapper = PathMapper([
                PathMapping(remote="/movies", local="/mnt/nas/movies"),
                PathMapping(remote="/movies/4k", local="/mnt/uhd"),
            ])

            mapper.map_path("/movies/4k/Dune (2021)/Dune.mkv")
            # Returns: /mnt/uhd/Dune (2021)/Dune.mkv
        """
        if not self.mappings:
            return Path(remote_path)

        remote = PurePosixPath(remote_path)
        best = None
        for remote_prefix, local_prefix in self.mappings:
            try:
                relative = remote.relative_to(remote_prefix)
            except ValueError:
                continue
            if best is None or len(remote_prefix.parts) > len(best[0].parts):
                best = (remote_prefix, local_prefix, relative)

        if best is None:
            logger.warning(
                "No path mapping matched",
                remote_path=remote_path,
                configured_mappings=[(str(r), str(l)) for r, l in self.mappings],
            )
            return None

        remote_prefix, local_prefix, relative = best
        local_path = local_prefix.joinpath(*relative.parts)
        logger.debug(
            "Path mapped",
            remote_path=remote_path,
            remote_prefix=str(remote_prefix),
            local_path=str(local_path),
        )
        return local_path
