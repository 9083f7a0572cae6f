"""Torrent packaging of exported scene directories."""

import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from seedarr.config import TorrentConfig
from seedarr.exceptions import PackagingError
from seedarr.utils.logger import get_logger

logger = get_logger(__name__)

PART_SUFFIX = ".part"


class Packager(ABC):
    """Abstract base class for packaging collaborators."""

    @abstractmethod
    def package(self, source_dir: Path, output: Path) -> Path:
        """Package ``source_dir`` into the single file ``output``.

        ``output`` must only exist once packaging fully succeeded; it is
        the completion marker.

        Raises:
            PackagingError: If packaging fails
        """
        pass


class IntermodalPackager(Packager):
    """Create .torrent files with the intermodal (imdl) CLI."""

    def __init__(
        self,
        private: bool = True,
        announce_url: Optional[str] = None,
        binary: str = "imdl",
        timeout_seconds: int = 3600,
    ):
        """Initialize packager.

        Args:
            private: Set the private flag on created torrents
            announce_url: Tracker announce URL, if any
            binary: imdl executable name or path
            timeout_seconds: Maximum time for hashing one directory
        """
        self.private = private
        self.announce_url = announce_url
        self.binary = binary
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_config(cls, config: TorrentConfig) -> "IntermodalPackager":
        return cls(private=config.private, announce_url=config.announce_url)

    def build_command(self, source_dir: Path, output: Path) -> List[str]:
        """Build the imdl command line."""
        cmd = [self.binary, "torrent", "create", "--follow-symlinks"]
        if self.private:
            cmd.append("--private")
        if self.announce_url:
            cmd.extend(["--announce", self.announce_url])
        cmd.extend(["--output", str(output), str(source_dir)])
        return cmd

    def package(self, source_dir: Path, output: Path) -> Path:
        """Create ``output`` from ``source_dir``.

        imdl writes to ``<output>.part`` which is renamed on success, so an
        interrupted run never leaves a completion marker behind.
        """
        if shutil.which(self.binary) is None:
            raise PackagingError(f"{self.binary} not found in PATH - is intermodal installed?")

        output.parent.mkdir(parents=True, exist_ok=True)
        partial = output.with_name(output.name + PART_SUFFIX)
        if partial.exists():
            partial.unlink()

        cmd = self.build_command(source_dir, partial)
        logger.info("Creating torrent", source=str(source_dir), output=str(output))
        logger.debug("Executing imdl", command=cmd)

        try:
            subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            logger.error("imdl timeout", source=str(source_dir), timeout=self.timeout_seconds)
            raise PackagingError(f"imdl timed out after {self.timeout_seconds}s") from e
        except subprocess.CalledProcessError as e:
            logger.error(
                "imdl failed",
                source=str(source_dir),
                returncode=e.returncode,
                stderr=e.stderr,
            )
            raise PackagingError(f"imdl exited with status {e.returncode}") from e
        except OSError as e:
            raise PackagingError(f"Failed to run imdl: {e}") from e

        if not partial.exists():
            raise PackagingError(f"imdl reported success but wrote no file: {partial}")

        os.replace(partial, output)
        logger.info("Torrent created", output=str(output))
        return output
