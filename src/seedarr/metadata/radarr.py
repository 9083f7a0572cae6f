"""Radarr API client and movie payload parsing."""

from pathlib import PurePosixPath
from typing import List, Optional

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from seedarr.config import RadarrConfig
from seedarr.exceptions import RadarrError
from seedarr.models.metadata import DescriptiveMetadata
from seedarr.utils.language import normalize_language_code
from seedarr.utils.logger import get_logger

logger = get_logger(__name__)


class RadarrLanguage(BaseModel):
    """Radarr language information."""

    id: Optional[int] = None
    name: Optional[str] = None


class RadarrQualityDefinition(BaseModel):
    """Radarr quality definition (e.g. Bluray-2160p)."""

    id: Optional[int] = None
    name: Optional[str] = None
    source: Optional[str] = None
    resolution: Optional[int] = None


class RadarrQuality(BaseModel):
    """Radarr quality model wrapper."""

    quality: Optional[RadarrQualityDefinition] = None


class RadarrMediaInfo(BaseModel):
    """Radarr media info (slash-separated language strings)."""

    audioLanguages: Optional[str] = None
    subtitles: Optional[str] = None


class RadarrMovieFile(BaseModel):
    """Radarr movie file information."""

    id: Optional[int] = None
    path: Optional[str] = None
    relativePath: Optional[str] = None
    sceneName: Optional[str] = None
    releaseGroup: Optional[str] = None
    edition: Optional[str] = None
    quality: Optional[RadarrQuality] = None
    mediaInfo: Optional[RadarrMediaInfo] = None


class RadarrMovie(BaseModel):
    """Radarr movie resource (subset used for naming)."""

    id: int
    title: Optional[str] = None
    originalTitle: Optional[str] = None
    originalLanguage: Optional[RadarrLanguage] = None
    year: Optional[int] = None
    hasFile: Optional[bool] = None
    movieFile: Optional[RadarrMovieFile] = None

    @property
    def label(self) -> str:
        """Human-readable identifier for logs."""
        year_part = f" ({self.year})" if self.year else ""
        return f"{self.title or self.originalTitle or self.id}{year_part}"


def _split_languages(value: Optional[str]) -> List[str]:
    if not value:
        return []
    codes = []
    for part in value.split("/"):
        code = normalize_language_code(part)
        if code and code not in codes:
            codes.append(code)
    return codes


class RadarrMetadataParser:
    """Convert Radarr movie resources into DescriptiveMetadata."""

    def parse(self, movie: RadarrMovie) -> DescriptiveMetadata:
        """Extract descriptive metadata from a Radarr movie.

        Args:
            movie: Radarr movie resource

        Returns:
            DescriptiveMetadata instance
        """
        movie_file = movie.movieFile or RadarrMovieFile()
        quality = None
        if movie_file.quality and movie_file.quality.quality:
            quality = movie_file.quality.quality.name
        media_info = movie_file.mediaInfo or RadarrMediaInfo()
        original_language = None
        if movie.originalLanguage:
            original_language = normalize_language_code(movie.originalLanguage.name)

        file_name = None
        if movie_file.relativePath:
            file_name = PurePosixPath(movie_file.relativePath).name

        logger.debug(
            "Parsing Radarr metadata",
            movie=movie.label,
            quality=quality,
            release_group=movie_file.releaseGroup,
        )

        return DescriptiveMetadata(
            title=movie.title,
            original_title=movie.originalTitle,
            year=movie.year,
            original_language=original_language,
            quality=quality,
            release_group=movie_file.releaseGroup,
            scene_name=movie_file.sceneName,
            file_name=file_name,
            audio_languages=_split_languages(media_info.audioLanguages),
            subtitle_languages=_split_languages(media_info.subtitles),
            remote_path=movie_file.path,
            radarr_id=movie.id,
        )


class RadarrClient:
    """Radarr v3 API client with retry logic."""

    def __init__(self, config: RadarrConfig, client: Optional[httpx.AsyncClient] = None):
        """Initialize Radarr client.

        Args:
            config: Radarr configuration
            client: Optional preconfigured HTTP client
        """
        if not config.api_key:
            raise RadarrError("Radarr API key is not configured (radarr.api_key)")
        self.base_url = config.base_url
        self.client = client or httpx.AsyncClient(timeout=config.timeout_seconds)
        self.headers = {"X-Api-Key": config.api_key, "Accept": "application/json"}

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type((httpx.TransportError,)),
        reraise=True,
    )
    async def _get(self, path: str) -> httpx.Response:
        response = await self.client.get(f"{self.base_url}{path}", headers=self.headers)
        response.raise_for_status()
        return response

    async def list_movies(self, limit: Optional[int] = None) -> List[RadarrMovie]:
        """List movies that have a file on disk.

        Args:
            limit: Only return the first N movies with a file

        Returns:
            List of RadarrMovie

        Raises:
            RadarrError: On HTTP errors or an unexpected payload
        """
        try:
            response = await self._get("/api/v3/movie")
        except httpx.HTTPStatusError as e:
            logger.error(
                "Radarr API error",
                status_code=e.response.status_code,
                error=str(e),
            )
            raise RadarrError(f"Radarr API error: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("Radarr request failed", error=str(e))
            raise RadarrError(f"Radarr request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise RadarrError(f"Radarr returned invalid JSON: {e}") from e
        if not isinstance(payload, list):
            raise RadarrError("Radarr returned an unexpected payload for /api/v3/movie")

        movies: List[RadarrMovie] = []
        for raw in payload:
            try:
                movie = RadarrMovie.model_validate(raw)
            except ValidationError as e:
                logger.warning(
                    "Ignoring malformed Radarr movie",
                    movie_id=raw.get("id") if isinstance(raw, dict) else None,
                    error_count=e.error_count(),
                )
                continue
            if movie.movieFile is None:
                continue
            movies.append(movie)
            if limit is not None and len(movies) >= limit:
                break

        logger.info("Fetched movies from Radarr", count=len(movies), total=len(payload))
        return movies
