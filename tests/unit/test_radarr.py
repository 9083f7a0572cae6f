"""Unit tests for the Radarr client and payload parser."""

import httpx
import pytest
from tenacity import wait_none

from seedarr.config import RadarrConfig
from seedarr.exceptions import RadarrError
from seedarr.metadata.radarr import RadarrClient, RadarrMetadataParser, RadarrMovie


@pytest.fixture
def radarr_config():
    return RadarrConfig(base_url="http://radarr:7878/", api_key="test-key")


def make_client(config, handler):
    transport = httpx.MockTransport(handler)
    return RadarrClient(config, client=httpx.AsyncClient(transport=transport))


class TestRadarrMetadataParser:
    """Test conversion of Radarr movies to DescriptiveMetadata."""

    def test_parse(self, radarr_movie_payload):
        movie = RadarrMovie.model_validate(radarr_movie_payload)
        descriptive = RadarrMetadataParser().parse(movie)

        assert descriptive.title == "Interstellar"
        assert descriptive.original_title == "Interstellar"
        assert descriptive.year == 2014
        assert descriptive.original_language == "en"
        assert descriptive.quality == "Bluray-2160p"
        assert descriptive.release_group == "QTZ"
        assert descriptive.scene_name == "Interstellar.2014.MULTi.VFI.2160p.BluRay.x265-QTZ"
        assert descriptive.file_name == "Interstellar.mkv"
        assert descriptive.audio_languages == ["fr", "en"]
        assert descriptive.subtitle_languages == ["fr"]
        assert descriptive.remote_path == "/movies/Interstellar (2014)/Interstellar.mkv"
        assert descriptive.radarr_id == 1

    def test_parse_minimal(self):
        movie = RadarrMovie.model_validate({"id": 7, "title": "Heat"})
        descriptive = RadarrMetadataParser().parse(movie)

        assert descriptive.title == "Heat"
        assert descriptive.quality is None
        assert descriptive.remote_path is None
        assert descriptive.audio_languages == []

    def test_label(self, radarr_movie_payload):
        assert RadarrMovie.model_validate(radarr_movie_payload).label == "Interstellar (2014)"


class TestRadarrClient:
    """Test RadarrClient class."""

    def test_requires_api_key(self):
        with pytest.raises(RadarrError, match="API key"):
            RadarrClient(RadarrConfig())

    @pytest.mark.asyncio
    async def test_list_movies(self, radarr_config, radarr_movie_payload):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(
                200,
                json=[
                    radarr_movie_payload,
                    {"id": 2, "title": "Not Downloaded", "hasFile": False},
                    {"title": "Missing id"},
                ],
            )

        client = make_client(radarr_config, handler)
        try:
            movies = await client.list_movies()
        finally:
            await client.close()

        assert [m.id for m in movies] == [1]
        assert str(requests[0].url) == "http://radarr:7878/api/v3/movie"
        assert requests[0].headers["X-Api-Key"] == "test-key"

    @pytest.mark.asyncio
    async def test_limit(self, radarr_config, radarr_movie_payload):
        second = dict(radarr_movie_payload, id=2)
        third = dict(radarr_movie_payload, id=3)

        def handler(request):
            return httpx.Response(200, json=[radarr_movie_payload, second, third])

        client = make_client(radarr_config, handler)
        try:
            movies = await client.list_movies(limit=2)
        finally:
            await client.close()

        assert [m.id for m in movies] == [1, 2]

    @pytest.mark.asyncio
    async def test_http_error(self, radarr_config):
        def handler(request):
            return httpx.Response(401, json={"error": "Unauthorized"})

        client = make_client(radarr_config, handler)
        try:
            with pytest.raises(RadarrError, match="HTTP 401"):
                await client.list_movies()
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_unexpected_payload(self, radarr_config):
        def handler(request):
            return httpx.Response(200, json={"page": 1})

        client = make_client(radarr_config, handler)
        try:
            with pytest.raises(RadarrError, match="unexpected payload"):
                await client.list_movies()
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self, radarr_config, monkeypatch):
        monkeypatch.setattr(RadarrClient._get.retry, "wait", wait_none())
        attempts = []

        def handler(request):
            attempts.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(radarr_config, handler)
        try:
            with pytest.raises(RadarrError, match="request failed"):
                await client.list_movies()
        finally:
            await client.close()

        assert len(attempts) == 3
