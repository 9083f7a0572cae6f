"""Shared pytest fixtures for Seedarr tests."""

import json
from pathlib import Path

import pytest

from seedarr.config import Config, MediaConfig
from seedarr.exceptions import AnalysisError, PackagingError
from seedarr.export.packager import Packager
from seedarr.models.metadata import DescriptiveMetadata
from seedarr.models.technical import AudioTrack, TechnicalMetadata


class FakeAnalyzer:
    """Stands in for MediaInfoAnalyzer; counts invocations."""

    def __init__(self, technical=None, report="General\nFormat : Matroska\n", fail=False):
        self.technical = technical or TechnicalMetadata()
        self.report = report
        self.fail = fail
        self.analyze_calls = 0
        self.report_calls = 0

    def analyze(self, file_path: Path) -> TechnicalMetadata:
        self.analyze_calls += 1
        if self.fail:
            raise AnalysisError("mediainfo exited with status 1")
        return self.technical

    def render_report(self, file_path: Path) -> str:
        self.report_calls += 1
        return self.report


class FakePackager(Packager):
    """Writes a placeholder .torrent instead of running imdl."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def package(self, source_dir: Path, output: Path) -> Path:
        self.calls.append((source_dir, output))
        if self.fail:
            raise PackagingError("imdl exited with status 1")
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(b"d8:announce0:e")
        return output


@pytest.fixture
def default_config():
    """Create a default configuration for testing."""
    return Config()


@pytest.fixture
def interstellar():
    """Descriptive metadata for an English-language movie with a group."""
    return DescriptiveMetadata(
        title="Interstellar",
        original_title="Interstellar",
        year=2014,
        original_language="en",
        quality="Bluray-2160p",
        release_group="QTZ",
        scene_name="Interstellar.2014.MULTi.VFI.2160p.BluRay.x265-QTZ",
    )


@pytest.fixture
def interstellar_technical():
    """Technical metadata for a 2160p HDR HEVC file with French and English audio."""
    return TechnicalMetadata(
        container="Matroska",
        video_codec="HEVC",
        video_profile="Main 10",
        width=3840,
        height=1600,
        bit_depth=10,
        hdr=True,
        dv=False,
        audio_tracks=[
            AudioTrack(language="fr", codec="AC-3", title="French VFI", is_default=True),
            AudioTrack(language="en", codec="AC-3", title="English"),
        ],
        subtitle_languages=["fr"],
    )


@pytest.fixture
def fake_analyzer(interstellar_technical):
    """Analyzer returning the Interstellar technical metadata."""
    return FakeAnalyzer(interstellar_technical)


@pytest.fixture
def mediainfo_json():
    """A representative mediainfo --Output=JSON document."""
    return {
        "creatingLibrary": {"name": "MediaInfoLib", "version": "23.10"},
        "media": {
            "@ref": "/movies/Interstellar (2014)/Interstellar.mkv",
            "track": [
                {"@type": "General", "Format": "Matroska", "VideoCount": "1"},
                {
                    "@type": "Video",
                    "Format": "HEVC",
                    "Format_Profile": "Main 10",
                    "Width": "3840",
                    "Height": "1600",
                    "BitDepth": "10",
                    "HDR_Format": "SMPTE ST 2086",
                    "HDR_Format_Compatibility": "HDR10",
                    "transfer_characteristics": "PQ",
                },
                {
                    "@type": "Audio",
                    "Format": "AC-3",
                    "Format_Commercial_IfAny": "Dolby Digital",
                    "Channels": "6",
                    "Language": "fr",
                    "Title": "VFI",
                    "Default": "Yes",
                },
                {
                    "@type": "Audio",
                    "Format": "E-AC-3",
                    "Channels": "8",
                    "Language": "en-US",
                    "Default": "No",
                },
                {"@type": "Text", "Language": "fr", "Format": "UTF-8"},
                {"@type": "Text", "Language": "fr", "Format": "PGS"},
                {"@type": "Text", "Language": "en", "Format": "UTF-8"},
            ],
        },
    }


@pytest.fixture
def mediainfo_stdout(mediainfo_json):
    """mediainfo JSON output as the subprocess would print it."""
    return json.dumps(mediainfo_json)


@pytest.fixture
def video_file(tmp_path):
    """A small fake movie file inside a library folder."""
    movie_dir = tmp_path / "library" / "Interstellar (2014)"
    movie_dir.mkdir(parents=True)
    video = movie_dir / "Interstellar.mkv"
    video.write_bytes(b"\x1a\x45\xdf\xa3" + b"0" * 1024)
    return video


@pytest.fixture
def original_title_config():
    """Configuration using the deprecated use_original_title flag."""
    return Config(media=MediaConfig(use_original_title=True))


@pytest.fixture
def make_analyzer():
    """Factory for analyzers with custom output or failure."""
    return FakeAnalyzer


@pytest.fixture
def fake_packager():
    """Packager that succeeds without external tools."""
    return FakePackager()


@pytest.fixture
def failing_packager():
    """Packager that always fails."""
    return FakePackager(fail=True)


@pytest.fixture
def radarr_movie_payload():
    """A /api/v3/movie entry for a movie with a file."""
    return {
        "id": 1,
        "title": "Interstellar",
        "originalTitle": "Interstellar",
        "originalLanguage": {"id": 1, "name": "English"},
        "year": 2014,
        "hasFile": True,
        "monitored": True,
        "movieFile": {
            "id": 10,
            "movieId": 1,
            "path": "/movies/Interstellar (2014)/Interstellar.mkv",
            "relativePath": "Interstellar.mkv",
            "sceneName": "Interstellar.2014.MULTi.VFI.2160p.BluRay.x265-QTZ",
            "releaseGroup": "QTZ",
            "quality": {
                "quality": {"id": 19, "name": "Bluray-2160p", "source": "bluray", "resolution": 2160},
                "revision": {"version": 1},
            },
            "mediaInfo": {"audioLanguages": "French/English", "subtitles": "French"},
        },
    }
