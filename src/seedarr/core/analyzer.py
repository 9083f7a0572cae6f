"""Technical metadata extraction using mediainfo."""

import json
import subprocess
from pathlib import Path
from typing import Any, Optional

from seedarr.exceptions import AnalysisError
from seedarr.models.technical import AudioTrack, TechnicalMetadata
from seedarr.utils.language import normalize_language_code
from seedarr.utils.logger import get_logger

logger = get_logger(__name__)

MEDIAINFO_TIMEOUT = 120


def parse_int(value: Any) -> Optional[int]:
    """Read an integer from a mediainfo field.

    mediainfo reports numbers as strings, sometimes decorated
    ("3 840 pixels", "10 bits"). Only the digits are kept.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        head = value.split("/")[0]
        digits = "".join(c for c in head if c.isdigit())
        if digits:
            return int(digits)
    return None


def _text(track: dict, *keys: str) -> Optional[str]:
    for key in keys:
        value = track.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def parse_mediainfo_json(data: dict) -> TechnicalMetadata:
    """Convert mediainfo --Output=JSON data to TechnicalMetadata.

    Missing or malformed fields are left unset rather than failing.

    Args:
        data: Decoded mediainfo JSON document

    Returns:
        TechnicalMetadata instance
    """
    media = data.get("media") if isinstance(data, dict) else None
    tracks = media.get("track") if isinstance(media, dict) else None
    if not isinstance(tracks, list):
        raise AnalysisError("mediainfo output has no track list")

    info = TechnicalMetadata()
    seen_video = False

    for track in tracks:
        if not isinstance(track, dict):
            continue
        track_type = track.get("@type", "")

        if track_type == "General":
            info.container = _text(track, "Format")

        elif track_type == "Video" and not seen_video:
            seen_video = True
            info.video_codec = _text(track, "Format")
            info.video_profile = _text(track, "Format_Profile")
            info.width = parse_int(track.get("Width"))
            info.height = parse_int(track.get("Height"))
            info.bit_depth = parse_int(track.get("BitDepth"))

            hdr_format = (_text(track, "HDR_Format", "HDR_Format_Commercial") or "").lower()
            compat = (_text(track, "HDR_Format_Compatibility") or "").lower()
            if "dolby vision" in hdr_format:
                info.dv = True
            if (
                "hdr" in hdr_format
                or "smpte st 2086" in hdr_format
                or "smpte st 2094" in hdr_format
                or "hdr" in compat
            ):
                info.hdr = True
            transfer = (_text(track, "transfer_characteristics") or "").lower()
            if "pq" in transfer or "hlg" in transfer or "2084" in transfer:
                info.hdr = True

        elif track_type == "Audio":
            channels = parse_int(
                track.get("Channels")
                or track.get("Channel(s)")
                or track.get("Channels_Original")
                or track.get("Channel(s)_Original")
            )
            info.audio_tracks.append(
                AudioTrack(
                    language=normalize_language_code(_text(track, "Language", "Language/String")),
                    codec=_text(track, "Format"),
                    codec_commercial=_text(track, "Format_Commercial_IfAny", "Format_Commercial"),
                    channels=channels,
                    title=_text(track, "Title"),
                    is_default=str(track.get("Default", "")).lower() == "yes",
                )
            )

        elif track_type == "Text":
            language = normalize_language_code(_text(track, "Language", "Language/String"))
            if language and language not in info.subtitle_languages:
                info.subtitle_languages.append(language)

    return info


class MediaInfoAnalyzer:
    """Extract technical metadata from video files using mediainfo."""

    def __init__(self, binary: str = "mediainfo", timeout: int = MEDIAINFO_TIMEOUT):
        """Initialize analyzer.

        Args:
            binary: mediainfo executable name or path
            timeout: Per-invocation timeout in seconds
        """
        self.binary = binary
        self.timeout = timeout

    def _run(self, file_path: Path, output: str) -> str:
        if not file_path.exists():
            raise AnalysisError(f"File not found: {file_path}")

        cmd = [self.binary, f"--Output={output}", str(file_path)]
        logger.debug("Running mediainfo", file=str(file_path), output=output)

        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, check=True, timeout=self.timeout
            )
        except FileNotFoundError as e:
            logger.error("mediainfo not installed", binary=self.binary)
            raise AnalysisError(f"mediainfo executable not found: {self.binary}") from e
        except subprocess.TimeoutExpired as e:
            logger.error("mediainfo timeout", file=str(file_path), timeout=self.timeout)
            raise AnalysisError(f"mediainfo timed out after {self.timeout}s") from e
        except subprocess.CalledProcessError as e:
            logger.error(
                "mediainfo failed",
                file=str(file_path),
                returncode=e.returncode,
                stderr=e.stderr,
            )
            raise AnalysisError(f"mediainfo exited with status {e.returncode}") from e

        return result.stdout

    def analyze(self, file_path: Path) -> TechnicalMetadata:
        """Extract technical metadata from a video file.

        Args:
            file_path: Path to video file

        Returns:
            TechnicalMetadata instance

        Raises:
            AnalysisError: If mediainfo fails or its output is unusable
        """
        stdout = self._run(file_path, "JSON")
        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse mediainfo output", file=str(file_path), error=str(e))
            raise AnalysisError(f"Invalid mediainfo JSON: {e}") from e

        info = parse_mediainfo_json(data)

        logger.info(
            "Technical metadata collected",
            file=str(file_path),
            width=info.width,
            height=info.height,
            video_codec=info.video_codec,
            bit_depth=info.bit_depth,
            hdr=info.hdr,
            dv=info.dv,
            audio_languages=[t.language for t in info.audio_tracks],
            subtitle_languages=info.subtitle_languages,
        )
        return info

    def render_report(self, file_path: Path) -> str:
        """Render the human-readable mediainfo report used as .nfo.

        Raises:
            AnalysisError: If mediainfo fails
        """
        return self._run(file_path, "Text")
